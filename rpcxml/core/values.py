"""
XML-RPC Value Model

This module defines the tagged-union representation of every XML-RPC value,
the date normalization rules for dateTime.iso8601 payloads, and the conversion
between Value objects and the wire-shaped dictionaries exchanged with the
schema codec.

Wire shape of a value slot:
    {"string": "IBM"}
    {"struct": {"member": [{"name": "limit", "value": {"double": 2.25}}]}}
    {"array": {"data": {"value": [{"int": 1}, {"int": 2}]}}}
    "Hello, World!"             (untyped bare text, read as a string)
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Union

from .errors import ValidationError


STRING = "string"
INT = "int"
I4 = "i4"
DOUBLE = "double"
BOOLEAN = "boolean"
DATETIME = "dateTime.iso8601"
BASE64 = "base64"
NIL = "nil"
STRUCT = "struct"
ARRAY = "array"

SCALAR_TYPES = (STRING, INT, I4, DOUBLE, BOOLEAN, DATETIME, BASE64, NIL)
COMPOUND_TYPES = (STRUCT, ARRAY)
VALUE_TYPES = SCALAR_TYPES + COMPOUND_TYPES
INTEGER_TYPES = (INT, I4)

CANONICAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

_DATE_PART = re.compile(r"^([12][0-9][0-9][0-9])-?([01][0-9])-?([0-3][0-9])T")
_TIME_PART = re.compile(r"T([012][0-9]):?([0-5][0-9]):?([0-6][0-9])")

WireValue = Union[str, Dict[str, Any]]


@dataclass(frozen=True)
class Member:
    """One named entry of a struct."""
    name: str
    value: "Value"

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise ValidationError(f"struct member name must be a string, got {type(self.name).__name__}")
        if not isinstance(self.value, Value):
            raise ValidationError(f"struct member '{self.name}' must hold a Value")


@dataclass(frozen=True)
class Value:
    """
    A single XML-RPC value: exactly one type tag and one payload.

    Attributes:
        type: One of VALUE_TYPES
        payload: Scalar payload, a tuple of Member (struct) or a tuple of
            Value (array)
    """
    type: str
    payload: Any = None

    def __post_init__(self):
        if self.type not in VALUE_TYPES:
            raise ValidationError(f"unknown XML-RPC value type '{self.type}'")

        if self.type == STRUCT:
            object.__setattr__(self, "payload", _as_tuple(self.payload, Member, STRUCT))
        elif self.type == ARRAY:
            object.__setattr__(self, "payload", _as_tuple(self.payload, Value, ARRAY))
        elif self.type == NIL and self.payload is not None:
            raise ValidationError("nil value cannot carry a payload")

    @property
    def is_compound(self) -> bool:
        return self.type in COMPOUND_TYPES

    def to_wire(self) -> Dict[str, Any]:
        """Convert to the wire-shaped dictionary."""
        return value_to_wire(self)

    @classmethod
    def from_wire(cls, slot: WireValue) -> "Value":
        """Create a Value from a wire-shaped slot."""
        return wire_to_value(slot)


def _as_tuple(payload: Any, item_type: type, kind: str) -> tuple:
    if isinstance(payload, (str, bytes, dict)) or not isinstance(payload, Iterable):
        raise ValidationError(
            f"{kind} payload must be a sequence of {item_type.__name__}, got {type(payload).__name__}"
        )

    items = tuple(payload)
    errors = [
        f"{kind} item {index} is a {type(item).__name__}, expected {item_type.__name__}"
        for index, item in enumerate(items)
        if not isinstance(item, item_type)
    ]
    if errors:
        raise ValidationError(f"invalid {kind} payload", errors)
    return items


def normalize_datetime(text: str) -> str:
    """
    Insert the separators strict dateTime validation requires.

    Both "20030401T120000" and "2003-04-01T12:00:00" become
    "2003-04-01T12:00:00". Text that does not look like a timestamp is
    returned unchanged.

    Args:
        text: Timestamp string, with or without punctuation

    Returns:
        Timestamp in canonical YYYY-MM-DDTHH:MM:SS form
    """
    text = _DATE_PART.sub(r"\1-\2-\3T", text, count=1)
    return _TIME_PART.sub(r"T\1:\2:\3", text, count=1)


def format_datetime(when: Any) -> str:
    """
    Produce the canonical dateTime.iso8601 text for a timestamp.

    Args:
        when: Timestamp string, datetime, date, or seconds since the epoch

    Returns:
        Canonical timestamp string

    Raises:
        ValidationError: If the input cannot be read as a timestamp
    """
    if isinstance(when, str):
        return normalize_datetime(when.strip())
    if isinstance(when, datetime):
        return when.strftime(CANONICAL_DATETIME_FORMAT)
    if isinstance(when, date):
        return datetime(when.year, when.month, when.day).strftime(CANONICAL_DATETIME_FORMAT)
    if isinstance(when, (int, float)) and not isinstance(when, bool):
        return datetime.fromtimestamp(when, tz=timezone.utc).strftime(CANONICAL_DATETIME_FORMAT)
    raise ValidationError(f"cannot format {type(when).__name__} as {DATETIME}")


def value_to_wire(value: Value) -> Dict[str, Any]:
    """
    Convert a Value into its wire-shaped dictionary.

    Args:
        value: Value to convert

    Returns:
        Single-key dictionary {type: payload}
    """
    if value.type == STRUCT:
        members = [
            {"name": member.name, "value": value_to_wire(member.value)}
            for member in value.payload
        ]
        return {STRUCT: {"member": members}}

    if value.type == ARRAY:
        return {ARRAY: {"data": {"value": [value_to_wire(item) for item in value.payload]}}}

    return {value.type: value.payload}


def wire_to_value(slot: WireValue) -> Value:
    """
    Convert a wire-shaped slot into a Value.

    Args:
        slot: Single-key dictionary, or bare text

    Returns:
        Value instance

    Raises:
        ValidationError: If the slot is not exactly one typed value
    """
    if isinstance(slot, str):
        return Value(STRING, slot)

    if not isinstance(slot, dict) or len(slot) != 1:
        raise ValidationError("a value must carry exactly one type")

    (value_type, payload), = slot.items()

    if value_type == STRUCT:
        members = _listify((payload or {}).get("member"))
        return Value(STRUCT, [
            Member(member["name"], wire_to_value(member["value"]))
            for member in members
        ])

    if value_type == ARRAY:
        data = (payload or {}).get("data") or {}
        return Value(ARRAY, [wire_to_value(item) for item in _listify(data.get("value"))])

    return Value(value_type, payload)


def _listify(items: Any) -> list:
    if items is None:
        return []
    if isinstance(items, list):
        return items
    return [items]
