"""
XML-RPC convenience converters

Struct, array and fault helpers that translate between the wire-faithful
Value model and ordinary Python dicts and lists.

Every "struct" argument may be a struct Value or its member sequence (the
payload a call returns); every "array" argument may be an array Value or its
element sequence.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import ValidationError
from .values import ARRAY, INT, STRING, STRUCT, Member, Value


StructLike = Union[Value, Sequence[Member], None]
ArrayLike = Union[Value, Sequence[Value], None]
Row = Tuple[str, str, Any]


def _members(struct: StructLike) -> Sequence[Member]:
    if struct is None:
        return ()
    if isinstance(struct, Value):
        if struct.type != STRUCT:
            raise ValidationError(f"expected a struct, got {struct.type}")
        return struct.payload
    return struct


def _elements(array: ArrayLike) -> Sequence[Value]:
    if array is None:
        return ()
    if isinstance(array, Value):
        if array.type != ARRAY:
            raise ValidationError(f"expected an array, got {array.type}")
        return array.payload
    return array


def struct_to_dict(struct: StructLike) -> Dict[str, Any]:
    """
    Collapse a struct into a dict of payloads.

    Member order and value types are lost. When a name appears more than
    once, the last member wins.

    Args:
        struct: Struct Value or member sequence

    Returns:
        Dictionary of member name to payload
    """
    result = {}
    for member in _members(struct):
        result[member.name] = member.value.payload
    return result


def struct_to_rows(struct: StructLike) -> List[Row]:
    """
    List every member as a (name, type, payload) row, in wire order.

    Args:
        struct: Struct Value or member sequence

    Returns:
        List of rows; duplicates are kept
    """
    return [(member.name, member.value.type, member.value.payload) for member in _members(struct)]


def struct_from_rows(rows: Iterable[Row]) -> Value:
    """
    Build a struct from (name, type, payload) rows, keeping their order.

    Example:
        struct_from_rows([("symbol", "string", "RHAT"), ("limit", "double", 2.25)])
    """
    return Value(STRUCT, [Member(name, Value(value_type, payload)) for name, value_type, payload in rows])


def struct_from_dict(value_type: str, mapping: Optional[Mapping[str, Any]]) -> Value:
    """
    Build a struct where every member shares one type.

    Members are emitted in ascending key order so equal mappings always
    produce identical wire output.

    Args:
        value_type: Type tag for every member, usually "string"
        mapping: Member name to payload

    Returns:
        Struct Value
    """
    mapping = mapping or {}
    return Value(STRUCT, [Member(name, Value(value_type, mapping[name])) for name in sorted(mapping)])


def array_values(array: ArrayLike) -> List[Any]:
    """Strip the type information from an array, keeping element order."""
    return [item.payload for item in _elements(array)]


def array_from(value_type: str, values: Iterable[Any]) -> Value:
    """Build an array whose elements all carry value_type."""
    return Value(ARRAY, [Value(value_type, item) for item in values])


def fault_code(fault: StructLike) -> Tuple[int, Optional[str]]:
    """
    Extract the code and message of a fault struct.

    The code is read as an integer even when the server sent it as text.
    A missing, zero or non-numeric faultCode is reported as -1: servers
    which forget the code must never look like success.

    Args:
        fault: Fault struct Value or member sequence

    Returns:
        Tuple of (fault_code, fault_string)
    """
    fields = struct_to_dict(fault)
    try:
        code = int(fields.get("faultCode"))
    except (TypeError, ValueError):
        code = 0
    if code == 0:
        code = -1
    return code, fields.get("faultString")


def fault_from(code: int, message: str) -> Value:
    """
    Construct a fault struct.

    Example:
        fault_from(42, "no answer")
    """
    return struct_from_rows([
        ("faultCode", INT, code),
        ("faultString", STRING, message),
    ])


def to_python(value: Value) -> Any:
    """
    Recursively unwrap a Value into plain Python data.

    Structs become dicts (last duplicate wins), arrays become lists and
    scalars become their payloads.
    """
    if value.type == STRUCT:
        return {member.name: to_python(member.value) for member in value.payload}
    if value.type == ARRAY:
        return [to_python(item) for item in value.payload]
    return value.payload
