"""
Test suite for the XML-RPC value model and converters

Tests value construction, date normalization, wire-shape conversion and the
struct/array/fault helpers.
"""

import copy
import dataclasses
import unittest
from datetime import date, datetime

from rpcxml.core import (
    Value, Member, ValidationError,
    normalize_datetime, format_datetime, value_to_wire, wire_to_value,
    struct_to_dict, struct_to_rows, struct_from_rows, struct_from_dict,
    array_values, array_from, fault_code, fault_from, to_python
)


class TestDateNormalization(unittest.TestCase):
    """Test dateTime.iso8601 normalization."""

    def test_compact_timestamp(self):
        """Missing separators are inserted."""
        self.assertEqual(normalize_datetime("20030401T120000"), "2003-04-01T12:00:00")

    def test_canonical_timestamp_unchanged(self):
        """An already canonical timestamp is returned as is."""
        self.assertEqual(normalize_datetime("2003-04-01T12:00:00"), "2003-04-01T12:00:00")

    def test_partially_punctuated(self):
        """Date and time parts are normalized independently."""
        self.assertEqual(normalize_datetime("2003-04-01T120000"), "2003-04-01T12:00:00")
        self.assertEqual(normalize_datetime("20030401T12:00:00"), "2003-04-01T12:00:00")

    def test_non_timestamp_passes_through(self):
        """Text which does not look like a timestamp is left alone."""
        self.assertEqual(normalize_datetime("yesterday"), "yesterday")
        self.assertEqual(normalize_datetime("30030401T120000"), "30030401T12:00:00")

    def test_format_datetime_objects(self):
        """datetime, date and epoch seconds are formatted canonically."""
        self.assertEqual(format_datetime(datetime(2003, 4, 1, 12, 0, 0)), "2003-04-01T12:00:00")
        self.assertEqual(format_datetime(date(2003, 4, 1)), "2003-04-01T00:00:00")
        self.assertEqual(format_datetime(0), "1970-01-01T00:00:00")
        self.assertEqual(format_datetime(" 20030401T120000 "), "2003-04-01T12:00:00")

    def test_format_datetime_rejects_other_types(self):
        """Unsupported timestamp types raise ValidationError."""
        with self.assertRaises(ValidationError):
            format_datetime([2003, 4, 1])
        with self.assertRaises(ValidationError):
            format_datetime(True)


class TestValue(unittest.TestCase):
    """Test Value construction."""

    def test_scalar_value(self):
        """A scalar value keeps its tag and payload."""
        value = Value("string", "IBM")

        self.assertEqual(value.type, "string")
        self.assertEqual(value.payload, "IBM")
        self.assertFalse(value.is_compound)

    def test_unknown_type(self):
        """Unknown type tags are rejected."""
        with self.assertRaises(ValidationError):
            Value("float", 1.5)

    def test_struct_requires_members(self):
        """A struct payload must be a member sequence, not a dict."""
        with self.assertRaises(ValidationError):
            Value("struct", {"limit": 2})

        with self.assertRaises(ValidationError) as ctx:
            Value("struct", [Value("int", 1)])
        self.assertEqual(len(ctx.exception.errors), 1)

    def test_array_requires_values(self):
        """An array payload must be a value sequence."""
        with self.assertRaises(ValidationError) as ctx:
            Value("array", [1, 2])
        self.assertEqual(len(ctx.exception.errors), 2)

        with self.assertRaises(ValidationError):
            Value("array", "12")

    def test_compound_payload_is_frozen(self):
        """Compound payloads are stored as tuples and values are immutable."""
        value = Value("array", [Value("int", 1)])

        self.assertIsInstance(value.payload, tuple)
        self.assertTrue(value.is_compound)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            value.payload = ()

    def test_nil_has_no_payload(self):
        """nil values cannot carry a payload."""
        self.assertIsNone(Value("nil").payload)
        with self.assertRaises(ValidationError):
            Value("nil", "nothing")

    def test_member_validation(self):
        """Members need a string name and a Value."""
        with self.assertRaises(ValidationError):
            Member(42, Value("int", 1))
        with self.assertRaises(ValidationError):
            Member("limit", 1)


class TestWireConversion(unittest.TestCase):
    """Test conversion between Value and the wire shape."""

    SCALARS = [
        {"string": "IBM"},
        {"int": 5},
        {"i4": -3},
        {"double": 2.25},
        {"boolean": True},
        {"dateTime.iso8601": "2003-04-01T12:00:00"},
        {"base64": b"\x00\x01binary"},
        {"nil": None},
    ]

    def test_scalar_round_trip(self):
        """Every scalar type survives wire -> Value -> wire."""
        for slot in self.SCALARS:
            with self.subTest(slot=slot):
                self.assertEqual(value_to_wire(wire_to_value(slot)), slot)

    def test_nested_round_trip(self):
        """Structs and arrays nest to any depth."""
        slot = {"struct": {"member": [
            {"name": "symbol", "value": {"string": "RHAT"}},
            {"name": "history", "value": {"array": {"data": {"value": [
                {"double": 1.5},
                {"struct": {"member": [{"name": "day", "value": {"i4": 1}}]}},
                {"array": {"data": {"value": []}}},
            ]}}}},
        ]}}

        value = wire_to_value(slot)

        self.assertEqual(value.type, "struct")
        self.assertEqual(value.payload[1].value.payload[1].payload[0].value, Value("i4", 1))
        self.assertEqual(value_to_wire(value), slot)
        self.assertEqual(Value.from_wire(slot).to_wire(), slot)

    def test_i4_tag_preserved(self):
        """i4 is not rewritten to int."""
        self.assertEqual(wire_to_value({"i4": 3}).type, "i4")
        self.assertEqual(wire_to_value({"int": 3}).type, "int")

    def test_bare_text_is_string(self):
        """Untyped text reads as a string value."""
        self.assertEqual(wire_to_value("Hello, World!"), Value("string", "Hello, World!"))

    def test_single_member_struct(self):
        """A lone member given as a dict is accepted."""
        value = wire_to_value({"struct": {"member": {"name": "a", "value": {"int": 1}}}})
        self.assertEqual(struct_to_dict(value), {"a": 1})

    def test_multiple_types_rejected(self):
        """A slot must carry exactly one type."""
        with self.assertRaises(ValidationError):
            wire_to_value({"int": 1, "string": "1"})
        with self.assertRaises(ValidationError):
            wire_to_value({})


class TestConverters(unittest.TestCase):
    """Test the struct, array and fault helpers."""

    def test_struct_from_dict_round_trip(self):
        """struct_from_dict then struct_to_dict gives the mapping back."""
        mapping = {"end": 5, "begin": 3, "step": 1}
        struct = struct_from_dict("int", mapping)

        self.assertEqual(struct_to_dict(struct), mapping)
        self.assertEqual([member.name for member in struct.payload], ["begin", "end", "step"])
        self.assertTrue(all(member.value.type == "int" for member in struct.payload))

    def test_struct_from_dict_empty(self):
        """A missing mapping produces an empty struct."""
        self.assertEqual(struct_from_dict("string", None), Value("struct", []))

    def test_rows_round_trip(self):
        """struct_to_rows and struct_from_rows keep order, types and duplicates."""
        rows = [
            ("symbol", "string", "RHAT"),
            ("limit", "double", 2.25),
            ("symbol", "string", "IBM"),
        ]

        self.assertEqual(struct_to_rows(struct_from_rows(rows)), rows)

    def test_struct_to_dict_last_wins(self):
        """Duplicate member names collapse to the last one."""
        struct = struct_from_rows([("a", "int", 1), ("a", "int", 2)])

        self.assertEqual(struct_to_dict(struct), {"a": 2})
        self.assertEqual(len(struct_to_rows(struct)), 2)

    def test_struct_helpers_accept_payload(self):
        """The member tuple returned by a call works as well as the Value."""
        struct = struct_from_rows([("limit", "double", 2.25)])

        self.assertEqual(struct_to_dict(struct.payload), {"limit": 2.25})
        self.assertEqual(struct_to_dict(None), {})

    def test_struct_helpers_reject_arrays(self):
        """Passing an array where a struct is expected is an error."""
        with self.assertRaises(ValidationError):
            struct_to_dict(array_from("int", [1]))

    def test_array_helpers(self):
        """array_from tags every element and array_values strips the tags."""
        array = array_from("int", [3, 1, 2])

        self.assertEqual([item.type for item in array.payload], ["int", "int", "int"])
        self.assertEqual(array_values(array), [3, 1, 2])
        self.assertEqual(array_values(array.payload), [3, 1, 2])
        with self.assertRaises(ValidationError):
            array_values(struct_from_dict("int", {}))

    def test_fault_code(self):
        """Fault codes are extracted and zero becomes -1."""
        self.assertEqual(fault_code(fault_from(42, "no answer")), (42, "no answer"))
        self.assertEqual(fault_code(fault_from(0, "oops")), (-1, "oops"))

    def test_fault_code_missing_fields(self):
        """A fault without a code is an error, and the message may be absent."""
        self.assertEqual(fault_code(struct_from_rows([("faultString", "string", "oops")])), (-1, "oops"))
        self.assertEqual(fault_code(struct_from_rows([])), (-1, None))

    def test_fault_code_from_text(self):
        """Codes sent as text are converted, and a textual zero is still -1."""
        self.assertEqual(fault_code(struct_from_rows([("faultCode", "string", "7")])), (7, None))
        self.assertEqual(fault_code(struct_from_rows([("faultCode", "string", "0")])), (-1, None))
        self.assertEqual(fault_code(struct_from_rows([("faultCode", "string", "n/a")])), (-1, None))

    def test_fault_from(self):
        """fault_from types the code as int and the message as string."""
        self.assertEqual(
            struct_to_rows(fault_from(7, "bad symbol")),
            [("faultCode", "int", 7), ("faultString", "string", "bad symbol")]
        )

    def test_converters_do_not_mutate(self):
        """Converters leave their input untouched."""
        mapping = {"b": "2", "a": "1"}
        original = copy.deepcopy(mapping)
        struct_from_dict("string", mapping)

        self.assertEqual(mapping, original)

    def test_to_python(self):
        """Nested values unwrap into dicts and lists."""
        value = struct_from_rows([
            ("name", "string", "x"),
            ("scores", "array", [Value("int", 1), Value("int", 2)]),
        ])

        self.assertEqual(to_python(value), {"name": "x", "scores": [1, 2]})


if __name__ == '__main__':
    unittest.main()
