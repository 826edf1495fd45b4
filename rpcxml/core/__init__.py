"""
Core module for the XML-RPC client

This module provides the value model every call is expressed in, the
rewrite passes applied to decoded data, and the struct/array/fault helpers.
"""

from .errors import (
    RPCError,
    ValidationError,
    DecodeError
)

from .values import (
    Value,
    Member,
    VALUE_TYPES,
    SCALAR_TYPES,
    STRING,
    INT,
    I4,
    DOUBLE,
    BOOLEAN,
    DATETIME,
    BASE64,
    NIL,
    STRUCT,
    ARRAY,
    normalize_datetime,
    format_datetime,
    value_to_wire,
    wire_to_value
)

from .rewrite import (
    rewrite_bare_string,
    rewrite_date,
    rewrite_envelope,
    map_value_slots,
    apply_passes,
    DEFAULT_PASSES
)

from .converters import (
    struct_to_dict,
    struct_to_rows,
    struct_from_rows,
    struct_from_dict,
    array_values,
    array_from,
    fault_code,
    fault_from,
    to_python
)

__all__ = [
    'RPCError',
    'ValidationError',
    'DecodeError',
    'Value',
    'Member',
    'VALUE_TYPES',
    'SCALAR_TYPES',
    'STRING',
    'INT',
    'I4',
    'DOUBLE',
    'BOOLEAN',
    'DATETIME',
    'BASE64',
    'NIL',
    'STRUCT',
    'ARRAY',
    'normalize_datetime',
    'format_datetime',
    'value_to_wire',
    'wire_to_value',
    'rewrite_bare_string',
    'rewrite_date',
    'rewrite_envelope',
    'map_value_slots',
    'apply_passes',
    'DEFAULT_PASSES',
    'struct_to_dict',
    'struct_to_rows',
    'struct_from_rows',
    'struct_from_dict',
    'array_values',
    'array_from',
    'fault_code',
    'fault_from',
    'to_python'
]
