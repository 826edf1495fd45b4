"""
rpcxml - XML-RPC client

Encodes procedure calls into XML-RPC documents, posts them over HTTP and
decodes the responses or faults into a typed value model.
"""

from .core import (
    Value,
    Member,
    struct_to_dict,
    struct_to_rows,
    struct_from_rows,
    struct_from_dict,
    array_values,
    array_from,
    fault_code,
    fault_from
)

from .communication import (
    XMLRPCClient,
    CallResult,
    CallTrace,
    RPCError,
    ConfigurationError,
    MalformedResponseError,
    print_trace
)

__version__ = "0.21"

__all__ = [
    'Value',
    'Member',
    'struct_to_dict',
    'struct_to_rows',
    'struct_from_rows',
    'struct_from_dict',
    'array_values',
    'array_from',
    'fault_code',
    'fault_from',
    'XMLRPCClient',
    'CallResult',
    'CallTrace',
    'RPCError',
    'ConfigurationError',
    'MalformedResponseError',
    'print_trace'
]
