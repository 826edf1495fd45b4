"""
Communication Module

This module provides XML-RPC communication capabilities: protocol messages,
the schema codec, the call codec, the HTTP transport and the client.
"""

from .rpc_protocol import (
    METHOD_CALL,
    METHOD_RESPONSE,
    CallOutcome,
    MethodCall,
    MethodResponse,
    CallTrace,
    CallResult,
    RPCError,
    ValidationError,
    DecodeError,
    ConfigurationError,
    MalformedResponseError
)

from .schema import (
    XmlRpcSchema
)

from .codec import (
    CallCodec
)

from .transport import (
    HttpRequest,
    HttpResponse,
    HttpTransport
)

from .rpc_client import (
    XMLRPCClient,
    RemoteMethod,
    MethodProxy,
    print_trace
)

__all__ = [
    # Protocol classes
    "METHOD_CALL",
    "METHOD_RESPONSE",
    "CallOutcome",
    "MethodCall",
    "MethodResponse",
    "CallTrace",
    "CallResult",
    
    # Exception classes
    "RPCError",
    "ValidationError",
    "DecodeError",
    "ConfigurationError",
    "MalformedResponseError",
    
    # Codec classes
    "XmlRpcSchema",
    "CallCodec",
    
    # Transport classes
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    
    # Client classes
    "XMLRPCClient",
    "RemoteMethod",
    "MethodProxy",
    
    # Utility functions
    "print_trace"
]
