"""
XML-RPC Protocol and Message Definitions

This module defines the method call and method response messages exchanged
with an XML-RPC server, the per-call trace, and the exceptions raised by the
client.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

from ..core.errors import RPCError, ValidationError, DecodeError
from ..core.values import Value, value_to_wire, wire_to_value


METHOD_CALL = "methodCall"
METHOD_RESPONSE = "methodResponse"
ENVELOPE_KINDS = (METHOD_CALL, METHOD_RESPONSE)


class CallOutcome(Enum):
    """How a call ended."""
    SUCCESS = "success"
    FAULT = "fault"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class MethodCall:
    """
    An outbound XML-RPC method call.
    """
    method_name: str
    params: tuple = ()

    def __post_init__(self):
        """Validate the method name and freeze the parameter list."""
        if not isinstance(self.method_name, str) or not self.method_name:
            raise ValidationError("methodName is required")

        params = tuple(self.params)
        errors = [
            f"param {index} is a {type(param).__name__}, expected Value"
            for index, param in enumerate(params)
            if not isinstance(param, Value)
        ]
        if errors:
            raise ValidationError("invalid method call parameters", errors)
        object.__setattr__(self, "params", params)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire-shaped dictionary understood by the schema codec."""
        return {
            "methodName": self.method_name,
            "params": {"param": [{"value": value_to_wire(param)} for param in self.params]}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MethodCall':
        """Create MethodCall from decoded envelope data."""
        params = (data.get("params") or {}).get("param") or []
        if isinstance(params, dict):
            params = [params]
        return cls(
            method_name=data.get("methodName"),
            params=tuple(wire_to_value(param.get("value")) for param in params)
        )


@dataclass(frozen=True)
class MethodResponse:
    """
    An inbound XML-RPC method response: exactly one value or one fault.
    """
    value: Optional[Value] = None
    fault: Optional[Value] = None

    def __post_init__(self):
        """Enforce the one-value-or-one-fault rule."""
        if (self.value is None) == (self.fault is None):
            raise ValidationError("a method response holds exactly one value or one fault")
        if self.fault is not None and self.fault.type != "struct":
            raise ValidationError(f"fault must be a struct, got {self.fault.type}")

    @property
    def is_fault(self) -> bool:
        return self.fault is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire-shaped dictionary understood by the schema codec."""
        if self.is_fault:
            return {"fault": {"value": value_to_wire(self.fault)}}
        return {"params": {"param": {"value": value_to_wire(self.value)}}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MethodResponse':
        """
        Create MethodResponse from decoded envelope data.

        Args:
            data: Envelope data with either a "fault" or a "params" entry

        Returns:
            MethodResponse instance

        Raises:
            ValidationError: If the data holds neither or both, or a
                params list without exactly one param
        """
        if "fault" in data and "params" in data:
            raise ValidationError("method response holds both params and a fault")

        if "fault" in data:
            return cls(fault=wire_to_value((data["fault"] or {}).get("value")))

        param = (data.get("params") or {}).get("param")
        if isinstance(param, list):
            if len(param) != 1:
                raise ValidationError(f"method response must hold exactly one param, got {len(param)}")
            param = param[0]
        if not param:
            raise ValidationError("method response holds neither a param nor a fault")
        return cls(value=wire_to_value(param.get("value")))

    @classmethod
    def create_success_response(cls, value: Value) -> 'MethodResponse':
        """Create a successful response."""
        return cls(value=value)

    @classmethod
    def create_fault_response(cls, fault: Value) -> 'MethodResponse':
        """Create a fault response from a fault struct."""
        return cls(fault=fault)


@dataclass
class CallTrace:
    """
    Facts about one call: timings, the request sent and the response received.

    Attributes:
        start_time: Epoch seconds when the call started
        request: HttpRequest handed to the transport
        response: HttpResponse returned by the transport
        format_elapsed: Seconds spent building the envelope
        network_elapsed: Seconds spent in the transport
        decode_elapsed: Seconds spent decoding, None when no decode happened
        total_elapsed: Seconds from start to completion
        outcome: How the call ended
        value_type: Type tag of the returned value, None unless the call succeeded
    """
    start_time: float
    request: Any = None
    response: Any = None
    format_elapsed: float = 0.0
    network_elapsed: float = 0.0
    decode_elapsed: Optional[float] = None
    total_elapsed: float = 0.0
    outcome: Optional[CallOutcome] = None
    value_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the timing facts to a dictionary for debugging."""
        return {
            "start_time": self.start_time,
            "format_elapsed": self.format_elapsed,
            "network_elapsed": self.network_elapsed,
            "decode_elapsed": self.decode_elapsed,
            "total_elapsed": self.total_elapsed,
            "outcome": self.outcome.value if self.outcome else None,
            "value_type": self.value_type,
            "status": self.response.status_message if self.response is not None else None
        }


class CallResult(NamedTuple):
    """
    Result of XMLRPCClient.call.

    status is 0 on success, the fault code on a fault, or the HTTP status
    code on a transport failure. value is the decoded payload, the fault
    string, or the HTTP status line respectively.
    """
    status: int
    value: Any
    trace: CallTrace

    @property
    def is_success(self) -> bool:
        return self.status == 0


class ConfigurationError(RPCError):
    """Exception raised when the client is missing required settings."""
    pass


class MalformedResponseError(DecodeError):
    """Exception raised when a response is empty or not a valid method response."""

    def __init__(self, message: str, trace: Optional[CallTrace] = None):
        super().__init__(message)
        self.trace = trace

