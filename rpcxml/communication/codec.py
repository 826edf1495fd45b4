"""
Call Codec

This module shapes outbound method calls and interprets inbound method
responses. XML syntax is delegated to the schema codec; canonicalization of
decoded data is delegated to the rewrite passes.
"""

import logging
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..core.converters import fault_code
from ..core.errors import DecodeError, ValidationError
from ..core.rewrite import DEFAULT_PASSES, SlotPass, rewrite_envelope
from ..core.values import Value
from .rpc_protocol import (
    METHOD_CALL, METHOD_RESPONSE, MalformedResponseError, MethodCall, MethodResponse
)
from .schema import XmlRpcSchema


class CallCodec:
    """
    Builds request envelopes and turns response envelopes into results.
    """

    def __init__(self,
                 schema: Optional[XmlRpcSchema] = None,
                 xml_format: int = 0,
                 passes: Iterable[SlotPass] = DEFAULT_PASSES):
        """
        Initialize the codec.

        Args:
            schema: Schema codec for XML syntax (a default one is created)
            xml_format: 0 for compact output, 1 for indented output
            passes: Rewrite passes applied to every decoded envelope
        """
        self.schema = schema or XmlRpcSchema()
        self.xml_format = xml_format
        self.passes = tuple(passes)
        self.logger = logging.getLogger(__name__)

    def build_params(self, *args: Any) -> List[Value]:
        """
        Turn interleaved call arguments into parameter values.

        Each argument is either a prebuilt Value, used as it is, or a type
        tag followed by its raw payload:

            build_params("string", "IBM", struct_from_dict("int", {"max": 3}))

        Returns:
            Ordered list of Value

        Raises:
            ValidationError: If a type tag has no payload or is unknown
        """
        params = []
        index = 0

        while index < len(args):
            item = args[index]
            if isinstance(item, Value):
                params.append(item)
                index += 1
                continue

            if index + 1 >= len(args):
                raise ValidationError(f"parameter type '{item}' is missing its value")

            params.append(Value(item, args[index + 1]))
            index += 2

        return params

    def method_call(self, method: str, *args: Any) -> MethodCall:
        """Create a MethodCall from a method name and call arguments."""
        return MethodCall(method_name=method, params=tuple(self.build_params(*args)))

    def encode_call(self, method: str, *args: Any) -> bytes:
        """
        Produce the methodCall document for a call.

        Args:
            method: Remote procedure name
            *args: Interleaved type/value pairs or Value objects

        Returns:
            Encoded XML document
        """
        call = self.method_call(method, *args)
        body = self.schema.encode(METHOD_CALL, call.to_dict(), pretty=bool(self.xml_format))
        self.logger.debug(f"Encoded call to {method} with {len(call.params)} params ({len(body)} bytes)")
        return body

    def encode_response(self, response: MethodResponse) -> bytes:
        """Produce the methodResponse document for a response."""
        return self.schema.encode(METHOD_RESPONSE, response.to_dict(), pretty=bool(self.xml_format))

    def decode_call(self, body: Union[bytes, str]) -> MethodCall:
        """Read a methodCall document back into a MethodCall."""
        data = rewrite_envelope(self.schema.decode(METHOD_CALL, body), self.passes)
        return MethodCall.from_dict(data)

    def parse_response(self, body: Union[bytes, str, None]) -> MethodResponse:
        """
        Read a methodResponse document.

        Args:
            body: Raw response body

        Returns:
            MethodResponse holding either a value or a fault

        Raises:
            MalformedResponseError: If the body is empty or is not a
                methodResponse with exactly one param or one fault
        """
        if body is None or not body.strip():
            raise MalformedResponseError("empty response body")

        try:
            data = self.schema.decode(METHOD_RESPONSE, body)
            return MethodResponse.from_dict(rewrite_envelope(data, self.passes))
        except (DecodeError, ValidationError) as e:
            raise MalformedResponseError(f"invalid method response: {e}") from e

    def interpret(self, response: MethodResponse) -> Tuple[int, Any]:
        """
        Reduce a response to a status code and a payload.

        Returns:
            (fault_code, fault_string) for a fault, (0, payload) otherwise
        """
        if response.is_fault:
            return fault_code(response.fault)
        return 0, response.value.payload

    def decode_response(self, body: Union[bytes, str, None]) -> Tuple[int, Any]:
        """Parse and interpret a response body in one step."""
        return self.interpret(self.parse_response(body))
