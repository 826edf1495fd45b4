"""
XML-RPC Client

This module provides the client which performs XML-RPC calls: it encodes the
call, posts it through the transport, decodes the answer, and returns the
outcome together with a trace of the call.
"""

import logging
import sys
import time
from typing import Any, Dict, Iterable, Optional, TextIO, Tuple, Union

from ..config import config, get_default_destination, get_rpc_timeout
from .codec import CallCodec
from .rpc_protocol import (
    CallOutcome, CallResult, CallTrace, ConfigurationError, MalformedResponseError
)
from .schema import XmlRpcSchema
from .transport import HttpRequest, HttpTransport


HeaderSpec = Union[Dict[str, str], Iterable[Tuple[str, str]], None]


class XMLRPCClient:
    """
    Client for calling procedures on one XML-RPC endpoint.

    Example:
        client = XMLRPCClient("http://example.com/RPC2", underscore_replacement="-")
        rc, answer, trace = client.call("getQuote", "string", "IBM")
        if rc != 0:
            raise SystemExit(f"error: {answer}")
    """

    def __init__(self,
                 destination: Optional[str] = None,
                 transport: Any = None,
                 xml_format: Optional[int] = None,
                 http_header: HeaderSpec = None,
                 underscore_replacement: Optional[str] = None,
                 timeout_seconds: Optional[float] = None,
                 schema: Optional[XmlRpcSchema] = None):
        """
        Initialize the client.

        Args:
            destination: URL of the XML-RPC server
            transport: Object with post(destination, headers, body); an
                HttpTransport is created when omitted
            xml_format: 0 for compact documents, 1 for indented ones
            http_header: Extra request headers, as a dict or (name, value) pairs
            underscore_replacement: Replacement for every "_" in method names
                reached through method() or the proxy
            timeout_seconds: Timeout for the default transport
            schema: Schema codec (a default one is created)

        Raises:
            ConfigurationError: If no destination is given or configured
        """
        settings = config.client
        self.logger = logging.getLogger(__name__)

        self.destination = destination or get_default_destination()
        if not self.destination:
            raise ConfigurationError("client requires a destination parameter")

        if underscore_replacement is None:
            underscore_replacement = settings.underscore_replacement
        self.underscore_replacement = underscore_replacement

        if xml_format is None:
            xml_format = settings.xml_format
        self.codec = CallCodec(schema=schema, xml_format=xml_format)

        self.transport = transport or HttpTransport(
            timeout_seconds=timeout_seconds or get_rpc_timeout(),
            user_agent=settings.user_agent
        )
        self.headers = self._build_headers(http_header, settings.content_type)

    @staticmethod
    def _build_headers(http_header: HeaderSpec, content_type: str) -> Dict[str, str]:
        """Copy the header template and make sure a Content-Type is present."""
        if http_header is None:
            headers = {}
        elif isinstance(http_header, dict):
            headers = dict(http_header)
        else:
            headers = {name: value for name, value in http_header}

        if not any(name.lower() == "content-type" for name in headers):
            headers["Content-Type"] = content_type or "text/xml"
        return headers

    def call(self, method: str, *params: Any) -> CallResult:
        """
        Call a remote procedure.

        Args:
            method: Remote procedure name
            *params: Interleaved type/value pairs or prebuilt Value objects,
                for instance call("getQuote", "string", "IBM")

        Returns:
            CallResult (status, value, trace): (0, payload) on success,
            (fault_code, fault_string) on a fault, (http_status, status_line)
            when the transport did not succeed

        Raises:
            ValidationError: If the parameters cannot be encoded
            MalformedResponseError: If the server answered with an empty or
                invalid document; the exception carries the trace
        """
        start = time.time()
        trace = CallTrace(start_time=start)

        body = self.codec.encode_call(method, *params)
        request = HttpRequest(destination=self.destination, headers=dict(self.headers), body=body)
        trace.request = request
        formatted = time.time()
        trace.format_elapsed = formatted - start

        self.logger.debug(f"Calling {method} at {self.destination}")
        response = self.transport.post(request.destination, request.headers, request.body)
        received = time.time()
        trace.response = response
        trace.network_elapsed = received - formatted

        if not response.is_success:
            trace.outcome = CallOutcome.TRANSPORT_FAILURE
            trace.total_elapsed = received - start
            self.logger.warning(f"Call to {method} failed: {response.status_message}")
            return CallResult(response.status_code, response.status_message, trace)

        try:
            parsed = self.codec.parse_response(response.body)
        except MalformedResponseError as e:
            self._finish(trace, start, received, CallOutcome.MALFORMED_RESPONSE)
            e.trace = trace
            self.logger.error(f"Call to {method} returned a malformed response: {e}")
            raise

        status, decoded = self.codec.interpret(parsed)
        if status == 0:
            trace.value_type = parsed.value.type
            self._finish(trace, start, received, CallOutcome.SUCCESS)
            self.logger.info(f"Call to {method} completed in {trace.total_elapsed:.3f}s")
        else:
            self._finish(trace, start, received, CallOutcome.FAULT)
            self.logger.warning(f"Call to {method} faulted: {status} {decoded}")

        return CallResult(status, decoded, trace)

    @staticmethod
    def _finish(trace: CallTrace, start: float, received: float, outcome: CallOutcome):
        finished = time.time()
        trace.decode_elapsed = finished - received
        trace.total_elapsed = finished - start
        trace.outcome = outcome

    def wire_name(self, name: str) -> str:
        """Apply the underscore replacement to an accessor name."""
        if self.underscore_replacement is not None:
            return name.replace("_", self.underscore_replacement)
        return name

    def method(self, name: str) -> "RemoteMethod":
        """
        Create a callable for one remote procedure.

        Example:
            list_methods = client.method("system_listMethods")
            rc, names, trace = list_methods()
        """
        return RemoteMethod(self, self.wire_name(name))

    def bind(self, *names: str) -> "MethodProxy":
        """Create a proxy which only accepts the given accessor names."""
        return MethodProxy(self, names)

    @property
    def proxy(self) -> "MethodProxy":
        """Proxy which turns any attribute into a remote procedure."""
        return MethodProxy(self)

    def __repr__(self) -> str:
        return f"XMLRPCClient({self.destination!r})"


class RemoteMethod:
    """A named remote procedure bound to a client."""

    def __init__(self, client: XMLRPCClient, name: str):
        self.client = client
        self.name = name

    def __call__(self, *params: Any) -> CallResult:
        return self.client.call(self.name, *params)

    def __repr__(self) -> str:
        return f"<RemoteMethod {self.name} at {self.client.destination}>"


class MethodProxy:
    """
    Attribute-style access to remote procedures.

        client.proxy.getQuote("string", "IBM")

    When a list of method names is given, only those are accepted.
    """

    def __init__(self, client: XMLRPCClient, methods: Optional[Iterable[str]] = None):
        self._client = client
        self._methods = frozenset(methods) if methods is not None else None

    def __getattr__(self, name: str) -> RemoteMethod:
        if name.startswith("__"):
            raise AttributeError(name)
        if self._methods is not None and name not in self._methods:
            raise AttributeError(f"unknown remote method '{name}'")
        return self._client.method(name)

    def __dir__(self):
        return sorted(self._methods or ())


def print_trace(trace: CallTrace, file: Optional[TextIO] = None):
    """
    Pretty print a call trace, by default to stderr.

    Args:
        trace: Trace returned with a CallResult
        file: Stream to write to
    """
    file = file or sys.stderr
    status = trace.response.status_message if trace.response is not None else "no response"
    file.write(f"response: {status}\n")
    file.write(f"elapse:   {trace.total_elapsed}\n")
