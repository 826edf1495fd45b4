"""
HTTP Transport for XML-RPC Calls

This module posts encoded documents to an XML-RPC endpoint. Every outcome is
returned as an HttpResponse: HTTP errors are not raised, and connection
failures or timeouts become internal 500 responses carrying the reason.
"""

import logging
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class HttpRequest:
    """The request handed to the transport."""
    destination: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    method: str = "POST"


@dataclass
class HttpResponse:
    """
    The transport's answer.

    Attributes:
        status_code: HTTP status code
        reason: HTTP reason phrase
        body: Response body
        headers: Response headers
        internal: True when the response was produced locally because no
            HTTP answer was received
    """
    status_code: int
    reason: str = ""
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    internal: bool = False

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def status_message(self) -> str:
        """The status line, for instance "500 Internal Server Error"."""
        return f"{self.status_code} {self.reason}".strip()


class HttpTransport:
    """
    Synchronous HTTP transport based on urllib.
    """

    def __init__(self, timeout_seconds: float = 30.0, user_agent: Optional[str] = None):
        """
        Initialize the transport.

        Args:
            timeout_seconds: Socket timeout for each request
            user_agent: User-Agent header added when the caller sets none
        """
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.logger = logging.getLogger(__name__)

    def post(self, destination: str, headers: Dict[str, str], body: bytes) -> HttpResponse:
        """
        POST a document and collect the response.

        Args:
            destination: Endpoint URL
            headers: Request headers
            body: Request body

        Returns:
            HttpResponse for any outcome
        """
        headers = dict(headers)
        if self.user_agent and not any(key.lower() == "user-agent" for key in headers):
            headers["User-Agent"] = self.user_agent

        req = urllib.request.Request(destination, data=body, headers=headers, method="POST")

        try:
            with urllib.request.urlopen(req, timeout=self.timeout_seconds) as response:
                return HttpResponse(
                    status_code=response.status,
                    reason=response.reason or "",
                    body=response.read(),
                    headers=dict(response.headers.items())
                )

        except urllib.error.HTTPError as e:
            self.logger.debug(f"HTTP error from {destination}: {e.code} {e.reason}")
            return HttpResponse(
                status_code=e.code,
                reason=str(e.reason or ""),
                body=e.read() or b"",
                headers=dict(e.headers.items()) if e.headers else {}
            )

        except urllib.error.URLError as e:
            self.logger.debug(f"Connection to {destination} failed: {e.reason}")
            return HttpResponse(status_code=500, reason=f"Can't connect to {destination}: {e.reason}", internal=True)

        except (TimeoutError, socket.timeout):
            self.logger.debug(f"Request to {destination} timed out after {self.timeout_seconds}s")
            return HttpResponse(status_code=500, reason="read timeout", internal=True)
