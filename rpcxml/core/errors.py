"""
Base exceptions shared by the value model and the wire codec.
"""

from typing import List, Optional


class RPCError(Exception):
    """Base exception for XML-RPC operations."""
    pass


class ValidationError(RPCError):
    """Exception raised when a value or envelope violates the XML-RPC shape."""
    
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class DecodeError(RPCError):
    """Exception raised when wire bytes cannot be read as an envelope."""
    pass
