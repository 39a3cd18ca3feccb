"""
Exception hierarchy for apilink.

All custom exceptions inherit from ApiLinkError base class.
"""

from collections.abc import Mapping
from typing import Any, List, Optional


class ApiLinkError(Exception):
    """Base exception for all apilink errors."""
    pass


# Request Errors
class RequestError(ApiLinkError):
    """Base exception for failures surfaced by a dispatched request."""
    pass


class TransportError(RequestError):
    """
    Raised when a request fails at the transport level.

    Covers network aborts (no status, no payload), unparseable response
    bodies (payload is None) and non-2xx responses (status and parsed body).

    Attributes:
        status: HTTP status code, or None if no response was received
        payload: Parsed error body, or None if it could not be parsed
    """

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.payload = payload

    def __repr__(self) -> str:
        return f"TransportError(status={self.status!r}, payload={self.payload!r})"


class ValidationError(RequestError):
    """
    Raised when a parsed response does not match the expected schema.

    Carries no HTTP status: the transport succeeded, the response shape
    did not.
    """

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


# Configuration Errors
class ConfigurationError(ApiLinkError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


def normalize_error(payload: Any, status: Optional[int]) -> TransportError:
    """
    Build the TransportError shared by every transport.

    The message is the payload's ``detail`` field when present, otherwise a
    generic message naming the status code.

    Args:
        payload: Parsed error body, or None if the body could not be parsed
        status: HTTP status code, or None if no response was received

    Returns:
        TransportError carrying ``payload`` and ``status``
    """
    if isinstance(payload, Mapping) and "detail" in payload:
        message = str(payload["detail"])
    elif status is None:
        message = "HTTP error: no response received"
    else:
        message = f"HTTP error {status}"
    return TransportError(message, status=status, payload=payload)
