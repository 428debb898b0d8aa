"""Error types raised by the Nexus / Firewall gateway layer.

Purpose:
- Provide a closed taxonomy of typed failures (`FailureKind`) produced when a
  REST call cannot complete, so callers dispatch on the kind instead of the
  rendered message.
- Expose HTTP-oriented context (status code, upstream body) for diagnosis.

Usage:
- Catch `NexusApiError` for any classified failure and inspect `kind`,
  `status_code` or `details`.
- Use `classify_response` / `classify_exception` at the boundary where a raw
  httpx outcome is turned into a typed failure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import httpx

DEFAULT_API_ERROR_MESSAGE = "Unknown API error"


class FailureKind(str, Enum):
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SERVER = "server"
    UNKNOWN = "unknown"
    CONFIGURATION = "configuration"


class NexusApiError(Exception):
    """Base error for classified gateway failures.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code associated with the failure (0 when no response was received).
        details: Optional structured payload from the server (e.g., JSON body).
    """

    kind: FailureKind = FailureKind.UNKNOWN

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, status_code={self.status_code!r}, message={self.message!r})"


class NetworkError(NexusApiError):
    """Raised when no response was received at all (DNS, refused connection, timeout)."""

    kind = FailureKind.NETWORK

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message, status_code=0, details=details)


class AuthenticationError(NexusApiError):
    """Raised on HTTP 401/403 and when a mutating call is attempted in read-only mode."""

    kind = FailureKind.AUTHENTICATION


class NotFoundError(NexusApiError):
    """Raised on HTTP 404. The upstream body is kept in `details`."""

    kind = FailureKind.NOT_FOUND


class ValidationError(NexusApiError):
    """Raised on other 4xx responses and on invalid tool arguments."""

    kind = FailureKind.VALIDATION


class ServerError(NexusApiError):
    """Raised on any other status >= 400."""

    kind = FailureKind.SERVER


class UnknownError(NexusApiError):
    kind = FailureKind.UNKNOWN


class ConfigurationError(NexusApiError):
    """Raised before any request when the connection profile is incomplete."""

    kind = FailureKind.CONFIGURATION


def extract_error_message(payload: Any) -> str:
    """Pick the upstream message from a `message` or `error` field of a response body."""
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if value:
                return str(value)
    return DEFAULT_API_ERROR_MESSAGE


def _response_payload(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def classify_response(response: httpx.Response) -> NexusApiError:
    """Map an HTTP response with status >= 400 to a typed failure."""
    status = response.status_code
    payload = _response_payload(response)
    message = extract_error_message(payload)

    if status == 401:
        return AuthenticationError(f"Authentication failed: {message}", status_code=status, details=payload)
    if status == 403:
        return AuthenticationError(f"Access denied: {message}", status_code=status, details=payload)
    if status == 404:
        return NotFoundError(f"Resource not found: {message}", status_code=status, details=payload)
    if 400 <= status < 500:
        return ValidationError(f"Client error: {message}", status_code=status, details=payload)
    return ServerError(f"Nexus API error: {message}", status_code=status, details=payload)


def classify_exception(exc: BaseException, *, service: str = "Nexus") -> NexusApiError:
    """Map an exception raised while issuing a request to a typed failure."""
    if isinstance(exc, NexusApiError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        return classify_response(exc.response)
    if isinstance(exc, httpx.TransportError):
        return NetworkError(f"Network error: Unable to connect to {service} server", details=str(exc))
    return UnknownError(f"Request setup error: {exc}", status_code=0)
