"""Error taxonomy for Fathom API calls and their user-facing messages."""

from enum import Enum
from typing import Any

import httpx

RATE_LIMIT_REQUESTS = 60
RATE_LIMIT_WINDOW_SECONDS = 60


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    AUTHENTICATION_FAILED = "authentication_failed"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    TIMEOUT = "timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    UNKNOWN = "unknown"


class FathomError(Exception):
    """Base class for errors raised by this package."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(FathomError):
    """The server is missing required configuration (e.g. the API key)."""


class FathomAPIError(FathomError):
    """A Fathom API call failed.

    ``message`` is the user-facing description shown to the assistant.
    """

    def __init__(self, kind: ErrorKind, message: str, status_code: int | None = None):
        self.kind = kind
        self.status_code = status_code
        super().__init__(message)


def _remote_message(response: httpx.Response) -> str | None:
    try:
        data: Any = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return None


def error_from_response(response: httpx.Response) -> FathomAPIError:
    """Map a non-2xx response to its taxonomy error."""
    status = response.status_code

    if status == 400:
        detail = _remote_message(response) or "Please check your input parameters."
        return FathomAPIError(ErrorKind.INVALID_REQUEST, f"Error: Bad request. {detail}", status)
    if status == 401:
        return FathomAPIError(
            ErrorKind.AUTHENTICATION_FAILED,
            "Error: Authentication failed. Please check your FATHOM_API_KEY "
            "environment variable is set correctly.",
            status,
        )
    if status == 403:
        return FathomAPIError(
            ErrorKind.FORBIDDEN,
            "Error: Access denied. You don't have permission to access this resource.",
            status,
        )
    if status == 404:
        return FathomAPIError(
            ErrorKind.NOT_FOUND,
            "Error: Resource not found. Please verify the ID is correct.",
            status,
        )
    if status == 429:
        reset = response.headers.get("ratelimit-reset") or "a moment"
        return FathomAPIError(
            ErrorKind.RATE_LIMITED,
            f"Error: Rate limit exceeded ({RATE_LIMIT_REQUESTS} requests/minute). "
            f"Please wait {reset} before making more requests.",
            status,
        )
    if 500 <= status < 600:
        return FathomAPIError(
            ErrorKind.REMOTE_UNAVAILABLE,
            "Error: Fathom API is temporarily unavailable. Please try again later.",
            status,
        )

    detail = _remote_message(response) or ""
    return FathomAPIError(
        ErrorKind.UNKNOWN,
        f"Error: API request failed with status {status}. {detail}".rstrip(),
        status,
    )


def error_from_transport(exc: httpx.HTTPError) -> FathomAPIError:
    """Map an httpx transport failure (no response received) to its taxonomy error."""
    if isinstance(exc, httpx.TimeoutException):
        return FathomAPIError(ErrorKind.TIMEOUT, "Error: Request timed out. Please try again.")
    if isinstance(exc, httpx.ConnectError):
        return FathomAPIError(
            ErrorKind.NETWORK_UNREACHABLE,
            "Error: Unable to connect to Fathom API. Please check your network connection.",
        )
    return FathomAPIError(ErrorKind.UNKNOWN, _unexpected(exc))


def _unexpected(exc: BaseException) -> str:
    return f"Error: Unexpected error occurred: {exc}"


def describe_error(exc: BaseException) -> str:
    """Return the single user-facing message for any failure."""
    if isinstance(exc, FathomError):
        return exc.message
    return _unexpected(exc)
