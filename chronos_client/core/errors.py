"""
Error taxonomy surfaced by the API client.

Every failure carries a ``kind`` discriminant so callers can branch without
matching on message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP = "http"
    AUTH = "auth"


class AuthFailureReason(str, Enum):
    NO_REFRESH_TOKEN = "no_refresh_token"
    REFRESH_FAILED = "refresh_failed"


class ApiError(Exception):
    """Base class for failures raised by the Chronos API client."""

    kind: ErrorKind

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, status={self.status!r}, message={self.message!r})"


class ApiTimeoutError(ApiError):
    """Raised when a request does not complete before its deadline."""

    kind = ErrorKind.TIMEOUT


class NetworkError(ApiError):
    """Raised when the transport fails (unreachable host, reset connection)."""

    kind = ErrorKind.NETWORK


class HttpError(ApiError):
    """Raised for non-2xx responses that are not recovered by a token refresh."""

    kind = ErrorKind.HTTP

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message, status=status)


class AuthError(ApiError):
    """Raised when the session cannot be re-authenticated."""

    kind = ErrorKind.AUTH

    def __init__(
        self,
        reason: AuthFailureReason,
        message: str,
        *,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message, status=status)
        self.reason = reason


__all__ = [
    "ApiError",
    "ApiTimeoutError",
    "AuthError",
    "AuthFailureReason",
    "ErrorKind",
    "HttpError",
    "NetworkError",
]
