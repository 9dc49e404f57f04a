"""Async client for the Chronos employee time-tracking API."""

from chronos_client.clients import ChronosApiClient, TokenStore
from chronos_client.core.errors import (
    ApiError,
    ApiTimeoutError,
    AuthError,
    AuthFailureReason,
    ErrorKind,
    HttpError,
    NetworkError,
)
from chronos_client.services import AuthSession

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "ApiTimeoutError",
    "AuthError",
    "AuthFailureReason",
    "AuthSession",
    "ChronosApiClient",
    "ErrorKind",
    "HttpError",
    "NetworkError",
    "TokenStore",
]
