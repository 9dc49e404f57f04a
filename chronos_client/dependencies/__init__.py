"""Expose dependency helpers for callers wiring the client."""

from .clients import (
    get_api_client,
    get_auth_session,
    get_token_cipher_service,
    get_token_store,
)

__all__ = [
    "get_api_client",
    "get_auth_session",
    "get_token_cipher_service",
    "get_token_store",
]
