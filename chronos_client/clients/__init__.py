"""Expose constructed client wrappers."""

from .api_client import ChronosApiClient
from .token_store import TokenStore

__all__ = [
    "ChronosApiClient",
    "TokenStore",
]
