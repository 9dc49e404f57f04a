"""Service layer exports."""

from .refresh import RefreshCoordinator
from .session import AuthSession
from .token_cipher import TokenCipherService

__all__ = [
    "AuthSession",
    "RefreshCoordinator",
    "TokenCipherService",
]
