"""
Factory functions providing the shared store, client and session.
"""

from functools import lru_cache

from chronos_client.clients import ChronosApiClient, TokenStore
from chronos_client.core.config import ClientSettings, get_settings
from chronos_client.core.logging import configure_logging
from chronos_client.services import AuthSession, TokenCipherService


@lru_cache()
def _settings() -> ClientSettings:
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_token_cipher_service() -> TokenCipherService | None:
    """Provide the at-rest cipher when an encryption secret is configured."""
    return TokenCipherService.from_settings(_settings())


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide the persistent token store."""
    return TokenStore(_settings().token_db_path, cipher=get_token_cipher_service())


@lru_cache()
def get_api_client() -> ChronosApiClient:
    """Create the process-wide API client."""
    settings = _settings()
    configure_logging(settings.log_level)
    return ChronosApiClient.from_settings(settings, get_token_store())


@lru_cache()
def get_auth_session() -> AuthSession:
    return AuthSession(get_api_client())


__all__ = [
    "get_api_client",
    "get_auth_session",
    "get_token_cipher_service",
    "get_token_store",
]
