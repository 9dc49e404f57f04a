"""
Client configuration models and helpers.

Centralizes settings so the API client, the token store and the session
facade share a consistent configuration surface.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRODUCTION_API_URL = "https://chronos-work.onrender.com"


class ClientSettings(BaseSettings):
    """Root settings object for the Chronos API client."""

    environment: str = Field("development", description="development or production")
    log_level: str = Field("INFO")
    api_url: Optional[str] = Field(
        None,
        description="Manual API URL, only honoured together with force_local_ip.",
    )
    force_local_ip: bool = Field(False)
    local_ip: str = Field("192.168.1.226")
    api_port: int = Field(8000)
    production_api_url: str = Field(DEFAULT_PRODUCTION_API_URL)
    request_timeout: float = Field(15.0, gt=0)
    upload_timeout: float = Field(20.0, gt=0)
    token_db_path: str = Field(
        str(Path.home() / ".chronos" / "tokens.db"),
        description="SQLite file holding the persisted token pair.",
    )
    token_encryption_secret: Optional[str] = Field(
        None,
        description="Secret used to derive the key for encrypting stored tokens.",
    )

    model_config = SettingsConfigDict(
        env_prefix="CHRONOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        return value.strip().lower()


def resolve_api_url(settings: ClientSettings) -> str:
    """Pick the backend base URL for the configured environment."""
    if settings.force_local_ip and settings.api_url:
        url = settings.api_url
    elif settings.environment == "development":
        url = f"http://{settings.local_ip}:{settings.api_port}"
    else:
        url = settings.production_api_url
    return url.rstrip("/")


@lru_cache()
def get_settings() -> ClientSettings:
    """Return a cached settings object."""
    return ClientSettings()


__all__ = [
    "ClientSettings",
    "DEFAULT_PRODUCTION_API_URL",
    "get_settings",
    "resolve_api_url",
]
