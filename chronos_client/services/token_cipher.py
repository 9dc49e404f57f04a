"""Encryption at rest for the token pair kept in the token store."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

if TYPE_CHECKING:
    from chronos_client.core.config import ClientSettings

_KEY_INFO = b"chronos-token-store"
_SLOT_SEPARATOR = "\x00"


class TokenCipherService:
    """Seal token values with a Fernet key derived from a device secret.

    Each ciphertext is bound to the store key it was written under, so a
    sealed refresh token cannot be read back as the access token.
    """

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        key = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=_KEY_INFO).derive(
            secret.encode("utf-8")
        )
        self._fernet = Fernet(base64.urlsafe_b64encode(key))

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> Optional["TokenCipherService"]:
        if not settings.token_encryption_secret:
            return None
        return cls(secret=settings.token_encryption_secret)

    def seal(self, slot: str, value: str) -> str:
        payload = f"{slot}{_SLOT_SEPARATOR}{value}".encode("utf-8")
        return self._fernet.encrypt(payload).decode("utf-8")

    def unseal(self, slot: str, sealed: str) -> str:
        """Decrypt a stored value; raises ``ValueError`` for foreign, corrupt or misplaced data."""
        try:
            payload = self._fernet.decrypt(sealed.encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise ValueError("Stored token could not be decrypted.") from exc
        stored_slot, _, value = payload.partition(_SLOT_SEPARATOR)
        if stored_slot != slot:
            raise ValueError(f"Stored value belongs to {stored_slot!r}, not {slot!r}.")
        return value


__all__ = ["TokenCipherService"]
