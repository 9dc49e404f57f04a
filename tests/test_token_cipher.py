try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from chronos_client.core.config import ClientSettings
from chronos_client.services.token_cipher import TokenCipherService


def test_token_cipher_roundtrip() -> None:
    cipher = TokenCipherService(secret="super-secret-key")

    sealed = cipher.seal("accessToken", "access-token")
    assert "access-token" not in sealed
    assert cipher.unseal("accessToken", sealed) == "access-token"


def test_token_cipher_rejects_bad_ciphertext() -> None:
    cipher = TokenCipherService(secret="another-secret")

    with pytest.raises(ValueError):
        cipher.unseal("accessToken", "not-valid")


def test_token_cipher_rejects_value_from_other_secret() -> None:
    sealed = TokenCipherService(secret="device-a").seal("refreshToken", "refresh-token")

    with pytest.raises(ValueError):
        TokenCipherService(secret="device-b").unseal("refreshToken", sealed)


def test_token_cipher_binds_value_to_its_slot() -> None:
    cipher = TokenCipherService(secret="device-secret")
    sealed = cipher.seal("refreshToken", "refresh-token")

    with pytest.raises(ValueError):
        cipher.unseal("accessToken", sealed)


def test_token_cipher_requires_secret() -> None:
    with pytest.raises(ValueError):
        TokenCipherService(secret="")


def test_token_cipher_from_settings() -> None:
    assert TokenCipherService.from_settings(ClientSettings(token_encryption_secret=None)) is None

    cipher = TokenCipherService.from_settings(ClientSettings(token_encryption_secret="device-secret"))
    assert cipher is not None
    assert cipher.unseal("accessToken", cipher.seal("accessToken", "a")) == "a"
