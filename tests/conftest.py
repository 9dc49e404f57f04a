"""Pytest configuration shared across the suite."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
    from ._backend import FakeChronosBackend
except Exception:  # pragma: no cover - fallback for rootdir-less execution
    import _bootstrap  # type: ignore # noqa: F401
    from _backend import FakeChronosBackend  # type: ignore

import httpx
import pytest

from chronos_client.clients import ChronosApiClient, TokenStore

BASE_URL = "http://testserver"


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    return TokenStore(str(tmp_path / "tokens.db"))


@pytest.fixture
def backend() -> FakeChronosBackend:
    return FakeChronosBackend()


@pytest.fixture
async def api_client(backend: FakeChronosBackend, token_store: TokenStore):
    client = ChronosApiClient(
        BASE_URL,
        token_store,
        transport=httpx.ASGITransport(app=backend.app),
    )
    yield client
    await client.aclose()
