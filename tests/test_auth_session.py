try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from chronos_client.clients import ChronosApiClient
from chronos_client.core.errors import HttpError
from chronos_client.schemas import (
    EmployeeRegisterData,
    ManagerRegisterData,
    RegisterData,
    UpdateCompanyData,
)
from chronos_client.services import AuthSession


@pytest.mark.anyio
async def test_load_without_tokens_stays_signed_out(api_client, backend):
    session = AuthSession(api_client)
    assert session.loading is True

    user = await session.load_user_profile()

    assert user is None
    assert session.loading is False
    assert session.is_authenticated is False
    assert backend.calls == []


@pytest.mark.anyio
async def test_load_restores_user_from_stored_tokens(api_client, token_store):
    token_store.set_tokens("access-1", "refresh-1")
    session = AuthSession(api_client)

    user = await session.load_user_profile()

    assert user is not None and user.id == "user-1"
    assert session.is_authenticated is True


@pytest.mark.anyio
async def test_load_recovers_with_expired_access_token(api_client, backend, token_store):
    token_store.set_tokens("stale-access", "refresh-1")
    session = AuthSession(api_client)

    user = await session.load_user_profile()

    assert user is not None
    assert backend.refresh_calls == 1
    assert token_store.get_access_token() == "access-2"


@pytest.mark.anyio
async def test_load_clears_tokens_when_refresh_is_impossible(api_client, backend, token_store):
    token_store.set_tokens("stale-access", "revoked-refresh")
    session = AuthSession(api_client)

    user = await session.load_user_profile()

    assert user is None
    assert session.loading is False
    assert token_store.get_access_token() is None
    assert token_store.get_refresh_token() is None


@pytest.mark.anyio
async def test_login_and_register_set_the_user(api_client):
    session = AuthSession(api_client)

    await session.login("ana@example.com", "secret")
    assert session.user.email == "ana@example.com"

    await session.register(RegisterData(name="Bruno", email="bruno@example.com", password="pw"))
    assert session.user.email == "bruno@example.com"


@pytest.mark.anyio
async def test_failed_login_propagates(api_client):
    session = AuthSession(api_client)

    with pytest.raises(HttpError):
        await session.login("ana@example.com", "nope")

    assert session.is_authenticated is False


@pytest.mark.anyio
async def test_logout_signs_out_even_when_backend_rejects(api_client, backend, token_store):
    session = AuthSession(api_client)
    await session.login("ana@example.com", "secret")
    backend.reject_all_access = True

    await session.logout()

    assert session.user is None
    assert token_store.get_access_token() is None
    assert token_store.get_refresh_token() is None


@pytest.mark.anyio
async def test_refresh_user_profile_keeps_user_on_failure(api_client, backend):
    session = AuthSession(api_client)
    await session.login("ana@example.com", "secret")
    backend.reject_all_access = True
    backend.fail_refresh = True

    user = await session.refresh_user_profile()

    assert user is not None
    assert session.is_authenticated is True


@pytest.mark.anyio
async def test_load_with_malformed_profile_signs_out_without_raising(token_store):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/auth/refresh-token":
            return httpx.Response(200, json={"accessToken": "access-2", "refreshToken": "refresh-2"})
        return httpx.Response(200, json={"user": {"id": "u-1", "email": "a@b.c"}})

    token_store.set_tokens("access-1", "refresh-1")
    async with ChronosApiClient(
        "http://chronos.test", token_store, transport=httpx.MockTransport(handler)
    ) as client:
        session = AuthSession(client)
        user = await session.load_user_profile()

    assert user is None
    assert session.loading is False
    assert token_store.get_access_token() is None


@pytest.mark.anyio
async def test_register_manager_signs_in(api_client):
    session = AuthSession(api_client)

    user = await session.register_manager(
        ManagerRegisterData(
            name="Carla Dias",
            email="carla@acme.com",
            password="secret1",
            company=UpdateCompanyData(name="Acme", cnpj="12.345.678/0001-90"),
        )
    )

    assert user is not None and user.email == "carla@acme.com"
    assert session.is_authenticated is True


@pytest.mark.anyio
async def test_register_employee_pending_approval_stays_signed_out(api_client, token_store):
    session = AuthSession(api_client)

    response = await session.register_employee(
        EmployeeRegisterData(
            invitation_code="APPROVAL-INVITE",
            name="Davi Rocha",
            email="davi@acme.com",
            password="secret1",
        )
    )

    assert response.requires_approval is True
    assert session.is_authenticated is False
    assert token_store.get_access_token() is None


@pytest.mark.anyio
async def test_register_employee_with_open_invitation_signs_in(api_client, token_store):
    session = AuthSession(api_client)

    response = await session.register_employee(
        EmployeeRegisterData(
            invitation_code="OPEN-INVITE",
            name="Eva Pinto",
            email="eva@acme.com",
            password="secret1",
        )
    )

    assert response.requires_approval is False
    assert session.user is not None and session.user.email == "eva@acme.com"
    assert token_store.get_access_token() == response.access_token
