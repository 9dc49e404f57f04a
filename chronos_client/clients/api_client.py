"""
HTTP client for the Chronos time-tracking backend.

Attaches bearer authentication, enforces per-request deadlines and recovers
from expired access tokens with a single shared refresh.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from chronos_client.clients.token_store import TokenStore
from chronos_client.core.config import ClientSettings, resolve_api_url
from chronos_client.core.errors import (
    ApiError,
    ApiTimeoutError,
    AuthError,
    AuthFailureReason,
    HttpError,
    NetworkError,
)
from chronos_client.schemas.auth import (
    AuthResponse,
    EmployeeRegisterData,
    LoginPayload,
    ManagerRegisterData,
    ProfileResponse,
    RefreshTokenResponse,
    RegisterData,
    TokenPair,
)
from chronos_client.schemas.company import (
    CreateInvitationData,
    EmployeeApproval,
    UpdateCompanyData,
)
from chronos_client.schemas.timelog import Coordinates, PhotoUpload, TimeLogResponse
from chronos_client.services.refresh import RefreshCoordinator

logger = logging.getLogger(__name__)

REFRESH_ENDPOINT = "/auth/refresh-token"
TIMEOUT_MESSAGE = "Request timed out. Check your connection."
NETWORK_MESSAGE = "Could not reach the server. Check that the backend is running."
UNEXPECTED_PAYLOAD_MESSAGE = "Unexpected response payload"

_URL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")

M = TypeVar("M", bound=BaseModel)


@dataclass(slots=True, frozen=True)
class RequestDescriptor:
    """One logical call; replayed verbatim when a refresh succeeds."""

    endpoint: str
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    json: Any = None
    params: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, str]] = None
    files: Optional[Dict[str, Any]] = None
    requires_auth: bool = False
    timeout: float = 15.0

    @property
    def is_multipart(self) -> bool:
        return self.files is not None


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return fallback


def _validate(
    model: Type[M], descriptor: RequestDescriptor, response: httpx.Response, data: Any
) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.error(
            "Unexpected payload from %s %s: %s", descriptor.method, descriptor.endpoint, exc
        )
        raise HttpError(response.status_code, UNEXPECTED_PAYLOAD_MESSAGE) from exc


class ChronosApiClient:
    """Authenticated async client for the Chronos REST API."""

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        *,
        request_timeout: float = 15.0,
        upload_timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._store = token_store
        self._request_timeout = request_timeout
        self._upload_timeout = upload_timeout
        # Deadlines are enforced per call in _attempt.
        self._http = httpx.AsyncClient(base_url=self.base_url, transport=transport, timeout=None)
        self._refresh: RefreshCoordinator[TokenPair] = RefreshCoordinator()

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        token_store: TokenStore,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ChronosApiClient":
        return cls(
            resolve_api_url(settings),
            token_store,
            request_timeout=settings.request_timeout,
            upload_timeout=settings.upload_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ChronosApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # Token management

    def get_access_token(self) -> Optional[str]:
        return self._store.get_access_token()

    def get_refresh_token(self) -> Optional[str]:
        return self._store.get_refresh_token()

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        self._store.set_tokens(access_token, refresh_token)

    def clear_tokens(self) -> None:
        self._store.clear_tokens()

    @property
    def is_refreshing(self) -> bool:
        return self._refresh.is_refreshing

    # Request pipeline

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        requires_auth: bool = False,
        timeout: Optional[float] = None,
    ) -> Any:
        """Send a JSON request and return the decoded response body.

        A 401 on an authenticated call triggers one shared token refresh and a
        single replay of the request. Any failure of the replay propagates
        unchanged.
        """
        descriptor = self._describe(
            endpoint,
            method=method,
            json=json,
            params=params,
            headers=headers,
            requires_auth=requires_auth,
            timeout=timeout,
        )
        response = await self._send(descriptor)
        return self._parse(descriptor, response)

    async def _request_model(self, model: Type[M], endpoint: str, **kwargs: Any) -> M:
        descriptor = self._describe(endpoint, **kwargs)
        response = await self._send(descriptor)
        return _validate(model, descriptor, response, self._parse(descriptor, response))

    def _describe(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        requires_auth: bool = False,
        timeout: Optional[float] = None,
    ) -> RequestDescriptor:
        return RequestDescriptor(
            endpoint=endpoint,
            method=method.upper(),
            headers=dict(headers or {}),
            json=json,
            params=params,
            requires_auth=requires_auth,
            timeout=timeout if timeout is not None else self._request_timeout,
        )

    async def _send(self, descriptor: RequestDescriptor) -> httpx.Response:
        response = await self._attempt(descriptor)
        if response.status_code == 401 and self._can_refresh(descriptor):
            return await self._attempt_with_refresh(descriptor, response)
        return response

    def _can_refresh(self, descriptor: RequestDescriptor) -> bool:
        return (
            descriptor.requires_auth
            and not descriptor.is_multipart
            and descriptor.endpoint != REFRESH_ENDPOINT
        )

    async def _attempt_with_refresh(
        self, descriptor: RequestDescriptor, unauthorized: httpx.Response
    ) -> httpx.Response:
        try:
            await self._refresh.wait(self._refresh_or_clear)
        except ApiError as exc:
            reason = (
                exc.reason if isinstance(exc, AuthError) else AuthFailureReason.REFRESH_FAILED
            )
            message = _error_message(unauthorized, "Unauthorized")
            logger.warning(
                "Token refresh failed (%s); surfacing original 401 for %s",
                reason.value,
                descriptor.endpoint,
            )
            raise AuthError(reason, message, status=401) from exc

        return await self._attempt(descriptor)

    async def _refresh_or_clear(self) -> TokenPair:
        try:
            return await self._exchange_refresh_token()
        except Exception:
            self.clear_tokens()
            raise

    def _build_headers(self, descriptor: RequestDescriptor) -> httpx.Headers:
        headers = httpx.Headers()
        if not descriptor.is_multipart:
            headers["Content-Type"] = "application/json"
        headers.update(descriptor.headers)
        if descriptor.requires_auth:
            token = self.get_access_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _attempt(self, descriptor: RequestDescriptor) -> httpx.Response:
        url = f"{self.base_url}{descriptor.endpoint}"
        headers = self._build_headers(descriptor)
        logger.info("API request: %s %s", descriptor.method, url)
        try:
            response = await asyncio.wait_for(
                self._http.request(
                    descriptor.method,
                    descriptor.endpoint,
                    headers=headers,
                    json=descriptor.json,
                    params=descriptor.params,
                    data=descriptor.data,
                    files=descriptor.files,
                ),
                timeout=descriptor.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.error("API request timeout: %s", url)
            raise ApiTimeoutError(TIMEOUT_MESSAGE) from exc
        except httpx.RequestError as exc:
            logger.error("API request failed: %s %s: %s", descriptor.method, url, exc)
            raise NetworkError(NETWORK_MESSAGE) from exc
        logger.info("API response: %s %s", response.status_code, url)
        return response

    def _parse(self, descriptor: RequestDescriptor, response: httpx.Response) -> Any:
        if not response.is_success:
            message = _error_message(response, f"HTTP error! status: {response.status_code}")
            logger.warning(
                "API error %s on %s %s: %s",
                response.status_code,
                descriptor.method,
                descriptor.endpoint,
                message,
            )
            raise HttpError(response.status_code, message)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise HttpError(response.status_code, "Invalid JSON in response body") from exc

    # Auth endpoints

    async def login(self, email: str, password: str) -> AuthResponse:
        payload = LoginPayload(email=email, password=password)
        return await self._authenticate("/auth/login", payload.model_dump())

    async def register(self, user_data: RegisterData) -> AuthResponse:
        return await self._authenticate("/auth/register", user_data.model_dump(exclude_none=True))

    async def register_manager(self, manager_data: ManagerRegisterData) -> AuthResponse:
        """Create a manager account together with its company."""
        return await self._authenticate("/auth/register-manager", manager_data.to_payload())

    async def register_employee(self, employee_data: EmployeeRegisterData) -> AuthResponse:
        """Join a company with an invitation code.

        When the company requires approval the backend answers with
        ``requiresApproval`` and no tokens, so nothing is stored.
        """
        return await self._authenticate("/auth/register-employee", employee_data.to_payload())

    async def _authenticate(self, endpoint: str, payload: Dict[str, Any]) -> AuthResponse:
        response = await self._request_model(AuthResponse, endpoint, method="POST", json=payload)
        pair = response.token_pair()
        if pair is not None:
            self.set_tokens(pair.access_token, pair.refresh_token)
        return response

    async def refresh_tokens(self) -> TokenPair:
        """Exchange the stored refresh token for a new token pair.

        Joins a refresh already in flight for this client instead of spending
        the refresh token twice. Stored tokens are cleared when it fails.
        """
        return await self._refresh.wait(self._refresh_or_clear)

    async def _exchange_refresh_token(self) -> TokenPair:
        refresh_token = self.get_refresh_token()
        if not refresh_token:
            raise AuthError(
                AuthFailureReason.NO_REFRESH_TOKEN, "No refresh token available"
            )

        data = await self.request(
            REFRESH_ENDPOINT, method="POST", json={"refreshToken": refresh_token}
        )
        try:
            response = RefreshTokenResponse.model_validate(data)
        except ValidationError as exc:
            raise AuthError(
                AuthFailureReason.REFRESH_FAILED, "Incomplete refresh payload returned"
            ) from exc

        self.set_tokens(response.access_token, response.refresh_token)
        logger.info("Access token refreshed")
        return TokenPair(access_token=response.access_token, refresh_token=response.refresh_token)

    async def logout(self) -> Dict[str, Any]:
        data = await self.request("/auth/logout", method="POST", requires_auth=True)
        self.clear_tokens()
        return data or {}

    async def get_profile(self) -> ProfileResponse:
        return await self._request_model(ProfileResponse, "/auth/profile", requires_auth=True)

    # Time log endpoints

    async def check_in(self, photo: PhotoUpload, latitude: float, longitude: float) -> TimeLogResponse:
        return await self._upload_time_log("/timelog/checkin", "checkin.jpg", photo, latitude, longitude)

    async def check_out(self, photo: PhotoUpload, latitude: float, longitude: float) -> TimeLogResponse:
        return await self._upload_time_log("/timelog/checkout", "checkout.jpg", photo, latitude, longitude)

    async def _upload_time_log(
        self,
        endpoint: str,
        default_filename: str,
        photo: PhotoUpload,
        latitude: float,
        longitude: float,
    ) -> TimeLogResponse:
        # The photo cannot be replayed safely, so uploads never refresh and retry.
        coordinates = Coordinates(latitude=latitude, longitude=longitude)
        filename = photo.filename or default_filename
        descriptor = RequestDescriptor(
            endpoint=endpoint,
            method="POST",
            data=coordinates.as_form_fields(),
            files={"photo": (filename, photo.content, photo.content_type)},
            requires_auth=True,
            timeout=self._upload_timeout,
        )
        logger.info(
            "Uploading %s (%d bytes) at lat=%s lon=%s",
            filename,
            len(photo.content),
            coordinates.latitude,
            coordinates.longitude,
        )
        response = await self._attempt(descriptor)
        return _validate(TimeLogResponse, descriptor, response, self._parse(descriptor, response))

    async def get_time_logs(self) -> List[Dict[str, Any]]:
        return await self.request("/timelog", requires_auth=True)

    # Company management endpoints

    async def get_company(self) -> Dict[str, Any]:
        return await self.request("/company", requires_auth=True)

    async def update_company(self, company: UpdateCompanyData) -> Dict[str, Any]:
        return await self.request(
            "/company", method="PUT", json=company.to_payload(), requires_auth=True
        )

    async def get_invitations(
        self, page: int = 1, limit: int = 10, status: Optional[str] = None
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return await self.request("/company/invitations", params=params, requires_auth=True)

    async def create_invitation(self, invitation: CreateInvitationData) -> Dict[str, Any]:
        return await self.request(
            "/company/invitations",
            method="POST",
            json=invitation.to_payload(),
            requires_auth=True,
        )

    async def cancel_invitation(self, invitation_id: int | str) -> Dict[str, Any]:
        return await self.request(
            f"/company/invitations/{invitation_id}", method="DELETE", requires_auth=True
        )

    async def get_pending_employees(
        self, page: int = 1, limit: int = 10, search: Optional[str] = None
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        return await self.request(
            "/company/employees/pending", params=params, requires_auth=True
        )

    async def approve_employee(
        self, employee_id: int | str, approved: bool, notes: Optional[str] = None
    ) -> Dict[str, Any]:
        approval = EmployeeApproval(approved=approved, notes=notes)
        return await self.request(
            f"/company/employees/{employee_id}/approval",
            method="POST",
            json=approval.to_payload(),
            requires_auth=True,
        )

    def get_photo_url(self, photo_path: Optional[str]) -> Optional[str]:
        """Map a stored photo path to an absolute URL."""
        if not photo_path:
            return None
        if _URL_SCHEME.match(photo_path):
            return photo_path
        if not photo_path.startswith("/"):
            photo_path = f"/{photo_path}"
        return f"{self.base_url}{photo_path}"


__all__ = ["ChronosApiClient", "REFRESH_ENDPOINT", "RequestDescriptor"]
