"""
Session facade tracking the signed-in user on top of the API client.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from chronos_client.core.errors import ApiError
from chronos_client.schemas.auth import (
    AuthResponse,
    EmployeeRegisterData,
    ManagerRegisterData,
    RegisterData,
    User,
)

if TYPE_CHECKING:
    from chronos_client.clients.api_client import ChronosApiClient

logger = logging.getLogger(__name__)


class AuthSession:
    """Keeps the current user in sync with the stored tokens."""

    def __init__(self, client: ChronosApiClient) -> None:
        self._client = client
        self.user: Optional[User] = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def load_user_profile(self) -> Optional[User]:
        """Restore the user from stored tokens at start-up.

        Falls back to an explicit refresh when the profile call fails, and
        clears the stored tokens when that does not help either.
        """
        try:
            if not self._client.get_access_token():
                return None
            try:
                self.user = (await self._client.get_profile()).user
            except ApiError as exc:
                logger.warning("Failed to load user profile: %s", exc)
                try:
                    await self._client.refresh_tokens()
                    self.user = (await self._client.get_profile()).user
                except ApiError as refresh_exc:
                    logger.warning("Failed to refresh token: %s", refresh_exc)
                    self._client.clear_tokens()
                    self.user = None
            return self.user
        finally:
            self.loading = False

    async def login(self, email: str, password: str) -> Optional[User]:
        response = await self._client.login(email, password)
        self.user = response.user
        return self.user

    async def register(self, user_data: RegisterData) -> Optional[User]:
        response = await self._client.register(user_data)
        self.user = response.user
        return self.user

    async def register_manager(self, manager_data: ManagerRegisterData) -> Optional[User]:
        response = await self._client.register_manager(manager_data)
        self.user = response.user
        return self.user

    async def register_employee(self, employee_data: EmployeeRegisterData) -> AuthResponse:
        """Sign up with an invitation code.

        The user is only signed in when the backend issued tokens; a pending
        approval leaves the session signed out.
        """
        response = await self._client.register_employee(employee_data)
        if response.requires_approval or response.token_pair() is None:
            logger.info("Employee registration awaiting manager approval")
        else:
            self.user = response.user
        return response

    async def logout(self) -> None:
        """Sign out locally even when the backend call fails."""
        try:
            await self._client.logout()
        except ApiError as exc:
            logger.warning("Logout error: %s", exc)
        finally:
            self.user = None
            self._client.clear_tokens()

    async def refresh_user_profile(self) -> Optional[User]:
        try:
            self.user = (await self._client.get_profile()).user
        except ApiError as exc:
            logger.warning("Failed to refresh user profile: %s", exc)
        return self.user


__all__ = ["AuthSession"]
