"""
Single-flight coordination of access-token refreshes.

Concurrent requests that observe an expired access token must share one
refresh call instead of each spending the refresh token.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RefreshCoordinator(Generic[T]):
    """Holds the in-flight refresh task for one client instance."""

    def __init__(self) -> None:
        self._pending: Optional[asyncio.Task[T]] = None

    @property
    def is_refreshing(self) -> bool:
        return self._pending is not None

    def claim_or_join(self, refresh: Callable[[], Awaitable[T]]) -> asyncio.Task[T]:
        """Start a refresh, or return the one already in flight.

        The check and the assignment happen without an intervening ``await``,
        so two callers on the same event loop can never both start a refresh.
        """
        if self._pending is None:
            logger.info("Starting token refresh")
            task = asyncio.ensure_future(self._run(refresh))
            task.add_done_callback(_consume_result)
            self._pending = task
        else:
            logger.debug("Joining in-flight token refresh")
        return self._pending

    async def _run(self, refresh: Callable[[], Awaitable[T]]) -> T:
        try:
            return await refresh()
        finally:
            self._pending = None

    async def wait(self, refresh: Callable[[], Awaitable[T]]) -> T:
        """Claim or join, then await the shared outcome.

        The task is shielded so cancelling one waiter (for example when its own
        deadline expires) leaves the refresh running for everyone else.
        """
        return await asyncio.shield(self.claim_or_join(refresh))


def _consume_result(task: asyncio.Task) -> None:
    # Marks a failure as retrieved when every waiter was cancelled first.
    if not task.cancelled():
        task.exception()


__all__ = ["RefreshCoordinator"]
