try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import asyncio

import pytest

from chronos_client.services.refresh import RefreshCoordinator


class CountingRefresher:
    def __init__(self, *, fail: bool = False, delay: float = 0.02) -> None:
        self.calls = 0
        self.fail = fail
        self.delay = delay

    async def __call__(self) -> str:
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("refresh rejected")
        return f"token-{self.calls}"


@pytest.mark.anyio
async def test_concurrent_callers_share_one_refresh() -> None:
    coordinator: RefreshCoordinator[str] = RefreshCoordinator()
    refresher = CountingRefresher()

    results = await asyncio.gather(*(coordinator.wait(refresher) for _ in range(5)))

    assert results == ["token-1"] * 5
    assert refresher.calls == 1
    assert coordinator.is_refreshing is False


@pytest.mark.anyio
async def test_claim_or_join_returns_the_pending_task() -> None:
    coordinator: RefreshCoordinator[str] = RefreshCoordinator()
    refresher = CountingRefresher()

    first = coordinator.claim_or_join(refresher)
    second = coordinator.claim_or_join(refresher)

    assert first is second
    assert coordinator.is_refreshing is True
    assert await first == "token-1"


@pytest.mark.anyio
async def test_state_resets_after_failure_so_next_refresh_can_start() -> None:
    coordinator: RefreshCoordinator[str] = RefreshCoordinator()
    failing = CountingRefresher(fail=True)

    outcomes = await asyncio.gather(
        coordinator.wait(failing), coordinator.wait(failing), return_exceptions=True
    )

    assert all(isinstance(outcome, RuntimeError) for outcome in outcomes)
    assert failing.calls == 1
    assert coordinator.is_refreshing is False

    healthy = CountingRefresher()
    assert await coordinator.wait(healthy) == "token-1"


@pytest.mark.anyio
async def test_cancelled_waiter_does_not_cancel_shared_refresh() -> None:
    coordinator: RefreshCoordinator[str] = RefreshCoordinator()
    refresher = CountingRefresher(delay=0.05)

    impatient = asyncio.ensure_future(coordinator.wait(refresher))
    patient = asyncio.ensure_future(coordinator.wait(refresher))
    await asyncio.sleep(0.01)
    impatient.cancel()

    assert await patient == "token-1"
    with pytest.raises(asyncio.CancelledError):
        await impatient
    assert refresher.calls == 1
