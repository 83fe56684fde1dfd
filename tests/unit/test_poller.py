"""Unit tests for DuePoller."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from structlog.testing import capture_logs

from followup.application.poller import DuePoller
from followup.application.use_cases.process_due_reminders import DispatchCycleResult
from followup.core.exceptions import StoreUnavailableError


class TestDuePoller:
    """Tests for DuePoller."""

    async def test_run_once_returns_result(self):
        use_case = AsyncMock()
        use_case.execute.return_value = DispatchCycleResult(due=2, notified=2)

        result = await DuePoller(use_case).run_once()

        assert result.notified == 2
        use_case.execute.assert_awaited_once()

    async def test_overlapping_cycle_is_skipped(self):
        release = asyncio.Event()

        async def slow_cycle():
            await release.wait()
            return DispatchCycleResult()

        use_case = AsyncMock()
        use_case.execute.side_effect = slow_cycle
        poller = DuePoller(use_case)

        first = asyncio.create_task(poller.run_once())
        await asyncio.sleep(0)
        second = await poller.run_once()
        release.set()
        first_result = await first

        assert second is None
        assert first_result == DispatchCycleResult()
        assert use_case.execute.await_count == 1

    async def test_store_failure_is_logged_not_raised(self):
        use_case = AsyncMock()
        use_case.execute.side_effect = StoreUnavailableError("query", "disk I/O error")

        assert await DuePoller(use_case).run_once() is None

    async def test_start_runs_cycles_until_stopped(self):
        use_case = AsyncMock()
        use_case.execute.return_value = DispatchCycleResult()
        poller = DuePoller(use_case, interval_seconds=0.01)

        poller.start()
        assert poller.running
        await asyncio.sleep(0.05)
        await poller.stop()

        assert not poller.running
        assert use_case.execute.await_count >= 2

    async def test_start_twice_keeps_one_task(self):
        use_case = AsyncMock()
        use_case.execute.return_value = DispatchCycleResult()
        poller = DuePoller(use_case, interval_seconds=10)

        poller.start()
        task = poller._task
        poller.start()

        assert poller._task is task
        await poller.stop()

    async def test_stop_without_start(self):
        await DuePoller(AsyncMock()).stop()

    async def test_unexpected_error_does_not_end_polling(self):
        use_case = AsyncMock()
        use_case.execute.side_effect = [ValueError("corrupt row")] + [
            DispatchCycleResult() for _ in range(50)
        ]
        poller = DuePoller(use_case, interval_seconds=0.01)

        with capture_logs() as logs:
            poller.start()
            await asyncio.sleep(0.1)
            assert poller.running
            await poller.stop()

        assert use_case.execute.await_count >= 2
        assert any(entry["event"] == "dispatch_cycle_crashed" for entry in logs)

    async def test_start_with_interval_overrides_setting(self):
        use_case = AsyncMock()
        use_case.execute.return_value = DispatchCycleResult()
        poller = DuePoller(use_case, interval_seconds=30)

        poller.start(interval_seconds=0.5)

        assert poller.interval_seconds == 0.5
        await poller.stop()

    async def test_start_rejects_non_positive_interval(self):
        poller = DuePoller(AsyncMock())

        with pytest.raises(ValueError):
            poller.start(interval_seconds=0)
        assert not poller.running


@pytest.mark.asyncio
async def test_get_due_poller_uses_settings(monkeypatch):
    from followup.application.services import get_due_poller
    from followup.config import reset_settings

    monkeypatch.setenv("DISPATCH_POLL_INTERVAL_SECONDS", "5")
    monkeypatch.setenv("DISPATCH_MAX_PER_CYCLE", "7")
    reset_settings()

    poller = await get_due_poller()

    assert poller.interval_seconds == 5.0
    assert poller._use_case._max_per_cycle == 7
    assert await get_due_poller() is poller


@pytest.mark.asyncio
async def test_stop_due_poller_stops_singleton():
    from followup.application.services import get_due_poller, stop_due_poller

    poller = await get_due_poller()
    poller.start()

    await stop_due_poller()

    assert not poller.running


@pytest.mark.asyncio
async def test_stop_due_poller_without_singleton():
    from followup.application.services import stop_due_poller

    await stop_due_poller()
