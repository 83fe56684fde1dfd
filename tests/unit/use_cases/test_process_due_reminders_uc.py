"""Unit tests for ProcessDueRemindersUseCase."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from followup.application.use_cases.process_due_reminders import (
    DispatchCycleResult,
    ProcessDueRemindersUseCase,
)
from followup.core.entities.reminder import Reminder, ReminderStatus
from followup.core.exceptions import StoreUnavailableError

NOW = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


def _make_reminder(reminder_id: str, hours_overdue: int = 1) -> Reminder:
    """Create a pending reminder that is due at NOW."""
    return Reminder(
        id=reminder_id,
        subject_ref=f"customer-{reminder_id}",
        title="Follow up",
        due_at=NOW - timedelta(hours=hours_overdue),
        created_at=NOW - timedelta(days=2),
    )


def _make_store(reminders: list[Reminder]) -> AsyncMock:
    """Mock store where every reminder is pending and every update wins."""
    by_id = {r.id: r for r in reminders}
    store = AsyncMock()
    store.query = AsyncMock(return_value=list(reminders))
    store.read_status = AsyncMock(return_value=ReminderStatus.PENDING)
    store.get = AsyncMock(side_effect=lambda reminder_id: by_id.get(reminder_id))
    store.conditional_update_status = AsyncMock(return_value=1)
    return store


def _make_sink(delivered: bool = True) -> AsyncMock:
    sink = AsyncMock()
    sink.name = "test"
    sink.deliver = AsyncMock(return_value=delivered)
    return sink


class TestProcessDueReminders:
    """Tests for ProcessDueRemindersUseCase."""

    @pytest.mark.asyncio
    async def test_no_due_reminders(self):
        store = _make_store([])
        sink = _make_sink()

        result = await ProcessDueRemindersUseCase(store, sink).execute(NOW)

        assert result == DispatchCycleResult()
        sink.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delivers_and_records_each_due_reminder(self):
        reminders = [_make_reminder("a", 3), _make_reminder("b", 1)]
        store = _make_store(reminders)
        sink = _make_sink()

        result = await ProcessDueRemindersUseCase(store, sink, clock=lambda: NOW).execute(NOW)

        assert result.due == 2
        assert result.notified == 2
        assert result.notified_ids == ["a", "b"]
        assert [c.args[0].id for c in sink.deliver.await_args_list] == ["a", "b"]
        store.conditional_update_status.assert_any_await(
            "a", ReminderStatus.PENDING, ReminderStatus.NOTIFIED, NOW
        )

    @pytest.mark.asyncio
    async def test_uses_clock_when_now_omitted(self):
        store = _make_store([])

        await ProcessDueRemindersUseCase(store, _make_sink(), clock=lambda: NOW).execute()

        criteria = store.query.call_args.args[0]
        assert criteria.due_at_or_before == NOW

    @pytest.mark.asyncio
    async def test_max_per_cycle_limits_query(self):
        store = _make_store([])

        await ProcessDueRemindersUseCase(store, _make_sink(), max_per_cycle=10).execute(NOW)

        assert store.query.call_args.args[0].limit == 10

    @pytest.mark.asyncio
    async def test_failed_delivery_leaves_reminder_pending(self):
        store = _make_store([_make_reminder("a")])

        result = await ProcessDueRemindersUseCase(store, _make_sink(delivered=False)).execute(NOW)

        assert result.delivery_failed == 1
        assert result.failed_ids == ["a"]
        assert result.notified == 0
        store.conditional_update_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sink_exception_is_a_failed_delivery(self):
        store = _make_store([_make_reminder("a"), _make_reminder("b")])
        sink = _make_sink()
        sink.deliver.side_effect = [ConnectionError("smtp down"), True]

        result = await ProcessDueRemindersUseCase(store, sink, clock=lambda: NOW).execute(NOW)

        assert result.delivery_failed == 1
        assert result.notified == 1
        assert result.failed_ids == ["a"]
        assert result.notified_ids == ["b"]

    @pytest.mark.asyncio
    async def test_skips_reminder_no_longer_pending(self):
        """A concurrent cycle notified it after the due set was taken."""
        store = _make_store([_make_reminder("a")])
        store.read_status.return_value = ReminderStatus.NOTIFIED
        sink = _make_sink()

        result = await ProcessDueRemindersUseCase(store, sink).execute(NOW)

        assert result.skipped == 1
        sink.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_counts_as_already_notified(self):
        store = _make_store([_make_reminder("a")])
        store.conditional_update_status.return_value = 0
        store.read_status.side_effect = [ReminderStatus.PENDING, ReminderStatus.NOTIFIED]

        result = await ProcessDueRemindersUseCase(store, _make_sink(), clock=lambda: NOW).execute(NOW)

        assert result.already_notified == 1
        assert result.notified == 0

    @pytest.mark.asyncio
    async def test_record_failure_does_not_stop_cycle(self):
        store = _make_store([_make_reminder("a"), _make_reminder("b")])
        store.conditional_update_status.side_effect = [
            StoreUnavailableError("conditional_update_status", "database is locked"),
            1,
        ]

        result = await ProcessDueRemindersUseCase(store, _make_sink(), clock=lambda: NOW).execute(NOW)

        assert result.record_failed == 1
        assert result.failed_ids == ["a"]
        assert result.notified_ids == ["b"]

    @pytest.mark.asyncio
    async def test_status_check_failure_is_recorded(self):
        store = _make_store([_make_reminder("a")])
        store.read_status.side_effect = StoreUnavailableError("read_status", "disk I/O error")
        sink = _make_sink()

        result = await ProcessDueRemindersUseCase(store, sink).execute(NOW)

        assert result.record_failed == 1
        sink.deliver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unavailable_due_set_propagates(self):
        store = _make_store([])
        store.query.side_effect = StoreUnavailableError("query", "unable to open database file")

        with pytest.raises(StoreUnavailableError):
            await ProcessDueRemindersUseCase(store, _make_sink()).execute(NOW)
