"""Fixtures for core service tests."""

from dataclasses import replace

import pytest

from followup.core.entities.reminder import Reminder, ReminderStatus
from followup.core.exceptions import DuplicateReminderError
from followup.core.interfaces.storage import IReminderStore, ReminderQuery


class InMemoryReminderStore(IReminderStore):
    """Dict-backed store with the same compare-and-set contract as SQLite."""

    def __init__(self) -> None:
        self.rows: dict[str, Reminder] = {}
        self.update_calls = 0

    async def create(self, reminder: Reminder) -> Reminder:
        if reminder.id in self.rows:
            raise DuplicateReminderError(reminder.id)
        self.rows[reminder.id] = reminder
        return reminder

    async def get(self, reminder_id: str) -> Reminder | None:
        return self.rows.get(reminder_id)

    async def read_status(self, reminder_id: str) -> ReminderStatus | None:
        row = self.rows.get(reminder_id)
        return row.status if row else None

    async def conditional_update_status(self, reminder_id, expected, new, changed_at) -> int:
        self.update_calls += 1
        row = self.rows.get(reminder_id)
        if row is None or row.status != expected:
            return 0
        column = "notified_at" if new == ReminderStatus.NOTIFIED else "cancelled_at"
        self.rows[reminder_id] = row.model_copy(update={"status": new, column: changed_at})
        return 1

    async def query(self, criteria: ReminderQuery) -> list[Reminder]:
        rows = [
            r
            for r in self.rows.values()
            if (criteria.status is None or r.status == criteria.status)
            and (criteria.due_at_or_before is None or r.due_at <= criteria.due_at_or_before)
            and (criteria.subject_ref is None or r.subject_ref == criteria.subject_ref)
            and (criteria.owner_ref is None or r.owner_ref == criteria.owner_ref)
        ]
        rows.sort(key=lambda r: tuple(getattr(r, f) for f in criteria.order_by))
        end = None if criteria.limit is None else criteria.offset + criteria.limit
        return rows[criteria.offset:end]

    async def count(self, criteria: ReminderQuery) -> int:
        return len(await self.query(replace(criteria, limit=None, offset=0)))


@pytest.fixture
def memory_store() -> InMemoryReminderStore:
    return InMemoryReminderStore()
