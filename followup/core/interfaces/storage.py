"""
Abstract interfaces for storage providers.

Defines the contract the dispatch core needs from a reminder store.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from followup.core.entities.reminder import Reminder, ReminderStatus

# Columns a query may sort by, in the order the due set uses them.
DUE_ORDER: tuple[str, ...] = ("due_at", "created_at", "id")
SORTABLE_FIELDS = frozenset({"due_at", "created_at", "id", "subject_ref"})


@dataclass
class ReminderQuery:
    """
    Predicate and ordering for ``IReminderStore.query``.

    All predicates are combined with AND. ``None`` means "no constraint".
    ``due_at_or_before`` is an inclusive bound.
    """

    status: ReminderStatus | None = None
    due_at_or_before: datetime | None = None
    subject_ref: str | None = None
    owner_ref: str | None = None
    order_by: tuple[str, ...] = DUE_ORDER
    limit: int | None = None
    offset: int = 0

    def __post_init__(self) -> None:
        unknown = [f for f in self.order_by if f not in SORTABLE_FIELDS]
        if unknown:
            raise ValueError(f"Unsupported sort fields: {', '.join(unknown)}")


class IReminderStore(ABC):
    """
    Abstract interface for reminder storage.

    Implementations must make ``conditional_update_status`` a single
    atomic compare-and-set.
    """

    @abstractmethod
    async def create(self, reminder: Reminder) -> Reminder:
        """Persist a new reminder."""
        pass

    @abstractmethod
    async def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID."""
        pass

    @abstractmethod
    async def read_status(self, reminder_id: str) -> ReminderStatus | None:
        """Read the current status, or None if the reminder does not exist."""
        pass

    @abstractmethod
    async def conditional_update_status(
        self,
        reminder_id: str,
        expected: ReminderStatus,
        new: ReminderStatus,
        changed_at: datetime,
    ) -> int:
        """
        Atomically move ``reminder_id`` from ``expected`` to ``new``.

        ``changed_at`` is recorded as notified_at or cancelled_at
        depending on ``new``.

        Returns:
            Number of affected rows (0 or 1).
        """
        pass

    @abstractmethod
    async def query(self, criteria: ReminderQuery) -> list[Reminder]:
        """Return reminders matching ``criteria`` in the requested order."""
        pass

    @abstractmethod
    async def count(self, criteria: ReminderQuery) -> int:
        """Count reminders matching the predicate of ``criteria``; limit and offset are ignored."""
        pass
