"""
Due-Set Locator.

Answers "which reminders are actionable at this instant": pending
reminders whose due time is at or before the reference time.
"""

from datetime import datetime

from followup.config import get_logger
from followup.core.entities.reminder import Reminder, ReminderStatus, ensure_utc
from followup.core.interfaces.storage import DUE_ORDER, IReminderStore, ReminderQuery

logger = get_logger(__name__)


class DueSetLocator:
    """
    Read-only lookup of the due set.

    The reference time is always passed in; nothing here reads the clock.
    Store failures propagate unchanged (StoreUnavailableError).
    """

    def __init__(self, store: IReminderStore) -> None:
        self._store = store

    async def find_due(
        self,
        now: datetime,
        subject_ref: str | None = None,
        limit: int | None = None,
    ) -> list[Reminder]:
        """
        Find reminders that are pending and due at ``now``.

        Args:
            now: Reference time. Naive values are taken as UTC.
            subject_ref: Optionally restrict to a single subject.
            limit: Optionally cap the number of reminders returned.

        Returns:
            Reminders ordered by (due_at, created_at, id) ascending.
        """
        now = ensure_utc(now)
        rows = await self._store.query(
            ReminderQuery(
                status=ReminderStatus.PENDING,
                due_at_or_before=now,
                subject_ref=subject_ref,
                order_by=DUE_ORDER,
                limit=limit,
            )
        )

        # Re-check against the predicate so a store can never leak
        # non-due rows or return them out of order.
        due = sorted((r for r in rows if r.is_due(now)), key=Reminder.due_order_key)

        logger.debug("due_set_located", now=now.isoformat(), count=len(due))
        return due
