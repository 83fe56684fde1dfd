"""
Dispatch State Machine.

Records that a reminder was notified (or cancelled) exactly once, no
matter how many callers request the transition concurrently. The only
concurrency control is the store's conditional update: whoever gets an
affected-row count of 1 performed the transition, everyone else re-reads
the status and converges on the same terminal state.
"""

from datetime import datetime
from enum import Enum

from followup.config import get_logger
from followup.core.entities.reminder import (
    ReminderStatus,
    can_transition,
    ensure_utc,
)
from followup.core.exceptions import (
    InvalidTimestampError,
    InvalidTransitionError,
    ReminderNotFoundError,
    StoreUnavailableError,
)
from followup.core.interfaces.storage import IReminderStore

logger = get_logger(__name__)


class DispatchOutcome(str, Enum):
    """Successful result of a transition request."""

    TRANSITIONED = "transitioned"
    ALREADY_NOTIFIED = "already_notified"
    ALREADY_CANCELLED = "already_cancelled"


_ALREADY: dict[ReminderStatus, DispatchOutcome] = {
    ReminderStatus.NOTIFIED: DispatchOutcome.ALREADY_NOTIFIED,
    ReminderStatus.CANCELLED: DispatchOutcome.ALREADY_CANCELLED,
}


class DispatchStateMachine:
    """
    Drives reminder status transitions through the store.

    Failures are raised, never retried here:
    ReminderNotFoundError, InvalidTransitionError, InvalidTimestampError,
    StoreUnavailableError. Every call is safe to repeat.
    """

    def __init__(self, store: IReminderStore) -> None:
        self._store = store

    async def mark_notified(self, reminder_id: str, at: datetime) -> DispatchOutcome:
        """
        Record that ``reminder_id`` was notified at ``at``.

        A second call for an already notified reminder succeeds with
        ALREADY_NOTIFIED and leaves the first notified_at in place.

        Raises:
            ReminderNotFoundError: Unknown reminder.
            InvalidTransitionError: Reminder is cancelled.
            InvalidTimestampError: ``at`` precedes the reminder's created_at.
            StoreUnavailableError: Store could not be reached.
        """
        return await self._transition(reminder_id, ReminderStatus.NOTIFIED, at)

    async def cancel(self, reminder_id: str, at: datetime) -> DispatchOutcome:
        """
        Cancel a pending reminder.

        Cancelling twice succeeds with ALREADY_CANCELLED; cancelling a
        notified reminder raises InvalidTransitionError.
        """
        return await self._transition(reminder_id, ReminderStatus.CANCELLED, at)

    async def _transition(
        self,
        reminder_id: str,
        target: ReminderStatus,
        at: datetime,
    ) -> DispatchOutcome:
        at = ensure_utc(at)

        reminder = await self._store.get(reminder_id)
        if reminder is None:
            raise ReminderNotFoundError(reminder_id)

        if at < reminder.created_at:
            raise InvalidTimestampError(reminder_id, at, reminder.created_at)

        current = reminder.status
        if current == target:
            logger.info(
                "reminder_transition_noop",
                reminder_id=reminder_id,
                status=current.value,
            )
            return _ALREADY[target]

        if not can_transition(current, target):
            raise self._rejected(reminder_id, current, target)

        affected = await self._store.conditional_update_status(
            reminder_id, current, target, at
        )
        if affected == 1:
            logger.info(
                "reminder_transitioned",
                reminder_id=reminder_id,
                from_status=current.value,
                to_status=target.value,
                at=at.isoformat(),
            )
            return DispatchOutcome.TRANSITIONED

        # Lost the race: re-read what the winner left behind.
        latest = await self._store.read_status(reminder_id)
        if latest is None:
            raise ReminderNotFoundError(reminder_id)
        if latest == target:
            logger.info(
                "reminder_transition_lost_race",
                reminder_id=reminder_id,
                status=latest.value,
            )
            return _ALREADY[target]
        if can_transition(latest, target):
            raise StoreUnavailableError(
                "conditional_update_status",
                f"update of {reminder_id} applied to no rows while still {latest.value}",
            )
        raise self._rejected(reminder_id, latest, target)

    @staticmethod
    def _rejected(
        reminder_id: str, current: ReminderStatus, target: ReminderStatus
    ) -> InvalidTransitionError:
        logger.warning(
            "reminder_transition_rejected",
            reminder_id=reminder_id,
            from_status=current.value,
            to_status=target.value,
        )
        return InvalidTransitionError(reminder_id, current.value, target.value)
