"""
Process Due Reminders Use Case.

One dispatch cycle: locate the due set, deliver each reminder through
the notification sink, and record confirmed deliveries with the
dispatch state machine. This is the caller that composes the core;
retry policy for failures lives here (a failed reminder stays pending
and is picked up by the next cycle).
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from followup.config import get_logger
from followup.core.entities.reminder import Reminder, ReminderStatus, utc_now
from followup.core.exceptions import FollowUpError
from followup.core.interfaces.notification import INotificationSink
from followup.core.interfaces.storage import IReminderStore
from followup.core.services.dispatch import DispatchOutcome, DispatchStateMachine
from followup.core.services.due_locator import DueSetLocator

logger = get_logger(__name__)


@dataclass
class DispatchCycleResult:
    """Counts for a single dispatch cycle."""

    due: int = 0
    notified: int = 0
    already_notified: int = 0
    skipped: int = 0
    delivery_failed: int = 0
    record_failed: int = 0
    notified_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)


class ProcessDueRemindersUseCase:
    """
    Use case for running one locate -> deliver -> record cycle.

    Before delivering, each reminder's status is re-read so a reminder
    notified by a concurrent cycle since the due set was taken is not
    delivered a second time.
    """

    def __init__(
        self,
        reminder_store: IReminderStore,
        sink: INotificationSink,
        max_per_cycle: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = reminder_store
        self._sink = sink
        self._max_per_cycle = max_per_cycle
        self._clock = clock
        self._locator = DueSetLocator(reminder_store)
        self._machine = DispatchStateMachine(reminder_store)

    async def execute(self, now: datetime | None = None) -> DispatchCycleResult:
        """
        Run a dispatch cycle.

        Args:
            now: Reference time for the due set (defaults to the clock).

        Returns:
            DispatchCycleResult with per-outcome counts.

        Raises:
            StoreUnavailableError: The due set could not be read.
        """
        now = now or self._clock()
        due = await self._locator.find_due(now, limit=self._max_per_cycle)

        result = DispatchCycleResult(due=len(due))
        for reminder in due:
            await self._dispatch_one(reminder, result)

        logger.info(
            "dispatch_cycle_complete",
            now=now.isoformat(),
            due=result.due,
            notified=result.notified,
            already_notified=result.already_notified,
            skipped=result.skipped,
            delivery_failed=result.delivery_failed,
            record_failed=result.record_failed,
        )
        return result

    async def _dispatch_one(self, reminder: Reminder, result: DispatchCycleResult) -> None:
        try:
            status = await self._store.read_status(reminder.id)
        except FollowUpError as e:
            logger.warning("dispatch_status_check_failed", reminder_id=reminder.id, error=str(e))
            result.record_failed += 1
            result.failed_ids.append(reminder.id)
            return

        if status != ReminderStatus.PENDING:
            result.skipped += 1
            return

        try:
            delivered = await self._sink.deliver(reminder)
        except Exception:
            logger.warning(
                "dispatch_delivery_error",
                reminder_id=reminder.id,
                sink=self._sink.name,
                exc_info=True,
            )
            delivered = False

        if not delivered:
            result.delivery_failed += 1
            result.failed_ids.append(reminder.id)
            return

        try:
            outcome = await self._machine.mark_notified(reminder.id, self._clock())
        except FollowUpError as e:
            # Delivered but not recorded: the next cycle re-checks status
            # before delivering again.
            logger.error(
                "dispatch_record_failed",
                reminder_id=reminder.id,
                error_code=e.code,
                error=e.message,
            )
            result.record_failed += 1
            result.failed_ids.append(reminder.id)
            return

        if outcome == DispatchOutcome.TRANSITIONED:
            result.notified += 1
            result.notified_ids.append(reminder.id)
        else:
            result.already_notified += 1
