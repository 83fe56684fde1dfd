"""
Schedule Reminder Use Case.

Creates a new pending follow-up reminder for a subject.
"""

from collections.abc import Callable
from datetime import datetime

from followup.config import get_logger
from followup.core.entities.reminder import Reminder, ReminderPriority, utc_now
from followup.core.exceptions import ValidationError
from followup.core.interfaces.storage import IReminderStore

logger = get_logger(__name__)


class ScheduleReminderUseCase:
    """Use case for scheduling a follow-up reminder."""

    def __init__(
        self,
        reminder_store: IReminderStore | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = reminder_store
        self._clock = clock

    async def _get_store(self) -> IReminderStore:
        if self._store is None:
            from followup.infrastructure.storage.sqlite import get_reminder_store
            self._store = await get_reminder_store()
        return self._store

    async def execute(
        self,
        subject_ref: str,
        due_at: datetime,
        title: str,
        description: str | None = None,
        priority: ReminderPriority = ReminderPriority.MEDIUM,
        owner_ref: str | None = None,
        reminder_id: str | None = None,
    ) -> Reminder:
        """
        Create a pending reminder.

        Args:
            subject_ref: Reference to the customer/case to follow up with.
            due_at: When the follow-up becomes actionable.
            title: Short label shown in the notification.
            description: Optional details.
            priority: Follow-up priority.
            owner_ref: Who scheduled it (receives the notification).
            reminder_id: Explicit ID; generated when omitted.

        Returns:
            The stored reminder.
        """
        if not subject_ref.strip():
            raise ValidationError("subject_ref", "must not be empty", subject_ref)
        if not title.strip():
            raise ValidationError("title", "must not be empty", title)

        fields = {
            "subject_ref": subject_ref.strip(),
            "title": title.strip(),
            "description": description,
            "priority": priority,
            "owner_ref": owner_ref,
            "due_at": due_at,
            "created_at": self._clock(),
        }
        if reminder_id is not None:
            fields["id"] = reminder_id

        store = await self._get_store()
        created = await store.create(Reminder(**fields))

        logger.info(
            "reminder_scheduled",
            reminder_id=created.id,
            subject_ref=created.subject_ref,
            due_at=created.due_at.isoformat(),
        )
        return created
