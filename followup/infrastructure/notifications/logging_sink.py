"""
Notification sink that writes deliveries to the structured log.

Stands in wherever no real transport is configured; every delivery
is reported as successful.
"""

from followup.config import get_logger
from followup.core.entities.reminder import Reminder
from followup.core.interfaces.notification import INotificationSink

logger = get_logger(__name__)


class LoggingNotificationSink(INotificationSink):
    """Logs each reminder as a delivered notification."""

    @property
    def name(self) -> str:
        return "log"

    async def deliver(self, reminder: Reminder) -> bool:
        logger.info(
            "follow_up_notification",
            sink=self.name,
            title=reminder.title,
            owner_ref=reminder.owner_ref,
            priority=reminder.priority.value,
            **reminder.summary(),
        )
        return True
