"""Tests for LoggingNotificationSink."""

from datetime import UTC, datetime

from structlog.testing import capture_logs

from followup.core.entities.reminder import Reminder, ReminderPriority
from followup.infrastructure.notifications import LoggingNotificationSink, get_notification_sink


async def test_deliver_logs_and_confirms():
    sink = LoggingNotificationSink()
    reminder = Reminder(
        id="r1",
        subject_ref="customer-7",
        title="Call about renewal",
        owner_ref="agent-2",
        priority=ReminderPriority.HIGH,
        due_at=datetime(2024, 5, 1, 9, 0, tzinfo=UTC),
    )

    with capture_logs() as logs:
        delivered = await sink.deliver(reminder)

    assert delivered is True
    event = next(e for e in logs if e["event"] == "follow_up_notification")
    assert event["reminder_id"] == "r1"
    assert event["subject_ref"] == "customer-7"
    assert event["owner_ref"] == "agent-2"
    assert event["priority"] == "high"
    assert event["sink"] == "log"


def test_singleton():
    assert get_notification_sink() is get_notification_sink()
    assert get_notification_sink().name == "log"
