"""Tests for Reminder entity."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from followup.core.entities.reminder import (
    ALLOWED_TRANSITIONS,
    Reminder,
    ReminderPriority,
    ReminderStatus,
    can_transition,
)

T0 = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


class TestReminder:
    """Tests for Reminder entity."""

    def test_create_minimal(self):
        """Test creating a reminder with minimal fields."""
        reminder = Reminder(subject_ref="customer-7", due_at=T0)
        assert reminder.subject_ref == "customer-7"
        assert reminder.status == ReminderStatus.PENDING
        assert reminder.priority == ReminderPriority.MEDIUM
        assert reminder.title == ""
        assert reminder.notified_at is None
        assert reminder.cancelled_at is None
        assert len(reminder.id) == 32

    def test_generated_ids_are_unique(self):
        a = Reminder(subject_ref="s", due_at=T0)
        b = Reminder(subject_ref="s", due_at=T0)
        assert a.id != b.id

    def test_naive_timestamps_are_taken_as_utc(self):
        reminder = Reminder(
            subject_ref="s",
            due_at=datetime(2024, 5, 1, 9, 0),
            created_at=datetime(2024, 4, 30, 8, 0),
        )
        assert reminder.due_at == T0
        assert reminder.due_at.tzinfo is UTC

    def test_offset_timestamps_are_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        reminder = Reminder(subject_ref="s", due_at=datetime(2024, 5, 1, 11, 0, tzinfo=plus_two))
        assert reminder.due_at == T0
        assert reminder.due_at.utcoffset() == timedelta(0)

    def test_notified_requires_notified_at(self):
        with pytest.raises(ValidationError):
            Reminder(subject_ref="s", due_at=T0, status=ReminderStatus.NOTIFIED)

    def test_pending_rejects_notified_at(self):
        with pytest.raises(ValidationError):
            Reminder(subject_ref="s", due_at=T0, created_at=T0, notified_at=T0)

    def test_cancelled_requires_cancelled_at(self):
        with pytest.raises(ValidationError):
            Reminder(subject_ref="s", due_at=T0, status=ReminderStatus.CANCELLED)

    def test_notified_at_cannot_precede_created_at(self):
        with pytest.raises(ValidationError):
            Reminder(
                subject_ref="s",
                due_at=T0,
                created_at=T0,
                status=ReminderStatus.NOTIFIED,
                notified_at=T0 - timedelta(seconds=1),
            )

    def test_notified_reminder_is_valid(self):
        reminder = Reminder(
            subject_ref="s",
            due_at=T0,
            created_at=T0,
            status=ReminderStatus.NOTIFIED,
            notified_at=T0 + timedelta(minutes=5),
        )
        assert reminder.status.is_terminal


class TestIsDue:
    """Tests for Reminder.is_due()."""

    def test_due_exactly_at_now(self):
        """The due bound is inclusive."""
        reminder = Reminder(subject_ref="s", due_at=T0, created_at=T0 - timedelta(days=1))
        assert reminder.is_due(T0) is True

    def test_not_due_before_due_at(self):
        reminder = Reminder(subject_ref="s", due_at=T0, created_at=T0 - timedelta(days=1))
        assert reminder.is_due(T0 - timedelta(microseconds=1)) is False

    def test_past_due(self):
        reminder = Reminder(subject_ref="s", due_at=T0, created_at=T0 - timedelta(days=1))
        assert reminder.is_due(T0 + timedelta(days=30)) is True

    def test_terminal_reminders_are_never_due(self):
        created = T0 - timedelta(days=1)
        notified = Reminder(
            subject_ref="s",
            due_at=T0,
            created_at=created,
            status=ReminderStatus.NOTIFIED,
            notified_at=T0,
        )
        cancelled = Reminder(
            subject_ref="s",
            due_at=T0,
            created_at=created,
            status=ReminderStatus.CANCELLED,
            cancelled_at=T0,
        )
        later = T0 + timedelta(days=1)
        assert notified.is_due(later) is False
        assert cancelled.is_due(later) is False

    def test_naive_now_is_taken_as_utc(self):
        reminder = Reminder(subject_ref="s", due_at=T0, created_at=T0 - timedelta(days=1))
        assert reminder.is_due(datetime(2024, 5, 1, 9, 0)) is True


class TestOrdering:
    """Tests for the due-set ordering key."""

    def test_ties_on_due_at_break_by_created_at_then_id(self):
        a = Reminder(id="b", subject_ref="s", due_at=T0, created_at=T0 - timedelta(hours=2))
        b = Reminder(id="a", subject_ref="s", due_at=T0, created_at=T0 - timedelta(hours=1))
        c = Reminder(id="c", subject_ref="s", due_at=T0, created_at=T0 - timedelta(hours=1))
        d = Reminder(id="0", subject_ref="s", due_at=T0 + timedelta(seconds=1), created_at=T0)

        ordered = sorted([d, c, b, a], key=Reminder.due_order_key)
        assert [r.id for r in ordered] == ["b", "a", "c", "0"]

    def test_summary(self):
        reminder = Reminder(id="r1", subject_ref="customer-7", due_at=T0)
        assert reminder.summary() == {
            "reminder_id": "r1",
            "subject_ref": "customer-7",
            "due_at": T0.isoformat(),
            "status": "pending",
        }


class TestTransitions:
    """Tests for the status transition table."""

    @pytest.mark.parametrize(
        "target",
        [ReminderStatus.NOTIFIED, ReminderStatus.CANCELLED],
    )
    def test_pending_can_leave(self, target):
        assert can_transition(ReminderStatus.PENDING, target)

    @pytest.mark.parametrize("current", [ReminderStatus.NOTIFIED, ReminderStatus.CANCELLED])
    @pytest.mark.parametrize("target", list(ReminderStatus))
    def test_terminal_statuses_are_final(self, current, target):
        assert not can_transition(current, target)
        assert current.is_terminal

    def test_pending_cannot_return_to_pending(self):
        assert not can_transition(ReminderStatus.PENDING, ReminderStatus.PENDING)
        assert not ReminderStatus.PENDING.is_terminal

    def test_table_covers_every_status(self):
        assert set(ALLOWED_TRANSITIONS) == set(ReminderStatus)

