"""Core domain entities."""

from followup.core.entities.reminder import (
    ALLOWED_TRANSITIONS,
    Reminder,
    ReminderPriority,
    ReminderStatus,
    can_transition,
    ensure_utc,
    utc_now,
)

__all__ = [
    "Reminder",
    "ReminderStatus",
    "ReminderPriority",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "ensure_utc",
    "utc_now",
]
