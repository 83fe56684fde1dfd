"""
Follow-up reminder entity.

A reminder is a scheduled obligation to contact a subject (customer, case)
once its due time has passed. Status moves forward only:
pending -> notified or pending -> cancelled.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ReminderStatus(str, Enum):
    """Lifecycle status of a reminder."""

    PENDING = "pending"
    NOTIFIED = "notified"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]


class ReminderPriority(str, Enum):
    """Priority of a follow-up."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Legal status transitions. Terminal statuses map to an empty set.
ALLOWED_TRANSITIONS: dict[ReminderStatus, frozenset[ReminderStatus]] = {
    ReminderStatus.PENDING: frozenset({ReminderStatus.NOTIFIED, ReminderStatus.CANCELLED}),
    ReminderStatus.NOTIFIED: frozenset(),
    ReminderStatus.CANCELLED: frozenset(),
}


def can_transition(current: ReminderStatus, target: ReminderStatus) -> bool:
    """Check whether ``current -> target`` is a legal transition."""
    return target in ALLOWED_TRANSITIONS[current]


class Reminder(BaseModel):
    """
    Follow-up reminder entity.

    subject_ref and owner_ref are opaque references owned by other
    systems (e.g. a customer id and the employee who scheduled the
    follow-up); they are only ever compared for equality.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    subject_ref: str
    title: str = ""
    description: str | None = None
    priority: ReminderPriority = ReminderPriority.MEDIUM
    owner_ref: str | None = None

    due_at: datetime
    status: ReminderStatus = ReminderStatus.PENDING
    notified_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("due_at", "notified_at", "cancelled_at", "created_at")
    @classmethod
    def normalize_utc(cls, v: datetime | None) -> datetime | None:
        """Store every timestamp as aware UTC."""
        if v is None:
            return None
        return ensure_utc(v)

    @model_validator(mode="after")
    def check_status_timestamps(self) -> "Reminder":
        """notified_at is present exactly when notified, cancelled_at exactly when cancelled."""
        if (self.status == ReminderStatus.NOTIFIED) != (self.notified_at is not None):
            raise ValueError("notified_at must be set if and only if status is 'notified'")
        if (self.status == ReminderStatus.CANCELLED) != (self.cancelled_at is not None):
            raise ValueError("cancelled_at must be set if and only if status is 'cancelled'")
        if self.notified_at is not None and self.notified_at < self.created_at:
            raise ValueError("notified_at cannot precede created_at")
        return self

    def is_due(self, now: datetime) -> bool:
        """True when the reminder belongs to the due set at ``now``."""
        return self.status == ReminderStatus.PENDING and self.due_at <= ensure_utc(now)

    def due_order_key(self) -> tuple[datetime, datetime, str]:
        """Total ordering used for due sets: due time, creation time, id."""
        return (self.due_at, self.created_at, self.id)

    def summary(self) -> dict[str, Any]:
        """Compact representation for log events."""
        return {
            "reminder_id": self.id,
            "subject_ref": self.subject_ref,
            "due_at": self.due_at.isoformat(),
            "status": self.status.value,
        }
