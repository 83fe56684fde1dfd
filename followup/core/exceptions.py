"""
Domain exceptions for the follow-up dispatch service.

Provides specific exception types for different error scenarios.
"""

from datetime import datetime
from typing import Any


class FollowUpError(Exception):
    """Base exception for all follow-up service errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(FollowUpError):
    """Base exception for storage operations."""

    pass


class StoreUnavailableError(StorageError):
    """Backing store could not be reached or failed mid-operation.

    Transient: the caller may retry. Every store write is a single
    conditional statement, so a failed call either fully applied or
    did not apply at all.
    """

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Store unavailable during {operation}: {error}",
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "error": error},
        )


class DuplicateReminderError(StorageError):
    """Reminder with the same ID already exists."""

    def __init__(self, reminder_id: str):
        super().__init__(
            f"Reminder already exists: {reminder_id}",
            code="DUPLICATE_REMINDER",
            details={"reminder_id": reminder_id},
        )


# Dispatch Exceptions
class DispatchError(FollowUpError):
    """Base exception for reminder state transitions."""

    pass


class ReminderNotFoundError(DispatchError):
    """Reminder not found in storage."""

    def __init__(self, reminder_id: str):
        super().__init__(
            f"Reminder not found: {reminder_id}",
            code="REMINDER_NOT_FOUND",
            details={"reminder_id": reminder_id},
        )


class InvalidTransitionError(DispatchError):
    """Requested transition is not allowed from the reminder's current status."""

    def __init__(self, reminder_id: str, current: str, requested: str):
        super().__init__(
            f"Reminder {reminder_id} cannot move from '{current}' to '{requested}'",
            code="INVALID_TRANSITION",
            details={
                "reminder_id": reminder_id,
                "current_status": current,
                "requested_status": requested,
            },
        )


class InvalidTimestampError(DispatchError):
    """Transition timestamp precedes the reminder's creation time."""

    def __init__(self, reminder_id: str, at: datetime, created_at: datetime):
        super().__init__(
            f"Timestamp {at.isoformat()} is earlier than creation time "
            f"{created_at.isoformat()} of reminder {reminder_id}",
            code="INVALID_TIMESTAMP",
            details={
                "reminder_id": reminder_id,
                "at": at.isoformat(),
                "created_at": created_at.isoformat(),
            },
        )


# Validation Exceptions
class ValidationError(FollowUpError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(FollowUpError):
    """Configuration error."""

    pass
