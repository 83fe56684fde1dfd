"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from followup.core.entities.reminder import ReminderPriority, ReminderStatus, utc_now
from followup.core.services.dispatch import DispatchOutcome


class ReminderResponse(BaseModel):
    """Reminder response DTO."""

    id: str
    subject_ref: str
    title: str
    description: str | None = None
    priority: ReminderPriority
    owner_ref: str | None = None
    due_at: datetime
    status: ReminderStatus
    notified_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime


class ReminderListResponse(BaseModel):
    """List of reminders."""

    reminders: list[ReminderResponse]
    total: int = Field(..., description="Reminders matching the filters, ignoring limit and offset")


class TransitionResponse(BaseModel):
    """Result of a mark-sent or cancel request."""

    id: str
    outcome: DispatchOutcome
    status: ReminderStatus


class DispatchCycleResponse(BaseModel):
    """Counts from a dispatch cycle."""

    due: int = Field(..., description="Reminders in the due set")
    notified: int = Field(..., description="Reminders notified by this cycle")
    already_notified: int = Field(..., description="Delivered but another caller recorded first")
    skipped: int = Field(..., description="No longer pending when reached")
    delivery_failed: int = Field(..., description="Sink reported failure; left pending")
    record_failed: int = Field(..., description="Store errors while recording")
    notified_ids: list[str] = Field(default_factory=list)
    failed_ids: list[str] = Field(default_factory=list)


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. REMINDER_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=utc_now)


class PollerStatusResponse(BaseModel):
    """Background poller state."""

    running: bool
    interval_seconds: float
