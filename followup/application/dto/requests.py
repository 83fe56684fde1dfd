"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from followup.core.entities.reminder import ReminderPriority


class CreateReminderRequest(BaseModel):
    """Request to schedule a follow-up reminder."""

    subject_ref: str = Field(..., min_length=1, description="Customer/case the follow-up concerns")
    title: str = Field(..., min_length=1, description="Reminder title")
    description: str | None = Field(default=None, description="Reminder details")
    due_at: datetime = Field(..., description="When the follow-up is due (ISO 8601, UTC if no offset)")
    priority: ReminderPriority = Field(default=ReminderPriority.MEDIUM)
    owner_ref: str | None = Field(default=None, description="Who scheduled the follow-up")
    id: str | None = Field(default=None, min_length=1, description="Explicit reminder ID")


class TransitionRequest(BaseModel):
    """Body for mark-sent and cancel; the server clock is used when ``at`` is omitted."""

    at: datetime | None = Field(default=None, description="Transition timestamp")


class PollerStartRequest(BaseModel):
    """Body for starting the background poller; the configured interval is used when omitted."""

    interval_seconds: float | None = Field(default=None, gt=0, description="Seconds between cycles")
