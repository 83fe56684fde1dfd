"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from followup.application.dto.requests import (
    CreateReminderRequest,
    PollerStartRequest,
    TransitionRequest,
)
from followup.application.dto.responses import (
    DispatchCycleResponse,
    ErrorResponse,
    HealthResponse,
    PollerStatusResponse,
    ProviderHealthResponse,
    ReminderListResponse,
    ReminderResponse,
    TransitionResponse,
)

__all__ = [
    # Requests
    "CreateReminderRequest",
    "TransitionRequest",
    "PollerStartRequest",
    # Responses
    "ReminderResponse",
    "ReminderListResponse",
    "TransitionResponse",
    "DispatchCycleResponse",
    "PollerStatusResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
