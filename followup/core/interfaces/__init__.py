"""Core interfaces (ports) for dependency injection."""

from followup.core.interfaces.notification import INotificationSink
from followup.core.interfaces.storage import (
    DUE_ORDER,
    SORTABLE_FIELDS,
    IReminderStore,
    ReminderQuery,
)

__all__ = [
    # Storage interfaces
    "IReminderStore",
    "ReminderQuery",
    "DUE_ORDER",
    "SORTABLE_FIELDS",
    # Notification interfaces
    "INotificationSink",
]
