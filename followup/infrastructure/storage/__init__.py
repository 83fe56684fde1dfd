"""Storage infrastructure implementations."""

from followup.infrastructure.storage.sqlite import (
    SQLiteReminderStore,
    close_pool,
    get_connection,
    get_pool,
    get_reminder_store,
    get_transaction,
)

__all__ = [
    "SQLiteReminderStore",
    "get_reminder_store",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
