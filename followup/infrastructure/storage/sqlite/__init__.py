"""SQLite storage implementations."""

from followup.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from followup.infrastructure.storage.sqlite.reminder_store import SQLiteReminderStore

# Aliases used by the API lifespan
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_reminder_store: SQLiteReminderStore | None = None


async def get_reminder_store() -> SQLiteReminderStore:
    """Get singleton reminder store instance."""
    global _reminder_store
    if _reminder_store is None:
        _reminder_store = SQLiteReminderStore()
    return _reminder_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteReminderStore",
    # Factory functions
    "get_reminder_store",
]
