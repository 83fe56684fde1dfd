"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from followup.infrastructure.storage.sqlite.connection import ConnectionPool
from followup.infrastructure.storage.sqlite.migrations.migrator import initialize_database
from followup.infrastructure.storage.sqlite.reminder_store import SQLiteReminderStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    results = await initialize_database(temp_db_path)
    assert results and all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over the migrated database."""
    pool = ConnectionPool(db_path=migrated_db, pool_size=4, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def store(pool: ConnectionPool) -> SQLiteReminderStore:
    """Reminder store bound to the test pool."""
    return SQLiteReminderStore(pool)
