"""
SQLite implementation of reminder storage.

Status changes go through a single conditional UPDATE so concurrent
dispatchers cannot both win the same transition.
"""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime

import aiosqlite

from followup.config import get_logger
from followup.core.entities.reminder import (
    Reminder,
    ReminderPriority,
    ReminderStatus,
    ensure_utc,
)
from followup.core.exceptions import DuplicateReminderError, StoreUnavailableError
from followup.core.interfaces.storage import IReminderStore, ReminderQuery
from followup.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# Timestamp column written by each terminal transition.
_TRANSITION_COLUMNS: dict[ReminderStatus, str] = {
    ReminderStatus.NOTIFIED: "notified_at",
    ReminderStatus.CANCELLED: "cancelled_at",
}


def _to_db(value: datetime | None) -> str | None:
    """Format as fixed-width UTC text; lexical order equals time order."""
    if value is None:
        return None
    return ensure_utc(value).strftime(_TS_FORMAT)


def _from_db(value: str | None) -> datetime | None:
    if not value:
        return None
    return ensure_utc(datetime.fromisoformat(value))


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver and filesystem failures into StoreUnavailableError."""
    try:
        yield
    except (aiosqlite.Error, OSError) as e:
        logger.error("reminder_store_unavailable", operation=operation, error=str(e))
        raise StoreUnavailableError(operation, str(e)) from e


class SQLiteReminderStore(IReminderStore):
    """SQLite implementation of reminder storage."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._pool is None:
            async with get_connection() as conn:
                yield conn
        else:
            async with self._pool.acquire() as conn:
                yield conn

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._pool is None:
            async with get_transaction() as conn:
                yield conn
        else:
            async with self._pool.transaction() as conn:
                yield conn

    async def create(self, reminder: Reminder) -> Reminder:
        """Insert a new reminder."""
        with _store_errors("create"):
            try:
                async with self._transaction() as conn:
                    await conn.execute(
                        """
                        INSERT INTO reminders (
                            id, subject_ref, title, description, priority,
                            owner_ref, due_at, status, notified_at,
                            cancelled_at, created_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            reminder.id,
                            reminder.subject_ref,
                            reminder.title,
                            reminder.description,
                            reminder.priority.value,
                            reminder.owner_ref,
                            _to_db(reminder.due_at),
                            reminder.status.value,
                            _to_db(reminder.notified_at),
                            _to_db(reminder.cancelled_at),
                            _to_db(reminder.created_at),
                        ),
                    )
            except aiosqlite.IntegrityError as e:
                raise DuplicateReminderError(reminder.id) from e

        logger.info("reminder_created", **reminder.summary())
        return reminder

    async def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID."""
        with _store_errors("get"):
            async with self._connection() as conn:
                async with conn.execute(
                    "SELECT * FROM reminders WHERE id = ?", (reminder_id,)
                ) as cursor:
                    row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_entity(row)

    async def read_status(self, reminder_id: str) -> ReminderStatus | None:
        """Read only the status column."""
        with _store_errors("read_status"):
            async with self._connection() as conn:
                async with conn.execute(
                    "SELECT status FROM reminders WHERE id = ?", (reminder_id,)
                ) as cursor:
                    row = await cursor.fetchone()
        if row is None:
            return None
        return ReminderStatus(row["status"])

    async def conditional_update_status(
        self,
        reminder_id: str,
        expected: ReminderStatus,
        new: ReminderStatus,
        changed_at: datetime,
    ) -> int:
        """Compare-and-set the status in one UPDATE statement."""
        column = _TRANSITION_COLUMNS.get(new)
        if column is None:
            raise ValueError(f"No transition writes status '{new.value}'")

        with _store_errors("conditional_update_status"):
            async with self._transaction() as conn:
                cursor = await conn.execute(
                    f"""
                    UPDATE reminders
                    SET status = ?, {column} = ?
                    WHERE id = ? AND status = ?
                    """,
                    (new.value, _to_db(changed_at), reminder_id, expected.value),
                )
                affected = cursor.rowcount

        logger.debug(
            "reminder_conditional_update",
            reminder_id=reminder_id,
            expected=expected.value,
            new=new.value,
            affected=affected,
        )
        return affected

    @staticmethod
    def _where(criteria: ReminderQuery) -> tuple[str, list[object]]:
        """Build the WHERE clause and its parameters for ``criteria``."""
        clauses: list[str] = []
        params: list[object] = []

        if criteria.status is not None:
            clauses.append("status = ?")
            params.append(criteria.status.value)
        if criteria.due_at_or_before is not None:
            clauses.append("due_at <= ?")
            params.append(_to_db(criteria.due_at_or_before))
        if criteria.subject_ref is not None:
            clauses.append("subject_ref = ?")
            params.append(criteria.subject_ref)
        if criteria.owner_ref is not None:
            clauses.append("owner_ref = ?")
            params.append(criteria.owner_ref)

        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    async def query(self, criteria: ReminderQuery) -> list[Reminder]:
        """Select reminders by predicate, ordered as requested."""
        where, params = self._where(criteria)
        sql = "SELECT * FROM reminders" + where
        # order_by is validated against SORTABLE_FIELDS by ReminderQuery
        if criteria.order_by:
            sql += " ORDER BY " + ", ".join(f"{col} ASC" for col in criteria.order_by)
        if criteria.limit is not None or criteria.offset:
            sql += " LIMIT ? OFFSET ?"
            params.extend([criteria.limit if criteria.limit is not None else -1, criteria.offset])

        with _store_errors("query"):
            async with self._connection() as conn:
                cursor = await conn.execute(sql, params)
                rows = await cursor.fetchall()
        return [self._row_to_entity(row) for row in rows]

    async def count(self, criteria: ReminderQuery) -> int:
        """Count reminders matching the predicate, ignoring limit and offset."""
        where, params = self._where(criteria)
        with _store_errors("count"):
            async with self._connection() as conn:
                cursor = await conn.execute("SELECT COUNT(*) FROM reminders" + where, params)
                row = await cursor.fetchone()
        return row[0]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Reminder:
        """Convert a database row to a Reminder entity."""
        return Reminder(
            id=row["id"],
            subject_ref=row["subject_ref"],
            title=row["title"] or "",
            description=row["description"],
            priority=ReminderPriority(row["priority"]),
            owner_ref=row["owner_ref"],
            due_at=_from_db(row["due_at"]),
            status=ReminderStatus(row["status"]),
            notified_at=_from_db(row["notified_at"]),
            cancelled_at=_from_db(row["cancelled_at"]),
            created_at=_from_db(row["created_at"]),
        )
