#!/usr/bin/env python3
"""
Follow-up reminder dispatch management CLI.

Usage:
    python manage.py serve           Start the API server
    python manage.py migrate         Apply pending database migrations
    python manage.py status          Show migration status and schema checks
    python manage.py due             List reminders that are due now
    python manage.py process         Run one dispatch cycle
"""

import argparse
import asyncio
import sys
from datetime import datetime

from followup.config import configure_logging, get_settings


def _parse_now(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO 8601 timestamp: {value}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn with the API application."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "followup.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from followup.infrastructure.storage.sqlite.migrations import run_migrations

    results = asyncio.run(run_migrations())
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        mark = "ok" if result.success else "FAILED"
        print(f"  v{result.version} {result.name}: {mark} ({result.execution_time_ms:.1f}ms)")
        if result.error:
            print(f"    {result.error}")

    if not all(r.success for r in results):
        sys.exit(1)


def cmd_status(args: argparse.Namespace) -> None:
    """Show migration status and schema integrity."""
    from followup.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        verify_schema_integrity,
    )

    status = asyncio.run(get_migration_status())
    if not status["exists"]:
        print(f"Database not found at {get_settings().storage.db_path}. Run 'migrate'.")
        return

    print(f"Current version: {status['current_version']}")
    print(f"Applied: {status['applied_migrations']}")
    print(f"Pending: {status['pending_migrations'] or 'none'}")

    for check in asyncio.run(verify_schema_integrity()):
        print(f"  {check['check']}: {check['status']}")


async def _due(now: datetime | None, subject_ref: str | None, limit: int | None) -> None:
    from followup.application.services import get_due_locator
    from followup.core.entities.reminder import utc_now
    from followup.infrastructure.storage.sqlite import close_connection_pool
    from followup.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations()
    try:
        locator = await get_due_locator()
        due = await locator.find_due(now or utc_now(), subject_ref=subject_ref, limit=limit)
    finally:
        await close_connection_pool()

    if not due:
        print("No reminders are due.")
        return
    for reminder in due:
        print(f"  {reminder.due_at.isoformat()}  {reminder.id}  {reminder.subject_ref}  {reminder.title}")
    print(f"{len(due)} due.")


def cmd_due(args: argparse.Namespace) -> None:
    """List the due set."""
    asyncio.run(_due(args.now, args.subject, args.limit))


async def _process(now: datetime | None) -> None:
    from followup.application.services import get_process_due_use_case
    from followup.infrastructure.storage.sqlite import close_connection_pool
    from followup.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations()
    try:
        use_case = await get_process_due_use_case()
        result = await use_case.execute(now)
    finally:
        await close_connection_pool()

    print(
        f"due={result.due} notified={result.notified} "
        f"already_notified={result.already_notified} skipped={result.skipped} "
        f"delivery_failed={result.delivery_failed} record_failed={result.record_failed}"
    )
    if result.failed_ids:
        print(f"Left pending: {', '.join(result.failed_ids)}")


def cmd_process(args: argparse.Namespace) -> None:
    """Run a single dispatch cycle."""
    asyncio.run(_process(args.now))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Follow-up reminder dispatch management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.set_defaults(func=cmd_status)

    # due
    p_due = sub.add_parser("due", help="List due reminders")
    p_due.add_argument("--now", type=_parse_now, default=None, help="Reference time (ISO 8601, default: now)")
    p_due.add_argument("--subject", default=None, help="Only reminders for this subject")
    p_due.add_argument("--limit", type=int, default=None, help="Maximum reminders to list")
    p_due.set_defaults(func=cmd_due)

    # process
    p_process = sub.add_parser("process", help="Run one dispatch cycle")
    p_process.add_argument("--now", type=_parse_now, default=None, help="Reference time (ISO 8601, default: now)")
    p_process.set_defaults(func=cmd_process)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
