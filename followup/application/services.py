"""
Service factory functions for dependency injection.

Wires the SQLite store and the configured notification sink to the
core services and the dispatch cycle.
"""

from typing import TYPE_CHECKING

from followup.application.poller import DuePoller
from followup.application.use_cases.process_due_reminders import ProcessDueRemindersUseCase
from followup.config import get_settings
from followup.core.services import DispatchStateMachine, DueSetLocator

if TYPE_CHECKING:
    from followup.core.interfaces import INotificationSink, IReminderStore


# Singleton instances
_poller: DuePoller | None = None


async def _default_store() -> "IReminderStore":
    # Lazy import infrastructure to avoid circular imports
    from followup.infrastructure.storage.sqlite import get_reminder_store

    return await get_reminder_store()


async def get_due_locator(store: "IReminderStore | None" = None) -> DueSetLocator:
    """Create a DueSetLocator over the given (or default) store."""
    return DueSetLocator(store or await _default_store())


async def get_dispatch_state_machine(
    store: "IReminderStore | None" = None,
) -> DispatchStateMachine:
    """Create a DispatchStateMachine over the given (or default) store."""
    return DispatchStateMachine(store or await _default_store())


async def get_process_due_use_case(
    store: "IReminderStore | None" = None,
    sink: "INotificationSink | None" = None,
) -> ProcessDueRemindersUseCase:
    """
    Create the dispatch cycle use case.

    Args:
        store: Optional reminder store override
        sink: Optional notification sink override

    Returns:
        Configured ProcessDueRemindersUseCase
    """
    if sink is None:
        from followup.infrastructure.notifications import get_notification_sink

        sink = get_notification_sink()

    return ProcessDueRemindersUseCase(
        reminder_store=store or await _default_store(),
        sink=sink,
        max_per_cycle=get_settings().dispatch.max_per_cycle,
    )


async def get_due_poller() -> DuePoller:
    """Get or create the singleton background poller."""
    global _poller
    if _poller is None:
        _poller = DuePoller(
            await get_process_due_use_case(),
            interval_seconds=get_settings().dispatch.poll_interval_seconds,
        )
    return _poller


async def stop_due_poller() -> None:
    """Stop the singleton poller if it was ever created."""
    if _poller is not None:
        await _poller.stop()


def reset_services() -> None:
    """Reset singletons (for testing)."""
    global _poller
    _poller = None
