"""
Dependency injection container for FastAPI.

Provides service instances to route handlers.
"""

from functools import lru_cache

from fastapi import Depends

from followup.application.poller import DuePoller
from followup.application.services import (
    get_dispatch_state_machine,
    get_due_locator,
    get_due_poller,
    get_process_due_use_case,
)
from followup.application.use_cases import (
    ProcessDueRemindersUseCase,
    ScheduleReminderUseCase,
)
from followup.config import Settings, get_settings
from followup.core.interfaces import INotificationSink, IReminderStore
from followup.core.services import DispatchStateMachine, DueSetLocator
from followup.infrastructure.notifications import get_notification_sink
from followup.infrastructure.storage.sqlite import get_reminder_store


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Storage dependencies
async def get_rem_store() -> IReminderStore:
    """Get reminder store."""
    return await get_reminder_store()


def get_sink() -> INotificationSink:
    """Get notification sink."""
    return get_notification_sink()


# Core service dependencies
async def get_locator(
    store: IReminderStore = Depends(get_rem_store),
) -> DueSetLocator:
    """Get due-set locator bound to the request's store."""
    return await get_due_locator(store)


async def get_state_machine(
    store: IReminderStore = Depends(get_rem_store),
) -> DispatchStateMachine:
    """Get dispatch state machine bound to the request's store."""
    return await get_dispatch_state_machine(store)


# Use case dependencies
def get_schedule_use_case(
    store: IReminderStore = Depends(get_rem_store),
) -> ScheduleReminderUseCase:
    """Get schedule reminder use case."""
    return ScheduleReminderUseCase(reminder_store=store)


async def get_process_use_case(
    store: IReminderStore = Depends(get_rem_store),
    sink: INotificationSink = Depends(get_sink),
) -> ProcessDueRemindersUseCase:
    """Get dispatch cycle use case."""
    return await get_process_due_use_case(store=store, sink=sink)


# Poller dependencies
async def get_poller() -> DuePoller:
    """Get the singleton background poller."""
    return await get_due_poller()
