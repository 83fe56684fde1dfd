"""
Application layer - Use cases, DTOs, the dispatch poller and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that compose the core services
3. Providing factory functions for dependency injection
"""

from followup.application.poller import DuePoller
from followup.application.services import (
    get_dispatch_state_machine,
    get_due_locator,
    get_due_poller,
    stop_due_poller,
    get_process_due_use_case,
    reset_services,
)
from followup.application.use_cases import (
    DispatchCycleResult,
    ProcessDueRemindersUseCase,
    ScheduleReminderUseCase,
)

__all__ = [
    # Use Cases
    "ScheduleReminderUseCase",
    "ProcessDueRemindersUseCase",
    "DispatchCycleResult",
    "DuePoller",
    # Service factories
    "get_due_locator",
    "get_dispatch_state_machine",
    "get_process_due_use_case",
    "get_due_poller",
    "stop_due_poller",
    "reset_services",
]
