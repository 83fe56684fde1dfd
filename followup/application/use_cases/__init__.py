"""Application use cases."""

from followup.application.use_cases.process_due_reminders import (
    DispatchCycleResult,
    ProcessDueRemindersUseCase,
)
from followup.application.use_cases.schedule_reminder import ScheduleReminderUseCase

__all__ = [
    "ScheduleReminderUseCase",
    "ProcessDueRemindersUseCase",
    "DispatchCycleResult",
]
