"""Core domain services."""

from followup.core.services.dispatch import DispatchOutcome, DispatchStateMachine
from followup.core.services.due_locator import DueSetLocator

__all__ = [
    "DueSetLocator",
    "DispatchStateMachine",
    "DispatchOutcome",
]
