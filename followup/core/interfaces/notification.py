"""
Abstract interface for notification sinks.

A sink performs the actual delivery of a due reminder (email, chat,
push...). The dispatch core never calls it; the dispatch cycle does.
"""

from abc import ABC, abstractmethod

from followup.core.entities.reminder import Reminder


class INotificationSink(ABC):
    """Delivers a reminder to whoever must act on it."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Sink identifier name."""
        pass

    @abstractmethod
    async def deliver(self, reminder: Reminder) -> bool:
        """
        Deliver a notification for ``reminder``.

        Returns:
            True if delivery was confirmed, False otherwise.
        """
        pass
