"""Infrastructure layer implementations."""

from followup.infrastructure import notifications, storage

__all__ = ["storage", "notifications"]
