"""API route modules."""

from followup.api.routes.health import router as health_router
from followup.api.routes.reminders import router as reminders_router

__all__ = [
    "health_router",
    "reminders_router",
]
