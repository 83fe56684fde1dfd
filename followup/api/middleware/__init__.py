"""API middleware."""

from followup.api.middleware.error_handler import ErrorHandlerMiddleware
from followup.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
