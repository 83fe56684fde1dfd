"""Notification sink implementations."""

from followup.infrastructure.notifications.logging_sink import LoggingNotificationSink

_sink: LoggingNotificationSink | None = None


def get_notification_sink() -> LoggingNotificationSink:
    """Get singleton notification sink."""
    global _sink
    if _sink is None:
        _sink = LoggingNotificationSink()
    return _sink


__all__ = ["LoggingNotificationSink", "get_notification_sink"]
