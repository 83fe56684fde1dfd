"""Tests for logging configuration."""

from followup.config import get_settings
from followup.config.logging import add_app_context


def test_add_app_context_fields():
    settings = get_settings()

    event = add_app_context(None, "info", {"event": "reminder_transitioned"})

    assert event["event"] == "reminder_transitioned"
    assert event["app"] == settings.app_name
    assert event["version"] == settings.app_version
    assert event["environment"] == settings.environment
