"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from followup.application.services import reset_services
from followup.config import reset_settings
from followup.infrastructure.storage.sqlite.connection import close_pool


@pytest.fixture(autouse=True)
async def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[None, None]:
    """Point storage at a per-test directory and drop cached singletons."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("DISPATCH_POLLER_ENABLED", "false")
    reset_settings()
    reset_services()

    yield

    await close_pool()
    reset_settings()
    reset_services()
