"""
Background poller that drives dispatch cycles on an interval.

The only timer in the service. A tick that arrives while the previous
cycle is still running is skipped rather than queued.
"""

import asyncio

from followup.application.use_cases.process_due_reminders import (
    DispatchCycleResult,
    ProcessDueRemindersUseCase,
)
from followup.config import get_logger
from followup.core.exceptions import FollowUpError

logger = get_logger(__name__)


class DuePoller:
    """Runs ProcessDueRemindersUseCase every ``interval_seconds``."""

    def __init__(self, use_case: ProcessDueRemindersUseCase, interval_seconds: float = 30.0):
        self._use_case = use_case
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._cycle_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> DispatchCycleResult | None:
        """
        Run a single cycle unless one is already in progress.

        Returns:
            The cycle result, or None if the cycle was skipped or failed.
        """
        if self._cycle_lock.locked():
            logger.info("dispatch_cycle_skipped", reason="previous_cycle_running")
            return None

        async with self._cycle_lock:
            try:
                return await self._use_case.execute()
            except FollowUpError as e:
                logger.error("dispatch_cycle_failed", error_code=e.code, error=e.message)
                return None

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception:
                # Unexpected errors must not end the polling task
                logger.exception("dispatch_cycle_crashed")
            await asyncio.sleep(self.interval_seconds)

    def start(self, interval_seconds: float | None = None) -> None:
        """
        Start polling in a background task (runs a cycle immediately).

        Args:
            interval_seconds: Optional new interval, applied before starting
        """
        if interval_seconds is not None:
            if interval_seconds <= 0:
                raise ValueError("interval_seconds must be positive")
            self.interval_seconds = interval_seconds
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="follow-up-due-poller")
        logger.info("due_poller_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("due_poller_stopped")
