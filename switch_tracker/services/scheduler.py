"""Cancellable periodic tasks on the asyncio event loop"""
import asyncio
import logging
from typing import Callable, Optional

from switch_tracker.services.errors import SchedulerError

logger = logging.getLogger(__name__)

class PeriodicTask:
    """Handle for a callback re-armed every interval until cancelled

    A late or skipped run is not made up for; the next run is simply
    scheduled one interval after the current one finishes.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, interval_seconds: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval_seconds
        self._callback = callback
        self._cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_later(interval_seconds, self._run)

    def _run(self):
        if self._cancelled:
            return
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Error in periodic task: {e}", exc_info=True)
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval, self._run)

    def cancel(self) -> None:
        """Stop future runs; safe to call more than once"""
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def active(self) -> bool:
        return not self._cancelled

class AsyncioScheduler:
    """Creates PeriodicTask handles on a given loop, or the running one"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, callback: Callable[[], None], interval_ms: int) -> PeriodicTask:
        if interval_ms <= 0:
            raise SchedulerError(f"Interval must be positive, got {interval_ms}ms")
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise SchedulerError(f"No running event loop to schedule on: {e}")
        return PeriodicTask(loop, interval_ms / 1000, callback)
