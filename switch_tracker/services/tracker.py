"""Focus session state machine: lifecycle, elapsed time and switch counting"""
import logging
from typing import Optional

from switch_tracker.config.settings import settings
from switch_tracker.models.session import SessionPhase, SessionSnapshot, SessionSummary
from switch_tracker.services.clock import SystemClock
from switch_tracker.services.errors import SchedulerError
from switch_tracker.services.history import HistoryStore
from switch_tracker.services.notifier import BaseNotifier, NullNotifier

logger = logging.getLogger(__name__)

class SessionStateMachine:
    """Tracks one focus session at a time and logs finished ones to history

    All methods are expected to run on a single event loop, one at a time.
    Calls that are not valid in the current phase are logged and ignored;
    callers should consult ``can_start`` / ``can_stop`` first.
    """

    def __init__(
        self,
        clock=None,
        notifier: Optional[BaseNotifier] = None,
        history: Optional[HistoryStore] = None,
        scheduler=None,
        tick_interval_ms: int = settings.TICK_INTERVAL_MS
    ):
        """Initialize the state machine

        Args:
            clock: Object with ``now()`` (monotonic ms) and ``wall_time()``.
                Defaults to SystemClock.
            notifier: Sink fired once per counted switch. Defaults to a no-op.
            history: Store that receives each summary. A fresh one by default.
            scheduler: Object with ``schedule(callback, interval_ms)`` returning
                a handle with ``cancel()``. Without one, ticks are left to the caller.
            tick_interval_ms: Cadence of the periodic tick while active.
        """
        self.clock = clock or SystemClock()
        self.notifier = notifier or NullNotifier()
        self.history = history if history is not None else HistoryStore()
        self.scheduler = scheduler
        self.tick_interval_ms = tick_interval_ms

        self._phase = SessionPhase.IDLE
        self._start_instant: Optional[int] = None
        self._elapsed_ms = 0
        self._switch_count = 0
        self._pending_away = False
        self._last_summary: Optional[SessionSummary] = None
        self._timer = None

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_ms

    @property
    def switch_count(self) -> int:
        return self._switch_count

    @property
    def pending_away(self) -> bool:
        return self._pending_away

    @property
    def last_summary(self) -> Optional[SessionSummary]:
        return self._last_summary

    @property
    def is_active(self) -> bool:
        return self._phase is SessionPhase.ACTIVE

    @property
    def can_start(self) -> bool:
        return not self.is_active

    @property
    def can_stop(self) -> bool:
        return self.is_active

    def start(self) -> None:
        """Begin a new session with every counter reset"""
        if not self.can_start:
            logger.warning("start() ignored: a session is already active")
            return

        self._phase = SessionPhase.ACTIVE
        self._elapsed_ms = 0
        self._switch_count = 0
        self._pending_away = False
        self._last_summary = None
        self._start_instant = self.clock.now()
        self._acquire_timer()
        logger.info("Focus session started")

    def tick(self, now: Optional[int] = None) -> int:
        """Recompute elapsed time from the start instant

        Never accumulates, so late or missing ticks cannot cause drift.
        Returns the current elapsed milliseconds.
        """
        if not self.is_active:
            logger.debug(f"tick() ignored in phase {self._phase.value}")
            return self._elapsed_ms

        if now is None:
            now = self.clock.now()
        # Clamp against a clock that steps backwards
        self._elapsed_ms = max(self._elapsed_ms, now - self._start_instant, 0)
        return self._elapsed_ms

    def on_visibility_hidden(self) -> None:
        """The monitored surface went out of view"""
        if not self.is_active or self._pending_away:
            return
        self._pending_away = True
        logger.debug("Surface hidden, awaiting return")

    def on_visibility_visible(self) -> None:
        """The monitored surface came back; completes a round trip if one is pending"""
        if not self.is_active or not self._pending_away:
            return

        self._pending_away = False
        self._switch_count += 1
        logger.info(f"Context switch #{self._switch_count} counted")
        self._notify()

    def stop(self) -> Optional[SessionSummary]:
        """End the active session and record its summary in history

        Returns the new summary, or None when there was no active session.
        """
        if not self.can_stop:
            logger.warning(f"stop() ignored in phase {self._phase.value}")
            return None

        self.tick()
        self._release_timer()
        self._phase = SessionPhase.STOPPED
        # An away without a return is never counted
        self._pending_away = False

        summary = SessionSummary(
            duration=self._elapsed_ms,
            switches=self._switch_count,
            timestamp=self.clock.wall_time()
        )
        self.history.append(summary)
        self._last_summary = summary
        logger.info(
            f"Focus session stopped after {summary.duration}ms "
            f"with {summary.switches} context switches"
        )
        return summary

    def close(self) -> Optional[SessionSummary]:
        """Tear down: stop any active session and release the timer"""
        summary = self.stop() if self.is_active else None
        self._release_timer()
        return summary

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            elapsed_ms=self._elapsed_ms,
            switch_count=self._switch_count,
            last_summary=self._last_summary
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _notify(self):
        try:
            self.notifier.notify(self._switch_count)
        except Exception as e:
            logger.warning(f"Notification failed, session continues: {e}")

    def _acquire_timer(self):
        if self.scheduler is None:
            return
        self._release_timer()
        try:
            self._timer = self.scheduler.schedule(self.tick, self.tick_interval_ms)
        except SchedulerError as e:
            logger.warning(f"Periodic tick unavailable, elapsed time updates on stop only: {e}")

    def _release_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
