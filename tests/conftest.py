import pytest
from datetime import datetime, timedelta, timezone

from switch_tracker.services.history import HistoryStore
from switch_tracker.services.notifier import BaseNotifier
from switch_tracker.services.tracker import SessionStateMachine

class FakeClock:
    """Manually advanced clock; ``now`` is monotonic milliseconds"""

    def __init__(self, start_ms: int = 0):
        self.ms = start_ms
        self.wall_start = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        self._wall_base = start_ms

    def now(self) -> int:
        return self.ms

    def wall_time(self) -> datetime:
        return self.wall_start + timedelta(milliseconds=self.ms - self._wall_base)

    def set(self, ms: int):
        self.ms = ms

    def advance(self, ms: int):
        self.ms += ms

class RecordingNotifier(BaseNotifier):
    """Notifier that remembers every call"""

    def __init__(self):
        self.calls = []

    def notify(self, switch_count: int) -> None:
        self.calls.append(switch_count)

class FakeTask:
    def __init__(self, callback, interval_ms):
        self.callback = callback
        self.interval_ms = interval_ms
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        """Simulate the timer going off"""
        if not self.cancelled:
            self.callback()

class FakeScheduler:
    """Scheduler that hands out FakeTask handles instead of touching a loop"""

    def __init__(self):
        self.tasks = []

    def schedule(self, callback, interval_ms):
        task = FakeTask(callback, interval_ms)
        self.tasks.append(task)
        return task

    @property
    def active_tasks(self):
        return [t for t in self.tasks if not t.cancelled]

@pytest.fixture
def clock():
    """Provide a manual clock starting at t=0"""
    return FakeClock()

@pytest.fixture
def notifier():
    """Provide a notifier that records calls"""
    return RecordingNotifier()

@pytest.fixture
def scheduler():
    """Provide a fake periodic scheduler"""
    return FakeScheduler()

@pytest.fixture
def history():
    return HistoryStore()

@pytest.fixture
def machine(clock, notifier, history, scheduler):
    """Provide a state machine wired to test doubles"""
    machine = SessionStateMachine(
        clock=clock,
        notifier=notifier,
        history=history,
        scheduler=scheduler,
        tick_interval_ms=100
    )
    yield machine
    machine.close()
