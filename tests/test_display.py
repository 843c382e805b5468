import io
import pytest
from datetime import datetime, timezone
from rich.console import Console

from switch_tracker.models.session import SessionPhase, SessionSnapshot, SessionSummary
from switch_tracker.services.display import TerminalDisplay, format_duration

@pytest.mark.parametrize("ms,expected", [
    (0, "00:00:00"),
    (999, "00:00:00"),
    (1_000, "00:00:01"),
    (61_500, "00:01:01"),
    (3_600_000, "01:00:00"),
    (3_723_000, "01:02:03"),
    (100 * 3_600_000, "100:00:00"),
    (-5, "00:00:00"),
])
def test_format_duration(ms, expected):
    assert format_duration(ms) == expected

@pytest.fixture
def display():
    return TerminalDisplay(Console(file=io.StringIO(), width=100))

@pytest.fixture
def summary():
    return SessionSummary(
        duration=65_000,
        switches=2,
        timestamp=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    )

def output(display):
    return display.console.file.getvalue()

def test_render_active_session(display):
    snapshot = SessionSnapshot(phase=SessionPhase.ACTIVE, elapsed_ms=5_000, switch_count=3)
    display.console.print(display.render(snapshot))

    text = output(display)
    assert "00:00:05" in text
    assert "Context Switches: 3" in text
    assert "stop session" in text
    assert "Session Summary" not in text

def test_render_stopped_session_shows_summary(display, summary):
    snapshot = SessionSnapshot(
        phase=SessionPhase.STOPPED,
        elapsed_ms=summary.duration,
        switch_count=summary.switches,
        last_summary=summary
    )
    display.console.print(display.render(snapshot))

    text = output(display)
    assert "Session Summary" in text
    assert "00:01:05" in text
    assert "Try to minimize tab switching next time." in text
    assert "start session" in text

def test_show_history(display, summary):
    display.show_history([summary])
    text = output(display)
    assert "Session History" in text
    assert "00:01:05" in text

def test_show_empty_history(display):
    display.show_history([])
    assert "No sessions recorded" in output(display)
