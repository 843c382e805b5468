"""Notification sinks fired once per counted context switch"""
import logging
from abc import ABC, abstractmethod
from typing import Optional
from rich.console import Console

from switch_tracker.services.errors import NotificationError

logger = logging.getLogger(__name__)

class BaseNotifier(ABC):
    """Receives a call each time the state machine counts a switch"""

    @abstractmethod
    def notify(self, switch_count: int) -> None:
        """Render the cue for the switch that brought the total to switch_count"""
        pass

class NullNotifier(BaseNotifier):
    """Sink that does nothing, for hosts that render the cue themselves"""

    def notify(self, switch_count: int) -> None:
        pass

class BellNotifier(BaseNotifier):
    """Rings the terminal bell"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def notify(self, switch_count: int) -> None:
        if not self.console.is_terminal:
            raise NotificationError("Console is not a terminal, cannot ring bell")
        self.console.bell()
        logger.debug(f"Bell rung for switch #{switch_count}")

def create_notifier(kind: str, console: Optional[Console] = None) -> BaseNotifier:
    """Build the sink named by the NOTIFIER setting"""
    if kind == "bell":
        return BellNotifier(console)
    if kind == "none":
        return NullNotifier()
    raise NotificationError(f"Unknown notifier: {kind}")
