import asyncio
import logging
import signal
from typing import Iterable, Optional

from rich.live import Live

from switch_tracker.config.settings import settings
from switch_tracker.models.session import SessionSummary
from switch_tracker.services.display import TerminalDisplay
from switch_tracker.services.errors import RunnerError
from switch_tracker.services.focus import HIDDEN, KEY, VISIBLE, FocusEventParser, InputEvent, TerminalFocusSource
from switch_tracker.services.notifier import create_notifier
from switch_tracker.services.scheduler import AsyncioScheduler
from switch_tracker.services.tracker import SessionStateMachine

logger = logging.getLogger(__name__)

TOGGLE_KEYS = ("s", "S", " ")
QUIT_KEYS = ("q", "Q")

class ServiceRunner:
    """Interactive terminal session with graceful shutdown handling"""

    def __init__(
        self,
        machine: Optional[SessionStateMachine] = None,
        display: Optional[TerminalDisplay] = None,
        focus_source: Optional[TerminalFocusSource] = None,
        refresh_interval: float = settings.REFRESH_INTERVAL_SECONDS
    ):
        self.machine = machine or SessionStateMachine(
            notifier=create_notifier(settings.NOTIFIER),
            scheduler=AsyncioScheduler()
        )
        self.display = display or TerminalDisplay()
        self.focus_source = focus_source or TerminalFocusSource()
        self.refresh_interval = refresh_interval
        self.parser = FocusEventParser()
        self.shutdown_event = asyncio.Event()

    def handle_events(self, events: Iterable[InputEvent]) -> None:
        """Dispatch parsed input to the state machine, in arrival order"""
        for event in events:
            if event.kind == HIDDEN:
                self.machine.on_visibility_hidden()
            elif event.kind == VISIBLE:
                self.machine.on_visibility_visible()
            elif event.kind == KEY:
                self.handle_key(event.key)

    def handle_key(self, key: str) -> None:
        if key in TOGGLE_KEYS:
            if self.machine.can_start:
                self.machine.start()
            else:
                self.machine.stop()
        elif key in QUIT_KEYS:
            self.shutdown()

    def shutdown(self, sig: Optional[signal.Signals] = None):
        """Request the run loop to exit"""
        if sig:
            logger.info(f"Received exit signal {sig.name}...")
        self.shutdown_event.set()

    def _on_input(self):
        try:
            data = self.focus_source.read()
        except OSError as e:
            logger.error(f"Failed to read terminal input: {e}")
            self.shutdown()
            return
        if data is None:
            self.shutdown()
            return
        self.handle_events(self.parser.feed(data))

    def _setup_signal_handlers(self, loop: asyncio.AbstractEventLoop):
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, lambda s=sig: self.shutdown(s))
            except NotImplementedError:
                logger.debug(f"Signal handlers not supported for {sig.name}")

    async def run(self) -> Optional[SessionSummary]:
        """Run until quit; returns the summary of a session cut short by quitting"""
        logger.info("Starting terminal tracker...")
        loop = asyncio.get_running_loop()
        self._setup_signal_handlers(loop)
        final_summary = None

        with self.focus_source:
            loop.add_reader(self.focus_source.fd, self._on_input)
            try:
                with Live(self._render(), console=self.display.console, auto_refresh=False, transient=False) as live:
                    while not self.shutdown_event.is_set():
                        live.update(self._render(), refresh=True)
                        try:
                            await asyncio.wait_for(
                                self.shutdown_event.wait(),
                                timeout=self.refresh_interval
                            )
                        except asyncio.TimeoutError:
                            continue
                    final_summary = self.machine.close()
                    live.update(self._render(), refresh=True)
            except Exception as e:
                logger.error(f"Error in terminal loop: {e}", exc_info=True)
                raise RunnerError(f"Terminal tracker failed: {e}")
            finally:
                loop.remove_reader(self.focus_source.fd)
                self.machine.close()

        logger.info("Terminal tracker stopped")
        return final_summary

    def _render(self):
        return self.display.render(self.machine.snapshot())
