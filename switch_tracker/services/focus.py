"""Terminal focus reporting as a visibility signal

Terminals that support DEC private mode 1004 send ``ESC [ I`` when their
window gains focus and ``ESC [ O`` when it loses it. Terminals that don't
simply never send them, in which case no switches are counted.
"""
import codecs
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from switch_tracker.services.errors import VisibilityError

logger = logging.getLogger(__name__)

FOCUS_REPORTING_ON = "\x1b[?1004h"
FOCUS_REPORTING_OFF = "\x1b[?1004l"
FOCUS_IN = "\x1b[I"
FOCUS_OUT = "\x1b[O"

CSI_BODY_MIN, CSI_BODY_MAX = "\x20", "\x3f"
CSI_FINAL_MIN, CSI_FINAL_MAX = "\x40", "\x7e"

HIDDEN = "hidden"
VISIBLE = "visible"
KEY = "key"

@dataclass(frozen=True)
class InputEvent:
    kind: str  # hidden, visible or key
    key: str = ""

class FocusEventParser:
    """Splits raw terminal input into focus events and key presses

    Escape sequences may arrive split across reads, so an incomplete
    trailing sequence is held until the next call to ``feed``.
    """

    def __init__(self):
        self._buffer = ""

    def feed(self, data: str) -> List[InputEvent]:
        self._buffer += data
        events = []
        i = 0
        buf = self._buffer

        while i < len(buf):
            ch = buf[i]
            if ch != "\x1b":
                events.append(InputEvent(KEY, ch))
                i += 1
                continue

            if i + 1 >= len(buf):
                # Lone ESC, wait for what follows
                break

            if buf[i + 1] != "[":
                # SS3 (ESC O x) or a Meta-prefixed key
                width = 3 if buf[i + 1] == "O" else 2
                if i + width > len(buf):
                    break
                logger.debug(f"Ignoring escape sequence {buf[i:i + width]!r}")
                i += width
                continue

            # CSI: parameter and intermediate bytes, then one final byte
            j = i + 2
            while j < len(buf) and CSI_BODY_MIN <= buf[j] <= CSI_BODY_MAX:
                j += 1
            if j >= len(buf):
                break
            if not CSI_FINAL_MIN <= buf[j] <= CSI_FINAL_MAX:
                logger.debug(f"Dropping malformed escape sequence {buf[i:j]!r}")
                i = j
                continue

            seq = buf[i:j + 1]
            if seq == FOCUS_IN:
                events.append(InputEvent(VISIBLE))
            elif seq == FOCUS_OUT:
                events.append(InputEvent(HIDDEN))
            else:
                logger.debug(f"Ignoring escape sequence {seq!r}")
            i = j + 1

        self._buffer = buf[i:]
        return events

class TerminalFocusSource:
    """Puts the terminal in cbreak mode with focus reporting for the duration of a with-block"""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._saved_attrs = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def fd(self) -> int:
        return self.stdin.fileno()

    def __enter__(self):
        if not self.stdin.isatty():
            raise VisibilityError("stdin is not a terminal, focus reporting unavailable")

        import termios
        import tty

        self._saved_attrs = termios.tcgetattr(self.fd)
        tty.setcbreak(self.fd)
        self.stdout.write(FOCUS_REPORTING_ON)
        self.stdout.flush()
        logger.debug("Terminal focus reporting enabled")
        return self

    def read(self) -> Optional[str]:
        """Read whatever input is pending; None at end of input

        May return an empty string when only part of a multi-byte
        character has arrived so far.
        """
        data = os.read(self.fd, 1024)
        if not data:
            return None
        return self._decoder.decode(data)

    def __exit__(self, exc_type, exc_val, exc_tb):
        import termios

        try:
            self.stdout.write(FOCUS_REPORTING_OFF)
            self.stdout.flush()
        finally:
            if self._saved_attrs is not None:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
                self._saved_attrs = None
        logger.debug("Terminal focus reporting disabled")
