"""In-memory log of completed session summaries"""
import logging
from collections import deque
from typing import Deque, Iterator, Optional, Tuple

from switch_tracker.models.session import SessionSummary

logger = logging.getLogger(__name__)

class HistoryStore:
    """Append-only, newest-first sequence of session summaries

    Lives only as long as the process. Nothing is ever removed.
    """

    def __init__(self):
        self._summaries: Deque[SessionSummary] = deque()

    def append(self, summary: SessionSummary) -> None:
        """Record a summary in front of every earlier one"""
        self._summaries.appendleft(summary)
        logger.debug(f"History now holds {len(self._summaries)} sessions")

    def all(self) -> Tuple[SessionSummary, ...]:
        """Every summary, most recent first"""
        return tuple(self._summaries)

    @property
    def latest(self) -> Optional[SessionSummary]:
        return self._summaries[0] if self._summaries else None

    def __len__(self) -> int:
        return len(self._summaries)

    def __iter__(self) -> Iterator[SessionSummary]:
        return iter(tuple(self._summaries))
