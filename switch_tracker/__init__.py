"""
Context Switch Tracker - times a focus session and counts how often you look away
"""

__version__ = "0.1.0"

from .models.session import SessionPhase, SessionSnapshot, SessionSummary
from .services.history import HistoryStore
from .services.tracker import SessionStateMachine

__all__ = [
    'SessionPhase',
    'SessionSnapshot',
    'SessionSummary',
    'HistoryStore',
    'SessionStateMachine',
]
