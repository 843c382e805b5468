from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

PERFECT_FOCUS_MESSAGE = "Perfect focus! No interruptions detected."
DISTRACTED_MESSAGE = "Try to minimize tab switching next time."

class SessionPhase(str, Enum):
    """Lifecycle phase of the focus session"""
    IDLE = "idle"
    ACTIVE = "active"
    STOPPED = "stopped"

class SessionSummary(BaseModel):
    """Immutable record of a completed session"""
    model_config = ConfigDict(frozen=True)

    duration: int = Field(ge=0, description="Elapsed milliseconds at stop time")
    switches: int = Field(ge=0, description="Context switches counted during the session")
    timestamp: datetime = Field(description="Wall-clock instant of stop (UTC)")

    @computed_field
    @property
    def verdict(self) -> str:
        """Short feedback line shown under the summary"""
        return PERFECT_FOCUS_MESSAGE if self.switches == 0 else DISTRACTED_MESSAGE

class SessionSnapshot(BaseModel):
    """Read-only projection of the state machine for presentation layers"""
    model_config = ConfigDict(frozen=True)

    phase: SessionPhase
    elapsed_ms: int = Field(ge=0)
    switch_count: int = Field(ge=0)
    last_summary: Optional[SessionSummary] = None

    @property
    def is_active(self) -> bool:
        return self.phase is SessionPhase.ACTIVE
