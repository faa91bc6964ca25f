"""
Observation Schemas

Wire models shared with the memory worker service.
An Observation is one stored unit of memory; an ObservationDraft is what the
capture side submits before the worker assigns an id.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices


class ObservationType(str, Enum):
    """Observation categories, in detection priority order"""
    BUGFIX = "bugfix"
    DECISION = "decision"
    ARCHITECTURE = "architecture"
    PREFERENCE = "preference"
    CODE_CHANGE = "code_change"
    OBSERVATION = "observation"


class ObservationDraft(BaseModel):
    """Observation awaiting storage. Ownership passes to the worker on submit."""
    session_key: str
    type: str
    summary: str
    output: str = Field(..., description="Full text, never truncated")
    importance: int = Field(default=5, ge=1, le=10)
    tool_name: Optional[str] = None
    input: Optional[str] = None


class Observation(BaseModel):
    """Read-only view of a stored observation"""
    model_config = ConfigDict(extra="ignore")

    id: int
    session_id: Optional[int] = None
    type: str = ObservationType.OBSERVATION.value
    tool_name: Optional[str] = None
    input: Optional[str] = None
    output: Optional[str] = None
    summary: Optional[str] = None
    created_at: Optional[str] = None
    importance: Optional[int] = 5

    @property
    def display_text(self) -> str:
        """Summary, or the output when no summary was stored"""
        return self.summary or self.output or ""


class MemoryStats(BaseModel):
    """Aggregate counts reported by the worker"""
    model_config = ConfigDict(populate_by_name=True)

    session_count: int = Field(
        default=0, validation_alias=AliasChoices("totalSessions", "session_count", "sessionCount")
    )
    observation_count: int = Field(
        default=0,
        validation_alias=AliasChoices("totalObservations", "observation_count", "observationCount"),
    )
