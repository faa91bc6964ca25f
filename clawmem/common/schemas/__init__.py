"""
ClawMem Observation Schemas
"""

from .observation import (
    Observation,
    ObservationDraft,
    ObservationType,
    MemoryStats,
)

__all__ = [
    "Observation",
    "ObservationDraft",
    "ObservationType",
    "MemoryStats",
]
