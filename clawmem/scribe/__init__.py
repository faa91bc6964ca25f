"""
Scribe - Conversational Memory Capture

Decides, after each turn, which statements are worth persisting.
Purely rule-based: no network calls during classification, no learned model.

Key Components:
- TriggerClassifier: capture gate (length, noise, dedup, semantic triggers)
- TypeDetector: first-match-wins category assignment
- RecentCaptureCache: FIFO-bounded fingerprint set
- CapturePipeline: per-turn orchestration and storage

Rules for Scribe:
1. Not a logger - only capture statements that match a trigger
2. Never re-capture recalled context
3. At most 3 captures per turn
4. The first storage failure ends the turn's capture
"""

from .detector import TriggerClassifier, CaptureDecision
from .type_detector import TypeDetector, detect_type
from .dedup import RecentCaptureCache
from .messages import TurnText, extract_turn_texts
from .pipeline import CapturePipeline, CaptureReport

__all__ = [
    "TriggerClassifier",
    "CaptureDecision",
    "TypeDetector",
    "detect_type",
    "RecentCaptureCache",
    "TurnText",
    "extract_turn_texts",
    "CapturePipeline",
    "CaptureReport",
]
