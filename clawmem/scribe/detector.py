"""
Trigger Classifier

Rule-based capture gate. Decides whether a piece of turn text is worth
persisting, using length bounds, noise filters, the recent-capture cache and
the semantic trigger table.

Pure with respect to (text, cache state): no randomness, no network.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..common.normalizer import DEFAULT_FINGERPRINT_LENGTH, fingerprint, strip_message_ids
from .dedup import RecentCaptureCache
from .patterns import CAPTURE_TRIGGERS, SYSTEM_MESSAGE_PATTERNS, Matcher, first_match

RECALLED_CONTEXT_MARKER = "<relevant-memories>"


@dataclass
class CaptureDecision:
    """Result of the capture gate"""
    accepted: bool
    reason: str
    matched_trigger: Optional[str] = None
    fingerprint: Optional[str] = None


class TriggerClassifier:
    """
    Decides whether text should be captured.

    Rejection order:
    1. Empty, shorter than min_length or longer than max_length
    2. Contains recalled context (<relevant-memories>)
    3. Looks like markup (starts with "<" and has a closing tag)
    4. Matches a system/operational message pattern
    5. Shorter than min_length once message-id tags are stripped
    6. Fingerprint already in the recent-capture cache

    Anything left is accepted only if a capture trigger matches.
    """

    def __init__(
        self,
        dedup_cache: RecentCaptureCache,
        min_length: int = 20,
        max_length: int = 2000,
        fingerprint_length: int = DEFAULT_FINGERPRINT_LENGTH,
        triggers: Optional[List[Matcher]] = None,
        system_patterns: Optional[List[Matcher]] = None,
    ):
        """
        Initialize the classifier.

        Args:
            dedup_cache: Cache consulted for recent duplicates (read only here)
            min_length: Minimum text length, before and after cleaning
            max_length: Maximum raw text length
            fingerprint_length: Leading characters used for fingerprints
            triggers: Capture trigger table (default CAPTURE_TRIGGERS)
            system_patterns: Noise table (default SYSTEM_MESSAGE_PATTERNS)
        """
        self._cache = dedup_cache
        self._min_length = min_length
        self._max_length = max_length
        self._fingerprint_length = fingerprint_length
        self._triggers = triggers if triggers is not None else CAPTURE_TRIGGERS
        self._system_patterns = system_patterns if system_patterns is not None else SYSTEM_MESSAGE_PATTERNS

    @property
    def fingerprint_length(self) -> int:
        return self._fingerprint_length

    def fingerprint_of(self, text: str) -> str:
        """Fingerprint for raw text, as recorded in the cache"""
        return fingerprint(strip_message_ids(text), self._fingerprint_length)

    def evaluate(self, text: Optional[str]) -> CaptureDecision:
        """
        Run the capture gate.

        Args:
            text: Raw turn text

        Returns:
            CaptureDecision with the accept/reject reason
        """
        if not text:
            return CaptureDecision(accepted=False, reason="empty")
        if len(text) < self._min_length:
            return CaptureDecision(accepted=False, reason="too_short")
        if len(text) > self._max_length:
            return CaptureDecision(accepted=False, reason="too_long")
        if RECALLED_CONTEXT_MARKER in text:
            return CaptureDecision(accepted=False, reason="recalled_context")
        if text.startswith("<") and "</" in text:
            return CaptureDecision(accepted=False, reason="markup")

        noise = first_match(self._system_patterns, text)
        if noise:
            return CaptureDecision(accepted=False, reason=f"system_message:{noise.name}")

        cleaned = strip_message_ids(text)
        if len(cleaned) < self._min_length:
            return CaptureDecision(accepted=False, reason="too_short_after_cleaning")

        fp = fingerprint(cleaned, self._fingerprint_length)
        if self._cache.contains(fp):
            return CaptureDecision(accepted=False, reason="duplicate", fingerprint=fp)

        trigger = first_match(self._triggers, cleaned)
        if trigger is None:
            return CaptureDecision(accepted=False, reason="no_trigger", fingerprint=fp)

        return CaptureDecision(
            accepted=True,
            reason=f"trigger:{trigger.name}",
            matched_trigger=trigger.name,
            fingerprint=fp,
        )

    def should_capture(self, text: Optional[str]) -> bool:
        return self.evaluate(text).accepted

    def explain(self, decision: CaptureDecision) -> str:
        """Human-readable explanation of a decision"""
        if decision.accepted:
            return f"Capture (matched trigger: {decision.matched_trigger})"
        return f"Skip ({decision.reason})"
