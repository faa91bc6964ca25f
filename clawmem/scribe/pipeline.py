"""
Capture Pipeline

Turns a finished conversation turn into stored observations.

Pipeline:
1. Extract user/assistant texts from the turn's messages
2. Gate each text through the TriggerClassifier (noise, length, dedup, triggers)
3. Drop repeats within the turn, then keep at most max_per_turn texts, in original order
4. Build an ObservationDraft per text and submit it to the worker
5. Record the fingerprint of each successfully stored text

The first storage failure aborts the rest of the batch. Nothing is retried:
capture is best-effort per turn.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from ..common.normalizer import DEFAULT_FINGERPRINT_LENGTH, strip_message_ids
from ..common.schemas import Observation, ObservationDraft
from ..common.worker_client import MemoryWorkerClient
from .dedup import RecentCaptureCache
from .detector import TriggerClassifier
from .messages import extract_turn_texts
from .type_detector import TypeDetector

logger = logging.getLogger("clawmem.scribe.pipeline")


@dataclass
class CaptureReport:
    """Outcome of one capture pass"""
    candidates: int = 0
    accepted: int = 0
    stored: List[Observation] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def stored_count(self) -> int:
        return len(self.stored)


class CapturePipeline:
    """
    Orchestrates classification, dedup and storage for a turn.

    The recent-capture cache is owned here and injected into the classifier,
    so each pipeline instance (and each test) can use an isolated cache.
    """

    def __init__(
        self,
        client: MemoryWorkerClient,
        dedup_cache: Optional[RecentCaptureCache] = None,
        classifier: Optional[TriggerClassifier] = None,
        type_detector: Optional[TypeDetector] = None,
        max_per_turn: int = 3,
        summary_length: int = 500,
        default_importance: int = 5,
        fingerprint_length: int = DEFAULT_FINGERPRINT_LENGTH,
    ):
        """
        Initialize capture pipeline.

        Args:
            client: Worker client used for storage
            dedup_cache: Recent-capture cache (default: new 200-entry cache)
            classifier: Capture gate (default: built over dedup_cache)
            type_detector: Category classifier
            max_per_turn: Hard cap on stores per turn
            summary_length: Stored summary is truncated to this many characters
            default_importance: Importance when none is given explicitly
            fingerprint_length: Leading characters used for fingerprints
        """
        self._client = client
        self.dedup_cache = dedup_cache if dedup_cache is not None else RecentCaptureCache()
        self.classifier = classifier or TriggerClassifier(
            self.dedup_cache, fingerprint_length=fingerprint_length
        )
        self.type_detector = type_detector or TypeDetector()
        self._max_per_turn = max_per_turn
        self._summary_length = summary_length
        self._default_importance = default_importance

    @classmethod
    def from_config(cls, client: MemoryWorkerClient, config) -> "CapturePipeline":
        """Build a pipeline from ClawMemConfig.capture settings"""
        capture = config.capture
        cache = RecentCaptureCache(capacity=capture.dedup_capacity)
        classifier = TriggerClassifier(
            cache,
            min_length=capture.min_length,
            max_length=capture.max_length,
            fingerprint_length=capture.fingerprint_length,
        )
        return cls(
            client,
            dedup_cache=cache,
            classifier=classifier,
            max_per_turn=capture.max_per_turn,
            summary_length=capture.summary_length,
            default_importance=capture.default_importance,
            fingerprint_length=capture.fingerprint_length,
        )

    def select(self, texts: Iterable[str]) -> List[str]:
        """
        Texts that pass the gate, capped at max_per_turn, in original order.

        Repeats within the turn are dropped before the cap, so a duplicate
        never takes a slot from a later distinct text.
        """
        accepted: List[str] = []
        seen = set()
        for text in texts:
            if len(accepted) >= self._max_per_turn:
                break
            if not self.classifier.should_capture(text):
                continue
            fp = self.classifier.fingerprint_of(text)
            if fp in seen:
                continue
            seen.add(fp)
            accepted.append(text)
        return accepted

    def build_draft(
        self,
        session_key: str,
        text: str,
        observation_type: Optional[str] = None,
        importance: Optional[int] = None,
        truncate_summary: bool = True,
    ) -> ObservationDraft:
        """
        Build the storage request for a text.

        Message-id tags are stripped. Auto-captured summaries are truncated;
        the output always keeps the full cleaned text.
        """
        cleaned = strip_message_ids(text)
        return ObservationDraft(
            session_key=session_key,
            type=observation_type or self.type_detector.detect(cleaned),
            summary=cleaned[: self._summary_length] if truncate_summary else cleaned,
            output=cleaned,
            importance=importance if importance is not None else self._default_importance,
        )

    async def store_text(
        self,
        session_key: str,
        text: str,
        observation_type: Optional[str] = None,
        importance: Optional[int] = None,
        truncate_summary: bool = True,
    ) -> Observation:
        """
        Store a single text and record its fingerprint.

        Explicit capture requests call this directly, bypassing the trigger
        gate, and keep the full text as summary (truncate_summary=False).

        Raises:
            WorkerError on storage failure (nothing is recorded)
        """
        draft = self.build_draft(session_key, text, observation_type, importance, truncate_summary)
        observation = await self._client.store(draft)
        self.dedup_cache.record(self.classifier.fingerprint_of(text))
        return observation

    async def process_turn(self, session_key: str, messages: Optional[Iterable[Any]]) -> CaptureReport:
        """
        Capture noteworthy texts from a finished turn.

        Args:
            session_key: Session the observations belong to
            messages: The turn's message list

        Returns:
            CaptureReport; report.error is set if the batch was aborted
        """
        turn_texts = [t.text for t in extract_turn_texts(messages, session_key) if t.is_valid]
        selected = self.select(turn_texts)
        report = CaptureReport(candidates=len(turn_texts), accepted=len(selected))

        for text in selected:
            try:
                observation = await self.store_text(session_key, text)
            except Exception as e:
                report.error = str(e)
                logger.warning(
                    "Capture aborted after %d of %d: %s", report.stored_count, len(selected), e
                )
                break
            report.stored.append(observation)
            logger.debug("Captured #%s [%s]", observation.id, observation.type)

        return report
