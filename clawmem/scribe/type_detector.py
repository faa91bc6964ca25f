"""
Type Detector

Assigns an observation category to capturable text using the ordered
TYPE_RULES table. First matching rule wins; no match means "observation".
"""

from typing import List, Optional, Tuple

from ..common.schemas import ObservationType
from .patterns import TYPE_RULES, Matcher


class TypeDetector:
    """First-match-wins category classifier"""

    def __init__(self, rules: Optional[List[Tuple[ObservationType, Matcher]]] = None):
        self._rules = rules if rules is not None else TYPE_RULES

    @property
    def rules(self) -> List[Tuple[ObservationType, Matcher]]:
        return list(self._rules)

    def detect(self, text: str) -> str:
        lower = text.lower()
        for observation_type, rule in self._rules:
            if rule.matches(lower):
                return observation_type.value
        return ObservationType.OBSERVATION.value


_default_detector = TypeDetector()


def detect_type(text: str) -> str:
    """Category for ``text`` under the default rule table"""
    return _default_detector.detect(text)
