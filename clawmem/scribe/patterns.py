"""
Capture Patterns

Ordered, data-declared matcher tables used by the capture side:
- SYSTEM_MESSAGE_PATTERNS: operational noise that is never captured
- CAPTURE_TRIGGERS: semantic triggers, any single hit makes text capturable
- TYPE_RULES: category rules, evaluated in order, first match wins

Extend a table by appending a Matcher; control flow never changes.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Tuple

from ..common.schemas import ObservationType


@dataclass(frozen=True)
class Matcher:
    """A named regular expression"""
    name: str
    pattern: Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def matcher(name: str, regex: str, flags: int = re.IGNORECASE) -> Matcher:
    """Compile a Matcher. Case-insensitive unless flags say otherwise."""
    return Matcher(name=name, pattern=re.compile(regex, flags))


def first_match(matchers: Iterable[Matcher], text: str) -> Optional[Matcher]:
    """Return the first matcher that hits ``text``, in table order."""
    for m in matchers:
        if m.matches(text):
            return m
    return None


SYSTEM_MESSAGE_PATTERNS: List[Matcher] = [
    matcher("heartbeat_prompt", r"^Read HEARTBEAT\.md"),
    matcher("system_bracket", r"^System:\s*\[", flags=0),
    matcher("heartbeat_workspace", r"heartbeat.*workspace context"),
    matcher("strict_instruction", r"follow it strictly.*do not infer"),
    matcher("message_id_only", r"^\s*\[message_id:\s*[0-9a-f-]+\]\s*$", flags=0),
    matcher("heartbeat_ok", r"^HEARTBEAT_OK$"),
    matcher("silver_price_check", r"silver price check"),
    matcher("price_alert", r"price alert"),
]

CAPTURE_TRIGGERS: List[Matcher] = [
    matcher("remember", r"remember\b|zapamatuj"),
    matcher("preference", r"\bprefer\b|radši|\bi like\b|\bi love\b|\bi hate\b|\bi want\b"),
    matcher("decision", r"decided|rozhodli|will use|budeme"),
    matcher("emphasis", r"important|always|never"),
    matcher("problem", r"bug|fix|error|issue"),
    matcher("design", r"architecture|design|pattern"),
    matcher("annotation", r"TODO|FIXME|NOTE"),
]

# Priority order is policy: error information outranks design commentary
TYPE_RULES: List[Tuple[ObservationType, Matcher]] = [
    (ObservationType.BUGFIX, matcher("bugfix", r"bug|fix|error|issue|crash")),
    (ObservationType.DECISION, matcher("decision", r"decided|decision|will use|chose")),
    (ObservationType.ARCHITECTURE, matcher("architecture", r"architecture|design|pattern|structure")),
    (ObservationType.PREFERENCE, matcher("preference", r"\bprefer\b|\bi like\b|\bi want\b|\bi love\b|\bi hate\b")),
    (ObservationType.CODE_CHANGE, matcher("code_change", r"function|class|method|api")),
]
