"""
Query Processor

Turns an upcoming prompt into a query string that is safe to hand to the
worker's full-text search (SQLite FTS5).

Only characters that carry FTS5 query syntax are neutralized; this is not a
general-purpose sanitizer.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..common.normalizer import MESSAGE_ID_ANY_RE

# Characters with meaning in FTS5 query syntax
FTS_SPECIAL_RE = re.compile(r'[:\[\](){}*"]')

MIN_PROMPT_LENGTH = 10


@dataclass
class RecallQuery:
    """A prompt prepared for search"""
    original: str
    query: str


class QueryProcessor:
    """
    Builds FTS-safe recall queries.

    Responsibilities:
    1. Refuse prompts with too little signal to search on
    2. Remove message-id tags
    3. Replace FTS special characters with spaces
    """

    def __init__(self, min_prompt_length: int = MIN_PROMPT_LENGTH):
        self._min_prompt_length = min_prompt_length

    def parse(self, prompt: Optional[str]) -> Optional[RecallQuery]:
        """
        Prepare a prompt for search.

        Args:
            prompt: Raw prompt text

        Returns:
            RecallQuery, or None when no search should be issued
        """
        if not prompt or len(prompt) < self._min_prompt_length:
            return None

        query = self._clean_query(prompt)
        if not query:
            return None
        return RecallQuery(original=prompt, query=query)

    def _clean_query(self, prompt: str) -> str:
        """Remove message-id tags and FTS syntax characters"""
        cleaned = MESSAGE_ID_ANY_RE.sub("", prompt)
        cleaned = FTS_SPECIAL_RE.sub(" ", cleaned)
        return cleaned.strip()


def build_query(prompt: Optional[str], min_prompt_length: int = MIN_PROMPT_LENGTH) -> Optional[str]:
    """
    Sanitize a prompt into a full-text search query.

    Returns:
        Query string, or None if the prompt is absent or too short
    """
    parsed = QueryProcessor(min_prompt_length).parse(prompt)
    return parsed.query if parsed else None
