"""
Recall Formatter

Renders search results for the two places they surface:
- the <relevant-memories> context block prepended to a turn
- the human-readable listing returned by the search action
"""

from typing import Iterable, List, Optional

from ..common.schemas import Observation

CONTEXT_HEADER = "The following memories may be relevant:"
CONTEXT_OPEN = "<relevant-memories>"
CONTEXT_CLOSE = "</relevant-memories>"

# Rough token estimate used for the context budget
CHARS_PER_TOKEN = 4


def _context_line(observation: Observation) -> str:
    text = observation.summary or (observation.output or "")[:200]
    return f"- [{observation.type}] {text}"


def estimate_tokens(text: str) -> int:
    return (len(text) + CHARS_PER_TOKEN - 1) // CHARS_PER_TOKEN


def format_recall_context(
    results: Iterable[Observation],
    max_tokens: Optional[int] = None,
) -> Optional[str]:
    """
    Build the context block for recalled memories.

    Lines are added in relevance order while the whole block stays within
    ``max_tokens``.

    Returns:
        Context block, or None if no line fits
    """
    frame = "\n".join([CONTEXT_OPEN, CONTEXT_HEADER, CONTEXT_CLOSE])
    used = estimate_tokens(frame)

    lines: List[str] = []
    for observation in results:
        line = _context_line(observation)
        cost = estimate_tokens(line + "\n")
        if max_tokens is not None and used + cost > max_tokens:
            break
        lines.append(line)
        used += cost

    if not lines:
        return None
    return "\n".join([CONTEXT_OPEN, CONTEXT_HEADER, *lines, CONTEXT_CLOSE])


def format_search_listing(results: List[Observation]) -> str:
    """Numbered listing for the search action"""
    if not results:
        return "No relevant memories found."

    listing = "\n".join(
        f"{i}. [{r.type}] {r.summary or (r.output or '')[:100]}..."
        for i, r in enumerate(results, 1)
    )
    return f"Found {len(results)} memories:\n\n{listing}"
