"""
Turn Messages

Converts a host turn's message list into candidate texts for capture.
Only user and assistant messages count; content may be a plain string or a
list of content blocks, of which only "text" blocks are read.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

CAPTURE_ROLES = ("user", "assistant")


@dataclass
class TurnText:
    """
    One candidate text from a conversation turn.

    Ephemeral: exists only while the capture pipeline runs.
    """
    text: str
    role: str
    session_key: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Check if text has content"""
        return bool(self.text and self.text.strip())


def _block_text(block: Any) -> Optional[str]:
    if not isinstance(block, dict):
        return None
    if block.get("type") != "text":
        return None
    text = block.get("text")
    return text if isinstance(text, str) else None


def extract_turn_texts(
    messages: Optional[Iterable[Any]],
    session_key: Optional[str] = None,
) -> List[TurnText]:
    """
    Extract candidate texts from a turn's messages, in original order.

    Args:
        messages: Host message objects (dicts with "role" and "content")
        session_key: Session the turn belongs to

    Returns:
        List of TurnText; messages of other roles and non-text blocks are skipped
    """
    texts: List[TurnText] = []
    for msg in messages or []:
        if not isinstance(msg, dict):
            continue
        role = msg.get("role")
        if role not in CAPTURE_ROLES:
            continue

        content = msg.get("content")
        if isinstance(content, str):
            texts.append(TurnText(text=content, role=role, session_key=session_key))
        elif isinstance(content, list):
            for block in content:
                text = _block_text(block)
                if text is not None:
                    texts.append(TurnText(text=text, role=role, session_key=session_key))
    return texts
