"""
Text Normalizer

Canonicalizes conversational text for fingerprinting (dedup) and strips
host-injected message identifier tags.
"""

import re

# "[message_id: 3f2a-...]" tags appended by chat hosts
MESSAGE_ID_TAG_RE = re.compile(r"\[message_id:\s*[0-9a-f-]+\]", re.IGNORECASE)

# Looser form used when sanitizing search queries: any body up to the bracket
MESSAGE_ID_ANY_RE = re.compile(r"\[message_id:[^\]]*\]", re.IGNORECASE)

_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_FINGERPRINT_LENGTH = 100


def strip_message_ids(text: str) -> str:
    """Remove message-id tags and trim surrounding whitespace."""
    return MESSAGE_ID_TAG_RE.sub("", text).strip()


def fingerprint(cleaned: str, length: int = DEFAULT_FINGERPRINT_LENGTH) -> str:
    """Fingerprint of already-cleaned text: opening characters, lowercased, whitespace collapsed."""
    return _WHITESPACE_RE.sub(" ", cleaned[:length].lower()).strip()


def normalize(text: str, length: int = DEFAULT_FINGERPRINT_LENGTH) -> str:
    """
    Produce the dedup fingerprint for raw turn text.

    Only the first ``length`` characters participate, so texts that share an
    opening but differ later collapse to the same fingerprint.

    Args:
        text: Raw text, possibly carrying message-id tags
        length: Number of leading characters to keep

    Returns:
        Fingerprint string
    """
    return fingerprint(strip_message_ids(text), length)
