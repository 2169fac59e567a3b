"""Quality gate for extracted article content."""

import re

from common.text import strip_tags

MIN_CHARS = 100
MIN_WORDS = 30
MIN_SENTENCES = 3
MIN_SENTENCE_CHARS = 10

UNWANTED_PATTERNS = (
    re.compile(r"^(share|follow|subscribe|contact|advertisement)", re.IGNORECASE),
    re.compile(r"^(home|news|previous|next)", re.IGNORECASE),
    re.compile(r"^(learn more|visit us|for more)", re.IGNORECASE),
    re.compile(r"javascript.*required", re.IGNORECASE),
    re.compile(r"enable.*javascript", re.IGNORECASE),
)

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def validate_content_quality(content: str) -> bool:
    """Reject navigation chrome, boilerplate and fragments that are too short to be an article."""
    if not content or len(content.strip()) < MIN_CHARS:
        return False

    text = strip_tags(content).strip()
    if len(text.split()) < MIN_WORDS:
        return False

    sentences = [s for s in _SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > MIN_SENTENCE_CHARS]
    if len(sentences) < MIN_SENTENCES:
        return False

    return not any(pattern.search(text) for pattern in UNWANTED_PATTERNS)
