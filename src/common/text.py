"""Text cleaning helpers shared by the parser, hasher and release converter."""

import html
import re
from typing import Optional

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_tags(text: str) -> str:
    """Remove anything that looks like an HTML tag. Entities are left alone."""
    return _TAG_RE.sub("", text)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_text(text: Optional[str]) -> Optional[str]:
    """Clean text by stripping HTML, fixing escapes, and collapsing whitespace."""
    if not text:
        return None
    # Strip HTML tags (keep text content)
    text = re.sub(r"<[^>]+>", " ", text)
    text = html.unescape(text)
    # Remove escaped quotes
    text = text.replace('\\"', '"')
    text = collapse_whitespace(text)
    return text if text else None


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Clip text to `limit` characters including the suffix."""
    if len(text) <= limit:
        return text
    return text[: limit - len(suffix)] + suffix
