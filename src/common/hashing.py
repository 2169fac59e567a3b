"""Content hashing for duplicate suppression.

Fingerprints are SHA-256 over a normalized ``title:...|content:...|published:...``
payload. Normalization lowercases, collapses whitespace and strips tags from the
content, and renders the publication date as a UTC instant, so the same release
from two differently formatted feeds hashes identically.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Any, Optional

from common.datetime import to_iso_instant
from common.text import collapse_whitespace, strip_tags
from common.utils import get_value

FIELD_SEPARATOR = "|"

_KEY_NUMBER_RE = re.compile(r"\$?[\d,]+\.?\d*%?")


@dataclass(frozen=True)
class HashOptions:
    include_title: bool = True
    include_content: bool = True
    include_published_at: bool = True


@dataclass(frozen=True)
class FuzzyHashes:
    exact: str
    title_only: str
    content_only: str
    title_and_date: str


@dataclass(frozen=True)
class ContentFingerprint:
    word_count: int
    first_words: str
    last_words: str
    key_numbers: list[str]


def normalize_text(text: str) -> str:
    return collapse_whitespace(text).lower()


def generate_content_hash(
    title: str,
    content: str,
    published_at: Any,
    options: Optional[HashOptions] = None,
) -> str:
    """Return a hex fingerprint for a release.

    Raises:
        ValueError: If `published_at` is included and cannot be parsed.
    """
    options = options or HashOptions()
    parts = []

    if options.include_title:
        parts.append(f"title:{normalize_text(title)}")

    if options.include_content:
        parts.append(f"content:{normalize_text(strip_tags(content))}")

    if options.include_published_at:
        parts.append(f"published:{to_iso_instant(published_at)}")

    payload = FIELD_SEPARATOR.join(parts)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def generate_fuzzy_hashes(title: str, content: str, published_at: Any) -> FuzzyHashes:
    """Hash variants for approximate duplicate queries."""
    return FuzzyHashes(
        exact=generate_content_hash(title, content, published_at),
        title_only=generate_content_hash(
            title, content, published_at,
            HashOptions(include_title=True, include_content=False, include_published_at=False),
        ),
        content_only=generate_content_hash(
            title, content, published_at,
            HashOptions(include_title=False, include_content=True, include_published_at=False),
        ),
        title_and_date=generate_content_hash(
            title, content, published_at,
            HashOptions(include_title=True, include_content=False, include_published_at=True),
        ),
    )


def are_duplicates(release1: Any, release2: Any, options: Optional[HashOptions] = None) -> bool:
    """Compare two releases (dicts or objects with title, content and published_at)."""
    hash1 = generate_content_hash(
        get_value(release1, "title"), get_value(release1, "content"), get_value(release1, "published_at"), options
    )
    hash2 = generate_content_hash(
        get_value(release2, "title"), get_value(release2, "content"), get_value(release2, "published_at"), options
    )
    return hash1 == hash2


def extract_content_fingerprint(content: str) -> ContentFingerprint:
    """Cheap structural indicators used alongside hashes for near-duplicate checks."""
    clean = collapse_whitespace(strip_tags(content))
    words = clean.split(" ") if clean else []
    numbers = _KEY_NUMBER_RE.findall(clean)

    return ContentFingerprint(
        word_count=len(words),
        first_words=" ".join(words[:10]),
        last_words=" ".join(words[-10:]),
        key_numbers=numbers[:5],
    )
