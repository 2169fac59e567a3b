"""Convert scored feed items into storable releases."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from common.datetime import to_iso_instant
from common.hashing import generate_content_hash
from common.text import collapse_whitespace, strip_tags, truncate
from common.utils import get_text, get_value
from poll_releases.models import ConversionResult, NewRelease

logger = logging.getLogger(__name__)

SUMMARY_CHARS = 200
REQUIRED_FIELDS = ("title", "description", "link", "published_at")


def is_valid_item(item: Any) -> bool:
    """Title, description, link and publication date must all be non-empty strings."""
    if item is None:
        return False
    return all(get_text(item, key) for key in REQUIRED_FIELDS)


def convert_item_to_release(
    item: Any,
    company_id: str,
    rss_source_url: str,
    summary_chars: int = SUMMARY_CHARS,
) -> NewRelease:
    """Build a NewRelease from a feed item (ClassifiedItem or dict).

    Raises:
        ValueError: If the item's publication date cannot be parsed.
    """
    title = get_text(item, "title")
    content = collapse_whitespace(strip_tags(get_value(item, "description")))
    published_at = get_value(item, "published_at")

    return NewRelease(
        company_id=company_id,
        title=title,
        content=content,
        summary=truncate(content, summary_chars),
        source_url=get_value(item, "link"),
        published_at=to_iso_instant(published_at),
        content_hash=generate_content_hash(title, content, published_at),
        rss_source_url=rss_source_url,
    )


def process_feed_items(
    items: Iterable[Any],
    company_id: str,
    rss_source_url: str,
    summary_chars: int = SUMMARY_CHARS,
) -> ConversionResult:
    """Convert every valid item, counting the ones that had to be skipped."""
    releases = []
    skipped = 0

    for item in items:
        if not is_valid_item(item):
            skipped += 1
            continue
        try:
            releases.append(convert_item_to_release(item, company_id, rss_source_url, summary_chars))
        except ValueError as e:
            logger.warning("Skipping item %r: %s", get_value(item, "title"), e)
            skipped += 1

    if skipped:
        logger.warning("Skipped %d invalid RSS items from %s", skipped, rss_source_url)

    return ConversionResult(releases=releases, skipped=skipped)
