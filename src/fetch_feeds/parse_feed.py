"""Parse RSS/Atom XML into classified feed items."""

import logging
from typing import Optional, Sequence

import feedparser

from classify_items.companies import extract_company_mentions
from classify_items.fintech import detect_fintech_content
from classify_items.language import is_english_content
from classify_items.models import KnownCompany
from common.text import clean_text
from fetch_feeds.models import ClassifiedItem, FeedKind, LANGUAGE_FILTERED_KINDS, ParsedFeed

logger = logging.getLogger(__name__)


def _entry_text(entry, *keys: str) -> str:
    for key in keys:
        value = entry.get(key)
        if value:
            return str(value).strip()
    return ""


def parse_rss_xml(
    xml: str,
    feed_name: str,
    feed_kind: FeedKind,
    source_name: str,
    roster: Optional[Sequence[KnownCompany]] = None,
) -> ParsedFeed:
    """Parse feed XML and classify every usable item.

    Items without a title or link are dropped and counted in `skipped`.
    Items from language-filtered feeds that do not read as English are
    dropped and counted in `filtered_non_english`.
    """
    feed_kind = FeedKind(feed_kind)
    parsed = feedparser.parse(xml)
    if parsed.bozo and not parsed.entries:
        logger.warning("Feed %s could not be parsed: %s", feed_name, parsed.get("bozo_exception"))

    result = ParsedFeed(items=[], title=str(parsed.feed.get("title", "")).strip())

    for entry in parsed.entries:
        title = _entry_text(entry, "title")
        link = _entry_text(entry, "link")
        if not title or not link:
            result.skipped += 1
            continue

        raw_description = _entry_text(entry, "summary", "description")
        description = clean_text(raw_description) or ""
        full_text = f"{title} {description}"

        # Language check runs on the raw description, markup included.
        if feed_kind in LANGUAGE_FILTERED_KINDS and not is_english_content(f"{title} {raw_description}"):
            result.filtered_non_english += 1
            continue

        fintech = detect_fintech_content(title, description)

        result.items.append(
            ClassifiedItem(
                title=title,
                description=description,
                published_at=_entry_text(entry, "published", "updated"),
                link=link,
                guid=_entry_text(entry, "id") or None,
                feed_name=feed_name,
                feed_kind=feed_kind,
                source_name=source_name,
                company_mentions=extract_company_mentions(full_text, roster),
                is_fintech=fintech.is_fintech,
                fintech_categories=[category.value for category in fintech.categories],
                fintech_relevance_score=fintech.relevance_score,
            )
        )

    if result.skipped:
        logger.warning("Skipped %d items without title or link in %s", result.skipped, feed_name)
    logger.debug(
        "Parsed %d items from %s (%d non-English dropped)",
        len(result.items), feed_name, result.filtered_non_english,
    )
    return result
