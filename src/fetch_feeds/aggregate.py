"""Merge per-feed results into one deduplicated, scored and ordered batch."""

import dataclasses
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from classify_items.companies import calculate_relevance_score, sort_by_relevance_and_date
from fetch_feeds.models import AggregatedFeeds, ClassifiedItem, DedupResult, FeedFetchResult, FeedMetrics

logger = logging.getLogger(__name__)


def remove_duplicates(items: Sequence[ClassifiedItem]) -> DedupResult:
    """Keep the first item per guid (or link when there is no guid), in input order."""
    seen = set()
    unique_items = []
    duplicates_removed = 0

    for item in items:
        identifier = item.guid or item.link
        if identifier in seen:
            duplicates_removed += 1
            continue
        seen.add(identifier)
        unique_items.append(item)

    return DedupResult(items=unique_items, duplicates_removed=duplicates_removed)


def score_items(items: Sequence[ClassifiedItem], companies: Sequence[Any]) -> list[ClassifiedItem]:
    """Attach relevance to every item and keep the ones that scored above zero."""
    scored = []
    for item in items:
        relevance = calculate_relevance_score(item, companies)
        if relevance.score > 0:
            scored.append(
                dataclasses.replace(
                    item,
                    relevance_score=relevance.score,
                    matched_company=relevance.matched_company,
                )
            )
    return scored


def aggregate_feed_results(
    results: Sequence[FeedFetchResult],
    companies: Sequence[Any],
    now: Optional[datetime] = None,
) -> AggregatedFeeds:
    """Combine feed results: count, dedupe, score against `companies` and sort.

    With no companies every unique item is kept unscored.
    """
    now = now or datetime.now(timezone.utc)
    all_items: list[ClassifiedItem] = []
    items_per_feed: dict[str, int] = {}
    feeds_by_type: Counter = Counter()

    for result in results:
        items_per_feed[result.feed_name] = len(result.items)
        feeds_by_type[result.feed_kind.value] += len(result.items)
        all_items.extend(result.items)

    total_items_all_feeds = len(all_items)
    logger.info("Total items from all feeds: %d", total_items_all_feeds)

    dedup = remove_duplicates(all_items)
    logger.info(
        "Removed %d duplicates, %d unique items remaining",
        dedup.duplicates_removed, len(dedup.items),
    )

    filtered = dedup.items
    company_matches = 0
    if companies:
        filtered = score_items(dedup.items, companies)
        company_matches = len(filtered)

    sorted_items = sort_by_relevance_and_date(filtered)

    failed = [result for result in results if not result.success]
    for result in failed:
        logger.warning("Feed %s failed: %s", result.feed_name, result.error)

    logger.info("%d relevant items from %d unique items", len(sorted_items), len(dedup.items))

    return AggregatedFeeds(
        items=sorted_items,
        fetched_at=now.isoformat(),
        total_items=len(dedup.items),
        filtered_items=len(sorted_items),
        user_companies=[company.name for company in companies],
        feed_results=list(results),
        metrics=FeedMetrics(
            total_items_all_feeds=total_items_all_feeds,
            items_per_feed=items_per_feed,
            duplicates_removed=dedup.duplicates_removed,
            company_matches=company_matches,
            feeds_by_type=dict(feeds_by_type),
        ),
    )
