"""Registry of RSS sources polled for press releases."""

from __future__ import annotations

from typing import Iterable, Optional

from fetch_feeds.models import FeedDescriptor, FeedKind

RSS_SOURCES = {
    "general": {
        "name": "PR Newswire",
        "feeds": [
            FeedDescriptor(
                url="https://www.prnewswire.com/rss/news-releases-list.rss",
                kind=FeedKind.ALL_NEWS,
                source_name="general",
                display_name="PR Newswire Main",
            ),
        ],
    },
    # Issuer IR feeds go here as {"name": ..., "feeds": [FeedDescriptor(kind=FeedKind.IR_NEWS, ...)]}
    # once a working feed URL is known for the company.
}


def feeds_from_config(entries: Iterable) -> list[FeedDescriptor]:
    """Build descriptors from config FeedConfig entries."""
    return [
        FeedDescriptor(
            url=entry.url,
            kind=FeedKind(entry.kind),
            source_name=entry.source_name,
            display_name=entry.display_name,
        )
        for entry in entries
    ]


def get_feeds_for_companies(
    company_names: Iterable[str],
    configured: Optional[list[FeedDescriptor]] = None,
) -> list[FeedDescriptor]:
    """Feeds to poll for the given companies.

    General feeds are always included; a company's own feeds are added when a
    source keyed by its lowercased name is registered.
    """
    if configured:
        feeds = list(configured)
    else:
        feeds = list(RSS_SOURCES["general"]["feeds"])

    seen = {feed.url for feed in feeds}
    for name in company_names:
        source = RSS_SOURCES.get(name.lower())
        if not source or name.lower() == "general":
            continue
        for feed in source["feeds"]:
            if feed.url not in seen:
                seen.add(feed.url)
                feeds.append(feed)
    return feeds


def get_feed_display_name(source_name: str, kind: FeedKind | str) -> str:
    kind = FeedKind(kind)
    source = RSS_SOURCES.get(source_name)
    if not source:
        return f"{source_name} - {kind.value}"

    for feed in source["feeds"]:
        if feed.kind == kind and feed.display_name:
            return feed.display_name
    return f"{source['name']} - {kind.value}"
