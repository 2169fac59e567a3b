"""Data models for fetch_feeds pipeline stage."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FeedKind(str, Enum):
    IR_NEWS = "ir-news"
    SEC_FILINGS = "sec-filings"
    ALL_NEWS = "all-news"
    FINANCIAL = "financial"


# Issuer-published feeds; their items belong to the issuing company outright.
AUTHORITATIVE_KINDS = frozenset({FeedKind.IR_NEWS, FeedKind.SEC_FILINGS})

# Wire feeds that can carry non-English copy.
LANGUAGE_FILTERED_KINDS = frozenset({FeedKind.ALL_NEWS})


@dataclass(frozen=True)
class FeedDescriptor:
    url: str
    kind: FeedKind
    source_name: str
    display_name: str = ""

    @property
    def feed_name(self) -> str:
        return f"{self.source_name}-{self.kind.value}"


@dataclass(frozen=True)
class FeedItem:
    """One <item>/<entry> from a feed. Title and link are never empty."""
    title: str
    description: str
    published_at: str
    link: str
    guid: Optional[str]
    feed_name: str
    feed_kind: FeedKind
    source_name: str


@dataclass(frozen=True)
class ClassifiedItem:
    """FeedItem with language, fintech and company-mention classification attached."""
    title: str
    description: str
    published_at: str
    link: str
    guid: Optional[str]
    feed_name: str
    feed_kind: FeedKind
    source_name: str
    company_mentions: list[str] = field(default_factory=list)
    matched_company: Optional[str] = None
    relevance_score: int = 0
    is_fintech: bool = False
    fintech_categories: list[str] = field(default_factory=list)
    fintech_relevance_score: int = 0


@dataclass
class ParsedFeed:
    items: list[ClassifiedItem]
    skipped: int = 0
    filtered_non_english: int = 0
    title: str = ""

    @property
    def total_entries(self) -> int:
        return len(self.items) + self.skipped + self.filtered_non_english


@dataclass
class FeedFetchResult:
    feed_name: str
    feed_url: str
    feed_kind: FeedKind
    source_name: str
    success: bool
    items: list[ClassifiedItem] = field(default_factory=list)
    error: Optional[str] = None
    error_type: Optional[str] = None
    skipped: int = 0


@dataclass
class DedupResult:
    items: list[ClassifiedItem]
    duplicates_removed: int


@dataclass
class FeedMetrics:
    total_items_all_feeds: int
    items_per_feed: dict[str, int]
    duplicates_removed: int
    company_matches: int
    feeds_by_type: dict[str, int]


@dataclass
class AggregatedFeeds:
    items: list[ClassifiedItem]
    fetched_at: str
    total_items: int
    filtered_items: int
    user_companies: list[str]
    feed_results: list[FeedFetchResult]
    metrics: FeedMetrics


@dataclass
class UrlCheck:
    valid: bool
    error: Optional[str] = None
    warning: Optional[str] = None


@dataclass
class FeedCheckResult:
    """Outcome of fetching a candidate feed URL once, before it is configured."""
    url: str
    valid: bool
    suggested_name: str = ""
    detected_kind: Optional[FeedKind] = None
    title: Optional[str] = None
    description: Optional[str] = None
    item_count: int = 0
    error: Optional[str] = None
