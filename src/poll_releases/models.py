"""Data models for poll_releases pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class PollStatus(str, Enum):
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class PollLogEntry:
    """One record per company per poll run.

    Created with status RUNNING and moved to SUCCESS or ERROR exactly once.
    """
    id: str
    user_id: str
    company_id: str
    started_at: datetime
    status: PollStatus = PollStatus.RUNNING
    completed_at: Optional[datetime] = None
    releases_found: int = 0
    releases_new: int = 0
    releases_duplicate: int = 0
    error_message: Optional[str] = None
    error_details: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class NewRelease:
    """A feed item converted to the shape the content store persists."""
    company_id: str
    title: str
    content: str
    summary: str
    source_url: str
    published_at: str
    content_hash: str
    rss_source_url: str


@dataclass
class StoredRelease:
    id: str
    user_id: str
    company_id: str
    title: str
    content: str
    summary: str
    source_url: str
    published_at: str
    content_hash: str
    rss_source_url: str
    created_at: datetime
    is_deleted: bool = False


@dataclass(frozen=True)
class ReleaseQuery:
    company_id: Optional[str] = None
    since: Optional[datetime] = None
    limit: Optional[int] = None
    offset: int = 0
    order_by: str = "published_at"
    descending: bool = True


@dataclass(frozen=True)
class ConversionResult:
    releases: list[NewRelease]
    skipped: int = 0


@dataclass
class PollResult:
    company_id: str
    company_name: str
    success: bool
    releases_found: int = 0
    releases_new: int = 0
    releases_duplicate: int = 0
    releases_failed: int = 0
    error: Optional[str] = None


@dataclass
class PollSummary:
    user_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    companies_processed: int = 0
    total_releases: int = 0
    total_new: int = 0
    total_duplicates: int = 0
    errors: int = 0
    results: list[PollResult] = field(default_factory=list)
