"""Collaborator interfaces the poll job depends on.

The job only calls these verbs; persistence details belong to the adapter.
Adapters may raise `common.errors.StoreError`, which the job passes through
into the poll log.
"""

from __future__ import annotations

from datetime import datetime
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from classify_items.models import Company
from fetch_feeds.models import ClassifiedItem
from poll_releases.models import NewRelease, PollLogEntry, PollStatus, ReleaseQuery, StoredRelease

ItemFetcher = Callable[[Sequence[Company]], Awaitable[Sequence[ClassifiedItem]]]


class ContentStore(Protocol):
    async def save(self, user_id: str, company_id: str, release: NewRelease) -> StoredRelease: ...

    async def find_by_hash(self, user_id: str, company_id: str, content_hash: str) -> Optional[StoredRelease]: ...

    async def query(self, user_id: str, filters: ReleaseQuery) -> list[StoredRelease]: ...

    async def delete_past(self, user_id: str, cutoff: datetime) -> int: ...


class PollLogStore(Protocol):
    async def create_poll_log(self, user_id: str, company_id: str, started_at: datetime) -> PollLogEntry: ...

    async def update_poll_log(
        self,
        log_id: str,
        status: PollStatus,
        completed_at: datetime,
        releases_found: int = 0,
        releases_new: int = 0,
        releases_duplicate: int = 0,
        error_message: Optional[str] = None,
        error_details: Optional[dict] = None,
    ) -> PollLogEntry: ...

    async def recent_poll_logs(self, user_id: str, limit: int = 50) -> list[PollLogEntry]: ...
