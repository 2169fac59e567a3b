"""In-memory content and poll-log stores."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from common.datetime import parse_published_date
from common.errors import StoreError
from poll_releases.models import NewRelease, PollLogEntry, PollStatus, ReleaseQuery, StoredRelease


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryContentStore:
    """Releases kept per user; deletes are soft, as in a database-backed store."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._releases: dict[str, list[StoredRelease]] = {}

    async def save(self, user_id: str, company_id: str, release: NewRelease) -> StoredRelease:
        if await self.find_by_hash(user_id, company_id, release.content_hash):
            raise StoreError(f"Release with hash {release.content_hash} already stored")

        stored = StoredRelease(
            id=str(uuid.uuid4()),
            user_id=user_id,
            company_id=company_id,
            title=release.title,
            content=release.content,
            summary=release.summary,
            source_url=release.source_url,
            published_at=release.published_at,
            content_hash=release.content_hash,
            rss_source_url=release.rss_source_url,
            created_at=self._clock(),
        )
        self._releases.setdefault(user_id, []).append(stored)
        return stored

    async def find_by_hash(self, user_id: str, company_id: str, content_hash: str) -> Optional[StoredRelease]:
        for release in self._releases.get(user_id, []):
            if (
                release.company_id == company_id
                and release.content_hash == content_hash
                and not release.is_deleted
            ):
                return release
        return None

    async def query(self, user_id: str, filters: ReleaseQuery) -> list[StoredRelease]:
        releases = [r for r in self._releases.get(user_id, []) if not r.is_deleted]

        if filters.company_id:
            releases = [r for r in releases if r.company_id == filters.company_id]
        if filters.since:
            releases = [r for r in releases if parse_published_date(r.published_at) >= filters.since]

        if filters.order_by == "created_at":
            releases.sort(key=lambda r: r.created_at, reverse=filters.descending)
        else:
            releases.sort(key=lambda r: parse_published_date(r.published_at), reverse=filters.descending)

        end = filters.offset + filters.limit if filters.limit else None
        return releases[filters.offset:end]

    async def delete_past(self, user_id: str, cutoff: datetime) -> int:
        deleted = 0
        for release in self._releases.get(user_id, []):
            if not release.is_deleted and parse_published_date(release.published_at) < cutoff:
                release.is_deleted = True
                deleted += 1
        return deleted


class InMemoryPollLogStore:
    def __init__(self):
        self._logs: dict[str, PollLogEntry] = {}

    async def create_poll_log(self, user_id: str, company_id: str, started_at: datetime) -> PollLogEntry:
        entry = PollLogEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            company_id=company_id,
            started_at=started_at,
        )
        self._logs[entry.id] = entry
        return entry

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
    ) -> PollLogEntry:
        entry = self._logs.get(log_id)
        if entry is None:
            raise StoreError(f"Poll log not found: {log_id}")
        if entry.status != PollStatus.RUNNING:
            raise StoreError(f"Poll log {log_id} already completed with status {entry.status.value}")

        entry.status = status
        entry.completed_at = completed_at
        entry.releases_found = releases_found
        entry.releases_new = releases_new
        entry.releases_duplicate = releases_duplicate
        entry.error_message = error_message
        entry.error_details = error_details
        return entry

    async def recent_poll_logs(self, user_id: str, limit: int = 50) -> list[PollLogEntry]:
        logs = [entry for entry in self._logs.values() if entry.user_id == user_id]
        logs.sort(key=lambda entry: entry.started_at, reverse=True)
        return logs[:limit]
