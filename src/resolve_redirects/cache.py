"""TTL cache for resolved redirect URLs."""

import logging
import time
from typing import Callable, Optional

from resolve_redirects.models import CacheStats, RedirectResolution, ResolutionMethod

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_ENTRIES = 1000


class RedirectCache:
    """In-process cache keyed by the original wrapper URL.

    Entries expire `ttl_seconds` after they were stored. When the cache grows
    past `max_entries`, expired entries are purged first and the oldest live
    entries are evicted if that is not enough.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, RedirectResolution] = {}
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, url: str) -> Optional[RedirectResolution]:
        entry = self._entries.get(url)
        if entry is None:
            self._misses += 1
            return None

        if entry.is_expired(self._clock()):
            del self._entries[url]
            self._misses += 1
            return None

        self._hits += 1
        return entry

    def put(
        self,
        url: str,
        final_url: str,
        redirect_chain: list[str],
        method: ResolutionMethod,
    ) -> RedirectResolution:
        entry = RedirectResolution(
            final_url=final_url,
            redirect_chain=list(redirect_chain),
            timestamp=self._clock(),
            ttl=self.ttl_seconds,
            method=method,
        )
        self._entries.pop(url, None)
        self._entries[url] = entry

        if len(self._entries) > self.max_entries:
            self.cleanup()
        return entry

    def cleanup(self) -> int:
        """Drop expired entries, then the oldest ones while over capacity. Returns the count removed."""
        now = self._clock()
        expired = [url for url, entry in self._entries.items() if entry.is_expired(now)]
        for url in expired:
            del self._entries[url]

        evicted = 0
        # dicts keep insertion order and put() re-inserts, so the first key is the oldest
        while len(self._entries) > self.max_entries:
            del self._entries[next(iter(self._entries))]
            evicted += 1

        logger.info("Cleaned up %d expired and %d evicted cache entries", len(expired), evicted)
        return len(expired) + evicted

    def stats(self) -> CacheStats:
        now = self._clock()
        lookups = self._hits + self._misses
        oldest = max((now - entry.timestamp for entry in self._entries.values()), default=0.0)
        return CacheStats(
            size=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / lookups if lookups else 0.0,
            oldest_entry_age=oldest,
        )

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0
        logger.info("Redirect cache cleared")
