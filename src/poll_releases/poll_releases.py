"""Poll feeds for each tracked company and persist new releases."""

from __future__ import annotations

import asyncio
import logging
import traceback
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

import httpx

from classify_items.models import Company
from common.errors import StoreError
from common.http import DEFAULT_TIMEOUT, FEED_USER_AGENT
from fetch_feeds.fetch_feeds import fetch_releases
from fetch_feeds.models import ClassifiedItem, FeedDescriptor
from fetch_feeds.sources import RSS_SOURCES
from poll_releases.convert import SUMMARY_CHARS, process_feed_items
from poll_releases.models import PollResult, PollStatus, PollSummary
from poll_releases.ports import ContentStore, ItemFetcher, PollLogStore

logger = logging.getLogger(__name__)

DEFAULT_RSS_SOURCE_URL = RSS_SOURCES["general"]["feeds"][0].url
DEFAULT_RETENTION_DAYS = 30


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def error_details(error: BaseException) -> dict:
    """Serializable description of an exception for the poll log."""
    return {
        "type": type(error).__name__,
        "message": str(error),
        "traceback": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
    }


def make_feed_fetcher(
    feeds: Optional[Sequence[FeedDescriptor]] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = FEED_USER_AGENT,
) -> ItemFetcher:
    """Item fetcher backed by the RSS feed stage."""

    async def fetch(companies: Sequence[Company]) -> list[ClassifiedItem]:
        aggregated = await fetch_releases(companies, feeds, client, timeout, user_agent)
        return aggregated.items

    return fetch


class PollJob:
    """Runs fetch -> convert -> dedup -> save for each company, one poll log per company."""

    def __init__(
        self,
        store: ContentStore,
        log_store: PollLogStore,
        fetcher: ItemFetcher,
        company_delay: float = 1.0,
        rss_source_url: str = DEFAULT_RSS_SOURCE_URL,
        summary_chars: int = SUMMARY_CHARS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.log_store = log_store
        self.fetcher = fetcher
        self.company_delay = company_delay
        self.rss_source_url = rss_source_url
        self.summary_chars = summary_chars
        self._clock = clock

    async def poll_company(self, user_id: str, company: Company) -> PollResult:
        """Poll one company. Never raises; failures are recorded in the result and poll log."""
        log_entry = None
        try:
            log_entry = await self.log_store.create_poll_log(user_id, company.id, self._clock())
            logger.info("Polling RSS for company: %s", company.name)

            items = await self.fetcher([company])
            logger.info("Found %d RSS items for %s", len(items), company.name)

            conversion = process_feed_items(items, company.id, self.rss_source_url, self.summary_chars)
            created = 0
            duplicates = 0
            failed = 0
            for release in conversion.releases:
                try:
                    if await self.store.find_by_hash(user_id, company.id, release.content_hash):
                        duplicates += 1
                        continue
                    await self.store.save(user_id, company.id, release)
                    created += 1
                except StoreError as e:
                    failed += 1
                    logger.warning("Failed to store release %.60s for %s: %s", release.title, company.name, e)

            logger.info(
                "Stored %d new releases, %d duplicates, %d failed for %s",
                created, duplicates, failed, company.name,
            )

            await self.log_store.update_poll_log(
                log_entry.id,
                PollStatus.SUCCESS,
                self._clock(),
                releases_found=len(conversion.releases),
                releases_new=created,
                releases_duplicate=duplicates,
                error_message=f"{failed} release(s) failed to save" if failed else None,
            )
            return PollResult(
                company_id=company.id,
                company_name=company.name,
                success=True,
                releases_found=len(conversion.releases),
                releases_new=created,
                releases_duplicate=duplicates,
                releases_failed=failed,
            )
        except Exception as e:
            logger.error("Failed to poll RSS for %s: %s", company.name, e)
            message = str(e) or type(e).__name__
            if log_entry is not None:
                try:
                    await self.log_store.update_poll_log(
                        log_entry.id,
                        PollStatus.ERROR,
                        self._clock(),
                        error_message=message,
                        error_details=error_details(e),
                    )
                except Exception as log_error:
                    logger.error("Failed to record poll error for %s: %s", company.name, log_error)
            return PollResult(
                company_id=company.id,
                company_name=company.name,
                success=False,
                error=message,
            )

    async def poll_user(
        self,
        user_id: str,
        companies: Sequence[Company],
        company_id: Optional[str] = None,
    ) -> PollSummary:
        """Poll `companies` one after another, pausing `company_delay` seconds between them.

        Raises:
            ValueError: If `company_id` is given and matches none of `companies`.
        """
        summary = PollSummary(user_id=user_id, started_at=self._clock())

        to_process = list(companies)
        if company_id:
            to_process = [company for company in to_process if company.id == company_id]
            if not to_process:
                raise ValueError(f"Company not found: {company_id}")

        logger.info("Starting RSS poll for user %s (%d companies)", user_id, len(to_process))

        for index, company in enumerate(to_process):
            if index and self.company_delay > 0:
                await asyncio.sleep(self.company_delay)

            result = await self.poll_company(user_id, company)
            summary.results.append(result)
            if result.success:
                summary.total_releases += result.releases_found
                summary.total_new += result.releases_new
                summary.total_duplicates += result.releases_duplicate
            else:
                summary.errors += 1

        summary.companies_processed = len(to_process)
        summary.completed_at = self._clock()
        logger.info(
            "RSS poll completed: %d new releases, %d duplicates, %d errors",
            summary.total_new, summary.total_duplicates, summary.errors,
        )
        return summary


async def cleanup_old_releases(
    store: ContentStore,
    user_id: str,
    days: int = DEFAULT_RETENTION_DAYS,
    now: Optional[datetime] = None,
) -> int:
    """Delete releases published before the retention cutoff."""
    cutoff = (now or _utcnow()) - timedelta(days=days)
    deleted = await store.delete_past(user_id, cutoff)
    logger.info("Cleaned up %d old press releases for user %s", deleted, user_id)
    return deleted
