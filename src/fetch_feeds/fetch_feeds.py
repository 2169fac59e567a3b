"""Fetch RSS feeds concurrently and aggregate their items."""

import asyncio
import logging
from typing import Any, Optional, Sequence

import httpx

from common.errors import EmptyFeedError, HttpError, NotRssError, PipelineError
from common.http import DEFAULT_TIMEOUT, FEED_ACCEPT, FEED_USER_AGENT, create_async_client, get_with_deadline
from fetch_feeds.aggregate import aggregate_feed_results
from fetch_feeds.models import AggregatedFeeds, FeedDescriptor, FeedFetchResult
from fetch_feeds.parse_feed import parse_rss_xml
from fetch_feeds.sources import get_feed_display_name, get_feeds_for_companies

logger = logging.getLogger(__name__)


async def download_feed(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = FEED_USER_AGENT,
) -> str:
    """GET a feed body, rejecting non-2xx, blank and non-XML responses.

    Raises:
        FetchError: Transport failure or timeout.
        HttpError: Non-2xx status.
        EmptyFeedError: Blank body.
        NotRssError: Body contains neither ``<rss`` nor ``<feed``.
    """
    headers = {"User-Agent": user_agent, "Accept": FEED_ACCEPT}
    response = await get_with_deadline(client, url, timeout, headers=headers, follow_redirects=True)

    if not response.is_success:
        raise HttpError(response.status_code, response.reason_phrase)

    xml_text = response.text
    if not xml_text or not xml_text.strip():
        raise EmptyFeedError()
    if "<rss" not in xml_text and "<feed" not in xml_text:
        raise NotRssError()
    return xml_text


def _failed_result(feed: FeedDescriptor, error: BaseException) -> FeedFetchResult:
    return FeedFetchResult(
        feed_name=feed.feed_name,
        feed_url=feed.url,
        feed_kind=feed.kind,
        source_name=feed.source_name,
        success=False,
        error=str(error) or type(error).__name__,
        error_type=type(error).__name__,
    )


async def fetch_feed(
    client: httpx.AsyncClient,
    feed: FeedDescriptor,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = FEED_USER_AGENT,
) -> FeedFetchResult:
    """Fetch and parse one feed. Fetch and format errors become a failed result."""
    display_name = feed.display_name or get_feed_display_name(feed.source_name, feed.kind)
    logger.info("Fetching %s", display_name)

    try:
        xml_text = await download_feed(client, feed.url, timeout, user_agent)
    except PipelineError as e:
        logger.warning("%s failed: %s", display_name, e)
        return _failed_result(feed, e)

    parsed = parse_rss_xml(xml_text, feed.feed_name, feed.kind, feed.source_name)
    logger.info("%s: %d items", display_name, len(parsed.items))

    return FeedFetchResult(
        feed_name=feed.feed_name,
        feed_url=feed.url,
        feed_kind=feed.kind,
        source_name=feed.source_name,
        success=True,
        items=parsed.items,
        skipped=parsed.skipped,
    )


async def fetch_all_feeds(
    feeds: Sequence[FeedDescriptor],
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = FEED_USER_AGENT,
) -> list[FeedFetchResult]:
    """Fetch every feed concurrently. One result per feed, in input order."""
    if client is None:
        async with create_async_client(timeout=timeout) as own_client:
            return await fetch_all_feeds(feeds, own_client, timeout, user_agent)

    outcomes = await asyncio.gather(
        *(fetch_feed(client, feed, timeout, user_agent) for feed in feeds),
        return_exceptions=True,
    )

    results = []
    for feed, outcome in zip(feeds, outcomes):
        if isinstance(outcome, Exception):
            logger.error("Unexpected error fetching %s: %s", feed.url, outcome)
            results.append(_failed_result(feed, outcome))
        else:
            results.append(outcome)
    return results


async def fetch_releases(
    companies: Sequence[Any],
    feeds: Optional[Sequence[FeedDescriptor]] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = FEED_USER_AGENT,
) -> AggregatedFeeds:
    """Fetch the feeds relevant to `companies` and return the scored, sorted batch."""
    if feeds is None:
        feeds = get_feeds_for_companies([company.name for company in companies])

    logger.info("Fetching %d feeds for %d companies", len(feeds), len(companies))
    results = await fetch_all_feeds(feeds, client, timeout, user_agent)
    return aggregate_feed_results(results, companies)
