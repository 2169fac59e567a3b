"""Resolve-then-extract for feed links that may be Google News wrappers."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Optional
from urllib.parse import urlparse

import httpx

from extract_content.extract_content import extract_content_from_url
from extract_content.models import ArticleExtraction
from extract_content.monitor import ExtractionMonitor
from resolve_redirects.resolve_redirects import GoogleNewsResolver, get_default_resolver, is_google_news_url

logger = logging.getLogger(__name__)

DEFAULT_EXTRACTION_TIMEOUT = 20
DEFAULT_EXTRACTION_RETRIES = 3

_default_monitor = ExtractionMonitor()


def get_default_monitor() -> ExtractionMonitor:
    return _default_monitor


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _record(monitor: ExtractionMonitor, result: ArticleExtraction) -> None:
    timing = result.timing
    if result.success:
        monitor.record_success(
            url=result.original_url,
            redirect_ms=timing.redirect_resolution_ms,
            extraction_ms=timing.content_extraction_ms,
            total_ms=timing.total_ms,
            cached=result.cached,
            final_source=urlparse(result.resolved_url).hostname if result.resolved_url else None,
            extracted_by=result.extracted_by,
            confidence=result.confidence,
        )
    else:
        monitor.record_failure(
            url=result.original_url,
            redirect_ms=timing.redirect_resolution_ms,
            extraction_ms=timing.content_extraction_ms,
            total_ms=timing.total_ms,
            error=result.error or "Unknown error",
        )


async def extract_article(
    url: str,
    resolver: Optional[GoogleNewsResolver] = None,
    monitor: Optional[ExtractionMonitor] = None,
    timeout: float = DEFAULT_EXTRACTION_TIMEOUT,
    retries: int = DEFAULT_EXTRACTION_RETRIES,
    client: Optional[httpx.AsyncClient] = None,
) -> ArticleExtraction:
    """Resolve `url` when it is a Google News wrapper, then extract the article body.

    The outcome is recorded in `monitor` (the process-wide monitor by default).
    """
    resolver = resolver or get_default_resolver()
    monitor = monitor or get_default_monitor()
    start = time.monotonic()
    result = ArticleExtraction(success=False, original_url=url)

    final_url = url
    if is_google_news_url(url):
        resolution = await resolver.resolve(url)
        result.timing.redirect_resolution_ms = _elapsed_ms(start)
        if not resolution.success:
            result.error = f"Redirect resolution failed: {resolution.error}"
            result.timing.total_ms = _elapsed_ms(start)
            _record(monitor, result)
            return result

        final_url = resolution.final_url
        result.redirect_chain = list(resolution.redirect_chain)
        result.cached = resolution.cached
        logger.info("Resolved to: %s", final_url)
    else:
        result.timing.redirect_resolution_ms = _elapsed_ms(start)

    result.resolved_url = final_url

    extraction_start = time.monotonic()
    extraction = await extract_content_from_url(final_url, timeout=timeout, retries=retries, client=client)
    result.timing.content_extraction_ms = _elapsed_ms(extraction_start)
    result.timing.total_ms = _elapsed_ms(start)

    if not extraction.success:
        result.error = f"Content extraction failed: {extraction.error}"
    else:
        result.success = True
        result.content = extraction.content
        result.html_content = extraction.html_content
        result.text_content = extraction.text_content
        result.extracted_by = extraction.extracted_by
        result.confidence = extraction.confidence

    _record(monitor, result)
    return result


async def batch_extract_articles(
    urls: Iterable[str],
    resolver: Optional[GoogleNewsResolver] = None,
    monitor: Optional[ExtractionMonitor] = None,
    concurrency: int = 3,
    timeout: float = DEFAULT_EXTRACTION_TIMEOUT,
    retries: int = DEFAULT_EXTRACTION_RETRIES,
    client: Optional[httpx.AsyncClient] = None,
) -> list[ArticleExtraction]:
    """Extract articles in batches of `concurrency`; one result per input URL, in order."""
    urls = list(urls)
    concurrency = max(1, concurrency)
    results: list[ArticleExtraction] = []

    for start in range(0, len(urls), concurrency):
        batch = urls[start:start + concurrency]
        results.extend(
            await asyncio.gather(
                *(extract_article(url, resolver, monitor, timeout, retries, client) for url in batch)
            )
        )

    successes = sum(1 for result in results if result.success)
    logger.info("Batch extraction complete: %d/%d successful", successes, len(results))
    return results
