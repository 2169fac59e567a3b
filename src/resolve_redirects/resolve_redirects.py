"""Resolve Google-News wrapper links to the publisher's article URL."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import re
from typing import Iterable, Optional
from urllib.parse import parse_qs, urlparse

import httpx
from bs4 import BeautifulSoup

from common.errors import FetchError, ResolutionFailure
from common.http import BROWSER_HEADERS, DEFAULT_TIMEOUT, create_async_client, get_with_deadline
from resolve_redirects.cache import RedirectCache
from resolve_redirects.models import ResolutionMethod, ResolveResult
from resolve_redirects.publishers import SECTION_URLS, is_news_website, is_valid_article_url, publisher_domain

logger = logging.getLogger(__name__)

GOOGLE_NEWS_MARKERS = ("news.google.com/rss/articles/", "news.google.com/articles/")

_ARTICLE_ID_RE = re.compile(r"/articles/([^?#/]+)")
_URL_RE = re.compile(r"https?://[^\s\"'<>\\\x00-\x1f]+")
_SITE_HINT_RE = re.compile(r"site:([a-z0-9.-]+)", re.IGNORECASE)


def is_google_news_url(url: str) -> bool:
    """Path-pattern check only; no network."""
    return any(marker in url for marker in GOOGLE_NEWS_MARKERS)


def _publisher_url(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    if is_news_website(value) and "google.com" not in value:
        return value
    return None


def extract_article_url_from_html(html: str) -> Optional[str]:
    """Find a publisher URL in a wrapper page.

    Tries, in order: ``data-url`` attributes, anchor hrefs, inline scripts, then
    canonical/og:url and any other meta content.
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(attrs={"data-url": True}):
        url = _publisher_url(tag.get("data-url"))
        if url:
            return url

    for tag in soup.find_all("a", href=True):
        url = _publisher_url(tag.get("href"))
        if url:
            return url

    for script in soup.find_all("script"):
        for candidate in _URL_RE.findall(script.get_text()):
            url = _publisher_url(candidate)
            if url:
                return url

    canonical = soup.find("link", rel="canonical")
    og_url = soup.find("meta", property="og:url")
    priority = [
        canonical.get("href") if canonical else None,
        og_url.get("content") if og_url else None,
    ]
    for value in priority:
        url = _publisher_url(value)
        if url:
            return url

    for meta in soup.find_all("meta", content=True):
        for candidate in _URL_RE.findall(meta.get("content")):
            url = _publisher_url(candidate)
            if url:
                return url

    return None


def decode_article_id(url: str) -> Optional[str]:
    """Look for a publisher URL embedded in the base64 article id of a wrapper URL."""
    match = _ARTICLE_ID_RE.search(url)
    if not match:
        return None

    encoded = match.group(1).replace("-", "+").replace("_", "/")
    for padding in ("", "=", "==", "==="):
        try:
            decoded = base64.b64decode(encoded + padding)
        except (binascii.Error, ValueError):
            continue

        text = decoded.decode("utf-8", errors="ignore")
        for candidate in _URL_RE.findall(text):
            candidate = re.sub(r"[\"'>)]+$", "", candidate)
            if is_valid_article_url(candidate):
                return candidate
    return None


def infer_from_source_hint(url: str) -> Optional[str]:
    """Coarse section URL for the publisher named in the wrapper's query string.

    Reads ``site:domain`` from the ``q`` parameter, or any allow-listed URL
    passed as a parameter value.
    """
    params = parse_qs(urlparse(url).query)

    for query in params.get("q", []):
        for hint in _SITE_HINT_RE.findall(query):
            domain = publisher_domain(f"https://{hint.lower()}/")
            if domain in SECTION_URLS:
                return SECTION_URLS[domain]

    for values in params.values():
        for value in values:
            domain = publisher_domain(value)
            if domain in SECTION_URLS:
                return SECTION_URLS[domain]
    return None


class GoogleNewsResolver:
    """Resolves wrapper URLs, caching every successful resolution.

    Failures are never cached so a later call retries from scratch.
    """

    def __init__(
        self,
        cache: Optional[RedirectCache] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_redirects: int = 10,
    ):
        self.cache = cache if cache is not None else RedirectCache()
        self._client = client
        self.timeout = timeout
        self.max_redirects = max_redirects

    async def _fetch_wrapper(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await get_with_deadline(
                self._client, url, self.timeout, headers=BROWSER_HEADERS, follow_redirects=True
            )
        async with create_async_client(
            timeout=self.timeout, headers=BROWSER_HEADERS, max_redirects=self.max_redirects
        ) as client:
            return await get_with_deadline(client, url, self.timeout)

    async def _resolve_from_page(self, url: str) -> Optional[ResolveResult]:
        try:
            response = await self._fetch_wrapper(url)
        except FetchError as e:
            logger.warning("Fetching wrapper page failed for %.100s: %s", url, e)
            return None

        chain = [str(r.url) for r in response.history] + [str(response.url)]
        if chain[0] != url:
            chain.insert(0, url)

        final_url = _publisher_url(str(response.url))
        if final_url and response.is_success:
            return ResolveResult(
                success=True, final_url=final_url, redirect_chain=chain,
                method=ResolutionMethod.DIRECT_REDIRECT,
            )

        if not response.is_success:
            logger.warning("Wrapper page returned HTTP %d for %.100s", response.status_code, url)
            return None

        extracted = extract_article_url_from_html(response.text)
        if extracted:
            return ResolveResult(
                success=True, final_url=extracted, redirect_chain=chain + [extracted],
                method=ResolutionMethod.HTML_EXTRACTION,
            )
        return None

    async def resolve(self, url: str) -> ResolveResult:
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug("Using cached redirect for %.50s", url)
            return ResolveResult(
                success=True,
                final_url=cached.final_url,
                redirect_chain=list(cached.redirect_chain),
                cached=True,
                method=cached.method,
            )

        logger.info("Resolving Google News URL: %.100s", url)
        result = await self._resolve_from_page(url)

        if result is None:
            decoded = decode_article_id(url)
            if decoded:
                result = ResolveResult(
                    success=True, final_url=decoded, redirect_chain=[url, decoded],
                    method=ResolutionMethod.ID_DECODING,
                )

        if result is None:
            inferred = infer_from_source_hint(url)
            if inferred:
                result = ResolveResult(
                    success=True, final_url=inferred, redirect_chain=[url, inferred],
                    method=ResolutionMethod.SOURCE_INFERENCE,
                )

        if result is None:
            error = ResolutionFailure(f"All resolution strategies failed for {url}")
            logger.warning("%s", error)
            return ResolveResult(success=False, error=str(error))

        self.cache.put(url, result.final_url, result.redirect_chain, result.method)
        logger.info("Resolved via %s: %s", result.method.value, result.final_url)
        return result

    async def batch_resolve(
        self,
        urls: Iterable[str],
        concurrency: int = 3,
        delay_ms: int = 1000,
    ) -> dict[str, ResolveResult]:
        """Resolve URLs in fixed-size concurrent batches with a pause between batches."""
        urls = list(urls)
        concurrency = max(1, concurrency)
        results: dict[str, ResolveResult] = {}
        logger.info("Batch resolving %d URLs (concurrency: %d)", len(urls), concurrency)

        for start in range(0, len(urls), concurrency):
            batch = urls[start:start + concurrency]
            outcomes = await asyncio.gather(*(self.resolve(url) for url in batch))
            results.update(zip(batch, outcomes))

            if start + concurrency < len(urls) and delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000)

        successes = sum(1 for result in results.values() if result.success)
        logger.info("Batch resolution complete: %d/%d successful", successes, len(results))
        return results


_default_resolver: Optional[GoogleNewsResolver] = None


def get_default_resolver() -> GoogleNewsResolver:
    """Process-wide resolver sharing one cache."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = GoogleNewsResolver()
    return _default_resolver


async def resolve_google_news_url(url: str) -> ResolveResult:
    return await get_default_resolver().resolve(url)


async def batch_resolve_google_news_urls(
    urls: Iterable[str],
    concurrency: int = 3,
    delay_ms: int = 1000,
) -> dict[str, ResolveResult]:
    return await get_default_resolver().batch_resolve(urls, concurrency, delay_ms)
