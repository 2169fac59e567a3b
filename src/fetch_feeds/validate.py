"""Check candidate feed URLs before they are added to the feed config."""

import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

import httpx

from common.errors import PipelineError
from common.http import FEED_USER_AGENT, create_async_client
from common.text import collapse_whitespace
from fetch_feeds.fetch_feeds import download_feed
from fetch_feeds.models import FeedCheckResult, FeedKind, UrlCheck
from fetch_feeds.parse_feed import parse_rss_xml

logger = logging.getLogger(__name__)

CHECK_TIMEOUT = 10.0
MIN_NAME_LENGTH = 2

# Checked in order; the first kind with a matching pattern wins.
KIND_PATTERNS: list[tuple[FeedKind, tuple[re.Pattern, ...]]] = [
    (FeedKind.IR_NEWS, tuple(re.compile(p) for p in (
        r"investors?\..*/rss",
        r"ir\..*/rss",
        r"newsroom\..*/rss",
        r"press\..*/rss",
        r"news\..*/rss",
    ))),
    (FeedKind.SEC_FILINGS, tuple(re.compile(p) for p in (
        r"sec\.gov.*edgar",
        r"edgar",
        r"filings",
    ))),
    (FeedKind.ALL_NEWS, tuple(re.compile(p) for p in (
        r"yahoo.*finance",
        r"reuters",
        r"bloomberg",
        r"marketwatch",
        r"cnbc",
    ))),
    (FeedKind.FINANCIAL, tuple(re.compile(p) for p in (
        r"fintech",
        r"finance",
        r"banking",
        r"payments",
    ))),
]

_FEED_PATH_HINTS = ("rss", "xml", "feed", "atom")
_NAME_NOISE_RE = re.compile(r"RSS|Feed|News", re.IGNORECASE)


def validate_feed_url(url: str) -> UrlCheck:
    """Check that `url` is an absolute http(s) URL.

    A URL whose path carries no feed hint (rss, xml, feed, atom) and no
    ``format`` query parameter is still valid, but gets a warning.
    """
    parsed = urlparse(url.strip())
    if parsed.scheme and parsed.scheme not in ("http", "https"):
        return UrlCheck(valid=False, error="URL must use HTTP or HTTPS protocol")
    if not parsed.scheme or not parsed.netloc:
        return UrlCheck(valid=False, error="Invalid URL format")

    path = parsed.path.lower()
    if not any(hint in path for hint in _FEED_PATH_HINTS) and "format" not in parse_qs(parsed.query):
        logger.warning("URL may not be an RSS feed (no RSS indicators found): %s", url)
        return UrlCheck(valid=True, warning="URL may not be an RSS feed (no RSS indicators found)")
    return UrlCheck(valid=True)


def detect_feed_kind(url: str) -> Optional[FeedKind]:
    """Guess the feed kind from URL patterns. None when nothing matches."""
    lower_url = url.lower()
    for kind, patterns in KIND_PATTERNS:
        if any(pattern.search(lower_url) for pattern in patterns):
            return kind
    return None


def _domain_name(url: str) -> str:
    hostname = urlparse(url).hostname
    if not hostname:
        return "Custom Feed"
    hostname = re.sub(r"^www\.", "", hostname)
    return " ".join(part[:1].upper() + part[1:] for part in hostname.split("."))


def suggest_feed_name(url: str, title: Optional[str] = None) -> str:
    """Display name for a feed: its channel title minus RSS/Feed/News, else its domain."""
    if title:
        cleaned = collapse_whitespace(_NAME_NOISE_RE.sub("", title))
        if cleaned:
            return cleaned
    return _domain_name(url)


def validate_feed_entry(url: str, name: str, kind: str) -> list[str]:
    """Errors that would stop a feed entry from being configured. Empty when it is usable."""
    errors = []

    url_check = validate_feed_url(url)
    if not url_check.valid:
        errors.append(url_check.error or "Invalid URL")

    name = (name or "").strip()
    if not name:
        errors.append("Feed name is required")
    elif len(name) < MIN_NAME_LENGTH:
        errors.append(f"Feed name must be at least {MIN_NAME_LENGTH} characters")

    if kind not in {feed_kind.value for feed_kind in FeedKind}:
        errors.append("Invalid feed type")

    return errors


async def check_feed(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = CHECK_TIMEOUT,
    user_agent: str = FEED_USER_AGENT,
) -> FeedCheckResult:
    """Fetch `url` once and report whether it serves a usable feed.

    Never raises for fetch or format problems; they come back as an
    invalid result with `error` set.
    """
    url_check = validate_feed_url(url)
    detected_kind = detect_feed_kind(url)
    if not url_check.valid:
        return FeedCheckResult(url=url, valid=False, detected_kind=detected_kind, error=url_check.error)

    if client is None:
        async with create_async_client(timeout=timeout) as own_client:
            return await check_feed(url, own_client, timeout, user_agent)

    try:
        xml_text = await download_feed(client, url, timeout, user_agent)
    except PipelineError as e:
        logger.warning("Feed check failed for %s: %s", url, e)
        return FeedCheckResult(
            url=url,
            valid=False,
            suggested_name=suggest_feed_name(url),
            detected_kind=detected_kind,
            error=str(e) or type(e).__name__,
        )

    parsed = parse_rss_xml(xml_text, "feed-check", detected_kind or FeedKind.IR_NEWS, "feed-check")
    item_count = parsed.total_entries
    logger.info("Feed check for %s: %d items", url, item_count)

    return FeedCheckResult(
        url=url,
        valid=True,
        suggested_name=suggest_feed_name(url, parsed.title),
        detected_kind=detected_kind,
        title=parsed.title or None,
        description=f"Found {item_count} items",
        item_count=item_count,
    )
