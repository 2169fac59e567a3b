"""Fetch article HTML with bounded retries."""

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from common.errors import FetchError, HttpError
from common.http import BROWSER_HEADERS, get_with_deadline

logger = logging.getLogger(__name__)

BACKOFF_BASE_SECONDS = 1.0
BACKOFF_CAP_SECONDS = 5.0


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed attempt number `attempt` (1-based)."""
    return min(BACKOFF_BASE_SECONDS * 2 ** (attempt - 1), BACKOFF_CAP_SECONDS)


async def _fetch_once(client: httpx.AsyncClient, url: str, timeout: float) -> str:
    response = await get_with_deadline(
        client, url, timeout, headers=BROWSER_HEADERS, follow_redirects=True
    )

    if not response.is_success:
        raise HttpError(response.status_code, response.reason_phrase)

    content_type = response.headers.get("content-type", "")
    if "text/html" not in content_type:
        raise FetchError(f"Expected HTML, got: {content_type}")

    return response.text


async def fetch_html_with_retries(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = 15,
    retries: int = 2,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> str:
    """Fetch `url` up to `retries` times with exponential backoff between attempts.

    Raises:
        FetchError: The error from the last attempt.
    """
    attempts = max(1, retries)
    last_error: FetchError = FetchError("All fetch attempts failed")

    for attempt in range(1, attempts + 1):
        logger.debug("Fetching HTML (attempt %d/%d): %.100s", attempt, attempts, url)
        try:
            return await _fetch_once(client, url, timeout)
        except FetchError as e:
            last_error = e
            logger.warning("Fetch attempt %d failed: %s", attempt, e)

        if attempt < attempts:
            delay = backoff_delay(attempt)
            logger.debug("Waiting %.1fs before retry", delay)
            await sleep(delay)

    raise last_error
