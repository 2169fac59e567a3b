"""Shared httpx client settings for outbound requests."""

import asyncio

import httpx

from common.errors import FetchError

FEED_USER_AGENT = "PressWire/1.0 (Competitive Intelligence Tool)"
FEED_ACCEPT = "application/rss+xml, application/xml, text/xml"

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

DEFAULT_TIMEOUT = 15.0


def create_async_client(
    timeout: float = DEFAULT_TIMEOUT,
    headers: dict[str, str] | None = None,
    max_redirects: int = 10,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build an AsyncClient that follows redirects.

    `transport` is for tests (httpx.MockTransport).
    """
    return httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        follow_redirects=True,
        max_redirects=max_redirects,
        transport=transport,
    )


async def get_with_deadline(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    **kwargs,
) -> httpx.Response:
    """GET `url`, giving up once `timeout` seconds have passed in total.

    httpx applies its own timeout to each connect/read/write step, so a
    server that trickles bytes can keep a request open far longer. Here the
    whole request, redirects and body included, shares one deadline.

    Raises:
        FetchError: Transport failure, or the deadline passed.
    """
    try:
        return await asyncio.wait_for(client.get(url, timeout=timeout, **kwargs), timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise FetchError(f"Timed out after {timeout:g}s fetching {url}") from e
    except httpx.HTTPError as e:
        raise FetchError(f"Request to {url} failed: {e}") from e
