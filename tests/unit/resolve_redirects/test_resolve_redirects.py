"""Tests for resolve_redirects.resolve_redirects module."""

import asyncio
import base64
import time

import httpx

from common.http import create_async_client
from resolve_redirects.cache import RedirectCache
from resolve_redirects.models import ResolutionMethod
from resolve_redirects.resolve_redirects import (
    GoogleNewsResolver,
    decode_article_id,
    extract_article_url_from_html,
    get_default_resolver,
    infer_from_source_hint,
    is_google_news_url,
)

WRAPPER = "https://news.google.com/rss/articles/CBMiWmh0dHBzOi8v?oc=5"
ARTICLE = "https://www.reuters.com/business/finance/blackstone-q4-2024-results-2025-01-30/"


def _encoded_wrapper(article_url: str) -> str:
    payload = b"\x08\x13\x22" + article_url.encode() + b"\x01"
    article_id = base64.urlsafe_b64encode(payload).decode().rstrip("=")
    return f"https://news.google.com/rss/articles/{article_id}?oc=5"


def _resolve(handler, urls, cache=None, batch=False):
    calls = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return handler(request)

    async def runner():
        async with create_async_client(transport=httpx.MockTransport(recording_handler)) as client:
            resolver = GoogleNewsResolver(cache=cache, client=client)
            if batch:
                return await resolver.batch_resolve(urls, concurrency=2, delay_ms=0)
            return [await resolver.resolve(url) for url in urls]

    return asyncio.run(runner()), calls


class TestIsGoogleNewsUrl:
    def test_wrapper_patterns(self) -> None:
        assert is_google_news_url(WRAPPER)
        assert is_google_news_url("https://news.google.com/articles/CBMi123")
        assert not is_google_news_url("https://news.google.com/topstories")
        assert not is_google_news_url(ARTICLE)


class TestExtractArticleUrlFromHtml:
    def test_data_url_attribute(self) -> None:
        html = f'<div data-url="{ARTICLE}"></div><a href="https://www.bbc.com/news/other">x</a>'
        assert extract_article_url_from_html(html) == ARTICLE

    def test_anchor_skips_google_links(self) -> None:
        html = f'<a href="https://news.google.com/home">home</a><a href="{ARTICLE}">story</a>'
        assert extract_article_url_from_html(html) == ARTICLE

    def test_script_url(self) -> None:
        html = f'<script>window.location.replace("{ARTICLE}");</script>'
        assert extract_article_url_from_html(html) == ARTICLE

    def test_canonical_link(self) -> None:
        html = f'<html><head><link rel="canonical" href="{ARTICLE}"></head></html>'
        assert extract_article_url_from_html(html) == ARTICLE

    def test_meta_refresh(self) -> None:
        html = f'<meta http-equiv="refresh" content="0;url={ARTICLE}">'
        assert extract_article_url_from_html(html) == ARTICLE

    def test_no_publisher_link(self) -> None:
        assert extract_article_url_from_html('<a href="https://example.com/x">x</a>') is None


class TestDecodeArticleId:
    def test_embedded_url(self) -> None:
        assert decode_article_id(_encoded_wrapper(ARTICLE)) == ARTICLE

    def test_opaque_id(self) -> None:
        assert decode_article_id("https://news.google.com/rss/articles/CBMiXYZ") is None

    def test_no_article_segment(self) -> None:
        assert decode_article_id("https://news.google.com/topstories") is None


class TestInferFromSourceHint:
    def test_site_query(self) -> None:
        url = "https://news.google.com/rss/articles/CBMiXYZ?q=blackstone+site:wsj.com"
        assert infer_from_source_hint(url) == "https://www.wsj.com/business"

    def test_publisher_parameter(self) -> None:
        url = "https://news.google.com/rss/articles/CBMiXYZ?url=https://www.ft.com/content/abc"
        assert infer_from_source_hint(url) == "https://www.ft.com/companies"

    def test_no_hint(self) -> None:
        assert infer_from_source_hint(WRAPPER) is None


class TestGoogleNewsResolver:
    def test_follows_redirect_to_publisher(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "news.google.com":
                return httpx.Response(302, headers={"Location": ARTICLE})
            return httpx.Response(200, text="<html>article</html>")

        cache = RedirectCache()
        (result,), _ = _resolve(handler, [WRAPPER], cache)

        assert result.success
        assert result.final_url == ARTICLE
        assert result.method == ResolutionMethod.DIRECT_REDIRECT
        assert result.redirect_chain == [WRAPPER, ARTICLE]
        assert not result.cached
        assert cache.get(WRAPPER).final_url == ARTICLE

    def test_sends_browser_headers(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, text=f'<a href="{ARTICLE}">story</a>')

        _resolve(handler, [WRAPPER])
        assert "Mozilla" in seen["user-agent"]
        assert seen["accept-language"].startswith("en-US")

    def test_extracts_link_from_wrapper_page(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=f'<html><body><a href="{ARTICLE}">story</a></body></html>')

        (result,), _ = _resolve(handler, [WRAPPER])
        assert result.method == ResolutionMethod.HTML_EXTRACTION
        assert result.final_url == ARTICLE
        assert result.redirect_chain[-1] == ARTICLE

    def test_decodes_id_when_page_fails(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        url = _encoded_wrapper(ARTICLE)
        (result,), _ = _resolve(handler, [url])
        assert result.method == ResolutionMethod.ID_DECODING
        assert result.final_url == ARTICLE
        assert result.redirect_chain == [url, ARTICLE]

    def test_source_inference_last(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        url = "https://news.google.com/rss/articles/CBMiXYZ?q=site:bbc.com"
        (result,), _ = _resolve(handler, [url])
        assert result.method == ResolutionMethod.SOURCE_INFERENCE
        assert result.final_url == "https://www.bbc.com/news/business"

    def test_stalled_wrapper_page_falls_through_to_decoding(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200)

        url = _encoded_wrapper(ARTICLE)

        async def runner():
            async with create_async_client(transport=httpx.MockTransport(handler)) as client:
                resolver = GoogleNewsResolver(client=client, timeout=0.1)
                return await resolver.resolve(url)

        started = time.monotonic()
        result = asyncio.run(runner())
        assert result.method == ResolutionMethod.ID_DECODING
        assert result.final_url == ARTICLE
        assert time.monotonic() - started < 2

    def test_failure_is_not_cached(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html><body>consent page</body></html>")

        cache = RedirectCache()
        (first, second), calls = _resolve(handler, [WRAPPER, WRAPPER], cache)

        assert not first.success
        assert "All resolution strategies failed" in first.error
        assert not second.success
        assert len(calls) == 2
        assert len(cache) == 0

    def test_cached_resolution_skips_network(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        cache = RedirectCache()
        cache.put(WRAPPER, ARTICLE, [WRAPPER, ARTICLE], ResolutionMethod.DIRECT_REDIRECT)

        (result,), calls = _resolve(handler, [WRAPPER], cache)

        assert result.success
        assert result.cached
        assert result.final_url == ARTICLE
        assert calls == []

    def test_batch_resolve_keeps_every_url(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=f'<a href="{ARTICLE}">story</a>')

        urls = [f"{WRAPPER}&n={n}" for n in range(3)]
        results, calls = _resolve(handler, urls, batch=True)

        assert list(results) == urls
        assert all(result.success for result in results.values())
        assert len(calls) == 3


class TestDefaultResolver:
    def test_shared_instance(self) -> None:
        assert get_default_resolver() is get_default_resolver()
