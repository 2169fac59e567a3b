"""Tests for extract_content.extract_content module."""

import asyncio
from unittest.mock import patch

import httpx

from common.http import create_async_client
from extract_content.extract_content import extract_content_from_url, extract_from_html

PARAGRAPHS = [
    "NEW YORK, Jan. 30, 2025 /PRNewswire/ -- Blackstone today reported its fourth quarter and full "
    "year 2024 results, with total assets under management reaching $1.13 trillion.",
    "Stephen Schwarzman, Chairman and Chief Executive Officer, said the firm delivered strong "
    "results across its businesses as investors continued to allocate capital to its funds.",
    "Fee related earnings rose 12% growth year over year, driven by perpetual capital vehicles "
    "and continued fundraising momentum in private credit and infrastructure strategies.",
    "The firm declared a quarterly dividend payable to holders of record as of February 10, 2025, "
    "and will host a conference call with analysts later this morning.",
]
BODY = "".join(f"<p>{paragraph}</p>" for paragraph in PARAGRAPHS)

PRN_URL = "https://www.prnewswire.com/news-releases/blackstone-reports-fourth-quarter-2024-results.html"

PRN_PAGE = f"""
<html><head><title>Blackstone Reports Results</title><script>var tracking = 1;</script></head>
<body>
  <nav>Home | News | Contact</nav>
  <div class="release-body">
    <div class="social-share">Share on LinkedIn</div>
    {BODY}
  </div>
  <footer>Copyright PR Newswire</footer>
</body></html>
"""

ARTICLE_PAGE = f"""
<html><body>
  <header>Site header</header>
  <article>{BODY}</article>
  <aside>Related stories</aside>
</body></html>
"""


class TestExtractFromHtml:
    def test_source_specific_selector(self) -> None:
        result = extract_from_html(PRN_PAGE, PRN_URL)

        assert result.success
        assert result.extracted_by == "PR Newswire (.release-body)"
        assert result.confidence == 0.85
        assert "Share on LinkedIn" not in result.text_content
        assert "Blackstone today reported" in result.text_content
        assert "<script" not in result.html_content
        assert '<mark class="highlight-percentage">12% growth</mark>' in result.html_content
        assert result.content == result.html_content

    def test_generic_selectors_for_unknown_site(self) -> None:
        result = extract_from_html(ARTICLE_PAGE, "https://www.businesswire.example/news/home/1/en/")
        assert result.success
        assert result.extracted_by == "Generic (article)"
        assert result.confidence == 0.6

    def test_falls_back_to_generic_when_site_selectors_miss(self) -> None:
        result = extract_from_html(ARTICLE_PAGE, "https://www.reuters.com/business/blackstone-q4/")
        assert result.success
        assert result.extracted_by == "Generic (article)"

    def test_regex_fallback(self) -> None:
        page = f"<html><body><section>{BODY}</section></body></html>"
        with patch("extract_content.extract_content.try_library_extraction", return_value=None):
            result = extract_from_html(page, "https://example.com/release")
        assert result.success
        assert result.extracted_by == "Fallback patterns"
        assert result.confidence == 0.4

    def test_boilerplate_page_fails(self) -> None:
        page = "<html><body><article><p>Subscribe to our newsletter for updates</p></article></body></html>"
        result = extract_from_html(page, "https://example.com/x")
        assert not result.success
        assert "No extraction strategy" in result.error


def _extract(handler, url=PRN_URL):
    async def runner():
        async with create_async_client(transport=httpx.MockTransport(handler)) as client:
            return await extract_content_from_url(url, timeout=5, retries=1, client=client)

    return asyncio.run(runner())


class TestExtractContentFromUrl:
    def test_success_with_timing(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=PRN_PAGE, headers={"content-type": "text/html"})

        result = _extract(handler)
        assert result.success
        assert result.extracted_by == "PR Newswire (.release-body)"
        assert result.timing.total_ms >= result.timing.extraction_ms >= 0

    def test_http_error_is_reported(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        result = _extract(handler)
        assert not result.success
        assert result.error == "HTTP 404: Not Found"

    def test_empty_page(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="   ", headers={"content-type": "text/html"})

        result = _extract(handler)
        assert not result.success
        assert result.error == "Empty HTML response"
