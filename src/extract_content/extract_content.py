"""Extract article body content from a publisher URL."""

from __future__ import annotations

import html as html_lib
import logging
import re
import time
from typing import Optional

import httpx
import trafilatura
from bs4 import BeautifulSoup
from readability import Document

from common.errors import ExtractionFailure, FetchError
from common.http import create_async_client
from extract_content.extractors import GENERIC, detect_news_source, get_extractor
from extract_content.fetch_html import fetch_html_with_retries
from extract_content.models import ExtractionResult, ExtractionTiming, SourceExtractor
from extract_content.quality import validate_content_quality
from extract_content.sanitize import process_html_content

logger = logging.getLogger(__name__)

LIBRARY_CONFIDENCE = 0.5
FALLBACK_CONFIDENCE = 0.4

FALLBACK_PATTERNS = (
    # substantial paragraph content
    re.compile(r"<div[^>]*>([^<]*<p[^>]*>[^<]{100,}[\s\S]*?)</div>", re.IGNORECASE),
    re.compile(r"<section[^>]*>([\s\S]*?)</section>", re.IGNORECASE),
    re.compile(r"<main[^>]*>([\s\S]*?)</main>", re.IGNORECASE),
    # press-release dateline, e.g. "NEW YORK, Jan. 5, 2024 /PRNewswire/ --"
    re.compile(
        r"(?:NEW YORK|LONDON|SAN FRANCISCO|CHICAGO|LOS ANGELES|BOSTON|WASHINGTON)"
        r"[^<]*?--[^<]*?--([\s\S]*?)(?:</section|</div|$)",
        re.IGNORECASE,
    ),
)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _accept(fragment: str, extracted_by: str, confidence: float) -> Optional[ExtractionResult]:
    """Quality-check and sanitize a candidate fragment."""
    if not fragment or not validate_content_quality(fragment):
        return None

    processed = process_html_content(fragment, enable_highlighting=True)
    if not processed.is_valid or not (processed.sanitized_html or processed.text_content):
        return None

    return ExtractionResult(
        success=True,
        content=processed.sanitized_html or processed.text_content,
        html_content=processed.sanitized_html,
        text_content=processed.text_content,
        extracted_by=extracted_by,
        confidence=confidence,
    )


def try_selector_extraction(html: str, extractor: SourceExtractor) -> Optional[ExtractionResult]:
    """Strip the extractor's boilerplate regions, then try its selectors in order."""
    soup = BeautifulSoup(html, "lxml")
    for selector in extractor.cleanup_selectors:
        for element in soup.select(selector):
            element.decompose()

    for selector in extractor.selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        result = _accept(
            element.decode_contents().strip(),
            f"{extractor.name} ({selector})",
            extractor.confidence,
        )
        if result:
            return result
    return None


def _trafilatura_fragment(html: str) -> Optional[str]:
    text = trafilatura.extract(html, include_comments=False, include_tables=False)
    if not text:
        return None
    paragraphs = [line.strip() for line in text.splitlines() if line.strip()]
    return "".join(f"<p>{html_lib.escape(p)}</p>" for p in paragraphs)


def _readability_fragment(html: str) -> Optional[str]:
    return Document(html).summary(html_partial=True) or None


def try_library_extraction(html: str) -> Optional[ExtractionResult]:
    """Boilerplate-removal libraries: trafilatura, then readability-lxml."""
    for name, extract in (("trafilatura", _trafilatura_fragment), ("readability", _readability_fragment)):
        try:
            fragment = extract(html)
        except Exception as e:
            logger.warning("%s failed: %s", name, e)
            continue

        result = _accept(fragment, name, LIBRARY_CONFIDENCE)
        if result:
            return result
    return None


def try_fallback_extraction(html: str) -> Optional[ExtractionResult]:
    """Regex heuristics over the raw page, used when no parser-based strategy worked."""
    for pattern in FALLBACK_PATTERNS:
        matches = [match.group(0) for match in pattern.finditer(html)]
        if not matches:
            continue
        result = _accept("".join(matches), "Fallback patterns", FALLBACK_CONFIDENCE)
        if result:
            return result
    return None


def extract_from_html(html: str, url: str) -> ExtractionResult:
    """Run the extraction cascade on already-fetched HTML."""
    source = detect_news_source(url)
    extractor = get_extractor(source)
    logger.info("Detected source: %s (%s)", extractor.name, source)

    result = try_selector_extraction(html, extractor)
    if result is None and source != GENERIC:
        logger.info("Source-specific extraction failed, trying generic selectors")
        result = try_selector_extraction(html, get_extractor(GENERIC))
    if result is None:
        logger.info("Generic extraction failed, trying extraction libraries")
        result = try_library_extraction(html)
    if result is None:
        logger.info("Library extraction failed, trying fallback patterns")
        result = try_fallback_extraction(html)

    if result is None:
        error = ExtractionFailure(f"No extraction strategy produced quality content for {url}")
        return ExtractionResult(success=False, error=str(error))
    return result


async def extract_content_from_url(
    url: str,
    timeout: float = 15,
    retries: int = 2,
    client: Optional[httpx.AsyncClient] = None,
) -> ExtractionResult:
    """Fetch `url` and extract its article body.

    Never raises for fetch or extraction problems; they are reported through
    `success=False` and `error`.
    """
    start = time.monotonic()
    logger.info("Extracting content from: %.100s", url)

    try:
        if client is None:
            async with create_async_client(timeout=timeout) as own_client:
                html = await fetch_html_with_retries(own_client, url, timeout, retries)
        else:
            html = await fetch_html_with_retries(client, url, timeout, retries)
    except FetchError as e:
        logger.error("Content fetch failed for %.100s: %s", url, e)
        elapsed = _elapsed_ms(start)
        return ExtractionResult(
            success=False, error=str(e), timing=ExtractionTiming(total_ms=elapsed, extraction_ms=0)
        )

    extraction_start = time.monotonic()
    if not html.strip():
        result = ExtractionResult(success=False, error="Empty HTML response")
    else:
        result = extract_from_html(html, url)

    extraction_ms = _elapsed_ms(extraction_start)
    result.timing = ExtractionTiming(total_ms=max(_elapsed_ms(start), extraction_ms), extraction_ms=extraction_ms)
    if result.success:
        logger.info(
            "Content extracted by %s (confidence %.2f, %d chars)",
            result.extracted_by, result.confidence, len(result.content),
        )
    else:
        logger.warning("Content extraction failed for %.100s: %s", url, result.error)
    return result
