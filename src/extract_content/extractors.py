"""Registry of publisher-specific content selectors."""

from urllib.parse import urlparse

from extract_content.models import SourceExtractor

GENERIC = "generic"

CONTENT_EXTRACTORS = {
    "reuters.com": SourceExtractor(
        name="Reuters",
        selectors=(
            '[data-module="ArticleBody"] [data-module="StandardArticleBody_body"]',
            '[data-testid="paragraph"]',
            ".StandardArticleBody_body",
            ".ArticleBodyWrapper",
            ".StandardArticleBody_container",
            'div[data-module="ArticleBody"]',
            ".PaywallBarrier-free-content",
            ".article-body",
            ".story-body",
        ),
        cleanup_selectors=(
            ".RelatedCoverage-container",
            ".Attribution-container",
            ".AdSlot-container",
            ".SocialEmbed-container",
            ".Slideshow-container",
            ".MediaPlayer-container",
            ".InlineVideo-container",
            ".trust-project-component",
            ".paywall-bar",
            ".related-coverage",
            ".social-share",
            ".advertisement",
            ".ad-container",
        ),
        confidence=0.9,
    ),
    "prnewswire.com": SourceExtractor(
        name="PR Newswire",
        selectors=(
            ".release-body",
            ".news-release-content",
            ".release-text",
            ".pr-body",
            ".content-body",
            ".press-release-content",
            ".release-content",
        ),
        cleanup_selectors=(
            ".social-share",
            ".related-releases",
            ".company-boilerplate",
            ".contact-info",
            ".footer-content",
            ".advertisement",
            ".ad-container",
        ),
        confidence=0.85,
    ),
    "bloomberg.com": SourceExtractor(
        name="Bloomberg",
        selectors=(
            '[data-module="BodyWrapper"]',
            ".body-content",
            ".story-body",
            ".article-content",
            ".paywall-banner",
        ),
        cleanup_selectors=(
            ".inline-newsletter",
            ".related-stories",
            ".social-icons",
            ".advertisement",
            ".ad-container",
        ),
        confidence=0.88,
    ),
    "wsj.com": SourceExtractor(
        name="Wall Street Journal",
        selectors=(
            ".wsj-article-body",
            ".articleLead-container",
            ".article-content",
            ".story-body",
        ),
        cleanup_selectors=(
            ".wsj-article-credit-tagline",
            ".related-coverage-module",
            ".social-share",
            ".advertisement",
            ".ad-container",
        ),
        confidence=0.87,
    ),
    GENERIC: SourceExtractor(
        name="Generic",
        selectors=(
            "article",
            ".article-content",
            ".article-body",
            ".story-content",
            ".story-body",
            ".post-content",
            ".entry-content",
            ".content",
            "main",
            ".main-content",
            "#main-content",
        ),
        cleanup_selectors=(
            "nav",
            "header",
            "footer",
            "aside",
            ".sidebar",
            ".navigation",
            ".social-share",
            ".related-articles",
            ".advertisement",
            ".ad-container",
            ".comments",
            ".comment-section",
        ),
        confidence=0.6,
    ),
}


def detect_news_source(url: str) -> str:
    """Registry key for the URL's host: exact match first, then substring, else generic."""
    try:
        hostname = (urlparse(url).hostname or "").lower()
    except ValueError:
        return GENERIC

    hostname = hostname.removeprefix("www.")
    if hostname in CONTENT_EXTRACTORS:
        return hostname

    for source in CONTENT_EXTRACTORS:
        if source != GENERIC and source in hostname:
            return source
    return GENERIC


def get_extractor(source: str) -> SourceExtractor:
    return CONTENT_EXTRACTORS.get(source, CONTENT_EXTRACTORS[GENERIC])


def get_supported_sources() -> list[str]:
    return [source for source in CONTENT_EXTRACTORS if source != GENERIC]


def is_supported_source(url: str) -> bool:
    return detect_news_source(url) != GENERIC
