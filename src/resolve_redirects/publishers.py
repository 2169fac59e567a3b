"""Known publisher domains and article-URL checks."""

from typing import Optional
from urllib.parse import urlparse

NEWS_WEBSITES = (
    "reuters.com",
    "bloomberg.com",
    "wsj.com",
    "nytimes.com",
    "cnn.com",
    "bbc.com",
    "ap.org",
    "npr.org",
    "apnews.com",
    "abcnews.go.com",
    "cbsnews.com",
    "nbcnews.com",
    "foxnews.com",
    "washingtonpost.com",
    "theguardian.com",
    "ft.com",
    "economist.com",
)

# Coarse landing pages used when only the publisher of an article is known.
SECTION_URLS = {
    "reuters.com": "https://www.reuters.com/business/",
    "bloomberg.com": "https://www.bloomberg.com/markets",
    "wsj.com": "https://www.wsj.com/business",
    "nytimes.com": "https://www.nytimes.com/section/business",
    "cnn.com": "https://www.cnn.com/business",
    "bbc.com": "https://www.bbc.com/news/business",
    "apnews.com": "https://apnews.com/business",
    "npr.org": "https://www.npr.org/sections/business/",
    "cbsnews.com": "https://www.cbsnews.com/moneywatch/",
    "nbcnews.com": "https://www.nbcnews.com/business",
    "foxnews.com": "https://www.foxnews.com/us",
    "washingtonpost.com": "https://www.washingtonpost.com/business/",
    "theguardian.com": "https://www.theguardian.com/business",
    "ft.com": "https://www.ft.com/companies",
    "economist.com": "https://www.economist.com/business",
}

INVALID_PATH_MARKERS = ("/search", "/category", "/tag", "/author", "/rss", "/feed")


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def publisher_domain(url: str) -> Optional[str]:
    """Allow-listed domain that `url` belongs to (exact host or subdomain), if any."""
    hostname = _hostname(url)
    if not hostname:
        return None
    for domain in NEWS_WEBSITES:
        if hostname == domain or hostname.endswith(f".{domain}"):
            return domain
    return None


def is_news_website(url: str) -> bool:
    return publisher_domain(url) is not None


def is_valid_article_url(url: str) -> bool:
    """True for HTTPS publisher URLs whose path looks like an article, not a section front."""
    if not is_news_website(url):
        return False

    parsed = urlparse(url)
    if parsed.scheme != "https":
        return False
    if len(parsed.path) < 5:
        return False
    return not any(marker in parsed.path for marker in INVALID_PATH_MARKERS)
