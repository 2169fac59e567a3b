"""Reduce extracted HTML to a small safe subset and derive plain text."""

import logging
import re

from bs4 import BeautifulSoup, Comment, Doctype

from extract_content.models import ProcessedHtml

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset({"p", "strong", "em", "a", "ul", "ol", "li", "blockquote", "br"})
ALLOWED_LINK_ATTRS = ("href", "target")
TAG_RENAMES = {"b": "strong", "i": "em"}

# Removed together with everything inside them.
FORBIDDEN_TAGS = ["script", "style", "iframe", "object", "embed", "noscript", "template"]

_UNSAFE_HREF_RE = re.compile(r"^\s*(javascript|vbscript|data):", re.IGNORECASE)
_EMAIL_PROTECTION = "/cdn-cgi/l/email-protection"

DANGEROUS_PATTERNS = (
    re.compile(r"<script[^>]*>", re.IGNORECASE),
    re.compile(r"<iframe[^>]*>", re.IGNORECASE),
    re.compile(r"<object[^>]*>", re.IGNORECASE),
    re.compile(r"<embed[^>]*>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
)

FINANCIAL_RE = re.compile(r"(\$[\d,]+(?:\.\d{2})?\s*(?:million|billion|trillion|thousand)?)", re.IGNORECASE)
PERCENTAGE_RE = re.compile(
    r"(\d+(?:\.\d+)?%\s*(?:growth|increase|rise|up|down|decline|decrease))", re.IGNORECASE
)


def _is_tracking_pixel(tag) -> bool:
    src = tag.get("src") or ""
    style = (tag.get("style") or "").replace(" ", "")
    return "rt.prnewswire" in src or "width:1px" in style


def _drop_wire_artifacts(soup: BeautifulSoup) -> None:
    """Remove PR Newswire tracking pixels and Cloudflare email-protection markup."""
    for img in soup.find_all("img"):
        if _is_tracking_pixel(img):
            img.decompose()

    for span in soup.find_all("span", class_="__cf_email__"):
        span.decompose()

    for link in soup.find_all("a", href=True):
        if _EMAIL_PROTECTION in link["href"]:
            del link["href"]


def sanitize_html(html: str) -> str:
    """Keep only p/strong/em/a/ul/ol/li/blockquote/br; other tags are unwrapped.

    ``b`` and ``i`` become ``strong`` and ``em``. Links keep ``href`` and
    ``target`` only, and scripting URLs are dropped.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(FORBIDDEN_TAGS):
        tag.decompose()
    for node in soup.find_all(string=lambda s: isinstance(s, (Comment, Doctype))):
        node.extract()
    _drop_wire_artifacts(soup)

    for tag in soup.find_all(True):
        tag.name = TAG_RENAMES.get(tag.name, tag.name)
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue

        if tag.name == "a":
            attrs = {name: tag[name] for name in ALLOWED_LINK_ATTRS if tag.has_attr(name)}
            if _UNSAFE_HREF_RE.match(attrs.get("href", "")):
                attrs.pop("href")
            tag.attrs = attrs
        else:
            tag.attrs = {}

    for paragraph in soup.find_all("p"):
        if not paragraph.get_text(strip=True) and not paragraph.find(True):
            paragraph.decompose()

    cleaned = soup.decode()
    cleaned = re.sub(r"(<br/?>\s*){3,}", "<br/><br/>", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned)
    cleaned = re.sub(r">\s+<", "><", cleaned)
    return cleaned.strip()


def extract_text_content(html: str) -> str:
    """Plain-text rendition with entities decoded and whitespace collapsed."""
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(["script", "style"]):
        tag.decompose()
    text = soup.get_text(" ")
    return re.sub(r"\s+", " ", text.replace("\xa0", " ")).strip()


def highlight_financial_terms(html: str) -> str:
    """Wrap money amounts and percentage moves in ``<mark>`` tags."""
    if not html:
        return ""

    highlighted = FINANCIAL_RE.sub(r'<mark class="highlight-financial">\1</mark>', html)
    return PERCENTAGE_RE.sub(r'<mark class="highlight-percentage">\1</mark>', highlighted)


def validate_html_safety(html: str) -> bool:
    if not html:
        return True
    return not any(pattern.search(html) for pattern in DANGEROUS_PATTERNS)


def process_html_content(html: str, enable_highlighting: bool = True) -> ProcessedHtml:
    """Sanitize, optionally highlight, and derive text from an extracted fragment."""
    if not html or not isinstance(html, str):
        return ProcessedHtml(sanitized_html="", text_content="", is_valid=False)

    sanitized = sanitize_html(html)
    if enable_highlighting and sanitized:
        sanitized = highlight_financial_terms(sanitized)

    text_content = extract_text_content(html)
    is_valid = bool(sanitized) and validate_html_safety(sanitized)
    if not is_valid:
        logger.debug("Sanitized HTML rejected (%d chars)", len(sanitized))

    return ProcessedHtml(sanitized_html=sanitized, text_content=text_content, is_valid=is_valid)
