"""Data models for resolve_redirects pipeline stage."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ResolutionMethod(str, Enum):
    DIRECT_REDIRECT = "direct-redirect"
    HTML_EXTRACTION = "html-extraction"
    ID_DECODING = "id-decoding"
    SOURCE_INFERENCE = "source-inference"


@dataclass(frozen=True)
class RedirectResolution:
    """Cached outcome of resolving one wrapper URL."""
    final_url: str
    redirect_chain: list[str]
    timestamp: float
    ttl: float
    method: ResolutionMethod

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl


@dataclass
class ResolveResult:
    success: bool
    final_url: Optional[str] = None
    redirect_chain: list[str] = field(default_factory=list)
    error: Optional[str] = None
    cached: bool = False
    method: Optional[ResolutionMethod] = None


@dataclass
class CacheStats:
    size: int
    hits: int
    misses: int
    hit_rate: float
    oldest_entry_age: float
