"""Data models for extract_content pipeline stage."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class SourceExtractor:
    """Selector cascade for one publisher."""
    name: str
    selectors: tuple[str, ...]
    cleanup_selectors: tuple[str, ...]
    confidence: float


@dataclass
class ExtractionTiming:
    total_ms: int = 0
    extraction_ms: int = 0


@dataclass
class ExtractionResult:
    success: bool
    content: str = ""
    html_content: Optional[str] = None
    text_content: Optional[str] = None
    extracted_by: Optional[str] = None
    confidence: Optional[float] = None
    error: Optional[str] = None
    timing: ExtractionTiming = field(default_factory=ExtractionTiming)


@dataclass(frozen=True)
class ProcessedHtml:
    sanitized_html: str
    text_content: str
    is_valid: bool


@dataclass
class ArticleTiming:
    redirect_resolution_ms: int = 0
    content_extraction_ms: int = 0
    total_ms: int = 0


@dataclass
class ArticleExtraction:
    """Result of resolving (when needed) and extracting one article link."""
    success: bool
    original_url: str
    resolved_url: Optional[str] = None
    redirect_chain: list[str] = field(default_factory=list)
    content: Optional[str] = None
    html_content: Optional[str] = None
    text_content: Optional[str] = None
    extracted_by: Optional[str] = None
    confidence: Optional[float] = None
    cached: bool = False
    error: Optional[str] = None
    timing: ArticleTiming = field(default_factory=ArticleTiming)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class ExtractionEvent:
    timestamp: float
    url: str
    success: bool
    redirect_ms: int
    extraction_ms: int
    total_ms: int
    cached: bool = False
    final_source: Optional[str] = None
    extracted_by: Optional[str] = None
    confidence: Optional[float] = None
    error: Optional[str] = None


@dataclass
class ExtractionMetrics:
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_redirect_ms: float = 0.0
    average_extraction_ms: float = 0.0
    average_total_ms: float = 0.0
    success_rate: float = 0.0
    cache_hit_rate: float = 0.0
    errors_by_type: dict[str, int] = field(default_factory=dict)
    source_distribution: dict[str, int] = field(default_factory=dict)
    last_updated: float = 0.0


@dataclass
class ExtractionInsights:
    status: HealthStatus
    recommendations: list[str] = field(default_factory=list)
    top_errors: list[tuple[str, int]] = field(default_factory=list)
    top_sources: list[tuple[str, int]] = field(default_factory=list)
    performance_issues: list[str] = field(default_factory=list)


@dataclass
class HealthCheck:
    status: HealthStatus
    metrics: ExtractionMetrics
    insights: ExtractionInsights
    recent_window: ExtractionMetrics
