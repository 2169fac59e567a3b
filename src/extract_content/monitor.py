"""In-process success/latency tracking for article extraction."""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import Callable, Optional, Sequence

from extract_content.models import (
    ExtractionEvent,
    ExtractionInsights,
    ExtractionMetrics,
    HealthCheck,
    HealthStatus,
)

logger = logging.getLogger(__name__)

UNHEALTHY_BELOW = 0.5
DEGRADED_BELOW = 0.8
LOW_CACHE_HIT_RATE = 0.3
SLOW_TOTAL_MS = 10_000
SLOW_REDIRECT_MS = 5_000
SLOW_EXTRACTION_MS = 8_000
DEFAULT_WINDOW_SECONDS = 60 * 60


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class ExtractionMonitor:
    """Keeps the most recent `max_events` extraction events and derives metrics from them."""

    def __init__(self, max_events: int = 1000, clock: Callable[[], float] = time.time):
        self.max_events = max_events
        self._clock = clock
        self._events: list[ExtractionEvent] = []

    def record_success(
        self,
        url: str,
        redirect_ms: int,
        extraction_ms: int,
        total_ms: int,
        cached: bool = False,
        final_source: Optional[str] = None,
        extracted_by: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> None:
        self._add(
            ExtractionEvent(
                timestamp=self._clock(),
                url=url,
                success=True,
                redirect_ms=redirect_ms,
                extraction_ms=extraction_ms,
                total_ms=total_ms,
                cached=cached,
                final_source=final_source,
                extracted_by=extracted_by,
                confidence=confidence,
            )
        )

    def record_failure(
        self,
        url: str,
        redirect_ms: int,
        extraction_ms: int,
        total_ms: int,
        error: str,
    ) -> None:
        self._add(
            ExtractionEvent(
                timestamp=self._clock(),
                url=url,
                success=False,
                redirect_ms=redirect_ms,
                extraction_ms=extraction_ms,
                total_ms=total_ms,
                error=error or "Unknown error",
            )
        )

    def _add(self, event: ExtractionEvent) -> None:
        self._events.append(event)
        if len(self._events) > self.max_events:
            del self._events[: len(self._events) - self.max_events]

    def recent_events(self, limit: int = 50) -> list[ExtractionEvent]:
        """Newest first."""
        return sorted(self._events[-limit:], key=lambda e: e.timestamp, reverse=True)

    def reset(self) -> None:
        self._events = []

    def _summarize(self, events: Sequence[ExtractionEvent]) -> ExtractionMetrics:
        now = self._clock()
        if not events:
            return ExtractionMetrics(last_updated=now)

        successful = [e for e in events if e.success]
        failed = [e for e in events if not e.success]
        cached = [e for e in events if e.cached]

        return ExtractionMetrics(
            total_requests=len(events),
            successful_requests=len(successful),
            failed_requests=len(failed),
            average_redirect_ms=_average([e.redirect_ms for e in events]),
            average_extraction_ms=_average([e.extraction_ms for e in events]),
            average_total_ms=_average([e.total_ms for e in events]),
            success_rate=len(successful) / len(events),
            cache_hit_rate=len(cached) / len(events),
            errors_by_type=dict(Counter(e.error for e in failed if e.error)),
            source_distribution=dict(Counter(e.final_source for e in successful if e.final_source)),
            last_updated=now,
        )

    def metrics(self) -> ExtractionMetrics:
        return self._summarize(self._events)

    def metrics_for_window(self, window_seconds: float) -> ExtractionMetrics:
        cutoff = self._clock() - window_seconds
        return self._summarize([e for e in self._events if e.timestamp >= cutoff])

    def insights(self) -> ExtractionInsights:
        metrics = self.metrics()

        if metrics.success_rate < UNHEALTHY_BELOW:
            status = HealthStatus.UNHEALTHY
        elif metrics.success_rate < DEGRADED_BELOW:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.HEALTHY

        insights = ExtractionInsights(status=status)

        if metrics.success_rate < DEGRADED_BELOW:
            insights.recommendations.append(
                "Success rate is below 80%. Investigate common failure patterns."
            )
        if metrics.cache_hit_rate < LOW_CACHE_HIT_RATE:
            insights.recommendations.append(
                "Cache hit rate is low. Consider a longer cache TTL."
            )
        if metrics.average_total_ms > SLOW_TOTAL_MS:
            insights.recommendations.append(
                "Average extraction time is above 10s. Review timeout settings."
            )

        insights.top_errors = Counter(metrics.errors_by_type).most_common(5)
        insights.top_sources = Counter(metrics.source_distribution).most_common(10)

        if metrics.average_redirect_ms > SLOW_REDIRECT_MS:
            insights.performance_issues.append("High redirect resolution time (>5s)")
        if metrics.average_extraction_ms > SLOW_EXTRACTION_MS:
            insights.performance_issues.append("High content extraction time (>8s)")

        return insights

    def health_check(self, window_seconds: float = DEFAULT_WINDOW_SECONDS) -> HealthCheck:
        insights = self.insights()
        return HealthCheck(
            status=insights.status,
            metrics=self.metrics(),
            insights=insights,
            recent_window=self.metrics_for_window(window_seconds),
        )
