"""Tests for extract_content.monitor module."""

from extract_content.models import HealthStatus
from extract_content.monitor import ExtractionMonitor


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _monitor(successes: int, failures: int, clock=None, **success_kwargs) -> ExtractionMonitor:
    monitor = ExtractionMonitor(clock=clock or FakeClock())
    for i in range(successes):
        monitor.record_success(
            f"https://news.google.com/rss/articles/ok{i}",
            redirect_ms=success_kwargs.get("redirect_ms", 100),
            extraction_ms=success_kwargs.get("extraction_ms", 300),
            total_ms=success_kwargs.get("total_ms", 400),
            cached=success_kwargs.get("cached", True),
            final_source="www.reuters.com",
        )
    for i in range(failures):
        monitor.record_failure(
            f"https://news.google.com/rss/articles/bad{i}",
            redirect_ms=50, extraction_ms=0, total_ms=50,
            error="Redirect resolution failed: timeout",
        )
    return monitor


class TestMetrics:
    def test_empty_monitor(self) -> None:
        metrics = ExtractionMonitor(clock=FakeClock()).metrics()
        assert metrics.total_requests == 0
        assert metrics.success_rate == 0
        assert metrics.last_updated == 1_000_000.0

    def test_rates_and_averages(self) -> None:
        metrics = _monitor(successes=3, failures=1).metrics()

        assert metrics.total_requests == 4
        assert metrics.successful_requests == 3
        assert metrics.failed_requests == 1
        assert metrics.success_rate == 0.75
        assert metrics.cache_hit_rate == 0.75
        assert metrics.average_total_ms == (400 * 3 + 50) / 4
        assert metrics.errors_by_type == {"Redirect resolution failed: timeout": 1}
        assert metrics.source_distribution == {"www.reuters.com": 3}

    def test_window_excludes_old_events(self) -> None:
        clock = FakeClock()
        monitor = _monitor(successes=2, failures=0, clock=clock)
        clock.now += 7200
        monitor.record_failure("https://example.com/a", 0, 10, 10, "Content extraction failed: HTTP 404: Not Found")

        window = monitor.metrics_for_window(3600)
        assert window.total_requests == 1
        assert window.success_rate == 0
        assert monitor.metrics().total_requests == 3


class TestEvents:
    def test_recent_events_newest_first(self) -> None:
        clock = FakeClock()
        monitor = ExtractionMonitor(clock=clock)
        for i in range(3):
            clock.now += 1
            monitor.record_success(f"https://example.com/{i}", 0, 0, 0)

        assert [e.url for e in monitor.recent_events(limit=2)] == ["https://example.com/2", "https://example.com/1"]

    def test_max_events_trims_oldest(self) -> None:
        monitor = ExtractionMonitor(max_events=2, clock=FakeClock())
        for i in range(5):
            monitor.record_success(f"https://example.com/{i}", 0, 0, 0)

        assert monitor.metrics().total_requests == 2
        assert {e.url for e in monitor.recent_events()} == {"https://example.com/3", "https://example.com/4"}

    def test_failure_without_message(self) -> None:
        monitor = ExtractionMonitor(clock=FakeClock())
        monitor.record_failure("https://example.com/x", 0, 0, 0, "")
        assert monitor.metrics().errors_by_type == {"Unknown error": 1}

    def test_reset(self) -> None:
        monitor = _monitor(successes=2, failures=2)
        monitor.reset()
        assert monitor.metrics().total_requests == 0
        assert monitor.recent_events() == []


class TestInsights:
    def test_healthy(self) -> None:
        insights = _monitor(successes=9, failures=1).insights()
        assert insights.status == HealthStatus.HEALTHY
        assert insights.recommendations == []
        assert insights.performance_issues == []
        assert insights.top_sources == [("www.reuters.com", 9)]

    def test_degraded(self) -> None:
        insights = _monitor(successes=6, failures=4).insights()
        assert insights.status == HealthStatus.DEGRADED
        assert "Success rate is below 80%. Investigate common failure patterns." in insights.recommendations
        assert insights.top_errors == [("Redirect resolution failed: timeout", 4)]

    def test_unhealthy(self) -> None:
        assert _monitor(successes=1, failures=3).insights().status == HealthStatus.UNHEALTHY

    def test_empty_monitor_is_unhealthy(self) -> None:
        assert ExtractionMonitor(clock=FakeClock()).insights().status == HealthStatus.UNHEALTHY

    def test_slow_and_uncached(self) -> None:
        insights = _monitor(
            successes=4, failures=0, cached=False,
            redirect_ms=6000, extraction_ms=9000, total_ms=15000,
        ).insights()

        assert insights.status == HealthStatus.HEALTHY
        assert insights.recommendations == [
            "Cache hit rate is low. Consider a longer cache TTL.",
            "Average extraction time is above 10s. Review timeout settings.",
        ]
        assert insights.performance_issues == [
            "High redirect resolution time (>5s)",
            "High content extraction time (>8s)",
        ]


class TestHealthCheck:
    def test_includes_recent_window(self) -> None:
        health = _monitor(successes=5, failures=0).health_check()
        assert health.status == HealthStatus.HEALTHY
        assert health.metrics.total_requests == 5
        assert health.recent_window.total_requests == 5
        assert health.insights.status == health.status
