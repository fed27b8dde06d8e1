"""
Prometheus metrics for the aggregation pipeline.

Tracks cache effectiveness, fixture fallbacks, which social provider
served each request, broadcast volume and end-to-end pipeline latency.
Exposed over HTTP for Prometheus scraping by ``disaster-feed serve``.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from disaster_feed.config.settings import get_settings

logger = logging.getLogger(__name__)

LATENCY_BUCKETS = (0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)


class MetricsCollector:
    """
    Prometheus metrics collector for disaster-feed.

    Usage:
        metrics = get_metrics()
        metrics.record_cache("official_updates", hit=True)
        metrics.record_fallback("official", "fema", reason="error")
    """

    def __init__(self):
        self.cache_hits = Counter(
            "disaster_feed_cache_hits_total",
            "Response envelopes served from cache",
            ["kind"],
        )
        self.cache_misses = Counter(
            "disaster_feed_cache_misses_total",
            "Response envelopes computed because of a cache miss",
            ["kind"],
        )
        self.fixture_fallbacks = Counter(
            "disaster_feed_fixture_fallbacks_total",
            "Times fixture data replaced live retrieval",
            ["kind", "source", "reason"],  # reason: error, empty, aggregate_empty
        )
        self.social_provider_used = Counter(
            "disaster_feed_social_provider_used_total",
            "Social provider that produced the returned posts",
            ["provider"],
        )
        self.broadcasts = Counter(
            "disaster_feed_broadcasts_total",
            "Events emitted to WebSocket clients",
            ["event"],
        )
        self.pipeline_latency = Histogram(
            "disaster_feed_pipeline_latency_seconds",
            "Time to compute a response envelope",
            ["kind"],
            buckets=LATENCY_BUCKETS,
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """Start the Prometheus HTTP server (default port from settings)."""
        port = port or get_settings().metrics_port
        start_http_server(port, registry=REGISTRY)
        logger.info("Prometheus metrics server started on port %d", port)

    def record_cache(self, kind: str, hit: bool) -> None:
        if hit:
            self.cache_hits.labels(kind=kind).inc()
        else:
            self.cache_misses.labels(kind=kind).inc()

    def record_fallback(self, kind: str, source: str, reason: str) -> None:
        self.fixture_fallbacks.labels(kind=kind, source=source, reason=reason).inc()

    def record_social_provider(self, provider: str) -> None:
        self.social_provider_used.labels(provider=provider).inc()

    def record_broadcast(self, event: str) -> None:
        self.broadcasts.labels(event=event).inc()

    def record_pipeline_latency(self, kind: str, seconds: float) -> None:
        self.pipeline_latency.labels(kind=kind).observe(seconds)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
