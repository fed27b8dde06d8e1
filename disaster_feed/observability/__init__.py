"""Observability layer - structured logging and Prometheus metrics."""

from disaster_feed.observability.logging import setup_logging
from disaster_feed.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
