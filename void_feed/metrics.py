"""Prometheus metrics for the void feed."""

from typing import List, Optional

from prometheus_client import Counter, Gauge, Histogram


class MetricsRegistry:
    """Registry for Prometheus metrics.

    Registering the same name twice returns the existing collector, so modules
    and tests can ask for a metric without tripping prometheus_client's
    duplicate timeseries check.
    """

    def __init__(self):
        """Initialize metrics registry."""
        self._metrics = {}

    def register_counter(
        self, name: str, description: str, labels: Optional[List[str]] = None
    ) -> Counter:
        """Register a new counter metric."""
        if name in self._metrics:
            return self._metrics[name]

        counter = Counter(name, description, labels or [])
        self._metrics[name] = counter
        return counter

    def register_gauge(
        self, name: str, description: str, labels: Optional[List[str]] = None
    ) -> Gauge:
        """Register a new gauge metric."""
        if name in self._metrics:
            return self._metrics[name]

        gauge = Gauge(name, description, labels or [])
        self._metrics[name] = gauge
        return gauge

    def register_histogram(
        self, name: str, description: str, labels: Optional[List[str]] = None
    ) -> Histogram:
        """Register a new histogram metric."""
        if name in self._metrics:
            return self._metrics[name]

        histogram = Histogram(name, description, labels or [])
        self._metrics[name] = histogram
        return histogram


# Global metrics registry
metrics = MetricsRegistry()

SAMPLE_CYCLES = metrics.register_counter(
    "void_feed_sample_cycles_total", "Sampling cycles run", ["mode", "outcome"]
)
EXHAUSTIONS = metrics.register_counter(
    "void_feed_exhaustions_total", "Cycles where every fetched candidate was already seen"
)
SAMPLE_LATENCY = metrics.register_histogram(
    "void_feed_sample_duration_seconds", "Duration of a full sampling cycle in seconds"
)
DROPPED_CALLS = metrics.register_counter(
    "void_feed_dropped_calls_total", "Session calls dropped while a cycle was in flight", ["operation"]
)
ACTIVE_SESSIONS = metrics.register_gauge("void_feed_active_sessions", "Open feed sessions")
BACKEND_REQUESTS = metrics.register_counter(
    "void_feed_backend_requests_total", "Backend REST requests", ["endpoint", "status"]
)
BACKEND_LATENCY = metrics.register_histogram(
    "void_feed_backend_request_duration_seconds",
    "Duration of backend REST requests in seconds",
    ["endpoint"],
)


def start_metrics_server(port: int = 8000):
    """Start a Prometheus metrics server on the specified port.

    Args:
        port: Port number for metrics server
    """
    from prometheus_client import start_http_server

    start_http_server(port)
