"""Prometheus metrics for the page inspector."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)

if TYPE_CHECKING:
    from pg_peek.infrastructure.config import ObservabilityConfig

DEFAULT_METRICS_PORT = 8001


class MetricsRegistry:
    """Registry of all page inspector metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Decode metrics
        self.pages_decoded_total = Counter(
            "pgpeek_pages_decoded_total",
            "Total number of pages decoded",
            registry=self._registry,
        )

        self.rows_decoded_total = Counter(
            "pgpeek_rows_decoded_total",
            "Total number of heap rows decoded",
            registry=self._registry,
        )

        self.line_pointers_total = Counter(
            "pgpeek_line_pointers_total",
            "Total line pointers seen",
            ["status"],  # unused, normal, redirect, dead
            registry=self._registry,
        )

        self.decode_errors_total = Counter(
            "pgpeek_decode_errors_total",
            "Total fatal decode errors",
            ["kind"],  # io, short_read, truncated, structural
            registry=self._registry,
        )

        self.page_decode_latency_seconds = Histogram(
            "pgpeek_page_decode_latency_seconds",
            "Per-page decode latency in seconds",
            buckets=(0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
            registry=self._registry,
        )

        # I/O metrics
        self.bytes_read_total = Counter(
            "pgpeek_bytes_read_total",
            "Total bytes read from inspected files",
            registry=self._registry,
        )

        self.info = Info(
            "pgpeek",
            "Page inspector information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(
    port: int | None = None,
    registry: CollectorRegistry | None = None,
    *,
    config: ObservabilityConfig | None = None,
) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server; defaults to
            config.metrics_port, then 8001. Port 0 binds any free port.
        registry: Optional custom registry
        config: Observability settings to take defaults from

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from pg_peek import __version__
    _metrics.info.info({
        "version": __version__,
    })

    if port is None:
        port = config.metrics_port if config is not None else DEFAULT_METRICS_PORT
    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
