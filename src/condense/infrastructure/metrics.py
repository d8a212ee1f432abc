"""Prometheus metrics for condense tables."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all table engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Operation metrics
        self.operations_total = Counter(
            "condense_operations_total",
            "Total number of table operations",
            ["operation", "status"],  # status: success, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "condense_operation_latency_seconds",
            "Table operation latency in seconds, including load and rewrite",
            ["operation"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        # Storage metrics
        self.rows_loaded = Histogram(
            "condense_rows_loaded",
            "Rows materialized per load",
            buckets=(0, 1, 10, 100, 1000, 10000, 100000),
            registry=self._registry,
        )

        self.blob_bytes_written_total = Counter(
            "condense_blob_bytes_written_total",
            "Total bytes written to table blobs",
            registry=self._registry,
        )

        # Integrity metrics
        self.decryption_failures_total = Counter(
            "condense_decryption_failures_total",
            "Loads rejected because the blob failed authentication",
            registry=self._registry,
        )

        self.corrupt_loads_total = Counter(
            "condense_corrupt_loads_total",
            "Loads rejected because the blob did not decode to a table",
            registry=self._registry,
        )

        self.info = Info(
            "condense",
            "Condense table engine information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from condense import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
