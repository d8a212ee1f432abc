"""Infrastructure layer - cross-cutting concerns."""

from condense.infrastructure.config import Config, get_config
from condense.infrastructure.logging import get_logger, setup_logging, setup_logging_from_config
from condense.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from condense.infrastructure.tracing import get_tracer, setup_tracing, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
