"""
Utilities Package for the Introspection Engine
"""
from .logging import (
    setup_logging,
    get_logger,
    set_run_id,
    get_run_id,
    clear_context,
    log_context,
    log_operation,
)

from .errors import (
    ErrorSeverity,
    ErrorCategory,
    ErrorContext,
    IntrospectionError,
    InvariantViolationError,
    AmbiguousIndexError,
    SchemaLoadError,
    ConfigurationError,
    format_error,
)

from .metrics import (
    MetricsCollector,
    get_metrics_collector,
    counter,
    gauge,
    timer,
    IntrospectionMetrics,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_run_id",
    "get_run_id",
    "clear_context",
    "log_context",
    "log_operation",
    # Errors
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    "IntrospectionError",
    "InvariantViolationError",
    "AmbiguousIndexError",
    "SchemaLoadError",
    "ConfigurationError",
    "format_error",
    # Metrics
    "MetricsCollector",
    "get_metrics_collector",
    "counter",
    "gauge",
    "timer",
    "IntrospectionMetrics",
]
