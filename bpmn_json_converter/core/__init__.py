"""
Core infrastructure module for the BPMN JSON converter.

Provides logging, tracing and metrics.
"""

from .observability import (
    InterceptHandler,
    LogLevel,
    ObservabilityConfig,
    ObservabilityManager,
    Timer,
    log_execution,
    record_metric,
    span,
)

__all__ = [
    "InterceptHandler",
    "LogLevel",
    "ObservabilityConfig",
    "ObservabilityManager",
    "Timer",
    "log_execution",
    "record_metric",
    "span",
]
