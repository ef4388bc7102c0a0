"""
Observability Infrastructure

Provides structured logging, tracing and metrics collection for the converter.
Converter modules log through the standard ``logging`` package; an intercept
handler forwards those records into loguru so both land on the same sinks.
"""

import contextlib
import functools
import json
import logging
import sys
import time
import traceback
from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar, Union

from loguru import logger
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider

from bpmn_json_converter.config import ConverterConfig

F = TypeVar("F", bound=Callable[..., Any])


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ObservabilityConfig:
    """Configuration for observability."""

    def __init__(
        self,
        service_name: str = "bpmn-json-converter",
        log_level: Union[str, LogLevel] = LogLevel.INFO,
        json_logs: bool = False,
        enable_tracing: bool = True,
        enable_metrics: bool = True,
        intercept_stdlib: bool = False,
    ):
        """Initialize observability configuration."""
        self.service_name = service_name
        self.log_level = log_level if isinstance(log_level, str) else log_level.value
        self.json_logs = json_logs
        self.enable_tracing = enable_tracing
        self.enable_metrics = enable_metrics
        self.intercept_stdlib = intercept_stdlib

    @classmethod
    def from_converter_config(cls, config: ConverterConfig, intercept_stdlib: bool = True) -> "ObservabilityConfig":
        return cls(
            log_level=config.log_level,
            json_logs=config.json_logs,
            enable_tracing=config.enable_tracing,
            enable_metrics=config.enable_metrics,
            intercept_stdlib=intercept_stdlib,
        )


class JSONFormatter:
    """Custom JSON formatter for loguru."""

    def __call__(self, record: Dict[str, Any]) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "logger": record["name"],
            "module": record["module"],
            "function": record["function"],
            "line": record["line"],
            "message": record["message"],
        }

        if record["extra"]:
            log_data["extra"] = record["extra"]

        if record["exception"]:
            log_data["exception"] = {
                "type": record["exception"].type.__name__,
                "value": str(record["exception"].value),
                "traceback": "".join(
                    traceback.format_exception(
                        record["exception"].type,
                        record["exception"].value,
                        record["exception"].traceback,
                    )
                ),
            }

        # loguru treats the returned string as a format template
        return json.dumps(log_data, default=str).replace("{", "{{").replace("}", "}}") + "\n"


class InterceptHandler(logging.Handler):
    """Forwards standard-library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Union[str, int] = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


class ObservabilityManager:
    """Centralized observability management."""

    _instance: Optional["ObservabilityManager"] = None

    def __init__(self, config: ObservabilityConfig):
        """Initialize observability manager."""
        self.config = config
        self.metric_reader: Optional[InMemoryMetricReader] = None
        self._counters: Dict[str, Any] = {}
        self._histograms: Dict[str, Any] = {}
        self._setup_logging()

        if config.enable_tracing:
            self._setup_tracing()

        if config.enable_metrics:
            self._setup_metrics()

        logger.debug(f"Observability initialized: service={config.service_name}, log_level={config.log_level}")

    def _setup_logging(self) -> None:
        """Set up structured logging with loguru on stderr."""
        logger.remove()

        log_format = (
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        )

        if self.config.json_logs:
            logger.add(
                sys.stderr,
                format=JSONFormatter(),
                level=self.config.log_level,
                colorize=False,
            )
        else:
            logger.add(
                sys.stderr,
                format=log_format,
                level=self.config.log_level,
                colorize=True,
                backtrace=True,
                diagnose=False,
            )

        if self.config.intercept_stdlib:
            root = logging.getLogger()
            if not any(isinstance(handler, InterceptHandler) for handler in root.handlers):
                root.addHandler(InterceptHandler())
            root.setLevel(logging.getLevelName(self.config.log_level))

    def _setup_tracing(self) -> None:
        """Set up OpenTelemetry tracing."""
        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})
        tracer_provider = TracerProvider(resource=resource)
        self.tracer = tracer_provider.get_tracer(__name__)
        logger.debug("OpenTelemetry tracing initialized")

    def _setup_metrics(self) -> None:
        """Set up OpenTelemetry metrics."""
        self.metric_reader = InMemoryMetricReader()
        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})

        meter_provider = MeterProvider(resource=resource, metric_readers=[self.metric_reader])
        self.meter = meter_provider.get_meter(__name__)
        logger.debug("OpenTelemetry metrics initialized")

    def counter(self, name: str) -> Any:
        if name not in self._counters:
            self._counters[name] = self.meter.create_counter(name, unit="1")
        return self._counters[name]

    def histogram(self, name: str) -> Any:
        if name not in self._histograms:
            self._histograms[name] = self.meter.create_histogram(name, unit="ms")
        return self._histograms[name]

    def collect_metrics(self) -> Dict[str, float]:
        """Current value of every recorded metric (counter totals, histogram sums)."""
        if self.metric_reader is None:
            return {}
        data = self.metric_reader.get_metrics_data()
        values: Dict[str, float] = {}
        if data is None:
            return values
        for resource_metrics in data.resource_metrics:
            for scope_metrics in resource_metrics.scope_metrics:
                for metric in scope_metrics.metrics:
                    total = 0.0
                    for point in metric.data.data_points:
                        total += getattr(point, "value", None) or getattr(point, "sum", 0.0)
                    values[metric.name] = total
        return values

    @classmethod
    def initialize(cls, config: Optional[ObservabilityConfig] = None) -> "ObservabilityManager":
        """Initialize or get singleton instance."""
        if cls._instance is None:
            if config is None:
                config = ObservabilityConfig()
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "ObservabilityManager":
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls(ObservabilityConfig())
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


@contextlib.contextmanager
def span(name: str, attributes: Optional[Dict[str, Any]] = None):
    """Context manager for creating spans."""
    manager = ObservabilityManager.get_instance()

    if hasattr(manager, "tracer"):
        with manager.tracer.start_as_current_span(name) as span_obj:
            if attributes:
                for key, value in attributes.items():
                    span_obj.set_attribute(key, value)
            yield span_obj
    else:
        yield None


def log_execution(
    level: Union[str, LogLevel] = LogLevel.DEBUG,
    include_args: bool = False,
    include_result: bool = False,
    include_duration: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for logging function execution.

    Args:
        level: Logging level
        include_args: Whether to log function arguments
        include_result: Whether to log function result
        include_duration: Whether to log execution duration
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log_level = level if isinstance(level, str) else level.value
            func_name = f"{func.__module__}.{func.__qualname__}"

            log_data: Dict[str, Any] = {"function": func_name}

            if include_args:
                arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
                log_data["args"] = {name: repr(value)[:200] for name, value in zip(arg_names, args)}
                log_data["kwargs"] = {name: repr(value)[:200] for name, value in kwargs.items()}

            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                if include_duration:
                    log_data["duration_ms"] = (time.time() - start_time) * 1000
                log_data["error"] = str(e)
                logger.bind(**log_data).opt(exception=True).error(f"Function failed: {func_name}")
                raise

            if include_result:
                log_data["result"] = str(result)[:200]

            if include_duration:
                duration_ms = (time.time() - start_time) * 1000
                log_data["duration_ms"] = duration_ms
                record_metric("function_duration_ms", duration_ms, {"function": func.__name__})

            logger.bind(**log_data).log(log_level, f"Function executed: {func_name}")
            return result

        return wrapper  # type: ignore

    return decorator


def record_metric(
    metric_name: str,
    value: Union[int, float],
    attributes: Optional[Dict[str, str]] = None,
) -> None:
    """
    Record a metric value with OpenTelemetry.

    Names ending in ``_total`` and integer values go to a counter, anything
    else to a histogram.

    Args:
        metric_name: Name of the metric
        value: Metric value
        attributes: Optional attributes for the metric
    """
    manager = ObservabilityManager.get_instance()

    if hasattr(manager, "meter"):
        if metric_name.endswith("_total") or isinstance(value, int):
            manager.counter(metric_name).add(value, attributes=attributes or {})
        else:
            manager.histogram(metric_name).record(value, attributes=attributes or {})

    logger.bind(metric=metric_name, value=value, attributes=attributes).trace(
        f"Metric recorded: {metric_name}={value}"
    )


class Timer:
    """Context manager for timing operations."""

    def __init__(self, name: str, log: bool = True):
        """Initialize timer."""
        self.name = name
        self.log = log
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.time()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.time() - self.start_time
        if self.log:
            logger.debug(f"Timer '{self.name}': {self.elapsed:.3f}s")
            record_metric(f"{self.name}_duration", self.elapsed * 1000)


__all__ = [
    "InterceptHandler",
    "JSONFormatter",
    "LogLevel",
    "ObservabilityConfig",
    "ObservabilityManager",
    "span",
    "log_execution",
    "record_metric",
    "Timer",
]
