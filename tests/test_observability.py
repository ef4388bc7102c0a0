"""
Tests for observability infrastructure.

Tests:
- Metric recording into counters and histograms
- Timer and span context managers
- log_execution decorator
- Standard-library interception and JSON log formatting
"""

import json
import logging

import pytest
from loguru import logger

from bpmn_json_converter.config import ConverterConfig
from bpmn_json_converter.core.observability import (
    InterceptHandler,
    JSONFormatter,
    ObservabilityConfig,
    ObservabilityManager,
    Timer,
    log_execution,
    record_metric,
    span,
)


@pytest.fixture
def manager():
    """Observability with metrics on and tracing off."""
    return ObservabilityManager.initialize(ObservabilityConfig(enable_tracing=False))


@pytest.fixture
def captured():
    """Messages written to a temporary loguru sink."""
    messages = []
    sink_id = logger.add(messages.append, format="{message}", level="DEBUG")
    yield messages
    logger.remove(sink_id)


class TestConfig:
    """ObservabilityConfig"""

    def test_from_converter_config(self):
        config = ObservabilityConfig.from_converter_config(
            ConverterConfig(log_level="DEBUG", json_logs=True, enable_tracing=True, enable_metrics=False)
        )

        assert config.log_level == "DEBUG"
        assert config.json_logs is True
        assert config.enable_tracing is True
        assert config.enable_metrics is False
        assert config.intercept_stdlib is True

    def test_singleton(self, manager):
        assert ObservabilityManager.get_instance() is manager
        assert ObservabilityManager.initialize() is manager


class TestMetrics:
    """record_metric and collect_metrics"""

    def test_counter_totals(self, manager):
        record_metric("shapes_total", 3)
        record_metric("shapes_total", 2, {"direction": "to_json"})

        assert manager.collect_metrics()["shapes_total"] == 5

    def test_histogram_sum(self, manager):
        record_metric("layout_ms", 12.5)
        record_metric("layout_ms", 7.5)

        assert manager.collect_metrics()["layout_ms"] == pytest.approx(20.0)

    def test_metrics_disabled(self):
        manager = ObservabilityManager.initialize(ObservabilityConfig(enable_tracing=False, enable_metrics=False))

        record_metric("shapes_total", 1)

        assert manager.collect_metrics() == {}


class TestTimer:
    """Timer context manager"""

    def test_records_duration(self, manager):
        with Timer("canvas") as timer:
            pass

        assert timer.elapsed >= 0
        assert "canvas_duration" in manager.collect_metrics()

    def test_without_logging(self, manager):
        with Timer("canvas", log=False):
            pass

        assert "canvas_duration" not in manager.collect_metrics()


class TestSpan:
    """span context manager"""

    def test_with_tracing(self):
        ObservabilityManager.initialize(ObservabilityConfig(enable_tracing=True, enable_metrics=False))

        with span("bpmn_json.test", {"shapes": 3}) as current:
            assert current is not None
            assert current.is_recording()

    def test_without_tracing(self, manager):
        with span("bpmn_json.test") as current:
            assert current is None


class TestLogExecution:
    """log_execution decorator"""

    def test_returns_result_and_records_duration(self, manager):
        @log_execution(include_result=True)
        def count_shapes(shapes):
            return len(shapes)

        assert count_shapes(["a", "b"]) == 2
        assert "function_duration_ms" in manager.collect_metrics()

    def test_private_function_names(self, manager):
        @log_execution()
        def _load_shapes():
            return []

        assert _load_shapes() == []
        assert "function_duration_ms" in manager.collect_metrics()

    def test_reraises(self, manager, captured):
        @log_execution()
        def broken():
            raise ValueError("bad shape")

        with pytest.raises(ValueError, match="bad shape"):
            broken()
        assert any("Function failed" in message for message in captured)


class TestLogging:
    """Intercept handler and JSON formatter"""

    def test_intercept_handler_forwards_records(self, manager, captured):
        std_logger = logging.getLogger("bpmn_json_converter.tests.intercept")
        handler = InterceptHandler()
        std_logger.addHandler(handler)
        std_logger.propagate = False
        std_logger.setLevel(logging.INFO)
        try:
            std_logger.warning("Skipping edge %s", "flow1")
        finally:
            std_logger.removeHandler(handler)

        assert any("Skipping edge flow1" in message for message in captured)

    def test_json_formatter(self, manager):
        lines = []
        sink_id = logger.add(lines.append, format=JSONFormatter(), level="INFO")
        try:
            logger.bind(direction="to_json").info("Conversion {done}")
        finally:
            logger.remove(sink_id)

        record = json.loads(lines[0])
        assert record["message"] == "Conversion {done}"
        assert record["level"] == "INFO"
        assert record["extra"] == {"direction": "to_json"}
