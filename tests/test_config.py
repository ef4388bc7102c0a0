"""
Tests for converter configuration.

Tests:
- Defaults
- Loading from BPMN_JSON_* environment variables
- Invalid strategy falls back to lenient
"""

import pytest

from bpmn_json_converter.config import ConverterConfig, ErrorHandlingStrategy
from bpmn_json_converter.converter.constants import STENCILSET_NAMESPACE

ENV_VARS = [
    "BPMN_JSON_ERROR_HANDLING",
    "BPMN_JSON_MIN_CANVAS_WIDTH",
    "BPMN_JSON_MIN_CANVAS_HEIGHT",
    "BPMN_JSON_CANVAS_MARGIN",
    "BPMN_JSON_TARGET_NAMESPACE",
    "BPMN_JSON_STENCILSET_NAMESPACE",
    "BPMN_JSON_STENCILSET_URL",
    "BPMN_JSON_ENABLE_TRACING",
    "BPMN_JSON_ENABLE_METRICS",
    "BPMN_JSON_LOG_LEVEL",
    "BPMN_JSON_JSON_LOGS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ConverterConfig()

    assert config.error_handling == ErrorHandlingStrategy.LENIENT
    assert (config.min_canvas_width, config.min_canvas_height) == (1485, 700)
    assert config.canvas_margin == 50
    assert config.enable_tracing is False
    assert config.enable_metrics is True


def test_from_env_without_variables():
    config = ConverterConfig.from_env()

    assert config == ConverterConfig()
    assert config.stencilset_namespace == STENCILSET_NAMESPACE


def test_from_env(monkeypatch):
    monkeypatch.setenv("BPMN_JSON_ERROR_HANDLING", "STRICT")
    monkeypatch.setenv("BPMN_JSON_MIN_CANVAS_WIDTH", "2000")
    monkeypatch.setenv("BPMN_JSON_CANVAS_MARGIN", "25")
    monkeypatch.setenv("BPMN_JSON_TARGET_NAMESPACE", "http://example.com/processes")
    monkeypatch.setenv("BPMN_JSON_ENABLE_TRACING", "yes")
    monkeypatch.setenv("BPMN_JSON_ENABLE_METRICS", "0")
    monkeypatch.setenv("BPMN_JSON_LOG_LEVEL", "debug")
    monkeypatch.setenv("BPMN_JSON_JSON_LOGS", "on")

    config = ConverterConfig.from_env()

    assert config.error_handling == ErrorHandlingStrategy.STRICT
    assert config.min_canvas_width == 2000
    assert config.min_canvas_height == 700
    assert config.canvas_margin == 25
    assert config.default_target_namespace == "http://example.com/processes"
    assert config.enable_tracing is True
    assert config.enable_metrics is False
    assert config.log_level == "DEBUG"
    assert config.json_logs is True


def test_invalid_strategy_falls_back_to_lenient(monkeypatch):
    monkeypatch.setenv("BPMN_JSON_ERROR_HANDLING", "optimistic")

    assert ConverterConfig.from_env().error_handling == ErrorHandlingStrategy.LENIENT
