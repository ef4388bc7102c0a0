"""
Converter Configuration

Defines configuration for the editor JSON converter: error handling,
canvas sizing, stencil set identity and observability switches.
"""

import os
from dataclasses import dataclass
from enum import Enum

from bpmn_json_converter.converter.constants import (
    DEFAULT_TARGET_NAMESPACE,
    STENCILSET_NAMESPACE,
    STENCILSET_URL,
)


class ErrorHandlingStrategy(str, Enum):
    """Error handling strategy for per-element conversion failures."""

    STRICT = "strict"  # Raise on first failing element
    LENIENT = "lenient"  # Log, drop the element and continue
    RECOVERY = "recovery"  # Like lenient, plus a diagnostics report


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ConverterConfig:
    """Complete converter configuration."""

    # Error Handling
    error_handling: ErrorHandlingStrategy = ErrorHandlingStrategy.LENIENT

    # Canvas
    min_canvas_width: float = 1485
    min_canvas_height: float = 700
    canvas_margin: float = 50

    # Document identity
    default_target_namespace: str = DEFAULT_TARGET_NAMESPACE
    stencilset_namespace: str = STENCILSET_NAMESPACE
    stencilset_url: str = STENCILSET_URL

    # Observability
    enable_tracing: bool = False
    enable_metrics: bool = True
    log_level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        """Create converter config from ``BPMN_JSON_*`` environment variables.

        Returns:
            ConverterConfig instance
        """
        try:
            strategy = ErrorHandlingStrategy(os.getenv("BPMN_JSON_ERROR_HANDLING", "lenient").lower())
        except ValueError:
            strategy = ErrorHandlingStrategy.LENIENT

        return cls(
            error_handling=strategy,
            min_canvas_width=float(os.getenv("BPMN_JSON_MIN_CANVAS_WIDTH", "1485")),
            min_canvas_height=float(os.getenv("BPMN_JSON_MIN_CANVAS_HEIGHT", "700")),
            canvas_margin=float(os.getenv("BPMN_JSON_CANVAS_MARGIN", "50")),
            default_target_namespace=os.getenv("BPMN_JSON_TARGET_NAMESPACE", DEFAULT_TARGET_NAMESPACE),
            stencilset_namespace=os.getenv("BPMN_JSON_STENCILSET_NAMESPACE", STENCILSET_NAMESPACE),
            stencilset_url=os.getenv("BPMN_JSON_STENCILSET_URL", STENCILSET_URL),
            enable_tracing=_env_flag("BPMN_JSON_ENABLE_TRACING", False),
            enable_metrics=_env_flag("BPMN_JSON_ENABLE_METRICS", True),
            log_level=os.getenv("BPMN_JSON_LOG_LEVEL", "INFO").upper(),
            json_logs=_env_flag("BPMN_JSON_JSON_LOGS", False),
        )
