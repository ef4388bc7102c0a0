"""
BPMN JSON Converter: Process Graphs to and from Editor JSON

Converts an in-memory BPMN 2.0 process graph to the JSON document of a
browser-based diagram editor and back, preserving element properties,
container nesting and diagram layout.
"""

# Configuration
from bpmn_json_converter.config import ConverterConfig, ErrorHandlingStrategy

# Core components
from bpmn_json_converter.core.observability import ObservabilityConfig, ObservabilityManager

# Converter
from bpmn_json_converter.converter.bpmn_json_converter import BpmnJsonConverter
from bpmn_json_converter.converter.context import (
    ConverterContext,
    ModelReferenceResolver,
    StandaloneReferenceResolver,
)
from bpmn_json_converter.converter.errors import (
    ConversionReport,
    ConverterError,
    MalformedPropertyError,
    UnknownStencilError,
    UnresolvedReferenceError,
)
from bpmn_json_converter.converter.registry import StencilRegistry, get_default_registry

# Models
from bpmn_json_converter.models import BpmnModel, dump_model, load_model

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "ConverterConfig",
    "ErrorHandlingStrategy",
    # Core
    "ObservabilityConfig",
    "ObservabilityManager",
    # Converter
    "BpmnJsonConverter",
    "ConversionReport",
    "ConverterContext",
    "ConverterError",
    "MalformedPropertyError",
    "ModelReferenceResolver",
    "StandaloneReferenceResolver",
    "StencilRegistry",
    "UnknownStencilError",
    "UnresolvedReferenceError",
    "get_default_registry",
    # Models
    "BpmnModel",
    "dump_model",
    "load_model",
]
