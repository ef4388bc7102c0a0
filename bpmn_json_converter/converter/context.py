"""
Conversion Context

Immutable state threaded through every converter call. A new context is
derived with :meth:`ConverterContext.derive` whenever the parent container,
the coordinate offset or the target shape array changes.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

from bpmn_json_converter.config import ConverterConfig
from bpmn_json_converter.converter.errors import ConversionReport
from bpmn_json_converter.converter.properties import get_element_id, look_for_source_ref
from bpmn_json_converter.models.bpmn_elements import (
    BpmnModel,
    FlowElementsContainer,
    Lane,
    Process,
    SubProcess,
)

JsonNode = Dict[str, Any]
ParentContainer = Union[Process, SubProcess, Lane]


@runtime_checkable
class ModelReferenceResolver(Protocol):
    """Looks up keys and display metadata of models referenced by elements.

    Every method may return None, in which case converters fall back to the
    raw id or key.
    """

    def get_form_model_key_for_form_model_id(self, form_model_id: str) -> Optional[str]: ...

    def get_form_model_info_for_form_model_key(self, form_model_key: str) -> Optional[Dict[str, str]]: ...

    def get_process_model_key_for_process_model_id(self, process_model_id: str) -> Optional[str]: ...

    def get_process_model_info_for_process_model_key(self, process_model_key: str) -> Optional[Dict[str, str]]: ...

    def get_decision_table_model_key_for_decision_table_model_id(self, model_id: str) -> Optional[str]: ...

    def get_decision_table_model_info_for_decision_table_model_key(self, model_key: str) -> Optional[Dict[str, str]]: ...

    def get_decision_service_model_key_for_decision_service_model_id(self, model_id: str) -> Optional[str]: ...

    def get_decision_service_model_info_for_decision_service_model_key(
        self, model_key: str
    ) -> Optional[Dict[str, str]]: ...


class StandaloneReferenceResolver:
    """Resolver for conversions without a model repository."""

    def get_form_model_key_for_form_model_id(self, form_model_id: str) -> Optional[str]:
        return None

    def get_form_model_info_for_form_model_key(self, form_model_key: str) -> Optional[Dict[str, str]]:
        return None

    def get_process_model_key_for_process_model_id(self, process_model_id: str) -> Optional[str]:
        return None

    def get_process_model_info_for_process_model_key(self, process_model_key: str) -> Optional[Dict[str, str]]:
        return None

    def get_decision_table_model_key_for_decision_table_model_id(self, model_id: str) -> Optional[str]:
        return None

    def get_decision_table_model_info_for_decision_table_model_key(self, model_key: str) -> Optional[Dict[str, str]]:
        return None

    def get_decision_service_model_key_for_decision_service_model_id(self, model_id: str) -> Optional[str]:
        return None

    def get_decision_service_model_info_for_decision_service_model_key(
        self, model_key: str
    ) -> Optional[Dict[str, str]]:
        return None


class ElementProcessor(Protocol):
    """Recursion entry points offered to container converters."""

    def process_flow_elements(self, container: FlowElementsContainer, ctx: "ConverterContext") -> None: ...

    def process_json_elements(self, shapes: Sequence[JsonNode], ctx: "ConverterContext") -> None: ...


@dataclass(frozen=True)
class ConverterContext:
    """Per-call conversion state.

    Attributes:
        model: Process graph being read (to JSON) or built (to domain)
        processor: Assembler used by container converters to recurse
        config: Converter configuration
        resolver: Model reference resolver
        report: Diagnostics sink shared by the whole conversion
        container: Container whose elements are being converted
        parent: Parent a new domain element is attached to
        shapes: JSON array new shapes are appended to
        offset_x: X of the enclosing container, subtracted on output
        offset_y: Y of the enclosing container, subtracted on output
        shape_map: Shapes by resource id (to domain)
        source_ref_map: Shape listing each resource id as outgoing (to domain)
        root_shapes: Top-level child shapes, scanned for connector sources
            when no source index is available
    """

    model: BpmnModel
    processor: ElementProcessor
    config: ConverterConfig = field(default_factory=ConverterConfig)
    resolver: ModelReferenceResolver = field(default_factory=StandaloneReferenceResolver)
    report: ConversionReport = field(default_factory=ConversionReport)
    container: Optional[FlowElementsContainer] = None
    parent: Optional[ParentContainer] = None
    shapes: List[JsonNode] = field(default_factory=list)
    offset_x: float = 0.0
    offset_y: float = 0.0
    shape_map: Mapping[str, JsonNode] = field(default_factory=dict)
    source_ref_map: Mapping[str, JsonNode] = field(default_factory=dict)
    root_shapes: Sequence[JsonNode] = ()

    def derive(self, **changes: Any) -> "ConverterContext":
        return replace(self, **changes)

    @property
    def main_process(self) -> Optional[Process]:
        return self.model.main_process

    def find_source_ref(self, resource_id: str) -> Optional[str]:
        """Element id of the shape whose ``outgoing`` lists ``resource_id``."""
        if self.source_ref_map:
            source = self.source_ref_map.get(resource_id)
            return get_element_id(source) if source is not None else None
        return look_for_source_ref(resource_id, self.root_shapes)
