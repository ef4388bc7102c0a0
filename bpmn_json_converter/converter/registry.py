"""
Stencil Registry

Bidirectional lookup between editor stencil ids, element converters and
domain element types. Several stencils may share one converter, and one
domain type maps to exactly one converter; where a domain type needs more
than one stencil (service task sub-types, event definitions) the converter
picks the emitted stencil itself.

The default registry is built once and only read afterwards.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Type

from bpmn_json_converter.converter.artifacts import DataStoreReferenceConverter, TextAnnotationConverter
from bpmn_json_converter.converter.base import BaseElementConverter
from bpmn_json_converter.converter.containers import (
    AdhocSubProcessConverter,
    EventSubProcessConverter,
    SubProcessConverter,
)
from bpmn_json_converter.converter.errors import UnknownStencilError
from bpmn_json_converter.converter.events import (
    BoundaryEventConverter,
    CatchEventConverter,
    EndEventConverter,
    StartEventConverter,
    ThrowEventConverter,
)
from bpmn_json_converter.converter.flows import (
    AssociationConverter,
    MessageFlowConverter,
    SequenceFlowConverter,
)
from bpmn_json_converter.converter.gateways import (
    EventGatewayConverter,
    ExclusiveGatewayConverter,
    InclusiveGatewayConverter,
    ParallelGatewayConverter,
)
from bpmn_json_converter.converter.tasks import (
    BusinessRuleTaskConverter,
    CallActivityConverter,
    CamelTaskConverter,
    DecisionTaskConverter,
    ExternalWorkerTaskConverter,
    HttpTaskConverter,
    MailTaskConverter,
    ManualTaskConverter,
    MuleTaskConverter,
    ReceiveTaskConverter,
    ScriptTaskConverter,
    SendEventTaskConverter,
    SendTaskConverter,
    ServiceTaskConverter,
    ShellTaskConverter,
    UserTaskConverter,
)
from bpmn_json_converter.models.bpmn_elements import BaseElement

logger = logging.getLogger(__name__)

DEFAULT_CONVERTERS: Tuple[Type[BaseElementConverter], ...] = (
    # Events
    StartEventConverter,
    EndEventConverter,
    BoundaryEventConverter,
    CatchEventConverter,
    ThrowEventConverter,
    # Tasks
    UserTaskConverter,
    ServiceTaskConverter,
    MailTaskConverter,
    CamelTaskConverter,
    MuleTaskConverter,
    HttpTaskConverter,
    ShellTaskConverter,
    DecisionTaskConverter,
    SendEventTaskConverter,
    ExternalWorkerTaskConverter,
    ScriptTaskConverter,
    BusinessRuleTaskConverter,
    ManualTaskConverter,
    SendTaskConverter,
    ReceiveTaskConverter,
    CallActivityConverter,
    # Gateways
    ExclusiveGatewayConverter,
    ParallelGatewayConverter,
    InclusiveGatewayConverter,
    EventGatewayConverter,
    # Containers
    SubProcessConverter,
    EventSubProcessConverter,
    AdhocSubProcessConverter,
    # Connectors
    SequenceFlowConverter,
    MessageFlowConverter,
    AssociationConverter,
    # Artifacts
    TextAnnotationConverter,
    DataStoreReferenceConverter,
)


class StencilRegistry:
    """Maps stencil ids and domain types to shared converter instances."""

    def __init__(self, converters: Iterable[Type[BaseElementConverter]] = ()):
        self._instances: Dict[Type[BaseElementConverter], BaseElementConverter] = {}
        self._by_stencil: Dict[str, BaseElementConverter] = {}
        self._by_type: Dict[Type[BaseElement], BaseElementConverter] = {}
        for converter_type in converters:
            self.register(converter_type)

    def _instance(self, converter_type: Type[BaseElementConverter]) -> BaseElementConverter:
        if converter_type not in self._instances:
            self._instances[converter_type] = converter_type()
        return self._instances[converter_type]

    def register(self, converter_type: Type[BaseElementConverter]) -> None:
        """Register every stencil and domain type declared by ``converter_type``."""
        for stencil_id in converter_type.stencils:
            self.register_stencil(stencil_id, converter_type)
        for domain_type in converter_type.domain_types:
            self.register_domain_type(domain_type, converter_type)

    def register_stencil(self, stencil_id: str, converter_type: Type[BaseElementConverter]) -> None:
        if stencil_id in self._by_stencil:
            logger.debug(f"Stencil {stencil_id} re-registered to {converter_type.__name__}")
        self._by_stencil[stencil_id] = self._instance(converter_type)

    def register_domain_type(
        self, domain_type: Type[BaseElement], converter_type: Type[BaseElementConverter]
    ) -> None:
        self._by_type[domain_type] = self._instance(converter_type)

    def find_for_stencil(self, stencil_id: Optional[str]) -> Optional[BaseElementConverter]:
        if stencil_id is None:
            return None
        return self._by_stencil.get(stencil_id)

    def find_for_type(self, domain_type: Type[BaseElement]) -> Optional[BaseElementConverter]:
        """Converter for ``domain_type`` or its nearest registered base class."""
        for klass in domain_type.__mro__:
            converter = self._by_type.get(klass)
            if converter is not None:
                return converter
        return None

    def converter_for_stencil(self, stencil_id: Optional[str]) -> BaseElementConverter:
        """
        Raises:
            UnknownStencilError: If no converter reads ``stencil_id``
        """
        converter = self.find_for_stencil(stencil_id)
        if converter is None:
            raise UnknownStencilError(f"No converter registered for stencil {stencil_id}")
        return converter

    def converter_for_element(self, element: BaseElement) -> BaseElementConverter:
        """
        Raises:
            UnknownStencilError: If no converter writes the element's type
        """
        converter = self.find_for_type(type(element))
        if converter is None:
            raise UnknownStencilError(
                f"No converter registered for element type {type(element).__name__}", element.id
            )
        return converter

    @property
    def stencil_ids(self) -> List[str]:
        return sorted(self._by_stencil)

    @property
    def domain_types(self) -> List[Type[BaseElement]]:
        return list(self._by_type)

    def describe(self) -> List[Tuple[str, str, List[str]]]:
        """``(stencil, converter, domain types)`` rows sorted by stencil id."""
        rows = []
        for stencil_id in self.stencil_ids:
            converter = self._by_stencil[stencil_id]
            type_names = [
                domain_type.__name__ for domain_type, registered in self._by_type.items() if registered is converter
            ]
            rows.append((stencil_id, type(converter).__name__, type_names))
        return rows


_default_registry: Optional[StencilRegistry] = None


def get_default_registry() -> StencilRegistry:
    """Registry holding every built-in converter."""
    global _default_registry
    if _default_registry is None:
        _default_registry = StencilRegistry(DEFAULT_CONVERTERS)
    return _default_registry
