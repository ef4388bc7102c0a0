"""
Event Converters

Start, end, boundary, intermediate catch and throw events. Each family maps
the kind of its single event definition to a stencil; zero or several
definitions fall back to the family default. An event without definitions
that carries an ``eventType`` extension is an event-registry event.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Mapping, Optional

from bpmn_json_converter.converter.base import BaseElementConverter
from bpmn_json_converter.converter.constants import (
    EDITOR_DOCKERS,
    EDITOR_SHAPE_ID,
    PROPERTY_ASYNCHRONOUS,
    PROPERTY_CANCEL_ACTIVITY,
    PROPERTY_FORM_FIELD_VALIDATION,
    PROPERTY_INTERRUPTING,
    PROPERTY_NONE_STARTEVENT_INITIATOR,
    STENCIL_EVENT_BOUNDARY_CANCEL,
    STENCIL_EVENT_BOUNDARY_COMPENSATION,
    STENCIL_EVENT_BOUNDARY_CONDITIONAL,
    STENCIL_EVENT_BOUNDARY_ERROR,
    STENCIL_EVENT_BOUNDARY_ESCALATION,
    STENCIL_EVENT_BOUNDARY_EVENT_REGISTRY,
    STENCIL_EVENT_BOUNDARY_MESSAGE,
    STENCIL_EVENT_BOUNDARY_SIGNAL,
    STENCIL_EVENT_BOUNDARY_TIMER,
    STENCIL_EVENT_BOUNDARY_VARIABLE_LISTENER,
    STENCIL_EVENT_CATCH_CONDITIONAL,
    STENCIL_EVENT_CATCH_EVENT_REGISTRY,
    STENCIL_EVENT_CATCH_MESSAGE,
    STENCIL_EVENT_CATCH_SIGNAL,
    STENCIL_EVENT_CATCH_TIMER,
    STENCIL_EVENT_CATCH_VARIABLE_LISTENER,
    STENCIL_EVENT_END_CANCEL,
    STENCIL_EVENT_END_ERROR,
    STENCIL_EVENT_END_ESCALATION,
    STENCIL_EVENT_END_NONE,
    STENCIL_EVENT_END_TERMINATE,
    STENCIL_EVENT_START_CONDITIONAL,
    STENCIL_EVENT_START_ERROR,
    STENCIL_EVENT_START_ESCALATION,
    STENCIL_EVENT_START_EVENT_REGISTRY,
    STENCIL_EVENT_START_MESSAGE,
    STENCIL_EVENT_START_NONE,
    STENCIL_EVENT_START_SIGNAL,
    STENCIL_EVENT_START_TIMER,
    STENCIL_EVENT_START_VARIABLE_LISTENER,
    STENCIL_EVENT_THROW_COMPENSATION,
    STENCIL_EVENT_THROW_ESCALATION,
    STENCIL_EVENT_THROW_NONE,
    STENCIL_EVENT_THROW_SIGNAL,
)
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.definitions import (
    add_event_properties,
    add_event_registry_properties,
    add_form_key,
    add_form_properties,
    add_receive_event_extension_elements,
    convert_json_to_compensation_definition,
    convert_json_to_conditional_definition,
    convert_json_to_error_definition,
    convert_json_to_escalation_definition,
    convert_json_to_form_key,
    convert_json_to_form_properties,
    convert_json_to_message_definition,
    convert_json_to_signal_definition,
    convert_json_to_terminate_definition,
    convert_json_to_timer_definition,
    convert_json_to_variable_listener_definition,
    set_property_value,
)
from bpmn_json_converter.converter.errors import UnresolvedReferenceError
from bpmn_json_converter.converter.properties import (
    JsonNode,
    create_position_node,
    get_property_value_as_boolean,
    get_property_value_as_string,
    get_stencil_id,
)
from bpmn_json_converter.models.bpmn_elements import (
    BaseElement,
    BoundaryEvent,
    CancelEventDefinition,
    CompensateEventDefinition,
    EndEvent,
    Event,
    EventDefinition,
    EventSubProcess,
    IntermediateCatchEvent,
    StartEvent,
    ThrowEvent,
)

logger = logging.getLogger(__name__)

DefinitionReader = Callable[[JsonNode], EventDefinition]


def select_event_stencil(
    event: Event,
    stencil_by_kind: Mapping[str, str],
    default_stencil: str,
    registry_stencil: Optional[str] = None,
) -> str:
    """Pick the stencil of an event from its definitions.

    Args:
        event: Event being written
        stencil_by_kind: Stencil per event-definition ``kind`` the family supports
        default_stencil: Stencil for zero or several definitions, and for
            definition kinds the family has no stencil for
        registry_stencil: Stencil used when there is no definition but an
            ``eventType`` extension is present

    Returns:
        Stencil id
    """
    definitions = event.event_definitions
    if not definitions and registry_stencil and event.get_extension_value("eventType"):
        return registry_stencil
    if len(definitions) != 1:
        return default_stencil
    return stencil_by_kind.get(definitions[0].kind, default_stencil)


def read_event_definition(
    node: JsonNode, event: Event, readers: Mapping[str, DefinitionReader], registry_stencil: Optional[str] = None
) -> None:
    """Add the definition encoded by the shape's stencil, or event-registry extensions."""
    stencil_id = get_stencil_id(node)
    if registry_stencil is not None and stencil_id == registry_stencil:
        add_receive_event_extension_elements(node, event)
        return
    reader = readers.get(stencil_id)
    if reader is not None:
        event.event_definitions.append(reader(node))


class StartEventConverter(BaseElementConverter):
    """Start events; form settings are only written for the none start event."""

    stencils = (
        STENCIL_EVENT_START_NONE,
        STENCIL_EVENT_START_TIMER,
        STENCIL_EVENT_START_MESSAGE,
        STENCIL_EVENT_START_SIGNAL,
        STENCIL_EVENT_START_ERROR,
        STENCIL_EVENT_START_EVENT_REGISTRY,
        STENCIL_EVENT_START_VARIABLE_LISTENER,
        STENCIL_EVENT_START_CONDITIONAL,
        STENCIL_EVENT_START_ESCALATION,
    )
    domain_types = (StartEvent,)

    stencil_by_kind: Dict[str, str] = {
        "timer": STENCIL_EVENT_START_TIMER,
        "message": STENCIL_EVENT_START_MESSAGE,
        "signal": STENCIL_EVENT_START_SIGNAL,
        "error": STENCIL_EVENT_START_ERROR,
        "variableListener": STENCIL_EVENT_START_VARIABLE_LISTENER,
        "conditional": STENCIL_EVENT_START_CONDITIONAL,
        "escalation": STENCIL_EVENT_START_ESCALATION,
    }
    readers: Dict[str, DefinitionReader] = {
        STENCIL_EVENT_START_TIMER: convert_json_to_timer_definition,
        STENCIL_EVENT_START_MESSAGE: convert_json_to_message_definition,
        STENCIL_EVENT_START_SIGNAL: convert_json_to_signal_definition,
        STENCIL_EVENT_START_ERROR: convert_json_to_error_definition,
        STENCIL_EVENT_START_VARIABLE_LISTENER: convert_json_to_variable_listener_definition,
        STENCIL_EVENT_START_CONDITIONAL: convert_json_to_conditional_definition,
        STENCIL_EVENT_START_ESCALATION: convert_json_to_escalation_definition,
    }

    def get_stencil_id(self, element: BaseElement) -> str:
        return select_event_stencil(
            element, self.stencil_by_kind, STENCIL_EVENT_START_NONE, STENCIL_EVENT_START_EVENT_REGISTRY
        )

    def convert_element_to_json(
        self, properties: JsonNode, element: StartEvent, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        if not element.event_definitions:
            set_property_value(PROPERTY_NONE_STARTEVENT_INITIATOR, element.initiator, properties)
            add_form_key(element.form_key, properties, ctx.resolver)
            set_property_value(PROPERTY_FORM_FIELD_VALIDATION, element.form_field_validation, properties)
            add_form_properties(element.form_properties, properties)

        add_event_properties(element, properties)
        add_event_registry_properties(element, properties)

        if isinstance(ctx.container, EventSubProcess):
            properties[PROPERTY_INTERRUPTING] = element.interrupting

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> StartEvent:
        event = StartEvent()
        if get_stencil_id(node) == STENCIL_EVENT_START_NONE:
            event.initiator = get_property_value_as_string(PROPERTY_NONE_STARTEVENT_INITIATOR, node)
            event.form_key = convert_json_to_form_key(node, ctx.resolver)
            event.form_field_validation = get_property_value_as_string(PROPERTY_FORM_FIELD_VALIDATION, node)
            event.form_properties = convert_json_to_form_properties(node)
        else:
            read_event_definition(node, event, self.readers, STENCIL_EVENT_START_EVENT_REGISTRY)
        event.interrupting = get_property_value_as_boolean(PROPERTY_INTERRUPTING, node, True)
        return event


class EndEventConverter(BaseElementConverter):
    stencils = (
        STENCIL_EVENT_END_NONE,
        STENCIL_EVENT_END_ERROR,
        STENCIL_EVENT_END_ESCALATION,
        STENCIL_EVENT_END_CANCEL,
        STENCIL_EVENT_END_TERMINATE,
    )
    domain_types = (EndEvent,)

    stencil_by_kind: Dict[str, str] = {
        "error": STENCIL_EVENT_END_ERROR,
        "escalation": STENCIL_EVENT_END_ESCALATION,
        "cancel": STENCIL_EVENT_END_CANCEL,
        "terminate": STENCIL_EVENT_END_TERMINATE,
    }
    readers: Dict[str, DefinitionReader] = {
        STENCIL_EVENT_END_ERROR: convert_json_to_error_definition,
        STENCIL_EVENT_END_ESCALATION: convert_json_to_escalation_definition,
        STENCIL_EVENT_END_CANCEL: lambda node: CancelEventDefinition(),
        STENCIL_EVENT_END_TERMINATE: convert_json_to_terminate_definition,
    }

    def get_stencil_id(self, element: BaseElement) -> str:
        return select_event_stencil(element, self.stencil_by_kind, STENCIL_EVENT_END_NONE)

    def convert_element_to_json(
        self, properties: JsonNode, element: EndEvent, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        add_event_properties(element, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> EndEvent:
        event = EndEvent()
        read_event_definition(node, event, self.readers)
        return event


class BoundaryEventConverter(BaseElementConverter):
    """Boundary events.

    The shape carries a single docker at the event's centre relative to the
    host activity. The host itself is found by scanning every shape's
    ``outgoing`` list for the boundary event's resource id.
    """

    stencils = (
        STENCIL_EVENT_BOUNDARY_TIMER,
        STENCIL_EVENT_BOUNDARY_CONDITIONAL,
        STENCIL_EVENT_BOUNDARY_ERROR,
        STENCIL_EVENT_BOUNDARY_ESCALATION,
        STENCIL_EVENT_BOUNDARY_SIGNAL,
        STENCIL_EVENT_BOUNDARY_MESSAGE,
        STENCIL_EVENT_BOUNDARY_EVENT_REGISTRY,
        STENCIL_EVENT_BOUNDARY_VARIABLE_LISTENER,
        STENCIL_EVENT_BOUNDARY_CANCEL,
        STENCIL_EVENT_BOUNDARY_COMPENSATION,
    )
    domain_types = (BoundaryEvent,)

    stencil_by_kind: Dict[str, str] = {
        "timer": STENCIL_EVENT_BOUNDARY_TIMER,
        "conditional": STENCIL_EVENT_BOUNDARY_CONDITIONAL,
        "error": STENCIL_EVENT_BOUNDARY_ERROR,
        "escalation": STENCIL_EVENT_BOUNDARY_ESCALATION,
        "signal": STENCIL_EVENT_BOUNDARY_SIGNAL,
        "message": STENCIL_EVENT_BOUNDARY_MESSAGE,
        "cancel": STENCIL_EVENT_BOUNDARY_CANCEL,
        "compensate": STENCIL_EVENT_BOUNDARY_COMPENSATION,
        "variableListener": STENCIL_EVENT_BOUNDARY_VARIABLE_LISTENER,
    }
    readers: Dict[str, DefinitionReader] = {
        STENCIL_EVENT_BOUNDARY_TIMER: convert_json_to_timer_definition,
        STENCIL_EVENT_BOUNDARY_CONDITIONAL: convert_json_to_conditional_definition,
        STENCIL_EVENT_BOUNDARY_ERROR: convert_json_to_error_definition,
        STENCIL_EVENT_BOUNDARY_ESCALATION: convert_json_to_escalation_definition,
        STENCIL_EVENT_BOUNDARY_SIGNAL: convert_json_to_signal_definition,
        STENCIL_EVENT_BOUNDARY_MESSAGE: convert_json_to_message_definition,
        STENCIL_EVENT_BOUNDARY_CANCEL: lambda node: CancelEventDefinition(),
        STENCIL_EVENT_BOUNDARY_COMPENSATION: lambda node: CompensateEventDefinition(),
        STENCIL_EVENT_BOUNDARY_VARIABLE_LISTENER: convert_json_to_variable_listener_definition,
    }

    # These stencils ignore the cancelactivity property.
    fixed_cancel_activity = (
        STENCIL_EVENT_BOUNDARY_ERROR,
        STENCIL_EVENT_BOUNDARY_CANCEL,
        STENCIL_EVENT_BOUNDARY_COMPENSATION,
        STENCIL_EVENT_BOUNDARY_CONDITIONAL,
    )

    def get_stencil_id(self, element: BaseElement) -> str:
        return select_event_stencil(
            element, self.stencil_by_kind, STENCIL_EVENT_BOUNDARY_TIMER, STENCIL_EVENT_BOUNDARY_EVENT_REGISTRY
        )

    def convert_element_to_json(
        self, properties: JsonNode, element: BoundaryEvent, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        host_id = element.attached_to_ref.id if element.attached_to_ref is not None else element.attached_to_ref_id
        graphic_info = ctx.model.get_graphic_info(element.id)
        host_info = ctx.model.get_graphic_info(host_id)
        if graphic_info is None or host_info is None:
            raise UnresolvedReferenceError(f"Boundary event {element.id} has no placed host activity", element.id)

        x = _round_half_up(graphic_info.x + graphic_info.width / 2 - host_info.x)
        y = _round_half_up(graphic_info.y + graphic_info.height / 2 - host_info.y)
        shape[EDITOR_DOCKERS] = [create_position_node(x, y)]

        properties[PROPERTY_CANCEL_ACTIVITY] = element.cancel_activity
        add_event_properties(element, properties)
        add_event_registry_properties(element, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> BoundaryEvent:
        event = BoundaryEvent()
        stencil_id = get_stencil_id(node)
        read_event_definition(node, event, self.readers, STENCIL_EVENT_BOUNDARY_EVENT_REGISTRY)

        if stencil_id in (STENCIL_EVENT_BOUNDARY_CANCEL, STENCIL_EVENT_BOUNDARY_COMPENSATION):
            event.cancel_activity = False
        if stencil_id not in self.fixed_cancel_activity:
            event.cancel_activity = get_property_value_as_boolean(PROPERTY_CANCEL_ACTIVITY, node)

        resource_id = node.get(EDITOR_SHAPE_ID)
        if resource_id is not None:
            event.attached_to_ref_id = ctx.find_source_ref(str(resource_id))
        return event


class CatchEventConverter(BaseElementConverter):
    stencils = (
        STENCIL_EVENT_CATCH_TIMER,
        STENCIL_EVENT_CATCH_MESSAGE,
        STENCIL_EVENT_CATCH_SIGNAL,
        STENCIL_EVENT_CATCH_CONDITIONAL,
        STENCIL_EVENT_CATCH_EVENT_REGISTRY,
        STENCIL_EVENT_CATCH_VARIABLE_LISTENER,
    )
    domain_types = (IntermediateCatchEvent,)

    stencil_by_kind: Dict[str, str] = {
        "timer": STENCIL_EVENT_CATCH_TIMER,
        "message": STENCIL_EVENT_CATCH_MESSAGE,
        "signal": STENCIL_EVENT_CATCH_SIGNAL,
        "conditional": STENCIL_EVENT_CATCH_CONDITIONAL,
        "variableListener": STENCIL_EVENT_CATCH_VARIABLE_LISTENER,
    }
    readers: Dict[str, DefinitionReader] = {
        STENCIL_EVENT_CATCH_TIMER: convert_json_to_timer_definition,
        STENCIL_EVENT_CATCH_MESSAGE: convert_json_to_message_definition,
        STENCIL_EVENT_CATCH_SIGNAL: convert_json_to_signal_definition,
        STENCIL_EVENT_CATCH_CONDITIONAL: convert_json_to_conditional_definition,
        STENCIL_EVENT_CATCH_VARIABLE_LISTENER: convert_json_to_variable_listener_definition,
    }

    def get_stencil_id(self, element: BaseElement) -> str:
        return select_event_stencil(
            element, self.stencil_by_kind, STENCIL_EVENT_CATCH_TIMER, STENCIL_EVENT_CATCH_EVENT_REGISTRY
        )

    def convert_element_to_json(
        self, properties: JsonNode, element: IntermediateCatchEvent, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        add_event_properties(element, properties)
        add_event_registry_properties(element, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> IntermediateCatchEvent:
        event = IntermediateCatchEvent()
        read_event_definition(node, event, self.readers, STENCIL_EVENT_CATCH_EVENT_REGISTRY)
        return event


class ThrowEventConverter(BaseElementConverter):
    stencils = (
        STENCIL_EVENT_THROW_NONE,
        STENCIL_EVENT_THROW_SIGNAL,
        STENCIL_EVENT_THROW_ESCALATION,
        STENCIL_EVENT_THROW_COMPENSATION,
    )
    domain_types = (ThrowEvent,)

    stencil_by_kind: Dict[str, str] = {
        "signal": STENCIL_EVENT_THROW_SIGNAL,
        "escalation": STENCIL_EVENT_THROW_ESCALATION,
        "compensate": STENCIL_EVENT_THROW_COMPENSATION,
    }
    readers: Dict[str, DefinitionReader] = {
        STENCIL_EVENT_THROW_SIGNAL: convert_json_to_signal_definition,
        STENCIL_EVENT_THROW_ESCALATION: convert_json_to_escalation_definition,
        STENCIL_EVENT_THROW_COMPENSATION: convert_json_to_compensation_definition,
    }

    def get_stencil_id(self, element: BaseElement) -> str:
        return select_event_stencil(element, self.stencil_by_kind, STENCIL_EVENT_THROW_NONE)

    def convert_element_to_json(
        self, properties: JsonNode, element: ThrowEvent, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        if element.asynchronous:
            properties[PROPERTY_ASYNCHRONOUS] = True
        add_event_properties(element, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ThrowEvent:
        event = ThrowEvent()
        event.asynchronous = get_property_value_as_boolean(PROPERTY_ASYNCHRONOUS, node)
        read_event_definition(node, event, self.readers)
        return event


def _round_half_up(value: float) -> int:
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
