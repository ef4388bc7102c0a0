"""
Container Converters

Embedded, collapsed, event and ad-hoc subprocesses. Each converter recurses
into the container's children through the assembler carried by the context.

Children of an expanded subprocess are positioned relative to the
subprocess on output. Children of a collapsed subprocess keep their
absolute coordinates, since the editor draws them on a separate canvas.
"""

import logging

from bpmn_json_converter.converter.base import BaseElementConverter
from bpmn_json_converter.converter.constants import (
    EDITOR_CHILD_SHAPES,
    PROPERTY_ACTIVITY_TYPE,
    PROPERTY_CANCEL_REMAINING_INSTANCES,
    PROPERTY_COMPLETION_CONDITION,
    PROPERTY_DATA_PROPERTIES,
    PROPERTY_IS_TRANSACTION,
    PROPERTY_ORDERING,
    PROPERTY_TRIGGERED_BY_EVENT,
    STENCIL_ADHOC_SUB_PROCESS,
    STENCIL_COLLAPSED_SUB_PROCESS,
    STENCIL_EVENT_SUB_PROCESS,
    STENCIL_SUB_PROCESS,
)
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.definitions import (
    convert_data_properties_to_json,
    convert_json_to_data_properties,
)
from bpmn_json_converter.converter.errors import UnresolvedReferenceError
from bpmn_json_converter.converter.properties import (
    JsonNode,
    get_child_shapes,
    get_element_id,
    get_property,
    get_property_value_as_boolean,
    get_property_value_as_string,
    get_stencil_id,
)
from bpmn_json_converter.models.bpmn_elements import (
    AdhocSubProcess,
    BaseElement,
    EventSubProcess,
    SubProcess,
    Transaction,
)

logger = logging.getLogger(__name__)


def process_children_to_json(
    sub_process: SubProcess, ctx: ConverterContext, shape: JsonNode, relative: bool = True
) -> None:
    """Convert the children of ``sub_process`` into ``shape.childShapes``.

    Args:
        sub_process: Container being written
        ctx: Context of the container's own shape
        shape: Container shape receiving the child shapes
        relative: Offset children by the container's position
    """
    offset_x, offset_y = 0.0, 0.0
    if relative:
        graphic_info = ctx.model.get_graphic_info(sub_process.id)
        if graphic_info is None:
            raise UnresolvedReferenceError(f"No diagram placement for subprocess {sub_process.id}", sub_process.id)
        offset_x, offset_y = graphic_info.x, graphic_info.y

    child_shapes: list = []
    ctx.processor.process_flow_elements(
        sub_process,
        ctx.derive(container=sub_process, shapes=child_shapes, offset_x=offset_x, offset_y=offset_y),
    )
    shape[EDITOR_CHILD_SHAPES] = child_shapes


def process_children_to_domain(node: JsonNode, sub_process: SubProcess, ctx: ConverterContext) -> None:
    ctx.processor.process_json_elements(
        get_child_shapes(node), ctx.derive(container=sub_process, parent=sub_process)
    )


class SubProcessConverter(BaseElementConverter):
    """Embedded subprocesses and transactions, expanded or collapsed."""

    stencils = (STENCIL_SUB_PROCESS, STENCIL_COLLAPSED_SUB_PROCESS)
    domain_types = (SubProcess, Transaction)

    def select_stencil(self, element: BaseElement, ctx: ConverterContext) -> str:
        graphic_info = ctx.model.get_graphic_info(element.id)
        if graphic_info is not None and graphic_info.expanded is False:
            return STENCIL_COLLAPSED_SUB_PROCESS
        return STENCIL_SUB_PROCESS

    def convert_element_to_json(
        self, properties: JsonNode, element: SubProcess, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        stencil_id = self.select_stencil(element, ctx)
        properties[PROPERTY_ACTIVITY_TYPE] = stencil_id
        process_children_to_json(element, ctx, shape, relative=stencil_id != STENCIL_COLLAPSED_SUB_PROCESS)

        if isinstance(element, Transaction):
            properties[PROPERTY_IS_TRANSACTION] = True
        convert_data_properties_to_json(element.data_objects, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> SubProcess:
        if get_property_value_as_boolean(PROPERTY_IS_TRANSACTION, node):
            sub_process: SubProcess = Transaction()
        else:
            sub_process = SubProcess()
        sub_process.id = get_element_id(node)

        process_children_to_domain(node, sub_process, ctx)

        data_properties = get_property(PROPERTY_DATA_PROPERTIES, node)
        if data_properties is not None:
            sub_process.data_objects = convert_json_to_data_properties(data_properties)

        if get_stencil_id(node) == STENCIL_COLLAPSED_SUB_PROCESS:
            graphic_info = ctx.model.get_graphic_info(sub_process.id)
            if graphic_info is not None:
                graphic_info.expanded = False
        return sub_process


class EventSubProcessConverter(BaseElementConverter):
    stencils = (STENCIL_EVENT_SUB_PROCESS,)
    domain_types = (EventSubProcess,)

    def convert_element_to_json(
        self, properties: JsonNode, element: EventSubProcess, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        properties[PROPERTY_TRIGGERED_BY_EVENT] = True
        process_children_to_json(element, ctx, shape)
        convert_data_properties_to_json(element.data_objects, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> EventSubProcess:
        sub_process = EventSubProcess(id=get_element_id(node))
        process_children_to_domain(node, sub_process, ctx)

        data_properties = get_property(PROPERTY_DATA_PROPERTIES, node)
        if data_properties is not None:
            sub_process.data_objects = convert_json_to_data_properties(data_properties)
        return sub_process


class AdhocSubProcessConverter(BaseElementConverter):
    stencils = (STENCIL_ADHOC_SUB_PROCESS,)
    domain_types = (AdhocSubProcess,)

    def convert_element_to_json(
        self, properties: JsonNode, element: AdhocSubProcess, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        properties[PROPERTY_COMPLETION_CONDITION] = element.completion_condition
        properties[PROPERTY_ORDERING] = element.ordering
        properties[PROPERTY_CANCEL_REMAINING_INSTANCES] = element.cancel_remaining_instances
        process_children_to_json(element, ctx, shape)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> AdhocSubProcess:
        sub_process = AdhocSubProcess(
            id=get_element_id(node),
            completion_condition=get_property_value_as_string(PROPERTY_COMPLETION_CONDITION, node),
            ordering=get_property_value_as_string(PROPERTY_ORDERING, node),
            cancel_remaining_instances=get_property_value_as_boolean(PROPERTY_CANCEL_REMAINING_INSTANCES, node),
        )
        process_children_to_domain(node, sub_process, ctx)
        return sub_process
