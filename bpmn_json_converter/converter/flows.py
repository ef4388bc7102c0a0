"""
Connector Converters

Sequence flows, message flows and associations. Connectors are drawn between
two shapes, so instead of bounds of their own they carry fixed placeholder
bounds and a docker list: the first docker is relative to the source shape,
the last to the target shape, interior dockers are absolute bend points.

Connector shapes do not record their source. On input the source is found by
scanning every shape's ``outgoing`` list for the connector's resource id.
"""

import logging
from typing import Any, List, Optional

from bpmn_json_converter.converter.base import BaseElementConverter
from bpmn_json_converter.converter.constants import (
    EDITOR_DOCKERS,
    EDITOR_EDGE_TARGET,
    EDITOR_OUTGOING,
    EDITOR_SHAPE_ID,
    EDITOR_SHAPE_PROPERTIES,
    MODELER_NAMESPACE,
    MODELER_NAMESPACE_PREFIX,
    PROPERTY_DOCUMENTATION,
    PROPERTY_NAME,
    PROPERTY_OVERRIDE_ID,
    PROPERTY_SEQUENCEFLOW_CONDITION,
    PROPERTY_SEQUENCEFLOW_DEFAULT,
    PROPERTY_SKIP_EXPRESSION,
    STENCIL_ASSOCIATION,
    STENCIL_MESSAGE_FLOW,
    STENCIL_SEQUENCE_FLOW,
)
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.definitions import convert_listeners_to_json
from bpmn_json_converter.converter.errors import UnresolvedReferenceError
from bpmn_json_converter.converter.properties import (
    JsonNode,
    as_text,
    create_child_shape,
    create_position_node,
    create_resource_node,
    get_element_id,
    get_property,
    get_property_value_as_string,
    get_value_as_string,
)
from bpmn_json_converter.models.bpmn_elements import (
    Activity,
    Association,
    BaseElement,
    ExclusiveGateway,
    ExtensionElement,
    GraphicInfo,
    InclusiveGateway,
    MessageFlow,
    SequenceFlow,
)

logger = logging.getLogger(__name__)

# Connector bounds are ignored by the editor; it recomputes them from dockers
CONNECTOR_BOUNDS = (172, 212, 128, 212)

# Distance within which an association end is snapped to a side of its target
ASSOCIATION_SNAP_DISTANCE = 5


# ===========================
# Shared connector helpers
# ===========================


def _require_graphic_info(element_id: Optional[str], connector_id: Optional[str], ctx: ConverterContext) -> GraphicInfo:
    graphic_info = ctx.model.get_graphic_info(element_id)
    if graphic_info is None:
        raise UnresolvedReferenceError(
            f"Connector {connector_id} references {element_id}, which has no diagram placement", connector_id
        )
    return graphic_info


def _interior_dockers(connector_id: Optional[str], ctx: ConverterContext) -> List[JsonNode]:
    waypoints = ctx.model.get_flow_location_graphic_info(connector_id)
    if len(waypoints) <= 2:
        return []
    return [create_position_node(point.x, point.y) for point in waypoints[1:-1]]


def create_connector_shape(
    connector_id: Optional[str],
    stencil_id: str,
    source_ref: Optional[str],
    target_ref: Optional[str],
    ctx: ConverterContext,
) -> JsonNode:
    """Connector shape with centre-to-centre dockers, ``outgoing`` and ``target``.

    Raises:
        UnresolvedReferenceError: If either endpoint has no diagram placement
    """
    source_info = _require_graphic_info(source_ref, connector_id, ctx)
    target_info = _require_graphic_info(target_ref, connector_id, ctx)

    dockers = [create_position_node(source_info.width / 2.0, source_info.height / 2.0)]
    dockers.extend(_interior_dockers(connector_id, ctx))
    dockers.append(create_position_node(target_info.width / 2.0, target_info.height / 2.0))

    shape = create_child_shape(connector_id, stencil_id, *CONNECTOR_BOUNDS)
    shape[EDITOR_DOCKERS] = dockers
    shape[EDITOR_OUTGOING] = [create_resource_node(target_ref)]
    shape[EDITOR_EDGE_TARGET] = create_resource_node(target_ref)
    return shape


def resolve_connector_endpoints(node: JsonNode, ctx: ConverterContext):
    """``(source_ref, target_ref)`` element ids of a connector shape.

    The target is only resolved when a source was found.
    """
    resource_id = get_value_as_string(EDITOR_SHAPE_ID, node)
    source_ref = ctx.find_source_ref(resource_id) if resource_id else None
    target_ref = None
    if source_ref is not None:
        target = node.get(EDITOR_EDGE_TARGET)
        target_id = get_value_as_string(EDITOR_SHAPE_ID, target) if isinstance(target, dict) else None
        target_shape = ctx.shape_map.get(target_id) if target_id else None
        if target_shape is not None:
            target_ref = get_element_id(target_shape)
    return source_ref, target_ref


def _require_endpoints(node: JsonNode, ctx: ConverterContext):
    source_ref, target_ref = resolve_connector_endpoints(node, ctx)
    element_id = get_element_id(node)
    if source_ref is None:
        raise UnresolvedReferenceError(f"No shape lists connector {element_id} as outgoing", element_id)
    if target_ref is None:
        raise UnresolvedReferenceError(f"Target of connector {element_id} does not exist", element_id)
    return source_ref, target_ref


# ===========================
# Sequence flow
# ===========================


def _add_condition_extension(name: str, value: str, flow: SequenceFlow) -> None:
    flow.add_extension_element(
        ExtensionElement(
            name=name,
            namespace=MODELER_NAMESPACE,
            namespace_prefix=MODELER_NAMESPACE_PREFIX,
            element_text=value,
        )
    )


def _text(expression: JsonNode, key: str) -> Optional[str]:
    value = expression.get(key)
    if value is None:
        return None
    return as_text(value)


def _set_field_condition(flow: SequenceFlow, expression: JsonNode) -> None:
    field_id = _text(expression, "fieldId")
    operator = _text(expression, "operator")
    value = _text(expression, "value")
    if field_id is None or operator is None or value is None:
        return
    flow.condition_expression = f"${{{field_id} {operator} {value}}}"
    _add_condition_extension("conditionFieldId", field_id, flow)
    _add_condition_extension("conditionOperator", operator, flow)
    _add_condition_extension("conditionValue", value, flow)


def _set_outcome_condition(flow: SequenceFlow, expression: JsonNode) -> None:
    raw_form_id = expression.get("outcomeFormId")
    operator = _text(expression, "operator")
    outcome_name = _text(expression, "outcomeName")
    if raw_form_id is None or operator is None or outcome_name is None:
        return
    try:
        form_id = str(int(raw_form_id))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring outcome condition of flow {flow.id} with form id {raw_form_id!r}")
        return
    flow.condition_expression = f"${{form{form_id}outcome {operator} {outcome_name}}}"
    _add_condition_extension("conditionFormId", form_id, flow)
    _add_condition_extension("conditionOperator", operator, flow)
    _add_condition_extension("conditionOutcomeName", outcome_name, flow)


def convert_json_to_condition(condition: Any, flow: SequenceFlow) -> None:
    """Read ``conditionsequenceflow`` as plain text or as a structured expression.

    Structured conditions either carry a ``staticValue`` or are built from a
    form field (``fieldType: field``) or a form outcome (``fieldType: outcome``).
    """
    if condition is None:
        return
    if isinstance(condition, str):
        flow.condition_expression = condition
        return
    if not isinstance(condition, dict):
        return

    expression = condition.get("expression")
    if not isinstance(expression, dict) or expression.get("type") is None:
        return

    expression_type = as_text(expression["type"])
    field_type = expression.get("fieldType")
    if expression_type.lower() == "variables" and field_type is not None:
        field_type = as_text(field_type).lower()
        if field_type == "field":
            _set_field_condition(flow, expression)
        elif field_type == "outcome":
            _set_outcome_condition(flow, expression)
    elif expression.get("staticValue") is not None:
        flow.condition_expression = as_text(expression["staticValue"])


def is_default_flow(flow: SequenceFlow, ctx: ConverterContext) -> bool:
    """Whether ``flow`` is the declared default of its source gateway or activity."""
    source = None
    if ctx.container is not None:
        source = ctx.container.get_flow_element(flow.source_ref)
    if source is None:
        source = ctx.model.get_flow_element(flow.source_ref)
    if isinstance(source, (ExclusiveGateway, InclusiveGateway, Activity)):
        return bool(source.default_flow) and source.default_flow == flow.id
    return False


class SequenceFlowConverter(BaseElementConverter):
    stencils = (STENCIL_SEQUENCE_FLOW,)
    domain_types = (SequenceFlow,)

    def to_json(self, element: SequenceFlow, ctx: ConverterContext) -> JsonNode:
        shape = create_connector_shape(element.id, STENCIL_SEQUENCE_FLOW, element.source_ref, element.target_ref, ctx)

        properties: JsonNode = {PROPERTY_OVERRIDE_ID: element.id}
        if element.name:
            properties[PROPERTY_NAME] = element.name
        if element.documentation:
            properties[PROPERTY_DOCUMENTATION] = element.documentation
        if element.condition_expression:
            properties[PROPERTY_SEQUENCEFLOW_CONDITION] = element.condition_expression
        if element.skip_expression:
            properties[PROPERTY_SKIP_EXPRESSION] = element.skip_expression
        if is_default_flow(element, ctx):
            properties[PROPERTY_SEQUENCEFLOW_DEFAULT] = True
        convert_listeners_to_json(element.execution_listeners, True, properties)

        shape[EDITOR_SHAPE_PROPERTIES] = properties
        ctx.shapes.append(shape)
        return shape

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> SequenceFlow:
        source_ref, target_ref = _require_endpoints(node, ctx)
        flow = SequenceFlow(id=get_element_id(node), source_ref=source_ref, target_ref=target_ref)
        convert_json_to_condition(get_property(PROPERTY_SEQUENCEFLOW_CONDITION, node), flow)
        flow.skip_expression = get_property_value_as_string(PROPERTY_SKIP_EXPRESSION, node)
        return flow


# ===========================
# Message flow
# ===========================


class MessageFlowConverter(BaseElementConverter):
    """Message flows live on the model, not in a container."""

    stencils = (STENCIL_MESSAGE_FLOW,)
    domain_types = (MessageFlow,)

    def to_json(self, element: MessageFlow, ctx: ConverterContext) -> JsonNode:
        shape = create_connector_shape(element.id, STENCIL_MESSAGE_FLOW, element.source_ref, element.target_ref, ctx)
        properties: JsonNode = {PROPERTY_OVERRIDE_ID: element.id}
        if element.name:
            properties[PROPERTY_NAME] = element.name
        shape[EDITOR_SHAPE_PROPERTIES] = properties
        ctx.shapes.append(shape)
        return shape

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> MessageFlow:
        source_ref, target_ref = _require_endpoints(node, ctx)
        return MessageFlow(
            id=get_element_id(node),
            name=get_property_value_as_string(PROPERTY_NAME, node),
            source_ref=source_ref,
            target_ref=target_ref,
        )

    def to_domain(self, node: JsonNode, ctx: ConverterContext) -> BaseElement:
        message_flow = self.convert_json_to_element(node, ctx)
        ctx.model.add_message_flow(message_flow)
        return message_flow


# ===========================
# Association
# ===========================


def snap_to_target_side(last_point: GraphicInfo, target: GraphicInfo) -> JsonNode:
    """Docker on the side of ``target`` closest to ``last_point``, relative to the target.

    Sides are tried top, right, bottom; anything else docks on the left.
    """
    if abs(last_point.y - target.y) < ASSOCIATION_SNAP_DISTANCE:
        return create_position_node(target.width / 2.0, 0.0)
    if abs(last_point.x - (target.x + target.width)) < ASSOCIATION_SNAP_DISTANCE:
        return create_position_node(target.width, target.height / 2.0)
    if abs(last_point.y - (target.y + target.height)) < ASSOCIATION_SNAP_DISTANCE:
        return create_position_node(target.width / 2.0, target.height)
    return create_position_node(0.0, target.height / 2.0)


class AssociationConverter(BaseElementConverter):
    stencils = (STENCIL_ASSOCIATION,)
    domain_types = (Association,)

    def to_json(self, element: Association, ctx: ConverterContext) -> JsonNode:
        source_info = _require_graphic_info(element.source_ref, element.id, ctx)
        target_info = _require_graphic_info(element.target_ref, element.id, ctx)

        dockers = [create_position_node(source_info.width / 2.0, source_info.height / 2.0)]
        dockers.extend(_interior_dockers(element.id, ctx))

        waypoints = ctx.model.get_flow_location_graphic_info(element.id)
        if waypoints:
            dockers.append(snap_to_target_side(waypoints[-1], target_info))
        else:
            dockers.append(create_position_node(target_info.width / 2.0, target_info.height / 2.0))

        shape = create_child_shape(element.id, STENCIL_ASSOCIATION, *CONNECTOR_BOUNDS)
        shape[EDITOR_DOCKERS] = dockers
        shape[EDITOR_OUTGOING] = [create_resource_node(element.target_ref)]
        shape[EDITOR_EDGE_TARGET] = create_resource_node(element.target_ref)
        shape[EDITOR_SHAPE_PROPERTIES] = {PROPERTY_OVERRIDE_ID: element.id}
        ctx.shapes.append(shape)
        return shape

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> Association:
        source_ref, target_ref = _require_endpoints(node, ctx)
        return Association(source_ref=source_ref, target_ref=target_ref)
