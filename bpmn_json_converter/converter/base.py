"""
Base Element Converter

Shared behaviour of every element converter. :meth:`BaseElementConverter.to_json`
builds the shape node common to all flow elements (bounds, id, name,
documentation, outgoing references, activity and gateway flags, listeners)
and delegates the family-specific properties to
:meth:`BaseElementConverter.convert_element_to_json`.
:meth:`BaseElementConverter.to_domain` does the reverse and attaches the new
element to the parent container carried by the context.

Converters hold no per-call state; everything a call needs travels in the
:class:`~bpmn_json_converter.converter.context.ConverterContext`.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple, Type

from bpmn_json_converter.converter.constants import (
    EDITOR_DOCKERS,
    EDITOR_EDGE_TARGET,
    EDITOR_FLOW_ORDER_EXTENSION,
    EDITOR_OUTGOING,
    EDITOR_RESOURCEID_EXTENSION,
    EDITOR_SHAPE_ID,
    EDITOR_SHAPE_PROPERTIES,
    PROPERTY_ASYNCHRONOUS,
    PROPERTY_DOCUMENTATION,
    PROPERTY_EXCLUSIVE,
    PROPERTY_FOR_COMPENSATION,
    PROPERTY_MULTIINSTANCE_CARDINALITY,
    PROPERTY_MULTIINSTANCE_COLLECTION,
    PROPERTY_MULTIINSTANCE_CONDITION,
    PROPERTY_MULTIINSTANCE_INDEX_VARIABLE,
    PROPERTY_MULTIINSTANCE_TYPE,
    PROPERTY_MULTIINSTANCE_VARIABLE,
    PROPERTY_MULTIINSTANCE_VARIABLE_AGGREGATIONS,
    PROPERTY_NAME,
    PROPERTY_OVERRIDE_ID,
    PROPERTY_SEQUENCEFLOW_ORDER,
    STENCIL_DATA_ASSOCIATION,
    VALUE_AGGREGATIONS,
    VALUE_SEQUENCE_FLOW_ORDER,
)
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.definitions import (
    convert_json_to_listeners,
    convert_listeners_to_json,
    is_expression,
)
from bpmn_json_converter.converter.errors import UnresolvedReferenceError
from bpmn_json_converter.converter.properties import (
    JsonNode,
    as_text,
    create_child_shape,
    create_position_node,
    create_resource_node,
    get_element_id,
    get_property,
    get_property_value_as_boolean,
    get_property_value_as_string,
    validate_if_node_is_textual,
)
from bpmn_json_converter.models.bpmn_elements import (
    Activity,
    AggregationVariable,
    Artifact,
    Association,
    BaseElement,
    DataAssociation,
    DataStoreReference,
    ExtensionElement,
    FieldExtension,
    FlowElement,
    FlowElementsContainer,
    FlowNode,
    Gateway,
    ImplementationType,
    Lane,
    MultiInstanceLoopCharacteristics,
    Process,
    SequenceFlow,
    ServiceTask,
    SubProcess,
    UserTask,
    VariableAggregationDefinition,
    VariableAggregationDefinitions,
)

logger = logging.getLogger(__name__)


# ===========================
# Shared helpers
# ===========================


def add_field(
    property_name: str,
    node: JsonNode,
    task: ServiceTask,
    field_name: Optional[str] = None,
    default_value: Optional[str] = None,
) -> None:
    """Store a typed-task property as a field extension.

    Args:
        property_name: Editor property key
        node: Shape node
        task: Service task receiving the field
        field_name: Field name; defaults to the property key without its
            eight-character family prefix (``mailtaskto`` -> ``to``)
        default_value: Literal stored when the property is empty
    """
    field = FieldExtension(field_name=field_name or property_name[8:])
    value = get_property_value_as_string(property_name, node)
    if value:
        if is_expression(value):
            field.expression = value
        else:
            field.string_value = value
        task.field_extensions.append(field)
    elif default_value:
        field.string_value = default_value
        task.field_extensions.append(field)


def convert_list_to_comma_separated(values: Optional[Sequence[str]]) -> Optional[str]:
    if not values:
        return None
    return ",".join(values)


def shape_bounds(element_id: Optional[str], ctx: ConverterContext) -> Tuple[float, float, float, float]:
    """``(lower_right_x, lower_right_y, upper_left_x, upper_left_y)`` relative to the context offset.

    Raises:
        UnresolvedReferenceError: If the element has no diagram placement
    """
    graphic_info = ctx.model.get_graphic_info(element_id)
    if graphic_info is None:
        raise UnresolvedReferenceError(f"No diagram placement for element {element_id}", element_id)
    x = graphic_info.x - ctx.offset_x
    y = graphic_info.y - ctx.offset_y
    return x + graphic_info.width, y + graphic_info.height, x, y


# ===========================
# Multi-instance
# ===========================


def convert_aggregations_to_json(aggregations: Optional[VariableAggregationDefinitions], properties: JsonNode) -> None:
    if aggregations is None:
        properties[PROPERTY_MULTIINSTANCE_VARIABLE_AGGREGATIONS] = None
        return

    items = []
    for aggregation in aggregations.aggregations:
        item: JsonNode = {
            "target": aggregation.target,
            "targetExpression": aggregation.target_expression,
        }
        if aggregation.implementation_type == ImplementationType.DELEGATE_EXPRESSION:
            item["delegateExpression"] = aggregation.implementation
        elif aggregation.implementation_type == ImplementationType.CLASS:
            item["class"] = aggregation.implementation
        item["storeAsTransient"] = aggregation.store_as_transient_variable
        item["createOverview"] = aggregation.create_overview_variable
        item["definitions"] = [
            {
                "source": definition.source,
                "sourceExpression": definition.source_expression,
                "target": definition.target,
                "targetExpression": definition.target_expression,
            }
            for definition in aggregation.definitions
        ]
        items.append(item)
    properties[PROPERTY_MULTIINSTANCE_VARIABLE_AGGREGATIONS] = {VALUE_AGGREGATIONS: items}


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = as_text(value)
    return text if text.strip() else None


def convert_json_to_aggregations(node: Any) -> Optional[VariableAggregationDefinitions]:
    node = validate_if_node_is_textual(node)
    if not isinstance(node, dict):
        return None

    aggregations = VariableAggregationDefinitions()
    for aggregation_node in node.get(VALUE_AGGREGATIONS) or []:
        if not isinstance(aggregation_node, dict):
            continue
        aggregation = VariableAggregationDefinition(
            target=_blank_to_none(aggregation_node.get("target")),
            target_expression=_blank_to_none(aggregation_node.get("targetExpression")),
        )
        delegate_expression = _blank_to_none(aggregation_node.get("delegateExpression"))
        class_name = _blank_to_none(aggregation_node.get("class"))
        if delegate_expression:
            aggregation.implementation_type = ImplementationType.DELEGATE_EXPRESSION
            aggregation.implementation = delegate_expression
        elif class_name:
            aggregation.implementation_type = ImplementationType.CLASS
            aggregation.implementation = class_name

        aggregation.store_as_transient_variable = aggregation_node.get("storeAsTransient") is True
        aggregation.create_overview_variable = aggregation_node.get("createOverview") is True

        for definition_node in aggregation_node.get("definitions") or []:
            if not isinstance(definition_node, dict):
                continue
            aggregation.definitions.append(
                AggregationVariable(
                    source=_blank_to_none(definition_node.get("source")),
                    source_expression=_blank_to_none(definition_node.get("sourceExpression")),
                    target=_blank_to_none(definition_node.get("target")),
                    target_expression=_blank_to_none(definition_node.get("targetExpression")),
                )
            )
        aggregations.aggregations.append(aggregation)
    return aggregations


def convert_multi_instance_to_json(activity: Activity, properties: JsonNode) -> None:
    loop = activity.loop_characteristics
    if loop is None:
        return
    if not (loop.loop_cardinality or loop.input_data_item or loop.completion_condition):
        return

    properties[PROPERTY_MULTIINSTANCE_TYPE] = "Sequential" if loop.sequential else "Parallel"
    if loop.loop_cardinality:
        properties[PROPERTY_MULTIINSTANCE_CARDINALITY] = loop.loop_cardinality
    if loop.input_data_item:
        properties[PROPERTY_MULTIINSTANCE_COLLECTION] = loop.input_data_item
    if loop.element_variable:
        properties[PROPERTY_MULTIINSTANCE_VARIABLE] = loop.element_variable
    if loop.completion_condition:
        properties[PROPERTY_MULTIINSTANCE_CONDITION] = loop.completion_condition
    if loop.element_index_variable:
        properties[PROPERTY_MULTIINSTANCE_INDEX_VARIABLE] = loop.element_index_variable
    convert_aggregations_to_json(loop.aggregations, properties)


def convert_json_to_multi_instance(node: JsonNode) -> Optional[MultiInstanceLoopCharacteristics]:
    """Loop characteristics, built only for a multi-instance type other than ``none``."""
    multi_instance_type = get_property_value_as_string(PROPERTY_MULTIINSTANCE_TYPE, node)
    if not multi_instance_type or multi_instance_type.lower() == "none":
        return None

    return MultiInstanceLoopCharacteristics(
        sequential=multi_instance_type.lower() == "sequential",
        loop_cardinality=get_property_value_as_string(PROPERTY_MULTIINSTANCE_CARDINALITY, node),
        input_data_item=get_property_value_as_string(PROPERTY_MULTIINSTANCE_COLLECTION, node),
        element_variable=get_property_value_as_string(PROPERTY_MULTIINSTANCE_VARIABLE, node),
        completion_condition=get_property_value_as_string(PROPERTY_MULTIINSTANCE_CONDITION, node),
        element_index_variable=get_property_value_as_string(PROPERTY_MULTIINSTANCE_INDEX_VARIABLE, node),
        aggregations=convert_json_to_aggregations(get_property(PROPERTY_MULTIINSTANCE_VARIABLE_AGGREGATIONS, node)),
    )


# ===========================
# Base converter
# ===========================


class BaseElementConverter:
    """Converter for one element family.

    Subclasses declare the stencils they read and the domain types they write,
    and override the two family hooks. The registry keeps one shared instance
    per subclass.
    """

    stencils: Tuple[str, ...] = ()
    domain_types: Tuple[Type[BaseElement], ...] = ()

    def get_stencil_id(self, element: BaseElement) -> str:
        """Stencil emitted for ``element``; the first declared stencil by default."""
        return self.stencils[0]

    def select_stencil(self, element: BaseElement, ctx: ConverterContext) -> str:
        """Stencil for ``element`` when the choice depends on the diagram; see :meth:`get_stencil_id`."""
        return self.get_stencil_id(element)

    def convert_element_to_json(
        self, properties: JsonNode, element: BaseElement, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        """Write family-specific properties. ``shape`` is already in ``ctx.shapes``."""

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> BaseElement:
        raise NotImplementedError

    # ---------------------------
    # Domain -> JSON
    # ---------------------------

    def to_json(self, element: BaseElement, ctx: ConverterContext) -> JsonNode:
        """Append the shape of ``element`` to ``ctx.shapes`` and return it.

        Raises:
            UnresolvedReferenceError: If the element has no diagram placement
        """
        stencil_id = self.select_stencil(element, ctx)
        shape = create_child_shape(element.id, stencil_id, *shape_bounds(element.id, ctx))
        ctx.shapes.append(shape)

        properties: JsonNode = {PROPERTY_OVERRIDE_ID: element.id}
        if isinstance(element, FlowElement):
            if element.name:
                properties[PROPERTY_NAME] = element.name
            if element.documentation:
                properties[PROPERTY_DOCUMENTATION] = element.documentation

        self.convert_element_to_json(properties, element, ctx, shape)
        shape[EDITOR_SHAPE_PROPERTIES] = properties

        outgoing: List[JsonNode] = []
        if isinstance(element, FlowNode):
            outgoing.extend(create_resource_node(flow.id) for flow in element.outgoing_flows)
            outgoing.extend(
                create_resource_node(message_flow.id)
                for message_flow in ctx.model.message_flows.values()
                if message_flow.source_ref == element.id
            )
            main_process = ctx.main_process
            if main_process is not None and main_process is not ctx.container:
                outgoing.extend(
                    create_resource_node(artifact.id)
                    for artifact in main_process.artifacts
                    if isinstance(artifact, Association) and artifact.source_ref == element.id
                )

        if isinstance(element, Activity):
            outgoing.extend(create_resource_node(boundary.id) for boundary in element.boundary_events)

            properties[PROPERTY_ASYNCHRONOUS] = element.asynchronous
            properties[PROPERTY_EXCLUSIVE] = not element.not_exclusive
            properties[PROPERTY_FOR_COMPENSATION] = element.for_compensation
            convert_multi_instance_to_json(element, properties)

            if isinstance(element, UserTask):
                convert_listeners_to_json(element.task_listeners, False, properties)

            for association in element.data_input_associations:
                if ctx.model.get_flow_element(association.source_ref) is not None:
                    self._create_data_association(association, True, element, ctx)
            for association in element.data_output_associations:
                if ctx.model.get_flow_element(association.target_ref) is not None:
                    self._create_data_association(association, False, element, ctx)
                    outgoing.append(create_resource_node(association.id))
        elif isinstance(element, Gateway):
            properties[PROPERTY_ASYNCHRONOUS] = element.asynchronous
            properties[PROPERTY_EXCLUSIVE] = not element.not_exclusive
            if len(element.outgoing_flows) > 1:
                properties[PROPERTY_SEQUENCEFLOW_ORDER] = {
                    VALUE_SEQUENCE_FLOW_ORDER: [flow.id for flow in element.outgoing_flows]
                }

        if isinstance(element, FlowElement):
            convert_listeners_to_json(element.execution_listeners, True, properties)

        if ctx.container is not None:
            for artifact in ctx.container.artifacts:
                if isinstance(artifact, Association) and artifact.source_ref and artifact.source_ref == element.id:
                    resource = create_resource_node(artifact.id)
                    if resource not in outgoing:
                        outgoing.append(resource)

        if isinstance(element, DataStoreReference):
            for process in ctx.model.processes:
                _collect_data_store_references(process, element.id, outgoing)

        shape[EDITOR_OUTGOING] = outgoing
        return shape

    def _create_data_association(
        self, association: DataAssociation, incoming: bool, activity: Activity, ctx: ConverterContext
    ) -> None:
        if incoming:
            source_ref, target_ref = association.source_ref, activity.id
        else:
            source_ref, target_ref = activity.id, association.target_ref

        source_info = ctx.model.get_graphic_info(source_ref)
        target_info = ctx.model.get_graphic_info(target_ref)
        if source_info is None or target_info is None:
            ctx.report.warning(association.id, f"Data association {association.id} has an endpoint without placement")
            return

        dockers = [create_position_node(source_info.width / 2.0, source_info.height / 2.0)]
        waypoints = ctx.model.get_flow_location_graphic_info(association.id)
        dockers.extend(create_position_node(point.x, point.y) for point in waypoints[1:-1])
        dockers.append(create_position_node(target_info.width / 2.0, target_info.height / 2.0))

        shape = create_child_shape(association.id, STENCIL_DATA_ASSOCIATION, 172, 212, 128, 212)
        shape[EDITOR_DOCKERS] = dockers
        shape[EDITOR_OUTGOING] = [create_resource_node(target_ref)]
        shape[EDITOR_EDGE_TARGET] = create_resource_node(target_ref)
        shape[EDITOR_SHAPE_PROPERTIES] = {PROPERTY_OVERRIDE_ID: association.id}
        ctx.shapes.append(shape)

    # ---------------------------
    # JSON -> domain
    # ---------------------------

    def to_domain(self, node: JsonNode, ctx: ConverterContext) -> BaseElement:
        """Build the element for ``node`` and attach it to ``ctx.parent``."""
        element = self.convert_json_to_element(node, ctx)
        element.id = get_element_id(node)

        if isinstance(element, FlowElement):
            element.name = get_property_value_as_string(PROPERTY_NAME, node)
            element.documentation = get_property_value_as_string(PROPERTY_DOCUMENTATION, node)
            convert_json_to_listeners(node, element)

            if isinstance(element, Activity):
                element.asynchronous = get_property_value_as_boolean(PROPERTY_ASYNCHRONOUS, node)
                element.not_exclusive = not get_property_value_as_boolean(PROPERTY_EXCLUSIVE, node)
                element.for_compensation = get_property_value_as_boolean(PROPERTY_FOR_COMPENSATION, node)
                element.loop_characteristics = convert_json_to_multi_instance(node)
            elif isinstance(element, Gateway):
                element.asynchronous = get_property_value_as_boolean(PROPERTY_ASYNCHRONOUS, node)
                element.not_exclusive = not get_property_value_as_boolean(PROPERTY_EXCLUSIVE, node)
                flow_order = validate_if_node_is_textual(get_property(PROPERTY_SEQUENCEFLOW_ORDER, node))
                if isinstance(flow_order, dict):
                    for flow_id in flow_order.get(VALUE_SEQUENCE_FLOW_ORDER) or []:
                        element.add_extension_element(
                            ExtensionElement(name=EDITOR_FLOW_ORDER_EXTENSION, element_text=as_text(flow_id))
                        )

            if isinstance(element, SequenceFlow):
                element.add_extension_element(
                    ExtensionElement(name=EDITOR_RESOURCEID_EXTENSION, element_text=as_text(node.get(EDITOR_SHAPE_ID)))
                )

        attach_to_parent(element, ctx.parent)
        return element


def attach_to_parent(element: BaseElement, parent: Any) -> None:
    """Add a flow element or artifact to a process, subprocess or lane's process."""
    if isinstance(parent, Lane):
        parent.flow_references.append(element.id)
        parent = parent.parent_process
    if not isinstance(parent, (Process, SubProcess)):
        return
    if isinstance(element, FlowElement):
        parent.add_flow_element(element)
    elif isinstance(element, Artifact):
        parent.add_artifact(element)


def _collect_data_store_references(container: FlowElementsContainer, store_id: str, outgoing: List[JsonNode]) -> None:
    for flow_element in container.flow_elements:
        if isinstance(flow_element, Activity):
            for association in flow_element.data_input_associations:
                if association.source_ref == store_id:
                    outgoing.append(create_resource_node(association.id))
        if isinstance(flow_element, FlowElementsContainer):
            _collect_data_store_references(flow_element, store_id, outgoing)
