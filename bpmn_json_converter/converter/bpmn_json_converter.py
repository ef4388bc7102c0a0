"""
Graph Assembler

Converts a whole process graph to the editor JSON document and back.

Domain to JSON walks every process (or every pool and lane when the graph is
drawn with participants), asks the registry for the converter of each
element, and collects the shapes under a ``canvas`` root node sized to fit
the diagram.

JSON to domain runs in ordered passes: shape placement, edge discovery, edge
geometry, pools and lanes, model-level definitions, element conversion,
sequence flow re-parenting, and a final linking pass that wires incoming and
outgoing flows, default flows, boundary hosts and gateway flow order.

Per-element failures follow the configured error handling strategy; nothing
else escapes :meth:`BpmnJsonConverter.to_json` or
:meth:`BpmnJsonConverter.to_domain` unless the strategy is strict.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from bpmn_json_converter.config import ConverterConfig, ErrorHandlingStrategy
from bpmn_json_converter.converter.constants import (
    CANVAS_RESOURCE_ID,
    CANVAS_STENCIL_ID,
    EDITOR_BOUNDS,
    EDITOR_CHILD_SHAPES,
    EDITOR_DOCKERS,
    EDITOR_EDGE_TARGET,
    EDITOR_FLOW_ORDER_EXTENSION,
    EDITOR_OUTGOING,
    EDITOR_RESOURCEID_EXTENSION,
    EDITOR_SHAPE_ID,
    EDITOR_SHAPE_PROPERTIES,
    EDITOR_STENCIL,
    EDITOR_STENCIL_ID,
    EDITOR_STENCILSET,
    FLOWABLE_NAMESPACE,
    FLOWABLE_NAMESPACE_PREFIX,
    PROPERTY_DATA_PROPERTIES,
    PROPERTY_DOCUMENTATION,
    PROPERTY_EVENT_LISTENERS,
    PROPERTY_EXECUTION_LISTENERS,
    PROPERTY_IS_EAGER_EXECUTION_FETCHING,
    PROPERTY_IS_EXECUTABLE,
    PROPERTY_MESSAGES,
    PROPERTY_NAME,
    PROPERTY_OVERRIDE_ID,
    PROPERTY_PROCESS_HISTORYLEVEL,
    PROPERTY_PROCESS_ID,
    PROPERTY_PROCESS_NAMESPACE,
    PROPERTY_PROCESS_POTENTIALSTARTERGROUP,
    PROPERTY_PROCESS_POTENTIALSTARTERUSER,
    PROPERTY_SEQUENCEFLOW_DEFAULT,
    STENCIL_ADHOC_SUB_PROCESS,
    STENCIL_ASSOCIATION,
    STENCIL_COLLAPSED_SUB_PROCESS,
    STENCIL_DATA_ASSOCIATION,
    STENCIL_EVENT_SUB_PROCESS,
    STENCIL_LANE,
    STENCIL_MESSAGE_FLOW,
    STENCIL_POOL,
    STENCIL_SEQUENCE_FLOW,
    STENCIL_SUB_PROCESS,
)
from bpmn_json_converter.converter.context import (
    ConverterContext,
    JsonNode,
    ModelReferenceResolver,
    StandaloneReferenceResolver,
)
from bpmn_json_converter.converter.definitions import (
    convert_data_properties_to_json,
    convert_escalation_definitions_to_json,
    convert_event_listeners_to_json,
    convert_json_to_data_properties,
    convert_json_to_escalation_definitions,
    convert_json_to_listeners,
    convert_json_to_messages,
    convert_json_to_process_messages,
    convert_json_to_signal_definitions,
    convert_listeners_to_json,
    convert_message_definitions_to_json,
    convert_messages_to_json,
    convert_signal_definitions_to_json,
    parse_event_listeners,
)
from bpmn_json_converter.converter.errors import ConversionReport, ConverterError
from bpmn_json_converter.converter.geometry import Point, classify_shape, compute_edge_graphics
from bpmn_json_converter.converter.properties import (
    create_bounds_node,
    create_child_shape,
    create_resource_node,
    get_child_shapes,
    get_element_id,
    get_outgoing_ids,
    get_property,
    get_property_value_as_boolean,
    get_property_value_as_list,
    get_property_value_as_string,
    get_stencil_id,
    read_bounds,
)
from bpmn_json_converter.converter.registry import StencilRegistry, get_default_registry
from bpmn_json_converter.core.observability import (
    ObservabilityConfig,
    ObservabilityManager,
    Timer,
    record_metric,
    span,
)
from bpmn_json_converter.models.bpmn_elements import (
    Activity,
    BaseElement,
    BoundaryEvent,
    BpmnModel,
    DiEdge,
    Event,
    ExclusiveGateway,
    ExtensionElement,
    FlowElementsContainer,
    FlowNode,
    Gateway,
    GraphicInfo,
    InclusiveGateway,
    Lane,
    Message,
    MessageEventDefinition,
    Pool,
    Process,
    SequenceFlow,
    Signal,
    SignalEventDefinition,
    SubProcess,
    ValuedDataObject,
)

logger = logging.getLogger(__name__)

CONNECTOR_STENCILS = frozenset(
    {STENCIL_SEQUENCE_FLOW, STENCIL_ASSOCIATION, STENCIL_MESSAGE_FLOW, STENCIL_DATA_ASSOCIATION}
)
DEFERRED_STENCILS = frozenset({STENCIL_SEQUENCE_FLOW, STENCIL_ASSOCIATION})
EDGE_STENCILS = frozenset({STENCIL_SEQUENCE_FLOW, STENCIL_ASSOCIATION, STENCIL_MESSAGE_FLOW})
NESTING_STENCILS = frozenset(
    {
        STENCIL_SUB_PROCESS,
        STENCIL_COLLAPSED_SUB_PROCESS,
        STENCIL_EVENT_SUB_PROCESS,
        STENCIL_ADHOC_SUB_PROCESS,
        STENCIL_POOL,
        STENCIL_LANE,
    }
)
STRUCTURE_STENCILS = frozenset({STENCIL_POOL, STENCIL_LANE})

HISTORY_LEVEL_EXTENSION = "historyLevel"


@dataclass
class ShapeIndex:
    """Lookup tables built by the placement and edge discovery passes."""

    shape_map: Dict[str, JsonNode] = field(default_factory=dict)
    source_ref_map: Dict[str, JsonNode] = field(default_factory=dict)
    edge_map: Dict[str, JsonNode] = field(default_factory=dict)
    source_and_target: Dict[str, Tuple[Optional[JsonNode], Optional[JsonNode]]] = field(default_factory=dict)


@dataclass
class FlowWithContainer:
    """A sequence flow with the container currently holding it."""

    flow: SequenceFlow
    container: FlowElementsContainer


class BpmnJsonConverter:
    """Converts between :class:`BpmnModel` and the editor JSON document.

    A converter instance holds configuration only and may be reused for any
    number of conversions. The report of the most recent conversion is kept
    in :attr:`last_report`.
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        registry: Optional[StencilRegistry] = None,
        resolver: Optional[ModelReferenceResolver] = None,
    ):
        self.config = config or ConverterConfig()
        self.registry = registry or get_default_registry()
        self.resolver = resolver or StandaloneReferenceResolver()
        self.last_report: Optional[ConversionReport] = None

        ObservabilityManager.initialize(ObservabilityConfig.from_converter_config(self.config, intercept_stdlib=False))

    @property
    def strict(self) -> bool:
        return self.config.error_handling == ErrorHandlingStrategy.STRICT

    # ===========================
    # Error handling
    # ===========================

    def _guard(
        self,
        ctx: ConverterContext,
        element_id: Optional[str],
        description: str,
        action: Callable[[], Any],
    ) -> Any:
        """Run one element conversion under the configured strategy.

        Returns:
            The action's result, or None when the element was dropped

        Raises:
            ConverterError: Under the strict strategy
        """
        try:
            result = action()
        except ConverterError as e:
            ctx.report.skipped += 1
            if self.strict:
                raise
            ctx.report.error(e.element_id or element_id, f"Error converting {description}: {e}", e)
            return None
        except Exception as e:
            ctx.report.skipped += 1
            if self.strict:
                raise ConverterError(f"Error converting {description}: {e}", element_id) from e
            ctx.report.error(element_id, f"Error converting {description}: {e}", e)
            return None

        ctx.report.converted += 1
        return result

    def _finish(self, report: ConversionReport, direction: str) -> None:
        self.last_report = report
        attributes = {"direction": direction}
        record_metric("elements_converted_total", report.converted, attributes)
        record_metric("elements_skipped_total", report.skipped, attributes)
        logger.info(f"Conversion {direction} finished: {report.summary()}")

    # ===========================
    # Domain -> JSON
    # ===========================

    def to_json(self, model: BpmnModel) -> JsonNode:
        """Convert a process graph to the editor JSON document.

        Args:
            model: Process graph with diagram placements

        Returns:
            Editor JSON document; an empty canvas if conversion failed

        Raises:
            ConverterError: Only under the strict error handling strategy
        """
        report = ConversionReport()
        with span("bpmn_json.to_json", {"processes": len(model.processes), "pools": len(model.pools)}):
            with Timer("bpmn_json_to_json"):
                try:
                    document = self._to_json(model, report)
                except Exception as e:
                    if self.strict:
                        self._finish(report, "to_json")
                        if isinstance(e, ConverterError):
                            raise
                        raise ConverterError(f"Conversion to JSON failed: {e}") from e
                    report.error(None, f"Conversion to JSON failed: {e}", e)
                    document = self._create_canvas(BpmnModel(), {})
        self._finish(report, "to_json")
        return document

    def _to_json(self, model: BpmnModel, report: ConversionReport) -> JsonNode:
        main_process = model.main_process
        properties = self._root_properties(model, main_process)
        document = self._create_canvas(model, properties)
        shapes: List[JsonNode] = document[EDITOR_CHILD_SHAPES]

        ctx = ConverterContext(
            model=model,
            processor=self,
            config=self.config,
            resolver=self.resolver,
            report=report,
            shapes=shapes,
        )

        placed_pools = [pool for pool in model.pools if model.get_graphic_info(pool.id) is not None]
        if placed_pools:
            for pool in placed_pools:
                self._pool_to_json(pool, ctx)
            for process in model.processes:
                if process.artifacts:
                    self._process_artifacts(process, ctx.derive(container=process))
        elif main_process is not None:
            self.process_flow_elements(main_process, ctx.derive(container=main_process))

        for message_flow in model.message_flows.values():
            self._element_to_json(message_flow, ctx)

        return document

    def _create_canvas(self, model: BpmnModel, properties: JsonNode) -> JsonNode:
        max_x = 0.0
        max_y = 0.0
        for graphic_info in model.location_map.values():
            max_x = max(max_x, graphic_info.x + graphic_info.width)
            max_y = max(max_y, graphic_info.y + graphic_info.height)

        width = max(max_x + self.config.canvas_margin, self.config.min_canvas_width)
        height = max(max_y + self.config.canvas_margin, self.config.min_canvas_height)

        return {
            EDITOR_BOUNDS: create_bounds_node(width, height, 0, 0),
            EDITOR_SHAPE_ID: CANVAS_RESOURCE_ID,
            EDITOR_STENCIL: {EDITOR_STENCIL_ID: CANVAS_STENCIL_ID},
            EDITOR_STENCILSET: {
                "namespace": self.config.stencilset_namespace,
                "url": self.config.stencilset_url,
            },
            EDITOR_SHAPE_PROPERTIES: properties,
            EDITOR_CHILD_SHAPES: [],
        }

    def _root_properties(self, model: BpmnModel, process: Optional[Process]) -> JsonNode:
        properties: JsonNode = {}
        if process is not None:
            properties[PROPERTY_PROCESS_ID] = process.id
            if process.name:
                properties[PROPERTY_NAME] = process.name
            if process.documentation:
                properties[PROPERTY_DOCUMENTATION] = process.documentation
            if not process.executable:
                properties[PROPERTY_IS_EXECUTABLE] = "false"

        if model.target_namespace:
            properties[PROPERTY_PROCESS_NAMESPACE] = model.target_namespace

        if process is None:
            return properties

        if process.candidate_starter_users:
            properties[PROPERTY_PROCESS_POTENTIALSTARTERUSER] = ",".join(process.candidate_starter_users)
        if process.candidate_starter_groups:
            properties[PROPERTY_PROCESS_POTENTIALSTARTERGROUP] = ",".join(process.candidate_starter_groups)

        history_level = process.get_extension_value(HISTORY_LEVEL_EXTENSION)
        if history_level:
            properties[PROPERTY_PROCESS_HISTORYLEVEL] = history_level

        properties[PROPERTY_IS_EAGER_EXECUTION_FETCHING] = process.enable_eager_execution_tree_fetching

        convert_messages_to_json(model.messages, properties)
        convert_listeners_to_json(process.execution_listeners, True, properties)
        convert_event_listeners_to_json(process.event_listeners, properties)
        convert_signal_definitions_to_json(model, properties)
        convert_message_definitions_to_json(model, properties)
        convert_escalation_definitions_to_json(model, properties)

        if process.data_objects:
            convert_data_properties_to_json(process.data_objects, properties)

        return properties

    def _pool_to_json(self, pool: Pool, ctx: ConverterContext) -> None:
        model = ctx.model
        pool_info = model.get_graphic_info(pool.id)
        pool_shape = create_child_shape(
            pool.id,
            STENCIL_POOL,
            pool_info.x + pool_info.width,
            pool_info.y + pool_info.height,
            pool_info.x,
            pool_info.y,
        )
        ctx.shapes.append(pool_shape)

        properties: JsonNode = {PROPERTY_OVERRIDE_ID: pool.id, PROPERTY_PROCESS_ID: pool.process_ref}
        if not pool.executable:
            properties[PROPERTY_IS_EXECUTABLE] = "false"
        if pool.name:
            properties[PROPERTY_NAME] = pool.name
        pool_shape[EDITOR_SHAPE_PROPERTIES] = properties
        pool_shape[EDITOR_OUTGOING] = [
            create_resource_node(message_flow.id)
            for message_flow in model.message_flows.values()
            if message_flow.source_ref == pool.id
        ]

        process = model.get_process(pool.id)
        if process is None:
            ctx.report.warning(pool.id, f"Pool {pool.id} references unknown process {pool.process_ref}")
            return

        pool_shapes: List[JsonNode] = pool_shape[EDITOR_CHILD_SHAPES]
        lane_shapes: Dict[str, List[JsonNode]] = {}
        lane_contexts: Dict[str, ConverterContext] = {}
        for lane in process.lanes:
            lane_info = model.get_graphic_info(lane.id)
            if lane_info is None:
                ctx.report.warning(lane.id, f"Lane {lane.id} has no diagram placement")
                continue
            lane_shape = create_child_shape(
                lane.id,
                STENCIL_LANE,
                lane_info.x - pool_info.x + lane_info.width,
                lane_info.y - pool_info.y + lane_info.height,
                lane_info.x - pool_info.x,
                lane_info.y - pool_info.y,
            )
            lane_properties: JsonNode = {PROPERTY_OVERRIDE_ID: lane.id}
            if lane.name:
                lane_properties[PROPERTY_NAME] = lane.name
            lane_shape[EDITOR_SHAPE_PROPERTIES] = lane_properties
            lane_shape[EDITOR_OUTGOING] = []
            pool_shapes.append(lane_shape)

            lane_shapes[lane.id] = lane_shape[EDITOR_CHILD_SHAPES]
            lane_contexts[lane.id] = ctx.derive(
                container=process,
                shapes=lane_shape[EDITOR_CHILD_SHAPES],
                offset_x=lane_info.x,
                offset_y=lane_info.y,
            )

        pool_context = ctx.derive(container=process, shapes=pool_shapes, offset_x=pool_info.x, offset_y=pool_info.y)
        for element in process.flow_elements:
            if isinstance(element, ValuedDataObject):
                continue
            lane = self._find_lane(process, element)
            if lane is not None and lane.id in lane_contexts:
                element_ctx = lane_contexts[lane.id]
            elif process.lanes:
                ctx.report.warning(element.id, f"Element {element.id} is not part of any lane, skipping it")
                continue
            else:
                element_ctx = pool_context
            self._element_to_json(element, element_ctx)

    @staticmethod
    def _find_lane(process: Process, element: BaseElement) -> Optional[Lane]:
        for lane in process.lanes:
            if element.id in lane.flow_references:
                return lane
        if isinstance(element, SequenceFlow):
            for lane in process.lanes:
                if element.source_ref in lane.flow_references:
                    return lane
        return None

    def _element_to_json(self, element: BaseElement, ctx: ConverterContext) -> Optional[JsonNode]:
        mark = len(ctx.shapes)

        def convert() -> JsonNode:
            try:
                return self.registry.converter_for_element(element).to_json(element, ctx)
            except Exception:
                del ctx.shapes[mark:]
                raise

        return self._guard(ctx, element.id, f"{type(element).__name__} {element.id}", convert)

    def process_flow_elements(self, container: FlowElementsContainer, ctx: ConverterContext) -> None:
        """Convert the flow elements and artifacts of ``container`` into ``ctx.shapes``."""
        for element in container.flow_elements:
            if isinstance(element, ValuedDataObject):
                continue
            self._element_to_json(element, ctx)
        self._process_artifacts(container, ctx)

    def _process_artifacts(self, container: FlowElementsContainer, ctx: ConverterContext) -> None:
        for artifact in container.artifacts:
            self._element_to_json(artifact, ctx)

    # ===========================
    # JSON -> domain
    # ===========================

    def to_domain(self, document: JsonNode) -> BpmnModel:
        """Convert an editor JSON document to a process graph.

        Args:
            document: Editor JSON document with a ``canvas`` root

        Returns:
            Process graph with diagram placements; an empty graph if the
            document could not be read at all

        Raises:
            ConverterError: Only under the strict error handling strategy
        """
        report = ConversionReport()
        shape_count = len(get_child_shapes(document)) if isinstance(document, dict) else 0
        with span("bpmn_json.to_domain", {"root_shapes": shape_count}):
            with Timer("bpmn_json_to_domain"):
                try:
                    model = self._to_domain(document, report)
                except Exception as e:
                    if self.strict:
                        self._finish(report, "to_domain")
                        if isinstance(e, ConverterError):
                            raise
                        raise ConverterError(f"Conversion to domain failed: {e}") from e
                    report.error(None, f"Conversion to domain failed: {e}", e)
                    model = BpmnModel(target_namespace=self.config.default_target_namespace)
        self._finish(report, "to_domain")
        return model

    def _to_domain(self, document: JsonNode, report: ConversionReport) -> BpmnModel:
        if not isinstance(document, dict):
            raise ConverterError(f"Editor document must be an object, got {type(document).__name__}")

        model = BpmnModel(target_namespace=self.config.default_target_namespace)
        root_shapes = get_child_shapes(document)
        index = ShapeIndex()

        self._read_shape_bounds(root_shapes, model, index, 0.0, 0.0)
        self._discover_edges(root_shapes, index)
        self._read_edge_bounds(model, index, report)

        if not root_shapes:
            return model

        ctx = ConverterContext(
            model=model,
            processor=self,
            config=self.config,
            resolver=self.resolver,
            report=report,
            shape_map=index.shape_map,
            source_ref_map=index.source_ref_map,
            root_shapes=root_shapes,
        )

        pool_shapes = [shape for shape in root_shapes if get_stencil_id(shape) == STENCIL_POOL]
        lane_by_element = self._read_pools_and_lanes(pool_shapes, document, ctx) if pool_shapes else {}

        convert_json_to_signal_definitions(document, model)
        convert_json_to_escalation_definitions(document, model)
        convert_json_to_messages(document, model)
        for message in convert_json_to_process_messages(get_property(PROPERTY_MESSAGES, document)):
            model.add_message(message)

        namespace = get_property_value_as_string(PROPERTY_PROCESS_NAMESPACE, document)
        if namespace:
            model.target_namespace = namespace

        if pool_shapes:
            self._convert_pool_elements(pool_shapes, root_shapes, lane_by_element, index, ctx)
        else:
            process = Process()
            self._read_process_properties(document, process, model)
            model.add_process(process)
            self.process_json_elements(root_shapes, ctx.derive(container=process, parent=process))

        for process in model.processes:
            self._reparent_sequence_flows(process)

        for process in model.processes:
            self._link_elements(process, index, ctx)

        return model

    # ---------------------------
    # Passes 1-3: diagram interchange
    # ---------------------------

    def _read_shape_bounds(
        self,
        shapes: Sequence[JsonNode],
        model: BpmnModel,
        index: ShapeIndex,
        parent_x: float,
        parent_y: float,
    ) -> None:
        """Absolute placement of every non-connector shape, plus the shape and source lookups."""
        for shape in shapes:
            stencil_id = get_stencil_id(shape)
            if stencil_id in CONNECTOR_STENCILS:
                continue

            element_id = get_element_id(shape)
            resource_id = shape.get(EDITOR_SHAPE_ID)
            if resource_id:
                index.shape_map[resource_id] = shape
            for outgoing_id in get_outgoing_ids(shape):
                index.source_ref_map[outgoing_id] = shape

            bounds = read_bounds(shape)
            if bounds is None:
                logger.debug(f"Shape {element_id} has no bounds")
                continue
            upper_left_x, upper_left_y, lower_right_x, lower_right_y = bounds
            graphic_info = GraphicInfo(
                x=upper_left_x + parent_x,
                y=upper_left_y + parent_y,
                width=lower_right_x - upper_left_x,
                height=lower_right_y - upper_left_y,
            )
            if stencil_id == STENCIL_COLLAPSED_SUB_PROCESS:
                graphic_info.expanded = False
            if element_id:
                model.add_graphic_info(element_id, graphic_info)

            child_shapes = get_child_shapes(shape)
            if child_shapes:
                if stencil_id == STENCIL_COLLAPSED_SUB_PROCESS:
                    self._read_shape_bounds(child_shapes, model, index, 0.0, 0.0)
                else:
                    self._read_shape_bounds(child_shapes, model, index, graphic_info.x, graphic_info.y)

    def _discover_edges(self, shapes: Sequence[JsonNode], index: ShapeIndex) -> None:
        for shape in shapes:
            stencil_id = get_stencil_id(shape)
            if stencil_id in NESTING_STENCILS:
                self._discover_edges(get_child_shapes(shape), index)
            elif stencil_id in EDGE_STENCILS:
                element_id = get_element_id(shape)
                if not element_id:
                    continue
                index.edge_map[element_id] = shape
                target = shape.get(EDITOR_EDGE_TARGET)
                target_id = target.get(EDITOR_SHAPE_ID) if isinstance(target, dict) else None
                index.source_and_target[element_id] = (
                    index.source_ref_map.get(shape.get(EDITOR_SHAPE_ID)),
                    index.shape_map.get(target_id) if target_id else None,
                )

    def _read_edge_bounds(self, model: BpmnModel, index: ShapeIndex, report: ConversionReport) -> None:
        for edge_id, edge_node in index.edge_map.items():
            source, target = index.source_and_target.get(edge_id, (None, None))
            if source is None or target is None:
                report.info(edge_id, f"Skipping edge {edge_id} because source or target are null")
                continue

            source_info = model.get_graphic_info(get_element_id(source))
            target_info = model.get_graphic_info(get_element_id(target))
            if source_info is None or target_info is None:
                report.info(edge_id, f"Skipping edge {edge_id} because an endpoint has no placement")
                continue

            dockers = []
            for docker in edge_node.get(EDITOR_DOCKERS) or []:
                if isinstance(docker, dict):
                    dockers.append(Point(float(docker.get("x", 0)), float(docker.get("y", 0))))
            try:
                graphics = compute_edge_graphics(
                    dockers,
                    source_info,
                    target_info,
                    classify_shape(get_stencil_id(source)),
                    classify_shape(get_stencil_id(target)),
                )
            except ValueError as e:
                report.warning(edge_id, f"Skipping geometry of edge {edge_id}: {e}")
                continue

            waypoints = [GraphicInfo(x=point.x, y=point.y) for point in graphics.waypoints]
            model.add_flow_graphic_info_list(edge_id, waypoints)
            model.edge_info_map[edge_id] = DiEdge(
                waypoints=list(waypoints),
                source_docker=GraphicInfo(x=graphics.source_docker.x, y=graphics.source_docker.y),
                target_docker=GraphicInfo(x=graphics.target_docker.x, y=graphics.target_docker.y),
            )

    # ---------------------------
    # Pass 4: pools and lanes
    # ---------------------------

    def _read_pools_and_lanes(
        self, pool_shapes: Sequence[JsonNode], document: JsonNode, ctx: ConverterContext
    ) -> Dict[str, Lane]:
        """Create pools, their processes and lanes.

        Returns:
            Lane of every element drawn directly inside a lane, by element id
        """
        model = ctx.model
        lane_by_element: Dict[str, Lane] = {}
        for position, pool_shape in enumerate(pool_shapes):
            pool = Pool(
                id=get_element_id(pool_shape),
                name=get_property_value_as_string(PROPERTY_NAME, pool_shape),
                process_ref=get_property_value_as_string(PROPERTY_PROCESS_ID, pool_shape),
                executable=get_property_value_as_boolean(PROPERTY_IS_EXECUTABLE, pool_shape, True),
            )
            model.pools.append(pool)

            process = Process(id=pool.process_ref, name=pool.name, executable=pool.executable)
            if position == 0:
                self._read_process_properties(document, process, model, read_identity=False)
                # Root identity describes the first pool's process
                if get_property_value_as_string(PROPERTY_PROCESS_ID, document) == process.id:
                    process.name = get_property_value_as_string(PROPERTY_NAME, document) or process.name
            model.add_process(process)

            for lane_shape in get_child_shapes(pool_shape):
                if get_stencil_id(lane_shape) != STENCIL_LANE:
                    continue
                lane = Lane(
                    id=get_element_id(lane_shape),
                    name=get_property_value_as_string(PROPERTY_NAME, lane_shape),
                    parent_process=process,
                )
                process.lanes.append(lane)
                for child in get_child_shapes(lane_shape):
                    child_id = get_element_id(child)
                    if child_id:
                        lane_by_element[child_id] = lane
        return lane_by_element

    def _convert_pool_elements(
        self,
        pool_shapes: Sequence[JsonNode],
        root_shapes: Sequence[JsonNode],
        lane_by_element: Dict[str, Lane],
        index: ShapeIndex,
        ctx: ConverterContext,
    ) -> None:
        model = ctx.model
        for pool_shape in pool_shapes:
            process = model.get_process(get_element_id(pool_shape))
            if process is None:
                continue
            lanes = {lane.id: lane for lane in process.lanes}
            loose_shapes = []
            for child in get_child_shapes(pool_shape):
                if get_stencil_id(child) == STENCIL_LANE:
                    self.process_json_elements(
                        get_child_shapes(child),
                        ctx.derive(container=process, parent=lanes.get(get_element_id(child), process)),
                    )
                else:
                    loose_shapes.append(child)
            if loose_shapes:
                self.process_json_elements(loose_shapes, ctx.derive(container=process, parent=process))

        # Connectors the editor keeps at the root belong to the source's lane
        default_process = model.processes[0] if model.processes else None
        for shape in root_shapes:
            stencil_id = get_stencil_id(shape)
            if stencil_id == STENCIL_MESSAGE_FLOW:
                self._shape_to_domain(shape, ctx.derive(container=None, parent=None))
            elif stencil_id in DEFERRED_STENCILS:
                source = index.source_ref_map.get(shape.get(EDITOR_SHAPE_ID))
                lane = lane_by_element.get(get_element_id(source)) if source is not None else None
                parent: Any = lane if lane is not None else default_process
                container = lane.parent_process if lane is not None else default_process
                self._shape_to_domain(shape, ctx.derive(container=container, parent=parent))

    def _read_process_properties(
        self, document: JsonNode, process: Process, model: BpmnModel, read_identity: bool = True
    ) -> None:
        if read_identity:
            process.id = get_property_value_as_string(PROPERTY_PROCESS_ID, document)
            process.name = get_property_value_as_string(PROPERTY_NAME, document)
            if get_property_value_as_string(PROPERTY_IS_EXECUTABLE, document):
                process.executable = get_property_value_as_boolean(PROPERTY_IS_EXECUTABLE, document, True)

        process.documentation = get_property_value_as_string(PROPERTY_DOCUMENTATION, document)

        history_level = get_property_value_as_string(PROPERTY_PROCESS_HISTORYLEVEL, document)
        if history_level:
            process.add_extension_element(
                ExtensionElement(
                    name=HISTORY_LEVEL_EXTENSION,
                    namespace=FLOWABLE_NAMESPACE,
                    namespace_prefix=FLOWABLE_NAMESPACE_PREFIX,
                    element_text=history_level,
                )
            )

        if get_property(PROPERTY_EXECUTION_LISTENERS, document) is not None:
            convert_json_to_listeners(document, process)
        event_listeners = get_property(PROPERTY_EVENT_LISTENERS, document)
        if event_listeners is not None:
            parse_event_listeners(event_listeners, process)

        data_properties = get_property(PROPERTY_DATA_PROPERTIES, document)
        if data_properties is not None:
            process.data_objects.extend(convert_json_to_data_properties(data_properties))

        process.candidate_starter_users.extend(
            get_property_value_as_list(PROPERTY_PROCESS_POTENTIALSTARTERUSER, document)
        )
        process.candidate_starter_groups.extend(
            get_property_value_as_list(PROPERTY_PROCESS_POTENTIALSTARTERGROUP, document)
        )
        process.enable_eager_execution_tree_fetching = get_property_value_as_boolean(
            PROPERTY_IS_EAGER_EXECUTION_FETCHING, document
        )

    # ---------------------------
    # Pass 6: element conversion
    # ---------------------------

    def process_json_elements(self, shapes: Sequence[JsonNode], ctx: ConverterContext) -> None:
        """Convert ``shapes`` into ``ctx.parent``; connectors after every node they may point at."""
        deferred = []
        for shape in shapes:
            stencil_id = get_stencil_id(shape)
            if stencil_id in STRUCTURE_STENCILS:
                continue
            if stencil_id == STENCIL_DATA_ASSOCIATION:
                ctx.report.info(get_element_id(shape), f"Data association {get_element_id(shape)} is not read back")
                continue
            if stencil_id in DEFERRED_STENCILS:
                deferred.append(shape)
                continue
            self._shape_to_domain(shape, ctx)

        for shape in deferred:
            self._shape_to_domain(shape, ctx)

    def _shape_to_domain(self, shape: JsonNode, ctx: ConverterContext) -> Optional[BaseElement]:
        stencil_id = get_stencil_id(shape)
        element_id = get_element_id(shape)

        def convert() -> BaseElement:
            converter = self.registry.converter_for_stencil(stencil_id)
            return converter.to_domain(shape, ctx)

        return self._guard(ctx, element_id, f"{stencil_id} {element_id}", convert)

    # ---------------------------
    # Pass 7: sequence flow re-parenting
    # ---------------------------

    @staticmethod
    def _collect_sequence_flows(container: FlowElementsContainer, flows: List[FlowWithContainer]) -> None:
        for element in container.flow_elements:
            if isinstance(element, SequenceFlow):
                flows.append(FlowWithContainer(element, container))
            elif isinstance(element, SubProcess):
                BpmnJsonConverter._collect_sequence_flows(element, flows)

    @staticmethod
    def _collect_owners(container: FlowElementsContainer, owners: Dict[str, FlowElementsContainer]) -> None:
        for element in container.flow_elements:
            if element.id:
                owners[element.id] = container
            if isinstance(element, SubProcess):
                BpmnJsonConverter._collect_owners(element, owners)

    def _reparent_sequence_flows(self, process: Process) -> None:
        """Move every sequence flow into the subprocess that directly holds its source."""
        owners: Dict[str, FlowElementsContainer] = {}
        self._collect_owners(process, owners)
        flows: List[FlowWithContainer] = []
        self._collect_sequence_flows(process, flows)

        for entry in flows:
            owner = owners.get(entry.flow.source_ref)
            if owner is None or owner is entry.container or not isinstance(owner, SubProcess):
                continue
            entry.container.remove_flow_element(entry.flow.id)
            if owner.get_flow_element(entry.flow.id, recursive=False) is None:
                owner.add_flow_element(entry.flow)
            logger.debug(f"Moved sequence flow {entry.flow.id} into subprocess {owner.id}")

    # ---------------------------
    # Pass 8: linking
    # ---------------------------

    def _link_elements(self, process: Process, index: ShapeIndex, ctx: ConverterContext) -> None:
        all_flows: Dict[str, FlowWithContainer] = {}
        ordered_gateways: List[Gateway] = []
        self._link_container(process, process, index, all_flows, ordered_gateways, ctx)

        for gateway in ordered_gateways:
            self._apply_flow_order(gateway, process, all_flows)

    def _link_container(
        self,
        container: FlowElementsContainer,
        process: Process,
        index: ShapeIndex,
        all_flows: Dict[str, FlowWithContainer],
        ordered_gateways: List[Gateway],
        ctx: ConverterContext,
    ) -> None:
        model = ctx.model
        for element in list(container.flow_elements):
            if isinstance(element, Event) and element.event_definitions:
                self._add_definition_stub(element, model)

            if isinstance(element, BoundaryEvent):
                self._attach_boundary_event(element, process, ctx)
            elif isinstance(element, Gateway):
                if element.extension_elements.get(EDITOR_FLOW_ORDER_EXTENSION):
                    ordered_gateways.append(element)
            elif isinstance(element, SubProcess):
                self._link_container(element, process, index, all_flows, ordered_gateways, ctx)
            elif isinstance(element, SequenceFlow):
                self._link_sequence_flow(element, container, process, index, all_flows)

    @staticmethod
    def _add_definition_stub(event: Event, model: BpmnModel) -> None:
        definition = event.event_definitions[0]
        if isinstance(definition, SignalEventDefinition) and definition.signal_ref:
            if model.get_signal(definition.signal_ref) is None:
                model.add_signal(Signal(id=definition.signal_ref, name=definition.signal_ref))
        elif isinstance(definition, MessageEventDefinition) and definition.message_ref:
            if model.get_message(definition.message_ref) is None:
                model.add_message(Message(id=definition.message_ref, name=definition.message_ref))

    @staticmethod
    def _attach_boundary_event(event: BoundaryEvent, process: Process, ctx: ConverterContext) -> None:
        host = process.get_flow_element(event.attached_to_ref_id)
        if not isinstance(host, Activity):
            ctx.report.warning(event.id, f"Boundary event {event.id} is not attached to any activity")
            return
        event.attached_to_ref = host
        if event not in host.boundary_events:
            host.boundary_events.append(event)

    @staticmethod
    def _link_sequence_flow(
        flow: SequenceFlow,
        container: FlowElementsContainer,
        process: Process,
        index: ShapeIndex,
        all_flows: Dict[str, FlowWithContainer],
    ) -> None:
        source = process.get_flow_element(flow.source_ref)
        if isinstance(source, FlowNode):
            if flow not in source.outgoing_flows:
                source.outgoing_flows.append(flow)
            edge_node = index.edge_map.get(flow.id)
            if (
                edge_node is not None
                and isinstance(source, (ExclusiveGateway, InclusiveGateway, Activity))
                and get_property_value_as_boolean(PROPERTY_SEQUENCEFLOW_DEFAULT, edge_node)
            ):
                source.default_flow = flow.id

        target = process.get_flow_element(flow.target_ref)
        if isinstance(target, FlowNode) and flow not in target.incoming_flows:
            target.incoming_flows.append(flow)

        entry = FlowWithContainer(flow, container)
        resource_id = flow.get_extension_value(EDITOR_RESOURCEID_EXTENSION)
        if resource_id:
            all_flows[resource_id] = entry
        if flow.id:
            all_flows[flow.id] = entry
        flow.extension_elements.pop(EDITOR_RESOURCEID_EXTENSION, None)

    @staticmethod
    def _apply_flow_order(gateway: Gateway, process: Process, all_flows: Dict[str, FlowWithContainer]) -> None:
        """Reorder the gateway's outgoing flows, and their container, by the editor's flow order."""
        ordered: List[SequenceFlow] = []
        for order in gateway.extension_elements.pop(EDITOR_FLOW_ORDER_EXTENSION, []):
            entry = all_flows.get(order.element_text or "")
            if entry is None or entry.flow in ordered:
                continue
            entry.container.remove_flow_element(entry.flow.id)
            entry.container.add_flow_element(entry.flow)
            ordered.append(entry.flow)

        gateway.outgoing_flows = ordered + [flow for flow in gateway.outgoing_flows if flow not in ordered]
