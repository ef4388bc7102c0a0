"""
Tests for the graph assembler.

Tests:
- Canvas root node, stencil set and bounds
- Sequence flow endpoints surviving a round trip at every nesting depth
- Coordinate accumulation through subprocesses, pools and lanes
- Collapsed subprocesses keeping absolute child coordinates
- Boundary event attachment with and without a host
- Document idempotence
- Gateway flow order extensions
- Error handling strategies, diagnostics and metrics
"""

import pytest

from bpmn_json_converter.converter.errors import (
    ConverterError,
    Severity,
    UnknownStencilError,
    UnresolvedReferenceError,
)
from bpmn_json_converter.converter.properties import create_child_shape, create_resource_node
from bpmn_json_converter.core.observability import ObservabilityManager
from bpmn_json_converter.models.bpmn_elements import (
    BoundaryEvent,
    ExclusiveGateway,
    FlowElement,
    GraphicInfo,
    SequenceFlow,
    UserTask,
)
from bpmn_json_converter.models.serialization import dump_model


class CustomElement(FlowElement):
    """Flow element type without a registered converter."""


# ===========================
# Helpers
# ===========================


def flow_endpoints(model):
    """Helper mapping every sequence flow id to its (source, target)."""
    return {
        flow.id: (flow.source_ref, flow.target_ref)
        for process in model.processes
        for flow in process.find_flow_elements_of_type(SequenceFlow)
    }


def upper_left(shape):
    bounds = shape["bounds"]["upperLeft"]
    return bounds["x"], bounds["y"]


def position(model, element_id):
    info = model.get_graphic_info(element_id)
    return info.x, info.y


def create_document(*shapes, **properties):
    """Helper to create an editor document around hand-built shapes."""
    return {
        "resourceId": "canvas",
        "stencil": {"id": "BPMNDiagram"},
        "properties": properties,
        "childShapes": list(shapes),
    }


def create_node(resource_id, stencil_id, x, y, width, height, outgoing=(), **properties):
    shape = create_child_shape(resource_id, stencil_id, x + width, y + height, x, y)
    shape["properties"] = properties
    shape["outgoing"] = [create_resource_node(target) for target in outgoing]
    return shape


def create_flow(resource_id, target_id, **properties):
    shape = create_child_shape(resource_id, "SequenceFlow", 172, 212, 128, 212)
    shape["properties"] = properties
    shape["dockers"] = [{"x": 20, "y": 20}, {"x": 50, "y": 40}]
    shape["outgoing"] = [create_resource_node(target_id)]
    shape["target"] = create_resource_node(target_id)
    return shape


# ===========================
# Canvas
# ===========================


class TestCanvas:
    """Root node of the editor document."""

    def test_root_node(self, converter, simple_model):
        document = converter.to_json(simple_model)

        assert document["resourceId"] == "canvas"
        assert document["stencil"] == {"id": "BPMNDiagram"}
        assert document["stencilset"]["namespace"] == "http://b3mn.org/stencilset/bpmn2.0#"
        assert document["properties"]["process_id"] == "orderProcess"
        assert document["properties"]["name"] == "Order process"
        assert document["properties"]["process_namespace"] == "http://www.flowable.org/processdef"
        assert [shape["resourceId"] for shape in document["childShapes"]] == [
            "start",
            "review",
            "end",
            "flow1",
            "flow2",
        ]

    def test_minimum_canvas_size(self, converter, simple_model):
        document = converter.to_json(simple_model)

        assert document["bounds"]["upperLeft"] == {"x": 0, "y": 0}
        assert document["bounds"]["lowerRight"] == {"x": 1485, "y": 700}

    def test_canvas_grows_with_diagram(self, converter, builder):
        builder.place(UserTask(id="far"), 2000, 900, 100, 80)

        document = converter.to_json(builder.model)

        assert document["bounds"]["lowerRight"] == {"x": 2150, "y": 1030}

    def test_process_identity_read_back(self, converter, simple_model):
        model = converter.to_domain(converter.to_json(simple_model))

        process = model.processes[0]
        assert (process.id, process.name) == ("orderProcess", "Order process")
        assert model.target_namespace == "http://www.flowable.org/processdef"


# ===========================
# Endpoints and linking
# ===========================


class TestEndpointRoundTrip:
    """Flow endpoints at every nesting depth."""

    def test_top_level(self, converter, simple_model):
        model = converter.to_domain(converter.to_json(simple_model))

        assert flow_endpoints(model) == flow_endpoints(simple_model)
        review = model.get_flow_element("review")
        assert [flow.id for flow in review.incoming_flows] == ["flow1"]
        assert [flow.id for flow in review.outgoing_flows] == ["flow2"]

    def test_inside_subprocess(self, converter, nested_model):
        model = converter.to_domain(converter.to_json(nested_model))

        assert flow_endpoints(model) == flow_endpoints(nested_model)
        sub_process = model.get_flow_element("sub")
        assert sub_process.get_flow_element("innerFlow", recursive=False) is not None
        assert model.processes[0].get_flow_element("innerFlow", recursive=False) is None

    def test_subprocess_inside_lane(self, converter, lane_model):
        original = lane_model

        model = converter.to_domain(converter.to_json(original))

        assert flow_endpoints(model) == flow_endpoints(original)
        assert [(pool.id, pool.process_ref) for pool in model.pools] == [("customerPool", "orderProcess")]
        process = model.get_process("customerPool")
        lane = process.lanes[0]
        assert lane.id == "salesLane"
        assert {"start", "sub", "end", "flow1", "flow2"} <= set(lane.flow_references)
        assert model.get_flow_element("sub").get_flow_element("innerFlow", recursive=False) is not None

    def test_default_flow(self, converter, builder):
        gateway = builder.place(ExclusiveGateway(id="decide", default_flow="otherwise"), 100, 100, 40, 40)
        ship = builder.place(UserTask(id="ship"), 200, 50, 100, 80)
        hold = builder.place(UserTask(id="hold"), 200, 200, 100, 80)
        builder.connect("approved", gateway, ship).condition_expression = "${approved}"
        builder.connect("otherwise", gateway, hold)

        model = converter.to_domain(converter.to_json(builder.model))

        read_back = model.get_flow_element("decide")
        assert read_back.default_flow == "otherwise"
        assert model.get_flow_element("approved").condition_expression == "${approved}"


# ===========================
# Coordinates
# ===========================


class TestCoordinateAccumulation:
    """Relative JSON coordinates against absolute domain coordinates."""

    def test_subprocess_children_are_relative(self, converter, nested_model, shape_finder):
        document = converter.to_json(nested_model)

        assert upper_left(shape_finder(document["childShapes"], "sub")) == (200, 50)
        assert upper_left(shape_finder(document["childShapes"], "innerStart")) == (30, 100)
        assert upper_left(shape_finder(document["childShapes"], "pack")) == (120, 75)

        model = converter.to_domain(document)

        assert position(model, "innerStart") == (230, 150)
        assert position(model, "pack") == (320, 125)

    def test_pool_lane_and_subprocess_offsets_add_up(self, converter, lane_model, shape_finder):
        document = converter.to_json(lane_model)

        pool = document["childShapes"][0]
        lane = pool["childShapes"][0]
        assert pool["stencil"]["id"] == "Pool"
        assert upper_left(pool) == (20, 20)
        assert lane["stencil"]["id"] == "Lane"
        assert upper_left(lane) == (30, 0)
        assert upper_left(shape_finder(lane["childShapes"], "sub")) == (150, 60)
        assert upper_left(shape_finder(lane["childShapes"], "pack")) == (100, 75)

        model = converter.to_domain(document)

        assert position(model, "salesLane") == (50, 20)
        assert position(model, "sub") == (200, 80)
        assert position(model, "pack") == (300, 155)

    def test_collapsed_subprocess_children_stay_absolute(self, converter, nested_model, shape_finder):
        nested_model.get_graphic_info("sub").expanded = False

        document = converter.to_json(nested_model)

        sub_shape = shape_finder(document["childShapes"], "sub")
        assert sub_shape["stencil"]["id"] == "CollapsedSubProcess"
        assert upper_left(shape_finder(sub_shape["childShapes"], "innerStart")) == (230, 150)

        model = converter.to_domain(document)

        assert model.get_graphic_info("sub").expanded is False
        assert position(model, "innerStart") == (230, 150)
        assert position(model, "pack") == (320, 125)

    def test_edge_waypoints_are_trimmed_to_borders(self, converter, simple_model):
        model = converter.to_domain(converter.to_json(simple_model))

        waypoints = model.get_flow_location_graphic_info("flow1")
        assert len(waypoints) == 2
        # start event is an ellipse of radius 15 centred at (115, 135)
        assert waypoints[0].x == pytest.approx(130, abs=0.5)
        assert waypoints[-1].x == pytest.approx(200, abs=0.5)


# ===========================
# Boundary events
# ===========================


class TestBoundaryEvents:
    """Boundary host attachment."""

    def test_attached_to_host(self, converter, boundary_model, shape_finder):
        document = converter.to_json(boundary_model)

        review_shape = shape_finder(document["childShapes"], "review")
        boundary_shape = shape_finder(document["childShapes"], "timeout")
        assert {"resourceId": "timeout"} in review_shape["outgoing"]
        assert boundary_shape["stencil"]["id"] == "BoundaryTimerEvent"
        assert boundary_shape["dockers"] == [{"x": 100, "y": 80}]

        model = converter.to_domain(document)

        review = model.get_flow_element("review")
        boundary = model.get_flow_element("timeout")
        assert boundary.attached_to_ref is review
        assert boundary.attached_to_ref_id == "review"
        assert review.boundary_events == [boundary]
        assert boundary.event_definitions[0].time_duration == "PT1H"
        assert flow_endpoints(model)["timeoutFlow"] == ("timeout", "escalate")

    def test_without_host_is_kept_with_warning(self, converter):
        document = create_document(
            create_node("review", "UserTask", 200, 95, 100, 80),
            create_node("timeout", "BoundaryTimerEvent", 284, 159, 31, 31, timerdurationdefinition="PT1H"),
            process_id="orderProcess",
        )

        model = converter.to_domain(document)

        boundary = model.get_flow_element("timeout")
        assert isinstance(boundary, BoundaryEvent)
        assert boundary.attached_to_ref is None
        assert model.get_flow_element("review").boundary_events == []
        warnings = converter.last_report.by_severity(Severity.WARNING)
        assert [d.element_id for d in warnings] == ["timeout"]
        assert "not attached to any activity" in warnings[0].message

    def test_unplaced_host_drops_the_event(self, converter, boundary_model):
        del boundary_model.location_map["review"]

        document = converter.to_json(boundary_model)

        resource_ids = [shape["resourceId"] for shape in document["childShapes"]]
        assert "timeout" not in resource_ids
        assert "escalate" in resource_ids
        assert converter.last_report.has_errors


# ===========================
# Idempotence
# ===========================


class TestIdempotence:
    """Repeated conversion is stable."""

    def test_simple_model(self, converter, simple_model):
        first = converter.to_json(simple_model)
        second = converter.to_json(converter.to_domain(first))

        assert second == first

    @pytest.mark.parametrize("fixture_name", ["simple_model", "nested_model", "lane_model", "boundary_model"])
    def test_domain_round_trip_is_stable(self, converter, request, fixture_name):
        first = converter.to_domain(converter.to_json(request.getfixturevalue(fixture_name)))
        second = converter.to_domain(converter.to_json(first))

        assert dump_model(second) == dump_model(first)

    def test_pool_keeps_process_identity(self, converter, lane_model):
        model = converter.to_domain(converter.to_json(lane_model))

        process = model.processes[0]
        assert model.target_namespace == lane_model.target_namespace
        assert (process.id, process.name) == ("orderProcess", "Order process")
        assert model.pools[0].name == "Customer"


# ===========================
# Gateway flow order
# ===========================


class TestGatewayFlowOrder:
    """sequencefloworder applied after linking."""

    def create_routing_document(self):
        return create_document(
            create_node(
                "decide",
                "ExclusiveGateway",
                100,
                100,
                40,
                40,
                outgoing=("A", "B", "C"),
                sequencefloworder={"sequenceFlowOrder": ["C", "A", "B"]},
            ),
            create_flow("A", "taskA"),
            create_flow("B", "taskB"),
            create_flow("C", "taskC"),
            create_node("taskA", "UserTask", 200, 0, 100, 80),
            create_node("taskB", "UserTask", 200, 100, 100, 80),
            create_node("taskC", "UserTask", 200, 200, 100, 80),
            process_id="routing",
        )

    def test_outgoing_flows_follow_order(self, converter):
        model = converter.to_domain(self.create_routing_document())

        gateway = model.get_flow_element("decide")
        assert [flow.id for flow in gateway.outgoing_flows] == ["C", "A", "B"]
        assert "EDITOR_FLOW_ORDER" not in gateway.extension_elements

    def test_container_order_follows_flow_order(self, converter):
        model = converter.to_domain(self.create_routing_document())

        ids = [element.id for element in model.processes[0].flow_elements]
        assert ids == ["decide", "taskA", "taskB", "taskC", "C", "A", "B"]
        for flow_id in ("A", "B", "C"):
            assert "EDITOR_RESOURCEID" not in model.get_flow_element(flow_id).extension_elements

    def test_order_written_back(self, converter, shape_finder):
        model = converter.to_domain(self.create_routing_document())

        document = converter.to_json(model)

        gateway_shape = shape_finder(document["childShapes"], "decide")
        assert gateway_shape["properties"]["sequencefloworder"] == {"sequenceFlowOrder": ["C", "A", "B"]}
        assert [entry["resourceId"] for entry in gateway_shape["outgoing"]] == ["C", "A", "B"]


# ===========================
# Error handling
# ===========================


class TestErrorHandling:
    """Strategies and diagnostics."""

    def create_unknown_stencil_document(self):
        return create_document(
            create_node("review", "UserTask", 200, 95, 100, 80),
            create_node("widget", "FancyWidget", 400, 95, 100, 80),
            process_id="orderProcess",
        )

    def test_unknown_stencil_is_omitted(self, converter):
        model = converter.to_domain(self.create_unknown_stencil_document())

        assert [element.id for element in model.processes[0].flow_elements] == ["review"]
        report = converter.last_report
        errors = report.by_severity(Severity.ERROR)
        assert len(errors) == 1
        assert errors[0].element_id == "widget"
        assert (report.converted, report.skipped) == (1, 1)

    def test_unknown_domain_type_is_omitted(self, converter, simple_model):
        simple_model.processes[0].add_flow_element(CustomElement(id="custom"))
        simple_model.add_graphic_info("custom", GraphicInfo(x=500, y=100, width=50, height=50))

        document = converter.to_json(simple_model)

        assert "custom" not in [shape["resourceId"] for shape in document["childShapes"]]
        errors = converter.last_report.by_severity(Severity.ERROR)
        assert [d.element_id for d in errors] == ["custom"]

    def test_strict_raises_unknown_stencil(self, strict_converter):
        with pytest.raises(UnknownStencilError):
            strict_converter.to_domain(self.create_unknown_stencil_document())

    def test_strict_raises_unresolved_reference(self, strict_converter, boundary_model):
        del boundary_model.location_map["review"]

        with pytest.raises(UnresolvedReferenceError):
            strict_converter.to_json(boundary_model)

    def test_strict_rejects_non_object_document(self, strict_converter):
        with pytest.raises(ConverterError):
            strict_converter.to_domain(["not", "a", "document"])

    def test_lenient_non_object_document(self, converter):
        model = converter.to_domain(["not", "a", "document"])

        assert model.processes == []
        assert converter.last_report.has_errors

    def test_empty_document(self, converter):
        model = converter.to_domain({})

        assert model.processes == []
        assert not converter.last_report.has_errors

    def test_edge_without_source_is_skipped(self, converter):
        document = create_document(
            create_node("review", "UserTask", 200, 95, 100, 80),
            create_flow("orphan", "review"),
            process_id="orderProcess",
        )

        model = converter.to_domain(document)

        assert model.get_flow_element("orphan") is None
        assert "orphan" not in model.flow_location_map
        infos = [d.element_id for d in converter.last_report.by_severity(Severity.INFO)]
        assert "orphan" in infos


class TestMetrics:
    """Counters recorded per conversion."""

    def test_conversion_counters(self, converter, simple_model):
        converter.to_json(simple_model)

        values = ObservabilityManager.get_instance().collect_metrics()

        assert values["elements_converted_total"] == 5
        assert values["elements_skipped_total"] == 0
        assert "bpmn_json_to_json_duration" in values

    def test_report_summary(self, converter, simple_model):
        converter.to_json(simple_model)

        assert converter.last_report.summary() == "5 converted, 0 skipped, 0 warnings, 0 errors"
