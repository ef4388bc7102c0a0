"""Pytest configuration for bpmn-json-converter tests."""

from typing import Optional

import pytest

from bpmn_json_converter.config import ConverterConfig, ErrorHandlingStrategy
from bpmn_json_converter.converter.bpmn_json_converter import BpmnJsonConverter
from bpmn_json_converter.core.observability import ObservabilityManager
from bpmn_json_converter.models.bpmn_elements import (
    BoundaryEvent,
    BpmnModel,
    EndEvent,
    FlowElement,
    FlowElementsContainer,
    FlowNode,
    GraphicInfo,
    Lane,
    Pool,
    Process,
    SequenceFlow,
    StartEvent,
    SubProcess,
    TimerEventDefinition,
    UserTask,
)


@pytest.fixture(autouse=True)
def reset_observability():
    """Give every test a fresh observability singleton."""
    ObservabilityManager.reset()
    yield
    ObservabilityManager.reset()


# ===========================
# Process graph builders
# ===========================


class ModelBuilder:
    """Builds placed process graphs the way an editor export would lay them out."""

    def __init__(self, process_id: str = "orderProcess", name: str = "Order process"):
        self.model = BpmnModel(target_namespace="http://www.flowable.org/processdef")
        self.process = Process(id=process_id, name=name)
        self.model.add_process(self.process)

    def place(
        self,
        element: FlowElement,
        x: float,
        y: float,
        width: float,
        height: float,
        container: Optional[FlowElementsContainer] = None,
    ) -> FlowElement:
        (container or self.process).add_flow_element(element)
        self.model.add_graphic_info(element.id, GraphicInfo(x=x, y=y, width=width, height=height))
        return element

    def connect(
        self,
        flow_id: str,
        source: FlowNode,
        target: FlowNode,
        container: Optional[FlowElementsContainer] = None,
    ) -> SequenceFlow:
        flow = SequenceFlow(id=flow_id, source_ref=source.id, target_ref=target.id)
        (container or self.process).add_flow_element(flow)
        source.outgoing_flows.append(flow)
        target.incoming_flows.append(flow)
        return flow


@pytest.fixture
def builder():
    """Empty model builder."""
    return ModelBuilder()


@pytest.fixture
def simple_model():
    """start -> Review order -> end, nodes first and flows after."""
    b = ModelBuilder()
    start = b.place(StartEvent(id="start"), 100, 120, 30, 30)
    task = b.place(UserTask(id="review", name="Review order"), 200, 95, 100, 80)
    end = b.place(EndEvent(id="end"), 400, 121, 28, 28)
    b.connect("flow1", start, task)
    b.connect("flow2", task, end)
    return b.model


@pytest.fixture
def nested_model():
    """start -> subprocess(inner start -> inner task) -> end."""
    b = ModelBuilder()
    start = b.place(StartEvent(id="start"), 50, 150, 30, 30)
    sub_process = b.place(SubProcess(id="sub", name="Ship order"), 200, 50, 400, 250)
    end = b.place(EndEvent(id="end"), 700, 161, 28, 28)

    inner_start = b.place(StartEvent(id="innerStart"), 230, 150, 30, 30, container=sub_process)
    inner_task = b.place(UserTask(id="pack", name="Pack items"), 320, 125, 100, 80, container=sub_process)
    b.connect("innerFlow", inner_start, inner_task, container=sub_process)

    b.connect("flow1", start, sub_process)
    b.connect("flow2", sub_process, end)
    return b.model


# ===========================
# Converters
# ===========================


@pytest.fixture
def converter():
    """Converter with the default (lenient) error handling."""
    return BpmnJsonConverter()


@pytest.fixture
def strict_converter():
    """Converter that raises on the first failed element."""
    return BpmnJsonConverter(config=ConverterConfig(error_handling=ErrorHandlingStrategy.STRICT))


def find_shape(shapes, resource_id):
    """Depth-first search for a shape by resource id."""
    for shape in shapes:
        if shape.get("resourceId") == resource_id:
            return shape
        found = find_shape(shape.get("childShapes") or [], resource_id)
        if found is not None:
            return found
    return None


@pytest.fixture
def shape_finder():
    """Depth-first shape lookup by resource id."""
    return find_shape


@pytest.fixture
def lane_model():
    """start -> subprocess(inner start -> pack) -> end, all drawn inside one lane of one pool."""
    b = ModelBuilder()
    model, process = b.model, b.process

    pool = Pool(id="customerPool", name="Customer", process_ref=process.id)
    model.pools.append(pool)
    model.add_graphic_info(pool.id, GraphicInfo(x=20, y=20, width=1000, height=500))
    lane = Lane(id="salesLane", name="Sales", parent_process=process)
    process.lanes.append(lane)
    model.add_graphic_info(lane.id, GraphicInfo(x=50, y=20, width=970, height=500))

    start = b.place(StartEvent(id="start"), 100, 150, 30, 30)
    sub_process = b.place(SubProcess(id="sub", name="Ship order"), 200, 80, 400, 250)
    end = b.place(EndEvent(id="end"), 700, 151, 28, 28)
    inner_start = b.place(StartEvent(id="innerStart"), 230, 180, 30, 30, container=sub_process)
    pack = b.place(UserTask(id="pack", name="Pack items"), 300, 155, 100, 80, container=sub_process)
    b.connect("innerFlow", inner_start, pack, container=sub_process)
    b.connect("flow1", start, sub_process)
    b.connect("flow2", sub_process, end)

    lane.flow_references.extend(["start", "sub", "end", "flow1", "flow2"])
    return model


@pytest.fixture
def boundary_model():
    """Review task with a one-hour timer boundary event leading to an escalation task."""
    b = ModelBuilder()
    task = b.place(UserTask(id="review", name="Review order"), 200, 95, 100, 80)
    escalate = b.place(UserTask(id="escalate", name="Escalate"), 200, 250, 100, 80)
    boundary = BoundaryEvent(
        id="timeout",
        attached_to_ref_id="review",
        event_definitions=[TimerEventDefinition(time_duration="PT1H")],
    )
    boundary.attached_to_ref = task
    task.boundary_events.append(boundary)
    b.place(boundary, 284.5, 159.5, 31, 31)
    b.connect("timeoutFlow", boundary, escalate)
    return b.model
