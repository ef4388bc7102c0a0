"""
Tests for event converters.

Tests:
- Stencil selection for every event family and definition kind
- Family defaults for zero or several definitions
- Event registry stencils
- Boundary event dockers and cancel-activity handling
- Start event interrupting flag inside event subprocesses
- Reading event definitions back from stencils
"""

import pytest

from bpmn_json_converter.converter.bpmn_json_converter import BpmnJsonConverter
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.errors import UnresolvedReferenceError
from bpmn_json_converter.converter.events import (
    BoundaryEventConverter,
    CatchEventConverter,
    EndEventConverter,
    StartEventConverter,
    ThrowEventConverter,
)
from bpmn_json_converter.converter.properties import create_child_shape
from bpmn_json_converter.models.bpmn_elements import (
    BoundaryEvent,
    BpmnModel,
    CancelEventDefinition,
    CompensateEventDefinition,
    ConditionalEventDefinition,
    EndEvent,
    ErrorEventDefinition,
    EscalationEventDefinition,
    EventSubProcess,
    ExtensionElement,
    GraphicInfo,
    IntermediateCatchEvent,
    MessageEventDefinition,
    Process,
    SignalEventDefinition,
    StartEvent,
    TerminateEventDefinition,
    ThrowEvent,
    TimerEventDefinition,
    UserTask,
    VariableListenerEventDefinition,
)


def create_context(model=None, **changes):
    """Helper to create a conversion context for a single converter call."""
    model = model or BpmnModel()
    process = model.processes[0] if model.processes else Process(id="process")
    ctx = ConverterContext(model=model, processor=BpmnJsonConverter(), container=process, parent=process)
    return ctx.derive(**changes) if changes else ctx


def create_event_node(stencil_id, resource_id="event1", **properties):
    """Helper to create an event shape node."""
    node = create_child_shape(resource_id, stencil_id, 30, 30, 0, 0)
    node["properties"] = properties
    return node


# ===========================
# Stencil selection
# ===========================


ALL_DEFINITIONS = {
    "timer": TimerEventDefinition(time_duration="PT5M"),
    "message": MessageEventDefinition(message_ref="orderReceived"),
    "signal": SignalEventDefinition(signal_ref="alarm"),
    "conditional": ConditionalEventDefinition(condition_expression="${ready}"),
    "error": ErrorEventDefinition(error_code="E42"),
    "escalation": EscalationEventDefinition(escalation_code="late"),
    "cancel": CancelEventDefinition(),
    "compensate": CompensateEventDefinition(),
    "variableListener": VariableListenerEventDefinition(variable_name="amount"),
    "terminate": TerminateEventDefinition(),
}


@pytest.mark.parametrize(
    "converter_type,event_type,kind,expected",
    [
        (StartEventConverter, StartEvent, "timer", "StartTimerEvent"),
        (StartEventConverter, StartEvent, "message", "StartMessageEvent"),
        (StartEventConverter, StartEvent, "signal", "StartSignalEvent"),
        (StartEventConverter, StartEvent, "error", "StartErrorEvent"),
        (StartEventConverter, StartEvent, "conditional", "StartConditionalEvent"),
        (StartEventConverter, StartEvent, "escalation", "StartEscalationEvent"),
        (StartEventConverter, StartEvent, "variableListener", "StartVariableListenerEvent"),
        (EndEventConverter, EndEvent, "error", "EndErrorEvent"),
        (EndEventConverter, EndEvent, "escalation", "EndEscalationEvent"),
        (EndEventConverter, EndEvent, "cancel", "EndCancelEvent"),
        (EndEventConverter, EndEvent, "terminate", "EndTerminateEvent"),
        (BoundaryEventConverter, BoundaryEvent, "timer", "BoundaryTimerEvent"),
        (BoundaryEventConverter, BoundaryEvent, "message", "BoundaryMessageEvent"),
        (BoundaryEventConverter, BoundaryEvent, "signal", "BoundarySignalEvent"),
        (BoundaryEventConverter, BoundaryEvent, "conditional", "BoundaryConditionalEvent"),
        (BoundaryEventConverter, BoundaryEvent, "error", "BoundaryErrorEvent"),
        (BoundaryEventConverter, BoundaryEvent, "escalation", "BoundaryEscalationEvent"),
        (BoundaryEventConverter, BoundaryEvent, "cancel", "BoundaryCancelEvent"),
        (BoundaryEventConverter, BoundaryEvent, "compensate", "BoundaryCompensationEvent"),
        (BoundaryEventConverter, BoundaryEvent, "variableListener", "BoundaryVariableListenerEvent"),
        (CatchEventConverter, IntermediateCatchEvent, "timer", "CatchTimerEvent"),
        (CatchEventConverter, IntermediateCatchEvent, "message", "CatchMessageEvent"),
        (CatchEventConverter, IntermediateCatchEvent, "signal", "CatchSignalEvent"),
        (CatchEventConverter, IntermediateCatchEvent, "conditional", "CatchConditionalEvent"),
        (CatchEventConverter, IntermediateCatchEvent, "variableListener", "CatchVariableListenerEvent"),
        (ThrowEventConverter, ThrowEvent, "signal", "ThrowSignalEvent"),
        (ThrowEventConverter, ThrowEvent, "escalation", "ThrowEscalationEvent"),
        (ThrowEventConverter, ThrowEvent, "compensate", "ThrowCompensationEvent"),
    ],
)
def test_single_definition_selects_stencil(converter_type, event_type, kind, expected):
    event = event_type(id="event1", event_definitions=[ALL_DEFINITIONS[kind]])

    assert converter_type().get_stencil_id(event) == expected


@pytest.mark.parametrize(
    "converter_type,event_type,default",
    [
        (StartEventConverter, StartEvent, "StartNoneEvent"),
        (EndEventConverter, EndEvent, "EndNoneEvent"),
        (BoundaryEventConverter, BoundaryEvent, "BoundaryTimerEvent"),
        (CatchEventConverter, IntermediateCatchEvent, "CatchTimerEvent"),
        (ThrowEventConverter, ThrowEvent, "ThrowNoneEvent"),
    ],
)
class TestFamilyDefaults:
    """Zero or several definitions fall back to the family default."""

    def test_no_definitions(self, converter_type, event_type, default):
        assert converter_type().get_stencil_id(event_type(id="e")) == default

    def test_two_definitions(self, converter_type, event_type, default):
        event = event_type(
            id="e",
            event_definitions=[TimerEventDefinition(time_duration="PT1M"), SignalEventDefinition(signal_ref="s")],
        )
        assert converter_type().get_stencil_id(event) == default


def test_unsupported_kind_uses_default():
    event = EndEvent(id="end", event_definitions=[TimerEventDefinition(time_duration="PT1M")])

    assert EndEventConverter().get_stencil_id(event) == "EndNoneEvent"


@pytest.mark.parametrize(
    "converter_type,event_type,expected",
    [
        (StartEventConverter, StartEvent, "StartEventRegistryEvent"),
        (BoundaryEventConverter, BoundaryEvent, "BoundaryEventRegistryEvent"),
        (CatchEventConverter, IntermediateCatchEvent, "CatchEventRegistryEvent"),
    ],
)
def test_event_registry_stencil(converter_type, event_type, expected):
    event = event_type(id="e")
    event.add_extension_element(ExtensionElement(name="eventType", element_text="orderCreated"))

    assert converter_type().get_stencil_id(event) == expected


# ===========================
# Domain -> JSON
# ===========================


class TestBoundaryEventToJson:
    """Boundary events dock on their host."""

    def create_model(self):
        model = BpmnModel()
        process = Process(id="process")
        task = UserTask(id="review")
        boundary = BoundaryEvent(
            id="timeout",
            attached_to_ref_id="review",
            cancel_activity=False,
            event_definitions=[TimerEventDefinition(time_duration="PT1H")],
        )
        process.add_flow_element(task)
        process.add_flow_element(boundary)
        model.add_process(process)
        model.add_graphic_info("review", GraphicInfo(x=100, y=100, width=100, height=80))
        model.add_graphic_info("timeout", GraphicInfo(x=184.5, y=164.5, width=31, height=31))
        return model, boundary

    def test_docker_relative_to_host(self):
        model, boundary = self.create_model()
        ctx = create_context(model)

        shape = BoundaryEventConverter().to_json(boundary, ctx)

        assert shape["stencil"]["id"] == "BoundaryTimerEvent"
        assert shape["dockers"] == [{"x": 100, "y": 80}]
        assert shape["properties"]["cancelactivity"] is False
        assert shape["properties"]["timerdurationdefinition"] == "PT1H"
        assert ctx.shapes == [shape]

    def test_missing_host_placement_raises(self):
        model, boundary = self.create_model()
        del model.location_map["review"]

        with pytest.raises(UnresolvedReferenceError):
            BoundaryEventConverter().to_json(boundary, create_context(model))


class TestStartEventToJson:
    """Interrupting is only written inside event subprocesses."""

    def create_model(self):
        model = BpmnModel()
        model.add_graphic_info("start", GraphicInfo(x=10, y=10, width=30, height=30))
        return model

    def test_top_level_start_has_no_interrupting(self):
        event = StartEvent(id="start", interrupting=False)

        shape = StartEventConverter().to_json(event, create_context(self.create_model()))

        assert "interrupting" not in shape["properties"]
        assert shape["stencil"]["id"] == "StartNoneEvent"

    def test_event_sub_process_start(self):
        event = StartEvent(
            id="start", interrupting=False, event_definitions=[ErrorEventDefinition(error_code="E1")]
        )
        container = EventSubProcess(id="handler")

        shape = StartEventConverter().to_json(event, create_context(self.create_model(), container=container))

        assert shape["properties"]["interrupting"] is False
        assert shape["properties"]["errorref"] == "E1"


# ===========================
# JSON -> domain
# ===========================


class TestEventsToDomain:
    """Definitions are recovered from the stencil."""

    def test_timer_start_event(self):
        ctx = create_context()
        node = create_event_node("StartTimerEvent", timerdurationdefinition="PT10M", name="Every ten minutes")

        event = StartEventConverter().to_domain(node, ctx)

        assert isinstance(event, StartEvent)
        assert event.name == "Every ten minutes"
        assert len(event.event_definitions) == 1
        assert event.event_definitions[0].time_duration == "PT10M"
        assert ctx.parent.get_flow_element("event1") is event

    def test_none_start_event_reads_initiator(self):
        node = create_event_node("StartNoneEvent", initiator="starter")

        event = StartEventConverter().to_domain(node, create_context())

        assert event.event_definitions == []
        assert event.initiator == "starter"

    def test_terminate_end_event(self):
        node = create_event_node("EndTerminateEvent", terminateall=True)

        event = EndEventConverter().to_domain(node, create_context())

        assert isinstance(event.event_definitions[0], TerminateEventDefinition)
        assert event.event_definitions[0].terminate_all is True

    def test_signal_catch_event(self):
        node = create_event_node("CatchSignalEvent", signalref="alarm")

        event = CatchEventConverter().to_domain(node, create_context())

        assert isinstance(event, IntermediateCatchEvent)
        assert event.event_definitions[0].signal_ref == "alarm"

    def test_throw_event_asynchronous(self):
        node = create_event_node("ThrowNoneEvent", asynchronousdefinition=True)

        event = ThrowEventConverter().to_domain(node, create_context())

        assert event.asynchronous is True
        assert event.event_definitions == []


class TestBoundaryEventToDomain:
    """cancelactivity handling and host discovery."""

    def create_root(self, boundary_node, host_lists_boundary=True):
        host = create_child_shape("review", "UserTask", 200, 180, 100, 100)
        host["properties"] = {}
        host["outgoing"] = [{"resourceId": "timeout"}] if host_lists_boundary else []
        return [host, boundary_node]

    def test_host_found_through_outgoing(self):
        node = create_event_node("BoundaryTimerEvent", "timeout", cancelactivity=False)
        ctx = create_context(root_shapes=self.create_root(node))

        event = BoundaryEventConverter().to_domain(node, ctx)

        assert event.attached_to_ref_id == "review"
        assert event.cancel_activity is False

    def test_no_host(self):
        node = create_event_node("BoundaryTimerEvent", "timeout")
        ctx = create_context(root_shapes=self.create_root(node, host_lists_boundary=False))

        event = BoundaryEventConverter().to_domain(node, ctx)

        assert event.attached_to_ref_id is None

    @pytest.mark.parametrize("stencil_id", ["BoundaryCancelEvent", "BoundaryCompensationEvent"])
    def test_cancel_and_compensation_never_cancel(self, stencil_id):
        node = create_event_node(stencil_id, "b1", cancelactivity=True)

        event = BoundaryEventConverter().to_domain(node, create_context(root_shapes=[node]))

        assert event.cancel_activity is False

    def test_error_boundary_ignores_property(self):
        node = create_event_node("BoundaryErrorEvent", "b1", cancelactivity=False, errorref="E1")

        event = BoundaryEventConverter().to_domain(node, create_context(root_shapes=[node]))

        assert event.cancel_activity is True
        assert event.event_definitions[0].error_code == "E1"

    def test_message_boundary_reads_property(self):
        node = create_event_node("BoundaryMessageEvent", "b1", cancelactivity=True, messageref="paid")

        event = BoundaryEventConverter().to_domain(node, create_context(root_shapes=[node]))

        assert event.cancel_activity is True
        assert event.event_definitions[0].message_ref == "paid"
