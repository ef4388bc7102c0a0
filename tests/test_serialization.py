"""
Tests for process graph serialization.

Tests:
- Dumps keep element types and leave back-references out
- Loading restores element subclasses, nesting and diagram placements
- Loading relinks sequence flows, boundary hosts and lane parents
- Unknown element types are rejected
"""

import json

import pytest

from bpmn_json_converter.models import dump_model, load_model
from bpmn_json_converter.models.bpmn_elements import (
    BoundaryEvent,
    Lane,
    SubProcess,
    TimerEventDefinition,
    UserTask,
)


class TestDump:
    """dump_model"""

    def test_is_plain_json(self, nested_model):
        data = dump_model(nested_model)

        assert json.loads(json.dumps(data)) == data

    def test_element_types_kept(self, nested_model):
        data = dump_model(nested_model)

        types = [element["element_type"] for element in data["processes"][0]["flow_elements"]]
        assert types == ["StartEvent", "SubProcess", "EndEvent", "SequenceFlow", "SequenceFlow"]

    def test_back_references_left_out(self, simple_model):
        data = dump_model(simple_model)

        review = data["processes"][0]["flow_elements"][1]
        assert review["id"] == "review"
        assert "incoming_flows" not in review
        assert "outgoing_flows" not in review
        assert "boundary_events" not in review


class TestLoad:
    """load_model"""

    def test_nested_elements_restored(self, nested_model):
        model = load_model(dump_model(nested_model))

        sub_process = model.get_flow_element("sub")
        assert isinstance(sub_process, SubProcess)
        assert isinstance(model.get_flow_element("pack"), UserTask)
        assert sub_process.get_flow_element("innerFlow", recursive=False) is not None
        assert model.get_graphic_info("pack").x == 320

    def test_sequence_flows_relinked(self, nested_model):
        model = load_model(dump_model(nested_model))

        sub_process = model.get_flow_element("sub")
        assert [flow.id for flow in sub_process.incoming_flows] == ["flow1"]
        assert [flow.id for flow in sub_process.outgoing_flows] == ["flow2"]
        assert [flow.id for flow in model.get_flow_element("pack").incoming_flows] == ["innerFlow"]

    def test_boundary_host_relinked(self, builder):
        task = builder.place(UserTask(id="review"), 200, 95, 100, 80)
        boundary = BoundaryEvent(
            id="timeout",
            attached_to_ref_id="review",
            event_definitions=[TimerEventDefinition(time_duration="PT1H")],
        )
        builder.place(boundary, 284.5, 159.5, 31, 31)
        boundary.attached_to_ref = task
        task.boundary_events.append(boundary)

        model = load_model(dump_model(builder.model))

        loaded = model.get_flow_element("timeout")
        assert loaded.attached_to_ref is model.get_flow_element("review")
        assert model.get_flow_element("review").boundary_events == [loaded]
        assert isinstance(loaded.event_definitions[0], TimerEventDefinition)

    def test_lane_parent_restored(self, simple_model):
        process = simple_model.processes[0]
        process.lanes.append(Lane(id="sales", flow_references=["start", "review"], parent_process=process))

        model = load_model(dump_model(simple_model))

        lane = model.processes[0].lanes[0]
        assert lane.parent_process is model.processes[0]
        assert lane.flow_references == ["start", "review"]

    def test_dump_is_stable(self, nested_model):
        data = dump_model(nested_model)

        assert dump_model(load_model(data)) == data

    def test_unknown_element_type(self, simple_model):
        data = dump_model(simple_model)
        data["processes"][0]["flow_elements"][0]["element_type"] = "QuantumTask"

        with pytest.raises(ValueError, match="QuantumTask"):
            load_model(data)
