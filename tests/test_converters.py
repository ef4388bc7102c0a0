"""
Tests for task, gateway, container, connector and artifact converters.

Tests:
- User task assignment in both directions
- Service task implementations and typed service-task stencils
- Typed service tasks read into field extensions (mail, http, decision)
- Gateway flow order output
- Subprocess child placement, collapsed subprocesses and transactions
- Sequence flow conditions, default flows and dockers
- Association docking, message flows and text annotations
"""

import json
from unittest.mock import Mock

import pytest

from bpmn_json_converter.converter.artifacts import TextAnnotationConverter
from bpmn_json_converter.converter.bpmn_json_converter import BpmnJsonConverter
from bpmn_json_converter.converter.containers import SubProcessConverter
from bpmn_json_converter.converter.context import ConverterContext, StandaloneReferenceResolver
from bpmn_json_converter.converter.errors import UnresolvedReferenceError
from bpmn_json_converter.converter.flows import (
    MessageFlowConverter,
    SequenceFlowConverter,
    convert_json_to_condition,
    snap_to_target_side,
)
from bpmn_json_converter.converter.gateways import ExclusiveGatewayConverter
from bpmn_json_converter.converter.properties import create_child_shape, create_resource_node
from bpmn_json_converter.converter.tasks import (
    DecisionTaskConverter,
    HttpTaskConverter,
    MailTaskConverter,
    ServiceTaskConverter,
    ShellTaskConverter,
    UserTaskConverter,
)
from bpmn_json_converter.models.bpmn_elements import (
    BpmnModel,
    ExclusiveGateway,
    ExtensionElement,
    FieldExtension,
    GraphicInfo,
    HttpServiceTask,
    ImplementationType,
    Process,
    SequenceFlow,
    ServiceTask,
    SubProcess,
    TextAnnotation,
    Transaction,
    UserTask,
)


# ===========================
# Helpers
# ===========================


def create_model():
    """Helper to create a model holding one empty process."""
    model = BpmnModel()
    model.add_process(Process(id="process"))
    return model


def place(model, element, x, y, width, height, container=None):
    """Helper to add an element with a diagram placement."""
    target = container or model.processes[0]
    if isinstance(element, TextAnnotation):
        target.add_artifact(element)
    else:
        target.add_flow_element(element)
    model.add_graphic_info(element.id, GraphicInfo(x=x, y=y, width=width, height=height))
    return element


def create_context(model=None, **changes):
    """Helper to create a context writing into, or reading for, the first process."""
    model = model or create_model()
    process = model.processes[0]
    ctx = ConverterContext(model=model, processor=BpmnJsonConverter(), container=process, parent=process)
    return ctx.derive(**changes) if changes else ctx


def create_node(stencil_id, resource_id="node1", **properties):
    """Helper to create a shape node with properties."""
    node = create_child_shape(resource_id, stencil_id, 100, 80, 0, 0)
    node["properties"] = properties
    return node


# ===========================
# User tasks
# ===========================


class TestUserTask:
    """Assignment and task properties."""

    def test_static_assignment_to_json(self):
        model = create_model()
        task = place(model, UserTask(id="review", assignee="kermit", candidate_groups=["management"]), 0, 0, 100, 80)

        shape = UserTaskConverter().to_json(task, create_context(model))

        assert shape["properties"]["usertaskassignment"] == {
            "assignment": {"type": "static", "assignee": "kermit", "candidateGroups": [{"value": "management"}]}
        }

    def test_no_assignment(self):
        model = create_model()
        task = place(model, UserTask(id="review", priority="50"), 0, 0, 100, 80)

        shape = UserTaskConverter().to_json(task, create_context(model))

        assert "usertaskassignment" not in shape["properties"]
        assert shape["properties"]["prioritydefinition"] == "50"
        assert shape["properties"]["asynchronousdefinition"] is False
        assert shape["properties"]["exclusivedefinition"] is True

    def test_double_encoded_assignment_to_domain(self):
        assignment = {"assignment": {"type": "static", "assignee": "gonzo", "candidateUsers": [{"value": "fozzie"}]}}
        node = create_node("UserTask", usertaskassignment=json.dumps(json.dumps(assignment)), name="Approve")

        task = UserTaskConverter().to_domain(node, create_context())

        assert task.name == "Approve"
        assert task.assignee == "gonzo"
        assert task.candidate_users == ["fozzie"]
        assert task.get_extension_value("initiator-can-complete") == "false"


# ===========================
# Service tasks
# ===========================


@pytest.mark.parametrize(
    "task_type,expected",
    [
        ("mail", "MailTask"),
        ("MAIL", "MailTask"),
        ("camel", "CamelTask"),
        ("mule", "MuleTask"),
        ("http", "HttpTask"),
        ("dmn", "DecisionTask"),
        ("shell", "ShellTask"),
        ("webhook", "ServiceTask"),
        (None, "ServiceTask"),
    ],
)
def test_service_task_stencil_by_type(task_type, expected):
    assert ServiceTaskConverter().get_stencil_id(ServiceTask(id="svc", type=task_type)) == expected


class TestServiceTask:
    """Plain and typed service tasks."""

    def test_class_implementation_round_trip(self):
        model = create_model()
        task = place(
            model,
            ServiceTask(id="ship", implementation_type=ImplementationType.CLASS, implementation="com.acme.Ship"),
            0,
            0,
            100,
            80,
        )

        shape = ServiceTaskConverter().to_json(task, create_context(model))
        read_back = ServiceTaskConverter().to_domain(shape, create_context())

        assert shape["properties"]["servicetaskclass"] == "com.acme.Ship"
        assert read_back.implementation_type == ImplementationType.CLASS
        assert read_back.implementation == "com.acme.Ship"

    def test_mail_task_to_json(self):
        model = create_model()
        task = place(
            model,
            ServiceTask(
                id="notify",
                type="mail",
                field_extensions=[
                    FieldExtension(field_name="to", expression="${customer.email}"),
                    FieldExtension(field_name="subject", string_value="Order shipped"),
                ],
            ),
            0,
            0,
            100,
            80,
        )

        shape = ServiceTaskConverter().to_json(task, create_context(model))

        assert shape["stencil"]["id"] == "MailTask"
        assert shape["properties"]["mailtaskto"] == "${customer.email}"
        assert shape["properties"]["mailtasksubject"] == "Order shipped"

    def test_mail_task_to_domain(self):
        node = create_node("MailTask", mailtaskto="${customer.email}", mailtasksubject="Order shipped")

        task = MailTaskConverter().to_domain(node, create_context())

        assert isinstance(task, ServiceTask)
        assert task.type == "mail"
        assert task.get_field_value("to") == "${customer.email}"
        assert task.get_field_value("subject") == "Order shipped"
        assert [field.field_name for field in task.field_extensions if field.expression] == ["to"]

    def test_http_task_defaults_to_get(self):
        node = create_node("HttpTask", httptaskrequesturl="https://example.org/orders")

        task = HttpTaskConverter().to_domain(node, create_context())

        assert isinstance(task, HttpServiceTask)
        assert task.get_field_value("requestMethod") == "GET"
        assert task.get_field_value("requestUrl") == "https://example.org/orders"

    @pytest.mark.parametrize(
        "task_type,converter_type",
        [("mail", MailTaskConverter), ("shell", ShellTaskConverter), ("dmn", DecisionTaskConverter)],
    )
    def test_typed_task_keeps_skip_expression(self, task_type, converter_type):
        model = create_model()
        task = place(model, ServiceTask(id="notify", type=task_type, skip_expression="${skipNotify}"), 0, 0, 100, 80)

        shape = ServiceTaskConverter().to_json(task, create_context(model))
        read_back = converter_type().to_domain(shape, create_context())

        assert shape["properties"]["skipexpression"] == "${skipNotify}"
        assert read_back.type == task_type
        assert read_back.skip_expression == "${skipNotify}"


class TestDecisionTask:
    """Decision references with and without a resolver."""

    def test_table_reference_key_fallback(self):
        node = create_node("DecisionTask", decisiontaskdecisiontablereference={"key": "risk"})

        task = DecisionTaskConverter().to_domain(node, create_context())

        assert task.type == "dmn"
        assert task.get_field_value("decisionTableReferenceKey") == "risk"
        assert task.get_extension_value("decisionReferenceType") == "decisionTable"

    def test_service_reference_wins(self):
        node = create_node(
            "DecisionTask",
            decisiontaskdecisiontablereference={"key": "risk"},
            decisiontaskdecisionservicereference={"key": "scoring"},
        )

        task = DecisionTaskConverter().to_domain(node, create_context())

        assert task.get_field_value("decisionTableReferenceKey") == "scoring"
        assert task.get_extension_value("decisionReferenceType") == "decisionService"

    def test_unresolved_reference_written_by_key(self):
        model = create_model()
        task = place(
            model,
            ServiceTask(
                id="decide",
                type="dmn",
                field_extensions=[FieldExtension(field_name="decisionTableReferenceKey", string_value="risk")],
            ),
            0,
            0,
            100,
            80,
        )

        shape = ServiceTaskConverter().to_json(task, create_context(model))

        assert shape["stencil"]["id"] == "DecisionTask"
        assert shape["properties"]["decisiontaskdecisiontablereference"] == {"key": "risk"}

    def test_unresolved_service_reference(self):
        model = create_model()
        task = ServiceTask(
            id="decide",
            type="dmn",
            field_extensions=[FieldExtension(field_name="decisionTableReferenceKey", string_value="scoring")],
        )
        task.add_extension_element(ExtensionElement(name="decisionReferenceType", element_text="decisionService"))
        place(model, task, 0, 0, 100, 80)

        shape = ServiceTaskConverter().to_json(task, create_context(model))

        assert shape["properties"]["decisiontaskdecisionservicereference"] == {"key": "scoring"}
        assert "decisiontaskdecisiontablereference" not in shape["properties"]

    def test_resolved_reference(self):
        resolver = Mock(spec=StandaloneReferenceResolver)
        resolver.get_decision_service_model_info_for_decision_service_model_key.return_value = None
        resolver.get_decision_table_model_info_for_decision_table_model_key.return_value = {
            "id": "model-7",
            "name": "Risk table",
            "key": "risk",
        }
        model = create_model()
        task = place(
            model,
            ServiceTask(
                id="decide",
                type="dmn",
                field_extensions=[FieldExtension(field_name="decisionTableReferenceKey", string_value="risk")],
            ),
            0,
            0,
            100,
            80,
        )

        shape = ServiceTaskConverter().to_json(task, create_context(model, resolver=resolver))

        assert shape["properties"]["decisiontaskdecisiontablereference"] == {
            "id": "model-7",
            "name": "Risk table",
            "key": "risk",
        }
        resolver.get_decision_table_model_info_for_decision_table_model_key.assert_called_once_with("risk")


# ===========================
# Gateways
# ===========================


class TestGatewayFlowOrder:
    """sequencefloworder output."""

    def create_gateway_model(self, flow_count):
        model = create_model()
        gateway = place(model, ExclusiveGateway(id="decide"), 0, 0, 40, 40)
        for i in range(flow_count):
            target = place(model, UserTask(id=f"task{i}"), 100, i * 100, 100, 80)
            flow = SequenceFlow(id=f"flow{i}", source_ref="decide", target_ref=target.id)
            model.processes[0].add_flow_element(flow)
            gateway.outgoing_flows.append(flow)
        return model, gateway

    def test_order_written_for_two_or_more_flows(self):
        model, gateway = self.create_gateway_model(3)

        shape = ExclusiveGatewayConverter().to_json(gateway, create_context(model))

        assert shape["properties"]["sequencefloworder"] == {"sequenceFlowOrder": ["flow0", "flow1", "flow2"]}
        assert [entry["resourceId"] for entry in shape["outgoing"]] == ["flow0", "flow1", "flow2"]

    def test_no_order_for_single_flow(self):
        model, gateway = self.create_gateway_model(1)

        shape = ExclusiveGatewayConverter().to_json(gateway, create_context(model))

        assert "sequencefloworder" not in shape["properties"]

    def test_order_read_into_extension(self):
        node = create_node("ExclusiveGateway", sequencefloworder=json.dumps({"sequenceFlowOrder": ["b", "a"]}))

        gateway = ExclusiveGatewayConverter().to_domain(node, create_context())

        assert [ext.element_text for ext in gateway.extension_elements["EDITOR_FLOW_ORDER"]] == ["b", "a"]


# ===========================
# Containers
# ===========================


class TestSubProcess:
    """Child placement inside subprocesses."""

    def create_sub_process_model(self, expanded=True):
        model = create_model()
        sub_process = place(model, SubProcess(id="sub"), 200, 100, 300, 200)
        place(model, UserTask(id="inner"), 250, 150, 100, 80, container=sub_process)
        if not expanded:
            model.get_graphic_info("sub").expanded = False
        return model, sub_process

    def test_children_relative_to_expanded_parent(self, shape_finder):
        model, sub_process = self.create_sub_process_model()

        shape = SubProcessConverter().to_json(sub_process, create_context(model))

        assert shape["stencil"]["id"] == "SubProcess"
        inner = shape_finder(shape["childShapes"], "inner")
        assert inner["bounds"]["upperLeft"] == {"x": 50, "y": 50}
        assert inner["bounds"]["lowerRight"] == {"x": 150, "y": 130}

    def test_collapsed_children_keep_absolute_coordinates(self, shape_finder):
        model, sub_process = self.create_sub_process_model(expanded=False)

        shape = SubProcessConverter().to_json(sub_process, create_context(model))

        assert shape["stencil"]["id"] == "CollapsedSubProcess"
        assert shape["properties"]["activitytype"] == "CollapsedSubProcess"
        inner = shape_finder(shape["childShapes"], "inner")
        assert inner["bounds"]["upperLeft"] == {"x": 250, "y": 150}

    def test_transaction_flag(self):
        model = create_model()
        transaction = place(model, Transaction(id="tx"), 0, 0, 300, 200)

        shape = SubProcessConverter().to_json(transaction, create_context(model))
        read_back = SubProcessConverter().to_domain(shape, create_context(root_shapes=[shape]))

        assert shape["properties"]["istransaction"] is True
        assert isinstance(read_back, Transaction)

    def test_children_read_into_sub_process(self):
        inner = create_node("UserTask", "inner", name="Pack")
        node = create_node("SubProcess", "sub")
        node["childShapes"] = [inner]
        ctx = create_context(root_shapes=[node])

        sub_process = SubProcessConverter().to_domain(node, ctx)

        assert [element.id for element in sub_process.flow_elements] == ["inner"]
        assert ctx.parent.get_flow_element("sub", recursive=False) is sub_process
        assert ctx.parent.get_flow_element("inner", recursive=False) is None


# ===========================
# Connectors
# ===========================


class TestSequenceFlow:
    """Sequence flow output and conditions."""

    def create_flow_model(self):
        model = create_model()
        gateway = place(model, ExclusiveGateway(id="decide", default_flow="otherwise"), 0, 0, 40, 40)
        place(model, UserTask(id="ship"), 100, 0, 100, 80)
        flow = SequenceFlow(
            id="otherwise", source_ref="decide", target_ref="ship", condition_expression="${amount > 100}"
        )
        model.processes[0].add_flow_element(flow)
        gateway.outgoing_flows.append(flow)
        return model, flow

    def test_to_json(self):
        model, flow = self.create_flow_model()
        ctx = create_context(model)

        shape = SequenceFlowConverter().to_json(flow, ctx)

        assert shape["stencil"]["id"] == "SequenceFlow"
        assert shape["dockers"] == [{"x": 20.0, "y": 20.0}, {"x": 50.0, "y": 40.0}]
        assert shape["target"] == {"resourceId": "ship"}
        assert shape["outgoing"] == [{"resourceId": "ship"}]
        assert shape["properties"]["conditionsequenceflow"] == "${amount > 100}"
        assert shape["properties"]["defaultflow"] is True
        assert ctx.shapes == [shape]

    def test_interior_waypoints_become_dockers(self):
        model, flow = self.create_flow_model()
        model.add_flow_graphic_info_list(
            "otherwise",
            [GraphicInfo(x=40, y=20), GraphicInfo(x=70, y=200), GraphicInfo(x=150, y=80)],
        )

        shape = SequenceFlowConverter().to_json(flow, create_context(model))

        assert shape["dockers"][1] == {"x": 70, "y": 200}
        assert len(shape["dockers"]) == 3

    def test_missing_endpoint_placement(self):
        model, flow = self.create_flow_model()
        del model.location_map["ship"]

        with pytest.raises(UnresolvedReferenceError):
            SequenceFlowConverter().to_json(flow, create_context(model))

    def test_endpoints_from_source_index(self):
        gateway = create_node("ExclusiveGateway", "decide")
        ship = create_node("UserTask", "ship")
        node = create_node("SequenceFlow", "otherwise")
        node["target"] = create_resource_node("ship")
        # The scanned shapes list nothing, so only the index can name the source
        ctx = create_context(
            source_ref_map={"otherwise": gateway},
            shape_map={"decide": gateway, "ship": ship},
            root_shapes=[ship],
        )

        flow = SequenceFlowConverter().to_domain(node, ctx)

        assert (flow.source_ref, flow.target_ref) == ("decide", "ship")


class TestConditions:
    """conditionsequenceflow in its plain and structured forms."""

    def test_plain_text(self):
        flow = SequenceFlow(id="f")
        convert_json_to_condition("${approved}", flow)
        assert flow.condition_expression == "${approved}"

    def test_static_value(self):
        flow = SequenceFlow(id="f")
        convert_json_to_condition({"expression": {"type": "static", "staticValue": "${total > 0}"}}, flow)
        assert flow.condition_expression == "${total > 0}"

    def test_form_field(self):
        flow = SequenceFlow(id="f")
        condition = {
            "expression": {
                "type": "variables",
                "fieldType": "field",
                "fieldId": "amount",
                "operator": ">",
                "value": "100",
            }
        }

        convert_json_to_condition(condition, flow)

        assert flow.condition_expression == "${amount > 100}"
        assert flow.get_extension_value("conditionFieldId") == "amount"
        assert flow.get_extension_value("conditionOperator") == ">"

    def test_form_outcome(self):
        flow = SequenceFlow(id="f")
        condition = {
            "expression": {
                "type": "variables",
                "fieldType": "outcome",
                "outcomeFormId": 7,
                "operator": "==",
                "outcomeName": "approve",
            }
        }

        convert_json_to_condition(condition, flow)

        assert flow.condition_expression == "${form7outcome == approve}"
        assert flow.get_extension_value("conditionFormId") == "7"

    def test_bad_outcome_form_id(self):
        flow = SequenceFlow(id="f")
        condition = {
            "expression": {
                "type": "variables",
                "fieldType": "outcome",
                "outcomeFormId": "seven",
                "operator": "==",
                "outcomeName": "approve",
            }
        }

        convert_json_to_condition(condition, flow)

        assert flow.condition_expression is None

    def test_missing_type(self):
        flow = SequenceFlow(id="f")
        convert_json_to_condition({"expression": {"staticValue": "${x}"}}, flow)
        assert flow.condition_expression is None


@pytest.mark.parametrize(
    "last_point,expected",
    [
        (GraphicInfo(x=125, y=102), {"x": 25.0, "y": 0.0}),
        (GraphicInfo(x=149, y=120), {"x": 50, "y": 20.0}),
        (GraphicInfo(x=125, y=139), {"x": 25.0, "y": 40}),
        (GraphicInfo(x=100, y=120), {"x": 0.0, "y": 20.0}),
    ],
)
def test_association_snaps_to_nearest_side(last_point, expected):
    target = GraphicInfo(x=100, y=100, width=50, height=40)

    assert snap_to_target_side(last_point, target) == expected


def test_message_flow_to_domain_registers_on_model():
    source = create_node("Pool", "customer")
    source["outgoing"] = [create_resource_node("orderMessage")]
    target = create_node("Pool", "supplier")
    node = create_node("MessageFlow", "orderMessage", name="Order")
    node["target"] = create_resource_node("supplier")
    ctx = create_context(root_shapes=[source, target, node], shape_map={"customer": source, "supplier": target})

    message_flow = MessageFlowConverter().to_domain(node, ctx)

    assert ctx.model.message_flows["orderMessage"] is message_flow
    assert (message_flow.source_ref, message_flow.target_ref) == ("customer", "supplier")
    assert message_flow.name == "Order"


# ===========================
# Artifacts
# ===========================


def test_text_annotation_round_trip():
    model = create_model()
    annotation = place(model, TextAnnotation(id="note", text="Check stock first"), 10, 10, 120, 40)

    shape = TextAnnotationConverter().to_json(annotation, create_context(model))
    ctx = create_context(root_shapes=[shape])
    read_back = TextAnnotationConverter().to_domain(shape, ctx)

    assert shape["properties"] == {"overrideid": "note", "text": "Check stock first"}
    assert read_back.text == "Check stock first"
    assert ctx.parent.get_artifact("note") is read_back
