"""
Process Graph Serialization

Dumps a :class:`BpmnModel` to plain JSON data and loads it back. Flow element
lists hold many element subclasses, so loading picks each element's class
from its ``element_type`` and restores the back-references that dumps leave
out: incoming and outgoing flows, boundary hosts and lane parents.
"""

import logging
from typing import Any, Dict, List, Type

from bpmn_json_converter.models.bpmn_elements import (
    Activity,
    Artifact,
    BaseElement,
    BoundaryEvent,
    BpmnModel,
    FlowElement,
    FlowElementsContainer,
    FlowNode,
    Lane,
    Process,
    SequenceFlow,
)

logger = logging.getLogger(__name__)

_CHILD_KEYS = ("flow_elements", "artifacts")


def _element_classes() -> Dict[str, Type[BaseElement]]:
    classes: Dict[str, Type[BaseElement]] = {}
    pending: List[Type[BaseElement]] = [BaseElement]
    while pending:
        klass = pending.pop()
        classes[klass.__name__] = klass
        pending.extend(klass.__subclasses__())
    return classes


def dump_model(model: BpmnModel) -> Dict[str, Any]:
    """JSON-compatible dump of ``model``, element subclasses included."""
    return model.model_dump(mode="json")


def _load_element(data: Dict[str, Any], classes: Dict[str, Type[BaseElement]]) -> BaseElement:
    element_type = data.get("element_type")
    klass = classes.get(element_type or "")
    if klass is None:
        raise ValueError(f"Unknown element type: {element_type}")

    fields = {key: value for key, value in data.items() if key not in _CHILD_KEYS}
    element = klass.model_validate(fields)
    if isinstance(element, FlowElementsContainer):
        _load_children(element, data, classes)
    return element


def _load_children(container: FlowElementsContainer, data: Dict[str, Any], classes: Dict[str, Type[BaseElement]]) -> None:
    for child in data.get("flow_elements") or []:
        element = _load_element(child, classes)
        if not isinstance(element, FlowElement):
            raise ValueError(f"{element.element_type} {element.id} is not a flow element")
        container.add_flow_element(element)
    for child in data.get("artifacts") or []:
        artifact = _load_element(child, classes)
        if not isinstance(artifact, Artifact):
            raise ValueError(f"{artifact.element_type} {artifact.id} is not an artifact")
        container.add_artifact(artifact)


def _relink(process: Process) -> None:
    for element in process.iter_flow_elements():
        if isinstance(element, SequenceFlow):
            source = process.get_flow_element(element.source_ref)
            target = process.get_flow_element(element.target_ref)
            if isinstance(source, FlowNode):
                source.outgoing_flows.append(element)
            if isinstance(target, FlowNode):
                target.incoming_flows.append(element)
        elif isinstance(element, BoundaryEvent):
            host = process.get_flow_element(element.attached_to_ref_id)
            if isinstance(host, Activity):
                element.attached_to_ref = host
                host.boundary_events.append(element)
            else:
                logger.warning(f"Boundary event {element.id} has no host activity {element.attached_to_ref_id}")


def load_model(data: Dict[str, Any]) -> BpmnModel:
    """Rebuild a process graph from :func:`dump_model` output.

    Args:
        data: Dumped process graph

    Returns:
        Process graph with back-references restored

    Raises:
        ValueError: If an element type is unknown or misplaced
        pydantic.ValidationError: If a field value is invalid
    """
    classes = _element_classes()
    fields = {key: value for key, value in data.items() if key != "processes"}
    model = BpmnModel.model_validate(fields)

    for process_data in data.get("processes") or []:
        process_fields = {
            key: value for key, value in process_data.items() if key not in _CHILD_KEYS and key != "lanes"
        }
        process = Process.model_validate(process_fields)
        _load_children(process, process_data, classes)
        for lane_data in process_data.get("lanes") or []:
            lane = Lane.model_validate(lane_data)
            lane.parent_process = process
            process.lanes.append(lane)
        _relink(process)
        model.add_process(process)

    return model
