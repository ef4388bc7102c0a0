"""
BPMN 2.0 Process Graph

Pydantic-based models for the in-memory process graph that the editor JSON
is converted to and from: flow elements, containers, event definitions,
root-level collections and diagram interchange coordinates.

Graph nodes compare by identity. Back-references (boundary host, incoming and
outgoing flows, lane parent) are excluded from serialization.
"""

from enum import Enum
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, computed_field

E = TypeVar("E", bound="BaseElement")


class ImplementationType(str, Enum):
    """How a listener or delegate is implemented."""

    CLASS = "class"
    EXPRESSION = "expression"
    DELEGATE_EXPRESSION = "delegateExpression"
    THROW_ERROR_EVENT = "throwErrorEvent"
    THROW_MESSAGE_EVENT = "throwMessageEvent"
    THROW_SIGNAL_EVENT = "throwSignalEvent"
    THROW_GLOBAL_SIGNAL_EVENT = "throwGlobalSignalEvent"


class SignalScope(str, Enum):
    """Signal broadcast scope."""

    GLOBAL = "global"
    PROCESS_INSTANCE = "processInstance"


# ===========================
# Supporting value types
# ===========================


class ExtensionElement(BaseModel):
    """Vendor extension element attached to a BPMN element."""

    name: str = Field(..., description="Extension element local name")
    namespace: Optional[str] = Field(None, description="Namespace URI")
    namespace_prefix: Optional[str] = Field(None, description="Namespace prefix")
    element_text: Optional[str] = Field(None, description="Text content")
    attributes: Dict[str, str] = Field(default_factory=dict, description="Attribute values by name")

    def get_attribute_value(self, name: str) -> Optional[str]:
        return self.attributes.get(name)


class FieldExtension(BaseModel):
    """Injected field on a delegate or listener."""

    field_name: Optional[str] = Field(None, description="Field name")
    string_value: Optional[str] = Field(None, description="Literal value")
    expression: Optional[str] = Field(None, description="Expression value")


class FlowableListener(BaseModel):
    """Execution or task listener."""

    event: Optional[str] = Field(None, description="Lifecycle event")
    implementation_type: Optional[ImplementationType] = Field(None, description="Implementation kind")
    implementation: Optional[str] = Field(None, description="Class name or expression")
    field_extensions: List[FieldExtension] = Field(default_factory=list, description="Injected fields")


class EventListener(BaseModel):
    """Process-level engine event listener."""

    events: Optional[str] = Field(None, description="Comma-separated engine event types")
    implementation_type: Optional[ImplementationType] = Field(None, description="Implementation kind")
    implementation: Optional[str] = Field(None, description="Implementation or rethrow target")
    entity_type: Optional[str] = Field(None, description="Entity type filter")


class FormValue(BaseModel):
    """Enumeration option of a form property."""

    id: Optional[str] = None
    name: Optional[str] = None


class FormProperty(BaseModel):
    """Form property declared on a start event or user task."""

    id: str = Field(..., description="Property id")
    name: Optional[str] = None
    type: Optional[str] = None
    expression: Optional[str] = None
    variable: Optional[str] = None
    default_expression: Optional[str] = None
    date_pattern: Optional[str] = None
    form_values: List[FormValue] = Field(default_factory=list)
    required: bool = False
    readable: bool = True
    writeable: bool = True


class IOParameter(BaseModel):
    """Variable mapping between a caller and a callee or event payload."""

    source: Optional[str] = None
    source_expression: Optional[str] = None
    target: Optional[str] = None
    target_expression: Optional[str] = None
    attributes: Dict[str, str] = Field(default_factory=dict, description="Extra attributes such as sourceType")

    def get_attribute_value(self, name: str) -> Optional[str]:
        return self.attributes.get(name)


class MapExceptionEntry(BaseModel):
    """Mapping from a delegate exception to a BPMN error code."""

    error_code: Optional[str] = None
    class_name: Optional[str] = None
    and_children: bool = False


class AggregationVariable(BaseModel):
    """Single variable copied by a multi-instance aggregation."""

    source: Optional[str] = None
    source_expression: Optional[str] = None
    target: Optional[str] = None
    target_expression: Optional[str] = None


class VariableAggregationDefinition(BaseModel):
    """Aggregation of multi-instance variables into one target."""

    target: Optional[str] = None
    target_expression: Optional[str] = None
    implementation_type: Optional[ImplementationType] = None
    implementation: Optional[str] = None
    store_as_transient_variable: bool = False
    create_overview_variable: bool = False
    definitions: List[AggregationVariable] = Field(default_factory=list)


class VariableAggregationDefinitions(BaseModel):
    aggregations: List[VariableAggregationDefinition] = Field(default_factory=list)


class MultiInstanceLoopCharacteristics(BaseModel):
    """Multi-instance configuration of an activity."""

    sequential: bool = Field(False, description="Sequential instead of parallel instances")
    loop_cardinality: Optional[str] = None
    input_data_item: Optional[str] = Field(None, description="Collection expression")
    element_variable: Optional[str] = None
    element_index_variable: Optional[str] = None
    completion_condition: Optional[str] = None
    aggregations: Optional[VariableAggregationDefinitions] = None


class GraphicInfo(BaseModel):
    """Absolute position and size of a shape, or a single waypoint."""

    x: float = Field(0.0, description="X coordinate")
    y: float = Field(0.0, description="Y coordinate")
    width: float = Field(0.0, description="Width")
    height: float = Field(0.0, description="Height")
    expanded: Optional[bool] = Field(None, description="Expanded state of a subprocess shape")


class DiEdge(BaseModel):
    """Docking anchors of a connector relative to its endpoints."""

    waypoints: List[GraphicInfo] = Field(default_factory=list)
    source_docker: Optional[GraphicInfo] = None
    target_docker: Optional[GraphicInfo] = None


# ===========================
# Event definitions
# ===========================


class BaseEventDefinition(BaseModel):
    id: Optional[str] = None


class TimerEventDefinition(BaseEventDefinition):
    kind: Literal["timer"] = "timer"
    time_date: Optional[str] = None
    time_cycle: Optional[str] = None
    time_duration: Optional[str] = None
    end_date: Optional[str] = None
    calendar_name: Optional[str] = None


class MessageEventDefinition(BaseEventDefinition):
    kind: Literal["message"] = "message"
    message_ref: Optional[str] = None
    message_expression: Optional[str] = None


class SignalEventDefinition(BaseEventDefinition):
    kind: Literal["signal"] = "signal"
    signal_ref: Optional[str] = None
    signal_expression: Optional[str] = None
    is_async: bool = False


class ConditionalEventDefinition(BaseEventDefinition):
    kind: Literal["conditional"] = "conditional"
    condition_expression: Optional[str] = None


class ErrorEventDefinition(BaseEventDefinition):
    kind: Literal["error"] = "error"
    error_code: Optional[str] = None
    error_variable_name: Optional[str] = None
    error_variable_transient: Optional[bool] = None
    error_variable_local_scope: Optional[bool] = None


class EscalationEventDefinition(BaseEventDefinition):
    kind: Literal["escalation"] = "escalation"
    escalation_code: Optional[str] = None


class CancelEventDefinition(BaseEventDefinition):
    kind: Literal["cancel"] = "cancel"


class CompensateEventDefinition(BaseEventDefinition):
    kind: Literal["compensate"] = "compensate"
    activity_ref: Optional[str] = None


class TerminateEventDefinition(BaseEventDefinition):
    kind: Literal["terminate"] = "terminate"
    terminate_all: bool = False
    terminate_multi_instance: bool = False


class VariableListenerEventDefinition(BaseEventDefinition):
    kind: Literal["variableListener"] = "variableListener"
    variable_name: Optional[str] = None
    variable_change_type: Optional[str] = None


EventDefinition = Annotated[
    Union[
        TimerEventDefinition,
        MessageEventDefinition,
        SignalEventDefinition,
        ConditionalEventDefinition,
        ErrorEventDefinition,
        EscalationEventDefinition,
        CancelEventDefinition,
        CompensateEventDefinition,
        TerminateEventDefinition,
        VariableListenerEventDefinition,
    ],
    Field(discriminator="kind"),
]


# ===========================
# Base elements
# ===========================


class BaseElement(BaseModel):
    """Base class for all process graph elements."""

    id: Optional[str] = Field(None, description="Unique element ID")
    extension_elements: Dict[str, List[ExtensionElement]] = Field(
        default_factory=dict, description="Extension elements keyed by name"
    )
    attributes: Dict[str, str] = Field(default_factory=dict, description="Extra XML attributes")

    model_config = ConfigDict(use_enum_values=False)

    @computed_field  # type: ignore[misc]
    @property
    def element_type(self) -> str:
        return type(self).__name__

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def add_extension_element(self, element: ExtensionElement) -> None:
        self.extension_elements.setdefault(element.name, []).append(element)

    def get_extension_value(self, name: str) -> Optional[str]:
        """Text of the first extension element with this name, if any."""
        elements = self.extension_elements.get(name)
        if elements:
            return elements[0].element_text
        return None


class FlowElement(BaseElement):
    """Element that can live inside a process or subprocess."""

    name: Optional[str] = Field(None, description="Element name/label")
    documentation: Optional[str] = Field(None, description="Element documentation")
    execution_listeners: List[FlowableListener] = Field(default_factory=list)


class Artifact(BaseElement):
    """Non-flow element attached to a container."""


class ValuedDataObject(FlowElement):
    """Typed data object declared on a process or subprocess."""

    item_subject_ref: Optional[str] = Field(None, description="Structure reference such as xsd:string")
    value: Optional[str] = None

    @property
    def data_type(self) -> Optional[str]:
        if not self.item_subject_ref:
            return None
        return self.item_subject_ref.split(":", 1)[-1]


class FlowElementsContainer(BaseModel):
    """Mixin for elements that own flow elements and artifacts."""

    flow_elements: List[SerializeAsAny[FlowElement]] = Field(default_factory=list)
    artifacts: List[SerializeAsAny[Artifact]] = Field(default_factory=list)
    data_objects: List[ValuedDataObject] = Field(default_factory=list)

    def add_flow_element(self, element: FlowElement) -> None:
        self.flow_elements.append(element)

    def remove_flow_element(self, element_id: str) -> None:
        self.flow_elements = [el for el in self.flow_elements if el.id != element_id]

    def get_flow_element(self, element_id: Optional[str], recursive: bool = True) -> Optional[FlowElement]:
        """Find a flow element by id, descending into nested containers."""
        if not element_id:
            return None
        for element in self.flow_elements:
            if element.id == element_id:
                return element
        if recursive:
            for element in self.flow_elements:
                if isinstance(element, FlowElementsContainer):
                    found = element.get_flow_element(element_id, recursive=True)
                    if found is not None:
                        return found
        return None

    def get_flow_element_recursive(self, element_id: Optional[str]) -> Optional[FlowElement]:
        return self.get_flow_element(element_id, recursive=True)

    def iter_flow_elements(self) -> Iterator[FlowElement]:
        """Depth-first iteration over all flow elements."""
        for element in self.flow_elements:
            yield element
            if isinstance(element, FlowElementsContainer):
                yield from element.iter_flow_elements()

    def find_flow_elements_of_type(self, element_type: Type[E], recursive: bool = True) -> List[E]:
        source = self.iter_flow_elements() if recursive else iter(self.flow_elements)
        return [el for el in source if isinstance(el, element_type)]

    def add_artifact(self, artifact: Artifact) -> None:
        self.artifacts.append(artifact)

    def remove_artifact(self, artifact_id: str) -> None:
        self.artifacts = [a for a in self.artifacts if a.id != artifact_id]

    def get_artifact(self, artifact_id: Optional[str]) -> Optional[Artifact]:
        for artifact in self.artifacts:
            if artifact.id == artifact_id:
                return artifact
        for element in self.flow_elements:
            if isinstance(element, FlowElementsContainer):
                found = element.get_artifact(artifact_id)
                if found is not None:
                    return found
        return None


# ===========================
# Flows and artifacts
# ===========================


class SequenceFlow(FlowElement):
    """Directed control-flow edge between two flow nodes."""

    source_ref: Optional[str] = Field(None, description="Source element ID")
    target_ref: Optional[str] = Field(None, description="Target element ID")
    condition_expression: Optional[str] = None
    skip_expression: Optional[str] = None


class MessageFlow(BaseElement):
    """Message edge between pools or elements in different pools."""

    name: Optional[str] = None
    source_ref: Optional[str] = None
    target_ref: Optional[str] = None
    message_ref: Optional[str] = None


class Association(Artifact):
    source_ref: Optional[str] = None
    target_ref: Optional[str] = None
    association_direction: Optional[str] = None


class TextAnnotation(Artifact):
    text: Optional[str] = None
    text_format: Optional[str] = None


class DataAssociation(BaseElement):
    """Data flow between an activity and a data store or object."""

    source_ref: Optional[str] = None
    target_ref: Optional[str] = None


class DataStoreReference(FlowElement):
    data_store_ref: Optional[str] = None
    item_subject_ref: Optional[str] = None


# ===========================
# Flow nodes
# ===========================


class FlowNode(FlowElement):
    """Element that sequence flows can connect to."""

    asynchronous: bool = False
    not_exclusive: bool = False
    incoming_flows: List[SequenceFlow] = Field(default_factory=list, exclude=True, repr=False)
    outgoing_flows: List[SequenceFlow] = Field(default_factory=list, exclude=True, repr=False)


class Event(FlowNode):
    event_definitions: List[EventDefinition] = Field(default_factory=list)


class StartEvent(Event):
    initiator: Optional[str] = None
    form_key: Optional[str] = None
    form_field_validation: Optional[str] = None
    interrupting: bool = True
    form_properties: List[FormProperty] = Field(default_factory=list)


class EndEvent(Event):
    pass


class IntermediateCatchEvent(Event):
    pass


class ThrowEvent(Event):
    pass


class Gateway(FlowNode):
    default_flow: Optional[str] = None


class ExclusiveGateway(Gateway):
    pass


class InclusiveGateway(Gateway):
    pass


class ParallelGateway(Gateway):
    pass


class EventGateway(Gateway):
    pass


class Activity(FlowNode):
    """Flow node that performs work."""

    default_flow: Optional[str] = None
    for_compensation: bool = False
    loop_characteristics: Optional[MultiInstanceLoopCharacteristics] = None
    boundary_events: List["BoundaryEvent"] = Field(default_factory=list, exclude=True, repr=False)
    data_input_associations: List[DataAssociation] = Field(default_factory=list)
    data_output_associations: List[DataAssociation] = Field(default_factory=list)
    failed_job_retry_time_cycle_value: Optional[str] = None


class BoundaryEvent(Event):
    """Event attached to the border of an activity."""

    attached_to_ref: Optional[Activity] = Field(None, exclude=True, repr=False)
    attached_to_ref_id: Optional[str] = Field(None, description="Host activity ID")
    cancel_activity: bool = True


Activity.model_rebuild()


class Task(Activity):
    pass


class UserTask(Task):
    assignee: Optional[str] = None
    owner: Optional[str] = None
    priority: Optional[str] = None
    form_key: Optional[str] = None
    form_field_validation: Optional[str] = None
    due_date: Optional[str] = None
    business_calendar_name: Optional[str] = None
    category: Optional[str] = None
    task_id_variable_name: Optional[str] = None
    skip_expression: Optional[str] = None
    candidate_users: List[str] = Field(default_factory=list)
    candidate_groups: List[str] = Field(default_factory=list)
    form_properties: List[FormProperty] = Field(default_factory=list)
    task_listeners: List[FlowableListener] = Field(default_factory=list)


class ServiceTask(Task):
    """Service task; ``type`` selects a specialised editor stencil."""

    type: Optional[str] = Field(None, description="Sub-type such as mail, http, shell or dmn")
    implementation_type: Optional[ImplementationType] = None
    implementation: Optional[str] = None
    result_variable_name: Optional[str] = None
    triggerable: bool = False
    use_local_scope_for_result_variable: bool = False
    store_result_variable_as_transient: bool = False
    skip_expression: Optional[str] = None
    field_extensions: List[FieldExtension] = Field(default_factory=list)
    map_exceptions: List[MapExceptionEntry] = Field(default_factory=list)

    def get_field_value(self, field_name: str) -> Optional[str]:
        """String value or expression of an injected field."""
        for field in self.field_extensions:
            if field.field_name == field_name:
                return field.string_value or field.expression
        return None


class HttpServiceTask(ServiceTask):
    parallel_in_same_transaction: Optional[bool] = None


class SendEventServiceTask(ServiceTask):
    event_type: Optional[str] = None
    trigger_event_type: Optional[str] = None
    send_synchronously: bool = False
    event_in_parameters: List[IOParameter] = Field(default_factory=list)
    event_out_parameters: List[IOParameter] = Field(default_factory=list)


class ExternalWorkerServiceTask(ServiceTask):
    topic: Optional[str] = None


class ScriptTask(Task):
    script_format: Optional[str] = None
    script: Optional[str] = None
    auto_store_variables: bool = False
    skip_expression: Optional[str] = None


class BusinessRuleTask(Task):
    class_name: Optional[str] = None
    input_variables: List[str] = Field(default_factory=list)
    result_variable_name: Optional[str] = None
    rule_names: List[str] = Field(default_factory=list)
    exclude: bool = False


class ManualTask(Task):
    pass


class SendTask(Task):
    pass


class ReceiveTask(Task):
    pass


class CallActivity(Activity):
    called_element: Optional[str] = None
    called_element_type: Optional[str] = None
    inherit_variables: bool = False
    same_deployment: bool = False
    process_instance_name: Optional[str] = None
    business_key: Optional[str] = None
    inherit_business_key: bool = False
    use_local_scope_for_out_parameters: bool = False
    complete_async: bool = False
    fallback_to_default_tenant: Optional[bool] = None
    process_instance_id_variable_name: Optional[str] = None
    in_parameters: List[IOParameter] = Field(default_factory=list)
    out_parameters: List[IOParameter] = Field(default_factory=list)


class SubProcess(Activity, FlowElementsContainer):
    """Embedded subprocess owning its own flow elements."""


class Transaction(SubProcess):
    pass


class EventSubProcess(SubProcess):
    pass


class AdhocSubProcess(SubProcess):
    completion_condition: Optional[str] = None
    ordering: Optional[str] = None
    cancel_remaining_instances: bool = True


# ===========================
# Processes and collaboration
# ===========================


class Process(BaseElement, FlowElementsContainer):
    """Top-level executable process."""

    name: Optional[str] = None
    documentation: Optional[str] = None
    executable: bool = True
    candidate_starter_users: List[str] = Field(default_factory=list)
    candidate_starter_groups: List[str] = Field(default_factory=list)
    execution_listeners: List[FlowableListener] = Field(default_factory=list)
    event_listeners: List[EventListener] = Field(default_factory=list)
    lanes: List["Lane"] = Field(default_factory=list)
    enable_eager_execution_tree_fetching: bool = False


class Lane(BaseElement):
    """Lane inside a pool; membership is recorded by element id."""

    name: Optional[str] = None
    flow_references: List[str] = Field(default_factory=list)
    parent_process: Optional[Process] = Field(None, exclude=True, repr=False)


Process.model_rebuild()


class Pool(BaseElement):
    name: Optional[str] = None
    process_ref: Optional[str] = None
    executable: bool = True


class Signal(BaseModel):
    id: str
    name: Optional[str] = None
    scope: Optional[SignalScope] = None


class Message(BaseModel):
    id: str
    name: Optional[str] = None
    item_ref: Optional[str] = None


class Escalation(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    escalation_code: Optional[str] = None


class BpmnModel(BaseModel):
    """Complete process graph with diagram interchange data."""

    processes: List[Process] = Field(default_factory=list)
    pools: List[Pool] = Field(default_factory=list)
    signals: List[Signal] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list)
    escalations: List[Escalation] = Field(default_factory=list)
    message_flows: Dict[str, MessageFlow] = Field(default_factory=dict)
    target_namespace: Optional[str] = None
    location_map: Dict[str, GraphicInfo] = Field(default_factory=dict, description="Shape bounds by element ID")
    flow_location_map: Dict[str, List[GraphicInfo]] = Field(
        default_factory=dict, description="Waypoints by connector ID"
    )
    edge_info_map: Dict[str, DiEdge] = Field(default_factory=dict)

    @property
    def main_process(self) -> Optional[Process]:
        if self.pools:
            process = self.get_process(self.pools[0].id)
            if process is not None:
                return process
        return self.processes[0] if self.processes else None

    def get_pool(self, pool_id: Optional[str]) -> Optional[Pool]:
        for pool in self.pools:
            if pool.id == pool_id:
                return pool
        return None

    def get_process(self, pool_or_process_id: Optional[str]) -> Optional[Process]:
        """Resolve a process by the id of its pool, or by its own id."""
        pool = self.get_pool(pool_or_process_id)
        wanted = pool.process_ref if pool is not None else pool_or_process_id
        for process in self.processes:
            if process.id == wanted:
                return process
        return None

    def add_process(self, process: Process) -> None:
        self.processes.append(process)

    def get_flow_element(self, element_id: Optional[str]) -> Optional[FlowElement]:
        for process in self.processes:
            element = process.get_flow_element(element_id)
            if element is not None:
                return element
        return None

    def get_artifact(self, artifact_id: Optional[str]) -> Optional[Artifact]:
        for process in self.processes:
            artifact = process.get_artifact(artifact_id)
            if artifact is not None:
                return artifact
        return None

    def get_graphic_info(self, element_id: Optional[str]) -> Optional[GraphicInfo]:
        if element_id is None:
            return None
        return self.location_map.get(element_id)

    def add_graphic_info(self, element_id: str, graphic_info: GraphicInfo) -> None:
        self.location_map[element_id] = graphic_info

    def get_flow_location_graphic_info(self, flow_id: Optional[str]) -> List[GraphicInfo]:
        if flow_id is None:
            return []
        return self.flow_location_map.get(flow_id, [])

    def add_flow_graphic_info_list(self, flow_id: str, graphic_infos: List[GraphicInfo]) -> None:
        self.flow_location_map[flow_id] = graphic_infos

    def get_signal(self, signal_id: Optional[str]) -> Optional[Signal]:
        for signal in self.signals:
            if signal.id == signal_id:
                return signal
        return None

    def add_signal(self, signal: Signal) -> None:
        if self.get_signal(signal.id) is None:
            self.signals.append(signal)

    def get_message(self, message_id: Optional[str]) -> Optional[Message]:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None

    def add_message(self, message: Message) -> None:
        if self.get_message(message.id) is None:
            self.messages.append(message)

    def add_escalation(self, escalation: Escalation) -> None:
        self.escalations.append(escalation)

    def add_message_flow(self, message_flow: MessageFlow) -> None:
        if message_flow.id is not None:
            self.message_flows[message_flow.id] = message_flow


Element = Union[FlowElement, Artifact]
ParentElement = Union[Process, SubProcess, Lane]

