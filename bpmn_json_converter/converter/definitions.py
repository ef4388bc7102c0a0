"""
Shared Property Schemas

Readers and writers for the structured properties shared by several element
families: listeners, event listeners, form properties, event definitions,
event-registry settings, field extensions, exception mappings, root-level
messages, signals and escalations, and data properties.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from bpmn_json_converter.converter.constants import (
    EDITOR_PROPERTIES_GENERAL_ITEMS,
    FLOWABLE_NAMESPACE,
    FLOWABLE_NAMESPACE_PREFIX,
    PROPERTY_ASYNCHRONOUS,
    PROPERTY_CALENDAR_NAME,
    PROPERTY_COMPENSATION_ACTIVITY_REF,
    PROPERTY_CONDITIONAL_EVENT_CONDITION,
    PROPERTY_DATA_ID,
    PROPERTY_DATA_NAME,
    PROPERTY_DATA_PROPERTIES,
    PROPERTY_DATA_TYPE,
    PROPERTY_DATA_VALUE,
    PROPERTY_ERROR_VARIABLE_LOCAL_SCOPE,
    PROPERTY_ERROR_VARIABLE_NAME,
    PROPERTY_ERROR_VARIABLE_TRANSIENT,
    PROPERTY_ERRORREF,
    PROPERTY_ESCALATION_DEFINITION_ID,
    PROPERTY_ESCALATION_DEFINITION_NAME,
    PROPERTY_ESCALATION_DEFINITIONS,
    PROPERTY_ESCALATIONREF,
    PROPERTY_EVENT_LISTENERS,
    PROPERTY_EVENT_REGISTRY_CHANNEL_DESTINATION,
    PROPERTY_EVENT_REGISTRY_CHANNEL_KEY,
    PROPERTY_EVENT_REGISTRY_CHANNEL_NAME,
    PROPERTY_EVENT_REGISTRY_CHANNEL_TYPE,
    PROPERTY_EVENT_REGISTRY_CORRELATION_PARAMETERS,
    PROPERTY_EVENT_REGISTRY_CORRELATIONNAME,
    PROPERTY_EVENT_REGISTRY_CORRELATIONTYPE,
    PROPERTY_EVENT_REGISTRY_CORRELATIONVALUE,
    PROPERTY_EVENT_REGISTRY_EVENT_KEY,
    PROPERTY_EVENT_REGISTRY_EVENT_NAME,
    PROPERTY_EVENT_REGISTRY_IN_PARAMETERS,
    PROPERTY_EVENT_REGISTRY_KEY_DETECTION_FIXED_VALUE,
    PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_FIELD,
    PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_POINTER,
    PROPERTY_EVENT_REGISTRY_OUT_PARAMETERS,
    PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME,
    PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE,
    PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME,
    PROPERTY_EVENTLISTENER_CLASS_NAME,
    PROPERTY_EVENTLISTENER_DELEGATE_EXPRESSION,
    PROPERTY_EVENTLISTENER_ENTITY_TYPE,
    PROPERTY_EVENTLISTENER_ERROR_CODE,
    PROPERTY_EVENTLISTENER_EVENT,
    PROPERTY_EVENTLISTENER_EVENTS,
    PROPERTY_EVENTLISTENER_IMPLEMENTATION,
    PROPERTY_EVENTLISTENER_MESSAGE_NAME,
    PROPERTY_EVENTLISTENER_RETHROW_EVENT,
    PROPERTY_EVENTLISTENER_RETHROW_TYPE,
    PROPERTY_EVENTLISTENER_SIGNAL_NAME,
    PROPERTY_EVENTLISTENER_VALUE,
    PROPERTY_EXECUTION_LISTENERS,
    PROPERTY_FIELD_EXPRESSION,
    PROPERTY_FIELD_NAME,
    PROPERTY_FIELD_STRING,
    PROPERTY_FIELD_STRING_VALUE,
    PROPERTY_FORMKEY,
    PROPERTY_FORM_DATE_PATTERN,
    PROPERTY_FORM_DEFAULT,
    PROPERTY_FORM_ENUM_VALUES,
    PROPERTY_FORM_ENUM_VALUES_ID,
    PROPERTY_FORM_ENUM_VALUES_NAME,
    PROPERTY_FORM_EXPRESSION,
    PROPERTY_FORM_ID,
    PROPERTY_FORM_NAME,
    PROPERTY_FORM_PROPERTIES,
    PROPERTY_FORM_REFERENCE,
    PROPERTY_FORM_READABLE,
    PROPERTY_FORM_REQUIRED,
    PROPERTY_FORM_TYPE,
    PROPERTY_FORM_VARIABLE,
    PROPERTY_FORM_WRITABLE,
    PROPERTY_LISTENER_CLASS_NAME,
    PROPERTY_LISTENER_DELEGATE_EXPRESSION,
    PROPERTY_LISTENER_EVENT,
    PROPERTY_LISTENER_EXPRESSION,
    PROPERTY_LISTENER_FIELDS,
    PROPERTY_MESSAGE_DEFINITION_ID,
    PROPERTY_MESSAGE_DEFINITION_ITEM_REF,
    PROPERTY_MESSAGE_DEFINITION_NAME,
    PROPERTY_MESSAGE_DEFINITIONS,
    PROPERTY_MESSAGE_ID,
    PROPERTY_MESSAGE_ITEM_REF,
    PROPERTY_MESSAGE_NAME,
    PROPERTY_MESSAGEEXPRESSION,
    PROPERTY_MESSAGEREF,
    PROPERTY_MESSAGES,
    PROPERTY_SERVICETASK_EXCEPTION_CHILDREN,
    PROPERTY_SERVICETASK_EXCEPTION_CLASS,
    PROPERTY_SERVICETASK_EXCEPTION_CODE,
    PROPERTY_SERVICETASK_EXCEPTIONS,
    PROPERTY_SERVICETASK_FIELD_EXPRESSION,
    PROPERTY_SERVICETASK_FIELD_NAME,
    PROPERTY_SERVICETASK_FIELD_STRING,
    PROPERTY_SERVICETASK_FIELD_STRING_VALUE,
    PROPERTY_SERVICETASK_FIELDS,
    PROPERTY_SIGNAL_DEFINITION_ID,
    PROPERTY_SIGNAL_DEFINITION_NAME,
    PROPERTY_SIGNAL_DEFINITION_SCOPE,
    PROPERTY_SIGNAL_DEFINITIONS,
    PROPERTY_SIGNALEXPRESSION,
    PROPERTY_SIGNALREF,
    PROPERTY_TASK_LISTENERS,
    PROPERTY_TERMINATE_ALL,
    PROPERTY_TERMINATE_MULTI_INSTANCE,
    PROPERTY_TIMER_CYCLE,
    PROPERTY_TIMER_CYCLE_END_DATE,
    PROPERTY_TIMER_DATE,
    PROPERTY_TIMER_DURATION,
    PROPERTY_VARIABLE_LISTENER_VARIABLE_CHANGE_TYPE,
    PROPERTY_VARIABLE_LISTENER_VARIABLE_NAME,
    VALUE_CORRELATION_PARAMETERS,
    VALUE_EXCEPTIONS,
    VALUE_EXECUTION_LISTENERS,
    VALUE_FIELDS,
    VALUE_FORM_PROPERTIES,
    VALUE_IN_PARAMETERS,
    VALUE_OUT_PARAMETERS,
    VALUE_TASK_LISTENERS,
)
from bpmn_json_converter.converter.properties import (
    JsonNode,
    as_text,
    get_property,
    get_property_value_as_boolean,
    get_property_value_as_string,
    get_structured_property,
    get_value_as_boolean,
    get_value_as_string,
    validate_if_node_is_textual,
)
from bpmn_json_converter.models.bpmn_elements import (
    BaseElement,
    BpmnModel,
    CompensateEventDefinition,
    ConditionalEventDefinition,
    ErrorEventDefinition,
    Escalation,
    EscalationEventDefinition,
    Event,
    EventListener,
    ExtensionElement,
    FieldExtension,
    FlowableListener,
    FormProperty,
    FormValue,
    ImplementationType,
    IOParameter,
    MapExceptionEntry,
    Message,
    MessageEventDefinition,
    Process,
    Signal,
    SignalEventDefinition,
    SignalScope,
    TerminateEventDefinition,
    TimerEventDefinition,
    UserTask,
    ValuedDataObject,
    VariableListenerEventDefinition,
)

logger = logging.getLogger(__name__)

DATA_PROPERTY_TYPES = ("string", "int", "long", "double", "boolean", "datetime")

EXPRESSION_MARKERS = ("${", "#{")


def is_expression(value: Optional[str]) -> bool:
    """True for values such as ``${var}`` or ``#{bean.call()}``."""
    if not value:
        return False
    return any(marker in value for marker in EXPRESSION_MARKERS) and "}" in value


def set_property_value(name: str, value: Optional[str], properties: JsonNode) -> None:
    """Write a property only when the value is non-empty."""
    if value:
        properties[name] = value


def _items(node: Any, key: str) -> List[Any]:
    node = validate_if_node_is_textual(node)
    if not isinstance(node, dict):
        return []
    items = validate_if_node_is_textual(node.get(key))
    if not isinstance(items, list):
        return []
    return items


# ===========================
# Extension elements
# ===========================


def add_flowable_extension_element(name: str, element: BaseElement) -> ExtensionElement:
    extension = ExtensionElement(
        name=name,
        namespace=FLOWABLE_NAMESPACE,
        namespace_prefix=FLOWABLE_NAMESPACE_PREFIX,
    )
    element.add_extension_element(extension)
    return extension


def add_flowable_extension_element_with_value(
    name: str, value: Optional[str], element: BaseElement
) -> Optional[ExtensionElement]:
    if not value:
        return None
    extension = add_flowable_extension_element(name, element)
    extension.element_text = value
    return extension


def get_extension_value(name: str, element: BaseElement) -> Optional[str]:
    return element.get_extension_value(name)


# ===========================
# Execution and task listeners
# ===========================


def convert_listeners_to_json(
    listeners: Sequence[FlowableListener], is_execution_listener: bool, properties: JsonNode
) -> None:
    """Write execution or task listeners as ``{executionListeners|taskListeners: [...]}``."""
    if is_execution_listener:
        property_name, value_name = PROPERTY_EXECUTION_LISTENERS, VALUE_EXECUTION_LISTENERS
    else:
        property_name, value_name = PROPERTY_TASK_LISTENERS, VALUE_TASK_LISTENERS

    items = []
    for listener in listeners:
        item: JsonNode = {PROPERTY_LISTENER_EVENT: listener.event}
        if listener.implementation_type == ImplementationType.CLASS:
            item[PROPERTY_LISTENER_CLASS_NAME] = listener.implementation
        elif listener.implementation_type == ImplementationType.EXPRESSION:
            item[PROPERTY_LISTENER_EXPRESSION] = listener.implementation
        elif listener.implementation_type == ImplementationType.DELEGATE_EXPRESSION:
            item[PROPERTY_LISTENER_DELEGATE_EXPRESSION] = listener.implementation

        if listener.field_extensions:
            fields = []
            for field in listener.field_extensions:
                field_node: JsonNode = {PROPERTY_FIELD_NAME: field.field_name}
                set_property_value(PROPERTY_FIELD_STRING_VALUE, field.string_value, field_node)
                set_property_value(PROPERTY_FIELD_EXPRESSION, field.expression, field_node)
                fields.append(field_node)
            item[PROPERTY_LISTENER_FIELDS] = fields
        items.append(item)

    properties[property_name] = {value_name: items}


def _parse_listeners(listeners_node: Any) -> List[FlowableListener]:
    listeners = []
    listener_items = validate_if_node_is_textual(listeners_node)
    if not isinstance(listener_items, list):
        return listeners

    for listener_node in listener_items:
        listener_node = validate_if_node_is_textual(listener_node)
        if not isinstance(listener_node, dict):
            continue
        event = get_value_as_string(PROPERTY_LISTENER_EVENT, listener_node)
        if not event:
            continue

        listener = FlowableListener(event=event)
        class_name = get_value_as_string(PROPERTY_LISTENER_CLASS_NAME, listener_node)
        expression = get_value_as_string(PROPERTY_LISTENER_EXPRESSION, listener_node)
        delegate_expression = get_value_as_string(PROPERTY_LISTENER_DELEGATE_EXPRESSION, listener_node)
        if class_name:
            listener.implementation_type = ImplementationType.CLASS
            listener.implementation = class_name
        elif expression:
            listener.implementation_type = ImplementationType.EXPRESSION
            listener.implementation = expression
        elif delegate_expression:
            listener.implementation_type = ImplementationType.DELEGATE_EXPRESSION
            listener.implementation = delegate_expression

        for field_node in listener_node.get(PROPERTY_LISTENER_FIELDS) or []:
            name = get_value_as_string(PROPERTY_FIELD_NAME, field_node)
            if not name:
                continue
            field = FieldExtension(field_name=name)
            field.string_value = get_value_as_string(PROPERTY_FIELD_STRING_VALUE, field_node)
            if not field.string_value:
                field.string_value = get_value_as_string(PROPERTY_FIELD_STRING, field_node)
            if not field.string_value:
                field.expression = get_value_as_string(PROPERTY_FIELD_EXPRESSION, field_node)
            listener.field_extensions.append(field)

        listeners.append(listener)
    return listeners


def convert_json_to_listeners(node: JsonNode, element: Union[BaseElement, Process]) -> None:
    """Read execution listeners, and task listeners for user tasks."""
    execution_listeners = get_property(PROPERTY_EXECUTION_LISTENERS, node)
    if execution_listeners is not None:
        wrapper = validate_if_node_is_textual(execution_listeners)
        if isinstance(wrapper, dict):
            element.execution_listeners.extend(_parse_listeners(wrapper.get(VALUE_EXECUTION_LISTENERS)))

    if isinstance(element, UserTask):
        task_listeners = get_property(PROPERTY_TASK_LISTENERS, node)
        if task_listeners is not None:
            wrapper = validate_if_node_is_textual(task_listeners)
            if isinstance(wrapper, dict):
                element.task_listeners.extend(_parse_listeners(wrapper.get(VALUE_TASK_LISTENERS)))


# ===========================
# Process event listeners
# ===========================


_RETHROW_TYPES = {
    ImplementationType.THROW_ERROR_EVENT: ("error", PROPERTY_EVENTLISTENER_ERROR_CODE, "Rethrow as error"),
    ImplementationType.THROW_MESSAGE_EVENT: ("message", PROPERTY_EVENTLISTENER_MESSAGE_NAME, "Rethrow as message"),
    ImplementationType.THROW_SIGNAL_EVENT: ("signal", PROPERTY_EVENTLISTENER_SIGNAL_NAME, "Rethrow as signal"),
    ImplementationType.THROW_GLOBAL_SIGNAL_EVENT: (
        "globalSignal",
        PROPERTY_EVENTLISTENER_SIGNAL_NAME,
        "Rethrow as signal",
    ),
}


def convert_event_listeners_to_json(listeners: Sequence[EventListener], properties: JsonNode) -> None:
    items = []
    for listener in listeners:
        item: JsonNode = {}
        if listener.events:
            item[PROPERTY_EVENTLISTENER_EVENT] = listener.events
            item[PROPERTY_EVENTLISTENER_EVENTS] = [
                {PROPERTY_EVENTLISTENER_EVENT: event.strip()}
                for event in listener.events.split(",")
                if event.strip()
            ]

        implementation_text = None
        if listener.implementation_type == ImplementationType.CLASS:
            item[PROPERTY_EVENTLISTENER_CLASS_NAME] = listener.implementation
            implementation_text = listener.implementation
        elif listener.implementation_type == ImplementationType.DELEGATE_EXPRESSION:
            item[PROPERTY_EVENTLISTENER_DELEGATE_EXPRESSION] = listener.implementation
            implementation_text = listener.implementation
        elif listener.implementation_type in _RETHROW_TYPES:
            rethrow_type, key, label = _RETHROW_TYPES[listener.implementation_type]
            item[PROPERTY_EVENTLISTENER_RETHROW_EVENT] = True
            item[PROPERTY_EVENTLISTENER_RETHROW_TYPE] = rethrow_type
            item[key] = listener.implementation
            implementation_text = f"{label} {listener.implementation}"

        set_property_value(PROPERTY_EVENTLISTENER_IMPLEMENTATION, implementation_text, item)
        set_property_value(PROPERTY_EVENTLISTENER_ENTITY_TYPE, listener.entity_type, item)
        items.append(item)

    properties[PROPERTY_EVENT_LISTENERS] = {PROPERTY_EVENTLISTENER_VALUE: items}


def parse_event_listeners(listeners_node: Any, process: Process) -> None:
    """Read ``eventListeners`` items; listeners without an implementation are skipped."""
    listener_items = validate_if_node_is_textual(listeners_node)
    if not isinstance(listener_items, list):
        return

    for listener_node in listener_items:
        if not isinstance(listener_node, dict):
            continue
        events = [
            get_value_as_string(PROPERTY_EVENTLISTENER_EVENT, event_node)
            for event_node in listener_node.get(PROPERTY_EVENTLISTENER_EVENTS) or []
        ]
        events = [event for event in events if event]
        if not events:
            continue

        listener = EventListener(events=",".join(events))
        if get_value_as_boolean(PROPERTY_EVENTLISTENER_RETHROW_EVENT, listener_node):
            rethrow_type = (get_value_as_string(PROPERTY_EVENTLISTENER_RETHROW_TYPE, listener_node) or "").lower()
            for implementation_type, (type_name, key, _) in _RETHROW_TYPES.items():
                if rethrow_type == type_name.lower():
                    value = get_value_as_string(key, listener_node)
                    if value:
                        listener.implementation_type = implementation_type
                        listener.implementation = value
                    break
        else:
            class_name = get_value_as_string(PROPERTY_EVENTLISTENER_CLASS_NAME, listener_node)
            delegate_expression = get_value_as_string(PROPERTY_EVENTLISTENER_DELEGATE_EXPRESSION, listener_node)
            if class_name:
                listener.implementation_type = ImplementationType.CLASS
                listener.implementation = class_name
            elif delegate_expression:
                listener.implementation_type = ImplementationType.DELEGATE_EXPRESSION
                listener.implementation = delegate_expression
            listener.entity_type = get_value_as_string(PROPERTY_EVENTLISTENER_ENTITY_TYPE, listener_node) or None

        if not listener.implementation:
            continue
        process.event_listeners.append(listener)


# ===========================
# Root-level definitions
# ===========================


def convert_messages_to_json(messages: Sequence[Message], properties: JsonNode) -> None:
    """Process-level ``messages`` list."""
    properties[PROPERTY_MESSAGES] = [
        {
            PROPERTY_MESSAGE_ID: message.id,
            PROPERTY_MESSAGE_NAME: message.name,
            PROPERTY_MESSAGE_ITEM_REF: message.item_ref,
        }
        for message in messages
    ]


def convert_signal_definitions_to_json(model: BpmnModel, properties: JsonNode) -> None:
    properties[PROPERTY_SIGNAL_DEFINITIONS] = [
        {
            PROPERTY_SIGNAL_DEFINITION_ID: signal.id,
            PROPERTY_SIGNAL_DEFINITION_NAME: signal.name,
            PROPERTY_SIGNAL_DEFINITION_SCOPE: signal.scope.value if signal.scope is not None else None,
        }
        for signal in model.signals
    ]


def convert_message_definitions_to_json(model: BpmnModel, properties: JsonNode) -> None:
    properties[PROPERTY_MESSAGE_DEFINITIONS] = [
        {PROPERTY_MESSAGE_DEFINITION_ID: message.id, PROPERTY_MESSAGE_DEFINITION_NAME: message.name}
        for message in model.messages
    ]


def convert_escalation_definitions_to_json(model: BpmnModel, properties: JsonNode) -> None:
    definitions = []
    for escalation in model.escalations:
        item: JsonNode = {PROPERTY_ESCALATION_DEFINITION_ID: escalation.escalation_code}
        set_property_value(PROPERTY_ESCALATION_DEFINITION_NAME, escalation.name, item)
        definitions.append(item)
    properties[PROPERTY_ESCALATION_DEFINITIONS] = definitions


def convert_json_to_messages(node: JsonNode, model: BpmnModel) -> None:
    """Read ``messagedefinitions`` into the model; entries need an id."""
    messages = get_structured_property(PROPERTY_MESSAGE_DEFINITIONS, node)
    if not isinstance(messages, list):
        return
    for message_node in messages:
        message_id = get_value_as_string(PROPERTY_MESSAGE_DEFINITION_ID, message_node)
        if not message_id:
            continue
        model.add_message(
            Message(
                id=message_id,
                name=get_value_as_string(PROPERTY_MESSAGE_DEFINITION_NAME, message_node) or None,
                item_ref=get_value_as_string(PROPERTY_MESSAGE_DEFINITION_ITEM_REF, message_node) or None,
            )
        )


def convert_json_to_process_messages(node: Any) -> List[Message]:
    """Read the process-level ``messages`` list."""
    messages = []
    message_items = validate_if_node_is_textual(node)
    if not isinstance(message_items, list):
        return messages
    for message_node in message_items:
        message_id = get_value_as_string(PROPERTY_MESSAGE_ID, message_node)
        if not message_id:
            continue
        messages.append(
            Message(
                id=message_id,
                name=get_value_as_string(PROPERTY_MESSAGE_NAME, message_node) or None,
                item_ref=get_value_as_string(PROPERTY_MESSAGE_ITEM_REF, message_node) or None,
            )
        )
    return messages


def convert_json_to_signal_definitions(node: JsonNode, model: BpmnModel) -> None:
    """Read ``signaldefinitions``; entries need both an id and a name."""
    signals = get_structured_property(PROPERTY_SIGNAL_DEFINITIONS, node)
    if not isinstance(signals, list):
        return
    for signal_node in signals:
        signal_id = get_value_as_string(PROPERTY_SIGNAL_DEFINITION_ID, signal_node)
        signal_name = get_value_as_string(PROPERTY_SIGNAL_DEFINITION_NAME, signal_node)
        if not signal_id or not signal_name:
            continue
        scope = (get_value_as_string(PROPERTY_SIGNAL_DEFINITION_SCOPE, signal_node) or "").lower()
        model.add_signal(
            Signal(
                id=signal_id,
                name=signal_name,
                scope=SignalScope.PROCESS_INSTANCE if scope == "processinstance" else SignalScope.GLOBAL,
            )
        )


def convert_json_to_escalation_definitions(node: JsonNode, model: BpmnModel) -> None:
    """Read ``escalationdefinitions``; the id doubles as the escalation code."""
    escalations = get_structured_property(PROPERTY_ESCALATION_DEFINITIONS, node)
    if not isinstance(escalations, list):
        return
    for escalation_node in escalations:
        escalation_id = get_value_as_string(PROPERTY_ESCALATION_DEFINITION_ID, escalation_node)
        escalation_name = get_value_as_string(PROPERTY_ESCALATION_DEFINITION_NAME, escalation_node)
        if not escalation_id or not escalation_name:
            continue
        model.add_escalation(Escalation(id=escalation_id, escalation_code=escalation_id, name=escalation_name))


# ===========================
# Data properties
# ===========================


def convert_json_to_data_properties(node: Any) -> List[ValuedDataObject]:
    """Read ``{items: [...]}`` data properties into typed data objects.

    Unknown types are logged and skipped.
    """
    data_objects: List[ValuedDataObject] = []
    if node is None:
        return data_objects

    inner = node
    if isinstance(node, str) and node:
        inner = validate_if_node_is_textual(node)
    if not isinstance(inner, dict):
        return data_objects

    for data_node in inner.get(EDITOR_PROPERTIES_GENERAL_ITEMS) or []:
        data_id = get_value_as_string(PROPERTY_DATA_ID, data_node)
        if not data_id:
            continue
        data_type = get_value_as_string(PROPERTY_DATA_TYPE, data_node)
        if data_type not in DATA_PROPERTY_TYPES:
            logger.error(f"Error converting {data_id}: unsupported data type {data_type!r}")
            continue

        data_object = ValuedDataObject(
            id=data_id,
            name=get_value_as_string(PROPERTY_DATA_NAME, data_node),
            item_subject_ref=f"xsd:{data_type}",
        )
        value = get_value_as_string(PROPERTY_DATA_VALUE, data_node)
        if value is not None:
            if data_type == "datetime":
                if value.strip():
                    try:
                        datetime.fromisoformat(value.strip())
                        data_object.value = value.strip()
                    except ValueError as e:
                        logger.error(f"Error converting {data_object.name}: {e}")
            else:
                data_object.value = value
        data_objects.append(data_object)
    return data_objects


def convert_data_properties_to_json(data_objects: Sequence[ValuedDataObject], properties: JsonNode) -> None:
    items = []
    for data_object in data_objects:
        items.append(
            {
                PROPERTY_DATA_ID: data_object.id,
                PROPERTY_DATA_NAME: data_object.name,
                PROPERTY_DATA_TYPE: data_object.data_type,
                PROPERTY_DATA_VALUE: "" if data_object.value is None else data_object.value,
            }
        )
    properties[PROPERTY_DATA_PROPERTIES] = {EDITOR_PROPERTIES_GENERAL_ITEMS: items}


# ===========================
# Form properties
# ===========================


def add_form_properties(form_properties: Sequence[FormProperty], properties: JsonNode) -> None:
    if not form_properties:
        return

    items = []
    for form_property in form_properties:
        item: JsonNode = {
            PROPERTY_FORM_ID: form_property.id,
            PROPERTY_FORM_NAME: form_property.name,
            PROPERTY_FORM_TYPE: form_property.type,
            PROPERTY_FORM_EXPRESSION: form_property.expression or None,
            PROPERTY_FORM_VARIABLE: form_property.variable or None,
            PROPERTY_FORM_DEFAULT: form_property.default_expression or None,
        }
        set_property_value(PROPERTY_FORM_DATE_PATTERN, form_property.date_pattern, item)
        if form_property.form_values:
            item[PROPERTY_FORM_ENUM_VALUES] = [
                {PROPERTY_FORM_ENUM_VALUES_NAME: value.name, PROPERTY_FORM_ENUM_VALUES_ID: value.id}
                for value in form_property.form_values
            ]
        item[PROPERTY_FORM_REQUIRED] = form_property.required
        item[PROPERTY_FORM_READABLE] = form_property.readable
        item[PROPERTY_FORM_WRITABLE] = form_property.writeable
        items.append(item)

    properties[PROPERTY_FORM_PROPERTIES] = {VALUE_FORM_PROPERTIES: items}


def convert_json_to_form_properties(node: JsonNode) -> List[FormProperty]:
    form_properties: List[FormProperty] = []
    for form_node in _items(get_property(PROPERTY_FORM_PROPERTIES, node), VALUE_FORM_PROPERTIES):
        form_id = get_value_as_string(PROPERTY_FORM_ID, form_node)
        if not form_id:
            continue
        form_property = FormProperty(
            id=form_id,
            name=get_value_as_string(PROPERTY_FORM_NAME, form_node),
            type=get_value_as_string(PROPERTY_FORM_TYPE, form_node),
            expression=get_value_as_string(PROPERTY_FORM_EXPRESSION, form_node),
            variable=get_value_as_string(PROPERTY_FORM_VARIABLE, form_node),
            default_expression=get_value_as_string(PROPERTY_FORM_DEFAULT, form_node),
        )
        form_type = (form_property.type or "").lower()
        if form_type == "date":
            form_property.date_pattern = get_value_as_string(PROPERTY_FORM_DATE_PATTERN, form_node)
        elif form_type == "enum":
            for enum_node in form_node.get(PROPERTY_FORM_ENUM_VALUES) or []:
                enum_id = get_value_as_string(PROPERTY_FORM_ENUM_VALUES_ID, enum_node)
                enum_name = get_value_as_string(PROPERTY_FORM_ENUM_VALUES_NAME, enum_node)
                enum_value = get_value_as_string("value", enum_node)
                if enum_id is not None and enum_name is not None:
                    form_property.form_values.append(FormValue(id=enum_id, name=enum_name))
                elif enum_value is not None:
                    form_property.form_values.append(FormValue(id=enum_value, name=enum_value))

        form_property.required = get_value_as_boolean(PROPERTY_FORM_REQUIRED, form_node)
        form_property.readable = get_value_as_boolean(PROPERTY_FORM_READABLE, form_node)
        form_property.writeable = get_value_as_boolean(PROPERTY_FORM_WRITABLE, form_node)
        form_properties.append(form_property)
    return form_properties


# ===========================
# Field extensions and exception mappings
# ===========================


def add_field_extensions(extensions: Sequence[FieldExtension], properties: JsonNode) -> None:
    items = []
    for extension in extensions:
        item: JsonNode = {PROPERTY_SERVICETASK_FIELD_NAME: extension.field_name}
        set_property_value(PROPERTY_SERVICETASK_FIELD_STRING_VALUE, extension.string_value, item)
        set_property_value(PROPERTY_SERVICETASK_FIELD_EXPRESSION, extension.expression, item)
        items.append(item)
    properties[PROPERTY_SERVICETASK_FIELDS] = {VALUE_FIELDS: items}


def convert_json_to_field_extensions(node: JsonNode) -> List[FieldExtension]:
    extensions = []
    for field_node in _items(get_property(PROPERTY_SERVICETASK_FIELDS, node), VALUE_FIELDS):
        name = get_value_as_string(PROPERTY_SERVICETASK_FIELD_NAME, field_node)
        if not name:
            continue
        extension = FieldExtension(field_name=name)
        extension.string_value = get_value_as_string(PROPERTY_SERVICETASK_FIELD_STRING_VALUE, field_node)
        if not extension.string_value:
            extension.string_value = get_value_as_string(PROPERTY_SERVICETASK_FIELD_STRING, field_node)
        if not extension.string_value:
            extension.expression = get_value_as_string(PROPERTY_SERVICETASK_FIELD_EXPRESSION, field_node)
        extensions.append(extension)
    return extensions


def add_map_exceptions(exceptions: Sequence[MapExceptionEntry], properties: JsonNode) -> None:
    items = []
    for exception in exceptions:
        item: JsonNode = {}
        set_property_value(PROPERTY_SERVICETASK_EXCEPTION_CLASS, exception.class_name, item)
        set_property_value(PROPERTY_SERVICETASK_EXCEPTION_CODE, exception.error_code, item)
        item[PROPERTY_SERVICETASK_EXCEPTION_CHILDREN] = "true" if exception.and_children else "false"
        items.append(item)
    properties[PROPERTY_SERVICETASK_EXCEPTIONS] = {VALUE_EXCEPTIONS: items}


def convert_json_to_map_exceptions(node: JsonNode) -> List[MapExceptionEntry]:
    exceptions = []
    for exception_node in _items(get_property(PROPERTY_SERVICETASK_EXCEPTIONS, node), VALUE_EXCEPTIONS):
        class_name = get_value_as_string(PROPERTY_SERVICETASK_EXCEPTION_CLASS, exception_node)
        error_code = get_value_as_string(PROPERTY_SERVICETASK_EXCEPTION_CODE, exception_node)
        if not class_name and not error_code:
            continue
        exceptions.append(
            MapExceptionEntry(
                class_name=class_name,
                error_code=error_code,
                and_children=get_value_as_boolean(PROPERTY_SERVICETASK_EXCEPTION_CHILDREN, exception_node),
            )
        )
    return exceptions


# ===========================
# Event-registry parameters
# ===========================


def add_event_out_parameters(extensions: Optional[Sequence[ExtensionElement]], properties: JsonNode) -> None:
    if not extensions:
        return
    properties[PROPERTY_EVENT_REGISTRY_OUT_PARAMETERS] = {
        VALUE_OUT_PARAMETERS: [
            {
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME: extension.get_attribute_value("source"),
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE: extension.get_attribute_value("sourceType"),
                PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME: extension.get_attribute_value("target"),
            }
            for extension in extensions
        ]
    }


def add_event_out_io_parameters(parameters: Sequence[IOParameter], properties: JsonNode) -> None:
    if not parameters:
        return
    properties[PROPERTY_EVENT_REGISTRY_OUT_PARAMETERS] = {
        VALUE_OUT_PARAMETERS: [
            {
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME: parameter.source_expression or parameter.source,
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE: parameter.get_attribute_value("sourceType"),
                PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME: parameter.target_expression or parameter.target,
            }
            for parameter in parameters
        ]
    }


def add_event_in_parameters(extensions: Optional[Sequence[ExtensionElement]], properties: JsonNode) -> None:
    if not extensions:
        return
    properties[PROPERTY_EVENT_REGISTRY_IN_PARAMETERS] = {
        VALUE_IN_PARAMETERS: [
            {
                PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME: extension.get_attribute_value("source"),
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME: extension.get_attribute_value("target"),
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE: extension.get_attribute_value("targetType"),
            }
            for extension in extensions
        ]
    }


def add_event_in_io_parameters(parameters: Sequence[IOParameter], properties: JsonNode) -> None:
    if not parameters:
        return
    properties[PROPERTY_EVENT_REGISTRY_IN_PARAMETERS] = {
        VALUE_IN_PARAMETERS: [
            {
                PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME: parameter.source_expression or parameter.source,
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME: parameter.target,
                PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE: parameter.get_attribute_value("targetType"),
            }
            for parameter in parameters
        ]
    }


def add_event_correlation_parameters(
    extensions: Optional[Sequence[ExtensionElement]], properties: JsonNode
) -> None:
    if not extensions:
        return
    properties[PROPERTY_EVENT_REGISTRY_CORRELATION_PARAMETERS] = {
        VALUE_CORRELATION_PARAMETERS: [
            {
                PROPERTY_EVENT_REGISTRY_CORRELATIONNAME: extension.get_attribute_value("name"),
                PROPERTY_EVENT_REGISTRY_CORRELATIONTYPE: extension.get_attribute_value("type"),
                PROPERTY_EVENT_REGISTRY_CORRELATIONVALUE: extension.get_attribute_value("value"),
            }
            for extension in extensions
        ]
    }


def _parameter_text(name: str, parameter_node: JsonNode) -> str:
    value = parameter_node.get(name) if isinstance(parameter_node, dict) else None
    return as_text(value) if value is not None else ""


def convert_json_to_event_out_parameters(node: JsonNode, element: BaseElement) -> None:
    for parameter_node in _items(get_property(PROPERTY_EVENT_REGISTRY_OUT_PARAMETERS, node), VALUE_OUT_PARAMETERS):
        if get_value_as_string(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME, parameter_node) is None:
            continue
        extension = add_flowable_extension_element("eventOutParameter", element)
        extension.attributes["source"] = _parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME, parameter_node)
        extension.attributes["sourceType"] = _parameter_text(
            PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE, parameter_node
        )
        extension.attributes["target"] = _parameter_text(
            PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME, parameter_node
        )


def convert_json_to_event_in_parameters(node: JsonNode, element: BaseElement) -> None:
    for parameter_node in _items(get_property(PROPERTY_EVENT_REGISTRY_IN_PARAMETERS, node), VALUE_IN_PARAMETERS):
        if get_value_as_string(PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME, parameter_node) is None:
            continue
        extension = add_flowable_extension_element("eventInParameter", element)
        extension.attributes["source"] = _parameter_text(
            PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME, parameter_node
        )
        extension.attributes["target"] = _parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME, parameter_node)
        extension.attributes["targetType"] = _parameter_text(
            PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE, parameter_node
        )


def convert_json_to_out_io_parameters(node: JsonNode) -> List[IOParameter]:
    parameters = []
    for parameter_node in _items(get_property(PROPERTY_EVENT_REGISTRY_OUT_PARAMETERS, node), VALUE_OUT_PARAMETERS):
        if get_value_as_string(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME, parameter_node) is None:
            continue
        variable_name = _parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME, parameter_node)
        parameter = IOParameter(
            source=_parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME, parameter_node),
            attributes={"sourceType": _parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE, parameter_node)},
        )
        if is_expression(variable_name):
            parameter.target_expression = variable_name
        else:
            parameter.target = variable_name
        parameters.append(parameter)
    return parameters


def convert_json_to_in_io_parameters(node: JsonNode) -> List[IOParameter]:
    parameters = []
    for parameter_node in _items(get_property(PROPERTY_EVENT_REGISTRY_IN_PARAMETERS, node), VALUE_IN_PARAMETERS):
        if get_value_as_string(PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME, parameter_node) is None:
            continue
        variable_name = _parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME, parameter_node)
        parameter = IOParameter(
            target=_parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME, parameter_node),
            attributes={"targetType": _parameter_text(PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE, parameter_node)},
        )
        if is_expression(variable_name):
            parameter.source_expression = variable_name
        else:
            parameter.source = variable_name
        parameters.append(parameter)
    return parameters


def convert_json_to_event_correlation_parameters(
    node: JsonNode, extension_name: str, element: BaseElement
) -> None:
    correlation = get_property(PROPERTY_EVENT_REGISTRY_CORRELATION_PARAMETERS, node)
    for parameter_node in _items(correlation, VALUE_CORRELATION_PARAMETERS):
        if get_value_as_string(PROPERTY_EVENT_REGISTRY_CORRELATIONNAME, parameter_node) is None:
            continue
        extension = add_flowable_extension_element(extension_name, element)
        extension.attributes["name"] = _parameter_text(PROPERTY_EVENT_REGISTRY_CORRELATIONNAME, parameter_node)
        extension.attributes["type"] = _parameter_text(PROPERTY_EVENT_REGISTRY_CORRELATIONTYPE, parameter_node)
        extension.attributes["value"] = _parameter_text(PROPERTY_EVENT_REGISTRY_CORRELATIONVALUE, parameter_node)


_KEY_DETECTION_PROPERTIES = (
    ("fixedValue", PROPERTY_EVENT_REGISTRY_KEY_DETECTION_FIXED_VALUE),
    ("jsonField", PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_FIELD),
    ("jsonPointer", PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_POINTER),
)

_CHANNEL_PROPERTIES = (
    ("channelKey", PROPERTY_EVENT_REGISTRY_CHANNEL_KEY),
    ("channelName", PROPERTY_EVENT_REGISTRY_CHANNEL_NAME),
    ("channelType", PROPERTY_EVENT_REGISTRY_CHANNEL_TYPE),
    ("channelDestination", PROPERTY_EVENT_REGISTRY_CHANNEL_DESTINATION),
)


def add_receive_event_extension_elements(node: JsonNode, element: BaseElement) -> None:
    """Store event-registry settings of a shape as flowable extension elements."""
    event_key = get_property_value_as_string(PROPERTY_EVENT_REGISTRY_EVENT_KEY, node)
    if not event_key:
        return

    add_flowable_extension_element_with_value("eventType", event_key, element)
    add_flowable_extension_element_with_value(
        "eventName", get_property_value_as_string(PROPERTY_EVENT_REGISTRY_EVENT_NAME, node), element
    )
    convert_json_to_event_out_parameters(node, element)
    convert_json_to_event_correlation_parameters(node, "eventCorrelationParameter", element)

    for extension_name, property_name in _CHANNEL_PROPERTIES:
        add_flowable_extension_element_with_value(
            extension_name, get_property_value_as_string(property_name, node), element
        )

    for detection_type, property_name in _KEY_DETECTION_PROPERTIES:
        value = get_property_value_as_string(property_name, node)
        if value:
            add_flowable_extension_element_with_value("keyDetectionType", detection_type, element)
            add_flowable_extension_element_with_value("keyDetectionValue", value, element)
            break


def add_event_registry_properties(element: BaseElement, properties: JsonNode) -> None:
    """Inverse of :func:`add_receive_event_extension_elements`."""
    event_type = get_extension_value("eventType", element)
    if not event_type:
        return

    set_property_value(PROPERTY_EVENT_REGISTRY_EVENT_KEY, event_type, properties)
    set_property_value(PROPERTY_EVENT_REGISTRY_EVENT_NAME, get_extension_value("eventName", element), properties)
    add_event_out_parameters(element.extension_elements.get("eventOutParameter"), properties)
    add_event_correlation_parameters(element.extension_elements.get("eventCorrelationParameter"), properties)

    for extension_name, property_name in _CHANNEL_PROPERTIES:
        set_property_value(property_name, get_extension_value(extension_name, element), properties)

    detection_type = get_extension_value("keyDetectionType", element)
    detection_value = get_extension_value("keyDetectionValue", element)
    if detection_type and detection_value:
        for known_type, property_name in _KEY_DETECTION_PROPERTIES:
            if detection_type.lower() == known_type.lower():
                set_property_value(property_name, detection_value, properties)
                break


# ===========================
# Event definitions
# ===========================


def add_event_properties(event: Event, properties: JsonNode) -> None:
    """Write the settings of the single event definition, if exactly one exists."""
    if len(event.event_definitions) != 1:
        return
    definition = event.event_definitions[0]

    if isinstance(definition, ErrorEventDefinition):
        set_property_value(PROPERTY_ERRORREF, definition.error_code, properties)
        set_property_value(PROPERTY_ERROR_VARIABLE_NAME, definition.error_variable_name, properties)
        if definition.error_variable_transient is not None:
            properties[PROPERTY_ERROR_VARIABLE_TRANSIENT] = definition.error_variable_transient
        if definition.error_variable_local_scope is not None:
            properties[PROPERTY_ERROR_VARIABLE_LOCAL_SCOPE] = definition.error_variable_local_scope
    elif isinstance(definition, SignalEventDefinition):
        set_property_value(PROPERTY_SIGNALREF, definition.signal_ref, properties)
        set_property_value(PROPERTY_SIGNALEXPRESSION, definition.signal_expression, properties)
    elif isinstance(definition, MessageEventDefinition):
        set_property_value(PROPERTY_MESSAGEREF, definition.message_ref, properties)
        set_property_value(PROPERTY_MESSAGEEXPRESSION, definition.message_expression, properties)
    elif isinstance(definition, ConditionalEventDefinition):
        set_property_value(PROPERTY_CONDITIONAL_EVENT_CONDITION, definition.condition_expression, properties)
    elif isinstance(definition, EscalationEventDefinition):
        set_property_value(PROPERTY_ESCALATIONREF, definition.escalation_code, properties)
    elif isinstance(definition, TimerEventDefinition):
        set_property_value(PROPERTY_CALENDAR_NAME, definition.calendar_name, properties)
        set_property_value(PROPERTY_TIMER_DURATION, definition.time_duration, properties)
        set_property_value(PROPERTY_TIMER_CYCLE, definition.time_cycle, properties)
        set_property_value(PROPERTY_TIMER_DATE, definition.time_date, properties)
        set_property_value(PROPERTY_TIMER_CYCLE_END_DATE, definition.end_date, properties)
    elif isinstance(definition, TerminateEventDefinition):
        properties[PROPERTY_TERMINATE_ALL] = definition.terminate_all
        properties[PROPERTY_TERMINATE_MULTI_INSTANCE] = definition.terminate_multi_instance
    elif isinstance(definition, VariableListenerEventDefinition):
        set_property_value(PROPERTY_VARIABLE_LISTENER_VARIABLE_NAME, definition.variable_name, properties)
        set_property_value(
            PROPERTY_VARIABLE_LISTENER_VARIABLE_CHANGE_TYPE, definition.variable_change_type, properties
        )
    elif isinstance(definition, CompensateEventDefinition):
        set_property_value(PROPERTY_COMPENSATION_ACTIVITY_REF, definition.activity_ref, properties)


def convert_json_to_timer_definition(node: JsonNode) -> TimerEventDefinition:
    """Timer definition; date wins over cycle, cycle over duration."""
    definition = TimerEventDefinition(
        calendar_name=get_property_value_as_string(PROPERTY_CALENDAR_NAME, node) or None,
        end_date=get_property_value_as_string(PROPERTY_TIMER_CYCLE_END_DATE, node) or None,
    )
    time_date = get_property_value_as_string(PROPERTY_TIMER_DATE, node)
    time_cycle = get_property_value_as_string(PROPERTY_TIMER_CYCLE, node)
    time_duration = get_property_value_as_string(PROPERTY_TIMER_DURATION, node)
    if time_date:
        definition.time_date = time_date
    elif time_cycle:
        definition.time_cycle = time_cycle
    elif time_duration:
        definition.time_duration = time_duration
    return definition


def convert_json_to_signal_definition(node: JsonNode) -> SignalEventDefinition:
    return SignalEventDefinition(
        signal_ref=get_property_value_as_string(PROPERTY_SIGNALREF, node) or None,
        signal_expression=get_property_value_as_string(PROPERTY_SIGNALEXPRESSION, node) or None,
        is_async=get_property_value_as_boolean(PROPERTY_ASYNCHRONOUS, node),
    )


def convert_json_to_message_definition(node: JsonNode) -> MessageEventDefinition:
    return MessageEventDefinition(
        message_ref=get_property_value_as_string(PROPERTY_MESSAGEREF, node) or None,
        message_expression=get_property_value_as_string(PROPERTY_MESSAGEEXPRESSION, node) or None,
    )


def convert_json_to_error_definition(node: JsonNode) -> ErrorEventDefinition:
    return ErrorEventDefinition(
        error_code=get_property_value_as_string(PROPERTY_ERRORREF, node),
        error_variable_name=get_property_value_as_string(PROPERTY_ERROR_VARIABLE_NAME, node),
        error_variable_local_scope=get_property_value_as_boolean(PROPERTY_ERROR_VARIABLE_LOCAL_SCOPE, node, True),
        error_variable_transient=get_property_value_as_boolean(PROPERTY_ERROR_VARIABLE_TRANSIENT, node, True),
    )


def convert_json_to_escalation_definition(node: JsonNode) -> EscalationEventDefinition:
    return EscalationEventDefinition(escalation_code=get_property_value_as_string(PROPERTY_ESCALATIONREF, node))


def convert_json_to_conditional_definition(node: JsonNode) -> ConditionalEventDefinition:
    condition = get_property_value_as_string(PROPERTY_CONDITIONAL_EVENT_CONDITION, node)
    return ConditionalEventDefinition(condition_expression=condition or None)


def convert_json_to_compensation_definition(node: JsonNode) -> CompensateEventDefinition:
    return CompensateEventDefinition(
        activity_ref=get_property_value_as_string(PROPERTY_COMPENSATION_ACTIVITY_REF, node)
    )


def convert_json_to_variable_listener_definition(node: JsonNode) -> VariableListenerEventDefinition:
    """Variable listener; the change type is only read when a variable name is set."""
    definition = VariableListenerEventDefinition()
    variable_name = get_property_value_as_string(PROPERTY_VARIABLE_LISTENER_VARIABLE_NAME, node)
    if variable_name:
        definition.variable_name = variable_name
        change_type = get_property_value_as_string(PROPERTY_VARIABLE_LISTENER_VARIABLE_CHANGE_TYPE, node)
        if change_type:
            definition.variable_change_type = change_type
    return definition


def convert_json_to_terminate_definition(node: JsonNode) -> TerminateEventDefinition:
    return TerminateEventDefinition(
        terminate_all=get_property_value_as_boolean(PROPERTY_TERMINATE_ALL, node),
        terminate_multi_instance=get_property_value_as_boolean(PROPERTY_TERMINATE_MULTI_INSTANCE, node),
    )


def field_map(extensions: Sequence[FieldExtension]) -> Dict[str, FieldExtension]:
    return {extension.field_name: extension for extension in extensions if extension.field_name}


# ===========================
# Form references
# ===========================


def add_form_key(form_key: Optional[str], properties: JsonNode, resolver: Any) -> None:
    """Write ``formreference`` when the resolver knows the key, else ``formkeydefinition``."""
    if not form_key:
        return
    model_info = resolver.get_form_model_info_for_form_model_key(form_key)
    if model_info is not None:
        properties[PROPERTY_FORM_REFERENCE] = {
            "id": model_info.get("id"),
            "name": model_info.get("name"),
            "key": model_info.get("key", form_key),
        }
    else:
        properties[PROPERTY_FORMKEY] = form_key


def convert_json_to_form_key(node: JsonNode, resolver: Any) -> Optional[str]:
    """Form key from ``formkeydefinition``, else from a resolved ``formreference``."""
    form_key = get_property_value_as_string(PROPERTY_FORMKEY, node)
    if form_key:
        return form_key

    reference = get_structured_property(PROPERTY_FORM_REFERENCE, node)
    if not isinstance(reference, dict) or reference.get("id") is None:
        return None
    resolved_key = resolver.get_form_model_key_for_form_model_id(as_text(reference["id"]))
    if resolved_key is not None:
        return resolved_key
    return get_value_as_string("key", reference) or None
