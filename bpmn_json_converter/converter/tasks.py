"""
Task Converters

User, service, script, business rule, manual, send, receive, send-event,
external worker tasks and call activities.

The domain model has a single :class:`ServiceTask` type for the mail, camel,
mule, http, decision and shell variants; its ``type`` attribute picks the
stencil on output. On input every typed stencil has its own converter, which
stores the stencil's settings as field extensions on a new service task.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bpmn_json_converter.converter.base import (
    BaseElementConverter,
    add_field,
    convert_list_to_comma_separated,
)
from bpmn_json_converter.converter.constants import (
    MODELER_NAMESPACE,
    MODELER_NAMESPACE_PREFIX,
    PROPERTY_CALENDAR_NAME,
    PROPERTY_CALLACTIVITY_BUSINESS_KEY,
    PROPERTY_CALLACTIVITY_CALLEDELEMENT,
    PROPERTY_CALLACTIVITY_CALLEDELEMENTTYPE,
    PROPERTY_CALLACTIVITY_COMPLETE_ASYNC,
    PROPERTY_CALLACTIVITY_FALLBACK_TO_DEFAULT_TENANT,
    PROPERTY_CALLACTIVITY_ID_VARIABLE_NAME,
    PROPERTY_CALLACTIVITY_IN,
    PROPERTY_CALLACTIVITY_INHERIT_BUSINESS_KEY,
    PROPERTY_CALLACTIVITY_INHERIT_VARIABLES,
    PROPERTY_CALLACTIVITY_OUT,
    PROPERTY_CALLACTIVITY_PROCESS_INSTANCE_NAME,
    PROPERTY_CALLACTIVITY_SAME_DEPLOYMENT,
    PROPERTY_CALLACTIVITY_USE_LOCALSCOPE_FOR_OUTPARAMETERS,
    PROPERTY_CAMELTASK_CAMELCONTEXT,
    PROPERTY_DECISION_REFERENCE_TYPE,
    PROPERTY_DECISIONSERVICE_REFERENCE,
    PROPERTY_DECISIONTABLE_FALLBACK_TO_DEFAULT_TENANT,
    PROPERTY_DECISIONTABLE_FALLBACK_TO_DEFAULT_TENANT_KEY,
    PROPERTY_DECISIONTABLE_REFERENCE,
    PROPERTY_DECISIONTABLE_REFERENCE_KEY,
    PROPERTY_DECISIONTABLE_SAME_DEPLOYMENT,
    PROPERTY_DECISIONTABLE_SAME_DEPLOYMENT_KEY,
    PROPERTY_DECISIONTABLE_THROW_ERROR_NO_HITS,
    PROPERTY_DECISIONTABLE_THROW_ERROR_NO_HITS_KEY,
    PROPERTY_EVENT_REGISTRY_CHANNEL_DESTINATION,
    PROPERTY_EVENT_REGISTRY_CHANNEL_KEY,
    PROPERTY_EVENT_REGISTRY_CHANNEL_NAME,
    PROPERTY_EVENT_REGISTRY_CHANNEL_TYPE,
    PROPERTY_EVENT_REGISTRY_EVENT_KEY,
    PROPERTY_EVENT_REGISTRY_EVENT_NAME,
    PROPERTY_EVENT_REGISTRY_KEY_DETECTION_FIXED_VALUE,
    PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_FIELD,
    PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_POINTER,
    PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_DESTINATION,
    PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_KEY,
    PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_NAME,
    PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_TYPE,
    PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_KEY,
    PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_NAME,
    PROPERTY_EXTERNAL_WORKER_JOB_TOPIC,
    PROPERTY_FORM_FIELD_VALIDATION,
    PROPERTY_HTTPTASK_PARALLEL_IN_SAME_TRANSACTION,
    PROPERTY_HTTPTASK_REQ_BODY,
    PROPERTY_HTTPTASK_REQ_BODY_ENCODING,
    PROPERTY_HTTPTASK_REQ_DISALLOW_REDIRECTS,
    PROPERTY_HTTPTASK_REQ_FAIL_STATUS_CODES,
    PROPERTY_HTTPTASK_REQ_HANDLE_STATUS_CODES,
    PROPERTY_HTTPTASK_REQ_HEADERS,
    PROPERTY_HTTPTASK_REQ_IGNORE_EXCEPTION,
    PROPERTY_HTTPTASK_REQ_METHOD,
    PROPERTY_HTTPTASK_REQ_TIMEOUT,
    PROPERTY_HTTPTASK_REQ_URL,
    PROPERTY_HTTPTASK_RESPONSE_VARIABLE_NAME,
    PROPERTY_HTTPTASK_RESULT_VARIABLE_PREFIX,
    PROPERTY_HTTPTASK_SAVE_REQUEST_VARIABLES,
    PROPERTY_HTTPTASK_SAVE_RESPONSE_AS_JSON,
    PROPERTY_HTTPTASK_SAVE_RESPONSE_PARAMETERS,
    PROPERTY_HTTPTASK_SAVE_RESPONSE_TRANSIENT,
    PROPERTY_IOPARAMETER_SOURCE,
    PROPERTY_IOPARAMETER_SOURCE_EXPRESSION,
    PROPERTY_IOPARAMETER_TARGET,
    PROPERTY_MAILTASK_BCC,
    PROPERTY_MAILTASK_CC,
    PROPERTY_MAILTASK_CHARSET,
    PROPERTY_MAILTASK_FROM,
    PROPERTY_MAILTASK_HEADERS,
    PROPERTY_MAILTASK_HTML,
    PROPERTY_MAILTASK_HTML_VAR,
    PROPERTY_MAILTASK_SUBJECT,
    PROPERTY_MAILTASK_TEXT,
    PROPERTY_MAILTASK_TEXT_VAR,
    PROPERTY_MAILTASK_TO,
    PROPERTY_MULETASK_ENDPOINT_URL,
    PROPERTY_MULETASK_LANGUAGE,
    PROPERTY_MULETASK_PAYLOAD_EXPRESSION,
    PROPERTY_MULETASK_RESULT_VARIABLE,
    PROPERTY_RULETASK_CLASS,
    PROPERTY_RULETASK_EXCLUDE,
    PROPERTY_RULETASK_RESULT,
    PROPERTY_RULETASK_RULES,
    PROPERTY_RULETASK_VARIABLES_INPUT,
    PROPERTY_SCRIPT_AUTO_STORE_VARIABLES,
    PROPERTY_SCRIPT_FORMAT,
    PROPERTY_SCRIPT_TEXT,
    PROPERTY_SERVICETASK_CLASS,
    PROPERTY_SERVICETASK_DELEGATE_EXPRESSION,
    PROPERTY_SERVICETASK_EXPRESSION,
    PROPERTY_SERVICETASK_FAILED_JOB_RETRY_TIME_CYCLE,
    PROPERTY_SERVICETASK_RESULT_VARIABLE,
    PROPERTY_SERVICETASK_STORE_TRANSIENT_VARIABLE,
    PROPERTY_SERVICETASK_TRIGGERABLE,
    PROPERTY_SERVICETASK_USE_LOCAL_SCOPE_FOR_RESULT_VARIABLE,
    PROPERTY_SHELLTASK_ARG1,
    PROPERTY_SHELLTASK_ARG2,
    PROPERTY_SHELLTASK_ARG3,
    PROPERTY_SHELLTASK_ARG4,
    PROPERTY_SHELLTASK_ARG5,
    PROPERTY_SHELLTASK_CLEAN_ENV,
    PROPERTY_SHELLTASK_COMMAND,
    PROPERTY_SHELLTASK_DIRECTORY,
    PROPERTY_SHELLTASK_ERROR_CODE_VARIABLE,
    PROPERTY_SHELLTASK_ERROR_REDIRECT,
    PROPERTY_SHELLTASK_OUTPUT_VARIABLE,
    PROPERTY_SHELLTASK_WAIT,
    PROPERTY_SKIP_EXPRESSION,
    PROPERTY_USERTASK_ASSIGNEE,
    PROPERTY_USERTASK_ASSIGNMENT,
    PROPERTY_USERTASK_CANDIDATE_GROUPS,
    PROPERTY_USERTASK_CANDIDATE_USERS,
    PROPERTY_USERTASK_CATEGORY,
    PROPERTY_USERTASK_DUEDATE,
    PROPERTY_USERTASK_PRIORITY,
    PROPERTY_USERTASK_TASK_ID_VARIABLE_NAME,
    PROPERTY_VALUE_YES,
    REFERENCE_TYPE_DECISION_SERVICE,
    REFERENCE_TYPE_DECISION_TABLE,
    SERVICE_TASK_TYPE_CAMEL,
    SERVICE_TASK_TYPE_DMN,
    SERVICE_TASK_TYPE_EXTERNAL_WORKER,
    SERVICE_TASK_TYPE_HTTP,
    SERVICE_TASK_TYPE_MAIL,
    SERVICE_TASK_TYPE_MULE,
    SERVICE_TASK_TYPE_SEND_EVENT,
    SERVICE_TASK_TYPE_SHELL,
    STENCIL_CALL_ACTIVITY,
    STENCIL_TASK_BUSINESS_RULE,
    STENCIL_TASK_CAMEL,
    STENCIL_TASK_DECISION,
    STENCIL_TASK_EXTERNAL_WORKER,
    STENCIL_TASK_HTTP,
    STENCIL_TASK_MAIL,
    STENCIL_TASK_MANUAL,
    STENCIL_TASK_MULE,
    STENCIL_TASK_RECEIVE,
    STENCIL_TASK_RECEIVE_EVENT,
    STENCIL_TASK_SCRIPT,
    STENCIL_TASK_SEND,
    STENCIL_TASK_SEND_EVENT,
    STENCIL_TASK_SERVICE,
    STENCIL_TASK_SHELL,
    STENCIL_TASK_USER,
    VALUE_ASSIGNMENT,
    VALUE_IN_PARAMETERS,
    VALUE_OUT_PARAMETERS,
)
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.definitions import (
    add_event_correlation_parameters,
    add_event_in_io_parameters,
    add_event_out_io_parameters,
    add_event_registry_properties,
    add_field_extensions,
    add_flowable_extension_element_with_value,
    add_form_key,
    add_form_properties,
    add_map_exceptions,
    add_receive_event_extension_elements,
    convert_json_to_event_correlation_parameters,
    convert_json_to_field_extensions,
    convert_json_to_form_key,
    convert_json_to_form_properties,
    convert_json_to_in_io_parameters,
    convert_json_to_map_exceptions,
    convert_json_to_out_io_parameters,
    get_extension_value,
    set_property_value,
)
from bpmn_json_converter.converter.properties import (
    JsonNode,
    as_text,
    get_property_value_as_boolean,
    get_property_value_as_list,
    get_property_value_as_string,
    get_stencil_id,
    get_structured_property,
    get_value_as_list,
    get_value_as_string,
)
from bpmn_json_converter.models.bpmn_elements import (
    BaseElement,
    BusinessRuleTask,
    CallActivity,
    ExtensionElement,
    ExternalWorkerServiceTask,
    FieldExtension,
    HttpServiceTask,
    ImplementationType,
    IOParameter,
    ManualTask,
    ReceiveTask,
    ScriptTask,
    SendEventServiceTask,
    SendTask,
    ServiceTask,
    UserTask,
)

logger = logging.getLogger(__name__)

FieldTable = Tuple[Tuple[str, str], ...]

# (editor property, field extension name) per typed service task
MAIL_FIELDS: FieldTable = (
    (PROPERTY_MAILTASK_HEADERS, "headers"),
    (PROPERTY_MAILTASK_TO, "to"),
    (PROPERTY_MAILTASK_FROM, "from"),
    (PROPERTY_MAILTASK_SUBJECT, "subject"),
    (PROPERTY_MAILTASK_CC, "cc"),
    (PROPERTY_MAILTASK_BCC, "bcc"),
    (PROPERTY_MAILTASK_TEXT, "text"),
    (PROPERTY_MAILTASK_HTML, "html"),
    (PROPERTY_MAILTASK_HTML_VAR, "htmlVar"),
    (PROPERTY_MAILTASK_TEXT_VAR, "textVar"),
    (PROPERTY_MAILTASK_CHARSET, "charset"),
)

CAMEL_FIELDS: FieldTable = ((PROPERTY_CAMELTASK_CAMELCONTEXT, "camelContext"),)

MULE_FIELDS: FieldTable = (
    (PROPERTY_MULETASK_ENDPOINT_URL, "endpointUrl"),
    (PROPERTY_MULETASK_LANGUAGE, "language"),
    (PROPERTY_MULETASK_PAYLOAD_EXPRESSION, "payloadExpression"),
    (PROPERTY_MULETASK_RESULT_VARIABLE, "resultVariable"),
)

HTTP_FIELDS: FieldTable = (
    (PROPERTY_HTTPTASK_REQ_METHOD, "requestMethod"),
    (PROPERTY_HTTPTASK_REQ_URL, "requestUrl"),
    (PROPERTY_HTTPTASK_REQ_HEADERS, "requestHeaders"),
    (PROPERTY_HTTPTASK_REQ_BODY, "requestBody"),
    (PROPERTY_HTTPTASK_REQ_BODY_ENCODING, "requestBodyEncoding"),
    (PROPERTY_HTTPTASK_REQ_TIMEOUT, "requestTimeout"),
    (PROPERTY_HTTPTASK_REQ_DISALLOW_REDIRECTS, "disallowRedirects"),
    (PROPERTY_HTTPTASK_REQ_FAIL_STATUS_CODES, "failStatusCodes"),
    (PROPERTY_HTTPTASK_REQ_HANDLE_STATUS_CODES, "handleStatusCodes"),
    (PROPERTY_HTTPTASK_RESPONSE_VARIABLE_NAME, "responseVariableName"),
    (PROPERTY_HTTPTASK_REQ_IGNORE_EXCEPTION, "ignoreException"),
    (PROPERTY_HTTPTASK_SAVE_REQUEST_VARIABLES, "saveRequestVariables"),
    (PROPERTY_HTTPTASK_SAVE_RESPONSE_PARAMETERS, "saveResponseParameters"),
    (PROPERTY_HTTPTASK_RESULT_VARIABLE_PREFIX, "resultVariablePrefix"),
    (PROPERTY_HTTPTASK_SAVE_RESPONSE_TRANSIENT, "saveResponseParametersTransient"),
    (PROPERTY_HTTPTASK_SAVE_RESPONSE_AS_JSON, "saveResponseVariableAsJson"),
)

SHELL_FIELDS: FieldTable = (
    (PROPERTY_SHELLTASK_COMMAND, "command"),
    (PROPERTY_SHELLTASK_ARG1, "arg1"),
    (PROPERTY_SHELLTASK_ARG2, "arg2"),
    (PROPERTY_SHELLTASK_ARG3, "arg3"),
    (PROPERTY_SHELLTASK_ARG4, "arg4"),
    (PROPERTY_SHELLTASK_ARG5, "arg5"),
    (PROPERTY_SHELLTASK_WAIT, "wait"),
    (PROPERTY_SHELLTASK_CLEAN_ENV, "cleanEnv"),
    (PROPERTY_SHELLTASK_ERROR_CODE_VARIABLE, "errorCodeVariable"),
    (PROPERTY_SHELLTASK_ERROR_REDIRECT, "errorRedirect"),
    (PROPERTY_SHELLTASK_OUTPUT_VARIABLE, "outputVariable"),
    (PROPERTY_SHELLTASK_DIRECTORY, "directory"),
)

DECISION_BOOLEAN_FIELDS: FieldTable = (
    (PROPERTY_DECISIONTABLE_THROW_ERROR_NO_HITS, PROPERTY_DECISIONTABLE_THROW_ERROR_NO_HITS_KEY),
    (PROPERTY_DECISIONTABLE_FALLBACK_TO_DEFAULT_TENANT, PROPERTY_DECISIONTABLE_FALLBACK_TO_DEFAULT_TENANT_KEY),
    (PROPERTY_DECISIONTABLE_SAME_DEPLOYMENT, PROPERTY_DECISIONTABLE_SAME_DEPLOYMENT_KEY),
)

SERVICE_TASK_STENCILS: Dict[str, str] = {
    SERVICE_TASK_TYPE_MAIL: STENCIL_TASK_MAIL,
    SERVICE_TASK_TYPE_CAMEL: STENCIL_TASK_CAMEL,
    SERVICE_TASK_TYPE_MULE: STENCIL_TASK_MULE,
    SERVICE_TASK_TYPE_HTTP: STENCIL_TASK_HTTP,
    SERVICE_TASK_TYPE_DMN: STENCIL_TASK_DECISION,
    SERVICE_TASK_TYPE_SHELL: STENCIL_TASK_SHELL,
}

_TYPED_FIELDS: Dict[str, FieldTable] = {
    SERVICE_TASK_TYPE_MAIL: MAIL_FIELDS,
    SERVICE_TASK_TYPE_CAMEL: CAMEL_FIELDS,
    SERVICE_TASK_TYPE_MULE: MULE_FIELDS,
    SERVICE_TASK_TYPE_HTTP: HTTP_FIELDS,
    SERVICE_TASK_TYPE_SHELL: SHELL_FIELDS,
}


def find_field(task: ServiceTask, field_name: str) -> Optional[FieldExtension]:
    """Field extension matched case-insensitively by name."""
    for field in task.field_extensions:
        if field.field_name and field.field_name.lower() == field_name.lower():
            return field
    return None


def set_property_field_value(property_name: str, field_name: str, task: ServiceTask, properties: JsonNode) -> None:
    field = find_field(task, field_name)
    if field is None:
        return
    value = field.string_value or field.expression
    if value:
        properties[property_name] = value


# ===========================
# Service tasks
# ===========================


class ServiceTaskConverter(BaseElementConverter):
    """Service tasks, including every typed variant on output.

    The stencil is chosen from ``ServiceTask.type`` (case-insensitive); an
    unknown or missing type yields the plain ``ServiceTask`` stencil.
    """

    stencils = (STENCIL_TASK_SERVICE,)
    domain_types = (ServiceTask,)

    def get_stencil_id(self, element: BaseElement) -> str:
        task_type = (getattr(element, "type", None) or "").lower()
        return SERVICE_TASK_STENCILS.get(task_type, STENCIL_TASK_SERVICE)

    def convert_element_to_json(
        self, properties: JsonNode, element: ServiceTask, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        set_property_value(PROPERTY_SKIP_EXPRESSION, element.skip_expression, properties)

        task_type = (element.type or "").lower()
        if task_type == SERVICE_TASK_TYPE_DMN:
            self._convert_decision_task_to_json(properties, element, ctx)
        elif task_type in _TYPED_FIELDS:
            for property_name, field_name in _TYPED_FIELDS[task_type]:
                set_property_field_value(property_name, field_name, element, properties)
            if isinstance(element, HttpServiceTask) and element.parallel_in_same_transaction is not None:
                properties[PROPERTY_HTTPTASK_PARALLEL_IN_SAME_TRANSACTION] = str(
                    element.parallel_in_same_transaction
                ).lower()
        else:
            self._convert_plain_task_to_json(properties, element)

    def _convert_plain_task_to_json(self, properties: JsonNode, task: ServiceTask) -> None:
        if task.implementation_type == ImplementationType.CLASS:
            properties[PROPERTY_SERVICETASK_CLASS] = task.implementation
        elif task.implementation_type == ImplementationType.EXPRESSION:
            properties[PROPERTY_SERVICETASK_EXPRESSION] = task.implementation
        elif task.implementation_type == ImplementationType.DELEGATE_EXPRESSION:
            properties[PROPERTY_SERVICETASK_DELEGATE_EXPRESSION] = task.implementation

        if task.triggerable:
            properties[PROPERTY_SERVICETASK_TRIGGERABLE] = True
        if task.use_local_scope_for_result_variable:
            properties[PROPERTY_SERVICETASK_USE_LOCAL_SCOPE_FOR_RESULT_VARIABLE] = True
        if task.store_result_variable_as_transient:
            properties[PROPERTY_SERVICETASK_STORE_TRANSIENT_VARIABLE] = True

        set_property_value(PROPERTY_SERVICETASK_RESULT_VARIABLE, task.result_variable_name, properties)
        set_property_value(
            PROPERTY_SERVICETASK_FAILED_JOB_RETRY_TIME_CYCLE, task.failed_job_retry_time_cycle_value, properties
        )
        add_field_extensions(task.field_extensions, properties)
        add_map_exceptions(task.map_exceptions, properties)

    def _convert_decision_task_to_json(self, properties: JsonNode, task: ServiceTask, ctx: ConverterContext) -> None:
        key_field = find_field(task, PROPERTY_DECISIONTABLE_REFERENCE_KEY)
        model_key = key_field.string_value if key_field is not None else None
        if model_key:
            reference_type = task.get_extension_value(PROPERTY_DECISION_REFERENCE_TYPE)
            service_info = ctx.resolver.get_decision_service_model_info_for_decision_service_model_key(model_key)
            table_info = ctx.resolver.get_decision_table_model_info_for_decision_table_model_key(model_key)
            if service_info is not None:
                properties[PROPERTY_DECISIONSERVICE_REFERENCE] = _reference_node(service_info, model_key)
            elif table_info is not None:
                properties[PROPERTY_DECISIONTABLE_REFERENCE] = _reference_node(table_info, model_key)
            elif reference_type == REFERENCE_TYPE_DECISION_SERVICE:
                properties[PROPERTY_DECISIONSERVICE_REFERENCE] = {"key": model_key}
            else:
                properties[PROPERTY_DECISIONTABLE_REFERENCE] = {"key": model_key}

        for property_name, field_name in DECISION_BOOLEAN_FIELDS:
            field = find_field(task, field_name)
            if field is not None:
                properties[property_name] = (field.string_value or "").lower() == "true"

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ServiceTask:
        task = ServiceTask()

        class_name = get_property_value_as_string(PROPERTY_SERVICETASK_CLASS, node)
        expression = get_property_value_as_string(PROPERTY_SERVICETASK_EXPRESSION, node)
        delegate_expression = get_property_value_as_string(PROPERTY_SERVICETASK_DELEGATE_EXPRESSION, node)
        if class_name:
            task.implementation_type = ImplementationType.CLASS
            task.implementation = class_name
        elif expression:
            task.implementation_type = ImplementationType.EXPRESSION
            task.implementation = expression
        elif delegate_expression:
            task.implementation_type = ImplementationType.DELEGATE_EXPRESSION
            task.implementation = delegate_expression

        task.triggerable = get_property_value_as_boolean(PROPERTY_SERVICETASK_TRIGGERABLE, node)
        task.use_local_scope_for_result_variable = get_property_value_as_boolean(
            PROPERTY_SERVICETASK_USE_LOCAL_SCOPE_FOR_RESULT_VARIABLE, node
        )
        task.store_result_variable_as_transient = get_property_value_as_boolean(
            PROPERTY_SERVICETASK_STORE_TRANSIENT_VARIABLE, node
        )
        task.result_variable_name = get_property_value_as_string(PROPERTY_SERVICETASK_RESULT_VARIABLE, node)
        task.failed_job_retry_time_cycle_value = get_property_value_as_string(
            PROPERTY_SERVICETASK_FAILED_JOB_RETRY_TIME_CYCLE, node
        )
        task.skip_expression = get_property_value_as_string(PROPERTY_SKIP_EXPRESSION, node)
        task.field_extensions = convert_json_to_field_extensions(node)
        task.map_exceptions = convert_json_to_map_exceptions(node)
        return task


def _reference_node(model_info: Dict[str, str], model_key: str) -> JsonNode:
    return {
        "id": model_info.get("id"),
        "name": model_info.get("name"),
        "key": model_info.get("key", model_key),
    }


class TypedServiceTaskConverter(BaseElementConverter):
    """Reads a typed service-task stencil into a service task with field extensions.

    Output goes through :class:`ServiceTaskConverter`, so these converters
    register no domain types.
    """

    task_type: str = ""
    fields: FieldTable = ()

    def create_task(self) -> ServiceTask:
        return ServiceTask(type=self.task_type)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ServiceTask:
        task = self.create_task()
        for property_name, field_name in self.fields:
            add_field(property_name, node, task, field_name)
        task.skip_expression = get_property_value_as_string(PROPERTY_SKIP_EXPRESSION, node)
        return task


class MailTaskConverter(TypedServiceTaskConverter):
    stencils = (STENCIL_TASK_MAIL,)
    task_type = SERVICE_TASK_TYPE_MAIL
    fields = MAIL_FIELDS


class CamelTaskConverter(TypedServiceTaskConverter):
    stencils = (STENCIL_TASK_CAMEL,)
    task_type = SERVICE_TASK_TYPE_CAMEL
    fields = CAMEL_FIELDS


class MuleTaskConverter(TypedServiceTaskConverter):
    stencils = (STENCIL_TASK_MULE,)
    task_type = SERVICE_TASK_TYPE_MULE
    fields = MULE_FIELDS


class ShellTaskConverter(TypedServiceTaskConverter):
    stencils = (STENCIL_TASK_SHELL,)
    task_type = SERVICE_TASK_TYPE_SHELL
    fields = SHELL_FIELDS


class HttpTaskConverter(TypedServiceTaskConverter):
    """Http tasks; the request method defaults to ``GET``."""

    stencils = (STENCIL_TASK_HTTP,)
    task_type = SERVICE_TASK_TYPE_HTTP
    fields = HTTP_FIELDS

    def create_task(self) -> ServiceTask:
        return HttpServiceTask(type=self.task_type)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ServiceTask:
        task = self.create_task()
        parallel = get_property_value_as_string(PROPERTY_HTTPTASK_PARALLEL_IN_SAME_TRANSACTION, node)
        if parallel:
            task.parallel_in_same_transaction = parallel.lower() == "true"

        for property_name, field_name in self.fields:
            default_value = "GET" if property_name == PROPERTY_HTTPTASK_REQ_METHOD else None
            add_field(property_name, node, task, field_name, default_value)
        task.skip_expression = get_property_value_as_string(PROPERTY_SKIP_EXPRESSION, node)
        return task


class DecisionTaskConverter(TypedServiceTaskConverter):
    """Decision tasks.

    When both a decision table and a decision service reference are present
    the service reference wins. References are resolved to model keys through
    the context's resolver, falling back to the reference's own ``key``.
    """

    stencils = (STENCIL_TASK_DECISION,)
    task_type = SERVICE_TASK_TYPE_DMN

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ServiceTask:
        task = self.create_task()
        model_key: Optional[str] = None
        reference_type: Optional[str] = None

        table_reference = get_structured_property(PROPERTY_DECISIONTABLE_REFERENCE, node)
        if isinstance(table_reference, dict):
            resolved = _resolve_reference(
                table_reference, ctx.resolver.get_decision_table_model_key_for_decision_table_model_id
            )
            if resolved:
                model_key, reference_type = resolved, REFERENCE_TYPE_DECISION_TABLE

        service_reference = get_structured_property(PROPERTY_DECISIONSERVICE_REFERENCE, node)
        if isinstance(service_reference, dict):
            resolved = _resolve_reference(
                service_reference, ctx.resolver.get_decision_service_model_key_for_decision_service_model_id
            )
            if resolved:
                model_key, reference_type = resolved, REFERENCE_TYPE_DECISION_SERVICE

        if model_key:
            task.field_extensions.append(
                FieldExtension(field_name=PROPERTY_DECISIONTABLE_REFERENCE_KEY, string_value=model_key)
            )
        add_flowable_extension_element_with_value(PROPERTY_DECISION_REFERENCE_TYPE, reference_type, task)

        for property_name, field_name in DECISION_BOOLEAN_FIELDS:
            value = get_property_value_as_boolean(property_name, node)
            task.field_extensions.append(FieldExtension(field_name=field_name, string_value="true" if value else "false"))
        task.skip_expression = get_property_value_as_string(PROPERTY_SKIP_EXPRESSION, node)
        return task


def _resolve_reference(reference: JsonNode, lookup: Any) -> Optional[str]:
    model_id = reference.get("id")
    if model_id is not None:
        model_key = lookup(as_text(model_id))
        if model_key:
            return model_key
    return get_value_as_string("key", reference)


class SendEventTaskConverter(BaseElementConverter):
    """Send-event tasks: event, channel and optional trigger settings."""

    stencils = (STENCIL_TASK_SEND_EVENT,)
    domain_types = (SendEventServiceTask,)

    channel_extensions = (
        ("channelKey", PROPERTY_EVENT_REGISTRY_CHANNEL_KEY),
        ("channelName", PROPERTY_EVENT_REGISTRY_CHANNEL_NAME),
        ("channelType", PROPERTY_EVENT_REGISTRY_CHANNEL_TYPE),
        ("channelDestination", PROPERTY_EVENT_REGISTRY_CHANNEL_DESTINATION),
    )
    trigger_channel_extensions = (
        ("triggerChannelKey", PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_KEY),
        ("triggerChannelName", PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_NAME),
        ("triggerChannelType", PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_TYPE),
        ("triggerChannelDestination", PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_DESTINATION),
    )
    key_detection = (
        ("fixedValue", PROPERTY_EVENT_REGISTRY_KEY_DETECTION_FIXED_VALUE),
        ("jsonField", PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_FIELD),
        ("jsonPointer", PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_POINTER),
    )

    def convert_element_to_json(
        self, properties: JsonNode, element: SendEventServiceTask, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        if not element.event_type:
            return

        set_property_value(PROPERTY_EVENT_REGISTRY_EVENT_KEY, element.event_type, properties)
        set_property_value(PROPERTY_EVENT_REGISTRY_EVENT_NAME, get_extension_value("eventName", element), properties)
        add_event_in_io_parameters(element.event_in_parameters, properties)
        for extension_name, property_name in self.channel_extensions:
            set_property_value(property_name, get_extension_value(extension_name, element), properties)

        if element.triggerable:
            properties[PROPERTY_SERVICETASK_TRIGGERABLE] = True
        set_property_value(PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_KEY, element.trigger_event_type, properties)
        set_property_value(
            PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_NAME, get_extension_value("triggerEventName", element), properties
        )
        add_event_out_io_parameters(element.event_out_parameters, properties)
        for extension_name, property_name in self.trigger_channel_extensions:
            set_property_value(property_name, get_extension_value(extension_name, element), properties)
        add_event_correlation_parameters(element.extension_elements.get("triggerEventCorrelationParameter"), properties)

        detection_type = get_extension_value("keyDetectionType", element)
        detection_value = get_extension_value("keyDetectionValue", element)
        if detection_type and detection_value:
            for known_type, property_name in self.key_detection:
                if detection_type.lower() == known_type.lower():
                    set_property_value(property_name, detection_value, properties)
                    break

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> SendEventServiceTask:
        task = SendEventServiceTask(type=SERVICE_TASK_TYPE_SEND_EVENT)
        event_key = get_property_value_as_string(PROPERTY_EVENT_REGISTRY_EVENT_KEY, node)
        if not event_key:
            return task

        task.event_type = event_key
        add_flowable_extension_element_with_value(
            "eventName", get_property_value_as_string(PROPERTY_EVENT_REGISTRY_EVENT_NAME, node), task
        )
        task.event_in_parameters = convert_json_to_in_io_parameters(node)
        for extension_name, property_name in self.channel_extensions:
            add_flowable_extension_element_with_value(
                extension_name, get_property_value_as_string(property_name, node), task
            )

        trigger_event_key = get_property_value_as_string(PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_KEY, node)
        if not trigger_event_key:
            return task

        task.trigger_event_type = trigger_event_key
        task.triggerable = get_property_value_as_boolean(PROPERTY_SERVICETASK_TRIGGERABLE, node)
        add_flowable_extension_element_with_value(
            "triggerEventName", get_property_value_as_string(PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_NAME, node), task
        )
        task.event_out_parameters = convert_json_to_out_io_parameters(node)
        for extension_name, property_name in self.trigger_channel_extensions:
            add_flowable_extension_element_with_value(
                extension_name, get_property_value_as_string(property_name, node), task
            )
        convert_json_to_event_correlation_parameters(node, "triggerEventCorrelationParameter", task)

        for detection_type, property_name in self.key_detection:
            value = get_property_value_as_string(property_name, node)
            if value:
                add_flowable_extension_element_with_value("keyDetectionType", detection_type, task)
                add_flowable_extension_element_with_value("keyDetectionValue", value, task)
                break
        return task


class ExternalWorkerTaskConverter(BaseElementConverter):
    stencils = (STENCIL_TASK_EXTERNAL_WORKER,)
    domain_types = (ExternalWorkerServiceTask,)

    def convert_element_to_json(
        self, properties: JsonNode, element: ExternalWorkerServiceTask, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        set_property_value(PROPERTY_EXTERNAL_WORKER_JOB_TOPIC, element.topic, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ExternalWorkerServiceTask:
        return ExternalWorkerServiceTask(
            type=SERVICE_TASK_TYPE_EXTERNAL_WORKER,
            topic=get_property_value_as_string(PROPERTY_EXTERNAL_WORKER_JOB_TOPIC, node),
        )


# ===========================
# User tasks
# ===========================

IDM_MARKERS = (
    "activiti-idm-assignee",
    "activiti-idm-assignee-field",
    "activiti-idm-candidate-user",
    "activiti-idm-candidate-group",
)


def _add_modeler_extension(name: str, value: Any, task: UserTask) -> None:
    """Store identity-management metadata as a modeler extension element."""
    if value is None:
        return
    text = as_text(value)
    if not text:
        return
    task.add_extension_element(
        ExtensionElement(
            name=name,
            namespace=MODELER_NAMESPACE,
            namespace_prefix=MODELER_NAMESPACE_PREFIX,
            element_text=text,
        )
    )


def _fill_info(node: JsonNode, key: str, extension_name: str, task: UserTask) -> None:
    value = task.get_extension_value(extension_name)
    if value:
        node[key] = value


def _can_complete_flag(can_complete: Any) -> bool:
    return can_complete is not None and as_text(can_complete).lower() == "true"


class UserTaskConverter(BaseElementConverter):
    """User tasks.

    Assignment is written in the ``static`` form unless the task carries
    identity-management extension elements, in which case the ``idm`` form
    with user and group details is used.
    """

    stencils = (STENCIL_TASK_USER,)
    domain_types = (UserTask,)

    def convert_element_to_json(
        self, properties: JsonNode, element: UserTask, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        assignment = self._convert_assignment_to_json(element)
        if assignment is not None:
            properties[PROPERTY_USERTASK_ASSIGNMENT] = {VALUE_ASSIGNMENT: assignment}

        set_property_value(PROPERTY_USERTASK_PRIORITY, element.priority, properties)
        set_property_value(PROPERTY_SKIP_EXPRESSION, element.skip_expression, properties)
        add_form_key(element.form_key, properties, ctx.resolver)
        set_property_value(PROPERTY_FORM_FIELD_VALIDATION, element.form_field_validation, properties)
        set_property_value(PROPERTY_USERTASK_DUEDATE, element.due_date, properties)
        set_property_value(PROPERTY_CALENDAR_NAME, element.business_calendar_name, properties)
        set_property_value(PROPERTY_USERTASK_CATEGORY, element.category, properties)
        set_property_value(PROPERTY_USERTASK_TASK_ID_VARIABLE_NAME, element.task_id_variable_name, properties)
        add_form_properties(element.form_properties, properties)

    def _convert_assignment_to_json(self, task: UserTask) -> Optional[JsonNode]:
        if not (task.assignee or task.candidate_users or task.candidate_groups):
            return None

        if not any(task.extension_elements.get(marker) for marker in IDM_MARKERS):
            assignment: JsonNode = {"type": "static"}
            if task.assignee:
                assignment[PROPERTY_USERTASK_ASSIGNEE] = task.assignee
            if task.candidate_users:
                assignment[PROPERTY_USERTASK_CANDIDATE_USERS] = [{"value": user} for user in task.candidate_users]
            if task.candidate_groups:
                assignment[PROPERTY_USERTASK_CANDIDATE_GROUPS] = [
                    {"value": group} for group in task.candidate_groups
                ]
            return assignment

        idm: JsonNode = {}
        assignment = {"type": "idm", "idm": idm}
        can_complete = task.get_extension_value("initiator-can-complete")
        if can_complete is not None:
            assignment["initiatorCanCompleteTask"] = _can_complete_flag(can_complete)

        if task.assignee:
            assignee: JsonNode = {"id": task.assignee}
            _fill_info(assignee, "email", "assignee-info-email", task)
            _fill_info(assignee, "firstName", "assignee-info-firstname", task)
            _fill_info(assignee, "lastName", "assignee-info-lastname", task)
            idm["assignee"] = assignee
            idm["type"] = "user"

        if task.candidate_users and task.extension_elements.get("activiti-idm-candidate-user"):
            users = []
            for user in task.candidate_users:
                user_node: JsonNode = {"id": user}
                _fill_info(user_node, "email", f"user-info-email-{user}", task)
                _fill_info(user_node, "firstName", f"user-info-firstname-{user}", task)
                _fill_info(user_node, "lastName", f"user-info-lastname-{user}", task)
                users.append(user_node)
            idm["candidateUsers"] = users
            idm["type"] = "users"

        if task.candidate_groups and task.extension_elements.get("activiti-idm-candidate-group"):
            groups = []
            for group in task.candidate_groups:
                group_node: JsonNode = {"id": group}
                _fill_info(group_node, "name", f"group-info-name-{group}", task)
                groups.append(group_node)
            idm["candidateGroups"] = groups
            idm["type"] = "groups"
        return assignment

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> UserTask:
        task = UserTask()
        task.priority = get_property_value_as_string(PROPERTY_USERTASK_PRIORITY, node)
        task.form_key = convert_json_to_form_key(node, ctx.resolver)
        task.form_field_validation = get_property_value_as_string(PROPERTY_FORM_FIELD_VALIDATION, node)
        task.due_date = get_property_value_as_string(PROPERTY_USERTASK_DUEDATE, node)
        task.business_calendar_name = get_property_value_as_string(PROPERTY_CALENDAR_NAME, node)
        task.category = get_property_value_as_string(PROPERTY_USERTASK_CATEGORY, node)
        task.task_id_variable_name = get_property_value_as_string(PROPERTY_USERTASK_TASK_ID_VARIABLE_NAME, node)

        assignment_node = get_structured_property(PROPERTY_USERTASK_ASSIGNMENT, node)
        if isinstance(assignment_node, dict) and isinstance(assignment_node.get(VALUE_ASSIGNMENT), dict):
            self._read_assignment(assignment_node[VALUE_ASSIGNMENT], task)

        task.skip_expression = get_property_value_as_string(PROPERTY_SKIP_EXPRESSION, node)
        task.form_properties = convert_json_to_form_properties(node)
        return task

    def _read_assignment(self, assignment: JsonNode, task: UserTask) -> None:
        assignment_type = get_value_as_string("type", assignment)
        can_complete = assignment.get("initiatorCanCompleteTask")

        if assignment_type is None or assignment_type.lower() == "static":
            assignee = assignment.get(PROPERTY_USERTASK_ASSIGNEE)
            if assignee is not None:
                task.assignee = as_text(assignee)
            task.candidate_users = get_value_as_list(PROPERTY_USERTASK_CANDIDATE_USERS, assignment)
            task.candidate_groups = get_value_as_list(PROPERTY_USERTASK_CANDIDATE_GROUPS, assignment)
            if (task.assignee or "").lower() == "$initiator":
                _add_modeler_extension("initiator-can-complete", "true", task)
            else:
                _add_modeler_extension("initiator-can-complete", str(_can_complete_flag(can_complete)).lower(), task)
            return

        if assignment_type.lower() != "idm":
            return
        idm = assignment.get("idm")
        if not isinstance(idm, dict) or "type" not in idm:
            return

        idm_type = (get_value_as_string("type", idm) or "").lower()
        if idm_type == "user" and ("assignee" in idm or "assigneeField" in idm):
            self._read_idm_assignee(idm, can_complete, task)
        elif idm_type == "users" and ("candidateUsers" in idm or "candidateUserFields" in idm):
            self._read_idm_candidate_users(idm, can_complete, task)
        elif idm_type == "groups" and ("candidateGroups" in idm or "candidateGroupFields" in idm):
            self._read_idm_candidate_groups(idm, can_complete, task)
        else:
            task.assignee = "$INITIATOR"
            _add_modeler_extension("activiti-idm-initiator", "true", task)

    def _read_idm_assignee(self, idm: JsonNode, can_complete: Any, task: UserTask) -> None:
        assignee = idm.get("assignee")
        if isinstance(assignee, dict):
            assignee_id = get_value_as_string("id", assignee)
            email = get_value_as_string("email", assignee)
            if assignee_id:
                task.assignee = assignee_id
                _add_modeler_extension("activiti-idm-assignee", "true", task)
                _add_modeler_extension("assignee-info-email", email, task)
                _add_modeler_extension("assignee-info-firstname", assignee.get("firstName"), task)
                _add_modeler_extension("assignee-info-lastname", assignee.get("lastName"), task)
            elif email:
                task.assignee = email
        _add_modeler_extension("initiator-can-complete", str(_can_complete_flag(can_complete)).lower(), task)

    def _read_idm_candidate_users(self, idm: JsonNode, can_complete: Any, task: UserTask) -> None:
        candidate_users: List[str] = []
        users = idm.get("candidateUsers")
        if isinstance(users, list):
            emails = []
            for user in users:
                if not isinstance(user, dict):
                    continue
                user_id = get_value_as_string("id", user)
                email = get_value_as_string("email", user)
                if user_id:
                    candidate_users.append(user_id)
                    _add_modeler_extension(f"user-info-email-{user_id}", email, task)
                    _add_modeler_extension(f"user-info-firstname-{user_id}", user.get("firstName"), task)
                    _add_modeler_extension(f"user-info-lastname-{user_id}", user.get("lastName"), task)
                elif email:
                    candidate_users.append(email)
                    emails.append(email)
            if emails:
                _add_modeler_extension("activiti-candidate-users-emails", ",".join(emails), task)
            if candidate_users:
                _add_modeler_extension("activiti-idm-candidate-user", "true", task)
                _add_modeler_extension(
                    "initiator-can-complete", str(_can_complete_flag(can_complete)).lower(), task
                )

        candidate_users.extend(self._read_field_references(idm.get("candidateUserFields"), "user", task))
        if candidate_users:
            task.candidate_users = candidate_users

    def _read_idm_candidate_groups(self, idm: JsonNode, can_complete: Any, task: UserTask) -> None:
        candidate_groups: List[str] = []
        groups = idm.get("candidateGroups")
        if isinstance(groups, list):
            for group in groups:
                if not isinstance(group, dict):
                    continue
                group_id = get_value_as_string("id", group)
                if group_id:
                    candidate_groups.append(group_id)
                    _add_modeler_extension(f"group-info-name-{group_id}", group.get("name"), task)

        candidate_groups.extend(self._read_field_references(idm.get("candidateGroupFields"), "group", task))
        if candidate_groups:
            task.candidate_groups = candidate_groups
            _add_modeler_extension("activiti-idm-candidate-group", "true", task)
            _add_modeler_extension("initiator-can-complete", str(_can_complete_flag(can_complete)).lower(), task)

    def _read_field_references(self, fields: Any, kind: str, task: UserTask) -> List[str]:
        """``field(<id>)`` references for form fields holding users or groups."""
        references = []
        if not isinstance(fields, list):
            return references
        for field in fields:
            field_id = get_value_as_string("id", field)
            if field_id:
                references.append(f"field({field_id})")
                _add_modeler_extension(f"{kind}-field-info-name-{field_id}", field.get("name"), task)
        return references


# ===========================
# Other tasks
# ===========================


class ScriptTaskConverter(BaseElementConverter):
    stencils = (STENCIL_TASK_SCRIPT,)
    domain_types = (ScriptTask,)

    def convert_element_to_json(
        self, properties: JsonNode, element: ScriptTask, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        properties[PROPERTY_SCRIPT_FORMAT] = element.script_format
        properties[PROPERTY_SCRIPT_TEXT] = element.script
        properties[PROPERTY_SKIP_EXPRESSION] = element.skip_expression
        properties[PROPERTY_SCRIPT_AUTO_STORE_VARIABLES] = element.auto_store_variables

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ScriptTask:
        return ScriptTask(
            script_format=get_property_value_as_string(PROPERTY_SCRIPT_FORMAT, node),
            script=get_property_value_as_string(PROPERTY_SCRIPT_TEXT, node),
            skip_expression=get_property_value_as_string(PROPERTY_SKIP_EXPRESSION, node),
            auto_store_variables=get_property_value_as_boolean(PROPERTY_SCRIPT_AUTO_STORE_VARIABLES, node),
        )


class BusinessRuleTaskConverter(BaseElementConverter):
    stencils = (STENCIL_TASK_BUSINESS_RULE,)
    domain_types = (BusinessRuleTask,)

    def convert_element_to_json(
        self, properties: JsonNode, element: BusinessRuleTask, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        properties[PROPERTY_RULETASK_CLASS] = element.class_name
        properties[PROPERTY_RULETASK_VARIABLES_INPUT] = convert_list_to_comma_separated(element.input_variables)
        properties[PROPERTY_RULETASK_RESULT] = element.result_variable_name
        properties[PROPERTY_RULETASK_RULES] = convert_list_to_comma_separated(element.rule_names)
        if element.exclude:
            properties[PROPERTY_RULETASK_EXCLUDE] = PROPERTY_VALUE_YES

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> BusinessRuleTask:
        return BusinessRuleTask(
            class_name=get_property_value_as_string(PROPERTY_RULETASK_CLASS, node),
            input_variables=get_property_value_as_list(PROPERTY_RULETASK_VARIABLES_INPUT, node),
            result_variable_name=get_property_value_as_string(PROPERTY_RULETASK_RESULT, node),
            rule_names=get_property_value_as_list(PROPERTY_RULETASK_RULES, node),
            exclude=get_property_value_as_boolean(PROPERTY_RULETASK_EXCLUDE, node),
        )


class ManualTaskConverter(BaseElementConverter):
    stencils = (STENCIL_TASK_MANUAL,)
    domain_types = (ManualTask,)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ManualTask:
        return ManualTask()


class SendTaskConverter(BaseElementConverter):
    stencils = (STENCIL_TASK_SEND,)
    domain_types = (SendTask,)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> SendTask:
        return SendTask()


class ReceiveTaskConverter(BaseElementConverter):
    """Receive tasks; an ``eventType`` extension selects the event-registry stencil."""

    stencils = (STENCIL_TASK_RECEIVE, STENCIL_TASK_RECEIVE_EVENT)
    domain_types = (ReceiveTask,)

    def get_stencil_id(self, element: BaseElement) -> str:
        if element.get_extension_value("eventType"):
            return STENCIL_TASK_RECEIVE_EVENT
        return STENCIL_TASK_RECEIVE

    def convert_element_to_json(
        self, properties: JsonNode, element: ReceiveTask, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        add_event_registry_properties(element, properties)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> ReceiveTask:
        task = ReceiveTask()
        if get_stencil_id(node) == STENCIL_TASK_RECEIVE_EVENT:
            add_receive_event_extension_elements(node, task)
        return task


# ===========================
# Call activity
# ===========================


def _parameters_to_json(parameters: Sequence[IOParameter], value_name: str) -> JsonNode:
    return {
        value_name: [
            {
                PROPERTY_IOPARAMETER_SOURCE: parameter.source or None,
                PROPERTY_IOPARAMETER_TARGET: parameter.target or None,
                PROPERTY_IOPARAMETER_SOURCE_EXPRESSION: parameter.source_expression or None,
            }
            for parameter in parameters
        ]
    }


def _json_to_parameters(property_name: str, value_name: str, node: JsonNode) -> List[IOParameter]:
    parameters_node = get_structured_property(property_name, node)
    if not isinstance(parameters_node, dict) or not isinstance(parameters_node.get(value_name), list):
        return []

    parameters = []
    for item in parameters_node[value_name]:
        source = get_value_as_string(PROPERTY_IOPARAMETER_SOURCE, item)
        source_expression = get_value_as_string(PROPERTY_IOPARAMETER_SOURCE_EXPRESSION, item)
        if not source and not source_expression:
            continue
        parameter = IOParameter(target=get_value_as_string(PROPERTY_IOPARAMETER_TARGET, item) or None)
        if source:
            parameter.source = source
        else:
            parameter.source_expression = source_expression
        parameters.append(parameter)
    return parameters


class CallActivityConverter(BaseElementConverter):
    """Call activities. Boolean flags are only written when set."""

    stencils = (STENCIL_CALL_ACTIVITY,)
    domain_types = (CallActivity,)

    flags = (
        ("inherit_variables", PROPERTY_CALLACTIVITY_INHERIT_VARIABLES),
        ("same_deployment", PROPERTY_CALLACTIVITY_SAME_DEPLOYMENT),
        ("inherit_business_key", PROPERTY_CALLACTIVITY_INHERIT_BUSINESS_KEY),
        ("use_local_scope_for_out_parameters", PROPERTY_CALLACTIVITY_USE_LOCALSCOPE_FOR_OUTPARAMETERS),
        ("complete_async", PROPERTY_CALLACTIVITY_COMPLETE_ASYNC),
    )
    texts = (
        ("called_element", PROPERTY_CALLACTIVITY_CALLEDELEMENT),
        ("called_element_type", PROPERTY_CALLACTIVITY_CALLEDELEMENTTYPE),
        ("process_instance_name", PROPERTY_CALLACTIVITY_PROCESS_INSTANCE_NAME),
        ("business_key", PROPERTY_CALLACTIVITY_BUSINESS_KEY),
        ("process_instance_id_variable_name", PROPERTY_CALLACTIVITY_ID_VARIABLE_NAME),
    )

    def convert_element_to_json(
        self, properties: JsonNode, element: CallActivity, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        for attribute, property_name in self.texts:
            set_property_value(property_name, getattr(element, attribute), properties)
        for attribute, property_name in self.flags:
            if getattr(element, attribute):
                properties[property_name] = True
        if element.fallback_to_default_tenant is not None:
            properties[PROPERTY_CALLACTIVITY_FALLBACK_TO_DEFAULT_TENANT] = element.fallback_to_default_tenant

        properties[PROPERTY_CALLACTIVITY_IN] = _parameters_to_json(element.in_parameters, VALUE_IN_PARAMETERS)
        properties[PROPERTY_CALLACTIVITY_OUT] = _parameters_to_json(element.out_parameters, VALUE_OUT_PARAMETERS)

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> CallActivity:
        activity = CallActivity()
        for attribute, property_name in self.texts:
            value = get_property_value_as_string(property_name, node)
            if value:
                setattr(activity, attribute, value)
        for attribute, property_name in self.flags:
            if get_property_value_as_boolean(property_name, node):
                setattr(activity, attribute, True)
        if get_property_value_as_string(PROPERTY_CALLACTIVITY_FALLBACK_TO_DEFAULT_TENANT, node):
            activity.fallback_to_default_tenant = get_property_value_as_boolean(
                PROPERTY_CALLACTIVITY_FALLBACK_TO_DEFAULT_TENANT, node
            )

        activity.in_parameters = _json_to_parameters(PROPERTY_CALLACTIVITY_IN, VALUE_IN_PARAMETERS, node)
        activity.out_parameters = _json_to_parameters(PROPERTY_CALLACTIVITY_OUT, VALUE_OUT_PARAMETERS, node)
        return activity
