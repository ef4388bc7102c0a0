"""
Editor Vocabulary

Stencil identifiers and property keys understood by the browser-based
process editor. Key spellings are part of the wire format and must not change.
"""

# Editor document structure
EDITOR_STENCIL = "stencil"
EDITOR_STENCIL_ID = "id"
EDITOR_STENCILSET = "stencilset"
EDITOR_CHILD_SHAPES = "childShapes"
EDITOR_BOUNDS = "bounds"
EDITOR_BOUNDS_LOWER_RIGHT = "lowerRight"
EDITOR_BOUNDS_UPPER_LEFT = "upperLeft"
EDITOR_BOUNDS_X = "x"
EDITOR_BOUNDS_Y = "y"
EDITOR_DOCKERS = "dockers"
EDITOR_OUTGOING = "outgoing"
EDITOR_EDGE_TARGET = "target"
EDITOR_SHAPE_ID = "resourceId"
EDITOR_SHAPE_PROPERTIES = "properties"
EDITOR_PROPERTIES_GENERAL_ITEMS = "items"

CANVAS_RESOURCE_ID = "canvas"
CANVAS_STENCIL_ID = "BPMNDiagram"
STENCILSET_NAMESPACE = "http://b3mn.org/stencilset/bpmn2.0#"
STENCILSET_URL = "../editor/stencilsets/bpmn2.0/bpmn2.0.json"

MODELER_NAMESPACE = "http://flowable.org/modeler"
MODELER_NAMESPACE_PREFIX = "modeler"
FLOWABLE_NAMESPACE = "http://flowable.org/bpmn"
FLOWABLE_NAMESPACE_PREFIX = "flowable"
DEFAULT_TARGET_NAMESPACE = "http://flowable.org/test"

# Transient extension markers used between conversion passes
EDITOR_RESOURCEID_EXTENSION = "EDITOR_RESOURCEID"
EDITOR_FLOW_ORDER_EXTENSION = "EDITOR_FLOW_ORDER"

# Stencils
STENCIL_EVENT_START_NONE = "StartNoneEvent"
STENCIL_EVENT_START_TIMER = "StartTimerEvent"
STENCIL_EVENT_START_MESSAGE = "StartMessageEvent"
STENCIL_EVENT_START_SIGNAL = "StartSignalEvent"
STENCIL_EVENT_START_ERROR = "StartErrorEvent"
STENCIL_EVENT_START_EVENT_REGISTRY = "StartEventRegistryEvent"
STENCIL_EVENT_START_VARIABLE_LISTENER = "StartVariableListenerEvent"
STENCIL_EVENT_START_CONDITIONAL = "StartConditionalEvent"
STENCIL_EVENT_START_ESCALATION = "StartEscalationEvent"

STENCIL_EVENT_END_NONE = "EndNoneEvent"
STENCIL_EVENT_END_ERROR = "EndErrorEvent"
STENCIL_EVENT_END_ESCALATION = "EndEscalationEvent"
STENCIL_EVENT_END_CANCEL = "EndCancelEvent"
STENCIL_EVENT_END_TERMINATE = "EndTerminateEvent"

STENCIL_SUB_PROCESS = "SubProcess"

STENCIL_COLLAPSED_SUB_PROCESS = "CollapsedSubProcess"

STENCIL_EVENT_SUB_PROCESS = "EventSubProcess"

STENCIL_ADHOC_SUB_PROCESS = "AdhocSubProcess"

STENCIL_CALL_ACTIVITY = "CallActivity"

STENCIL_POOL = "Pool"

STENCIL_LANE = "Lane"

STENCIL_TASK_BUSINESS_RULE = "BusinessRule"
STENCIL_TASK_MAIL = "MailTask"
STENCIL_TASK_MANUAL = "ManualTask"
STENCIL_TASK_RECEIVE = "ReceiveTask"
STENCIL_TASK_RECEIVE_EVENT = "ReceiveEventTask"
STENCIL_TASK_SCRIPT = "ScriptTask"
STENCIL_TASK_SEND = "SendTask"
STENCIL_TASK_SERVICE = "ServiceTask"
STENCIL_TASK_USER = "UserTask"
STENCIL_TASK_CAMEL = "CamelTask"
STENCIL_TASK_MULE = "MuleTask"
STENCIL_TASK_HTTP = "HttpTask"
STENCIL_TASK_SEND_EVENT = "SendEventTask"
STENCIL_TASK_EXTERNAL_WORKER = "ExternalWorkerTask"
STENCIL_TASK_SHELL = "ShellTask"
STENCIL_TASK_DECISION = "DecisionTask"

STENCIL_GATEWAY_EXCLUSIVE = "ExclusiveGateway"
STENCIL_GATEWAY_PARALLEL = "ParallelGateway"
STENCIL_GATEWAY_INCLUSIVE = "InclusiveGateway"
STENCIL_GATEWAY_EVENT = "EventGateway"

STENCIL_EVENT_BOUNDARY_TIMER = "BoundaryTimerEvent"
STENCIL_EVENT_BOUNDARY_ERROR = "BoundaryErrorEvent"
STENCIL_EVENT_BOUNDARY_CONDITIONAL = "BoundaryConditionalEvent"
STENCIL_EVENT_BOUNDARY_ESCALATION = "BoundaryEscalationEvent"
STENCIL_EVENT_BOUNDARY_SIGNAL = "BoundarySignalEvent"
STENCIL_EVENT_BOUNDARY_MESSAGE = "BoundaryMessageEvent"
STENCIL_EVENT_BOUNDARY_EVENT_REGISTRY = "BoundaryEventRegistryEvent"
STENCIL_EVENT_BOUNDARY_VARIABLE_LISTENER = "BoundaryVariableListenerEvent"
STENCIL_EVENT_BOUNDARY_CANCEL = "BoundaryCancelEvent"
STENCIL_EVENT_BOUNDARY_COMPENSATION = "BoundaryCompensationEvent"

STENCIL_EVENT_CATCH_SIGNAL = "CatchSignalEvent"
STENCIL_EVENT_CATCH_TIMER = "CatchTimerEvent"
STENCIL_EVENT_CATCH_MESSAGE = "CatchMessageEvent"
STENCIL_EVENT_CATCH_CONDITIONAL = "CatchConditionalEvent"
STENCIL_EVENT_CATCH_EVENT_REGISTRY = "CatchEventRegistryEvent"
STENCIL_EVENT_CATCH_VARIABLE_LISTENER = "CatchVariableListenerEvent"

STENCIL_EVENT_THROW_SIGNAL = "ThrowSignalEvent"
STENCIL_EVENT_THROW_ESCALATION = "ThrowEscalationEvent"
STENCIL_EVENT_THROW_NONE = "ThrowNoneEvent"
STENCIL_EVENT_THROW_COMPENSATION = "ThrowCompensationEvent"

STENCIL_SEQUENCE_FLOW = "SequenceFlow"

STENCIL_MESSAGE_FLOW = "MessageFlow"

STENCIL_ASSOCIATION = "Association"

STENCIL_DATA_ASSOCIATION = "DataAssociation"

STENCIL_TEXT_ANNOTATION = "TextAnnotation"

STENCIL_DATA_STORE = "DataStore"

# Property keys
PROPERTY_VALUE_YES = "Yes"
PROPERTY_VALUE_NO = "No"

PROPERTY_OVERRIDE_ID = "overrideid"

PROPERTY_NAME = "name"

PROPERTY_DOCUMENTATION = "documentation"

PROPERTY_PROCESS_ID = "process_id"
PROPERTY_PROCESS_VERSION = "process_version"
PROPERTY_PROCESS_AUTHOR = "process_author"
PROPERTY_PROCESS_NAMESPACE = "process_namespace"
PROPERTY_PROCESS_HISTORYLEVEL = "process_historylevel"

PROPERTY_IS_EXECUTABLE = "isexecutable"
PROPERTY_IS_EAGER_EXECUTION_FETCHING = "iseagerexecutionfetch"

PROPERTY_PROCESS_POTENTIALSTARTERUSER = "process_potentialstarteruser"
PROPERTY_PROCESS_POTENTIALSTARTERGROUP = "process_potentialstartergroup"

PROPERTY_TIMER_DURATION = "timerdurationdefinition"
PROPERTY_TIMER_DATE = "timerdatedefinition"
PROPERTY_TIMER_CYCLE = "timercycledefinition"
PROPERTY_TIMER_CYCLE_END_DATE = "timerenddatedefinition"

PROPERTY_CALENDAR_NAME = "calendarname"

PROPERTY_MESSAGES = "messages"

PROPERTY_MESSAGE_ID = "message_id"
PROPERTY_MESSAGE_NAME = "message_name"
PROPERTY_MESSAGE_ITEM_REF = "message_item_ref"

PROPERTY_MESSAGEREF = "messageref"

PROPERTY_MESSAGEEXPRESSION = "messageexpression"

PROPERTY_SIGNALREF = "signalref"

PROPERTY_SIGNALEXPRESSION = "signalexpression"

PROPERTY_VARIABLE_LISTENER_VARIABLE_NAME = "variablelistenervariablename"
PROPERTY_VARIABLE_LISTENER_VARIABLE_CHANGE_TYPE = "variablelistenervariablechangetype"

PROPERTY_CONDITIONAL_EVENT_CONDITION = "conditionaleventcondition"

PROPERTY_ERRORREF = "errorref"

PROPERTY_ERROR_VARIABLE_NAME = "errorvariablename"
PROPERTY_ERROR_VARIABLE_TRANSIENT = "errorvariabletransient"
PROPERTY_ERROR_VARIABLE_LOCAL_SCOPE = "errorvariablelocalscope"

PROPERTY_ESCALATION_DEFINITIONS = "escalationdefinitions"
PROPERTY_ESCALATION_DEFINITION_ID = "id"
PROPERTY_ESCALATION_DEFINITION_NAME = "name"

PROPERTY_ESCALATIONREF = "escalationref"

PROPERTY_INTERRUPTING = "interrupting"

PROPERTY_CANCEL_ACTIVITY = "cancelactivity"

PROPERTY_NONE_STARTEVENT_INITIATOR = "initiator"

PROPERTY_ASYNCHRONOUS = "asynchronousdefinition"

PROPERTY_EXCLUSIVE = "exclusivedefinition"

PROPERTY_MULTIINSTANCE_TYPE = "multiinstance_type"
PROPERTY_MULTIINSTANCE_CARDINALITY = "multiinstance_cardinality"
PROPERTY_MULTIINSTANCE_COLLECTION = "multiinstance_collection"
PROPERTY_MULTIINSTANCE_VARIABLE = "multiinstance_variable"
PROPERTY_MULTIINSTANCE_CONDITION = "multiinstance_condition"
PROPERTY_MULTIINSTANCE_INDEX_VARIABLE = "multiinstance_index_variable"
PROPERTY_MULTIINSTANCE_VARIABLE_AGGREGATIONS = "multiinstance_variableaggregations"

PROPERTY_TASK_LISTENERS = "tasklisteners"

PROPERTY_EXECUTION_LISTENERS = "executionlisteners"

PROPERTY_LISTENER_EVENT = "event"
PROPERTY_LISTENER_CLASS_NAME = "className"
PROPERTY_LISTENER_EXPRESSION = "expression"
PROPERTY_LISTENER_DELEGATE_EXPRESSION = "delegateExpression"
PROPERTY_LISTENER_FIELDS = "fields"

PROPERTY_EVENT_LISTENERS = "eventlisteners"

PROPERTY_EVENTLISTENER_VALUE = "eventListeners"
PROPERTY_EVENTLISTENER_EVENTS = "events"
PROPERTY_EVENTLISTENER_EVENT = "event"
PROPERTY_EVENTLISTENER_IMPLEMENTATION = "implementation"
PROPERTY_EVENTLISTENER_RETHROW_EVENT = "rethrowEvent"
PROPERTY_EVENTLISTENER_RETHROW_TYPE = "rethrowType"
PROPERTY_EVENTLISTENER_CLASS_NAME = "className"
PROPERTY_EVENTLISTENER_DELEGATE_EXPRESSION = "delegateExpression"
PROPERTY_EVENTLISTENER_ENTITY_TYPE = "entityType"
PROPERTY_EVENTLISTENER_ERROR_CODE = "errorcode"
PROPERTY_EVENTLISTENER_SIGNAL_NAME = "signalname"
PROPERTY_EVENTLISTENER_MESSAGE_NAME = "messagename"

PROPERTY_FIELD_NAME = "name"
PROPERTY_FIELD_STRING_VALUE = "stringValue"
PROPERTY_FIELD_EXPRESSION = "expression"
PROPERTY_FIELD_STRING = "string"

PROPERTY_FORMKEY = "formkeydefinition"

PROPERTY_FORM_FIELD_VALIDATION = "formfieldvalidation"

PROPERTY_USERTASK_ASSIGNMENT = "usertaskassignment"
PROPERTY_USERTASK_PRIORITY = "prioritydefinition"
PROPERTY_USERTASK_DUEDATE = "duedatedefinition"
PROPERTY_USERTASK_ASSIGNEE = "assignee"
PROPERTY_USERTASK_OWNER = "owner"
PROPERTY_USERTASK_CANDIDATE_USERS = "candidateUsers"
PROPERTY_USERTASK_CANDIDATE_GROUPS = "candidateGroups"
PROPERTY_USERTASK_CATEGORY = "categorydefinition"
PROPERTY_USERTASK_TASK_ID_VARIABLE_NAME = "taskidvariablename"

PROPERTY_SERVICETASK_CLASS = "servicetaskclass"
PROPERTY_SERVICETASK_EXPRESSION = "servicetaskexpression"
PROPERTY_SERVICETASK_DELEGATE_EXPRESSION = "servicetaskdelegateexpression"
PROPERTY_SERVICETASK_RESULT_VARIABLE = "servicetaskresultvariable"
PROPERTY_SERVICETASK_EXCEPTIONS = "servicetaskexceptions"
PROPERTY_SERVICETASK_EXCEPTION_CLASS = "class"
PROPERTY_SERVICETASK_EXCEPTION_CODE = "code"
PROPERTY_SERVICETASK_EXCEPTION_CHILDREN = "children"
PROPERTY_SERVICETASK_FIELDS = "servicetaskfields"
PROPERTY_SERVICETASK_FIELD_NAME = "name"
PROPERTY_SERVICETASK_FIELD_STRING_VALUE = "stringValue"
PROPERTY_SERVICETASK_FIELD_STRING = "string"
PROPERTY_SERVICETASK_FIELD_EXPRESSION = "expression"
PROPERTY_SERVICETASK_TRIGGERABLE = "servicetasktriggerable"
PROPERTY_SERVICETASK_USE_LOCAL_SCOPE_FOR_RESULT_VARIABLE = "servicetaskuselocalscopeforresultvariable"
PROPERTY_SERVICETASK_FAILED_JOB_RETRY_TIME_CYCLE = "servicetaskfailedjobretrytimecycle"
PROPERTY_SERVICETASK_STORE_TRANSIENT_VARIABLE = "servicetaskstoreresultvariabletransient"

PROPERTY_FORM_PROPERTIES = "formproperties"
PROPERTY_FORM_ID = "id"
PROPERTY_FORM_NAME = "name"
PROPERTY_FORM_TYPE = "type"
PROPERTY_FORM_EXPRESSION = "expression"
PROPERTY_FORM_VARIABLE = "variable"
PROPERTY_FORM_DEFAULT = "default"
PROPERTY_FORM_DATE_PATTERN = "datePattern"
PROPERTY_FORM_REQUIRED = "required"
PROPERTY_FORM_READABLE = "readable"
PROPERTY_FORM_WRITABLE = "writable"
PROPERTY_FORM_ENUM_VALUES = "enumValues"
PROPERTY_FORM_ENUM_VALUES_NAME = "name"
PROPERTY_FORM_ENUM_VALUES_ID = "id"

PROPERTY_DATA_PROPERTIES = "dataproperties"
PROPERTY_DATA_ID = "dataproperty_id"
PROPERTY_DATA_NAME = "dataproperty_name"
PROPERTY_DATA_TYPE = "dataproperty_type"
PROPERTY_DATA_VALUE = "dataproperty_value"

PROPERTY_SCRIPT_FORMAT = "scriptformat"
PROPERTY_SCRIPT_TEXT = "scripttext"
PROPERTY_SCRIPT_AUTO_STORE_VARIABLES = "scriptautostorevariables"

PROPERTY_RULETASK_CLASS = "ruletask_class"
PROPERTY_RULETASK_VARIABLES_INPUT = "ruletask_variables_input"
PROPERTY_RULETASK_RESULT = "ruletask_result"
PROPERTY_RULETASK_RULES = "ruletask_rules"
PROPERTY_RULETASK_EXCLUDE = "ruletask_exclude"

PROPERTY_MAILTASK_HEADERS = "mailtaskheaders"
PROPERTY_MAILTASK_TO = "mailtaskto"
PROPERTY_MAILTASK_FROM = "mailtaskfrom"
PROPERTY_MAILTASK_SUBJECT = "mailtasksubject"
PROPERTY_MAILTASK_CC = "mailtaskcc"
PROPERTY_MAILTASK_BCC = "mailtaskbcc"
PROPERTY_MAILTASK_TEXT = "mailtasktext"
PROPERTY_MAILTASK_HTML = "mailtaskhtml"
PROPERTY_MAILTASK_HTML_VAR = "mailtaskhtmlvar"
PROPERTY_MAILTASK_TEXT_VAR = "mailtasktextvar"
PROPERTY_MAILTASK_CHARSET = "mailtaskcharset"

PROPERTY_CALLACTIVITY_CALLEDELEMENT = "callactivitycalledelement"
PROPERTY_CALLACTIVITY_CALLEDELEMENTTYPE = "callactivitycalledelementtype"
PROPERTY_CALLACTIVITY_IN = "callactivityinparameters"
PROPERTY_CALLACTIVITY_OUT = "callactivityoutparameters"
PROPERTY_CALLACTIVITY_FALLBACK_TO_DEFAULT_TENANT = "callactivityfallbacktodefaulttenant"
PROPERTY_CALLACTIVITY_ID_VARIABLE_NAME = "callactivityidvariablename"
PROPERTY_CALLACTIVITY_INHERIT_VARIABLES = "callactivityinheritvariables"
PROPERTY_CALLACTIVITY_SAME_DEPLOYMENT = "callactivitysamedeployment"
PROPERTY_CALLACTIVITY_PROCESS_INSTANCE_NAME = "callactivityprocessinstancename"
PROPERTY_CALLACTIVITY_BUSINESS_KEY = "callactivitybusinesskey"
PROPERTY_CALLACTIVITY_INHERIT_BUSINESS_KEY = "callactivityinheritbusinesskey"
PROPERTY_CALLACTIVITY_USE_LOCALSCOPE_FOR_OUTPARAMETERS = "callactivityuselocalscopeforoutparameters"
PROPERTY_CALLACTIVITY_COMPLETE_ASYNC = "callactivitycompleteasync"

PROPERTY_IOPARAMETER_SOURCE = "source"
PROPERTY_IOPARAMETER_SOURCE_EXPRESSION = "sourceExpression"
PROPERTY_IOPARAMETER_TARGET = "target"

PROPERTY_CAMELTASK_CAMELCONTEXT = "cameltaskcamelcontext"

PROPERTY_MULETASK_ENDPOINT_URL = "muletaskendpointurl"
PROPERTY_MULETASK_LANGUAGE = "muletasklanguage"
PROPERTY_MULETASK_PAYLOAD_EXPRESSION = "muletaskpayloadexpression"
PROPERTY_MULETASK_RESULT_VARIABLE = "muletaskresultvariable"

PROPERTY_SEQUENCEFLOW_DEFAULT = "defaultflow"
PROPERTY_SEQUENCEFLOW_CONDITION = "conditionsequenceflow"
PROPERTY_SEQUENCEFLOW_ORDER = "sequencefloworder"

PROPERTY_FORM_REFERENCE = "formreference"

PROPERTY_MESSAGE_DEFINITIONS = "messagedefinitions"
PROPERTY_MESSAGE_DEFINITION_ID = "id"
PROPERTY_MESSAGE_DEFINITION_NAME = "name"
PROPERTY_MESSAGE_DEFINITION_ITEM_REF = "message_item_ref"

PROPERTY_SIGNAL_DEFINITIONS = "signaldefinitions"
PROPERTY_SIGNAL_DEFINITION_ID = "id"
PROPERTY_SIGNAL_DEFINITION_NAME = "name"
PROPERTY_SIGNAL_DEFINITION_SCOPE = "scope"

PROPERTY_TERMINATE_ALL = "terminateall"
PROPERTY_TERMINATE_MULTI_INSTANCE = "terminateMultiInstance"

PROPERTY_DECISIONTABLE_REFERENCE = "decisiontaskdecisiontablereference"

PROPERTY_DECISIONSERVICE_REFERENCE = "decisiontaskdecisionservicereference"

PROPERTY_DECISIONTABLE_REFERENCE_ID = "decisiontablereferenceid"
PROPERTY_DECISIONTABLE_REFERENCE_NAME = "decisiontablereferencename"
PROPERTY_DECISIONTABLE_REFERENCE_KEY = "decisionTableReferenceKey"

PROPERTY_DECISIONSERVICE_REFERENCE_KEY = "decisionServiceReferenceKey"

PROPERTY_DECISIONTABLE_THROW_ERROR_NO_HITS = "decisiontaskthrowerroronnohits"
PROPERTY_DECISIONTABLE_THROW_ERROR_NO_HITS_KEY = "decisionTaskThrowErrorOnNoHits"
PROPERTY_DECISIONTABLE_FALLBACK_TO_DEFAULT_TENANT = "decisiontaskfallbacktodefaulttenant"
PROPERTY_DECISIONTABLE_FALLBACK_TO_DEFAULT_TENANT_KEY = "fallbackToDefaultTenant"
PROPERTY_DECISIONTABLE_SAME_DEPLOYMENT = "decisiontasksamedeployment"
PROPERTY_DECISIONTABLE_SAME_DEPLOYMENT_KEY = "sameDeployment"

PROPERTY_DECISION_REFERENCE_TYPE = "decisionReferenceType"
REFERENCE_TYPE_DECISION_TABLE = "decisionTable"
REFERENCE_TYPE_DECISION_SERVICE = "decisionService"

PROPERTY_HTTPTASK_REQ_METHOD = "httptaskrequestmethod"
PROPERTY_HTTPTASK_REQ_URL = "httptaskrequesturl"
PROPERTY_HTTPTASK_REQ_HEADERS = "httptaskrequestheaders"
PROPERTY_HTTPTASK_REQ_BODY = "httptaskrequestbody"
PROPERTY_HTTPTASK_REQ_BODY_ENCODING = "httptaskrequestbodyencoding"
PROPERTY_HTTPTASK_REQ_TIMEOUT = "httptaskrequesttimeout"
PROPERTY_HTTPTASK_REQ_DISALLOW_REDIRECTS = "httptaskdisallowredirects"
PROPERTY_HTTPTASK_REQ_FAIL_STATUS_CODES = "httptaskfailstatuscodes"
PROPERTY_HTTPTASK_REQ_HANDLE_STATUS_CODES = "httptaskhandlestatuscodes"
PROPERTY_HTTPTASK_REQ_IGNORE_EXCEPTION = "httptaskignoreexception"
PROPERTY_HTTPTASK_RESPONSE_VARIABLE_NAME = "httptaskresponsevariablename"
PROPERTY_HTTPTASK_SAVE_REQUEST_VARIABLES = "httptasksaverequestvariables"
PROPERTY_HTTPTASK_SAVE_RESPONSE_PARAMETERS = "httptasksaveresponseparameters"
PROPERTY_HTTPTASK_RESULT_VARIABLE_PREFIX = "httptaskresultvariableprefix"
PROPERTY_HTTPTASK_SAVE_RESPONSE_TRANSIENT = "httptasksaveresponseparameterstransient"
PROPERTY_HTTPTASK_SAVE_RESPONSE_AS_JSON = "httptasksaveresponseasjson"
PROPERTY_HTTPTASK_PARALLEL_IN_SAME_TRANSACTION = "httptaskparallelinsametransaction"

PROPERTY_SKIP_EXPRESSION = "skipexpression"

PROPERTY_SHELLTASK_COMMAND = "shellcommand"
PROPERTY_SHELLTASK_ARG1 = "shellarg1"
PROPERTY_SHELLTASK_ARG2 = "shellarg2"
PROPERTY_SHELLTASK_ARG3 = "shellarg3"
PROPERTY_SHELLTASK_ARG4 = "shellarg4"
PROPERTY_SHELLTASK_ARG5 = "shellarg5"
PROPERTY_SHELLTASK_WAIT = "shellwait"
PROPERTY_SHELLTASK_OUTPUT_VARIABLE = "shelloutputvariable"
PROPERTY_SHELLTASK_ERROR_CODE_VARIABLE = "shellerrorcodevariable"
PROPERTY_SHELLTASK_ERROR_REDIRECT = "shellerrorredirect"
PROPERTY_SHELLTASK_CLEAN_ENV = "shellcleanenv"
PROPERTY_SHELLTASK_DIRECTORY = "shelldirectory"

PROPERTY_EXTERNAL_WORKER_JOB_TOPIC = "topic"

PROPERTY_EVENT_REGISTRY_EVENT_KEY = "eventkey"
PROPERTY_EVENT_REGISTRY_EVENT_NAME = "eventname"
PROPERTY_EVENT_REGISTRY_IN_PARAMETERS = "eventinparameters"
PROPERTY_EVENT_REGISTRY_OUT_PARAMETERS = "eventoutparameters"
PROPERTY_EVENT_REGISTRY_CORRELATION_PARAMETERS = "eventcorrelationparameters"
PROPERTY_EVENT_REGISTRY_CHANNEL_KEY = "channelkey"
PROPERTY_EVENT_REGISTRY_CHANNEL_NAME = "channelname"
PROPERTY_EVENT_REGISTRY_CHANNEL_TYPE = "channeltype"
PROPERTY_EVENT_REGISTRY_CHANNEL_DESTINATION = "channeldestination"
PROPERTY_EVENT_REGISTRY_KEY_DETECTION_FIXED_VALUE = "keydetectionfixedvalue"
PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_FIELD = "keydetectionjsonfield"
PROPERTY_EVENT_REGISTRY_KEY_DETECTION_JSON_POINTER = "keydetectionjsonpointer"
PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_KEY = "triggereventkey"
PROPERTY_EVENT_REGISTRY_TRIGGER_EVENT_NAME = "triggereventname"
PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_KEY = "triggerchannelkey"
PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_NAME = "triggerchannelname"
PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_TYPE = "triggerchanneltype"
PROPERTY_EVENT_REGISTRY_TRIGGER_CHANNEL_DESTINATION = "triggerchanneldestination"
PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTNAME = "eventName"
PROPERTY_EVENT_REGISTRY_PARAMETER_EVENTTYPE = "eventType"
PROPERTY_EVENT_REGISTRY_PARAMETER_VARIABLENAME = "variableName"
PROPERTY_EVENT_REGISTRY_CORRELATIONNAME = "name"
PROPERTY_EVENT_REGISTRY_CORRELATIONTYPE = "type"
PROPERTY_EVENT_REGISTRY_CORRELATIONVALUE = "value"

PROPERTY_FOR_COMPENSATION = "isforcompensation"

PROPERTY_COMPENSATION_ACTIVITY_REF = "compensationactivityref"

# Container and artifact keys
PROPERTY_ACTIVITY_TYPE = "activitytype"
PROPERTY_IS_TRANSACTION = "istransaction"
PROPERTY_TRIGGERED_BY_EVENT = "triggeredbyevent"
PROPERTY_COMPLETION_CONDITION = "completioncondition"
PROPERTY_ORDERING = "ordering"
PROPERTY_CANCEL_REMAINING_INSTANCES = "cancelremaininginstances"
PROPERTY_TEXT = "text"
PROPERTY_DATA_STORE_REFERENCE = "datastorereference"

# Value wrappers inside structured properties
VALUE_SEQUENCE_FLOW_ORDER = "sequenceFlowOrder"
VALUE_EXECUTION_LISTENERS = "executionListeners"
VALUE_TASK_LISTENERS = "taskListeners"
VALUE_FORM_PROPERTIES = "formProperties"
VALUE_FIELDS = "fields"
VALUE_EXCEPTIONS = "exceptions"
VALUE_IN_PARAMETERS = "inParameters"
VALUE_OUT_PARAMETERS = "outParameters"
VALUE_CORRELATION_PARAMETERS = "correlationParameters"
VALUE_AGGREGATIONS = "aggregations"
VALUE_ASSIGNMENT = "assignment"

# Service task sub-types
SERVICE_TASK_TYPE_MAIL = "mail"
SERVICE_TASK_TYPE_CAMEL = "camel"
SERVICE_TASK_TYPE_MULE = "mule"
SERVICE_TASK_TYPE_HTTP = "http"
SERVICE_TASK_TYPE_DMN = "dmn"
SERVICE_TASK_TYPE_SHELL = "shell"
SERVICE_TASK_TYPE_SEND_EVENT = "send-event"
SERVICE_TASK_TYPE_EXTERNAL_WORKER = "external-worker"
