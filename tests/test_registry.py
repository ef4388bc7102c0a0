"""
Tests for the stencil registry.

Tests:
- Stencil to converter lookup, including shared converters
- Domain type to converter lookup through base classes
- Unknown stencils and types
- Registry description used by the CLI
"""

import pytest

from bpmn_json_converter.converter.base import BaseElementConverter
from bpmn_json_converter.converter.containers import SubProcessConverter
from bpmn_json_converter.converter.errors import UnknownStencilError
from bpmn_json_converter.converter.events import BoundaryEventConverter, StartEventConverter
from bpmn_json_converter.converter.flows import SequenceFlowConverter
from bpmn_json_converter.converter.registry import DEFAULT_CONVERTERS, StencilRegistry, get_default_registry
from bpmn_json_converter.converter.tasks import MailTaskConverter, ServiceTaskConverter, UserTaskConverter
from bpmn_json_converter.models.bpmn_elements import (
    BaseElement,
    BoundaryEvent,
    HttpServiceTask,
    SequenceFlow,
    ServiceTask,
    SubProcess,
    Transaction,
    UserTask,
)


@pytest.fixture
def registry():
    return get_default_registry()


class TestStencilLookup:
    """Stencil id -> converter"""

    @pytest.mark.parametrize(
        "stencil_id,converter_type",
        [
            ("StartNoneEvent", StartEventConverter),
            ("StartTimerEvent", StartEventConverter),
            ("BoundaryCompensationEvent", BoundaryEventConverter),
            ("UserTask", UserTaskConverter),
            ("MailTask", MailTaskConverter),
            ("SubProcess", SubProcessConverter),
            ("CollapsedSubProcess", SubProcessConverter),
            ("SequenceFlow", SequenceFlowConverter),
        ],
    )
    def test_known_stencils(self, registry, stencil_id, converter_type):
        assert isinstance(registry.converter_for_stencil(stencil_id), converter_type)

    def test_shared_instance_per_converter(self, registry):
        assert registry.converter_for_stencil("SubProcess") is registry.converter_for_stencil("CollapsedSubProcess")

    def test_unknown_stencil(self, registry):
        assert registry.find_for_stencil("FancyWidget") is None
        assert registry.find_for_stencil(None) is None
        with pytest.raises(UnknownStencilError):
            registry.converter_for_stencil("FancyWidget")

    def test_structure_stencils_are_not_converters(self, registry):
        assert registry.find_for_stencil("Pool") is None
        assert registry.find_for_stencil("Lane") is None


class TestTypeLookup:
    """Domain type -> converter"""

    def test_exact_types(self, registry):
        assert isinstance(registry.converter_for_element(UserTask(id="t")), UserTaskConverter)
        assert isinstance(registry.converter_for_element(BoundaryEvent(id="b")), BoundaryEventConverter)
        assert isinstance(registry.converter_for_element(SequenceFlow(id="f")), SequenceFlowConverter)

    def test_subclasses_use_base_converter(self, registry):
        assert isinstance(registry.converter_for_element(Transaction(id="tx")), SubProcessConverter)
        assert isinstance(registry.converter_for_element(HttpServiceTask(id="h")), ServiceTaskConverter)

    def test_typed_service_tasks_written_by_service_converter(self, registry):
        assert isinstance(registry.converter_for_element(ServiceTask(id="s", type="mail")), ServiceTaskConverter)

    def test_unknown_type(self, registry):
        with pytest.raises(UnknownStencilError) as exc_info:
            registry.converter_for_element(BaseElement(id="mystery"))
        assert exc_info.value.element_id == "mystery"


class TestRegistration:
    """Building registries"""

    def test_default_registry_is_shared(self):
        assert get_default_registry() is get_default_registry()

    def test_every_default_stencil_registered(self, registry):
        for converter_type in DEFAULT_CONVERTERS:
            for stencil_id in converter_type.stencils:
                assert stencil_id in registry.stencil_ids

    def test_custom_registry(self):
        class AuditTaskConverter(BaseElementConverter):
            stencils = ("AuditTask",)
            domain_types = (SubProcess,)

        registry = StencilRegistry([SubProcessConverter])
        registry.register(AuditTaskConverter)

        assert isinstance(registry.converter_for_stencil("AuditTask"), AuditTaskConverter)
        assert isinstance(registry.converter_for_element(SubProcess(id="s")), AuditTaskConverter)
        assert isinstance(registry.converter_for_stencil("SubProcess"), SubProcessConverter)

    def test_describe(self, registry):
        rows = registry.describe()
        by_stencil = {stencil: (converter, types) for stencil, converter, types in rows}

        assert [row[0] for row in rows] == sorted(by_stencil)
        assert by_stencil["UserTask"] == ("UserTaskConverter", ["UserTask"])
        assert by_stencil["MailTask"] == ("MailTaskConverter", [])
        assert set(by_stencil["SubProcess"][1]) == {"SubProcess", "Transaction"}
