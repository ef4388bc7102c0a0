"""
Gateway Converters

Gateways carry no family-specific properties. The shared converter writes
their async and exclusive flags and the explicit outgoing flow order; the
default flow is recorded from the sequence flow side once all edges are
linked.
"""

from typing import Type

from bpmn_json_converter.converter.base import BaseElementConverter
from bpmn_json_converter.converter.constants import (
    STENCIL_GATEWAY_EVENT,
    STENCIL_GATEWAY_EXCLUSIVE,
    STENCIL_GATEWAY_INCLUSIVE,
    STENCIL_GATEWAY_PARALLEL,
)
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.properties import JsonNode
from bpmn_json_converter.models.bpmn_elements import (
    EventGateway,
    ExclusiveGateway,
    Gateway,
    InclusiveGateway,
    ParallelGateway,
)


class GatewayConverter(BaseElementConverter):
    gateway_type: Type[Gateway] = Gateway

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> Gateway:
        return self.gateway_type()


class ExclusiveGatewayConverter(GatewayConverter):
    stencils = (STENCIL_GATEWAY_EXCLUSIVE,)
    domain_types = (ExclusiveGateway,)
    gateway_type = ExclusiveGateway


class ParallelGatewayConverter(GatewayConverter):
    stencils = (STENCIL_GATEWAY_PARALLEL,)
    domain_types = (ParallelGateway,)
    gateway_type = ParallelGateway


class InclusiveGatewayConverter(GatewayConverter):
    stencils = (STENCIL_GATEWAY_INCLUSIVE,)
    domain_types = (InclusiveGateway,)
    gateway_type = InclusiveGateway


class EventGatewayConverter(GatewayConverter):
    stencils = (STENCIL_GATEWAY_EVENT,)
    domain_types = (EventGateway,)
    gateway_type = EventGateway
