"""
Artifact Converters

Text annotations and data store references. Both are placed shapes without
sequence flows; their links are drawn as associations and data associations.
"""

from bpmn_json_converter.converter.base import BaseElementConverter
from bpmn_json_converter.converter.constants import (
    PROPERTY_DATA_STORE_REFERENCE,
    PROPERTY_TEXT,
    STENCIL_DATA_STORE,
    STENCIL_TEXT_ANNOTATION,
)
from bpmn_json_converter.converter.context import ConverterContext
from bpmn_json_converter.converter.properties import JsonNode, get_property_value_as_string
from bpmn_json_converter.models.bpmn_elements import DataStoreReference, TextAnnotation


class TextAnnotationConverter(BaseElementConverter):
    stencils = (STENCIL_TEXT_ANNOTATION,)
    domain_types = (TextAnnotation,)

    def convert_element_to_json(
        self, properties: JsonNode, element: TextAnnotation, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        if element.text:
            properties[PROPERTY_TEXT] = element.text

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> TextAnnotation:
        return TextAnnotation(text=get_property_value_as_string(PROPERTY_TEXT, node) or None)


class DataStoreReferenceConverter(BaseElementConverter):
    """Data store references; outgoing data associations are collected by the base converter."""

    stencils = (STENCIL_DATA_STORE,)
    domain_types = (DataStoreReference,)

    def convert_element_to_json(
        self, properties: JsonNode, element: DataStoreReference, ctx: ConverterContext, shape: JsonNode
    ) -> None:
        if element.data_store_ref:
            properties[PROPERTY_DATA_STORE_REFERENCE] = element.data_store_ref

    def convert_json_to_element(self, node: JsonNode, ctx: ConverterContext) -> DataStoreReference:
        return DataStoreReference(
            data_store_ref=get_property_value_as_string(PROPERTY_DATA_STORE_REFERENCE, node) or None
        )
