"""
Property Codec

Typed access to the editor JSON ``properties`` map and helpers for building
shape nodes. Property values may arrive as JSON encoded inside a JSON string;
:func:`validate_if_node_is_textual` unwraps them until a structured value is
reached. Malformed embedded JSON is logged and returned untouched.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Sequence

from bpmn_json_converter.converter.constants import (
    EDITOR_BOUNDS,
    EDITOR_BOUNDS_LOWER_RIGHT,
    EDITOR_BOUNDS_UPPER_LEFT,
    EDITOR_BOUNDS_X,
    EDITOR_BOUNDS_Y,
    EDITOR_CHILD_SHAPES,
    EDITOR_OUTGOING,
    EDITOR_SHAPE_ID,
    EDITOR_SHAPE_PROPERTIES,
    EDITOR_STENCIL,
    EDITOR_STENCIL_ID,
    PROPERTY_DECISIONTABLE_REFERENCE,
    PROPERTY_DECISIONSERVICE_REFERENCE,
    PROPERTY_FORM_REFERENCE,
    PROPERTY_NAME,
    PROPERTY_OVERRIDE_ID,
    PROPERTY_VALUE_NO,
    PROPERTY_VALUE_YES,
    STENCIL_EVENT_START_NONE,
    STENCIL_TASK_DECISION,
    STENCIL_TASK_USER,
)

logger = logging.getLogger(__name__)

JsonNode = Dict[str, Any]


def as_text(value: Any) -> str:
    """Render a JSON value the way the editor reads scalar text.

    Booleans become ``"true"``/``"false"``, numbers their decimal form, and
    objects or arrays the empty string.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    return ""


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = as_text(value)
    if text.lower() == "null":
        return None
    return text


def _to_boolean(text: Optional[str], default: bool) -> bool:
    if text is None:
        return default
    if text.lower() in (PROPERTY_VALUE_YES.lower(), "true"):
        return True
    if text.lower() in (PROPERTY_VALUE_NO.lower(), "false"):
        return False
    return default


def _to_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        items = []
        for item in value:
            if isinstance(item, dict):
                text = _text_or_none(item.get("value"))
            else:
                text = _text_or_none(item)
            if text is not None and text.strip():
                items.append(text.strip())
        return items
    text = _text_or_none(value)
    if not text:
        return []
    return [token.strip() for token in text.split(",")]


# ===========================
# Property getters
# ===========================


def get_property(name: str, node: Optional[JsonNode]) -> Any:
    """Raw value of ``node.properties[name]``, or None."""
    if not isinstance(node, dict):
        return None
    properties = node.get(EDITOR_SHAPE_PROPERTIES)
    if not isinstance(properties, dict):
        return None
    return properties.get(name)


def get_property_value_as_string(name: str, node: Optional[JsonNode]) -> Optional[str]:
    return _text_or_none(get_property(name, node))


def get_property_value_as_boolean(name: str, node: Optional[JsonNode], default: bool = False) -> bool:
    """Boolean property; recognizes true/false and the legacy Yes/No values."""
    return _to_boolean(get_property_value_as_string(name, node), default)


def get_property_value_as_list(name: str, node: Optional[JsonNode]) -> List[str]:
    """Comma-separated string or ``[{value: ...}]`` array as trimmed tokens."""
    return _to_list(get_property(name, node))


def get_value_as_string(name: str, node: Optional[JsonNode]) -> Optional[str]:
    """Like :func:`get_property_value_as_string` but reads ``node[name]``."""
    if not isinstance(node, dict):
        return None
    return _text_or_none(node.get(name))


def get_value_as_boolean(name: str, node: Optional[JsonNode], default: bool = False) -> bool:
    return _to_boolean(get_value_as_string(name, node), default)


def get_value_as_list(name: str, node: Optional[JsonNode]) -> List[str]:
    if not isinstance(node, dict):
        return []
    return _to_list(node.get(name))


def validate_if_node_is_textual(node: Any) -> Any:
    """Unwrap JSON that was stored as a string value.

    Args:
        node: Raw property value

    Returns:
        The parsed structure, re-parsed until it is no longer a non-empty string,
        or the original value when the text is not valid JSON.
    """
    while isinstance(node, str) and node:
        try:
            parsed = json.loads(node)
        except ValueError as e:
            if node.lstrip().startswith(("{", "[")):
                logger.warning(f"Malformed embedded JSON {node!r}: {e}")
            else:
                logger.debug(f"Keeping plain text value {node!r}")
            return node
        if parsed == node:
            return parsed
        node = parsed
    return node


def get_structured_property(name: str, node: Optional[JsonNode]) -> Any:
    """Property value with embedded JSON already unwrapped."""
    return validate_if_node_is_textual(get_property(name, node))


def is_empty(value: Optional[str]) -> bool:
    return value is None or value == ""


def is_not_empty(value: Optional[str]) -> bool:
    return not is_empty(value)


# ===========================
# Shape node helpers
# ===========================


def get_stencil_id(node: Optional[JsonNode]) -> Optional[str]:
    if not isinstance(node, dict):
        return None
    stencil = node.get(EDITOR_STENCIL)
    if isinstance(stencil, dict):
        return get_value_as_string(EDITOR_STENCIL_ID, stencil)
    return None


def get_element_id(node: JsonNode) -> Optional[str]:
    """Domain id of a shape: trimmed ``overrideid``, else its ``resourceId``."""
    override_id = get_property_value_as_string(PROPERTY_OVERRIDE_ID, node)
    if override_id is not None and override_id.strip():
        return override_id.strip()
    return get_value_as_string(EDITOR_SHAPE_ID, node)


def get_child_shapes(node: Optional[JsonNode]) -> List[JsonNode]:
    if not isinstance(node, dict):
        return []
    shapes = node.get(EDITOR_CHILD_SHAPES)
    if not isinstance(shapes, list):
        return []
    return [shape for shape in shapes if isinstance(shape, dict)]


def iter_shapes(node: Optional[JsonNode]) -> Iterator[JsonNode]:
    """Depth-first iteration over every nested child shape."""
    for shape in get_child_shapes(node):
        yield shape
        yield from iter_shapes(shape)


def get_outgoing_ids(node: JsonNode) -> List[str]:
    outgoing = node.get(EDITOR_OUTGOING)
    if not isinstance(outgoing, list):
        return []
    ids = []
    for entry in outgoing:
        resource_id = get_value_as_string(EDITOR_SHAPE_ID, entry) if isinstance(entry, dict) else None
        if resource_id is not None:
            ids.append(resource_id)
    return ids


def create_position_node(x: float, y: float) -> JsonNode:
    return {EDITOR_BOUNDS_X: x, EDITOR_BOUNDS_Y: y}


def create_bounds_node(
    lower_right_x: float, lower_right_y: float, upper_left_x: float, upper_left_y: float
) -> JsonNode:
    return {
        EDITOR_BOUNDS_LOWER_RIGHT: create_position_node(lower_right_x, lower_right_y),
        EDITOR_BOUNDS_UPPER_LEFT: create_position_node(upper_left_x, upper_left_y),
    }


def create_resource_node(resource_id: Optional[str]) -> JsonNode:
    return {EDITOR_SHAPE_ID: resource_id}


def create_child_shape(
    resource_id: Optional[str],
    stencil_id: str,
    lower_right_x: float,
    lower_right_y: float,
    upper_left_x: float,
    upper_left_y: float,
) -> JsonNode:
    """Empty shape node with bounds, stencil and an empty ``childShapes`` list."""
    return {
        EDITOR_BOUNDS: create_bounds_node(lower_right_x, lower_right_y, upper_left_x, upper_left_y),
        EDITOR_SHAPE_ID: resource_id,
        EDITOR_CHILD_SHAPES: [],
        EDITOR_STENCIL: {EDITOR_STENCIL_ID: stencil_id},
    }


def read_bounds(node: JsonNode) -> Optional[tuple]:
    """``(upper_left_x, upper_left_y, lower_right_x, lower_right_y)`` of a shape."""
    bounds = node.get(EDITOR_BOUNDS)
    if not isinstance(bounds, dict):
        return None
    upper_left = bounds.get(EDITOR_BOUNDS_UPPER_LEFT) or {}
    lower_right = bounds.get(EDITOR_BOUNDS_LOWER_RIGHT) or {}
    return (
        float(upper_left.get(EDITOR_BOUNDS_X, 0.0)),
        float(upper_left.get(EDITOR_BOUNDS_Y, 0.0)),
        float(lower_right.get(EDITOR_BOUNDS_X, 0.0)),
        float(lower_right.get(EDITOR_BOUNDS_Y, 0.0)),
    )


def look_for_source_ref(flow_id: str, child_shapes: Sequence[JsonNode]) -> Optional[str]:
    """Element id of the first shape whose ``outgoing`` lists ``flow_id``.

    Connectors do not record their own source, so it is recovered by scanning
    every shape, nested ones included.
    """
    for shape in child_shapes:
        if not isinstance(shape, dict):
            continue
        if flow_id in get_outgoing_ids(shape):
            return get_element_id(shape)
        source_ref = look_for_source_ref(flow_id, get_child_shapes(shape))
        if source_ref is not None:
            return source_ref
    return None


# ===========================
# Model reference lookups
# ===========================


class JsonLookupResult(NamedTuple):
    """Shape found by a reference lookup."""

    id: Optional[str]
    name: Optional[str]
    node: Any


def get_child_shapes_property_values(
    root: JsonNode, property_name: str, allowed_stencils: Sequence[str]
) -> List[JsonLookupResult]:
    results: List[JsonLookupResult] = []
    for shape in iter_shapes(root):
        if get_stencil_id(shape) not in allowed_stencils:
            continue
        properties = shape.get(EDITOR_SHAPE_PROPERTIES)
        if isinstance(properties, dict) and property_name in properties:
            name = properties.get(PROPERTY_NAME)
            results.append(
                JsonLookupResult(
                    get_element_id(shape),
                    as_text(name) if name is not None else None,
                    properties[property_name],
                )
            )
    return results


def get_form_references(root: JsonNode) -> List[JsonLookupResult]:
    return get_child_shapes_property_values(
        root, PROPERTY_FORM_REFERENCE, [STENCIL_TASK_USER, STENCIL_EVENT_START_NONE]
    )


def get_decision_table_references(root: JsonNode) -> List[JsonLookupResult]:
    return get_child_shapes_property_values(root, PROPERTY_DECISIONTABLE_REFERENCE, [STENCIL_TASK_DECISION])


def get_decision_service_references(root: JsonNode) -> List[JsonLookupResult]:
    return get_child_shapes_property_values(root, PROPERTY_DECISIONSERVICE_REFERENCE, [STENCIL_TASK_DECISION])
