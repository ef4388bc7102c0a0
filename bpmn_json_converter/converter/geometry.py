"""
Edge Geometry

Computes connector waypoints from editor dockers. Shapes are modeled as thin
border bands (outer outline minus an outline inset by ``LINE_WIDTH``) so that a
connector is trimmed to the visible edge of its source and target shapes
instead of ending at their centers.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

from bpmn_json_converter.converter.constants import (
    STENCIL_ADHOC_SUB_PROCESS,
    STENCIL_CALL_ACTIVITY,
    STENCIL_COLLAPSED_SUB_PROCESS,
    STENCIL_EVENT_BOUNDARY_CANCEL,
    STENCIL_EVENT_BOUNDARY_COMPENSATION,
    STENCIL_EVENT_BOUNDARY_CONDITIONAL,
    STENCIL_EVENT_BOUNDARY_ERROR,
    STENCIL_EVENT_BOUNDARY_ESCALATION,
    STENCIL_EVENT_BOUNDARY_EVENT_REGISTRY,
    STENCIL_EVENT_BOUNDARY_MESSAGE,
    STENCIL_EVENT_BOUNDARY_SIGNAL,
    STENCIL_EVENT_BOUNDARY_TIMER,
    STENCIL_EVENT_BOUNDARY_VARIABLE_LISTENER,
    STENCIL_EVENT_CATCH_CONDITIONAL,
    STENCIL_EVENT_CATCH_EVENT_REGISTRY,
    STENCIL_EVENT_CATCH_MESSAGE,
    STENCIL_EVENT_CATCH_SIGNAL,
    STENCIL_EVENT_CATCH_TIMER,
    STENCIL_EVENT_CATCH_VARIABLE_LISTENER,
    STENCIL_EVENT_END_CANCEL,
    STENCIL_EVENT_END_ERROR,
    STENCIL_EVENT_END_ESCALATION,
    STENCIL_EVENT_END_NONE,
    STENCIL_EVENT_END_TERMINATE,
    STENCIL_EVENT_START_CONDITIONAL,
    STENCIL_EVENT_START_ERROR,
    STENCIL_EVENT_START_ESCALATION,
    STENCIL_EVENT_START_EVENT_REGISTRY,
    STENCIL_EVENT_START_MESSAGE,
    STENCIL_EVENT_START_NONE,
    STENCIL_EVENT_START_SIGNAL,
    STENCIL_EVENT_START_TIMER,
    STENCIL_EVENT_START_VARIABLE_LISTENER,
    STENCIL_EVENT_SUB_PROCESS,
    STENCIL_EVENT_THROW_COMPENSATION,
    STENCIL_EVENT_THROW_ESCALATION,
    STENCIL_EVENT_THROW_NONE,
    STENCIL_EVENT_THROW_SIGNAL,
    STENCIL_GATEWAY_EVENT,
    STENCIL_GATEWAY_EXCLUSIVE,
    STENCIL_GATEWAY_INCLUSIVE,
    STENCIL_GATEWAY_PARALLEL,
    STENCIL_SUB_PROCESS,
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
    STENCIL_TEXT_ANNOTATION,
)
from bpmn_json_converter.models.bpmn_elements import GraphicInfo

LINE_WIDTH = 0.05

_EPSILON = 1e-9


class ShapeKind(str, Enum):
    """Outline used when trimming connectors."""

    ELLIPSE = "ellipse"
    RECTANGLE = "rectangle"
    DIAMOND = "diamond"


CIRCLE_STENCILS = frozenset(
    {
        STENCIL_EVENT_START_CONDITIONAL,
        STENCIL_EVENT_START_ERROR,
        STENCIL_EVENT_START_ESCALATION,
        STENCIL_EVENT_START_MESSAGE,
        STENCIL_EVENT_START_NONE,
        STENCIL_EVENT_START_TIMER,
        STENCIL_EVENT_START_SIGNAL,
        STENCIL_EVENT_START_EVENT_REGISTRY,
        STENCIL_EVENT_START_VARIABLE_LISTENER,
        STENCIL_EVENT_BOUNDARY_CONDITIONAL,
        STENCIL_EVENT_BOUNDARY_ERROR,
        STENCIL_EVENT_BOUNDARY_ESCALATION,
        STENCIL_EVENT_BOUNDARY_SIGNAL,
        STENCIL_EVENT_BOUNDARY_TIMER,
        STENCIL_EVENT_BOUNDARY_MESSAGE,
        STENCIL_EVENT_BOUNDARY_EVENT_REGISTRY,
        STENCIL_EVENT_BOUNDARY_VARIABLE_LISTENER,
        STENCIL_EVENT_BOUNDARY_CANCEL,
        STENCIL_EVENT_BOUNDARY_COMPENSATION,
        STENCIL_EVENT_CATCH_CONDITIONAL,
        STENCIL_EVENT_CATCH_MESSAGE,
        STENCIL_EVENT_CATCH_SIGNAL,
        STENCIL_EVENT_CATCH_TIMER,
        STENCIL_EVENT_CATCH_EVENT_REGISTRY,
        STENCIL_EVENT_CATCH_VARIABLE_LISTENER,
        STENCIL_EVENT_THROW_NONE,
        STENCIL_EVENT_THROW_SIGNAL,
        STENCIL_EVENT_THROW_ESCALATION,
        STENCIL_EVENT_THROW_COMPENSATION,
        STENCIL_EVENT_END_NONE,
        STENCIL_EVENT_END_ERROR,
        STENCIL_EVENT_END_ESCALATION,
        STENCIL_EVENT_END_CANCEL,
        STENCIL_EVENT_END_TERMINATE,
    }
)

RECTANGLE_STENCILS = frozenset(
    {
        STENCIL_CALL_ACTIVITY,
        STENCIL_SUB_PROCESS,
        STENCIL_COLLAPSED_SUB_PROCESS,
        STENCIL_EVENT_SUB_PROCESS,
        STENCIL_ADHOC_SUB_PROCESS,
        STENCIL_TASK_BUSINESS_RULE,
        STENCIL_TASK_MAIL,
        STENCIL_TASK_MANUAL,
        STENCIL_TASK_RECEIVE,
        STENCIL_TASK_RECEIVE_EVENT,
        STENCIL_TASK_SCRIPT,
        STENCIL_TASK_SEND,
        STENCIL_TASK_SEND_EVENT,
        STENCIL_TASK_SERVICE,
        STENCIL_TASK_USER,
        STENCIL_TASK_CAMEL,
        STENCIL_TASK_MULE,
        STENCIL_TASK_HTTP,
        STENCIL_TASK_DECISION,
        STENCIL_TASK_EXTERNAL_WORKER,
        STENCIL_TASK_SHELL,
        STENCIL_TEXT_ANNOTATION,
    }
)

GATEWAY_STENCILS = frozenset(
    {
        STENCIL_GATEWAY_EVENT,
        STENCIL_GATEWAY_EXCLUSIVE,
        STENCIL_GATEWAY_INCLUSIVE,
        STENCIL_GATEWAY_PARALLEL,
    }
)


class Point(NamedTuple):
    x: float
    y: float


class Line(NamedTuple):
    start: Point
    end: Point

    def at(self, t: float) -> Point:
        return Point(
            self.start.x + t * (self.end.x - self.start.x),
            self.start.y + t * (self.end.y - self.start.y),
        )


def classify_shape(stencil_id: Optional[str]) -> Optional[ShapeKind]:
    """Outline kind for a stencil, or None for shapes that are never trimmed."""
    if stencil_id in CIRCLE_STENCILS:
        return ShapeKind.ELLIPSE
    if stencil_id in RECTANGLE_STENCILS:
        return ShapeKind.RECTANGLE
    if stencil_id in GATEWAY_STENCILS:
        return ShapeKind.DIAMOND
    return None


@dataclass(frozen=True)
class BorderRegion:
    """Border band of a shape: its outline minus an inset outline."""

    kind: ShapeKind
    x: float
    y: float
    width: float
    height: float

    def inset(self) -> "BorderRegion":
        return BorderRegion(
            self.kind,
            self.x + LINE_WIDTH,
            self.y + LINE_WIDTH,
            self.width - 2 * LINE_WIDTH,
            self.height - 2 * LINE_WIDTH,
        )

    def outline_crossings(self, line: Line) -> List[float]:
        """Line parameters ``t`` in [0, 1] where the segment crosses the outline."""
        if self.width <= 0 or self.height <= 0:
            return []
        if self.kind == ShapeKind.ELLIPSE:
            return _ellipse_crossings(self, line)
        return _polygon_crossings(self.polygon(), line)

    def polygon(self) -> List[Point]:
        if self.kind == ShapeKind.DIAMOND:
            middle_x = self.x + self.width / 2
            middle_y = self.y + self.height / 2
            return [
                Point(self.x, middle_y),
                Point(middle_x, self.y),
                Point(self.x + self.width, middle_y),
                Point(middle_x, self.y + self.height),
            ]
        return [
            Point(self.x, self.y),
            Point(self.x + self.width, self.y),
            Point(self.x + self.width, self.y + self.height),
            Point(self.x, self.y + self.height),
        ]


def border_region(kind: ShapeKind, info: GraphicInfo, docker: Optional[Point] = None) -> BorderRegion:
    """Border band for a placed shape.

    Ellipses are sized from the connector docker, which the editor places at
    the center of an event, so the docker doubles as the half-width and half-height.
    """
    if kind == ShapeKind.ELLIPSE and docker is not None:
        return BorderRegion(kind, info.x, info.y, 2 * docker.x, 2 * docker.y)
    return BorderRegion(kind, info.x, info.y, info.width, info.height)


def _polygon_crossings(points: Sequence[Point], line: Line) -> List[float]:
    crossings = []
    dx = line.end.x - line.start.x
    dy = line.end.y - line.start.y
    for i, p in enumerate(points):
        q = points[(i + 1) % len(points)]
        ex = q.x - p.x
        ey = q.y - p.y
        denominator = dx * ey - dy * ex
        if abs(denominator) < _EPSILON:
            continue
        wx = p.x - line.start.x
        wy = p.y - line.start.y
        t = (wx * ey - wy * ex) / denominator
        u = (wx * dy - wy * dx) / denominator
        if -_EPSILON <= t <= 1 + _EPSILON and -_EPSILON <= u <= 1 + _EPSILON:
            crossings.append(min(max(t, 0.0), 1.0))
    return crossings


def _ellipse_crossings(region: BorderRegion, line: Line) -> List[float]:
    a = region.width / 2
    b = region.height / 2
    cx = region.x + a
    cy = region.y + b
    sx = (line.start.x - cx) / a
    sy = (line.start.y - cy) / b
    dx = (line.end.x - line.start.x) / a
    dy = (line.end.y - line.start.y) / b
    qa = dx * dx + dy * dy
    if qa < _EPSILON:
        return []
    qb = 2 * (sx * dx + sy * dy)
    qc = sx * sx + sy * sy - 1
    discriminant = qb * qb - 4 * qa * qc
    if discriminant < 0:
        return []
    root = math.sqrt(discriminant)
    crossings = []
    for t in ((-qb - root) / (2 * qa), (-qb + root) / (2 * qa)):
        if -_EPSILON <= t <= 1 + _EPSILON:
            crossings.append(min(max(t, 0.0), 1.0))
    return crossings


def intersect(line: Line, region: BorderRegion, exiting: bool = False) -> Optional[Point]:
    """Point where a segment meets a border band.

    Args:
        line: Candidate connector segment
        region: Border band of the shape
        exiting: Prefer the crossing furthest along the segment (leaving a source
            shape) instead of the nearest one (entering a target shape)

    Returns:
        The crossing point, or None when the segment misses the band.
    """
    crossings = region.outline_crossings(line)
    if not crossings:
        crossings = region.inset().outline_crossings(line)
    if not crossings:
        return None
    t = max(crossings) if exiting else min(crossings)
    return line.at(t)


@dataclass(frozen=True)
class EdgeGraphics:
    """Trimmed waypoints plus the raw docking anchors of a connector."""

    waypoints: Tuple[Point, ...]
    source_docker: Point
    target_docker: Point


def compute_edge_graphics(
    dockers: Sequence[Point],
    source: GraphicInfo,
    target: GraphicInfo,
    source_kind: Optional[ShapeKind],
    target_kind: Optional[ShapeKind],
) -> EdgeGraphics:
    """Derive absolute waypoints for a connector.

    The first docker is relative to the source shape, the last one relative
    to the target shape, and interior dockers are absolute.

    Args:
        dockers: Editor dockers, at least two
        source: Absolute placement of the source shape
        target: Absolute placement of the target shape
        source_kind: Outline of the source, or None to skip trimming
        target_kind: Outline of the target, or None to skip trimming

    Returns:
        EdgeGraphics with the trimmed waypoint list

    Raises:
        ValueError: If fewer than two dockers are given
    """
    if len(dockers) < 2:
        raise ValueError(f"Connector needs at least two dockers, got {len(dockers)}")

    first_docker = dockers[0]
    last_docker = dockers[-1]
    start = Point(source.x + first_docker.x, source.y + first_docker.y)
    next_point = dockers[1]
    if len(dockers) == 2:
        next_point = Point(next_point.x + target.x, next_point.y + target.y)
    first_line = Line(start, next_point)

    waypoints: List[Point] = []
    trimmed_start = None
    if source_kind is not None:
        trimmed_start = intersect(first_line, border_region(source_kind, source, first_docker), exiting=True)
    waypoints.append(trimmed_start or start)

    if len(dockers) > 2:
        waypoints.extend(Point(d.x, d.y) for d in dockers[1:-1])
        last_line = Line(
            Point(dockers[-2].x, dockers[-2].y),
            Point(last_docker.x + target.x, last_docker.y + target.y),
        )
    else:
        last_line = first_line

    trimmed_end = None
    if target_kind is not None:
        trimmed_end = intersect(last_line, border_region(target_kind, target, last_docker))
    waypoints.append(trimmed_end or last_line.end)

    return EdgeGraphics(
        waypoints=tuple(waypoints),
        source_docker=Point(first_docker.x, first_docker.y),
        target_docker=Point(last_docker.x, last_docker.y),
    )
