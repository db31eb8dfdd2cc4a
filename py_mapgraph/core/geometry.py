"""
Planar geometry helpers for map graph construction.

Points coming out of the Voronoi stage are (x, y) pairs in the plane. Once they
enter the map graph they are addressed as (x, z) with y reserved for elevation,
and every position is quantized to a fixed decimal grid so that points that
differ only by floating-point noise share an identity.
"""

import math
from typing import NamedTuple, Optional, Tuple

import numpy as np

Point = Tuple[float, float]

# Decimal places kept when quantizing positions (1e-3 units).
VERTEX_PRECISION = 3


class DomainRect(NamedTuple):
    """Axis-aligned domain rectangle the diagram is clipped against."""
    x_min: float
    z_min: float
    x_max: float
    z_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.z_max - self.z_min

    @property
    def perimeter(self) -> float:
        return 2 * (self.width + self.height)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in clockwise order: top-left, top-right, bottom-right, bottom-left."""
        return (
            (self.x_min, self.z_max),
            (self.x_max, self.z_max),
            (self.x_max, self.z_min),
            (self.x_min, self.z_min),
        )

    def contains(self, x: float, z: float) -> bool:
        return self.x_min <= x <= self.x_max and self.z_min <= z <= self.z_max

    def on_boundary(self, x: float, z: float) -> bool:
        """True when a coordinate equals one of the four bounds exactly."""
        return x == self.x_min or x == self.x_max or z == self.z_min or z == self.z_max

    def quantized(self, precision: int = VERTEX_PRECISION) -> "DomainRect":
        return DomainRect(*(round(v, precision) for v in self))


class LineSegment:
    """Mutable segment between two points; snapping rewrites its end point."""

    __slots__ = ("p0", "p1")

    def __init__(self, p0: Point, p1: Point):
        self.p0 = (float(p0[0]), float(p0[1]))
        self.p1 = (float(p1[0]), float(p1[1]))

    def reversed(self) -> "LineSegment":
        return LineSegment(self.p1, self.p0)

    def length(self) -> float:
        return distance(self.p0, self.p1)

    def __eq__(self, other):
        if not isinstance(other, LineSegment):
            return NotImplemented
        return self.p0 == other.p0 and self.p1 == other.p1

    def __repr__(self):
        return f"LineSegment({self.p0}, {self.p1})"


def quantize(x: float, z: float, precision: int = VERTEX_PRECISION) -> Point:
    """Round a planar position onto the vertex identity grid."""
    # + 0.0 folds -0.0 into 0.0
    return (round(x, precision) + 0.0, round(z, precision) + 0.0)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def signed_angle(center: Point, a: Point, b: Point) -> float:
    """
    Signed angle in radians from (a - center) to (b - center).

    Positive means b lies counter-clockwise of a as seen from center.
    """
    ax, ay = a[0] - center[0], a[1] - center[1]
    bx, by = b[0] - center[0], b[1] - center[1]
    return math.atan2(ax * by - ay * bx, ax * bx + ay * by)


def clockwise_angle(center: Point, p: Point) -> float:
    """Angle of p around center that increases when moving clockwise."""
    return -math.atan2(p[1] - center[1], p[0] - center[0])


def perimeter_position(rect: DomainRect, x: float, z: float) -> Optional[float]:
    """
    Distance travelled clockwise along the rectangle from the top-left corner
    to (x, z), or None if the point is not on the rectangle.

    The walk runs along the top edge to the right, down the right edge, along
    the bottom edge to the left and up the left edge. A point on two edges (a
    corner) takes the first edge in that order.
    """
    if z == rect.z_max and rect.x_min <= x <= rect.x_max:
        return x - rect.x_min
    if x == rect.x_max and rect.z_min <= z <= rect.z_max:
        return rect.width + (rect.z_max - z)
    if z == rect.z_min and rect.x_min <= x <= rect.x_max:
        return rect.width + rect.height + (rect.x_max - x)
    if x == rect.x_min and rect.z_min <= z <= rect.z_max:
        return 2 * rect.width + rect.height + (z - rect.z_min)
    return None


def clip_segment(p0: Point, p1: Point, rect: DomainRect) -> Optional[Tuple[Point, Point]]:
    """
    Liang-Barsky clipping of a segment against the rectangle.

    Returns the clipped end points, or None when the segment lies outside.
    Clipped ends that land on the rectangle are snapped to the exact bound.
    """
    x0, z0 = p0
    dx = p1[0] - x0
    dz = p1[1] - z0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - rect.x_min), (dx, rect.x_max - x0),
                 (-dz, z0 - rect.z_min), (dz, rect.z_max - z0)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    start = _snap_to_rect((x0 + t0 * dx, z0 + t0 * dz), rect)
    end = _snap_to_rect((x0 + t1 * dx, z0 + t1 * dz), rect)
    return start, end


def _snap_to_rect(p: Point, rect: DomainRect, eps: float = 1e-9) -> Point:
    x = float(np.clip(p[0], rect.x_min, rect.x_max))
    z = float(np.clip(p[1], rect.z_min, rect.z_max))
    for bound in (rect.x_min, rect.x_max):
        if abs(x - bound) < eps:
            x = bound
    for bound in (rect.z_min, rect.z_max):
        if abs(z - bound) < eps:
            z = bound
    return (x, z)
