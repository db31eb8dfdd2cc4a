"""
Per-site boundary resolution.

Turns the unordered Voronoi edges around one site into a clockwise outline:

1. Orient every segment so that walking it keeps the site on the right.
2. Sort the segments clockwise by the angle of their start point.
3. Drop degenerate segments, splicing their neighbours together when the gap
   they leave is below the snap distance.

The outline can still have gaps where the diagram was clipped by the plot
bounds; the graph builder closes those.
"""

from collections import defaultdict
from typing import Dict, List, Sequence

import structlog

from .geometry import LineSegment, Point, clockwise_angle, distance, quantize, signed_angle
from .voronoi_source import VoronoiSource

logger = structlog.get_logger()

DEFAULT_SNAP_DISTANCE = 1e-3


def group_segments_by_site(source: VoronoiSource,
                           snap_distance: float = DEFAULT_SNAP_DISTANCE) -> Dict[int, List[LineSegment]]:
    """
    Collect the visible edges of the diagram under each adjacent site.

    Edges shorter than ``snap_distance`` are dropped here already; each kept
    edge is listed under both its left and right site.
    """
    site_edges: Dict[int, List[LineSegment]] = defaultdict(list)
    removed = 0

    for edge in source.edges():
        if not edge.visible:
            continue
        p1, p2 = edge.clipped_ends
        if distance(p1, p2) < snap_distance:
            removed += 1
            continue
        segment = LineSegment(p1, p2)
        if edge.left_site is not None:
            site_edges[edge.left_site].append(segment)
        if edge.right_site is not None:
            site_edges[edge.right_site].append(LineSegment(p1, p2))

    if removed:
        logger.debug("Dropped degenerate Voronoi edges", removed=removed)
    return site_edges


def orient_clockwise(segments: Sequence[LineSegment], center: Point) -> List[LineSegment]:
    """Reverse every segment that runs counter-clockwise around ``center``."""
    oriented = []
    for segment in segments:
        if signed_angle(center, segment.p0, segment.p1) > 0:
            oriented.append(segment.reversed())
        else:
            oriented.append(LineSegment(segment.p0, segment.p1))
    return oriented


def sort_clockwise(segments: Sequence[LineSegment], center: Point) -> List[LineSegment]:
    """
    Order segments clockwise by the angle of their start point.

    Segments starting in the same direction are ordered by the angle of their
    end point, then by start position, so the result never depends on input
    order.
    """
    return sorted(
        segments,
        key=lambda s: (
            clockwise_angle(center, s.p0),
            clockwise_angle(center, s.p1),
            quantize(*s.p0),
        ),
    )


def snap_boundaries(segments: List[LineSegment], snap_distance: float = DEFAULT_SNAP_DISTANCE) -> List[LineSegment]:
    """
    Remove segments shorter than ``snap_distance`` from an ordered outline.

    The list is scanned from the end. When a segment is removed and the end of
    its predecessor is within ``snap_distance`` of the start of its successor,
    the predecessor is extended to meet the successor. Modifies ``segments``
    in place and returns it.
    """
    for i in range(len(segments) - 1, -1, -1):
        if segments[i].length() >= snap_distance:
            continue
        count = len(segments)
        previous = (i - 1) % count
        following = (i + 1) % count
        if distance(segments[previous].p1, segments[following].p0) < snap_distance:
            segments[previous].p1 = segments[following].p0
        del segments[i]
    return segments


def resolve_site_boundary(segments: Sequence[LineSegment], center: Point,
                          snap_distance: float = DEFAULT_SNAP_DISTANCE) -> List[LineSegment]:
    """Clockwise, snapped outline for one site."""
    oriented = orient_clockwise(segments, center)
    ordered = sort_clockwise(oriented, center)
    return snap_boundaries(ordered, snap_distance)
