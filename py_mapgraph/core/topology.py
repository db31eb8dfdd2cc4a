"""
Topology checks for built map graphs.

``validate_topology`` walks a graph and reports every place where it breaks
the structural guarantees of the builder: closed and symmetric edge cycles,
symmetric opposite links between co-located edges, unlinked edges only on the
plot bounds, unique vertices and single ownership of the plot corners.
"""

from dataclasses import dataclass, field
from typing import List

import numpy as np
import structlog
from scipy.spatial import cKDTree

from .geometry import VERTEX_PRECISION
from .graph import MapGraph
from .opposites import DEFAULT_NEIGHBOR_TOLERANCE

logger = structlog.get_logger()


@dataclass
class TopologyReport:
    """Violations found in a map graph, grouped by kind."""
    open_cycles: List[int] = field(default_factory=list)        # cell ids
    broken_links: List[int] = field(default_factory=list)       # edge ids with next/previous mismatch
    asymmetric_neighbors: List[int] = field(default_factory=list)
    distant_neighbors: List[int] = field(default_factory=list)
    unlinked_interior: List[int] = field(default_factory=list)
    duplicate_vertices: List[tuple] = field(default_factory=list)
    corner_owner_counts: List[int] = field(default_factory=list)  # per corner, clockwise from top-left

    @property
    def ok(self) -> bool:
        return not (self.open_cycles or self.broken_links or self.asymmetric_neighbors
                    or self.distant_neighbors or self.unlinked_interior or self.duplicate_vertices
                    or any(count != 1 for count in self.corner_owner_counts))


def validate_topology(graph: MapGraph, neighbor_tolerance: float = DEFAULT_NEIGHBOR_TOLERANCE) -> TopologyReport:
    report = TopologyReport()
    edges = graph.edges
    domain = graph.domain

    # Each edge must be visited exactly once, by the cycle of its own cell.
    seen = [0] * len(edges)
    for cell in graph.cells:
        if cell.entry_edge is None:
            continue
        visited = 0
        closed = False
        edge_id = cell.entry_edge
        while edge_id is not None and visited <= len(edges):
            if edges[edge_id].cell != cell.id:
                break
            seen[edge_id] += 1
            visited += 1
            edge_id = edges[edge_id].next
            if edge_id == cell.entry_edge:
                closed = True
                break
        if not closed or visited != cell.edge_count:
            report.open_cycles.append(cell.id)
    for edge in edges:
        if seen[edge.id] != 1 and edge.cell not in report.open_cycles:
            report.open_cycles.append(edge.cell)

    for edge in edges:
        if edge.next is None or edge.previous is None \
                or edges[edge.next].previous != edge.id or edges[edge.previous].next != edge.id:
            report.broken_links.append(edge.id)
            continue

        start = graph.edge_start(edge.id)
        end = graph.edge_end(edge.id)
        if edge.neighbor is None:
            if not (domain.on_boundary(*start.position) or domain.on_boundary(*end.position)):
                report.unlinked_interior.append(edge.id)
            continue

        opposite = edges[edge.neighbor]
        if opposite.neighbor != edge.id:
            report.asymmetric_neighbors.append(edge.id)
            continue
        if opposite.previous is None:
            report.distant_neighbors.append(edge.id)
            continue
        o_start = graph.edge_start(opposite.id)
        o_end = graph.edge_end(opposite.id)
        if max(abs(o_start.x - end.x), abs(o_start.z - end.z),
               abs(o_end.x - start.x), abs(o_end.z - start.z)) >= neighbor_tolerance:
            report.distant_neighbors.append(edge.id)

    if len(graph.vertices) > 1:
        coords = np.array([v.position for v in graph.vertices])
        # distinct quantized keys are at least one grid step apart
        pairs = cKDTree(coords).query_pairs(0.5 * 10.0 ** -VERTEX_PRECISION)
        report.duplicate_vertices = sorted(pairs)

    destinations = {}
    for edge in edges:
        destinations.setdefault(edge.destination, set()).add(edge.cell)
    for x, z in domain.corners():
        owners = set()
        for vertex in graph.vertices:
            if vertex.x == x and vertex.z == z:
                owners |= destinations.get(vertex.id, set())
        report.corner_owner_counts.append(len(owners))

    logger.debug("Topology validated", ok=report.ok,
                 open_cycles=len(report.open_cycles),
                 unlinked_interior=len(report.unlinked_interior))
    return report
