"""Linking of opposite half-edges between adjacent cells."""

from dataclasses import dataclass, field
from typing import List

import structlog

from .graph import CellType, MapGraph
from .registry import EdgeIndex

logger = structlog.get_logger()

# Looser than vertex identity: absorbs rounding accumulated by clipping.
DEFAULT_NEIGHBOR_TOLERANCE = 0.5


@dataclass
class LinkReport:
    """Outcome of linking opposite edges."""
    linked_pairs: int = 0
    boundary_edges: int = 0
    defect_edges: List[int] = field(default_factory=list)


def connect_opposites(graph: MapGraph, edge_index: EdgeIndex,
                      tolerance: float = DEFAULT_NEIGHBOR_TOLERANCE) -> LinkReport:
    """
    Link every edge to the oppositely directed edge of the adjacent cell.

    For an edge running start -> end, the candidates are the edges starting at
    ``end``; the opposite is the one of another cell whose destination lies
    within ``tolerance`` of ``start`` on both axes. An edge without opposite
    must touch the plot bounds; otherwise its cell is marked
    ``CellType.ERROR`` and the build carries on.
    """
    report = LinkReport()
    edges = graph.edges
    domain = graph.domain

    for edge in edges:
        if edge.neighbor is not None:
            continue

        start = graph.edge_start(edge.id)
        end = graph.vertices[edge.destination]

        opposite = None
        best = None
        for candidate_id in edge_index.starting_at(edge.destination):
            candidate = edges[candidate_id]
            if candidate.cell == edge.cell or candidate.neighbor is not None:
                continue
            target = graph.vertices[candidate.destination]
            dx = abs(target.x - start.x)
            dz = abs(target.z - start.z)
            if dx < tolerance and dz < tolerance and (best is None or dx + dz < best):
                opposite, best = candidate, dx + dz

        if opposite is not None:
            edge.neighbor = opposite.id
            opposite.neighbor = edge.id
            report.linked_pairs += 1
            continue

        if domain.on_boundary(start.x, start.z) or domain.on_boundary(end.x, end.z):
            report.boundary_edges += 1
            continue

        report.defect_edges.append(edge.id)
        graph.cells[edge.cell].cell_type = CellType.ERROR
        logger.warning("Edge without opposite away from the plot bounds",
                       edge=edge.id, cell=edge.cell,
                       start=start.position, end=end.position)

    logger.debug("Opposite edges linked",
                 linked_pairs=report.linked_pairs,
                 boundary_edges=report.boundary_edges,
                 defects=len(report.defect_edges))
    return report
