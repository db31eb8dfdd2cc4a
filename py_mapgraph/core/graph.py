"""
Map graph data structures.

The graph is stored as flat tables of vertices, cells and half-edges that
reference each other by integer index. Each cell owns one closed cycle of
half-edges running clockwise around its site; an edge shared with an adjacent
cell is cross-linked to that cell's oppositely directed edge through
``neighbor``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterator, List, Optional

import numpy as np

from .geometry import DomainRect, Point, quantize


class CellType(IntEnum):
    """Terrain classification written onto cells by the biome stage."""

    FRESH_WATER = 0
    SALT_WATER = 1
    GRASS = 2
    MOUNTAIN = 3
    BEACH = 4
    ERROR = 5  # topology defect detected while linking
    SNOW = 6


CELL_TYPE_NAMES = {
    CellType.FRESH_WATER: "Fresh Water",
    CellType.SALT_WATER: "Salt Water",
    CellType.GRASS: "Grass",
    CellType.MOUNTAIN: "Mountain",
    CellType.BEACH: "Beach",
    CellType.ERROR: "Error",
    CellType.SNOW: "Snow",
}


@dataclass
class Vertex:
    """Graph vertex: planar position (x, z) plus elevation y."""
    id: int
    x: float
    z: float
    y: float = 0.0

    @property
    def position(self) -> Point:
        return (self.x, self.z)


@dataclass
class Cell:
    """One cell per Voronoi site."""
    id: int
    site_index: int
    center_x: float
    center_z: float
    center_y: float = 0.0
    cell_type: Optional[CellType] = None
    entry_edge: Optional[int] = None  # any edge of the boundary cycle
    edge_count: int = 0               # cycle length recorded at construction

    @property
    def center(self) -> Point:
        return (self.center_x, self.center_z)


@dataclass
class Edge:
    """Directed half-edge owned by one cell, ending at ``destination``."""
    id: int
    cell: int
    destination: int
    next: Optional[int] = None
    previous: Optional[int] = None
    neighbor: Optional[int] = None  # None only on the domain's outer boundary


@dataclass
class MapGraph:
    """Closed polygonal graph built from a clipped Voronoi diagram."""
    domain: DomainRect
    vertices: List[Vertex] = field(default_factory=list)
    cells: List[Cell] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    _cells_by_center: Dict[Point, int] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        if not self._cells_by_center:
            self._cells_by_center = {quantize(c.center_x, c.center_z): c.id for c in self.cells}

    def edge_start(self, edge_id: int) -> Vertex:
        """Start vertex of an edge, i.e. the destination of its predecessor."""
        previous = self.edges[edge_id].previous
        if previous is None:
            raise ValueError(f"Edge {edge_id} is not part of a closed cycle")
        return self.vertices[self.edges[previous].destination]

    def edge_end(self, edge_id: int) -> Vertex:
        return self.vertices[self.edges[edge_id].destination]

    def cell_edges(self, cell_id: int) -> Iterator[int]:
        """Iterate a cell's edge cycle once, starting at its entry edge."""
        entry = self.cells[cell_id].entry_edge
        if entry is None:
            return
        edge_id = entry
        while True:
            yield edge_id
            edge_id = self.edges[edge_id].next
            if edge_id is None or edge_id == entry:
                return

    def cell_polygon(self, cell_id: int) -> np.ndarray:
        """Planar (x, z) coordinates of the cell's corners in cycle order."""
        coords = [self.vertices[self.edges[e].destination].position for e in self.cell_edges(cell_id)]
        return np.array(coords, dtype=float).reshape(-1, 2)

    def cell_neighbors(self, cell_id: int) -> List[int]:
        """Adjacent cell ids across linked edges (the dual graph)."""
        neighbors = set()
        for edge_id in self.cell_edges(cell_id):
            opposite = self.edges[edge_id].neighbor
            if opposite is not None:
                neighbors.add(self.edges[opposite].cell)
        return sorted(neighbors)

    def cell_at(self, x: float, z: float) -> Optional[Cell]:
        """Look up a cell by its center position."""
        cell_id = self._cells_by_center.get(quantize(x, z))
        return None if cell_id is None else self.cells[cell_id]

    def error_cells(self) -> List[int]:
        return [c.id for c in self.cells if c.cell_type == CellType.ERROR]
