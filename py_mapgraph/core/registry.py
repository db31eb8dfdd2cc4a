"""
Build-local registries shared by the graph construction passes.

A ``GraphBuildContext`` lives for exactly one build: it owns the vertex, cell
and edge tables being filled, the quantized-position vertex lookup and the
index of edges by start vertex used when linking opposites.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from .geometry import VERTEX_PRECISION, DomainRect, Point, quantize
from .graph import Cell, Edge, MapGraph, Vertex


class VertexRegistry:
    """Append-only vertex table deduplicated by quantized position."""

    def __init__(self, precision: int = VERTEX_PRECISION):
        self.precision = precision
        self.vertices: List[Vertex] = []
        self._by_key: Dict[Point, int] = {}

    def key(self, x: float, z: float) -> Point:
        return quantize(x, z, self.precision)

    def get_or_create(self, x: float, z: float) -> int:
        """Return the id of the vertex at (x, z), creating it if needed."""
        key = self.key(x, z)
        vertex_id = self._by_key.get(key)
        if vertex_id is None:
            vertex_id = len(self.vertices)
            self.vertices.append(Vertex(id=vertex_id, x=key[0], z=key[1]))
            self._by_key[key] = vertex_id
        return vertex_id

    def find(self, x: float, z: float):
        return self._by_key.get(self.key(x, z))

    def __len__(self):
        return len(self.vertices)

    def __contains__(self, point) -> bool:
        return self.key(*point) in self._by_key


class EdgeIndex:
    """Edges grouped by the vertex they start at."""

    def __init__(self):
        self._by_start: Dict[int, List[int]] = defaultdict(list)

    def add(self, start_vertex: int, edge_id: int) -> None:
        self._by_start[start_vertex].append(edge_id)

    def starting_at(self, vertex_id: int) -> List[int]:
        return self._by_start.get(vertex_id, [])

    def __len__(self):
        return sum(len(v) for v in self._by_start.values())


@dataclass
class GraphBuildContext:
    """Mutable state of one graph build."""
    domain: DomainRect
    precision: int = VERTEX_PRECISION
    vertex_registry: VertexRegistry = None
    edge_index: EdgeIndex = field(default_factory=EdgeIndex)
    cells: List[Cell] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def __post_init__(self):
        if self.vertex_registry is None:
            self.vertex_registry = VertexRegistry(self.precision)

    def add_edge(self, cell_id: int, start: Point, end: Point) -> int:
        """
        Create an edge of ``cell_id`` from ``start`` to ``end``.

        Both end points are registered as vertices and the edge is indexed by
        its start vertex. Chaining into the cell's cycle is up to the caller.
        """
        start_id = self.vertex_registry.get_or_create(*start)
        end_id = self.vertex_registry.get_or_create(*end)
        edge_id = len(self.edges)
        self.edges.append(Edge(id=edge_id, cell=cell_id, destination=end_id))
        self.edge_index.add(start_id, edge_id)
        return edge_id

    def to_graph(self) -> MapGraph:
        return MapGraph(
            domain=self.domain,
            vertices=self.vertex_registry.vertices,
            cells=self.cells,
            edges=self.edges,
        )
