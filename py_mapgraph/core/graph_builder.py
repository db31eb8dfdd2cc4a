"""
Map graph construction from a clipped Voronoi diagram.

For every site the resolved clockwise outline is turned into a cycle of
half-edges. Where the outline was cut by the plot bounds, the gap is stitched
along the bounds, passing through the rectangle corners owned by the site
(a corner belongs to the site nearest to it). Once all cells are built the
opposite edges of adjacent cells are linked.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

import structlog

from .boundary import DEFAULT_SNAP_DISTANCE, group_segments_by_site, resolve_site_boundary
from .exceptions import GraphConstructionError
from .geometry import VERTEX_PRECISION, DomainRect, LineSegment, Point, perimeter_position
from .graph import Cell, CellType, MapGraph
from .heights import HeightField, project_heights
from .opposites import DEFAULT_NEIGHBOR_TOLERANCE, connect_opposites
from .registry import GraphBuildContext
from .voronoi_source import VoronoiSource

logger = structlog.get_logger()


@dataclass
class GraphOptions:
    """Tolerances used while building a map graph."""

    vertex_precision: int = VERTEX_PRECISION  # decimals kept for vertex identity
    snap_distance: float = DEFAULT_SNAP_DISTANCE  # degenerate segment length
    neighbor_tolerance: float = DEFAULT_NEIGHBOR_TOLERANCE  # opposite edge matching

    @classmethod
    def from_settings(cls, settings=None) -> "GraphOptions":
        if settings is None:
            from ..config import settings
        return cls(
            vertex_precision=settings.vertex_precision,
            snap_distance=settings.snap_distance,
            neighbor_tolerance=settings.neighbor_tolerance,
        )


class CornerOwners(NamedTuple):
    """Site index owning each plot corner, clockwise from the top-left."""
    top_left: int
    top_right: int
    bottom_right: int
    bottom_left: int

    @classmethod
    def from_source(cls, source: VoronoiSource) -> "CornerOwners":
        owners = []
        for x, z in source.plot_bounds.corners():
            site = source.nearest_site(x, z)
            if site is None:
                raise GraphConstructionError(f"No nearest site reported for plot corner ({x}, {z})")
            owners.append(int(site))
        return cls(*owners)


class GraphBuilder:
    """
    Builds cells and edge cycles site by site.

    Call ``add_site`` once per site, then ``finish`` to obtain the graph and
    the index of edges by start vertex.
    """

    def __init__(self, domain: DomainRect, corner_owners: CornerOwners,
                 options: Optional[GraphOptions] = None):
        self.options = options or GraphOptions()
        self.domain = domain.quantized(self.options.vertex_precision)
        self.corner_owners = corner_owners
        self.context = GraphBuildContext(domain=self.domain, precision=self.options.vertex_precision)

        corners = self.domain.corners()
        self._corner_positions = [perimeter_position(self.domain, *c) for c in corners]
        self._corners = corners

    def add_site(self, site_index: int, center: Point, outline: Sequence[LineSegment]) -> Cell:
        """Create the cell of one site from its resolved outline."""
        registry = self.context.vertex_registry
        cx, cz = registry.key(float(center[0]), float(center[1]))
        cell = Cell(id=len(self.context.cells), site_index=site_index, center_x=cx, center_z=cz)
        self.context.cells.append(cell)

        segments = []
        for segment in outline:
            start = registry.key(*segment.p0)
            end = registry.key(*segment.p1)
            if start != end:
                segments.append((start, end))

        if not segments:
            self._build_corner_cell(cell)
            return cell

        created: List[int] = []
        for i, (start, end) in enumerate(segments):
            self._append_edge(cell, created, start, end)

            gap_end = segments[(i + 1) % len(segments)][0]
            if end != gap_end:
                self._close_gap(cell, created, end, gap_end)

        self._close_cycle(cell, created)
        return cell

    def finish(self):
        """Return the built graph and its edge-by-start-vertex index."""
        return self.context.to_graph(), self.context.edge_index

    def _append_edge(self, cell: Cell, created: List[int], start: Point, end: Point) -> int:
        edge_id = self.context.add_edge(cell.id, start, end)
        edges = self.context.edges
        if created:
            previous = created[-1]
            edges[previous].next = edge_id
            edges[edge_id].previous = previous
        else:
            cell.entry_edge = edge_id
        created.append(edge_id)
        return edge_id

    def _close_cycle(self, cell: Cell, created: List[int]) -> None:
        edges = self.context.edges
        first, last = created[0], created[-1]
        edges[last].next = first
        edges[first].previous = last
        cell.edge_count = len(created)

    def _owned_corners(self, site_index: int) -> List[int]:
        return [i for i, owner in enumerate(self.corner_owners) if owner == site_index]

    def _close_gap(self, cell: Cell, created: List[int], start: Point, end: Point) -> None:
        """
        Stitch the outline from ``start`` to ``end`` clockwise along the plot
        bounds, through every corner this site owns on the way.
        """
        current = start
        t_start = perimeter_position(self.domain, *start)
        if t_start is None:
            logger.warning("Outline gap does not start on the plot bounds",
                           cell=cell.id, start=start, end=end)
        else:
            perimeter = self.domain.perimeter
            t_end = perimeter_position(self.domain, *end)
            span = perimeter if t_end is None else (t_end - t_start) % perimeter

            walk = sorted(
                ((self._corner_positions[i] - t_start) % perimeter, i)
                for i in self._owned_corners(cell.site_index)
            )
            for arc, corner_index in walk:
                # arc == 0 means the gap already starts on this corner
                if 0 < arc < span:
                    corner = self._corners[corner_index]
                    self._append_edge(cell, created, current, corner)
                    current = corner

        self._append_edge(cell, created, current, end)

    def _build_corner_cell(self, cell: Cell) -> None:
        """Cell of a site with no Voronoi edges: the polygon through its corners."""
        owned = self._owned_corners(cell.site_index)
        if len(owned) < 3:
            logger.warning("Site has no boundary edges", cell=cell.id, site=cell.site_index,
                           corners=len(owned))
            cell.cell_type = CellType.ERROR
            return

        created: List[int] = []
        for k, corner_index in enumerate(owned):
            next_index = owned[(k + 1) % len(owned)]
            self._append_edge(cell, created, self._corners[corner_index], self._corners[next_index])
        self._close_cycle(cell, created)


def build_map_graph(source: VoronoiSource, height_field: Optional[HeightField] = None,
                    options: Optional[GraphOptions] = None) -> MapGraph:
    """
    Build the complete map graph for a Voronoi source.

    Args:
        source: Clipped Voronoi diagram
        height_field: Optional elevation samples projected onto the result
        options: Build tolerances, defaults from settings

    Returns:
        MapGraph with closed cell cycles and linked opposite edges

    Raises:
        GraphConstructionError: If a plot corner has no nearest site
    """
    options = options or GraphOptions.from_settings()
    sites = source.site_coords()

    logger.info("Building map graph", sites=len(sites), bounds=tuple(source.plot_bounds))

    corner_owners = CornerOwners.from_source(source)
    site_edges = group_segments_by_site(source, options.snap_distance)

    builder = GraphBuilder(source.plot_bounds, corner_owners, options)
    for site_index, center in enumerate(sites):
        center = (float(center[0]), float(center[1]))
        outline = resolve_site_boundary(site_edges.get(site_index, []), center, options.snap_distance)
        builder.add_site(site_index, center, outline)

    graph, edge_index = builder.finish()
    report = connect_opposites(graph, edge_index, options.neighbor_tolerance)

    if height_field is not None:
        project_heights(graph, height_field)

    logger.info("Map graph built",
                cells=len(graph.cells),
                vertices=len(graph.vertices),
                edges=len(graph.edges),
                linked_pairs=report.linked_pairs,
                boundary_edges=report.boundary_edges,
                error_cells=len(graph.error_cells()))
    return graph


