"""
Core map graph construction functionality.
"""

from .exceptions import GraphConstructionError
from .geometry import DomainRect, LineSegment
from .graph import CellType, Cell, Edge, MapGraph, Vertex
from .graph_builder import CornerOwners, GraphBuilder, GraphOptions, build_map_graph
from .heights import HeightField, project_heights
from .opposites import connect_opposites
from .topology import validate_topology
from .voronoi_source import ScipyVoronoiSource, VoronoiEdge

__all__ = ['GraphConstructionError', 'DomainRect', 'LineSegment',
           'CellType', 'Cell', 'Edge', 'MapGraph', 'Vertex',
           'CornerOwners', 'GraphBuilder', 'GraphOptions', 'build_map_graph',
           'HeightField', 'project_heights', 'connect_opposites', 'validate_topology',
           'ScipyVoronoiSource', 'VoronoiEdge']
