"""Tests for height field projection."""

import numpy as np
import pytest
from py_mapgraph.core import HeightField, ScipyVoronoiSource, build_map_graph, project_heights


@pytest.fixture
def height_field():
    """10 x 10 field whose value encodes its indices: 100 * x + z."""
    x, z = np.meshgrid(np.arange(10), np.arange(10), indexing="ij")
    return HeightField(100 * x + z)


@pytest.fixture
def graph(grid_sites, square_domain):
    return build_map_graph(ScipyVoronoiSource(grid_sites, square_domain))


class TestHeightField:
    """Test sampling of the external field."""

    def test_extent(self, height_field):
        assert height_field.width == 10
        assert height_field.depth == 10

    def test_sample_floors_coordinates(self, height_field):
        assert height_field.sample(2.5, 7.9) == 207.0
        assert height_field.sample(0.0, 0.0) == 0.0

    def test_sample_outside(self, height_field):
        assert height_field.sample(10.0, 5.0) is None
        assert height_field.sample(-0.5, 5.0) is None

    def test_rejects_non_grid(self):
        with pytest.raises(ValueError):
            HeightField(np.zeros(5))


class TestProjectHeights:
    """Test elevation projection onto the graph."""

    def test_centers_and_vertices(self, graph, height_field):
        project_heights(graph, height_field)

        cell = graph.cell_at(2.5, 7.5)
        assert cell.center_y == 207.0
        center_vertex = next(v for v in graph.vertices if v.position == (5.0, 5.0))
        assert center_vertex.y == 505.0

    def test_outside_keeps_elevation(self, graph, height_field):
        project_heights(graph, height_field)

        corner = next(v for v in graph.vertices if v.position == (10.0, 10.0))
        assert corner.y == 0.0
        edge_vertex = next(v for v in graph.vertices if v.position == (0.0, 10.0))
        assert edge_vertex.y == 0.0

    def test_planar_positions_unchanged(self, graph, height_field):
        before = [v.position for v in graph.vertices]
        project_heights(graph, height_field)
        assert [v.position for v in graph.vertices] == before

    def test_idempotent(self, graph, height_field):
        project_heights(graph, height_field)
        once = [v.y for v in graph.vertices] + [c.center_y for c in graph.cells]
        project_heights(graph, height_field)
        twice = [v.y for v in graph.vertices] + [c.center_y for c in graph.cells]
        assert once == twice

    def test_applied_by_build(self, grid_sites, square_domain, height_field):
        graph = build_map_graph(ScipyVoronoiSource(grid_sites, square_domain), height_field=height_field)
        assert graph.cell_at(7.5, 2.5).center_y == 702.0
