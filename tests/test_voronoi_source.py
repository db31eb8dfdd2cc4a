"""Tests for the scipy-backed Voronoi source and full builds on it."""

import numpy as np
import pytest
from py_mapgraph.core import DomainRect, ScipyVoronoiSource, build_map_graph, validate_topology


def jittered_sites(width, height, spacing, seed):
    """Jittered square grid of sites, kept strictly inside the bounds."""
    rng = np.random.default_rng(seed)
    radius = spacing / 2
    jittering = radius * 0.9
    points = []
    y = radius
    while y < height:
        x = radius
        while x < width:
            points.append([x + rng.uniform(-jittering, jittering),
                           y + rng.uniform(-jittering, jittering)])
            x += spacing
        y += spacing
    return np.array(points)


class TestScipyVoronoiSource:
    """Test the diagram view exposed to the builder."""

    def test_grid_edges(self, grid_sites, square_domain):
        source = ScipyVoronoiSource(grid_sites, square_domain)
        visible = [e for e in source.edges() if e.visible and
                   np.hypot(*np.subtract(*e.clipped_ends)) > 1e-3]
        assert len(visible) == 4
        for edge in visible:
            for x, z in edge.clipped_ends:
                assert square_domain.contains(x, z)

    def test_edges_reference_real_sites(self, square_domain):
        sites = jittered_sites(10, 10, 2, seed=3)
        source = ScipyVoronoiSource(sites, square_domain)
        for edge in source.edges():
            assert 0 <= edge.left_site < len(sites)
            assert 0 <= edge.right_site < len(sites)

    def test_nearest_site(self, grid_sites, square_domain):
        source = ScipyVoronoiSource(grid_sites, square_domain)
        assert source.nearest_site(0, 0) == 0
        assert source.nearest_site(10, 0) == 1
        assert source.nearest_site(0, 10) == 2
        assert source.nearest_site(10, 10) == 3

    def test_single_site_has_no_edges(self, square_domain):
        source = ScipyVoronoiSource(np.array([[5.0, 5.0]]), square_domain)
        assert source.edges() == []

    def test_sites_outside_bounds_rejected(self, square_domain):
        with pytest.raises(ValueError):
            ScipyVoronoiSource(np.array([[5.0, 5.0], [11.0, 5.0]]), square_domain)

    def test_empty_bounds_rejected(self):
        with pytest.raises(ValueError):
            ScipyVoronoiSource(np.array([[0.0, 0.0]]), DomainRect(0, 0, 0, 10))


@pytest.mark.parametrize("width,height,spacing,seed", [
    (100, 100, 10, 1),
    (200, 150, 10, 2),
    (50, 50, 5, 3),
])
def test_random_diagram_topology(width, height, spacing, seed):
    """Full builds on jittered sites satisfy every topology property."""
    sites = jittered_sites(width, height, spacing, seed)
    graph = build_map_graph(ScipyVoronoiSource(sites, DomainRect(0, 0, width, height)))

    assert len(graph.cells) == len(sites)
    assert graph.error_cells() == []

    report = validate_topology(graph)
    assert report.open_cycles == []
    assert report.broken_links == []
    assert report.asymmetric_neighbors == []
    assert report.distant_neighbors == []
    assert report.unlinked_interior == []
    assert report.duplicate_vertices == []
    assert report.corner_owner_counts == [1, 1, 1, 1]

    for cell in graph.cells:
        assert len(list(graph.cell_edges(cell.id))) == cell.edge_count >= 3


def test_random_diagram_covers_domain():
    """Cell polygons tile the plot: their areas sum to the domain area."""
    sites = jittered_sites(60, 40, 5, seed=11)
    graph = build_map_graph(ScipyVoronoiSource(sites, DomainRect(0, 0, 60, 40)))

    total = 0.0
    for cell in graph.cells:
        polygon = graph.cell_polygon(cell.id)
        x, z = polygon[:, 0], polygon[:, 1]
        total += -0.5 * np.sum(x * np.roll(z, -1) - np.roll(x, -1) * z)
    assert total == pytest.approx(60 * 40, rel=1e-3)
