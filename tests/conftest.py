"""Shared fixtures for map graph tests."""

import numpy as np
import pytest

from py_mapgraph.core.geometry import DomainRect
from py_mapgraph.core.voronoi_source import VoronoiEdge


class StaticVoronoiSource:
    """Voronoi source built from hand-written edges."""

    def __init__(self, sites, bounds, edges=(), corner_sites=None):
        self.plot_bounds = bounds
        self._sites = np.asarray(sites, dtype=float).reshape(-1, 2)
        self._edges = [VoronoiEdge(ends, left, right) for ends, left, right in edges]
        self._corner_sites = corner_sites

    def site_coords(self):
        return self._sites

    def edges(self):
        return self._edges

    def nearest_site(self, x, y):
        if self._corner_sites is not None:
            return self._corner_sites.get((x, y))
        distances = np.hypot(self._sites[:, 0] - x, self._sites[:, 1] - y)
        return int(np.argmin(distances))


@pytest.fixture
def square_domain():
    """10 x 10 plot bounds at the origin."""
    return DomainRect(0.0, 0.0, 10.0, 10.0)


@pytest.fixture
def static_source():
    return StaticVoronoiSource


@pytest.fixture
def grid_sites():
    """2 x 2 grid of sites in the 10 x 10 square."""
    return np.array([[2.5, 2.5], [7.5, 2.5], [2.5, 7.5], [7.5, 7.5]])
