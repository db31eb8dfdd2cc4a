"""
Voronoi diagram sources consumed by the graph builder.

The builder only needs a small view of a clipped Voronoi diagram: the site
coordinates, the visible edges with their clipped end points and the sites on
either side, a nearest-site query and the plot bounds. ``ScipyVoronoiSource``
provides that view on top of ``scipy.spatial.Voronoi``.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Tuple

import numpy as np
import structlog
from scipy.spatial import Voronoi, cKDTree

from .geometry import DomainRect, Point, clip_segment

logger = structlog.get_logger()


@dataclass(frozen=True)
class VoronoiEdge:
    """One Voronoi edge between two sites, clipped to the plot bounds."""
    clipped_ends: Optional[Tuple[Point, Point]]
    left_site: Optional[int]
    right_site: Optional[int]

    @property
    def visible(self) -> bool:
        return self.clipped_ends is not None


class VoronoiSource(Protocol):
    """Interface of the Voronoi stage as seen by the graph builder."""

    plot_bounds: DomainRect

    def site_coords(self) -> np.ndarray:
        ...

    def edges(self) -> Iterable[VoronoiEdge]:
        ...

    def nearest_site(self, x: float, y: float) -> Optional[int]:
        ...


class ScipyVoronoiSource:
    """
    Voronoi source backed by scipy.

    Every site is mirrored across the four sides of the plot bounds before
    the diagram is computed, so each real cell is closed by the bounds. Ridges
    between two real sites are reported (clipped to the bounds); ridges
    between a site and one of its mirror images lie on the bounds and are
    left out, which is how the clipped diagram looks to the builder.
    """

    def __init__(self, sites: np.ndarray, bounds: DomainRect):
        sites = np.asarray(sites, dtype=float).reshape(-1, 2)
        if bounds.width <= 0 or bounds.height <= 0:
            raise ValueError(f"Plot bounds must have positive area, got {bounds}")
        if len(sites) == 0:
            raise ValueError("At least one site is required")
        inside = ((sites[:, 0] >= bounds.x_min) & (sites[:, 0] <= bounds.x_max) &
                  (sites[:, 1] >= bounds.z_min) & (sites[:, 1] <= bounds.z_max))
        if not np.all(inside):
            raise ValueError(f"{int(np.sum(~inside))} sites lie outside the plot bounds")

        self.plot_bounds = bounds
        self._sites = sites
        self._tree = cKDTree(sites)
        self._edges = self._compute_edges()

        logger.info("Voronoi diagram calculated", sites=len(sites), edges=len(self._edges))

    def site_coords(self) -> np.ndarray:
        return self._sites

    def edges(self) -> List[VoronoiEdge]:
        return self._edges

    def nearest_site(self, x: float, y: float) -> Optional[int]:
        _, index = self._tree.query([x, y])
        if index >= len(self._sites):
            return None
        return int(index)

    def _mirrored_points(self) -> np.ndarray:
        b = self.plot_bounds
        sites = self._sites
        left = sites.copy()
        left[:, 0] = 2 * b.x_min - sites[:, 0]
        right = sites.copy()
        right[:, 0] = 2 * b.x_max - sites[:, 0]
        bottom = sites.copy()
        bottom[:, 1] = 2 * b.z_min - sites[:, 1]
        top = sites.copy()
        top[:, 1] = 2 * b.z_max - sites[:, 1]
        return np.vstack([sites, left, right, bottom, top])

    def _compute_edges(self) -> List[VoronoiEdge]:
        n_sites = len(self._sites)
        if n_sites == 1:
            # A single site's cell is the whole rectangle; there are no edges.
            return []

        vor = Voronoi(self._mirrored_points())
        edges = []
        for (p1, p2), ridge in zip(vor.ridge_points, vor.ridge_vertices):
            if p1 >= n_sites or p2 >= n_sites:
                continue
            if -1 in ridge:
                # Cannot happen with mirrored bounds, but an unbounded ridge has no clip.
                edges.append(VoronoiEdge(None, int(p1), int(p2)))
                continue
            a = tuple(vor.vertices[ridge[0]])
            b = tuple(vor.vertices[ridge[1]])
            edges.append(VoronoiEdge(clip_segment(a, b, self.plot_bounds), int(p1), int(p2)))
        return edges
