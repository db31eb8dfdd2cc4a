"""Projection of an external height field onto map graph elevations."""

import math
from typing import Optional

import numpy as np
import structlog

from .graph import MapGraph

logger = structlog.get_logger()


class HeightField:
    """
    2-D grid of elevation samples indexed ``[x, z]``.

    Sample (i, j) covers the unit square [i, i + 1) x [j, j + 1).
    """

    def __init__(self, values: np.ndarray):
        values = np.asarray(values, dtype=np.float32)
        if values.ndim != 2:
            raise ValueError(f"Height field must be 2-D, got shape {values.shape}")
        self.values = values

    @property
    def width(self) -> int:
        return self.values.shape[0]

    @property
    def depth(self) -> int:
        return self.values.shape[1]

    def sample(self, x: float, z: float) -> Optional[float]:
        """Elevation at a planar position, or None outside the field."""
        i = math.floor(x)
        j = math.floor(z)
        if 0 <= i < self.width and 0 <= j < self.depth:
            return float(self.values[i, j])
        return None


def project_heights(graph: MapGraph, field: HeightField) -> None:
    """
    Overwrite cell center and vertex elevations with samples from ``field``.

    Positions outside the field keep their current elevation. Values are
    assigned, not accumulated, so projecting twice changes nothing.
    """
    outside = 0
    for cell in graph.cells:
        height = field.sample(cell.center_x, cell.center_z)
        if height is None:
            outside += 1
        else:
            cell.center_y = height

    for vertex in graph.vertices:
        height = field.sample(vertex.x, vertex.z)
        if height is None:
            outside += 1
        else:
            vertex.y = height

    logger.debug("Heights projected",
                 cells=len(graph.cells), vertices=len(graph.vertices), outside=outside)
