#!/usr/bin/env python3
"""
Demonstration of map graph construction.

Builds a graph from jittered sites, projects a synthetic height field onto it
and walks one cell's edge cycle and its neighbours.
"""

import numpy as np
from py_mapgraph.core import (
    DomainRect, HeightField, ScipyVoronoiSource, build_map_graph, validate_topology
)
from py_mapgraph.utils.logging_config import configure_logging


def main():
    configure_logging("INFO", "plain")

    size = 100
    rng = np.random.default_rng(0)
    grid = np.stack(np.meshgrid(np.arange(5, size, 10), np.arange(5, size, 10)), axis=-1).reshape(-1, 2)
    sites = grid + rng.uniform(-4, 4, grid.shape)

    x, z = np.meshgrid(np.arange(size), np.arange(size), indexing="ij")
    heights = HeightField(np.sin(x / 15.0) * np.cos(z / 15.0) * 50)

    print("=== Map Graph Demo ===\n")
    graph = build_map_graph(ScipyVoronoiSource(sites, DomainRect(0, 0, size, size)), height_field=heights)
    print(f"   - Cells: {len(graph.cells)}")
    print(f"   - Vertices: {len(graph.vertices)}")
    print(f"   - Edges: {len(graph.edges)}")

    report = validate_topology(graph)
    print(f"   - Topology ok: {report.ok}")

    cell = graph.cell_at(*graph.cells[len(graph.cells) // 2].center)
    print(f"\nCell {cell.id} centered at ({cell.center_x}, {cell.center_z}), elevation {cell.center_y:.2f}")
    for edge_id in graph.cell_edges(cell.id):
        end = graph.edge_end(edge_id)
        opposite = graph.edges[edge_id].neighbor
        across = "boundary" if opposite is None else f"cell {graph.edges[opposite].cell}"
        print(f"   -> ({end.x:7.3f}, {end.z:7.3f})  y={end.y:6.2f}  across: {across}")
    print(f"   Neighbours: {graph.cell_neighbors(cell.id)}")


if __name__ == "__main__":
    main()
