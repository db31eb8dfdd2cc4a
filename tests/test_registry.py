"""Tests for the build-local vertex and edge registries."""

from py_mapgraph.core.geometry import DomainRect
from py_mapgraph.core.registry import EdgeIndex, GraphBuildContext, VertexRegistry


class TestVertexRegistry:
    """Test quantized vertex deduplication."""

    def test_reuses_vertex_within_tolerance(self):
        registry = VertexRegistry()
        a = registry.get_or_create(1.0001, 2.0)
        b = registry.get_or_create(1.0004, 2.0002)
        assert a == b
        assert len(registry) == 1

    def test_distinct_keys_create_vertices(self):
        registry = VertexRegistry()
        a = registry.get_or_create(1.0, 2.0)
        b = registry.get_or_create(1.0006, 2.0)
        assert a != b
        assert len(registry) == 2

    def test_vertices_stored_quantized(self):
        registry = VertexRegistry()
        vertex_id = registry.get_or_create(3.14159, 2.71828)
        vertex = registry.vertices[vertex_id]
        assert (vertex.x, vertex.z) == (3.142, 2.718)
        assert vertex.y == 0.0
        assert (3.1416, 2.7183) in registry
        assert registry.find(3.1416, 2.7183) == vertex_id

    def test_ids_are_table_positions(self):
        registry = VertexRegistry()
        ids = [registry.get_or_create(float(i), 0.0) for i in range(5)]
        assert ids == list(range(5))
        assert [v.id for v in registry.vertices] == ids


class TestEdgeIndex:
    """Test the edge-by-start-vertex index."""

    def test_unknown_vertex(self):
        assert EdgeIndex().starting_at(42) == []

    def test_groups_edges(self):
        index = EdgeIndex()
        index.add(0, 10)
        index.add(0, 11)
        index.add(1, 12)
        assert index.starting_at(0) == [10, 11]
        assert index.starting_at(1) == [12]
        assert len(index) == 3


class TestGraphBuildContext:
    """Test edge creation through the build context."""

    def test_add_edge_registers_vertices_and_start(self):
        context = GraphBuildContext(domain=DomainRect(0, 0, 10, 10))
        edge_id = context.add_edge(0, (1.0, 1.0), (2.0, 3.0))

        edge = context.edges[edge_id]
        start_id = context.vertex_registry.find(1.0, 1.0)
        assert context.vertex_registry.vertices[edge.destination].position == (2.0, 3.0)
        assert context.edge_index.starting_at(start_id) == [edge_id]
        assert edge.next is None and edge.previous is None and edge.neighbor is None

    def test_contexts_do_not_share_state(self):
        first = GraphBuildContext(domain=DomainRect(0, 0, 10, 10))
        second = GraphBuildContext(domain=DomainRect(0, 0, 10, 10))
        first.add_edge(0, (1.0, 1.0), (2.0, 3.0))
        assert len(second.vertex_registry) == 0
        assert len(second.edge_index) == 0
