import pytest

from gridlogic.graph.generators import honeycomb_grid, square_grid
from gridlogic.graph.planar import Edge, PlanarGraph, PlanarGraphBuilder, StructuralError, Vertex


def test_square_grid_topology():
    graph = square_grid(2, 2)
    assert len(graph.vertices) == 9
    assert len(graph.edges) == 12
    assert len(graph.faces) == 4

    for edge in graph.edge_ids:
        assert 1 <= len(graph.faces_containing(edge)) <= 2
        start, end = graph.edge_vertices(edge)
        assert start < end

    boundary = [e for e in graph.edge_ids if graph.is_boundary_edge(e)]
    assert len(boundary) == 8


def test_face_cycles_are_closed():
    graph = honeycomb_grid(3, 2)
    for face in graph.faces:
        n = len(face.vertices)
        assert len(face.edges) == n
        for i, edge in enumerate(face.edges):
            a, b = face.vertices[i], face.vertices[(i + 1) % n]
            assert graph.edge_vertices(edge) == Edge(min(a, b), max(a, b))


def test_shared_edge_is_symmetric():
    graph = square_grid(2, 2)
    edge = graph.shared_edge(0, 1)
    assert edge is not None
    assert graph.shared_edge(1, 0) == edge
    assert set(graph.faces_containing(edge)) == {0, 1}

    # Diagonal faces only share a vertex.
    assert graph.shared_edge(0, 3) is None
    assert graph.shared_edge(0, 0) is None


def test_face_membership_queries():
    graph = square_grid(2, 1)
    face = graph.faces[0]
    assert all(graph.face_contains_vertex(0, v) for v in face.vertices)
    assert graph.face_contains_edge(0, face.edges[0])
    assert not graph.face_contains_vertex(0, graph.faces[1].vertices[1])

    v0, v1 = face.vertices[0], face.vertices[1]
    assert graph.edge_between(v1, v0) == face.edges[0]
    assert graph.edges_share_vertex(face.edges[0], face.edges[1])
    assert not graph.edges_share_vertex(face.edges[0], face.edges[2])
    assert set(graph.faces_sharing_vertex(face.vertices[1])) == {0, 1}


def test_honeycomb_adjacency():
    graph = honeycomb_grid(2, 2)
    assert all(len(face.edges) == 6 for face in graph.faces)
    assert graph.shared_edge(0, 1) is not None
    assert graph.shared_edge(0, 2) is not None
    assert graph.shared_edge(1, 2) is not None
    assert graph.shared_edge(0, 3) is None


def test_hints_are_attached_to_faces():
    graph = square_grid(2, 2, {0: 3, 3: 0})
    assert graph.hint_for_face(0) == 3
    assert graph.hint_for_face(1) is None
    assert graph.hint_for_face(3) == 0

    with pytest.raises(ValueError):
        square_grid(2, 2, {4: 1})


def test_edge_bordering_three_faces_is_rejected():
    vertices = [Vertex(0, 0), Vertex(1, 0), Vertex(0, 1), Vertex(1, 1), Vertex(2, 2)]
    with pytest.raises(StructuralError):
        PlanarGraph.build(vertices, [[0, 1, 2], [0, 1, 3], [0, 1, 4]])


@pytest.mark.parametrize("face", [[0, 1], [0, 1, 1], [0, 1, 9]])
def test_malformed_faces_are_rejected(face):
    vertices = [Vertex(0, 0), Vertex(1, 0), Vertex(0, 1)]
    with pytest.raises(StructuralError):
        PlanarGraph(vertices, [face])


def test_builder_shares_vertices_and_edges():
    builder = PlanarGraphBuilder()
    square = [builder.add_or_get_vertex(x, y) for x, y in [(0, 0), (1, 0), (1, 1), (0, 1)]]
    again = [builder.add_or_get_vertex(x, y) for x, y in [(1, 0), (2, 0), (2, 1), (1, 1)]]
    builder.add_face(square, hint=2)
    builder.add_face(again)
    graph = builder.build()

    assert len(graph.vertices) == 6
    assert len(graph.edges) == 7
    assert graph.hint_for_face(0) == 2
    assert graph.shared_edge(0, 1) == graph.edge_between(square[1], square[2])


def test_single_path_and_loops():
    graph = square_grid(3, 1)
    face0 = set(graph.edges_for_face(0))
    face2 = set(graph.edges_for_face(2))

    assert graph.is_loop(face0)
    # Two separate squares are two loops, not one.
    assert not graph.is_loop(face0 | face2)

    top = sorted(face0)[:2]
    path = graph.single_path_edges(top[0], lambda e: e in face0)
    assert set(path) == face0

    everything = graph.single_path_edges(graph.faces[1].edges[0])
    # Degree-3 vertices stop the walk.
    assert everything == [graph.faces[1].edges[0]]

    assert not graph.is_loop([graph.faces[0].edges[0]])


def test_add_vertex_always_appends():
    builder = PlanarGraphBuilder()
    a, b, c = (builder.add_vertex(x, y) for x, y in [(0, 0), (1, 0), (0, 1)])
    shadow = builder.add_vertex(0, 0)
    assert shadow == 3
    assert builder.add_or_get_vertex(0, 0) == shadow

    builder.add_face([a, b, c])
    graph = builder.build()
    assert len(graph.vertices) == 4
    assert graph.vertices_for_face(0) == (a, b, c)
    assert graph.edges_sharing_vertex(shadow) == ()
