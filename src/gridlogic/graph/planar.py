"""Planar subdivisions made of vertices, edges and faces.

A `PlanarGraph` is built once (usually through `PlanarGraphBuilder` or one of the grid
generators) and is immutable afterwards.  Solvers attach satisfiability state to its edges
and faces elsewhere; the topology itself never changes while solving.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import NamedTuple, TypeAlias

EdgeId: TypeAlias = int
FaceId: TypeAlias = int


class StructuralError(Exception):
    """Raised when a graph's topology is malformed (e.g. an edge bordering three faces)."""

    pass


class Vertex(NamedTuple):
    """Position of a vertex on the plane."""

    x: float
    y: float


class Edge(NamedTuple):
    """An undirected edge, normalized so that `start < end`."""

    start: int
    end: int

    def shares_vertex(self, vertex: int) -> bool:
        """Returns whether this edge starts or ends at `vertex`."""
        return self.start == vertex or self.end == vertex


class Face(NamedTuple):
    """A closed cycle of edges."""

    id: FaceId
    vertices: tuple[int, ...]
    """Vertex indices, in cycle order."""

    edges: tuple[EdgeId, ...]
    """`edges[i]` joins `vertices[i]` and `vertices[(i + 1) % len(vertices)]`."""

    hint: int | None = None
    """Optional number attached to the face (used by loop puzzles)."""


class PlanarGraph:
    """Faces, edges and vertices of a planar subdivision, with adjacency queries.

    Edge and face ids are stable integers assigned in creation order.
    """

    def __init__(
        self,
        vertices: Sequence[Vertex],
        faces: Sequence[Sequence[int]],
        hints: Mapping[FaceId, int] | None = None,
    ) -> None:
        """Build the graph from vertex positions and faces given as vertex-index cycles.

        Args:
            vertices: Vertex positions; a vertex is identified by its index in this list.
            faces: One vertex-index cycle per face.  Consecutive vertices (and the last and
                first) are joined by an edge, created on first use and shared afterwards.
            hints: Optional mapping from face id to hint.

        Raises:
            StructuralError: If a face has fewer than three vertices, repeats a vertex,
                references an unknown vertex, or an edge ends up bordering more than two faces.
        """
        hints = hints or {}

        self.vertices: tuple[Vertex, ...] = tuple(Vertex(*v) for v in vertices)
        """Vertex positions, indexed by vertex index."""

        edges: list[Edge] = []
        edge_index: dict[Edge, EdgeId] = {}
        built_faces: list[Face] = []
        faces_per_edge: list[list[FaceId]] = []

        for face_id, indices in enumerate(faces):
            indices = tuple(indices)
            if len(indices) < 3:
                raise StructuralError(f"Face {face_id} has fewer than three vertices.")
            if len(set(indices)) != len(indices):
                raise StructuralError(f"Face {face_id} repeats a vertex: {indices}.")
            for v in indices:
                if not 0 <= v < len(self.vertices):
                    raise StructuralError(f"Face {face_id} references unknown vertex {v}.")

            face_edges: list[EdgeId] = []
            for i, start in enumerate(indices):
                end = indices[(i + 1) % len(indices)]
                edge = Edge(min(start, end), max(start, end))
                edge_id = edge_index.get(edge)
                if edge_id is None:
                    edge_id = len(edges)
                    edge_index[edge] = edge_id
                    edges.append(edge)
                    faces_per_edge.append([])
                faces_per_edge[edge_id].append(face_id)
                if len(faces_per_edge[edge_id]) > 2:
                    raise StructuralError(
                        f"Edge {edge_id} {edge} borders more than two faces: "
                        f"{faces_per_edge[edge_id]}."
                    )
                face_edges.append(edge_id)

            built_faces.append(Face(face_id, indices, tuple(face_edges), hints.get(face_id)))

        unknown = [f for f in hints if not 0 <= f < len(built_faces)]
        if unknown:
            raise ValueError(f"Hints given for unknown faces: {sorted(unknown)}.")

        self.edges: tuple[Edge, ...] = tuple(edges)
        """Edges, indexed by edge id."""

        self.faces: tuple[Face, ...] = tuple(built_faces)
        """Faces, indexed by face id."""

        self._edge_index = edge_index
        self._faces_per_edge: tuple[tuple[FaceId, ...], ...] = tuple(
            tuple(f) for f in faces_per_edge
        )

        edges_per_vertex: list[list[EdgeId]] = [[] for _ in self.vertices]
        for edge_id, edge in enumerate(self.edges):
            edges_per_vertex[edge.start].append(edge_id)
            edges_per_vertex[edge.end].append(edge_id)
        self._edges_per_vertex = tuple(tuple(e) for e in edges_per_vertex)

        faces_per_vertex: list[list[FaceId]] = [[] for _ in self.vertices]
        for face in self.faces:
            for v in face.vertices:
                faces_per_vertex[v].append(face.id)
        self._faces_per_vertex = tuple(tuple(f) for f in faces_per_vertex)

        self._face_edge_sets = tuple(frozenset(face.edges) for face in self.faces)
        self._face_vertex_sets = tuple(frozenset(face.vertices) for face in self.faces)

    @classmethod
    def build(
        cls,
        vertices: Sequence[Vertex],
        faces: Sequence[Sequence[int]],
        hints: Mapping[FaceId, int] | None = None,
    ) -> "PlanarGraph":
        """Alias for the constructor, reading as a factory at call sites."""
        return cls(vertices, faces, hints)

    def __repr__(self) -> str:
        return (
            f"PlanarGraph(vertices={len(self.vertices)}, edges={len(self.edges)}, "
            f"faces={len(self.faces)})"
        )

    @property
    def edge_ids(self) -> range:
        return range(len(self.edges))

    @property
    def face_ids(self) -> range:
        return range(len(self.faces))

    # ---------------------------------------------------------------------
    # Face queries
    # ---------------------------------------------------------------------
    def faces_containing(self, edge: EdgeId) -> tuple[FaceId, ...]:
        """Returns the zero, one or two faces bordered by `edge`.

        Raises:
            StructuralError: If more than two faces share the edge.
        """
        faces = self._faces_per_edge[edge]
        if len(faces) > 2:
            raise StructuralError(f"Edge {edge} borders more than two faces: {faces}.")
        return faces

    def shared_edge(self, face_a: FaceId, face_b: FaceId) -> EdgeId | None:
        """Returns the edge bordered by both faces, or None if they are not adjacent."""
        if face_a == face_b:
            return None
        for edge in self.faces[face_a].edges:
            if edge in self._face_edge_sets[face_b]:
                return edge
        return None

    def face_contains_vertex(self, face: FaceId, vertex: int) -> bool:
        return vertex in self._face_vertex_sets[face]

    def face_contains_edge(self, face: FaceId, edge: EdgeId) -> bool:
        return edge in self._face_edge_sets[face]

    def edges_for_face(self, face: FaceId) -> tuple[EdgeId, ...]:
        return self.faces[face].edges

    def vertices_for_face(self, face: FaceId) -> tuple[int, ...]:
        return self.faces[face].vertices

    def hint_for_face(self, face: FaceId) -> int | None:
        return self.faces[face].hint

    def faces_sharing_vertex(self, vertex: int) -> tuple[FaceId, ...]:
        return self._faces_per_vertex[vertex]

    # ---------------------------------------------------------------------
    # Edge and vertex queries
    # ---------------------------------------------------------------------
    def edge_vertices(self, edge: EdgeId) -> Edge:
        return self.edges[edge]

    def edge_between(self, vertex1: int, vertex2: int) -> EdgeId | None:
        """Returns the edge joining two vertices (in either direction), or None."""
        return self._edge_index.get(Edge(min(vertex1, vertex2), max(vertex1, vertex2)))

    def edges_sharing_vertex(self, vertex: int) -> tuple[EdgeId, ...]:
        return self._edges_per_vertex[vertex]

    def edges_share_vertex(self, first: EdgeId, second: EdgeId) -> bool:
        other = self.edges[second]
        edge = self.edges[first]
        return edge.shares_vertex(other.start) or edge.shares_vertex(other.end)

    def is_boundary_edge(self, edge: EdgeId) -> bool:
        """Returns whether `edge` borders a single face (i.e. lies on the outer boundary)."""
        return len(self._faces_per_edge[edge]) == 1

    def single_path_edges(
        self, edge: EdgeId, include: Callable[[EdgeId], bool] = lambda _: True
    ) -> list[EdgeId]:
        """Returns the unambiguous path of included edges running through `edge`.

        Starting from `edge`, the path is extended across every vertex where exactly two
        included edges meet.  It stops at vertices where the continuation is ambiguous or
        absent.  The starting edge is always part of the result.
        """
        result: list[EdgeId] = []
        seen: set[EdgeId] = set()
        stack: list[EdgeId] = [edge]

        while stack:
            pivot = stack.pop()
            if pivot in seen:
                continue
            seen.add(pivot)
            result.append(pivot)

            start, end = self.edges[pivot]
            for vertex in (start, end):
                sharing = [e for e in self._edges_per_vertex[vertex] if include(e)]
                if len(sharing) != 2 or pivot not in sharing:
                    continue
                nxt = sharing[0] if sharing[1] == pivot else sharing[1]
                if nxt not in seen:
                    stack.append(nxt)

        return result

    def is_loop(self, edges: Iterable[EdgeId]) -> bool:
        """Returns whether the given edges form exactly one simple closed loop."""
        edge_list = list(dict.fromkeys(edges))
        if len(edge_list) < 3:
            return False

        degree: dict[int, int] = {}
        for edge_id in edge_list:
            start, end = self.edges[edge_id]
            degree[start] = degree.get(start, 0) + 1
            degree[end] = degree.get(end, 0) + 1
        if any(d != 2 for d in degree.values()):
            return False

        members = set(edge_list)
        path = self.single_path_edges(edge_list[0], lambda e: e in members)
        return len(path) == len(edge_list)


class PlanarGraphBuilder:
    """Incrementally collects vertices and faces, then builds a `PlanarGraph`.

    Vertices are deduplicated by position, so faces created from shared coordinates share
    vertices (and therefore edges).
    """

    def __init__(self) -> None:
        self._vertices: list[Vertex] = []
        self._vertex_index: dict[Vertex, int] = {}
        self._faces: list[tuple[int, ...]] = []
        self._hints: dict[FaceId, int] = {}

    def add_vertex(self, x: float, y: float) -> int:
        """Appends a vertex at (x, y) and returns its index.

        Unlike `add_or_get_vertex`, no lookup is done; an existing vertex at the same
        position is shadowed for later `add_or_get_vertex` calls.
        """
        index = len(self._vertices)
        vertex = Vertex(x, y)
        self._vertices.append(vertex)
        self._vertex_index[vertex] = index
        return index

    def add_or_get_vertex(self, x: float, y: float) -> int:
        """Returns the index of the vertex at (x, y), creating it if needed."""
        vertex = Vertex(x, y)
        index = self._vertex_index.get(vertex)
        if index is None:
            index = len(self._vertices)
            self._vertices.append(vertex)
            self._vertex_index[vertex] = index
        return index

    def add_face(self, vertex_indices: Sequence[int], hint: int | None = None) -> FaceId:
        """Adds a face given as a cycle of vertex indices, returning its id."""
        face_id = len(self._faces)
        self._faces.append(tuple(vertex_indices))
        if hint is not None:
            self._hints[face_id] = hint
        return face_id

    def set_hint(self, face: FaceId, hint: int | None) -> None:
        if hint is None:
            self._hints.pop(face, None)
        else:
            self._hints[face] = hint

    def build(self) -> PlanarGraph:
        return PlanarGraph(self._vertices, self._faces, self._hints)
