"""Sets of faces of a single planar graph."""

from collections.abc import Iterable

from sortedcontainers import SortedSet

from gridlogic.graph.planar import EdgeId, FaceId, PlanarGraph


class GraphSubset:
    """A set of faces of one `PlanarGraph`.

    The subset holds a shared reference to its graph and never mutates it.  Subsets are
    immutable values: `combined` returns a new subset.

    Two subsets are equal when they reference the same graph object and contain the same
    faces.
    """

    __slots__ = ("graph", "faces")

    def __init__(self, graph: PlanarGraph, faces: Iterable[FaceId] = ()) -> None:
        """Create a subset of `graph`.

        Raises:
            ValueError: If a face id does not belong to the graph.
        """
        faces = frozenset(faces)
        unknown = [f for f in faces if not 0 <= f < len(graph.faces)]
        if unknown:
            raise ValueError(f"Faces {sorted(unknown)} do not belong to {graph!r}.")

        self.graph: PlanarGraph = graph
        """The graph the faces belong to."""

        self.faces: frozenset[FaceId] = faces
        """Face ids in the subset."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphSubset):
            return NotImplemented
        return self.graph is other.graph and self.faces == other.faces

    def __hash__(self) -> int:
        return hash((id(self.graph), self.faces))

    def __len__(self) -> int:
        return len(self.faces)

    def __iter__(self):
        return iter(self.sorted_faces)

    def __repr__(self) -> str:
        return f"GraphSubset({list(self.sorted_faces)})"

    @property
    def sorted_faces(self) -> SortedSet:
        """Face ids in ascending order."""
        return SortedSet(self.faces)

    @property
    def min_face(self) -> FaceId:
        """Smallest face id in the subset.

        Raises:
            ValueError: If the subset is empty.
        """
        return min(self.faces)

    def contains_face(self, face: FaceId) -> bool:
        return face in self.faces

    def contains_edge(self, edge: EdgeId) -> bool:
        """Returns whether any face of the subset borders `edge`."""
        return any(self.graph.face_contains_edge(f, edge) for f in self.faces)

    def contains_vertex_index(self, vertex: int) -> bool:
        """Returns whether any face of the subset has `vertex` on its cycle."""
        return any(self.graph.face_contains_vertex(f, vertex) for f in self.faces)

    def _check_same_graph(self, other: "GraphSubset") -> None:
        if self.graph is not other.graph:
            raise ValueError("Cannot combine subsets of different graphs.")

    def combined(self, other: "GraphSubset") -> "GraphSubset":
        """Returns the union of two subsets of the same graph.

        Raises:
            ValueError: If `other` references a different graph.
        """
        self._check_same_graph(other)
        return GraphSubset(self.graph, self.faces | other.faces)

    def neighboring_edges(self, other: "GraphSubset") -> frozenset[EdgeId]:
        """Returns the edges shared between a face of this subset and a face of `other`.

        The result is empty when the subsets are not adjacent.  When the two subsets have
        faces in common the result is unspecified and should not be relied upon.

        Raises:
            ValueError: If `other` references a different graph.
        """
        self._check_same_graph(other)
        edges: set[EdgeId] = set()
        for face in self.faces:
            for other_face in other.faces:
                edge = self.graph.shared_edge(face, other_face)
                if edge is not None:
                    edges.add(edge)
        return frozenset(edges)

    def boundary_edges(self) -> frozenset[EdgeId]:
        """Returns the edges of the subset's faces that no other face of the subset borders."""
        edges: set[EdgeId] = set()
        for face in self.faces:
            for edge in self.graph.edges_for_face(face):
                neighbors = self.graph.faces_containing(edge)
                if not any(f in self.faces and f != face for f in neighbors):
                    edges.add(edge)
        return frozenset(edges)
