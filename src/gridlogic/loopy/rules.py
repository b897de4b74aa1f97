"""Deduction rules for loop puzzles.

All rules only read the state; marking an edge is expressed as removing `DISABLED` from its
domain and disabling it as removing `MARKED`.
"""

from collections import defaultdict

from sortedcontainers import SortedList

from gridlogic.graph.planar import EdgeId, FaceId, PlanarGraph
from gridlogic.graph.subset import GraphSubset
from gridlogic.loopy.edges import (
    EdgeState,
    is_disabled,
    is_enabled,
    is_marked,
    is_normal,
    marked_runs,
)
from gridlogic.rules import ContradictionError, DeductionRule, DomainUpdate
from gridlogic.state import PuzzleState

_MARK = frozenset({EdgeState.DISABLED.value})
_DISABLE = frozenset({EdgeState.MARKED.value})


def _mark(edge: EdgeId) -> DomainUpdate:
    return DomainUpdate(edge, _MARK)


def _disable(edge: EdgeId) -> DomainUpdate:
    return DomainUpdate(edge, _DISABLE)


class _Updates:
    """Collects edge decisions, dropping repeats while keeping first-seen order."""

    def __init__(self) -> None:
        self._updates: dict[DomainUpdate, None] = {}

    def mark(self, edge: EdgeId) -> None:
        self._updates.setdefault(_mark(edge))

    def disable(self, edge: EdgeId) -> None:
        self._updates.setdefault(_disable(edge))

    def as_list(self) -> list[DomainUpdate]:
        return list(self._updates)


class ZeroFaceRule:
    """Disables every edge of a face hinted 0."""

    name = "zero-face"

    def __init__(self, graph: PlanarGraph):
        self.graph = graph

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        updates = _Updates()
        for face in self.graph.faces:
            if face.hint == 0:
                for edge in face.edges:
                    if is_normal(state, edge):
                        updates.disable(edge)
        return updates.as_list()


class ExactEdgeCountRule:
    """Completes hinted faces whose count is already decided.

    A face with as many marked edges as its hint disables its remaining normal edges; a face
    with exactly as many enabled edges as its hint marks them all.
    """

    name = "exact-edge-count"

    def __init__(self, graph: PlanarGraph):
        self.graph = graph

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        updates = _Updates()
        for face in self.graph.faces:
            if face.hint is None:
                continue
            normal = [e for e in face.edges if is_normal(state, e)]
            if not normal:
                continue
            n_marked = sum(1 for e in face.edges if is_marked(state, e))
            if n_marked == face.hint:
                for edge in normal:
                    updates.disable(edge)
            elif n_marked + len(normal) == face.hint:
                for edge in normal:
                    updates.mark(edge)
        return updates.as_list()


class TwoEdgesPerVertexRule:
    """Disables the other edges of a vertex that already has two marked edges."""

    name = "two-edges-per-vertex"

    def __init__(self, graph: PlanarGraph):
        self.graph = graph

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        updates = _Updates()
        for vertex in range(len(self.graph.vertices)):
            edges = self.graph.edges_sharing_vertex(vertex)
            if sum(1 for e in edges if is_marked(state, e)) != 2:
                continue
            for edge in edges:
                if is_normal(state, edge):
                    updates.disable(edge)
        return updates.as_list()


class DeadEndRule:
    """Resolves vertices the loop can pass through in at most one way.

    A vertex with a single enabled edge is a dead end, so that edge is disabled (a marked
    dead end is a contradiction).  A vertex with one marked edge and exactly one other
    enabled edge must continue along it, so that edge is marked.
    """

    name = "dead-end"

    def __init__(self, graph: PlanarGraph):
        self.graph = graph

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        updates = _Updates()
        for vertex in range(len(self.graph.vertices)):
            enabled = [e for e in self.graph.edges_sharing_vertex(vertex) if is_enabled(state, e)]
            if len(enabled) == 1:
                edge = enabled[0]
                if is_marked(state, edge):
                    raise ContradictionError(f"Marked edge {edge} ends at vertex {vertex}.")
                updates.disable(edge)
            elif len(enabled) == 2:
                marked = [e for e in enabled if is_marked(state, e)]
                if len(marked) == 1:
                    other = enabled[0] if enabled[1] == marked[0] else enabled[1]
                    updates.mark(other)
        return updates.as_list()


class PrematureLoopRule:
    """Disables normal edges that would close a marked run into a wrong loop.

    If a normal edge joins the two ends of one marked run, marking it closes a loop.  That
    loop is wrong when other marked edges exist outside the run, or when a hinted face
    would end up with a different number of marked edges.
    """

    name = "premature-loop"

    def __init__(self, graph: PlanarGraph):
        self.graph = graph

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        graph = self.graph
        updates = _Updates()
        runs = marked_runs(graph, state)
        n_marked = sum(len(run) for run in runs)

        for run in runs:
            degree: dict[int, int] = defaultdict(int)
            for edge in run:
                start, end = graph.edge_vertices(edge)
                degree[start] += 1
                degree[end] += 1
            ends = [v for v, d in degree.items() if d == 1]
            if len(ends) != 2:
                continue

            closing = graph.edge_between(ends[0], ends[1])
            if closing is None or not is_normal(state, closing):
                continue
            if n_marked > len(run) or not self._hints_met(state, set(run) | {closing}):
                updates.disable(closing)
        return updates.as_list()

    def _hints_met(self, state: PuzzleState, loop: set[EdgeId]) -> bool:
        for face in self.graph.faces:
            if face.hint is not None and sum(1 for e in face.edges if e in loop) != face.hint:
                return False
        return True


class FaceNetworkRule:
    """Propagates inside/outside information between regions of faces.

    Faces joined by a disabled edge lie on the same side of the loop, so they are merged
    into networks.  Then:

    - a normal edge between two faces of the same network is disabled (a marked one is a
      contradiction);
    - two networks separated by a marked edge lie on opposite sides, so every normal edge
      between them is marked;
    - the outer region lies outside the loop: on the graph boundary, a disabled edge puts
      its network outside (all its boundary edges are disabled) and a marked edge puts it
      inside (all its boundary edges are marked).  Both at once is a contradiction.
    """

    name = "face-network"

    def __init__(self, graph: PlanarGraph):
        self.graph = graph

    def networks(self, state: PuzzleState) -> SortedList:
        """Returns the face networks, as `GraphSubset`s ordered by smallest face id."""
        graph = self.graph
        network_of: dict[FaceId, GraphSubset] = {
            face.id: GraphSubset(graph, [face.id]) for face in graph.faces
        }
        for edge in graph.edge_ids:
            faces = graph.faces_containing(edge)
            if len(faces) != 2 or not is_disabled(state, edge):
                continue
            first, second = network_of[faces[0]], network_of[faces[1]]
            if first == second:
                continue
            merged = first.combined(second)
            for face in merged.faces:
                network_of[face] = merged

        return SortedList(set(network_of.values()), key=lambda subset: subset.min_face)

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        graph = self.graph
        updates = _Updates()
        networks = self.networks(state)
        network_index = {face: i for i, network in enumerate(networks) for face in network.faces}

        adjacent: set[tuple[int, int]] = set()
        for edge in graph.edge_ids:
            faces = graph.faces_containing(edge)
            if len(faces) != 2:
                continue
            a, b = network_index[faces[0]], network_index[faces[1]]
            if a == b:
                if is_marked(state, edge):
                    raise ContradictionError(f"Marked edge {edge} inside face network {a}.")
                if is_normal(state, edge):
                    updates.disable(edge)
            else:
                adjacent.add((min(a, b), max(a, b)))

        for a, b in sorted(adjacent):
            between = networks[a].neighboring_edges(networks[b])
            if any(is_marked(state, e) for e in between):
                for edge in sorted(between):
                    if is_normal(state, edge):
                        updates.mark(edge)

        for network in networks:
            boundary = [e for e in sorted(network.boundary_edges()) if graph.is_boundary_edge(e)]
            outside = any(is_disabled(state, e) for e in boundary)
            inside = any(is_marked(state, e) for e in boundary)
            if outside and inside:
                raise ContradictionError(f"Face network {network!r} is both inside and outside.")
            for edge in boundary:
                if is_normal(state, edge):
                    if outside:
                        updates.disable(edge)
                    elif inside:
                        updates.mark(edge)
        return updates.as_list()


def default_rules(graph: PlanarGraph) -> tuple[DeductionRule, ...]:
    """Returns the loop rules for `graph`, in the order they run."""
    return (
        ZeroFaceRule(graph),
        ExactEdgeCountRule(graph),
        TwoEdgesPerVertexRule(graph),
        DeadEndRule(graph),
        PrematureLoopRule(graph),
        FaceNetworkRule(graph),
    )
