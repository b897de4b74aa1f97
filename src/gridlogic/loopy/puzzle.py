"""Loopy (slitherlink): draw a single closed loop along the edges of a planar graph.

Every edge is a decision variable with two values, `MARKED` (part of the loop) and
`DISABLED` (not part of it).  An edge with both values still open is "normal".  A face's
hint is the number of its edges the loop must use.
"""

from collections.abc import Iterable

from gridlogic.graph.planar import EdgeId, PlanarGraph
from gridlogic.loopy.edges import EdgeState, is_enabled, is_marked, is_normal, marked_runs
from gridlogic.loopy.rules import default_rules
from gridlogic.rules import DeductionRule
from gridlogic.state import PuzzleState


class LoopyPuzzle:
    """A loop puzzle on a planar graph.

    Edge `e` of the graph is variable `e` of the state.  Each face and each vertex is
    registered as a constraint under the keys `("face", f)` and `("vertex", v)`.
    """

    def __init__(self, graph: PlanarGraph):
        self.graph: PlanarGraph = graph
        """The graph the loop is drawn on."""

        self.state: PuzzleState = PuzzleState(len(graph.edges), len(EdgeState))
        """Edge states."""

        for face in graph.faces:
            self.state.add_constraint(("face", face.id), face.edges)
        for vertex in range(len(graph.vertices)):
            edges = graph.edges_sharing_vertex(vertex)
            if edges:
                self.state.add_constraint(("vertex", vertex), edges)

        self.rules: tuple[DeductionRule, ...] = default_rules(graph)
        """Deduction rules, in the order they run."""

    def __repr__(self) -> str:
        return f"LoopyPuzzle({self.graph!r})"

    def edge_state(self, edge: EdgeId) -> EdgeState | None:
        """Returns the state of `edge`, or None while it is still normal."""
        value = self.state.value(edge)
        return None if value is None else EdgeState(value)

    def set_edge(self, edge: EdgeId, edge_state: EdgeState) -> None:
        """Fix `edge` as part of the puzzle input."""
        self.state.lock(edge, edge_state)

    def marked_edges(self, state: PuzzleState | None = None) -> list[EdgeId]:
        if state is None:
            state = self.state
        return [e for e in self.graph.edge_ids if is_marked(state, e)]

    def is_consistent(self, state: PuzzleState) -> bool:
        """Returns whether the marked and disabled edges break no rule.

        1. No vertex has more than two marked edges.
        2. A hinted face has at most `hint` marked edges and at least `hint` enabled ones.
        3. A closed loop of marked edges is only allowed if it holds every marked edge.
        """
        graph = self.graph
        for vertex in range(len(graph.vertices)):
            edges = graph.edges_sharing_vertex(vertex)
            if sum(1 for e in edges if is_marked(state, e)) > 2:
                return False

        for face in graph.faces:
            if face.hint is None:
                continue
            if sum(1 for e in face.edges if is_marked(state, e)) > face.hint:
                return False
            if sum(1 for e in face.edges if is_enabled(state, e)) < face.hint:
                return False

        runs = marked_runs(graph, state)
        if len(runs) > 1 and any(graph.is_loop(run) for run in runs):
            return False
        return True

    def is_solved(self, state: PuzzleState) -> bool:
        """Returns whether every hint is met and the marked edges form one closed loop."""
        graph = self.graph
        for face in graph.faces:
            if face.hint is None:
                continue
            if sum(1 for e in face.edges if is_marked(state, e)) != face.hint:
                return False
        return graph.is_loop(self.marked_edges(state))

    def guess_order(self, state: PuzzleState) -> Iterable[EdgeId]:
        """Returns normal edges, those continuing an open end of the loop first.

        Edges at a vertex with exactly one marked edge come first, ordered by the number of
        hinted faces around that vertex (most first), then by edge id.  All other normal
        edges follow in edge id order.
        """
        graph = self.graph
        entries: list[tuple[int, EdgeId]] = []
        for vertex in range(len(graph.vertices)):
            edges = graph.edges_sharing_vertex(vertex)
            if sum(1 for e in edges if is_marked(state, e)) != 1:
                continue
            priority = sum(
                1 for f in graph.faces_sharing_vertex(vertex) if graph.hint_for_face(f) is not None
            )
            entries.extend((-priority, e) for e in edges if is_normal(state, e))

        order = list(dict.fromkeys(e for _, e in sorted(entries)))
        seen = set(order)
        order.extend(e for e in graph.edge_ids if is_normal(state, e) and e not in seen)
        return order

    def render(self, state: PuzzleState | None = None) -> str:
        """Returns one line per face: its hint and the states of its edges (`#`, `x`, `.`)."""
        if state is None:
            state = self.state
        symbols = {EdgeState.MARKED: "#", EdgeState.DISABLED: "x"}
        lines = []
        for face in self.graph.faces:
            hint = "-" if face.hint is None else str(face.hint)
            values = [state.value(e) for e in face.edges]
            edges = "".join("." if v is None else symbols[EdgeState(v)] for v in values)
            lines.append(f"F{face.id:<3} {hint:>2} {edges}")
        return "\n".join(lines)
