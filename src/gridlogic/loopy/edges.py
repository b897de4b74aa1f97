"""Edge states of a loop puzzle and queries over them."""

from enum import IntEnum

from gridlogic.graph.planar import EdgeId, PlanarGraph
from gridlogic.state import PuzzleState


class EdgeState(IntEnum):
    """Domain values of an edge variable.

    An edge with both values still open is "normal".
    """

    MARKED = 0
    DISABLED = 1


def is_marked(state: PuzzleState, edge: EdgeId) -> bool:
    return state.value(edge) == EdgeState.MARKED


def is_disabled(state: PuzzleState, edge: EdgeId) -> bool:
    return state.value(edge) == EdgeState.DISABLED


def is_normal(state: PuzzleState, edge: EdgeId) -> bool:
    return state.candidate_count(edge) > 1


def is_enabled(state: PuzzleState, edge: EdgeId) -> bool:
    """Returns whether the edge may still be part of the loop."""
    return state.has_candidate(edge, EdgeState.MARKED)


def marked_runs(graph: PlanarGraph, state: PuzzleState) -> list[list[EdgeId]]:
    """Partition the marked edges into maximal unambiguous paths, ordered by first edge."""
    runs: list[list[EdgeId]] = []
    seen: set[EdgeId] = set()
    for edge in graph.edge_ids:
        if edge in seen or not is_marked(state, edge):
            continue
        run = graph.single_path_edges(edge, lambda e: is_marked(state, e))
        seen.update(run)
        runs.append(run)
    return runs
