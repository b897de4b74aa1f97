"""Deduction rules for Towers grids."""

from collections import defaultdict
from collections.abc import Sequence
from typing import NamedTuple

from gridlogic.rules import ContradictionError, DomainUpdate
from gridlogic.state import PuzzleState


class ClueLine(NamedTuple):
    """A row or column with the visibility clues at both of its ends."""

    variables: tuple[int, ...]
    """Cells in order, starting at the `front` end."""

    front: int
    """Clue read from the first cell's end (0 = none)."""

    back: int
    """Clue read from the last cell's end (0 = none)."""


def count_visible(heights: Sequence[int]) -> int:
    """Number of towers seen looking along `heights` from its first element."""
    visible = 0
    tallest = 0
    for h in heights:
        if h > tallest:
            visible += 1
            tallest = h
    return visible


def _merge(removals: dict[int, set[int]]) -> list[DomainUpdate]:
    return [DomainUpdate(var, frozenset(values)) for var, values in sorted(removals.items())]


class LatinEliminationRule:
    """Removes the value of every determined cell from the other cells of its lines.

    Works on any constraint registered on the state, so it applies to every puzzle whose
    constraints are "all different" groups.
    """

    name = "latin-elimination"

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        removals: dict[int, set[int]] = defaultdict(set)
        for key in state.constraint_keys:
            variables = state.variables_of(key)
            for var in variables:
                value = state.value(var)
                if value is None:
                    continue
                for other in variables:
                    if other != var and state.has_candidate(other, value):
                        removals[other].add(value)
        return _merge(removals)


class HiddenSingleRule:
    """Fixes a cell when it is the only place left in a line for some value."""

    name = "hidden-single"

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        removals: dict[int, set[int]] = defaultdict(set)
        for key in state.constraint_keys:
            variables = state.variables_of(key)
            for value in range(state.domain_size):
                holders = [var for var in variables if state.has_candidate(var, value)]
                if not holders:
                    raise ContradictionError(f"No place left for value {value} in {key!r}.")
                if len(holders) == 1 and not state.is_determined(holders[0]):
                    var = holders[0]
                    removals[var].update(v for v in state.candidates(var) if v != value)
        return _merge(removals)


class VisibilityRule:
    """Removes heights that no clue-satisfying arrangement of a line uses.

    For each clued line, every permutation of heights allowed by the current domains and
    by both of the line's clues is enumerated.  Heights never used at a position are
    removed from that cell.  A line with no valid arrangement is a contradiction.
    """

    name = "visibility"

    def __init__(self, lines: Sequence[ClueLine]):
        self.lines: tuple[ClueLine, ...] = tuple(line for line in lines if line.front or line.back)
        """Lines with at least one clue."""

    def apply(self, state: PuzzleState) -> list[DomainUpdate]:
        removals: dict[int, set[int]] = defaultdict(set)
        for line in self.lines:
            used = self._used_values(state, line)
            for var, values in zip(line.variables, used):
                unused = set(state.candidates(var)) - values
                if unused:
                    removals[var].update(unused)
        return _merge(removals)

    def _used_values(self, state: PuzzleState, line: ClueLine) -> list[set[int]]:
        n = len(line.variables)
        domains = [state.candidates(var) for var in line.variables]
        used: list[set[int]] = [set() for _ in range(n)]
        arrangement: list[int] = []
        taken = [False] * state.domain_size
        found = False

        def _search(pos: int, visible: int, tallest: int) -> None:
            nonlocal found
            if line.front:
                if visible > line.front or visible + (n - pos) < line.front:
                    return
            if pos == n:
                if line.back and count_visible([v + 1 for v in reversed(arrangement)]) != line.back:
                    return
                found = True
                for i, value in enumerate(arrangement):
                    used[i].add(value)
                return
            for value in domains[pos]:
                if taken[value]:
                    continue
                taken[value] = True
                arrangement.append(value)
                height = value + 1
                if height > tallest:
                    _search(pos + 1, visible + 1, height)
                else:
                    _search(pos + 1, visible, tallest)
                arrangement.pop()
                taken[value] = False

        _search(0, 0, 0)
        if not found:
            raise ContradictionError(f"No arrangement of line {line.variables} fits its clues.")
        return used
