"""Towers: a Latin square of skyscraper heights with visibility clues around the edge."""

from collections.abc import Iterator
from enum import IntEnum
from typing import NamedTuple

import numpy as np

from gridlogic.rules import DeductionRule
from gridlogic.state import PuzzleState
from gridlogic.towers.rules import (
    ClueLine,
    HiddenSingleRule,
    LatinEliminationRule,
    VisibilityRule,
    count_visible,
)


class Side(IntEnum):
    """Edge of the grid a visibility clue is read from."""

    TOP = 0
    BOTTOM = 1
    LEFT = 2
    RIGHT = 3


class Visibilities(NamedTuple):
    """Visibility clues, one per column (top, bottom) or row (left, right).

    0 means no clue.  Top and bottom clues are listed left to right, left and right clues
    top to bottom.
    """

    top: tuple[int, ...]
    bottom: tuple[int, ...]
    left: tuple[int, ...]
    right: tuple[int, ...]

    @classmethod
    def empty(cls, size: int) -> "Visibilities":
        zeros = (0,) * size
        return cls(zeros, zeros, zeros, zeros)

    def for_side(self, side: Side) -> tuple[int, ...]:
        return self[side]


class TowersPuzzle:
    """A `size` x `size` Towers grid.

    Cell (x, y) is variable `y * size + x`; value `i` in its domain stands for height `i + 1`.
    Rows and columns are registered as constraints on the state under the keys
    `("row", y)` and `("col", x)`.
    """

    def __init__(self, size: int, visibilities: Visibilities | None = None):
        if size < 1:
            raise ValueError("Grid size must be positive.")
        if visibilities is None:
            visibilities = Visibilities.empty(size)
        visibilities = Visibilities(*(tuple(clues) for clues in visibilities))
        for side in Side:
            clues = visibilities.for_side(side)
            if len(clues) != size:
                raise ValueError(f"Expected {size} {side.name.lower()} clues, got {len(clues)}.")
            if any(not 0 <= c <= size for c in clues):
                raise ValueError(f"{side.name.capitalize()} clues must be in 0..{size}: {clues}.")

        self.size: int = size
        """Number of rows and columns."""

        self.visibilities: Visibilities = visibilities
        """Visibility clues around the grid."""

        self.state: PuzzleState = PuzzleState(size * size, size)
        """Candidate heights of every cell."""

        for y in range(size):
            self.state.add_constraint(("row", y), [self.var(x, y) for x in range(size)])
        for x in range(size):
            self.state.add_constraint(("col", x), [self.var(x, y) for y in range(size)])

        clue_lines = [
            ClueLine(tuple(self.line(Side.TOP, x)), visibilities.top[x], visibilities.bottom[x])
            for x in range(size)
        ] + [
            ClueLine(tuple(self.line(Side.LEFT, y)), visibilities.left[y], visibilities.right[y])
            for y in range(size)
        ]

        self.rules: tuple[DeductionRule, ...] = (
            LatinEliminationRule(),
            HiddenSingleRule(),
            VisibilityRule(clue_lines),
        )
        """Deduction rules, in the order they run."""

    def __repr__(self) -> str:
        return f"TowersPuzzle(size={self.size}, visibilities={self.visibilities})"

    def var(self, x: int, y: int) -> int:
        """Returns the variable index of cell (x, y).

        Raises:
            IndexError: If the cell lies outside the grid.
        """
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"Cell ({x}, {y}) outside {self.size}x{self.size} grid.")
        return y * self.size + x

    def set_given(self, x: int, y: int, height: int) -> None:
        """Fix cell (x, y) to `height` as part of the puzzle input."""
        if not 1 <= height <= self.size:
            raise ValueError(f"Height must be in 1..{self.size}, got {height}.")
        self.state.lock(self.var(x, y), height - 1)

    def height(self, x: int, y: int) -> int | None:
        """Returns the height of cell (x, y), or None if not yet determined."""
        value = self.state.value(self.var(x, y))
        return None if value is None else value + 1

    def heights(self, state: PuzzleState | None = None) -> np.ndarray:
        """Returns a (size, size) array of heights indexed `[y, x]`, with 0 for open cells."""
        if state is None:
            state = self.state
        grid = np.zeros((self.size, self.size), dtype=int)
        for y, x in np.ndindex(grid.shape):
            value = state.value(y * self.size + x)
            if value is not None:
                grid[y, x] = value + 1
        return grid

    def line(self, side: Side, index: int) -> list[int]:
        """Returns the variables of a row or column, ordered away from `side`."""
        if not 0 <= index < self.size:
            raise IndexError(f"Line index {index} outside 0..{self.size - 1}.")
        n = self.size
        match side:
            case Side.TOP:
                return [self.var(index, y) for y in range(n)]
            case Side.BOTTOM:
                return [self.var(index, y) for y in reversed(range(n))]
            case Side.LEFT:
                return [self.var(x, index) for x in range(n)]
            case Side.RIGHT:
                return [self.var(x, index) for x in reversed(range(n))]
        raise ValueError(f"Unknown side: {side!r}.")

    def clued_lines(self) -> Iterator[tuple[Side, int, int]]:
        """Yields `(side, index, clue)` for every non-zero visibility clue."""
        for side in Side:
            for index, clue in enumerate(self.visibilities.for_side(side)):
                if clue:
                    yield side, index, clue

    def _line_heights(self, grid: np.ndarray, side: Side, index: int) -> np.ndarray:
        match side:
            case Side.TOP:
                return grid[:, index]
            case Side.BOTTOM:
                return grid[::-1, index]
            case Side.LEFT:
                return grid[index, :]
            case _:
                return grid[index, ::-1]

    def is_consistent(self, state: PuzzleState) -> bool:
        """Returns whether the determined cells break no rule.

        Checks for repeated heights within a row or column, and for visibility clues that
        the determined prefix of a line already contradicts.
        """
        grid = self.heights(state)
        for lines in (grid, grid.T):
            for line in lines:
                counts = np.bincount(line, minlength=self.size + 1)
                if np.any(counts[1:] > 1):
                    return False

        for side, index, clue in self.clued_lines():
            heights = self._line_heights(grid, side, index)
            prefix = []
            for h in heights:
                if h == 0:
                    break
                prefix.append(int(h))
            visible = count_visible(prefix)
            if visible > clue:
                return False
            # Once the tallest tower is seen, nothing behind it is visible.
            if self.size in prefix and visible != clue:
                return False
        return True

    def is_solved(self, state: PuzzleState) -> bool:
        """Returns whether every cell is determined and all rules hold."""
        if not state.all_determined():
            return False
        grid = self.heights(state)
        expected = np.arange(1, self.size + 1)
        for lines in (grid, grid.T):
            for line in lines:
                if not np.array_equal(np.sort(line), expected):
                    return False
        for side, index, clue in self.clued_lines():
            if count_visible(self._line_heights(grid, side, index).tolist()) != clue:
                return False
        return True

    def render(self, state: PuzzleState | None = None) -> str:
        """Returns the grid as text, with clues around the edge and `.` for open cells."""
        grid = self.heights(state)

        def _clue(c: int) -> str:
            return str(c) if c else " "

        lines = ["   " + " ".join(_clue(c) for c in self.visibilities.top)]
        for y in range(self.size):
            cells = " ".join(str(h) if h else "." for h in grid[y])
            lines.append(
                f"{_clue(self.visibilities.left[y])}  {cells}  {_clue(self.visibilities.right[y])}"
            )
        lines.append("   " + " ".join(_clue(c) for c in self.visibilities.bottom))
        return "\n".join(lines)
