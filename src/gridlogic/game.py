"""Capability contracts shared by every puzzle type."""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gridlogic.rules import DeductionRule
from gridlogic.state import PuzzleState

if TYPE_CHECKING:
    from gridlogic.solver import Solver


class GameIdError(ValueError):
    """Raised when a game identifier string cannot be decoded."""

    pass


@runtime_checkable
class Puzzle(Protocol):
    """A puzzle instance the solver can drive.

    A puzzle may also define `guess_order(state) -> Iterable[int]` to choose the order in
    which undetermined variables are considered for guessing.
    """

    state: PuzzleState
    rules: Sequence[DeductionRule]

    def is_consistent(self, state: PuzzleState) -> bool:
        """Returns whether no constraint is violated by the determined variables."""
        ...

    def is_solved(self, state: PuzzleState) -> bool:
        """Returns whether a fully determined state satisfies every constraint."""
        ...


class GameDescriptor(Protocol):
    """Factory for solvers of one puzzle type."""

    name: str

    def create_solver_from_game_id(self, game_id: str) -> "Solver":
        """Decode `game_id` and return a solver for it.

        Raises:
            GameIdError: If the identifier is malformed.
        """
        ...

    def create_solver(self, puzzle: Puzzle) -> "Solver": ...


def guess_candidates(puzzle: Puzzle) -> Iterable[int]:
    """Returns the puzzle's preferred guess order, or variable-index order."""
    guess_order = getattr(puzzle, "guess_order", None)
    if guess_order is None:
        return puzzle.state.undetermined()
    return guess_order(puzzle.state)
