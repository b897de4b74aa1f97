"""Four-way classification of a puzzle state."""

from enum import Enum
from typing import TYPE_CHECKING

from gridlogic.state import PuzzleState

if TYPE_CHECKING:
    from gridlogic.game import Puzzle


class SolverOutcome(Enum):
    """Result of solving a puzzle."""

    UNSOLVED = "unsolved"
    """Not attempted yet, or no progress possible within the guess budget."""

    SOLVED = "solved"
    """Every variable is determined and every constraint holds."""

    UNSOLVABLE = "unsolvable"
    """The initial state is consistent but provably has no solution."""

    INVALID = "invalid"
    """The initial state already violates a constraint."""

    @property
    def is_terminal(self) -> bool:
        return self is not SolverOutcome.UNSOLVED


def classify(state: PuzzleState, puzzle: "Puzzle", *, initial: bool = False) -> SolverOutcome:
    """Classify `state`.

    Args:
        state: The state to classify.
        puzzle: Supplies the puzzle-level consistency and solution checks.
        initial: Whether this is the first evaluation of the initial state, before any rule
            has run.  A broken state is then `INVALID` rather than `UNSOLVABLE`.
    """
    broken = SolverOutcome.INVALID if initial else SolverOutcome.UNSOLVABLE

    if state.has_empty_domain() or not puzzle.is_consistent(state):
        return broken
    if state.all_determined():
        return SolverOutcome.SOLVED if puzzle.is_solved(state) else broken
    return SolverOutcome.UNSOLVED
