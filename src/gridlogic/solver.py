"""Backtracking controller: fixpoint propagation plus bounded guessing."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, NamedTuple, TypeAlias

from gridlogic.config import config as solver_config
from gridlogic.game import Puzzle, guess_candidates
from gridlogic.outcome import SolverOutcome, classify
from gridlogic.rules import ContradictionError, run_to_fixpoint
from gridlogic.state import PuzzleState, _UndoInfo

EventKind: TypeAlias = Literal["fixpoint", "guess", "backtrack"]
GuessPolicy: TypeAlias = Literal["first", "fewest"]


class GuessRecord(NamedTuple):
    """A tentative assignment, with the undo mark taken just before it was made."""

    mark: _UndoInfo
    variable: int
    value: int


class ProgressEvent(NamedTuple):
    """Notification passed to progress hooks."""

    kind: EventKind
    """`fixpoint` after every propagation run, `guess` after an assignment, `backtrack`
    after a failed assignment has been undone."""

    state: PuzzleState
    """The live puzzle state.  Hooks must treat it as read-only."""

    depth: int
    """Number of guesses on the current search path."""

    total_guesses: int
    """Cumulative guess count of the solver."""

    variable: int | None = None
    """Guessed variable (guess and backtrack events only)."""

    value: int | None = None
    """Guessed value (guess and backtrack events only)."""


ProgressHook: TypeAlias = Callable[[ProgressEvent], None]


@dataclass
class SolverStats:
    """Statistics collected during solving."""

    fixpoints: int = 0
    """Number of fixpoint runs."""

    rule_updates: int = 0
    """Number of domain reductions made by deduction rules."""

    backtracks: int = 0
    """Number of guesses that were undone."""

    max_depth_reached: int = 0
    """Maximum number of nested guesses."""


class Solver:
    """Drives a puzzle's deduction rules to a fixpoint and guesses when they stall.

    The guess budget bounds the total number of guesses across the whole search tree.  When
    it runs out the solver gives up and reports `UNSOLVED`, which is distinct from the
    `UNSOLVABLE` proof obtained when every candidate of a guessed variable fails.

    Variables are guessed in the puzzle's `guess_order` if it defines one, else in index
    order.  With the `first` policy the first undetermined variable is taken; with `fewest`
    the one with the fewest remaining candidates, ties broken by that order.  Candidate
    values are tried in ascending order.
    """

    def __init__(
        self,
        puzzle: Puzzle,
        *,
        max_guesses: int | None = None,
        progress: ProgressHook | None = None,
        guess_policy: GuessPolicy | None = None,
        max_fixpoint_passes: int | None = None,
    ):
        """Create a solver for `puzzle`.

        Args:
            puzzle: The puzzle to solve.  Its state is mutated in place.
            max_guesses: Guess budget.  Defaults to `SolverConfig.max_guesses`.
            progress: Optional hook called with a `ProgressEvent` after every fixpoint,
                guess and backtrack.
            guess_policy: `first` or `fewest`.  Defaults to `SolverConfig.guess_policy`.
            max_fixpoint_passes: Cap on rule passes per fixpoint.  Defaults to
                `SolverConfig.max_fixpoint_passes`.

        Raises:
            ValueError: If `max_guesses` is negative, `guess_policy` is unknown or
                `max_fixpoint_passes` is less than 1.
        """
        if guess_policy is None:
            guess_policy = solver_config.guess_policy
        if guess_policy not in ("first", "fewest"):
            raise ValueError(f"Unknown guess policy: {guess_policy!r}.")
        if max_fixpoint_passes is None:
            max_fixpoint_passes = solver_config.max_fixpoint_passes
        if max_fixpoint_passes is not None and max_fixpoint_passes < 1:
            raise ValueError(
                f"max_fixpoint_passes must be at least 1, got {max_fixpoint_passes}."
            )

        self.puzzle: Puzzle = puzzle
        """The puzzle being solved."""

        self.progress: ProgressHook | None = progress
        """Optional progress hook."""

        self.guess_policy: GuessPolicy = guess_policy
        """Variable selection policy."""

        self.max_fixpoint_passes: int | None = max_fixpoint_passes
        """Cap on rule passes per fixpoint, or None."""

        self.stats: SolverStats = SolverStats()
        """Statistics collected during solving."""

        self._total_guesses = 0
        self._max_guesses = 0
        self.max_guesses = solver_config.max_guesses if max_guesses is None else max_guesses

        self._state = SolverOutcome.UNSOLVED
        self._cancelled = False
        self._gave_up = False
        self._root_mark: _UndoInfo | None = None

    def __repr__(self) -> str:
        return (
            f"Solver(state={self._state.value}, total_guesses={self._total_guesses}, "
            f"max_guesses={self._max_guesses})"
        )

    @property
    def state(self) -> SolverOutcome:
        """Outcome of the last `solve()` call (`UNSOLVED` before the first one)."""
        return self._state

    @property
    def puzzle_state(self) -> PuzzleState:
        return self.puzzle.state

    @property
    def total_guesses(self) -> int:
        """Cumulative number of guesses made by this solver."""
        return self._total_guesses

    @property
    def max_guesses(self) -> int:
        """Total guess budget."""
        return self._max_guesses

    @max_guesses.setter
    def max_guesses(self, value: int) -> None:
        if value < 0:
            raise ValueError("max_guesses must be non-negative.")
        if value < self._total_guesses:
            raise ValueError(
                f"max_guesses ({value}) cannot be below the {self._total_guesses} guesses "
                "already made."
            )
        self._max_guesses = value

    def cancel(self) -> None:
        """Ask a running `solve()` to stop; it then returns `UNSOLVED`.

        Typically called from a progress hook.
        """
        self._cancelled = True

    def solve(self) -> SolverOutcome:
        """Solve the puzzle in place.

        On `SOLVED` the puzzle state holds the solution.  On any other outcome the state is
        left at the fixpoint reached before the first guess.  If a progress hook raises, the
        state is restored the same way before the exception propagates.
        """
        self._cancelled = False
        self._gave_up = False
        state = self.puzzle.state

        # The initial check runs before any rule has touched the state.
        outcome = classify(state, self.puzzle, initial=True)
        if outcome.is_terminal:
            self._state = outcome
            return outcome

        self._root_mark = state.mark()
        try:
            outcome = self._solve_helper(0)
        except BaseException:
            state.undo(self._root_mark)
            self._state = SolverOutcome.UNSOLVED
            raise
        if outcome is not SolverOutcome.SOLVED:
            state.undo(self._root_mark)

        self._state = outcome
        return outcome

    def _emit(
        self,
        kind: EventKind,
        depth: int,
        variable: int | None = None,
        value: int | None = None,
    ) -> None:
        if self.progress is not None:
            self.progress(
                ProgressEvent(kind, self.puzzle.state, depth, self._total_guesses, variable, value)
            )

    def _select_variable(self) -> int:
        state = self.puzzle.state
        order = [var for var in guess_candidates(self.puzzle) if not state.is_determined(var)]
        if not order:
            raise RuntimeError("No undetermined variable to guess on.")
        if self.guess_policy == "first":
            return order[0]
        _, var = min(enumerate(order), key=lambda item: (state.candidate_count(item[1]), item[0]))
        return var

    def _solve_helper(self, depth: int) -> SolverOutcome:
        """Propagate, classify, and guess recursively.

        Returns `SOLVED` with the solution left in place; any other outcome leaves changes made
        in this frame for the caller to undo.
        """
        if self._cancelled:
            self._gave_up = True
            return SolverOutcome.UNSOLVED

        state = self.puzzle.state
        self.stats.max_depth_reached = max(self.stats.max_depth_reached, depth)

        try:
            result = run_to_fixpoint(state, self.puzzle.rules, max_passes=self.max_fixpoint_passes)
        except ContradictionError:
            return SolverOutcome.UNSOLVABLE
        self.stats.fixpoints += 1
        self.stats.rule_updates += result.updates

        outcome = classify(state, self.puzzle)
        if depth == 0:
            self._root_mark = state.mark()
        self._emit("fixpoint", depth)
        if outcome.is_terminal:
            return outcome
        if not result.converged:
            # The pass cap stopped propagation before a fixpoint.
            self._gave_up = True
            return SolverOutcome.UNSOLVED

        var = self._select_variable()
        for value in state.candidates(var):
            if self._cancelled or self._total_guesses >= self._max_guesses:
                self._gave_up = True
                return SolverOutcome.UNSOLVED

            guess = GuessRecord(state.mark(), var, value)
            state.assign(var, value)
            self._total_guesses += 1
            self._emit("guess", depth + 1, var, value)

            if self._solve_helper(depth + 1) is SolverOutcome.SOLVED:
                return SolverOutcome.SOLVED

            state.undo(guess.mark)
            self.stats.backtracks += 1
            self._emit("backtrack", depth, var, value)

        return SolverOutcome.UNSOLVED if self._gave_up else SolverOutcome.UNSOLVABLE
