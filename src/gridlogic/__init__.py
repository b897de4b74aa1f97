"""Constraint propagation and bounded backtracking for grid logic puzzles.

Puzzles describe their decision variables as a `PuzzleState`, supply an ordered list of
deduction rules, and are solved by a `Solver`:

    from gridlogic.towers import TowersGame

    solver = TowersGame().create_solver_from_game_id("3:2/2/1/1/2/3/2/2/1/1/2/3")
    solver.solve()  # SolverOutcome.SOLVED
"""

from gridlogic.config import SolverConfig, config
from gridlogic.game import GameDescriptor, GameIdError, Puzzle
from gridlogic.outcome import SolverOutcome, classify
from gridlogic.progress import ProgressReporter
from gridlogic.rules import (
    ContradictionError,
    DeductionRule,
    DomainUpdate,
    FixpointResult,
    apply_updates,
    run_to_fixpoint,
)
from gridlogic.solver import GuessRecord, ProgressEvent, ProgressHook, Solver, SolverStats
from gridlogic.state import PuzzleState

__all__ = [
    "ContradictionError",
    "DeductionRule",
    "DomainUpdate",
    "FixpointResult",
    "GameDescriptor",
    "GameIdError",
    "GuessRecord",
    "ProgressEvent",
    "ProgressHook",
    "ProgressReporter",
    "Puzzle",
    "PuzzleState",
    "Solver",
    "SolverConfig",
    "SolverOutcome",
    "SolverStats",
    "apply_updates",
    "classify",
    "config",
    "run_to_fixpoint",
]
