import pytest

from gridlogic.outcome import SolverOutcome, classify
from gridlogic.rules import ContradictionError, DomainUpdate
from gridlogic.solver import Solver
from gridlogic.state import PuzzleState
from gridlogic.towers.rules import LatinEliminationRule


class TargetPuzzle:
    """All-different variables that count as solved only when equal to `target`."""

    def __init__(self, target, rules=None, consistent=True):
        self.target = list(target)
        n = len(self.target)
        self.state = PuzzleState(n, n)
        self.state.add_constraint("all", range(n))
        self.rules = [LatinEliminationRule()] if rules is None else rules
        self.consistent = consistent

    def is_consistent(self, state):
        return self.consistent

    def is_solved(self, state):
        return [state.value(v) for v in range(state.n_variables)] == self.target


class SpyRule:
    name = "spy"

    def __init__(self):
        self.calls = 0

    def apply(self, state):
        self.calls += 1
        return []


class EventLog:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(
            (event.kind, event.depth, event.total_guesses, event.variable, event.value,
             event.state.snapshot())
        )

    def kinds(self):
        return [e[0] for e in self.events]


def test_guesses_until_solved():
    puzzle = TargetPuzzle([2, 1, 0])
    solver = Solver(puzzle, max_guesses=10)
    assert solver.state is SolverOutcome.UNSOLVED

    assert solver.solve() is SolverOutcome.SOLVED
    assert solver.state is SolverOutcome.SOLVED
    # (0, *) and (1, *) fail after two guesses on variable 1 each.
    assert solver.total_guesses == 9
    assert [puzzle.state.value(v) for v in range(3)] == [2, 1, 0]


def test_zero_budget_gives_up_without_guessing():
    puzzle = TargetPuzzle([2, 1, 0])
    before = puzzle.state.snapshot()
    solver = Solver(puzzle, max_guesses=0)

    assert solver.solve() is SolverOutcome.UNSOLVED
    assert solver.total_guesses == 0
    assert puzzle.state.snapshot() == before


@pytest.mark.parametrize("max_guesses", [1, 2, 3, 4, 5, 8])
def test_budget_is_never_exceeded(max_guesses):
    solver = Solver(TargetPuzzle([2, 1, 0]), max_guesses=max_guesses)
    assert solver.solve() is SolverOutcome.UNSOLVED
    assert solver.total_guesses == max_guesses


def test_exhausted_candidates_prove_unsolvable():
    puzzle = TargetPuzzle([0, 0])
    solver = Solver(puzzle, max_guesses=10)

    assert solver.solve() is SolverOutcome.UNSOLVABLE
    assert solver.total_guesses == 2


def test_giving_up_is_not_a_proof():
    # Three guesses explore (0, *) completely; the fourth would be needed for (1, *).
    solver = Solver(TargetPuzzle([2, 1, 0]), max_guesses=3)
    assert solver.solve() is SolverOutcome.UNSOLVED


def test_empty_domain_is_invalid_before_any_rule_runs():
    spy = SpyRule()
    puzzle = TargetPuzzle([0, 1], rules=[spy])
    puzzle.state.set_domain(1, [])
    log = EventLog()
    solver = Solver(puzzle, progress=log)

    assert solver.solve() is SolverOutcome.INVALID
    assert spy.calls == 0
    assert log.events == []
    assert solver.total_guesses == 0


def test_inconsistent_initial_state_is_invalid():
    spy = SpyRule()
    solver = Solver(TargetPuzzle([0, 1], rules=[spy], consistent=False))
    assert solver.solve() is SolverOutcome.INVALID
    assert spy.calls == 0


def test_contradiction_at_root_is_unsolvable():
    class Failing:
        name = "failing"

        def apply(self, state):
            raise ContradictionError("no way")

    puzzle = TargetPuzzle([0, 1], rules=[Failing()])
    before = puzzle.state.snapshot()
    solver = Solver(puzzle)

    assert solver.solve() is SolverOutcome.UNSOLVABLE
    assert puzzle.state.snapshot() == before


def test_classification_is_idempotent():
    puzzle = TargetPuzzle([2, 1, 0])
    solver = Solver(puzzle, max_guesses=10)
    assert solver.solve() is SolverOutcome.SOLVED
    snapshot = puzzle.state.snapshot()
    guesses = solver.total_guesses

    assert solver.solve() is SolverOutcome.SOLVED
    assert solver.total_guesses == guesses
    assert puzzle.state.snapshot() == snapshot

    invalid = TargetPuzzle([0, 1])
    invalid.state.set_domain(0, [])
    solver = Solver(invalid)
    assert solver.solve() is SolverOutcome.INVALID
    assert solver.solve() is SolverOutcome.INVALID


def test_classify_distinguishes_initial_evaluation():
    puzzle = TargetPuzzle([0, 1])
    puzzle.state.set_domain(0, [])
    assert classify(puzzle.state, puzzle, initial=True) is SolverOutcome.INVALID
    assert classify(puzzle.state, puzzle) is SolverOutcome.UNSOLVABLE

    puzzle = TargetPuzzle([0, 1])
    assert classify(puzzle.state, puzzle) is SolverOutcome.UNSOLVED


def test_backtrack_restores_state_before_guess():
    last_fixpoint = {}
    checked = []

    def hook(event):
        if event.kind == "fixpoint":
            last_fixpoint[event.depth] = event.state.snapshot()
        elif event.kind == "backtrack":
            checked.append(event.state.snapshot() == last_fixpoint[event.depth])

    solver = Solver(TargetPuzzle([2, 1, 0]), max_guesses=10, progress=hook)
    assert solver.solve() is SolverOutcome.SOLVED
    assert solver.stats.backtracks == 7
    assert len(checked) == 7
    assert all(checked)


def test_unsolved_result_restores_root_fixpoint():
    puzzle = TargetPuzzle([2, 1, 0])
    puzzle.state.remove(0, [0])
    root = []

    def hook(event):
        if event.kind == "fixpoint" and event.depth == 0:
            root.append(event.state.snapshot())

    solver = Solver(puzzle, max_guesses=2, progress=hook)
    assert solver.solve() is SolverOutcome.UNSOLVED
    assert puzzle.state.snapshot() == root[0]


def test_hooks_do_not_change_the_search():
    log_a, log_b = EventLog(), EventLog()
    a = Solver(TargetPuzzle([2, 1, 0]), max_guesses=10, progress=log_a)
    b = Solver(TargetPuzzle([2, 1, 0]), max_guesses=10, progress=log_b)
    silent = Solver(TargetPuzzle([2, 1, 0]), max_guesses=10)

    assert a.solve() is b.solve() is silent.solve() is SolverOutcome.SOLVED
    assert log_a.events == log_b.events
    assert a.total_guesses == silent.total_guesses
    assert log_a.kinds()[0] == "fixpoint"
    assert log_a.kinds().count("guess") == a.total_guesses


def test_guess_events_carry_variable_and_value():
    log = EventLog()
    Solver(TargetPuzzle([0, 1, 2]), max_guesses=10, progress=log).solve()
    guesses = [(e[3], e[4]) for e in log.events if e[0] == "guess"]
    assert guesses == [(0, 0), (1, 1)]


def test_fewest_policy_picks_smallest_domain():
    log = EventLog()
    puzzle = TargetPuzzle([0, 1, 2], rules=[])
    puzzle.state.set_domain(2, [1, 2])
    Solver(puzzle, max_guesses=1, guess_policy="fewest", progress=log).solve()
    first_guess = next(e for e in log.events if e[0] == "guess")
    assert first_guess[3] == 2


def test_puzzle_guess_order_is_used():
    class Reversed(TargetPuzzle):
        def guess_order(self, state):
            return reversed(range(state.n_variables))

    log = EventLog()
    Solver(Reversed([0, 1, 2]), max_guesses=1, progress=log).solve()
    first_guess = next(e for e in log.events if e[0] == "guess")
    assert first_guess[3] == 2


def test_cancel_from_hook_stops_search():
    puzzle = TargetPuzzle([2, 1, 0])
    solver = None

    def hook(event):
        if event.kind == "guess":
            solver.cancel()

    solver = Solver(puzzle, max_guesses=10, progress=hook)
    assert solver.solve() is SolverOutcome.UNSOLVED
    assert solver.total_guesses == 1


def test_guess_counter_is_cumulative():
    solver = Solver(TargetPuzzle([2, 1, 0]), max_guesses=4)
    assert solver.solve() is SolverOutcome.UNSOLVED
    assert solver.total_guesses == 4

    solver.max_guesses = 20
    assert solver.solve() is SolverOutcome.SOLVED
    # The counter carries over: 4 earlier guesses plus 9 for the full search.
    assert solver.total_guesses == 13


def test_invalid_arguments():
    with pytest.raises(ValueError):
        Solver(TargetPuzzle([0]), max_guesses=-1)
    with pytest.raises(ValueError):
        Solver(TargetPuzzle([0]), guess_policy="random")
    solver = Solver(TargetPuzzle([0]))
    with pytest.raises(ValueError):
        solver.max_guesses = -5


def test_default_budget_comes_from_config(monkeypatch):
    from gridlogic import solver as solver_module

    monkeypatch.setattr(solver_module.solver_config, "max_guesses", 7)
    assert Solver(TargetPuzzle([0])).max_guesses == 7


def test_budget_cannot_drop_below_guesses_made():
    solver = Solver(TargetPuzzle([2, 1, 0]), max_guesses=4)
    assert solver.solve() is SolverOutcome.UNSOLVED
    assert solver.total_guesses == 4

    with pytest.raises(ValueError):
        solver.max_guesses = 3
    assert solver.max_guesses == 4

    solver.max_guesses = 4
    assert solver.solve() is SolverOutcome.UNSOLVED
    assert solver.total_guesses == 4


class PeelRule:
    """Removes the largest candidate of variable 0, one value per call."""

    name = "peel"

    def apply(self, state):
        if state.candidate_count(0) > 1:
            return [DomainUpdate(0, frozenset({state.candidates(0)[-1]}))]
        return []


def test_pass_cap_stops_before_guessing():
    log = EventLog()
    puzzle = TargetPuzzle([0, 1, 2], rules=[PeelRule()])
    solver = Solver(puzzle, max_guesses=10, max_fixpoint_passes=1, progress=log)

    assert solver.solve() is SolverOutcome.UNSOLVED
    assert solver.total_guesses == 0
    assert log.kinds() == ["fixpoint"]
    assert puzzle.state.candidates(0) == [0, 1]


def test_pass_cap_must_be_positive():
    with pytest.raises(ValueError):
        Solver(TargetPuzzle([0]), max_fixpoint_passes=0)


def test_failing_hook_restores_root_fixpoint():
    puzzle = TargetPuzzle([2, 1, 0])
    before = puzzle.state.snapshot()

    def hook(event):
        if event.kind == "guess" and event.depth == 2:
            raise RuntimeError("hook failed")

    solver = Solver(puzzle, max_guesses=10, progress=hook)
    with pytest.raises(RuntimeError):
        solver.solve()

    assert puzzle.state.snapshot() == before
    assert solver.state is SolverOutcome.UNSOLVED
    assert solver.puzzle_state is puzzle.state
