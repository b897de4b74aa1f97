import io

from gridlogic.outcome import SolverOutcome
from gridlogic.progress import ProgressReporter, int_comma, time_str
from gridlogic.solver import ProgressEvent
from gridlogic.state import PuzzleState
from gridlogic.towers import TowersGame


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_time_str():
    assert time_str(0) == "00:00:00.00"
    assert time_str(3723.5) == "01:02:03.50"


def test_int_comma():
    assert int_comma(1234567) == "1,234,567"


def test_verbose_reporter_prints_every_event():
    state = PuzzleState(2, 2)
    state.lock(0, 1)
    clock = FakeClock()
    out = io.StringIO()
    reporter = ProgressReporter(out, verbose=True, clock=clock)

    clock.now += 1.5
    reporter(ProgressEvent("fixpoint", state, 0, 0))
    reporter(ProgressEvent("guess", state, 1, 1, variable=1, value=0))

    assert out.getvalue().splitlines() == [
        "[fixpoint] E:1 D:0 G:0 Det:1/2 T:00:00:01.50",
        "[guess] E:2 D:1 G:1 Det:1/2 T:00:00:01.50 V:1=0",
    ]


def test_report_interval():
    out = io.StringIO()
    reporter = ProgressReporter(out, report_interval=3, verbose=False)
    state = PuzzleState(1, 1)
    for _ in range(7):
        reporter(ProgressEvent("fixpoint", state, 0, 0))

    lines = out.getvalue().splitlines()
    assert reporter.n_events == 7
    assert [line.split()[1] for line in lines] == ["E:3", "E:6"]


def test_render_and_silent_stream():
    out = io.StringIO()
    reporter = ProgressReporter(out, render=lambda s: "board", verbose=True)
    reporter(ProgressEvent("fixpoint", PuzzleState(1, 1), 0, 0))
    assert out.getvalue().splitlines()[1] == "board"

    silent = ProgressReporter(None, verbose=True)
    silent(ProgressEvent("fixpoint", PuzzleState(1, 1), 0, 0))
    assert silent.n_events == 1


def test_reporter_as_solver_hook():
    out = io.StringIO()
    reporter = ProgressReporter(out, verbose=True)
    solver = TowersGame(progress=reporter).create_solver_from_game_id(
        "3:2/2/1/1/2/3/2/2/1/1/2/3"
    )
    assert solver.solve() is SolverOutcome.SOLVED
    lines = out.getvalue().splitlines()
    assert lines
    assert lines[0].startswith("[fixpoint] E:1 D:0 G:0")
    assert len(lines) == reporter.n_events
