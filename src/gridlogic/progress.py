"""Printing progress hook."""

from collections.abc import Callable
from time import time
from typing import TextIO

from gridlogic.config import config as solver_config
from gridlogic.solver import ProgressEvent
from gridlogic.state import PuzzleState


def time_str(seconds: float) -> str:
    """Format a duration in seconds as `HH:MM:SS.ss`."""
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours:02}:{minutes:02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    return f"{n:,}"


class ProgressReporter:
    """Progress hook that prints a concise line every `report_interval` events.

    Pass an instance as the `progress` argument of `Solver`.  The reporter only reads the
    events it receives.

    Example output::

        [fixpoint] E:1 D:0 G:0 Det:17/25 T:00:00:00.01
    """

    def __init__(
        self,
        logf: TextIO | None,
        render: Callable[[PuzzleState], str] | None = None,
        *,
        report_interval: int | None = None,
        verbose: bool | None = None,
        clock: Callable[[], float] = time,
    ):
        """Create a reporter.

        Args:
            logf: Stream to print to.  If None, nothing is printed.
            render: Optional callable returning a textual rendering of the puzzle state,
                printed below each reported line.
            report_interval: Print every n-th event.  Defaults to
                `SolverConfig.report_interval`.
            verbose: Print every event.  Defaults to `SolverConfig.verbose`.
            clock: Returns the current time in seconds; used for the elapsed time column.
        """
        self.logf = logf
        self.render = render
        self.report_interval: int = (
            solver_config.report_interval if report_interval is None else report_interval
        )
        self.verbose: bool = solver_config.verbose if verbose is None else verbose
        self.clock = clock
        self.start_time: float = clock()
        """Time the reporter was created, as returned by `clock`."""

        self.n_events: int = 0
        """Number of events received."""

    def __call__(self, event: ProgressEvent) -> None:
        self.n_events += 1
        if self.logf is None:
            return
        if not self.verbose and self.n_events % max(self.report_interval, 1) != 0:
            return

        state = event.state
        line = (
            f"[{event.kind}] "
            f"E:{int_comma(self.n_events)} "
            f"D:{event.depth} "
            f"G:{int_comma(event.total_guesses)} "
            f"Det:{state.determined_count()}/{state.n_variables} "
            f"T:{time_str(self.clock() - self.start_time)}"
        )
        if event.variable is not None:
            line += f" V:{event.variable}={event.value}"
        print(line, file=self.logf, flush=True)

        if self.render is not None:
            print(self.render(state), file=self.logf, flush=True)
