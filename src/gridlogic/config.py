"""Solver configuration."""

from typing import Literal

from dotenv import find_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class SolverConfig(BaseSettings):
    """Configuration settings for the solving engine."""

    max_guesses: int = Field(default=10, ge=0)
    """Total number of guesses a solver may make across its whole search tree. Default: 10."""

    guess_policy: Literal["first", "fewest"] = "first"
    """How the variable to guess on is chosen when propagation stalls.

    `first` picks the first undetermined variable in the puzzle's fixed order (row-major for
    grids, edge-id order for graphs).  `fewest` picks the variable with the fewest remaining
    candidates, breaking ties by that same order.  Default: "first".
    """

    max_fixpoint_passes: int | None = Field(default=None, ge=1)
    """Maximum number of rule passes per fixpoint, at least 1. If None (default), run until
    no rule yields an update. A search whose propagation hits the cap stops with `UNSOLVED`
    instead of guessing."""

    report_interval: int = 100
    """Interval (in number of solver events) at which the printing reporter writes a
    progress line. Default: 100."""

    verbose: bool = False
    """Whether the printing reporter writes every event. Default: False."""

    model_config = SettingsConfigDict(
        env_prefix="GRIDLOGIC_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = SolverConfig()
