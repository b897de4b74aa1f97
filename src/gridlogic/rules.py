"""Contract for deduction rules, and the fixpoint driver that runs them."""

from collections.abc import Iterable, Sequence
from typing import NamedTuple, Protocol

from gridlogic.state import ContradictionError, PuzzleState

__all__ = [
    "ContradictionError",
    "DeductionRule",
    "DomainUpdate",
    "FixpointResult",
    "apply_updates",
    "run_to_fixpoint",
]


class DomainUpdate(NamedTuple):
    """Removal of some values from the domain of one variable."""

    variable: int
    remove: frozenset[int]


class DeductionRule(Protocol):
    """A propagation rule.

    `apply` inspects the state and returns domain reductions; it must not mutate the state
    itself.  Rules must never grow a domain, must terminate, and must be safe to call again
    on the state their own updates produced.  A rule signals a dead end by raising
    `ContradictionError`.
    """

    name: str

    def apply(self, state: PuzzleState) -> list[DomainUpdate]: ...


class FixpointResult(NamedTuple):
    """Summary of a fixpoint run."""

    passes: int
    """Number of full passes over the rule list, including the final quiet pass."""

    updates: int
    """Number of updates that actually shrank a domain."""

    converged: bool
    """False if the pass cap was reached before a quiet pass."""


def apply_updates(state: PuzzleState, updates: Iterable[DomainUpdate]) -> int:
    """Apply updates in order.

    Returns:
        The number of updates that shrank a domain.

    Raises:
        ContradictionError: If a domain becomes empty, or a given would be eliminated.
    """
    changed = 0
    for update in updates:
        if state.remove(update.variable, update.remove):
            changed += 1
            if state.candidate_count(update.variable) == 0:
                raise ContradictionError(f"Domain of variable {update.variable} is empty.")
    return changed


def run_to_fixpoint(
    state: PuzzleState, rules: Sequence[DeductionRule], *, max_passes: int | None = None
) -> FixpointResult:
    """Run `rules` in order until a full pass yields no effective update.

    Each rule's updates are applied before the next rule runs, so later rules in a pass see
    the reductions made by earlier ones.

    Args:
        state: The puzzle state to reduce in place.
        rules: Rules, in the order they are applied within a pass.
        max_passes: Optional cap on the number of passes.  A run stopped by the cap is
            reported with `converged=False`.

    Raises:
        ContradictionError: Propagated from a rule or from `apply_updates`.
        ValueError: If `max_passes` is less than 1.
    """
    if max_passes is not None and max_passes < 1:
        raise ValueError(f"max_passes must be at least 1, got {max_passes}.")

    passes = 0
    total = 0
    while max_passes is None or passes < max_passes:
        passes += 1
        changed = 0
        for rule in rules:
            changed += apply_updates(state, rule.apply(state))
        total += changed
        if changed == 0:
            return FixpointResult(passes, total, True)
    return FixpointResult(passes, total, False)
