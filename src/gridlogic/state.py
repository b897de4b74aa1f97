"""Puzzle state: per-variable candidate domains with an undo trail."""

from collections.abc import Hashable, Iterable
from typing import NamedTuple

from bitarray import bitarray
from bitarray.util import ones, zeros


class ContradictionError(Exception):
    """Raised when a deduction leaves the puzzle state without a consistent completion."""

    pass


class _UndoInfo(NamedTuple):
    """Marker into the undo trail.

    Undo will reverse changes until the remaining length of the trail matches this mark.
    """

    domain_mark: int


class PuzzleState:
    """Decision variables of a puzzle, each with a domain of admissible values.

    Values are small non-negative integers `0 .. domain_size - 1`; the puzzle decides what
    they mean (a height, an edge state, ...).  Domains only ever shrink while solving; every
    change is recorded on an undo trail so that `undo(mark)` restores the state exactly.
    """

    def __init__(self, n_variables: int, domain_size: int):
        if n_variables < 0:
            raise ValueError("Number of variables must be non-negative.")
        if domain_size <= 0:
            raise ValueError("Domain size must be positive.")

        self.n_variables: int = n_variables
        """Number of decision variables."""

        self.domain_size: int = domain_size
        """Number of distinct values a variable can take."""

        self._domains: list[bitarray] = [ones(domain_size) for _ in range(n_variables)]

        self._locked: bitarray = zeros(n_variables)

        # (variable, old_domain) pairs, popped by `undo`
        self._domain_changes: list[tuple[int, bitarray]] = []

        self._constraints: dict[Hashable, tuple[int, ...]] = {}
        self._var_constraints: list[list[Hashable]] = [[] for _ in range(n_variables)]

    def __repr__(self) -> str:
        return (
            f"PuzzleState(n_variables={self.n_variables}, domain_size={self.domain_size}, "
            f"determined={self.determined_count()})"
        )

    def _check_var(self, var: int) -> None:
        if not 0 <= var < self.n_variables:
            raise IndexError(f"Variable {var} out of range (0..{self.n_variables - 1}).")

    def _check_value(self, value: int) -> None:
        if not 0 <= value < self.domain_size:
            raise ValueError(f"Value {value} out of range (0..{self.domain_size - 1}).")

    def _to_bits(self, values: Iterable[int]) -> bitarray:
        bits = zeros(self.domain_size)
        for value in values:
            self._check_value(value)
            bits[value] = 1
        return bits

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------
    def domain(self, var: int) -> bitarray:
        """Returns a copy of the domain of `var` as a bit set."""
        self._check_var(var)
        return self._domains[var].copy()

    def candidates(self, var: int) -> list[int]:
        """Returns the remaining values of `var` in ascending order."""
        self._check_var(var)
        return list(self._domains[var].search(1))

    def candidate_count(self, var: int) -> int:
        self._check_var(var)
        return self._domains[var].count()

    def has_candidate(self, var: int, value: int) -> bool:
        self._check_var(var)
        self._check_value(value)
        return bool(self._domains[var][value])

    def is_determined(self, var: int) -> bool:
        """Returns whether exactly one value remains for `var`."""
        return self.candidate_count(var) == 1

    def value(self, var: int) -> int | None:
        """Returns the value of `var` if determined, else None."""
        if not self.is_determined(var):
            return None
        return self._domains[var].find(1)

    def is_locked(self, var: int) -> bool:
        self._check_var(var)
        return bool(self._locked[var])

    def has_empty_domain(self) -> bool:
        return any(not d.any() for d in self._domains)

    def all_determined(self) -> bool:
        return all(d.count() == 1 for d in self._domains)

    def undetermined(self) -> list[int]:
        """Returns the variables with more than one remaining value, in index order."""
        return [var for var, d in enumerate(self._domains) if d.count() > 1]

    def determined_count(self) -> int:
        return sum(1 for d in self._domains if d.count() == 1)

    # ---------------------------------------------------------------------
    # Constraint membership
    # ---------------------------------------------------------------------
    def add_constraint(self, key: Hashable, variables: Iterable[int]) -> None:
        """Register a constraint (row, column, face, ...) and the variables it links.

        Raises:
            ValueError: If `key` is already registered.
        """
        if key in self._constraints:
            raise ValueError(f"Constraint {key!r} already registered.")
        variables = tuple(variables)
        for var in variables:
            self._check_var(var)
        self._constraints[key] = variables
        for var in variables:
            self._var_constraints[var].append(key)

    def constraints_of(self, var: int) -> list[Hashable]:
        """Returns the keys of the constraints `var` participates in, in registration order."""
        self._check_var(var)
        return list(self._var_constraints[var])

    def variables_of(self, key: Hashable) -> tuple[int, ...]:
        return self._constraints[key]

    @property
    def constraint_keys(self) -> list[Hashable]:
        return list(self._constraints)

    # ---------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------
    def _check_not_started(self) -> None:
        if self._domain_changes:
            raise ValueError("Initial state can only be changed before solving starts.")

    def lock(self, var: int, value: int) -> None:
        """Set a given: `var` becomes fixed to `value` for the lifetime of the state."""
        self._check_var(var)
        self._check_value(value)
        self._check_not_started()
        self._domains[var] = self._to_bits([value])
        self._locked[var] = 1

    def set_domain(self, var: int, values: Iterable[int]) -> None:
        """Overwrite the initial domain of `var`.  May leave the domain empty."""
        self._check_var(var)
        self._check_not_started()
        if self._locked[var]:
            raise ValueError(f"Variable {var} is locked.")
        self._domains[var] = self._to_bits(values)

    # ---------------------------------------------------------------------
    # Mutation (recorded on the undo trail)
    # ---------------------------------------------------------------------
    def remove(self, var: int, values: Iterable[int]) -> bool:
        """Remove `values` from the domain of `var`.

        The domain may become empty; callers check for that.

        Returns:
            True if the domain shrank.

        Raises:
            ContradictionError: If the change would eliminate the value of a locked variable.
        """
        self._check_var(var)
        old_domain = self._domains[var]
        new_domain = old_domain & ~self._to_bits(values)
        if new_domain == old_domain:
            return False
        if self._locked[var]:
            raise ContradictionError(f"Update eliminates the given value of variable {var}.")

        self._domain_changes.append((var, old_domain))
        self._domains[var] = new_domain
        return True

    def restrict(self, var: int, values: Iterable[int]) -> bool:
        """Keep only `values` in the domain of `var`.  Returns True if the domain shrank."""
        keep = self._to_bits(values)
        return self.remove(var, (~keep).search(1))

    def assign(self, var: int, value: int) -> bool:
        """Reduce the domain of `var` to the single `value`.

        Raises:
            ValueError: If `value` is not a remaining candidate.
        """
        if not self.has_candidate(var, value):
            raise ValueError(f"Value {value} is not a candidate of variable {var}.")
        return self.restrict(var, [value])

    # ---------------------------------------------------------------------
    # Undo
    # ---------------------------------------------------------------------
    def mark(self) -> _UndoInfo:
        """Returns a marker that `undo` can restore to."""
        return _UndoInfo(domain_mark=len(self._domain_changes))

    def undo(self, undo_info: _UndoInfo) -> None:
        """Reverse every change made after `undo_info` was taken."""
        while len(self._domain_changes) > undo_info.domain_mark:
            var, old_domain = self._domain_changes.pop()
            self._domains[var] = old_domain

    def snapshot(self) -> bytes:
        """Returns a bit-for-bit serialization of all domains and locks."""
        bits = bitarray()
        for d in self._domains:
            bits.extend(d)
        bits.extend(self._locked)
        return bits.tobytes()
