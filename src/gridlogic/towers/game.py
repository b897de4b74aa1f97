"""Towers game identifiers and solver factory.

A game id has the form `N:clues[,field]`:

- `N` is the grid size.
- `clues` holds `4N` slash-separated visibility clues: top (left to right), bottom (left
  to right), left (top to bottom), right (top to bottom).  An empty clue means none.
- `field` lists given heights in row-major order: a lowercase letter skips 1 (`a`) to 26
  (`z`) cells, a number is the height of the next cell, and `_` separates two adjacent
  numbers.  The field must cover exactly `N * N` cells.

Example: `3:2/2/1/1/2/3/2/2/1/1/2/3` (no givens) or `2://///////,b1a` (height 1 at cell 2).
"""

import re

from gridlogic.config import config as solver_config
from gridlogic.game import GameIdError
from gridlogic.solver import ProgressHook, Solver
from gridlogic.towers.puzzle import TowersPuzzle, Visibilities

GAME_ID_PATTERN = re.compile(r"^(\d+):([^,]*)(?:,(.*))?$")
"""Regex pattern splitting a game id into size, clues and optional field."""


def parse_game_id(game_id: str) -> TowersPuzzle:
    """Build the puzzle described by `game_id`.

    Raises:
        GameIdError: If the identifier is malformed.
    """
    match = GAME_ID_PATTERN.match(game_id.strip())
    if match is None:
        raise GameIdError(f"Malformed Towers game id: {game_id!r}.")
    size = int(match.group(1))
    if size < 1:
        raise GameIdError(f"Grid size must be positive in {game_id!r}.")

    raw_clues = match.group(2).split("/")
    if len(raw_clues) != 4 * size:
        raise GameIdError(f"Expected {4 * size} clues, got {len(raw_clues)} in {game_id!r}.")
    clues = []
    for raw in raw_clues:
        if raw == "":
            clues.append(0)
        elif raw.isdigit() and int(raw) <= size:
            clues.append(int(raw))
        else:
            raise GameIdError(f"Invalid clue {raw!r} in {game_id!r}.")

    visibilities = Visibilities(
        tuple(clues[0:size]),
        tuple(clues[size : 2 * size]),
        tuple(clues[2 * size : 3 * size]),
        tuple(clues[3 * size :]),
    )
    puzzle = TowersPuzzle(size, visibilities)

    field = match.group(3)
    if field is not None:
        _load_field(puzzle, field, game_id)
    return puzzle


def _load_field(puzzle: TowersPuzzle, field: str, game_id: str) -> None:
    size = puzzle.size
    n_cells = size * size
    pos = 0
    for token in re.findall(r"[a-z]|_|\d+|.", field):
        if "a" <= token <= "z":
            pos += ord(token) - ord("a") + 1
        elif token == "_":
            continue
        elif token.isdigit():
            height = int(token)
            if height > size or pos >= n_cells:
                raise GameIdError(f"Invalid given {token!r} at cell {pos} in {game_id!r}.")
            if height > 0:
                puzzle.set_given(pos % size, pos // size, height)
            pos += 1
        else:
            raise GameIdError(f"Unexpected character {token!r} in {game_id!r}.")

    if pos != n_cells:
        raise GameIdError(f"Field covers {pos} cells, expected {n_cells} in {game_id!r}.")


def game_id_for(puzzle: TowersPuzzle) -> str:
    """Encode the clues and determined cells of `puzzle` as a game id."""
    clues = "/".join(str(c) if c else "" for side in puzzle.visibilities for c in side)

    heights = puzzle.heights().flatten().tolist()
    if not any(heights):
        return f"{puzzle.size}:{clues}"

    field = []
    run = 0
    previous_was_number = False
    for h in heights:
        if h == 0:
            run += 1
            continue
        while run > 0:
            step = min(run, 26)
            field.append(chr(ord("a") + step - 1))
            run -= step
            previous_was_number = False
        if previous_was_number:
            field.append("_")
        field.append(str(h))
        previous_was_number = True
    while run > 0:
        step = min(run, 26)
        field.append(chr(ord("a") + step - 1))
        run -= step

    return f"{puzzle.size}:{clues},{''.join(field)}"


class TowersGame:
    """Creates solvers for Towers puzzles."""

    name = "towers"

    def __init__(self, *, max_guesses: int | None = None, progress: ProgressHook | None = None):
        self.max_guesses: int = (
            solver_config.max_guesses if max_guesses is None else max_guesses
        )
        self.progress = progress

    def create_solver_from_game_id(self, game_id: str) -> Solver:
        return self.create_solver(parse_game_id(game_id))

    def create_solver(self, puzzle: TowersPuzzle) -> Solver:
        return Solver(puzzle, max_guesses=self.max_guesses, progress=self.progress)
