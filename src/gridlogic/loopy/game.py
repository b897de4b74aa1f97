"""Loopy game identifiers and solver factory.

A game id has the form `WxHtT:field`:

- `W` and `H` are the number of face columns and rows.
- `T` is the grid type: 0 for square faces, 2 for a honeycomb.
- `field` lists face hints in face id order: a digit is a hint of 0-9, an uppercase letter
  a hint of 10 (`A`) to 35 (`Z`), and a lowercase letter skips 1 (`a`) to 26 (`z`) faces
  without hints.  The field must cover exactly `W * H` faces.

Example: `3x3t0:a3a3b2b` (square grid, hints on faces 1, 3 and 6).
"""

import re
from collections.abc import Callable, Mapping

from gridlogic.config import config as solver_config
from gridlogic.game import GameIdError
from gridlogic.graph.generators import honeycomb_grid, square_grid
from gridlogic.graph.planar import FaceId, PlanarGraph
from gridlogic.loopy.puzzle import LoopyPuzzle
from gridlogic.solver import ProgressHook, Solver

GAME_ID_PATTERN = re.compile(r"^(\d+)x(\d+)t(\d+):(.*)$")
"""Regex pattern splitting a game id into width, height, grid type and field."""

GRID_TYPES: dict[int, Callable[[int, int, Mapping[FaceId, int]], PlanarGraph]] = {
    0: square_grid,
    2: honeycomb_grid,
}
"""Graph generators by grid type number."""


def parse_hints(field: str, n_faces: int) -> dict[FaceId, int]:
    """Decode a hint field covering `n_faces` faces.

    Raises:
        GameIdError: On an unexpected character, or if the field does not cover exactly
            `n_faces` faces.
    """
    hints: dict[FaceId, int] = {}
    face = 0
    for char in field:
        if face >= n_faces:
            raise GameIdError(f"Hint field {field!r} is longer than {n_faces} faces.")
        if "0" <= char <= "9":
            hints[face] = ord(char) - ord("0")
            face += 1
        elif "A" <= char <= "Z":
            hints[face] = ord(char) - ord("A") + 10
            face += 1
        elif "a" <= char <= "z":
            face += ord(char) - ord("a") + 1
        else:
            raise GameIdError(f"Unexpected character {char!r} in hint field {field!r}.")

    if face != n_faces:
        raise GameIdError(f"Hint field {field!r} covers {face} faces, expected {n_faces}.")
    return hints


def parse_game_id(game_id: str) -> LoopyPuzzle:
    """Build the puzzle described by `game_id`.

    Raises:
        GameIdError: If the identifier is malformed or uses an unsupported grid type.
    """
    match = GAME_ID_PATTERN.match(game_id.strip())
    if match is None:
        raise GameIdError(f"Malformed Loopy game id: {game_id!r}.")
    width, height, grid_type = (int(match.group(i)) for i in range(1, 4))
    if width < 1 or height < 1:
        raise GameIdError(f"Grid dimensions must be positive in {game_id!r}.")

    generator = GRID_TYPES.get(grid_type)
    if generator is None:
        raise GameIdError(f"Unsupported grid type t{grid_type} in {game_id!r}.")

    hints = parse_hints(match.group(4), width * height)
    return LoopyPuzzle(generator(width, height, hints))


def encode_hints(puzzle: LoopyPuzzle) -> str:
    """Encode the face hints of `puzzle` as a hint field."""
    field = []
    run = 0
    for face in puzzle.graph.faces:
        if face.hint is None:
            run += 1
            if run == 26:
                field.append("z")
                run = 0
            continue
        if run:
            field.append(chr(ord("a") + run - 1))
            run = 0
        field.append(str(face.hint) if face.hint < 10 else chr(ord("A") + face.hint - 10))
    if run:
        field.append(chr(ord("a") + run - 1))
    return "".join(field)


class LoopyGame:
    """Creates solvers for Loopy puzzles."""

    name = "loopy"

    def __init__(self, *, max_guesses: int | None = None, progress: ProgressHook | None = None):
        self.max_guesses: int = (
            solver_config.max_guesses if max_guesses is None else max_guesses
        )
        self.progress = progress

    def create_solver_from_game_id(self, game_id: str) -> Solver:
        return self.create_solver(parse_game_id(game_id))

    def create_solver(self, puzzle: LoopyPuzzle) -> Solver:
        return Solver(puzzle, max_guesses=self.max_guesses, progress=self.progress)
