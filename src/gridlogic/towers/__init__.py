"""Towers (skyscraper) puzzles."""

from gridlogic.towers.game import TowersGame, game_id_for, parse_game_id
from gridlogic.towers.puzzle import Side, TowersPuzzle, Visibilities
from gridlogic.towers.rules import (
    ClueLine,
    HiddenSingleRule,
    LatinEliminationRule,
    VisibilityRule,
    count_visible,
)

__all__ = [
    "ClueLine",
    "HiddenSingleRule",
    "LatinEliminationRule",
    "Side",
    "TowersGame",
    "TowersPuzzle",
    "Visibilities",
    "VisibilityRule",
    "count_visible",
    "game_id_for",
    "parse_game_id",
]
