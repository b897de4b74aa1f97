"""Loopy (slitherlink) puzzles on planar graphs."""

from gridlogic.loopy.edges import EdgeState
from gridlogic.loopy.game import LoopyGame, encode_hints, parse_game_id, parse_hints
from gridlogic.loopy.puzzle import LoopyPuzzle
from gridlogic.loopy.rules import (
    DeadEndRule,
    ExactEdgeCountRule,
    FaceNetworkRule,
    PrematureLoopRule,
    TwoEdgesPerVertexRule,
    ZeroFaceRule,
    default_rules,
)

__all__ = [
    "DeadEndRule",
    "EdgeState",
    "ExactEdgeCountRule",
    "FaceNetworkRule",
    "LoopyGame",
    "LoopyPuzzle",
    "PrematureLoopRule",
    "TwoEdgesPerVertexRule",
    "ZeroFaceRule",
    "default_rules",
    "encode_hints",
    "parse_game_id",
    "parse_hints",
]
