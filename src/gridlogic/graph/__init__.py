"""Planar graph model used by loop-drawing puzzles."""

from gridlogic.graph.generators import honeycomb_grid, square_grid
from gridlogic.graph.planar import (
    Edge,
    EdgeId,
    Face,
    FaceId,
    PlanarGraph,
    PlanarGraphBuilder,
    StructuralError,
    Vertex,
)
from gridlogic.graph.subset import GraphSubset

__all__ = [
    "Edge",
    "EdgeId",
    "Face",
    "FaceId",
    "GraphSubset",
    "PlanarGraph",
    "PlanarGraphBuilder",
    "StructuralError",
    "Vertex",
    "honeycomb_grid",
    "square_grid",
]
