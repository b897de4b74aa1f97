"""Planar graphs for rectangular and honeycomb tilings.

Face ids are row-major: the face at column `x`, row `y` has id `y * width + x`.
"""

from collections.abc import Mapping

from gridlogic.graph.planar import FaceId, PlanarGraph, PlanarGraphBuilder

# Honeycomb lattice constants; integer coordinates keep shared vertices exact.
HEX_A = 15
HEX_B = 26


def square_grid(
    width: int, height: int, hints: Mapping[FaceId, int] | None = None
) -> PlanarGraph:
    """Build a `width` x `height` grid of square faces.

    Args:
        width: Number of face columns.
        height: Number of face rows.
        hints: Optional mapping from face id to hint.

    Raises:
        ValueError: If either dimension is less than 1.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}.")

    builder = PlanarGraphBuilder()
    for y in range(height):
        for x in range(width):
            corners = [(x, y), (x + 1, y), (x + 1, y + 1), (x, y + 1)]
            builder.add_face([builder.add_or_get_vertex(cx, cy) for cx, cy in corners])

    for face, hint in (hints or {}).items():
        builder.set_hint(face, hint)
    return builder.build()


def honeycomb_grid(
    width: int, height: int, hints: Mapping[FaceId, int] | None = None
) -> PlanarGraph:
    """Build a `width` x `height` honeycomb of flat-topped hexagons.

    Odd columns are shifted down by half a hexagon.

    Raises:
        ValueError: If either dimension is less than 1.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}.")

    a, b = HEX_A, HEX_B
    builder = PlanarGraphBuilder()
    for y in range(height):
        for x in range(width):
            cx = 3 * a * x
            cy = 2 * b * y + (x % 2) * b
            corners = [
                (cx - a, cy - b),
                (cx + a, cy - b),
                (cx + 2 * a, cy),
                (cx + a, cy + b),
                (cx - a, cy + b),
                (cx - 2 * a, cy),
            ]
            builder.add_face([builder.add_or_get_vertex(px, py) for px, py in corners])

    for face, hint in (hints or {}).items():
        builder.set_hint(face, hint)
    return builder.build()
