"""Distance and radius-membership primitives.

All radius tests in the engine go through :func:`within_radius` so that
scoring, heatmaps and cursor previews agree on boundary cases. The
distance formula is ``sqrt(dx*dx + dy*dy)`` everywhere, including the
vectorised heatmap path, so scalar and numpy results are bit-identical.

Usage:
    from spyfield.geometry import within_radius, points_within_radius

    covered = points_within_radius(spy.coord, settings.spy_radius, members)
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, TypeVar

from .models import Coordinate, ValuePoint

__all__ = [
    "distance",
    "points_within_radius",
    "total_value",
    "within_board",
    "within_radius",
]

P = TypeVar("P", bound=ValuePoint)


def distance(a: Coordinate, b: Coordinate) -> float:
    """Euclidean distance between two coordinates."""
    dx = a.x - b.x
    dy = a.y - b.y
    return math.sqrt(dx * dx + dy * dy)


def within_radius(center: Coordinate, radius: float, point: Coordinate) -> bool:
    """True iff ``point`` lies strictly inside the circle.

    A point at exactly ``radius`` is outside.
    """
    return distance(center, point) < radius


def within_board(board_size: float, coord: Coordinate) -> bool:
    """True iff ``coord`` lies in ``[0, board_size)`` on both axes.

    The origin edge is on the board (``x == 0`` is placeable); the far
    edge ``x == board_size`` is not.
    """
    return 0.0 <= coord.x < board_size and 0.0 <= coord.y < board_size


def points_within_radius(
    center: Coordinate, radius: float, points: Sequence[P]
) -> List[P]:
    """Return the points whose coordinate is within ``radius`` of ``center``.

    Input order is preserved.
    """
    return [p for p in points if within_radius(center, radius, p.coord)]


def total_value(points: Iterable[ValuePoint]) -> int:
    return sum(p.value for p in points)
