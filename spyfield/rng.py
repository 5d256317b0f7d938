"""Seeded generation of the hidden target set.

The PRNG sits behind :class:`CoordinateSource`, a one-method protocol,
so a different reproducible generator can be swapped in without touching
the engine. Two sources ship with the package:

- :class:`PythonCoordinateSource` (default) wraps ``random.Random``.
- :class:`NumpyCoordinateSource` wraps ``numpy.random.default_rng``.

The two produce different (but individually reproducible) sequences for
the same seed.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Protocol, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError
from .models import DEFAULT_SPECIAL_VALUES, Coordinate, EvilMember

logger = logging.getLogger(__name__)

__all__ = [
    "CoordinateSource",
    "NumpyCoordinateSource",
    "PythonCoordinateSource",
    "assign_values",
    "generate_evil_members",
]


class CoordinateSource(Protocol):
    """Seeded uniform sampler."""

    def uniform(self, low: float, high: float) -> float:
        """Draw one float from ``[low, high)``."""
        ...


class PythonCoordinateSource:
    """``random.Random`` backed source."""

    def __init__(self, seed: int):
        self.seed = seed
        self.rng: random.Random = random.Random(seed)

    def uniform(self, low: float, high: float) -> float:
        # random.uniform can round up to ``high``; random() never does.
        return low + (high - low) * self.rng.random()


class NumpyCoordinateSource:
    """``numpy.random.Generator`` backed source."""

    def __init__(self, seed: int):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * float(self.rng.random())


SourceFactory = Callable[[int], CoordinateSource]


def assign_values(count: int, special_values: Sequence[int]) -> Tuple[int, ...]:
    """Values for ``count`` members in generation order.

    The first members take the special values in order; the rest are 1.
    When ``count`` is smaller than the special list, the list is truncated.
    """
    specials = tuple(special_values[:count])
    return specials + (1,) * max(0, count - len(specials))


def generate_evil_members(
    board_size: float,
    count: int,
    seed: int,
    special_values: Sequence[int] = DEFAULT_SPECIAL_VALUES,
    source_factory: SourceFactory = PythonCoordinateSource,
) -> Tuple[EvilMember, ...]:
    """Generate ``count`` targets uniformly on ``[0, board_size)²``.

    Pure function of its arguments: the same inputs always yield the same
    members. Each member draws ``x`` then ``y``; member ``i`` gets ``id=i``.

    Args:
        board_size: Side of the square board.
        count: Number of members to generate.
        seed: Seed handed to ``source_factory``.
        special_values: Values for the first members, in order.
        source_factory: Builds the seeded :class:`CoordinateSource`.

    Raises:
        ConfigurationError: On a negative count, a non-positive board size
            or a special value below 1.
    """
    if count < 0:
        raise ConfigurationError(
            "Member count must be non-negative", context={"count": count}
        )
    if not board_size > 0:
        raise ConfigurationError(
            "Board size must be positive", context={"board_size": board_size}
        )
    if any(v < 1 for v in special_values):
        raise ConfigurationError(
            "Special values must be at least 1",
            context={"special_values": list(special_values)},
        )

    source = source_factory(seed)
    values = assign_values(count, special_values)
    members = []
    for i, value in enumerate(values):
        x = source.uniform(0.0, board_size)
        y = source.uniform(0.0, board_size)
        members.append(EvilMember(id=i, coord=Coordinate(x=x, y=y), value=value))

    logger.debug(
        "Generated %d evil members (seed=%d, total value=%d)",
        count,
        seed,
        sum(values),
    )
    return tuple(members)
