"""
Shared pytest fixtures for Spyfield tests.

Game fixtures are function-scoped factories so every test builds its own
state. ``game_factory`` places evil members at hand-picked coordinates,
which keeps geometric expectations readable; ``GameEngine.create_game``
is covered separately through the seeded generator.
"""

from pathlib import Path
import sys
from typing import Callable, Optional, Sequence, Tuple

import pytest

# Ensure the repository root is on sys.path so `import spyfield` works when
# running pytest without installing the package.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spyfield.heatmap import compute_heatmap  # noqa: E402
from spyfield.models import (  # noqa: E402
    Coordinate,
    EvilMember,
    Game,
    GameSettings,
    GoodPlacementPhase,
)


def coord(x: float, y: float) -> Coordinate:
    return Coordinate(x=x, y=y)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def settings_factory() -> Callable[..., GameSettings]:
    """Factory for creating GameSettings with customizable defaults."""

    def _create_settings(**overrides) -> GameSettings:
        values = dict(
            random_seed=42,
            num_evil_members=7,
            spy_radius=5.0,
            device_radius=10.0,
            num_spies=2,
            num_devices=2,
        )
        values.update(overrides)
        return GameSettings(**values)

    return _create_settings


@pytest.fixture
def member_factory() -> Callable[..., EvilMember]:
    """Factory for creating EvilMember instances at explicit positions."""

    def _create_member(
        member_id: int, x: float, y: float, value: int = 1
    ) -> EvilMember:
        return EvilMember(id=member_id, coord=coord(x, y), value=value)

    return _create_member


@pytest.fixture
def standard_members(member_factory) -> Tuple[EvilMember, ...]:
    """Three members far enough apart that radius-5 spies never overlap.

    - id 0 at (10.5, 10.5), value 9
    - id 1 at (80.5, 80.5), value 8
    - id 2 at (50.5, 10.5), value 1
    """
    return (
        member_factory(0, 10.5, 10.5, 9),
        member_factory(1, 80.5, 80.5, 8),
        member_factory(2, 50.5, 10.5, 1),
    )


@pytest.fixture
def game_factory(settings_factory, standard_members) -> Callable[..., Game]:
    """Factory for a GOOD-phase Game with explicit members.

    ``members`` defaults to ``standard_members``; keyword overrides go to
    ``settings_factory``.
    """

    def _create_game(
        members: Optional[Sequence[EvilMember]] = None, **overrides
    ) -> Game:
        chosen = tuple(standard_members if members is None else members)
        overrides.setdefault("num_evil_members", len(chosen))
        settings = settings_factory(**overrides)
        heatmap = compute_heatmap(
            settings.spy_radius,
            settings.heatmap_size,
            chosen,
            cell_size=settings.heatmap_cell_size,
        )
        return Game(
            settings=settings,
            evil_members=chosen,
            phase=GoodPlacementPhase(heatmap=heatmap),
        )

    return _create_game
