"""Rules engine for Spyfield.

Spyfield is a two-player placement game on a continuous square board.
GOOD places spies to cover hidden evil members; EVIL then places antispy
devices to detect the spies. GOOD scores the members still covered by an
undetected spy when the game ends.

    from spyfield import GameEngine, GameSettings, PlaceSpy, Coordinate

    game = GameEngine.create_game(GameSettings(
        random_seed=42, num_evil_members=20, spy_radius=10.0,
        device_radius=10.0, num_spies=5, num_devices=5,
    ))
    game = GameEngine.apply_move(PlaceSpy(coord=Coordinate(x=40, y=60)), game)

Modules:
- models.py: pydantic models for entities, phases, moves and the game
- geometry.py: distance and radius-membership primitives
- rng.py: seeded generation of evil members
- heatmap.py: value-density grids
- game_engine.py: the phase/move state machine
- interaction.py: pointer-to-board mapping, hover and click helpers
- config.py: SPYFIELD_* environment settings
"""

from spyfield.errors import (
    ConfigurationError,
    InvalidMoveError,
    InvalidStateError,
    SpyfieldError,
)
from spyfield.game_engine import GameEngine
from spyfield.models import (
    AntispyDevice,
    CompletePhase,
    Coordinate,
    CursorPreview,
    EvilMember,
    EvilPlacementPhase,
    FinalScore,
    Game,
    GamePhase,
    GameSettings,
    GoodPlacementPhase,
    Heatmap,
    Move,
    MoveType,
    PlaceDevice,
    PlaceSpy,
    Spy,
)

__all__ = [
    "AntispyDevice",
    "CompletePhase",
    "ConfigurationError",
    "Coordinate",
    "CursorPreview",
    "EvilMember",
    "EvilPlacementPhase",
    "FinalScore",
    "Game",
    "GameEngine",
    "GamePhase",
    "GameSettings",
    "GoodPlacementPhase",
    "Heatmap",
    "InvalidMoveError",
    "InvalidStateError",
    "Move",
    "MoveType",
    "PlaceDevice",
    "PlaceSpy",
    "Spy",
    "SpyfieldError",
]

__version__ = "0.1.0"
