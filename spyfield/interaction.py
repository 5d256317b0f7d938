"""Query helpers for the interaction layer.

Pointer decoding and layout measurement live outside the engine. What
the engine owns is the mapping from an already-measured board rectangle
to board coordinates, and the hover/click operations that feed those
coordinates back into :class:`~spyfield.game_engine.GameEngine`.

A missing layout or an off-board pointer yields ``None``, which callers
treat as "clear the cursor preview". Nothing here raises.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel

from .game_engine import GameEngine
from .geometry import within_board
from .models import Coordinate, Game

__all__ = ["BoardLayout", "board_coordinate", "click", "hover"]


class BoardLayout(BaseModel):
    """On-screen rectangle of the board, in pixels."""
    left: float
    top: float
    width: float
    height: float

    class Config:
        frozen = True

    @property
    def is_measurable(self) -> bool:
        return (
            math.isfinite(self.width)
            and math.isfinite(self.height)
            and self.width > 0
            and self.height > 0
        )


def board_coordinate(
    layout: Optional[BoardLayout],
    pixel_x: float,
    pixel_y: float,
    board_size: float,
) -> Optional[Coordinate]:
    """Translate a pointer position into board units.

    Returns ``None`` if the layout is unavailable or degenerate, or if the
    translated point is off the board. Non-finite pixel or layout values
    also give ``None``.
    """
    if layout is None or not layout.is_measurable:
        return None
    x = (pixel_x - layout.left) / layout.width * board_size
    y = (pixel_y - layout.top) / layout.height * board_size
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    coord = Coordinate(x=x, y=y)
    if not within_board(board_size, coord):
        return None
    return coord


def hover(game: Game, coord: Optional[Coordinate]) -> Game:
    """Update the cursor preview for a pointer at ``coord`` (``None`` clears)."""
    return GameEngine.with_cursor(game, coord)


def click(game: Game, coord: Optional[Coordinate]) -> Game:
    """Place whatever the current phase places at ``coord``."""
    if coord is None:
        return game
    move = GameEngine.legal_move_for(game, coord)
    if move is None:
        return game
    return GameEngine.apply_move(move, game)
