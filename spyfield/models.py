"""
Pydantic Models for Spyfield Game State

Every model is frozen: transitions build new values instead of mutating
old ones, so a ``Game`` handed to a caller never changes underneath it.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, FrozenSet, Literal, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, model_validator

from .errors import InvalidStateError

# Value carried by a spy when it is treated as a value-emitting point
# (EVIL-phase heatmap and cursor preview).
SPY_VALUE = 1

DEFAULT_BOARD_SIZE = 100.0
DEFAULT_HEATMAP_SIZE = 100
DEFAULT_SPECIAL_VALUES: Tuple[int, ...] = (9, 8, 7, 6, 5)


class GamePhase(str, Enum):
    """Game phase enumeration"""
    GOOD_PLACEMENT = "good_placement"
    EVIL_PLACEMENT = "evil_placement"
    COMPLETE = "complete"


class MoveType(str, Enum):
    """Move type enumeration"""
    PLACE_SPY = "place_spy"
    PLACE_DEVICE = "place_device"


class Coordinate(BaseModel):
    """Point on the board, in board units."""
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)

    class Config:
        frozen = True


class EvilMember(BaseModel):
    """Hidden target. ``id`` is the generation index and its set identity."""
    id: int = Field(ge=0)
    coord: Coordinate
    value: int = Field(ge=1)

    class Config:
        frozen = True


class Spy(BaseModel):
    """Detection point placed by GOOD. ``id`` is its placement index."""
    id: int = Field(ge=0)
    coord: Coordinate

    class Config:
        frozen = True

    @property
    def value(self) -> int:
        return SPY_VALUE


class AntispyDevice(BaseModel):
    """Counter-detection point placed by EVIL."""
    id: int = Field(ge=0)
    coord: Coordinate

    class Config:
        frozen = True


# Anything the engine sums values over.
ValuePoint = Union[EvilMember, Spy]


class GameSettings(BaseModel):
    """Read-only game configuration."""
    random_seed: int = Field(alias="randomSeed")
    num_evil_members: int = Field(ge=0, alias="numEvilMembers")
    spy_radius: float = Field(gt=0, allow_inf_nan=False, alias="spyRadius")
    device_radius: float = Field(
        gt=0, allow_inf_nan=False, alias="deviceRadius"
    )
    num_spies: int = Field(ge=1, alias="numSpies")
    num_devices: int = Field(ge=1, alias="numDevices")
    board_size: float = Field(
        DEFAULT_BOARD_SIZE, gt=0, allow_inf_nan=False, alias="boardSize"
    )
    heatmap_size: int = Field(DEFAULT_HEATMAP_SIZE, ge=1, alias="heatmapSize")
    special_values: Tuple[Annotated[int, Field(ge=1)], ...] = Field(
        DEFAULT_SPECIAL_VALUES, alias="specialValues"
    )

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def heatmap_cell_size(self) -> float:
        return self.board_size / self.heatmap_size


class Heatmap(BaseModel):
    """Row-major ``size x size`` grid of summed values plus its bounds.

    Build instances with ``Heatmap.from_grid`` so that the bounds are
    always computed from the same grid they describe.
    """
    size: int = Field(ge=1)
    values: Tuple[int, ...]
    min_value: int = Field(alias="minValue")
    max_value: int = Field(alias="maxValue")

    class Config:
        populate_by_name = True
        frozen = True

    @model_validator(mode="after")
    def _check_consistency(self) -> "Heatmap":
        if len(self.values) != self.size * self.size:
            raise InvalidStateError(
                "Heatmap cell count does not match its size",
                context={"size": self.size, "cells": len(self.values)},
            )
        if (
            min(self.values) != self.min_value
            or max(self.values) != self.max_value
        ):
            raise InvalidStateError(
                "Heatmap bounds are stale",
                context={
                    "min_value": self.min_value,
                    "max_value": self.max_value,
                },
            )
        return self

    @classmethod
    def from_grid(cls, size: int, values) -> "Heatmap":
        """Build from a flat row-major sequence of ``size * size`` ints."""
        cells = tuple(int(v) for v in values)
        return cls(
            size=size,
            values=cells,
            min_value=min(cells),
            max_value=max(cells),
        )

    def cell(self, cx: int, cy: int) -> int:
        return self.values[cy * self.size + cx]

    def normalized(self, cx: int, cy: int) -> float:
        """Cell intensity in ``[0, 1]`` for renderers."""
        span = self.max_value - self.min_value
        if span == 0:
            return 0.0
        return (self.cell(cx, cy) - self.min_value) / span

    def to_array(self):
        """Return the grid as a ``size x size`` numpy array (rows = y)."""
        return np.asarray(self.values, dtype=np.int64).reshape(
            self.size, self.size
        )


class CursorPreview(BaseModel):
    """What a placement at ``coord`` would currently include."""
    coord: Coordinate
    included: Tuple[ValuePoint, ...] = ()
    total_value: int = Field(0, alias="totalValue")

    class Config:
        populate_by_name = True
        frozen = True


class GoodPlacementPhase(BaseModel):
    """GOOD is placing spies."""
    kind: Literal["good_placement"] = "good_placement"
    heatmap: Heatmap
    cursor: Optional[CursorPreview] = None
    spies: Tuple[Spy, ...] = ()
    included_members: FrozenSet[EvilMember] = Field(
        default_factory=frozenset, alias="includedMembers"
    )
    total_value: int = Field(0, alias="totalValue")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def phase(self) -> GamePhase:
        return GamePhase.GOOD_PLACEMENT


class EvilPlacementPhase(BaseModel):
    """EVIL is placing antispy devices against the spies GOOD placed."""
    kind: Literal["evil_placement"] = "evil_placement"
    heatmap: Heatmap
    cursor: Optional[CursorPreview] = None
    spies: Tuple[Spy, ...] = ()
    devices: Tuple[AntispyDevice, ...] = ()
    undetected_spies: FrozenSet[Spy] = Field(
        default_factory=frozenset, alias="undetectedSpies"
    )
    detected_spies: FrozenSet[Spy] = Field(
        default_factory=frozenset, alias="detectedSpies"
    )
    good_initial_score: int = Field(alias="goodInitialScore")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def phase(self) -> GamePhase:
        return GamePhase.EVIL_PLACEMENT


class FinalScore(BaseModel):
    """Score snapshot taken when the game completes."""
    good_initial_score: int = Field(alias="goodInitialScore")
    num_spies_found: int = Field(alias="numSpiesFound")
    included_evil_members: FrozenSet[EvilMember] = Field(
        alias="includedEvilMembers"
    )
    good_final_score: int = Field(alias="goodFinalScore")

    class Config:
        populate_by_name = True
        frozen = True


class CompletePhase(BaseModel):
    """Terminal phase: the last EVIL-phase data plus the final score."""
    kind: Literal["complete"] = "complete"
    final: EvilPlacementPhase
    score: FinalScore

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def phase(self) -> GamePhase:
        return GamePhase.COMPLETE

    @property
    def heatmap(self) -> Heatmap:
        return self.final.heatmap


Phase = Annotated[
    Union[GoodPlacementPhase, EvilPlacementPhase, CompletePhase],
    Field(discriminator="kind"),
]


class PlaceSpy(BaseModel):
    """GOOD places a spy at ``coord``."""
    type: Literal["place_spy"] = "place_spy"
    coord: Coordinate

    class Config:
        frozen = True

    @property
    def move_type(self) -> MoveType:
        return MoveType(self.type)


class PlaceDevice(BaseModel):
    """EVIL places an antispy device at ``coord``."""
    type: Literal["place_device"] = "place_device"
    coord: Coordinate

    class Config:
        frozen = True

    @property
    def move_type(self) -> MoveType:
        return MoveType(self.type)


Move = Annotated[Union[PlaceSpy, PlaceDevice], Field(discriminator="type")]


class Game(BaseModel):
    """Root aggregate for one play session."""
    settings: GameSettings
    evil_members: Tuple[EvilMember, ...] = Field(alias="evilMembers")
    show_heatmap: bool = Field(True, alias="showHeatmap")
    phase: Phase

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def current_phase(self) -> GamePhase:
        return self.phase.phase

    @property
    def heatmap(self) -> Heatmap:
        return self.phase.heatmap
