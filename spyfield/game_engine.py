"""Core game engine for Spyfield.

The engine is a two-phase placement state machine:

1. ``good_placement``: GOOD places ``num_spies`` spies. Every spy covers
   the evil members strictly within ``spy_radius``. Placing the last spy
   snapshots GOOD's total as ``good_initial_score`` and moves to
2. ``evil_placement``: EVIL places up to ``num_devices`` antispy devices.
   Each device detects the still-undetected spies strictly within
   ``device_radius``. The phase ends when the device budget is spent or
   no undetected spy remains, moving to
3. ``complete``: terminal. The final score counts the members still
   covered by an undetected spy.

Every public operation is a total function from ``(state, input)`` to a
new state. Illegal or mistimed moves return the input ``Game`` object
unchanged; phases are never mutated in place, a transition builds a new
phase value.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, List, Optional, Sequence, Union

from .config import env_flag
from .errors import InvalidMoveError
from .geometry import points_within_radius, total_value, within_board, within_radius
from .heatmap import compute_heatmap
from .metrics import (
    FINAL_SCORE,
    GAMES_COMPLETED,
    GAMES_CREATED,
    MOVES_TOTAL,
    PHASE_TRANSITIONS,
)
from .models import (
    AntispyDevice,
    CompletePhase,
    Coordinate,
    CursorPreview,
    EvilMember,
    EvilPlacementPhase,
    FinalScore,
    Game,
    GameSettings,
    GoodPlacementPhase,
    PlaceDevice,
    PlaceSpy,
    Spy,
    ValuePoint,
)
from .rng import PythonCoordinateSource, SourceFactory, generate_evil_members

logger = logging.getLogger(__name__)

DEBUG_ENGINE = env_flag("SPYFIELD_DEBUG_ENGINE")

AnyPhase = Union[GoodPlacementPhase, EvilPlacementPhase, CompletePhase]
AnyMove = Union[PlaceSpy, PlaceDevice]


def _debug(msg: str, *args) -> None:
    """Log a debug message when engine debug is enabled."""
    if DEBUG_ENGINE:
        logger.debug(msg, *args)


def _by_id(points: Iterable[Spy]) -> List[Spy]:
    return sorted(points, key=lambda p: p.id)


class GameEngine:
    """Rules engine for Spyfield.

    Exposes ``create_game`` and ``apply_move`` as the primary APIs, plus
    the read-only ``preview_cursor`` query used by interaction layers.
    """

    @staticmethod
    def create_game(
        settings: GameSettings,
        source_factory: SourceFactory = PythonCoordinateSource,
    ) -> Game:
        """Create a game in the GOOD placement phase.

        The evil members come from the seeded generator and the initial
        heatmap is computed over them at ``spy_radius``.
        """
        members = generate_evil_members(
            settings.board_size,
            settings.num_evil_members,
            settings.random_seed,
            special_values=settings.special_values,
            source_factory=source_factory,
        )
        heatmap = compute_heatmap(
            settings.spy_radius,
            settings.heatmap_size,
            members,
            cell_size=settings.heatmap_cell_size,
        )
        GAMES_CREATED.inc()
        logger.info(
            "Created game: seed=%d members=%d spies=%d devices=%d",
            settings.random_seed,
            len(members),
            settings.num_spies,
            settings.num_devices,
        )
        return Game(
            settings=settings,
            evil_members=members,
            phase=GoodPlacementPhase(heatmap=heatmap),
        )

    @staticmethod
    def apply_move(move: AnyMove, game: Game) -> Game:
        """Apply ``move`` to ``game`` and return the resulting game.

        Moves that do not match the current phase, exceed a budget, or
        target an off-board coordinate are ignored: the same ``game``
        object is returned.
        """
        next_game = GameEngine._apply(move, game)
        outcome = "ignored" if next_game is game else "applied"
        MOVES_TOTAL.labels(
            phase=game.current_phase.value,
            move_type=move.move_type.value,
            outcome=outcome,
        ).inc()
        return next_game

    @staticmethod
    def apply_move_strict(move: AnyMove, game: Game) -> Game:
        """Like :meth:`apply_move`, but raise on an ignored move.

        Raises:
            InvalidMoveError: If the move would have been a no-op.
        """
        next_game = GameEngine.apply_move(move, game)
        if next_game is game:
            raise InvalidMoveError(
                "Move cannot be applied to the current phase",
                phase=game.current_phase.value,
                move_type=move.move_type.value,
            )
        return next_game

    @staticmethod
    def _apply(move: AnyMove, game: Game) -> Game:
        phase = game.phase
        coord = getattr(move, "coord", None)
        if coord is None or not within_board(game.settings.board_size, coord):
            _debug("Ignoring move with off-board coordinate %s", coord)
            return game

        if isinstance(phase, GoodPlacementPhase) and isinstance(move, PlaceSpy):
            next_phase = GameEngine._place_spy(game, phase, coord)
        elif isinstance(phase, EvilPlacementPhase) and isinstance(
            move, PlaceDevice
        ):
            next_phase = GameEngine._place_device(game, phase, coord)
        else:
            _debug(
                "Ignoring %s in phase %s",
                move.move_type.value,
                phase.kind,
            )
            return game

        if next_phase is phase:
            return game

        if next_phase.kind != phase.kind:
            PHASE_TRANSITIONS.labels(
                from_phase=phase.kind, to_phase=next_phase.kind
            ).inc()
            logger.info("Phase transition %s -> %s", phase.kind, next_phase.kind)

        return game.model_copy(update={"phase": next_phase})

    # ------------------------------------------------------------------
    # GOOD placement
    # ------------------------------------------------------------------

    @staticmethod
    def _place_spy(
        game: Game, phase: GoodPlacementPhase, coord: Coordinate
    ) -> AnyPhase:
        settings = game.settings
        if len(phase.spies) >= settings.num_spies:
            return phase

        spies = phase.spies + (Spy(id=len(phase.spies), coord=coord),)
        included = GameEngine.covered_members(
            game.evil_members, spies, settings.spy_radius
        )
        total = total_value(included)
        _debug(
            "Spy %d at (%.3f, %.3f): %d members covered, total %d",
            len(spies) - 1,
            coord.x,
            coord.y,
            len(included),
            total,
        )

        if len(spies) == settings.num_spies:
            return GameEngine._begin_evil_placement(game, spies, total)

        next_phase = GoodPlacementPhase(
            heatmap=phase.heatmap,
            spies=spies,
            included_members=included,
            total_value=total,
        )
        return GameEngine._carry_cursor(game, phase, next_phase)

    @staticmethod
    def _begin_evil_placement(
        game: Game, spies: Sequence[Spy], good_total: int
    ) -> EvilPlacementPhase:
        settings = game.settings
        # Placed spies emit value 1 alongside the members.
        points: List[ValuePoint] = [*game.evil_members, *spies]
        heatmap = compute_heatmap(
            settings.spy_radius,
            settings.heatmap_size,
            points,
            cell_size=settings.heatmap_cell_size,
        )
        logger.info(
            "GOOD placed %d spies; initial score %d", len(spies), good_total
        )
        return EvilPlacementPhase(
            heatmap=heatmap,
            spies=tuple(spies),
            undetected_spies=frozenset(spies),
            detected_spies=frozenset(),
            good_initial_score=good_total,
        )

    # ------------------------------------------------------------------
    # EVIL placement
    # ------------------------------------------------------------------

    @staticmethod
    def _place_device(
        game: Game, phase: EvilPlacementPhase, coord: Coordinate
    ) -> AnyPhase:
        settings = game.settings
        if len(phase.devices) >= settings.num_devices:
            return phase
        if not phase.undetected_spies:
            return phase

        devices = phase.devices + (
            AntispyDevice(id=len(phase.devices), coord=coord),
        )
        newly_detected = frozenset(
            spy
            for spy in phase.undetected_spies
            if within_radius(coord, settings.device_radius, spy.coord)
        )
        undetected = phase.undetected_spies - newly_detected
        detected = phase.detected_spies | newly_detected
        _debug(
            "Device %d at (%.3f, %.3f): detected %d, %d undetected remain",
            len(devices) - 1,
            coord.x,
            coord.y,
            len(newly_detected),
            len(undetected),
        )

        next_phase = EvilPlacementPhase(
            heatmap=phase.heatmap,
            spies=phase.spies,
            devices=devices,
            undetected_spies=undetected,
            detected_spies=detected,
            good_initial_score=phase.good_initial_score,
        )

        if not undetected:
            return GameEngine._complete(game, next_phase, "all_spies_found")
        if len(devices) == settings.num_devices:
            return GameEngine._complete(game, next_phase, "devices_exhausted")

        return GameEngine._carry_cursor(game, phase, next_phase)

    @staticmethod
    def _complete(
        game: Game, final: EvilPlacementPhase, reason: str
    ) -> CompletePhase:
        included = GameEngine.covered_members(
            game.evil_members,
            _by_id(final.undetected_spies),
            game.settings.spy_radius,
        )
        score = FinalScore(
            good_initial_score=final.good_initial_score,
            num_spies_found=len(final.detected_spies),
            included_evil_members=included,
            good_final_score=total_value(included),
        )
        GAMES_COMPLETED.labels(reason=reason).inc()
        FINAL_SCORE.observe(score.good_final_score)
        logger.info(
            "Game complete (%s): spies found %d, score %d -> %d",
            reason,
            score.num_spies_found,
            score.good_initial_score,
            score.good_final_score,
        )
        return CompletePhase(final=final, score=score)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def covered_members(
        members: Sequence[EvilMember], spies: Sequence[Spy], radius: float
    ) -> FrozenSet[EvilMember]:
        """Members strictly within ``radius`` of at least one spy."""
        return frozenset(
            member
            for member in members
            if any(within_radius(spy.coord, radius, member.coord) for spy in spies)
        )

    @staticmethod
    def preview_cursor(
        phase: AnyPhase,
        coord: Optional[Coordinate],
        settings: GameSettings,
        evil_members: Sequence[EvilMember],
    ) -> Optional[CursorPreview]:
        """What a placement at ``coord`` would currently include.

        GOOD phase: the members within ``spy_radius``. EVIL phase: the
        members plus the undetected spies within ``device_radius``. Returns
        ``None`` for an absent or off-board coordinate and for a complete
        game. Never mutates anything.
        """
        if coord is None or not within_board(settings.board_size, coord):
            return None

        if isinstance(phase, GoodPlacementPhase):
            included: List[ValuePoint] = points_within_radius(
                coord, settings.spy_radius, evil_members
            )
        elif isinstance(phase, EvilPlacementPhase):
            included = [
                *points_within_radius(coord, settings.device_radius, evil_members),
                *points_within_radius(
                    coord, settings.device_radius, _by_id(phase.undetected_spies)
                ),
            ]
        else:
            return None

        return CursorPreview(
            coord=coord, included=tuple(included), total_value=total_value(included)
        )

    @staticmethod
    def _carry_cursor(
        game: Game,
        previous: Union[GoodPlacementPhase, EvilPlacementPhase],
        next_phase: Union[GoodPlacementPhase, EvilPlacementPhase],
    ) -> Union[GoodPlacementPhase, EvilPlacementPhase]:
        """Recompute an active cursor preview against ``next_phase``."""
        if previous.cursor is None:
            return next_phase
        cursor = GameEngine.preview_cursor(
            next_phase, previous.cursor.coord, game.settings, game.evil_members
        )
        return next_phase.model_copy(update={"cursor": cursor})

    @staticmethod
    def with_cursor(game: Game, coord: Optional[Coordinate]) -> Game:
        """Set (or clear, for ``None``) the active phase's cursor preview."""
        phase = game.phase
        if isinstance(phase, CompletePhase):
            return game
        cursor = GameEngine.preview_cursor(
            phase, coord, game.settings, game.evil_members
        )
        if cursor == phase.cursor:
            return game
        return game.model_copy(
            update={"phase": phase.model_copy(update={"cursor": cursor})}
        )

    @staticmethod
    def legal_move_for(game: Game, coord: Coordinate) -> Optional[AnyMove]:
        """The move the current phase accepts at ``coord``, if any."""
        phase = game.phase
        if isinstance(phase, GoodPlacementPhase):
            return PlaceSpy(coord=coord)
        if isinstance(phase, EvilPlacementPhase):
            return PlaceDevice(coord=coord)
        return None

    @staticmethod
    def toggle_heatmap_visibility(game: Game) -> Game:
        return game.model_copy(update={"show_heatmap": not game.show_heatmap})

    @staticmethod
    def is_complete(game: Game) -> bool:
        return isinstance(game.phase, CompletePhase)

    @staticmethod
    def final_score(game: Game) -> Optional[FinalScore]:
        if isinstance(game.phase, CompletePhase):
            return game.phase.score
        return None


# Function-style aliases for callers that do not want the class.
init = GameEngine.create_game
apply_move = GameEngine.apply_move
preview_cursor = GameEngine.preview_cursor
toggle_heatmap_visibility = GameEngine.toggle_heatmap_visibility
