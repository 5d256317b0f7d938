#!/usr/bin/env python3
"""Headless scripted play for Spyfield.

Replays a fixed list of placements against a seeded game and prints the
resulting phase, heatmap bounds and (when the game completed) the final
score. Useful for reproducing a game from its seed.

Usage:
    spyfield --seed 42 --num-spies 2 --spy 10,20 --spy 30,40 --device 50,50
    spyfield --seed 7 --spy 12.5,80 --device 12,79 --json

Settings not given on the command line come from the SPYFIELD_*
environment variables (see spyfield.config), then the built-in defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from .config import load_settings
from .errors import ConfigurationError
from .game_engine import GameEngine
from .logging_config import COMPACT_FORMAT, setup_logging
from .models import (
    CompletePhase,
    Coordinate,
    EvilPlacementPhase,
    Game,
    PlaceDevice,
    PlaceSpy,
)

logger = logging.getLogger(__name__)


def parse_coordinate(text: str) -> Coordinate:
    """Parse ``"x,y"`` into a :class:`Coordinate`."""
    parts = text.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected x,y but got {text!r}")
    try:
        return Coordinate(x=float(parts[0]), y=float(parts[1]))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid coordinate {text!r}") from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay Spyfield placements against a seeded game",
    )
    parser.add_argument("--seed", dest="random_seed", type=int, default=None)
    parser.add_argument("--num-evil-members", type=int, default=None)
    parser.add_argument("--spy-radius", type=float, default=None)
    parser.add_argument("--device-radius", type=float, default=None)
    parser.add_argument("--num-spies", type=int, default=None)
    parser.add_argument("--num-devices", type=int, default=None)
    parser.add_argument("--board-size", type=float, default=None)
    parser.add_argument("--heatmap-size", type=int, default=None)
    parser.add_argument(
        "--spy",
        dest="spies",
        action="append",
        type=parse_coordinate,
        default=[],
        metavar="X,Y",
        help="Spy placement (repeatable, applied in order)",
    )
    parser.add_argument(
        "--device",
        dest="devices",
        action="append",
        type=parse_coordinate,
        default=[],
        metavar="X,Y",
        help="Antispy device placement (repeatable, applied after spies)",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print a JSON summary"
    )
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def _coord(c: Coordinate) -> list[float]:
    return [c.x, c.y]


def summarize(game: Game) -> dict[str, Any]:
    """JSON-ready summary of ``game``."""
    phase = game.phase
    summary: dict[str, Any] = {
        "phase": game.current_phase.value,
        "seed": game.settings.random_seed,
        "heatmap": {
            "size": game.heatmap.size,
            "min": game.heatmap.min_value,
            "max": game.heatmap.max_value,
        },
        "evilMembers": [
            {"id": m.id, "coord": _coord(m.coord), "value": m.value}
            for m in game.evil_members
        ],
    }

    evil = phase.final if isinstance(phase, CompletePhase) else phase
    summary["spies"] = [_coord(s.coord) for s in evil.spies]
    if isinstance(evil, EvilPlacementPhase):
        summary["devices"] = [_coord(d.coord) for d in evil.devices]
        summary["detectedSpies"] = sorted(s.id for s in evil.detected_spies)
    else:
        summary["totalValue"] = evil.total_value

    score = GameEngine.final_score(game)
    if score is not None:
        summary["score"] = {
            "goodInitialScore": score.good_initial_score,
            "numSpiesFound": score.num_spies_found,
            "includedEvilMembers": sorted(
                m.id for m in score.included_evil_members
            ),
            "goodFinalScore": score.good_final_score,
        }
    return summary


def _print_text(summary: dict[str, Any]) -> None:
    print(f"Phase: {summary['phase']} (seed {summary['seed']})")
    heatmap = summary["heatmap"]
    print(
        f"Heatmap: {heatmap['size']}x{heatmap['size']}, "
        f"min {heatmap['min']}, max {heatmap['max']}"
    )
    print(f"Spies placed: {len(summary['spies'])}")
    if "devices" in summary:
        print(f"Devices placed: {len(summary['devices'])}")
    score = summary.get("score")
    if score:
        print(f"Spies found: {score['numSpiesFound']}")
        print(f"GOOD initial score: {score['goodInitialScore']}")
        print(f"GOOD final score: {score['goodFinalScore']}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    try:
        setup_logging(
            "spyfield", level=args.log_level or "WARNING", fmt=COMPACT_FORMAT
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    overrides = {
        "random_seed": args.random_seed,
        "num_evil_members": args.num_evil_members,
        "spy_radius": args.spy_radius,
        "device_radius": args.device_radius,
        "num_spies": args.num_spies,
        "num_devices": args.num_devices,
        "board_size": args.board_size,
        "heatmap_size": args.heatmap_size,
    }
    try:
        settings = load_settings(overrides)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    game = GameEngine.create_game(settings)
    moves = [PlaceSpy(coord=c) for c in args.spies]
    moves += [PlaceDevice(coord=c) for c in args.devices]
    for move in moves:
        next_game = GameEngine.apply_move(move, game)
        if next_game is game:
            logger.warning(
                "%s at (%s, %s) was ignored",
                move.move_type.value,
                move.coord.x,
                move.coord.y,
            )
        game = next_game

    summary = summarize(game)
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        _print_text(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
