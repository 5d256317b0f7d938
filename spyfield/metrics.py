"""Prometheus metrics for the Spyfield rules engine.

This module centralises counters and histograms so that the engine can
record lightweight telemetry without each call site managing its own
metric instances. Hosts that want to scrape them expose
``prometheus_client.generate_latest()`` themselves.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram


MOVES_TOTAL: Final[Counter] = Counter(
    "spyfield_moves_total",
    (
        "Total number of moves handed to apply_move, labeled by phase, "
        "move_type and outcome (applied or ignored)."
    ),
    labelnames=("phase", "move_type", "outcome"),
)

PHASE_TRANSITIONS: Final[Counter] = Counter(
    "spyfield_phase_transitions_total",
    "Total phase transitions, labeled by source and destination phase.",
    labelnames=("from_phase", "to_phase"),
)

HEATMAP_COMPUTE_SECONDS: Final[Histogram] = Histogram(
    "spyfield_heatmap_compute_seconds",
    "Time spent computing a heatmap grid, in seconds.",
    # A 100x100 grid over tens of points lands in the low milliseconds.
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0),
)

GAMES_CREATED: Final[Counter] = Counter(
    "spyfield_games_created_total",
    "Total games created by GameEngine.create_game.",
)

GAMES_COMPLETED: Final[Counter] = Counter(
    "spyfield_games_completed_total",
    "Total games that reached the complete phase, labeled by end reason.",
    labelnames=("reason",),
)

FINAL_SCORE: Final[Histogram] = Histogram(
    "spyfield_final_score",
    "GOOD's final score at game completion.",
    buckets=(0, 1, 5, 10, 20, 35, 50, 100),
)
