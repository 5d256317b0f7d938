"""Environment-driven configuration for Spyfield.

Settings are read from ``SPYFIELD_*`` environment variables, overlaid
with explicit overrides, and validated through :class:`GameSettings`.

Environment variables:
    SPYFIELD_SEED               random seed (default 0)
    SPYFIELD_NUM_EVIL_MEMBERS   number of hidden targets (default 20)
    SPYFIELD_SPY_RADIUS         spy coverage radius (default 10.0)
    SPYFIELD_DEVICE_RADIUS      antispy device radius (default 10.0)
    SPYFIELD_NUM_SPIES          spies GOOD places (default 5)
    SPYFIELD_NUM_DEVICES        devices EVIL places (default 5)
    SPYFIELD_BOARD_SIZE         board side in board units (default 100.0)
    SPYFIELD_HEATMAP_SIZE       heatmap cells per side (default 100)
    SPYFIELD_DEBUG_ENGINE       "1"/"true"/"yes"/"on" for verbose engine logs
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError
from .models import DEFAULT_BOARD_SIZE, DEFAULT_HEATMAP_SIZE, GameSettings

__all__ = [
    "DEFAULT_SETTINGS",
    "ENV_FIELDS",
    "env_flag",
    "load_settings",
]

_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_SETTINGS: Dict[str, Any] = {
    "random_seed": 0,
    "num_evil_members": 20,
    "spy_radius": 10.0,
    "device_radius": 10.0,
    "num_spies": 5,
    "num_devices": 5,
    "board_size": DEFAULT_BOARD_SIZE,
    "heatmap_size": DEFAULT_HEATMAP_SIZE,
}

# settings field -> (env var, parser)
ENV_FIELDS = {
    "random_seed": ("SPYFIELD_SEED", int),
    "num_evil_members": ("SPYFIELD_NUM_EVIL_MEMBERS", int),
    "spy_radius": ("SPYFIELD_SPY_RADIUS", float),
    "device_radius": ("SPYFIELD_DEVICE_RADIUS", float),
    "num_spies": ("SPYFIELD_NUM_SPIES", int),
    "num_devices": ("SPYFIELD_NUM_DEVICES", int),
    "board_size": ("SPYFIELD_BOARD_SIZE", float),
    "heatmap_size": ("SPYFIELD_HEATMAP_SIZE", int),
}


def env_flag(name: str, env: Optional[Mapping[str, str]] = None) -> bool:
    """Parse a boolean environment flag the way the engine flags are read."""
    source = os.environ if env is None else env
    return source.get(name, "0").strip().lower() in _TRUTHY


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> GameSettings:
    """Build validated settings from defaults, environment and overrides.

    Precedence: ``overrides`` > environment > ``DEFAULT_SETTINGS``.
    ``None`` override values are skipped so argparse namespaces can be
    passed through directly.

    Raises:
        ConfigurationError: If an environment value cannot be parsed or the
            merged settings fail validation.
    """
    source = os.environ if env is None else env
    values: Dict[str, Any] = dict(DEFAULT_SETTINGS)

    for field, (var, parser) in ENV_FIELDS.items():
        raw = source.get(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[field] = parser(raw.strip())
        except ValueError as e:
            raise ConfigurationError(
                f"Cannot parse {var}",
                context={"env_var": var, "value": raw},
            ) from e

    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GameSettings(**values)
    except PydanticValidationError as e:
        fields = sorted(
            {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        )
        raise ConfigurationError(
            "Invalid game settings",
            context={"fields": ",".join(fields)},
        ) from e
