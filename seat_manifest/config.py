from __future__ import annotations

import os

from .errors import ConfigurationError


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


LOG_LEVEL = os.environ.get("SEAT_MANIFEST_LOG_LEVEL", "INFO").upper()

# Pricing stub attached to normalized manifest places.
DEFAULT_CURRENCY = os.environ.get("SEAT_MANIFEST_CURRENCY", "EUR")

# Identifier count when neither sections nor total_places are given.
DEFAULT_TOTAL_PLACES = _int_env("SEAT_MANIFEST_DEFAULT_PLACES", 100)

# Scale used by normalize_coordinates.
NORMALIZED_SCALE = 1000.0
