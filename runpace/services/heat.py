"""Heat-adjusted pace from a precomputed temperature x humidity grid.

The grid stores log-speed adjustments: a value of -0.05 means the runner's
speed in those conditions is exp(-0.05) times their neutral-conditions speed.
Because adjustments are additive in log-speed they compose multiplicatively
in speed space.

Relative humidity comes from temperature and dew point via the Magnus
approximation (Alduchov & Eskridge, 1996 coefficients).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from runpace.constants import REFERENCE_PACE_SEC_PER_KM

GRID_MIN_TEMP_C = 0
GRID_MAX_TEMP_C = 45
GRID_MAX_HUMIDITY = 100
GRID_WIDTH = GRID_MAX_TEMP_C - GRID_MIN_TEMP_C + 1   # temperature columns per humidity row
GRID_HEIGHT = GRID_MAX_HUMIDITY + 1
GRID_SIZE = GRID_WIDTH * GRID_HEIGHT

_MAGNUS_A = 17.625
_MAGNUS_B = 243.04

# Impact bands (percent slower) used for labelling conditions
_IMPACT_BANDS: tuple[tuple[float, str], ...] = (
    (0.5, "Ideal"),
    (2.0, "Good"),
    (3.5, "Fair"),
    (6.0, "Warning"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class HeatGrid:
    """Read-only 46 x 101 grid of log-speed adjustments, flat and row-major by humidity."""
    values: tuple[float | None, ...]

    @classmethod
    def from_values(cls, values: Iterable[float | None]) -> "HeatGrid":
        return cls(values=tuple(values))

    def lookup(self, temp_c: float, humidity_pct: float) -> float:
        """Adjustment for the nearest cell; 0.0 (neutral) when the cell is missing."""
        if not (math.isfinite(temp_c) and math.isfinite(humidity_pct)):
            return 0.0
        t_idx = max(GRID_MIN_TEMP_C, min(GRID_MAX_TEMP_C, _round_half_up(temp_c)))
        h_idx = max(0, min(GRID_MAX_HUMIDITY, _round_half_up(humidity_pct)))
        index = h_idx * GRID_WIDTH + t_idx
        if index >= len(self.values):
            return 0.0
        value = self.values[index]
        if value is None or not math.isfinite(value):
            return 0.0
        return float(value)


def relative_humidity(temp_c: float, dew_c: float) -> float:
    """Relative humidity (%) from temperature and dew point, clamped to 0..100.

    A dew point above the air temperature is physically impossible and is
    treated as saturation.
    """
    if dew_c > temp_c:
        dew_c = temp_c
    es = 6.112 * math.exp((_MAGNUS_A * temp_c) / (_MAGNUS_B + temp_c))
    e = 6.112 * math.exp((_MAGNUS_A * dew_c) / (_MAGNUS_B + dew_c))
    rh = (e / es) * 100
    return max(0.0, min(100.0, rh))


def heat_adjustment(grid: HeatGrid, temp_c: float, dew_c: float) -> float:
    """Log-speed adjustment for the given conditions."""
    rh = relative_humidity(temp_c, dew_c)
    return grid.lookup(temp_c, rh)


def pace_in_heat(grid: HeatGrid, neutral_pace_sec: float, temp_c: float, dew_c: float) -> float:
    """Pace (s/km) that matches neutral_pace_sec in neutral conditions.

    Returns 0.0 for a missing or non-positive neutral pace.
    """
    if not neutral_pace_sec or neutral_pace_sec <= 0:
        return 0.0

    adj = heat_adjustment(grid, temp_c, dew_c)
    neutral_speed = 1000.0 / neutral_pace_sec
    actual_speed = math.exp(math.log(neutral_speed) + adj)
    return 1000.0 / actual_speed


def heat_impact_percent(
    grid: HeatGrid,
    temp_c: float,
    dew_c: float,
    reference_pace_sec: float = REFERENCE_PACE_SEC_PER_KM,
) -> float:
    """Signed pace change (%) at the reference pace; positive means slower."""
    adjusted = pace_in_heat(grid, reference_pace_sec, temp_c, dew_c)
    if adjusted <= 0:
        return 0.0
    return ((adjusted - reference_pace_sec) / reference_pace_sec) * 100


def impact_category(impact_pct: float) -> str:
    """Label a pace impact: Ideal, Good, Fair, Warning or Severe."""
    for upper, label in _IMPACT_BANDS:
        if impact_pct < upper:
            return label
    return "Severe"
