"""Altitude impact on pace.

Ascending uses the Wehrlin & Hallén (2006) VO2max-vs-altitude model: pace
scales with the ratio of sustainable VO2max at the two altitudes. Descending
uses a separate, simpler acclimatisation model based on Levine &
Stray-Gundersen (1997) "living high, training low": about 1% per 1000 m of
descent, capped at 3%. The two are deliberately not inverses of each other.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

MAX_DESCENT_GAIN_PCT = 3.0
DESCENT_GAIN_PCT_PER_1000M = 1.0


def vo2max_percentage(altitude_m: float) -> float:
    """Percentage of sea-level VO2max available at altitude_m, clamped to 50..100."""
    alt = max(0.0, altitude_m)
    vo2 = 100 * math.exp(-0.000115 * alt ** 0.9446)
    return max(50.0, min(100.0, vo2))


def hypoxic_pace_factor(base_alt: float, target_alt: float) -> float:
    """Pace multiplier when racing above the altitude the runner lives at."""
    return vo2max_percentage(base_alt) / vo2max_percentage(target_alt)


def acclimatization_gain_percent(high_alt: float, low_alt: float) -> float:
    """Percent improvement when descending from high_alt to low_alt."""
    return min(MAX_DESCENT_GAIN_PCT, (high_alt - low_alt) / 1000 * DESCENT_GAIN_PCT_PER_1000M)


@dataclass(frozen=True)
class AltitudeModel:
    """Pair of independent ascent/descent models.

    ascent(base, target) returns a pace multiplier; descent(high, low)
    returns a percent gain.
    """
    ascent: Callable[[float, float], float] = hypoxic_pace_factor
    descent: Callable[[float, float], float] = acclimatization_gain_percent


DEFAULT_ALTITUDE_MODEL = AltitudeModel()


@dataclass(frozen=True)
class AltitudeImpact:
    impact_pct: float
    correction_factor: float
    delta_alt: float
    base_vo2: float
    target_vo2: float
    vo2_drop: float


@dataclass(frozen=True)
class DescentBoost:
    original_pace: float
    improved_pace: float
    gain_seconds: float
    gain_percent: float
    altitude_diff: float


def get_altitude_impact(base_alt: float, target_alt: float) -> AltitudeImpact:
    """Summarise the VO2max change and pace correction between two altitudes."""
    base_vo2 = vo2max_percentage(base_alt)
    target_vo2 = vo2max_percentage(target_alt)

    relative_vo2 = (target_vo2 / base_vo2) * 100
    correction = base_vo2 / target_vo2
    return AltitudeImpact(
        impact_pct=round((correction - 1) * 100, 2),
        correction_factor=round(correction, 4),
        delta_alt=target_alt - base_alt,
        base_vo2=round(base_vo2, 2),
        target_vo2=round(target_vo2, 2),
        vo2_drop=round(100 - relative_vo2, 2),
    )


def calculate_pace_at_altitude(
    neutral_pace_sec: float,
    base_alt: float,
    target_alt: float,
    model: AltitudeModel = DEFAULT_ALTITUDE_MODEL,
) -> float:
    """Pace (s/km) at target_alt for a runner acclimatised to base_alt.

    Returns 0.0 for a missing or non-positive pace.
    """
    if not neutral_pace_sec or neutral_pace_sec <= 0:
        return 0.0
    if target_alt > base_alt:
        return neutral_pace_sec * model.ascent(base_alt, target_alt)
    if target_alt < base_alt:
        return neutral_pace_sec * (1 - model.descent(base_alt, target_alt) / 100)
    return neutral_pace_sec


def calculate_descent_boost(
    pace_at_high_alt: float,
    high_alt: float,
    low_alt: float,
    model: AltitudeModel = DEFAULT_ALTITUDE_MODEL,
) -> DescentBoost:
    """Performance gain when moving from high_alt down to low_alt."""
    gain_percent = model.descent(high_alt, low_alt)
    improved = pace_at_high_alt * (1 - gain_percent / 100)
    return DescentBoost(
        original_pace=pace_at_high_alt,
        improved_pace=round(improved, 2),
        gain_seconds=round(pace_at_high_alt - improved, 2),
        gain_percent=round(gain_percent, 2),
        altitude_diff=high_alt - low_alt,
    )
