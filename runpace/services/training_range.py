"""Quantile training-pace ranges from a critical-velocity regression surface.

Each of nine outcome models predicts a training speed (m/s) as

    beta0 + age_effect(age) + te_effect(log10 distance, log10 time)

where the age effect is a nearest-bucket lookup over a fixed age grid and
the time-trial effect is bilinear interpolation over a log-distance by
log-time surface. The outcome quantiles are combined into safe, median and
fast/slow range paces for three zones: threshold, CV and VO2max.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from runpace.constants import DEFAULT_REFERENCE_AGE

MIN_VALID_SPEED_MPS = 0.5
MODEL_NAME = "cv-threshold-calculator"

OUTCOME_KEYS: tuple[str, ...] = (
    "cs_minus_10",
    "cs_minus_50",
    "cs_minus_90",
    "cs_10",
    "cs_50",
    "cs_90",
    "cs_plus_10",
    "cs_plus_50",
    "cs_plus_90",
)


@dataclass(frozen=True)
class OutcomeModel:
    beta0: float
    age_smooth: tuple[float, ...]
    te_smooth: tuple[tuple[float, ...], ...]


@dataclass(frozen=True)
class CvThresholdModel:
    """Shared grids plus one OutcomeModel per outcome key."""
    log10_dist_grid: tuple[float, ...]
    log10_time_grid: tuple[float, ...]
    age_grid: tuple[float, ...]
    models: Mapping[str, OutcomeModel]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "CvThresholdModel":
        models = {
            key: OutcomeModel(
                beta0=float(params["beta0"]),
                age_smooth=tuple(float(v) for v in params["age_smooth"]),
                te_smooth=tuple(tuple(float(v) for v in row) for row in params["te_smooth"]),
            )
            for key, params in raw["models"].items()
        }
        return cls(
            log10_dist_grid=tuple(float(v) for v in raw["log10_dist_grid"]),
            log10_time_grid=tuple(float(v) for v in raw["log10_time_grid"]),
            age_grid=tuple(float(v) for v in raw["age_grid"]),
            models=models,
        )


@dataclass(frozen=True)
class TrainingPaceRange:
    safe_sec_per_km: float
    median_sec_per_km: float
    range_fast_sec_per_km: float
    range_slow_sec_per_km: float


@dataclass(frozen=True)
class TrainingPaceEstimate:
    threshold: TrainingPaceRange
    cv: TrainingPaceRange
    vo2max: TrainingPaceRange
    age_used: float
    model: str = MODEL_NAME


@dataclass(frozen=True)
class ThresholdPaceRange:
    faster_sec_per_km: float
    slower_sec_per_km: float
    quantile_p10_sec_per_km: float
    quantile_p90_sec_per_km: float
    age_used: float
    model: str = MODEL_NAME


def find_index(value: float, grid: Sequence[float]) -> int:
    """Lower index of the grid cell holding value, clamped to the edge cells."""
    if value <= grid[0]:
        return 0
    if value >= grid[-1]:
        return len(grid) - 2
    for i in range(len(grid) - 1):
        if grid[i] <= value <= grid[i + 1]:
            return i
    return 0


def bilinear_interp(
    dist_grid: Sequence[float],
    time_grid: Sequence[float],
    surface: Sequence[Sequence[float]],
    query_dist: float,
    query_time: float,
) -> float:
    """Four-corner bilinear interpolation; queries past the grid follow the edge cell's slope."""
    i = find_index(query_dist, dist_grid)
    j = find_index(query_time, time_grid)

    d1, d2 = dist_grid[i], dist_grid[i + 1]
    t1, t2 = time_grid[j], time_grid[j + 1]

    td = (query_dist - d1) / (d2 - d1)
    tt = (query_time - t1) / (t2 - t1)

    q11 = surface[i][j]
    q21 = surface[i + 1][j]
    q12 = surface[i][j + 1]
    q22 = surface[i + 1][j + 1]

    return ((1 - td) * (1 - tt) * q11
            + td * (1 - tt) * q21
            + (1 - td) * tt * q12
            + td * tt * q22)


def lookup_age_smooth(age_grid: Sequence[float], age_smooth: Sequence[float], query_age: float) -> float:
    """Smoothing value of the nearest age bucket (first bucket wins ties)."""
    closest = min(range(len(age_grid)), key=lambda i: abs(age_grid[i] - query_age))
    return age_smooth[closest]


def predict_outcome(
    model: CvThresholdModel,
    outcome_key: str,
    log10_dist: float,
    log10_time: float,
    age: float,
) -> float:
    """Predicted speed (m/s) for one outcome; NaN when the outcome is not in the model."""
    params = model.models.get(outcome_key)
    if params is None:
        return math.nan
    te_effect = bilinear_interp(model.log10_dist_grid, model.log10_time_grid, params.te_smooth, log10_dist, log10_time)
    age_effect = lookup_age_smooth(model.age_grid, params.age_smooth, age)
    return params.beta0 + age_effect + te_effect


def _to_pace(speed_mps: float) -> float | None:
    if not math.isfinite(speed_mps) or speed_mps < MIN_VALID_SPEED_MPS:
        return None
    pace = 1000.0 / speed_mps
    return pace if math.isfinite(pace) else None


def _build_zone(safe: float, median: float, range_a: float, range_b: float) -> TrainingPaceRange | None:
    paces = [_to_pace(s) for s in (safe, median, range_a, range_b)]
    if any(p is None for p in paces):
        return None
    safe_pace, median_pace, pace_a, pace_b = paces
    return TrainingPaceRange(
        safe_sec_per_km=safe_pace,
        median_sec_per_km=median_pace,
        range_fast_sec_per_km=min(pace_a, pace_b),
        range_slow_sec_per_km=max(pace_a, pace_b),
    )


def _resolve_age(age: Any) -> float | None:
    if age is None:
        return float(DEFAULT_REFERENCE_AGE)
    try:
        value = float(age)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value if value > 0 else float(DEFAULT_REFERENCE_AGE)


def estimate_training_paces(
    model: CvThresholdModel,
    distance_m: float,
    time_seconds: float,
    age: float | None = DEFAULT_REFERENCE_AGE,
) -> TrainingPaceEstimate | None:
    """Threshold, CV and VO2max pace ranges for a time trial.

    Returns None when the inputs are missing or non-finite, or when any
    predicted speed is implausible; no partial estimate is ever returned.
    """
    try:
        distance = float(distance_m)
        time = float(time_seconds)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(distance) and math.isfinite(time)) or distance <= 0 or time <= 0:
        return None

    age_used = _resolve_age(age)
    if age_used is None:
        return None

    log10_dist = math.log10(distance)
    log10_time = math.log10(time)
    predicted = {key: predict_outcome(model, key, log10_dist, log10_time, age_used) for key in OUTCOME_KEYS}

    threshold = _build_zone(
        predicted["cs_minus_10"], predicted["cs_minus_50"], predicted["cs_minus_90"], predicted["cs_minus_10"]
    )
    cv = _build_zone(predicted["cs_50"], predicted["cs_50"], predicted["cs_90"], predicted["cs_10"])
    vo2max = _build_zone(
        predicted["cs_plus_90"], predicted["cs_plus_50"], predicted["cs_plus_90"], predicted["cs_plus_10"]
    )
    if threshold is None or cv is None or vo2max is None:
        return None

    return TrainingPaceEstimate(threshold=threshold, cv=cv, vo2max=vo2max, age_used=age_used)


def estimate_threshold_pace_range(
    model: CvThresholdModel,
    distance_m: float,
    time_seconds: float,
    age: float | None = DEFAULT_REFERENCE_AGE,
) -> ThresholdPaceRange | None:
    """Threshold-only view of estimate_training_paces."""
    estimate = estimate_training_paces(model, distance_m, time_seconds, age)
    if estimate is None:
        return None
    zone = estimate.threshold
    return ThresholdPaceRange(
        faster_sec_per_km=zone.range_fast_sec_per_km,
        slower_sec_per_km=zone.range_slow_sec_per_km,
        quantile_p10_sec_per_km=zone.safe_sec_per_km,
        quantile_p90_sec_per_km=zone.range_fast_sec_per_km,
        age_used=estimate.age_used,
    )
