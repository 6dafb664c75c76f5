"""Static lookup tables: JSON loaders and bundled reference tables.

The engine never reads files. Hosts call ``load_engine_tables`` once at
start-up; it loads any table whose path is configured and falls back to the
reference table otherwise. The reference tables are generated from published
models so that the engine works out of the box:

- heat: an Ely-style marathon slowdown of 0.3% per degree above 15 C plus
  0.2% per humidity point above 60% (only in the warm range), stored as
  log-speed adjustments;
- age grade: open-class world records with WMA-style age multipliers
  interpolated to every age from 18 to 90;
- CV model: a synthetic surface whose outcome speeds are fixed fractions of
  time-trial speed, with a small masters age penalty.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from runpace.config import Settings
from runpace.logging_config import get_logger
from runpace.services.age_grade import AgeGradeTable
from runpace.services.heat import GRID_HEIGHT, GRID_SIZE, GRID_WIDTH, HeatGrid
from runpace.services.training_range import OUTCOME_KEYS, CvThresholdModel

logger = get_logger(__name__)


class DataTableError(ValueError):
    """A lookup-table file is structurally unusable."""


# -- Reference parameters --

_HEAT_NEUTRAL_TEMP_C = 15.0
_HEAT_PCT_PER_DEGREE = 0.003
_HEAT_HUMIDITY_THRESHOLD = 60.0
_HEAT_PCT_PER_HUMIDITY_POINT = 0.002

# Open-class world records (seconds) by distance
_OPEN_STANDARDS: dict[int, dict[str, int]] = {
    5000: {"M": 755, "F": 840},
    10000: {"M": 1571, "F": 1734},
    21097: {"M": 3451, "F": 3824},
    42195: {"M": 7235, "F": 7796},
}

# Age: (5K, 10K, half, marathon) time multipliers
_AGE_MULTIPLIERS: dict[str, dict[int, tuple[float, float, float, float]]] = {
    "M": {
        18: (1.000, 1.000, 1.000, 1.000),
        20: (1.000, 1.000, 1.000, 1.000),
        25: (1.000, 1.000, 1.000, 1.000),
        30: (1.003, 1.003, 1.004, 1.005),
        35: (1.022, 1.023, 1.026, 1.030),
        40: (1.050, 1.052, 1.058, 1.065),
        45: (1.086, 1.090, 1.100, 1.112),
        50: (1.131, 1.137, 1.152, 1.170),
        55: (1.186, 1.195, 1.217, 1.242),
        60: (1.253, 1.267, 1.298, 1.332),
        65: (1.336, 1.356, 1.400, 1.448),
        70: (1.438, 1.467, 1.530, 1.597),
        75: (1.566, 1.607, 1.697, 1.792),
        80: (1.728, 1.787, 1.915, 2.052),
        85: (1.938, 2.023, 2.208, 2.410),
        90: (2.217, 2.342, 2.615, 2.920),
    },
    "F": {
        18: (1.000, 1.000, 1.000, 1.000),
        20: (1.000, 1.000, 1.000, 1.000),
        25: (1.000, 1.000, 1.000, 1.000),
        30: (1.003, 1.003, 1.004, 1.005),
        35: (1.020, 1.021, 1.024, 1.028),
        40: (1.045, 1.048, 1.054, 1.062),
        45: (1.079, 1.084, 1.095, 1.108),
        50: (1.122, 1.130, 1.148, 1.168),
        55: (1.177, 1.189, 1.216, 1.246),
        60: (1.247, 1.265, 1.305, 1.349),
        65: (1.336, 1.363, 1.422, 1.488),
        70: (1.450, 1.490, 1.577, 1.673),
        75: (1.599, 1.658, 1.787, 1.929),
        80: (1.796, 1.886, 2.080, 2.296),
        85: (2.062, 2.201, 2.498, 2.835),
        90: (2.429, 2.649, 3.113, 3.658),
    },
}

_CV_DISTANCES_M = (800.0, 1500.0, 3000.0, 5000.0, 10000.0, 21097.5, 42195.0)
_CV_TIMES_S = (120.0, 300.0, 600.0, 1200.0, 2400.0, 4800.0, 9600.0, 19200.0)
_CV_AGES = tuple(float(a) for a in range(15, 81, 5))
_CV_MASTERS_AGE = 35.0
_CV_AGE_PENALTY_PER_5Y = 0.01

# Outcome speed as a fraction of time-trial speed
_CV_MULTIPLIERS: dict[str, float] = {
    "cs_minus_10": 0.86,
    "cs_minus_50": 0.89,
    "cs_minus_90": 0.92,
    "cs_10": 0.93,
    "cs_50": 0.95,
    "cs_90": 0.97,
    "cs_plus_10": 1.00,
    "cs_plus_50": 1.03,
    "cs_plus_90": 1.06,
}


# -- Reference tables --

def _heat_slowdown_factor(temp_c: float, humidity_pct: float) -> float:
    if temp_c <= _HEAT_NEUTRAL_TEMP_C:
        return 1.0
    factor = 1.0 + (temp_c - _HEAT_NEUTRAL_TEMP_C) * _HEAT_PCT_PER_DEGREE
    factor += max(0.0, humidity_pct - _HEAT_HUMIDITY_THRESHOLD) * _HEAT_PCT_PER_HUMIDITY_POINT
    return factor


@lru_cache(maxsize=1)
def reference_heat_grid() -> HeatGrid:
    values = [
        -math.log(_heat_slowdown_factor(float(t), float(h)))
        for h in range(GRID_HEIGHT)
        for t in range(GRID_WIDTH)
    ]
    return HeatGrid.from_values(values)


def _interpolate_multiplier(brackets: dict[int, tuple[float, ...]], age: int, idx: int) -> float:
    ages = sorted(brackets)
    for lower, upper in zip(ages, ages[1:]):
        if lower <= age <= upper:
            ratio = (age - lower) / (upper - lower)
            lo = brackets[lower][idx]
            return lo + ratio * (brackets[upper][idx] - lo)
    return brackets[ages[-1]][idx]


@lru_cache(maxsize=1)
def reference_age_grade_table() -> AgeGradeTable:
    raw: dict[str, Any] = {}
    for idx, (distance, open_by_gender) in enumerate(_OPEN_STANDARDS.items()):
        factors = {}
        for gender, brackets in _AGE_MULTIPLIERS.items():
            ages = range(min(brackets), max(brackets) + 1)
            factors[gender] = {age: 1.0 / _interpolate_multiplier(brackets, age, idx) for age in ages}
        raw[str(distance)] = {"open": open_by_gender, "factors": factors}
    return AgeGradeTable.from_mapping(raw)


def _age_smooth() -> list[float]:
    return [
        -_CV_AGE_PENALTY_PER_5Y * max(0.0, age - _CV_MASTERS_AGE) / 5
        for age in _CV_AGES
    ]


@lru_cache(maxsize=1)
def reference_cv_model() -> CvThresholdModel:
    age_smooth = _age_smooth()
    models = {
        key: {
            "beta0": 0.0,
            "age_smooth": age_smooth,
            "te_smooth": [[multiplier * d / t for t in _CV_TIMES_S] for d in _CV_DISTANCES_M],
        }
        for key, multiplier in _CV_MULTIPLIERS.items()
    }
    return CvThresholdModel.from_mapping({
        "log10_dist_grid": [math.log10(d) for d in _CV_DISTANCES_M],
        "log10_time_grid": [math.log10(t) for t in _CV_TIMES_S],
        "age_grid": list(_CV_AGES),
        "models": models,
    })


# -- File loaders --

def _read_json(path: str | Path) -> Any:
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as exc:
        raise DataTableError(f"{path}: invalid JSON ({exc.msg})") from exc


def load_heat_grid(path: str | Path) -> HeatGrid:
    """Load a heat grid: a flat list of 4646 values or {"values": [...]}. Nulls are allowed."""
    raw = _read_json(path)
    values = raw.get("values") if isinstance(raw, dict) else raw
    if not isinstance(values, list):
        raise DataTableError(f"{path}: expected a list of grid values")
    if len(values) != GRID_SIZE:
        raise DataTableError(f"{path}: expected {GRID_SIZE} grid values, got {len(values)}")
    try:
        return HeatGrid.from_values(None if v is None else float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise DataTableError(f"{path}: non-numeric grid value") from exc


def load_age_grade_table(path: str | Path) -> AgeGradeTable:
    raw = _read_json(path)
    if not isinstance(raw, dict) or not raw:
        raise DataTableError(f"{path}: expected a mapping of distance to standards")
    try:
        return AgeGradeTable.from_mapping(raw)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DataTableError(f"{path}: malformed age-grade table ({exc})") from exc


def _check_cv_shape(model: CvThresholdModel, path: str | Path) -> None:
    missing = [key for key in OUTCOME_KEYS if key not in model.models]
    if missing:
        raise DataTableError(f"{path}: missing outcome models {', '.join(missing)}")
    if len(model.log10_dist_grid) < 2 or len(model.log10_time_grid) < 2 or not model.age_grid:
        raise DataTableError(f"{path}: grids are too small")
    for key, outcome in model.models.items():
        if len(outcome.age_smooth) != len(model.age_grid):
            raise DataTableError(f"{path}: {key} age_smooth does not match age_grid")
        if len(outcome.te_smooth) != len(model.log10_dist_grid) or any(
            len(row) != len(model.log10_time_grid) for row in outcome.te_smooth
        ):
            raise DataTableError(f"{path}: {key} te_smooth does not match the distance x time grid")


def load_cv_model(path: str | Path) -> CvThresholdModel:
    raw = _read_json(path)
    try:
        model = CvThresholdModel.from_mapping(raw)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DataTableError(f"{path}: malformed CV model ({exc})") from exc
    _check_cv_shape(model, path)
    return model


@dataclass(frozen=True)
class EngineTables:
    heat_grid: HeatGrid
    age_grade: AgeGradeTable
    cv_model: CvThresholdModel


def load_engine_tables(settings: Settings) -> EngineTables:
    """Load configured tables, falling back to the reference tables."""
    tables = EngineTables(
        heat_grid=load_heat_grid(settings.heat_grid_path) if settings.heat_grid_path else reference_heat_grid(),
        age_grade=(
            load_age_grade_table(settings.age_grade_path)
            if settings.age_grade_path else reference_age_grade_table()
        ),
        cv_model=load_cv_model(settings.cv_model_path) if settings.cv_model_path else reference_cv_model(),
    )
    logger.info(
        "engine_tables_loaded",
        extra={
            "ctx_heat_grid": settings.heat_grid_path or "reference",
            "ctx_age_grade": settings.age_grade_path or "reference",
            "ctx_cv_model": settings.cv_model_path or "reference",
        },
    )
    return tables
