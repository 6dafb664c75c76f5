"""Pacing orchestrator: one time trial in, every target pace and its
environment-adjusted variants out.

The orchestrator only composes the models in this package. Base paces come
from the VDOT model; heat, headwind, tailwind and altitude adjustments are
applied independently to that base set, each reported with a signed impact
figure measured at the reference pace (positive means slower).
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields

from runpace.constants import (
    ALTITUDE_NOISE_THRESHOLD_M,
    DEFAULT_RUNNER_WEIGHT_KG,
    REFERENCE_PACE_SEC_PER_KM,
)
from runpace.logging_config import get_logger
from runpace.services.altitude import DEFAULT_ALTITUDE_MODEL, AltitudeModel, calculate_pace_at_altitude
from runpace.services.heat import HeatGrid, heat_impact_percent, pace_in_heat
from runpace.services.vdot import (
    calculate_threshold_pace,
    calculate_vdot,
    get_easy_pace,
    is_available,
    solve_time_for_vdot,
)
from runpace.services.wind import calculate_wind_adjusted_pace, get_impact_percentage

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunnerProfile:
    weight_kg: float = DEFAULT_RUNNER_WEIGHT_KG
    height_cm: float | None = None
    age: float | None = None
    gender: str | None = None


@dataclass(frozen=True)
class PacingInputs:
    """A time trial plus the optional conditions to adjust for."""
    distance_m: float
    time_seconds: float
    temp_c: float | None = None
    dew_c: float | None = None
    wind_kmh: float = 0.0
    runner: RunnerProfile = field(default_factory=RunnerProfile)
    base_altitude_m: float | None = None
    target_altitude_m: float | None = None


@dataclass(frozen=True)
class PaceSet:
    """Pace per zone in s/km. Adjusted sets use None for an unsolvable zone."""
    threshold: float | None = 0.0
    p10min: float | None = 0.0
    p6min: float | None = 0.0
    p3min: float | None = 0.0
    p1min: float | None = 0.0
    easy: float | None = 0.0

    def as_dict(self) -> dict[str, float | None]:
        return asdict(self)

    def map(self, fn) -> "PaceSet":
        """Apply fn to every available pace; unavailable zones become None."""
        return PaceSet(**{
            f.name: fn(getattr(self, f.name)) if is_available(getattr(self, f.name)) else None
            for f in fields(self)
        })


@dataclass(frozen=True)
class EnvironmentAdjustment:
    valid: bool = False
    impact_percent: float | None = 0.0
    adjusted_paces: PaceSet | None = None


@dataclass(frozen=True)
class PacingResult:
    valid: bool = False
    vdot: float = 0.0
    pred_5k_seconds: float = 0.0
    pred_5k_pace: float = 0.0
    input_pace_seconds: float = 0.0
    paces: PaceSet = field(default_factory=PaceSet)
    heat: EnvironmentAdjustment = field(default_factory=EnvironmentAdjustment)
    headwind: EnvironmentAdjustment = field(default_factory=EnvironmentAdjustment)
    tailwind: EnvironmentAdjustment = field(default_factory=EnvironmentAdjustment)
    altitude: EnvironmentAdjustment = field(default_factory=EnvironmentAdjustment)
    temp_c: float | None = None
    dew_c: float | None = None


def _finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _available_or_none(value: float) -> float | None:
    return value if is_available(value) else None


def base_paces(vdot: float) -> tuple[PaceSet, float]:
    """Zone paces for a VDOT and the predicted 5 km time they derive from.

    The interval formulas are empirical fits to the predicted 5 km pace and
    do not by themselves keep 1-minute reps faster than 3-minute reps, or
    easy pace slower than threshold, for slow runners. Both orderings are
    enforced here.
    """
    pred_5k = solve_time_for_vdot(vdot, 5000)
    pace_5k = pred_5k / 5

    p10 = 1.0552 * pace_5k + 15.19
    p6 = 1.0256 * pace_5k + 14.12
    p3 = 1.0020 * pace_5k + 13.20
    p1 = min(solve_time_for_vdot(vdot, 10000) / 10, p3)
    threshold = calculate_threshold_pace(vdot)
    easy = max(get_easy_pace(pred_5k), p10, threshold)

    return PaceSet(threshold=threshold, p10min=p10, p6min=p6, p3min=p3, p1min=p1, easy=easy), pred_5k


def _heat_adjustment(
    paces: PaceSet,
    grid: HeatGrid,
    temp_c: float,
    dew_c: float,
    reference_pace: float,
) -> EnvironmentAdjustment:
    return EnvironmentAdjustment(
        valid=True,
        impact_percent=heat_impact_percent(grid, temp_c, dew_c, reference_pace),
        adjusted_paces=paces.map(lambda p: _available_or_none(pace_in_heat(grid, p, temp_c, dew_c))),
    )


def _wind_adjustment(paces: PaceSet, wind_kmh: float, weight_kg: float, reference_pace: float) -> EnvironmentAdjustment:
    """wind_kmh is signed: positive for a headwind, negative for a tailwind."""

    def adjust(pace: float) -> float | None:
        speed = calculate_wind_adjusted_pace(1000.0 / pace, wind_kmh, weight_kg)
        return 1000.0 / speed if is_available(speed) else None

    impact = get_impact_percentage(1000.0 / reference_pace, wind_kmh, weight_kg)
    return EnvironmentAdjustment(
        valid=True,
        impact_percent=impact if math.isfinite(impact) else None,
        adjusted_paces=paces.map(adjust),
    )


def _altitude_adjustment(
    paces: PaceSet,
    base_alt: float,
    target_alt: float,
    model: AltitudeModel,
    reference_pace: float,
) -> EnvironmentAdjustment:
    ref_adjusted = calculate_pace_at_altitude(reference_pace, base_alt, target_alt, model)
    return EnvironmentAdjustment(
        valid=True,
        impact_percent=(ref_adjusted - reference_pace) / reference_pace * 100,
        adjusted_paces=paces.map(
            lambda p: _available_or_none(calculate_pace_at_altitude(p, base_alt, target_alt, model))
        ),
    )


def compute_pacing(
    inputs: PacingInputs,
    heat_grid: HeatGrid | None = None,
    reference_pace: float = REFERENCE_PACE_SEC_PER_KM,
    altitude_threshold_m: float = ALTITUDE_NOISE_THRESHOLD_M,
    altitude_model: AltitudeModel = DEFAULT_ALTITUDE_MODEL,
) -> PacingResult:
    """Compute base paces and every active environmental adjustment.

    Invalid input (missing, non-positive or non-finite distance or time, or a
    trial too slow to yield a positive VDOT) returns a result with
    ``valid=False``, zeroed paces and every stressor inactive.
    """
    distance = inputs.distance_m
    time_s = inputs.time_seconds
    if not (_finite(distance) and _finite(time_s)) or distance <= 0 or time_s <= 0:
        return PacingResult(temp_c=inputs.temp_c, dew_c=inputs.dew_c)

    vdot = calculate_vdot(distance, time_s)
    if not math.isfinite(vdot) or vdot <= 0:
        logger.debug("pacing_no_vdot", extra={"ctx_distance_m": distance, "ctx_time_seconds": time_s})
        return PacingResult(temp_c=inputs.temp_c, dew_c=inputs.dew_c)

    paces, pred_5k = base_paces(vdot)

    heat = EnvironmentAdjustment()
    temp_c = inputs.temp_c
    dew_c = inputs.dew_c
    if heat_grid is not None and _finite(temp_c):
        dew_c = dew_c if _finite(dew_c) else temp_c
        heat = _heat_adjustment(paces, heat_grid, temp_c, dew_c, reference_pace)

    headwind = tailwind = EnvironmentAdjustment()
    wind_kmh = inputs.wind_kmh or 0.0
    if _finite(wind_kmh) and wind_kmh > 0:
        weight = inputs.runner.weight_kg
        if not _finite(weight) or weight <= 0:
            weight = DEFAULT_RUNNER_WEIGHT_KG
        headwind = _wind_adjustment(paces, wind_kmh, weight, reference_pace)
        tailwind = _wind_adjustment(paces, -wind_kmh, weight, reference_pace)

    altitude = EnvironmentAdjustment()
    base_alt = inputs.base_altitude_m
    target_alt = inputs.target_altitude_m
    if _finite(base_alt) and _finite(target_alt) and abs(target_alt - base_alt) > altitude_threshold_m:
        altitude = _altitude_adjustment(paces, base_alt, target_alt, altitude_model, reference_pace)

    logger.debug(
        "pacing_computed",
        extra={
            "ctx_vdot": round(vdot, 2),
            "ctx_heat": heat.valid,
            "ctx_wind": headwind.valid,
            "ctx_altitude": altitude.valid,
        },
    )
    return PacingResult(
        valid=True,
        vdot=vdot,
        pred_5k_seconds=pred_5k,
        pred_5k_pace=pred_5k / 5,
        input_pace_seconds=time_s / (distance / 1000),
        paces=paces,
        heat=heat,
        headwind=headwind,
        tailwind=tailwind,
        altitude=altitude,
        temp_c=temp_c,
        dew_c=dew_c,
    )
