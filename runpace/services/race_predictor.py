"""Race time projection using the Riegel formula and VDOT equivalents.

Provides two complementary projections:
- Riegel: simple power-law extrapolation from one race to another distance
- VDOT: the Daniels/Gilbert model solved for every standard distance
"""

from __future__ import annotations

from dataclasses import dataclass

from runpace.constants import RIEGEL_EXPONENT
from runpace.services.time_format import format_duration
from runpace.services.vdot import calculate_vdot, solve_time_for_vdot

# Standard distances in metres, longest first
EQUIVALENT_DISTANCES_M: dict[str, float] = {
    "50 km": 50000,
    "Marathon": 42195,
    "30 km": 30000,
    "Half Marathon": 21097,
    "15 km": 15000,
    "12 km": 12000,
    "10 km": 10000,
    "8 km": 8000,
    "6 km": 6000,
    "5 km": 5000,
    "3 Miles": 4828,
    "2 Miles": 3218,
    "3200m": 3200,
    "3000m": 3000,
    "1 Mile": 1609,
    "1600m": 1600,
    "1500m": 1500,
    "1000m": 1000,
    "800m": 800,
}


@dataclass(frozen=True)
class RacePrediction:
    """Predicted finish time for a target distance."""
    distance_label: str
    distance_m: float
    predicted_seconds: float
    predicted_display: str
    pace_sec_per_km: float
    method: str
    vdot_used: float | None = None


def predict_riegel(
    known_distance_m: float,
    known_time_seconds: float,
    target_distance_m: float,
    fatigue_factor: float = RIEGEL_EXPONENT,
) -> float:
    """Predict finish time using Riegel's formula: T2 = T1 * (D2/D1)^fatigue_factor.

    Default fatigue_factor=1.06 is standard; adjust 1.07-1.08 for less trained runners.
    """
    if known_distance_m <= 0 or known_time_seconds <= 0 or target_distance_m <= 0:
        return 0.0
    ratio = target_distance_m / known_distance_m
    return known_time_seconds * (ratio ** fatigue_factor)


def predict_vdot(vdot: float, target_distance_m: float) -> float:
    """Predict finish time (seconds) for a distance from a VDOT score."""
    if vdot <= 0 or target_distance_m <= 0:
        return 0.0
    return solve_time_for_vdot(vdot, target_distance_m)


def equivalent_performances(distance_m: float, time_seconds: float) -> list[RacePrediction]:
    """VDOT-equivalent times and paces for every standard distance.

    Returns an empty list when the input performance is not valid.
    """
    if distance_m <= 0 or time_seconds <= 0:
        return []

    vdot = calculate_vdot(distance_m, time_seconds)
    if vdot <= 0:
        return []
    results = []
    for label, target_m in EQUIVALENT_DISTANCES_M.items():
        seconds = predict_vdot(vdot, target_m)
        results.append(RacePrediction(
            distance_label=label,
            distance_m=target_m,
            predicted_seconds=seconds,
            predicted_display=format_duration(seconds),
            pace_sec_per_km=seconds / (target_m / 1000.0),
            method="vdot",
            vdot_used=round(vdot, 1),
        ))
    return results
