"""VDOT race-time model based on the Daniels/Gilbert oxygen-cost equations.

VDOT is a measure of running ability derived from a single race or time
trial. This module computes VDOT from a performance, solves the time a given
VDOT predicts for any distance, derives threshold pace from VDOT and looks up
easy pace from a 5 km reference time.

Reference: Daniels' Running Formula, 3rd Edition (2013); Daniels & Gilbert,
Oxygen Power (1979).
"""

from __future__ import annotations

import math
from math import exp, sqrt

# Oxygen cost coefficients: cost = C0 + C1*v + C2*v^2 (v in m/min)
_COST_C0 = -4.60
_COST_C1 = 0.182258
_COST_C2 = 0.000104

THRESHOLD_FRACTION = 0.88

# Bisection bounds and iteration count for solve_time_for_vdot
SOLVER_MIN_SECONDS = 1.0
SOLVER_MAX_SECONDS = 100 * 3600.0
SOLVER_ITERATIONS = 30

# Easy pace breakpoints: 5 km time (s) -> easy pace (s/km), ascending by time
EASY_PACE_TABLE: tuple[tuple[int, int], ...] = (
    (920, 262), (940, 268), (960, 274), (980, 280), (1000, 286),
    (1020, 292), (1040, 298), (1060, 302), (1080, 308), (1100, 314),
    (1120, 320), (1140, 326), (1160, 331), (1180, 337), (1200, 343),
    (1220, 350), (1240, 355), (1260, 361), (1280, 366), (1300, 372),
    (1320, 378), (1340, 383), (1360, 389), (1380, 395), (1400, 401),
    (1420, 406), (1440, 412), (1460, 418), (1480, 423), (1500, 429),
    (1520, 434), (1540, 440), (1560, 446), (1580, 451), (1600, 457),
    (1620, 463), (1640, 469), (1660, 474), (1680, 480), (1700, 485),
    (1720, 491), (1740, 497), (1760, 503), (1780, 509), (1800, 514),
)


def percent_max(t_min: float) -> float:
    """Fraction of VO2max sustainable for t_min minutes (Daniels' drop-off curve)."""
    return 0.8 + 0.1894393 * exp(-0.012778 * t_min) + 0.2989558 * exp(-0.1932605 * t_min)


def oxygen_cost(v: float) -> float:
    """Oxygen cost in mL/kg/min of running at v m/min. Unclamped below ~100 m/min."""
    return _COST_C0 + _COST_C1 * v + _COST_C2 * v * v


def calculate_vdot(distance_m: float, time_seconds: float) -> float:
    """Estimate VDOT from a distance (m) and finish time (seconds).

    Returns 0.0 when time_seconds is not positive.
    """
    if time_seconds <= 0:
        return 0.0
    t_min = time_seconds / 60.0
    velocity = distance_m / t_min  # m/min
    return oxygen_cost(velocity) / percent_max(t_min)


def solve_time_for_vdot(vdot: float, distance_m: float) -> float:
    """Finish time in seconds that the given VDOT predicts for distance_m.

    Fixed 30-step bisection over [1 s, 100 h]. Relies on the VDOT implied by a
    finish time falling monotonically as the time grows.
    """
    low = SOLVER_MIN_SECONDS
    high = SOLVER_MAX_SECONDS
    best = low
    for _ in range(SOLVER_ITERATIONS):
        mid = (low + high) / 2
        if calculate_vdot(distance_m, mid) > vdot:
            low = mid
        else:
            high = mid
        best = mid
    return best


def calculate_threshold_pace(vdot: float) -> float:
    """Threshold pace (s/km): the speed whose oxygen cost is 88% of VDOT.

    Returns 0.0 when there is no physiological solution.
    """
    if not vdot or vdot <= 0:
        return 0.0
    target_cost = vdot * THRESHOLD_FRACTION
    a = _COST_C2
    b = _COST_C1
    c = _COST_C0 - target_cost
    det = b * b - 4 * a * c
    if det < 0:
        return 0.0
    v_m_min = (-b + sqrt(det)) / (2 * a)
    return 60000.0 / v_m_min


def get_easy_pace(five_k_seconds: float) -> float:
    """Easy pace (s/km) for a 5 km time, clamped to the table's end points."""
    first_t, first_p = EASY_PACE_TABLE[0]
    last_t, last_p = EASY_PACE_TABLE[-1]
    if five_k_seconds < first_t:
        return float(first_p)
    if five_k_seconds > last_t:
        return float(last_p)

    for (cur_t, cur_p), (next_t, next_p) in zip(EASY_PACE_TABLE, EASY_PACE_TABLE[1:]):
        if cur_t <= five_k_seconds <= next_t:
            ratio = (five_k_seconds - cur_t) / (next_t - cur_t)
            return cur_p + ratio * (next_p - cur_p)
    return 0.0


def is_available(value: float | None) -> bool:
    """True for a usable pace or speed; False for the 0 / NaN / None sentinels."""
    return value is not None and math.isfinite(value) and value > 0
