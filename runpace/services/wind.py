"""Wind-equivalent pace: the calm-air speed with the same metabolic cost.

Air resistance is modelled as quadratic drag on the runner's projected
frontal area, turned into a percentage surcharge on the calm-air treadmill
cost. Wind is reported at 10 m and shifted to chest height with a suburban
power-law profile.

References:
    Livingston & Lee (2001), body surface area from body mass.
    Black et al. (2018), metabolic cost of running vs speed.
    da Silva et al., air-resistance slope of 6.13.
"""

from __future__ import annotations

import math

from runpace.constants import DEFAULT_RUNNER_WEIGHT_KG
from runpace.logging_config import get_logger

logger = get_logger(__name__)

ALPHA_SUBURBS = 0.30
DRAG_COEF = 0.8
AIR_DENSITY = 1.225      # kg/m^3
AP_RATIO = 0.266         # share of body surface area facing forward
G = 9.80665
HEIGHT_REF_M = 10.0
HEIGHT_RUNNER_M = 1.5
DA_SILVA_SLOPE = 6.13
GRID_MAX_MS = 12.0
GRID_STEP_MS = 0.05


def body_surface_area(weight_kg: float) -> float:
    """Body surface area (m^2) from mass."""
    return 0.1173 * weight_kg ** 0.6466


def frontal_area(bsa: float) -> float:
    """Projected frontal area (m^2)."""
    return AP_RATIO * bsa


def wind_at_chest_height(wind_10m_ms: float) -> float:
    """Power-law shift of a 10 m wind reading to 1.5 m."""
    return wind_10m_ms * (HEIGHT_RUNNER_M / HEIGHT_REF_M) ** ALPHA_SUBURBS


def treadmill_cost(speed_ms: float, elite: int = 1) -> float:
    """Calm-air metabolic cost of running (W/kg)."""
    return 8.09986 + 0.12910 * speed_ms + 0.48105 * speed_ms ** 2 - 1.13918 * elite


def drag_force(relative_v: float, ap: float) -> float:
    """Signed drag force (N); positive opposes the runner."""
    sign = math.copysign(1.0, relative_v) if relative_v else 0.0
    return sign * 0.5 * AIR_DENSITY * relative_v ** 2 * DRAG_COEF * ap


def air_resistance_fraction(speed_ms: float, wind_ms: float, weight_kg: float, ap: float) -> float:
    """Air-resistance surcharge as a fraction of treadmill cost (0.03 = 3%).

    wind_ms is positive for a headwind and negative for a tailwind.
    """
    force = drag_force(speed_ms + wind_ms, ap)
    body_weight_n = weight_kg * G
    return (force / body_weight_n) * DA_SILVA_SLOPE


def total_metabolic_cost(speed_ms: float, wind_ms: float, weight_kg: float) -> float:
    """Metabolic cost (W/kg) at speed_ms into wind_ms at chest height."""
    ap = frontal_area(body_surface_area(weight_kg))
    return treadmill_cost(speed_ms) * (1 + air_resistance_fraction(speed_ms, wind_ms, weight_kg, ap))


def _speed_grid() -> list[float]:
    steps = int(round(GRID_MAX_MS / GRID_STEP_MS))
    return [i * GRID_STEP_MS for i in range(steps + 1)]


def _lookup_speed(target_cost: float, speed_grid: list[float], cost_grid: list[float]) -> float:
    """Invert cost -> speed by linear interpolation; NaN outside the grid."""
    if target_cost < cost_grid[0] or target_cost > cost_grid[-1]:
        return math.nan

    i = 0
    while i < len(cost_grid) - 2 and not (cost_grid[i] <= target_cost <= cost_grid[i + 1]):
        i += 1

    y0, y1 = cost_grid[i], cost_grid[i + 1]
    x0, x1 = speed_grid[i], speed_grid[i + 1]
    pct = (target_cost - y0) / (y1 - y0)
    return x0 + (x1 - x0) * pct


def calculate_wind_adjusted_pace(
    base_speed_ms: float,
    wind_speed_kmh: float,
    weight_kg: float = DEFAULT_RUNNER_WEIGHT_KG,
) -> float:
    """Speed (m/s) in the given wind that costs the same as base_speed_ms in calm air.

    wind_speed_kmh is the 10 m reading, positive for a headwind. Returns NaN
    when the calm-air cost is outside what the speed grid can reach; callers
    must treat that as no solution.
    """
    if not base_speed_ms or base_speed_ms <= 0:
        return base_speed_ms

    true_wind_ms = wind_at_chest_height(wind_speed_kmh / 3.6)
    target_cost = total_metabolic_cost(base_speed_ms, 0.0, weight_kg)

    speeds = _speed_grid()
    costs = [total_metabolic_cost(v, true_wind_ms, weight_kg) for v in speeds]
    adjusted = _lookup_speed(target_cost, speeds, costs)
    if math.isnan(adjusted):
        logger.debug(
            "wind_solver_out_of_range",
            extra={"ctx_base_speed_ms": base_speed_ms, "ctx_wind_kmh": wind_speed_kmh},
        )
    return adjusted


def get_impact_percentage(
    base_speed_ms: float,
    wind_speed_kmh: float,
    weight_kg: float = DEFAULT_RUNNER_WEIGHT_KG,
) -> float:
    """Speed change (%) caused by the wind; positive means slower. NaN when unsolvable."""
    if not base_speed_ms or base_speed_ms <= 0:
        return 0.0
    adjusted = calculate_wind_adjusted_pace(base_speed_ms, wind_speed_kmh, weight_kg)
    return ((base_speed_ms - adjusted) / base_speed_ms) * 100
