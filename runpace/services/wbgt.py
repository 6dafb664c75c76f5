"""Outdoor Wet-Bulb Globe Temperature estimate from routine weather readings.

Wet bulb uses the Stull (2011) empirical fit from temperature and relative
humidity. Globe temperature is approximated from shortwave radiation with an
exponential wind-cooling term, then combined with the standard outdoor
weighting 0.7*Tw + 0.2*Tg + 0.1*T.
"""

from __future__ import annotations

import math

# Upper bounds (exclusive) of each risk band in degrees C
_RISK_BANDS: tuple[tuple[float, str], ...] = (
    (18.0, "Low"),
    (21.0, "Moderate"),
    (25.0, "High"),
    (28.0, "Very High"),
    (30.0, "Extreme"),
)


def stull_wet_bulb(temp_c: float, rh_pct: float) -> float:
    """Wet-bulb temperature (C), Stull 2011. Humidity is clamped to 0..100."""
    t = temp_c
    rh = max(0.0, min(100.0, rh_pct))
    return (
        t * math.atan(0.151977 * math.sqrt(rh + 8.313659))
        + math.atan(t + rh)
        - math.atan(rh - 1.676331)
        + 0.00391838 * rh ** 1.5 * math.atan(0.023101 * rh)
        - 4.686035
    )


def black_globe_temperature(temp_c: float, wind_kmh: float, solar_wm2: float) -> float:
    """Globe temperature (C): air temperature plus solar heating damped by wind."""
    wind_ms = wind_kmh / 3.6
    wind_factor = math.exp(-0.25 * wind_ms)
    return temp_c + 0.019 * solar_wm2 * wind_factor


def calculate_wbgt(temp_c: float, rh_pct: float, wind_kmh: float, solar_wm2: float) -> float:
    tw = stull_wet_bulb(temp_c, rh_pct)
    tg = black_globe_temperature(temp_c, wind_kmh, solar_wm2)
    return 0.7 * tw + 0.2 * tg + 0.1 * temp_c


def wbgt_risk(wbgt_c: float) -> str:
    """Runner-oriented risk label for a WBGT reading."""
    for upper, label in _RISK_BANDS:
        if wbgt_c < upper:
            return label
    return "Cancel"
