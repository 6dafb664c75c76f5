"""Tests for the WBGT estimator."""

from __future__ import annotations

import pytest

from runpace.services.wbgt import black_globe_temperature, calculate_wbgt, stull_wet_bulb, wbgt_risk


def test_stull_reference_point():
    assert stull_wet_bulb(20, 50) == pytest.approx(13.7, abs=0.05)


def test_stull_clamps_humidity():
    assert stull_wet_bulb(20, -5) == stull_wet_bulb(20, 0)
    assert stull_wet_bulb(20, 120) == stull_wet_bulb(20, 100)


def test_globe_without_sun_is_air_temperature():
    assert black_globe_temperature(25, 10, 0) == 25


def test_wind_damps_solar_heating():
    assert black_globe_temperature(25, 20, 800) < black_globe_temperature(25, 0, 800)


def test_wbgt_shade_calm():
    assert calculate_wbgt(20, 50, 0, 0) == pytest.approx(15.6, abs=0.05)


def test_sun_raises_wbgt():
    assert calculate_wbgt(25, 60, 5, 900) > calculate_wbgt(25, 60, 5, 0)


@pytest.mark.parametrize("value,label", [
    (17, "Low"),
    (20, "Moderate"),
    (24, "High"),
    (27, "Very High"),
    (29, "Extreme"),
    (31, "Cancel"),
])
def test_wbgt_risk(value, label):
    assert wbgt_risk(value) == label
