"""Tests for the pacing orchestrator."""

from __future__ import annotations

import math

import pytest

from runpace.data_tables import reference_heat_grid
from runpace.services.pacing import (
    PaceSet,
    PacingInputs,
    RunnerProfile,
    base_paces,
    compute_pacing,
)
from runpace.services.vdot import calculate_vdot

ZONES = ("threshold", "p10min", "p6min", "p3min", "p1min", "easy")


def _assert_ordered(paces: PaceSet) -> None:
    assert paces.p1min <= paces.p3min <= paces.p6min <= paces.p10min <= paces.easy
    assert paces.threshold <= paces.easy


@pytest.mark.parametrize("inputs", [
    PacingInputs(distance_m=0, time_seconds=1200),
    PacingInputs(distance_m=5000, time_seconds=0),
    PacingInputs(distance_m=-5000, time_seconds=1200),
    PacingInputs(distance_m=math.nan, time_seconds=1200),
])
def test_invalid_input_degrades(inputs):
    result = compute_pacing(inputs, heat_grid=reference_heat_grid())
    assert result.valid is False
    assert result.vdot == 0.0
    assert all(value == 0.0 for value in result.paces.as_dict().values())
    for adj in (result.heat, result.headwind, result.tailwind, result.altitude):
        assert adj.valid is False


def test_base_result_for_20min_5k():
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200))
    assert result.valid is True
    assert result.vdot == pytest.approx(49.8, abs=0.1)
    assert result.pred_5k_seconds == pytest.approx(1200, abs=0.01)
    assert result.pred_5k_pace == pytest.approx(240, abs=0.01)
    assert result.input_pace_seconds == pytest.approx(240)
    assert result.paces.p10min == pytest.approx(1.0552 * 240 + 15.19, abs=0.01)
    assert result.paces.easy == pytest.approx(343, abs=0.01)
    assert not result.heat.valid
    assert not result.headwind.valid
    assert not result.altitude.valid


def test_one_minute_reps_at_10k_pace():
    result = compute_pacing(PacingInputs(distance_m=10000, time_seconds=2400))
    assert result.paces.p1min == pytest.approx(240, abs=0.01)


@pytest.mark.parametrize("five_k_seconds", [840, 1000, 1200, 1500, 1800, 2400, 3000, 3600])
def test_pace_ordering_holds_across_abilities(five_k_seconds):
    paces, _ = base_paces(calculate_vdot(5000, five_k_seconds))
    _assert_ordered(paces)


def test_slow_runner_ordering_enforced():
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=2400))
    _assert_ordered(result.paces)
    assert result.paces.easy >= result.paces.threshold


def test_heat_adjusts_every_zone():
    result = compute_pacing(
        PacingInputs(distance_m=5000, time_seconds=1200, temp_c=22, dew_c=16),
        heat_grid=reference_heat_grid(),
    )
    assert result.heat.valid
    assert result.heat.impact_percent == pytest.approx(3.9, abs=0.01)
    for zone in ZONES:
        base = getattr(result.paces, zone)
        assert getattr(result.heat.adjusted_paces, zone) == pytest.approx(base * 1.039, rel=1e-6)


def test_heat_dew_defaults_to_temperature():
    result = compute_pacing(
        PacingInputs(distance_m=5000, time_seconds=1200, temp_c=25),
        heat_grid=reference_heat_grid(),
    )
    assert result.heat.valid
    assert result.dew_c == 25


def test_heat_needs_grid_and_temperature():
    without_grid = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, temp_c=25))
    without_temp = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200), heat_grid=reference_heat_grid())
    assert not without_grid.heat.valid
    assert not without_temp.heat.valid


def test_wind_headwind_and_tailwind():
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, wind_kmh=20))
    assert result.headwind.valid and result.tailwind.valid
    assert result.headwind.impact_percent > 0
    assert result.tailwind.impact_percent < 0
    threshold = result.paces.threshold
    assert result.headwind.adjusted_paces.threshold > threshold > result.tailwind.adjusted_paces.threshold


def test_no_wind_is_inactive():
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, wind_kmh=0))
    assert not result.headwind.valid
    assert not result.tailwind.valid
    assert result.headwind.adjusted_paces is None


def test_unsolvable_wind_is_none_not_nan(monkeypatch):
    monkeypatch.setattr("runpace.services.pacing.calculate_wind_adjusted_pace", lambda *a, **k: math.nan)
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, wind_kmh=20))
    assert result.headwind.valid
    assert all(value is None for value in result.headwind.adjusted_paces.as_dict().values())


def test_invalid_runner_weight_falls_back_to_default():
    default = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, wind_kmh=20))
    zero = compute_pacing(PacingInputs(
        distance_m=5000, time_seconds=1200, wind_kmh=20, runner=RunnerProfile(weight_kg=0),
    ))
    assert zero.headwind.impact_percent == pytest.approx(default.headwind.impact_percent)


def test_altitude_gate_ignores_small_deltas():
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, base_altitude_m=0, target_altitude_m=100))
    assert not result.altitude.valid


def test_altitude_ascent():
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, base_altitude_m=0, target_altitude_m=2000))
    assert result.altitude.valid
    assert result.altitude.impact_percent == pytest.approx(16.29, abs=0.1)
    assert result.altitude.adjusted_paces.easy > result.paces.easy


def test_altitude_descent():
    result = compute_pacing(PacingInputs(distance_m=5000, time_seconds=1200, base_altitude_m=2000, target_altitude_m=0))
    assert result.altitude.impact_percent == pytest.approx(-2.0)
    assert result.altitude.adjusted_paces.threshold == pytest.approx(result.paces.threshold * 0.98)


def test_altitude_threshold_is_configurable():
    result = compute_pacing(
        PacingInputs(distance_m=5000, time_seconds=1200, base_altitude_m=0, target_altitude_m=100),
        altitude_threshold_m=50,
    )
    assert result.altitude.valid


def test_compute_pacing_is_referentially_transparent():
    inputs = PacingInputs(distance_m=5000, time_seconds=1200, temp_c=28, dew_c=20, wind_kmh=15)
    grid = reference_heat_grid()
    assert compute_pacing(inputs, heat_grid=grid) == compute_pacing(inputs, heat_grid=grid)
