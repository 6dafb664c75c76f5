"""Tests for the VDOT race-time model."""

from __future__ import annotations

import math

import pytest

from runpace.services.vdot import (
    EASY_PACE_TABLE,
    calculate_threshold_pace,
    calculate_vdot,
    get_easy_pace,
    is_available,
    oxygen_cost,
    percent_max,
    solve_time_for_vdot,
)


def test_calculate_vdot_20min_5k():
    assert calculate_vdot(5000, 1200) == pytest.approx(49.8, abs=0.1)


def test_calculate_vdot_non_positive_time():
    assert calculate_vdot(5000, 0) == 0.0
    assert calculate_vdot(5000, -10) == 0.0


def test_faster_time_gives_higher_vdot():
    assert calculate_vdot(5000, 1100) > calculate_vdot(5000, 1200)


def test_percent_max_decays_with_duration():
    assert percent_max(10) > percent_max(60) > 0.8
    assert percent_max(0) <= 1.3


def test_oxygen_cost_unclamped_at_low_speed():
    assert oxygen_cost(10) < 0


@pytest.mark.parametrize("distance,seconds", [(5000, 1200), (10000, 2400), (21097, 5400), (1500, 300)])
def test_solve_time_round_trip(distance, seconds):
    vdot = calculate_vdot(distance, seconds)
    assert solve_time_for_vdot(vdot, distance) == pytest.approx(seconds, abs=0.01)


def test_higher_vdot_solves_faster():
    assert solve_time_for_vdot(55, 5000) < solve_time_for_vdot(45, 5000)


def test_threshold_pace_vdot_50():
    assert calculate_threshold_pace(50) == pytest.approx(255.2, abs=0.5)


def test_threshold_pace_no_solution():
    assert calculate_threshold_pace(0) == 0.0
    assert calculate_threshold_pace(-5) == 0.0


def test_easy_pace_at_breakpoint():
    assert get_easy_pace(1200) == 343


def test_easy_pace_interpolates():
    assert get_easy_pace(1210) == pytest.approx(346.5)


def test_easy_pace_clamps_outside_table():
    assert get_easy_pace(500) == EASY_PACE_TABLE[0][1]
    assert get_easy_pace(5000) == EASY_PACE_TABLE[-1][1]


def test_easy_pace_table_is_ascending():
    times = [t for t, _ in EASY_PACE_TABLE]
    paces = [p for _, p in EASY_PACE_TABLE]
    assert times == sorted(times)
    assert paces == sorted(paces)


def test_is_available_sentinels():
    assert is_available(300.0)
    assert not is_available(0.0)
    assert not is_available(-1.0)
    assert not is_available(math.nan)
    assert not is_available(None)
