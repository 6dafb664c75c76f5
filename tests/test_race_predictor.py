"""Tests for Riegel projection and VDOT race equivalents."""

from __future__ import annotations

import pytest

from runpace.services.race_predictor import (
    EQUIVALENT_DISTANCES_M,
    RacePrediction,
    equivalent_performances,
    predict_riegel,
    predict_vdot,
)


def test_riegel_doubling_distance():
    assert predict_riegel(5000, 1200, 10000) == pytest.approx(2501.9, abs=0.5)


def test_riegel_same_distance_is_identity():
    assert predict_riegel(5000, 1200, 5000) == pytest.approx(1200)


def test_riegel_custom_exponent_is_slower():
    assert predict_riegel(5000, 1200, 10000, 1.08) > predict_riegel(5000, 1200, 10000)


@pytest.mark.parametrize("args", [(0, 1200, 10000), (5000, 0, 10000), (5000, 1200, -1)])
def test_riegel_invalid(args):
    assert predict_riegel(*args) == 0.0


def test_predict_vdot_invalid():
    assert predict_vdot(0, 5000) == 0.0
    assert predict_vdot(50, 0) == 0.0


def test_equivalents_cover_all_distances_longest_first():
    results = equivalent_performances(5000, 1200)
    assert len(results) == len(EQUIVALENT_DISTANCES_M) == 19
    assert all(isinstance(r, RacePrediction) for r in results)
    assert results[0].distance_label == "50 km"
    assert results[-1].distance_label == "800m"
    times = [r.predicted_seconds for r in results]
    assert times == sorted(times, reverse=True)


def test_equivalents_reproduce_input_distance():
    by_label = {r.distance_label: r for r in equivalent_performances(5000, 1200)}
    five_k = by_label["5 km"]
    assert five_k.predicted_seconds == pytest.approx(1200, abs=0.01)
    assert five_k.pace_sec_per_km == pytest.approx(240, abs=0.01)
    assert five_k.predicted_display == "20:00"
    assert five_k.vdot_used == pytest.approx(49.8, abs=0.1)
    assert five_k.method == "vdot"


def test_equivalents_invalid_input():
    assert equivalent_performances(0, 1200) == []
    assert equivalent_performances(5000, 0) == []
