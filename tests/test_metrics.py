from __future__ import annotations

import numpy as np
import pytest

from swing_kinetics.metrics import (
    ScoreBand,
    coefficient_of_variation,
    finite_difference_rates,
    first_argmax,
    grade_for_score,
    lower_percentile,
    round_half_up,
    to_2080_scale,
)
from swing_kinetics.presets import DEFAULT_GRADE_CUTOFFS


def test_round_half_up_rounds_halves_upward() -> None:
    assert round_half_up(42.5) == 43
    assert round_half_up(44.5) == 45
    assert round_half_up(-0.5) == 0
    assert round_half_up(18.25, 1) == pytest.approx(18.3)


@pytest.mark.parametrize("value", [-1e6, -10.0, 0.0, 49.9, 100.0, 250.0, 1e6])
def test_2080_scale_stays_in_bounds(value: float) -> None:
    assert 20 <= to_2080_scale(value, 0.0, 100.0) <= 80
    assert 20 <= to_2080_scale(value, 0.0, 100.0, invert=True) <= 80


def test_2080_scale_endpoints_and_inversion() -> None:
    assert to_2080_scale(100.0, 100.0, 500.0) == 20
    assert to_2080_scale(500.0, 100.0, 500.0) == 80
    assert to_2080_scale(300.0, 100.0, 500.0) == 50
    assert to_2080_scale(5.0, 5.0, 40.0, invert=True) == 80
    assert to_2080_scale(40.0, 5.0, 40.0, invert=True) == 20


def test_degenerate_band_is_neutral() -> None:
    assert to_2080_scale(123.0, 10.0, 10.0) == 50
    assert ScoreBand("flat", 3.0, 3.0).scale(-5.0) == 50


def test_lower_percentile_uses_floor_index() -> None:
    values = list(range(1, 41))
    assert lower_percentile(values, 95) == 39.0
    assert lower_percentile(list(range(1, 11)), 95) == 10.0
    assert lower_percentile([], 95) == 0.0


def test_population_coefficient_of_variation() -> None:
    assert coefficient_of_variation([2.0, 4.0]) == pytest.approx(100.0 / 3.0)
    assert coefficient_of_variation([5.0]) == 0.0
    assert coefficient_of_variation([-1.0, 1.0]) == 0.0
    assert coefficient_of_variation([7.0, 7.0, 7.0]) == 0.0


def test_finite_difference_rates_guard_non_increasing_time() -> None:
    rates = finite_difference_rates([0.0, 1.0, 3.0, 4.0], [0.0, 0.5, 0.5, 1.0])
    np.testing.assert_allclose(rates, [2.0, 0.0, 2.0])
    assert finite_difference_rates([1.0], [0.0]).size == 0


def test_first_argmax_prefers_earliest() -> None:
    assert first_argmax([1.0, 3.0, 3.0]) == 1
    assert first_argmax([]) == 0


def test_grade_for_score() -> None:
    assert grade_for_score(72, DEFAULT_GRADE_CUTOFFS) == "Plus-Plus"
    assert grade_for_score(55, DEFAULT_GRADE_CUTOFFS) == "Above Avg"
    assert grade_for_score(44, DEFAULT_GRADE_CUTOFFS) == "Below Avg"
    assert grade_for_score(20, DEFAULT_GRADE_CUTOFFS) == "Poor"
