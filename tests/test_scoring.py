from __future__ import annotations

import pytest

from swing_kinetics.presets import ScoreWeights, preferred_scoring_model
from swing_kinetics.scoring import composite_score, compute_scores
from swing_kinetics.swings import assess_data_quality


def _score(swings, *, has_ik_data: bool = False):
    model = preferred_scoring_model()
    quality = assess_data_quality(
        swings, has_ik_data=has_ik_data, min_swings_for_cv=model.min_swings_for_cv
    )
    return compute_scores(swings, quality, model), quality


def test_steady_swings_score_expected_values(base_swing) -> None:
    swings = [base_swing(f"s{i}") for i in range(5)]
    card, quality = _score(swings)

    assert quality.cv_scores_valid
    assert card.components.ground_flow == 50
    assert card.components.core_flow == 44
    assert card.body == 47
    assert card.bat == 36
    assert card.brain == 80
    assert card.ball == 80
    assert card.composite == 55
    assert card.grades == {
        "brain": "Plus-Plus",
        "body": "Average",
        "bat": "Fringe",
        "ball": "Plus-Plus",
        "overall": "Above Avg",
    }
    assert card.raw_metrics["avg_legs_ke"] == 300.0
    assert card.raw_metrics["cv_legs_ke"] == 0.0
    assert card.raw_metrics["swing_count"] == 5


def test_composite_matches_weighted_formula(base_swing) -> None:
    swings = [
        base_swing("s1", legs_ke=250.0, torso_ke=120.0, bat_ke=180.0),
        base_swing("s2", legs_ke=320.0, torso_ke=170.0, bat_ke=240.0),
        base_swing("s3", legs_ke=290.0, torso_ke=140.0, bat_ke=150.0, bat_efficiency_pct=30.0),
    ]
    card, _ = _score(swings)
    expected = 0.35 * card.body + 0.30 * card.bat + 0.20 * card.brain + 0.15 * card.ball
    assert abs(card.composite - expected) <= 0.5
    for value in (card.brain, card.body, card.bat, card.ball, card.composite):
        assert 20 <= value <= 80


def test_fewer_than_three_swings_are_neutral_for_consistency(base_swing) -> None:
    swings = [base_swing("s1", legs_ke=100.0), base_swing("s2", legs_ke=500.0)]
    card, quality = _score(swings)

    assert not quality.cv_scores_valid
    assert card.brain == 50
    assert card.ball == 50
    assert "cv_legs_ke" not in card.raw_metrics
    assert "Need 3+ swings for consistency scores" in quality.warnings


def test_missing_bat_energy_uses_transfer_proxy(base_swing) -> None:
    swings = [
        base_swing(f"s{i}", bat_ke=0.0, bat_efficiency_pct=0.0, has_bat_ke=False)
        for i in range(3)
    ]
    card, quality = _score(swings)

    assert not quality.has_bat_ke
    assert "Bat KE not available - using transfer proxy" in quality.warnings
    # arms 120 J -> 34, proxy efficiency 19.2% on the transfer band -> 20
    assert card.bat == 27


def test_extreme_energy_is_clamped_to_band_edges(base_swing) -> None:
    swings = [
        base_swing(
            f"s{i}",
            legs_ke=5000.0,
            torso_ke=5000.0,
            arms_ke=5000.0,
            bat_ke=900.0,
            total_ke=5000.0,
            bat_efficiency_pct=99.0,
            torso_to_arms_transfer_pct=500.0,
        )
        for i in range(3)
    ]
    card, _ = _score(swings)
    assert card.body == 80
    assert card.bat == 80


def test_compute_scores_requires_swings() -> None:
    model = preferred_scoring_model()
    with pytest.raises(ValueError):
        compute_scores([], assess_data_quality([], has_ik_data=False), model)


def test_composite_score_rounds_half_up() -> None:
    weights = ScoreWeights()
    assert composite_score(50, 50, 50, 50, weights) == 50
    # 0.35 * 47 + 0.30 * 36 + 0.20 * 80 + 0.15 * 80 = 55.25
    assert composite_score(47, 36, 80, 80, weights) == 55
