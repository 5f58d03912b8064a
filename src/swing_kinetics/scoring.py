"""Cross-swing aggregation into the four 20-80 sub-scores and the composite."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Sequence

from .metrics import coefficient_of_variation, grade_for_score, mean_or_zero, round_half_up
from .presets import ScoreWeights, ScoringModelPreset, preferred_scoring_model
from .swings import DataQuality, EnrichedSwing, Swing

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50


@dataclass(frozen=True)
class FlowComponents:
    ground_flow: int
    core_flow: int
    upper_flow: int

    def to_dict(self) -> dict[str, int]:
        return {
            "ground_flow": self.ground_flow,
            "core_flow": self.core_flow,
            "upper_flow": self.upper_flow,
        }


@dataclass(frozen=True)
class ScoreCard:
    """Four sub-scores, composite, grades, flows, and the raw metrics behind them."""

    brain: int
    body: int
    bat: int
    ball: int
    composite: int
    grades: dict[str, str]
    components: FlowComponents
    raw_metrics: dict[str, float] = field(default_factory=dict)


def composite_score(body: float, bat: float, brain: float, ball: float, weights: ScoreWeights) -> int:
    """Weighted blend of the sub-scores, rounded to an integer."""
    return int(
        round_half_up(
            body * weights.body + bat * weights.bat + brain * weights.brain + ball * weights.ball
        )
    )


def grade_scores(scores: dict[str, int], model: ScoringModelPreset) -> dict[str, str]:
    return {
        name: grade_for_score(value, model.grade_cutoffs, model.floor_grade)
        for name, value in scores.items()
    }


def _mean_int(values: Sequence[float]) -> int:
    return int(round_half_up(mean_or_zero(values)))


def _one_decimal(value: float) -> float:
    return round_half_up(value, 1)


def compute_scores(
    swings: Sequence[Swing],
    quality: DataQuality,
    model: ScoringModelPreset | None = None,
) -> ScoreCard:
    """Aggregate per-swing energy metrics into Brain/Body/Bat/Ball and the composite."""
    if not swings:
        raise ValueError("compute_scores requires at least one swing")
    active = model or preferred_scoring_model()
    band = active.band

    legs = [s.me.legs_ke for s in swings]
    torso = [s.me.torso_ke for s in swings]
    arms = [s.me.arms_ke for s in swings]
    bat = [s.me.bat_ke for s in swings]
    total = [s.me.total_ke for s in swings]
    bat_eff = [s.me.bat_efficiency_pct for s in swings]
    transfer = [s.me.torso_to_arms_transfer_pct for s in swings]

    avg_legs = mean_or_zero(legs)
    avg_torso = mean_or_zero(torso)
    avg_arms = mean_or_zero(arms)
    avg_bat = mean_or_zero(bat)
    avg_total = mean_or_zero(total)
    avg_bat_eff = mean_or_zero(bat_eff)
    avg_transfer = mean_or_zero(transfer)

    raw_metrics: dict[str, float] = {
        "avg_legs_ke": _one_decimal(avg_legs),
        "avg_torso_ke": _one_decimal(avg_torso),
        "avg_arms_ke": _one_decimal(avg_arms),
        "avg_bat_ke": _one_decimal(avg_bat),
        "avg_total_ke": _one_decimal(avg_total),
        "avg_bat_efficiency": _one_decimal(avg_bat_eff),
        "avg_torso_to_arms_transfer": _one_decimal(avg_transfer),
        "swing_count": len(swings),
    }

    if quality.has_ik_data:
        enriched = [s.ik for s in swings if isinstance(s, EnrichedSwing)]
        raw_metrics["avg_pelvis_velocity"] = _one_decimal(
            mean_or_zero([ik.pelvis_velocity for ik in enriched if ik.pelvis_velocity > 0])
        )
        raw_metrics["avg_torso_velocity"] = _one_decimal(
            mean_or_zero([ik.torso_velocity for ik in enriched if ik.torso_velocity > 0])
        )
        raw_metrics["avg_x_factor"] = _one_decimal(
            mean_or_zero([ik.x_factor for ik in enriched if ik.x_factor > 0])
        )

    ground_flow = band("legs_ke").scale(avg_legs)
    core_flow = _mean_int(
        [band("torso_ke").scale(avg_torso), band("torso_to_arms_transfer").scale(avg_transfer)]
    )
    body = _mean_int([ground_flow, core_flow])

    if quality.has_bat_ke:
        upper = [
            band("bat_ke").scale(avg_bat),
            band("arms_ke").scale(avg_arms),
            band("bat_efficiency").scale(avg_bat_eff),
        ]
    else:
        delivered_proxy = avg_arms * (avg_transfer / 100.0)
        proxy_eff_pct = (
            (delivered_proxy / avg_total) * 100.0 if avg_total > 0 else avg_transfer * 0.4
        )
        upper = [
            band("arms_ke").scale(avg_arms),
            band("torso_to_arms_transfer").scale(proxy_eff_pct),
        ]
    bat_score = _mean_int(upper)

    brain = NEUTRAL_SCORE
    ball = NEUTRAL_SCORE
    if quality.cv_scores_valid:
        cv_legs = coefficient_of_variation(legs)
        cv_torso = coefficient_of_variation(torso)
        cv_arms = coefficient_of_variation(arms)
        cv_output = coefficient_of_variation(bat) if quality.has_bat_ke else cv_arms
        cv_total = coefficient_of_variation(total)
        cv_bat_eff = coefficient_of_variation([e for e in bat_eff if e > 0])

        raw_metrics.update(
            {
                "cv_legs_ke": _one_decimal(cv_legs),
                "cv_torso_ke": _one_decimal(cv_torso),
                "cv_arms_ke": _one_decimal(cv_arms),
                "cv_output": _one_decimal(cv_output),
                "cv_total_ke": _one_decimal(cv_total),
                "cv_bat_efficiency": _one_decimal(cv_bat_eff),
            }
        )
        brain = _mean_int(
            [
                band("cv_legs_ke").scale(cv_legs),
                band("cv_torso_ke").scale(cv_torso),
                band("cv_output").scale(cv_output),
            ]
        )
        ball = _mean_int(
            [band("cv_total_ke").scale(cv_total), band("cv_bat_efficiency").scale(cv_bat_eff)]
        )

    composite = composite_score(body, bat_score, brain, ball, active.weights)
    grades = grade_scores(
        {"brain": brain, "body": body, "bat": bat_score, "ball": ball, "overall": composite},
        active,
    )

    logger.info(
        "Scores: brain=%d body=%d bat=%d ball=%d overall=%d (ground=%d core=%d upper=%d)",
        brain,
        body,
        bat_score,
        ball,
        composite,
        ground_flow,
        core_flow,
        bat_score,
    )
    return ScoreCard(
        brain=brain,
        body=body,
        bat=bat_score,
        ball=ball,
        composite=composite,
        grades=grades,
        components=FlowComponents(ground_flow, core_flow, bat_score),
        raw_metrics=raw_metrics,
    )
