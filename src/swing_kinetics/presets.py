"""Scoring-model presets for repeatable threshold choices."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .metrics import ScoreBand


@dataclass(frozen=True)
class ScoreWeights:
    """Composite weights for the four sub-scores."""

    body: float = 0.35
    bat: float = 0.30
    brain: float = 0.20
    ball: float = 0.15


@dataclass(frozen=True)
class LeakCutoffs:
    """Cut points for the leak rule cascade."""

    near_zero_bat_ke_j: float = 10.0
    no_bat_fraction: float = 0.5
    late_legs_fraction: float = 0.5
    torso_bypass_transfer_pct: float = 50.0
    early_arms_sequence_fraction: float = 0.4
    clean_sequence_fraction: float = 0.7
    clean_bat_efficiency_pct: float = 30.0


@dataclass(frozen=True)
class ProjectionConstants:
    """Constants for the delivery-efficiency and kinetic-potential projections."""

    k_bat_speed: float = 4.25
    target_delivery_efficiency_pct: float = 55.0
    poor_efficiency_pct: float = 30.0
    fair_efficiency_pct: float = 45.0
    poor_efficiency_min_gain_mph: float = 10.0
    fair_efficiency_min_gain_mph: float = 6.0
    exit_velo_slope: float = 1.25
    exit_velo_intercept_mph: float = 5.0
    exit_velo_min_mph: float = 55.0
    exit_velo_current_max_mph: float = 115.0
    exit_velo_max_mph: float = 120.0
    kp_speed_multiplier: float = 2.5
    kp_efficiency_scale: float = 1.4
    baseline_height_in: float = 68.0
    default_body_mass_kg: float = 75.0


@dataclass(frozen=True)
class SpeedClamp:
    """Physiological bat-speed bounds for a competitive level (mph)."""

    min_mph: float
    max_mph: float


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


def default_score_bands() -> Mapping[str, ScoreBand]:
    """Hand-tuned 20-80 bands for each raw metric."""
    return _frozen(
        {
            "legs_ke": ScoreBand("legs_ke", 100.0, 500.0),
            "torso_ke": ScoreBand("torso_ke", 50.0, 250.0),
            "arms_ke": ScoreBand("arms_ke", 80.0, 250.0),
            "bat_ke": ScoreBand("bat_ke", 100.0, 600.0),
            "bat_efficiency": ScoreBand("bat_efficiency", 25.0, 65.0),
            "torso_to_arms_transfer": ScoreBand("torso_to_arms_transfer", 50.0, 150.0),
            "cv_legs_ke": ScoreBand("cv_legs_ke", 5.0, 40.0, invert=True),
            "cv_torso_ke": ScoreBand("cv_torso_ke", 5.0, 40.0, invert=True),
            "cv_output": ScoreBand("cv_output", 10.0, 150.0, invert=True),
            "cv_total_ke": ScoreBand("cv_total_ke", 5.0, 40.0, invert=True),
            "cv_bat_efficiency": ScoreBand("cv_bat_efficiency", 10.0, 50.0, invert=True),
        }
    )


def default_bat_speed_clamps() -> Mapping[str, SpeedClamp]:
    """Level-specific bat-speed bounds; unknown levels use high school."""
    hs = SpeedClamp(55.0, 95.0)
    pro = SpeedClamp(65.0, 110.0)
    return _frozen(
        {
            "youth": SpeedClamp(45.0, 85.0),
            "hs": hs,
            "high_school": hs,
            "college": SpeedClamp(60.0, 105.0),
            "pro": pro,
            "mlb": pro,
        }
    )


DEFAULT_GRADE_CUTOFFS: tuple[tuple[float, str], ...] = (
    (70.0, "Plus-Plus"),
    (60.0, "Plus"),
    (55.0, "Above Avg"),
    (45.0, "Average"),
    (40.0, "Below Avg"),
    (30.0, "Fringe"),
)


@dataclass(frozen=True)
class ScoringModelPreset:
    """Single source of truth for threshold choices."""

    name: str
    rationale: str
    bands: Mapping[str, ScoreBand] = field(default_factory=default_score_bands)
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    grade_cutoffs: tuple[tuple[float, str], ...] = DEFAULT_GRADE_CUTOFFS
    floor_grade: str = "Poor"
    leak_cutoffs: LeakCutoffs = field(default_factory=LeakCutoffs)
    projection: ProjectionConstants = field(default_factory=ProjectionConstants)
    bat_speed_clamps: Mapping[str, SpeedClamp] = field(default_factory=default_bat_speed_clamps)
    default_level: str = "hs"
    min_swings_for_cv: int = 3

    def band(self, name: str) -> ScoreBand:
        try:
            return self.bands[name]
        except KeyError as exc:
            raise KeyError(f"Scoring model {self.name!r} has no band {name!r}") from exc

    def speed_clamp(self, level: str | None) -> SpeedClamp:
        key = (level or self.default_level).strip().lower()
        return self.bat_speed_clamps.get(key, self.bat_speed_clamps[self.default_level])


def preferred_scoring_model() -> ScoringModelPreset:
    """Preferred momentum-first 4B model for this project."""
    return ScoringModelPreset(
        name="Momentum-First 4B Model v1",
        rationale=(
            "Energy (ME) exports drive every score; kinematics (IK) only enrich sequencing "
            "and joint-angle context. Bands, weights, and leak cut points are fixed domain "
            "constants and are not re-fit per athlete."
        ),
    )
