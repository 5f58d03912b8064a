"""Rule-based classification of the dominant kinetic-chain energy leak."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .metrics import mean_or_zero
from .presets import LeakCutoffs
from .swings import Swing, is_properly_sequenced


class LeakType(str, Enum):
    CLEAN_TRANSFER = "clean_transfer"
    LATE_LEGS = "late_legs"
    EARLY_ARMS = "early_arms"
    TORSO_BYPASS = "torso_bypass"
    NO_BAT_DELIVERY = "no_bat_delivery"
    UNKNOWN = "unknown"


LEAK_MESSAGES: dict[LeakType, tuple[str, str]] = {
    LeakType.CLEAN_TRANSFER: (
        "Energy flowed through the chain.",
        "Keep doing what you're doing.",
    ),
    LeakType.LATE_LEGS: (
        "Your legs fired late — the energy showed up after your hands.",
        "Get to the ground earlier.",
    ),
    LeakType.EARLY_ARMS: (
        "Your arms took over before your legs finished.",
        "Let the legs lead.",
    ),
    LeakType.TORSO_BYPASS: (
        "Energy jumped from legs to arms, skipping your core.",
        "Let your core catch and redirect the energy.",
    ),
    LeakType.NO_BAT_DELIVERY: (
        "Energy didn't make it to the barrel.",
        "Focus on delivering energy through the hands.",
    ),
    LeakType.UNKNOWN: ("", ""),
}


@dataclass(frozen=True)
class LeakInputs:
    """Cross-swing aggregates the leak cascade reads. Fractions are in [0, 1]."""

    swing_count: int
    no_bat_fraction: float
    late_legs_fraction: float
    mean_torso_ke: float
    mean_torso_to_arms_transfer_pct: float
    proper_sequence_fraction: float
    mean_bat_efficiency_pct: float


@dataclass(frozen=True)
class LeakClassification:
    type: LeakType
    caption: str
    training: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "caption": self.caption, "training": self.training}


def leak_result(leak_type: LeakType) -> LeakClassification:
    caption, training = LEAK_MESSAGES[leak_type]
    return LeakClassification(leak_type, caption, training)


def summarize_leak_inputs(
    swings: Sequence[Swing],
    cutoffs: LeakCutoffs = LeakCutoffs(),
) -> LeakInputs:
    """Aggregate swing records into the leak cascade's inputs."""
    n = len(swings)
    if n == 0:
        return LeakInputs(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    return LeakInputs(
        swing_count=n,
        no_bat_fraction=sum(1 for s in swings if s.me.bat_ke < cutoffs.near_zero_bat_ke_j) / n,
        late_legs_fraction=sum(
            1 for s in swings if s.me.legs_peak_time_ms > s.me.arms_peak_time_ms
        ) / n,
        mean_torso_ke=mean_or_zero([s.me.torso_ke for s in swings]),
        mean_torso_to_arms_transfer_pct=mean_or_zero(
            [s.me.torso_to_arms_transfer_pct for s in swings]
        ),
        proper_sequence_fraction=sum(1 for s in swings if is_properly_sequenced(s)) / n,
        mean_bat_efficiency_pct=mean_or_zero([s.me.bat_efficiency_pct for s in swings]),
    )


def classify_leak(inputs: LeakInputs, cutoffs: LeakCutoffs = LeakCutoffs()) -> LeakClassification:
    """Evaluate the cascade top to bottom; the first matching rule wins."""
    if inputs.swing_count == 0:
        return leak_result(LeakType.UNKNOWN)
    if inputs.no_bat_fraction > cutoffs.no_bat_fraction:
        return leak_result(LeakType.NO_BAT_DELIVERY)
    if inputs.late_legs_fraction > cutoffs.late_legs_fraction:
        return leak_result(LeakType.LATE_LEGS)
    if (
        inputs.mean_torso_ke > 0
        and inputs.mean_torso_to_arms_transfer_pct < cutoffs.torso_bypass_transfer_pct
    ):
        return leak_result(LeakType.TORSO_BYPASS)
    if inputs.proper_sequence_fraction < cutoffs.early_arms_sequence_fraction:
        return leak_result(LeakType.EARLY_ARMS)
    if (
        inputs.proper_sequence_fraction > cutoffs.clean_sequence_fraction
        and inputs.mean_bat_efficiency_pct > cutoffs.clean_bat_efficiency_pct
    ):
        return leak_result(LeakType.CLEAN_TRANSFER)
    return leak_result(LeakType.UNKNOWN)


def classify_leak_from_flows(ground_flow: float, core_flow: float, upper_flow: float) -> LeakClassification:
    """Coarse leak call for pre-aggregated payloads that carry only flow scores."""
    if ground_flow >= 60 and core_flow >= 60 and upper_flow >= 60:
        return leak_result(LeakType.CLEAN_TRANSFER)
    if ground_flow < 45:
        return leak_result(LeakType.LATE_LEGS)
    if upper_flow > ground_flow + 15:
        return leak_result(LeakType.EARLY_ARMS)
    return leak_result(LeakType.UNKNOWN)
