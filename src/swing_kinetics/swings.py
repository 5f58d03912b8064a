"""Swing assembly: energy swings optionally enriched with kinematics, plus data quality."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Sequence, Union

from .energy import MESwingMetrics
from .kinematics import IKSwingMetrics


@dataclass(frozen=True)
class BaseOnlySwing:
    """Energy-only swing; no kinematics export matched its movement id."""

    me: MESwingMetrics

    @property
    def movement_id(self) -> str:
        return self.me.movement_id


@dataclass(frozen=True)
class EnrichedSwing:
    """Energy swing with a same-movement-id kinematics record."""

    me: MESwingMetrics
    ik: IKSwingMetrics

    @property
    def movement_id(self) -> str:
        return self.me.movement_id


Swing = Union[EnrichedSwing, BaseOnlySwing]


@dataclass(frozen=True)
class DataQuality:
    """Run-level data-quality flags; built once per scoring run."""

    swing_count: int = 0
    has_bat_ke: bool = False
    bat_ke_coverage: float = 0.0
    cv_scores_valid: bool = False
    has_me_data: bool = False
    has_ik_data: bool = False
    has_contact_event: bool = False
    incomplete_swings: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["incomplete_swings"] = list(self.incomplete_swings)
        payload["warnings"] = list(self.warnings)
        return payload


def assemble_swings(
    energy: Mapping[str, MESwingMetrics],
    kinematics: Mapping[str, IKSwingMetrics] | None = None,
) -> list[Swing]:
    """One swing per energy movement id; kinematics attach only on an id match."""
    kinematics = kinematics or {}
    swings: list[Swing] = []
    for movement_id, me in energy.items():
        ik = kinematics.get(movement_id)
        swings.append(EnrichedSwing(me, ik) if ik is not None else BaseOnlySwing(me))
    return swings


def is_properly_sequenced(swing: Swing) -> bool:
    """Pelvis before torso when kinematics exist, else legs energy peaking no later than arms."""
    if isinstance(swing, EnrichedSwing):
        return swing.ik.proper_sequence
    return swing.me.legs_peak_time_ms <= swing.me.arms_peak_time_ms


def assess_data_quality(
    swings: Sequence[Swing],
    *,
    has_ik_data: bool,
    has_contact_event: bool = False,
    incomplete_swings: Sequence[str] = (),
    min_swings_for_cv: int = 3,
    extra_warnings: Sequence[str] = (),
) -> DataQuality:
    """Compute the data-quality block and its degraded-data warnings."""
    swing_count = len(swings)
    with_bat = sum(1 for swing in swings if swing.me.has_bat_ke)
    has_bat_ke = with_bat > 0
    cv_valid = swing_count >= min_swings_for_cv

    warnings = list(extra_warnings)
    if not has_bat_ke:
        warnings.append("Bat KE not available - using transfer proxy")
    if not cv_valid:
        warnings.append(f"Need {min_swings_for_cv}+ swings for consistency scores")
    if not has_ik_data:
        warnings.append("IK data not available - using ME-only scoring")

    return DataQuality(
        swing_count=swing_count,
        has_bat_ke=has_bat_ke,
        bat_ke_coverage=(with_bat / swing_count) if swing_count else 0.0,
        cv_scores_valid=cv_valid,
        has_me_data=swing_count > 0,
        has_ik_data=has_ik_data,
        has_contact_event=has_contact_event,
        incomplete_swings=tuple(incomplete_swings),
        warnings=tuple(warnings),
    )
