"""Bat-speed and exit-velocity projections from swing energy."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import math
from typing import Any, Sequence

from .constants import POUNDS_PER_KG
from .leaks import LeakType
from .metrics import mean_or_zero, round_half_up
from .presets import ScoringModelPreset, preferred_scoring_model
from .swings import EnrichedSwing, Swing


@dataclass(frozen=True)
class KineticProjections:
    """Delivery-efficiency projection: current vs ceiling bat speed and exit velocity (mph)."""

    bat_speed_current_mph: float = 0.0
    bat_speed_ceiling_mph: float = 0.0
    exit_velo_current_mph: float = 0.0
    exit_velo_ceiling_mph: float = 0.0
    delivery_efficiency_pct: float = 0.0
    potential_delivery_efficiency_pct: float = 55.0
    has_projections: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KineticPotential:
    """Mass- and height-normalized bat-speed ceiling against the current estimate."""

    avg_total_ke_peak: float
    avg_arms_ke_peak: float
    body_mass_kg: float
    height_inches: float
    proper_sequence_pct: float
    avg_legs_to_torso_transfer_pct: float
    avg_torso_to_arms_transfer_pct: float
    mass_adjusted_energy: float
    lever_index: float
    efficiency: float
    estimated_current_bat_speed_mph: float
    projected_bat_speed_ceiling_mph: float
    mph_left_on_table: float
    has_projections: bool
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["warnings"] = list(self.warnings)
        return payload


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def bat_speed_from_energy(energy_j: float, k: float) -> float:
    """speed = K * sqrt(E); negative energy counts as zero."""
    return k * math.sqrt(max(energy_j, 0.0))


def exit_velocity_from_bat_speed(bat_speed_mph: float, model: ScoringModelPreset, *, floor: float, cap: float) -> float:
    p = model.projection
    return _clamp(round_half_up(p.exit_velo_slope * bat_speed_mph + p.exit_velo_intercept_mph), floor, cap)


def project_delivery(
    swings: Sequence[Swing],
    leak_type: LeakType,
    level: str | None = None,
    model: ScoringModelPreset | None = None,
) -> KineticProjections:
    """Project current and ceiling bat speed from delivered energy, clamped to level bounds."""
    active = model or preferred_scoring_model()
    p = active.projection
    if not swings:
        return KineticProjections(potential_delivery_efficiency_pct=p.target_delivery_efficiency_pct)

    avg_bat = mean_or_zero([s.me.bat_ke for s in swings])
    avg_arms = mean_or_zero([s.me.arms_ke for s in swings])
    avg_total = mean_or_zero([s.me.total_ke for s in swings])
    avg_transfer = mean_or_zero([s.me.torso_to_arms_transfer_pct for s in swings])
    any_bat_signal = any(s.me.bat_ke > 1 for s in swings)

    if any_bat_signal and avg_bat > 0:
        delivered = avg_bat
        efficiency = (avg_bat / avg_total) * 100.0 if avg_total > 0 else 0.0
    else:
        delivered = avg_arms * (avg_transfer / 100.0)
        efficiency = (
            (delivered / avg_total) * 100.0
            if avg_total > 0
            else _clamp(avg_transfer * 0.5, 0.0, 60.0)
        )

    potential = avg_total * (p.target_delivery_efficiency_pct / 100.0)
    current = bat_speed_from_energy(delivered, p.k_bat_speed)
    ceiling = bat_speed_from_energy(max(potential, delivered), p.k_bat_speed)

    if leak_type == LeakType.NO_BAT_DELIVERY or efficiency < p.poor_efficiency_pct:
        ceiling = max(ceiling, current + p.poor_efficiency_min_gain_mph)
    elif efficiency < p.fair_efficiency_pct:
        ceiling = max(ceiling, current + p.fair_efficiency_min_gain_mph)

    bounds = active.speed_clamp(level)
    current = _clamp(round_half_up(current), bounds.min_mph, bounds.max_mph)
    ceiling = _clamp(round_half_up(ceiling), current, bounds.max_mph)

    ev_current = exit_velocity_from_bat_speed(
        current, active, floor=p.exit_velo_min_mph, cap=p.exit_velo_current_max_mph
    )
    ev_ceiling = exit_velocity_from_bat_speed(
        ceiling, active, floor=ev_current, cap=p.exit_velo_max_mph
    )

    return KineticProjections(
        bat_speed_current_mph=current,
        bat_speed_ceiling_mph=ceiling,
        exit_velo_current_mph=ev_current,
        exit_velo_ceiling_mph=ev_ceiling,
        delivery_efficiency_pct=round_half_up(efficiency, 1),
        potential_delivery_efficiency_pct=p.target_delivery_efficiency_pct,
        has_projections=True,
    )


def project_kinetic_potential(
    swings: Sequence[Swing],
    weight_lbs: float | None = None,
    height_in: float | None = None,
    model: ScoringModelPreset | None = None,
) -> KineticPotential:
    """Mass-normalized ceiling model; explicit no-projection result when arms energy is zero."""
    active = model or preferred_scoring_model()
    p = active.projection
    body_mass_kg = weight_lbs / POUNDS_PER_KG if weight_lbs else p.default_body_mass_kg
    height = float(height_in) if height_in else p.baseline_height_in
    lever_index = height / p.baseline_height_in

    warnings: list[str] = []
    if not weight_lbs:
        default_lbs = int(round_half_up(p.default_body_mass_kg * POUNDS_PER_KG))
        warnings.append(f"Using default weight ({default_lbs} lbs)")
    if not height_in:
        warnings.append(f'Using default height ({p.baseline_height_in:g}")')

    if not swings:
        return _empty_potential(0.0, body_mass_kg, height, lever_index, "No swings available")

    avg_total = mean_or_zero([s.me.total_ke for s in swings])
    avg_arms = mean_or_zero([s.me.arms_ke for s in swings])
    avg_legs = mean_or_zero([s.me.legs_ke for s in swings])
    avg_torso = mean_or_zero([s.me.torso_ke for s in swings])

    if avg_arms <= 0:
        return _empty_potential(
            avg_total, body_mass_kg, height, lever_index, "Arms kinetic energy is zero"
        )

    legs_to_torso = (avg_torso / avg_legs) * 100.0 if avg_legs > 0 else 0.0
    torso_to_arms = mean_or_zero([s.me.torso_to_arms_transfer_pct for s in swings])
    sequenced = sum(1 for s in swings if isinstance(s, EnrichedSwing) and s.ik.proper_sequence)
    proper_sequence_pct = sequenced / len(swings) * 100.0

    efficiency = _clamp((avg_arms / avg_total) * p.kp_efficiency_scale, 0.0, 1.0) if avg_total > 0 else 0.0
    ceiling = p.kp_speed_multiplier * math.sqrt(avg_arms) * lever_index
    current = ceiling * efficiency

    return KineticPotential(
        avg_total_ke_peak=round_half_up(avg_total, 1),
        avg_arms_ke_peak=round_half_up(avg_arms, 1),
        body_mass_kg=round_half_up(body_mass_kg, 1),
        height_inches=height,
        proper_sequence_pct=round_half_up(proper_sequence_pct, 1),
        avg_legs_to_torso_transfer_pct=round_half_up(legs_to_torso, 1),
        avg_torso_to_arms_transfer_pct=round_half_up(torso_to_arms, 1),
        mass_adjusted_energy=round_half_up(avg_total / body_mass_kg, 2),
        lever_index=round_half_up(lever_index, 2),
        efficiency=round_half_up(efficiency, 2),
        estimated_current_bat_speed_mph=round_half_up(current, 1),
        projected_bat_speed_ceiling_mph=round_half_up(ceiling, 1),
        mph_left_on_table=round_half_up(ceiling - current, 1),
        has_projections=True,
        warnings=tuple(warnings),
    )


def _empty_potential(
    avg_total: float,
    body_mass_kg: float,
    height: float,
    lever_index: float,
    reason: str,
) -> KineticPotential:
    return KineticPotential(
        avg_total_ke_peak=avg_total,
        avg_arms_ke_peak=0.0,
        body_mass_kg=body_mass_kg,
        height_inches=height,
        proper_sequence_pct=0.0,
        avg_legs_to_torso_transfer_pct=0.0,
        avg_torso_to_arms_transfer_pct=0.0,
        mass_adjusted_energy=avg_total / body_mass_kg,
        lever_index=lever_index,
        efficiency=0.0,
        estimated_current_bat_speed_mph=0.0,
        projected_bat_speed_ceiling_mph=0.0,
        mph_left_on_table=0.0,
        has_projections=False,
        warnings=(reason,),
    )
