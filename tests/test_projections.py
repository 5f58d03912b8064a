from __future__ import annotations

import pytest

from swing_kinetics.leaks import LeakType
from swing_kinetics.projections import (
    bat_speed_from_energy,
    project_delivery,
    project_kinetic_potential,
)


def test_bat_speed_from_energy() -> None:
    assert bat_speed_from_energy(100.0, 4.25) == pytest.approx(42.5)
    assert bat_speed_from_energy(-5.0, 4.25) == 0.0


def test_delivery_projection_for_steady_swings(base_swing) -> None:
    swings = [base_swing(f"s{i}") for i in range(5)]
    projection = project_delivery(swings, LeakType.CLEAN_TRANSFER, "hs")

    assert projection.has_projections
    assert projection.bat_speed_current_mph == 60
    assert projection.bat_speed_ceiling_mph == 70
    assert projection.exit_velo_current_mph == 80
    assert projection.exit_velo_ceiling_mph == 93
    assert projection.delivery_efficiency_pct == 40.0
    assert projection.potential_delivery_efficiency_pct == 55.0


def test_delivery_projection_respects_level_clamps(base_swing) -> None:
    swings = [base_swing("s1", bat_ke=900.0, total_ke=1000.0)]
    youth = project_delivery(swings, LeakType.CLEAN_TRANSFER, "youth")
    pro = project_delivery(swings, LeakType.CLEAN_TRANSFER, "MLB")
    unknown = project_delivery(swings, LeakType.CLEAN_TRANSFER, "beer league")

    assert youth.bat_speed_current_mph == 85
    assert youth.bat_speed_ceiling_mph == 85
    assert pro.bat_speed_current_mph == 110
    assert unknown.bat_speed_current_mph == 95


def test_low_energy_projection_floors_and_orders(base_swing) -> None:
    swings = [base_swing("s1", bat_ke=4.0)]
    projection = project_delivery(swings, LeakType.NO_BAT_DELIVERY, None)

    assert projection.bat_speed_current_mph == 55
    assert projection.bat_speed_ceiling_mph >= projection.bat_speed_current_mph
    assert projection.exit_velo_current_mph >= 55
    assert projection.exit_velo_ceiling_mph >= projection.exit_velo_current_mph
    assert projection.exit_velo_ceiling_mph <= 120


def test_delivery_projection_without_swings() -> None:
    projection = project_delivery([], LeakType.UNKNOWN)
    assert not projection.has_projections
    assert projection.bat_speed_current_mph == 0.0


def test_kinetic_potential_uses_defaults(base_swing) -> None:
    swings = [base_swing(f"s{i}") for i in range(5)]
    potential = project_kinetic_potential(swings)

    assert potential.has_projections
    assert potential.body_mass_kg == 75.0
    assert potential.height_inches == 68.0
    assert potential.lever_index == 1.0
    assert potential.efficiency == pytest.approx(0.34)
    assert potential.projected_bat_speed_ceiling_mph == pytest.approx(27.4)
    assert potential.estimated_current_bat_speed_mph == pytest.approx(9.2)
    assert potential.mph_left_on_table == pytest.approx(18.2)
    assert potential.proper_sequence_pct == 0.0
    assert potential.warnings == ("Using default weight (165 lbs)", 'Using default height (68")')


def test_kinetic_potential_with_player_size(base_swing) -> None:
    swings = [base_swing("s1")]
    potential = project_kinetic_potential(swings, weight_lbs=220.462, height_in=74.0)

    assert potential.body_mass_kg == pytest.approx(100.0)
    assert potential.lever_index == pytest.approx(1.09)
    assert potential.mass_adjusted_energy == pytest.approx(5.0)
    assert potential.warnings == ()


def test_kinetic_potential_zero_arms_has_no_projection(base_swing) -> None:
    potential = project_kinetic_potential([base_swing("s1", arms_ke=0.0)])
    assert not potential.has_projections
    assert potential.warnings == ("Arms kinetic energy is zero",)
    assert potential.estimated_current_bat_speed_mph == 0.0
