"""Per-swing kinetic-energy (ME) metrics."""

from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

from .constants import (
    BAT_KE_SIGNAL_FLOOR_J,
    ENERGY_PEAK_PERCENTILE,
    MAX_PLAUSIBLE_BAT_KE_J,
    MIN_ENERGY_FRAMES,
    SECONDS_TO_MS,
    TIME_COLUMN,
)
from .metrics import first_argmax, lower_percentile
from .segmentation import SwingGroups, WindowConfig, group_swings, has_contact_marker, select_analysis_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MESwingMetrics:
    """Robust energy peaks (J), transfer ratios (%), and peak timing (ms) for one swing."""

    movement_id: str
    legs_ke: float
    torso_ke: float
    arms_ke: float
    bat_ke: float
    total_ke: float
    bat_efficiency_pct: float
    torso_to_arms_transfer_pct: float
    legs_peak_time_ms: float
    arms_peak_time_ms: float
    has_bat_ke: bool
    has_contact_marker: bool = False


@dataclass(frozen=True)
class EnergyExtraction:
    """All energy swings of one run plus the segmentation bookkeeping."""

    swings: dict[str, MESwingMetrics]
    groups: SwingGroups

    @property
    def has_contact_event(self) -> bool:
        return any(swing.has_contact_marker for swing in self.swings.values())


def arms_energy(window: pd.DataFrame) -> np.ndarray:
    """Combined arms energy; per-frame falls back to left + right when the combined value is 0."""
    combined = window["arms_kinetic_energy"].to_numpy(dtype=float)
    split = window["larm_kinetic_energy"].to_numpy(dtype=float) + window[
        "rarm_kinetic_energy"
    ].to_numpy(dtype=float)
    return np.where(combined == 0.0, split, combined)


def valid_bat_energy(window: pd.DataFrame) -> np.ndarray:
    """Bat samples that are non-negative, within total energy, and below the sanity bound."""
    bat = window["bat_kinetic_energy"].to_numpy(dtype=float)
    total = window["total_kinetic_energy"].to_numpy(dtype=float)
    keep = (bat >= 0.0) & (bat <= total) & (bat < MAX_PLAUSIBLE_BAT_KE_J)
    return bat[keep]


def extract_energy_swing(
    movement_id: str,
    group: pd.DataFrame,
    window_config: WindowConfig = WindowConfig(),
) -> MESwingMetrics:
    """Reduce one time-ordered swing to its energy metrics."""
    window = select_analysis_window(group, window_config)
    times_s = window[TIME_COLUMN].to_numpy(dtype=float)

    bat = valid_bat_energy(window)
    arms = arms_energy(window)
    legs = window["legs_kinetic_energy"].to_numpy(dtype=float)
    torso = window["torso_kinetic_energy"].to_numpy(dtype=float)
    total = window["total_kinetic_energy"].to_numpy(dtype=float)

    bat_peak = lower_percentile(bat, ENERGY_PEAK_PERCENTILE) if bat.size else 0.0
    arms_peak = lower_percentile(arms, ENERGY_PEAK_PERCENTILE)
    legs_peak = lower_percentile(legs, ENERGY_PEAK_PERCENTILE)
    torso_peak = lower_percentile(torso, ENERGY_PEAK_PERCENTILE)
    total_peak = lower_percentile(total, ENERGY_PEAK_PERCENTILE)

    legs_peak_time = float(times_s[first_argmax(legs)]) * SECONDS_TO_MS if times_s.size else 0.0
    arms_peak_time = float(times_s[first_argmax(arms)]) * SECONDS_TO_MS if times_s.size else 0.0

    return MESwingMetrics(
        movement_id=movement_id,
        legs_ke=legs_peak,
        torso_ke=torso_peak,
        arms_ke=arms_peak,
        bat_ke=bat_peak,
        total_ke=total_peak,
        bat_efficiency_pct=(bat_peak / total_peak) * 100.0 if total_peak > 0 else 0.0,
        torso_to_arms_transfer_pct=(arms_peak / torso_peak) * 100.0 if torso_peak > 0 else 0.0,
        legs_peak_time_ms=legs_peak_time,
        arms_peak_time_ms=arms_peak_time,
        has_bat_ke=bool(bat.size and bat.max() > BAT_KE_SIGNAL_FLOOR_J),
        has_contact_marker=has_contact_marker(group),
    )


def extract_energy_metrics(
    frames: pd.DataFrame,
    *,
    min_frames: int = MIN_ENERGY_FRAMES,
    window_config: WindowConfig = WindowConfig(),
) -> EnergyExtraction:
    """Segment an ME frame table and extract metrics for every analyzable swing."""
    groups = group_swings(frames, min_frames)
    swings = {
        movement_id: extract_energy_swing(movement_id, group, window_config)
        for movement_id, group in groups.groups.items()
    }

    logger.info(
        "ME: %d swings survived (>=%d frames); %d short, %d rows without id, %d 'n/a' rows",
        len(swings),
        min_frames,
        len(groups.short_movement_ids),
        groups.skipped_no_id_rows,
        groups.skipped_not_applicable_rows,
    )
    for swing in list(swings.values())[:5]:
        logger.debug(
            "Swing %s: legs=%.1fJ torso=%.1fJ arms=%.1fJ bat=%.1fJ total=%.1fJ batEff=%.1f%%",
            swing.movement_id,
            swing.legs_ke,
            swing.torso_ke,
            swing.arms_ke,
            swing.bat_ke,
            swing.total_ke,
            swing.bat_efficiency_pct,
        )
    return EnergyExtraction(swings=swings, groups=groups)
