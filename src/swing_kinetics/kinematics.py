"""Per-swing joint-angle (IK) metrics: rotation velocities, X-factor, and sequencing."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Literal

import numpy as np
import pandas as pd

from .constants import (
    MIN_KINEMATIC_FRAMES,
    MIN_KINEMATIC_WINDOW_FRAMES,
    RADIANS_TO_DEGREES,
    SECONDS_TO_MS,
    TIME_COLUMN,
)
from .metrics import finite_difference_rates
from .segmentation import (
    SwingGroups,
    WindowConfig,
    contact_frame_index,
    group_swings,
    select_analysis_window,
)

logger = logging.getLogger(__name__)

DominantHand = Literal["L", "R"]

KINEMATIC_WINDOW = WindowConfig(min_window_frames=MIN_KINEMATIC_WINDOW_FRAMES)


@dataclass(frozen=True)
class IKSwingMetrics:
    """Rotation velocities (deg/s), angles (deg), and timing (ms) for one swing."""

    movement_id: str
    pelvis_velocity: float
    torso_velocity: float
    x_factor: float
    x_factor_stretch_rate: float
    pelvis_peak_time_ms: float
    torso_peak_time_ms: float
    contact_time_ms: float
    pelvis_timing_ms: float
    lead_knee_at_contact: float
    lead_elbow_at_contact: float
    rear_elbow_at_contact: float
    rear_elbow_ext_rate: float
    proper_sequence: bool


@dataclass(frozen=True)
class KinematicExtraction:
    swings: dict[str, IKSwingMetrics]
    groups: SwingGroups


def normalize_hand(hand: str | None) -> DominantHand:
    """Map handedness strings ('L', 'left', 'R', 'right', None) to 'L' or 'R'."""
    if hand and hand.strip().lower() in {"l", "left"}:
        return "L"
    return "R"


def side_columns(dominant_hand: DominantHand) -> dict[str, str]:
    """Lead side is opposite the dominant hand."""
    lead, rear = ("left", "right") if dominant_hand == "R" else ("right", "left")
    return {
        "lead_knee": f"{lead}_knee",
        "lead_elbow": f"{lead}_elbow",
        "rear_elbow": f"{rear}_elbow",
    }


def _peak_abs(values: np.ndarray) -> tuple[float, int]:
    if values.size == 0:
        return 0.0, 0
    idx = int(np.argmax(np.abs(values)))
    return float(abs(values[idx])), idx


def extract_kinematic_swing(
    movement_id: str,
    group: pd.DataFrame,
    dominant_hand: DominantHand = "R",
    window_config: WindowConfig = KINEMATIC_WINDOW,
) -> IKSwingMetrics:
    """Reduce one time-ordered swing to its kinematic metrics."""
    window = select_analysis_window(group, window_config)
    times_s = window[TIME_COLUMN].to_numpy(dtype=float)
    pelvis_rot = window["pelvis_rot"].to_numpy(dtype=float)
    torso_rot = window["torso_rot"].to_numpy(dtype=float)

    pelvis_vel = finite_difference_rates(pelvis_rot, times_s) * RADIANS_TO_DEGREES
    torso_vel = finite_difference_rates(torso_rot, times_s) * RADIANS_TO_DEGREES
    pelvis_peak, pelvis_peak_idx = _peak_abs(pelvis_vel)
    torso_peak, torso_peak_idx = _peak_abs(torso_vel)

    x_factor = np.abs(torso_rot * RADIANS_TO_DEGREES - pelvis_rot * RADIANS_TO_DEGREES)
    x_factor_max = float(x_factor.max()) if x_factor.size else 0.0
    stretch_rate, _ = _peak_abs(finite_difference_rates(x_factor, times_s))

    contact_idx = contact_frame_index(window)
    contact_time = float(times_s[contact_idx]) * SECONDS_TO_MS
    pelvis_peak_time = float(times_s[pelvis_peak_idx]) * SECONDS_TO_MS
    torso_peak_time = float(times_s[torso_peak_idx]) * SECONDS_TO_MS

    cols = side_columns(dominant_hand)
    contact = window.iloc[contact_idx]
    rear_elbow_rates = finite_difference_rates(window[cols["rear_elbow"]].to_numpy(dtype=float), times_s)

    return IKSwingMetrics(
        movement_id=movement_id,
        pelvis_velocity=pelvis_peak,
        torso_velocity=torso_peak,
        x_factor=x_factor_max,
        x_factor_stretch_rate=stretch_rate,
        pelvis_peak_time_ms=pelvis_peak_time,
        torso_peak_time_ms=torso_peak_time,
        contact_time_ms=contact_time,
        pelvis_timing_ms=contact_time - pelvis_peak_time,
        lead_knee_at_contact=abs(float(contact[cols["lead_knee"]]) * RADIANS_TO_DEGREES),
        lead_elbow_at_contact=abs(float(contact[cols["lead_elbow"]]) * RADIANS_TO_DEGREES),
        rear_elbow_at_contact=abs(float(contact[cols["rear_elbow"]]) * RADIANS_TO_DEGREES),
        rear_elbow_ext_rate=(
            float(rear_elbow_rates.max()) * RADIANS_TO_DEGREES if rear_elbow_rates.size else 0.0
        ),
        proper_sequence=pelvis_peak_time < torso_peak_time,
    )


def extract_kinematic_metrics(
    frames: pd.DataFrame,
    dominant_hand: DominantHand = "R",
    *,
    min_frames: int = MIN_KINEMATIC_FRAMES,
    window_config: WindowConfig = KINEMATIC_WINDOW,
) -> KinematicExtraction:
    """Segment an IK frame table and extract metrics for every analyzable swing."""
    groups = group_swings(frames, min_frames)
    swings = {
        movement_id: extract_kinematic_swing(movement_id, group, dominant_hand, window_config)
        for movement_id, group in groups.groups.items()
    }
    logger.info("IK: %d swings survived (>=%d frames)", len(swings), min_frames)
    return KinematicExtraction(swings=swings, groups=groups)
