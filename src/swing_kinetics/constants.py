"""Unit conversions and fixed data-shape constants."""

from __future__ import annotations

import math

RADIANS_TO_DEGREES = 180.0 / math.pi
SECONDS_TO_MS = 1000.0
POUNDS_PER_KG = 2.20462

GZIP_MAGIC = b"\x1f\x8b"
DEFAULT_MAX_CSV_CHARS = 2_000_000

MOVEMENT_ID_COLUMN = "org_movement_id"
TIME_COLUMN = "time"
CONTACT_MARKER_COLUMN = "time_from_max_hand"
NOT_APPLICABLE_ID = "n/a"

# Frames with a contact marker at or below this are approach-to-contact.
CONTACT_MARKER_CUTOFF_S = 0.01
EARLY_WINDOW_MAX_TIME_S = 0.5
FALLBACK_WINDOW_FRAMES = 100

MIN_ENERGY_FRAMES = 5
MIN_KINEMATIC_FRAMES = 10
MIN_KINEMATIC_WINDOW_FRAMES = 5

ENERGY_PEAK_PERCENTILE = 95.0
MAX_PLAUSIBLE_BAT_KE_J = 1000.0
BAT_KE_SIGNAL_FLOOR_J = 1.0

ENERGY_COLUMNS = (
    "legs_kinetic_energy",
    "torso_kinetic_energy",
    "arms_kinetic_energy",
    "larm_kinetic_energy",
    "rarm_kinetic_energy",
    "bat_kinetic_energy",
    "total_kinetic_energy",
)
KINEMATIC_COLUMNS = (
    "pelvis_rot",
    "torso_rot",
    "left_knee",
    "right_knee",
    "left_elbow",
    "right_elbow",
)
