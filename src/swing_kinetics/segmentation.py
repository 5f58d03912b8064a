"""Swing segmentation: movement-id grouping and contact-relative windows."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

import pandas as pd

from .constants import (
    CONTACT_MARKER_COLUMN,
    CONTACT_MARKER_CUTOFF_S,
    EARLY_WINDOW_MAX_TIME_S,
    FALLBACK_WINDOW_FRAMES,
    MOVEMENT_ID_COLUMN,
    NOT_APPLICABLE_ID,
    TIME_COLUMN,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowConfig:
    """Contact-relative window selection settings."""

    contact_marker_cutoff_s: float = CONTACT_MARKER_CUTOFF_S
    early_window_max_time_s: float = EARLY_WINDOW_MAX_TIME_S
    fallback_frames: int = FALLBACK_WINDOW_FRAMES
    min_window_frames: int = 1


@dataclass(frozen=True)
class SwingGroups:
    """Time-ordered frame groups keyed by movement id, in first-seen order."""

    groups: dict[str, pd.DataFrame]
    skipped_no_id_rows: int = 0
    skipped_not_applicable_rows: int = 0
    short_movement_ids: tuple[str, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.groups)


def group_swings(frames: pd.DataFrame, min_frames: int) -> SwingGroups:
    """Group frames by movement id, drop placeholder ids and groups shorter than `min_frames`."""
    if frames.empty:
        return SwingGroups(groups={})

    movement_ids = frames[MOVEMENT_ID_COLUMN].fillna("").astype(str)
    no_id = movement_ids.eq("")
    not_applicable = movement_ids.str.lower().eq(NOT_APPLICABLE_ID) & ~no_id
    usable = frames.loc[~(no_id | not_applicable)]

    groups: dict[str, pd.DataFrame] = {}
    short_ids: list[str] = []
    for movement_id, group in usable.groupby(MOVEMENT_ID_COLUMN, sort=False):
        ordered = group.sort_values(TIME_COLUMN, kind="mergesort").reset_index(drop=True)
        if len(ordered) < min_frames:
            short_ids.append(str(movement_id))
            continue
        groups[str(movement_id)] = ordered

    logger.debug(
        "Grouped %d movements (%d rows without id, %d 'n/a' rows, %d below %d frames)",
        len(groups),
        int(no_id.sum()),
        int(not_applicable.sum()),
        len(short_ids),
        min_frames,
    )
    return SwingGroups(
        groups=groups,
        skipped_no_id_rows=int(no_id.sum()),
        skipped_not_applicable_rows=int(not_applicable.sum()),
        short_movement_ids=tuple(short_ids),
    )


def has_contact_marker(group: pd.DataFrame) -> bool:
    """The export carried a time-to-contact column for this swing."""
    return CONTACT_MARKER_COLUMN in group.columns


def select_analysis_window(
    group: pd.DataFrame,
    config: WindowConfig = WindowConfig(),
) -> pd.DataFrame:
    """
    Pick the contact-relative frames of one time-ordered swing.

    Marker present: frames at or before contact. Otherwise: the early-time
    window. Too few frames either way: the first `fallback_frames` frames.
    """
    if has_contact_marker(group):
        mask = group[CONTACT_MARKER_COLUMN] <= config.contact_marker_cutoff_s
    else:
        mask = group[TIME_COLUMN] <= config.early_window_max_time_s

    window = group.loc[mask]
    if len(window) < max(config.min_window_frames, 1):
        window = group.iloc[: min(config.fallback_frames, len(group))]
    return window.reset_index(drop=True)


def contact_frame_index(window: pd.DataFrame) -> int:
    """Frame nearest contact: smallest |marker| when present, else the last frame."""
    if window.empty:
        return 0
    if has_contact_marker(window):
        return int(window[CONTACT_MARKER_COLUMN].abs().to_numpy().argmin())
    return len(window) - 1
