"""Numeric helpers: robust peaks, variability, and 20-80 band scaling."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class ScoreBand:
    """Fixed [min, max] raw-value band mapped onto the 20-80 scale."""

    name: str
    min_value: float
    max_value: float
    invert: bool = False

    def scale(self, value: float) -> int:
        return to_2080_scale(value, self.min_value, self.max_value, invert=self.invert)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero toward +inf, the way score cutoffs were tuned."""
    factor = 10.0**digits
    return math.floor(value * factor + 0.5) / factor


def to_2080_scale(value: float, min_value: float, max_value: float, *, invert: bool = False) -> int:
    """Clamp a raw value into its band and map it affinely onto 20-80."""
    if max_value == min_value:
        return 50
    normalized = (float(value) - min_value) / (max_value - min_value)
    if invert:
        normalized = 1.0 - normalized
    normalized = min(max(normalized, 0.0), 1.0)
    return int(round_half_up(20.0 + normalized * 60.0))


def grade_for_score(
    score: float,
    cutoffs: Sequence[tuple[float, str]],
    floor_grade: str = "Poor",
) -> str:
    """Qualitative grade for a 20-80 score; cutoffs are checked high to low."""
    for cutoff, grade in sorted(cutoffs, key=lambda item: item[0], reverse=True):
        if score >= cutoff:
            return grade
    return floor_grade


def lower_percentile(values: Sequence[float], pct: float) -> float:
    """Percentile by sorted index floor(n * pct / 100); empty input gives 0."""
    if len(values) == 0:
        return 0.0
    ordered = np.sort(np.asarray(values, dtype=float))
    idx = min(int(math.floor(len(ordered) * pct / 100.0)), len(ordered) - 1)
    return float(ordered[idx])


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population CV in percent; fewer than two values or a zero mean give 0."""
    arr = np.asarray(values, dtype=float)
    if arr.size < 2:
        return 0.0
    mean = float(arr.mean())
    if mean == 0.0:
        return 0.0
    return float(arr.std(ddof=0) / abs(mean) * 100.0)


def mean_or_zero(values: Sequence[float]) -> float:
    arr = np.asarray(values, dtype=float)
    return float(arr.mean()) if arr.size else 0.0


def finite_difference_rates(values: Sequence[float], times: Sequence[float]) -> np.ndarray:
    """Forward difference quotients; non-increasing time steps yield 0."""
    vals = np.asarray(values, dtype=float)
    ts = np.asarray(times, dtype=float)
    if vals.size < 2:
        return np.zeros(0, dtype=float)
    dv = np.diff(vals)
    dt = np.diff(ts)
    safe_dt = np.where(dt > 0, dt, 1.0)
    return np.where(dt > 0, dv / safe_dt, 0.0)


def first_argmax(values: Sequence[float]) -> int:
    """Index of the first maximum; empty input gives 0."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0
    return int(np.argmax(arr))
