from __future__ import annotations

from typing import Callable, Sequence

import pytest

from swing_kinetics.energy import MESwingMetrics
from swing_kinetics.ingest import CsvFetchError
from swing_kinetics.swings import BaseOnlySwing

ME_HEADER = (
    "org_movement_id",
    "time",
    "legs_kinetic_energy",
    "torso_kinetic_energy",
    "arms_kinetic_energy",
    "bat_kinetic_energy",
    "total_kinetic_energy",
)
IK_HEADER = (
    "org_movement_id",
    "time",
    "pelvis_rot",
    "torso_rot",
    "left_knee",
    "right_knee",
    "left_elbow",
    "right_elbow",
)


def _render(header: Sequence[str], rows: Sequence[Sequence[object]]) -> str:
    lines = [",".join(header)]
    lines.extend(",".join(str(value) for value in row) for row in rows)
    return "\n".join(lines) + "\n"


def _constant_energy_csv(
    swing_count: int = 5,
    *,
    frames: int = 10,
    legs: float = 300.0,
    torso: float = 150.0,
    arms: float = 120.0,
    bat: float = 200.0,
    total: float = 500.0,
) -> str:
    rows = []
    for swing in range(1, swing_count + 1):
        for frame in range(frames):
            rows.append((f"swing-{swing}", f"{frame * 0.05:.2f}", legs, torso, arms, bat, total))
    return _render(ME_HEADER, rows)


def _sequenced_kinematics_csv(movement_ids: Sequence[str] = ("swing-1",), *, frames: int = 12) -> str:
    pelvis_deltas = [0.01, 0.05, 0.2, 0.05, 0.01] + [0.01] * (frames - 6)
    torso_deltas = [0.01, 0.01, 0.02, 0.05, 0.1, 0.3] + [0.02] * (frames - 7)
    rows = []
    for movement_id in movement_ids:
        pelvis, torso = 0.0, 0.0
        for frame in range(frames):
            if frame > 0:
                pelvis += pelvis_deltas[frame - 1]
                torso += torso_deltas[frame - 1]
            rows.append(
                (movement_id, f"{frame * 0.01:.2f}", pelvis, torso, 0.5, 0.6, 1.2, 1.5)
            )
    return _render(IK_HEADER, rows)


def _base_swing(movement_id: str = "swing-1", **overrides: object) -> BaseOnlySwing:
    values: dict[str, object] = {
        "movement_id": movement_id,
        "legs_ke": 300.0,
        "torso_ke": 150.0,
        "arms_ke": 120.0,
        "bat_ke": 200.0,
        "total_ke": 500.0,
        "bat_efficiency_pct": 40.0,
        "torso_to_arms_transfer_pct": 80.0,
        "legs_peak_time_ms": 100.0,
        "arms_peak_time_ms": 150.0,
        "has_bat_ke": True,
    }
    values.update(overrides)
    return BaseOnlySwing(MESwingMetrics(**values))


class FakeSource:
    """In-memory byte source keyed by locator."""

    def __init__(self, payloads: dict[str, bytes]):
        self.payloads = payloads
        self.requested: list[str] = []

    def fetch_bytes(self, locator: str) -> bytes:
        self.requested.append(locator)
        if locator not in self.payloads:
            raise CsvFetchError(f"CSV download failed: 404 ({locator})")
        return self.payloads[locator]


@pytest.fixture
def render_csv() -> Callable[..., str]:
    return _render


@pytest.fixture
def constant_energy_csv() -> Callable[..., str]:
    return _constant_energy_csv


@pytest.fixture
def sequenced_kinematics_csv() -> Callable[..., str]:
    return _sequenced_kinematics_csv


@pytest.fixture
def base_swing() -> Callable[..., BaseOnlySwing]:
    return _base_swing


@pytest.fixture
def fake_source() -> Callable[[dict[str, bytes]], FakeSource]:
    return FakeSource
