"""Scoring result container, persistence record, and `results.json` contract."""

from __future__ import annotations

from dataclasses import dataclass
import json
import math
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .leaks import LeakClassification
from .presets import ScoringModelPreset
from .projections import KineticPotential, KineticProjections
from .scoring import ScoreCard
from .swings import DataQuality


@dataclass(frozen=True)
class SessionScoreResult:
    """Terminal output of one scoring run, handed verbatim to persistence."""

    player_id: str
    scores: ScoreCard
    leak: LeakClassification
    projections: KineticProjections
    kinetic_potential: KineticPotential | None
    data_quality: DataQuality
    swing_count: int
    source: str = "csv"

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "source": self.source,
            "scores": {
                "brain": self.scores.brain,
                "body": self.scores.body,
                "bat": self.scores.bat,
                "ball": self.scores.ball,
                "overall": self.scores.composite,
            },
            "grades": dict(self.scores.grades),
            "components": self.scores.components.to_dict(),
            "raw_metrics": dict(self.scores.raw_metrics),
            "leak": self.leak.to_dict(),
            "projections": self.projections.to_dict(),
            "kinetic_potential": (
                self.kinetic_potential.to_dict() if self.kinetic_potential is not None else None
            ),
            "data_quality": self.data_quality.to_dict(),
            "swing_count": self.swing_count,
        }


def data_quality_label(swing_count: int) -> str:
    """Coarse sample-size label stored alongside persisted sessions."""
    if swing_count >= 5:
        return "good"
    if swing_count >= 3:
        return "fair"
    return "limited"


def build_session_record(
    result: SessionScoreResult,
    *,
    session_date: pd.Timestamp | None = None,
) -> dict[str, Any]:
    """Flatten a result into the row shape the session store persists."""
    scores = result.scores
    when = session_date if session_date is not None else pd.Timestamp.now(tz="UTC")
    return _jsonify_obj(
        {
            "player_id": result.player_id,
            "session_date": when.isoformat(),
            "brain_score": scores.brain,
            "body_score": scores.body,
            "bat_score": scores.bat,
            "ball_score": scores.ball,
            "overall_score": scores.composite,
            "brain_grade": scores.grades["brain"],
            "body_grade": scores.grades["body"],
            "bat_grade": scores.grades["bat"],
            "ball_grade": scores.grades["ball"],
            "overall_grade": scores.grades["overall"],
            "ground_flow": scores.components.ground_flow,
            "core_flow": scores.components.core_flow,
            "upper_flow": scores.components.upper_flow,
            "leak_type": result.leak.type.value,
            "leak_caption": result.leak.caption,
            "leak_training": result.leak.training,
            "swing_count": result.swing_count,
            "data_quality": data_quality_label(result.swing_count),
            "raw_metrics": dict(scores.raw_metrics),
            "projections": result.projections.to_dict(),
            "kinetic_potential": (
                result.kinetic_potential.to_dict() if result.kinetic_potential is not None else None
            ),
        }
    )


def write_results_contract(
    result: SessionScoreResult,
    *,
    model: ScoringModelPreset,
    output_dir: str | Path,
    inputs: dict[str, list[str]] | None = None,
) -> Path:
    """Write `results.json` with model thresholds, inputs, and the full result."""
    root = Path(output_dir)
    root.mkdir(parents=True, exist_ok=True)
    contract_path = root / "results.json"

    contract: dict[str, Any] = {
        "generated_at_utc": pd.Timestamp.now(tz="UTC").isoformat(),
        "output_dir": str(root),
        "inputs": inputs or {},
        "model": {
            "name": model.name,
            "rationale": model.rationale,
        },
        "thresholds": {
            "score_bands": {
                name: {
                    "min": band.min_value,
                    "max": band.max_value,
                    "invert": band.invert,
                }
                for name, band in model.bands.items()
            },
            "weights": {
                "body": model.weights.body,
                "bat": model.weights.bat,
                "brain": model.weights.brain,
                "ball": model.weights.ball,
            },
            "min_swings_for_cv": model.min_swings_for_cv,
            "bat_speed_clamps_mph": {
                level: [clamp.min_mph, clamp.max_mph]
                for level, clamp in model.bat_speed_clamps.items()
            },
        },
        "result": result.to_dict(),
        "session_record": build_session_record(result),
    }

    contract_path.write_text(json.dumps(_jsonify_obj(contract), indent=2) + "\n", encoding="utf-8")
    return contract_path


def load_results_contract(output_dir: str | Path) -> dict[str, Any]:
    """Load `results.json` from an output directory."""
    contract_path = Path(output_dir) / "results.json"
    if not contract_path.exists():
        raise FileNotFoundError(f"Missing results contract: {contract_path}")
    return json.loads(contract_path.read_text(encoding="utf-8"))


def _jsonify_obj(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonify_obj(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify_obj(v) for v in value]
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value
