from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from swing_kinetics.pipeline import ENERGY_RESOURCE, ScoringRequest, score_session
from swing_kinetics.presets import preferred_scoring_model
from swing_kinetics.results_contract import (
    build_session_record,
    data_quality_label,
    load_results_contract,
    write_results_contract,
)


@pytest.fixture
def steady_result(fake_source, constant_energy_csv):
    source = fake_source({"me.csv": constant_energy_csv(5).encode("utf-8")})
    request = ScoringRequest(player_id="player-7", download_urls={ENERGY_RESOURCE: ["me.csv"]})
    return score_session(request, source=source)


def test_result_dict_shape(steady_result) -> None:
    payload = steady_result.to_dict()
    assert payload["scores"] == {"brain": 80, "body": 47, "bat": 36, "ball": 80, "overall": 55}
    assert payload["leak"]["type"] == "clean_transfer"
    assert payload["components"] == {"ground_flow": 50, "core_flow": 44, "upper_flow": 36}
    assert payload["data_quality"]["swing_count"] == 5
    assert isinstance(payload["data_quality"]["warnings"], list)
    assert payload["kinetic_potential"]["has_projections"] is True


def test_session_record_fields(steady_result) -> None:
    record = build_session_record(
        steady_result, session_date=pd.Timestamp("2026-03-01T12:00:00", tz="UTC")
    )
    assert record["session_date"] == "2026-03-01T12:00:00+00:00"
    assert record["overall_score"] == 55
    assert record["overall_grade"] == "Above Avg"
    assert record["leak_type"] == "clean_transfer"
    assert record["data_quality"] == "good"


def test_data_quality_label() -> None:
    assert data_quality_label(6) == "good"
    assert data_quality_label(3) == "fair"
    assert data_quality_label(1) == "limited"


def test_results_contract_round_trip(steady_result, tmp_path: Path) -> None:
    model = preferred_scoring_model()
    path = write_results_contract(
        steady_result,
        model=model,
        output_dir=tmp_path / "run",
        inputs={ENERGY_RESOURCE: ["me.csv"]},
    )
    assert path == tmp_path / "run" / "results.json"

    contract = load_results_contract(tmp_path / "run")
    assert contract["model"]["name"] == model.name
    assert contract["inputs"] == {ENERGY_RESOURCE: ["me.csv"]}
    assert contract["thresholds"]["score_bands"]["legs_ke"] == {
        "min": 100.0,
        "max": 500.0,
        "invert": False,
    }
    assert contract["thresholds"]["bat_speed_clamps_mph"]["youth"] == [45.0, 85.0]
    assert contract["result"]["scores"]["overall"] == 55
    assert contract["session_record"]["player_id"] == "player-7"


def test_load_missing_contract_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_results_contract(tmp_path)
