"""Scoring run orchestration: fetch exports, extract swings, score, and package."""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import FetchSettings
from .energy import extract_energy_metrics
from .ingest import (
    ByteSource,
    CsvFetchError,
    CsvFetcher,
    build_frame_table,
    read_concatenated_rows,
    read_csv_rows,
)
from .kinematics import extract_kinematic_metrics, normalize_hand
from .leaks import classify_leak, classify_leak_from_flows, summarize_leak_inputs
from .metrics import round_half_up
from .presets import ScoringModelPreset, preferred_scoring_model
from .projections import KineticProjections, project_delivery, project_kinetic_potential
from .results_contract import SessionScoreResult
from .scoring import FlowComponents, ScoreCard, composite_score, compute_scores, grade_scores
from .swings import DataQuality, assemble_swings, assess_data_quality

logger = logging.getLogger(__name__)

ENERGY_RESOURCE = "momentum-energy"
KINEMATICS_RESOURCE = "inverse-kinematics"


class MissingEnergyDataError(ValueError):
    """The required energy export is missing, empty, or yields no analyzable swings."""


class PlayerProfile(BaseModel):
    """Read-only player attributes used as scoring context."""

    model_config = ConfigDict(extra="ignore")
    handedness: str | None = None
    level: str | None = None
    height_inches: float | None = None
    weight_lbs: float | None = None

    @field_validator("height_inches", "weight_lbs")
    @classmethod
    def _non_positive_is_unknown(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            return None
        return value


class SessionDataPayload(BaseModel):
    """Pre-aggregated scores used when no CSV exports are supplied."""

    model_config = ConfigDict(extra="ignore")
    brain_score: float = 50
    body_score: float = 50
    bat_score: float = 50
    ball_score: float = 50
    ground_flow: float = 55
    core_flow: float = 55
    upper_flow: float = 55
    swing_count: int = 1


class ScoringRequest(BaseModel):
    """One scoring invocation: CSV locators per resource family, or a fallback payload."""

    model_config = ConfigDict(extra="ignore")
    player_id: str
    session_id: str | None = None
    download_urls: dict[str, list[str]] = Field(default_factory=dict)
    session_data: SessionDataPayload | None = None

    @field_validator("player_id")
    @classmethod
    def _player_id_required(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("player_id is required")
        return cleaned

    @classmethod
    def from_payload(cls, payload: dict) -> "ScoringRequest":
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(f"Invalid scoring request: {exc}") from exc

    @property
    def has_csv_sources(self) -> bool:
        return any(self.download_urls.values())


def score_swing_rows(
    player_id: str,
    me_rows: Sequence[dict[str, str]],
    ik_rows: Sequence[dict[str, str]] | None = None,
    player: PlayerProfile | None = None,
    *,
    model: ScoringModelPreset | None = None,
    extra_warnings: Sequence[str] = (),
) -> SessionScoreResult:
    """Score one set of parsed energy rows, optionally enriched with kinematic rows."""
    active = model or preferred_scoring_model()
    profile = player or PlayerProfile()
    warnings = list(extra_warnings)

    if not me_rows:
        raise MissingEnergyDataError("ME file required for 4B scoring")

    me_frames, me_parse_warnings = build_frame_table(me_rows, "me")
    warnings.extend(me_parse_warnings)
    energy = extract_energy_metrics(me_frames)
    if not energy.swings:
        raise MissingEnergyDataError("No valid swings found in ME file")

    kinematic_swings = {}
    if ik_rows:
        ik_frames, ik_parse_warnings = build_frame_table(ik_rows, "ik")
        warnings.extend(ik_parse_warnings)
        kinematic_swings = extract_kinematic_metrics(
            ik_frames, normalize_hand(profile.handedness)
        ).swings

    swings = assemble_swings(energy.swings, kinematic_swings)
    quality = assess_data_quality(
        swings,
        has_ik_data=bool(kinematic_swings),
        has_contact_event=energy.has_contact_event,
        incomplete_swings=energy.groups.short_movement_ids,
        min_swings_for_cv=active.min_swings_for_cv,
        extra_warnings=warnings,
    )

    scores = compute_scores(swings, quality, active)
    leak = classify_leak(summarize_leak_inputs(swings, active.leak_cutoffs), active.leak_cutoffs)
    projections = project_delivery(swings, leak.type, profile.level, active)
    potential = project_kinetic_potential(
        swings, profile.weight_lbs, profile.height_inches, active
    )

    logger.info(
        "Player %s: overall=%d swings=%d leak=%s",
        player_id,
        scores.composite,
        len(swings),
        leak.type.value,
    )
    if potential.has_projections:
        logger.info(
            "Kinetic potential: current=%.1fmph ceiling=%.1fmph left=%.1fmph",
            potential.estimated_current_bat_speed_mph,
            potential.projected_bat_speed_ceiling_mph,
            potential.mph_left_on_table,
        )

    return SessionScoreResult(
        player_id=player_id,
        scores=scores,
        leak=leak,
        projections=projections,
        kinetic_potential=potential,
        data_quality=quality,
        swing_count=len(swings),
    )


def _whole(value: float) -> int:
    return int(round_half_up(value))


def score_from_session_data(
    player_id: str,
    payload: SessionDataPayload | None,
    *,
    model: ScoringModelPreset | None = None,
) -> SessionScoreResult:
    """Package a pre-aggregated payload without CSV analysis."""
    active = model or preferred_scoring_model()
    data = payload or SessionDataPayload()
    composite = composite_score(
        data.body_score, data.bat_score, data.brain_score, data.ball_score, active.weights
    )
    sub_scores = {
        "brain": _whole(data.brain_score),
        "body": _whole(data.body_score),
        "bat": _whole(data.bat_score),
        "ball": _whole(data.ball_score),
    }
    scores = ScoreCard(
        **sub_scores,
        composite=composite,
        grades=grade_scores({**sub_scores, "overall": composite}, active),
        components=FlowComponents(
            _whole(data.ground_flow), _whole(data.core_flow), _whole(data.upper_flow)
        ),
    )
    return SessionScoreResult(
        player_id=player_id,
        scores=scores,
        leak=classify_leak_from_flows(data.ground_flow, data.core_flow, data.upper_flow),
        projections=KineticProjections(
            potential_delivery_efficiency_pct=active.projection.target_delivery_efficiency_pct
        ),
        kinetic_potential=None,
        data_quality=DataQuality(
            swing_count=data.swing_count,
            warnings=("Using provided session_data (no CSV)",),
        ),
        swing_count=data.swing_count,
        source="session_data",
    )


def score_session(
    request: ScoringRequest,
    player: PlayerProfile | None = None,
    *,
    source: ByteSource | None = None,
    fetch_settings: FetchSettings | None = None,
    model: ScoringModelPreset | None = None,
) -> SessionScoreResult:
    """
    Run one scoring invocation end to end.

    Energy exports are required: a fetch failure propagates as `CsvFetchError`
    and an empty export raises `MissingEnergyDataError`. Kinematics exports are
    optional: each failed locator is logged and recorded as a warning.
    """
    if not request.has_csv_sources:
        logger.info("No CSV sources for player %s; using session_data", request.player_id)
        return score_from_session_data(request.player_id, request.session_data, model=model)

    settings = fetch_settings or FetchSettings()
    byte_source = source or CsvFetcher(timeout_s=settings.timeout_s)

    me_locators = request.download_urls.get(ENERGY_RESOURCE, [])
    if not me_locators:
        raise MissingEnergyDataError(f"No {ENERGY_RESOURCE} sources supplied")

    me_rows = read_concatenated_rows(
        me_locators, byte_source, family="me", max_chars=settings.max_chars
    )

    warnings: list[str] = []
    ik_rows: list[dict[str, str]] = []
    for idx, locator in enumerate(request.download_urls.get(KINEMATICS_RESOURCE, []), start=1):
        try:
            ik_rows.extend(
                read_csv_rows(
                    locator,
                    byte_source,
                    label=f"{KINEMATICS_RESOURCE}-{idx}",
                    max_chars=settings.max_chars,
                )
            )
        except (CsvFetchError, OSError, EOFError) as exc:
            logger.warning("IK source %d failed, skipping: %s", idx, exc)
            warnings.append(f"IK source {idx} unavailable: {exc}")

    return score_swing_rows(
        request.player_id,
        me_rows,
        ik_rows or None,
        player,
        model=model,
        extra_warnings=warnings,
    )
