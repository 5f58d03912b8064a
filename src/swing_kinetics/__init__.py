"""Swing kinetics scoring package."""

from .config import (
    FetchSettings,
    ProjectPaths,
    SwingKineticsConfig,
    clear_project_config_cache,
    default_project_config,
    default_project_paths,
    find_project_root,
    resolve_output_dir,
)
from .energy import MESwingMetrics, extract_energy_metrics
from .ingest import (
    CsvFetchError,
    CsvFetcher,
    build_frame_table,
    cap_csv_text,
    decode_csv_bytes,
    detect_file_family,
    parse_csv_rows,
)
from .kinematics import IKSwingMetrics, extract_kinematic_metrics
from .leaks import LeakClassification, LeakInputs, LeakType, classify_leak, summarize_leak_inputs
from .metrics import ScoreBand, coefficient_of_variation, to_2080_scale
from .pipeline import (
    MissingEnergyDataError,
    PlayerProfile,
    ScoringRequest,
    SessionDataPayload,
    score_from_session_data,
    score_session,
    score_swing_rows,
)
from .presets import ScoringModelPreset, preferred_scoring_model
from .projections import KineticPotential, KineticProjections, project_delivery, project_kinetic_potential
from .results_contract import (
    SessionScoreResult,
    build_session_record,
    load_results_contract,
    write_results_contract,
)
from .scoring import ScoreCard, compute_scores
from .segmentation import SwingGroups, WindowConfig, group_swings, select_analysis_window
from .swings import BaseOnlySwing, DataQuality, EnrichedSwing, assemble_swings

__all__ = [
    "BaseOnlySwing",
    "CsvFetchError",
    "CsvFetcher",
    "DataQuality",
    "EnrichedSwing",
    "FetchSettings",
    "IKSwingMetrics",
    "KineticPotential",
    "KineticProjections",
    "LeakClassification",
    "LeakInputs",
    "LeakType",
    "MESwingMetrics",
    "MissingEnergyDataError",
    "PlayerProfile",
    "ProjectPaths",
    "ScoreBand",
    "ScoreCard",
    "ScoringModelPreset",
    "ScoringRequest",
    "SessionDataPayload",
    "SessionScoreResult",
    "SwingGroups",
    "SwingKineticsConfig",
    "WindowConfig",
    "assemble_swings",
    "build_frame_table",
    "build_session_record",
    "cap_csv_text",
    "classify_leak",
    "clear_project_config_cache",
    "coefficient_of_variation",
    "compute_scores",
    "decode_csv_bytes",
    "default_project_config",
    "default_project_paths",
    "detect_file_family",
    "extract_energy_metrics",
    "extract_kinematic_metrics",
    "find_project_root",
    "group_swings",
    "load_results_contract",
    "parse_csv_rows",
    "preferred_scoring_model",
    "project_delivery",
    "project_kinetic_potential",
    "resolve_output_dir",
    "score_from_session_data",
    "score_session",
    "score_swing_rows",
    "select_analysis_window",
    "summarize_leak_inputs",
    "to_2080_scale",
    "write_results_contract",
]
