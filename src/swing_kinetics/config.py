"""Centralized engine configuration and path resolution."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path
import tomllib
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import DEFAULT_MAX_CSV_CHARS


DEFAULT_OUTPUT_DIR = "outputs"
DEFAULT_CONFIG_FILE = "config/swing_kinetics.yaml"
DEFAULT_FETCH_TIMEOUT_S = 30.0


class FetchSettings(BaseModel):
    """Limits applied when pulling CSV resources."""

    max_chars: int = DEFAULT_MAX_CSV_CHARS
    timeout_s: float = DEFAULT_FETCH_TIMEOUT_S

    @field_validator("max_chars")
    @classmethod
    def _positive_max_chars(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_chars must be > 0")
        return value

    @field_validator("timeout_s")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_s must be > 0")
        return value


class LoggingSettings(BaseModel):
    """Log level and optional log file."""

    level: str = "INFO"
    log_file: str | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        cleaned = value.strip().upper()
        if cleaned not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return cleaned


class PathSettings(BaseModel):
    """Where scoring runs write `results.json`."""

    output_dir: str = DEFAULT_OUTPUT_DIR

    @field_validator("output_dir")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("path values must not be empty")
        return cleaned


class RuntimeSettings(BaseModel):
    """Side-effect switches for CLI runs."""

    create_output_dirs: bool = False


class SwingKineticsConfig(BaseModel):
    """Typed configuration model for engine behavior."""

    model_config = ConfigDict(extra="ignore")
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)


@dataclass(frozen=True)
class ProjectPaths:
    """Absolute locations derived from the validated config."""

    project_root: Path
    output_dir: Path


def find_project_root(start: Path | None = None) -> Path:
    """Locate the checkout holding `pyproject.toml`; `SWING_KINETICS_PROJECT_ROOT` wins."""
    env_root = os.getenv("SWING_KINETICS_PROJECT_ROOT")
    if env_root:
        return _resolve_path(Path(env_root), Path.cwd())

    cursor = (start or Path.cwd()).resolve()
    for candidate in (cursor, *cursor.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate

    module_cursor = Path(__file__).resolve()
    for candidate in (module_cursor, *module_cursor.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate

    # Installed without a checkout: fall back to the working directory.
    return Path.cwd().resolve()


@lru_cache(maxsize=1)
def default_project_config() -> SwingKineticsConfig:
    """Defaults < pyproject < YAML file < env vars, validated once and cached."""
    project_root = find_project_root()
    merged = _load_merged_config(project_root)
    try:
        return SwingKineticsConfig.model_validate(merged)
    except ValidationError as exc:
        raise ValueError(f"Invalid swing_kinetics config: {exc}") from exc


@lru_cache(maxsize=1)
def default_project_paths() -> ProjectPaths:
    """Resolved root and output directory, creating the latter when configured to."""
    project_root = find_project_root()
    config = default_project_config()
    output_dir = _resolve_path(Path(config.paths.output_dir), project_root)

    if config.runtime.create_output_dirs:
        output_dir.mkdir(parents=True, exist_ok=True)

    return ProjectPaths(project_root=project_root, output_dir=output_dir)


def resolve_output_dir(output_dir: str | Path | None = None) -> Path:
    """Absolute results directory; relative paths hang off the project root."""
    paths = default_project_paths()
    if output_dir is None:
        return paths.output_dir
    return _resolve_path(Path(output_dir), paths.project_root)


def clear_project_config_cache() -> None:
    """Drop the cached config and paths so the next call re-reads env vars and files."""
    default_project_config.cache_clear()
    default_project_paths.cache_clear()


def _load_merged_config(project_root: Path) -> dict[str, Any]:
    base_cfg = {
        "fetch": {
            "max_chars": DEFAULT_MAX_CSV_CHARS,
            "timeout_s": DEFAULT_FETCH_TIMEOUT_S,
        },
        "logging": {
            "level": "INFO",
            "log_file": None,
        },
        "paths": {
            "output_dir": DEFAULT_OUTPUT_DIR,
        },
        "runtime": {
            "create_output_dirs": False,
        },
    }

    merged = OmegaConf.merge(
        base_cfg,
        _load_pyproject_config(project_root),
        _load_file_config(project_root),
        _load_env_overrides(),
    )
    raw = OmegaConf.to_container(merged, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_file_config(project_root: Path) -> dict[str, Any]:
    env_path = os.getenv("SWING_KINETICS_CONFIG_FILE")
    if env_path:
        cfg_path = _resolve_path(Path(env_path), project_root)
        if not cfg_path.exists():
            raise FileNotFoundError(
                f"SWING_KINETICS_CONFIG_FILE points to missing file: {cfg_path}"
            )
    else:
        cfg_path = project_root / DEFAULT_CONFIG_FILE
        if not cfg_path.exists():
            return {}

    loaded = OmegaConf.load(cfg_path)
    raw = OmegaConf.to_container(loaded, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_env_overrides() -> dict[str, Any]:
    fetch: dict[str, Any] = {}
    if env_max_chars := os.getenv("SWING_KINETICS_MAX_CSV_CHARS"):
        fetch["max_chars"] = int(env_max_chars)
    if env_timeout := os.getenv("SWING_KINETICS_FETCH_TIMEOUT_S"):
        fetch["timeout_s"] = float(env_timeout)

    logging_cfg: dict[str, Any] = {}
    if env_level := os.getenv("SWING_KINETICS_LOG_LEVEL"):
        logging_cfg["level"] = env_level
    if env_log_file := os.getenv("SWING_KINETICS_LOG_FILE"):
        logging_cfg["log_file"] = env_log_file

    paths: dict[str, Any] = {}
    if env_output := os.getenv("SWING_KINETICS_OUTPUT_DIR"):
        paths["output_dir"] = env_output

    runtime: dict[str, Any] = {}
    if env_create_output := os.getenv("SWING_KINETICS_CREATE_OUTPUT_DIRS"):
        runtime["create_output_dirs"] = _parse_env_bool(env_create_output)

    overrides: dict[str, Any] = {}
    for key, section in (
        ("fetch", fetch),
        ("logging", logging_cfg),
        ("paths", paths),
        ("runtime", runtime),
    ):
        if section:
            overrides[key] = section
    return overrides


def _resolve_path(path: Path, project_root: Path) -> Path:
    if path.is_absolute():
        return path.expanduser().resolve()
    return (project_root / path).resolve()


def _parse_env_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(
        "SWING_KINETICS_CREATE_OUTPUT_DIRS must be one of: "
        "1,true,yes,on,0,false,no,off"
    )


def _load_pyproject_config(project_root: Path) -> dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as handle:
        pyproject = tomllib.load(handle)

    tool_cfg = pyproject.get("tool", {})
    engine_cfg = tool_cfg.get("swing_kinetics", {})
    return engine_cfg if isinstance(engine_cfg, dict) else {}
