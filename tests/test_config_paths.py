from __future__ import annotations

from pathlib import Path

import pytest

from swing_kinetics.config import (
    clear_project_config_cache,
    default_project_config,
    default_project_paths,
    find_project_root,
    resolve_output_dir,
)
from swing_kinetics.constants import DEFAULT_MAX_CSV_CHARS


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    clear_project_config_cache()
    yield
    clear_project_config_cache()


def test_project_root_contains_pyproject() -> None:
    assert (find_project_root() / "pyproject.toml").exists()


def test_pyproject_defaults_load() -> None:
    config = default_project_config()
    assert config.fetch.max_chars == DEFAULT_MAX_CSV_CHARS
    assert config.fetch.timeout_s == 30.0
    assert config.logging.level == "INFO"
    assert config.paths.output_dir == "outputs"


def test_env_override_for_output_dir(monkeypatch, tmp_path: Path) -> None:
    custom_output = tmp_path / "exports"
    monkeypatch.setenv("SWING_KINETICS_OUTPUT_DIR", str(custom_output))
    clear_project_config_cache()

    assert resolve_output_dir() == custom_output.resolve()


def test_explicit_output_dir_is_resolved_against_project_root() -> None:
    resolved = resolve_output_dir("runs/latest")
    assert resolved == (find_project_root() / "runs" / "latest").resolve()


def test_env_override_for_fetch_limits(monkeypatch) -> None:
    monkeypatch.setenv("SWING_KINETICS_MAX_CSV_CHARS", "5000")
    monkeypatch.setenv("SWING_KINETICS_FETCH_TIMEOUT_S", "2.5")
    monkeypatch.setenv("SWING_KINETICS_LOG_LEVEL", "debug")
    clear_project_config_cache()

    config = default_project_config()
    assert config.fetch.max_chars == 5000
    assert config.fetch.timeout_s == 2.5
    assert config.logging.level == "DEBUG"


def test_external_yaml_config_file_override(monkeypatch, tmp_path: Path) -> None:
    custom_output = tmp_path / "yaml_exports"
    cfg = tmp_path / "swing_kinetics.yaml"
    cfg.write_text(
        "\n".join(
            [
                "fetch:",
                "  max_chars: 1234",
                "paths:",
                f"  output_dir: {custom_output.as_posix()}",
            ]
        ),
        encoding="utf-8",
    )

    monkeypatch.setenv("SWING_KINETICS_CONFIG_FILE", str(cfg))
    clear_project_config_cache()

    model = default_project_config()
    paths = default_project_paths()
    assert model.fetch.max_chars == 1234
    assert paths.output_dir == custom_output.resolve()


def test_env_beats_yaml(monkeypatch, tmp_path: Path) -> None:
    cfg = tmp_path / "swing_kinetics.yaml"
    cfg.write_text("fetch:\n  max_chars: 1234\n", encoding="utf-8")
    monkeypatch.setenv("SWING_KINETICS_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("SWING_KINETICS_MAX_CSV_CHARS", "999")
    clear_project_config_cache()

    assert default_project_config().fetch.max_chars == 999


def test_missing_config_file_raises(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SWING_KINETICS_CONFIG_FILE", str(tmp_path / "nope.yaml"))
    clear_project_config_cache()

    with pytest.raises(FileNotFoundError):
        default_project_config()


def test_invalid_config_value_raises(monkeypatch) -> None:
    monkeypatch.setenv("SWING_KINETICS_MAX_CSV_CHARS", "0")
    clear_project_config_cache()

    with pytest.raises(ValueError, match="Invalid swing_kinetics config"):
        default_project_config()


def test_create_output_dirs_runtime_flag(monkeypatch, tmp_path: Path) -> None:
    custom_output = tmp_path / "auto_created_outputs"
    monkeypatch.setenv("SWING_KINETICS_OUTPUT_DIR", str(custom_output))
    monkeypatch.setenv("SWING_KINETICS_CREATE_OUTPUT_DIRS", "true")
    clear_project_config_cache()

    paths = default_project_paths()
    assert paths.output_dir == custom_output.resolve()
    assert custom_output.exists()


def test_bad_create_output_dirs_flag_raises(monkeypatch) -> None:
    monkeypatch.setenv("SWING_KINETICS_CREATE_OUTPUT_DIRS", "maybe")
    clear_project_config_cache()

    with pytest.raises(ValueError, match="CREATE_OUTPUT_DIRS"):
        default_project_config()
