"""Tests for configuration loading and validation module."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from gradmatch.config.loader import ConfigError, _resolve_config_path, load_config, save_config
from gradmatch.config.schemas import RunConfig


@pytest.fixture
def run_config_file(tmp_path: Path) -> Path:
    config_file = tmp_path / "run.yaml"
    config_file.write_text(
        yaml.safe_dump({"iterations": 40, "population_size": 12, "manager_weighting": 25}),
        encoding="utf-8",
    )
    return config_file


def test_resolve_absolute_existing_path(run_config_file: Path):
    resolved = _resolve_config_path(run_config_file)
    assert resolved == run_config_file
    assert resolved.is_absolute()


def test_resolve_relative_to_project_root(tmp_path: Path):
    config_dir = tmp_path / "configs"
    config_dir.mkdir()
    (config_dir / "run.yaml").write_text("iterations: 5", encoding="utf-8")

    resolved = _resolve_config_path("configs/run.yaml", project_root=tmp_path)
    assert resolved == config_dir / "run.yaml"


def test_resolve_relative_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    (tmp_path / "local.yaml").write_text("iterations: 5", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    resolved = _resolve_config_path("local.yaml", project_root=tmp_path / "elsewhere")
    assert resolved == (tmp_path / "local.yaml").resolve()


def test_resolve_nonexistent_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        _resolve_config_path("missing.yaml", project_root=tmp_path)


def test_load_config_valid_yaml(run_config_file: Path):
    config = load_config(run_config_file, RunConfig)
    assert config.iterations == 40
    assert config.population_size == 12
    assert config.manager_weighting == 25
    assert config.elite_count == 2


def test_load_config_invalid_yaml_strict(tmp_path: Path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("iterations: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid YAML syntax"):
        load_config(broken, RunConfig)


def test_load_config_empty_file_raises(tmp_path: Path):
    empty = tmp_path / "empty.yaml"
    empty.touch()
    with pytest.raises(ConfigError, match="Empty configuration file"):
        load_config(empty, RunConfig)


def test_load_config_missing_file_strict(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config("nope.yaml", RunConfig, project_root=tmp_path)


def test_load_config_missing_file_non_strict(tmp_path: Path):
    config = load_config("nope.yaml", RunConfig, project_root=tmp_path, strict=False)
    assert config == RunConfig()


@pytest.mark.parametrize(
    "payload",
    [{"manager_weighting": 150}, {"iterations": 0}, {"mutation_prob": 1.5}, {"typo": 1}],
)
def test_load_config_validation_error_strict(tmp_path: Path, payload: dict):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text(yaml.safe_dump(payload), encoding="utf-8")
    with pytest.raises(ConfigError, match="validation failed"):
        load_config(config_file, RunConfig)


def test_load_config_validation_error_non_strict(tmp_path: Path):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("manager_weighting: -3\n", encoding="utf-8")
    config = load_config(config_file, RunConfig, strict=False)
    assert config.manager_weighting == 100


def test_save_and_load_roundtrip(tmp_path: Path):
    original = RunConfig(iterations=7, population_size=3, rebalance_quotas=True, seed=5)
    written = save_config(original, "nested/run.yaml", project_root=tmp_path)

    assert written == tmp_path / "nested" / "run.yaml"
    assert load_config(written, RunConfig) == original


def test_save_config_skips_unset_seed(tmp_path: Path):
    written = save_config(RunConfig(), tmp_path / "run.yaml")
    data = yaml.safe_load(written.read_text(encoding="utf-8"))
    assert "seed" not in data
    assert data["population_size"] == 10


def test_example_config_validates():
    project_root = Path(__file__).resolve().parents[2]
    config = load_config("configs/run_example.yaml", RunConfig, project_root=project_root)
    assert config.population_size == 50
    assert config.rebalance_quotas is False
