from __future__ import annotations

from pathlib import Path

import pytest

from gradmatch.config.settings import Settings, get_settings, load_env_file, reset_settings_cache


def test_load_env_file_parses_key_value(tmp_path: Path) -> None:
    env_path = tmp_path / "custom.env"
    env_path.write_text(
        """
        # comment
        GRADMATCH_ENVIRONMENT=production
        GRADMATCH_RANDOM_SEED=101
        INVALID_LINE
        """.strip(),
        encoding="utf-8",
    )

    data = load_env_file(env_path)
    assert data["GRADMATCH_ENVIRONMENT"] == "production"
    assert data["GRADMATCH_RANDOM_SEED"] == "101"
    assert "INVALID_LINE" not in data


def test_load_env_file_missing_returns_empty(tmp_path: Path) -> None:
    assert dict(load_env_file(tmp_path / "absent.env")) == {}


def test_defaults_resolve_under_project_root(tmp_path: Path) -> None:
    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})

    assert settings.project_root == tmp_path.resolve()
    assert settings.data_dir == tmp_path.resolve() / "data"
    assert settings.configs_dir == tmp_path.resolve() / "configs"
    assert settings.logs_dir == tmp_path.resolve() / "logs"
    assert settings.environment == "development"
    assert settings.random_seed is None
    assert not settings.structured_logging
    assert not settings.is_production


def test_project_env_file_is_read(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "GRADMATCH_RANDOM_SEED=123\nGRADMATCH_STRUCTURED_LOGGING=true\n",
        encoding="utf-8",
    )

    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})

    assert settings.random_seed == 123
    assert settings.structured_logging


def test_overrides_beat_environment_variables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("GRADMATCH_DATA_DIR", "env_data")
    monkeypatch.setenv("GRADMATCH_STRUCTURED_LOGGING", "1")
    monkeypatch.setenv("GRADMATCH_ENVIRONMENT", "production")

    settings = Settings.from_env(
        overrides={
            "project_root": tmp_path,
            "LOGS_DIR": "logs_alt",
            "STRUCTURED_LOGGING": "false",
        }
    )

    assert settings.data_dir == tmp_path.resolve() / "env_data"
    assert settings.logs_dir == tmp_path.resolve() / "logs_alt"
    assert not settings.structured_logging
    assert settings.is_production


def test_blank_seed_means_no_seed(tmp_path: Path) -> None:
    settings = Settings.from_env(
        overrides={"project_root": tmp_path}, environ={"GRADMATCH_RANDOM_SEED": "none"}
    )
    assert settings.random_seed is None


def test_invalid_boolean_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        Settings.from_env(
            overrides={"project_root": tmp_path},
            environ={"GRADMATCH_STRUCTURED_LOGGING": "maybe"},
        )


def test_unknown_override_raises(tmp_path: Path) -> None:
    with pytest.raises(KeyError):
        Settings.from_env(overrides={"project_root": tmp_path, "UNKNOWN": 10})


def test_get_settings_caches_until_reset(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GRADMATCH_PROJECT_ROOT", str(tmp_path))
    first = get_settings()
    assert get_settings() is first

    reset_settings_cache()
    assert get_settings() is not first
    assert get_settings(overrides={"ENVIRONMENT": "staging"}).environment == "staging"
