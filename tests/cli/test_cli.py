from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from gradmatch.cli import main

EXAMPLES = Path(__file__).resolve().parents[2] / "data" / "examples"


@pytest.fixture(autouse=True)
def _isolated_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("GRADMATCH_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setenv("GRADMATCH_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("GRADMATCH_CONFIGS_DIR", str(tmp_path / "configs"))
    monkeypatch.setenv("GRADMATCH_DATA_DIR", str(tmp_path / "data"))
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


def _inputs() -> list[str]:
    return [
        "--graduates",
        str(EXAMPLES / "graduates.csv"),
        "--placements",
        str(EXAMPLES / "placements.csv"),
    ]


def test_show_settings_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["show-settings", "--json"])
    assert exit_code == 0

    payload = json.loads(capsys.readouterr().out)
    assert Path(payload["project_root"]) == tmp_path.resolve()
    assert payload["logs_dir"].endswith("logs")
    assert payload["random_seed"] is None


def test_run_prints_result_message(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(
        ["run", *_inputs(), "--iterations", "60", "--population-size", "20", "--seed", "3", "--json"]
    )
    assert exit_code == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["type"] == "result"
    assert set(payload["payload"]["solution"]) == {"1", "2", "3"}
    assert payload["payload"]["managerWeighting"] == 100
    assert len(payload["payload"]["evaluation"]) == 4


def test_run_table_output_and_saved_result(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output = tmp_path / "out" / "result.json"
    exit_code = main(
        ["run", *_inputs(), "--iterations", "10", "--seed", "1", "--output", str(output)]
    )
    assert exit_code == 0

    printed = capsys.readouterr().out
    assert "graduate_rank" in printed
    assert "fitness:" in printed
    assert "Graduates with their first choice" in printed

    saved = json.loads(output.read_text(encoding="utf-8"))
    assert saved["type"] == "result"


def test_run_reads_yaml_config_and_cli_overrides(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "run.yaml"
    config.write_text("iterations: 5\npopulation_size: 4\nmanager_weighting: 30\n", encoding="utf-8")

    exit_code = main(
        ["run", *_inputs(), "--config", str(config), "--manager-weighting", "0", "--seed", "8", "--json"]
    )
    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["payload"]["managerWeighting"] == 0


def test_evaluate_accepts_plain_mapping(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    solution = tmp_path / "solution.json"
    solution.write_text(json.dumps({"1": 2, "2": 2, "3": 1}), encoding="utf-8")

    exit_code = main(["evaluate", *_inputs(), "--solution", str(solution)])
    assert exit_code == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == "Graduates with their first choice: 2/3"
    assert lines[2] == "Managers with their first choice: 1/3"


def test_evaluate_accepts_saved_result(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    saved = tmp_path / "result.json"
    saved.write_text(
        json.dumps({"type": "result", "payload": {"solution": {"1": 2, "2": 2, "3": 1}}}),
        encoding="utf-8",
    )

    exit_code = main(["evaluate", *_inputs(), "--solution", str(saved), "--json"])
    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["type"] == "evaluate"
    assert payload["payload"][1] == "Graduates with one of their top 2 choices: 3/3"


def test_missing_input_returns_error_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(
        [
            "run",
            "--graduates",
            str(tmp_path / "absent.csv"),
            "--placements",
            str(EXAMPLES / "placements.csv"),
        ]
    )
    assert exit_code == 2
    assert "not found" in capsys.readouterr().err


def test_invalid_weighting_returns_error_code(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["run", *_inputs(), "--iterations", "2", "--manager-weighting", "150"])
    assert exit_code == 2
    assert "manager_weighting" in capsys.readouterr().err


def test_structured_run_logs_carry_run_fields(tmp_path: Path) -> None:
    exit_code = main(
        ["--structured-logs", "run", *_inputs(), "--iterations", "4", "--seed", "6", "--json"]
    )
    assert exit_code == 0

    records = [
        json.loads(line)
        for line in (tmp_path / "logs" / "gradmatch.log").read_text(encoding="utf-8").splitlines()
    ]
    finished = [r for r in records if r["message"].startswith("Genetic search finished")]
    assert finished
    assert finished[-1]["command"] == "run"
    assert finished[-1]["seed"] == 6
    assert finished[-1]["iterations"] == 4
