from __future__ import annotations

import json
from pathlib import Path

import pytest

from fers_planner.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL, main
from fers_planner.config.loader import CONFIG_ENV_VAR


def test_import_writes_record_to_stdout(intake_workbook: Path, intake_fields, capsys):
    code = main(["import", str(intake_workbook)])
    captured = capsys.readouterr()
    assert code == EXIT_SUCCESS_ALL
    record = json.loads(captured.out)
    assert record["high_3_salary"] == "100000"
    assert record["inflation_rate"] == "2.5"
    assert f"INFO intake.xlsx: Imported {len(intake_fields)} fields — review and save." in captured.err
    assert f"SUMMARY files=1/1 success=1 failed=0 fields={len(intake_fields)}" in captured.err
    assert captured.err.count("SUMMARY") == 1


def test_import_merges_over_base_and_writes_output(intake_workbook: Path, temp_workdir: Path, capsys):
    base = temp_workdir / "scenario.json"
    base.write_text(json.dumps({"current_salary": "1", "tsp_fund_l_name": "L 2035"}), encoding="utf-8")
    out = temp_workdir / "out" / "merged.json"

    code = main(["import", str(intake_workbook), "--base", str(base), "--output", str(out)])
    captured = capsys.readouterr()
    assert code == EXIT_SUCCESS_ALL
    merged = json.loads(out.read_text(encoding="utf-8"))
    assert merged["current_salary"] == "98000"
    assert merged["tsp_fund_l_name"] == "L 2035"
    # logs go to stdout when the record goes to a file
    assert "SUMMARY files=1/1" in captured.out


def test_partial_failure_exit_code(intake_workbook: Path, temp_workdir: Path, capsys):
    broken = temp_workdir / "data" / "broken.xlsx"
    broken.write_bytes(b"nope")
    code = main(["import", str(intake_workbook), str(broken)])
    captured = capsys.readouterr()
    assert code == EXIT_PARTIAL_FAILURE
    assert "ERROR broken.xlsx:" in captured.err
    assert "failed=1" in captured.err
    assert list((temp_workdir / "logs").glob("errors-*.log"))


def test_missing_base_is_fatal(intake_workbook: Path, temp_workdir: Path, capsys):
    code = main(["import", str(intake_workbook), "--base", str(temp_workdir / "none.json")])
    assert code == EXIT_FATAL
    assert "ERROR base: scenario file not found" in capsys.readouterr().err


def test_bad_config_is_fatal(intake_workbook: Path, temp_workdir: Path, capsys):
    cfg = temp_workdir / "config" / "planner.yml"
    cfg.write_text("unknown_key: 1\n", encoding="utf-8")
    code = main(["import", str(intake_workbook)])
    assert code == EXIT_FATAL
    assert "ERROR config: config validation failed" in capsys.readouterr().err


def test_config_path_from_dotenv(intake_workbook: Path, temp_workdir: Path, monkeypatch, capsys):
    # register the variable with monkeypatch so whatever .env sets is undone
    monkeypatch.setenv(CONFIG_ENV_VAR, "placeholder")
    monkeypatch.delenv(CONFIG_ENV_VAR)
    (temp_workdir / ".env").write_text(f"{CONFIG_ENV_VAR}=config/missing.yml\n", encoding="utf-8")
    assert main(["import", str(intake_workbook)]) == EXIT_FATAL
    assert "config file not found" in capsys.readouterr().err


def test_preview(temp_workdir: Path, example_scenario: dict[str, str], capsys):
    path = temp_workdir / "scenario.json"
    path.write_text(json.dumps(example_scenario), encoding="utf-8")
    code = main(["preview", str(path), "--as-of", "2026-10-19"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS_ALL
    assert "Retirement Eligibility" in out
    assert "36 Years 4 Months" in out
    assert "$41,250" in out


def test_preview_rejects_non_object(temp_workdir: Path, capsys):
    path = temp_workdir / "scenario.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert main(["preview", str(path)]) == EXIT_FATAL
    assert "must hold a JSON object" in capsys.readouterr().out


def test_bad_as_of_date_exits_with_usage_error(temp_workdir: Path):
    with pytest.raises(SystemExit) as e:
        main(["preview", "scenario.json", "--as-of", "tomorrow"])
    assert e.value.code == 2


def test_debug_flag(intake_workbook: Path, capsys):
    assert main(["--debug", "import", str(intake_workbook)]) == EXIT_SUCCESS_ALL
    err = capsys.readouterr().err
    assert "DEBUG debug mode enabled" in err
    assert "DEBUG imported fields:" in err
