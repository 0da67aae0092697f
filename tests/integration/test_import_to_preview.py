from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

from fers_planner.cli.__main__ import EXIT_SUCCESS_ALL, main
from fers_planner.services.importer import import_scenario_file
from fers_planner.services.preview import build_preview

"""End-to-end: intake workbook -> merged scenario record -> preview."""


def test_intake_workbook_drives_the_preview(intake_workbook: Path):
    outcome = import_scenario_file(intake_workbook)
    preview = build_preview(outcome.fields, today=date(2026, 10, 19))

    assert not any(s.is_placeholder for s in preview.sections)
    projection = preview.section("Proposed & Delayed Retirement")
    first_column = {row.label: row.cells[0] for row in projection.table.rows}
    assert first_column["Estimated High-3 Avg ($)"] == "$100,000"
    assert first_column["Annual Annuity (Before Reductions)"] == "$41,250"
    assert first_column["Annual Annuity – With 50% Survivor"] == "$37,125"


def test_loosely_formatted_sheet(workbook_factory):
    # labels in column B, text amounts, serial dates and percentage strings
    rows = [
        [None, "FERS or CSRS", "FERS"],
        [None, "Date of Birth", 23802],
        [None, "Retirement SCD", "6/1/1990"],
        [None, "Goal Retirment Date", datetime(2027, 6, 1)],
        [None, "High-3", "$100,000"],
        [None, "Sick Leave", "6.9 months"],
        [None, "Survivorship (0, 25%, 50%)", "50%"],
        [None, "Total TSP Balance", "$1,000"],
        [None, "Contribution Allocation", None],
        [None, "G", "25%"],
        [None, "C", "75%"],
    ]
    path = workbook_factory("data/loose.xlsx", rows)
    fields = import_scenario_file(path).fields

    assert fields["date_of_birth"] == "1965-03-01"
    assert fields["retirement_scd"] == "1990-06-01"
    assert fields["sick_leave_hours"] == "1201"
    assert fields["survivor_benefit"] == "50"
    assert fields["tsp_alloc_g_pct"] == "25"
    assert fields["tsp_alloc_c_pct"] == "75"
    assert "tsp_fund_g" not in fields

    tsp = build_preview(fields, today=date(2026, 10, 19)).section("TSP Balance")
    assert tsp.notes == []


def test_cli_import_then_preview(temp_workdir: Path, intake_workbook: Path, capsys):
    record_path = temp_workdir / "scenario.json"
    assert main(["import", str(temp_workdir / "data"), "--output", str(record_path)]) == EXIT_SUCCESS_ALL
    capsys.readouterr()

    record = json.loads(record_path.read_text(encoding="utf-8"))
    assert record["date_of_birth"] == "1965-03-01"

    assert main(["preview", str(record_path), "--as-of", "2026-10-19"]) == EXIT_SUCCESS_ALL
    out = capsys.readouterr().out
    assert "Service and Age Requirements Met" in out
    assert "$37,125" in out
