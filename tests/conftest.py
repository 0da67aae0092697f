# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

from fers_planner.logging import init as logging_init


def _write_workbook(path: Path, rows: list[list[object]], sheet_name: str = "Intake") -> Path:
    """Write ``rows`` as a header-less worksheet (column A/B labels, column C values)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


# A filled-in intake sheet laid out like the planner's questionnaire
_INTAKE_ROWS: list[list[object]] = [
    ["Key Information", None, None],
    ["FERS or CSRS", None, "fers"],
    ["Special Provisions (LEO/FF/ATC)", None, "None"],
    ["Survivorship Election", None, 0.5],
    ["Important Dates", None, None],
    ["Date of Birth", None, datetime(1965, 3, 1)],
    ["Retirement SCD", None, datetime(1990, 6, 1)],
    ["Goal Retirment Date", None, "2027-06-01"],
    ["LES - General", None, None],
    ["Current Salary", None, 98000],
    ["Estimated High-3 Salary", None, "$100,000.00"],
    ["Sick Leave Hours", None, 1200],
    ["Marital Status", None, "Married"],
    ["LES - Deductions", None, None],
    ["FEHB Bi-weekly Premium", None, "$250.55"],
    ["FEGLI Bi-weekly Premium", None, 45.1],
    ["FEGLI Code", None, "C0"],
    ["Traditional TSP Contribution (bi-weekly)", None, 500],
    ["Roth TSP Contribution (bi-weekly)", None, 100],
    ["Total TSP Balance", None, 250000],
    ["Non-taxable Roth Amount", None, 40000],
    ["TSP Balance by Fund", None, None],
    ["G", None, 100000],
    ["F", None, 20000],
    ["C", None, 80000],
    ["S", None, 30000],
    ["I", None, 20000],
    ["L Funds, if any, which one", None, None],
    ["Future Contribution Allocation (in percentages)", None, None],
    ["G", None, 0.1],
    ["F", None, 0.1],
    ["C", None, 0.5],
    ["S", None, 0.2],
    ["I", None, 0.1],
    ["L Funds, if any, which one", None, 0],
    ["Social Security", None, None],
    ["SS Benefit at 62", None, 1800],
    ["SS Benefit at 67", None, 2500],
    ["SS Benefit at 70", None, 3100],
]

_INTAKE_FIELDS: dict[str, str] = {
    "retirement_system": "FERS",
    "special_provisions": "none",
    "survivor_benefit": "50",
    "date_of_birth": "1965-03-01",
    "retirement_scd": "1990-06-01",
    "goal_retirement_date": "2027-06-01",
    "current_salary": "98000",
    "high_3_salary": "100000",
    "sick_leave_hours": "1200",
    "marital_status": "married",
    "fehb_premium_biweekly": "250.55",
    "fegli_premium_biweekly": "45.1",
    "fegli_code": "C0",
    "tsp_contribution_traditional_biweekly": "500",
    "tsp_contribution_roth_biweekly": "100",
    "tsp_balance_total": "250000",
    "tsp_balance_roth": "40000",
    "tsp_fund_g": "100000",
    "tsp_fund_f": "20000",
    "tsp_fund_c": "80000",
    "tsp_fund_s": "30000",
    "tsp_fund_i": "20000",
    "tsp_alloc_g_pct": "10",
    "tsp_alloc_f_pct": "10",
    "tsp_alloc_c_pct": "50",
    "tsp_alloc_s_pct": "20",
    "tsp_alloc_i_pct": "10",
    "tsp_alloc_l_pct": "0",
    "ss_benefit_62": "1800",
    "ss_benefit_67": "2500",
    "ss_benefit_70": "3100",
}


@pytest.fixture(autouse=True)
def fresh_logging():
    logging_init.reset_logging()
    yield
    logging_init.reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("FERS_PLANNER_CONFIG", raising=False)
        yield p


@pytest.fixture()
def intake_workbook(temp_workdir: Path) -> Path:
    return _write_workbook(temp_workdir / "data" / "intake.xlsx", _INTAKE_ROWS)


@pytest.fixture()
def intake_bytes(intake_workbook: Path) -> bytes:
    return intake_workbook.read_bytes()


@pytest.fixture()
def example_scenario() -> dict[str, str]:
    """Scenario record used for the projection walk-through."""
    return {
        "retirement_system": "FERS",
        "special_provisions": "none",
        "date_of_birth": "1965-03-01",
        "retirement_scd": "1990-06-01",
        "goal_retirement_date": "2027-06-01",
        "high_3_salary": "100000",
        "inflation_rate": "2.5",
        "survivor_benefit": "50",
        "sick_leave_hours": "1200",
    }


@pytest.fixture()
def workbook_factory(temp_workdir: Path) -> Callable[..., Path]:
    """Write header-less intake sheets under the temp workdir: ``factory(name, rows)``."""

    def factory(name: str, rows: list[list[object]], sheet_name: str = "Intake") -> Path:
        return _write_workbook(temp_workdir / name, rows, sheet_name)

    return factory


@pytest.fixture()
def intake_rows() -> list[list[object]]:
    return [list(row) for row in _INTAKE_ROWS]


@pytest.fixture()
def intake_fields() -> dict[str, str]:
    """Fields an import of the intake workbook is expected to produce."""
    return dict(_INTAKE_FIELDS)
