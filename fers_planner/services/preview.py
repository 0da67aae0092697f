from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pandas as pd

from ..models.config_models import DEFAULT_CONFIG, PlannerConfig
from ..models.eligibility import EligibilityResult
from ..models.projection import ProjectionColumn
from ..models.scenario_inputs import ScenarioInputs
from .eligibility import compute_eligibility
from .formatting import DASH, fmt_date_short, fmt_dollar, fmt_number, fmt_span
from .projection import compute_projection_table, has_projection_inputs
from .service_time import date_diff

"""Scenario preview: the derived, display-ready view of one scenario.

Each section either carries rows (and optionally a table) or a placeholder
telling the planner which inputs are missing. Nothing here is stored; the
preview is rebuilt from ScenarioInputs on every request.
"""

__all__ = [
    "DISCLAIMER",
    "PreviewRow",
    "PreviewSection",
    "PreviewTable",
    "ScenarioPreview",
    "TableRow",
    "build_preview",
    "render_text",
]

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "This preview is for planning purposes only and does not constitute an official benefit "
    "calculation. All figures are estimates and should be verified with OPM, TSP, SSA, and other "
    "authoritative sources before making retirement decisions."
)


@dataclass(frozen=True)
class PreviewRow:
    label: str
    value: str


@dataclass(frozen=True)
class TableRow:
    label: str
    cells: list[str]
    group: bool = False  # first row of a highlighted group


@dataclass(frozen=True)
class PreviewTable:
    headers: list[str]
    rows: list[TableRow]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [row.cells for row in self.rows],
            index=[row.label for row in self.rows],
            columns=self.headers,
        )


@dataclass(frozen=True)
class PreviewSection:
    title: str
    rows: list[PreviewRow] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    table: PreviewTable | None = None
    placeholder: str | None = None  # set when the section cannot be computed
    status: EligibilityResult | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None


@dataclass(frozen=True)
class ScenarioPreview:
    sections: list[PreviewSection]
    disclaimer: str = DISCLAIMER

    def section(self, title: str) -> PreviewSection:
        for s in self.sections:
            if s.title == title:
                return s
        raise KeyError(title)


def _models_scenario(inputs: ScenarioInputs) -> bool:
    """Eligibility and annuity math only cover regular FERS employees."""
    return inputs.text("retirement_system") == "FERS" and inputs.text("special_provisions") == "none"


def _out_of_scope_note(inputs: ScenarioInputs) -> str | None:
    if inputs.text("retirement_system") != "FERS":
        return (
            f"Retirement system {inputs.text('retirement_system')} noted. Only FERS eligibility "
            "and annuity rules are modeled."
        )
    provision = inputs.text("special_provisions")
    if provision != "none":
        return (
            f"Special Provisions ({provision}) noted. Eligibility rules for this provision type "
            "are not yet modeled."
        )
    return None


def _rate_text(inputs: ScenarioInputs, name: str, default: float) -> str:
    return f"{inputs.text(name) or default}%"


def _core_dates(inputs: ScenarioInputs) -> tuple[date, date, date] | None:
    dob = inputs.as_date("date_of_birth")
    scd = inputs.as_date("retirement_scd")
    retire = inputs.as_date("goal_retirement_date")
    if dob is None or scd is None or retire is None:
        return None
    return dob, scd, retire


def _eligibility_section(inputs: ScenarioInputs, today: date) -> PreviewSection:
    title = "Retirement Eligibility"
    dates = _core_dates(inputs)
    if dates is None:
        return PreviewSection(
            title,
            placeholder=(
                "Enter Date of Birth, Retirement SCD, and Goal Retirement Date to compute eligibility."
            ),
        )
    dob, scd, retire = dates
    eligibility = compute_eligibility(dob, retire, scd) if _models_scenario(inputs) else None
    provision = inputs.text("special_provisions")
    rows = [
        PreviewRow("Retirement System", inputs.text("retirement_system")),
        PreviewRow("Employee Type", provision if provision != "none" else "REGULAR"),
        PreviewRow(
            "Retirement Type",
            eligibility.retirement_type.value if eligibility else "See note below",
        ),
        PreviewRow("Service Computation Date", fmt_date_short(scd)),
        PreviewRow("Creditable Service (Today)", fmt_span(date_diff(scd, today), allow_negative=False)),
        PreviewRow("Planned Retirement Date", fmt_date_short(retire)),
        PreviewRow("Service at Retirement", fmt_span(date_diff(scd, retire), allow_negative=False)),
        PreviewRow("Age at Retirement", fmt_span(date_diff(dob, retire))),
        PreviewRow("Retirement Status", eligibility.status if eligibility else "Not computed"),
    ]
    note = _out_of_scope_note(inputs)
    return PreviewSection(title, rows=rows, notes=[note] if note else [], status=eligibility)


def _high3_section(inputs: ScenarioInputs, config: PlannerConfig, projected: bool) -> PreviewSection:
    title = "High-3 Average"
    base = inputs.text("high_3_salary") or inputs.text("current_salary")
    if not base:
        return PreviewSection(title, placeholder="Enter Estimated High-3 or Current Salary to display this section.")
    rows = [
        PreviewRow("Average at Retirement", fmt_dollar(base)),
        PreviewRow("Retirement Date", fmt_date_short(inputs.as_date("goal_retirement_date"))),
    ]
    if projected:
        rows.append(
            PreviewRow(
                "Projected Growth Rate (per year)",
                _rate_text(inputs, "inflation_rate", config.assumptions.inflation_rate),
            )
        )
    notes = []
    if not inputs.is_set("high_3_salary"):
        notes.append(
            "No High-3 entered. Using current salary as a proxy; enter Estimated High-3 for a more "
            "accurate figure."
        )
    return PreviewSection(title, rows=rows, notes=notes)


_Getter = Callable[[ProjectionColumn], int]


def _table_row(
    label: str,
    columns: list[ProjectionColumn],
    get: _Getter,
    *,
    dollar: bool = False,
    blank_zero: bool = False,
    group: bool = False,
) -> TableRow:
    cells = []
    for col in columns:
        value = get(col)
        if blank_zero and value == 0:
            cells.append("")
        elif dollar:
            cells.append(fmt_dollar(value))
        else:
            cells.append(fmt_number(value))
    return TableRow(label, cells, group)


def _projection_table(columns: list[ProjectionColumn], survivor_pct: int) -> PreviewTable:
    rows = [
        _table_row("Age In Years", columns, lambda c: c.age_years),
        _table_row("Age In Months", columns, lambda c: c.age_months, blank_zero=True),
        _table_row("Service Years", columns, lambda c: c.service_years),
        _table_row("Service Months", columns, lambda c: c.service_months, blank_zero=True),
        _table_row("Sick Leave Years", columns, lambda c: c.sick_leave_years, blank_zero=True),
        _table_row("Sick Leave Months", columns, lambda c: c.sick_leave_months, blank_zero=True),
        _table_row("Estimated High-3 Avg ($)", columns, lambda c: c.high3, dollar=True),
        _table_row("Change in High-3 ($)", columns, lambda c: c.high3_change, dollar=True, blank_zero=True),
        _table_row(
            "Annual Annuity (Before Reductions)", columns, lambda c: c.annual_gross, dollar=True, group=True
        ),
        _table_row("Annual Annuity – No Survivor", columns, lambda c: c.annual_gross, dollar=True),
        _table_row("Monthly Annuity – No Survivor", columns, lambda c: c.monthly_no_survivor, dollar=True),
    ]
    if survivor_pct > 0:
        rows += [
            _table_row(
                f"Annual Annuity – With {survivor_pct}% Survivor",
                columns,
                lambda c: c.annual_with_survivor,
                dollar=True,
                group=True,
            ),
            _table_row("Monthly Annuity – With Survivor", columns, lambda c: c.monthly_with_survivor, dollar=True),
            _table_row("Annual Survivor Annuity", columns, lambda c: c.annual_survivor, dollar=True),
            _table_row("Monthly Survivor Annuity", columns, lambda c: c.monthly_survivor, dollar=True),
            _table_row(
                "Annual Cost of Survivor Annuity", columns, lambda c: c.annual_cost, dollar=True, group=True
            ),
            _table_row("Monthly Cost of Survivor Annuity", columns, lambda c: c.monthly_cost, dollar=True),
        ]
    return PreviewTable(headers=[c.label for c in columns], rows=rows)


def _survivor_label(survivor_pct: int) -> str:
    if survivor_pct in (25, 50):
        return f"{survivor_pct}% Annuity"
    return "None"


def _projection_section(
    inputs: ScenarioInputs, config: PlannerConfig, columns: list[ProjectionColumn] | None
) -> PreviewSection:
    title = "Proposed & Delayed Retirement"
    if columns is None:
        placeholder = "Enter dates and High-3 to view the retirement projection table."
        note = _out_of_scope_note(inputs)
        return PreviewSection(title, placeholder=placeholder, notes=[note] if note else [])

    dates = _core_dates(inputs)
    if dates is None:  # pragma: no cover (columns imply dates)
        raise ValueError("projection columns without core dates")
    dob, scd, retire = dates
    survivor_pct = int(inputs.number("survivor_benefit") or 0)
    sick_hours = inputs.number("sick_leave_hours")
    growth = _rate_text(inputs, "inflation_rate", config.assumptions.inflation_rate)
    cola = _rate_text(inputs, "cola_rate", config.assumptions.cola_rate)
    rows = [
        PreviewRow("Estimated High-3", fmt_dollar(inputs.text("high_3_salary") or inputs.text("current_salary"))),
        PreviewRow("High-3 Growth / Year", growth),
        PreviewRow("COLA (in Retirement)", cola),
        PreviewRow("Service at Retirement", fmt_span(date_diff(scd, retire), allow_negative=False)),
        PreviewRow("Age at Retirement", fmt_span(date_diff(dob, retire))),
        PreviewRow("Sick Leave Hours", f"{fmt_number(float(sick_hours))} hrs" if sick_hours is not None else DASH),
        PreviewRow("FERS Survivor Election", _survivor_label(survivor_pct)),
    ]
    notes = [
        f"Sick leave hours are held constant across all columns. High-3 grows by {growth} per year "
        f"of delay. COLA of {cola} applies once in retirement and is not reflected in this comparison."
    ]
    return PreviewSection(title, rows=rows, notes=notes, table=_projection_table(columns, survivor_pct))


def _social_security_section(inputs: ScenarioInputs) -> PreviewSection:
    title = "Social Security Snapshot"
    ages = ("62", "67", "70")
    if not any(inputs.is_set(f"ss_benefit_{age}") for age in ages):
        return PreviewSection(title, placeholder="Enter Social Security benefit estimates to display this section.")
    table = PreviewTable(
        headers=["Est. Monthly Benefit"],
        rows=[TableRow(f"Age {age}", [fmt_dollar(inputs.text(f"ss_benefit_{age}"))]) for age in ages],
    )
    return PreviewSection(
        title,
        table=table,
        notes=["Source: SSA.gov statement. Claiming strategy is not modeled."],
    )


def _fund_rows(inputs: ScenarioInputs) -> list[TableRow]:
    funds = [(f"{letter.upper()} Fund", letter) for letter in ("g", "f", "c", "s", "i")]
    if inputs.is_set("tsp_fund_l") or inputs.is_set("tsp_fund_l_name"):
        name = inputs.text("tsp_fund_l_name")
        funds.append((f"L Fund ({name})" if name else "L Fund", "l"))
    rows = []
    for name, letter in funds:
        balance = inputs.text(f"tsp_fund_{letter}")
        if not balance:
            continue
        alloc = inputs.text(f"tsp_alloc_{letter}_pct")
        rows.append(TableRow(name, [fmt_dollar(balance), f"{alloc}%" if alloc else DASH]))
    return rows


def _tsp_section(inputs: ScenarioInputs) -> PreviewSection:
    title = "TSP Balance"
    if not inputs.is_set("tsp_balance_total"):
        return PreviewSection(title, placeholder="Enter TSP balance information to display this section.")
    rows = [
        PreviewRow("Total Balance", fmt_dollar(inputs.text("tsp_balance_total"))),
        PreviewRow("Roth Balance", fmt_dollar(inputs.text("tsp_balance_roth"))),
    ]
    fund_rows = _fund_rows(inputs)
    table = PreviewTable(headers=["Balance", "Allocation"], rows=fund_rows) if fund_rows else None
    notes = []
    if inputs.allocation_warning():
        total = inputs.tsp_allocation_total()
        notes.append(f"Future contribution allocations total {total.normalize():f}%, not 100%.")
    return PreviewSection(title, rows=rows, table=table, notes=notes)


def _fehb_section(inputs: ScenarioInputs) -> PreviewSection:
    title = "FEHB — Health Insurance"
    premium = inputs.number("fehb_premium_biweekly")
    if premium is None:
        return PreviewSection(title, placeholder="Enter FEHB premium to display this section.")
    rows = [
        PreviewRow("Bi-weekly Premium (Employee Share)", fmt_dollar(premium)),
        # 26 pay periods per year
        PreviewRow("Monthly Equivalent", fmt_dollar(premium * 26 / 12)),
    ]
    notes = [
        "FEHB continues into retirement subject to eligibility. Government share of premium also continues."
    ]
    return PreviewSection(title, rows=rows, notes=notes)


def _fegli_section(inputs: ScenarioInputs) -> PreviewSection:
    title = "FEGLI — Life Insurance"
    if not (inputs.is_set("fegli_premium_biweekly") or inputs.is_set("fegli_code")):
        return PreviewSection(title, placeholder="Enter FEGLI information to display this section.")
    rows = [
        PreviewRow("Coverage Code", inputs.text("fegli_code") or DASH),
        PreviewRow("Bi-weekly Premium", fmt_dollar(inputs.text("fegli_premium_biweekly"))),
    ]
    notes = ["Standard FEGLI reductions apply in retirement per OPM schedule."]
    return PreviewSection(title, rows=rows, notes=notes)


def build_preview(
    inputs: ScenarioInputs | Mapping[str, Any],
    today: date | None = None,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> ScenarioPreview:
    """Assemble every preview section for a scenario.

    ``today`` anchors "Creditable Service (Today)"; defaults to the current date.
    """
    record = inputs if isinstance(inputs, ScenarioInputs) else ScenarioInputs.from_mapping(inputs)
    today = today or date.today()
    columns = None
    if _models_scenario(record) and has_projection_inputs(record):
        columns = compute_projection_table(record, config)
    else:
        logger.debug("projection skipped: inputs incomplete or outside FERS regular rules")

    return ScenarioPreview(
        sections=[
            _eligibility_section(record, today),
            _high3_section(record, config, projected=columns is not None),
            _projection_section(record, config, columns),
            _social_security_section(record),
            _tsp_section(record),
            _fehb_section(record),
            _fegli_section(record),
        ]
    )


def render_text(preview: ScenarioPreview) -> str:
    """Plain-text rendering for the CLI."""
    lines: list[str] = []
    for section in preview.sections:
        lines.append(section.title)
        lines.append("=" * len(section.title))
        if section.placeholder:
            lines.append(section.placeholder)
        width = max((len(r.label) for r in section.rows), default=0)
        for row in section.rows:
            lines.append(f"{row.label.ljust(width)}  {row.value}")
        if section.table is not None:
            lines.append(section.table.to_frame().to_string())
        for note in section.notes:
            lines.append(f"* {note}")
        lines.append("")
    lines.append(preview.disclaimer)
    return "\n".join(lines)
