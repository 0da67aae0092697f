from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from ..models.config_models import DEFAULT_CONFIG, PlannerConfig
from ..models.projection import ProjectionColumn
from ..models.scenario_inputs import ScenarioInputs
from .service_time import Span, add_years, date_diff

"""Proposed & delayed retirement projection.

Builds twelve columns: the goal retirement date and the same date delayed by
1..11 years. Each column recomputes age, service, High-3 growth and the FERS
basic annuity with survivor-election figures.
"""

__all__ = [
    "PROJECTION_COLUMNS",
    "has_projection_inputs",
    "compute_projection_table",
    "round_half_up",
    "sick_leave_credit",
    "survivor_reduction_rate",
]

PROJECTION_COLUMNS = 12
BASE_MULTIPLIER = 0.010
ENHANCED_MULTIPLIER = 0.011  # age 62+ with 20+ years of regular service

_REQUIRED_DATES = ("date_of_birth", "retirement_scd", "goal_retirement_date")


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves upward."""
    return math.floor(value + 0.5)


def _as_inputs(inputs: ScenarioInputs | Mapping[str, Any]) -> ScenarioInputs:
    if isinstance(inputs, ScenarioInputs):
        return inputs
    return ScenarioInputs.from_mapping(inputs)


def _high3_base(inputs: ScenarioInputs) -> float | None:
    for name in ("high_3_salary", "current_salary"):
        value = inputs.number(name)
        if value is not None:
            return float(value)
    return None


def has_projection_inputs(inputs: ScenarioInputs | Mapping[str, Any]) -> bool:
    """True when all three dates and a High-3 (or current salary) are usable."""
    record = _as_inputs(inputs)
    if any(record.as_date(name) is None for name in _REQUIRED_DATES):
        return False
    return _high3_base(record) is not None


def sick_leave_credit(hours: float, hours_per_year: int = 2087) -> Span:
    """Unused sick leave hours as whole years plus whole (truncated) months."""
    fraction = hours / hours_per_year
    years = math.floor(fraction)
    months = math.floor((fraction - years) * 12)
    return Span(years, months)


def survivor_reduction_rate(election_pct: float) -> float:
    if election_pct == 50:
        return 0.10
    if election_pct == 25:
        return 0.05
    return 0.0


def compute_projection_table(
    inputs: ScenarioInputs | Mapping[str, Any],
    config: PlannerConfig = DEFAULT_CONFIG,
) -> list[ProjectionColumn]:
    """Twelve projection columns for the scenario.

    Requires date_of_birth, retirement_scd, goal_retirement_date and one of
    high_3_salary / current_salary; check with ``has_projection_inputs`` first.

    Raises:
        ValueError: a required input is missing
    """
    record = _as_inputs(inputs)
    dob, scd, goal = (record.as_date(name) for name in _REQUIRED_DATES)
    high3_base = _high3_base(record)
    if dob is None or scd is None or goal is None or high3_base is None:
        raise ValueError("projection requires birth date, SCD, goal retirement date and High-3 or salary")

    inflation = record.number("inflation_rate")
    inflation_rate = float(inflation) if inflation is not None else config.assumptions.inflation_rate
    growth = 1 + inflation_rate / 100
    survivor_pct = float(record.number("survivor_benefit") or 0)
    reduction = survivor_reduction_rate(survivor_pct)

    # Sick leave is fixed at the balance entered for the proposed date
    sick_hours = float(record.number("sick_leave_hours") or 0)
    sick = sick_leave_credit(sick_hours, config.sick_leave.hours_per_year)

    columns: list[ProjectionColumn] = []
    previous_high3: int | None = None
    for n in range(PROJECTION_COLUMNS):
        retire = add_years(goal, n)
        age = date_diff(dob, retire)
        service = date_diff(scd, retire)
        regular_years = service.fractional_years
        total_years = regular_years + sick.fractional_years

        high3 = round_half_up(high3_base * growth**n)
        high3_change = 0 if previous_high3 is None else high3 - previous_high3
        previous_high3 = high3

        # Sick leave never counts toward the 62/20 test
        multiplier = ENHANCED_MULTIPLIER if age.fractional_years >= 62 and regular_years >= 20 else BASE_MULTIPLIER
        annual_gross = round_half_up(high3 * total_years * multiplier)
        monthly_no_survivor = round_half_up(annual_gross / 12)

        annual_with_survivor = round_half_up(annual_gross * (1 - reduction))
        monthly_with_survivor = round_half_up(annual_with_survivor / 12)
        annual_survivor = round_half_up(annual_gross * (survivor_pct / 100))
        monthly_survivor = round_half_up(annual_survivor / 12)

        columns.append(
            ProjectionColumn(
                label="Proposed" if n == 0 else f"Age {age.years}",
                retirement_date=retire,
                age_years=age.years,
                age_months=age.months,
                service_years=service.years,
                service_months=service.months,
                sick_leave_years=sick.years,
                sick_leave_months=sick.months,
                high3=high3,
                high3_change=high3_change,
                multiplier=multiplier,
                annual_gross=annual_gross,
                monthly_no_survivor=monthly_no_survivor,
                annual_with_survivor=annual_with_survivor,
                monthly_with_survivor=monthly_with_survivor,
                annual_survivor=annual_survivor,
                monthly_survivor=monthly_survivor,
                annual_cost=annual_gross - annual_with_survivor,
                monthly_cost=monthly_no_survivor - monthly_with_survivor,
            )
        )
    return columns
