from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Any

from ..excel.normalizers import (
    map_select,
    map_survivor_election,
    normalize_text,
    parse_alloc_pct,
    parse_date,
    parse_money,
    parse_sick_leave,
)
from ..excel.reader import WorkbookReadError, read_first_sheet
from ..excel.resolver import LabelResolver
from ..models.config_models import DEFAULT_CONFIG, PlannerConfig
from ..models.import_outcome import ImportErrorKind, ImportFailed, ImportOutcome, ImportSucceeded
from ..models.row_entry import SectionContext

"""Scenario import assembler.

Builds a partial ScenarioInputs mapping from the first worksheet of an intake
workbook. The field table below maps every recognised field to its search
term(s), lookup mode and normalizer. Fields that normalize to "" are dropped so
that importing a partially filled sheet never blanks out a value entered by
hand.
"""

__all__ = [
    "FIELD_RULES",
    "FieldRule",
    "Lookup",
    "assemble_fields",
    "build_field_rules",
    "import_scenario",
    "import_scenario_file",
    "import_scenario_outcome",
]

logger = logging.getLogger(__name__)


class Lookup(Enum):
    EXACT = "exact"
    PARTIAL = "partial"
    FUND = "fund"


@dataclass(frozen=True)
class FieldRule:
    """How one scenario field is located and normalized.

    ``terms`` are tried in order; the first one that resolves to a non-blank
    cell wins. ``context`` is only used by fund lookups.
    """
    field: str
    terms: tuple[str, ...]
    lookup: Lookup
    normalize: Callable[[Any], str]
    context: SectionContext | None = None


def _exact(field: str, term: str, normalize: Callable[[Any], str]) -> FieldRule:
    return FieldRule(field, (term,), Lookup.EXACT, normalize)


def _partial(field: str, normalize: Callable[[Any], str], *terms: str) -> FieldRule:
    return FieldRule(field, terms, Lookup.PARTIAL, normalize)


def _fund_rules() -> list[FieldRule]:
    rules: list[FieldRule] = []
    # The L fund row is labelled "L Funds, if any, which one"
    funds = [("g", "g"), ("f", "f"), ("c", "c"), ("s", "s"), ("i", "i"), ("l", "l funds")]
    for letter, term in funds:
        rules.append(
            FieldRule(f"tsp_fund_{letter}", (term,), Lookup.FUND, parse_money, SectionContext.BALANCE)
        )
    for letter, term in funds:
        rules.append(
            FieldRule(
                f"tsp_alloc_{letter}_pct", (term,), Lookup.FUND, parse_alloc_pct, SectionContext.ALLOCATION
            )
        )
    return rules


def build_field_rules(config: PlannerConfig = DEFAULT_CONFIG) -> tuple[FieldRule, ...]:
    """Field table for one configuration (sick leave month length is configurable)."""
    sick_leave = partial(parse_sick_leave, hours_per_month=config.sick_leave.hours_per_month)
    return (
        # Key information
        _exact(
            "retirement_system",
            "fers or csrs",
            partial(map_select, allowed=("FERS", "CSRS"), fallback="FERS"),
        ),
        _partial(
            "special_provisions",
            partial(map_select, allowed=("none", "LEO", "FF", "ATC"), fallback="none"),
            "special provision",
        ),
        _partial("survivor_benefit", map_survivor_election, "survivorship"),
        # Important dates
        _exact("date_of_birth", "date of birth", parse_date),
        _exact("retirement_scd", "retirement scd", parse_date),
        # "goal ret" also matches the common "Goal Retirment Date" typo
        _partial("goal_retirement_date", parse_date, "goal ret"),
        # LES general info
        _partial("current_salary", parse_money, "salary"),
        _partial("high_3_salary", parse_money, "high-3", "high 3"),
        _partial("sick_leave_hours", sick_leave, "sick leave"),
        _partial(
            "marital_status",
            partial(map_select, allowed=("single", "married"), fallback="single"),
            "marital status",
        ),
        # LES deductions
        _partial("fehb_premium_biweekly", parse_money, "fehb"),
        _partial("fegli_premium_biweekly", parse_money, "fegli bi-weekly"),
        _partial("fegli_code", normalize_text, "fegli code"),
        _partial("tsp_contribution_traditional_biweekly", parse_money, "traditional tsp"),
        _partial("tsp_contribution_roth_biweekly", parse_money, "roth tsp"),
        # TSP balances and allocations
        _partial("tsp_balance_total", parse_money, "total tsp balance"),
        _partial("tsp_balance_roth", parse_money, "non-taxable roth"),
        *_fund_rules(),
        # Social Security monthly estimates
        _partial("ss_benefit_62", parse_money, "benefit at 62"),
        _partial("ss_benefit_67", parse_money, "benefit at 67"),
        _partial("ss_benefit_70", parse_money, "benefit at 70"),
    )


FIELD_RULES = build_field_rules()


def _resolve(resolver: LabelResolver, rule: FieldRule) -> Any:
    for term in rule.terms:
        if rule.lookup is Lookup.EXACT:
            value = resolver.find(term)
        elif rule.lookup is Lookup.PARTIAL:
            value = resolver.find_partial(term)
        else:
            value = resolver.find_fund(term, rule.context or SectionContext.NONE)
        if value is not None:
            return value
    return None


def assemble_fields(
    resolver: LabelResolver, rules: tuple[FieldRule, ...] = FIELD_RULES
) -> dict[str, str]:
    """Evaluate every field rule against ``resolver`` and drop empty results."""
    result = {rule.field: rule.normalize(_resolve(resolver, rule)) for rule in rules}

    # Never write an empty override
    for key in [k for k, v in result.items() if v == ""]:
        del result[key]
    return result


def import_scenario(data: bytes, config: PlannerConfig = DEFAULT_CONFIG) -> dict[str, str]:
    """Build a partial ScenarioInputs mapping from workbook bytes.

    Raises:
        WorkbookReadError: the bytes are not a readable workbook
    """
    grid = read_first_sheet(data)
    resolver = LabelResolver.from_rows(grid.rows, config.sections)
    logger.debug("sheet %r: %d labeled rows", grid.sheet_name, len(resolver))
    fields = assemble_fields(resolver, build_field_rules(config))
    logger.debug("imported fields: %s", sorted(fields))
    return fields


def import_scenario_outcome(data: bytes, config: PlannerConfig = DEFAULT_CONFIG) -> ImportOutcome:
    """Same as ``import_scenario`` but reports failure as ``ImportFailed``."""
    try:
        return ImportSucceeded(fields=import_scenario(data, config))
    except WorkbookReadError as e:
        return ImportFailed(kind=ImportErrorKind.UNREADABLE_WORKBOOK, message=str(e))


def import_scenario_file(path: Path, config: PlannerConfig = DEFAULT_CONFIG) -> ImportOutcome:
    if not path.is_file():
        return ImportFailed(kind=ImportErrorKind.FILE_NOT_FOUND, message=f"file not found: {path}")
    return import_scenario_outcome(path.read_bytes(), config)
