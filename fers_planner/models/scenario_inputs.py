from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

"""ScenarioInputs model: the flat intake record for one client scenario.

Every field is stored as a string at the storage boundary so that "not entered"
(empty string) and "zero" remain distinct. Inside the package the record is
read through typed accessors that return ``None`` for absent values.
"""

__all__ = [
    "FIELD_DEFAULTS",
    "FUND_LETTERS",
    "ScenarioInputs",
]

FUND_LETTERS = ("g", "f", "c", "s", "i", "l")

FIELD_DEFAULTS: dict[str, str] = {
    # Key information
    "retirement_system": "FERS",
    "special_provisions": "none",
    "survivor_benefit": "0",
    # Important dates
    "date_of_birth": "",
    "retirement_scd": "",
    "goal_retirement_date": "",
    # LES general info
    "current_salary": "",
    "high_3_salary": "",
    "sick_leave_hours": "",
    "marital_status": "single",
    # LES deductions
    "fehb_premium_biweekly": "",
    "fegli_premium_biweekly": "",
    "fegli_code": "",
    "tsp_contribution_traditional_biweekly": "",
    "tsp_contribution_roth_biweekly": "",
    # TSP balances
    "tsp_balance_total": "",
    "tsp_balance_roth": "",
    **{f"tsp_fund_{letter}": "" for letter in FUND_LETTERS},
    "tsp_fund_l_name": "",
    # TSP future contribution allocations (%)
    **{f"tsp_alloc_{letter}_pct": "" for letter in FUND_LETTERS},
    # Social Security
    "ss_benefit_62": "",
    "ss_benefit_67": "",
    "ss_benefit_70": "",
    # Assumptions
    "inflation_rate": "2.5",
    "tsp_growth_rate": "6.0",
    "cola_rate": "2.0",
}


@dataclass(frozen=True)
class ScenarioInputs:
    """Immutable scenario record with typed read access.

    Use ``from_mapping`` to build from stored JSON and ``to_mapping`` to
    serialize back. Unknown keys are dropped; missing keys take their default.
    """
    values: dict[str, str] = field(default_factory=lambda: dict(FIELD_DEFAULTS))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> ScenarioInputs:
        values = dict(FIELD_DEFAULTS)
        for key, raw in (mapping or {}).items():
            if key not in FIELD_DEFAULTS:
                continue
            values[key] = "" if raw is None else str(raw).strip()
        return cls(values=values)

    def to_mapping(self) -> dict[str, str]:
        return dict(self.values)

    def merge(self, partial: Mapping[str, Any]) -> ScenarioInputs:
        """Return a new record with ``partial`` laid over this one.

        Importers never put empty strings in ``partial``, so a merge only ever
        fills or replaces fields.
        """
        merged = self.to_mapping()
        merged.update({k: v for k, v in partial.items() if k in FIELD_DEFAULTS})
        return ScenarioInputs.from_mapping(merged)

    def text(self, name: str) -> str:
        if name not in FIELD_DEFAULTS:
            raise KeyError(f"unknown scenario field: {name}")
        return self.values.get(name, "")

    def is_set(self, name: str) -> bool:
        return self.text(name) != ""

    def number(self, name: str) -> Decimal | None:
        """Numeric value of a field, or None when blank or unparseable."""
        raw = self.text(name)
        if not raw:
            return None
        try:
            value = Decimal(raw)
        except InvalidOperation:
            return None
        return value if value.is_finite() else None

    def as_date(self, name: str) -> date | None:
        """Calendar date of an ISO ``YYYY-MM-DD`` field, or None."""
        raw = self.text(name)
        if not raw:
            return None
        try:
            return date.fromisoformat(raw[:10])
        except ValueError:
            return None

    def tsp_allocation_total(self) -> Decimal:
        """Sum of the future-contribution allocation percentages (blank = 0)."""
        total = Decimal(0)
        for letter in FUND_LETTERS:
            total += self.number(f"tsp_alloc_{letter}_pct") or Decimal(0)
        return total

    def allocation_warning(self) -> bool:
        """True when allocations were entered but do not add up to 100%."""
        total = self.tsp_allocation_total()
        return total > 0 and abs(total - 100) > Decimal("0.01")
