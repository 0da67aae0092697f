from __future__ import annotations

from dataclasses import dataclass
from datetime import date

"""ProjectionColumn model: one column of the proposed / delayed retirement table.

Column 0 is the stated goal retirement date; columns 1-11 advance that date by
one calendar year each. All currency figures are whole dollars.
"""

__all__ = [
    "ProjectionColumn",
]


@dataclass(frozen=True)
class ProjectionColumn:
    label: str  # "Proposed" or "Age N"
    retirement_date: date
    age_years: int
    age_months: int
    service_years: int  # regular service, SCD -> retirement date
    service_months: int
    sick_leave_years: int  # constant across columns
    sick_leave_months: int
    high3: int
    high3_change: int  # vs previous column, 0 for column 0
    multiplier: float  # 0.010 or 0.011
    annual_gross: int  # before survivor reduction
    monthly_no_survivor: int
    annual_with_survivor: int
    monthly_with_survivor: int
    annual_survivor: int  # survivor's own benefit
    monthly_survivor: int
    annual_cost: int  # cost of the survivor election
    monthly_cost: int  # difference of independently rounded monthly figures
