from __future__ import annotations

from datetime import date
from typing import NamedTuple

"""Calendar arithmetic shared by the eligibility and projection calculators."""

__all__ = [
    "Span",
    "add_years",
    "date_diff",
]


class Span(NamedTuple):
    """Whole years plus whole months between two dates."""
    years: int
    months: int

    @property
    def fractional_years(self) -> float:
        return self.years + self.months / 12


def date_diff(start: date, end: date) -> Span:
    """Years and months from ``start`` to ``end``.

    A month only counts once its day-of-month anniversary is reached; negative
    month counts borrow from the years.
    """
    years = end.year - start.year
    months = end.month - start.month
    if end.day < start.day:
        months -= 1
    if months < 0:
        years -= 1
        months += 12
    return Span(years, months)


def add_years(value: date, years: int) -> date:
    """Same month/day ``years`` later; Feb 29 rolls over to Mar 1 in common years."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return date(value.year + years, 3, 1)
