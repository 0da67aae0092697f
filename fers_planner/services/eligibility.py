from __future__ import annotations

from datetime import date

from ..models.eligibility import EligibilityResult, RetirementType, StatusTier
from .service_time import Span, date_diff

"""FERS retirement eligibility (regular employees only).

Special provisions (LEO/FF/ATC) and CSRS are not modeled; callers gate on
``retirement_system == "FERS"`` and ``special_provisions == "none"`` and show a
caveat otherwise.
"""

__all__ = [
    "compute_eligibility",
    "mra_for_birth_year",
]

# Birth years with a partial-year MRA; earlier years are 55y0m, 1953-1964 56y0m,
# later years 57y0m.
_MRA_STEPS: dict[int, Span] = {
    1948: Span(55, 2),
    1949: Span(55, 4),
    1950: Span(55, 6),
    1951: Span(55, 8),
    1952: Span(55, 10),
    1965: Span(56, 2),
    1966: Span(56, 4),
    1967: Span(56, 6),
    1968: Span(56, 8),
    1969: Span(56, 10),
}

REGULAR_STATUS = "Service and Age Requirements Met"
MRA_PLUS_10_STATUS = "Eligible – Annuity Reduced 5% Per Year Under Age 62"
NOT_ELIGIBLE_STATUS = "Service or Age Requirement Not Met"


def mra_for_birth_year(birth_year: int) -> Span:
    """Minimum Retirement Age for a birth year."""
    if birth_year <= 1947:
        return Span(55, 0)
    if birth_year in _MRA_STEPS:
        return _MRA_STEPS[birth_year]
    if birth_year <= 1964:
        return Span(56, 0)
    return Span(57, 0)


def compute_eligibility(dob: date, retire_date: date, scd: date) -> EligibilityResult:
    """Classify retirement eligibility at ``retire_date``.

    Rules are checked in order and the first match wins:
    62 with 5 years, 60 with 20, MRA with 30 (unreduced); MRA with 10 (reduced).
    """
    age = date_diff(dob, retire_date).fractional_years
    service = date_diff(scd, retire_date).fractional_years
    mra = mra_for_birth_year(dob.year).fractional_years

    if (age >= 62 and service >= 5) or (age >= 60 and service >= 20) or (age >= mra and service >= 30):
        return EligibilityResult(RetirementType.REGULAR, REGULAR_STATUS, StatusTier.FAVORABLE)
    if age >= mra and service >= 10:
        return EligibilityResult(RetirementType.MRA_PLUS_10, MRA_PLUS_10_STATUS, StatusTier.CONDITIONAL)
    return EligibilityResult(RetirementType.NOT_YET_ELIGIBLE, NOT_ELIGIBLE_STATUS, StatusTier.UNMET)
