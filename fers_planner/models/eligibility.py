from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Eligibility result model.

Derived on every preview from the current ScenarioInputs; never stored.
"""

__all__ = [
    "EligibilityResult",
    "RetirementType",
    "StatusTier",
]


class RetirementType(Enum):
    REGULAR = "REGULAR"
    MRA_PLUS_10 = "MRA+10 (Reduced)"
    NOT_YET_ELIGIBLE = "Not Yet Eligible"


class StatusTier(Enum):
    """Severity of the eligibility status line.

    - FAVORABLE: unreduced retirement available
    - CONDITIONAL: eligible with a reduction (MRA+10)
    - UNMET: age or service requirement not met
    """
    FAVORABLE = "favorable"
    CONDITIONAL = "conditional"
    UNMET = "unmet"


@dataclass(frozen=True)
class EligibilityResult:
    retirement_type: RetirementType
    status: str  # human-readable status line
    tier: StatusTier
