from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the FERS planner.

These are the domain-side settings produced by ``fers_planner.config.loader``.
Every value has an OPM-standard default so the package works without any
configuration file.
"""

__all__ = [
    "AssumptionDefaults",
    "DEFAULT_CONFIG",
    "PlannerConfig",
    "SectionKeywords",
    "SickLeaveConfig",
]


@dataclass(frozen=True)
class AssumptionDefaults:
    """Fallback rates (percent) used when a scenario leaves an assumption blank."""
    inflation_rate: float = 2.5  # High-3 growth per year of delay
    tsp_growth_rate: float = 6.0
    cola_rate: float = 2.0


@dataclass(frozen=True)
class SickLeaveConfig:
    """Unused sick leave conversion constants.

    2087 hours is one federal work-year; 174 hours is the OPM month used when a
    sheet states sick leave in months.
    """
    hours_per_year: int = 2087
    hours_per_month: int = 174


@dataclass(frozen=True)
class SectionKeywords:
    """Label fragments that switch the resolver's section context."""
    balance: tuple[str, ...] = (
        "balance",
        "by fund",
        "fund balance",
        "tsp balance",
        "current balance",
    )
    allocation: tuple[str, ...] = (
        "allocation",
        "contribution alloc",
        "future allocation",
        "fund alloc",
        "future contribution",
        "in percentages",
        "contributions to each",
    )


@dataclass(frozen=True)
class PlannerConfig:
    """Root configuration object."""
    assumptions: AssumptionDefaults = AssumptionDefaults()
    sick_leave: SickLeaveConfig = SickLeaveConfig()
    sections: SectionKeywords = SectionKeywords()


DEFAULT_CONFIG = PlannerConfig()
