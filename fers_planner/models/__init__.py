"""Domain models for the FERS retirement planner.

This package contains the record, row, result and configuration types used
throughout the importer and the calculators.
"""

from .config_models import DEFAULT_CONFIG, PlannerConfig
from .eligibility import EligibilityResult, RetirementType, StatusTier
from .import_outcome import ImportErrorKind, ImportFailed, ImportOutcome, ImportSucceeded
from .projection import ProjectionColumn
from .row_entry import RowEntry, SectionContext
from .scenario_inputs import FIELD_DEFAULTS, ScenarioInputs

__all__ = [
    # Configuration models
    "DEFAULT_CONFIG",
    "PlannerConfig",
    # Import models
    "ImportErrorKind",
    "ImportFailed",
    "ImportOutcome",
    "ImportSucceeded",
    "RowEntry",
    "SectionContext",
    # Scenario and derived results
    "EligibilityResult",
    "FIELD_DEFAULTS",
    "ProjectionColumn",
    "RetirementType",
    "ScenarioInputs",
    "StatusTier",
]
