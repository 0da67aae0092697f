"""FERS retirement planner core: spreadsheet import, eligibility and annuity projection."""

__version__ = "0.1.0"
