from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_CONFIG,
    AssumptionDefaults,
    PlannerConfig,
    SectionKeywords,
    SickLeaveConfig,
)

"""Config loader.

Responsibilities:
- Locate the YAML config (explicit path, ``FERS_PLANNER_CONFIG``, or
  ``config/planner.yml``)
- Validate it against the packaged JSON schema
- Fill every omitted key from the built-in defaults
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("planner_schema.json")
DEFAULT_CONFIG_PATH = Path("config/planner.yml")
CONFIG_ENV_VAR = "FERS_PLANNER_CONFIG"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def resolve_config_path(path: Path | None = None) -> Path | None:
    """Explicit path wins, then the environment variable, then the default location.

    Returns None when no explicit or environment path is given and the default
    file does not exist.
    """
    if path is not None:
        return path
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: Path | None = None) -> PlannerConfig:
    resolved = resolve_config_path(path)
    if resolved is None:
        return DEFAULT_CONFIG
    if not resolved.exists():
        raise ConfigError(f"config file not found: {resolved}")
    try:
        data = yaml.safe_load(resolved.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    assumptions_raw = data.get("assumptions", {})
    defaults = DEFAULT_CONFIG.assumptions
    assumptions = AssumptionDefaults(
        inflation_rate=float(assumptions_raw.get("inflation_rate", defaults.inflation_rate)),
        tsp_growth_rate=float(assumptions_raw.get("tsp_growth_rate", defaults.tsp_growth_rate)),
        cola_rate=float(assumptions_raw.get("cola_rate", defaults.cola_rate)),
    )
    sick_raw = data.get("sick_leave", {})
    sick_leave = SickLeaveConfig(
        hours_per_year=sick_raw.get("hours_per_year", DEFAULT_CONFIG.sick_leave.hours_per_year),
        hours_per_month=sick_raw.get("hours_per_month", DEFAULT_CONFIG.sick_leave.hours_per_month),
    )
    sections_raw = data.get("sections", {})
    sections = SectionKeywords(
        balance=tuple(
            k.strip().lower() for k in sections_raw.get("balance_keywords", DEFAULT_CONFIG.sections.balance)
        ),
        allocation=tuple(
            k.strip().lower()
            for k in sections_raw.get("allocation_keywords", DEFAULT_CONFIG.sections.allocation)
        ),
    )
    return PlannerConfig(assumptions=assumptions, sick_leave=sick_leave, sections=sections)
