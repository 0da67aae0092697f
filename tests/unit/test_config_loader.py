from __future__ import annotations

from pathlib import Path

import pytest

from fers_planner.config.loader import CONFIG_ENV_VAR, ConfigError, load_config, resolve_config_path
from fers_planner.models.config_models import DEFAULT_CONFIG


def _write(temp_workdir: Path, text: str, name: str = "planner.yml") -> Path:
    path = temp_workdir / "config" / name
    path.write_text(text, encoding="utf-8")
    return path


def test_no_config_file_gives_defaults(temp_workdir: Path):
    assert resolve_config_path() is None
    assert load_config() is DEFAULT_CONFIG


def test_default_location_is_picked_up(temp_workdir: Path):
    _write(temp_workdir, "assumptions:\n  inflation_rate: 3.0\n")
    cfg = load_config()
    assert cfg.assumptions.inflation_rate == 3.0
    # untouched keys keep their defaults
    assert cfg.assumptions.cola_rate == 2.0
    assert cfg.sick_leave == DEFAULT_CONFIG.sick_leave
    assert cfg.sections == DEFAULT_CONFIG.sections


def test_env_var_path(temp_workdir: Path, monkeypatch):
    path = _write(temp_workdir, "sick_leave:\n  hours_per_month: 170\n", name="custom.yml")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    cfg = load_config()
    assert cfg.sick_leave.hours_per_month == 170
    assert cfg.sick_leave.hours_per_year == 2087


def test_section_keywords_are_normalized(temp_workdir: Path):
    path = _write(temp_workdir, "sections:\n  balance_keywords: ['  Holdings ']\n")
    cfg = load_config(path)
    assert cfg.sections.balance == ("holdings",)
    assert cfg.sections.allocation == DEFAULT_CONFIG.sections.allocation


def test_empty_file_is_defaults(temp_workdir: Path):
    cfg = load_config(_write(temp_workdir, ""))
    assert cfg == DEFAULT_CONFIG


def test_explicit_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(_write(temp_workdir, "assumptions: [unclosed\n"))


def test_non_mapping_root(temp_workdir: Path):
    with pytest.raises(ConfigError, match="mapping"):
        load_config(_write(temp_workdir, "- a\n- b\n"))


@pytest.mark.parametrize(
    "text",
    [
        "extra_field: 1\n",
        "assumptions:\n  inflation_rate: high\n",
        "sick_leave:\n  hours_per_year: 0\n",
        "sections:\n  allocation_keywords: []\n",
    ],
)
def test_schema_violations(temp_workdir: Path, text: str):
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(temp_workdir, text))
