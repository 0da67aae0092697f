from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from numbers import Real
from typing import Any

import pandas as pd

"""Cell value normalizers for the spreadsheet importer.

Each function turns one raw cell value (str, int/float, datetime, None/NaN as
returned by pandas) into the canonical string stored in ScenarioInputs. They
never raise: anything that cannot be interpreted becomes the empty string, so a
malformed cell leaves its field unset instead of aborting the import.
"""

__all__ = [
    "map_select",
    "map_survivor_election",
    "normalize_label",
    "normalize_text",
    "parse_alloc_pct",
    "parse_date",
    "parse_money",
    "parse_sick_leave",
]

CENT = Decimal("0.01")
OPM_HOURS_PER_MONTH = 174

# $ , en dash, em dash
_MONEY_NOISE = re.compile("[$,–—]")
_SICK_LEAVE_MONTHS = re.compile(r"(\d+(?:\.\d+)?)\s*months?")
_NON_NUMERIC = re.compile(r"[^0-9.]")

# Excel 1900 date system. Serial 60 is the fictitious 1900-02-29.
_EXCEL_EPOCH = date(1899, 12, 30)
_EXCEL_FAKE_LEAP_DAY = 60


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a meaningful amount
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _to_decimal(text: Any) -> Decimal | None:
    try:
        amount = Decimal(str(text).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def _format_decimal(amount: Decimal) -> str:
    """Render without trailing zeros or exponent: 1234.50 -> '1234.5', 1E+2 -> '100'."""
    if amount == 0:
        return "0"
    return format(amount.normalize(), "f")


def _round_cents(amount: Decimal) -> str:
    try:
        return _format_decimal(amount.quantize(CENT, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return ""


def normalize_label(value: Any) -> str:
    """Comparison key for a label cell: trimmed, lower-cased text."""
    if _is_missing(value):
        return ""
    return str(value).strip().lower()


def normalize_text(value: Any) -> str:
    """Free-text field (e.g. FEGLI code). Integral numbers lose their '.0'."""
    if _is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_money(value: Any) -> str:
    """Currency cell -> decimal string rounded half-up to the cent.

    >>> parse_money("$1,234.505")
    '1234.51'
    >>> parse_money("—")
    ''
    """
    if _is_missing(value):
        return ""
    if _is_number(value):
        text = str(value)
    else:
        text = _MONEY_NOISE.sub("", str(value)).strip()
    if text in ("", "-"):
        return ""
    amount = _to_decimal(text)
    if amount is None:
        return ""
    return _round_cents(amount)


def parse_alloc_pct(value: Any) -> str:
    """Allocation cell -> percentage string.

    Sheets store allocations either as fractions (0.1724) or as whole
    percentages (17.24 or "17.24%"). Values strictly between 0 and 1 are scaled
    by 100; everything else is already a percentage.
    """
    if _is_missing(value):
        return ""
    if _is_number(value):
        amount = _to_decimal(value)
    else:
        amount = _to_decimal(str(value).replace("%", ""))
    if amount is None:
        return ""
    if amount == 0:
        return "0"
    if 0 < amount < 1:
        amount = amount * 100
    return _round_cents(amount)


def _date_from_serial(serial: float) -> str:
    if not math.isfinite(serial):
        return ""
    days = math.floor(serial)
    if days < 1 or days == _EXCEL_FAKE_LEAP_DAY:
        return ""
    if days < _EXCEL_FAKE_LEAP_DAY:
        # serials before the fake leap day are offset by one
        days += 1
    try:
        return (_EXCEL_EPOCH + timedelta(days=days)).isoformat()
    except OverflowError:
        return ""


def parse_date(value: Any) -> str:
    """Date cell -> 'YYYY-MM-DD' or ''.

    Accepts datetime/date objects (pandas returns these for date-formatted
    cells), Excel date serials in numeric cells, and text dates. Text, including
    digit-only text such as "2027", is read as a calendar date and never as a
    serial; no timezone conversion is applied, so the written day is the stored
    day.
    """
    if _is_missing(value):
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if _is_number(value):
        return _date_from_serial(float(value))
    text = str(value).strip()
    if not text:
        return ""
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, OverflowError, TypeError):
        return ""
    if _is_missing(parsed):
        return ""
    return parsed.date().isoformat()


def parse_sick_leave(value: Any, hours_per_month: int = OPM_HOURS_PER_MONTH) -> str:
    """Sick leave cell -> hours.

    "5 months" converts at ``hours_per_month`` (rounded to the whole hour);
    a plain number, with any unit text stripped, is already hours.
    """
    if _is_missing(value):
        return ""
    if _is_number(value):
        amount = _to_decimal(value)
        return "" if amount is None else _format_decimal(amount)
    text = str(value).strip().lower()
    months = _SICK_LEAVE_MONTHS.search(text)
    if months:
        hours = Decimal(months.group(1)) * hours_per_month
        return str(int(hours.quantize(Decimal(1), rounding=ROUND_HALF_UP)))
    digits = _NON_NUMERIC.sub("", text)
    if not digits:
        return ""
    amount = _to_decimal(digits)
    return "" if amount is None else _format_decimal(amount)


def map_select(value: Any, allowed: Sequence[str], fallback: str) -> str:
    """Case-insensitive match against ``allowed``; returns the allowed spelling or ``fallback``."""
    if _is_missing(value):
        return fallback
    wanted = str(value).strip().lower()
    for option in allowed:
        if option.lower() == wanted:
            return option
    return fallback


def map_survivor_election(value: Any) -> str:
    """Survivor election cell -> '0', '25' or '50' (percent of annuity)."""
    if _is_missing(value):
        return "0"
    if _is_number(value):
        fraction = float(value)
        if fraction > 1:
            # whole percentage typed as a number
            fraction /= 100
        if fraction >= 0.45:
            return "50"
        if fraction >= 0.2:
            return "25"
        return "0"
    text = str(value).replace("%", "").strip()
    if text in ("50", "0.5"):
        return "50"
    if text in ("25", "0.25"):
        return "25"
    return "0"
