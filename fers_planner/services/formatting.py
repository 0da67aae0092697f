from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from .projection import round_half_up
from .service_time import Span

"""Display formatting for preview values.

Every formatter returns an em dash for missing or unparseable input so a blank
field never renders as a misleading zero.
"""

__all__ = [
    "DASH",
    "fmt_date_short",
    "fmt_dollar",
    "fmt_number",
    "fmt_span",
]

DASH = "—"


def fmt_dollar(value: Any) -> str:
    """Whole-dollar amount with thousands separators: 41333.4 -> '$41,333'."""
    if value is None or value == "":
        return DASH
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return DASH
    if not amount.is_finite():
        return DASH
    return f"${round_half_up(float(amount)):,}"


def fmt_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


def fmt_date_short(value: date | None) -> str:
    """MM-DD-YY."""
    if value is None:
        return DASH
    return value.strftime("%m-%d-%y")


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def fmt_span(span: Span, *, allow_negative: bool = True) -> str:
    """'37 Years 1 Month'. Service before the SCD renders as a dash."""
    if span.years < 0 and not allow_negative:
        return DASH
    return f"{_plural(span.years, 'Year')} {_plural(span.months, 'Month')}"
