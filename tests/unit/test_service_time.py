from __future__ import annotations

from datetime import date

from fers_planner.services.service_time import Span, add_years, date_diff


def test_date_diff_whole_years():
    assert date_diff(date(1990, 6, 1), date(2027, 6, 1)) == Span(37, 0)


def test_date_diff_month_counts_on_anniversary_day():
    assert date_diff(date(1965, 3, 1), date(2027, 6, 1)) == Span(62, 3)
    assert date_diff(date(1965, 3, 15), date(2027, 6, 14)) == Span(62, 2)


def test_date_diff_borrows_from_years():
    assert date_diff(date(1990, 10, 1), date(2027, 6, 1)) == Span(36, 8)


def test_date_diff_negative_before_start():
    span = date_diff(date(2030, 1, 1), date(2027, 6, 1))
    assert span.years < 0


def test_fractional_years():
    assert Span(37, 6).fractional_years == 37.5


def test_add_years_leap_day():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 3, 1)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)
    assert add_years(date(2027, 6, 1), 11) == date(2038, 6, 1)
