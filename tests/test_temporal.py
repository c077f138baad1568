"""Tests for calendar range resolution."""

from datetime import date

import pytest

from core.models.parameters import DateRange
from core.parsing.temporal import resolve_endpoint, resolve_range, resolve_relative_period

TODAY = date(2024, 6, 15)


def test_endpoint_forms():
    assert resolve_endpoint("2020", 2024) == (date(2020, 1, 1), date(2020, 12, 31), True)
    assert resolve_endpoint("march", 2024) == (date(2024, 3, 1), date(2024, 3, 31), False)
    assert resolve_endpoint("March 5th, 2021", 2024) == (date(2021, 3, 5), date(2021, 3, 5), True)
    assert resolve_endpoint("February 30", 2024) is None
    assert resolve_endpoint("someday", 2024) is None


def test_range_wraps_past_december():
    assert resolve_range("November", "February", TODAY) == DateRange(start=date(2024, 11, 1), end=date(2025, 2, 28))


def test_range_with_explicit_years():
    assert resolve_range("2019", "2020", TODAY) == DateRange(start=date(2019, 1, 1), end=date(2020, 12, 31))
    assert resolve_range("2021", "2019", TODAY) is None


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("last_week", DateRange(start=date(2024, 6, 8), end=date(2024, 6, 15))),
        ("last_month", DateRange(start=date(2024, 5, 15), end=date(2024, 6, 15))),
        ("this_year", DateRange(start=date(2024, 1, 1), end=date(2024, 12, 31))),
        ("last_summer", DateRange(start=date(2023, 6, 1), end=date(2023, 8, 31))),
        ("this_winter", DateRange(start=date(2023, 12, 1), end=date(2024, 2, 29))),
        ("yesterday", DateRange(start=date(2024, 6, 14), end=date(2024, 6, 14))),
    ],
)
def test_relative_periods(tag, expected):
    assert resolve_relative_period(tag, TODAY) == expected


def test_unknown_relative_period():
    assert resolve_relative_period("someday", TODAY) is None
    assert resolve_relative_period("last_decade", TODAY) is None
