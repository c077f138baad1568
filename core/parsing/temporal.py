# Path: core/parsing/temporal.py
# Purpose: Turn temporal phrases into concrete calendar ranges.
# Layer: core/parsing.
# Details: Range endpoints, numeric dates, and relative-period tags resolved with python-dateutil.

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Optional, Tuple

from dateutil import parser as dateparser
from dateutil.relativedelta import relativedelta

from core.models.parameters import DateRange
from .patterns import MONTH_NUMBERS, MONTHS, NUMERIC_DATE, YEAR

_MONTH_ENDPOINT = re.compile(
    rf"^({'|'.join(MONTHS)})(?:\s+(\d{{1,2}})(?:st|nd|rd|th)?)?(?:,?\s+(\d{{4}}))?$",
    re.IGNORECASE,
)

# (first month, last month) of each season; winter starts in the previous December.
SEASONS = {
    "spring": (3, 5),
    "summer": (6, 8),
    "fall": (9, 11),
    "autumn": (9, 11),
    "winter": (12, 2),
}

Endpoint = Tuple[date, date, bool]


def month_span(year: int, month: int) -> Tuple[date, date]:
    start = date(year, month, 1)
    return start, start + relativedelta(months=1) - timedelta(days=1)


def parse_numeric_date(text: str) -> Optional[date]:
    """Parse ``m/d/yy`` or ``m/d/yyyy``; return None when the date does not exist."""

    try:
        return dateparser.parse(text, dayfirst=False).date()
    except (ValueError, OverflowError):
        return None


def resolve_endpoint(text: str, default_year: int) -> Optional[Endpoint]:
    """
    Resolve one side of a range to ``(first_day, last_day, has_explicit_year)``.

    A bare year covers the whole year, a month covers the whole month, and a month with
    a day or a numeric date covers that single day.
    """

    text = text.strip().lower()
    if NUMERIC_DATE.fullmatch(text):
        day = parse_numeric_date(text)
        return (day, day, True) if day else None
    if YEAR.fullmatch(text):
        year = int(text)
        return date(year, 1, 1), date(year, 12, 31), True

    match = _MONTH_ENDPOINT.match(text)
    if not match:
        return None
    month = MONTH_NUMBERS[match.group(1).lower()]
    has_year = match.group(3) is not None
    year = int(match.group(3)) if has_year else default_year
    if match.group(2):
        try:
            day = date(year, month, int(match.group(2)))
        except ValueError:
            return None
        return day, day, has_year
    first, last = month_span(year, month)
    return first, last, has_year


def resolve_range(start_text: str, end_text: str, today: date) -> Optional[DateRange]:
    """Resolve a ``between X and Y`` / ``from X to Y`` pair, or None if either side is malformed."""

    start = resolve_endpoint(start_text, today.year)
    end = resolve_endpoint(end_text, today.year)
    if start is None or end is None:
        return None

    # An endpoint without a year borrows the other side's year.
    if start[2] and not end[2]:
        end = resolve_endpoint(end_text, start[0].year)
    elif end[2] and not start[2]:
        start = resolve_endpoint(start_text, end[1].year)
    if start is None or end is None:
        return None

    first, last = start[0], end[1]
    if last < first and not end[2]:
        # "from November to February" wraps into the following year.
        last = last + relativedelta(years=1)
    if last < first:
        return None
    return DateRange(start=first, end=last)


def _season_range(season: str, year: int) -> DateRange:
    first_month, last_month = SEASONS[season]
    if first_month > last_month:
        return DateRange(start=date(year - 1, first_month, 1), end=month_span(year, last_month)[1])
    return DateRange(start=date(year, first_month, 1), end=month_span(year, last_month)[1])


def resolve_relative_period(tag: str, today: Optional[date] = None) -> Optional[DateRange]:
    """
    Turn a normalized tag such as ``last_month`` or ``this_summer`` into a date range.

    ``last_week``/``last_month``/``last_year`` are rolling windows ending today; seasons
    refer to the most recent completed season for ``last_`` and the current calendar year
    for ``this_``. Unknown tags return None.
    """

    today = today or date.today()
    if tag == "today":
        return DateRange(start=today, end=today)
    if tag == "yesterday":
        day = today - timedelta(days=1)
        return DateRange(start=day, end=day)
    if tag == "tomorrow":
        day = today + timedelta(days=1)
        return DateRange(start=day, end=day)

    qualifier, _, unit = tag.partition("_")
    if qualifier not in {"last", "this", "next"} or not unit:
        return None

    if unit == "week":
        if qualifier == "last":
            return DateRange(start=today - timedelta(days=7), end=today)
        monday = today - timedelta(days=today.weekday())
        if qualifier == "next":
            monday = monday + timedelta(days=7)
        return DateRange(start=monday, end=monday + timedelta(days=6))
    if unit == "month":
        if qualifier == "last":
            return DateRange(start=today - relativedelta(months=1), end=today)
        anchor = today + relativedelta(months=1) if qualifier == "next" else today
        first, last = month_span(anchor.year, anchor.month)
        return DateRange(start=first, end=last)
    if unit == "year":
        if qualifier == "last":
            return DateRange(start=today - relativedelta(years=1), end=today)
        year = today.year + 1 if qualifier == "next" else today.year
        return DateRange(start=date(year, 1, 1), end=date(year, 12, 31))
    if unit in SEASONS:
        season = _season_range(unit, today.year)
        if qualifier == "last":
            if season.end >= today:
                season = _season_range(unit, today.year - 1)
        elif qualifier == "next":
            if season.start <= today:
                season = _season_range(unit, today.year + 1)
        return season
    return None
