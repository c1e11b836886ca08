# =============================================================================
# core/champion/week_resolver.py - Week-of-Month Resolution
# =============================================================================
# Maps a calendar date to its 1-based week-of-month index under a
# Monday-start convention:
#
#   0      -> days before the month's first Monday
#   1..5   -> ordinary weeks, each starting on a Monday of the month
#   > 5    -> only reachable for dates in the following month; returned raw,
#             the bucketer decides what to do with them
#
# Usage:
#   from core.champion.week_resolver import resolve_week_index
#   resolve_week_index(2025, 6, date(2025, 6, 2))  # -> 1
# =============================================================================

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from app.exceptions import InvalidArgumentError

MAX_WEEK_INDEX = 5

# Supported years; the neighbouring months of the check window must stay valid dates
MIN_YEAR = 1900
MAX_YEAR = 2100

MONDAY = 0


# =============================================================================
# Month Helpers
# =============================================================================

def validate_month(year: int, month: int) -> None:
    """Raise InvalidArgumentError unless (year, month) is a real calendar month."""
    if isinstance(year, bool) or not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidArgumentError(
            message=f"Invalid year: {year!r}",
            suggestion=f"Pass the year as an integer between {MIN_YEAR} and {MAX_YEAR}",
            details={"year": repr(year)},
        )
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidArgumentError(
            message=f"Invalid month: {month!r}",
            suggestion="Months are 1-based integers between 1 and 12",
            details={"month": repr(month)},
        )


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Return (year, month) moved by `offset` months."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def first_monday(year: int, month: int) -> date:
    """
    Earliest Monday on or after the first day of the month.

    If the 1st is itself a Monday, that day is returned.
    """
    first_of_month = date(year, month, 1)
    days_to_monday = (MONDAY - first_of_month.weekday()) % 7
    return first_of_month + timedelta(days=days_to_monday)


def as_date(value: date) -> date:
    """Strip the time part of a datetime; reject anything that is not a date."""
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise InvalidArgumentError(
            message=f"Expected a calendar date, got {type(value).__name__}",
            details={"value": repr(value)},
        )
    return value


def week_monday(day: date) -> date:
    """Monday of the Monday-start week containing `day`."""
    return day - timedelta(days=day.weekday())


# =============================================================================
# Resolver
# =============================================================================

def resolve_week_index(year: int, month: int, day: date) -> int:
    """
    Resolve the week-of-month index of `day` relative to (year, month).

    Args:
        year: Target year
        month: Target month (1-12)
        day: Date to resolve. Must fall between the first day of the previous
            month and the last day of the next month.

    Returns:
        0 for days before the first Monday, otherwise floor(days / 7) + 1
        counted from the first Monday. Values above 5 are returned as-is.

    Raises:
        InvalidArgumentError: If the month is invalid or the date lies outside
            the accepted window.

    Example:
        resolve_week_index(2025, 6, date(2025, 6, 1))   # -> 0 (Sunday)
        resolve_week_index(2025, 6, date(2025, 6, 30))  # -> 5
    """
    validate_month(year, month)
    day = as_date(day)

    window_start = month_bounds(*shift_month(year, month, -1))[0]
    window_end = month_bounds(*shift_month(year, month, 1))[1]
    if not window_start <= day <= window_end:
        raise InvalidArgumentError(
            message=f"Date {day.isoformat()} is too far from {year}-{month:02d}",
            suggestion="Resolve dates against the month they belong to",
            details={
                "date": day.isoformat(),
                "window_start": window_start.isoformat(),
                "window_end": window_end.isoformat(),
            },
        )

    days_diff = (day - first_monday(year, month)).days
    if days_diff < 0:
        return 0
    return days_diff // 7 + 1


def week_date_range(year: int, month: int, week_index: int) -> tuple[date, date]:
    """
    Return the (start, end) dates covered by a week bucket.

    Week 0 spans from the 1st up to the day before the first Monday. Weeks
    1..5 span Monday to Sunday and may run into the next month.

    Raises:
        InvalidArgumentError: If the week index is outside 0..5, or is 0 for a
            month that starts on a Monday (no such bucket exists).
    """
    validate_month(year, month)
    if isinstance(week_index, bool) or not isinstance(week_index, int) \
            or not 0 <= week_index <= MAX_WEEK_INDEX:
        raise InvalidArgumentError(
            message=f"Invalid week index: {week_index!r}",
            suggestion=f"Week indexes run from 0 to {MAX_WEEK_INDEX}",
            details={"week_index": repr(week_index)},
        )

    monday = first_monday(year, month)

    if week_index == 0:
        first_of_month = date(year, month, 1)
        if monday == first_of_month:
            raise InvalidArgumentError(
                message=f"{year}-{month:02d} starts on a Monday and has no week 0",
                details={"year": year, "month": month},
            )
        return first_of_month, monday - timedelta(days=1)

    start = monday + timedelta(weeks=week_index - 1)
    return start, start + timedelta(days=6)
