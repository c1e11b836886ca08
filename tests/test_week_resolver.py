# =============================================================================
# tests/test_week_resolver.py - Week-of-Month Resolution Tests
# =============================================================================
# This module contains tests for:
# - first_monday / week_monday helpers
# - resolve_week_index (week 0, ordinary weeks, next-month overflow)
# - Window and month validation errors
# - week_date_range
# =============================================================================

from datetime import date, datetime, timedelta

import pytest

from app.exceptions import InvalidArgumentError
from core.champion.week_resolver import (
    MAX_YEAR,
    MIN_YEAR,
    first_monday,
    month_bounds,
    resolve_week_index,
    shift_month,
    validate_month,
    week_date_range,
    week_monday,
)


# =============================================================================
# Helper Tests
# =============================================================================

class TestFirstMonday:
    """Test first_monday()."""

    def test_month_starting_on_sunday(self):
        """June 2025 starts on a Sunday; first Monday is the 2nd."""
        assert first_monday(2025, 6) == date(2025, 6, 2)

    def test_month_starting_on_monday(self):
        """September 2025 starts on a Monday; the 1st is returned."""
        assert first_monday(2025, 9) == date(2025, 9, 1)

    def test_month_starting_on_tuesday(self):
        """July 2025 starts on a Tuesday; the next Monday is the 7th."""
        assert first_monday(2025, 7) == date(2025, 7, 7)

    @pytest.mark.parametrize("year,month", [(2024, 2), (2025, 1), (2025, 12), (2026, 3)])
    def test_always_monday_within_first_week(self, year, month):
        monday = first_monday(year, month)
        assert monday.weekday() == 0
        assert monday.month == month
        assert 1 <= monday.day <= 7


class TestMonthHelpers:
    """Test shift_month(), month_bounds() and week_monday()."""

    def test_shift_month_wraps_year_forward(self):
        assert shift_month(2025, 12, 1) == (2026, 1)

    def test_shift_month_wraps_year_backward(self):
        assert shift_month(2025, 1, -1) == (2024, 12)

    def test_month_bounds_leap_february(self):
        assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_week_monday(self):
        # Sunday 2025-06-08 belongs to the week starting Monday 2025-06-02
        assert week_monday(date(2025, 6, 8)) == date(2025, 6, 2)
        assert week_monday(date(2025, 6, 2)) == date(2025, 6, 2)


# =============================================================================
# Resolver Tests
# =============================================================================

class TestResolveWeekIndex:
    """Test resolve_week_index()."""

    def test_day_before_first_monday_is_week_zero(self):
        """2025-06-01 is a Sunday before the first Monday."""
        assert resolve_week_index(2025, 6, date(2025, 6, 1)) == 0

    def test_first_monday_is_week_one(self):
        assert resolve_week_index(2025, 6, date(2025, 6, 2)) == 1

    def test_sunday_closes_week(self):
        assert resolve_week_index(2025, 6, date(2025, 6, 8)) == 1
        assert resolve_week_index(2025, 6, date(2025, 6, 9)) == 2

    def test_last_day_of_june_is_week_five(self):
        """2025-06-30 is exactly four weeks after June 2."""
        assert resolve_week_index(2025, 6, date(2025, 6, 30)) == 5

    def test_month_starting_monday_has_no_week_zero(self):
        assert resolve_week_index(2025, 9, date(2025, 9, 1)) == 1

    def test_next_month_dates_can_exceed_five(self):
        """Dates past the fifth week are returned raw."""
        assert resolve_week_index(2025, 6, date(2025, 7, 7)) == 6

    def test_previous_month_date_is_week_zero(self):
        assert resolve_week_index(2025, 6, date(2025, 5, 20)) == 0

    def test_datetime_is_accepted(self):
        assert resolve_week_index(2025, 6, datetime(2025, 6, 2, 12, 30)) == 1

    def test_monotonic_within_month(self):
        """Week index never decreases as the date advances."""
        for year, month in [(2025, 6), (2025, 9), (2024, 2), (2026, 3)]:
            start, end = month_bounds(year, month)
            previous = -1
            day = start
            while day <= end:
                index = resolve_week_index(year, month, day)
                assert index >= previous
                assert 0 <= index <= 5
                previous = index
                day += timedelta(days=1)

    def test_date_outside_window_raises(self):
        """Only the previous, current and next month are accepted."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_week_index(2025, 6, date(2025, 8, 1))
        assert exc_info.value.code == "INVALID_ARGUMENT"
        assert exc_info.value.status_code == 400

        with pytest.raises(InvalidArgumentError):
            resolve_week_index(2025, 6, date(2025, 4, 30))

    def test_window_edges_accepted(self):
        assert resolve_week_index(2025, 6, date(2025, 5, 1)) == 0
        assert resolve_week_index(2025, 6, date(2025, 7, 31)) == 9

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month_raises(self, month):
        with pytest.raises(InvalidArgumentError):
            resolve_week_index(2025, month, date(2025, 6, 2))

    def test_non_date_raises(self):
        with pytest.raises(InvalidArgumentError):
            resolve_week_index(2025, 6, "2025-06-02")


class TestValidateMonth:
    """Test validate_month()."""

    def test_valid(self):
        validate_month(2025, 1)
        validate_month(2025, 12)

    def test_supported_year_range_is_inclusive(self):
        validate_month(MIN_YEAR, 1)
        validate_month(MAX_YEAR, 12)

    @pytest.mark.parametrize("year,month", [
        (2025, True),
        ("2025", 6),
        (2025, 6.0),
        (1800, 6),
        (MIN_YEAR - 1, 12),
        (MAX_YEAR + 1, 1),
    ])
    def test_invalid(self, year, month):
        with pytest.raises(InvalidArgumentError):
            validate_month(year, month)


# =============================================================================
# Week Range Tests
# =============================================================================

class TestWeekDateRange:
    """Test week_date_range()."""

    def test_week_zero(self):
        assert week_date_range(2025, 7, 0) == (date(2025, 7, 1), date(2025, 7, 6))

    def test_week_zero_missing_when_month_starts_monday(self):
        with pytest.raises(InvalidArgumentError):
            week_date_range(2025, 9, 0)

    def test_week_one(self):
        assert week_date_range(2025, 6, 1) == (date(2025, 6, 2), date(2025, 6, 8))

    def test_week_five_runs_into_next_month(self):
        assert week_date_range(2025, 6, 5) == (date(2025, 6, 30), date(2025, 7, 6))

    @pytest.mark.parametrize("week_index", [-1, 6, True])
    def test_invalid_index(self, week_index):
        with pytest.raises(InvalidArgumentError):
            week_date_range(2025, 6, week_index)

    def test_range_agrees_with_resolver(self):
        for week_index in range(1, 6):
            start, end = week_date_range(2025, 6, week_index)
            assert resolve_week_index(2025, 6, start) == week_index
            assert resolve_week_index(2025, 6, end) == week_index
