# =============================================================================
# core/champion/bucketer.py - Meal-Day Week Bucketing
# =============================================================================
# Partitions one school's meal-service dates for one month into week buckets
# 0..5 plus a month total. These counts are the "champion criteria": the
# number of correct quiz answers a student needs per week / per month.
#
# Bucketing rules:
#   1. Input is a set; duplicate dates collapse.
#   2. Optional weekend and fixed-holiday exclusion runs BEFORE bucketing.
#   3. Each date is placed with resolve_week_index().
#   4. A date whose week starts in the following month is never counted for
#      this month; it belongs to the next month's week 0.
#   5. month_total is the sum of every retained bucket, including week 0.
#
# Usage:
#   from core.champion.bucketer import bucket_meal_days, BucketOptions
#   buckets = bucket_meal_days("7010569", 2025, 6, dates,
#                              BucketOptions(exclude_weekends=True))
#   buckets.weekly      # {0: 0, 1: 4, 2: 5, ...}
#   buckets.month_total # 19
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from app.exceptions import InvalidArgumentError
from core.champion.holidays import is_fixed_holiday, is_weekend
from core.champion.week_resolver import (
    MAX_WEEK_INDEX,
    month_bounds,
    resolve_week_index,
    shift_month,
    validate_month,
    week_monday,
)
from lib.utils import parse_meal_date

logger = logging.getLogger(__name__)

# Week buckets that are persisted as per-week criteria (week 0 only feeds
# the month total).
CRITERIA_WEEKS = range(1, MAX_WEEK_INDEX + 1)


@dataclass(frozen=True)
class BucketOptions:
    """
    Switches for bucket_meal_days().

    Attributes:
        exclude_weekends: Drop Saturday/Sunday dates before bucketing
        exclude_fixed_holidays: Drop dates in FIXED_HOLIDAYS before bucketing
        include_month_number: Stamp the result with its month number
        include_trailing_week: Also accept dates from the following month so
            the last week of the month can be completed
    """

    exclude_weekends: bool = False
    exclude_fixed_holidays: bool = False
    include_month_number: bool = False
    include_trailing_week: bool = False


@dataclass(frozen=True)
class WeekBuckets:
    """
    Result of bucketing one school's meal days for one month.

    `weekly` is stored as a read-only mapping.
    """

    school_code: str
    year: int
    month: int
    weekly: Mapping[int, int] = field(default_factory=dict)
    month_total: int = 0
    month_number: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "weekly", MappingProxyType(dict(self.weekly)))

    def week(self, index: int) -> int:
        """Count for a single bucket (0 when empty)."""
        return self.weekly.get(index, 0)

    def to_criteria_row(self) -> dict[str, Any]:
        """Row shape for the champion_criteria table."""
        row: dict[str, Any] = {
            "school_code": self.school_code,
            "year": self.year,
            "month": self.month,
        }
        for index in CRITERIA_WEEKS:
            row[f"week_{index}_days"] = self.week(index)
        row["month_total"] = self.month_total
        return row


def _is_excluded(day: date, options: BucketOptions) -> bool:
    if options.exclude_weekends and is_weekend(day):
        return True
    if options.exclude_fixed_holidays and is_fixed_holiday(day):
        return True
    return False


def _assign_bucket(year: int, month: int, day: date) -> int | None:
    """
    Bucket index for `day`, or None when the day belongs to another month.

    A day is owned by this month only if the Monday of its week is inside
    this month, or it precedes the first Monday (bucket 0).
    """
    month_start, month_end = month_bounds(year, month)
    index = resolve_week_index(year, month, day)
    monday_in_month = month_start <= week_monday(day) <= month_end

    if day > month_end and not monday_in_month:
        return None
    if index > MAX_WEEK_INDEX:
        return MAX_WEEK_INDEX if monday_in_month else None
    return index


def bucket_meal_days(
    school_code: str,
    year: int,
    month: int,
    meal_dates: Iterable[date | str],
    options: BucketOptions | None = None,
) -> WeekBuckets:
    """
    Count qualifying meal-service days per week bucket for one month.

    Args:
        school_code: School identifier (carried through to the result)
        year: Target year
        month: Target month (1-12)
        meal_dates: Meal-service dates; date objects or YYYYMMDD / YYYY-MM-DD
            strings. Duplicates are ignored.
        options: Exclusion and boundary switches (defaults: none active)

    Returns:
        WeekBuckets with keys 0..5 always present and month_total equal to
        the sum of the buckets.

    Raises:
        InvalidArgumentError: If the month is invalid, or a date falls outside
            the target month (or outside the month pair when
            include_trailing_week is set).
    """
    validate_month(year, month)
    options = options or BucketOptions()

    month_start, month_end = month_bounds(year, month)
    last_accepted = month_end
    if options.include_trailing_week:
        last_accepted = month_bounds(*shift_month(year, month, 1))[1]

    unique_dates = sorted({parse_meal_date(value) for value in meal_dates})

    out_of_range = [d for d in unique_dates if not month_start <= d <= last_accepted]
    if out_of_range:
        raise InvalidArgumentError(
            message=(
                f"{len(out_of_range)} meal date(s) fall outside {year}-{month:02d}: "
                f"{', '.join(d.isoformat() for d in out_of_range[:5])}"
            ),
            suggestion=(
                "Bucket each month separately; only the following month is "
                "accepted, and only with include_trailing_week"
            ),
            details={
                "school_code": school_code,
                "accepted_from": month_start.isoformat(),
                "accepted_to": last_accepted.isoformat(),
                "dates": [d.isoformat() for d in out_of_range],
            },
        )

    weekly = {index: 0 for index in range(MAX_WEEK_INDEX + 1)}
    excluded = 0
    discarded = 0

    for day in unique_dates:
        if _is_excluded(day, options):
            excluded += 1
            continue

        bucket = _assign_bucket(year, month, day)
        if bucket is None:
            discarded += 1
            continue
        weekly[bucket] += 1

    month_total = sum(weekly.values())

    logger.debug(
        f"Bucketed {school_code} {year}-{month:02d}: {weekly} "
        f"(total={month_total}, excluded={excluded}, next_month={discarded})"
    )

    return WeekBuckets(
        school_code=school_code,
        year=year,
        month=month,
        weekly=weekly,
        month_total=month_total,
        month_number=month if options.include_month_number else None,
    )
