# =============================================================================
# core/champion/ - Week Bucketing & Champion Eligibility
# =============================================================================
# Pure, side-effect-free computation shared by every champion flow:
# - week_resolver.py: date -> week-of-month index (Monday-start)
# - holidays.py: fixed-date holiday list and weekend test
# - bucketer.py: meal dates -> per-week counts + month total
# - eligibility.py: criteria vs. achieved counts -> champion flags
# - quiz_stats.py: accuracy and answer-time totals
#
# Nothing in this package performs I/O.
# =============================================================================

from .week_resolver import (
    MAX_WEEK_INDEX,
    first_monday,
    month_bounds,
    resolve_week_index,
    shift_month,
    week_date_range,
    week_monday,
)
from .holidays import FIXED_HOLIDAYS, holiday_name, is_fixed_holiday, is_weekend
from .bucketer import BucketOptions, WeekBuckets, bucket_meal_days
from .eligibility import EligibilityResult, PeriodCounts, evaluate
from .quiz_stats import QuizStats

__all__ = [
    # Resolver
    "MAX_WEEK_INDEX",
    "first_monday",
    "month_bounds",
    "resolve_week_index",
    "shift_month",
    "week_date_range",
    "week_monday",
    # Holidays
    "FIXED_HOLIDAYS",
    "holiday_name",
    "is_fixed_holiday",
    "is_weekend",
    # Bucketing
    "BucketOptions",
    "WeekBuckets",
    "bucket_meal_days",
    # Eligibility
    "EligibilityResult",
    "PeriodCounts",
    "evaluate",
    # Statistics
    "QuizStats",
]
