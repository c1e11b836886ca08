# =============================================================================
# core/services/achievement_service.py - Correct-Answer Counts
# =============================================================================
# Counts a student's correct quiz answers per week bucket and per month.
# Quiz dates go through the same bucketer (and the same exclusion options)
# as the criteria, so both sides of the comparison share one week layout.
#
# Alongside the counts, the month's raw answers give the accuracy statistics
# stored with each champion record.
# =============================================================================

import logging
from dataclasses import dataclass
from uuid import UUID

from core.champion import BucketOptions, PeriodCounts, QuizStats, bucket_meal_days, month_bounds
from core.champion.week_resolver import validate_month
from core.services.criteria_service import default_bucket_options
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Achievement:
    """A user's month: bucketed correct days plus answer statistics."""

    counts: PeriodCounts
    stats: QuizStats


class AchievementService:
    """Service for reading quiz_results as per-period correct counts."""

    def __init__(
        self,
        db: type[SupabaseClient] = SupabaseClient,
        options: BucketOptions | None = None,
    ):
        self.db = db
        self.options = options or default_bucket_options()

    def summarize(
        self,
        user_id: str | UUID,
        school_code: str,
        year: int,
        month: int,
        grade: int | None = None,
    ) -> Achievement:
        """
        Correct-answer counts and answer statistics for a user in one month.

        At most one correct answer counts per day, matching the one-meal-per-day
        criteria. The statistics cover every answer in the month, including
        weekend and holiday answers the counts leave out.

        Args:
            grade: Only answers given in this grade; None for every grade
        """
        validate_month(year, month)
        start, end = month_bounds(year, month)
        user_id_str = normalize_uuid(user_id)

        rows = self.db.fetch_quiz_results(user_id_str, school_code, start, end, grade)
        correct_dates = [row["date"] for row in rows if row.get("is_correct")]
        buckets = bucket_meal_days(school_code, year, month, correct_dates, self.options)
        stats = QuizStats.from_results(rows)

        logger.debug(
            f"User {user_id_str} {school_code} {year}-{month:02d}: "
            f"{buckets.month_total} correct days, {stats.correct_count}/{stats.total_count} answers"
        )
        return Achievement(counts=PeriodCounts.from_buckets(buckets), stats=stats)

    def count_correct(
        self,
        user_id: str | UUID,
        school_code: str,
        year: int,
        month: int,
        grade: int | None = None,
    ) -> PeriodCounts:
        """Correct-answer counts for a user in one month."""
        return self.summarize(user_id, school_code, year, month, grade).counts

    def list_participants(
        self,
        school_code: str,
        year: int,
        month: int,
        grade: int | None = None,
    ) -> list[str]:
        """User ids with any quiz result for the school (and grade) in that month."""
        validate_month(year, month)
        start, end = month_bounds(year, month)
        return self.db.fetch_quiz_participants(school_code, start, end, grade)
