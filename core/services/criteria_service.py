# =============================================================================
# core/services/criteria_service.py - Champion Criteria
# =============================================================================
# Turns a school's meal calendar into "champion criteria": the number of
# meal days per week bucket and per month. Stored in champion_criteria,
# keyed by (school_code, year, month).
#
# Triggered from three places that may overlap:
# - school registration (current + next month)
# - the monthly schedule (next month, every school)
# - manual admin refresh
# All of them end in the same idempotent upsert.
# =============================================================================

import logging
from datetime import date
from typing import Any

from app.config import settings
from app.exceptions import CriteriaNotFoundError, MealBattleException, SchoolNotFoundError
from core.champion import (
    BucketOptions,
    PeriodCounts,
    WeekBuckets,
    bucket_meal_days,
    month_bounds,
    shift_month,
)
from core.champion.week_resolver import validate_month
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import school_today

logger = logging.getLogger(__name__)


def default_bucket_options() -> BucketOptions:
    """Bucket options for criteria and achievement counts, from settings."""
    return BucketOptions(
        exclude_weekends=settings.CHAMPION_EXCLUDE_WEEKENDS,
        exclude_fixed_holidays=settings.CHAMPION_EXCLUDE_FIXED_HOLIDAYS,
    )


class CriteriaService:
    """
    Service for computing and storing champion criteria.

    Args:
        db: Supabase wrapper (the SupabaseClient class, or a mock in tests)
        options: Bucketing options; defaults come from settings
    """

    def __init__(
        self,
        db: type[SupabaseClient] = SupabaseClient,
        options: BucketOptions | None = None,
    ):
        self.db = db
        self.options = options or default_bucket_options()

    def fetch_meal_dates(self, school_code: str, year: int, month: int) -> list[str]:
        """Lunch dates served by a school within one calendar month."""
        validate_month(year, month)
        start, end = month_bounds(year, month)
        return self.db.fetch_meal_dates(school_code, start, end, settings.LUNCH_MEAL_TYPE)

    def compute_criteria(self, school_code: str, year: int, month: int) -> WeekBuckets:
        """
        Compute criteria for a school/month without saving them.

        Returns:
            WeekBuckets for the month (all zero if no meals were served)
        """
        meal_dates = self.fetch_meal_dates(school_code, year, month)
        return bucket_meal_days(school_code, year, month, meal_dates, self.options)

    def refresh_criteria(self, school_code: str, year: int, month: int) -> dict[str, Any] | None:
        """
        Compute and upsert criteria for a school/month.

        Returns:
            The saved criteria row, or None when the school has no meal data
            for that month. Nothing is written in that case, and a row saved
            by an earlier refresh is kept as it was.

        Raises:
            InvalidArgumentError: If year/month are invalid
            SupabaseClientError: If reading meals or saving criteria fails
        """
        meal_dates = self.fetch_meal_dates(school_code, year, month)
        if not meal_dates:
            if self.db.fetch_champion_criteria(school_code, year, month):
                logger.warning(
                    f"No meal data for {school_code} {year}-{month:02d}; "
                    f"keeping previously stored criteria"
                )
            else:
                logger.info(f"No meal data for {school_code} {year}-{month:02d}, skipping criteria")
            return None

        buckets = bucket_meal_days(school_code, year, month, meal_dates, self.options)

        try:
            saved = self.db.upsert_champion_criteria(buckets.to_criteria_row())
        except SupabaseClientError as e:
            logger.error(f"Failed to save criteria for {school_code} {year}-{month:02d}: {e}")
            raise

        logger.info(
            f"Saved criteria for {school_code} {year}-{month:02d}: "
            f"weeks={[buckets.week(i) for i in range(1, 6)]} total={buckets.month_total}"
        )
        return saved

    def get_criteria(self, school_code: str, year: int, month: int) -> PeriodCounts:
        """
        Load stored criteria.

        Raises:
            CriteriaNotFoundError: If no criteria row exists yet
        """
        validate_month(year, month)
        row = self.db.fetch_champion_criteria(school_code, year, month)
        if not row:
            raise CriteriaNotFoundError(school_code, year, month)
        return PeriodCounts.from_row(row, suffix="days")

    def initialize_school(
        self,
        school_code: str,
        today: date | None = None,
    ) -> list[dict[str, Any]]:
        """
        Compute criteria for a newly registered school.

        Covers the current month and the next one (December rolls over to
        January of the following year).

        Returns:
            One summary dict per month: {year, month, saved, month_total}

        Raises:
            SchoolNotFoundError: If the school is not registered
        """
        if not self.db.fetch_school(school_code):
            raise SchoolNotFoundError(school_code)

        today = today or school_today()
        months = [(today.year, today.month), shift_month(today.year, today.month, 1)]

        results = []
        for year, month in months:
            saved = self.refresh_criteria(school_code, year, month)
            results.append({
                "year": year,
                "month": month,
                "saved": saved is not None,
                "month_total": saved.get("month_total", 0) if saved else 0,
            })

        logger.info(f"Initialized criteria for school {school_code}: {results}")
        return results

    def refresh_all_schools(self, year: int, month: int) -> dict[str, Any]:
        """
        Refresh criteria for every registered school.

        A failure for one school is recorded in the summary and does not stop
        the others.

        Returns:
            {"year", "month", "success", "skipped", "error", "details": [...]}
        """
        validate_month(year, month)
        schools = self.db.list_schools()
        logger.info(f"Refreshing {year}-{month:02d} criteria for {len(schools)} schools")

        summary: dict[str, Any] = {
            "year": year,
            "month": month,
            "success": 0,
            "skipped": 0,
            "error": 0,
            "details": [],
        }

        for school in schools:
            school_code = school["school_code"]
            try:
                saved = self.refresh_criteria(school_code, year, month)
            except (SupabaseClientError, MealBattleException) as e:
                logger.error(f"[{school_code}] criteria refresh failed: {e}")
                summary["error"] += 1
                summary["details"].append({"school_code": school_code, "status": "error", "error": str(e)})
                continue

            if saved is None:
                summary["skipped"] += 1
                summary["details"].append({"school_code": school_code, "status": "skipped"})
            else:
                summary["success"] += 1
                summary["details"].append({
                    "school_code": school_code,
                    "status": "success",
                    "month_total": saved.get("month_total", 0),
                })

        logger.info(
            f"Criteria refresh {year}-{month:02d} done: "
            f"{summary['success']} saved, {summary['skipped']} skipped, {summary['error']} failed"
        )
        return summary
