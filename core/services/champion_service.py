# =============================================================================
# core/services/champion_service.py - Weekly / Monthly Champions
# =============================================================================
# Compares a student's correct-answer counts with the school's criteria and
# stores the outcome in user_champion_records, keyed by
# (user_id, school_code, grade, year, month).
#
# Criteria are per school; the grade only narrows which quiz answers and
# participants are considered. Records checked without a grade are stored
# under ALL_GRADES.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from app.exceptions import MealBattleException
from core.champion import EligibilityResult, PeriodCounts, QuizStats, evaluate
from core.champion.bucketer import CRITERIA_WEEKS
from core.services.achievement_service import AchievementService
from core.services.criteria_service import CriteriaService
from lib.supabase_client import ALL_GRADES, SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChampionCheck:
    """Outcome of checking one user for one month."""

    user_id: str
    school_code: str
    year: int
    month: int
    criteria: PeriodCounts
    achieved: PeriodCounts
    result: EligibilityResult
    stats: QuizStats = field(default_factory=QuizStats)
    grade: int | None = None

    def to_record(self) -> dict[str, Any]:
        """Row shape for the user_champion_records table."""
        return {
            "user_id": self.user_id,
            "school_code": self.school_code,
            "grade": ALL_GRADES if self.grade is None else self.grade,
            "year": self.year,
            "month": self.month,
            **self.result.to_record_fields(),
            **self.stats.to_dict(),
        }


class ChampionService:
    """
    Service for champion evaluation and record keeping.

    Example:
        service = ChampionService(SupabaseClient)
        check = service.check_user(user_id, "7010569", 2025, 6, grade=3)
        check.result.month_champion  # True / False
    """

    def __init__(
        self,
        db: type[SupabaseClient] = SupabaseClient,
        criteria_service: CriteriaService | None = None,
        achievement_service: AchievementService | None = None,
    ):
        self.db = db
        self.criteria_service = criteria_service or CriteriaService(db)
        self.achievement_service = achievement_service or AchievementService(db)

    def _evaluate_and_save(
        self,
        user_id: str,
        school_code: str,
        year: int,
        month: int,
        criteria: PeriodCounts,
        grade: int | None = None,
    ) -> ChampionCheck:
        achievement = self.achievement_service.summarize(user_id, school_code, year, month, grade)
        check = ChampionCheck(
            user_id=user_id,
            school_code=school_code,
            year=year,
            month=month,
            criteria=criteria,
            achieved=achievement.counts,
            result=evaluate(criteria, achievement.counts),
            stats=achievement.stats,
            grade=grade,
        )

        try:
            self.db.upsert_user_champion_record(check.to_record())
        except SupabaseClientError as e:
            logger.error(f"Failed to save champion record for user {user_id}: {e}")
            raise

        return check

    def check_user(
        self,
        user_id: str | UUID,
        school_code: str,
        year: int,
        month: int,
        grade: int | None = None,
    ) -> ChampionCheck:
        """
        Evaluate and store one user's champion status for a month.

        Raises:
            CriteriaNotFoundError: If the school's criteria are missing
            SupabaseClientError: If reading or saving fails
        """
        user_id_str = normalize_uuid(user_id)
        criteria = self.criteria_service.get_criteria(school_code, year, month)
        check = self._evaluate_and_save(user_id_str, school_code, year, month, criteria, grade)

        logger.info(
            f"Champion check {user_id_str} {school_code} {year}-{month:02d}: "
            f"weeks={check.result.weekly_champions()} month={check.result.month_champion}"
        )
        return check

    def batch_check(
        self,
        school_code: str,
        year: int,
        month: int,
        grade: int | None = None,
    ) -> dict[str, Any]:
        """
        Check every user who took a quiz at the school during the month.

        A failure for one user is recorded in the summary and does not stop
        the others.

        Returns:
            {"school_code", "grade", "year", "month", "processed", "champions",
             "error", "weekly": {1: n, ...}, "monthly": n, "details": [...]}
            where "champions" counts users with at least one title.

        Raises:
            CriteriaNotFoundError: If the school's criteria are missing
            SupabaseClientError: If criteria or participants cannot be read
        """
        criteria = self.criteria_service.get_criteria(school_code, year, month)
        participants = self.achievement_service.list_participants(school_code, year, month, grade)
        logger.info(f"Batch champion check {school_code} {year}-{month:02d}: {len(participants)} users")

        summary: dict[str, Any] = {
            "school_code": school_code,
            "grade": grade,
            "year": year,
            "month": month,
            "processed": 0,
            "champions": 0,
            "error": 0,
            "weekly": {index: 0 for index in CRITERIA_WEEKS},
            "monthly": 0,
            "details": [],
        }

        for user_id in participants:
            try:
                check = self._evaluate_and_save(user_id, school_code, year, month, criteria, grade)
            except (SupabaseClientError, MealBattleException) as e:
                logger.error(f"[{school_code}] champion check failed for user {user_id}: {e}")
                summary["error"] += 1
                summary["details"].append({"user_id": user_id, "status": "error", "error": str(e)})
                continue

            summary["processed"] += 1
            if check.result.is_any_champion:
                summary["champions"] += 1
            for index in check.result.weekly_champions():
                summary["weekly"][index] += 1
            if check.result.month_champion:
                summary["monthly"] += 1
            summary["details"].append({
                "user_id": user_id,
                "status": "success",
                "weekly_champions": check.result.weekly_champions(),
                "month_champion": check.result.month_champion,
            })

        logger.info(
            f"Batch champion check {school_code} {year}-{month:02d} done: "
            f"{summary['processed']} processed, {summary['champions']} champions, "
            f"{summary['error']} failed"
        )
        return summary

    def get_records(
        self,
        user_id: str | UUID,
        school_code: str | None = None,
        year: int | None = None,
        grade: int | None = None,
    ) -> list[dict[str, Any]]:
        """Stored champion records for a user, newest month first."""
        return self.db.fetch_user_champion_records(normalize_uuid(user_id), school_code, year, grade)

    def get_summary(
        self,
        school_code: str,
        year: int,
        month: int,
        grade: int | None = None,
    ) -> dict[str, Any]:
        """
        Stored champions for a school/month: counts and the user ids per title.

        Returns:
            {"school_code", "grade", "year", "month", "users",
             "weekly": {1: n, ...}, "monthly": n,
             "weekly_champions": {1: [user_id, ...], ...},
             "monthly_champions": [user_id, ...]}
        """
        stored_grade = ALL_GRADES if grade is None else grade
        records = self.db.fetch_school_champion_records(school_code, year, month, stored_grade)

        weekly_champions = {
            index: [str(record["user_id"]) for record in records if record.get(f"week_{index}_champion")]
            for index in CRITERIA_WEEKS
        }
        monthly_champions = [str(record["user_id"]) for record in records if record.get("month_champion")]

        return {
            "school_code": school_code,
            "grade": grade,
            "year": year,
            "month": month,
            "users": len(records),
            "weekly": {index: len(users) for index, users in weekly_champions.items()},
            "monthly": len(monthly_champions),
            "weekly_champions": weekly_champions,
            "monthly_champions": monthly_champions,
        }
