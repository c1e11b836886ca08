# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It keeps a single client connection and provides specialized methods for:
# - School registry lookups (school_infos)
# - Meal-service dates (meal_menus)
# - Champion criteria (champion_criteria)
# - Quiz results (quiz_results)
# - User champion records (user_champion_records)
#
# Every write is an upsert keyed on the table's natural key, so schedulers,
# registration hooks and manual triggers can run the same flow concurrently.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   dates = SupabaseClient.fetch_meal_dates("7010569", start, end, "중식")
# =============================================================================

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import format_db_date, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST caps a single response; larger reads are paged
PAGE_SIZE = 1000

CRITERIA_CONFLICT_KEY = "school_code,year,month"
RECORD_CONFLICT_KEY = "user_id,school_code,grade,year,month"

# Grade stored on records that span every grade of a school
ALL_GRADES = 0


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    One client instance is shared across the process. All methods are class
    methods; services receive this class as their `db` collaborator so tests
    can substitute a mock.

    Example:
        criteria = SupabaseClient.fetch_champion_criteria("7010569", 2025, 6)
        if criteria:
            print(criteria["month_total"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _select_all(cls, build_query: Callable[[], Any]) -> list[dict[str, Any]]:
        """
        Run a select query page by page until a short page is returned.

        Args:
            build_query: Callable returning a fresh, un-executed query builder
        """
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            response = build_query().range(offset, offset + PAGE_SIZE - 1).execute()
            page = response.data or []
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                return rows
            offset += PAGE_SIZE

    # -------------------------------------------------------------------------
    # Schools
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_school(cls, school_code: str) -> dict[str, Any] | None:
        """
        Fetch a registered school by code.

        Returns:
            School dict (school_code, office_code), or None if not registered

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("school_infos")
                .select("school_code, office_code")
                .eq("school_code", school_code)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch school: {e}",
                code="FETCH_SCHOOL_FAILED",
                details={"school_code": school_code}
            )

    @classmethod
    def list_schools(cls) -> list[dict[str, Any]]:
        """
        List every registered school.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            schools = cls._select_all(
                lambda: client.table("school_infos")
                .select("school_code, office_code")
                .order("school_code")
            )
            logger.debug(f"Fetched {len(schools)} schools")
            return schools

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list schools: {e}",
                code="LIST_SCHOOLS_FAILED",
                suggestion="Check that the school_infos table is accessible",
            )

    # -------------------------------------------------------------------------
    # Meal Menus
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_meal_dates(
        cls,
        school_code: str,
        start: date,
        end: date,
        meal_type: str,
    ) -> list[str]:
        """
        Fetch the dates on which a meal of `meal_type` was served.

        Args:
            school_code: School identifier
            start: First date (inclusive)
            end: Last date (inclusive)
            meal_type: meal_menus.meal_type value (e.g. lunch)

        Returns:
            List of YYYY-MM-DD strings, one per meal_menus row (may repeat)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            rows = cls._select_all(
                lambda: client.table("meal_menus")
                .select("meal_date")
                .eq("school_code", school_code)
                .eq("meal_type", meal_type)
                .gte("meal_date", format_db_date(start))
                .lte("meal_date", format_db_date(end))
                .order("meal_date")
            )
            return [row["meal_date"] for row in rows if row.get("meal_date")]

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch meal dates: {e}",
                code="FETCH_MEAL_DATES_FAILED",
                suggestion="Check that meal_menus has been populated for this school",
                details={
                    "school_code": school_code,
                    "start": format_db_date(start),
                    "end": format_db_date(end),
                }
            )

    # -------------------------------------------------------------------------
    # Champion Criteria
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_champion_criteria(
        cls,
        school_code: str,
        year: int,
        month: int,
    ) -> dict[str, Any] | None:
        """
        Fetch the criteria row for a school/month.

        Returns:
            Criteria dict, or None if not computed yet

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("champion_criteria")
                .select("*")
                .eq("school_code", school_code)
                .eq("year", year)
                .eq("month", month)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch champion criteria: {e}",
                code="FETCH_CRITERIA_FAILED",
                details={"school_code": school_code, "year": year, "month": month}
            )

    @classmethod
    def upsert_champion_criteria(cls, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert or update a criteria row keyed by (school_code, year, month).

        Raises:
            SupabaseClientError: If upsert fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("champion_criteria")
                .upsert(row, on_conflict=CRITERIA_CONFLICT_KEY)
                .execute()
            )
            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Upsert returned no data",
                code="UPSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to save champion criteria: {e}",
                code="UPSERT_CRITERIA_FAILED",
                details={
                    "school_code": row.get("school_code"),
                    "year": row.get("year"),
                    "month": row.get("month"),
                }
            )

    # -------------------------------------------------------------------------
    # Quiz Results
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_quiz_results(
        cls,
        user_id: str | UUID,
        school_code: str,
        start: date,
        end: date,
        grade: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch a user's quiz answers (correct or not) in a date range.

        Args:
            grade: Only answers given in this grade; None for every grade

        Returns:
            Rows with date, is_correct and answer_time (seconds, may be null)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        def build():
            query = (
                client.table("quiz_results")
                .select("date,is_correct,answer_time")
                .eq("user_id", user_id_str)
                .eq("school_code", school_code)
                .gte("date", format_db_date(start))
                .lte("date", format_db_date(end))
            )
            if grade is not None:
                query = query.eq("grade", grade)
            return query.order("date")

        try:
            return [row for row in cls._select_all(build) if row.get("date")]

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch quiz results: {e}",
                code="FETCH_QUIZ_RESULTS_FAILED",
                details={"user_id": user_id_str, "school_code": school_code, "grade": grade}
            )

    @classmethod
    def fetch_quiz_participants(
        cls,
        school_code: str,
        start: date,
        end: date,
        grade: int | None = None,
    ) -> list[str]:
        """
        Fetch distinct user ids with any quiz result in a date range.

        Returns:
            Sorted list of user id strings

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        def build():
            query = (
                client.table("quiz_results")
                .select("user_id")
                .eq("school_code", school_code)
                .gte("date", format_db_date(start))
                .lte("date", format_db_date(end))
            )
            if grade is not None:
                query = query.eq("grade", grade)
            return query.order("user_id")

        try:
            rows = cls._select_all(build)
            return sorted({str(row["user_id"]) for row in rows if row.get("user_id")})

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch quiz participants: {e}",
                code="FETCH_PARTICIPANTS_FAILED",
                details={"school_code": school_code}
            )

    # -------------------------------------------------------------------------
    # User Champion Records
    # -------------------------------------------------------------------------

    @classmethod
    def upsert_user_champion_record(cls, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert or update a record keyed by (user_id, school_code, grade, year, month).

        Raises:
            SupabaseClientError: If upsert fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("user_champion_records")
                .upsert(row, on_conflict=RECORD_CONFLICT_KEY)
                .execute()
            )
            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Upsert returned no data",
                code="UPSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to save champion record: {e}",
                code="UPSERT_RECORD_FAILED",
                details={
                    "user_id": row.get("user_id"),
                    "school_code": row.get("school_code"),
                    "grade": row.get("grade"),
                    "year": row.get("year"),
                    "month": row.get("month"),
                }
            )

    @classmethod
    def fetch_user_champion_records(
        cls,
        user_id: str | UUID,
        school_code: str | None = None,
        year: int | None = None,
        grade: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch a user's champion records, newest month first.

        Args:
            user_id: The user UUID
            school_code: Optional school filter
            year: Optional year filter
            grade: Optional grade filter (ALL_GRADES for school-wide records)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            query = client.table("user_champion_records").select("*").eq("user_id", user_id_str)
            if school_code:
                query = query.eq("school_code", school_code)
            if year:
                query = query.eq("year", year)
            if grade is not None:
                query = query.eq("grade", grade)

            response = query.order("year", desc=True).order("month", desc=True).execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch champion records: {e}",
                code="FETCH_RECORDS_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def fetch_school_champion_records(
        cls,
        school_code: str,
        year: int,
        month: int,
        grade: int = ALL_GRADES,
    ) -> list[dict[str, Any]]:
        """
        Fetch every user's champion record for a school/month and grade.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            return cls._select_all(
                lambda: client.table("user_champion_records")
                .select("*")
                .eq("school_code", school_code)
                .eq("grade", grade)
                .eq("year", year)
                .eq("month", month)
                .order("user_id")
            )

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch school champion records: {e}",
                code="FETCH_SCHOOL_RECORDS_FAILED",
                details={"school_code": school_code, "grade": grade, "year": year, "month": month}
            )
