# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background tasks for champion criteria and batch champion checks.
#
# Tasks:
# - refresh_school_criteria: Recompute one school's criteria for a month
# - initialize_school_criteria: Current + next month for a new school
# - refresh_next_month_criteria: Next month for every school (beat schedule)
# - batch_check_champions: Evaluate every participant of a school/month
#
# Database failures are retried; bad arguments and missing rows are
# returned as {"success": False, "error": ...} without retrying.
# =============================================================================

import logging
from typing import Any

from celery import current_task, shared_task

from app.exceptions import MealBattleException
from core.champion import shift_month
from core.services import ChampionService, CriteriaService
from lib.supabase_client import SupabaseClientError
from lib.utils import school_today

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task and current_task.request.id:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100),
                "message": message,
            }
        )


def _failure(error: MealBattleException) -> dict[str, Any]:
    return {"success": False, "error": error.message, "code": error.code}


# =============================================================================
# Criteria Tasks
# =============================================================================

@shared_task(bind=True, name="workers.tasks.refresh_school_criteria")
def refresh_school_criteria(self, school_code: str, year: int, month: int) -> dict[str, Any]:
    """
    Recompute and store criteria for one school/month.

    Returns:
        Dict with success, saved (False when the month has no meal data)
        and month_total
    """
    logger.info(f"Refreshing criteria for {school_code} {year}-{month}")
    update_progress(1, 2, "Computing criteria...")

    try:
        saved = CriteriaService().refresh_criteria(school_code, year, month)
    except MealBattleException as e:
        logger.warning(f"Criteria refresh rejected for {school_code}: {e.message}")
        return _failure(e)
    except SupabaseClientError as e:
        logger.error(f"Criteria refresh failed for {school_code}, retrying: {e}")
        raise self.retry(exc=e)

    update_progress(2, 2, "Complete!")
    return {
        "success": True,
        "school_code": school_code,
        "year": year,
        "month": month,
        "saved": saved is not None,
        "month_total": saved.get("month_total", 0) if saved else 0,
    }


@shared_task(bind=True, name="workers.tasks.initialize_school_criteria")
def initialize_school_criteria(self, school_code: str) -> dict[str, Any]:
    """
    Compute criteria for a newly registered school (current + next month).
    """
    logger.info(f"Initializing criteria for new school {school_code}")
    update_progress(1, 2, "Computing current and next month...")

    try:
        months = CriteriaService().initialize_school(school_code)
    except MealBattleException as e:
        logger.warning(f"School initialization rejected for {school_code}: {e.message}")
        return _failure(e)
    except SupabaseClientError as e:
        logger.error(f"School initialization failed for {school_code}, retrying: {e}")
        raise self.retry(exc=e)

    update_progress(2, 2, "Complete!")
    return {
        "success": True,
        "school_code": school_code,
        "months": months,
    }


@shared_task(bind=True, name="workers.tasks.refresh_next_month_criteria")
def refresh_next_month_criteria(self) -> dict[str, Any]:
    """
    Compute next month's criteria for every registered school.

    Scheduled by celery beat on CRITERIA_SCHEDULE_DAY, once the schools have
    published next month's menus. "Next month" is taken from the school
    timezone's current date.
    """
    today = school_today()
    year, month = shift_month(today.year, today.month, 1)
    logger.info(f"Scheduled criteria refresh for {year}-{month:02d}")
    update_progress(1, 2, f"Refreshing {year}-{month:02d} for all schools...")

    try:
        summary = CriteriaService().refresh_all_schools(year, month)
    except SupabaseClientError as e:
        logger.error(f"Could not list schools for scheduled refresh, retrying: {e}")
        raise self.retry(exc=e)

    update_progress(2, 2, "Complete!")
    # "success" in the service summary counts saved schools
    return {**summary, "saved": summary["success"], "success": summary["error"] == 0}


# =============================================================================
# Champion Tasks
# =============================================================================

@shared_task(bind=True, name="workers.tasks.batch_check_champions")
def batch_check_champions(
    self,
    school_code: str,
    year: int,
    month: int,
    grade: int | None = None,
) -> dict[str, Any]:
    """
    Evaluate and store champion status for every quiz participant.

    Returns:
        Dict with the batch summary (processed, champions, error, weekly,
        monthly, details). success is False when any user failed.
    """
    logger.info(f"Batch champion check for {school_code} {year}-{month} grade={grade}")
    update_progress(1, 2, "Checking participants...")

    try:
        summary = ChampionService().batch_check(school_code, year, month, grade=grade)
    except MealBattleException as e:
        logger.warning(f"Batch check rejected for {school_code}: {e.message}")
        return _failure(e)
    except SupabaseClientError as e:
        logger.error(f"Batch check failed for {school_code}, retrying: {e}")
        raise self.retry(exc=e)

    update_progress(2, 2, "Complete!")
    # JSON results need string keys
    summary["weekly"] = {str(k): v for k, v in summary["weekly"].items()}
    return {**summary, "success": summary["error"] == 0}
