# =============================================================================
# app/routers/champion.py - Champion Endpoints
# =============================================================================
# Week bucketing, criteria management and champion evaluation.
#
# Public:
#   POST /champion/buckets, POST /champion/evaluate   (pure, no database)
#   GET  /champion/criteria/..., POST /champion/calculate,
#   GET  /champion/records/..., GET /champion/summary/...
# Admin (X-API-Key):
#   POST /champion/criteria/.../refresh, POST /champion/schools/.../initialize,
#   POST /champion/batch-check
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from app.dependencies import ChampionServiceDep, CriteriaServiceDep, require_admin_key
from core.champion import PeriodCounts, bucket_meal_days, evaluate
from core.models import (
    BatchCheckRequest,
    BatchCheckResponse,
    BucketRequest,
    BucketResponse,
    CalculateRequest,
    CalculateResponse,
    ChampionRecord,
    ChampionRecordList,
    ChampionSummary,
    CriteriaRefreshResponse,
    CriteriaResponse,
    EligibilityResponse,
    EvaluateRequest,
    PeriodCountsModel,
    QuizStatsModel,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SchoolCodePath = Annotated[str, Path(min_length=1, max_length=32, description="School code")]
YearPath = Annotated[int, Path(description="Year, e.g. 2025")]
MonthPath = Annotated[int, Path(description="Month (1-12)")]
GradeQuery = Annotated[int | None, Query(ge=1, le=12, description="Filter by grade")]


# =============================================================================
# Pure Computation
# =============================================================================

@router.post("/buckets", response_model=BucketResponse)
async def bucket_dates(request: BucketRequest):
    """
    Bucket meal dates into Monday-start weeks.

    Returns per-week counts (0..5) and the month total. Nothing is stored.
    """
    buckets = bucket_meal_days(
        request.school_code,
        request.year,
        request.month,
        request.meal_dates,
        request.to_options(),
    )
    return BucketResponse.from_buckets(buckets)


@router.post("/evaluate", response_model=EligibilityResponse)
async def evaluate_counts(request: EvaluateRequest):
    """
    Compare required and achieved counts.

    A period is won only when required > 0 and achieved equals it exactly.
    """
    result = evaluate(request.criteria.to_counts(), request.achieved.to_counts())
    return EligibilityResponse.from_result(result)


# =============================================================================
# Criteria
# =============================================================================

@router.get("/criteria/{school_code}/{year}/{month}", response_model=CriteriaResponse)
async def get_criteria(
    school_code: SchoolCodePath,
    year: YearPath,
    month: MonthPath,
    service: CriteriaServiceDep,
):
    """Get the stored criteria (required meal days) for a school/month."""
    criteria = service.get_criteria(school_code, year, month)
    return CriteriaResponse(
        school_code=school_code,
        year=year,
        month=month,
        criteria=PeriodCountsModel.from_counts(criteria),
    )


@router.post(
    "/criteria/{school_code}/{year}/{month}/refresh",
    response_model=CriteriaRefreshResponse,
    dependencies=[Depends(require_admin_key)],
)
async def refresh_criteria(
    school_code: SchoolCodePath,
    year: YearPath,
    month: MonthPath,
    service: CriteriaServiceDep,
):
    """
    Recompute criteria from the school's meal calendar and store them.

    Safe to call repeatedly; the row is upserted.
    """
    saved = service.refresh_criteria(school_code, year, month)
    if saved is None:
        return CriteriaRefreshResponse(
            school_code=school_code,
            year=year,
            month=month,
            saved=False,
            message="No meal data for this month; nothing saved",
        )

    return CriteriaRefreshResponse(
        school_code=school_code,
        year=year,
        month=month,
        saved=True,
        criteria=PeriodCountsModel.from_counts(PeriodCounts.from_row(saved, suffix="days")),
        message="Criteria saved",
    )


@router.post(
    "/schools/{school_code}/initialize",
    dependencies=[Depends(require_admin_key)],
)
async def initialize_school(
    school_code: SchoolCodePath,
    service: CriteriaServiceDep,
):
    """
    Compute criteria for a newly registered school.

    Covers the current and the next month.
    """
    months = service.initialize_school(school_code)
    return {
        "school_code": school_code,
        "months": months,
        "message": f"Initialized criteria for {len(months)} month(s)",
    }


# =============================================================================
# Champion Evaluation
# =============================================================================

@router.post("/calculate", response_model=CalculateResponse)
async def calculate_champion(
    request: CalculateRequest,
    service: ChampionServiceDep,
):
    """
    Check and store one user's weekly/monthly champion status.
    """
    check = service.check_user(
        request.user_id, request.school_code, request.year, request.month, grade=request.grade
    )
    return CalculateResponse(
        user_id=check.user_id,
        school_code=check.school_code,
        grade=check.grade,
        year=check.year,
        month=check.month,
        criteria=PeriodCountsModel.from_counts(check.criteria),
        achieved=PeriodCountsModel.from_counts(check.achieved),
        stats=QuizStatsModel.from_stats(check.stats),
        result=EligibilityResponse.from_result(check.result),
    )


@router.post(
    "/batch-check",
    response_model=BatchCheckResponse,
    dependencies=[Depends(require_admin_key)],
)
async def batch_check(
    request: BatchCheckRequest,
    service: ChampionServiceDep,
):
    """
    Check every user who took a quiz at the school during the month.

    With run_async=true the work is queued; poll GET /tasks/{task_id}.
    """
    if request.run_async:
        from workers.tasks import batch_check_champions

        task = batch_check_champions.delay(
            request.school_code, request.year, request.month, grade=request.grade
        )
        logger.info(f"Queued batch check {request.school_code} {request.year}-{request.month}: {task.id}")
        return BatchCheckResponse(
            school_code=request.school_code,
            grade=request.grade,
            year=request.year,
            month=request.month,
            task_id=task.id,
            message="Batch check queued",
        )

    summary = service.batch_check(request.school_code, request.year, request.month, grade=request.grade)
    return BatchCheckResponse(**summary)


@router.get("/records/{user_id}", response_model=ChampionRecordList)
async def get_records(
    user_id: Annotated[UUID, Path(description="User UUID")],
    service: ChampionServiceDep,
    school_code: Annotated[str | None, Query(max_length=32, description="Filter by school")] = None,
    year: Annotated[int | None, Query(description="Filter by year")] = None,
    grade: GradeQuery = None,
):
    """
    List a user's stored champion records, newest month first.
    """
    rows = service.get_records(user_id, school_code=school_code, year=year, grade=grade)
    records = [ChampionRecord.from_row(row) for row in rows]
    return ChampionRecordList(user_id=str(user_id), records=records, total=len(records))


@router.get("/summary/{school_code}/{year}/{month}", response_model=ChampionSummary)
async def get_summary(
    school_code: SchoolCodePath,
    year: YearPath,
    month: MonthPath,
    service: ChampionServiceDep,
    grade: GradeQuery = None,
):
    """
    Weekly and monthly champions for a school/month.

    Returns the number of champions per title and their user ids.
    """
    return ChampionSummary(**service.get_summary(school_code, year, month, grade=grade))
