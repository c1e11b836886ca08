# =============================================================================
# core/models/champion.py - Champion Schemas
# =============================================================================
# These models define the API contract for champion evaluation:
# - EvaluateRequest / EligibilityResponse: pure criteria-vs-achieved check
# - CalculateRequest / CalculateResponse: check + persist one user
# - BatchCheckRequest / BatchCheckResponse: check every user of a school
# - QuizStatsModel: answer statistics stored with each record
# - ChampionRecord: stored user_champion_records row
# - ChampionSummary: champion counts and user ids for a school/month
#
# Champion rule: required > 0 AND achieved == required (exact match).
# grade is optional; without it every grade's answers count and the record
# is stored under grade 0.
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from core.champion import EligibilityResult, QuizStats
from core.models.criteria import PeriodCountsModel

# Columns of user_champion_records that default to 0 when stored as null
NUMERIC_RECORD_COLUMNS = ("grade", "total_count", "correct_count", "accuracy_rate", "avg_answer_time")


class EvaluateRequest(BaseModel):
    """
    Schema for a stateless eligibility check.

    Example:
        {
            "criteria": {"week_1": 4, "week_2": 0, "month_total": 4},
            "achieved": {"week_1": 4, "week_2": 0, "month_total": 4}
        }
    """

    criteria: PeriodCountsModel
    achieved: PeriodCountsModel


class EligibilityResponse(BaseModel):
    """Champion flags per week bucket and for the month."""

    week_1: bool = False
    week_2: bool = False
    week_3: bool = False
    week_4: bool = False
    week_5: bool = False
    month_champion: bool = False
    weekly_champions: list[int] = Field(
        default_factory=list,
        description="Week numbers the user is champion for"
    )

    @classmethod
    def from_result(cls, result: EligibilityResult) -> "EligibilityResponse":
        return cls(**result.to_dict(), weekly_champions=result.weekly_champions())


class QuizStatsModel(BaseModel):
    """Answer statistics for one user's month."""

    total_count: int = Field(default=0, ge=0, description="Quiz answers given")
    correct_count: int = Field(default=0, ge=0, description="Correct answers")
    accuracy_rate: float = Field(default=0.0, ge=0, le=100, description="Percent correct")
    avg_answer_time: float = Field(default=0.0, ge=0, description="Mean answer time in seconds")

    @classmethod
    def from_stats(cls, stats: QuizStats) -> "QuizStatsModel":
        return cls(**stats.to_dict())


class CalculateRequest(BaseModel):
    """
    Schema for checking and storing one user's champion status.

    Example:
        {
            "user_id": "550e8400-e29b-41d4-a716-446655440000",
            "school_code": "7010569",
            "grade": 3,
            "year": 2025,
            "month": 6
        }
    """

    user_id: UUID
    school_code: str = Field(..., min_length=1, max_length=32)
    grade: int | None = Field(default=None, ge=1, le=12, description="Omit for every grade")
    year: int
    month: int


class CalculateResponse(BaseModel):
    """Result of a single user's champion check."""

    user_id: str
    school_code: str
    grade: int | None = None
    year: int
    month: int
    criteria: PeriodCountsModel
    achieved: PeriodCountsModel
    stats: QuizStatsModel
    result: EligibilityResponse


class BatchCheckRequest(BaseModel):
    """
    Schema for checking every participant of a school/month.

    Set run_async to queue the work on a Celery worker instead of running
    it inside the request.
    """

    school_code: str = Field(..., min_length=1, max_length=32)
    grade: int | None = Field(default=None, ge=1, le=12, description="Omit for every grade")
    year: int
    month: int
    run_async: bool = False


class BatchCheckResponse(BaseModel):
    """
    Batch check summary, or the queued task id when run_async was set.

    details has one entry per participant: status "success" with the titles
    won, or status "error" with the failure message.
    """

    school_code: str
    grade: int | None = None
    year: int
    month: int
    processed: int = 0
    champions: int = 0
    error: int = 0
    weekly: dict[int, int] = Field(default_factory=dict)
    monthly: int = 0
    details: list[dict[str, Any]] = Field(default_factory=list)
    task_id: str | None = None
    message: str = "Batch check completed"


class ChampionRecord(BaseModel):
    """A stored user_champion_records row."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    user_id: str
    school_code: str
    grade: int = 0
    year: int
    month: int
    week_1_champion: bool = False
    week_2_champion: bool = False
    week_3_champion: bool = False
    week_4_champion: bool = False
    week_5_champion: bool = False
    month_champion: bool = False
    total_count: int = 0
    correct_count: int = 0
    accuracy_rate: float = 0.0
    avg_answer_time: float = 0.0
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ChampionRecord":
        data = dict(row)
        data["user_id"] = str(data.get("user_id"))
        for key, value in list(data.items()):
            if value is not None:
                continue
            if key.endswith("_champion"):
                data[key] = False
            elif key in NUMERIC_RECORD_COLUMNS:
                data[key] = 0
        return cls.model_validate(data)


class ChampionRecordList(BaseModel):
    """Schema for listing a user's champion records."""

    user_id: str
    records: list[ChampionRecord] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)


class ChampionSummary(BaseModel):
    """Champion counts and champion user ids for a school/month."""

    school_code: str
    grade: int | None = None
    year: int
    month: int
    users: int = 0
    weekly: dict[int, int] = Field(default_factory=dict)
    monthly: int = 0
    weekly_champions: dict[int, list[str]] = Field(
        default_factory=dict,
        description="Champion user ids per week number"
    )
    monthly_champions: list[str] = Field(default_factory=list)
