# =============================================================================
# core/models/criteria.py - Bucketing & Criteria Schemas
# =============================================================================
# These models define the API contract for week bucketing and criteria:
# - BucketRequest: meal dates + options to bucket (no database involved)
# - BucketResponse: per-week counts and month total
# - PeriodCountsModel: week_1..week_5 + month_total counts
# - CriteriaResponse: stored criteria for a school/month
# - CriteriaRefreshResponse: result of recomputing criteria
#
# Week buckets:
#   0      -> days before the month's first Monday (counted in month_total only)
#   1..5   -> Monday-start weeks of the month
# =============================================================================

from pydantic import BaseModel, Field

from core.champion import BucketOptions, PeriodCounts, WeekBuckets


class BucketRequest(BaseModel):
    """
    Schema for bucketing a list of meal dates.

    Month is validated by the bucketer itself so that a bad month yields the
    same INVALID_ARGUMENT error as any other bad input.

    Example:
        {
            "school_code": "7010569",
            "year": 2025,
            "month": 6,
            "meal_dates": ["20250602", "2025-06-03"],
            "exclude_weekends": true
        }
    """

    school_code: str = Field(
        default="",
        max_length=32,
        description="School identifier (echoed back)"
    )

    year: int = Field(..., description="Target year")

    month: int = Field(..., description="Target month (1-12)")

    meal_dates: list[str] = Field(
        default_factory=list,
        description="Meal-service dates as YYYYMMDD or YYYY-MM-DD; duplicates are ignored"
    )

    exclude_weekends: bool = Field(
        default=False,
        description="Drop Saturday/Sunday dates before bucketing"
    )

    exclude_fixed_holidays: bool = Field(
        default=False,
        description="Drop fixed-date public holidays before bucketing"
    )

    include_month_number: bool = Field(
        default=False,
        description="Echo the month number in the response"
    )

    include_trailing_week: bool = Field(
        default=False,
        description="Accept next-month dates that complete this month's last week"
    )

    def to_options(self) -> BucketOptions:
        return BucketOptions(
            exclude_weekends=self.exclude_weekends,
            exclude_fixed_holidays=self.exclude_fixed_holidays,
            include_month_number=self.include_month_number,
            include_trailing_week=self.include_trailing_week,
        )


class BucketResponse(BaseModel):
    """
    Schema for a bucketing result.

    Example:
        {
            "school_code": "7010569",
            "year": 2025,
            "month": 6,
            "weekly": {"0": 0, "1": 4, "2": 5, "3": 5, "4": 5, "5": 1},
            "month_total": 20,
            "month_number": null
        }
    """

    school_code: str
    year: int
    month: int
    weekly: dict[int, int] = Field(
        default_factory=dict,
        description="Qualifying meal days per week bucket (0..5)"
    )
    month_total: int = Field(default=0, ge=0)
    month_number: int | None = None

    @classmethod
    def from_buckets(cls, buckets: WeekBuckets) -> "BucketResponse":
        return cls(
            school_code=buckets.school_code,
            year=buckets.year,
            month=buckets.month,
            weekly=dict(buckets.weekly),
            month_total=buckets.month_total,
            month_number=buckets.month_number,
        )


class PeriodCountsModel(BaseModel):
    """
    Counts per week bucket (1..5) and for the whole month.

    Used for both required counts (criteria) and achieved counts.
    Negative values are rejected by the core with INVALID_ARGUMENT.
    """

    week_1: int = 0
    week_2: int = 0
    week_3: int = 0
    week_4: int = 0
    week_5: int = 0
    month_total: int = 0

    def to_counts(self) -> PeriodCounts:
        return PeriodCounts(**self.model_dump())

    @classmethod
    def from_counts(cls, counts: PeriodCounts) -> "PeriodCountsModel":
        return cls(**counts.to_dict())


class CriteriaResponse(BaseModel):
    """Stored champion criteria for a school/month."""

    school_code: str
    year: int
    month: int
    criteria: PeriodCountsModel


class CriteriaRefreshResponse(BaseModel):
    """Result of recomputing criteria for one school/month."""

    school_code: str
    year: int
    month: int
    saved: bool = Field(description="False when the school has no meal data that month")
    criteria: PeriodCountsModel | None = None
    message: str
