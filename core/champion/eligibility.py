# =============================================================================
# core/champion/eligibility.py - Champion Eligibility
# =============================================================================
# Compares required day counts (criteria) with a student's correct-answer
# counts per week and per month.
#
# Rule: champion = required > 0 AND required == achieved
#
# Equality, not "at least": answering more quizzes than there were meal days
# does not make a champion.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from app.exceptions import InvalidArgumentError
from core.champion.bucketer import CRITERIA_WEEKS, WeekBuckets


@dataclass(frozen=True)
class PeriodCounts:
    """Per-week (1..5) and month-total counts for one period."""

    week_1: int = 0
    week_2: int = 0
    week_3: int = 0
    week_4: int = 0
    week_5: int = 0
    month_total: int = 0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidArgumentError(
                    message=f"Count '{f.name}' must be a non-negative integer, got {value!r}",
                    details={"field": f.name, "value": repr(value)},
                )

    def week(self, index: int) -> int:
        return getattr(self, f"week_{index}")

    @classmethod
    def from_buckets(cls, buckets: WeekBuckets) -> PeriodCounts:
        """Build counts from a bucketing result (week 0 only feeds month_total)."""
        return cls(
            **{f"week_{index}": buckets.week(index) for index in CRITERIA_WEEKS},
            month_total=buckets.month_total,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any], suffix: str = "days") -> PeriodCounts:
        """
        Build counts from a database row.

        Reads week_N_<suffix> columns plus month_total; missing or null
        columns count as 0.
        """
        return cls(
            **{
                f"week_{index}": row.get(f"week_{index}_{suffix}") or 0
                for index in CRITERIA_WEEKS
            },
            month_total=row.get("month_total") or 0,
        )

    def to_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class EligibilityResult:
    """Champion flag per week bucket and for the whole month."""

    week_1: bool = False
    week_2: bool = False
    week_3: bool = False
    week_4: bool = False
    week_5: bool = False
    month_champion: bool = False

    def week(self, index: int) -> bool:
        return getattr(self, f"week_{index}")

    def weekly_champions(self) -> list[int]:
        """Week numbers this result is champion for."""
        return [index for index in CRITERIA_WEEKS if self.week(index)]

    @property
    def is_any_champion(self) -> bool:
        return self.month_champion or bool(self.weekly_champions())

    def to_record_fields(self) -> dict[str, bool]:
        """Column values for the user_champion_records table."""
        record = {f"week_{index}_champion": self.week(index) for index in CRITERIA_WEEKS}
        record["month_champion"] = self.month_champion
        return record

    def to_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def is_champion(required: int, achieved: int) -> bool:
    return required > 0 and required == achieved


def evaluate(criteria: PeriodCounts, achieved: PeriodCounts) -> EligibilityResult:
    """
    Decide champion status for every week bucket and for the month.

    Args:
        criteria: Required counts (meal days) per period
        achieved: Correct-answer counts per period

    Returns:
        EligibilityResult with one flag per week plus month_champion
    """
    return EligibilityResult(
        **{
            f"week_{index}": is_champion(criteria.week(index), achieved.week(index))
            for index in CRITERIA_WEEKS
        },
        month_champion=is_champion(criteria.month_total, achieved.month_total),
    )
