# =============================================================================
# core/champion/quiz_stats.py - Answer Statistics
# =============================================================================
# Attempted/correct totals, accuracy and mean answer time for a set of
# quiz_results rows. Stored next to the champion flags of each record.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class QuizStats:
    """Attempted/correct totals for a month of quiz answers."""

    total_count: int = 0
    correct_count: int = 0
    accuracy_rate: float = 0.0
    avg_answer_time: float = 0.0

    @classmethod
    def from_results(cls, rows: Iterable[Mapping[str, Any]]) -> QuizStats:
        """
        Summarize quiz_results rows.

        accuracy_rate is a percentage rounded to two places. A missing
        answer_time counts as 0 seconds. Everything is 0 when there are no rows.
        """
        rows = list(rows)
        total = len(rows)
        if total == 0:
            return cls()

        correct = sum(1 for row in rows if row.get("is_correct"))
        answer_time = sum(float(row.get("answer_time") or 0) for row in rows)
        return cls(
            total_count=total,
            correct_count=correct,
            accuracy_rate=round(correct / total * 100, 2),
            avg_answer_time=round(answer_time / total, 2),
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
