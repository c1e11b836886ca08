# =============================================================================
# core/champion/holidays.py - Fixed-Date Public Holidays
# =============================================================================
# Solar-calendar holidays that fall on the same month/day every year.
# Lunar holidays (Seollal, Chuseok) and substitute holidays move every year
# and are NOT listed here.
# =============================================================================

from datetime import date

FIXED_HOLIDAYS: dict[tuple[int, int], str] = {
    (1, 1): "New Year's Day",
    (3, 1): "Independence Movement Day",
    (5, 5): "Children's Day",
    (6, 6): "Memorial Day",
    (8, 15): "Liberation Day",
    (10, 3): "National Foundation Day",
    (10, 9): "Hangul Day",
    (12, 25): "Christmas",
}


def holiday_name(day: date) -> str | None:
    """Name of the fixed holiday on `day`, or None."""
    return FIXED_HOLIDAYS.get((day.month, day.day))


def is_fixed_holiday(day: date) -> bool:
    return (day.month, day.day) in FIXED_HOLIDAYS


def is_weekend(day: date) -> bool:
    # Saturday=5, Sunday=6
    return day.weekday() >= 5
