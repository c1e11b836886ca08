# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from app.exceptions import InvalidArgumentError


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Args:
        value: UUID as string or UUID object

    Returns:
        String representation of the UUID

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Date Utilities
# =============================================================================

def parse_meal_date(value: str | date) -> date:
    """
    Parse a meal-service date into a `date`.

    Accepts:
    - date / datetime objects (time part is dropped)
    - "YYYYMMDD" strings (NEIS MLSV_YMD format)
    - "YYYY-MM-DD" strings (meal_menus.meal_date, quiz_results.date)

    Raises:
        InvalidArgumentError: If the value is in any other format

    Example:
        parse_meal_date("20250602")    # date(2025, 6, 2)
        parse_meal_date("2025-06-02")  # date(2025, 6, 2)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        for fmt in ("%Y%m%d", "%Y-%m-%d"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue

    raise InvalidArgumentError(
        message=f"Unrecognised meal date: {value!r}",
        suggestion="Use YYYYMMDD or YYYY-MM-DD",
        details={"value": repr(value)},
    )


def format_db_date(value: date) -> str:
    """Format a date the way Supabase date columns expect it (YYYY-MM-DD)."""
    return value.isoformat()


def school_today(tz_name: str | None = None) -> date:
    """
    Today's date in the school timezone.

    Used by scheduled jobs to decide which month is "current".
    """
    from app.config import settings

    return datetime.now(ZoneInfo(tz_name or settings.SCHOOL_TIMEZONE)).date()
