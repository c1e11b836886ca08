# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a MagicMock standing in for the Supabase wrapper
# - Provides common criteria / quiz fixtures (June 2025)
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from unittest.mock import MagicMock

import pytest

from core.champion import BucketOptions

ADMIN_HEADERS = {"X-API-Key": "test-admin-key"}

USER_ID = "550e8400-e29b-41d4-a716-446655440000"
OTHER_USER_ID = "6ba7b810-9dad-11d1-80b4-00c04fd430c8"


def quiz_rows(dates, is_correct=True, answer_time=10):
    """quiz_results rows (date, is_correct, answer_time), one per date."""
    return [{"date": d, "is_correct": is_correct, "answer_time": answer_time} for d in dates]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def weekday_options():
    """Options used for real criteria: weekends and fixed holidays dropped."""
    return BucketOptions(exclude_weekends=True, exclude_fixed_holidays=True)


@pytest.fixture
def june_2025_lunch_dates():
    """
    Every weekday of June 2025 (June 1 is a Sunday, June 6 is Memorial Day).

    With weekday_options this buckets to:
        week 1: Jun 2-5 (4, the 6th is a holiday)
        weeks 2-4: 5 each
        week 5: Jun 30 (1)
        month_total: 20
    """
    days = [d for d in range(1, 31) if (d % 7) not in (0, 1)]  # drop Sat(7,14..)/Sun(1,8..)
    return [f"2025-06-{d:02d}" for d in days]


@pytest.fixture
def june_2025_criteria_row():
    """Stored champion_criteria row for June 2025."""
    return {
        "school_code": "7010569",
        "year": 2025,
        "month": 6,
        "week_1_days": 4,
        "week_2_days": 5,
        "week_3_days": 5,
        "week_4_days": 5,
        "week_5_days": 1,
        "month_total": 20,
    }


@pytest.fixture
def mock_db(june_2025_criteria_row):
    """
    MagicMock in place of the SupabaseClient class.

    Defaults describe a registered school with June 2025 criteria and no
    quiz activity; tests override individual methods as needed.
    """
    db = MagicMock()
    db.fetch_school.return_value = {"school_code": "7010569", "office_code": "B10"}
    db.list_schools.return_value = [{"school_code": "7010569", "office_code": "B10"}]
    db.fetch_meal_dates.return_value = []
    db.fetch_champion_criteria.return_value = june_2025_criteria_row
    db.upsert_champion_criteria.side_effect = lambda row: row
    db.fetch_quiz_results.return_value = []
    db.fetch_quiz_participants.return_value = []
    db.upsert_user_champion_record.side_effect = lambda row: row
    db.fetch_user_champion_records.return_value = []
    db.fetch_school_champion_records.return_value = []
    return db
