# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# Exercises the FastAPI app through TestClient. The Supabase wrapper is
# replaced via dependency_overrides; Celery calls are patched.
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_supabase_client
from app.main import app
from lib.supabase_client import SupabaseClientError

from tests.conftest import ADMIN_HEADERS, OTHER_USER_ID, USER_ID, quiz_rows


@pytest.fixture
def client(mock_db):
    """TestClient with the database dependency pointed at mock_db."""
    app.dependency_overrides[get_supabase_client] = lambda: mock_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Health & Root
# =============================================================================

class TestHealth:
    """Health endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/api/v1/health"

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready_degraded_when_database_unreachable(self, client):
        with patch(
            "lib.supabase_client.SupabaseClient.get_client",
            side_effect=SupabaseClientError("no client", code="CLIENT_INIT_FAILED"),
        ):
            response = client.get("/api/v1/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"


# =============================================================================
# Pure Endpoints
# =============================================================================

class TestBucketsEndpoint:
    """POST /champion/buckets."""

    def test_buckets(self, client):
        response = client.post("/api/v1/champion/buckets", json={
            "school_code": "7010569",
            "year": 2025,
            "month": 6,
            "meal_dates": ["20250601", "20250602", "2025-06-03", "2025-06-06"],
            "exclude_weekends": True,
            "exclude_fixed_holidays": True,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["weekly"] == {"0": 0, "1": 2, "2": 0, "3": 0, "4": 0, "5": 0}
        assert data["month_total"] == 2

    def test_invalid_month_is_400(self, client):
        response = client.post("/api/v1/champion/buckets", json={
            "year": 2025,
            "month": 13,
            "meal_dates": [],
        })

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"

    def test_out_of_month_date_is_400(self, client):
        response = client.post("/api/v1/champion/buckets", json={
            "year": 2025,
            "month": 6,
            "meal_dates": ["2025-07-01"],
        })

        assert response.status_code == 400
        assert response.json()["details"]["dates"] == ["2025-07-01"]

    def test_missing_body_field_is_422(self, client):
        response = client.post("/api/v1/champion/buckets", json={"month": 6})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestEvaluateEndpoint:
    """POST /champion/evaluate."""

    def test_exact_match(self, client):
        response = client.post("/api/v1/champion/evaluate", json={
            "criteria": {"week_1": 4, "week_2": 0, "month_total": 4},
            "achieved": {"week_1": 4, "week_2": 0, "month_total": 4},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["week_1"] is True
        assert data["week_2"] is False
        assert data["month_champion"] is True
        assert data["weekly_champions"] == [1]

    def test_negative_count_is_400(self, client):
        response = client.post("/api/v1/champion/evaluate", json={
            "criteria": {"week_1": -1},
            "achieved": {},
        })

        assert response.status_code == 400


# =============================================================================
# Criteria Endpoints
# =============================================================================

class TestCriteriaEndpoints:
    """Criteria read / refresh / initialize."""

    def test_get_criteria(self, client):
        response = client.get("/api/v1/champion/criteria/7010569/2025/6")

        assert response.status_code == 200
        assert response.json()["criteria"]["month_total"] == 20

    def test_get_criteria_not_found(self, client, mock_db):
        mock_db.fetch_champion_criteria.return_value = None

        response = client.get("/api/v1/champion/criteria/7010569/2025/7")

        assert response.status_code == 404
        assert response.json()["code"] == "CRITERIA_NOT_FOUND"

    def test_refresh_requires_admin_key(self, client, mock_db):
        response = client.post("/api/v1/champion/criteria/7010569/2025/6/refresh")

        assert response.status_code == 401
        mock_db.fetch_meal_dates.assert_not_called()

    def test_refresh_wrong_admin_key(self, client):
        response = client.post(
            "/api/v1/champion/criteria/7010569/2025/6/refresh",
            headers={"X-API-Key": "wrong"},
        )
        assert response.status_code == 401

    def test_refresh(self, client, mock_db, june_2025_lunch_dates):
        mock_db.fetch_meal_dates.return_value = june_2025_lunch_dates

        response = client.post(
            "/api/v1/champion/criteria/7010569/2025/6/refresh",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["saved"] is True
        assert data["criteria"]["week_1"] == 4
        assert data["criteria"]["month_total"] == 20

    def test_refresh_without_meals(self, client):
        response = client.post(
            "/api/v1/champion/criteria/7010569/2025/6/refresh",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["saved"] is False
        assert response.json()["criteria"] is None

    def test_refresh_database_failure_is_503(self, client, mock_db, june_2025_lunch_dates):
        mock_db.fetch_meal_dates.return_value = june_2025_lunch_dates
        mock_db.upsert_champion_criteria.side_effect = SupabaseClientError(
            "down", code="UPSERT_CRITERIA_FAILED"
        )

        response = client.post(
            "/api/v1/champion/criteria/7010569/2025/6/refresh",
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 503
        assert response.json()["code"] == "UPSERT_CRITERIA_FAILED"

    def test_initialize_school(self, client):
        response = client.post("/api/v1/champion/schools/7010569/initialize", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        assert len(response.json()["months"]) == 2

    def test_initialize_unknown_school(self, client, mock_db):
        mock_db.fetch_school.return_value = None

        response = client.post("/api/v1/champion/schools/0000000/initialize", headers=ADMIN_HEADERS)

        assert response.status_code == 404
        assert response.json()["code"] == "SCHOOL_NOT_FOUND"


# =============================================================================
# Champion Endpoints
# =============================================================================

class TestChampionEndpoints:
    """Calculate, batch check, records and summary."""

    def test_calculate(self, client, mock_db):
        mock_db.fetch_quiz_results.return_value = quiz_rows(
            ["2025-06-02", "2025-06-03", "2025-06-04", "2025-06-05"]
        ) + quiz_rows(["2025-06-09"], is_correct=False, answer_time=20)

        response = client.post("/api/v1/champion/calculate", json={
            "user_id": USER_ID,
            "school_code": "7010569",
            "year": 2025,
            "month": 6,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == USER_ID
        assert data["achieved"]["week_1"] == 4
        assert data["result"]["weekly_champions"] == [1]
        assert data["grade"] is None
        assert data["stats"] == {
            "total_count": 5, "correct_count": 4, "accuracy_rate": 80.0, "avg_answer_time": 12.0,
        }
        mock_db.upsert_user_champion_record.assert_called_once()

    def test_calculate_for_grade(self, client, mock_db):
        response = client.post("/api/v1/champion/calculate", json={
            "user_id": USER_ID,
            "school_code": "7010569",
            "grade": 3,
            "year": 2025,
            "month": 6,
        })

        assert response.status_code == 200
        assert response.json()["grade"] == 3
        assert mock_db.fetch_quiz_results.call_args.args[4] == 3
        assert mock_db.upsert_user_champion_record.call_args.args[0]["grade"] == 3

    def test_calculate_invalid_grade(self, client):
        response = client.post("/api/v1/champion/calculate", json={
            "user_id": USER_ID,
            "school_code": "7010569",
            "grade": 0,
            "year": 2025,
            "month": 6,
        })
        assert response.status_code == 422

    def test_calculate_invalid_user_id(self, client):
        response = client.post("/api/v1/champion/calculate", json={
            "user_id": "nope",
            "school_code": "7010569",
            "year": 2025,
            "month": 6,
        })
        assert response.status_code == 422

    def test_batch_check_inline(self, client, mock_db):
        mock_db.fetch_quiz_participants.return_value = [USER_ID]

        response = client.post(
            "/api/v1/champion/batch-check",
            json={"school_code": "7010569", "year": 2025, "month": 6},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["processed"] == 1
        assert data["error"] == 0
        assert data["details"][0]["user_id"] == USER_ID
        assert data["task_id"] is None

    def test_batch_check_inline_reports_failed_users(self, client, mock_db):
        mock_db.fetch_quiz_participants.return_value = [USER_ID, OTHER_USER_ID]
        mock_db.upsert_user_champion_record.side_effect = [
            SupabaseClientError("timeout", code="UPSERT_RECORD_FAILED"),
            {"user_id": OTHER_USER_ID},
        ]

        response = client.post(
            "/api/v1/champion/batch-check",
            json={"school_code": "7010569", "year": 2025, "month": 6},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["processed"] == 1
        assert data["error"] == 1
        assert [d["status"] for d in data["details"]] == ["error", "success"]

    def test_batch_check_queued(self, client, mock_db):
        with patch("workers.tasks.batch_check_champions") as task:
            task.delay.return_value = MagicMock(id="task-123")
            response = client.post(
                "/api/v1/champion/batch-check",
                json={"school_code": "7010569", "year": 2025, "month": 6, "run_async": True},
                headers=ADMIN_HEADERS,
            )

        assert response.status_code == 200
        assert response.json()["task_id"] == "task-123"
        task.delay.assert_called_once_with("7010569", 2025, 6, grade=None)
        mock_db.fetch_quiz_participants.assert_not_called()

    def test_batch_check_requires_admin_key(self, client):
        response = client.post(
            "/api/v1/champion/batch-check",
            json={"school_code": "7010569", "year": 2025, "month": 6},
        )
        assert response.status_code == 401

    def test_records(self, client, mock_db):
        mock_db.fetch_user_champion_records.return_value = [{
            "user_id": USER_ID,
            "school_code": "7010569",
            "year": 2025,
            "month": 6,
            "week_1_champion": True,
            "month_champion": False,
        }]

        response = client.get(f"/api/v1/champion/records/{USER_ID}?school_code=7010569&year=2025")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["records"][0]["week_1_champion"] is True
        mock_db.fetch_user_champion_records.assert_called_once_with(USER_ID, "7010569", 2025, None)

    def test_records_grade_filter(self, client, mock_db):
        mock_db.fetch_user_champion_records.return_value = [{
            "user_id": USER_ID,
            "school_code": "7010569",
            "grade": 3,
            "year": 2025,
            "month": 6,
            "total_count": 20,
            "correct_count": 19,
            "accuracy_rate": 95.0,
            "avg_answer_time": None,
        }]

        response = client.get(f"/api/v1/champion/records/{USER_ID}?grade=3")

        assert response.status_code == 200
        record = response.json()["records"][0]
        assert record["grade"] == 3
        assert record["accuracy_rate"] == 95.0
        assert record["avg_answer_time"] == 0.0
        mock_db.fetch_user_champion_records.assert_called_once_with(USER_ID, None, None, 3)

    def test_summary(self, client, mock_db):
        mock_db.fetch_school_champion_records.return_value = [
            {"user_id": USER_ID, "week_1_champion": True, "month_champion": True},
        ]

        response = client.get("/api/v1/champion/summary/7010569/2025/6?grade=2")

        assert response.status_code == 200
        data = response.json()
        assert data["users"] == 1
        assert data["grade"] == 2
        assert data["weekly"]["1"] == 1
        assert data["monthly"] == 1
        assert data["weekly_champions"]["1"] == [USER_ID]
        assert data["monthly_champions"] == [USER_ID]
        mock_db.fetch_school_champion_records.assert_called_once_with("7010569", 2025, 6, 2)


# =============================================================================
# Task Endpoints
# =============================================================================

class TestTaskEndpoints:
    """GET /tasks/{task_id}."""

    def test_task_success(self, client):
        fake_result = MagicMock(status="SUCCESS", result={"success": True, "processed": 3})

        with patch("workers.celery_app.celery_app") as celery_app:
            celery_app.AsyncResult.return_value = fake_result
            response = client.get("/api/v1/tasks/task-123")

        assert response.status_code == 200
        data = response.json()
        assert data["progress"] == 100
        assert data["result"]["processed"] == 3

    def test_task_progress(self, client):
        fake_result = MagicMock(status="PROGRESS", info={"percent": 50, "message": "Checking participants..."})

        with patch("workers.celery_app.celery_app") as celery_app:
            celery_app.AsyncResult.return_value = fake_result
            response = client.get("/api/v1/tasks/task-123")

        assert response.json()["progress"] == 50
        assert response.json()["message"] == "Checking participants..."
