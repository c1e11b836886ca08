# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the MealBattle Champion service:
# - test_week_resolver.py / test_bucketer.py / test_eligibility.py: core
# - test_utils.py / test_models.py: helpers and API schemas
# - test_services.py: services against a mocked Supabase wrapper
# - test_api.py: HTTP endpoints through TestClient
# - test_tasks.py: Celery tasks and beat schedule
#
# Run tests with: pytest
# =============================================================================
