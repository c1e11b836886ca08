# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - champion/: Pure week bucketing and eligibility (no I/O)
# - models/: Pydantic schemas for the API contract
# - services/: Criteria, achievement and champion flows over Supabase
#
# Code in this package should NOT import from FastAPI routers or Celery.
# This keeps the logic testable and reusable.
# =============================================================================
