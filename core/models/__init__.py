# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - criteria.py: week bucketing and champion criteria schemas
# - champion.py: eligibility, champion check and record schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Criteria Models - Week bucketing and required day counts
# -----------------------------------------------------------------------------
from .criteria import (
    BucketRequest,
    BucketResponse,
    CriteriaRefreshResponse,
    CriteriaResponse,
    PeriodCountsModel,
)

# -----------------------------------------------------------------------------
# Champion Models - Eligibility and stored records
# -----------------------------------------------------------------------------
from .champion import (
    BatchCheckRequest,
    BatchCheckResponse,
    CalculateRequest,
    CalculateResponse,
    ChampionRecord,
    ChampionRecordList,
    ChampionSummary,
    EligibilityResponse,
    EvaluateRequest,
    QuizStatsModel,
)

__all__ = [
    # Criteria
    "BucketRequest",
    "BucketResponse",
    "CriteriaRefreshResponse",
    "CriteriaResponse",
    "PeriodCountsModel",
    # Champion
    "BatchCheckRequest",
    "BatchCheckResponse",
    "CalculateRequest",
    "CalculateResponse",
    "ChampionRecord",
    "ChampionRecordList",
    "ChampionSummary",
    "EligibilityResponse",
    "EvaluateRequest",
    "QuizStatsModel",
]
