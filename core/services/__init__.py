# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .criteria_service import CriteriaService, default_bucket_options
from .achievement_service import Achievement, AchievementService
from .champion_service import ChampionCheck, ChampionService

__all__ = [
    "CriteriaService",
    "default_bucket_options",
    "Achievement",
    "AchievementService",
    "ChampionCheck",
    "ChampionService",
]
