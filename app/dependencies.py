# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header

from app.config import settings
from app.exceptions import UnauthorizedError
from core.services import ChampionService, CriteriaService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client wrapper.

    Returns the class-level wrapper; tests override this dependency.
    """
    return SupabaseClient


# Type alias for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]


def get_criteria_service(db: SupabaseDep) -> CriteriaService:
    """Criteria service bound to the injected database wrapper."""
    return CriteriaService(db)


def get_champion_service(db: SupabaseDep) -> ChampionService:
    """Champion service bound to the injected database wrapper."""
    return ChampionService(db)


CriteriaServiceDep = Annotated[CriteriaService, Depends(get_criteria_service)]
ChampionServiceDep = Annotated[ChampionService, Depends(get_champion_service)]


def require_admin_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """
    Guard for admin/trigger endpoints.

    Raises:
        UnauthorizedError: If ADMIN_API_KEY is unset or the header doesn't match
    """
    expected = settings.ADMIN_API_KEY
    if not expected or not x_api_key or not hmac.compare_digest(x_api_key, expected):
        logger.warning("Rejected admin request: missing or invalid API key")
        raise UnauthorizedError()
