# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the MealBattle Champion API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    MealBattleException,
    mealbattle_exception_handler,
    validation_exception_handler,
)
from app.routers import champion, health, tasks
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    logger.info(f"Starting MealBattle Champion API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Bucketing: exclude_weekends={settings.CHAMPION_EXCLUDE_WEEKENDS} "
        f"exclude_fixed_holidays={settings.CHAMPION_EXCLUDE_FIXED_HOLIDAYS} "
        f"timezone={settings.SCHOOL_TIMEZONE}"
    )
    if not settings.ADMIN_API_KEY:
        logger.warning("ADMIN_API_KEY is not set; admin endpoints will reject every request")

    yield

    logger.info("Shutting down MealBattle Champion API")


# Create FastAPI application
app = FastAPI(
    title="MealBattle Champion API",
    description="""
## School Lunch Quiz Champions

Students answer a daily quiz about their school lunch. A student who answers
correctly on every meal day of a week (or of the whole month) becomes that
period's champion.

### Week Buckets

| Bucket | Dates |
|--------|-------|
| **0** | Days before the month's first Monday (month total only) |
| **1..5** | Monday-start weeks of the month |

### Champion Rule

`required > 0` and `achieved == required` for the period.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Champion",
            "description": "Week bucketing, criteria and champion evaluation",
        },
        {
            "name": "Tasks",
            "description": "Track queued criteria and batch-check tasks",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MealBattleException)
async def handle_mealbattle_exception(request: Request, exc: MealBattleException):
    """Handle custom MealBattle exceptions."""
    return await mealbattle_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle request body/path validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Database failures surface as 503 with the wrapper's error code."""
    logger.error(f"Database error on {request.url.path}: {exc}")
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=503, content=content)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Champion endpoints
app.include_router(
    champion.router,
    prefix="/api/v1/champion",
    tags=["Champion"]
)

# Task status endpoints
app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "MealBattle Champion API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
