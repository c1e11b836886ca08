# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API and the champion core.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class MealBattleException(Exception):
    """
    Base exception for the Meal Battle champion service.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MEALBATTLE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Core Exceptions
# =============================================================================

class InvalidArgumentError(MealBattleException):
    """
    Raised by the week-bucketing core for any input it refuses to guess about.

    Covers out-of-range months, dates outside the accepted window, dates that
    span more than one month pair, and negative or non-integer counts.
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code="INVALID_ARGUMENT",
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


# =============================================================================
# Persistence Exceptions
# =============================================================================

class CriteriaNotFoundError(MealBattleException):
    """Raised when no champion criteria row exists for a school/month."""

    def __init__(self, school_code: str, year: int, month: int):
        super().__init__(
            message=f"Champion criteria not found: {school_code} {year}-{month:02d}",
            code="CRITERIA_NOT_FOUND",
            status_code=404,
            suggestion=(
                "Refresh the criteria first using "
                "POST /champion/criteria/{school_code}/{year}/{month}/refresh"
            ),
            details={"school_code": school_code, "year": year, "month": month},
        )


class SchoolNotFoundError(MealBattleException):
    """Raised when a school code is not registered in school_infos."""

    def __init__(self, school_code: str):
        super().__init__(
            message=f"School not found: {school_code}",
            code="SCHOOL_NOT_FOUND",
            status_code=404,
            suggestion="Check that the school_code is correct and the school has been registered",
            details={"school_code": school_code},
        )


class UnauthorizedError(MealBattleException):
    """Raised when an admin endpoint is called without a valid API key."""

    def __init__(self):
        super().__init__(
            message="A valid admin API key is required",
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Send the key in the X-API-Key header",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def mealbattle_exception_handler(
    request: Request,
    exc: MealBattleException
) -> JSONResponse:
    """
    Convert MealBattleException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
