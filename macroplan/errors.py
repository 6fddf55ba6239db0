"""
Error codes and exceptions raised by MacroPlan services.

Every exception carries an HTTP status and a machine-readable code so the
API layer can turn it into {"error_code", "message", "details"} without
knowing which service raised it.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Machine-readable error codes, grouped by prefix."""

    PLAN_NOT_FOUND = "PLAN_NOT_FOUND"
    PLAN_GENERATION_FAILED = "PLAN_GENERATION_FAILED"
    PLAN_ENTRY_NOT_FOUND = "PLAN_ENTRY_NOT_FOUND"
    PLAN_SLOT_OUT_OF_RANGE = "PLAN_SLOT_OUT_OF_RANGE"

    RECIPE_NOT_FOUND = "RECIPE_NOT_FOUND"
    RECIPE_IN_USE = "RECIPE_IN_USE"

    DATABASE_QUERY_ERROR = "DATABASE_QUERY_ERROR"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Body of an error response."""
    error_code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(use_enum_values=True)


class MacroPlanError(Exception):
    """
    Base class for application errors.

    Subclasses set the class-level status_code and error_code; callers may
    still override both through the constructor.
    """

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            details=self.details or None,
        )


# Meal plans

class PlanNotFoundError(MacroPlanError):
    status_code = 404
    error_code = ErrorCode.PLAN_NOT_FOUND

    def __init__(self, plan_id: str, message: Optional[str] = None):
        super().__init__(message or f"Meal plan '{plan_id}' not found", details={"plan_id": plan_id})


class MealEntryNotFoundError(MacroPlanError):
    """The entry does not exist or belongs to another plan."""
    status_code = 404
    error_code = ErrorCode.PLAN_ENTRY_NOT_FOUND

    def __init__(self, plan_id: str, entry_id: str):
        super().__init__(
            f"Meal entry '{entry_id}' not found in plan",
            details={"plan_id": plan_id, "entry_id": entry_id},
        )


class SlotOutOfRangeError(MacroPlanError):
    """The date or slot is not part of the plan's weekly grid."""
    status_code = 422
    error_code = ErrorCode.PLAN_SLOT_OUT_OF_RANGE

    def __init__(self, plan_id: str, date: str, slot: str):
        super().__init__(
            f"Slot '{slot}' on {date} is not part of this plan's week",
            details={"plan_id": plan_id, "date": date, "slot": slot},
        )


class PlanGenerationError(MacroPlanError):
    error_code = ErrorCode.PLAN_GENERATION_FAILED

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Failed to generate meal plan: {reason}", details=details)


# Recipes

class RecipeNotFoundError(MacroPlanError):
    status_code = 404
    error_code = ErrorCode.RECIPE_NOT_FOUND

    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe '{recipe_id}' not found", details={"recipe_id": recipe_id})


class RecipeInUseError(MacroPlanError):
    """Deleting a recipe that meal entries still reference."""
    status_code = 409
    error_code = ErrorCode.RECIPE_IN_USE

    def __init__(self, recipe_id: str, entry_count: int):
        super().__init__(
            f"Recipe '{recipe_id}' is used by {entry_count} meal entries",
            details={"recipe_id": recipe_id, "entry_count": entry_count},
        )


# Persistence

class DatabaseError(MacroPlanError):
    error_code = ErrorCode.DATABASE_QUERY_ERROR

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_QUERY_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, details=details)
