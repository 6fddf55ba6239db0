"""
Tests for error handling and error response format.

Tests cover:
- Custom exception classes and error codes
- Structured error responses from API endpoints
- Conversion of application errors that escape a route
"""
import pytest
from unittest.mock import patch
from uuid import uuid4

from macroplan.api.dependencies import http_error
from macroplan.errors import (
    ErrorCode,
    ErrorResponse,
    MacroPlanError,
    PlanNotFoundError,
    MealEntryNotFoundError,
    SlotOutOfRangeError,
    PlanGenerationError,
    RecipeNotFoundError,
    RecipeInUseError,
    DatabaseError,
)


class TestErrorCodeEnum:
    """Tests for ErrorCode enumeration."""

    def test_error_codes_are_strings(self):
        assert isinstance(ErrorCode.PLAN_NOT_FOUND.value, str)
        assert ErrorCode.RECIPE_IN_USE == "RECIPE_IN_USE"

    def test_error_codes_are_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))


class TestExceptionClasses:
    """Tests for status codes and details carried by each exception."""

    @pytest.mark.parametrize("error, status_code, error_code", [
        (PlanNotFoundError("p1"), 404, ErrorCode.PLAN_NOT_FOUND),
        (MealEntryNotFoundError("p1", "e1"), 404, ErrorCode.PLAN_ENTRY_NOT_FOUND),
        (SlotOutOfRangeError("p1", "2024-01-09", "lunch"), 422, ErrorCode.PLAN_SLOT_OUT_OF_RANGE),
        (PlanGenerationError("boom"), 500, ErrorCode.PLAN_GENERATION_FAILED),
        (RecipeNotFoundError("r1"), 404, ErrorCode.RECIPE_NOT_FOUND),
        (RecipeInUseError("r1", 3), 409, ErrorCode.RECIPE_IN_USE),
        (DatabaseError("db down"), 500, ErrorCode.DATABASE_QUERY_ERROR),
    ])
    def test_status_and_code(self, error, status_code, error_code):
        assert isinstance(error, MacroPlanError)
        assert error.status_code == status_code
        assert error.error_code == error_code

    def test_plan_not_found_details(self):
        error = PlanNotFoundError("abc")
        assert "abc" in error.message
        assert error.details == {"plan_id": "abc"}

    def test_recipe_in_use_details(self):
        error = RecipeInUseError("r1", 2)
        assert error.details == {"recipe_id": "r1", "entry_count": 2}

    def test_generation_error_prefixes_reason(self):
        error = PlanGenerationError("catalog unavailable")
        assert error.message == "Failed to generate meal plan: catalog unavailable"
        assert error.details == {}

    def test_base_error_defaults(self):
        error = MacroPlanError("something broke")
        assert error.status_code == 500
        assert error.error_code == ErrorCode.INTERNAL_ERROR
        assert str(error) == "something broke"


class TestErrorResponse:
    def test_to_response(self):
        response = RecipeNotFoundError("r1").to_response()

        assert isinstance(response, ErrorResponse)
        assert response.model_dump() == {
            "error_code": "RECIPE_NOT_FOUND",
            "message": "Recipe 'r1' not found",
            "details": {"recipe_id": "r1"},
        }

    def test_empty_details_become_none(self):
        assert MacroPlanError("x").to_response().details is None

    def test_http_error_shape(self):
        exc = http_error(SlotOutOfRangeError("p1", "2024-01-09", "lunch"))

        assert exc.status_code == 422
        assert exc.detail["error_code"] == "PLAN_SLOT_OUT_OF_RANGE"
        assert exc.detail["details"]["slot"] == "lunch"


class TestApiErrorResponses:
    """Tests for structured errors returned by the API."""

    def test_not_found_has_structured_detail(self, client):
        response = client.get(f"/api/meal-plans/{uuid4()}")

        detail = response.json()["detail"]
        assert set(detail) == {"error_code", "message", "details"}

    def test_database_error_during_generation(self, client, test_plan, test_recipes):
        with patch(
            "macroplan.services.meal_service.MealPlanningService.generate",
            side_effect=DatabaseError("Database error occurred while saving generated meals."),
        ):
            response = client.post(f"/api/meal-plans/{test_plan.id}/generate")

        assert response.status_code == 500
        assert response.json()["detail"]["error_code"] == "DATABASE_QUERY_ERROR"

    def test_unexpected_generation_failure(self, client, test_plan, test_recipes):
        with patch(
            "macroplan.services.meal_service.MealPlanningService.generate",
            side_effect=RuntimeError("engine exploded"),
        ):
            response = client.post(f"/api/meal-plans/{test_plan.id}/generate")

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error_code"] == "PLAN_GENERATION_FAILED"
        assert detail["details"]["error_type"] == "RuntimeError"

    def test_escaped_application_error_uses_handler(self, client):
        with patch(
            "macroplan.services.recipe_service.RecipeService.list_tags",
            side_effect=RecipeNotFoundError("r9"),
        ):
            response = client.get("/api/tags")

        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "RECIPE_NOT_FOUND"
