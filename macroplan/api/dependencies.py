"""
FastAPI dependencies and shared error translation for the routers.
"""
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from macroplan.db.database import get_db
from macroplan.errors import MacroPlanError
from macroplan.services.meal_service import MealPlanningService
from macroplan.services.recipe_service import RecipeService


def get_recipe_service(db: Session = Depends(get_db)) -> RecipeService:
    """
    Dependency providing a RecipeService bound to the request session.

    Usage:
        @router.get("/recipes")
        def list_recipes(service: RecipeService = Depends(get_recipe_service)):
            ...
    """
    return RecipeService(db)


def get_meal_service(db: Session = Depends(get_db)) -> MealPlanningService:
    """Dependency providing a MealPlanningService bound to the request session."""
    return MealPlanningService(db)


def http_error(error: MacroPlanError) -> HTTPException:
    """
    Convert an application error into an HTTPException.

    The response body is {"detail": {"error_code", "message", "details"}}.
    """
    return HTTPException(
        status_code=error.status_code,
        detail={
            "error_code": error.error_code.value,
            "message": error.message,
            "details": error.details,
        },
    )
