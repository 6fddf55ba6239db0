"""
Taxonomy routes: distinct tags and categories of the catalog.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List

from macroplan.api.dependencies import get_recipe_service
from macroplan.services.recipe_service import RecipeService

router = APIRouter(prefix="/api", tags=["taxonomy"])


class TagsResponse(BaseModel):
    tags: List[str]


class CategoriesResponse(BaseModel):
    categories: List[str]


@router.get("/tags", response_model=TagsResponse)
async def list_tags(service: RecipeService = Depends(get_recipe_service)):
    """All tags used in the catalog, sorted."""
    return TagsResponse(tags=service.list_tags())


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories(service: RecipeService = Depends(get_recipe_service)):
    """All recipe categories, sorted."""
    return CategoriesResponse(categories=service.list_categories())
