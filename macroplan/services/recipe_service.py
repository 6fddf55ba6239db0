"""
Recipe catalog service: CRUD, filtered listing and taxonomy.
"""
import logging
import uuid
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from macroplan.config import settings
from macroplan.db.models import MealEntry, Recipe
from macroplan.errors import RecipeInUseError, RecipeNotFoundError
from macroplan.models.schemas import RecipeCreate, RecipeFilters, RecipeUpdate

logger = logging.getLogger(__name__)

# Columns that may be cleared with an explicit null on update
_NULLABLE_FIELDS = {"image_url"}

_LIKE_ESCAPE = "\\"


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching text literally anywhere in a value."""
    escaped = (
        text.lower()
        .replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def matches_any_tag(recipe_tags: List[str], wanted: List[str]) -> bool:
    """True when any wanted tag is a case-insensitive substring of a recipe tag."""
    lowered = [tag.lower() for tag in recipe_tags or []]
    return any(w.strip().lower() in tag for w in wanted for tag in lowered)


class RecipeService:
    """
    Service for the recipe catalog.

    The meal plan generator reads the whole catalog through all_recipes();
    everything else here backs the recipe API.
    """

    def __init__(self, db: Session):
        self.db = db

    def _apply_filters(self, query, filters: RecipeFilters):
        if filters.categories:
            query = query.filter(Recipe.category.in_(filters.categories))

        if filters.query:
            pattern = _contains_pattern(filters.query)
            query = query.filter(
                or_(
                    func.lower(Recipe.title).like(pattern, escape=_LIKE_ESCAPE),
                    func.lower(Recipe.description).like(pattern, escape=_LIKE_ESCAPE),
                    func.lower(Recipe.category).like(pattern, escape=_LIKE_ESCAPE),
                )
            )

        ranges = [
            (Recipe.kcal_per_serving, filters.min_kcal, filters.max_kcal),
            (Recipe.protein_per_serving, filters.min_protein, filters.max_protein),
            (Recipe.fat_per_serving, filters.min_fat, filters.max_fat),
            (Recipe.carbs_per_serving, filters.min_carbs, filters.max_carbs),
        ]
        for column, low, high in ranges:
            if low is not None:
                query = query.filter(column >= low)
            if high is not None:
                query = query.filter(column <= high)

        return query

    def list_recipes(
        self,
        filters: RecipeFilters,
        page: int = 1,
        page_size: int = settings.pagination_default_page_size,
    ) -> Tuple[List[Recipe], int]:
        """
        List catalog recipes, newest first.

        Tags live in a JSON column, so the tag filter runs on the loaded
        rows before paging.

        Returns:
            (recipes on the requested page, total matching count)
        """
        query = self._apply_filters(self.db.query(Recipe), filters)
        query = query.order_by(Recipe.created_at.desc())
        offset = (page - 1) * page_size

        if filters.tags:
            matching = [r for r in query.all() if matches_any_tag(r.tags, filters.tags)]
            return matching[offset:offset + page_size], len(matching)

        total = query.count()
        return query.offset(offset).limit(page_size).all(), total

    def get_recipe(self, recipe_id: UUID) -> Optional[Recipe]:
        return self.db.query(Recipe).filter(Recipe.id == recipe_id).first()

    def require_recipe(self, recipe_id: UUID) -> Recipe:
        """Get a recipe or raise RecipeNotFoundError."""
        recipe = self.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(str(recipe_id))
        return recipe

    def create_recipe(self, data: RecipeCreate) -> Recipe:
        payload = data.model_dump()
        recipe = Recipe(owner_id=uuid.UUID(settings.default_owner_id), **payload)
        self.db.add(recipe)
        self.db.commit()
        self.db.refresh(recipe)
        logger.info(f"Created recipe {recipe.id} ({recipe.title!r})")
        return recipe

    def update_recipe(self, recipe_id: UUID, data: RecipeUpdate) -> Recipe:
        """Apply a partial update. Explicit nulls only clear nullable columns."""
        recipe = self.require_recipe(recipe_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in _NULLABLE_FIELDS:
                continue
            setattr(recipe, field, value)

        self.db.commit()
        self.db.refresh(recipe)
        return recipe

    def delete_recipe(self, recipe_id: UUID) -> None:
        """
        Delete a recipe.

        Raises:
            RecipeNotFoundError: If the recipe does not exist
            RecipeInUseError: If meal entries still reference it
        """
        recipe = self.require_recipe(recipe_id)

        in_use = self.db.query(MealEntry).filter(MealEntry.recipe_id == recipe.id).count()
        if in_use:
            raise RecipeInUseError(str(recipe_id), in_use)

        self.db.delete(recipe)
        self.db.commit()
        logger.info(f"Deleted recipe {recipe_id}")

    def list_tags(self) -> List[str]:
        """All distinct tags across the catalog, sorted."""
        tags = set()
        for (recipe_tags,) in self.db.query(Recipe.tags).all():
            tags.update(recipe_tags or [])
        return sorted(tags)

    def list_categories(self) -> List[str]:
        """All distinct categories, sorted."""
        rows = self.db.query(Recipe.category).distinct().all()
        return sorted(category for (category,) in rows)

    def all_recipes(self) -> List[Recipe]:
        """The full catalog in a stable order (oldest first)."""
        return self.db.query(Recipe).order_by(Recipe.created_at.asc(), Recipe.title.asc()).all()
