"""
Seed database with initial data (recipes).
"""
import json
import logging
from pathlib import Path
from sqlalchemy.orm import Session
import uuid

from macroplan.config import settings
from macroplan.db.database import SessionLocal, create_tables
from macroplan.db.models import Recipe

logger = logging.getLogger(__name__)


def load_recipes_from_json() -> list[dict]:
    """Load recipes from the JSON file."""
    recipes_path = Path(__file__).parent.parent / "data" / "seed_recipes.json"
    with open(recipes_path, "r") as f:
        data = json.load(f)
    return data["recipes"]


def seed_recipes(db: Session) -> int:
    """
    Seed recipes into the database.

    Recipes whose title already exists are skipped, so running the seed
    twice is harmless.

    Returns:
        Number of recipes added.
    """
    existing_titles = {title for (title,) in db.query(Recipe.title).all()}
    owner_id = uuid.UUID(settings.default_owner_id)
    added = 0

    for recipe_data in load_recipes_from_json():
        if recipe_data["title"] in existing_titles:
            continue

        recipe = Recipe(
            id=uuid.uuid4(),
            owner_id=owner_id,
            title=recipe_data["title"],
            description=recipe_data["description"],
            ingredients=recipe_data["ingredients"],
            steps=recipe_data["steps"],
            tags=recipe_data.get("tags", []),
            category=recipe_data["category"],
            servings=recipe_data["servings"],
            cook_time_min=recipe_data["cook_time_min"],
            kcal_per_serving=recipe_data["kcal_per_serving"],
            protein_per_serving=recipe_data["protein_per_serving"],
            fat_per_serving=recipe_data["fat_per_serving"],
            carbs_per_serving=recipe_data["carbs_per_serving"],
        )
        db.add(recipe)
        added += 1

    db.commit()
    logger.info(f"Seeded {added} recipes ({len(existing_titles)} already present)")
    return added


def main():
    """Main seed function."""
    print("Creating database tables...")
    create_tables()

    print("Seeding recipes...")
    db = SessionLocal()
    try:
        count = seed_recipes(db)
        print(f"Successfully seeded {count} recipes!")
    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
