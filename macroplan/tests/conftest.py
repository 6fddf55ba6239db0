"""
Shared pytest fixtures for MacroPlan tests.

This module provides common fixtures for:
- Database sessions on in-memory SQLite
- FastAPI test client
- Engine-level recipe catalogs
- Factory functions for test data
"""
import os
import pytest
from datetime import date, timedelta
from typing import Generator, List

# Set test environment variables BEFORE importing app modules
# This ensures Settings and the engine load against SQLite
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from macroplan.db.database import Base, get_db
from macroplan.db.models import MealEntry, MealPlan, Recipe
from macroplan.engine.models import MacroTotals, RecipeMacros
from macroplan.main import app


WEEK_START = date(2024, 1, 1)
WEEKLY_GOALS = MacroTotals(kcal=14000, protein=700, fat=350, carbs=1750)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database for testing.

    Each test function gets a fresh database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session) -> Generator[TestClient, None, None]:
    """Create FastAPI test client with database dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def catalog() -> List[RecipeMacros]:
    """A small macro-diverse catalog for engine tests."""
    return [
        RecipeMacros(id="oats", title="Overnight Oats", kcal=450, protein=18, fat=12, carbs=65),
        RecipeMacros(id="omelette", title="Veggie Omelette", kcal=380, protein=26, fat=28, carbs=4),
        RecipeMacros(id="bowl", title="Chicken Rice Bowl", kcal=650, protein=45, fat=15, carbs=80),
        RecipeMacros(id="salmon", title="Salmon Plate", kcal=700, protein=42, fat=30, carbs=55),
        RecipeMacros(id="shake", title="Protein Shake", kcal=300, protein=32, fat=6, carbs=30),
        RecipeMacros(id="pasta", title="Pasta Bake", kcal=820, protein=30, fat=28, carbs=110),
    ]


@pytest.fixture
def goals() -> MacroTotals:
    return WEEKLY_GOALS


# ============================================================================
# Factory Functions (for custom data creation in tests)
# ============================================================================

class RecipeFactory:
    """Factory for creating Recipe rows with custom attributes."""

    def __init__(self, db_session: Session):
        self.db_session = db_session
        self._counter = 0

    def create(
        self,
        title: str = None,
        kcal_per_serving: int = 600,
        protein_per_serving: float = 30,
        fat_per_serving: float = 15,
        carbs_per_serving: float = 75,
        category: str = "dinner",
        tags: list = None,
        description: str = "A test recipe.",
        ingredients: list = None,
    ) -> Recipe:
        """Create and persist a Recipe with given attributes."""
        self._counter += 1
        if title is None:
            title = f"Test Recipe {self._counter}"
        if tags is None:
            tags = ["test"]
        if ingredients is None:
            ingredients = [{"name": "rice", "quantity": 100, "unit": "g", "note": None}]

        recipe = Recipe(
            owner_id=_owner_id(),
            title=title,
            description=description,
            ingredients=ingredients,
            steps=["Prepare", "Cook", "Serve"],
            tags=tags,
            category=category,
            servings=2,
            cook_time_min=20,
            kcal_per_serving=kcal_per_serving,
            protein_per_serving=protein_per_serving,
            fat_per_serving=fat_per_serving,
            carbs_per_serving=carbs_per_serving,
        )
        self.db_session.add(recipe)
        self.db_session.commit()
        self.db_session.refresh(recipe)
        return recipe


class MealPlanFactory:
    """Factory for creating MealPlan rows and their entries."""

    def __init__(self, db_session: Session):
        self.db_session = db_session

    def create(
        self,
        week_start: date = WEEK_START,
        meals_per_day: int = 3,
        goals_kcal: int = 14000,
        goals_protein: float = 700,
        goals_fat: float = 350,
        goals_carbs: float = 1750,
    ) -> MealPlan:
        plan = MealPlan(
            owner_id=_owner_id(),
            week_start=week_start,
            meals_per_day=meals_per_day,
            goals_kcal=goals_kcal,
            goals_protein=goals_protein,
            goals_fat=goals_fat,
            goals_carbs=goals_carbs,
        )
        self.db_session.add(plan)
        self.db_session.commit()
        self.db_session.refresh(plan)
        return plan

    def add_entry(
        self,
        plan: MealPlan,
        recipe: Recipe,
        day_offset: int = 0,
        slot: str = "breakfast",
        servings_count: float = 1.0,
    ) -> MealEntry:
        entry = MealEntry(
            meal_plan_id=plan.id,
            recipe_id=recipe.id,
            date=plan.week_start + timedelta(days=day_offset),
            slot=slot,
            servings_count=servings_count,
        )
        self.db_session.add(entry)
        self.db_session.commit()
        self.db_session.refresh(entry)
        return entry


def _owner_id():
    from uuid import UUID
    from macroplan.config import settings
    return UUID(settings.default_owner_id)


@pytest.fixture
def recipe_factory(db_session) -> RecipeFactory:
    """Provide a RecipeFactory for creating multiple recipes in tests."""
    return RecipeFactory(db_session)


@pytest.fixture
def plan_factory(db_session) -> MealPlanFactory:
    """Provide a MealPlanFactory for creating plans and entries in tests."""
    return MealPlanFactory(db_session)


@pytest.fixture
def test_recipes(recipe_factory) -> List[Recipe]:
    """Create a persisted catalog spanning light to heavy recipes."""
    return [
        recipe_factory.create(title="Greek Yogurt Bowl", kcal_per_serving=400, protein_per_serving=30,
                              fat_per_serving=10, carbs_per_serving=45, category="breakfast",
                              tags=["vegetarian", "quick"]),
        recipe_factory.create(title="Chicken Quinoa Bowl", kcal_per_serving=620, protein_per_serving=48,
                              fat_per_serving=16, carbs_per_serving=68, category="lunch",
                              tags=["high-protein"]),
        recipe_factory.create(title="Beef Stir Fry", kcal_per_serving=710, protein_per_serving=45,
                              fat_per_serving=22, carbs_per_serving=78, category="dinner",
                              tags=["high-protein"]),
        recipe_factory.create(title="Trail Mix", kcal_per_serving=260, protein_per_serving=7,
                              fat_per_serving=17, carbs_per_serving=22, category="snack",
                              tags=["vegetarian", "no-cook"]),
    ]


@pytest.fixture
def test_plan(plan_factory) -> MealPlan:
    """The reference plan: week of 2024-01-01, 3 meals a day, 14000 kcal."""
    return plan_factory.create()
