"""
SQLAlchemy ORM models for MacroPlan database.
"""
from datetime import datetime, timezone
from sqlalchemy import (
    Column, String, Integer, Numeric, DateTime, Date, Text,
    ForeignKey, JSON, Index, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship
import uuid

from macroplan.db.database import Base
from macroplan.engine.models import MacroTotals, RecipeMacros


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Recipe(Base):
    """Catalog recipe with per-serving nutrition."""
    __tablename__ = "recipes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    ingredients = Column(JSON, nullable=False)  # List[{name, quantity, unit, note}]
    steps = Column(JSON, nullable=False)  # List[str]
    image_url = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)  # List[str]
    category = Column(String(100), nullable=False, index=True)
    servings = Column(Integer, nullable=False)
    cook_time_min = Column(Integer, nullable=False)
    kcal_per_serving = Column(Integer, nullable=False, index=True)
    protein_per_serving = Column(Numeric(8, 2), nullable=False)
    fat_per_serving = Column(Numeric(8, 2), nullable=False)
    carbs_per_serving = Column(Numeric(8, 2), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    meal_entries = relationship("MealEntry", back_populates="recipe")

    def to_macros(self) -> RecipeMacros:
        """Snapshot of this recipe's nutrition for the generator."""
        return RecipeMacros(
            id=str(self.id),
            title=self.title,
            kcal=int(self.kcal_per_serving),
            protein=float(self.protein_per_serving),
            fat=float(self.fat_per_serving),
            carbs=float(self.carbs_per_serving),
        )


class MealPlan(Base):
    """A week of meals with weekly calorie and macro goals."""
    __tablename__ = "meal_plans"
    __table_args__ = (
        # Listing plans newest week first
        Index('ix_meal_plans_owner_id_week_start', 'owner_id', 'week_start'),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    week_start = Column(Date, nullable=False)
    meals_per_day = Column(Integer, nullable=False, default=3)
    goals_kcal = Column(Integer, nullable=False)
    goals_protein = Column(Numeric(8, 2), nullable=False)
    goals_fat = Column(Numeric(8, 2), nullable=False)
    goals_carbs = Column(Numeric(8, 2), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    entries = relationship("MealEntry", back_populates="meal_plan", cascade="all, delete-orphan")

    @property
    def goals(self) -> MacroTotals:
        return MacroTotals(
            kcal=float(self.goals_kcal),
            protein=float(self.goals_protein),
            fat=float(self.goals_fat),
            carbs=float(self.goals_carbs),
        )


class MealEntry(Base):
    """A recipe placed in one (date, slot) of a meal plan."""
    __tablename__ = "meal_entries"
    __table_args__ = (
        UniqueConstraint('meal_plan_id', 'date', 'slot', name='uq_meal_entries_plan_date_slot'),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    meal_plan_id = Column(
        Uuid(as_uuid=True), ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    slot = Column(String(20), nullable=False)  # breakfast, lunch, dinner, snack1..3
    servings_count = Column(Numeric(4, 1), nullable=False, default=1)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    meal_plan = relationship("MealPlan", back_populates="entries")
    recipe = relationship("Recipe", back_populates="meal_entries")
