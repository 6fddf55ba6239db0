"""initial_schema

Revision ID: 0001_initial
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the recipe catalog and meal plan tables."""
    # Create recipes table
    op.create_table(
        'recipes',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('owner_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('ingredients', sa.JSON(), nullable=False),
        sa.Column('steps', sa.JSON(), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('servings', sa.Integer(), nullable=False),
        sa.Column('cook_time_min', sa.Integer(), nullable=False),
        sa.Column('kcal_per_serving', sa.Integer(), nullable=False),
        sa.Column('protein_per_serving', sa.Numeric(8, 2), nullable=False),
        sa.Column('fat_per_serving', sa.Numeric(8, 2), nullable=False),
        sa.Column('carbs_per_serving', sa.Numeric(8, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_recipes_owner_id', 'recipes', ['owner_id'])
    op.create_index('ix_recipes_title', 'recipes', ['title'])
    op.create_index('ix_recipes_category', 'recipes', ['category'])
    op.create_index('ix_recipes_kcal_per_serving', 'recipes', ['kcal_per_serving'])

    # Create meal_plans table
    op.create_table(
        'meal_plans',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('owner_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('week_start', sa.Date(), nullable=False),
        sa.Column('meals_per_day', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('goals_kcal', sa.Integer(), nullable=False),
        sa.Column('goals_protein', sa.Numeric(8, 2), nullable=False),
        sa.Column('goals_fat', sa.Numeric(8, 2), nullable=False),
        sa.Column('goals_carbs', sa.Numeric(8, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_meal_plans_owner_id', 'meal_plans', ['owner_id'])
    op.create_index('ix_meal_plans_owner_id_week_start', 'meal_plans', ['owner_id', 'week_start'])

    # Create meal_entries table
    op.create_table(
        'meal_entries',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('meal_plan_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('recipe_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('slot', sa.String(20), nullable=False),
        sa.Column('servings_count', sa.Numeric(4, 1), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['meal_plan_id'], ['meal_plans.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipes.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('meal_plan_id', 'date', 'slot', name='uq_meal_entries_plan_date_slot'),
    )
    op.create_index('ix_meal_entries_meal_plan_id', 'meal_entries', ['meal_plan_id'])
    op.create_index('ix_meal_entries_recipe_id', 'meal_entries', ['recipe_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_meal_entries_recipe_id', table_name='meal_entries')
    op.drop_index('ix_meal_entries_meal_plan_id', table_name='meal_entries')
    op.drop_table('meal_entries')

    op.drop_index('ix_meal_plans_owner_id_week_start', table_name='meal_plans')
    op.drop_index('ix_meal_plans_owner_id', table_name='meal_plans')
    op.drop_table('meal_plans')

    op.drop_index('ix_recipes_kcal_per_serving', table_name='recipes')
    op.drop_index('ix_recipes_category', table_name='recipes')
    op.drop_index('ix_recipes_title', table_name='recipes')
    op.drop_index('ix_recipes_owner_id', table_name='recipes')
    op.drop_table('recipes')
