"""
CLI interface for MacroPlan.
"""
import click
from uuid import UUID

from macroplan.db.database import SessionLocal, create_tables
from macroplan.db.seed import seed_recipes
from macroplan.engine.meal_generator import summarize_totals
from macroplan.errors import MacroPlanError
from macroplan.services.meal_service import MealPlanningService, plan_totals, sorted_entries


def _echo_entries(entries) -> None:
    current_date = None
    for entry in sorted_entries(entries):
        if entry.date != current_date:
            current_date = entry.date
            click.echo(f"\n{current_date.strftime('%A, %B %d')}")

        title = entry.recipe.title if entry.recipe else "(missing recipe)"
        click.echo(f"  {entry.slot.upper():10} {title}  x{float(entry.servings_count):g}")


def _echo_nutrition(plan) -> None:
    click.echo("\nWeekly nutrition")
    click.echo("-" * 44)
    for axis, row in summarize_totals(plan_totals(plan), plan.goals).items():
        click.echo(f"  {axis:8} {row['total']:>10.1f} / {row['goal']:<10.1f} ({row['percent']}%)")


@click.group()
def cli():
    """MacroPlan - weekly meal planning against macro targets"""


@cli.command("init-db")
def init_db():
    """Create database tables."""
    create_tables()
    click.echo("Tables created.")


@cli.command()
def seed():
    """Seed the recipe catalog."""
    create_tables()
    db = SessionLocal()
    try:
        added = seed_recipes(db)
    finally:
        db.close()
    click.echo(f"Seeded {added} recipes.")


@cli.command()
@click.argument("plan_id", type=click.UUID)
def generate(plan_id: UUID):
    """Fill the empty slots of a meal plan."""
    db = SessionLocal()
    try:
        service = MealPlanningService(db)
        try:
            created, result = service.generate(plan_id)
        except MacroPlanError as e:
            raise click.ClickException(e.message)

        if result.warning:
            click.echo(f"Warning: {result.warning}", err=True)

        click.echo(
            f"Created {len(created)} entries "
            f"({len(result.locked_slots)} slots were already filled)."
        )
        _echo_entries(created)
        _echo_nutrition(service.require_plan(plan_id))
    finally:
        db.close()


@cli.command()
@click.argument("plan_id", type=click.UUID)
def show(plan_id: UUID):
    """Print a meal plan and its weekly nutrition."""
    db = SessionLocal()
    try:
        try:
            plan = MealPlanningService(db).require_plan(plan_id)
        except MacroPlanError as e:
            raise click.ClickException(e.message)

        click.echo("=" * 44)
        click.echo(f"MEAL PLAN: week of {plan.week_start} ({plan.meals_per_day} meals/day)")
        click.echo("=" * 44)
        _echo_entries(plan.entries)
        _echo_nutrition(plan)
    finally:
        db.close()


if __name__ == '__main__':
    cli()
