"""
Tests for catalog seeding and the command line interface.
"""
import pytest
from unittest.mock import patch
from uuid import uuid4

from click.testing import CliRunner

from macroplan.cli import cli
from macroplan.db.models import MealEntry, Recipe
from macroplan.db.seed import load_recipes_from_json, seed_recipes


class TestSeedRecipes:
    """Tests for loading the bundled recipe catalog."""

    def test_seed_file_is_well_formed(self):
        recipes = load_recipes_from_json()

        assert len(recipes) >= 12
        for recipe in recipes:
            assert recipe["title"]
            assert recipe["kcal_per_serving"] > 0
            assert recipe["ingredients"]
            assert recipe["steps"]

    def test_seed_covers_every_main_category(self):
        categories = {r["category"] for r in load_recipes_from_json()}
        assert {"breakfast", "lunch", "dinner", "snack"} <= categories

    def test_seed_inserts_catalog(self, db_session):
        added = seed_recipes(db_session)

        assert added == len(load_recipes_from_json())
        assert db_session.query(Recipe).count() == added

    def test_seed_is_idempotent(self, db_session):
        seed_recipes(db_session)

        assert seed_recipes(db_session) == 0


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_session(db_session):
    """Route the CLI's sessions to the test database."""
    with patch("macroplan.cli.SessionLocal", return_value=db_session), \
            patch("macroplan.cli.create_tables"):
        yield db_session


class TestCli:
    """Tests for the macroplan command group."""

    def test_seed_command(self, runner, cli_session):
        result = runner.invoke(cli, ["seed"])

        assert result.exit_code == 0
        assert "Seeded" in result.output
        assert cli_session.query(Recipe).count() > 0

    def test_generate_command(self, runner, cli_session, test_plan, test_recipes):
        plan_id = str(test_plan.id)

        result = runner.invoke(cli, ["generate", plan_id])

        assert result.exit_code == 0, result.output
        assert "Created 21 entries" in result.output
        assert "Weekly nutrition" in result.output
        assert cli_session.query(MealEntry).count() == 21

    def test_generate_unknown_plan(self, runner, cli_session):
        result = runner.invoke(cli, ["generate", str(uuid4())])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_generate_rejects_malformed_id(self, runner, cli_session):
        result = runner.invoke(cli, ["generate", "not-a-uuid"])
        assert result.exit_code == 2

    def test_show_command(self, runner, cli_session, test_plan, test_recipes, plan_factory):
        plan_factory.add_entry(test_plan, test_recipes[0], slot="breakfast", servings_count=1.5)

        result = runner.invoke(cli, ["show", str(test_plan.id)])

        assert result.exit_code == 0, result.output
        assert "Greek Yogurt Bowl" in result.output
        assert "x1.5" in result.output
