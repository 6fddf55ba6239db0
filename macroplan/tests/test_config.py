"""
Tests for application configuration and settings validation.

Tests the Settings class behavior including:
- Default values
- Overrides through get_settings
- Generator tuning validation
"""
import pytest
from pydantic import ValidationError

from macroplan.config import Settings, get_settings


class TestSettingsDefaults:
    """Tests for default configuration values."""

    def test_app_name_default(self):
        """App name should default to 'MacroPlan API'."""
        settings = get_settings(debug=True)
        assert settings.app_name == "MacroPlan API"

    def test_app_version_default(self):
        settings = get_settings(debug=True)
        assert settings.app_version == "0.1.0"

    def test_debug_default_false(self, monkeypatch):
        """Debug should default to False when env var not set."""
        monkeypatch.delenv("DEBUG", raising=False)
        settings = get_settings(debug=False)
        assert settings.debug is False

    def test_cors_origins_default(self):
        """CORS origins should include localhost for development."""
        settings = get_settings(debug=True)
        assert "http://localhost:3000" in settings.cors_origins

    def test_pagination_defaults(self):
        settings = get_settings(debug=True)
        assert settings.pagination_default_page_size == 20
        assert settings.pagination_max_page_size == 100

    def test_generator_defaults(self):
        """Generator tuning should default to a 20-recipe pool and half-step servings."""
        settings = get_settings(debug=True)
        assert settings.generator_candidate_pool_size == 20
        assert settings.generator_serving_options == [0.5, 1.0, 1.5, 2.0]
        assert settings.generator_max_swaps_per_index == 1


class TestSettingsOverrides:
    """Tests for settings override via get_settings factory."""

    def test_can_override_database_url(self):
        settings = get_settings(database_url="sqlite:///./test.db")
        assert settings.database_url == "sqlite:///./test.db"

    def test_can_override_log_level(self):
        settings = get_settings(log_level="DEBUG")
        assert settings.log_level == "DEBUG"

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("GENERATOR_CANDIDATE_POOL_SIZE", "5")
        assert Settings().generator_candidate_pool_size == 5

    def test_serving_options_are_sorted(self):
        settings = get_settings(generator_serving_options=[2.0, 0.5, 1.0])
        assert settings.generator_serving_options == [0.5, 1.0, 2.0]


class TestGeneratorValidation:
    """Tests for generator tuning validation."""

    @pytest.mark.parametrize("field", ["generator_candidate_pool_size", "generator_max_swaps_per_index"])
    def test_non_positive_counts_rejected(self, field):
        with pytest.raises(ValidationError):
            get_settings(**{field: 0})

    @pytest.mark.parametrize("options", [[], [0.75], [0.0, 1.0], [-0.5]])
    def test_invalid_serving_options_rejected(self, options):
        with pytest.raises(ValidationError):
            get_settings(generator_serving_options=options)

    def test_larger_half_steps_allowed(self):
        settings = get_settings(generator_serving_options=[1.0, 2.5, 3.0])
        assert settings.generator_serving_options == [1.0, 2.5, 3.0]
