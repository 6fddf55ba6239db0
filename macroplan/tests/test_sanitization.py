"""
Tests for input sanitization utilities.
"""
import pytest
from pydantic import BaseModel, Field, ValidationError

from macroplan.utils.sanitization import (
    sanitize_text_input,
    sanitize_list_items,
    SanitizedStr,
    SanitizedStrList,
)


class TestSanitizeTextInput:
    """Tests for the sanitize_text_input function."""

    def test_removes_html_tags(self):
        """Should remove all HTML tags from input."""
        assert sanitize_text_input("<script>alert('xss')</script>") == "alert('xss')"
        assert sanitize_text_input("Roast <b>chicken</b>") == "Roast chicken"
        assert sanitize_text_input("<div><span>nested</span></div>") == "nested"

    def test_removes_script_uris(self):
        assert sanitize_text_input("javascript:alert(1)") == "alert(1)"
        assert sanitize_text_input("JaVaScRiPt:mixed()") == "mixed()"
        assert sanitize_text_input("data:text/html,<script>") == "text/html,"
        assert sanitize_text_input("VBSCRIPT:evil") == "evil"

    def test_removes_event_handlers(self):
        assert sanitize_text_input("onclick=evil()") == "evil()"
        assert sanitize_text_input("ONLOAD = hack()") == "hack()"

    def test_preserves_recipe_text(self):
        """Should preserve normal recipe content."""
        assert sanitize_text_input("Chicken breast (500g)") == "Chicken breast (500g)"
        assert sanitize_text_input("Simmer 10-15 minutes") == "Simmer 10-15 minutes"
        assert sanitize_text_input("Add 1/2 tsp salt & pepper") == "Add 1/2 tsp salt & pepper"

    def test_collapses_spaces_and_keeps_newlines(self):
        assert sanitize_text_input("  chop    the   onion  ") == "chop the onion"
        assert sanitize_text_input("Line one\nLine two") == "Line one\nLine two"

    def test_empty_input(self):
        assert sanitize_text_input("") == ""


class TestSanitizeListItems:
    def test_sanitizes_each_item(self):
        assert sanitize_list_items(["<b>quick</b>", "vegan "]) == ["quick", "vegan"]

    def test_drops_items_left_empty(self):
        assert sanitize_list_items(["<br>", "", "keep"]) == ["keep"]


class TestSanitizedTypes:
    """Tests for the Annotated pydantic types."""

    class Payload(BaseModel):
        title: SanitizedStr = Field(..., min_length=1)
        tags: SanitizedStrList = Field(default_factory=list)

    def test_fields_sanitized_on_validation(self):
        payload = self.Payload(title="<i>Oats</i>", tags=["<b>breakfast</b>"])

        assert payload.title == "Oats"
        assert payload.tags == ["breakfast"]

    def test_type_errors_still_raised(self):
        with pytest.raises(ValidationError):
            self.Payload(title=123)
