"""
Input sanitization for user-provided recipe text.

Recipe titles, descriptions, steps and tags are rendered back to the
browser, so markup and script-like content are stripped on the way in.
"""
import re
from typing import Annotated, List

from pydantic import AfterValidator

_TAG_RE = re.compile(r'<[^>]*>')
_URI_SCHEME_RE = re.compile(r'(?i)(javascript|data|vbscript):')
_EVENT_HANDLER_RE = re.compile(r'(?i)on\w+\s*=')
_WHITESPACE_RE = re.compile(r'[ \t]+')


def sanitize_text_input(value: str) -> str:
    """
    Remove HTML tags, script URIs and inline event handlers.

    Runs of spaces and tabs collapse to a single space; newlines are kept
    so multi-line descriptions survive.

    Examples:
        >>> sanitize_text_input("Roast <b>chicken</b>")
        'Roast chicken'
        >>> sanitize_text_input("javascript:alert(1)")
        'alert(1)'
    """
    if not value:
        return value

    value = _TAG_RE.sub('', value)
    value = _URI_SCHEME_RE.sub('', value)
    value = _EVENT_HANDLER_RE.sub('', value)
    value = _WHITESPACE_RE.sub(' ', value)

    return value.strip()


def sanitize_list_items(values: List[str]) -> List[str]:
    """Sanitize each string of a list, dropping items left empty."""
    cleaned = (sanitize_text_input(v) for v in values)
    return [v for v in cleaned if v]


# Usage: field_name: SanitizedStr = Field(...)
SanitizedStr = Annotated[str, AfterValidator(sanitize_text_input)]

# Usage: field_name: SanitizedStrList = Field(...)
SanitizedStrList = Annotated[List[str], AfterValidator(sanitize_list_items)]
