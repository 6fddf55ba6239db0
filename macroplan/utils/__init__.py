"""
Shared helpers.
"""
from macroplan.utils.sanitization import sanitize_text_input, SanitizedStr, SanitizedStrList

__all__ = ["sanitize_text_input", "SanitizedStr", "SanitizedStrList"]
