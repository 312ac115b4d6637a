"""
Input sanitising for free-text request fields.

Strips the usual XSS vectors (script blocks, ``javascript:`` URLs,
inline ``on*=`` handlers), trims, and collapses runs of whitespace.
"""

import re
from typing import Any

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_INLINE_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

# Never rewritten: altering a secret changes what the user typed
UNSANITISED_FIELDS = frozenset({"password"})


def sanitize_text(value: str) -> str:
    value = _SCRIPT_BLOCK.sub("", value)
    value = _JS_SCHEME.sub("", value)
    value = _INLINE_HANDLER.sub("", value)
    return _WHITESPACE.sub(" ", value.strip())


def sanitize_payload(data: Any) -> Any:
    """Sanitise top-level string values of a JSON object; anything else passes through."""
    if not isinstance(data, dict):
        return data
    return {
        key: sanitize_text(value) if isinstance(value, str) and key not in UNSANITISED_FIELDS else value
        for key, value in data.items()
    }
