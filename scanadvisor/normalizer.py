"""Text canonicalization for finding identity and fingerprinting.

All functions here are pure, never raise, and are idempotent.
"""

import re

from .constants import DEFAULT_SEVERITY, SEVERITY_ALIASES

# "function argument `foo`" -> "function argument `<VAR>`"
_FUNCTION_ARGUMENT_RE = re.compile(r"function argument `[^`]+`")
_FUNCTION_ARGUMENT_PLACEHOLDER = "function argument `<VAR>`"

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_severity(raw: str | None) -> str:
    """Map a scanner severity to high, medium or low.

    Unknown or missing values map to medium.
    """
    level = (raw or "").strip().upper()
    return SEVERITY_ALIASES.get(level, DEFAULT_SEVERITY)


def normalize_title(text: str | None) -> str:
    """Replace variable names in "function argument `x`" with a placeholder."""
    return _FUNCTION_ARGUMENT_RE.sub(_FUNCTION_ARGUMENT_PLACEHOLDER, text or "")


def normalize_text(text: str | None) -> str:
    """Trim and collapse whitespace runs to a single space."""
    return _WHITESPACE_RE.sub(" ", (text or "").strip())
