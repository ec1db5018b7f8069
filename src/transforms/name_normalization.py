"""Module name normalization for cross-source matching.

Feed rows and descriptors spell the same module differently in case
and apostrophe style; both sides are canonicalized before comparing.
"""

from __future__ import annotations

_TYPOGRAPHIC_APOSTROPHE = "’"


def normalize_module_name(value: str) -> str:
    """Canonicalize a display name for matching.

    Args:
        value: Raw module name.

    Returns:
        Lowercased name with typographic apostrophes replaced by ``'``.
    """
    return value.lower().replace(_TYPOGRAPHIC_APOSTROPHE, "'")


def names_match(left: str, right: str) -> bool:
    """Return whether two module names are equal after normalization."""
    return normalize_module_name(left) == normalize_module_name(right)
