"""Canonical forms for case and accent insensitive alias comparison."""

import unicodedata


def canonicalize(value: str) -> str:
    """Return the comparison key for an alias or display string.

    The string is decomposed (NFD), case folded, decomposed again because
    folding can produce decomposable characters, and stripped of combining
    marks. "Éric", "ÉRIC" and "eric" all map to "eric". Code points without
    a decomposition or case mapping are passed through unchanged.

    Args:
        value: Any string

    Returns:
        The canonical form of ``value``
    """
    decomposed = unicodedata.normalize("NFD", value)
    folded = unicodedata.normalize("NFD", decomposed.casefold())
    return "".join(ch for ch in folded if not unicodedata.combining(ch))


def same_alias(left: str, right: str) -> bool:
    """Check whether two aliases are equal in canonical form."""
    return canonicalize(left) == canonicalize(right)
