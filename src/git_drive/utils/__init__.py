"""Utility modules for git-drive."""

from .trailers import dedupe_trailers, merge_trailers, parse_trailers, render_trailers
from .validation import validate_email, validate_identity

__all__ = [
    "parse_trailers",
    "render_trailers",
    "dedupe_trailers",
    "merge_trailers",
    "validate_email",
    "validate_identity",
]
