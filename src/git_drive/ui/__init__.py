"""Terminal display helpers for git-drive."""

from .display import identity_table, print_identities, print_session

__all__ = ["identity_table", "print_identities", "print_session"]
