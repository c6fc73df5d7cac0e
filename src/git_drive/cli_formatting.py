"""CLI formatting and error reporting helpers for git-drive."""

import logging
from collections.abc import Iterable
from typing import Optional

import click

from .errors import GitDriveError, MalformedStore
from .models import Identity

logger = logging.getLogger(__name__)


def format_identity(identity: Identity) -> str:
    """``alias: Name <email>``, the listing format."""
    return f"{identity.alias}: {identity.name} <{identity.email}>"


def format_aliases(aliases: Iterable[str], color: Optional[str] = None) -> str:
    """Space separated aliases, optionally styled with a click color."""
    if color:
        return " ".join(click.style(alias, fg=color) for alias in aliases)
    return " ".join(aliases)


class ErrorReporter:
    """Report git-drive errors on stderr with a helpful suggestion."""

    @staticmethod
    def report(error: Exception) -> None:
        click.echo(click.style(f"Error: {error}", fg="red"), err=True)
        if isinstance(error, GitDriveError) and error.suggestion:
            click.echo(f"Hint: {error.suggestion}", err=True)
        if isinstance(error, MalformedStore):
            logger.debug(f"Malformed store file {error.path}: {error.reason}")
