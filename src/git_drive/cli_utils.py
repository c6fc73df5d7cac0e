"""Shared CLI utility functions for git-drive."""

import logging
import sys
from collections.abc import Iterable, Sequence

import click

from .core.normalize import canonicalize
from .models import Identity, Kind


def setup_logging(log: str, module_name: str = __name__) -> logging.Logger:
    """Configure logging for the --log option.

    Args:
        log: "none" to stay quiet, otherwise a level name ("INFO", "DEBUG"),
             case-insensitive
        module_name: The ``__name__`` of the calling module

    Returns:
        The logger for ``module_name``
    """
    package_logger = logging.getLogger("git_drive")
    module_logger = logging.getLogger(module_name)
    if log.lower() == "none":
        logging.getLogger().setLevel(logging.CRITICAL)
        package_logger.setLevel(logging.CRITICAL)
        return module_logger

    level = logging.getLevelName(log.upper())
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(filename)s:%(lineno)d - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    package_logger.setLevel(level)
    module_logger.debug("Logging at %s", log.upper())
    return module_logger


def select_aliases(
    identities: Sequence[Identity],
    kind: Kind,
    preselected: Iterable[str] = (),
    multiple: bool = True,
) -> list[str]:
    """Pick identities from a numbered list.

    Args:
        identities: Candidates in display order
        kind: Namespace, used in the prompt
        preselected: Aliases marked as currently active
        multiple: Allow several numbers; otherwise exactly one is required

    Returns:
        The chosen aliases in the order they were typed
    """
    active = {canonicalize(alias) for alias in preselected}

    click.echo(f"{'#':<4} {'':<2}{'Alias':<16} {'Name':<30} {'Email'}")
    click.echo("-" * 72)
    defaults = []
    for idx, identity in enumerate(identities, start=1):
        marker = "*" if identity.canonical_alias in active else " "
        if marker == "*":
            defaults.append(str(idx))
        click.echo(f"{idx:<4} {marker:<2}{identity.alias:<16} {identity.name:<30} {identity.email}")
    click.echo()

    if multiple:
        prompt = f"Select {kind}s (numbers separated by spaces, empty for none)"
    else:
        prompt = f"Select a {kind} (number)"

    while True:
        answer = click.prompt(
            click.style(prompt, fg="yellow"),
            default=" ".join(defaults) if multiple else "",
            show_default=bool(defaults),
            type=str,
        ).strip()

        try:
            numbers = [int(part) for part in answer.split()]
        except ValueError:
            click.echo(click.style(f"Invalid input: '{answer}' is not a list of numbers", fg="red"))
            continue

        if any(not 1 <= num <= len(identities) for num in numbers):
            click.echo(click.style(f"Numbers must be between 1 and {len(identities)}", fg="red"))
            continue
        if not multiple and len(numbers) != 1:
            click.echo(click.style("Please select exactly one entry", fg="red"))
            continue

        chosen: list[str] = []
        for num in numbers:
            alias = identities[num - 1].alias
            if alias not in chosen:
                chosen.append(alias)
        return chosen
