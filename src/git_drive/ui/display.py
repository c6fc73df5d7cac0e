"""Rich tables for identities and the active drive."""

from collections.abc import Iterable
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.coordinator import DriveOutput
from ..core.session import Session
from ..models import Identity, Kind


def identity_table(identities: Iterable[Identity], kind: Kind) -> Table:
    """Table of identities in registry order."""
    table = Table(title=f"{kind.plural.capitalize()}", box=box.ROUNDED)
    table.add_column("Alias", style="bold cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Email", style="dim white")
    if kind is Kind.DRIVER:
        table.add_column("Signing key", style="yellow")

    for identity in identities:
        row = [escape(identity.alias), escape(identity.name), escape(identity.email)]
        if kind is Kind.DRIVER:
            row.append(escape(identity.signing_key or ""))
        table.add_row(*row)
    return table


def print_identities(
    identities: Iterable[Identity], kind: Kind, console: Optional[Console] = None
) -> None:
    console = console or Console(highlight=False)
    console.print(identity_table(identities, kind))


def print_session(output: DriveOutput, session: Session, console: Optional[Console] = None) -> None:
    """Driver, navigators and start time of the active drive."""
    console = console or Console(highlight=False)

    table = Table(title="Current drive", box=box.ROUNDED)
    table.add_column("Seat", style="cyan")
    table.add_column("Alias", style="bold")
    table.add_column("Identity", style="white")

    if output.driver is not None:
        table.add_row(
            "driver",
            escape(output.driver.alias),
            escape(f"{output.driver.name} <{output.driver.email}>"),
        )
    else:
        table.add_row("driver", "-", "git default")

    for navigator in output.navigators:
        table.add_row(
            "navigator",
            escape(navigator.alias),
            escape(f"{navigator.name} <{navigator.email}>"),
        )

    console.print(table)
    if session.started_at is not None:
        console.print(f"Driving since {session.started_at.isoformat(timespec='seconds')}")
