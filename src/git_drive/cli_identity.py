"""Identity management CLI commands for git-drive.

The same list/new/edit/delete commands exist for both namespaces: at the top
level they manage navigators, under ``git-drive me`` they manage drivers.
"""

import logging
from typing import Optional

import click

from .cli_formatting import format_identity
from .cli_utils import select_aliases
from .config import DriveConfig
from .core.coordinator import DriveCoordinator
from .core.store import Store
from .errors import Duplicate, InvalidIdentity
from .models import Identity, Kind
from .ui import print_identities
from .utils.validation import validate_email, validate_text

logger = logging.getLogger(__name__)


def register_identity_commands(cli_group: click.Group, kind: Kind) -> None:
    """Register list/new/edit/delete for one namespace onto a Click group.

    Args:
        cli_group: Group to register on
        kind: Namespace the commands operate on
    """
    cli_group.add_command(make_list_command(kind))
    cli_group.add_command(make_new_command(kind))
    cli_group.add_command(make_edit_command(kind))
    cli_group.add_command(make_delete_command(kind))


def _prompt_text(field: str, alias: str, default: Optional[str] = None) -> str:
    """Prompt until the value passes validation."""
    validate = validate_email if field == "email" else lambda v: validate_text(field, v)
    while True:
        value = click.prompt(
            f"The {field} for {click.style(alias, fg='cyan')}", default=default, type=str
        )
        try:
            return validate(value)
        except InvalidIdentity as e:
            click.echo(click.style(e.reason, fg="red"))


def _prompt_key(alias: str, default: Optional[str] = None) -> str:
    return click.prompt(
        f"The signing key for {click.style(alias, fg='cyan')} (empty for none)",
        default=default or "",
        show_default=bool(default),
        type=str,
    )


def make_list_command(kind: Kind) -> click.Command:
    @click.command(name="list")
    @click.option("--table", is_flag=True, help="Show a table instead of one line per alias")
    @click.pass_obj
    def list_command(cfg: DriveConfig, table: bool) -> None:
        with Store.open(cfg.home) as store:
            identities = store.registry.list(kind)
        if table:
            print_identities(identities, kind)
            return
        for identity in identities:
            click.echo(format_identity(identity))

    list_command.help = f"List known {kind}s."
    return list_command


def make_new_command(kind: Kind) -> click.Command:
    @click.command(name="new")
    @click.argument("alias", required=False)
    @click.option("--as", "as_alias", help=f"Alias of the new {kind}")
    @click.option("--name", help="Full name")
    @click.option("--email", help="Email address")
    @click.option("--key", help="Signing key", hidden=kind is Kind.NAVIGATOR)
    @click.pass_obj
    def new_command(
        cfg: DriveConfig,
        alias: Optional[str],
        as_alias: Optional[str],
        name: Optional[str],
        email: Optional[str],
        key: Optional[str],
    ) -> None:
        if kind is Kind.NAVIGATOR and key:
            raise InvalidIdentity("signing key", key, "navigators cannot have a signing key")

        with Store.open(cfg.home) as store:
            alias = alias or as_alias
            if alias is None:
                alias = click.prompt(
                    f"Please enter the alias for the {kind}.\n"
                    "  The alias will be used as identifier for all other commands.\n",
                    type=str,
                )
            alias = validate_text("alias", alias)
            existing = store.registry.namespace(kind).get(alias)
            if existing is not None:
                raise Duplicate(alias, kind, existing.alias)

            name = name if name is not None else _prompt_text("name", alias)
            email = email if email is not None else _prompt_text("email", alias)
            if kind is Kind.DRIVER and key is None:
                key = _prompt_key(alias)

            identity = store.registry.add(
                kind, Identity(alias=alias, name=name, email=email, signing_key=key)
            )
        click.echo(f"Added {kind} {format_identity(identity)}")

    new_command.help = f"Add a new {kind}. Values not provided are prompted for."
    return new_command


def make_edit_command(kind: Kind) -> click.Command:
    @click.command(name="edit")
    @click.argument("alias", required=False)
    @click.option("--name", help="New full name")
    @click.option("--email", help="New email address")
    @click.option("--key", help="New signing key (empty to remove)", hidden=kind is Kind.NAVIGATOR)
    @click.pass_obj
    def edit_command(
        cfg: DriveConfig,
        alias: Optional[str],
        name: Optional[str],
        email: Optional[str],
        key: Optional[str],
    ) -> None:
        with Store.open(cfg.home) as store:
            if alias is None:
                identities = store.registry.list(kind)
                if not identities:
                    click.echo(f"No {kind}s to edit")
                    return
                alias = select_aliases(identities, kind, multiple=False)[0]

            current = store.registry.find(kind, alias)
            if name is None and email is None and key is None:
                name = _prompt_text("name", current.alias, current.name)
                email = _prompt_text("email", current.alias, current.email)
                if kind is Kind.DRIVER:
                    key = _prompt_key(current.alias, current.signing_key)

            changes = {}
            if name is not None:
                changes["name"] = name
            if email is not None:
                changes["email"] = email
            if key is not None:
                changes["signing_key"] = key

            edited = store.registry.edit(kind, alias, lambda ident: ident.with_changes(**changes))
        click.echo(f"Updated {kind} {format_identity(edited)}")

    edit_command.help = f"Edit a {kind}, either prompted for or specified."
    return edit_command


def make_delete_command(kind: Kind) -> click.Command:
    @click.command(name="delete")
    @click.argument("aliases", nargs=-1)
    @click.pass_obj
    def delete_command(cfg: DriveConfig, aliases: tuple[str, ...]) -> None:
        with Store.open(cfg.home) as store:
            coordinator = DriveCoordinator(store)
            if not aliases:
                identities = store.registry.list(kind)
                if not identities:
                    click.echo(f"No {kind}s to delete")
                    return
                aliases = tuple(select_aliases(identities, kind))

            removed = [coordinator.delete(kind, alias) for alias in aliases]
        for identity in removed:
            click.echo(f"Deleted {kind} {identity.alias}")

    delete_command.help = f"Delete {kind}s, either prompted for or specified."
    return delete_command
