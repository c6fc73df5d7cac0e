"""Command-line interface for git-drive.

    git-drive with nav1 [nav2...]   Start driving with navigator(s)
    git-drive with                  Pick navigators from a list
    git-drive alone                 Stop adding co-authors
    git-drive as drv1               Change the driver while driving
    git-drive show                  Show the active navigators
    git-drive list | new | edit | delete      Manage navigators
    git-drive me list | new | edit | delete   Manage drivers
"""

import logging
import shlex
import sys
from pathlib import Path
from typing import Optional

import click

from ._version import __version__
from .cli_formatting import ErrorReporter, format_aliases
from .cli_identity import register_identity_commands
from .cli_utils import select_aliases, setup_logging
from .config import LOG_LEVELS, ConfigLoader, DriveConfig
from .core.coordinator import DriveCoordinator, DriveOutput
from .core.store import Store
from .errors import GitDriveError
from .git_integration import GitIntegration, environment
from .models import Kind
from .ui import print_session
from .utils.trailers import merge_trailers

logger = logging.getLogger(__name__)


class DriveGroup(click.Group):
    """Click group that reports git-drive errors instead of raising them."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except GitDriveError as e:
            logger.debug("Command failed", exc_info=True)
            ErrorReporter.report(e)
            ctx.exit(1)


repo_option = click.option(
    "--repo",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Repository to configure",
)
no_git_option = click.option(
    "--no-git", is_flag=True, help="Only record the drive, do not touch git configuration"
)


def _apply(cfg: DriveConfig, output: DriveOutput, repo: Path, no_git: bool) -> None:
    if no_git:
        return
    git = GitIntegration(repo, cfg.template_name)
    if output.driver is None and output.is_alone:
        git.clear()
        return
    template = git.apply(output, sign_commits=cfg.sign_commits)
    if template is not None:
        click.echo(f"git-commit set template to {click.style(str(template), fg='cyan')}.")
        click.echo(
            f"Use {click.style('git-drive alone', fg='yellow')} to unset and drive alone."
        )


@click.group(cls=DriveGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="git-drive")
@click.help_option("-h", "--help")
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the registry and session (default: $GIT_DRIVE_HOME or the user config dir)",
)
@click.option(
    "--log",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Enable logging with specified level (default: none)",
)
@click.pass_context
def cli(ctx: click.Context, home: Optional[Path], log: Optional[str]) -> None:
    """git-drive - switch git authors and co-authors while pairing."""
    cfg = ConfigLoader.load(home)
    setup_logging(log or cfg.log_level, __name__)
    ctx.obj = cfg

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@cli.command(name="with")
@click.argument("aliases", nargs=-1)
@click.option("--as", "driver", help="Driver alias to commit as")
@repo_option
@no_git_option
@click.pass_obj
def drive_with(
    cfg: DriveConfig, aliases: tuple[str, ...], driver: Optional[str], repo: Path, no_git: bool
) -> None:
    """Start driving with the given navigators.

    \b
    Without aliases, the known navigators are listed for selection.
    Navigators may be abbreviated as long as the prefix is unique.
    """
    with Store.open(cfg.home) as store:
        coordinator = DriveCoordinator(store)
        if not aliases:
            navigators = store.registry.list(Kind.NAVIGATOR)
            if navigators:
                aliases = tuple(
                    select_aliases(navigators, Kind.NAVIGATOR, store.session.navigators)
                )
            elif driver is None:
                click.echo("No navigators known yet. Add one with 'git-drive new'.")
                return

        output = coordinator.resolve_drive(driver, aliases)
        _apply(cfg, output, repo, no_git)

    if output.is_alone:
        click.echo("Driving alone.")
    else:
        click.echo(f"Driving with {', '.join(n.alias for n in output.navigators)}.")


@cli.command()
@repo_option
@no_git_option
@click.pass_obj
def alone(cfg: DriveConfig, repo: Path, no_git: bool) -> None:
    """Stop adding co-authors; the driver stays."""
    with Store.open(cfg.home) as store:
        output = DriveCoordinator(store).alone()
        _apply(cfg, output, repo, no_git)
    click.echo("Driving alone.")


@cli.command(name="as")
@click.argument("alias")
@repo_option
@no_git_option
@click.pass_obj
def drive_as(cfg: DriveConfig, alias: str, repo: Path, no_git: bool) -> None:
    """Change the driver, keeping the navigators."""
    with Store.open(cfg.home) as store:
        output = DriveCoordinator(store).drive_as(alias)
        _apply(cfg, output, repo, no_git)
    click.echo(f"Driving as {output.driver.alias}.")


@cli.command()
@click.option("--color", default="cyan", show_default=True, help="Color for the aliases")
@click.option("--fail-if-empty", is_flag=True, help="Exit with 1 when nobody is navigating")
@click.option("--verbose", "-v", is_flag=True, help="Show driver and navigators in a table")
@click.pass_obj
def show(cfg: DriveConfig, color: str, fail_if_empty: bool, verbose: bool) -> None:
    """Show the current navigators."""
    with Store.open(cfg.home) as store:
        output = DriveCoordinator(store).show()
        session = store.session

    if verbose:
        print_session(output, session)
    elif output.navigators:
        click.echo(format_aliases((n.alias for n in output.navigators), color or None))

    if fail_if_empty and not output.navigators:
        sys.exit(1)


@cli.command()
@click.pass_obj
def env(cfg: DriveConfig) -> None:
    """Print export lines for the active driver's author and committer."""
    with Store.open(cfg.home) as store:
        coordinator = DriveCoordinator(store)
        coordinator.current_driver()
        output = coordinator.show()

    for name, value in environment(output).items():
        click.echo(f"export {name}={shlex.quote(value)}")


@cli.command()
@click.argument("message_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def trailers(cfg: DriveConfig, message_file: Path) -> None:
    """Add the navigators' Co-authored-by trailers to a commit message file.

    \b
    Suitable for a prepare-commit-msg hook:
      git-drive trailers "$1"
    """
    with Store.open(cfg.home) as store:
        output = DriveCoordinator(store).show()

    if not output.navigators:
        return
    message = message_file.read_text(encoding="utf-8")
    message_file.write_text(merge_trailers(message, output.trailers), encoding="utf-8")


@cli.group(cls=DriveGroup)
def me() -> None:
    """Manage drivers (your own identities)."""


register_identity_commands(cli, Kind.NAVIGATOR)
register_identity_commands(me, Kind.DRIVER)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
