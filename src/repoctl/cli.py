"""CLI entry point for repoctl."""

import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from repoctl import __version__
from repoctl.commands import add, filter_cmd, list_cmd, remove, status, update
from repoctl.commands.common import err_console
from repoctl.core.config import RepoConfig, default_config_path
from repoctl.core.errors import ConfigError


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=debug)],
        force=True,
    )


def load_config(config_path: Path | None, repo: Path | None, quiet: bool) -> RepoConfig:
    """Build the configuration from the config file and global options."""
    path = config_path or default_config_path()
    if path.exists():
        config = RepoConfig.load(path)
    else:
        if config_path is not None:
            raise ConfigError(f"config file {path} does not exist")
        config = RepoConfig()
        if not quiet:
            err_console.print(f"[yellow]Warning:[/yellow] missing config file {path}")

    config = config.merge(repo=repo, quiet=quiet or None)
    if config.repo is None and not config.quiet:
        err_console.print(
            f"[yellow]Warning:[/yellow] no repository configured, using {config.database}"
        )
    return config


@click.group()
@click.version_option(version=__version__, prog_name="repoctl")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Configuration file to load settings from",
)
@click.option(
    "--repo",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Path to the repository database, e.g. /srv/abs/atlas.db.tar.gz",
)
@click.option("--quiet", "-q", is_flag=True, help="Only show information when absolutely necessary")
@click.option("--debug", is_flag=True, help="Show debug output")
@click.pass_context
def main(ctx, config_path: Path | None, repo: Path | None, quiet: bool, debug: bool):
    """repoctl - Manage local pacman repositories.

    The repository directory is the directory containing the database;
    package files are expected to live next to it.

    Examples:

        repoctl list -v

        repoctl status

        repoctl add ./fairsplit-1.0-1-x86_64.pkg.tar.zst

        repoctl update --backup
    """
    setup_logging(debug)
    try:
        ctx.obj = load_config(config_path, repo, quiet)
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


# Register commands
main.add_command(list_cmd.list_packages)
main.add_command(list_cmd.list_packages, name="ls")
main.add_command(status.status)
main.add_command(filter_cmd.filter_packages)
main.add_command(add.add)
main.add_command(remove.remove)
main.add_command(remove.remove, name="rm")
main.add_command(update.update)
main.add_command(update.reset)


if __name__ == "__main__":
    main()
