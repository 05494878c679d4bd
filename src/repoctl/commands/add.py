"""Add command implementation."""

from pathlib import Path

import click

from repoctl.commands.common import console, execute, finish, open_database, scan
from repoctl.core.planner import plan_add


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path, dir_okay=False))
@click.option("--move", "-m", is_flag=True, help="Move packages into the repository instead of copying")
@click.option("--interactive", "-i", is_flag=True, help="Ask before doing anything destructive")
@click.option("--backup", "-b", is_flag=True, help="Back up obsolete package files instead of deleting them")
@click.pass_obj
def add(config, files: tuple[Path, ...], move: bool, interactive: bool, backup: bool):
    """Copy package files into the repository and add them to the database.

    Exactly the given package is added, which allows downgrading. All other
    files of the same package are deleted, or moved to the backup directory
    with --backup.

    FILES are package archives, e.g. ./fairsplit-1.0-1-x86_64.pkg.tar.zst
    """
    config = config.merge(interactive=interactive or None, backup=backup or None)
    database = open_database(config)

    result = scan(config)
    plan = plan_add(
        files,
        result.groups,
        config.directory,
        move=move,
        backup_dir=config.backup_path if config.backup else None,
    )

    if not config.quiet:
        console.print(f"[blue]Adding[/blue] {len(files)} package file(s) to {database.path}...")
    report = execute(config, database, plan)
    finish(report)
