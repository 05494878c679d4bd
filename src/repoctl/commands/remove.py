"""Remove command implementation."""

import click

from repoctl.commands.common import console, execute, finish, open_database, read_index, scan
from repoctl.core.planner import plan_remove


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--interactive", "-i", is_flag=True, help="Ask before doing anything destructive")
@click.option("--backup", "-b", is_flag=True, help="Back up package files instead of deleting them")
@click.pass_obj
def remove(config, names: tuple[str, ...], interactive: bool, backup: bool):
    """Remove packages from the database and delete their files.

    NAMES are package names, e.g. pacman, not pacman-6.0.2-1-x86_64.pkg.tar.zst
    """
    config = config.merge(interactive=interactive or None, backup=backup or None)
    database = open_database(config)

    index = read_index(config, database, missing_ok=False)
    result = scan(config)
    plan = plan_remove(
        names,
        result.groups,
        index,
        backup_dir=config.backup_path if config.backup else None,
    )

    if not config.quiet:
        console.print(f"[blue]Removing[/blue] {', '.join(names)}...")
    report = execute(config, database, plan)
    finish(report)
