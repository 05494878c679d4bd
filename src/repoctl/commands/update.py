"""Update and reset command implementations."""

import click

from repoctl.commands.common import (
    collect_states,
    confirm,
    console,
    execute,
    fail,
    finish,
    open_database,
    scan,
)
from repoctl.core.classifier import classify
from repoctl.core.planner import plan_update

interactive_option = click.option(
    "--interactive", "-i", is_flag=True, help="Ask before doing anything destructive"
)
backup_option = click.option(
    "--backup", "-b", is_flag=True, help="Back up obsolete package files instead of deleting them"
)


def apply_updates(config, database, states) -> None:
    plan = plan_update(states, backup_dir=config.backup_path if config.backup else None)
    if plan.empty:
        if not config.quiet:
            console.print("[green]Repository is up to date![/green]")
        raise SystemExit(0)

    if not config.quiet:
        console.print(
            f"[blue]Updating[/blue] {len(plan.names())} package(s) in {database.path}..."
        )
    report = execute(config, database, plan)
    finish(report)


@click.command()
@interactive_option
@backup_option
@click.pass_obj
def update(config, interactive: bool, backup: bool):
    """Bring the database in line with the package files.

    Adds the newest file of every package that is not in the database yet,
    removes database entries whose files are gone and deletes (or backs up)
    obsolete package files.
    """
    config = config.merge(interactive=interactive or None, backup=backup or None)
    database = open_database(config)
    states = collect_states(config, database=database)
    apply_updates(config, database, states)


@click.command()
@interactive_option
@backup_option
@click.pass_obj
def reset(config, interactive: bool, backup: bool):
    """Recreate the database from the package files.

    Deletes the database and then re-adds the newest file of every package,
    deleting (or backing up) obsolete package files.
    """
    config = config.merge(interactive=interactive or None, backup=backup or None)
    database = open_database(config)

    if database.exists():
        if config.interactive and not confirm(f"delete database {database.path}"):
            console.print("Reset cancelled")
            raise SystemExit(0)
        try:
            removed = database.clear()
        except OSError as e:
            fail(f"cannot delete database: {e}")
        if not config.quiet:
            for path in removed:
                console.print(f"  [green]✓[/green] deleted {path.name}")

    result = scan(config)
    states = classify(result.groups, {})
    apply_updates(config, database, states)
