"""Status command implementation."""

import click
from rich.table import Table

from repoctl.commands.common import collect_states, console
from repoctl.models.state import Tag

ACTIONABLE = Tag.PENDING_ADD | Tag.PENDING_REMOVE | Tag.DUPLICATE | Tag.OUTDATED | Tag.MISSING

TAG_STYLES = {
    Tag.PENDING_ADD: "[green]pending add[/green]",
    Tag.PENDING_REMOVE: "[red]pending remove[/red]",
    Tag.DUPLICATE: "[yellow]duplicates[/yellow]",
    Tag.OUTDATED: "[magenta]outdated[/magenta]",
    Tag.MISSING: "[dim]not in aur[/dim]",
}


@click.command()
@click.option("--no-aur", is_flag=True, help="Do not check the AUR for newer versions")
@click.pass_obj
def status(config, no_aur: bool):
    """Show pending changes to the database and packages that can be updated."""
    states = collect_states(config, registry=not no_aur)
    changes = [s for s in states.values() if s.tags & ACTIONABLE]

    if not changes:
        if not config.quiet:
            console.print("[green]Repository is up to date![/green]")
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Package")
    table.add_column("Disk")
    table.add_column("Database")
    table.add_column("AUR")
    table.add_column("Status")

    for state in changes:
        labels = [style for tag, style in TAG_STYLES.items() if state.has(tag)]
        if state.has(Tag.DUPLICATE):
            labels[labels.index(TAG_STYLES[Tag.DUPLICATE])] = (
                f"[yellow]{len(state.group.obsolete)} obsolete[/yellow]"
            )
        table.add_row(
            state.name,
            state.disk_version or "-",
            state.index_version or "-",
            state.registry_version or "-",
            ", ".join(labels),
        )

    console.print(table)

    pending = sum(1 for s in changes if s.tags & (Tag.PENDING_ADD | Tag.PENDING_REMOVE | Tag.DUPLICATE))
    if pending and not config.quiet:
        console.print(f"\n{pending} package(s) need attention")
        console.print("[dim]Run 'repoctl update' to apply pending changes[/dim]")
