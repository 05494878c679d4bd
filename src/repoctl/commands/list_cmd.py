"""List command implementation."""

import click
from rich.columns import Columns

from repoctl.commands.common import collect_states, console
from repoctl.models.state import PackageState, Tag


def describe_state(
    state: PackageState,
    versioned: bool = False,
    pending: bool = False,
    duplicates: bool = False,
    installed: bool = False,
    outdated: bool = False,
) -> str:
    """Render one package as a line of rich markup."""
    text = f"[bold]{state.name}[/bold]"
    if versioned and state.version:
        text += f" {state.version}"

    marks = []
    if pending:
        if state.has(Tag.PENDING_ADD):
            if state.entry is None:
                marks.append("[green](new)[/green]")
            else:
                marks.append(f"[green](db: {state.index_version})[/green]")
        if state.has(Tag.PENDING_REMOVE):
            marks.append("[red](no file)[/red]")
    if duplicates and state.has(Tag.DUPLICATE):
        marks.append(f"[yellow]({len(state.group.obsolete)} obsolete)[/yellow]")
    if installed and state.installed_version:
        if state.installed_version == state.version:
            marks.append("[cyan](installed)[/cyan]")
        else:
            marks.append(f"[cyan](installed: {state.installed_version})[/cyan]")
    if outdated:
        if state.has(Tag.OUTDATED):
            marks.append(f"[magenta](aur: {state.registry_version})[/magenta]")
        elif state.has(Tag.MISSING):
            marks.append("[dim](not in aur)[/dim]")

    if marks:
        text += " " + " ".join(marks)
    return text


def print_states(lines: list[str], columnate: bool) -> None:
    if columnate:
        console.print(Columns(lines, padding=(0, 2)))
    else:
        for line in lines:
            console.print(line, highlight=False)


@click.command("list")
@click.option("--versioned", "-v", is_flag=True, help="Show package versions along with names")
@click.option("--pending", "-p", is_flag=True, help="Mark pending changes to the database")
@click.option("--duplicates", "-d", is_flag=True, help="Mark packages with obsolete package files")
@click.option("--installed", "-l", is_flag=True, help="Mark packages that are locally installed")
@click.option("--outdated", "-u", is_flag=True, help="Mark packages that are newer in the AUR")
@click.option("--all", "-a", "show_all", is_flag=True, help="Same as -vpdlu")
@click.option("--columns", "-s", is_flag=True, help="Show items in columns rather than lines")
@click.pass_obj
def list_packages(
    config,
    versioned: bool,
    pending: bool,
    duplicates: bool,
    installed: bool,
    outdated: bool,
    show_all: bool,
    columns: bool,
):
    """List packages that belong to the repository."""
    if show_all:
        versioned = pending = duplicates = installed = outdated = True

    states = collect_states(config, registry=outdated, installed=installed)
    packages = [s for s in states.values() if s.group is not None or s.entry is not None]

    if not packages:
        if not config.quiet:
            console.print(f"No packages in {config.directory}")
        raise SystemExit(0)

    lines = [
        describe_state(s, versioned, pending, duplicates, installed, outdated)
        for s in packages
    ]
    print_states(lines, columns or config.columnate)
