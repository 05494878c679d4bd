"""Filter command implementation."""

import click

from repoctl.commands.common import collect_states, fail
from repoctl.commands.list_cmd import describe_state, print_states
from repoctl.core.classifier import filter_states, needed_lookups
from repoctl.core.errors import InvalidCriterion


@click.command("filter")
@click.argument("criteria", nargs=-1, required=True)
@click.option("--versioned", "-v", is_flag=True, help="Show package versions along with names")
@click.option("--columns", "-s", is_flag=True, help="Show items in columns rather than lines")
@click.pass_obj
def filter_packages(config, criteria: tuple[str, ...], versioned: bool, columns: bool):
    """Filter packages by one or more criteria.

    Every criterion must hold; prefix one with ! to negate it.

    \b
    Criteria:
      duplicates      packages with obsolete files to delete or back up
      pending         packages to be added to or removed from the database
      pending-add     packages to be added to the database
      pending-remove  packages to be removed from the database
      outdated        packages with newer versions in the AUR
      missing         packages not found in the AUR
      local           packages installed on this machine
      local-only      installed foreign packages not in the repository
      synced          packages whose file, database entry and installation agree
    """
    try:
        registry, installed = needed_lookups(criteria)
    except InvalidCriterion as e:
        fail(str(e))

    states = collect_states(config, registry=registry, installed=installed)
    matches = filter_states(states, criteria)

    lines = [describe_state(s, versioned=versioned) for s in matches]
    if lines:
        print_states(lines, columns or config.columnate)
