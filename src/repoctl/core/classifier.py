"""Classification of repository packages into state tags."""

from typing import Callable, Iterable, Mapping

from repoctl.core.errors import InvalidCriterion
from repoctl.core.version import is_newer
from repoctl.models.package import IndexEntry, PackageGroup
from repoctl.models.state import NOT_QUERIED, Lookup, LookupStatus, PackageState, Tag


def classify_one(
    name: str,
    group: PackageGroup | None,
    entry: IndexEntry | None,
    installed: Lookup = NOT_QUERIED,
    registry: Lookup = NOT_QUERIED,
) -> PackageState:
    """Compute the tags of a single package."""
    state = PackageState(name, group=group, entry=entry, installed=installed, registry=registry)
    tags = Tag.NONE
    latest = group.latest.full_version if group is not None else None

    if latest is not None and (entry is None or entry.version != latest):
        tags |= Tag.PENDING_ADD

    if entry is not None and group is None:
        tags |= Tag.PENDING_REMOVE

    if group is not None and group.has_duplicates:
        tags |= Tag.DUPLICATE

    current = latest or (entry.version if entry else None)
    if registry.is_found and current is not None and is_newer(registry.version, current):
        tags |= Tag.OUTDATED

    if latest is not None and registry.status is LookupStatus.NOT_FOUND:
        tags |= Tag.MISSING

    if installed.is_found and entry is None and group is None:
        tags |= Tag.LOCAL_ONLY

    if (
        latest is not None
        and entry is not None
        and entry.version == latest
        and (not installed.is_found or installed.version == latest)
    ):
        tags |= Tag.IN_SYNC

    state.tags = tags
    return state


def classify(
    groups: Mapping[str, PackageGroup],
    index: Mapping[str, IndexEntry],
    installed: Mapping[str, Lookup] | None = None,
    registry: Mapping[str, Lookup] | None = None,
) -> dict[str, PackageState]:
    """Classify every package known from disk, database or local installation.

    Names only known to the registry are left out: nothing is ever suggested
    for packages that were never built here.
    """
    installed = installed or {}
    registry = registry or {}

    names = set(groups) | set(index)
    names |= {name for name, lookup in installed.items() if lookup.is_found}

    return {
        name: classify_one(
            name,
            groups.get(name),
            index.get(name),
            installed.get(name, NOT_QUERIED),
            registry.get(name, NOT_QUERIED),
        )
        for name in sorted(names)
    }


# Filter criteria usable with the filter command
CRITERIA: dict[str, Callable[[PackageState], bool]] = {
    "duplicates": lambda s: s.has(Tag.DUPLICATE),
    "pending": lambda s: bool(s.tags & (Tag.PENDING_ADD | Tag.PENDING_REMOVE)),
    "pending-add": lambda s: s.has(Tag.PENDING_ADD),
    "pending-remove": lambda s: s.has(Tag.PENDING_REMOVE),
    "outdated": lambda s: s.has(Tag.OUTDATED),
    "missing": lambda s: s.has(Tag.MISSING),
    "local": lambda s: s.installed.is_found,
    "local-only": lambda s: s.has(Tag.LOCAL_ONLY),
    "synced": lambda s: s.has(Tag.IN_SYNC),
}


def parse_criteria(criteria: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse criteria like "pending" or "!outdated" into (name, negated)."""
    parsed = []
    for criterion in criteria:
        negated = criterion.startswith("!")
        name = criterion[1:] if negated else criterion
        if name not in CRITERIA:
            raise InvalidCriterion(
                f"unknown filter criterion {criterion!r}; "
                f"choose from {', '.join(CRITERIA)}"
            )
        parsed.append((name, negated))
    return parsed


def filter_states(
    states: Mapping[str, PackageState], criteria: Iterable[str]
) -> list[PackageState]:
    """Packages matching all criteria, in name order."""
    parsed = parse_criteria(criteria)
    return [
        state
        for _, state in sorted(states.items())
        if all(CRITERIA[name](state) != negated for name, negated in parsed)
    ]


def needed_lookups(criteria: Iterable[str]) -> tuple[bool, bool]:
    """Which queries (registry, installed) the given criteria depend on."""
    names = {name for name, _ in parse_criteria(criteria)}
    registry = bool(names & {"outdated", "missing"})
    installed = bool(names & {"local", "local-only"})
    return registry, installed
