"""Classification models for repository packages."""

from dataclasses import dataclass, field
from enum import Enum, Flag, auto

from repoctl.models.package import IndexEntry, PackageGroup


class Tag(Flag):
    """State tags of a package. A package can carry several at once."""

    NONE = 0
    IN_SYNC = auto()
    PENDING_ADD = auto()
    PENDING_REMOVE = auto()
    DUPLICATE = auto()
    OUTDATED = auto()
    MISSING = auto()
    LOCAL_ONLY = auto()


class LookupStatus(Enum):
    """Outcome of a registry or local installation query."""

    NOT_QUERIED = "not-queried"
    FOUND = "found"
    NOT_FOUND = "not-found"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Lookup:
    """Result of querying one package name."""

    status: LookupStatus = LookupStatus.NOT_QUERIED
    version: str | None = None
    error: str | None = None

    @classmethod
    def found(cls, version: str) -> "Lookup":
        return cls(LookupStatus.FOUND, version)

    @classmethod
    def not_found(cls) -> "Lookup":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: str) -> "Lookup":
        return cls(LookupStatus.FAILED, error=error)

    @classmethod
    def cancelled(cls) -> "Lookup":
        return cls(LookupStatus.CANCELLED, error="query cancelled")

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND


NOT_QUERIED = Lookup()


@dataclass
class PackageState:
    """Everything known about one package name."""

    name: str
    tags: Tag = Tag.NONE
    group: PackageGroup | None = None
    entry: IndexEntry | None = None
    installed: Lookup = field(default=NOT_QUERIED)
    registry: Lookup = field(default=NOT_QUERIED)

    def has(self, tag: Tag) -> bool:
        return tag in self.tags

    @property
    def disk_version(self) -> str | None:
        if self.group is None:
            return None
        return self.group.latest.full_version

    @property
    def index_version(self) -> str | None:
        return self.entry.version if self.entry else None

    @property
    def version(self) -> str | None:
        """The version the repository holds: latest on disk, else indexed."""
        return self.disk_version or self.index_version

    @property
    def installed_version(self) -> str | None:
        return self.installed.version if self.installed.is_found else None

    @property
    def registry_version(self) -> str | None:
        return self.registry.version if self.registry.is_found else None
