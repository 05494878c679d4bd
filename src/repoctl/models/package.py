"""Package file and database entry models."""

from dataclasses import dataclass, field
from pathlib import Path

from repoctl.core.version import version_key


# Architectures pacman knows about; anything else is kept as an opaque string.
KNOWN_ARCHITECTURES = frozenset(
    {"any", "x86_64", "x86_64_v2", "x86_64_v3", "x86_64_v4", "i686", "pentium4",
     "aarch64", "armv7h", "armv6h", "riscv64", "loong64"}
)


@dataclass(frozen=True)
class PackageIdentity:
    """Identity of a package archive file."""

    name: str
    version: str  # may carry an epoch, e.g. 1:2.0
    release: str
    arch: str
    extension: str = ".pkg.tar.zst"
    path: Path | None = None

    @property
    def full_version(self) -> str:
        """Version as recorded in the database: [epoch:]version-release."""
        return f"{self.version}-{self.release}"

    @property
    def filename(self) -> str:
        return f"{self.name}-{self.version}-{self.release}-{self.arch}{self.extension}"

    @property
    def known_arch(self) -> bool:
        return self.arch in KNOWN_ARCHITECTURES

    def __str__(self) -> str:
        return self.filename


@dataclass
class PackageGroup:
    """All package files in the repository that share a package name.

    Files are kept ordered oldest to newest; the last one is the latest.
    """

    name: str
    files: list[PackageIdentity] = field(default_factory=list)

    def __post_init__(self):
        for pkg in self.files:
            if pkg.name != self.name:
                raise ValueError(f"{pkg.filename} does not belong to group {self.name}")
        self.files.sort(key=_sort_key)

    def add(self, pkg: PackageIdentity) -> None:
        if pkg.name != self.name:
            raise ValueError(f"{pkg.filename} does not belong to group {self.name}")
        self.files.append(pkg)
        self.files.sort(key=_sort_key)

    @property
    def latest(self) -> PackageIdentity:
        if not self.files:
            raise ValueError(f"package group {self.name} is empty")
        return self.files[-1]

    @property
    def obsolete(self) -> list[PackageIdentity]:
        """Files superseded by the latest one."""
        return self.files[:-1]

    @property
    def has_duplicates(self) -> bool:
        return len(self.files) > 1


def _sort_key(pkg: PackageIdentity):
    # Equal versions fall back to the path so the choice is deterministic
    return (version_key(pkg.full_version), str(pkg.path or pkg.filename))


@dataclass(frozen=True)
class IndexEntry:
    """A package entry recorded in the repository database."""

    name: str
    version: str  # [epoch:]version-release
