"""Scanning of the repository directory for package files."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from repoctl.core.errors import MalformedFilename
from repoctl.core.filename import has_package_extension, parse_path
from repoctl.models.package import PackageGroup, PackageIdentity

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Package files found in a repository directory."""

    groups: dict[str, PackageGroup] = field(default_factory=dict)
    malformed: list[MalformedFilename] = field(default_factory=list)

    def add(self, pkg: PackageIdentity) -> None:
        group = self.groups.get(pkg.name)
        if group is None:
            self.groups[pkg.name] = PackageGroup(pkg.name, [pkg])
        else:
            group.add(pkg)

    def files(self) -> list[PackageIdentity]:
        """All package files, ordered by name then version."""
        return [pkg for name in sorted(self.groups) for pkg in self.groups[name].files]


def _check_symlink(path: Path) -> str | None:
    """Return a reason why a symlink cannot be used, or None."""
    target = path.readlink()
    if not target.is_absolute():
        target = path.parent / target
    if target.is_symlink():
        return "symlink points to another symlink"
    if not target.exists():
        return "dangling symlink"
    if not target.is_file():
        return "symlink does not point to a file"
    return None


def scan_directory(directory: Path) -> ScanResult:
    """Find all package files directly inside directory.

    Subdirectories are not searched. Files without a package extension are
    ignored; package files whose names cannot be parsed are collected in
    ScanResult.malformed.
    """
    result = ScanResult()
    if not directory.is_dir():
        logger.debug("repository directory %s does not exist", directory)
        return result

    for path in sorted(directory.iterdir()):
        if not has_package_extension(path.name):
            continue

        if path.is_symlink():
            reason = _check_symlink(path)
            if reason is not None:
                result.malformed.append(MalformedFilename(path.name, reason))
                continue
        elif not path.is_file():
            continue

        try:
            pkg = parse_path(path)
        except MalformedFilename as e:
            logger.debug("skipping %s: %s", path, e.reason)
            result.malformed.append(e)
            continue

        result.add(pkg)

    logger.debug(
        "scanned %s: %d packages, %d malformed files",
        directory,
        len(result.groups),
        len(result.malformed),
    )
    return result
