"""Parsing of package archive filenames."""

import re
from pathlib import Path

from repoctl.core.errors import MalformedFilename
from repoctl.models.package import PackageIdentity


COMPRESSION_SUFFIXES = ("xz", "zst", "gz", "bz2", "lrz", "lzo", "lz4", "lz", "Z")

# .pkg.tar optionally followed by exactly one compression suffix
EXTENSION_PATTERN = re.compile(
    r"\.pkg\.tar(?:\.(?:" + "|".join(COMPRESSION_SUFFIXES) + r"))?$"
)

# name-version-release-arch; name may contain dashes, the rest may not
IDENTITY_PATTERN = re.compile(
    r"^(?P<name>[^/\s]+)-(?P<version>[^-/\s]+)-(?P<release>[^-/\s]+)-(?P<arch>[^-/\s]+)$"
)


def has_package_extension(filename: str) -> bool:
    """Check whether a filename looks like a package archive."""
    return EXTENSION_PATTERN.search(filename) is not None


def parse_filename(filename: str, path: Path | None = None) -> PackageIdentity:
    """Parse a package filename such as pacman-6.0.2-1-x86_64.pkg.tar.zst.

    Raises MalformedFilename if the name does not decompose into
    name-version-release-arch followed by a package extension.
    """
    match = EXTENSION_PATTERN.search(filename)
    if match is None:
        raise MalformedFilename(filename, "missing .pkg.tar extension")

    extension = match.group(0)
    stem = filename[: match.start()]

    identity = IDENTITY_PATTERN.match(stem)
    if identity is None:
        raise MalformedFilename(filename, "expected name-version-release-arch")

    name = identity.group("name")
    if name.startswith("-") or name.startswith("."):
        raise MalformedFilename(filename, f"invalid package name {name!r}")

    return PackageIdentity(
        name=name,
        version=identity.group("version"),
        release=identity.group("release"),
        arch=identity.group("arch"),
        extension=extension,
        path=path,
    )


def parse_path(path: Path) -> PackageIdentity:
    """Parse the filename part of a path, remembering the path."""
    return parse_filename(path.name, path=path)
