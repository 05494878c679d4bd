"""Data models for repoctl."""

from repoctl.models.package import IndexEntry, PackageGroup, PackageIdentity
from repoctl.models.state import Lookup, LookupStatus, PackageState, Tag

__all__ = [
    "IndexEntry",
    "PackageGroup",
    "PackageIdentity",
    "Lookup",
    "LookupStatus",
    "PackageState",
    "Tag",
]
