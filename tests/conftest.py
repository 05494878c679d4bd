"""Shared fixtures for repoctl tests."""

import io
import tarfile
from pathlib import Path

import pytest

from repoctl.core.config import RepoConfig
from repoctl.core.errors import DatabaseError, IndexUnreadable
from repoctl.core.filename import parse_path
from repoctl.models.package import IndexEntry


def write_database(path: Path, packages: dict[str, str]) -> Path:
    """Write a minimal repository database containing packages {name: version}."""
    with tarfile.open(path, "w:gz") as tar:
        for name, version in packages.items():
            directory = tarfile.TarInfo(f"{name}-{version}")
            directory.type = tarfile.DIRTYPE
            tar.addfile(directory)

            desc = (
                f"%FILENAME%\n{name}-{version}-x86_64.pkg.tar.zst\n\n"
                f"%NAME%\n{name}\n\n"
                f"%VERSION%\n{version}\n\n"
                f"%ARCH%\nx86_64\n"
            ).encode()
            info = tarfile.TarInfo(f"{name}-{version}/desc")
            info.size = len(desc)
            tar.addfile(info, io.BytesIO(desc))
    return path


class FakeDatabase:
    """In-memory stand-in for RepoDatabase that records every call."""

    def __init__(self, path: Path, entries: dict[str, str] | None = None):
        self.path = path
        self.entries = dict(entries or {})
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()

    @property
    def directory(self) -> Path:
        return self.path.parent

    def exists(self) -> bool:
        return True

    def list_entries(self) -> dict[str, IndexEntry]:
        return {name: IndexEntry(name, version) for name, version in self.entries.items()}

    def add_entry(self, package_path: Path) -> None:
        pkg = parse_path(package_path)
        self.calls.append(("add", package_path.name))
        if pkg.name in self.fail_on:
            raise DatabaseError(f"repo-add failed for {pkg.name}")
        if not package_path.exists():
            raise DatabaseError(f"{package_path} does not exist")
        self.entries[pkg.name] = pkg.full_version

    def remove_entry(self, name: str) -> None:
        self.calls.append(("remove", name))
        if name in self.fail_on:
            raise DatabaseError(f"repo-remove failed for {name}")
        self.entries.pop(name, None)

    def clear(self) -> list[Path]:
        self.calls.append(("clear", ""))
        self.entries.clear()
        return []


class MissingDatabase(FakeDatabase):
    def exists(self) -> bool:
        return False

    def list_entries(self):
        raise IndexUnreadable(self.path, "no such file", missing=True)


@pytest.fixture
def repo_dir(tmp_path) -> Path:
    path = tmp_path / "repo"
    path.mkdir()
    return path


@pytest.fixture
def make_pkg(repo_dir):
    """Create a package file, by default inside the repository directory."""

    def _make(filename: str, directory: Path | None = None, content: bytes = b"package"):
        directory = directory or repo_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_bytes(content)
        return parse_path(path)

    return _make


@pytest.fixture
def config(repo_dir) -> RepoConfig:
    return RepoConfig(repo=repo_dir / "test.db.tar.gz", query_timeout=5.0)


@pytest.fixture
def fake_db(config) -> FakeDatabase:
    return FakeDatabase(config.database)
