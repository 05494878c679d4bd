"""Access to the repository database.

Entries are read straight from the database tarball. All changes go
through pacman's repo-add and repo-remove scripts, so the database format
stays theirs.
"""

import logging
import re
import subprocess
import tarfile
from pathlib import Path

from repoctl.core.errors import DatabaseError, IndexUnreadable
from repoctl.models.package import IndexEntry

logger = logging.getLogger(__name__)


def parse_desc(content: str) -> dict[str, list[str]]:
    """Parse a database desc file into {FIELD: [values]}."""
    fields: dict[str, list[str]] = {}
    current = None
    for line in content.splitlines():
        line = line.strip()
        if not line:
            current = None
            continue
        if line.startswith("%") and line.endswith("%") and len(line) > 2:
            current = line[1:-1]
            fields[current] = []
        elif current is not None:
            fields[current].append(line)
    return fields


DATABASE_SUFFIX = re.compile(r"\.db(?:\.tar(?:\.\w+)?)?$")


def database_name(path: Path) -> str:
    """Repository name from its database file, e.g. atlas.db.tar.gz -> atlas."""
    match = DATABASE_SUFFIX.search(path.name)
    if match is None or match.start() == 0:
        return path.stem
    return path.name[: match.start()]


class RepoDatabase:
    """A pacman repository database file."""

    def __init__(
        self,
        path: Path,
        add_params: list[str] | None = None,
        rm_params: list[str] | None = None,
        runner=subprocess.run,
    ):
        self.path = path
        self.add_params = list(add_params or [])
        self.rm_params = list(rm_params or [])
        self._run = runner

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def name(self) -> str:
        return database_name(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def list_entries(self) -> dict[str, IndexEntry]:
        """Read all package entries from the database."""
        if not self.path.exists():
            raise IndexUnreadable(self.path, "no such file", missing=True)

        entries: dict[str, IndexEntry] = {}
        try:
            with tarfile.open(self.path, "r:*") as tar:
                for member in tar:
                    if not member.isfile() or not member.name.endswith("/desc"):
                        continue
                    handle = tar.extractfile(member)
                    if handle is None:
                        continue
                    with handle:
                        fields = parse_desc(handle.read().decode("utf-8", errors="replace"))
                    name = fields.get("NAME", [None])[0]
                    version = fields.get("VERSION", [None])[0]
                    if not name or not version:
                        raise IndexUnreadable(self.path, f"incomplete entry {member.name}")
                    entries[name] = IndexEntry(name, version)
        except (tarfile.TarError, OSError, EOFError) as e:
            raise IndexUnreadable(self.path, str(e))

        logger.debug("read %d entries from %s", len(entries), self.path)
        return entries

    def _invoke(self, cmd: list[str]) -> None:
        logger.debug("running %s", " ".join(cmd))
        try:
            result = self._run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            raise DatabaseError(f"{cmd[0]} not found; is pacman installed?")
        except (subprocess.SubprocessError, OSError) as e:
            raise DatabaseError(f"{cmd[0]} failed: {e}")

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            raise DatabaseError(f"{cmd[0]} exited with status {result.returncode}: {output}")

    def add_entry(self, package_path: Path) -> None:
        """Add a package file to the database (repo-add)."""
        self._invoke(["repo-add", *self.add_params, str(self.path), str(package_path)])

    def remove_entry(self, name: str) -> None:
        """Remove a package name from the database (repo-remove)."""
        self._invoke(["repo-remove", *self.rm_params, str(self.path), name])

    def related_files(self) -> list[Path]:
        """The database file plus its links, files database and backups."""
        pattern = re.compile(
            rf"^{re.escape(self.name)}\.(?:db|files)(?:\.tar(?:\.\w+)?)?(?:\.old)?(?:\.sig)?$"
        )
        if not self.directory.is_dir():
            return []
        files = [p for p in self.directory.iterdir() if pattern.match(p.name)]
        if self.path.exists() and self.path not in files:
            files.append(self.path)
        return sorted(files)

    def clear(self) -> list[Path]:
        """Delete the database so it can be rebuilt from scratch."""
        removed = []
        for path in self.related_files():
            path.unlink(missing_ok=True)
            removed.append(path)
        logger.debug("removed database files %s", ", ".join(str(p) for p in removed))
        return removed
