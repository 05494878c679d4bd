"""Queries against the local pacman installation."""

import logging
import subprocess

from repoctl.models.state import Lookup

logger = logging.getLogger(__name__)


def parse_query_output(output: str) -> dict[str, str]:
    """Parse `pacman -Q` output ("name version" per line)."""
    packages = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) >= 2:
            packages[parts[0]] = parts[1]
    return packages


class Pacman:
    """Read-only access to locally installed packages."""

    def __init__(self, executable: str = "pacman", runner=subprocess.run, timeout: float = 30.0):
        self.executable = executable
        self.timeout = timeout
        self._run = runner

    def _query(self, *args: str, timeout: float | None = None) -> subprocess.CompletedProcess:
        if timeout is None or timeout > self.timeout:
            timeout = self.timeout
        return self._run(
            [self.executable, *args],
            capture_output=True,
            text=True,
            timeout=timeout,
        )

    def installed_version(self, name: str, timeout: float | None = None) -> Lookup:
        """Version of name installed on this machine."""
        try:
            result = self._query("-Q", name, timeout=timeout)
        except FileNotFoundError:
            return Lookup.failed(f"{self.executable} not found")
        except subprocess.TimeoutExpired:
            return Lookup.cancelled()
        except (subprocess.SubprocessError, OSError) as e:
            return Lookup.failed(str(e))

        if result.returncode != 0:
            return Lookup.not_found()

        version = parse_query_output(result.stdout).get(name)
        if version is None:
            # name may be provided by a differently named package
            return Lookup.not_found()
        return Lookup.found(version)

    def foreign_packages(self) -> dict[str, str]:
        """Installed packages that are not in any sync database (pacman -Qm)."""
        try:
            result = self._query("-Qm")
        except (subprocess.SubprocessError, OSError) as e:
            logger.warning("cannot list foreign packages: %s", e)
            return {}

        # pacman exits 1 when there are no foreign packages
        if result.returncode != 0:
            return {}
        return parse_query_output(result.stdout)
