"""Configuration loading for repoctl."""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import os

import yaml

from repoctl.core.errors import ConfigError


DEFAULT_REPO = Path("/srv/abs/atlas.db.tar.gz")
DEFAULT_BACKUP_DIR = "backup"


def default_config_path() -> Path:
    """Path of the configuration file, overridable with REPOCTL_CONFIG."""
    env = os.environ.get("REPOCTL_CONFIG")
    if env:
        return Path(env)
    base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "repoctl" / "config.yaml"


@dataclass
class RepoConfig:
    """Settings for one repository.

    The repository directory is the directory containing the database file.
    """

    repo: Path | None = None
    add_params: list[str] = field(default_factory=list)
    rm_params: list[str] = field(default_factory=list)
    backup_dir: str = DEFAULT_BACKUP_DIR
    interactive: bool = False
    backup: bool = False
    columnate: bool = False
    quiet: bool = False
    aur_url: str = "https://aur.archlinux.org"
    query_timeout: float = 30.0
    query_workers: int = 8

    @property
    def database(self) -> Path:
        return self.repo or DEFAULT_REPO

    @property
    def directory(self) -> Path:
        return self.database.parent

    @property
    def backup_path(self) -> Path:
        path = Path(self.backup_dir).expanduser()
        if path.is_absolute():
            return path
        return self.directory / path

    @classmethod
    def from_dict(cls, data: dict) -> "RepoConfig":
        """Create a config from a parsed YAML mapping."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        if values.get("repo") is not None:
            values["repo"] = Path(str(values["repo"])).expanduser()
        for key in ("add_params", "rm_params"):
            value = values.get(key)
            if value is None:
                values.pop(key, None)
            elif isinstance(value, str):
                values[key] = value.split()
            elif not isinstance(value, list):
                raise ConfigError(f"{key} must be a list of strings")
            else:
                values[key] = [str(v) for v in value]
        try:
            if "query_timeout" in values:
                values["query_timeout"] = float(values["query_timeout"])
            if "query_workers" in values:
                values["query_workers"] = int(values["query_workers"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid query setting: {e}")
        return cls(**values)

    @classmethod
    def load(cls, path: Path) -> "RepoConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"cannot read {path}: {e}")
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping of settings")
        return cls.from_dict(data)

    def merge(self, **overrides) -> "RepoConfig":
        """Return a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)
