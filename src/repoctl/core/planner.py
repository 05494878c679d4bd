"""Planning of repository changes.

A plan is an ordered list of mutations. All mutations for one package
name are contiguous and ordered so that the database never references a
missing file: new files are put in place first, then added to the
database, and only then are obsolete files deleted or backed up.
"""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterable, Mapping

from repoctl.core.errors import MalformedFilename, MutationFailed
from repoctl.core.filename import parse_path
from repoctl.models.package import IndexEntry, PackageGroup, PackageIdentity
from repoctl.models.state import PackageState, Tag


BACKUP_SUFFIX = ".bak"


@dataclass
class Mutation:
    """A single change to the repository directory or database."""

    name: str

    # Destructive mutations need confirmation in interactive mode
    destructive: ClassVar[bool] = False
    # Declining this mutation also skips the rest of the package's mutations
    guards_rest: ClassVar[bool] = False

    def describe(self) -> str:
        raise NotImplementedError

    def apply(self, database) -> None:
        raise NotImplementedError


@dataclass
class CopyFile(Mutation):
    source: Path = None
    dest: Path = None
    move: bool = False

    def describe(self) -> str:
        verb = "move" if self.move else "copy"
        return f"{verb} {self.source} to {self.dest.parent}"

    def apply(self, database) -> None:
        self.dest.parent.mkdir(parents=True, exist_ok=True)
        # Stage next to dest and rename over it, so a symlink at dest is
        # replaced rather than written through
        partial = self.dest.with_name(f".{self.dest.name}.part")
        try:
            if self.move:
                shutil.move(self.source, partial)
            else:
                shutil.copy2(self.source, partial)
            os.replace(partial, self.dest)
        except OSError:
            partial.unlink(missing_ok=True)
            raise


@dataclass
class IndexAdd(Mutation):
    path: Path = None

    def describe(self) -> str:
        return f"add {self.path.name} to the database"

    def apply(self, database) -> None:
        database.add_entry(self.path)


@dataclass
class IndexRemove(Mutation):
    destructive: ClassVar[bool] = True
    guards_rest: ClassVar[bool] = True

    def describe(self) -> str:
        return f"remove {self.name} from the database"

    def apply(self, database) -> None:
        database.remove_entry(self.name)


@dataclass
class DeleteFile(Mutation):
    path: Path = None

    destructive: ClassVar[bool] = True

    def describe(self) -> str:
        return f"delete {self.path.name}"

    def apply(self, database) -> None:
        self.path.unlink()


@dataclass
class BackupFile(Mutation):
    path: Path = None
    backup_dir: Path = None

    destructive: ClassVar[bool] = True

    @property
    def target(self) -> Path:
        return self.backup_dir / (self.path.name + BACKUP_SUFFIX)

    def describe(self) -> str:
        return f"back up {self.path.name} to {self.backup_dir}"

    def apply(self, database) -> None:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        if self.target.exists() or self.target.is_symlink():
            raise FileExistsError(f"backup {self.target} already exists")
        shutil.move(self.path, self.target)


@dataclass
class Plan:
    """Ordered mutations plus problems found while planning."""

    mutations: list[Mutation] = field(default_factory=list)
    errors: list[MutationFailed] = field(default_factory=list)

    def __iter__(self):
        return iter(self.mutations)

    def __len__(self) -> int:
        return len(self.mutations)

    def extend(self, mutations: Iterable[Mutation]) -> None:
        self.mutations.extend(mutations)

    def fail(self, name: str, cause) -> None:
        self.errors.append(MutationFailed(name, cause))

    def names(self) -> list[str]:
        seen = dict.fromkeys(m.name for m in self.mutations)
        return list(seen)

    @property
    def empty(self) -> bool:
        return not self.mutations and not self.errors


def discard(name: str, files: Iterable[PackageIdentity], backup_dir: Path | None) -> list[Mutation]:
    """Delete, or back up when backup_dir is given, each of files."""
    mutations = []
    for pkg in files:
        if backup_dir is not None:
            mutations.append(BackupFile(name, path=pkg.path, backup_dir=backup_dir))
        else:
            mutations.append(DeleteFile(name, path=pkg.path))
    return mutations


def plan_add(
    paths: Iterable[Path],
    groups: Mapping[str, PackageGroup],
    repo_dir: Path,
    move: bool = False,
    backup_dir: Path | None = None,
) -> Plan:
    """Put exactly the given package files into the repository.

    Every other file of the same package is discarded, which also allows
    downgrading a package.
    """
    plan = Plan()
    chosen: dict[str, PackageIdentity | None] = {}
    for path in paths:
        try:
            pkg = parse_path(path)
        except MalformedFilename as e:
            plan.fail(path.name, e)
            continue
        if not path.is_file():
            plan.fail(pkg.name, f"{path}: no such file")
            continue
        if pkg.name in chosen:
            # Ambiguous; add none of them
            plan.fail(pkg.name, f"more than one file given, including {pkg.filename}")
            chosen[pkg.name] = None
            continue
        chosen[pkg.name] = pkg

    for name, pkg in chosen.items():
        if pkg is None:
            continue
        dest = repo_dir / pkg.filename
        if pkg.path.resolve() != dest.resolve():
            plan.mutations.append(CopyFile(name, source=pkg.path, dest=dest, move=move))
        plan.mutations.append(IndexAdd(name, path=dest))

        group = groups.get(name)
        if group is not None:
            obsolete = [f for f in group.files if f.filename != pkg.filename]
            plan.extend(discard(name, obsolete, backup_dir))

    return plan


def plan_remove(
    names: Iterable[str],
    groups: Mapping[str, PackageGroup],
    index: Mapping[str, IndexEntry],
    backup_dir: Path | None = None,
) -> Plan:
    """Remove packages from the database and discard all their files."""
    plan = Plan()
    for name in dict.fromkeys(names):
        group = groups.get(name)
        if name not in index and group is None:
            plan.fail(name, "no such package in the repository")
            continue
        if name in index:
            plan.mutations.append(IndexRemove(name))
        if group is not None:
            plan.extend(discard(name, group.files, backup_dir))
    return plan


def plan_update(states: Mapping[str, PackageState], backup_dir: Path | None = None) -> Plan:
    """Resolve every pending addition, pending removal and duplicate."""
    plan = Plan()
    for name in sorted(states):
        state = states[name]
        if state.has(Tag.PENDING_ADD):
            plan.mutations.append(IndexAdd(name, path=state.group.latest.path))
        if state.has(Tag.PENDING_REMOVE):
            plan.mutations.append(IndexRemove(name))
        if state.has(Tag.DUPLICATE):
            plan.extend(discard(name, state.group.obsolete, backup_dir))
    return plan
