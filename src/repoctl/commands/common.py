"""Helpers shared by the repoctl commands."""

from rich.console import Console
from rich.prompt import Confirm

from repoctl.core.aur import AURClient
from repoctl.core.classifier import classify
from repoctl.core.config import RepoConfig
from repoctl.core.database import RepoDatabase
from repoctl.core.errors import IndexUnreadable
from repoctl.core.executor import ExecutionReport, Executor
from repoctl.core.pacman import Pacman
from repoctl.core.planner import Mutation, Plan
from repoctl.core.query import run_queries
from repoctl.core.scanner import ScanResult, scan_directory
from repoctl.models.package import IndexEntry
from repoctl.models.state import Lookup, PackageState

console = Console()
err_console = Console(stderr=True)


def warn(config: RepoConfig, message: str) -> None:
    if not config.quiet:
        err_console.print(f"[yellow]Warning:[/yellow] {message}")


def fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


def open_database(config: RepoConfig) -> RepoDatabase:
    return RepoDatabase(config.database, config.add_params, config.rm_params)


def read_index(
    config: RepoConfig, database: RepoDatabase, missing_ok: bool = True
) -> dict[str, IndexEntry]:
    """Read the database; a missing one counts as empty, a broken one is fatal."""
    try:
        return database.list_entries()
    except IndexUnreadable as e:
        if e.missing and missing_ok:
            warn(config, f"database {database.path} does not exist yet")
            return {}
        fail(str(e))


def scan(config: RepoConfig) -> ScanResult:
    """Scan the repository directory, warning about unusable files."""
    result = scan_directory(config.directory)
    for problem in result.malformed:
        warn(config, f"ignoring {problem}")
    return result


def collect_states(
    config: RepoConfig,
    registry: bool = False,
    installed: bool = False,
    database: RepoDatabase | None = None,
) -> dict[str, PackageState]:
    """Scan, read the database, run the requested queries and classify."""
    database = database or open_database(config)
    result = scan(config)
    index = read_index(config, database)
    names = set(result.groups) | set(index)

    pacman = Pacman(timeout=config.query_timeout) if installed else None
    aur = AURClient(config.aur_url, timeout=config.query_timeout) if registry else None
    try:
        queries = run_queries(
            names,
            registry=aur.latest_version if aur else None,
            installed=pacman.installed_version if pacman else None,
            timeout=config.query_timeout,
            workers=config.query_workers,
        )
    finally:
        if aur is not None:
            aur.close()

    for source, name, lookup in queries.problems:
        warn(config, f"could not query {source} version of {name}: {lookup.error}")

    installed_versions = queries.installed
    if pacman is not None:
        installed_versions = dict(installed_versions or {})
        for name, version in pacman.foreign_packages().items():
            installed_versions.setdefault(name, Lookup.found(version))

    return classify(result.groups, index, installed_versions, queries.registry)


def confirm(description: str) -> bool:
    return Confirm.ask(f"{description[0].upper()}{description[1:]}?", default=False)


def execute(config: RepoConfig, database: RepoDatabase, plan: Plan) -> ExecutionReport:
    """Execute a plan, printing progress and a summary."""

    def progress(mutation: Mutation) -> None:
        if not config.quiet:
            console.print(f"  [green]✓[/green] {mutation.describe()}")

    executor = Executor(
        database,
        interactive=config.interactive,
        confirm=confirm,
        on_applied=progress,
    )
    report = executor.execute(plan)
    print_summary(config, report)
    return report


def print_summary(config: RepoConfig, report: ExecutionReport) -> None:
    if report.skipped_names and not config.quiet:
        console.print(f"[yellow]Skipped:[/yellow] {', '.join(report.skipped_names)}")
    if report.succeeded and not config.quiet:
        console.print(
            f"\n[green]✓[/green] Updated {len(report.succeeded)} package(s): "
            f"{', '.join(report.succeeded)}"
        )
    if report.failures:
        err_console.print(f"\n[red]Failed {len(report.failed)} package(s):[/red]")
        for name, causes in report.failed.items():
            for cause in causes:
                err_console.print(f"  [red]✗[/red] {name}: {cause}")


def finish(report: ExecutionReport) -> None:
    if not report.ok:
        raise SystemExit(1)
