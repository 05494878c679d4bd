"""Execution of repository change plans."""

import logging
from dataclasses import dataclass, field
from typing import Callable

from repoctl.core.errors import MutationFailed, RepoctlError
from repoctl.core.planner import Mutation, Plan

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """Outcome of executing a plan, per package name."""

    applied: list[Mutation] = field(default_factory=list)
    skipped: list[Mutation] = field(default_factory=list)
    failures: list[MutationFailed] = field(default_factory=list)

    @property
    def failed(self) -> dict[str, list[str]]:
        failed: dict[str, list[str]] = {}
        for failure in self.failures:
            failed.setdefault(failure.name, []).append(str(failure.cause))
        return failed

    @property
    def succeeded(self) -> list[str]:
        """Names with at least one applied mutation and no failure."""
        failed = self.failed
        names = dict.fromkeys(m.name for m in self.applied)
        return [name for name in names if name not in failed]

    @property
    def skipped_names(self) -> list[str]:
        touched = set(self.failed) | {m.name for m in self.applied}
        names = dict.fromkeys(m.name for m in self.skipped)
        return [name for name in names if name not in touched]

    @property
    def ok(self) -> bool:
        return not self.failures


class Executor:
    """Applies plans to a repository, one mutation at a time.

    With interactive set, every destructive mutation needs confirm() to
    return True. A declined or failed mutation never aborts the plan; only
    the remaining mutations of the same package are affected.
    """

    def __init__(
        self,
        database,
        interactive: bool = False,
        confirm: Callable[[str], bool] | None = None,
        on_applied: Callable[[Mutation], None] | None = None,
    ):
        if interactive and confirm is None:
            raise ValueError("interactive execution needs a confirm callback")
        self.database = database
        self.interactive = interactive
        self.confirm = confirm
        self.on_applied = on_applied

    def execute(self, plan: Plan) -> ExecutionReport:
        report = ExecutionReport(failures=list(plan.errors))
        blocked: set[str] = set()

        for mutation in plan:
            if mutation.name in blocked:
                report.skipped.append(mutation)
                continue

            if self.interactive and mutation.destructive:
                if not self.confirm(mutation.describe()):
                    logger.debug("declined: %s", mutation.describe())
                    report.skipped.append(mutation)
                    if mutation.guards_rest:
                        blocked.add(mutation.name)
                    continue

            try:
                mutation.apply(self.database)
            except (RepoctlError, OSError) as e:
                logger.debug("failed: %s: %s", mutation.describe(), e)
                report.failures.append(MutationFailed(mutation.name, e))
                # Later steps for this package rely on this one
                blocked.add(mutation.name)
                continue

            logger.debug("applied: %s", mutation.describe())
            report.applied.append(mutation)
            if self.on_applied is not None:
                self.on_applied(mutation)

        return report
