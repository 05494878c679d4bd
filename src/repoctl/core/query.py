"""Concurrent lookup of registry and installed versions."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Iterable

from repoctl.models.state import Lookup

logger = logging.getLogger(__name__)

# Called as fn(name) or, under a deadline, fn(name, timeout=seconds_left)
LookupFn = Callable[..., Lookup]


@dataclass
class QueryResults:
    """Joined results of the query phase."""

    installed: dict[str, Lookup] | None = None
    registry: dict[str, Lookup] | None = None
    problems: list[tuple[str, str, Lookup]] = field(default_factory=list)


def _bounded(fn: LookupFn, name: str, deadline: float | None) -> Lookup:
    if deadline is None:
        return fn(name)
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        return Lookup.cancelled()
    return fn(name, timeout=remaining)


def _collect(future) -> Lookup:
    if not future.done():
        future.cancel()
        return Lookup.cancelled()
    error = future.exception()
    if error is not None:
        return Lookup.failed(str(error))
    return future.result()


def run_queries(
    names: Iterable[str],
    registry: LookupFn | None = None,
    installed: LookupFn | None = None,
    timeout: float | None = None,
    workers: int = 8,
) -> QueryResults:
    """Run registry and installed lookups for every name in parallel.

    All lookups share one deadline. Lookups that have not finished when it
    expires are recorded as cancelled; lookups that raise are recorded as
    failed. Each lookup is passed the time left until the deadline as its
    own timeout, so lookups still running at the deadline end shortly after
    it. Nothing is returned until every lookup has a result.
    """
    names = sorted(set(names))
    results = QueryResults()
    if not names or (registry is None and installed is None):
        return results

    sources = {}
    if registry is not None:
        sources["registry"] = registry
    if installed is not None:
        sources["installed"] = installed

    deadline = time.monotonic() + timeout if timeout is not None else None
    pool = ThreadPoolExecutor(max_workers=max(1, workers))
    try:
        futures = {
            (source, name): pool.submit(_bounded, fn, name, deadline)
            for source, fn in sources.items()
            for name in names
        }
        _, not_done = wait(futures.values(), timeout=timeout)
        if not_done:
            logger.debug("%d lookups did not finish within %ss", len(not_done), timeout)

        collected: dict[str, dict[str, Lookup]] = {source: {} for source in sources}
        for (source, name), future in futures.items():
            lookup = _collect(future)
            collected[source][name] = lookup
            if not lookup.is_found and lookup.error is not None:
                results.problems.append((source, name, lookup))
    finally:
        # Do not block on lookups that outlived the deadline
        pool.shutdown(wait=False, cancel_futures=True)

    results.registry = collected.get("registry")
    results.installed = collected.get("installed")
    return results
