"""Multi-repository operations.

Every verb that touches member repositories runs one task per repository,
all at the same time, and returns once all of them have finished:

    repos = resolve_repos(Path.cwd()).unwrap().repos
    for outcome in sync_all(repos, remote="origin", console=console):
        print(outcome.repo.name, outcome.status)

Tasks share nothing but the console. Each one only touches its own
repository's working directory, so no locking is needed between them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from superrepo.core.config import DEFAULT_REMOTE
from superrepo.git.foreach import CommandResult, run_command
from superrepo.git.resolver import RepoRef
from superrepo.git.sync import SyncOutcome, sync_repo
from superrepo.output.console import ConsoleProtocol
from superrepo.output.report import ColumnLayout
from superrepo.platform.process import CommandSpec

__all__ = [
    "run_foreach",
    "run_parallel",
    "sync_all",
]

logger = logging.getLogger(__name__)


def run_parallel[T, R](items: Sequence[T], task: Callable[[T], R]) -> list[R]:
    """Run ``task`` on every item concurrently, one thread per item.

    There is no cap on the number of threads. The call returns after every
    task has finished, with results in the order of ``items``.

    Raises:
        ExceptionGroup: If any task raised. All tasks are still run to
            completion first; nothing is cancelled.
    """
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=len(items), thread_name_prefix="repo") as executor:
        futures: list[Future[R]] = [executor.submit(task, item) for item in items]

    results: list[R] = []
    errors: list[Exception] = []
    for item, future in zip(items, futures):
        error = future.exception()
        if error is None:
            results.append(future.result())
            continue
        logger.error("task for %r crashed: %s", item, error)
        if isinstance(error, Exception):
            errors.append(error)
        else:
            raise error

    if errors:
        raise ExceptionGroup(f"{len(errors)} of {len(items)} repository tasks crashed", errors)
    return results


def sync_all(
    repos: Sequence[RepoRef],
    *,
    remote: str = DEFAULT_REMOTE,
    console: ConsoleProtocol,
    layout: ColumnLayout | None = None,
) -> list[SyncOutcome]:
    """Pull every repository in parallel.

    Returns:
        One SyncOutcome per repository, in input order.
    """
    logger.debug("pulling %d repositories from %s", len(repos), remote)
    return run_parallel(
        repos,
        lambda ref: sync_repo(ref, remote=remote, console=console, layout=layout),
    )


def run_foreach(
    repos: Sequence[RepoRef],
    argv: Sequence[str],
    *,
    console: ConsoleProtocol,
    layout: ColumnLayout | None = None,
) -> list[CommandResult]:
    """Run the same command in every repository in parallel.

    Raises:
        ValueError: If ``argv`` is empty.
    """
    spec = CommandSpec.of(argv)
    logger.debug("running %s in %d repositories", spec, len(repos))
    return run_parallel(
        repos,
        lambda ref: run_command(ref, spec, console=console, layout=layout),
    )
