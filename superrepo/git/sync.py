"""Pull one repository: fetch, check the branch, fast-forward, classify.

The steps always run in this order and always end in exactly one
``SyncOutcome``:

1. stop if the path holds no git checkout (an uninitialized submodule);
   git would otherwise find the enclosing super repository,
2. record the commit HEAD points to,
3. fetch the tracked branch from the remote (best effort),
4. read the checked-out branch,
5. if it is not the tracked branch, stop: the repository is left alone,
6. otherwise fast-forward to ``<remote>/<branch>`` (never a merge commit),
7. record HEAD again,
8. classify by comparing the two hashes.

A failing git call is reported as a "Failed to ..." line and recorded in the
outcome's diagnostics; it never stops the remaining steps and never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from superrepo.core.config import DEFAULT_REMOTE
from superrepo.core.result import Err, Ok, Result
from superrepo.git.repository import GitError, Repository
from superrepo.git.resolver import RepoRef
from superrepo.output.console import ConsoleProtocol, Style
from superrepo.output.report import ColumnLayout, print_status_line

__all__ = [
    "NOT_CHECKED_OUT",
    "NOT_ON_TRACKED_BRANCH",
    "PullStatus",
    "SyncOutcome",
    "classify",
    "sync_repo",
]

logger = logging.getLogger(__name__)

NOT_ON_TRACKED_BRANCH = "not on tracked branch"
NOT_CHECKED_OUT = "not checked out"


class PullStatus(Enum):
    """What a pull did to one repository."""

    UNCHANGED = "unchanged"  # skipped: not on the tracked branch
    UPDATED = "updated"  # HEAD moved
    UP_TO_DATE = "up to date"  # HEAD already at the remote tip

    @property
    def label(self) -> str:
        """Text shown in the status column."""
        return self.value

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    """Result of pulling one repository.

    Attributes:
        repo: The repository that was pulled
        status: What happened
        before_hash: HEAD before the pull ("" if it couldn't be read)
        after_hash: HEAD after the pull ("" if it couldn't be read)
        remark: Human-readable detail for the status line
        diagnostics: "Failed to ..." messages from steps that failed
    """

    repo: RepoRef
    status: PullStatus
    before_hash: str
    after_hash: str
    remark: str
    diagnostics: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True if every git step succeeded."""
        return not self.diagnostics


def classify(
    branch: str,
    before: str,
    after: str,
    short_before: str,
    short_after: str,
) -> tuple[PullStatus, str]:
    """Status and remark for a repository that was on its tracked branch."""
    if before == after:
        return PullStatus.UP_TO_DATE, f"{branch}({short_before})"
    return PullStatus.UPDATED, f"{branch}({short_before}) -> {branch}({short_after})"


class _SyncRun:
    """State of one repository's pull while the steps execute."""

    def __init__(self, ref: RepoRef, remote: str, console: ConsoleProtocol) -> None:
        self.ref = ref
        self.remote = remote
        self.console = console
        self.repo = Repository(ref.path)
        self.diagnostics: list[str] = []

    def check[T](self, action: str, result: Result[T, GitError], fallback: T) -> T:
        """Value of ``result``, or ``fallback`` after reporting the failure."""
        match result:
            case Ok(value):
                return value
            case Err(e):
                logger.debug("%s: git %s exited %d", self.ref.name, e.command, e.returncode)
                self.fail(action, e.message)
                return fallback

    def fail(self, action: str, error: str) -> None:
        message = f"Failed to {action}. Error: {error}"
        logger.debug("%s: %s", self.ref.name, message)
        self.diagnostics.append(message)
        self.console.print(message, Style.ERROR)

    def head(self) -> str:
        return self.check(f"resolve HEAD of {self.ref.name}", self.repo.head_sha(), "")

    def short(self, commit: str) -> str:
        if not commit:
            return ""
        return self.check(
            f"get a short hash for {commit} in {self.ref.name}",
            self.repo.short_hash(commit),
            "",
        )

    def run(self) -> SyncOutcome:
        ref = self.ref
        fetch_action = f"fetch {ref.name} ({self.remote} {ref.branch})"
        if not self.repo.exists():
            self.fail(fetch_action, f"no git checkout at {ref.path}")
            return self.outcome(PullStatus.UNCHANGED, "", "", NOT_CHECKED_OUT)

        before = self.head()
        self.check(fetch_action, self.repo.fetch(self.remote, ref.branch), "")

        current = self.check(
            f"read the current branch of {ref.name}", self.repo.current_branch(), ""
        )
        if current.casefold() != ref.branch.casefold():
            logger.debug("%s is on %r, tracking %r; skipping", ref.name, current, ref.branch)
            return self.outcome(PullStatus.UNCHANGED, before, before, NOT_ON_TRACKED_BRANCH)

        self.check(
            f"fast-forward {ref.name} to {self.remote}/{ref.branch}",
            self.repo.merge_ff(self.remote, ref.branch),
            "",
        )

        after = self.head()
        short_before = self.short(before)
        short_after = short_before if after == before else self.short(after)
        status, remark = classify(ref.branch, before, after, short_before, short_after)
        return self.outcome(status, before, after, remark)

    def outcome(self, status: PullStatus, before: str, after: str, remark: str) -> SyncOutcome:
        return SyncOutcome(
            repo=self.ref,
            status=status,
            before_hash=before,
            after_hash=after,
            remark=remark,
            diagnostics=tuple(self.diagnostics),
        )


def sync_repo(
    ref: RepoRef,
    *,
    remote: str = DEFAULT_REMOTE,
    console: ConsoleProtocol,
    layout: ColumnLayout | None = None,
) -> SyncOutcome:
    """Pull one repository and print its status line.

    Args:
        ref: Repository and the branch it tracks
        remote: Remote to fetch from and fast-forward against
        console: Where diagnostics and the status line go
        layout: Column widths of the status line

    Returns:
        Exactly one SyncOutcome; git failures are recorded, never raised.
    """
    outcome = _SyncRun(ref, remote, console).run()
    print_status_line(console, ref.name, outcome.status.label, outcome.remark, layout)
    return outcome
