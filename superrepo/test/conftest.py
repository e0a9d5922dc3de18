"""Shared fixtures.

``fake_git`` replaces ``subprocess.run`` with an in-memory model of a few
git repositories, keyed by working directory. Unlike a ``side_effect`` list
it gives the same answers no matter in which order parallel tasks call it.
"""

from __future__ import annotations

import subprocess
import threading
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from unittest.mock import patch

import pytest

SHA_1 = "1111111111111111111111111111111111111111"
SHA_2 = "2222222222222222222222222222222222222222"
SHA_3 = "3333333333333333333333333333333333333333"


@dataclass
class FakeRepo:
    """State of one fake repository.

    Attributes:
        head: Commit HEAD points to
        branch: Checked-out branch ("" for detached HEAD)
        remote_tip: Commit ``<remote>/<branch>`` points to after a fetch
        fetch_fails: Make ``git fetch`` exit 128
        merge_fails: Make ``git merge --ff-only`` exit 128 (diverged)
        gitmodules: ``(key, value)`` pairs returned for ``.gitmodules``
    """

    head: str = SHA_1
    branch: str = "main"
    remote_tip: str | None = None
    fetch_fails: bool = False
    merge_fails: bool = False
    gitmodules: list[tuple[str, str]] = field(default_factory=list)


def completed(
    cmd: Sequence[str], stdout: str = "", stderr: str = "", returncode: int = 0
) -> subprocess.CompletedProcess[bytes]:
    return subprocess.CompletedProcess(
        args=list(cmd),
        returncode=returncode,
        stdout=stdout.encode(),
        stderr=stderr.encode(),
    )


class FakeGit:
    """Callable stand-in for ``subprocess.run`` that understands git."""

    def __init__(self) -> None:
        self.repos: dict[Path, FakeRepo] = {}
        self.calls: list[tuple[Path | None, tuple[str, ...]]] = []
        self._lock = threading.Lock()

    def add(self, path: Path, **state: object) -> FakeRepo:
        repo = FakeRepo(**state)  # type: ignore[arg-type]
        self.repos[path] = repo
        return repo

    def calls_for(self, path: Path, subcommand: str) -> list[tuple[str, ...]]:
        """Recorded git argv lists for one repository and subcommand."""
        return [argv for cwd, argv in self.calls if cwd == path and argv[1] == subcommand]

    def __call__(
        self, cmd: Sequence[str], cwd: str | None = None, **_kwargs: object
    ) -> subprocess.CompletedProcess[bytes]:
        path = Path(cwd) if cwd is not None else None
        argv = tuple(cmd)
        with self._lock:
            self.calls.append((path, argv))
            if path is None or path not in self.repos:
                raise FileNotFoundError(2, "No such file or directory", cwd)
            return self._answer(self.repos[path], path, argv)

    def _answer(
        self, repo: FakeRepo, path: Path, argv: tuple[str, ...]
    ) -> subprocess.CompletedProcess[bytes]:
        args = argv[1:]
        match args:
            case ("log", "-1", "--format=format:%H", "HEAD"):
                return completed(argv, repo.head)
            case ("rev-parse", "--short", commit):
                return completed(argv, commit[:7] + "\n")
            case ("rev-parse", "--show-toplevel"):
                return completed(argv, f"{path}\n")
            case ("branch", "--show-current"):
                return completed(argv, f"{repo.branch}\n")
            case ("fetch", _remote, branch):
                if repo.fetch_fails:
                    return completed(
                        argv, stderr=f"fatal: couldn't find remote ref {branch}", returncode=128
                    )
                return completed(argv)
            case ("merge", "--ff-only", _ref):
                if repo.merge_fails:
                    return completed(
                        argv,
                        stderr="fatal: Not possible to fast-forward, aborting.",
                        returncode=128,
                    )
                if repo.remote_tip is not None:
                    repo.head = repo.remote_tip
                return completed(argv, "Fast-forward\n")
            case ("config", "--file", ".gitmodules", "-z", "--list"):
                body = "".join(f"{key}\n{value}\0" for key, value in repo.gitmodules)
                return completed(argv, body)
            case _:
                return completed(argv, stderr=f"unexpected: {' '.join(argv)}", returncode=1)


@pytest.fixture
def fake_git() -> Iterator[FakeGit]:
    fake = FakeGit()
    with patch("subprocess.run", side_effect=fake):
        yield fake
