"""Git repository abstraction.

``Repository`` wraps the git commands used by super on a single working
tree. Every git call goes through ``superrepo.platform.process.run`` with the
repository path as working directory, and every method that can fail returns
a Result.

Usage:
    repo = Repository(Path("libs/parser"))

    match repo.head_sha():
        case Ok(sha):
            print(f"HEAD is {sha}")
        case Err(e):
            print(f"Failed to resolve HEAD: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from superrepo.core.result import Err, Ok, Result
from superrepo.platform.process import ProcessResult
from superrepo.platform.process import run as run_process

__all__ = [
    "GIT",
    "GitError",
    "Repository",
]

GIT = "git"


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        kind: ``launch_failed`` if git could not be started,
            ``exit_failed`` if it ran and exited non-zero
        command: The git subcommand that failed (e.g. "fetch origin main")
        message: Error text, usually git's stderr
        returncode: Process return code (-1 if never started)
    """

    kind: Literal["launch_failed", "exit_failed"]
    command: str
    message: str
    returncode: int = 1

    @classmethod
    def from_process(cls, command: str, result: ProcessResult) -> GitError:
        message = result.stderr_text().strip() or result.stdout_text().strip()
        return cls(
            kind="exit_failed" if result.launched else "launch_failed",
            command=command,
            message=message or f"git {command} failed",
            returncode=result.returncode,
        )


class Repository:
    """A git working tree.

    Attributes:
        path: Path to the working tree root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def __repr__(self) -> str:
        return f"Repository({str(self.path)!r})"

    def exists(self) -> bool:
        """True if the path carries a ``.git`` marker (directory or gitfile)."""
        return (self.path / ".git").exists()

    def toplevel(self) -> Result[Path, GitError]:
        """Root of the work tree containing this path.

        Runs ``git rev-parse --show-toplevel``.
        """
        return self._text(["rev-parse", "--show-toplevel"]).map(lambda out: Path(out.strip()))

    def resolve_ref(self, committish: str) -> Result[str, GitError]:
        """Full hash of the commit a reference points to.

        Uses the history log (``git log -1 --format=format:%H``) so that tags
        resolve to the commit they point at.
        """
        return self._text(["log", "-1", "--format=format:%H", committish]).map(str.strip)

    def head_sha(self) -> Result[str, GitError]:
        """Full hash of the commit HEAD points to."""
        return self.resolve_ref("HEAD")

    def short_hash(self, commit: str) -> Result[str, GitError]:
        """Git's own unambiguous abbreviation of ``commit`` in this repository."""
        return self._text(["rev-parse", "--short", commit]).map(str.strip)

    def current_branch(self) -> Result[str, GitError]:
        """Name of the checked-out branch.

        Returns Ok("") for a detached HEAD.
        """
        return self._text(["branch", "--show-current"]).map(str.strip)

    def fetch(self, remote: str, branch: str) -> Result[str, GitError]:
        """Fetch ``branch`` from ``remote``; updates ``<remote>/<branch>``."""
        return self._text(["fetch", remote, branch]).map(str.strip)

    def merge_ff(self, remote: str, branch: str) -> Result[str, GitError]:
        """Fast-forward the checked-out branch to ``<remote>/<branch>``.

        Fails rather than creating a merge commit if the histories diverged.
        """
        return self._text(["merge", "--ff-only", f"{remote}/{branch}"]).map(str.strip)

    def config_entries(self, config_file: str) -> Result[list[tuple[str, str]], GitError]:
        """All ``(key, value)`` pairs of a git config file in this repository.

        Reads ``git config --file <config_file> -z --list``; NUL-separated
        output keeps values with newlines intact.
        """
        result = self._text(["config", "--file", config_file, "-z", "--list"])
        if isinstance(result, Err):
            return result

        entries: list[tuple[str, str]] = []
        for record in result.value.split("\0"):
            if not record:
                continue
            key, _, value = record.partition("\n")
            entries.append((key, value))
        return Ok(entries)

    def init(self) -> Result[str, GitError]:
        """Create a new repository at this path (``git init``)."""
        return self._text(["init"]).map(str.strip)

    def submodule_add(self, source: str) -> Result[str, GitError]:
        """Register ``source`` as a submodule (``git submodule add <source>``)."""
        return self._text(["submodule", "add", source]).map(str.strip)

    def _run(self, args: list[str]) -> ProcessResult:
        return run_process([GIT, *args], cwd=self.path)

    def _text(self, args: list[str]) -> Result[str, GitError]:
        """Run a git command and return its stdout as text."""
        result = self._run(args)
        if not result.success:
            return Err(GitError.from_process(" ".join(args), result))
        return Ok(result.stdout_text())
