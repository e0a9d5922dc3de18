"""Run an arbitrary command inside one member repository."""

from __future__ import annotations

from dataclasses import dataclass

from superrepo.git.resolver import RepoRef
from superrepo.output.console import ConsoleProtocol
from superrepo.output.report import ColumnLayout, print_status_line
from superrepo.platform.process import CommandSpec, ProcessResult
from superrepo.platform.process import run as run_process

__all__ = ["CommandResult", "run_command"]

LABEL_OK = "ok"
LABEL_FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of running a command in one repository."""

    repo: RepoRef
    result: ProcessResult

    @property
    def ok(self) -> bool:
        return self.result.success

    @property
    def label(self) -> str:
        return LABEL_OK if self.ok else LABEL_FAILED

    @property
    def remark(self) -> str:
        if not self.result.launched:
            return f"Failed to run {self.result.command[0]}: {self.result.stderr_text().strip()}"
        return f"exit {self.result.returncode}"

    @property
    def output(self) -> str:
        """Captured text shown under the status line."""
        if self.ok:
            return self.result.stdout_text()
        if self.result.launched:
            return self.result.stderr_text()
        return ""


def run_command(
    ref: RepoRef,
    spec: CommandSpec,
    *,
    console: ConsoleProtocol,
    layout: ColumnLayout | None = None,
) -> CommandResult:
    """Run ``spec`` with the repository as working directory.

    Prints a status line followed by the command's stdout if it succeeded or
    its stderr if it failed.
    """
    outcome = CommandResult(repo=ref, result=run_process(spec, cwd=ref.path))
    print_status_line(console, ref.name, outcome.label, outcome.remark, layout, outcome.output)
    return outcome
