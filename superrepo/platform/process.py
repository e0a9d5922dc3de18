"""Subprocess execution that never raises.

This is the only module that creates subprocesses. Commands are executed
without a shell: every argument is passed to the program literally. Output
is captured as raw bytes, stdout and stderr separately.

Failures are data, not exceptions:
- the program ran and exited non-zero: ``success`` is False and
  ``returncode`` holds the exit status;
- the program could not be started (not on PATH, not executable, working
  directory missing): ``launched`` is False, ``returncode`` is -1 and
  ``stderr`` holds the OS error message.

Usage:
    result = run(["git", "branch", "--show-current"], cwd=repo_path)
    if result.success:
        branch = result.stdout_text().strip()
    else:
        print(f"Failed: {result.stderr_text()}")
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

__all__ = ["CommandSpec", "ProcessResult", "run"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """A program and its arguments.

    Attributes:
        argv: Program name followed by its arguments; never empty.
    """

    argv: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.argv:
            raise ValueError("command must have at least a program name")

    @classmethod
    def of(cls, argv: Sequence[str]) -> CommandSpec:
        return cls(tuple(argv))

    @property
    def program(self) -> str:
        return self.argv[0]

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of one subprocess invocation.

    Attributes:
        command: The command that was executed.
        returncode: Exit status, or -1 if the process never started.
        stdout: Captured standard output.
        stderr: Captured standard error (or the launch error message).
        launched: False if the process could not be started at all.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""
    launched: bool = True

    @property
    def success(self) -> bool:
        return self.launched and self.returncode == 0

    def stdout_text(self) -> str:
        """Decode stdout as UTF-8, replacing undecodable bytes."""
        return self.stdout.decode("utf-8", errors="replace")

    def stderr_text(self) -> str:
        """Decode stderr as UTF-8, replacing undecodable bytes."""
        return self.stderr.decode("utf-8", errors="replace")

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if not self.launched:
            return f"{cmd_str} could not be started"
        if self.success:
            return f"{cmd_str} succeeded"
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: CommandSpec | Sequence[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> ProcessResult:
    """Execute a command and capture its exit status and output.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory (current directory if None).
        env: Environment variables (inherits the current env if None).

    Returns:
        ProcessResult; never raises for launch or exit failures.
    """
    spec = cmd if isinstance(cmd, CommandSpec) else CommandSpec.of(cmd)
    logger.debug("running %s (cwd=%s)", spec, cwd)

    try:
        proc = subprocess.run(
            list(spec.argv),
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        logger.debug("could not start %s: %s", spec.program, e)
        return ProcessResult(
            command=spec.argv,
            returncode=-1,
            stderr=str(e).encode("utf-8"),
            launched=False,
        )

    result = ProcessResult(
        command=spec.argv,
        returncode=proc.returncode,
        stdout=proc.stdout or b"",
        stderr=proc.stderr or b"",
    )
    if not result.success:
        logger.debug("%s", result)
    return result
