"""Init and add commands - thin wrappers around git."""

from __future__ import annotations

from pathlib import Path

import typer

from superrepo.cli.commands._helpers import exit_with_code
from superrepo.core.errors import ErrorCode
from superrepo.core.result import Err
from superrepo.git.repository import Repository
from superrepo.output.console import RichConsole, Style


def init() -> None:
    """Initialize a new super repo in the current directory (git init)."""
    console = RichConsole()
    result = Repository(Path.cwd()).init()
    if isinstance(result, Err):
        console.print(
            f"Failed to initialize the super repo. Error: {result.error.message}", Style.ERROR
        )
        exit_with_code(int(ErrorCode.COMMAND_FAILED))

    console.success("The super repo was initialized successfully.")
    console.print("You can now add your repos with 'super add <pathspec>'", Style.DIM)


def add(
    repo_path: str = typer.Argument(..., help="Repository URL or path to add as a submodule"),
) -> None:
    """Add a repo to the super repo (git submodule add)."""
    console = RichConsole()
    result = Repository(Path.cwd()).submodule_add(repo_path)
    if isinstance(result, Err):
        console.print(f"Failed to add the submodule. Error: {result.error.message}", Style.ERROR)
        exit_with_code(int(ErrorCode.COMMAND_FAILED))

    console.success(f"The submodule {repo_path} was added successfully.")
    console.print(
        "You probably will want to commit this "
        "(along with .gitmodules, if this is the first submodule).",
        Style.DIM,
    )
