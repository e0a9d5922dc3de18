"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from superrepo.core.errors import ErrorCode
from superrepo.core.result import Err, Ok, Result
from superrepo.git.resolver import RepoRef, resolve_repos

if TYPE_CHECKING:
    from superrepo.cli.context import CLIContext


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)


def exit_on_error[T, E](
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.COMMAND_FAILED,
) -> T:
    """Return the value of an Ok result; print the error and exit otherwise.

    Expects error objects to have a 'message' attribute.
    """
    match result:
        case Ok(value):
            return value
        case Err(error):
            ctx.console.error(getattr(error, "message", str(error)))
            exit_with_code(int(error_code))


def member_repos(ctx: CLIContext) -> tuple[RepoRef, ...]:
    """Resolve the repositories for the current directory.

    Warns when there are none; exits if the super repository's submodule
    metadata can't be read.
    """
    repo_set = exit_on_error(
        resolve_repos(
            ctx.cwd,
            default_branch=ctx.config.sync.default_branch,
            max_depth=ctx.config.scan.max_depth,
        ),
        ctx,
        ErrorCode.ENV_ERROR,
    )
    if not repo_set.repos:
        ctx.console.warning(f"no repositories found in {ctx.cwd}")
    return repo_set.repos
