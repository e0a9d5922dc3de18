"""Foreach command - run a command in every member repository."""

from __future__ import annotations

import typer

from superrepo.cli.commands._helpers import exit_with_code, member_repos
from superrepo.cli.context import build_context
from superrepo.core.errors import ErrorCode
from superrepo.git.multi import run_foreach

# Option parsing stops at the program name: everything from there on,
# including --help, belongs to the command.
FOREACH_CONTEXT_SETTINGS = {
    "allow_extra_args": True,
    "allow_interspersed_args": False,
    "ignore_unknown_options": True,
}


def foreach(
    command: list[str] = typer.Argument(
        ...,
        metavar="COMMAND [ARGS]...",
        help="Command to run in each repo (not interpreted by a shell)",
    ),
) -> None:
    """Run a command in each repo in parallel."""
    ctx = build_context()
    repos = member_repos(ctx)
    results = run_foreach(repos, command, console=ctx.console, layout=ctx.layout)

    failed = [r.repo.name for r in results if not r.ok]
    if failed:
        ctx.console.error(f"command failed in {len(failed)} of {len(results)} repos")
        exit_with_code(int(ErrorCode.COMMAND_FAILED))
