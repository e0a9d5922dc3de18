"""Pull command - fast-forward every member repository."""

from __future__ import annotations

import typer

from superrepo.cli.commands._helpers import member_repos
from superrepo.cli.context import build_context
from superrepo.git.multi import sync_all


def pull(
    remote: str | None = typer.Option(
        None,
        "--remote",
        "-r",
        help="Remote to fetch from (default: sync.remote from config, else origin)",
    ),
) -> None:
    """Update all repos in the super repo.

    Repos that are not on their tracked branch are left alone; the others are
    fast-forwarded, never merged.
    """
    ctx = build_context()
    repos = member_repos(ctx)
    sync_all(
        repos,
        remote=remote or ctx.config.sync.remote,
        console=ctx.console,
        layout=ctx.layout,
    )
