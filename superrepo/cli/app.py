from __future__ import annotations

import os
from pathlib import Path

import typer

from superrepo import __version__
from superrepo.cli.commands.foreach import FOREACH_CONTEXT_SETTINGS, foreach
from superrepo.cli.commands.pull import pull
from superrepo.cli.commands.setup import add, init
from superrepo.cli.context import CONFIG_ENV
from superrepo.core.errors import ErrorCode
from superrepo.output.console import configure_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Manage all of your git repos in one super repo.",
)


# Commands
app.command()(init)
app.command()(add)
app.command()(pull)
app.command(context_settings=FOREACH_CONTEXT_SETTINGS)(foreach)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: ./.super.toml, then the user config dir)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every git call."),
) -> None:
    configure_logging(verbose)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' is not a file", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[CONFIG_ENV] = str(path.resolve())


def main() -> None:
    app()
