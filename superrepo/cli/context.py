from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from superrepo.core.config import Config, resolve_config
from superrepo.core.errors import ErrorCode
from superrepo.core.result import Err
from superrepo.output.console import ConsoleProtocol, RichConsole
from superrepo.output.report import ColumnLayout

CONFIG_ENV = "SUPER_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    config: Config
    console: ConsoleProtocol

    @property
    def layout(self) -> ColumnLayout:
        return ColumnLayout.from_config(self.config.output)


def build_context() -> CLIContext:
    cwd = Path.cwd()
    explicit = os.environ.get(CONFIG_ENV)

    config_result = resolve_config(cwd, Path(explicit) if explicit else None)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(cwd=cwd, config=config_result.value, console=RichConsole())
