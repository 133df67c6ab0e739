"""Command: library initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cglctl.commands._base import CglCommand

if TYPE_CHECKING:
    from cglctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  cglctl init
  cglctl init /path/to/library --name gospel-library
  cglctl --json init ./library"""


@click.command("init", cls=CglCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Library name (defaults to the directory name).")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None) -> None:
    """Initialize a cglctl library: config file and database."""
    from cglctl.services.init import InitService

    app.emit(
        InitService.init_library(
            Path(path),
            name=name,
            filename=app.settings.database.filename,
        )
    )
