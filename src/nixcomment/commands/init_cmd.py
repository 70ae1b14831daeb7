"""Command: write a starter config (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nixcomment.commands._base import NcCommand

if TYPE_CHECKING:
    from nixcomment.commands._context import AppContext

_INIT_EXAMPLES = """\
  nixcomment init
  nixcomment init path/to/repo
  nixcomment init --force"""


@click.command("init", cls=NcCommand, examples=_INIT_EXAMPLES)
@click.argument("directory", required=False, default=".", type=click.Path())
@click.option("--force", is_flag=True, help="Overwrite an existing nixcomment.toml.")
@click.pass_obj
def init_cmd(app: AppContext, directory: str, force: bool) -> None:
    """Write a nixcomment.toml with every default spelled out."""
    from nixcomment.services.init import InitService

    app.emit(InitService(app.settings).init_config(directory, force=force))
