"""Command: list or explain lint rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nixcomment.commands._base import NcCommand

if TYPE_CHECKING:
    from nixcomment.commands._context import AppContext


@click.command(
    cls=NcCommand,
    examples="""\
  nixcomment rules
  nixcomment rules NC004
  nixcomment rules missing-inline-comment
  nixcomment --json rules""",
)
@click.argument("rule", required=False)
@click.pass_obj
def rules(app: AppContext, rule: str | None) -> None:
    """List registered rules, or explain RULE (code or name)."""
    from nixcomment.services.lint import LintService

    svc = LintService(app.settings, app.plugins)
    app.emit(svc.explain(rule) if rule else svc.list_rules())
