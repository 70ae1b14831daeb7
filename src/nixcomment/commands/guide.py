"""Command: structural check of a Markdown commenting guide."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nixcomment.commands._base import NcCommand

if TYPE_CHECKING:
    from nixcomment.commands._context import AppContext


@click.command(
    cls=NcCommand,
    examples="""\
  nixcomment guide docs/commenting.md
  nixcomment guide docs/commenting.md --expected-examples 5
  nixcomment guide README.md --lint-snippets""",
)
@click.argument("path", type=click.Path())
@click.option(
    "--expected-examples",
    type=click.IntRange(min=0),
    default=None,
    help="Number of worked examples the guide must contain.",
)
@click.option(
    "--lint-snippets/--no-lint-snippets",
    default=None,
    help="Also run the lint rules over nix snippets.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["full", "concise"]),
    default="full",
    help="Human output style.",
)
@click.pass_obj
def guide(
    app: AppContext,
    path: str,
    expected_examples: int | None,
    lint_snippets: bool | None,
    output_format: str,
) -> None:
    """Check that a style guide's worked examples are complete and explained."""
    from nixcomment.services.guide import GuideService

    svc = GuideService(app.settings, app.plugins)
    result = svc.check_guide(
        path,
        expected_examples=expected_examples,
        lint_snippets=lint_snippets,
    )
    app.emit(result, concise=output_format == "concise")
