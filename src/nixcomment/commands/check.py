"""Command: lint Nix files for comment style."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nixcomment.commands._base import NcCommand

if TYPE_CHECKING:
    from nixcomment.commands._context import AppContext

_SEVERITIES = click.Choice(["warning", "error"])


def _split_refs(values: tuple[str, ...]) -> list[str]:
    """Flatten repeated, comma-separated rule references."""
    return [ref.strip() for value in values for ref in value.split(",") if ref.strip()]


@click.command(
    cls=NcCommand,
    examples="""\
  nixcomment check
  nixcomment check modules/ flake.nix
  nixcomment check --select NC001,NC004 --ignore NC006
  nixcomment check --errors-only
  nixcomment check --fail-on warning --format concise
  cat default.nix | nixcomment check - --stdin-filename default.nix""",
)
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("--select", multiple=True, help="Only run these rules (codes, names, or prefixes).")
@click.option("--ignore", multiple=True, help="Skip these rules.")
@click.option(
    "--line-length",
    type=click.IntRange(min=20),
    default=None,
    help="Maximum line length.",
)
@click.option(
    "--min-severity",
    type=_SEVERITIES,
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.option(
    "--fail-on",
    type=_SEVERITIES,
    default=None,
    help="Exit 1 when an issue at or above this severity is found.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["full", "concise"]),
    default="full",
    help="Human output style.",
)
@click.option("--stdin-filename", default="<stdin>", help="Path to report for '-' input.")
@click.pass_obj
def check(
    app: AppContext,
    paths: tuple[str, ...],
    select: tuple[str, ...],
    ignore: tuple[str, ...],
    line_length: int | None,
    min_severity: str,
    errors_only: bool,
    fail_on: str | None,
    output_format: str,
    stdin_filename: str,
) -> None:
    """Check Nix files for block and inline comment conventions."""
    from nixcomment.services.lint import STDIN_PATH, LintService

    targets = paths or (".",)
    stdin_text = None
    if STDIN_PATH in targets:
        stdin_text = click.get_text_stream("stdin").read()

    svc = LintService(app.settings, app.plugins)
    result = svc.check(
        targets,
        select=_split_refs(select),
        ignore=_split_refs(ignore),
        line_length=line_length,
        min_severity="error" if errors_only else min_severity,
        fail_on=fail_on,
        stdin_text=stdin_text,
        stdin_filename=stdin_filename,
    )
    app.emit(result, concise=output_format == "concise")
