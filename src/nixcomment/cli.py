"""Root CLI group for nixcomment with global flags and command registration."""

from __future__ import annotations

import click

from nixcomment import __version__
from nixcomment.commands import register_commands
from nixcomment.commands._base import NcGroup
from nixcomment.commands._context import AppContext
from nixcomment.config.settings import NixCommentSettings


@click.group(
    cls=NcGroup,
    invoke_without_command=True,
    examples="""\
  nixcomment check
  nixcomment --json check modules/
  nixcomment -c ci/nixcomment.toml check --fail-on warning
  nixcomment rules NC001""",
)
@click.version_option(version=__version__, prog_name="nixcomment")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    no_color: bool,
) -> None:
    """nixcomment — comment-style linter for Nix code."""
    ctx.ensure_object(dict)
    settings = NixCommentSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_color=no_color,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
