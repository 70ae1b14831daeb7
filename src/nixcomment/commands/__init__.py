"""Subcommand modules for nixcomment.

Provides register_commands() which uses deferred imports to keep
``nixcomment --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from nixcomment.commands.check import check
    from nixcomment.commands.guide import guide
    from nixcomment.commands.init_cmd import init_cmd
    from nixcomment.commands.rules import rules

    cli.add_command(check)
    cli.add_command(rules)
    cli.add_command(guide)
    cli.add_command(init_cmd)
