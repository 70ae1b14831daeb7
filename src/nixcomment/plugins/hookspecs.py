"""Pluggy hook specifications for nixcomment.

One setup-time hook lets plugins contribute lint rules; one event hook
fires after every lint run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from nixcomment.domain.rules import Rule

PROJECT_NAME = "nixcomment"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class NixCommentHookSpec:
    """Hook specifications for the nixcomment plugin system."""

    @hookspec
    def register_rules(self) -> list[Rule] | None:
        """Return extra rules to add to the rule registry."""

    @hookspec
    def post_check(self, files_checked: int, issues_found: int) -> None:
        """Called after a lint run completes."""
