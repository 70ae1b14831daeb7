"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy plugin loading and centralized result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nixcomment.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from nixcomment.config.settings import NixCommentSettings
    from nixcomment.plugins.manager import PluginManager
    from nixcomment.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. Plugins are loaded
    lazily on first use so ``--help`` and ``--version`` never import
    third-party plugin code.
    """

    def __init__(self, settings: NixCommentSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        # Configure structured logging
        from nixcomment.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        # Enable telemetry context var when verbose
        if settings.verbose:
            from nixcomment.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def plugins(self) -> PluginManager | None:
        """The loaded plugin manager, or None when plugins are disabled."""
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from nixcomment.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(local_dir=self.settings.plugin_dir)
        return self._plugins

    def emit(self, result: ServiceResult, *, concise: bool = False) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout. Warnings go to stderr
          so they don't pollute piped output. Exits 1 when the result
          is marked ``failed`` (issues at or above the fail threshold, or
          files that could not be read).
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            concise=concise,
            no_color=self.settings.no_color,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                plugin_warnings = self._plugins.warnings if self._plugins else []
                for warning in [*plugin_warnings, *result.warnings]:
                    click.echo(f"WARNING: {warning}", err=True)
            if result.data.get("failed"):
                raise SystemExit(1)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
