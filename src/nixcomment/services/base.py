"""BaseService — shared foundation for nixcomment services.

Every service receives the frozen settings and, optionally, a loaded
plugin manager. Services never print; they return ServiceResult.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nixcomment.domain.rules import get_rule
from nixcomment.domain.types import Severity
from nixcomment.services.result import ServiceResult

if TYPE_CHECKING:
    from nixcomment.config.settings import NixCommentSettings
    from nixcomment.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class LintService(BaseService):
            def check(self, paths) -> ServiceResult:
                ...
    """

    def __init__(
        self,
        settings: NixCommentSettings,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._plugins = plugins

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a plugin hook. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            getattr(self._plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    def _severity_overrides(self, op: str) -> dict[str, Severity] | ServiceResult:
        """``[lint.severity]`` keyed by rule code, or an UNKNOWN_RULE failure."""
        overrides: dict[str, Severity] = {}
        for ref, severity in self._settings.lint.severity.items():
            try:
                overrides[get_rule(ref).code] = Severity(severity)
            except KeyError:
                return ServiceResult.failure(
                    op,
                    "UNKNOWN_RULE",
                    f"Unknown rule in [lint.severity]: {ref}",
                )
        return overrides
