"""InitService — write a starter nixcomment.toml."""

from __future__ import annotations

import logging
from pathlib import Path

from nixcomment.config.discovery import CONFIG_FILENAME
from nixcomment.config.models import NixCommentConfig
from nixcomment.infrastructure.templates import build_template_environment
from nixcomment.services.base import BaseService
from nixcomment.services.result import ServiceResult

logger = logging.getLogger(__name__)


class InitService(BaseService):
    """Creates project configuration from the packaged template."""

    def init_config(self, directory: str | Path = ".", *, force: bool = False) -> ServiceResult:
        """Render the default configuration into ``<directory>/nixcomment.toml``."""
        op = "init_config"
        target_dir = Path(directory)
        if not target_dir.is_dir():
            return ServiceResult.failure(
                op, "PATH_NOT_FOUND", f"No such directory: {directory}", path=str(directory)
            )

        target = target_dir / CONFIG_FILENAME
        existed = target.exists()
        if existed and not force:
            return ServiceResult.failure(
                op,
                "CONFIG_EXISTS",
                f"{target} already exists (use --force to overwrite)",
                path=str(target),
            )

        defaults = NixCommentConfig()
        env = build_template_environment("init", project_root=target_dir)
        rendered = env.get_template(f"{CONFIG_FILENAME}.j2").render(
            lint=defaults.lint,
            files=defaults.files,
            guide=defaults.guide,
            plugins=defaults.plugins,
        )
        target.write_text(rendered, encoding="utf-8")
        logger.debug("Wrote %s", target)
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": str(target), "overwritten": existed},
        )
