"""Config file discovery and loading.

Walk-up finder locates ``nixcomment.toml`` (or a ``pyproject.toml`` with a
``[tool.nixcomment]`` table), similar to how git finds ``.git/``.
Supports the NIXCOMMENT_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from nixcomment.config.models import NixCommentConfig

CONFIG_FILENAME = "nixcomment.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "NIXCOMMENT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for a config file.

    In each directory ``nixcomment.toml`` wins over ``pyproject.toml``; the
    latter only counts when it has a ``[tool.nixcomment]`` table.
    Checks NIXCOMMENT_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = current / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_config_data(path: Path) -> dict[str, Any]:
    """Parse *path* and return the nixcomment settings table.

    For ``pyproject.toml`` this is ``[tool.nixcomment]``; for any other file
    the whole document. Raises ``tomllib.TOMLDecodeError`` on bad TOML.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        tool = data.get("tool", {})
        table = tool.get("nixcomment", {}) if isinstance(tool, dict) else {}
        return table if isinstance(table, dict) else {}
    return data


def load_config(path: Path | None = None, cwd: Path | None = None) -> NixCommentConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default NixCommentConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)

    if path is None:
        return NixCommentConfig()

    return NixCommentConfig.model_validate(read_config_data(path))


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return False
    tool = data.get("tool")
    return isinstance(tool, dict) and "nixcomment" in tool
