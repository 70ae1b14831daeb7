"""Source file discovery and reading.

Directories are expanded recursively to files matching the include globs;
any path component matching an exclude glob prunes that subtree. Files
named explicitly on the command line are always kept.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Discovery:
    """Files found plus the requested paths that do not exist."""

    files: list[Path] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def _matches_any(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


def discover_files(
    paths: Sequence[str | Path],
    *,
    include: Sequence[str] = ("*.nix",),
    exclude: Sequence[str] = (),
) -> Discovery:
    """Expand *paths* into a sorted, de-duplicated list of files."""
    found: dict[Path, None] = {}
    missing: list[str] = []

    for raw in paths:
        path = Path(raw)
        if path.is_file():
            found[path] = None
            continue
        if not path.is_dir():
            missing.append(str(raw))
            continue
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames[:] = sorted(d for d in dirnames if not _matches_any(d, exclude))
            for name in sorted(filenames):
                if _matches_any(name, exclude) or not _matches_any(name, include):
                    continue
                found[Path(dirpath) / name] = None

    files = sorted(found)
    logger.debug("Discovered %d files from %d paths", len(files), len(paths))
    return Discovery(files=files, missing=missing)


def read_source(path: Path) -> str:
    """Read a UTF-8 source file.

    Raises:
        OSError: The file cannot be read.
        UnicodeDecodeError: The file is not valid UTF-8.
    """
    return path.read_text(encoding="utf-8")


def display_path(path: Path, root: Path) -> str:
    """*path* relative to *root* when it lies inside it, else as given."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()
