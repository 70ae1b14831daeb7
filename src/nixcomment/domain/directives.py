"""In-source suppression directives.

``# nixcomment: skip-file`` anywhere skips the whole file.
``# nixcomment: ignore`` on a line silences every rule for that line;
``# nixcomment: ignore[NC004,NC006]`` silences only the listed codes.
"""

from __future__ import annotations

import re

from nixcomment.domain.lexer import TaggedLine

_SKIP_FILE = re.compile(r"nixcomment:\s*skip-file\b", re.IGNORECASE)
_IGNORE = re.compile(r"nixcomment:\s*ignore(?:\[(?P<codes>[^\]]*)\])?", re.IGNORECASE)


def file_is_skipped(lines: list[TaggedLine]) -> bool:
    return any(ln.comment and _SKIP_FILE.search(ln.comment) for ln in lines)


def line_ignores(lines: list[TaggedLine]) -> dict[int, frozenset[str] | None]:
    """Map line number -> ignored codes (None means all codes)."""
    ignores: dict[int, frozenset[str] | None] = {}
    for ln in lines:
        if not ln.comment:
            continue
        match = _IGNORE.search(ln.comment)
        if match is None:
            continue
        codes = match.group("codes")
        if codes is None:
            ignores[ln.number] = None
        else:
            ignores[ln.number] = frozenset(
                c.strip().upper() for c in codes.split(",") if c.strip()
            )
    return ignores


def is_ignored(ignores: dict[int, frozenset[str] | None], line: int, code: str) -> bool:
    if line not in ignores:
        return False
    codes = ignores[line]
    return codes is None or code in codes
