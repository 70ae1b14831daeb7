"""Classification enums shared across the domain layer."""

from __future__ import annotations

from enum import StrEnum


class LineKind(StrEnum):
    """Kind of a physical source line after lexing."""

    CODE = "code"
    COMMENT = "comment"
    BLANK = "blank"


class CommentStyle(StrEnum):
    """Nix comment syntax a line's comment text came from."""

    HASH = "hash"
    BLOCK = "block"


class Severity(StrEnum):
    """Diagnostic severity, ordered from least to most severe."""

    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.WARNING: 0, Severity.ERROR: 1}
