"""Tests for in-source suppression directives."""

from __future__ import annotations

from nixcomment.domain.directives import file_is_skipped, is_ignored, line_ignores
from nixcomment.domain.lexer import tag_lines


def test_skip_file_anywhere() -> None:
    assert file_is_skipped(tag_lines("x = 1;\n\n# NixComment: skip-file\n").lines)


def test_skip_file_in_string_does_not_count() -> None:
    assert not file_is_skipped(tag_lines('x = "# nixcomment: skip-file";\n').lines)


def test_line_ignores() -> None:
    lines = tag_lines(
        "a = 1; # nixcomment: ignore\nb = 2; # nixcomment: ignore[nc004, NC006]\nc = 3;\n"
    ).lines
    ignores = line_ignores(lines)
    assert ignores == {1: None, 2: frozenset({"NC004", "NC006"})}
    assert is_ignored(ignores, 1, "NC001")
    assert is_ignored(ignores, 2, "NC004")
    assert not is_ignored(ignores, 2, "NC001")
    assert not is_ignored(ignores, 3, "NC004")
