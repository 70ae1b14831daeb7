"""Tests for source discovery, reading, and display paths."""

from pathlib import Path

import pytest

from nixcomment.infrastructure.filesystem import discover_files, display_path, read_source


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    for rel in (
        "default.nix",
        "modules/ssh.nix",
        "modules/notes.md",
        "result/out.nix",
        ".git/hooks/x.nix",
        "result-2/y.nix",
    ):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x = 1; # one\n")
    return tmp_path


EXCLUDE = (".git", "result", "result-*")


class TestDiscoverFiles:
    def test_recursive_with_excludes(self, tree: Path) -> None:
        found = discover_files([tree], include=("*.nix",), exclude=EXCLUDE)
        assert [p.relative_to(tree).as_posix() for p in found.files] == [
            "default.nix",
            "modules/ssh.nix",
        ]
        assert found.missing == []

    def test_explicit_file_ignores_include(self, tree: Path) -> None:
        found = discover_files([tree / "modules" / "notes.md"], exclude=EXCLUDE)
        assert found.files == [tree / "modules" / "notes.md"]

    def test_explicit_file_in_excluded_dir(self, tree: Path) -> None:
        found = discover_files([tree / "result" / "out.nix"], exclude=EXCLUDE)
        assert found.files == [tree / "result" / "out.nix"]

    def test_missing_paths_reported(self, tree: Path) -> None:
        found = discover_files([tree / "nope", tree / "default.nix"])
        assert found.missing == [str(tree / "nope")]
        assert found.files == [tree / "default.nix"]

    def test_duplicates_collapsed(self, tree: Path) -> None:
        found = discover_files([tree / "modules", tree / "modules" / "ssh.nix"], exclude=EXCLUDE)
        assert found.files == [tree / "modules" / "ssh.nix"]

    def test_custom_include(self, tree: Path) -> None:
        found = discover_files([tree / "modules"], include=("*.md",))
        assert found.files == [tree / "modules" / "notes.md"]


class TestReadSource:
    def test_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "a.nix"
        path.write_text("# café\n", encoding="utf-8")
        assert read_source(path) == "# café\n"

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "a.nix"
        path.write_bytes(b"\xff\xfe")
        with pytest.raises(UnicodeDecodeError):
            read_source(path)


class TestDisplayPath:
    def test_inside_root(self, tmp_path: Path) -> None:
        assert display_path(tmp_path / "a" / "b.nix", tmp_path) == "a/b.nix"

    def test_outside_root(self, tmp_path: Path) -> None:
        outside = Path("/somewhere/else.nix")
        assert display_path(outside, tmp_path) == "/somewhere/else.nix"
