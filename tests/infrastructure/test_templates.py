"""Tests for Jinja2 template loading."""

from pathlib import Path

from nixcomment.infrastructure.templates import build_template_environment


def test_packaged_template_found() -> None:
    env = build_template_environment("init")
    assert "nixcomment.toml.j2" in env.list_templates()


def test_project_override_wins(tmp_path: Path) -> None:
    override = tmp_path / ".nixcomment" / "templates" / "init"
    override.mkdir(parents=True)
    (override / "nixcomment.toml.j2").write_text("custom\n")
    env = build_template_environment("init", project_root=tmp_path)
    assert env.get_template("nixcomment.toml.j2").render() == "custom\n"


def test_override_without_files_falls_back(tmp_path: Path) -> None:
    env = build_template_environment("init", project_root=tmp_path)
    assert "[lint]" in env.get_template("nixcomment.toml.j2").render(
        lint={"line_length": 100, "min_block_lines": 1, "select": [], "ignore": [],
              "fail_on": "error", "severity": {}},
        files={"include": [], "exclude": []},
        guide={"expected_examples": 4, "example_topics": [], "examples_section": "example",
               "example_languages": [], "explain_all_fences": True, "lint_snippets": False},
        plugins={"enabled": True, "local_dir": ".nixcomment/plugins"},
    )
