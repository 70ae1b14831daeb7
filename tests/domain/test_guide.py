"""Tests for Markdown guide parsing and structural checks."""

from __future__ import annotations

from pathlib import Path

from nixcomment.domain.guide import GuideOptions, check_guide, parse_guide, worked_examples

ONE_EXAMPLE = """\
# Guide

## Example: Flake

```nix
# What: a
# Does: b
# Why: c
{
  description = "x"; # Shown in metadata
  # description = "y";
}
```

- Block Comments: header.
- Inline Comments: description.
"""


SINGLE = GuideOptions(expected_examples=1, example_topics=())


def _codes(text: str, **options: object) -> list[str]:
    doc = parse_guide(text)
    opts = GuideOptions(**options)  # type: ignore[arg-type]
    return [i.rule for i in check_guide(doc, opts, path="GUIDE.md")]


class TestParseGuide:
    def test_headings_and_fences(self, guide_path: Path) -> None:
        doc = parse_guide(guide_path.read_text())
        assert [h.title for h in doc.headings if h.level == 3] == [
            "Example 1: Package Definition",
            "Example 2: NixOS Configuration",
            "Example 3: Flake",
            "Example 4: Custom Script",
        ]
        assert len(doc.fences) == 4
        assert [f.language for f in doc.fences] == ["nix", "nix", "nix", "bash"]

    def test_hash_lines_in_fence_are_not_headings(self, guide_path: Path) -> None:
        doc = parse_guide(guide_path.read_text())
        assert all(not h.title.startswith("What") for h in doc.headings)

    def test_fence_heading_trail(self) -> None:
        (fence,) = parse_guide(ONE_EXAMPLE).fences
        assert fence.title == "Example: Flake"
        assert [h.level for h in fence.headings] == [1, 2]
        assert fence.line == 5
        assert fence.end == 13
        assert fence.content.startswith("# What: a")

    def test_explanation_collected(self) -> None:
        (fence,) = parse_guide(ONE_EXAMPLE).fences
        assert fence.explanation is not None
        assert fence.explanation.line == 15
        assert fence.explanation.items == (
            "Block Comments: header.",
            "Inline Comments: description.",
        )

    def test_explanation_continuation_line(self) -> None:
        text = "```nix\nx\n```\n- first\n  continued\n- second\n"
        (fence,) = parse_guide(text).fences
        assert fence.explanation is not None
        assert fence.explanation.items == ("first continued", "second")

    def test_paragraph_before_list_is_skipped(self) -> None:
        text = "```\nx\n```\n\nSome prose.\n\n- Block Comments\n"
        (fence,) = parse_guide(text).fences
        assert fence.explanation is not None
        assert fence.explanation.items == ("Block Comments",)

    def test_no_explanation_before_next_heading(self) -> None:
        text = "```nix\nx\n```\n\n## Next\n\n- item\n"
        (fence,) = parse_guide(text).fences
        assert fence.explanation is None

    def test_tilde_fence_and_longer_close(self) -> None:
        text = "~~~~ nix\n```\n~~~~~\n"
        (fence,) = parse_guide(text).fences
        assert fence.language == "nix"
        assert fence.content == "```"
        assert fence.end == 3

    def test_alternatives_detected(self) -> None:
        (fence,) = parse_guide(ONE_EXAMPLE).fences
        assert fence.has_alternatives()


class TestCheckGuide:
    def test_sample_guide_is_clean(self, guide_path: Path) -> None:
        doc = parse_guide(guide_path.read_text())
        assert check_guide(doc, GuideOptions(), path="GUIDE.md") == []
        assert len(worked_examples(doc, GuideOptions())) == 4

    def test_wrong_example_count(self) -> None:
        codes = _codes(ONE_EXAMPLE, example_topics=("flake",))
        assert codes == ["GD001", "GD005"]

    def test_expected_count_configurable(self) -> None:
        assert "GD001" not in _codes(ONE_EXAMPLE, expected_examples=1)

    def test_missing_topics(self) -> None:
        codes = _codes(ONE_EXAMPLE, expected_examples=1)
        assert codes.count("GD002") == 3

    def test_missing_explanation(self) -> None:
        text = "## Example\n\n```nix\nx = 1;\n```\n"
        issues = check_guide(parse_guide(text), SINGLE, path="g.md")
        assert [(i.rule, i.line) for i in issues] == [("GD003", 3)]

    def test_explanation_missing_references(self) -> None:
        text = "## Example\n\n```nix\nx = 1;\n```\n\n- Block Comments only\n"
        issues = check_guide(parse_guide(text), SINGLE, path="g.md")
        (issue,) = issues
        assert issue.rule == "GD004"
        assert "Inline Comments" in issue.message
        assert issue.line == 7

    def test_unterminated_fence(self) -> None:
        text = "## Example\n\n```nix\nx = 1;\n"
        codes = [i.rule for i in check_guide(parse_guide(text), SINGLE, path="g.md")]
        assert codes == ["GD000"]

    def test_only_examples_need_explanations_when_configured(self) -> None:
        text = "## Intro\n\n```sh\nnix build\n```\n"
        opts = GuideOptions(expected_examples=0, example_topics=(), explain_all_fences=False)
        assert check_guide(parse_guide(text), opts, path="g.md") == []

    def test_fences_outside_examples_section_not_counted(self) -> None:
        text = "## Intro\n\n```nix\nx\n```\n\n- Block Comments, Inline Comments\n"
        doc = parse_guide(text)
        assert worked_examples(doc, GuideOptions()) == []
