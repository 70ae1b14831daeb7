"""Markdown style-guide structure — headings, fences, and explanations.

Parses just enough Markdown to check a commenting guide: ATX headings,
fenced code blocks, and the bullet list that follows each fence. Pure
functions; the guide service handles file I/O and snippet linting.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from nixcomment.domain.checker import Issue
from nixcomment.domain.lexer import split_lines, tag_lines
from nixcomment.domain.structure import parse_alternative
from nixcomment.domain.types import Severity

_HEADING = re.compile(r"^ {0,3}(?P<hashes>#{1,6})\s+(?P<title>.*?)\s*#*\s*$")
_FENCE_OPEN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})\s*(?P<info>[^`]*)$")
_BULLET = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")

_BLOCK_REF = re.compile(r"block\s+comments?", re.IGNORECASE)
_INLINE_REF = re.compile(r"inline\s+comments?", re.IGNORECASE)
_ALT_REF = re.compile(r"alternatives?", re.IGNORECASE)

# Fence languages whose content is linted as Nix.
NIX_LANGUAGES = frozenset({"nix", ""})

GUIDE_RULES: dict[str, tuple[str, Severity, str]] = {
    "GD000": ("unterminated-fence", Severity.ERROR, "A code fence is never closed."),
    "GD001": ("example-count", Severity.ERROR, "The guide has the wrong number of examples."),
    "GD002": ("missing-example-topic", Severity.WARNING, "An expected example topic is absent."),
    "GD003": ("missing-explanation", Severity.ERROR, "A code fence has no bullet list after it."),
    "GD004": (
        "explanation-references",
        Severity.WARNING,
        "An explanation does not reference Block Comments and Inline Comments.",
    ),
    "GD005": (
        "alternatives-reference",
        Severity.WARNING,
        "A snippet with alternative settings is explained without 'Alternatives'.",
    ),
}


@dataclass(frozen=True)
class Heading:
    line: int
    level: int
    title: str


@dataclass(frozen=True)
class Explanation:
    """The bullet list following a fence."""

    line: int
    items: tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.items)


@dataclass(frozen=True)
class CodeFence:
    """A fenced code block and what surrounds it."""

    line: int  # line of the opening fence
    end: int | None  # line of the closing fence, None if unterminated
    language: str
    content: str
    headings: tuple[Heading, ...] = ()  # enclosing heading trail, outermost first
    explanation: Explanation | None = None

    @property
    def title(self) -> str:
        return self.headings[-1].title if self.headings else ""

    @property
    def is_nix(self) -> bool:
        return self.language in NIX_LANGUAGES

    def has_alternatives(self) -> bool:
        if not self.is_nix:
            return False
        return any(parse_alternative(ln) is not None for ln in tag_lines(self.content).lines)


@dataclass(frozen=True)
class GuideDocument:
    headings: list[Heading] = field(default_factory=list)
    fences: list[CodeFence] = field(default_factory=list)


@dataclass(frozen=True)
class GuideOptions:
    """Expectations for the guide's worked examples."""

    expected_examples: int = 4
    example_topics: tuple[str, ...] = (
        "package definition",
        "nixos configuration",
        "flake",
        "custom script",
    )
    examples_section: str = "example"
    example_languages: tuple[str, ...] = ("nix", "sh", "bash", "")
    explain_all_fences: bool = True


def parse_guide(text: str) -> GuideDocument:
    """Parse headings and fenced code blocks, attaching explanations."""
    lines = split_lines(text)
    headings: list[Heading] = []
    raw_fences: list[tuple[int, int | None, str, str, tuple[Heading, ...]]] = []
    trail: list[Heading] = []

    i = 0
    while i < len(lines):
        line = lines[i]
        number = i + 1
        fence_match = _FENCE_OPEN.match(line)
        if fence_match:
            marker = fence_match.group("fence")
            info = fence_match.group("info").strip()
            language = info.split()[0].lower() if info else ""
            body: list[str] = []
            end: int | None = None
            j = i + 1
            while j < len(lines):
                if _closes(lines[j], marker):
                    end = j + 1
                    break
                body.append(lines[j])
                j += 1
            raw_fences.append((number, end, language, "\n".join(body), tuple(trail)))
            i = j + 1
            continue
        heading_match = _HEADING.match(line)
        if heading_match:
            heading = Heading(
                line=number,
                level=len(heading_match.group("hashes")),
                title=heading_match.group("title"),
            )
            headings.append(heading)
            trail = [h for h in trail if h.level < heading.level]
            trail.append(heading)
        i += 1

    fences = [
        CodeFence(
            line=start,
            end=end,
            language=language,
            content=content,
            headings=trail_at,
            explanation=_explanation_after(lines, end) if end is not None else None,
        )
        for start, end, language, content, trail_at in raw_fences
    ]
    return GuideDocument(headings=headings, fences=fences)


def worked_examples(doc: GuideDocument, options: GuideOptions) -> list[CodeFence]:
    """Fences in an examples section whose language counts as an example."""
    section = re.compile(re.escape(options.examples_section), re.IGNORECASE)
    languages = {lang.lower() for lang in options.example_languages}
    return [
        f
        for f in doc.fences
        if f.language in languages and any(section.search(h.title) for h in f.headings)
    ]


def check_guide(doc: GuideDocument, options: GuideOptions, *, path: str) -> list[Issue]:
    """Structural checks over a parsed guide."""
    issues: list[Issue] = []

    for fence in doc.fences:
        if fence.end is None:
            issues.append(_issue(path, fence.line, "GD000", "Code fence is never closed"))

    examples = worked_examples(doc, options)
    if len(examples) != options.expected_examples:
        line = examples[0].line if examples else 1
        issues.append(
            _issue(
                path,
                line,
                "GD001",
                f"Expected {options.expected_examples} worked examples, found {len(examples)}",
            )
        )

    titles = [" ".join(h.title for h in f.headings).lower() for f in examples]
    for topic in options.example_topics:
        if not any(topic.lower() in title for title in titles):
            issues.append(_issue(path, 1, "GD002", f"No worked example covers '{topic}'"))

    explained = doc.fences if options.explain_all_fences else examples
    for fence in explained:
        if fence.end is None:
            continue
        issues.extend(_check_explanation(fence, path))

    issues.sort()
    return issues


def _check_explanation(fence: CodeFence, path: str) -> Iterator[Issue]:
    label = f"'{fence.title}'" if fence.title else f"at line {fence.line}"
    if fence.explanation is None:
        yield _issue(
            path, fence.line, "GD003", f"Code block {label} has no bullet-list explanation"
        )
        return
    text = fence.explanation.text
    missing = [
        name
        for name, pattern in (("Block Comments", _BLOCK_REF), ("Inline Comments", _INLINE_REF))
        if not pattern.search(text)
    ]
    if missing:
        yield _issue(
            path,
            fence.explanation.line,
            "GD004",
            f"Explanation of {label} does not reference: {', '.join(missing)}",
        )
    if fence.has_alternatives() and not _ALT_REF.search(text):
        yield _issue(
            path,
            fence.explanation.line,
            "GD005",
            f"Code block {label} has alternative settings but its explanation "
            "does not reference Alternatives",
        )


def _closes(line: str, marker: str) -> bool:
    stripped = line.strip()
    return (
        len(line) - len(line.lstrip(" ")) <= 3
        and stripped.startswith(marker[0] * len(marker))
        and set(stripped) == {marker[0]}
    )


def _explanation_after(lines: list[str], fence_end: int) -> Explanation | None:
    """Collect the first bullet list between *fence_end* and the next heading or fence."""
    items: list[str] = []
    start: int | None = None
    for index in range(fence_end, len(lines)):
        line = lines[index]
        if _HEADING.match(line) or _FENCE_OPEN.match(line):
            break
        if _BULLET.match(line):
            if start is None:
                start = index + 1
            items.append(_BULLET.sub("", line, count=1).strip())
            continue
        if start is None:
            continue
        if not line.strip():
            continue
        if line[:1].isspace():
            items[-1] = f"{items[-1]} {line.strip()}"
            continue
        break
    if start is None:
        return None
    return Explanation(line=start, items=tuple(items))


def _issue(path: str, line: int, code: str, message: str) -> Issue:
    name, severity, _summary = GUIDE_RULES[code]
    return Issue(
        path=path,
        line=line,
        column=1,
        rule=code,
        severity=severity,
        message=message,
        name=name,
    )
