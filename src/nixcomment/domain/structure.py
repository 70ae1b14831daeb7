"""Block structure — blocks, three-part headers, assignments, alternatives.

Pure functions over :class:`~nixcomment.domain.lexer.TaggedLine` sequences.
Consumed by the rule functions in :mod:`nixcomment.domain.rules`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from nixcomment.domain.lexer import TaggedLine
from nixcomment.domain.types import LineKind

# Header parts in their canonical order.
HEADER_PARTS: tuple[str, ...] = ("what", "does", "why")

# "What: ...", "- Does: ...", "* why:" — label followed by a colon.
_PART_PATTERN = re.compile(r"^[-*\s]*(what|does|why)\s*:", re.IGNORECASE)

# One attribute path segment: identifier or a plain quoted name.
_ATTR = r"(?:[A-Za-z_][A-Za-z0-9_'\-]*|\"[^\"$\\]*\")"
_ATTR_PATH = rf"{_ATTR}(?:\s*\.\s*{_ATTR})*"

# Single-line ``attr.path = value;`` (``==`` is a comparison, not a binding).
_ASSIGNMENT = re.compile(rf"^\s*(?P<path>{_ATTR_PATH})\s*=(?!=)\s*(?P<value>.*?)\s*;\s*$")

# The start of any binding, including ones whose value spans lines.
_BINDING_START = re.compile(rf"^\s*(?P<path>{_ATTR_PATH})\s*=(?!=)")

# Prefixes that may introduce a commented-out alternative setting.
_ALT_PREFIX = re.compile(r"^(?:alternative|alt|or)\s*:\s*", re.IGNORECASE)

_KEYWORDS = frozenset({"inherit", "let", "in", "with", "if", "then", "else", "assert", "rec"})

# Lines made only of brackets, separators, and layout keywords.
_STRUCTURAL = re.compile(r"^(?:[{}\[\]();,:]|\.\.\.|\b(?:in|let|rec|then|else)\b|\s)*$")

_SCALAR_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "string" without antiquotation
    re.compile(r'^"(?:[^"\\$]|\\.|\$(?!\{))*"$'),
    # ''single-line indented string'' without antiquotation
    re.compile(r"^''(?:(?!'')(?!\$\{).)*''$"),
    # integer / float
    re.compile(r"^-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?$"),
    re.compile(r"^(?:true|false|null)$"),
    # ./rel, ../rel, /abs, ~/home paths
    re.compile(r"^(?:\.{1,2}|~)?(?:/[A-Za-z0-9._+\-]+)+/?$"),
    # <nixpkgs> search path
    re.compile(r"^<[A-Za-z0-9._+\-/]+>$"),
    # URI literal
    re.compile(r"^[A-Za-z][A-Za-z0-9+\-.]*:[A-Za-z0-9%/?:@&=+$,\-_.!~*']+$"),
)


@dataclass(frozen=True)
class Assignment:
    """A single-line binding ``attr.path = value;``."""

    line: int
    attr_path: str
    value: str
    column: int = 1

    @property
    def is_scalar(self) -> bool:
        return is_scalar_value(self.value)


@dataclass(frozen=True)
class Alternative:
    """A commented-out variant of a setting."""

    line: int
    attr_path: str
    value: str


@dataclass(frozen=True)
class BlockComment:
    """The comment lines directly above a block's first real code line."""

    lines: tuple[TaggedLine, ...]
    parts: dict[str, int] = field(default_factory=dict)  # part -> line number

    @property
    def missing(self) -> list[str]:
        return [p for p in HEADER_PARTS if p not in self.parts]

    @property
    def in_order(self) -> bool:
        """Whether the present parts appear in What → Does → Why order."""
        numbers = [self.parts[p] for p in HEADER_PARTS if p in self.parts]
        return numbers == sorted(numbers)

    @property
    def start(self) -> int:
        return self.lines[0].number if self.lines else 0


@dataclass(frozen=True)
class Block:
    """A maximal run of non-blank lines."""

    lines: tuple[TaggedLine, ...]

    @property
    def start(self) -> int:
        return self.lines[0].number

    @property
    def end(self) -> int:
        return self.lines[-1].number

    @property
    def code_lines(self) -> list[TaggedLine]:
        return [ln for ln in self.lines if ln.kind is LineKind.CODE]

    @property
    def substantive_lines(self) -> list[TaggedLine]:
        """Code lines that are not purely structural punctuation."""
        return [ln for ln in self.code_lines if not is_structural(ln.code)]

    @property
    def is_code_bearing(self) -> bool:
        return bool(self.substantive_lines)

    def header(self) -> BlockComment | None:
        """Return the comment lines above the first substantive line.

        Structural lines such as a lone ``{`` between the comments and the
        code are skipped. Commented-out alternatives in that run are not
        part of the header. Returns None when the block has no substantive
        code, and an empty :class:`BlockComment` when no comment precedes it.
        """
        substantive = self.substantive_lines
        if not substantive:
            return None
        first = substantive[0]
        index = self.lines.index(first)
        run: list[TaggedLine] = []
        for ln in reversed(self.lines[:index]):
            if ln.kind is LineKind.COMMENT:
                run.append(ln)
            elif run or not is_structural(ln.code):
                break
        run.reverse()
        text_lines = tuple(ln for ln in run if parse_alternative(ln) is None)
        return parse_block_comment(text_lines)


def is_structural(code: str) -> bool:
    """True for lines such as ``};``, ``in``, ``rec {`` or ``...``."""
    return bool(_STRUCTURAL.match(code))


def split_blocks(lines: list[TaggedLine]) -> list[Block]:
    """Group non-blank lines into blocks separated by blank lines."""
    blocks: list[Block] = []
    current: list[TaggedLine] = []
    for ln in lines:
        if ln.kind is LineKind.BLANK:
            if current:
                blocks.append(Block(tuple(current)))
                current = []
            continue
        current.append(ln)
    if current:
        blocks.append(Block(tuple(current)))
    return blocks


def parse_block_comment(lines: tuple[TaggedLine, ...]) -> BlockComment:
    """Locate the What/Does/Why labels within *lines*.

    Only the first occurrence of each label counts. Text after a label and
    any continuation lines are free-form.
    """
    parts: dict[str, int] = {}
    for ln in lines:
        if not ln.comment:
            continue
        match = _PART_PATTERN.match(ln.comment)
        if match is None:
            continue
        parts.setdefault(match.group(1).lower(), ln.number)
    return BlockComment(lines=lines, parts=parts)


def parse_assignments(line: TaggedLine) -> list[Assignment]:
    """Parse every binding on a code line.

    ``a = "x"; b = 1;`` yields two assignments. Semicolons inside strings
    and brackets do not end a binding, so ``x = { a = 1; };`` stays one.
    """
    if line.kind is not LineKind.CODE or line.in_string:
        return []
    found: list[Assignment] = []
    for offset, statement in split_statements(line.code):
        indent = len(statement) - len(statement.lstrip())
        assignment = _match_assignment(statement, line.number, offset + indent + 1)
        if assignment is not None:
            found.append(assignment)
    return found


def split_statements(code: str) -> list[tuple[int, str]]:
    """Split *code* after each top-level ``;``.

    Returns ``(offset, text)`` pairs; each text keeps its ``;``. Trailing
    text without one is returned as a final piece.
    """
    pieces: list[tuple[int, str]] = []
    start = depth = i = 0
    quote: str | None = None
    while i < len(code):
        ch = code[i]
        if quote == '"':
            if ch == "\\":
                i += 1
            elif ch == '"':
                quote = None
        elif quote == "''":
            if code.startswith("''", i):
                if code[i + 2 : i + 3] in ("'", "$", "\\"):
                    i += 2
                else:
                    quote = None
                    i += 1
        elif ch == '"':
            quote = '"'
        elif code.startswith("''", i):
            quote = "''"
            i += 1
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth = max(depth - 1, 0)
        elif ch == ";" and depth == 0:
            pieces.append((start, code[start : i + 1]))
            start = i + 1
        i += 1
    if code[start:].strip():
        pieces.append((start, code[start:]))
    return pieces


def binding_path(line: TaggedLine) -> str | None:
    """Attribute path of any binding starting on *line*, even multi-line ones."""
    if line.kind is not LineKind.CODE or line.in_string:
        return None
    match = _BINDING_START.match(line.code)
    if match is None:
        return None
    path = normalize_path(match.group("path"))
    if path.split(".", 1)[0] in _KEYWORDS:
        return None
    return path


def parse_alternative(line: TaggedLine) -> Alternative | None:
    """Parse a comment line holding a commented-out setting.

    ``# port = 8080;`` and ``# Alternative: port = 8080;`` both qualify.
    """
    if line.kind is not LineKind.COMMENT or not line.comment:
        return None
    text = _ALT_PREFIX.sub("", line.comment, count=1)
    assignment = _match_assignment(text, line.number)
    if assignment is None:
        return None
    return Alternative(line=line.number, attr_path=assignment.attr_path, value=assignment.value)


def is_scalar_value(value: str) -> bool:
    """True for literals: strings, numbers, booleans, null, paths, URIs."""
    value = value.strip()
    return any(p.match(value) for p in _SCALAR_PATTERNS)


def normalize_path(path: str) -> str:
    """Drop whitespace around dots so ``a . b`` and ``a.b`` compare equal."""
    return ".".join(part.strip() for part in path.split("."))


def _match_assignment(text: str, number: int, column: int = 1) -> Assignment | None:
    match = _ASSIGNMENT.match(text)
    if match is None:
        return None
    path = normalize_path(match.group("path"))
    if path.split(".", 1)[0] in _KEYWORDS:
        return None
    return Assignment(line=number, attr_path=path, value=match.group("value"), column=column)
