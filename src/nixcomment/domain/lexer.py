"""Line tagger for Nix source text.

Pure functions, no I/O. Splits text into physical lines and tags each one
as code, comment, or blank. String and comment state is carried across
lines so a ``#`` or ``/*`` inside ``"..."`` or ``''...''`` never starts a
comment, and every line covered by a ``/* ... */`` comment is tagged as one.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nixcomment.domain.types import CommentStyle, LineKind

# Characters that may continue a Nix identifier (``foo''`` is a valid name).
_IDENT_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_'-")

_CODE = "code"
_STRING = "string"
_IND_STRING = "indented string"
_ANTIQUOTE = "antiquotation"
_BLOCK_COMMENT = "block comment"


@dataclass(frozen=True)
class TaggedLine:
    """One physical line with its code and comment text separated."""

    number: int  # 1-based
    kind: LineKind
    text: str
    code: str = ""
    comment: str | None = None  # None when the line carries no comment at all
    comment_style: CommentStyle | None = None
    in_string: bool = False  # line began inside a multi-line string

    @property
    def has_trailing_comment(self) -> bool:
        """True for a code line that also carries a comment."""
        return self.kind is LineKind.CODE and self.comment is not None

    @property
    def indent(self) -> int:
        return len(self.text) - len(self.text.lstrip())


@dataclass(frozen=True)
class Unterminated:
    """A string, antiquotation, or block comment still open at end of input."""

    token: str
    line: int
    column: int


@dataclass(frozen=True)
class LexResult:
    """Tagged lines plus any tokens left open at end of input."""

    lines: list[TaggedLine]
    unterminated: list[Unterminated] = field(default_factory=list)


@dataclass
class _Frame:
    kind: str
    line: int
    column: int
    depth: int = 0


def split_lines(text: str) -> list[str]:
    """Split *text* into physical lines.

    A trailing newline does not produce an extra empty line and ``\\r`` from
    CRLF endings is dropped.

    Examples:
        >>> split_lines("a\\r\\nb\\n")
        ['a', 'b']
        >>> split_lines("")
        []
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def tag_lines(text: str) -> LexResult:
    """Tag every physical line of *text* as code, comment, or blank.

    Unterminated strings and block comments are not errors here: the open
    state runs to the end of input and is reported in
    :attr:`LexResult.unterminated`.
    """
    scanner = _Scanner()
    lines = [scanner.scan(number, raw) for number, raw in enumerate(split_lines(text), start=1)]
    return LexResult(lines=lines, unterminated=scanner.open_tokens())


def _clean_block_text(chunk: str) -> str:
    """Strip whitespace and ``*`` decoration from one line of a block comment."""
    return chunk.strip().lstrip("*").rstrip("*").strip()


class _Scanner:
    """Stateful scanner; one instance per input text."""

    def __init__(self) -> None:
        self._stack: list[_Frame] = [_Frame(_CODE, 1, 1)]
        self._block_comment: _Frame | None = None

    def open_tokens(self) -> list[Unterminated]:
        found = [Unterminated(f.kind, f.line, f.column) for f in self._stack[1:]]
        if self._block_comment is not None:
            bc = self._block_comment
            found.append(Unterminated(bc.kind, bc.line, bc.column))
        return found

    def scan(self, number: int, raw: str) -> TaggedLine:
        code: list[str] = []
        comments: list[str] = []
        chunk: list[str] = []
        style: CommentStyle | None = None
        started_in_string = self._stack[-1].kind in (_STRING, _IND_STRING)
        saw_comment = self._block_comment is not None
        if saw_comment:
            style = CommentStyle.BLOCK

        i = 0
        n = len(raw)
        while i < n:
            if self._block_comment is not None:
                end = raw.find("*/", i)
                if end == -1:
                    chunk.append(raw[i:])
                    i = n
                else:
                    chunk.append(raw[i:end])
                    comments.append(_clean_block_text("".join(chunk)))
                    chunk = []
                    self._block_comment = None
                    i = end + 2
                continue

            frame = self._stack[-1]
            ch = raw[i]

            if frame.kind == _STRING:
                if ch == "\\":
                    code.append(raw[i : i + 2])
                    i += 2
                elif ch == '"':
                    self._stack.pop()
                    code.append(ch)
                    i += 1
                elif raw.startswith("${", i):
                    self._stack.append(_Frame(_ANTIQUOTE, number, i + 1))
                    code.append("${")
                    i += 2
                else:
                    code.append(ch)
                    i += 1
                continue

            if frame.kind == _IND_STRING:
                if raw.startswith("'''", i) or raw.startswith("''$", i):
                    code.append(raw[i : i + 3])
                    i += 3
                elif raw.startswith("''\\", i):
                    code.append(raw[i : i + 4])
                    i += 4
                elif raw.startswith("''", i):
                    self._stack.pop()
                    code.append("''")
                    i += 2
                elif raw.startswith("${", i):
                    self._stack.append(_Frame(_ANTIQUOTE, number, i + 1))
                    code.append("${")
                    i += 2
                else:
                    code.append(ch)
                    i += 1
                continue

            # Plain code, either top level or inside an antiquotation.
            if ch == "#":
                comments.append(raw[i + 1 :].lstrip("#").strip())
                style = style or CommentStyle.HASH
                saw_comment = True
                break
            if raw.startswith("/*", i):
                self._block_comment = _Frame(_BLOCK_COMMENT, number, i + 1)
                style = style or CommentStyle.BLOCK
                saw_comment = True
                i += 2
                continue
            if ch == '"':
                self._stack.append(_Frame(_STRING, number, i + 1))
            elif raw.startswith("''", i) and not _continues_identifier(code):
                self._stack.append(_Frame(_IND_STRING, number, i + 1))
                code.append("''")
                i += 2
                continue
            elif frame.kind == _ANTIQUOTE and ch == "{":
                frame.depth += 1
            elif frame.kind == _ANTIQUOTE and ch == "}":
                if frame.depth == 0:
                    self._stack.pop()
                else:
                    frame.depth -= 1
            code.append(ch)
            i += 1

        if self._block_comment is not None:
            comments.append(_clean_block_text("".join(chunk)))

        code_text = "".join(code)
        comment = " ".join(c for c in comments if c) if comments else None
        if code_text.strip() or (started_in_string and not saw_comment):
            kind = LineKind.CODE
        elif saw_comment:
            kind = LineKind.COMMENT
        else:
            kind = LineKind.BLANK
        return TaggedLine(
            number=number,
            kind=kind,
            text=raw,
            code=code_text,
            comment=comment,
            comment_style=style,
            in_string=started_in_string,
        )


def _continues_identifier(code: list[str]) -> bool:
    """True when the previous code character is part of an identifier."""
    if not code:
        return False
    return code[-1][-1:] in _IDENT_CHARS
