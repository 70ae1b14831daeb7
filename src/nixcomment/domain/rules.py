"""Lint rules and the rule registry.

Each rule is a pure function from a :class:`LintContext` to findings.
Built-in rules are registered at import time; plugins add more through
:func:`register_rule`. Rule codes are stable and never reused.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from nixcomment.domain.lexer import LexResult, TaggedLine
from nixcomment.domain.structure import (
    Block,
    binding_path,
    parse_alternative,
    parse_assignments,
    split_blocks,
)
from nixcomment.domain.types import LineKind, Severity

# Matches "NC004", "X123": rule codes are letters followed by digits.
_CODE_PATTERN = re.compile(r"^[A-Z]+\d+$")


@dataclass(frozen=True)
class LintOptions:
    """Tunables the rule functions read."""

    line_length: int = 100
    min_block_lines: int = 1


@dataclass(frozen=True)
class Finding:
    """A rule hit before path and severity are attached."""

    line: int
    column: int
    message: str
    suggestion: str = ""


@dataclass
class LintContext:
    """Everything a rule may look at for one file."""

    lex: LexResult
    options: LintOptions = field(default_factory=LintOptions)
    blocks: list[Block] = field(init=False)

    def __post_init__(self) -> None:
        self.blocks = split_blocks(self.lex.lines)

    @property
    def lines(self) -> list[TaggedLine]:
        return self.lex.lines

    def header_blocks(self) -> Iterator[Block]:
        """Blocks large enough to need a What/Does/Why header."""
        for block in self.blocks:
            if len(block.substantive_lines) >= self.options.min_block_lines:
                yield block


RuleCheck = Callable[[LintContext], Iterable[Finding]]


@dataclass(frozen=True)
class Rule:
    """A registered lint rule."""

    code: str
    name: str
    severity: Severity
    summary: str
    check: RuleCheck = field(compare=False, repr=False)
    explanation: str = ""

    def describe(self) -> dict[str, str]:
        return {
            "code": self.code,
            "name": self.name,
            "severity": str(self.severity),
            "summary": self.summary,
            "explanation": self.explanation,
        }


RULE_REGISTRY: dict[str, Rule] = {}


def register_rule(rule: Rule) -> None:
    """Add *rule* to :data:`RULE_REGISTRY`. Registering the same rule twice is a no-op.

    Raises:
        TypeError: If *rule* is not a :class:`Rule`.
        ValueError: If the code is malformed or the code or name is taken.
    """
    if not isinstance(rule, Rule):
        msg = f"Expected a Rule, got {type(rule).__name__}"
        raise TypeError(msg)
    if not _CODE_PATTERN.match(rule.code):
        msg = f"Rule code {rule.code!r} must be uppercase letters followed by digits"
        raise ValueError(msg)
    existing = RULE_REGISTRY.get(rule.code)
    if existing is not None and existing.check is rule.check:
        return
    if existing is not None:
        msg = f"Rule code {rule.code!r} is already registered"
        raise ValueError(msg)
    if any(r.name == rule.name for r in RULE_REGISTRY.values()):
        msg = f"Rule name {rule.name!r} is already registered"
        raise ValueError(msg)
    RULE_REGISTRY[rule.code] = rule


def get_rule(ref: str) -> Rule:
    """Look up a rule by code (case-insensitive) or by name.

    Raises:
        KeyError: If no rule matches *ref*.
    """
    code = ref.strip().upper()
    if code in RULE_REGISTRY:
        return RULE_REGISTRY[code]
    for rule in RULE_REGISTRY.values():
        if rule.name == ref.strip().lower():
            return rule
    msg = f"Unknown rule: {ref!r}"
    raise KeyError(msg)


def all_rules() -> list[Rule]:
    """Registered rules sorted by code."""
    return sorted(RULE_REGISTRY.values(), key=lambda r: r.code)


def select_rules(
    select: Iterable[str] = (),
    ignore: Iterable[str] = (),
) -> list[Rule]:
    """Resolve select/ignore lists (codes, names, or code prefixes).

    An empty *select* means every registered rule. Raises KeyError for a
    reference that matches nothing.
    """
    chosen = _resolve_refs(select) if select else all_rules()
    ignored = {r.code for r in _resolve_refs(ignore)}
    return [r for r in chosen if r.code not in ignored]


def _resolve_refs(refs: Iterable[str]) -> list[Rule]:
    found: dict[str, Rule] = {}
    for ref in refs:
        ref = ref.strip()
        if not ref:
            continue
        prefixed = [r for r in all_rules() if r.code.startswith(ref.upper())]
        if prefixed and ref.upper() not in RULE_REGISTRY:
            for rule in prefixed:
                found[rule.code] = rule
            continue
        rule = get_rule(ref)
        found[rule.code] = rule
    return sorted(found.values(), key=lambda r: r.code)


# ---------------------------------------------------------------------------
# Built-in rule functions
# ---------------------------------------------------------------------------


def _check_unterminated(ctx: LintContext) -> Iterator[Finding]:
    for token in ctx.lex.unterminated:
        yield Finding(
            line=token.line,
            column=token.column,
            message=f"Unterminated {token.token}",
            suggestion=f"Close the {token.token} opened here",
        )


def _check_missing_header(ctx: LintContext) -> Iterator[Finding]:
    for block in ctx.header_blocks():
        header = block.header()
        if header is None or header.lines:
            continue
        first = block.substantive_lines[0]
        yield Finding(
            line=first.number,
            column=first.indent + 1,
            message="Code block has no block comment",
            suggestion="Add '# What:', '# Does:' and '# Why:' lines above the block",
        )


def _check_incomplete_header(ctx: LintContext) -> Iterator[Finding]:
    for block in ctx.header_blocks():
        header = block.header()
        if header is None or not header.lines or not header.missing:
            continue
        missing = ", ".join(header.missing)
        first = header.lines[0]
        yield Finding(
            line=first.number,
            column=first.indent + 1,
            message=f"Block comment is missing: {missing}",
            suggestion="Label each part as 'What:', 'Does:' and 'Why:'",
        )


def _check_header_order(ctx: LintContext) -> Iterator[Finding]:
    for block in ctx.header_blocks():
        header = block.header()
        if header is None or header.missing or header.in_order:
            continue
        first = header.lines[0]
        yield Finding(
            line=first.number,
            column=first.indent + 1,
            message="Block comment parts are out of order (expected What, Does, Why)",
        )


def _check_inline_comment(ctx: LintContext) -> Iterator[Finding]:
    for line in ctx.lines:
        if line.comment is not None:
            continue
        for assignment in parse_assignments(line):
            if not assignment.is_scalar:
                continue
            yield Finding(
                line=line.number,
                column=assignment.column,
                message=f"Scalar assignment '{assignment.attr_path}' has no inline comment",
                suggestion="Append a '# ...' comment explaining the value",
            )


def _check_orphan_alternative(ctx: LintContext) -> Iterator[Finding]:
    for block in ctx.blocks:
        live = {path for ln in block.lines if (path := binding_path(ln)) is not None}
        for line in block.lines:
            alt = parse_alternative(line)
            if alt is None or alt.attr_path in live:
                continue
            yield Finding(
                line=line.number,
                column=line.indent + 1,
                message=(
                    f"Alternative setting '{alt.attr_path}' has no live "
                    "assignment in the same block"
                ),
                suggestion="Keep alternatives directly beside the value they replace",
            )


def _check_line_length(ctx: LintContext) -> Iterator[Finding]:
    limit = ctx.options.line_length
    for line in ctx.lines:
        length = len(line.text.rstrip())
        if length > limit:
            yield Finding(
                line=line.number,
                column=limit + 1,
                message=f"Line too long ({length} > {limit})",
            )


def _check_empty_comment(ctx: LintContext) -> Iterator[Finding]:
    for line in ctx.lines:
        if line.kind is LineKind.CODE and line.comment == "":
            yield Finding(
                line=line.number,
                column=len(line.code.rstrip()) + 2,
                message="Inline comment is empty",
            )


BUILTIN_RULES: tuple[Rule, ...] = (
    Rule(
        code="NC000",
        name="unterminated-token",
        severity=Severity.ERROR,
        summary="A string, antiquotation, or block comment is never closed.",
        check=_check_unterminated,
        explanation=(
            "Everything after the opening quote or '/*' is read as part of the "
            "token, so comment checks on the rest of the file are unreliable."
        ),
    ),
    Rule(
        code="NC001",
        name="missing-block-comment",
        severity=Severity.ERROR,
        summary="A code block has no block comment above it.",
        check=_check_missing_header,
        explanation=(
            "Every code-bearing block (a run of non-blank lines) starts with a "
            "comment describing What the block is, what it Does, and Why it "
            "exists. Blocks made only of brackets and 'in'/'let' are exempt."
        ),
    ),
    Rule(
        code="NC002",
        name="incomplete-block-comment",
        severity=Severity.WARNING,
        summary="A block comment lacks one of What, Does, or Why.",
        check=_check_incomplete_header,
        explanation="Each part is a comment line starting with its label and a colon.",
    ),
    Rule(
        code="NC003",
        name="block-comment-order",
        severity=Severity.WARNING,
        summary="Block comment parts are not in What, Does, Why order.",
        check=_check_header_order,
    ),
    Rule(
        code="NC004",
        name="missing-inline-comment",
        severity=Severity.WARNING,
        summary="A scalar assignment has no trailing inline comment.",
        check=_check_inline_comment,
        explanation=(
            "Strings, numbers, booleans, null, paths and URIs assigned on a "
            "single line carry a '# ...' comment explaining their effect."
        ),
    ),
    Rule(
        code="NC005",
        name="orphan-alternative",
        severity=Severity.WARNING,
        summary="A commented-out alternative has no live value beside it.",
        check=_check_orphan_alternative,
        explanation=(
            "Alternative settings are retained beside the live value for "
            "reference. One without a live assignment of the same attribute "
            "in its block is dead code."
        ),
    ),
    Rule(
        code="NC006",
        name="line-too-long",
        severity=Severity.WARNING,
        summary="A line exceeds the configured maximum length.",
        check=_check_line_length,
    ),
    Rule(
        code="NC007",
        name="empty-comment",
        severity=Severity.WARNING,
        summary="A trailing inline comment has no text.",
        check=_check_empty_comment,
    ),
)


def _register_builtin_rules() -> None:
    for rule in BUILTIN_RULES:
        RULE_REGISTRY.setdefault(rule.code, rule)


_register_builtin_rules()
