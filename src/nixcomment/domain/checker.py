"""Run a rule set over one source text and collect issues.

Pure function layer between the rules and the lint service: applies
suppression directives and severity overrides, and sorts the result.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Any

from nixcomment.domain.directives import file_is_skipped, is_ignored, line_ignores
from nixcomment.domain.lexer import tag_lines
from nixcomment.domain.rules import LintContext, LintOptions, Rule
from nixcomment.domain.types import Severity


@dataclass(frozen=True, order=True)
class Issue:
    """One diagnostic, ordered by location then rule code."""

    path: str
    line: int
    column: int
    rule: str
    severity: Severity
    message: str
    name: str = ""
    suggestion: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["severity"] = str(self.severity)
        return data


@dataclass(frozen=True)
class FileReport:
    """Outcome of linting one text."""

    path: str
    issues: list[Issue]
    skipped: bool = False


def check_text(
    text: str,
    rules: Iterable[Rule],
    *,
    path: str = "<string>",
    options: LintOptions | None = None,
    severity_overrides: Mapping[str, Severity] | None = None,
) -> FileReport:
    """Lint *text* with *rules*.

    Rule exceptions propagate: a broken rule is a programming error, not a
    lint finding.
    """
    lex = tag_lines(text)
    if file_is_skipped(lex.lines):
        return FileReport(path=path, issues=[], skipped=True)

    ctx = LintContext(lex=lex, options=options or LintOptions())
    ignores = line_ignores(lex.lines)
    overrides = severity_overrides or {}

    issues: list[Issue] = []
    for rule in rules:
        severity = overrides.get(rule.code, rule.severity)
        for finding in rule.check(ctx):
            if is_ignored(ignores, finding.line, rule.code):
                continue
            issues.append(
                Issue(
                    path=path,
                    line=finding.line,
                    column=finding.column,
                    rule=rule.code,
                    severity=severity,
                    message=finding.message,
                    name=rule.name,
                    suggestion=finding.suggestion,
                )
            )
    issues.sort()
    return FileReport(path=path, issues=issues)
