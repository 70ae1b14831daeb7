"""GuideService — structural checks over a Markdown commenting guide.

Verifies the worked examples and their explanations, and optionally lints
the Nix snippets themselves with the regular rule set, mapping snippet
line numbers back onto the Markdown file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from nixcomment.domain.checker import Issue, check_text
from nixcomment.domain.guide import (
    CodeFence,
    GuideOptions,
    check_guide,
    parse_guide,
    worked_examples,
)
from nixcomment.domain.rules import LintOptions, select_rules
from nixcomment.domain.types import Severity
from nixcomment.infrastructure.filesystem import display_path, read_source
from nixcomment.services.base import BaseService
from nixcomment.services.lint import summarize
from nixcomment.services.result import ServiceResult
from nixcomment.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class GuideService(BaseService):
    """Checks the structure of a Markdown style guide."""

    @traced
    def check_guide(
        self,
        path: str | Path,
        *,
        expected_examples: int | None = None,
        lint_snippets: bool | None = None,
    ) -> ServiceResult:
        op = "check_guide"
        guide_path = Path(path)
        if not guide_path.is_file():
            return ServiceResult.failure(
                op, "PATH_NOT_FOUND", f"No such file: {path}", path=str(path)
            )
        try:
            text = read_source(guide_path)
        except (OSError, UnicodeDecodeError) as exc:
            return ServiceResult.failure(op, "READ_FAILED", f"Cannot read {path}: {exc}")

        cfg = self._settings.guide
        options = GuideOptions(
            expected_examples=(
                cfg.expected_examples if expected_examples is None else expected_examples
            ),
            example_topics=tuple(cfg.example_topics),
            examples_section=cfg.examples_section,
            example_languages=tuple(cfg.example_languages),
            explain_all_fences=cfg.explain_all_fences,
        )
        shown = display_path(guide_path, self._settings.project_root)

        with trace_span("parse_guide"):
            doc = parse_guide(text)
        issues = check_guide(doc, options, path=shown)

        if cfg.lint_snippets if lint_snippets is None else lint_snippets:
            try:
                rules = select_rules(self._settings.lint.select, self._settings.lint.ignore)
            except KeyError as exc:
                return ServiceResult.failure(op, "UNKNOWN_RULE", str(exc.args[0]))
            overrides = self._severity_overrides(op)
            if isinstance(overrides, ServiceResult):
                return overrides
            lint_options = LintOptions(
                line_length=self._settings.lint.line_length,
                min_block_lines=self._settings.lint.min_block_lines,
            )
            with trace_span("lint_snippets"):
                for fence in doc.fences:
                    if fence.is_nix and fence.end is not None:
                        issues.extend(_lint_snippet(fence, rules, lint_options, overrides, shown))
            issues.sort()

        examples = worked_examples(doc, options)
        data: dict[str, Any] = {
            "path": shown,
            "issues": [i.to_dict() for i in issues],
            **summarize(issues, fail_on=Severity(self._settings.lint.fail_on)),
            "fences": len(doc.fences),
            "examples": [{"line": f.line, "title": f.title} for f in examples],
        }
        logger.debug("Checked guide %s: %d issues", shown, len(issues))
        return ServiceResult(ok=True, op=op, data=data)


def _lint_snippet(
    fence: CodeFence,
    rules: list[Any],
    options: LintOptions,
    overrides: dict[str, Severity],
    path: str,
) -> list[Issue]:
    """Lint one fenced snippet; line numbers are shifted to the Markdown file."""
    report = check_text(
        fence.content,
        rules,
        path=path,
        options=options,
        severity_overrides=overrides,
    )
    return [
        Issue(
            path=issue.path,
            line=issue.line + fence.line,
            column=issue.column,
            rule=issue.rule,
            severity=issue.severity,
            message=issue.message,
            name=issue.name,
            suggestion=issue.suggestion,
        )
        for issue in report.issues
    ]
