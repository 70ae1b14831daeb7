"""LintService — run comment-style rules over Nix sources.

Single command following the linter pattern: discover files, lint each
one, report issues. Also answers rule listing and rule explanation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from nixcomment.domain.checker import FileReport, Issue, check_text
from nixcomment.domain.rules import LintOptions, Rule, all_rules, get_rule, select_rules
from nixcomment.domain.types import Severity
from nixcomment.infrastructure.filesystem import discover_files, display_path, read_source
from nixcomment.services.base import BaseService
from nixcomment.services.result import ServiceResult
from nixcomment.services.telemetry import get_current_span, trace_span, traced

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


def summarize(issues: list[Issue], *, fail_on: Severity) -> dict[str, Any]:
    """Counts and the pass/fail verdict shared by every report."""
    errors = sum(1 for i in issues if i.severity is Severity.ERROR)
    warnings = len(issues) - errors
    return {
        "count": len(issues),
        "error_count": errors,
        "warning_count": warnings,
        "healthy": errors == 0,
        "fail_on": str(fail_on),
        "failed": any(i.severity.rank >= fail_on.rank for i in issues),
    }


class LintService(BaseService):
    """Lints Nix files against the commenting conventions."""

    @traced
    def check(
        self,
        paths: Sequence[str | Path] = (".",),
        *,
        select: Sequence[str] | None = None,
        ignore: Sequence[str] | None = None,
        line_length: int | None = None,
        min_severity: str = "warning",
        fail_on: str | None = None,
        stdin_text: str | None = None,
        stdin_filename: str = "<stdin>",
    ) -> ServiceResult:
        """Lint *paths* and report every issue at or above *min_severity*.

        A path of ``-`` lints *stdin_text* under *stdin_filename*.
        Extra *select*/*ignore* entries are added to the configured ones.
        """
        op = "check"
        lint_cfg = self._settings.lint

        try:
            rules = select_rules(
                [*lint_cfg.select, *(select or [])],
                [*lint_cfg.ignore, *(ignore or [])],
            )
        except KeyError as exc:
            return ServiceResult.failure(op, "UNKNOWN_RULE", str(exc.args[0]))

        options = LintOptions(
            line_length=line_length or lint_cfg.line_length,
            min_block_lines=lint_cfg.min_block_lines,
        )
        overrides = self._severity_overrides(op)
        if isinstance(overrides, ServiceResult):
            return overrides
        threshold = Severity(min_severity)
        fail_threshold = Severity(fail_on or lint_cfg.fail_on)

        warnings: list[str] = []
        unreadable: list[str] = []
        reports: list[FileReport] = []
        file_paths = [p for p in paths if str(p) != STDIN_PATH]

        if len(file_paths) != len(paths):
            if stdin_text is None:
                return ServiceResult.failure(op, "READ_FAILED", "No input provided on stdin")
            reports.append(
                check_text(
                    stdin_text,
                    rules,
                    path=stdin_filename,
                    options=options,
                    severity_overrides=overrides,
                )
            )

        if file_paths:
            files = self._discover(file_paths)
            if isinstance(files, ServiceResult):
                return files
            with trace_span("lint_files") as span:
                for path in files:
                    report = self._lint_file(path, rules, options, overrides, warnings, unreadable)
                    if report is not None:
                        reports.append(report)
                if span is not None:
                    span.annotate("files", len(files))

        issues = [
            issue
            for report in reports
            for issue in report.issues
            if issue.severity.rank >= threshold.rank
        ]
        issues.sort()

        self._dispatch_event(
            "post_check",
            {"files_checked": len(reports), "issues_found": len(issues)},
            warnings,
        )

        data: dict[str, Any] = {
            "issues": [i.to_dict() for i in issues],
            **summarize(issues, fail_on=fail_threshold),
            "files_checked": len(reports),
            "unreadable": unreadable,
            "files_skipped": sum(1 for r in reports if r.skipped),
            "rules": [r.code for r in rules],
        }
        if unreadable:
            data["failed"] = True
        logger.debug(
            "Linted %d files: %d errors, %d warnings",
            data["files_checked"],
            data["error_count"],
            data["warning_count"],
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def list_rules(self) -> ServiceResult:
        """Every registered rule with its effective severity."""
        overrides = self._severity_overrides("rules")
        if isinstance(overrides, ServiceResult):
            return overrides
        items = [self._describe(rule, overrides) for rule in all_rules()]
        return ServiceResult(ok=True, op="rules", data={"items": items, "count": len(items)})

    def explain(self, ref: str) -> ServiceResult:
        """Describe one rule by code or name."""
        try:
            rule = get_rule(ref)
        except KeyError:
            return ServiceResult.failure(
                "rule",
                "UNKNOWN_RULE",
                f"Unknown rule: {ref}",
                known=[r.code for r in all_rules()],
            )
        overrides = self._severity_overrides("rule")
        if isinstance(overrides, ServiceResult):
            return overrides
        return ServiceResult(ok=True, op="rule", data=self._describe(rule, overrides))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _discover(self, paths: Sequence[str | Path]) -> list[Path] | ServiceResult:
        files_cfg = self._settings.files
        found = discover_files(paths, include=files_cfg.include, exclude=files_cfg.exclude)
        if found.missing:
            return ServiceResult.failure(
                "check",
                "PATH_NOT_FOUND",
                f"No such file or directory: {', '.join(found.missing)}",
                paths=found.missing,
            )
        if not found.files:
            return ServiceResult.failure(
                "check",
                "NO_FILES",
                "No files matched "
                f"{', '.join(files_cfg.include)} under {', '.join(map(str, paths))}",
            )
        span = get_current_span()
        if span is not None:
            span.annotate("discovered", len(found.files))
        return found.files

    def _lint_file(
        self,
        path: Path,
        rules: list[Rule],
        options: LintOptions,
        overrides: dict[str, Severity],
        warnings: list[str],
        unreadable: list[str],
    ) -> FileReport | None:
        shown = display_path(path, self._settings.project_root)
        try:
            text = read_source(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", shown, exc)
            warnings.append(f"READ_FAILED: {shown}: {exc}")
            unreadable.append(shown)
            return None
        report = check_text(
            text,
            rules,
            path=shown,
            options=options,
            severity_overrides=overrides,
        )
        if report.skipped:
            logger.debug("Skipped %s (skip-file directive)", shown)
        return report

    @staticmethod
    def _describe(rule: Rule, overrides: dict[str, Severity]) -> dict[str, str]:
        described = rule.describe()
        described["severity"] = str(overrides.get(rule.code, rule.severity))
        return described
