"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from nixcomment.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from nixcomment.services.result import ServiceResult

_SEVERITY_RANK = {"warning": 0, "error": 1}


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False, no_color: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console(no_color=no_color)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Lint results list the paths that fail: those with an issue at or
    above ``fail_on`` and those that could not be read. Rule listings list
    codes. Anything else collapses to ``OK: <op>``.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    issues = result.data.get("issues")
    if issues is not None:
        floor = _SEVERITY_RANK.get(str(result.data.get("fail_on", "warning")), 0)
        failing = [
            str(i.get("path", ""))
            for i in issues
            if _SEVERITY_RANK.get(str(i.get("severity")), 0) >= floor
        ]
        paths = dict.fromkeys([*failing, *result.data.get("unreadable", [])])
        if paths:
            return "\n".join(p for p in paths if p)

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("code", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


def render_concise(result: ServiceResult) -> str:
    """One ``path:line:col: CODE message`` line per issue.

    Results without issues render as the generic status output.
    """
    if "issues" not in result.data:
        return render_result(result)
    return "\n".join(
        f"{i['path']}:{i['line']}:{i['column']}: {i['rule']} {i['message']}"
        for i in result.data["issues"]
    )


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="nc.ok")
    op = Text(f"  {result.op}", style="nc.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="nc.key")
    if key == "code":
        v = Text(str(value), style="nc.code")
    elif key == "path":
        v = Text(str(value), style="nc.path")
    elif key == "severity":
        v = Text(str(value), style=style_for_severity(str(value)))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {name}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append(f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _issue_lines(console: Console, issues: list[dict[str, Any]], *, verbose: bool) -> None:
    """Print issues grouped by file, one ``line:col severity CODE message`` each."""
    by_path: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_path.setdefault(str(issue.get("path", "")), []).append(issue)

    for path, path_issues in by_path.items():
        console.print(Text(path, style="nc.path"))
        for issue in path_issues:
            sev = str(issue.get("severity", "warning"))
            line = Text("  ")
            line.append(f"{issue.get('line', 0)}:{issue.get('column', 0)}", style="nc.location")
            line.append("  ")
            line.append(sev, style=style_for_severity(sev))
            line.append(" ")
            line.append(str(issue.get("rule", "")), style="nc.code")
            line.append(f" {issue.get('message', '')}")
            console.print(line)
            if verbose and issue.get("suggestion"):
                console.print(Text(f"      fix: {issue['suggestion']}", style="dim"))
        console.print()


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="nc.error")
    op = Text(f"  {result.op}", style="nc.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Lint renderers ────────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render lint results with issues grouped by file."""
    d = result.data
    issues = d.get("issues", [])
    files = d.get("files_checked", 0)
    unreadable = d.get("unreadable", [])

    if not issues and not unreadable:
        console.print(
            Text("OK", style="nc.ok"),
            Text(f" No issues found in {_plural(files, 'file')}."),
        )
    else:
        _issue_lines(console, issues, verbose=verbose)
        for path in unreadable:
            line = Text(path, style="nc.path")
            line.append("  could not be read", style="nc.error")
            console.print(line)
        if unreadable:
            console.print()
        summary = (
            f"{_plural(d.get('error_count', 0), 'error')}, "
            f"{_plural(d.get('warning_count', 0), 'warning')} "
            f"in {_plural(files, 'file')}"
        )
        if unreadable:
            summary += f", {len(unreadable)} unreadable"
        console.print(Text(summary, style="nc.error" if d.get("failed") else "nc.warning"))

    if verbose:
        if d.get("files_skipped"):
            _field(console, "files_skipped", d["files_skipped"])
        _field(console, "rules", ", ".join(d.get("rules", [])))
        _render_meta(console, result)


def _render_guide(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render guide structure results."""
    d = result.data
    issues = d.get("issues", [])
    examples = d.get("examples", [])

    if not issues:
        console.print(
            Text("OK", style="nc.ok"),
            Text(
                f" {d.get('path', '')}: {_plural(len(examples), 'worked example')}, "
                f"{_plural(d.get('fences', 0), 'code block')}, no issues."
            ),
        )
    else:
        _issue_lines(console, issues, verbose=verbose)
        console.print(
            Text(
                f"{_plural(d.get('error_count', 0), 'error')}, "
                f"{_plural(d.get('warning_count', 0), 'warning')}",
                style="nc.error" if d.get("failed") else "nc.warning",
            )
        )

    if verbose:
        for example in examples:
            console.print(Text(f"  {example['line']}: {example['title']}", style="dim"))
        _render_meta(console, result)


# ── Rule renderers ────────────────────────────────────────────────────


def _render_rules(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the rule registry as a table."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Code", style="nc.code", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Summary")

    for item in result.data.get("items", []):
        sev = str(item.get("severity", ""))
        table.add_row(
            str(item.get("code", "")),
            str(item.get("name", "")),
            Text(sev, style=style_for_severity(sev)),
            str(item.get("summary", "")),
        )
    console.print(table)


def _render_rule(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single rule explanation."""
    d = result.data
    _status_line(console, result)
    for key in ("code", "name", "severity", "summary"):
        if key in d:
            _field(console, key, d[key])
    if d.get("explanation"):
        console.print()
        console.print(Text(f"  {d['explanation']}"))


# ── Init renderer ─────────────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render init_config results."""
    _status_line(console, result)
    _field(console, "path", result.data.get("path", ""))
    if result.data.get("overwritten"):
        _field(console, "overwritten", True)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "check": _render_check,
    "check_guide": _render_guide,
    "rules": _render_rules,
    "rule": _render_rule,
    "init_config": _render_init,
}
