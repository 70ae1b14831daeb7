"""Rich Console factory and theme for nixcomment output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

NC_THEME = Theme(
    {
        "nc.ok": "bold green",
        "nc.error": "bold red",
        "nc.warning": "bold yellow",
        "nc.op": "bold cyan",
        "nc.key": "dim",
        "nc.code": "bold blue",
        "nc.path": "bold",
        "nc.location": "dim",
        "nc.title": "bold",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "nc.error",
    "warning": "nc.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=NC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    """Return the Rich style name for an issue severity."""
    return _SEVERITY_STYLES.get(severity, "")
