"""Rich Console factory and theme for cglctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CGL_THEME = Theme(
    {
        "cgl.ok": "bold green",
        "cgl.error": "bold red",
        "cgl.warning": "bold yellow",
        "cgl.op": "bold cyan",
        "cgl.key": "dim",
        "cgl.id": "bold blue",
        "cgl.visible": "bold magenta",
        "cgl.title": "bold",
        "cgl.status.draft": "dim",
        "cgl.status.review": "yellow",
        "cgl.status.published": "green",
        "cgl.status.archived": "red",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "draft": "cgl.status.draft",
    "review": "cgl.status.review",
    "published": "cgl.status.published",
    "archived": "cgl.status.archived",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CGL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a publication status."""
    return _STATUS_STYLES.get(status, "")
