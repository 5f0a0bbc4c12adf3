"""Rich Console factory and theme for todoctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TODO_THEME = Theme(
    {
        "todo.ok": "bold green",
        "todo.error": "bold red",
        "todo.warning": "bold yellow",
        "todo.op": "bold cyan",
        "todo.key": "dim",
        "todo.id": "bold blue",
        "todo.title": "bold",
        "todo.date": "magenta",
        "todo.overdue": "bold red",
        "todo.status.active": "yellow",
        "todo.status.completed": "green",
        "todo.status.canceled": "dim",
        "todo.status.pending": "yellow",
        "todo.status.sent": "green",
        "todo.status.dismissed": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=TODO_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a task or reminder status."""
    style = f"todo.status.{status}"
    return style if style in TODO_THEME.styles else ""
