"""Rich rendering for pkgstore's human-readable output.

Markup is rendered into a StringIO-backed Console so formatters return
plain strings. In non-TTY environments (tests, pipes) Rich drops color
codes on its own.
"""

from __future__ import annotations

from collections.abc import Iterable
from io import StringIO

from rich.console import Console
from rich.theme import Theme

STORE_THEME = Theme(
    {
        "store.ok": "bold green",
        "store.error": "bold red",
        "store.warning": "bold yellow",
        "store.op": "bold cyan",
        "store.key": "dim",
        "store.code": "bold magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Return a themed Console writing to an in-memory buffer (120 columns by default)."""
    return Console(
        file=StringIO(),
        theme=STORE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render_lines(lines: Iterable[str], *, no_color: bool = False) -> str:
    """Render markup *lines* one per row, never wrapping; no trailing newline."""
    console = create_console(no_color=no_color)
    for line in lines:
        console.print(line, soft_wrap=True)
    return get_output(console).rstrip("\n")
