"""Turn a ServiceResult into CLI output.

Human mode prints a status line (``OK: install`` or
``ERROR: install: <message> [CODE]``) followed, unless quiet, by one
``key: value`` line per data entry. JSON mode dumps the whole result.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape

from pkgstore.output.console import render_lines

if TYPE_CHECKING:
    from pkgstore.services.result import ServiceResult


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    return str(value)


def _status_line(result: ServiceResult) -> str:
    op = f"[store.op]{escape(result.op)}[/]"
    if result.ok:
        return f"[store.ok]OK[/]: {op}"
    if result.error is None:
        return f"[store.error]ERROR[/]: {op}: Unknown error"
    code = f"[store.code]\\[{escape(result.error.code)}][/]"
    return f"[store.error]ERROR[/]: {op}: {escape(result.error.message)} {code}"


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
    no_color: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: Return the JSON dump instead of human-readable text.
        quiet: Print only the status line.
        no_color: Disable ANSI escape codes.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    lines = [_status_line(result)]
    if result.ok and not quiet:
        lines.extend(
            f"  [store.key]{escape(key)}[/]: {escape(_format_value(value))}"
            for key, value in result.data.items()
        )
    return render_lines(lines, no_color=no_color)
