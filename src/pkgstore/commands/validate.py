"""Command: check a dependency graph without installing it."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from pkgstore.commands._base import JsonDocument, StoreCommand

if TYPE_CHECKING:
    from pkgstore.commands._context import AppContext


@click.command(
    cls=StoreCommand,
    examples="""\
  pkgstore validate graph.json
  pkgstore validate graph.json /tmp/store""",
)
@click.argument("graph", metavar="GRAPH_FILE", type=JsonDocument(dict))
@click.argument("location", required=False, type=click.Path(path_type=Path))
@click.pass_obj
def validate(app: AppContext, graph: dict[str, Any], location: Path | None) -> None:
    """Validate GRAPH_FILE, and LOCATION when given, without writing anything."""
    from pkgstore.services.install import InstallService

    app.emit(InstallService(app.settings).validate(graph, location))
