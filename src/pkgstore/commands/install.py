"""Command: install a dependency graph into a store directory."""

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
  pkgstore install graph.json /tmp/store
  pkgstore --workers 2 install graph.json "$PWD/store"
  pkgstore --json install graph.json /tmp/store""",
)
@click.argument("graph", metavar="GRAPH_FILE", type=JsonDocument(dict))
@click.argument("location", type=click.Path(path_type=Path))
@click.pass_obj
def install(app: AppContext, graph: dict[str, Any], location: Path) -> None:
    """Install the graph in GRAPH_FILE into the empty directory LOCATION.

    GRAPH_FILE holds {"nodes": [...], "links": [...]}; LOCATION must be
    an absolute path to an existing, empty directory.
    """
    from pkgstore.services.install import InstallService

    app.emit(InstallService(app.settings).install(graph, location))
