"""Command: bulk parallel file copy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from pkgstore.commands._base import JsonDocument, StoreCommand

if TYPE_CHECKING:
    from pkgstore.commands._context import AppContext


@click.command(
    "copy",
    cls=StoreCommand,
    examples="""\
  pkgstore copy actions.json
  pkgstore --workers 4 --json copy actions.json""",
)
@click.argument("actions", metavar="ACTIONS_FILE", type=JsonDocument(list))
@click.pass_obj
def copy_cmd(app: AppContext, actions: list[Any]) -> None:
    """Copy every {"src", "dest"} pair listed in ACTIONS_FILE.

    Destination directories must already exist.
    """
    from pkgstore.services.copy import CopyService

    app.emit(CopyService(app.settings).copy(actions))
