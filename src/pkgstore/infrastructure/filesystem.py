"""Source tree walking for node materialization.

The walk mirrors a node's directory structure under its install path and
returns a flat list of :class:`CopyAction` for the files, so that every
payload can be handed to the copy engine as a single unit of work.
"""

from __future__ import annotations

import os
from collections.abc import Collection
from pathlib import Path

from pkgstore.domain.actions import CopyAction
from pkgstore.domain.errors import CopyError


def plan_tree_copy(
    source: Path,
    destination: Path,
    *,
    excluded_files: Collection[str] = (),
) -> list[CopyAction]:
    """Create *destination*'s directory tree and list the files to copy into it.

    *destination* must already exist. Directories (including symlinked
    ones) are recreated eagerly; regular files become copy actions unless
    their name is in *excluded_files*. Other entry types are skipped.
    """
    actions: list[CopyAction] = []
    pending: list[tuple[Path, Path]] = [(source, destination)]
    try:
        while pending:
            src_dir, dest_dir = pending.pop()
            with os.scandir(src_dir) as entries:
                for entry in entries:
                    src = Path(entry.path)
                    dest = dest_dir / entry.name
                    if entry.is_dir():
                        dest.mkdir()
                        pending.append((src, dest))
                    elif entry.is_file() and entry.name not in excluded_files:
                        actions.append(CopyAction(src=src, dest=dest))
    except OSError as exc:
        raise CopyError(
            f'Could not copy "{source}" to "{destination}": {exc}',
            detail={"source": str(source), "destination": str(destination)},
        ) from exc
    return actions
