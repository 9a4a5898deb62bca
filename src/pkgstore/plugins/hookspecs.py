"""Pluggy hook specifications for pkgstore.

The shim file format is not part of pkgstore: bin shims are produced by
whichever ``write_shim`` implementation answers first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pathlib import Path

hookspec = pluggy.HookspecMarker("pkgstore")
hookimpl = pluggy.HookimplMarker("pkgstore")


class PkgstoreHookSpec:
    """Hook specifications for the pkgstore plugin system."""

    @hookspec(firstresult=True)
    def write_shim(self, target: Path, shim_path: Path) -> bool | None:
        """Create an executable at *shim_path* that runs the script *target*.

        Return True when the shim was written, None to let the next
        implementation handle it.
        """
