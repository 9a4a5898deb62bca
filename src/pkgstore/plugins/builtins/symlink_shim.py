"""Built-in shim writer: a relative symlink to the script, made executable."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from pkgstore.plugins.hookspecs import hookimpl

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class SymlinkShimPlugin:
    """Fallback ``write_shim`` used when no installed plugin handles the bin.

    The shim is a symlink, so the script itself must be executable: missing
    exec bits are added to *target* in place. For a ``keepInPlace`` node the
    script lives in the caller's own tree, outside the store, and is modified
    there. Install a ``write_shim`` plugin that writes wrapper scripts to keep
    such sources untouched.
    """


    @hookimpl(trylast=True)
    def write_shim(self, target: Path, shim_path: Path) -> bool:
        if shim_path.is_symlink() or shim_path.exists():
            shim_path.unlink()
        os.symlink(os.path.relpath(target, shim_path.parent), shim_path)
        mode = target.stat().st_mode
        if mode & _EXEC_BITS != _EXEC_BITS:
            target.chmod(mode | _EXEC_BITS)
        return True
