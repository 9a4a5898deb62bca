"""Extension layer — shim writers via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
The built-in symlink writer is always registered and runs last.
"""

from pkgstore.plugins.manager import PluginManager

__all__ = ["PluginManager"]
