"""Plugin discovery and shim-writer dispatch.

Shim writers come from two places: the built-in symlink writer, always
registered and tried last, and pip-installed packages advertising a
plugin in the ``pkgstore.plugins`` entry-point group.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from pkgstore.domain.errors import ShimError
from pkgstore.plugins.builtins.symlink_shim import SymlinkShimPlugin
from pkgstore.plugins.hookspecs import PkgstoreHookSpec

if TYPE_CHECKING:
    from pathlib import Path

PROJECT_NAME = "pkgstore"
ENTRY_POINT_GROUP = "pkgstore.plugins"
BUILTIN_SHIM_PLUGIN = "symlink-shim"

logger = logging.getLogger(__name__)


class PluginManager:
    """Owns the pluggy manager and dispatches ``write_shim`` calls."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PkgstoreHookSpec)
        self._loaded = False

    def discover_and_load(self) -> list[str]:
        """Register the built-in shim writer, then entry-point plugins.

        Calling it again is harmless. Returns the registered plugin names.
        """
        if self._pm.get_plugin(BUILTIN_SHIM_PLUGIN) is None:
            self.register_plugin(SymlinkShimPlugin(), name=BUILTIN_SHIM_PLUGIN)
        found = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if found:
            logger.debug("Loaded %d entry-point plugins from %s", found, ENTRY_POINT_GROUP)
        self._instantiate_class_plugins()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin object; *name* defaults to its class name."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def write_shim(self, target: Path, shim_path: Path) -> None:
        """Ask the registered writers for a shim at *shim_path* running *target*.

        Raises:
            ShimError: If no writer handled the request.
        """
        if not self.hook.write_shim(target=target, shim_path=shim_path):
            raise ShimError(
                f'No shim writer handled "{shim_path}"',
                detail={"script": str(target), "shim": str(shim_path)},
            )

    def _instantiate_class_plugins(self) -> None:
        """Swap plugin classes registered by entry points for instances.

        A hook dispatched against a class would leave ``self`` unbound.
        Classes that cannot be instantiated are dropped with a warning.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not _has_hook_impls(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate shim plugin %s", plugin_name, exc_info=True)
                continue
            self._pm.register(instance, name=plugin_name)


def _has_hook_impls(cls: type) -> bool:
    """Whether *cls* has a public method marked by ``hookimpl``.

    The ``HookimplMarker("pkgstore")`` sets a ``pkgstore_impl`` attribute.
    """
    return any(
        callable(member) and getattr(member, f"{PROJECT_NAME}_impl", None)
        for name, member in inspect.getmembers(cls)
        if not name.startswith("_")
    )
