"""Tests for PluginManager — discovery, registration, and hook relay."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from pkgstore.config.settings import StoreSettings
from pkgstore.domain.errors import ShimError
from pkgstore.plugins.hookspecs import hookimpl
from pkgstore.plugins.manager import BUILTIN_SHIM_PLUGIN, PluginManager
from pkgstore.services.install import InstallService
from tests.conftest import link, node


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def write_shim(self, target: Path, shim_path: Path) -> bool | None:
        return None


class _TextShimPlugin:
    """Writes a shell wrapper instead of a symlink."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, Path]] = []

    @hookimpl
    def write_shim(self, target: Path, shim_path: Path) -> bool:
        self.calls.append((target, shim_path))
        shim_path.write_text(f'#!/bin/sh\nexec "{target}" "$@"\n')
        shim_path.chmod(0o755)
        return True


class _EntryPointStylePlugin:
    @hookimpl
    def write_shim(self, target: Path, shim_path: Path) -> bool | None:
        return None


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "write_shim")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_is_loaded_false_before_discover(self) -> None:
        assert PluginManager().is_loaded is False

    def test_discover_registers_builtin(self) -> None:
        pm = PluginManager()
        names = pm.discover_and_load()
        assert pm.is_loaded is True
        assert BUILTIN_SHIM_PLUGIN in names

    def test_discover_twice_keeps_one_builtin(self) -> None:
        pm = PluginManager()
        pm.discover_and_load()
        names = pm.discover_and_load()
        assert names.count(BUILTIN_SHIM_PLUGIN) == 1

    def test_class_plugins_are_instantiated(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_EntryPointStylePlugin, name="by-class")
        pm.discover_and_load()
        assert "by-class" in pm.list_plugin_names()
        hook_plugins = [impl.plugin for impl in pm.hook.write_shim.get_hookimpls()]
        assert any(isinstance(p, _EntryPointStylePlugin) for p in hook_plugins)


class TestShimDispatch:
    def test_unhandled_shim_raises(self, tmp_path: Path) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        with pytest.raises(ShimError) as exc_info:
            pm.write_shim(tmp_path / "cli.js", tmp_path / "cli")
        assert exc_info.value.code == "SHIM_FAILED"
        assert not (tmp_path / "cli").exists()

    def test_builtin_is_fallback(self, tmp_path: Path) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        pm.discover_and_load()
        script = tmp_path / "cli.js"
        script.write_text("")
        shim = tmp_path / "cli"
        assert pm.hook.write_shim(target=script, shim_path=shim) is True
        assert shim.is_symlink()

    def test_installed_writer_wins(
        self, store: Path, make_package: Callable[..., Path]
    ) -> None:
        app = make_package("app")
        tool = make_package("tool", {"cli.js": "x"})
        writer = _TextShimPlugin()
        pm = PluginManager()
        pm.register_plugin(writer, name="text-shim")
        service = InstallService(StoreSettings(), plugins=pm)

        result = service.install(
            {
                "nodes": [
                    node("app", "app", app),
                    node("tool", "tool", tool, bins={"t": "cli.js"}),
                ],
                "links": [link("app", "tool")],
            },
            store,
        )

        assert result.ok, result.error
        shim = store / "app" / "node_modules" / ".bin" / "t"
        assert not shim.is_symlink()
        assert str(store / "tool" / "cli.js") in shim.read_text()
        assert os.access(shim, os.X_OK)
        assert len(writer.calls) == 2
