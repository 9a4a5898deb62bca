"""Shared pytest fixtures and test helpers for pkgstore tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user env vars and config files out of every test."""
    for var in ("PKGSTORE_WORKERS_LIMIT", "PKGSTORE_CONFIG", "PKGSTORE_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store(tmp_path: Path) -> Path:
    """Empty store directory."""
    path = tmp_path / "store"
    path.mkdir()
    return path


@pytest.fixture
def make_package(tmp_path: Path) -> Callable[..., Path]:
    """Create a package payload directory under ``tmp_path/packages``.

    ``files`` maps relative paths to contents; defaults to a bare
    ``package.json``.
    """

    def _make(dirname: str, files: dict[str, str] | None = None) -> Path:
        root = tmp_path / "packages" / dirname
        root.mkdir(parents=True)
        for rel, content in (files or {"package.json": "{}"}).items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def node(key: str, name: str, location: Path | str, **kwargs: Any) -> dict[str, Any]:
    """Build a raw graph node mapping."""
    return {"key": key, "name": name, "location": str(location), **kwargs}


def link(source: str, target: str) -> dict[str, str]:
    """Build a raw graph link mapping."""
    return {"source": source, "target": target}


def resolves_to(entry: Path, target: Path) -> bool:
    """Whether *entry* exists and resolves to the same directory as *target*."""
    return entry.exists() and entry.resolve() == target.resolve()
