"""Config file discovery.

``pkgstore.toml`` is looked up the way git finds ``.git/``: in the
start directory, then in each parent. ``PKGSTORE_CONFIG`` and the
``--config`` flag name a file directly and disable the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "pkgstore.toml"
CONFIG_ENV_VAR = "PKGSTORE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest pkgstore.toml at or above *start* (default: cwd).

    When ``PKGSTORE_CONFIG`` is set, return that file if it exists and
    None otherwise.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(explicit: str | Path | None, start: Path | None = None) -> Path | None:
    """Pick the config file for a run: *explicit* if given, else discovery.

    Raises:
        click.ClickException: If *explicit* names a file that does not exist.
    """
    if explicit is None:
        return find_config(start)
    path = Path(explicit)
    if not path.is_file():
        msg = f"Config file not found: {path}"
        raise click.ClickException(msg)
    return path


def load_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; a syntax error becomes a ClickException naming the file."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
