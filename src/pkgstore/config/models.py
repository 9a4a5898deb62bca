"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pkgstore.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# npm/yarn cache bookkeeping left next to extracted payloads.
DEFAULT_EXCLUDED_FILES: tuple[str, ...] = (".yarn-metadata.json", ".yarn-tarball.tgz")


class PoolConfig(BaseModel):
    """[pool] section."""

    model_config = {"frozen": True}

    # Upper bound on copy workers; the pool is further capped at ceil(cpus / 2).
    workers_limit: int = Field(default=999, ge=1)
    # Threads used for linking and shim generation.
    task_workers: int = Field(default=8, ge=1)


class LayoutConfig(BaseModel):
    """[layout] section."""

    model_config = {"frozen": True}

    namespace_dir: str = "node_modules"
    bin_dir: str = ".bin"
    excluded_files: tuple[str, ...] = DEFAULT_EXCLUDED_FILES
