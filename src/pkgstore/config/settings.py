"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs   (CLI flags passed by Click)
  2. Env vars      (``PKGSTORE_*``, nested sections via ``__``)
  3. TOML file     (``pkgstore.toml`` discovered via walk-up)
  4. Code defaults (baked into the section models)
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pkgstore.config.discovery import load_toml, resolve_config
from pkgstore.config.models import LayoutConfig, PoolConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feed a parsed ``pkgstore.toml`` to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = load_toml(toml_path) if toml_path else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        fields = self.settings_cls.model_fields
        return {name: value for name, value in self._data.items() if name in fields}


# pydantic-settings builds sources from a classmethod, so the TOML path
# chosen by from_cli() is handed over per thread.
_tls = threading.local()


class StoreSettings(BaseSettings):
    """Settings for one pkgstore run. Frozen once built.

    Attributes:
        config_path: TOML file the settings were read from, if any.
        workers_limit: Copy worker cap from ``--workers`` or
            ``PKGSTORE_WORKERS_LIMIT``; overrides ``[pool] workers_limit``.
        pool: ``[pool]`` section, see :class:`PoolConfig`.
        layout: ``[layout]`` section, see :class:`LayoutConfig`.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PKGSTORE_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    workers_limit: int | None = Field(default=None, ge=1)

    pool: PoolConfig = Field(default_factory=PoolConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Drop dotenv and secrets; read TOML below env vars."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> StoreSettings:
        """Build settings for a CLI run.

        *config_path* (``--config``) wins over walk-up discovery from
        *start*. Flags passed as None leave env and TOML values alone.
        """
        toml_path = resolve_config(config_path, start)
        overrides = {name: value for name, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

    @property
    def effective_workers_limit(self) -> int:
        return self.workers_limit or self.pool.workers_limit
