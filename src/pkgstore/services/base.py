"""BaseService — shared foundation for pkgstore services.

Every service receives :class:`StoreSettings` at construction time and
lazily builds the plugin manager the first time it is needed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from pkgstore.config.settings import StoreSettings
from pkgstore.domain.errors import InputError
from pkgstore.plugins.manager import PluginManager
from pkgstore.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pkgstore.domain.errors import StoreError

log = structlog.get_logger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class InstallService(BaseService):
            def install(self, graph, location) -> ServiceResult:
                try:
                    ...
                except StoreError as exc:
                    return self._failure("install", exc)
    """

    def __init__(
        self,
        settings: StoreSettings | None = None,
        *,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings or StoreSettings()
        self._plugins = plugins

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager, discovered and loaded on first access."""
        if self._plugins is None:
            self._plugins = PluginManager()
        if not self._plugins.is_loaded:
            self._plugins.discover_and_load()
        return self._plugins

    @staticmethod
    def _failure(op: str, exc: StoreError, **meta: Any) -> ServiceResult:
        log.info("operation failed", op=op, code=exc.code, error=exc.message)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError.from_exception(exc),
            meta=meta or None,
        )

    @staticmethod
    def _input_error(exc: ValidationError, *, code: str, what: str) -> InputError:
        """Wrap a pydantic boundary validation failure."""
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"])
        return InputError(
            f"Invalid {what} at {where or '<root>'}: {first['msg']}",
            code=code,
            detail={"errors": exc.error_count()},
        )
