"""CopyService — standalone bulk parallel copy."""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import TypeAdapter, ValidationError

from pkgstore.domain.actions import CopyAction
from pkgstore.domain.errors import InputError, StoreError
from pkgstore.infrastructure.copy_engine import CopyPool, pool_size_for
from pkgstore.services.base import BaseService
from pkgstore.services.result import ServiceResult

if TYPE_CHECKING:
    from pkgstore.config.settings import StoreSettings

log = structlog.get_logger(__name__)

_ACTIONS = TypeAdapter(list[CopyAction])


class CopyService(BaseService):
    """Copies files through the worker pool."""

    def copy(self, actions: Iterable[CopyAction | Mapping[str, Any]]) -> ServiceResult:
        """Copy every ``{src, dest}`` action; fail on the first I/O error.

        Destination directories must already exist. Nothing copied before
        a failure is removed.
        """
        op = "copy"
        started = time.perf_counter()
        pool = CopyPool(pool_size_for(self._settings.effective_workers_limit))
        try:
            validated = self._coerce_actions(actions)
            pool.run(validated)
        except StoreError as exc:
            return self._failure(op, exc, workers=len(pool.workers))

        log.debug("files copied", files=len(validated), workers=len(pool.workers))
        return ServiceResult(
            ok=True,
            op=op,
            data={"files": len(validated)},
            meta={
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "workers": len(pool.workers),
                "pool_size": pool.size,
            },
        )

    def _coerce_actions(
        self, actions: Iterable[CopyAction | Mapping[str, Any]]
    ) -> list[CopyAction]:
        try:
            validated = _ACTIONS.validate_python(list(actions))
        except ValidationError as exc:
            raise self._input_error(exc, code="INVALID_ACTIONS", what="copy actions") from exc
        for i, action in enumerate(validated):
            for path in (action.src, action.dest):
                if not path.is_absolute():
                    raise InputError(
                        f'Copy action {i} path is not absolute: "{path}"',
                        code="ACTION_NOT_ABSOLUTE",
                        detail={"index": i, "path": str(path)},
                    )
        return validated


def copy_files(
    actions: Iterable[CopyAction | Mapping[str, Any]],
    *,
    settings: StoreSettings | None = None,
) -> ServiceResult:
    """Copy every action in parallel, resolving once all copies completed."""
    return CopyService(settings).copy(actions)
