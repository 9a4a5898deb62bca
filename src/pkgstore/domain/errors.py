"""Error taxonomy for store installation.

Infrastructure and domain code raise these; the service layer converts
them into a failed :class:`~pkgstore.services.result.ServiceResult`.
None of them are retried or recovered locally.
"""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base class for every installation failure.

    Attributes:
        code: Machine-readable error code (e.g. ``"DUPLICATE_KEY"``).
        detail: Offending keys, names, or paths.
    """

    default_code = "STORE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail = detail or {}


class InputError(StoreError):
    """Location, graph, or bin validation failed. Raised before any disk mutation."""

    default_code = "INVALID_INPUT"


class CopyError(StoreError):
    """Copying a node payload failed. Already-copied files are left on disk."""

    default_code = "COPY_FAILED"


class LinkError(StoreError):
    """Creating a namespace directory or symlink failed."""

    default_code = "LINK_FAILED"


class ShimError(StoreError):
    """Writing a bin shim failed."""

    default_code = "SHIM_FAILED"
