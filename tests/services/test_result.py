"""Tests for ServiceResult and ServiceError contracts."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pkgstore.domain.errors import CopyError, InputError, StoreError
from pkgstore.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success(self) -> None:
        result = ServiceResult(ok=True, op="install", data={"nodes": 2})
        assert result.ok
        assert result.data["nodes"] == 2
        assert result.error is None
        assert result.warnings == []
        assert result.meta is None

    def test_failure(self) -> None:
        err = ServiceError(code="DUPLICATE_KEY", message="dup")
        result = ServiceResult(ok=False, op="install", error=err)
        assert not result.ok
        assert result.error is not None
        assert result.error.detail == {}

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="copy")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_roundtrip(self) -> None:
        result = ServiceResult(
            ok=False,
            op="copy",
            error=ServiceError(code="COPY_FAILED", message="boom", detail={"worker": 0}),
            meta={"workers": 2},
        )
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result


class TestServiceErrorFromException:
    def test_default_code(self) -> None:
        err = ServiceError.from_exception(CopyError("disk full", detail={"path": "/x"}))
        assert err.code == "COPY_FAILED"
        assert err.message == "disk full"
        assert err.detail == {"path": "/x"}

    def test_explicit_code(self) -> None:
        err = ServiceError.from_exception(InputError("bad", code="INVALID_NAME"))
        assert err.code == "INVALID_NAME"
        assert err.detail == {}

    def test_base_error(self) -> None:
        exc = StoreError("generic")
        assert str(exc) == "generic"
        assert ServiceError.from_exception(exc).code == exc.default_code
