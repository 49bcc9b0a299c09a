"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from kbase.services.result import INDEX_MISSING, ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="tags", data={"total": 2})
        assert result.ok is True
        assert result.op == "tags"
        assert result.data == {"total": 2}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure("links", INDEX_MISSING, "No link index", index_dir="/tmp/x")
        assert result.ok is False
        assert result.op == "links"
        assert result.error is not None
        assert result.error.code == INDEX_MISSING
        assert result.error.message == "No link index"
        assert result.error.detail == {"index_dir": "/tmp/x"}

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="index",
            data={"documents": 3},
            warnings=["1 unresolved links (broken)"],
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["op"] == "index"
        assert parsed["data"]["documents"] == 3
        assert parsed["warnings"] == ["1 unresolved links (broken)"]
        assert parsed["error"] is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_detail_defaults_empty(self) -> None:
        error = ServiceError(code="NOT_FOUND", message="note not found: a.md")
        assert error.detail == {}
