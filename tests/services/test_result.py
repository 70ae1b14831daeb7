"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from nixcomment.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"count": 0})
        assert result.ok is True
        assert result.op == "check"
        assert result.data == {"count": 0}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="PATH_NOT_FOUND", message="No such file")
        result = ServiceResult(ok=False, op="check", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "PATH_NOT_FOUND"

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure(
            "rule", "UNKNOWN_RULE", "Unknown rule: X", warnings=["w"], known=["NC001"]
        )
        assert result.ok is False
        assert result.op == "rule"
        assert result.error is not None
        assert result.error.detail == {"known": ["NC001"]}
        assert result.warnings == ["w"]

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"count": 2}, meta={"telemetry": {}})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["count"] == 2
        assert parsed["meta"] == {"telemetry": {}}

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="check")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_detail_defaults_empty(self) -> None:
        assert ServiceError(code="X", message="m").detail == {}
