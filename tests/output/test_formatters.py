"""Tests for format_result mode selection."""

from __future__ import annotations

import json

from kbase.output.formatters import OutputSettings, format_result
from kbase.services.result import ServiceResult

_TAGS = ServiceResult(
    ok=True,
    op="tags",
    data={"items": [{"tag": "db", "count": 2}, {"tag": "rust", "count": 1}], "total": 2},
)


class TestFormatResult:
    def test_json(self) -> None:
        parsed = json.loads(format_result(_TAGS, json_output=True))
        assert parsed["ok"] is True
        assert parsed["data"]["items"][0] == {"tag": "db", "count": 2}

    def test_json_beats_quiet(self) -> None:
        out = format_result(_TAGS, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["op"] == "tags"

    def test_quiet(self) -> None:
        assert format_result(_TAGS, settings=OutputSettings(quiet=True)) == "db\nrust"

    def test_human(self) -> None:
        assert format_result(_TAGS) == "db (2 notes)\nrust (1 note)"

    def test_error_json(self) -> None:
        result = ServiceResult.failure("tags", "INDEX_MISSING", "No tag index found.")
        parsed = json.loads(format_result(result, json_output=True))
        assert parsed["ok"] is False
        assert parsed["error"]["code"] == "INDEX_MISSING"
