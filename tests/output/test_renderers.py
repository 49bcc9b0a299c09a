"""Tests for the op-specific renderers."""

from __future__ import annotations

from kbase.output.renderers import render_note, render_quiet, render_result
from kbase.services.result import ServiceResult


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=data)


class TestIndex:
    def test_summary(self) -> None:
        out = render_result(
            _ok(
                "index",
                vault="work",
                documents=3,
                tags={"count": 1, "path": "/i/tags.json"},
                links={
                    "count": 2,
                    "unresolved": 1,
                    "forward_path": "/i/links-forward.json",
                    "backward_path": "/i/links-backward.json",
                },
            )
        )
        assert "OK  index" in out
        assert "Built tag index: 1 unique tag" in out
        assert "Built link index: 2 links" in out
        assert "1 unresolved links (broken)" in out
        assert "/i/links-forward.json" in out

    def test_tags_only(self) -> None:
        out = render_result(_ok("index", vault="w", documents=0, tags={"count": 0, "path": "/t"}))
        assert "Built tag index: 0 unique tags" in out
        assert "link index" not in out


class TestTags:
    def test_empty(self) -> None:
        assert render_result(_ok("tags", items=[], total=0)) == "No tags found."

    def test_tagged_notes(self) -> None:
        out = render_result(_ok("tagged_notes", tag="x", domain=None, items=[{"path": "a/one.md"}]))
        assert out == "a/one.md"

    def test_tagged_notes_empty_in_domain(self) -> None:
        out = render_result(_ok("tagged_notes", tag="x", domain="b", items=[]))
        assert out == "No notes with tag 'x' in domain 'b'."


class TestLinks:
    def test_sections(self) -> None:
        out = render_result(
            _ok(
                "links",
                note="a/one.md",
                indexed=True,
                forward={"total": 1, "links": ["a/two.md"]},
                backward={"total": 0, "links": []},
            )
        )
        assert out.splitlines() == [
            "Links for a/one.md",
            "",
            "Forward links (1):",
            "  a/two.md",
            "",
            "Backward links (0):",
        ]

    def test_not_indexed(self) -> None:
        out = render_result(
            _ok("links", note="b/two.md", indexed=False, forward={"total": 0, "links": []})
        )
        assert out == "No links found for b/two.md"

    def test_quiet_lists_paths(self) -> None:
        result = _ok(
            "links",
            note="a/two.md",
            indexed=True,
            forward={"total": 1, "links": ["c.md"]},
            backward={"total": 1, "links": ["a/one.md"]},
        )
        assert render_quiet(result) == "c.md\na/one.md"


class TestDomainsAndNotes:
    def test_domains_without_descriptions(self) -> None:
        out = render_result(
            _ok("domains", items=[{"name": "lucene", "count": 12, "description": None}], total=1)
        )
        assert "lucene" in out
        assert "12" in out
        assert "Description" not in out

    def test_domains_with_descriptions(self) -> None:
        out = render_result(
            _ok("domains", items=[{"name": "lucene", "count": 1, "description": "Search"}], total=1)
        )
        assert "Description" in out
        assert "Search" in out

    def test_no_domains(self) -> None:
        assert render_result(_ok("domains", items=[], total=0)) == "No domains found in vault."

    def test_list_notes(self) -> None:
        out = render_result(
            _ok("list_notes", items=[{"path": "a/one.md", "title": "One"}], total=1, domain=None, tag=None)
        )
        assert "a/one.md" in out
        assert "One" in out
        assert out.endswith("1 note")

    def test_list_notes_empty_messages(self) -> None:
        def empty(domain: str | None, tag: str | None) -> str:
            return render_result(_ok("list_notes", items=[], total=0, domain=domain, tag=tag))

        assert empty(None, None) == "No notes found."
        assert empty("a", None) == "No notes in domain 'a'."
        assert empty(None, "x") == "No notes with tag 'x'."
        assert empty("a", "x") == "No notes in domain 'a' with tag 'x'."


class TestReadNote:
    def test_content_untouched(self) -> None:
        data = {"path": "a.md", "content": "[bold]x[/bold]\n\ty\n", "line_count": 2}
        assert render_result(_ok("read", **data)) == "[bold]x[/bold]\n\ty"

    def test_line_numbers(self) -> None:
        data = {"content": "one\ntwo\n", "line_count": 2, "line_numbers": True}
        assert render_note(data) == "     1\tone\n     2\ttwo"

    def test_outline(self) -> None:
        data = {
            "outline": True,
            "line_count": 9,
            "headings": [
                {"level": 1, "text": "Title", "line": 1},
                {"level": 3, "text": "Deep", "line": 9},
            ],
        }
        assert render_note(data) == "# Title\n    ### Deep"
        assert render_note({**data, "line_numbers": True}) == "     1\t# Title\n     9\t    ### Deep"


class TestErrorsAndQuiet:
    def test_error(self) -> None:
        result = ServiceResult.failure("links", "INDEX_MISSING", "No link index found.", index_dir="/i")
        assert render_result(result) == "ERROR  links — No link index found."
        assert "index_dir: /i" in render_result(result, verbose=True)

    def test_quiet_error(self) -> None:
        result = ServiceResult.failure("read", "NOT_FOUND", "note not found: x.md")
        assert render_quiet(result) == "ERROR: read — note not found: x.md"

    def test_quiet_without_items(self) -> None:
        assert render_quiet(_ok("config", config_file="/c")) == "OK: config"

    def test_generic_fallback(self) -> None:
        out = render_result(_ok("other", answer=42, nested={"a": 1}))
        assert "OK  other" in out
        assert "answer: 42" in out
        assert 'nested: {"a":1}' in out

    def test_verbose_timing_report(self) -> None:
        result = ServiceResult(
            ok=True,
            op="index",
            data={"vault": "v", "documents": 3},
            meta={
                "timing": {
                    "operation": "IndexService.build",
                    "elapsed_ms": 1.5,
                    "stages": [
                        {"name": "scan", "elapsed_ms": 0.5, "counts": {"documents": 3, "unresolved": 0}},
                        {"name": "save_tags", "elapsed_ms": 0.25},
                    ],
                }
            },
        )
        out = render_result(result, verbose=True)
        lines = out.splitlines()
        assert " " * 8 + "1.50ms  IndexService.build" in lines
        assert " " * 12 + "0.50ms  scan  (documents=3, unresolved=0)" in lines
        assert " " * 12 + "0.25ms  save_tags" in lines

    def test_timing_hidden_without_verbose(self) -> None:
        result = ServiceResult(
            ok=True,
            op="tags",
            data={"items": []},
            meta={"timing": {"operation": "TagService.list_tags", "elapsed_ms": 1.0, "stages": []}},
        )
        assert "TagService.list_tags" not in render_result(result)
