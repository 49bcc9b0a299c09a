"""Tests for NoteService: domains, list_notes, read."""

from __future__ import annotations

from pathlib import Path

from kbase.infrastructure.vault import Vault
from kbase.services.index import IndexService
from kbase.services.notes import NoteService

from tests.conftest import write_note


class TestDomains:
    def test_by_name(self, vault: Vault) -> None:
        result = NoteService(vault).domains()
        assert result.ok
        assert result.data["items"] == [
            {"name": "a", "count": 2, "description": None},
            {"name": "b", "count": 1, "description": None},
        ]
        assert result.data["total"] == 2

    def test_by_count(self, vault: Vault, vault_root: Path) -> None:
        write_note(vault_root, "c/1.md", "")
        write_note(vault_root, "c/2.md", "")
        write_note(vault_root, "c/3.md", "")
        result = NoteService(vault).domains(sort="count")
        assert [item["name"] for item in result.data["items"]] == ["c", "a", "b"]

    def test_count_ties_by_name(self, vault: Vault, vault_root: Path) -> None:
        write_note(vault_root, "0/x.md", "")
        result = NoteService(vault).domains(sort="count")
        assert [item["name"] for item in result.data["items"]] == ["a", "0", "b"]

    def test_description(self, vault: Vault, vault_root: Path) -> None:
        write_note(vault_root, "a/_description.md", "Alpha notes\n")
        result = NoteService(vault).domains()
        assert result.data["items"][0]["description"] == "Alpha notes"
        assert result.data["items"][0]["count"] == 2


class TestListNotes:
    def test_all(self, vault: Vault) -> None:
        result = NoteService(vault).list_notes()
        assert result.ok
        assert [item["path"] for item in result.data["items"]] == ["a/one.md", "a/two.md", "b/two.md"]
        assert result.data["total"] == 3

    def test_titles(self, vault: Vault, vault_root: Path) -> None:
        write_note(vault_root, "a/two.md", "# Second Note\nbody")
        result = NoteService(vault).list_notes(domain="a")
        assert result.data["items"] == [
            {"path": "a/one.md", "title": "one"},
            {"path": "a/two.md", "title": "Second Note"},
        ]
        assert result.data["domain"] == "a"

    def test_unknown_domain(self, vault: Vault) -> None:
        result = NoteService(vault).list_notes(domain="zzz")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_by_tag(self, vault: Vault) -> None:
        IndexService(vault).build()
        result = NoteService(vault).list_notes(tag="#x")
        assert result.ok
        assert result.data["tag"] == "x"
        assert [item["path"] for item in result.data["items"]] == ["a/one.md"]

    def test_by_tag_and_domain(self, vault: Vault) -> None:
        IndexService(vault).build()
        result = NoteService(vault).list_notes(tag="x", domain="b")
        assert result.ok
        assert result.data["items"] == []

    def test_by_tag_in_unknown_domain(self, vault: Vault) -> None:
        IndexService(vault).build()
        result = NoteService(vault).list_notes(tag="x", domain="zzz")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_by_tag_needs_index(self, vault: Vault) -> None:
        result = NoteService(vault).list_notes(tag="x")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INDEX_MISSING"

    def test_stale_tag_entry(self, vault: Vault, vault_root: Path) -> None:
        IndexService(vault).build()
        (vault_root / "a" / "one.md").unlink()
        result = NoteService(vault).list_notes(tag="x")
        assert result.ok
        assert result.data["items"] == []
        assert result.warnings == ["stale index entry: a/one.md"]


class TestRead:
    def test_content(self, vault: Vault) -> None:
        result = NoteService(vault).read("a/one.md")
        assert result.ok
        assert result.data["path"] == "a/one.md"
        assert result.data["content"] == "#x [[two]]"
        assert result.data["line_count"] == 1
        assert result.data["outline"] is False

    def test_extension_optional(self, vault: Vault) -> None:
        result = NoteService(vault).read("a/one")
        assert result.ok
        assert result.data["path"] == "a/one.md"

    def test_outline(self, vault: Vault, vault_root: Path) -> None:
        write_note(vault_root, "a/two.md", "# Title\n\ntext\n\n## Section\n\n### Sub\n")
        result = NoteService(vault).read("a/two.md", outline=True)
        assert result.ok
        assert "content" not in result.data
        assert result.data["title"] == "Title"
        assert result.data["headings"] == [
            {"level": 1, "text": "Title", "line": 1},
            {"level": 2, "text": "Section", "line": 5},
            {"level": 3, "text": "Sub", "line": 7},
        ]

    def test_line_numbers_flag_recorded(self, vault: Vault) -> None:
        result = NoteService(vault).read("a/one.md", line_numbers=True)
        assert result.data["line_numbers"] is True

    def test_missing(self, vault: Vault) -> None:
        result = NoteService(vault).read("a/nope.md")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_outside_vault(self, vault: Vault) -> None:
        result = NoteService(vault).read("../secret.md")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
