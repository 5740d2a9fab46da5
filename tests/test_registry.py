"""Tests for the per-document footnote registry."""

import pytest

from notitas import DuplicateFootnoteError, FootnoteRegistry
from notitas.registry import DocumentFootnotes, FootnoteEntry, anchor_id, note_id


class TestAnchorIds:
    """Anchor and note id helpers."""

    def test_first_ordinal_is_bare(self) -> None:
        assert anchor_id("a", 1) == "a-ref"

    def test_later_ordinals_are_suffixed(self) -> None:
        assert anchor_id("a", 2) == "a-ref-2"
        assert anchor_id("a", 10) == "a-ref-10"

    def test_note_id(self) -> None:
        assert note_id("css-counters") == "css-counters-note"


class TestFootnoteEntry:
    """FootnoteEntry counters."""

    def test_defaults(self) -> None:
        entry = FootnoteEntry(id="a", description="D", index=1)
        assert entry.ref_count == 1
        assert entry.reserved == 0
        assert entry.occurrences == 1
        assert entry.first_anchor_id == "a-ref"
        assert entry.note_id == "a-note"

    def test_occurrences_include_reserved(self) -> None:
        entry = FootnoteEntry(id="a", description="D", index=1, ref_count=2, reserved=3)
        assert entry.occurrences == 5


class TestDefine:
    """FootnoteRegistry.define index assignment."""

    def test_indices_follow_definition_order(self) -> None:
        registry = FootnoteRegistry()
        first = registry.define("doc", "b", "B")
        second = registry.define("doc", "a", "A")
        assert (first.index, second.index) == (1, 2)
        ids = [e.id for e in registry.entries_in_definition_order("doc")]
        assert ids == ["b", "a"]

    def test_new_entry_has_one_reference(self) -> None:
        registry = FootnoteRegistry()
        entry = registry.define("doc", "a", "A")
        assert entry.ref_count == 1
        assert entry.description == "A"

    def test_define_twice_raises(self) -> None:
        registry = FootnoteRegistry()
        registry.define("doc", "a", "A")
        with pytest.raises(DuplicateFootnoteError) as exc_info:
            registry.define("doc", "a", "again")
        assert exc_info.value.footnote_id == "a"
        assert exc_info.value.doc_key == "doc"
        # The failed call must not disturb existing state
        entries = registry.entries_in_definition_order("doc")
        assert len(entries) == 1
        assert entries[0].description == "A"

    def test_define_consumes_pending_count(self) -> None:
        registry = FootnoteRegistry()
        registry.add_pending("doc", "a")
        registry.add_pending("doc", "a")
        assert registry.pending_count("doc", "a") == 2

        entry = registry.define("doc", "a", "A")
        assert entry.reserved == 2
        assert entry.occurrences == 3
        assert registry.pending_count("doc", "a") == 0

    def test_pending_of_other_ids_untouched(self) -> None:
        registry = FootnoteRegistry()
        registry.add_pending("doc", "a")
        registry.add_pending("doc", "b")
        registry.define("doc", "a", "A")
        assert registry.pending_count("doc", "b") == 1


class TestDocumentIsolation:
    """State is partitioned by document key."""

    def test_same_id_in_two_documents(self) -> None:
        registry = FootnoteRegistry()
        x1 = registry.define("one.md", "x", "first")
        x2 = registry.define("two.md", "x", "second")
        assert x1.index == 1
        assert x2.index == 1
        assert registry.lookup("one.md", "x").description == "first"
        assert registry.lookup("two.md", "x").description == "second"

    def test_lookup_unknown_document(self) -> None:
        registry = FootnoteRegistry()
        assert registry.lookup("missing.md", "x") is None
        assert registry.entries_in_definition_order("missing.md") == ()
        assert registry.pending_count("missing.md", "x") == 0
        assert registry.diagnostics("missing.md") == ()
        # Read-only queries do not create document state
        assert "missing.md" not in registry

    def test_any_hashable_key(self) -> None:
        registry = FootnoteRegistry()
        registry.define(("site", 3), "a", "A")
        assert registry.lookup(("site", 3), "a") is not None


class TestLifecycle:
    """discard() and reset()."""

    def test_discard_one_document(self) -> None:
        registry = FootnoteRegistry()
        registry.define("one.md", "a", "A")
        registry.define("two.md", "a", "A")
        registry.discard("one.md")
        assert "one.md" not in registry
        assert "two.md" in registry
        assert len(registry) == 1

    def test_discard_unknown_is_noop(self) -> None:
        FootnoteRegistry().discard("nope")

    def test_reset_starts_a_fresh_build(self) -> None:
        registry = FootnoteRegistry()
        registry.define("one.md", "a", "A")
        registry.add_pending("two.md", "b")
        registry.reset()
        assert len(registry) == 0
        assert registry.define("one.md", "a", "again").index == 1

    def test_document_is_created_once(self) -> None:
        registry = FootnoteRegistry()
        state = registry.document("doc")
        assert isinstance(state, DocumentFootnotes)
        assert registry.document("doc") is state
        assert registry.get_document("doc") is state
        assert registry.get_document("other") is None


class TestDiagnostics:
    """Recorded diagnostics."""

    def test_report_records_and_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = FootnoteRegistry()
        with caplog.at_level("WARNING", logger="notitas"):
            diagnostic = registry.report("doc", "c", "unresolved", "c is missing")
        assert registry.diagnostics("doc") == (diagnostic,)
        assert diagnostic.kind == "unresolved"
        assert diagnostic.footnote_id == "c"
        assert any("c is missing" in r.getMessage() for r in caplog.records)
        assert all(r.name == "notitas.registry" for r in caplog.records)
