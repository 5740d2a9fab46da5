"""Per-document footnote registry.

Tracks footnote definitions, pending forward references and diagnostics for
every document of a build. The registry is an explicit object: create one per
build (or session), pass it to every resolve/rewrite/render call, and
``reset()`` it between independent builds.

Thread Safety:
    State is sharded by document key. The key map is guarded by a lock and
    every DocumentFootnotes carries its own re-entrant lock, so different
    documents may be built from different threads against one registry.
    Occurrences within a single document must still be evaluated in order.

Example:
    >>> registry = FootnoteRegistry()
    >>> entry = registry.define("post.md", "css-counters", "CSS counters are ...")
    >>> entry.index
    1
    >>> registry.lookup("post.md", "css-counters") is entry
    True
    >>> registry.lookup("other.md", "css-counters") is None
    True

"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Literal

from notitas.errors import DuplicateFootnoteError
from notitas.utils.logger import get_logger

logger = get_logger(__name__)

DiagnosticKind = Literal["unresolved", "duplicate"]


def anchor_id(footnote_id: str, ordinal: int) -> str:
    """Anchor id of the ``ordinal``-th (1-based) reference to a footnote.

    The first reference gets the bare anchor, later ones a numeric suffix.

    Example:
        >>> anchor_id("a", 1)
        'a-ref'
        >>> anchor_id("a", 3)
        'a-ref-3'
    """
    if ordinal <= 1:
        return f"{footnote_id}-ref"
    return f"{footnote_id}-ref-{ordinal}"


def note_id(footnote_id: str) -> str:
    """Element id of a footnote's list item."""
    return f"{footnote_id}-note"


@dataclass(slots=True)
class FootnoteEntry:
    """A registered footnote definition.

    Attributes:
        id: Author-supplied id, unique within its document
        description: Footnote body (opaque markup), never changed after definition
        index: Shared display ordinal, 1 + entries defined before this one
        ref_count: References bound directly to this entry, including the
            defining one
        reserved: Placeholder ordinals promised before the definition existed

    """

    id: str
    description: str
    index: int
    ref_count: int = 1
    reserved: int = 0

    @property
    def occurrences(self) -> int:
        """Ordinals claimed so far for this id (placeholders plus bound references)."""
        return self.reserved + self.ref_count

    @property
    def note_id(self) -> str:
        return note_id(self.id)

    @property
    def first_anchor_id(self) -> str:
        return anchor_id(self.id, 1)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal footnote anomaly recorded for a document."""

    doc_key: Hashable
    footnote_id: str
    kind: DiagnosticKind
    message: str


class DocumentFootnotes:
    """Footnote state of a single document.

    Entries are kept in definition order, which is also index order.
    """

    __slots__ = ("key", "lock", "_entries", "_pending", "_diagnostics")

    def __init__(self, key: Hashable) -> None:
        self.key = key
        self.lock = threading.RLock()
        self._entries: dict[str, FootnoteEntry] = {}
        self._pending: dict[str, int] = {}
        self._diagnostics: list[Diagnostic] = []

    def define(self, footnote_id: str, description: str) -> FootnoteEntry:
        """Register the definition of ``footnote_id``.

        Consumes the pending count for the id: those placeholders keep the
        first ordinals, so the definition itself takes the next one.

        Raises:
            DuplicateFootnoteError: If the id already has an entry
        """
        with self.lock:
            if footnote_id in self._entries:
                raise DuplicateFootnoteError(self.key, footnote_id)
            entry = FootnoteEntry(
                id=footnote_id,
                description=description,
                index=len(self._entries) + 1,
                reserved=self._pending.pop(footnote_id, 0),
            )
            self._entries[footnote_id] = entry
            return entry

    def lookup(self, footnote_id: str) -> FootnoteEntry | None:
        return self._entries.get(footnote_id)

    def entries(self) -> tuple[FootnoteEntry, ...]:
        """Entries in the order their index was assigned."""
        return tuple(self._entries.values())

    def add_pending(self, footnote_id: str) -> int:
        """Count one more forward reference to an undefined id.

        Returns:
            The new pending count, which is also the placeholder's ordinal
        """
        with self.lock:
            count = self._pending.get(footnote_id, 0) + 1
            self._pending[footnote_id] = count
            return count

    def pending_count(self, footnote_id: str) -> int:
        return self._pending.get(footnote_id, 0)

    def report(self, footnote_id: str, kind: DiagnosticKind, message: str) -> Diagnostic:
        """Record a diagnostic and log it as a warning."""
        diagnostic = Diagnostic(self.key, footnote_id, kind, message)
        with self.lock:
            self._diagnostics.append(diagnostic)
        logger.warning("%s: %s", self.key, message)
        return diagnostic

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, footnote_id: object) -> bool:
        return footnote_id in self._entries

    def __repr__(self) -> str:
        return (
            f"DocumentFootnotes(key={self.key!r}, entries={len(self._entries)}, "
            f"pending={sum(self._pending.values())})"
        )


class FootnoteRegistry:
    """Footnote state for every document of a build, keyed by document key.

    Two document keys never share state. Nothing is removed implicitly:
    call ``discard()`` for one document or ``reset()`` between builds.
    """

    __slots__ = ("_documents", "_lock")

    def __init__(self) -> None:
        self._documents: dict[Hashable, DocumentFootnotes] = {}
        self._lock = threading.Lock()

    def document(self, doc_key: Hashable) -> DocumentFootnotes:
        """State for ``doc_key``, created on first use."""
        with self._lock:
            state = self._documents.get(doc_key)
            if state is None:
                state = self._documents[doc_key] = DocumentFootnotes(doc_key)
            return state

    def get_document(self, doc_key: Hashable) -> DocumentFootnotes | None:
        """State for ``doc_key`` if any operation touched it, else None."""
        return self._documents.get(doc_key)

    def define(self, doc_key: Hashable, footnote_id: str, description: str) -> FootnoteEntry:
        """Register a footnote definition.

        Raises:
            DuplicateFootnoteError: If the id is already defined in the document
        """
        return self.document(doc_key).define(footnote_id, description)

    def lookup(self, doc_key: Hashable, footnote_id: str) -> FootnoteEntry | None:
        state = self._documents.get(doc_key)
        return state.lookup(footnote_id) if state is not None else None

    def entries_in_definition_order(self, doc_key: Hashable) -> tuple[FootnoteEntry, ...]:
        state = self._documents.get(doc_key)
        return state.entries() if state is not None else ()

    def add_pending(self, doc_key: Hashable, footnote_id: str) -> int:
        return self.document(doc_key).add_pending(footnote_id)

    def pending_count(self, doc_key: Hashable, footnote_id: str) -> int:
        state = self._documents.get(doc_key)
        return state.pending_count(footnote_id) if state is not None else 0

    def report(
        self, doc_key: Hashable, footnote_id: str, kind: DiagnosticKind, message: str
    ) -> Diagnostic:
        return self.document(doc_key).report(footnote_id, kind, message)

    def diagnostics(self, doc_key: Hashable) -> tuple[Diagnostic, ...]:
        state = self._documents.get(doc_key)
        return state.diagnostics if state is not None else ()

    def discard(self, doc_key: Hashable) -> None:
        """Drop all state of one document (no-op if unknown)."""
        with self._lock:
            self._documents.pop(doc_key, None)

    def reset(self) -> None:
        """Drop the state of every document, ready for a new build."""
        with self._lock:
            count = len(self._documents)
            self._documents.clear()
        logger.debug("Footnote registry reset (%d documents dropped)", count)

    def __contains__(self, doc_key: object) -> bool:
        return doc_key in self._documents

    def __len__(self) -> int:
        """Number of documents with footnote state."""
        return len(self._documents)


__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DocumentFootnotes",
    "FootnoteEntry",
    "FootnoteRegistry",
    "anchor_id",
    "note_id",
]
