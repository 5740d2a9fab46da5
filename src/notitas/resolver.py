"""Reference resolution for footnote occurrences.

Each reference occurrence is resolved once, in evaluation (document) order.
Resolution either defines the footnote, attaches to an existing definition,
or defers the occurrence as a placeholder that the rewrite pass completes
once the whole document is known.

Anchor ids per footnote id come from a single occurrence counter:
placeholders emitted before the definition take ordinals 1..p (filled in by
the rewriter in text order), the definition takes p + 1, and every later
reference continues from there. Ordinal 1 is the bare ``{id}-ref`` anchor.

Example:
    >>> registry = FootnoteRegistry()
    >>> first = resolve(registry, "post.md", "Alice", "names", "All names are pseudonyms.")
    >>> first.anchor_id, first.index
    ('names-ref', 1)
    >>> second = resolve(registry, "post.md", "Bob", "names")
    >>> second.anchor_id, second.index
    ('names-ref-2', 1)

"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from notitas.config import FootnotesConfig, get_footnotes_config
from notitas.errors import DuplicateFootnoteError
from notitas.registry import (
    DocumentFootnotes,
    FootnoteEntry,
    FootnoteRegistry,
    anchor_id,
    note_id,
)
from notitas.renderers.html import render_anchor, render_placeholder
from notitas.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Anchor:
    """A reference bound to a known footnote definition."""

    footnote_id: str
    content: str
    index: int
    ordinal: int

    @property
    def anchor_id(self) -> str:
        return anchor_id(self.footnote_id, self.ordinal)

    @property
    def href(self) -> str:
        return f"#{note_id(self.footnote_id)}"

    def render(self, config: FootnotesConfig | None = None) -> str:
        return render_anchor(self, config)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A forward reference whose footnote is not defined yet.

    Carries only what the rewrite pass needs: the id and the display content.
    """

    footnote_id: str
    content: str

    def render(self, config: FootnotesConfig | None = None) -> str:
        return render_placeholder(self)

    def __str__(self) -> str:
        return self.render()


RenderedReference = Anchor | Placeholder


def _attach(entry: FootnoteEntry, content: str) -> Anchor:
    entry.ref_count += 1
    return Anchor(entry.id, content, entry.index, entry.occurrences)


def _define(
    state: DocumentFootnotes, content: str, footnote_id: str, description: str
) -> Anchor:
    entry = state.define(footnote_id, description)
    if entry.reserved:
        logger.debug(
            "%s: footnote %r defined after %d forward reference(s)",
            state.key,
            footnote_id,
            entry.reserved,
        )
    return Anchor(entry.id, content, entry.index, entry.occurrences)


def resolve(
    registry: FootnoteRegistry,
    doc_key: Hashable,
    content: str,
    footnote_id: str,
    description: str | None = None,
    *,
    config: FootnotesConfig | None = None,
) -> RenderedReference:
    """Resolve one reference occurrence.

    An empty description counts as no description: the occurrence attaches to
    an existing definition or is deferred, it never defines the footnote.

    A description for an id that is already defined attaches to the existing
    entry (the first description wins) and records a "duplicate" diagnostic.

    Args:
        registry: Registry of the current build
        doc_key: Document the occurrence belongs to
        content: Display content of the reference (opaque markup)
        footnote_id: Footnote id
        description: Footnote body when this occurrence defines it
        config: Active config if None; only ``strict`` is consulted here

    Returns:
        Anchor when a definition is known, Placeholder otherwise

    Raises:
        DuplicateFootnoteError: On a repeated definition in strict mode
    """
    state = registry.document(doc_key)
    with state.lock:
        entry = state.lookup(footnote_id)

        if not description:
            if entry is not None:
                return _attach(entry, content)
            ordinal = state.add_pending(footnote_id)
            logger.debug("%s: deferring reference %d to %r", doc_key, ordinal, footnote_id)
            return Placeholder(footnote_id, content)

        if entry is None:
            return _define(state, content, footnote_id, description)

        config = config or get_footnotes_config()
        if config.strict:
            raise DuplicateFootnoteError(doc_key, footnote_id)
        state.report(
            footnote_id,
            "duplicate",
            f"Footnote {footnote_id!r} is defined more than once; "
            "keeping the first description",
        )
        return _attach(entry, content)


__all__ = [
    "Anchor",
    "Placeholder",
    "RenderedReference",
    "resolve",
]
