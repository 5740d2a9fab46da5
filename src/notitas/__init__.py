"""
notitas — Footnotes with forward references for templated HTML documents

Assigns stable anchor ids, shared display indices and back links to footnote
references, and tolerates references that appear before their definition
through a two-phase resolve-then-rewrite protocol. Zero runtime dependencies.

Quick Start:
    >>> from notitas import Footnotes
    >>> fn = Footnotes()
    >>> page = fn.page("posts/counters.md")
    >>> body = page.ref("CSS counters", "css-counters")           # placeholder
    >>> body += page.ref("counters", "css-counters", "Variables maintained by CSS.")
    >>> html = page.rewrite(body) + page.render_list()

Lower-level API:
    >>> from notitas import FootnoteRegistry, resolve, rewrite, render_footnotes
    >>> registry = FootnoteRegistry()
    >>> anchor = resolve(registry, "a.md", "Alice", "names", "Pseudonyms.")
    >>> str(anchor)
    '<a class="Footnotes__ref" href="#names-note" id="names-ref" ...>Alice</a>'

Template hosts:
    >>> from notitas import FootnotesPlugin
    >>> FootnotesPlugin().register(host)
"""

from collections.abc import Hashable

from notitas.config import (
    BackLinkLabel,
    FootnotesConfig,
    default_back_link_label,
    footnotes_config_context,
    get_footnotes_config,
    reset_footnotes_config,
    set_footnotes_config,
)
from notitas.errors import (
    ConfigError,
    DuplicateFootnoteError,
    FootnoteError,
    NotitasError,
    UnresolvedFootnoteError,
)
from notitas.plugin import FootnotesPlugin, TemplateHost
from notitas.registry import (
    Diagnostic,
    DocumentFootnotes,
    FootnoteEntry,
    FootnoteRegistry,
    anchor_id,
    note_id,
)
from notitas.renderers.html import attrs, render_anchor, render_footnotes, render_placeholder
from notitas.resolver import Anchor, Placeholder, RenderedReference, resolve
from notitas.rewriter import PLACEHOLDER_PATTERN, rewrite

__version__ = "0.1.0"


class Footnotes:
    """High-level footnote engine: one config plus one registry.

    Example:
        >>> fn = Footnotes(FootnotesConfig(title="Notes"))
        >>> html = fn.ref("a.md", "Alice", "names", "Pseudonyms.")
        >>> html += fn.render_list("a.md")
        >>> fn.reset()  # between builds

    Thread Safety:
        Documents are sharded inside the registry, so different documents
        may be processed from different threads.

    """

    __slots__ = ("config", "registry")

    def __init__(
        self,
        config: FootnotesConfig | None = None,
        registry: FootnoteRegistry | None = None,
    ) -> None:
        self.config = config or get_footnotes_config()
        self.registry = registry if registry is not None else FootnoteRegistry()

    def resolve(
        self,
        doc_key: Hashable,
        content: str,
        footnote_id: str,
        description: str | None = None,
    ) -> RenderedReference:
        """Resolve one reference occurrence without rendering it."""
        return resolve(
            self.registry, doc_key, content, footnote_id, description, config=self.config
        )

    def ref(
        self,
        doc_key: Hashable,
        content: str,
        footnote_id: str,
        description: str | None = None,
    ) -> str:
        """Resolve one reference occurrence and render its markup."""
        return self.resolve(doc_key, content, footnote_id, description).render(self.config)

    def rewrite(self, doc_key: Hashable, text: str) -> str:
        """Run the rewrite pass over a document's rendered markup."""
        return rewrite(self.registry, doc_key, text, config=self.config)

    def render_list(self, doc_key: Hashable) -> str:
        """Render a document's footnotes list ("" without footnotes)."""
        return render_footnotes(self.registry, doc_key, config=self.config)

    def diagnostics(self, doc_key: Hashable) -> tuple[Diagnostic, ...]:
        return self.registry.diagnostics(doc_key)

    def page(self, doc_key: Hashable) -> "Page":
        """Bind the engine to one document."""
        return Page(self, doc_key)

    def reset(self) -> None:
        """Forget all documents, ready for a new build."""
        self.registry.reset()


class Page:
    """A Footnotes engine bound to a single document key."""

    __slots__ = ("engine", "doc_key")

    def __init__(self, engine: Footnotes, doc_key: Hashable) -> None:
        self.engine = engine
        self.doc_key = doc_key

    def ref(self, content: str, footnote_id: str, description: str | None = None) -> str:
        return self.engine.ref(self.doc_key, content, footnote_id, description)

    def rewrite(self, text: str) -> str:
        return self.engine.rewrite(self.doc_key, text)

    def render_list(self) -> str:
        return self.engine.render_list(self.doc_key)

    @property
    def entries(self) -> tuple[FootnoteEntry, ...]:
        return self.engine.registry.entries_in_definition_order(self.doc_key)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.engine.diagnostics(self.doc_key)


__all__ = [  # noqa: RUF022 — grouped by category
    # Version
    "__version__",
    # High-level
    "Footnotes",
    "Page",
    "FootnotesPlugin",
    "TemplateHost",
    # Registry
    "Diagnostic",
    "DocumentFootnotes",
    "FootnoteEntry",
    "FootnoteRegistry",
    "anchor_id",
    "note_id",
    # Resolve / rewrite
    "Anchor",
    "Placeholder",
    "RenderedReference",
    "resolve",
    "rewrite",
    "PLACEHOLDER_PATTERN",
    # Markup
    "attrs",
    "render_anchor",
    "render_footnotes",
    "render_placeholder",
    # Configuration (ContextVar-based)
    "BackLinkLabel",
    "FootnotesConfig",
    "default_back_link_label",
    "get_footnotes_config",
    "set_footnotes_config",
    "reset_footnotes_config",
    "footnotes_config_context",
    # Errors
    "NotitasError",
    "ConfigError",
    "FootnoteError",
    "DuplicateFootnoteError",
    "UnresolvedFootnoteError",
]
