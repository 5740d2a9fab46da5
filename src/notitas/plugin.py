"""Template host integration for notitas.

Wires the footnote engine into a templating/build pipeline that supports
three extension points: paired shortcodes (a body plus arguments), plain
shortcodes, and whole-document transforms run after rendering.

The document key is always an explicit argument. Hosts whose callbacks carry
the current page implicitly wrap these callables and pass the page's input
path (or any other hashable identity) as ``doc_key``.

Usage:
    >>> plugin = FootnotesPlugin(FootnotesConfig(title="Notes"))
    >>> plugin.register(host)
    >>> body = plugin.footnoteref("CSS counters", "css-counters", "Variables ...", doc_key=path)
    >>> body += plugin.footnotes(doc_key=path)
    >>> html = plugin.transform(body, doc_key=path)

Thread Safety:
    A plugin owns one FootnoteRegistry, which is sharded by document key.
    Pages may be built concurrently as long as each page's shortcodes run in
    order and its transform runs after them.

"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Protocol, runtime_checkable

from notitas.config import FootnotesConfig, get_footnotes_config
from notitas.registry import FootnoteRegistry
from notitas.renderers.html import render_footnotes
from notitas.resolver import resolve
from notitas.rewriter import rewrite
from notitas.utils.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class TemplateHost(Protocol):
    """Protocol for templating engines accepting footnote callbacks."""

    def add_paired_shortcode(self, name: str, fn: Callable[..., str]) -> None:
        """Register a callable invoked with a rendered body and arguments."""
        ...

    def add_shortcode(self, name: str, fn: Callable[..., str]) -> None:
        """Register a callable invoked with arguments only."""
        ...

    def add_transform(self, name: str, fn: Callable[..., str]) -> None:
        """Register a callable invoked with each page's rendered output."""
        ...


class FootnotesPlugin:
    """Footnote shortcodes and transform bound to one registry and config.

    Args:
        config: Markup configuration (active config at construction if None)
        registry: Registry to use (a new one if None)

    """

    __slots__ = ("config", "registry")

    name = "footnotes"

    def __init__(
        self,
        config: FootnotesConfig | None = None,
        registry: FootnoteRegistry | None = None,
    ) -> None:
        self.config = config or get_footnotes_config()
        self.registry = registry if registry is not None else FootnoteRegistry()

    def footnoteref(
        self,
        content: str,
        footnote_id: str,
        description: str | None = None,
        *,
        doc_key: Hashable,
    ) -> str:
        """Paired shortcode: render one reference occurrence."""
        reference = resolve(
            self.registry, doc_key, content, footnote_id, description, config=self.config
        )
        return reference.render(self.config)

    def footnotes(self, *, doc_key: Hashable) -> str:
        """Shortcode: render the footnotes list of the page."""
        return render_footnotes(self.registry, doc_key, config=self.config)

    def transform(self, content: str, *, doc_key: Hashable) -> str:
        """Transform: resolve the page's remaining placeholders."""
        return rewrite(self.registry, doc_key, content, config=self.config)

    def register(self, host: TemplateHost) -> FootnotesPlugin:
        """Register the shortcodes and the transform with ``host``.

        Returns:
            self, so tests can call the bound callables directly

        Raises:
            TypeError: If ``host`` lacks one of the extension points
        """
        if not isinstance(host, TemplateHost):
            raise TypeError(
                f"{type(host).__name__} does not support shortcodes and transforms"
            )
        host.add_paired_shortcode("footnoteref", self.footnoteref)
        host.add_shortcode("footnotes", self.footnotes)
        host.add_transform("footnotes", self.transform)
        logger.debug("Registered footnote shortcodes with %s", type(host).__name__)
        return self

    def reset(self) -> None:
        """Forget all footnote state, ready for a new build."""
        self.registry.reset()


__all__ = [
    "FootnotesPlugin",
    "TemplateHost",
]
