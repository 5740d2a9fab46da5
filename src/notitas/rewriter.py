"""Placeholder rewrite pass.

Second phase of the resolve-then-rewrite protocol. Runs once per document on
its fully rendered markup, after every reference occurrence of the document
has been resolved, and replaces each placeholder marker with a finished
anchor now that all definitions are known.

Matches are processed left to right: anchor ordinals are positional, so
the n-th placeholder of an id in the text becomes that id's n-th anchor. A
marker whose display content holds another marker is rewritten after the
inner one. Finished anchors never match, which makes the pass idempotent.

Example:
    >>> registry = FootnoteRegistry()
    >>> alice = resolve(registry, "post.md", "Alice", "late")
    >>> bob = resolve(registry, "post.md", "Bob", "late", "Defined second.")
    >>> html = rewrite(registry, "post.md", f"{alice}{bob}")
    >>> 'id="late-ref"' in html and 'id="late-ref-2"' in html
    True

"""

from __future__ import annotations

import html
import re
from collections.abc import Hashable

from notitas.config import FootnotesConfig, get_footnotes_config
from notitas.errors import UnresolvedFootnoteError
from notitas.registry import FootnoteRegistry
from notitas.renderers.html import PLACEHOLDER_ATTR, PLACEHOLDER_END, PLACEHOLDER_ID_ATTR
from notitas.resolver import Anchor
from notitas.utils.logger import get_logger

logger = get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(
    rf'<span {PLACEHOLDER_ATTR} {PLACEHOLDER_ID_ATTR}="(?P<id>[^"]*)">'
    rf"(?P<content>(?:(?!<span {PLACEHOLDER_ATTR} ).)*?){re.escape(PLACEHOLDER_END)}</span>",
    re.DOTALL,
)


def rewrite(
    registry: FootnoteRegistry,
    doc_key: Hashable,
    text: str,
    *,
    config: FootnotesConfig | None = None,
) -> str:
    """Replace every placeholder marker in ``text`` with its final markup.

    Placeholders of defined ids become anchors carrying the entry's shared
    index. Placeholders of ids that were never defined degrade to their bare
    display content, with one "unresolved" diagnostic per occurrence.

    Args:
        registry: Registry of the current build
        doc_key: Document the text belongs to
        text: Fully rendered document markup
        config: Markup configuration (active config if None)

    Returns:
        The text with no placeholder markers left

    Raises:
        UnresolvedFootnoteError: On an undefined id in strict mode, after
            the diagnostic is recorded
    """
    if PLACEHOLDER_ATTR not in text:
        return text

    config = config or get_footnotes_config()
    state = registry.document(doc_key)
    seen: dict[str, int] = {}

    def replace(match: re.Match[str]) -> str:
        footnote_id = html.unescape(match.group("id"))
        content = match.group("content")

        entry = state.lookup(footnote_id)
        if entry is None:
            state.report(
                footnote_id,
                "unresolved",
                f"Footnote reference {footnote_id!r} has no given description; "
                "rendering it as plain text",
            )
            if config.strict:
                raise UnresolvedFootnoteError(doc_key, footnote_id)
            return content

        ordinal = seen.get(footnote_id, 0) + 1
        seen[footnote_id] = ordinal
        if ordinal > entry.reserved:
            # More markers than were reserved (duplicated host output):
            # take a fresh ordinal so anchor ids stay unique.
            entry.ref_count += 1
            ordinal = entry.occurrences
            logger.debug(
                "%s: unreserved placeholder for %r rewritten as reference %d",
                doc_key,
                footnote_id,
                ordinal,
            )
        return Anchor(entry.id, content, entry.index, ordinal).render(config)

    with state.lock:
        # Each pass rewrites the innermost markers; repeat for nested ones.
        count = 1
        while count:
            text, count = PLACEHOLDER_PATTERN.subn(replace, text)

    return text


__all__ = [
    "PLACEHOLDER_PATTERN",
    "rewrite",
]
