"""HTML markup for footnote anchors, placeholders and the footnotes list.

Pure formatting: every function here reads registry state or a resolved
reference and returns a string. Attribute values are escaped; display
content, descriptions, back-link labels and the title are opaque markup
inserted verbatim.

Thread Safety:
All functions are stateless. The list renderer reads a document's entries
as a snapshot tuple.
"""

from __future__ import annotations

import html
from collections.abc import Hashable, Mapping
from typing import TYPE_CHECKING

from notitas.config import FootnotesConfig, get_footnotes_config
from notitas.registry import FootnoteEntry, note_id
from notitas.stringbuilder import StringBuilder

if TYPE_CHECKING:
    from notitas.registry import FootnoteRegistry
    from notitas.resolver import Anchor, Placeholder

# Marker format of unresolved references. The closing comment terminates the
# marker, so display content may contain its own </span>.
PLACEHOLDER_ATTR = "data-footnote-placeholder"
PLACEHOLDER_ID_ATTR = "data-footnote-id"
PLACEHOLDER_END = "<!--/footnote-placeholder-->"


def attrs(values: Mapping[str, object]) -> str:
    """Serialize a mapping into an HTML attribute string.

    ``None`` values are skipped and ``True`` renders a bare attribute.

    Example:
        >>> attrs({"class": "Footnotes__ref", "href": "#a-note"})
        'class="Footnotes__ref" href="#a-note"'
        >>> attrs({"data-footnote-placeholder": True, "title": 'say "hi"'})
        'data-footnote-placeholder title="say &quot;hi&quot;"'
    """
    parts: list[str] = []
    for key, value in values.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(key)
        else:
            parts.append(f'{key}="{html.escape(str(value), quote=True)}"')
    return " ".join(parts)


def render_anchor(anchor: Anchor, config: FootnotesConfig | None = None) -> str:
    """Render a resolved reference as an inline link to its footnote."""
    config = config or get_footnotes_config()
    link_attrs = attrs(
        {
            "class": config.class_name("ref"),
            "href": anchor.href,
            "id": anchor.anchor_id,
            "data-footnote-index": anchor.index,
            "aria-describedby": config.title_id,
            "role": "doc-noteref",
        }
    )
    return f"<a {link_attrs}>{anchor.content}</a>"


def render_placeholder(placeholder: Placeholder) -> str:
    """Render an unresolved reference as an inert, findable marker."""
    marker_attrs = attrs({PLACEHOLDER_ATTR: True, PLACEHOLDER_ID_ATTR: placeholder.footnote_id})
    return f"<span {marker_attrs}>{placeholder.content}{PLACEHOLDER_END}</span>"


def _render_item(
    sb: StringBuilder, entry: FootnoteEntry, position: int, config: FootnotesConfig
) -> None:
    item_attrs = attrs({"id": note_id(entry.id), "class": config.class_name("list-item")})
    link_attrs = attrs(
        {"class": config.class_name("back-link"), "href": f"#{entry.first_anchor_id}"}
    )
    # Labels are opaque and inserted as given
    label = config.back_link_label(entry, position)
    sb.append(f"<li {item_attrs}>{entry.description} ")
    sb.append(f'<a {link_attrs} aria-label="{label}" role="doc-backlink">')
    sb.append(f"{config.back_link_text}</a></li>")


def render_footnotes(
    registry: FootnoteRegistry,
    doc_key: Hashable,
    *,
    config: FootnotesConfig | None = None,
) -> str:
    """Render the end-of-document footnotes list.

    One list item per entry, in definition order. Each back link points at
    the entry's first anchor, never a suffixed one.

    Args:
        registry: Registry holding the document's footnotes
        doc_key: Document whose footnotes to render
        config: Markup configuration (active config if None)

    Returns:
        The list markup, or "" when the document defines no footnotes
    """
    entries = registry.entries_in_definition_order(doc_key)
    if not entries:
        return ""

    config = config or get_footnotes_config()
    container_attrs = attrs({"role": "doc-endnotes", "class": config.class_name()})
    title_attrs = attrs({"id": config.title_id, "class": config.class_name("title")})
    list_attrs = attrs({"class": config.class_name("list")})

    sb = StringBuilder()
    sb.append_line()
    sb.append_line(f"  <footer {container_attrs}>")
    sb.append_line(f"    <h2 {title_attrs}>{config.title}</h2>")
    sb.append(f"    <ol {list_attrs}>")
    for position, entry in enumerate(entries):
        if position:
            sb.append_line()
        _render_item(sb, entry, position, config)
    sb.append_line("</ol>")
    sb.append("  </footer>")
    return sb.build()


__all__ = [
    "PLACEHOLDER_ATTR",
    "PLACEHOLDER_END",
    "PLACEHOLDER_ID_ATTR",
    "attrs",
    "render_anchor",
    "render_footnotes",
    "render_placeholder",
]
