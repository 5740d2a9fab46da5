"""Markup renderers for notitas.

Provides:
- html: anchor, placeholder and footnotes-list markup
"""

from notitas.renderers.html import (
    attrs,
    render_anchor,
    render_footnotes,
    render_placeholder,
)

__all__ = [
    "attrs",
    "render_anchor",
    "render_footnotes",
    "render_placeholder",
]
