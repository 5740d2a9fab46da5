"""Exception classes for notitas.

Footnote anomalies (unresolved references, duplicate definitions) degrade to
plain text plus a diagnostic by default. These exceptions surface only for
programming errors, invalid configuration, or when ``strict`` mode is on.
"""

from __future__ import annotations

from collections.abc import Hashable


class NotitasError(Exception):
    """Base exception for all notitas errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(NotitasError):
    """Invalid footnote configuration value."""

    pass


class FootnoteError(NotitasError):
    """Error tied to one footnote id within one document.

    Attributes:
        doc_key: Document key the footnote belongs to
        footnote_id: Author-supplied footnote id
    """

    def __init__(self, doc_key: Hashable, footnote_id: str, message: str) -> None:
        self.doc_key = doc_key
        self.footnote_id = footnote_id
        super().__init__(f"{doc_key}: footnote {footnote_id!r}: {message}")


class DuplicateFootnoteError(FootnoteError):
    """A definition was given for a footnote id that already has one."""

    def __init__(self, doc_key: Hashable, footnote_id: str) -> None:
        super().__init__(doc_key, footnote_id, "already defined in this document")


class UnresolvedFootnoteError(FootnoteError):
    """A placeholder survived to the rewrite pass without a definition."""

    def __init__(self, doc_key: Hashable, footnote_id: str) -> None:
        super().__init__(
            doc_key, footnote_id, "referenced but no given description was ever registered"
        )
