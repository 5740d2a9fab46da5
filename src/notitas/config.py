"""ContextVar-based footnote configuration for notitas.

Provides the markup configuration consumed by the resolver, the rewriter and
the list renderer: base class name, per-element class overrides, list title,
title id and the back-link label generator.

Thread Safety:
    FootnotesConfig is frozen. The active config is stored in a ContextVar,
    so each thread (and each asyncio task) sees its own value without locks.

Usage:
    # Explicit config, passed to each call
    config = FootnotesConfig(title="Notes", title_id="notes-label")
    html = render_footnotes(registry, "post.md", config=config)

    # Or scoped as the active config
    with footnotes_config_context(FootnotesConfig(base_class="Kitty")):
        html = render_footnotes(registry, "post.md")

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from notitas.errors import ConfigError

if TYPE_CHECKING:
    from notitas.registry import FootnoteEntry

BackLinkLabel = Callable[["FootnoteEntry", int], str]


def default_back_link_label(entry: FootnoteEntry, position: int) -> str:
    """Label for the back link of the footnote at zero-based ``position``."""
    return f"Back to reference {position + 1}"


# camelCase option names, mapped to field names
_OPTION_ALIASES = {
    "baseClass": "base_class",
    "titleId": "title_id",
    "backLinkLabel": "back_link_label",
    "backLinkText": "back_link_text",
    "classNames": "class_names",
}


@dataclass(frozen=True, slots=True)
class FootnotesConfig:
    """Immutable footnote markup configuration.

    Attributes:
        base_class: BEM block class; elements render as ``{base_class}__{element}``
        title: Heading text of the footnotes list
        title_id: Element id of the heading, referenced by ``aria-describedby``
        class_names: Per-element class overrides (element -> class name).
            Elements: "" (container), "title", "list", "list-item",
            "back-link", "ref"
        back_link_label: ``(entry, position) -> str`` accessible label for
            each back link; must be pure and total. The result is inserted into
            the attribute as given, so it must already be attribute-safe text
        back_link_text: Visible text of each back link
        strict: Raise on duplicate definitions and unresolved references
            instead of degrading with a diagnostic

    """

    base_class: str = "Footnotes"
    title: str = "Footnotes"
    title_id: str = "footnotes-label"
    class_names: Mapping[str, str] = field(default_factory=dict, hash=False)
    back_link_label: BackLinkLabel = default_back_link_label
    back_link_text: str = "↩"
    strict: bool = False

    def __post_init__(self) -> None:
        if not self.base_class:
            raise ConfigError("base_class must be a non-empty string")
        if not self.title_id:
            raise ConfigError("title_id must be a non-empty string")
        if not callable(self.back_link_label):
            raise ConfigError(
                f"back_link_label must be callable, got {type(self.back_link_label).__name__}"
            )
        # Read-only copy of the overrides
        object.__setattr__(self, "class_names", MappingProxyType(dict(self.class_names)))

    def class_name(self, element: str = "") -> str:
        """Class name for a markup element.

        Example:
            >>> FootnotesConfig().class_name("list-item")
            'Footnotes__list-item'
            >>> FootnotesConfig(class_names={"ref": "fn"}).class_name("ref")
            'fn'
        """
        override = self.class_names.get(element)
        if override:
            return override
        return f"{self.base_class}__{element}" if element else self.base_class

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> FootnotesConfig:
        """Create FootnotesConfig from a dictionary of options.

        Accepts field names and their camelCase spellings
        (``baseClass``, ``titleId``, ``backLinkLabel``).
        Unknown keys are ignored; ``None`` values fall back to defaults.

        Example:
            >>> config = FootnotesConfig.from_dict({"titleId": "notes", "colour": "red"})
            >>> config.title_id
            'notes'
        """
        valid_fields = {f for f in cls.__dataclass_fields__}
        filtered: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in valid_fields and value is not None:
                filtered[name] = value
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: FootnotesConfig = FootnotesConfig()

_footnotes_config: ContextVar[FootnotesConfig] = ContextVar(
    "footnotes_config",
    default=_DEFAULT_CONFIG,
)


def get_footnotes_config() -> FootnotesConfig:
    """Get the active footnote configuration for this context."""
    return _footnotes_config.get()


def set_footnotes_config(config: FootnotesConfig) -> None:
    """Set the footnote configuration for the current context.

    Thread Safety:
        Only affects the current thread's context.
    """
    _footnotes_config.set(config)


def reset_footnotes_config() -> None:
    """Reset to the default configuration."""
    _footnotes_config.set(_DEFAULT_CONFIG)


@contextmanager
def footnotes_config_context(config: FootnotesConfig) -> Iterator[FootnotesConfig]:
    """Context manager for a temporary active configuration.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with footnotes_config_context(FootnotesConfig(title="Notes")) as config:
        ...     get_footnotes_config().title
        'Notes'
    """
    token = _footnotes_config.set(config)
    try:
        yield config
    finally:
        _footnotes_config.reset(token)


__all__ = [
    "BackLinkLabel",
    "FootnotesConfig",
    "default_back_link_label",
    "footnotes_config_context",
    "get_footnotes_config",
    "reset_footnotes_config",
    "set_footnotes_config",
]
