"""Logging helpers for notitas.

Wraps the standard library logging so every logger lives under the
"notitas." namespace. Hosts configure output by attaching handlers to the
"notitas" logger.

Example:
    >>> from notitas.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Footnote %r has no description", "css-counters")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("rewriter").name
        'notitas.rewriter'
    """
    if not (name == "notitas" or name.startswith("notitas.")):
        name = f"notitas.{name}"
    return logging.getLogger(name)
