"""Utility modules for notitas.

Provides:
- logger: get_logger for namespaced logging
"""

from notitas.utils.logger import get_logger

__all__ = [
    "get_logger",
]
