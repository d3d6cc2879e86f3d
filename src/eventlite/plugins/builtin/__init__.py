"""Builtin plugins shipped with eventlite."""

from eventlite.plugins.builtin.logging import EmissionLoggingPlugin
from eventlite.plugins.builtin.logging import get_logger

__all__ = [
    "EmissionLoggingPlugin",
    "get_logger",
]
