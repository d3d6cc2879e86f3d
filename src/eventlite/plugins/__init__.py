from eventlite.plugins.builtin import EmissionLoggingPlugin
from eventlite.plugins.builtin import get_logger
from eventlite.plugins.manager import register_hooks
from eventlite.plugins.manager import unregister_hooks

from .hooks.markers import hook_impl
from .hooks.markers import hook_spec

__all__ = [
    "hook_impl",
    "hook_spec",
    "EmissionLoggingPlugin",
    "get_logger",
    "register_hooks",
    "unregister_hooks",
]
