"""Eventlite: Lightweight synchronous, in-process event dispatch for Python."""

__version__ = "0.3.0"

from . import settings
from .events import Event
from .exceptions import ConfigurationError
from .exceptions import EventliteError
from .exceptions import InvalidArgumentError
from .exceptions import TypeMismatchError
from .handler import EmitResult
from .handler import EventHandler
from .listeners import CallbackListener
from .listeners import CallbackOnceListener
from .listeners import EventListener
from .manager import EventManager
from .mixins import HandlesEvents
from .plugins.manager import _initialize_plugin_system

# Initialize hooks system on module import
_initialize_plugin_system()

__all__ = [
    "CallbackListener",
    "CallbackOnceListener",
    "ConfigurationError",
    "EmitResult",
    "Event",
    "EventHandler",
    "EventListener",
    "EventManager",
    "EventliteError",
    "HandlesEvents",
    "InvalidArgumentError",
    "TypeMismatchError",
    "settings",
]
