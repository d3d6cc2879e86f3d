from __future__ import annotations

import threading
from dataclasses import dataclass

_GLOBAL_EVENTLITE_SETTINGS: EventliteSettings | None = None
_SETTINGS_LOCK = threading.RLock()


@dataclass(frozen=True)
class EventliteSettings:
    """Configuration settings for eventlite."""

    dispatch_hierarchy: bool = False
    """
    Whether managers deliver an event to listeners of its ancestor event types as well.

    When False (the default) an event only reaches listeners registered for its exact class.
    Managers read this value once, at construction time, unless overridden explicitly.
    """


def get_global_settings() -> EventliteSettings:
    """
    Get the global eventlite settings instance (thread-safe).

    If no global settings have been set, returns a default instance.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_EVENTLITE_SETTINGS
        if _GLOBAL_EVENTLITE_SETTINGS is None:
            _GLOBAL_EVENTLITE_SETTINGS = EventliteSettings()
        return _GLOBAL_EVENTLITE_SETTINGS


def set_global_settings(settings: EventliteSettings) -> None:
    """
    Set the global eventlite settings instance (thread-safe).

    Note: Existing managers keep the settings they were constructed with, only managers created
    afterwards pick up the new values.

    Args:
        settings (EventliteSettings): Settings to set as global.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_EVENTLITE_SETTINGS
        _GLOBAL_EVENTLITE_SETTINGS = settings
