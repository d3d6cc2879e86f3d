"""
Logging plugin reporting every emission of an event manager.

Example:
    >>> import logging
    >>> from eventlite import EventManager
    >>> from eventlite.plugins.builtin import EmissionLoggingPlugin
    >>>
    >>> manager = EventManager(plugins=[EmissionLoggingPlugin(level=logging.INFO)])
"""

import logging

from eventlite.events import Event
from eventlite.plugins.hooks.markers import hook_impl

DEFAULT_LOGGER_NAME = "eventlite.emissions"


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get the logger used for emission records.

    Args:
        name: Logger name. Defaults to "eventlite.emissions".

    Returns:
        The standard library logger with the given name.
    """
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)


class EmissionLoggingPlugin:
    """
    Plugin that writes one log record per emission.

    Records look like ``Saving emitted to 2 listener(s)``, with ``, canceled`` appended when a
    listener canceled the emission.

    Args:
        level: Level of the emitted records.
        logger_name: Name of the logger to write to, defaults to "eventlite.emissions".
        include_unheard: Whether to log emissions that reached no listener at all.
    """

    def __init__(
        self,
        level: int = logging.DEBUG,
        logger_name: str | None = None,
        include_unheard: bool = True,
    ) -> None:
        self.level = level
        self.include_unheard = include_unheard
        self._logger = get_logger(logger_name)

    @hook_impl
    def after_event_emit(self, event: Event, invoked_count: int, canceled: bool) -> None:
        if invoked_count == 0 and not self.include_unheard:
            return

        message = f"{type(event).__qualname__} emitted to {invoked_count} listener(s)"
        if canceled:
            message += ", canceled"
        self._logger.log(self.level, message)
