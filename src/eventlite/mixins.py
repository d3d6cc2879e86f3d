"""Mixin giving any class its own private set of event handlers."""

from __future__ import annotations

from typing import Any, TypeVar

from eventlite.events import Event
from eventlite.handler import EventHandler

E = TypeVar("E", bound=Event)


class HandlesEvents:
    """
    Mixin for classes that emit their own events without going through an `EventManager`.

    The handlers are stored per instance and created on demand. Unlike `EventManager`, empty
    handlers are kept around, so a handler obtained through `_resolve_event_handler` stays valid
    until `_remove_event_handler` is called.

    Examples:
        >>> class Document(HandlesEvents):
        ...     def on_saving(self, callback):
        ...         return self._resolve_event_handler(Saving).append(callback)
        ...
        ...     def save(self):
        ...         self._emit_event(Saving(self))
    """

    @property
    def _event_handlers(self) -> dict[type[Event], EventHandler[Any]]:
        return self.__dict__.setdefault("_eventlite_handlers", {})

    def _emit_event(self, event: Event) -> int:
        """Emits the event to the handler of its exact type, returns the number of invocations."""
        if not self._event_has_listeners(type(event)):
            return 0
        return self._resolve_event_handler(type(event)).emit(event).invoked

    def _event_has_listeners(self, event_type: type[Event]) -> bool:
        handler = self._get_event_handler_or_none(event_type)
        return handler is not None and handler.has_listeners()

    def _resolve_event_handler(self, event_type: type[E]) -> EventHandler[E]:
        handlers = self._event_handlers
        handler = handlers.get(event_type)
        if handler is None:
            handler = handlers[event_type] = EventHandler(event_type)
        return handler

    def _get_event_handler_or_none(self, event_type: type[E]) -> EventHandler[E] | None:
        return self._event_handlers.get(event_type)

    def _remove_event_handler(self, event_type: type[Event]) -> bool:
        return self._event_handlers.pop(event_type, None) is not None
