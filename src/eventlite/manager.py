"""Top-level dispatcher mapping event types to their handlers."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from collections.abc import Iterable
from typing import Any, TypeVar, overload

from pluggy import PluginManager

from eventlite._validation import check_event_type
from eventlite._validation import is_event_type
from eventlite.events import Event
from eventlite.exceptions import ConfigurationError
from eventlite.exceptions import InvalidArgumentError
from eventlite.exceptions import TypeMismatchError
from eventlite.handler import EmitResult
from eventlite.handler import EventHandler
from eventlite.listeners import CallbackListener
from eventlite.listeners import EventListener
from eventlite.plugins.manager import _get_global_plugin_manager
from eventlite.plugins.manager import create_hook_manager_with_plugins
from eventlite.settings import get_global_settings
from eventlite.utils import callable_name

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Event)
F = TypeVar("F", bound=Callable[..., Any])

EmittedCallback = Callable[[Event, int], Any]


class EventManager:
    """
    Dispatches events to the listeners registered for their type.

    A handler is created for an event type when its first listener is registered and discarded as
    soon as its last listener is removed or evicted, so `has_listeners` is a plain map lookup.
    Emission is synchronous: every listener runs to completion in the calling thread before
    `emit` returns. Listeners may register, remove and emit from within their own invocation.

    Args:
        dispatch_hierarchy: Also deliver events to listeners of their ancestor event types, most
            derived type first. Defaults to the value of the global `EventliteSettings`.
        plugins: Pluggy hook implementations called around every emission, in addition to the
            globally registered ones.

    Examples:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Saving(Event):
        ...     target: str
        >>> manager = EventManager()
        >>> saved = []
        >>> listener = manager.on(Saving, saved.append)
        >>> manager.emit(Saving("report.txt"))
        EmitResult(invoked=1, canceled=False)
        >>> saved
        [Saving(target='report.txt')]
    """

    def __init__(
        self, *, dispatch_hierarchy: bool | None = None, plugins: Iterable[Any] = ()
    ) -> None:
        if dispatch_hierarchy is None:
            dispatch_hierarchy = get_global_settings().dispatch_hierarchy
        self.dispatch_hierarchy = dispatch_hierarchy

        self._handlers: dict[type[Event], EventHandler[Any]] = {}
        self._on_emitted_callbacks: list[EmittedCallback] = []
        self._lock = threading.RLock()

        plugins = list(plugins)
        self._plugin_manager: PluginManager | None = (
            create_hook_manager_with_plugins(plugins) if plugins else None
        )

    @property
    def plugin_manager(self) -> PluginManager:
        """Plugin manager whose hooks are called around every emission."""
        if self._plugin_manager is not None:
            return self._plugin_manager
        return _get_global_plugin_manager()

    # region Registration

    @overload
    def on(
        self, target: type[E], callback: Callable[[E], Any], /, *, once: bool = False
    ) -> CallbackListener[E]: ...

    @overload
    def on(self, target: type[E], /, *, once: bool = False) -> Callable[[F], F]: ...

    @overload
    def on(self, target: Callable[[E], Any], /, *, once: bool = False) -> CallbackListener[E]: ...

    def on(self, target: Any, callback: Any = None, /, *, once: bool = False) -> Any:
        """
        Registers a callback as the last listener of an event type.

        Supports three call shapes:

        * `on(Saving, callback)` registers `callback` for `Saving`.
        * `on(callback)` infers the event type from the annotation of the callback's first
          parameter.
        * `on(Saving)` returns a decorator registering the decorated function for `Saving`, the
          function itself is returned unchanged and can be removed again with `off`.

        Args:
            target: Event class, or the callback itself when the event type is inferred.
            callback: Callable receiving the event.
            once: Evict the listener after its first invocation.

        Returns:
            The registered listener, or a decorator when only an event class was given.

        Raises:
            InvalidArgumentError: If `target` is a class that is not an `Event` subclass, or the
                arguments do not match any supported call shape.
            ConfigurationError: If the event type has to be inferred and cannot be.
        """
        if isinstance(target, type):
            check_event_type(target)
            if callback is None:
                return self._decorator(target, once)
            return self.append(CallbackListener(callback, target, once=once))

        if callback is None and callable(target):
            return self.append(CallbackListener(target, once=once))

        raise InvalidArgumentError(
            f"Expected an Event subclass and a callback, or a single annotated callback, "
            f"got {target!r} and {callback!r}"
        )

    @overload
    def once(self, target: type[E], callback: Callable[[E], Any], /) -> CallbackListener[E]: ...

    @overload
    def once(self, target: type[E], /) -> Callable[[F], F]: ...

    @overload
    def once(self, target: Callable[[E], Any], /) -> CallbackListener[E]: ...

    def once(self, target: Any, callback: Any = None, /) -> Any:
        """Same as `on`, but the listener is evicted after its first invocation."""
        return self.on(target, callback, once=True)

    def append(self, listener: EventListener[E]) -> EventListener[E]:
        """
        Registers a pre-built listener after every listener of its event type.

        Args:
            listener: Listener to register, its `event_type` selects the handler.

        Returns:
            The listener itself, for later removal.
        """
        event_type = listener.event_type
        with self._lock:
            self._resolve_handler(event_type).append(listener)
        return listener

    def prepend(self, listener: EventListener[E]) -> EventListener[E]:
        """
        Registers a pre-built listener before every listener of its event type.

        Args:
            listener: Listener to register, its `event_type` selects the handler.

        Returns:
            The listener itself, for later removal.
        """
        event_type = listener.event_type
        with self._lock:
            self._resolve_handler(event_type).prepend(listener)
        return listener

    def on_emitted(self, callback: F) -> F:
        """
        Registers a callback invoked after every emission, in registration order.

        The callback receives the emitted event and the number of listeners that were invoked,
        which is 0 when no listener was registered for the event. It can be used as a decorator.

        Args:
            callback: Callable taking `(event, invoked_count)`.

        Returns:
            The callback itself.
        """
        with self._lock:
            self._on_emitted_callbacks.append(callback)
        return callback

    # region Queries

    def has_listeners(self, event_type: type[Event]) -> bool:
        """Returns True if at least one listener is registered for exactly this event type."""
        return event_type in self._handlers

    def event_types(self) -> tuple[type[Event], ...]:
        """Event types that currently have listeners, in order of first registration."""
        with self._lock:
            return tuple(self._handlers)

    # region Emission

    def emit(self, event: Event) -> EmitResult:
        """
        Invokes the listeners registered for the event's type.

        With hierarchy dispatch enabled the listeners of every ancestor event type are invoked
        afterwards as well, unless a listener stopped the propagation or canceled the emission.
        The `on_emitted` callbacks and `after_event_emit` hooks run once the dispatch is done,
        whether or not any listener was registered.

        Args:
            event: Event to emit.

        Returns:
            The total number of invoked listeners and whether a listener canceled the emission.

        Raises:
            TypeMismatchError: If `event` is not an `Event` instance.
        """
        if not isinstance(event, Event):
            raise TypeMismatchError(f"Expected an Event instance, got {type(event).__qualname__}")

        hook = self.plugin_manager.hook
        hook.before_event_emit(event=event)

        invoked = 0
        canceled = False
        for event_type in self._dispatch_types(type(event)):
            with self._lock:
                handler = self._handlers.get(event_type)
            if handler is None:
                continue

            try:
                result = handler.emit(event)
            finally:
                self._discard_if_empty(event_type, handler)

            invoked += result.invoked
            if result.canceled:
                canceled = True
                break
            if event.propagation_stopped:
                break

        if invoked == 0:
            logger.debug(f"No listeners invoked for {type(event).__qualname__}")

        with self._lock:
            callbacks = tuple(self._on_emitted_callbacks)
        for callback in callbacks:
            callback(event, invoked)

        hook.after_event_emit(event=event, invoked_count=invoked, canceled=canceled)
        return EmitResult(invoked, canceled)

    def emit_if_listening(
        self, event_type: type[E], factory: Callable[[], E]
    ) -> EmitResult | None:
        """
        Builds and emits an event only if someone listens to its type.

        Useful when creating the event is costly. With hierarchy dispatch enabled, listeners of
        ancestor event types count as well.

        Args:
            event_type: Event class the factory produces.
            factory: Zero-argument callable building the event.

        Returns:
            The emission result, or None if nobody listened and the factory was not called.

        Raises:
            InvalidArgumentError: If `event_type` is not an `Event` subclass.
            TypeMismatchError: If the factory returns something that is not an `event_type`.
        """
        check_event_type(event_type)
        if not self._is_listening(event_type):
            return None

        event = factory()
        if not isinstance(event, event_type):
            raise TypeMismatchError(
                f"Factory '{callable_name(factory)}' must return an instance of "
                f"{event_type.__qualname__}, got {type(event).__qualname__}"
            )
        return self.emit(event)

    # region Removal

    def remove_listener(self, listener: EventListener[Any]) -> int:
        """
        Removes a listener returned on registration.

        Args:
            listener: The registered listener.

        Returns:
            Number of registrations removed, 0 if the listener was not registered.
        """
        try:
            event_type = listener.event_type
        except ConfigurationError:
            # Registration resolves the event type, so an unresolvable listener was never added
            return 0
        return self._remove(event_type, listener)

    def off(self, event_type: type[Event], callback: Callable[..., Any]) -> int:
        """
        Removes every listener of an event type wrapping the given callback.

        Args:
            event_type: Event class the callback was registered for.
            callback: The exact callable that was registered.

        Returns:
            Number of registrations removed, 0 if none matched.
        """
        return self._remove(event_type, callback)

    def remove_all_listeners(self, event_type: type[Event]) -> bool:
        """
        Removes every listener of an event type.

        Returns:
            True if the event type had listeners, False otherwise.
        """
        with self._lock:
            handler = self._handlers.pop(event_type, None)
        if handler is None:
            return False

        handler.remove_all_listeners()
        logger.debug(f"Removed all listeners for {event_type.__qualname__}")
        return True

    # region Helpers

    def _decorator(self, event_type: type[E], once: bool) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            self.append(CallbackListener(func, event_type, once=once))
            return func

        return decorator

    def _resolve_handler(self, event_type: type[E]) -> EventHandler[E]:
        """Gets or creates the handler of an event type, must be called with the lock held."""
        handler = self._handlers.get(event_type)
        if handler is None:
            handler = self._handlers[event_type] = EventHandler(event_type)
            logger.debug(f"Created handler for {event_type.__qualname__}")
        return handler

    def _discard_if_empty(self, event_type: type[Event], handler: EventHandler[Any]) -> None:
        with self._lock:
            if handler.has_no_listeners() and self._handlers.get(event_type) is handler:
                del self._handlers[event_type]
                logger.debug(f"Discarded empty handler for {event_type.__qualname__}")

    def _remove(self, event_type: type[Event], target: object) -> int:
        with self._lock:
            handler = self._handlers.get(event_type)
            if handler is None:
                return 0
            count = handler.remove_listener(target)
            self._discard_if_empty(event_type, handler)
        return count

    def _dispatch_types(self, event_type: type[Event]) -> tuple[type[Event], ...]:
        if not self.dispatch_hierarchy:
            return (event_type,)
        return tuple(cls for cls in event_type.__mro__ if is_event_type(cls))

    def _is_listening(self, event_type: type[Event]) -> bool:
        return any(self.has_listeners(cls) for cls in self._dispatch_types(event_type))
