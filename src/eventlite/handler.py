"""Per-event-type listener registry and its emit loop."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Callable
from collections.abc import Iterable
from typing import Any, Generic, NamedTuple, TypeVar

from eventlite._validation import check_event_type
from eventlite.events import Event
from eventlite.exceptions import TypeMismatchError
from eventlite.listeners import CallbackListener
from eventlite.listeners import EventListener
from eventlite.utils import build_repr

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Event)


class EmitResult(NamedTuple):
    """Outcome of a single emission."""

    invoked: int
    """Number of listeners that were invoked."""

    canceled: bool
    """Whether a listener canceled the emission."""


class EventHandler(Generic[E]):
    """
    Ordered collection of listeners bound to exactly one event type.

    Listeners are invoked in registration order, `prepend` puts a listener in front of every
    existing one. The handler is safe to mutate from within one of its own listeners (or from
    another thread) while an emission is in progress: every emission iterates a snapshot of the
    listeners taken when it starts, and evictions are applied in a single compaction pass once
    the iteration ends.

    Args:
        event_type: Event class accepted by `emit`. Subclass instances are accepted too.
        listeners: Initial listeners, in invocation order.

    Raises:
        InvalidArgumentError: If `event_type` is not an `Event` subclass.
    """

    def __init__(self, event_type: type[E], listeners: Iterable[EventListener[E]] = ()) -> None:
        check_event_type(event_type)
        self.event_type = event_type
        self._listeners: list[EventListener[E]] = list(listeners)
        self._removals = 0
        self._lock = threading.RLock()

    @property
    def listeners(self) -> tuple[EventListener[E], ...]:
        """Snapshot of the registered listeners in invocation order."""
        with self._lock:
            return tuple(self._listeners)

    def append(
        self, listener: EventListener[E] | Callable[[E], Any], *, once: bool = False
    ) -> EventListener[E]:
        """
        Adds a listener after all currently registered listeners.

        Args:
            listener: Listener to add. Plain callables are wrapped in a `CallbackListener` bound to
                this handler's event type.
            once: Only used when wrapping a plain callable, evicts it after its first invocation.

        Returns:
            The stored listener, to be used for removal.
        """
        stored = self._as_listener(listener, once)
        with self._lock:
            self._listeners.append(stored)
        return stored

    def prepend(
        self, listener: EventListener[E] | Callable[[E], Any], *, once: bool = False
    ) -> EventListener[E]:
        """
        Adds a listener before all currently registered listeners.

        Args:
            listener: Listener to add. Plain callables are wrapped in a `CallbackListener` bound to
                this handler's event type.
            once: Only used when wrapping a plain callable, evicts it after its first invocation.

        Returns:
            The stored listener, to be used for removal.
        """
        stored = self._as_listener(listener, once)
        with self._lock:
            self._listeners.insert(0, stored)
        return stored

    def has_listeners(self) -> bool:
        with self._lock:
            return bool(self._listeners)

    def has_no_listeners(self) -> bool:
        return not self.has_listeners()

    def remove_listener(self, listener: object) -> int:
        """
        Removes every registration matching the given listener.

        Args:
            listener: A listener returned on registration, or the callback a `CallbackListener`
                was created with.

        Returns:
            Number of listeners removed, 0 if none matched.
        """
        with self._lock:
            survivors = [entry for entry in self._listeners if not entry.matches(listener)]
            count = len(self._listeners) - len(survivors)
            if count:
                self._listeners = survivors
                self._removals += 1
        return count

    def remove_all_listeners(self) -> int:
        """Removes every listener and returns how many were removed."""
        with self._lock:
            count = len(self._listeners)
            self._listeners = []
            self._removals += 1
        return count

    def emit(self, event: E) -> EmitResult:
        """
        Invokes the listeners with the given event.

        Iteration stops early when a listener cancels the event or stops its propagation.
        Listeners added during the emission are not invoked by it, listeners removed during the
        emission are skipped if they have not been reached yet.
        Once-listeners are removed right before they are invoked, so no other emission (nested
        or concurrent) can invoke them again. Listeners that requested eviction during their
        invocation are removed after the iteration, even when a listener raised. Exceptions
        raised by listeners are not caught and abort the remainder of the emission.

        Args:
            event: Event to deliver, must be an instance of this handler's event type.

        Returns:
            The number of invoked listeners and whether the emission was canceled.

        Raises:
            TypeMismatchError: If `event` is not an instance of the handler's event type.
        """
        if not isinstance(event, self.event_type):
            raise TypeMismatchError(
                f"Expected event to be an instance of {self.event_type.__qualname__}, "
                f"got {type(event).__qualname__}"
            )

        with self._lock:
            snapshot = tuple(self._listeners)
            removals = self._removals

        evicting: list[EventListener[E]] = []
        claimed = 0
        invoked = 0
        canceled = False
        try:
            for listener in snapshot:
                if event.propagation_stopped:
                    break
                if listener.once:
                    if not self._claim(listener):
                        continue
                    claimed += 1
                elif self._removals != removals and not self._is_registered(listener):
                    continue

                listener.invoke(event)
                invoked += 1

                if event.evict_requested and not listener.once:
                    evicting.append(listener)
                event.request_eviction(False)

                was_canceled = event.cancel_requested
                event.reset_after_invocation()
                if was_canceled:
                    canceled = True
                    break
        finally:
            if evicting:
                self._evict(evicting)
            if claimed or evicting:
                logger.debug(
                    f"Evicted {claimed + len(evicting)} listener(s) from "
                    f"{self.event_type.__qualname__}"
                )

        return EmitResult(invoked, canceled)

    def _evict(self, evicting: list[EventListener[E]]) -> None:
        """Removes the given entries from the live list, preserving the order of survivors."""
        pending = Counter(id(listener) for listener in evicting)
        with self._lock:
            survivors: list[EventListener[E]] = []
            for listener in self._listeners:
                key = id(listener)
                if pending[key]:
                    pending[key] -= 1
                    continue
                survivors.append(listener)
            self._listeners = survivors
            self._removals += 1

    def _claim(self, listener: EventListener[E]) -> bool:
        """
        Removes one registration of a once-listener ahead of its invocation.

        Returns False if no registration is left, i.e. another pass (nested or in another thread)
        already claimed it or it was removed.
        """
        with self._lock:
            for index, entry in enumerate(self._listeners):
                if entry is listener:
                    del self._listeners[index]
                    self._removals += 1
                    return True
        return False

    def _is_registered(self, listener: EventListener[E]) -> bool:
        with self._lock:
            return any(entry is listener for entry in self._listeners)

    def _as_listener(
        self, listener: EventListener[E] | Callable[[E], Any], once: bool
    ) -> EventListener[E]:
        if isinstance(listener, EventListener):
            return listener
        return CallbackListener(listener, self.event_type, once=once)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __repr__(self) -> str:
        return build_repr(
            type(self).__name__,
            self.event_type.__qualname__,
            kwargs={"listeners": len(self)},
        )
