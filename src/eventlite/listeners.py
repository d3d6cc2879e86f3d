"""Listener types wrapping the units of work registered for an event type."""

from __future__ import annotations

import abc
import inspect
from collections.abc import Callable
from typing import Any, Generic, TypeVar, get_type_hints

from typing_extensions import override

from eventlite._validation import check_event_type
from eventlite._validation import is_event_type
from eventlite.events import Event
from eventlite.exceptions import ConfigurationError
from eventlite.utils import build_repr
from eventlite.utils import callable_name

E = TypeVar("E", bound=Event)

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


# region Listeners


class EventListener(abc.ABC, Generic[E]):
    """
    Base class for everything that can be registered with an `EventHandler`.

    Subclasses provide the event type they listen to and the work done on each invocation.
    Listeners are compared by identity, so the handle returned on registration is what must be
    passed back for removal.
    """

    @property
    def once(self) -> bool:
        """Whether the listener is evicted right after its first invocation."""
        return False

    @property
    @abc.abstractmethod
    def event_type(self) -> type[E]:
        """The event class this listener is bound to."""
        raise NotImplementedError()

    @abc.abstractmethod
    def invoke(self, event: E) -> None:
        """
        Run the listener for the given event.

        Args:
            event: Event being emitted.
        """
        raise NotImplementedError()

    def matches(self, other: object) -> bool:
        """Returns True if `other` refers to this registration."""
        return other is self


class CallbackListener(EventListener[E]):
    """
    Listener that forwards the event to a plain callable.

    Args:
        callback: Callable receiving the event as its only positional argument.
        event_type: Event class to listen to. When omitted it is inferred from the annotation of
            the callback's first parameter on first access.
        once: Evict the listener after its first invocation.

    Raises:
        InvalidArgumentError: If `event_type` is given but is not an `Event` subclass.
    """

    def __init__(
        self,
        callback: Callable[[E], Any],
        event_type: type[E] | None = None,
        *,
        once: bool = False,
    ) -> None:
        if event_type is not None:
            check_event_type(event_type)
        self._callback = callback
        self._event_type = event_type
        self._once = once

    @property
    def callback(self) -> Callable[[E], Any]:
        return self._callback

    @property
    @override
    def once(self) -> bool:
        return self._once

    @property
    @override
    def event_type(self) -> type[E]:
        if self._event_type is None:
            self._event_type = resolve_event_type(self._callback)
        return self._event_type

    @override
    def invoke(self, event: E) -> None:
        self._callback(event)

    @override
    def matches(self, other: object) -> bool:
        # The wrapped callback identifies the registration as well
        return other is self or other is self._callback

    def __repr__(self) -> str:
        event_type = self._event_type.__qualname__ if self._event_type else "?"
        return build_repr(
            type(self).__name__,
            callable_name(self._callback),
            kwargs={"event_type": event_type, "once": self._once},
        )


class CallbackOnceListener(CallbackListener[E]):
    """Callback listener that is evicted after it has been invoked once."""

    def __init__(self, callback: Callable[[E], Any], event_type: type[E] | None = None) -> None:
        super().__init__(callback, event_type, once=True)


# region Helpers


def resolve_event_type(callback: Callable[..., Any]) -> type[Event]:
    """
    Infer the event type a callback listens to from its first parameter annotation.

    String annotations (e.g. from `from __future__ import annotations`) are evaluated in the
    callback's module namespace.

    Args:
        callback: Callable whose first positional parameter is annotated with an Event subclass.

    Returns:
        The annotated event class.

    Raises:
        ConfigurationError: If the callback has no positional parameter, the parameter is not
            annotated, or the annotation does not resolve to an `Event` subclass.
    """
    name = callable_name(callback)
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Cannot inspect signature of listener '{name}': {e}") from e

    params = [p for p in signature.parameters.values() if p.kind in _POSITIONAL_KINDS]
    if not params:
        raise ConfigurationError(
            f"Listener '{name}' must accept the event as its first positional parameter."
        )

    param = params[0]
    annotation = param.annotation
    if isinstance(annotation, str):
        annotation = _evaluate_annotation(callback, param.name)

    if not is_event_type(annotation):
        raise ConfigurationError(
            f"The first parameter of listener '{name}' must be annotated with an Event "
            f"subclass, got {param.annotation!r}."
        )
    return annotation


def _evaluate_annotation(callback: Callable[..., Any], param_name: str) -> Any:
    """Resolve a postponed (string) annotation, returns None if it cannot be resolved."""
    target = callback if inspect.isroutine(callback) else type(callback).__call__
    try:
        hints = get_type_hints(target)
    except Exception:
        return None
    return hints.get(param_name)
