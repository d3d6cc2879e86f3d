"""Internal shared validation functions for event types."""

from typing import Any

from typing_extensions import TypeGuard

from eventlite.events import Event
from eventlite.exceptions import InvalidArgumentError


def is_event_type(obj: Any) -> TypeGuard[type[Event]]:
    """Returns True if `obj` is `Event` or one of its subclasses."""
    return isinstance(obj, type) and issubclass(obj, Event)


def check_event_type(event_type: Any) -> None:
    """
    Checks that an explicitly supplied event type denotes an `Event` subclass.

    Args:
        event_type: The value passed where an event type was expected.

    Raises:
        InvalidArgumentError: If `event_type` is not `Event` or a subclass of it.
    """
    if not is_event_type(event_type):
        raise InvalidArgumentError(
            f"Expected an Event subclass as event type, got {event_type!r}"
        )
