"""Base class for all events dispatched through eventlite."""

from typing_extensions import Self


class Event:
    """
    Mutable signal object passed to every listener of an emission.

    Concrete events subclass `Event` and add their own payload fields, plain classes and
    (non-frozen) dataclasses both work since the control flags live in class-level defaults and
    are only written to the instance once a listener flips them.

    Listeners steer the dispatch through three control operations:

    * `stop_propagation()` halts the remaining listeners and, with hierarchy dispatch enabled,
      every handler of an ancestor event type.
    * `cancel()` halts the remaining listeners of the current pass and is reported back to the
      emitter. The flag is cleared after every invocation so the same event can be emitted again.
    * `request_eviction()` removes the listener that is currently running once it returns.

    Examples:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Saving(Event):
        ...     target: str
        >>> event = Saving("report.txt")
        >>> event.cancel()
        >>> event.cancel_requested
        True
    """

    _propagation_stopped: bool = False
    _cancel_requested: bool = False
    _evict_requested: bool = False

    @property
    def propagation_stopped(self) -> bool:
        """Whether a listener called `stop_propagation()` on this event."""
        return self._propagation_stopped

    @property
    def cancel_requested(self) -> bool:
        """Whether the listener that just ran called `cancel()`."""
        return self._cancel_requested

    @property
    def evict_requested(self) -> bool:
        """Whether the listener that just ran asked to be removed."""
        return self._evict_requested

    def stop_propagation(self) -> None:
        """Stops delivery of this event to any further listener."""
        self._propagation_stopped = True

    def cancel(self) -> None:
        """Stops the current emission pass and reports it as canceled to the emitter."""
        self._cancel_requested = True

    def request_eviction(self, toggle: bool = True) -> Self:
        """
        Marks the currently running listener for removal after it returns.

        The request applies regardless of whether the listener was registered as a once-listener.

        Args:
            toggle: Pass False to withdraw an earlier request made during the same invocation.

        Returns:
            The event itself, to allow chaining.
        """
        self._evict_requested = toggle
        return self

    def reset_after_invocation(self) -> None:
        """Clears the per-invocation cancel request so the event can be reused."""
        self._cancel_requested = False
