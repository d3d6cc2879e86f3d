"""Hook specifications for eventlite emission lifecycle events."""

from eventlite.events import Event
from eventlite.plugins.hooks.markers import hook_spec


class EmitSpec:
    """Hook specifications for emission-level events of an `EventManager`."""

    @hook_spec
    def before_event_emit(self, event: Event) -> None:
        """
        Called before any listener of an emission is invoked.

        Args:
            event: The event about to be emitted.
        """

    @hook_spec
    def after_event_emit(self, event: Event, invoked_count: int, canceled: bool) -> None:
        """
        Called after an emission completed and the manager's `on_emitted` callbacks ran.

        Not called when a listener raised, the exception propagates to the emitter instead.

        Args:
            event: The emitted event.
            invoked_count: Number of listeners that were invoked, 0 if nobody listened.
            canceled: Whether a listener canceled the emission.
        """
