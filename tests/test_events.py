"""Unit tests for the Event control flags."""

from tests.examples.events import Deleting
from tests.examples.events import Saving


class TestEventFlags:
    """Tests for the control operations available to listeners."""

    def test_defaults(self) -> None:
        """A fresh event has no flag set."""
        event = Saving("a")
        assert not event.propagation_stopped
        assert not event.cancel_requested
        assert not event.evict_requested

    def test_stop_propagation(self) -> None:
        """stop_propagation sets the flag permanently."""
        event = Saving("a")
        event.stop_propagation()
        event.reset_after_invocation()
        assert event.propagation_stopped

    def test_cancel_is_reset_after_invocation(self) -> None:
        """The cancel request only lasts until the end of the current invocation."""
        event = Saving("a")
        event.cancel()
        assert event.cancel_requested

        event.reset_after_invocation()
        assert not event.cancel_requested

    def test_request_eviction_toggle_and_chaining(self) -> None:
        """request_eviction returns the event and can be withdrawn."""
        event = Saving("a")
        assert event.request_eviction() is event
        assert event.evict_requested

        event.request_eviction(False)
        assert not event.evict_requested

    def test_flags_are_per_instance(self) -> None:
        """Flags set on one event do not leak into other instances of the same class."""
        first = Deleting("k1")
        second = Deleting("k2")
        first.stop_propagation()
        first.cancel()

        assert not second.propagation_stopped
        assert not second.cancel_requested

    def test_dataclass_payload_is_preserved(self) -> None:
        """Dataclass events keep their generated equality and repr."""
        assert Saving("a") == Saving("a")
        assert repr(Saving("a")) == "Saving(target='a')"
