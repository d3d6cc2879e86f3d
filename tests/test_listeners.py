"""Unit tests for listener types and event type inference."""

import functools
from datetime import datetime

import pytest

from eventlite import CallbackListener
from eventlite import CallbackOnceListener
from eventlite import ConfigurationError
from eventlite import Event
from eventlite import InvalidArgumentError
from eventlite.listeners import resolve_event_type
from tests.examples.events import CountingListener
from tests.examples.events import Saved
from tests.examples.events import Saving


def on_saving(event: Saving) -> None:
    pass


def on_saving_postponed(event: "Saving") -> None:
    pass


class TestResolveEventType:
    """Tests for inferring the event type from a callback signature."""

    def test_function_annotation(self) -> None:
        """The first parameter annotation of a function is used."""
        assert resolve_event_type(on_saving) is Saving

    def test_string_annotation(self) -> None:
        """String annotations are evaluated in the callback's module."""
        assert resolve_event_type(on_saving_postponed) is Saving

    def test_lambda_without_annotation(self) -> None:
        """Callbacks without annotation cannot be resolved."""
        with pytest.raises(ConfigurationError, match="must be annotated with an Event subclass"):
            resolve_event_type(lambda event: None)

    def test_without_parameters(self) -> None:
        """Callbacks without positional parameter cannot be resolved."""
        with pytest.raises(ConfigurationError, match="first positional parameter"):
            resolve_event_type(lambda: None)

    def test_non_event_annotation(self) -> None:
        """Annotations that are not Event subclasses are rejected."""

        def on_time(t: datetime) -> None:  # pragma: no cover
            pass

        with pytest.raises(ConfigurationError, match="must be annotated with an Event subclass"):
            resolve_event_type(on_time)

    def test_unresolvable_string_annotation(self) -> None:
        """String annotations naming unknown classes are rejected."""

        def on_unknown(event: "Unknown") -> None:  # noqa: F821  # pragma: no cover
            pass

        with pytest.raises(ConfigurationError):
            resolve_event_type(on_unknown)

    def test_bound_method(self) -> None:
        """The bound instance is skipped and the event parameter is used."""

        class Service:
            def handle(self, event: Saved) -> None:  # pragma: no cover
                pass

        assert resolve_event_type(Service().handle) is Saved

    def test_callable_instance(self) -> None:
        """Callable instances are inspected through their __call__ method."""

        class Handler:
            def __call__(self, event: Saving) -> None:  # pragma: no cover
                pass

        assert resolve_event_type(Handler()) is Saving

    def test_partial_with_annotation(self) -> None:
        """Partials keep the annotation of the remaining parameters."""

        def handle(event: Saving, flag: bool) -> None:  # pragma: no cover
            pass

        assert resolve_event_type(functools.partial(handle, flag=True)) is Saving

    def test_base_event_is_accepted(self) -> None:
        """The Event base class itself is a valid event type."""

        def handle(event: Event) -> None:  # pragma: no cover
            pass

        assert resolve_event_type(handle) is Event


class TestCallbackListener:
    """Tests for CallbackListener."""

    def test_invoke_calls_callback(self) -> None:
        """Invoking the listener forwards the event to the callback."""
        received = []
        listener = CallbackListener(received.append, Saving)
        event = Saving("a")

        listener.invoke(event)

        assert received == [event]
        assert not listener.once

    def test_event_type_is_inferred_lazily(self) -> None:
        """The event type is only resolved when first accessed."""
        listener = CallbackListener(lambda event: None)
        with pytest.raises(ConfigurationError):
            listener.event_type

        assert CallbackListener(on_saving).event_type is Saving

    def test_explicit_event_type_must_be_event(self) -> None:
        """Explicit event types are validated on construction."""
        with pytest.raises(InvalidArgumentError, match="Expected an Event subclass"):
            CallbackListener(on_saving, datetime)  # type: ignore[arg-type]

    def test_matches_itself_and_its_callback(self) -> None:
        """A callback listener matches itself and the exact callback it wraps."""
        listener = CallbackListener(on_saving, Saving)
        other = CallbackListener(on_saving, Saving)

        assert listener.matches(listener)
        assert listener.matches(on_saving)
        assert not listener.matches(other)
        assert not listener.matches(lambda event: None)

    def test_repr(self) -> None:
        listener = CallbackListener(on_saving, Saving, once=True)
        assert repr(listener) == "CallbackListener(on_saving, event_type='Saving', once=True)"


class TestCallbackOnceListener:
    """Tests for CallbackOnceListener."""

    def test_once_flag(self) -> None:
        """Once listeners are flagged for eviction after their first invocation."""
        listener = CallbackOnceListener(on_saving)
        assert listener.once
        assert listener.event_type is Saving


class TestCustomListener:
    """Tests for user-defined listener kinds."""

    def test_matches_identity_only(self) -> None:
        """The default matching is identity based."""
        first = CountingListener()
        second = CountingListener()

        assert first.matches(first)
        assert not first.matches(second)
        assert not first.once
