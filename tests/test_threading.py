"""Tests for using a single manager from several threads."""

import threading

from eventlite import EventManager
from tests.examples.events import Recorder
from tests.examples.events import Saving


class TestThreadedUse:
    """Concurrent registration and emission keep the registry consistent."""

    def test_concurrent_registration(self) -> None:
        """No registration is lost when threads register for the same type."""
        manager = EventManager()
        recorders = [Recorder() for _ in range(200)]
        barrier = threading.Barrier(4)

        def register(chunk: list[Recorder]) -> None:
            barrier.wait()
            for recorder in chunk:
                manager.on(Saving, recorder)

        threads = [
            threading.Thread(target=register, args=(recorders[i::4],)) for i in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert manager.emit(Saving("a")).invoked == 200

    def test_once_listeners_with_concurrent_emitters(self) -> None:
        """Each once listener runs exactly once and the handler is discarded afterwards."""
        manager = EventManager()
        recorders = [Recorder() for _ in range(50)]
        for recorder in recorders:
            manager.once(Saving, recorder)

        threads = [threading.Thread(target=manager.emit, args=(Saving("a"),)) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert [recorder.count for recorder in recorders] == [1] * 50
        assert not manager.has_listeners(Saving)
        assert manager.event_types() == ()

    def test_running_once_listener_is_not_invoked_by_another_thread(self) -> None:
        """A once listener still running in one thread is skipped by a concurrent emission."""
        manager = EventManager()
        entered = threading.Event()
        release = threading.Event()

        def block(event: Saving) -> None:
            entered.set()
            release.wait(timeout=5)

        recorder = Recorder(block)
        manager.once(Saving, recorder)
        first = threading.Thread(target=manager.emit, args=(Saving("first"),))
        first.start()
        assert entered.wait(timeout=5)

        try:
            result = manager.emit(Saving("second"))
        finally:
            release.set()
            first.join()

        assert result.invoked == 0
        assert recorder.events == [Saving("first")]
        assert not manager.has_listeners(Saving)
