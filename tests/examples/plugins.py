"""Reusable test plugins recording the eventlite emission hooks."""

from typing import Any

from eventlite.plugins import hook_impl


class EmitRecorderPlugin:
    """
    Plugin recording every emission hook call.

    Usage:
        recorder = EmitRecorderPlugin()
        manager = EventManager(plugins=[recorder])
        manager.emit(Saving())
        assert recorder.after == [(event, 0, False)]
    """

    def __init__(self) -> None:
        self.before: list[Any] = []
        self.after: list[tuple[Any, int, bool]] = []

    @hook_impl
    def before_event_emit(self, event):
        self.before.append(event)

    @hook_impl
    def after_event_emit(self, event, invoked_count, canceled):
        self.after.append((event, invoked_count, canceled))
