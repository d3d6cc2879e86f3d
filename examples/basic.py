"""Example document store demonstrating eventlite usage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field

from eventlite import Event
from eventlite import EventManager
from eventlite.plugins.builtin import EmissionLoggingPlugin


@dataclass
class Saving(Event):
    name: str
    body: str


@dataclass
class Saved(Event):
    name: str


@dataclass
class Store:
    events: EventManager
    documents: dict[str, str] = field(default_factory=dict)

    def save(self, name: str, body: str) -> bool:
        result = self.events.emit(Saving(name, body))
        if result.canceled:
            return False
        self.documents[name] = body
        self.events.emit_if_listening(Saved, lambda: Saved(name))
        return True


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    events = EventManager(plugins=[EmissionLoggingPlugin(level=logging.INFO)])
    store = Store(events)

    @events.on(Saving)
    def reject_empty(event: Saving) -> None:
        if not event.body:
            event.cancel()

    @events.once(Saved)
    def announce_first(event: Saved) -> None:
        print(f"first document saved: {event.name}")

    store.save("draft", "")
    store.save("notes", "buy milk")
    store.save("todo", "write tests")
    print(f"stored documents: {sorted(store.documents)}")


if __name__ == "__main__":
    main()
