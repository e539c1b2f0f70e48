"""In-process event dispatchers for tenancy lifecycle events.

Listeners are registered per event class and called synchronously in
registration order. Listener exceptions propagate to the caller of the
engine operation that dispatched the event.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tenancy.domain.events import DomainEvent

Listener = Callable[[Any], None]


class InMemoryEventDispatcher:
    """Routes events to listeners registered for their exact type.

    ``dispatched`` keeps every event in order, which doubles as an audit
    trail in tests.
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = {}
        self.dispatched: list[DomainEvent] = []

    def subscribe(self, event_type: type, listener: Listener) -> None:
        """Register ``listener`` for events of ``event_type``.

        Args:
            event_type: Event class to listen for
            listener: Callable receiving the event instance
        """
        self._listeners.setdefault(event_type, []).append(listener)

    def listeners_for(self, event_type: type) -> list[Listener]:
        return list(self._listeners.get(event_type, []))

    def dispatch(self, event: DomainEvent) -> None:
        self.dispatched.append(event)
        for listener in self._listeners.get(type(event), []):
            listener(event)


class NullEventDispatcher:
    """Discards every event."""

    def dispatch(self, event: DomainEvent) -> None:
        return None
