"""Synchronous event bus for garden events.

The EventBus is a lightweight pub/sub mechanism that lets a UI layer hear
about blooms, season changes and level-ups without the store knowing who is
listening.

Events raised while an action is still in flight are queued with
``defer()``; the store calls ``flush()`` once the new state has been saved
and ``discard_pending()`` if the save failed, so listeners never hear about
changes that were not persisted.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


class EventBus:
    """Synchronous event bus for domain events.

    Example:
        bus = EventBus()
        bus.subscribe(PlantBloomed, handle_bloom)
        bus.emit(PlantBloomed(plant_id="plant-1", name="Rose", occurred_at=now))
    """

    def __init__(self) -> None:
        """Initialize an empty event bus."""
        self._handlers: dict[type, list[Callable]] = defaultdict(list)
        self._pending: list[object] = []

    def emit(self, event: object) -> None:
        """Dispatch an event immediately to all handlers for its type.

        Handlers are called synchronously in registration order. With no
        handlers registered this is a no-op.
        """
        handlers = self._handlers.get(type(event))
        if handlers:
            for handler in list(handlers):
                handler(event)

    def defer(self, event: object) -> None:
        """Queue an event to be emitted on the next ``flush()``."""
        self._pending.append(event)

    def flush(self) -> int:
        """Emit all queued events in order; returns how many were emitted."""
        pending, self._pending = self._pending, []
        for event in pending:
            self.emit(event)
        return len(pending)

    def discard_pending(self) -> int:
        """Drop queued events without emitting them."""
        dropped = len(self._pending)
        self._pending = []
        return dropped

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for a specific event type."""
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler; returns True if it was registered."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def clear_subscribers(self) -> None:
        self._handlers.clear()

    def subscriber_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))
