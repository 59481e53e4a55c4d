"""Simple synchronous in-process event bus."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable


class EventBus:
    """Publish/subscribe bus for store changes.

    Handlers are called synchronously in registration order: type-specific
    subscribers first, then catch-all subscribers.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable]] = defaultdict(list)
        self._catch_all: list[Callable] = []

    def subscribe(self, event_type: type, handler: Callable) -> None:
        self._subscribers[event_type].append(handler)

    def subscribe_all(self, handler: Callable) -> None:
        self._catch_all.append(handler)

    def unsubscribe(self, handler: Callable) -> None:
        for handlers in self._subscribers.values():
            if handler in handlers:
                handlers.remove(handler)
        if handler in self._catch_all:
            self._catch_all.remove(handler)

    def publish(self, event: Any) -> None:
        for handler in list(self._subscribers.get(type(event), [])):
            handler(event)
        for handler in list(self._catch_all):
            handler(event)
