"""In-process pub/sub used to notify rendering and audio consumers."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

TEvent = TypeVar("TEvent")
EventHandler = Callable[[Any], None]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Subscription:
    """Opaque subscription token."""

    id: int
    event_type: type[object]


class EventBus:
    """Dispatches each published game event to matching handlers.

    Handlers run synchronously in subscription order and match on
    ``isinstance``, so subscribing to ``object`` receives everything.
    Handler exceptions propagate to the publisher.
    """

    def __init__(self) -> None:
        self._next_id = 1
        self._handlers: dict[int, tuple[type[object], EventHandler]] = {}
        self._published: Counter[str] = Counter()

    def subscribe(
        self,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        subscription = Subscription(self._next_id, event_type)
        self._next_id += 1
        self._handlers[subscription.id] = (event_type, handler)
        return subscription

    def subscribe_all(self, handler: Callable[[object], None]) -> Subscription:
        return self.subscribe(object, handler)

    def unsubscribe(self, subscription: Subscription) -> None:
        self._handlers.pop(subscription.id, None)

    def publish(self, event: object) -> int:
        """Publish one event and return the number of invoked handlers."""
        name = type(event).__name__
        self._published[name] += 1
        targets = [
            handler
            for event_type, handler in tuple(self._handlers.values())
            if isinstance(event, event_type)
        ]
        logger.debug("event_published type=%s handlers=%d", name, len(targets))
        for handler in targets:
            handler(event)
        return len(targets)

    def published_count(self, event_type: type[object]) -> int:
        return self._published[event_type.__name__]
