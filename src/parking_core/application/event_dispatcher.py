"""Event Dispatcher: hands persisted session events to in-process subscribers.

Subscribers register for a domain event class (ParkingSessionStarted,
ParkingSessionExtended) and receive the StoredEvent envelope, so they see
the location and version the event was committed at. A subscriber that
raises is logged and skipped; the rest still receive the event.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from parking_core.domain.events import StoredEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[StoredEvent], None]


class EventDispatcher:

    def __init__(self) -> None:
        self._subscriptions: dict[type, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_class: type, handler: EventHandler) -> None:
        self._subscriptions[event_class].append(handler)

    def dispatch(self, stored: StoredEvent) -> None:
        """Deliver one committed event to the subscribers of its class."""
        for handler in self._subscriptions.get(type(stored.event), []):
            try:
                handler(stored)
            except Exception:
                logger.exception(
                    "Subscriber %r failed on %s for location %s at version %d",
                    handler,
                    type(stored.event).__name__,
                    stored.location_id,
                    stored.version,
                )
