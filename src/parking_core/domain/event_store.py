"""Event Store port (interface).

This is a domain-layer port: it defines WHAT the event store must do, not
HOW. Infrastructure adapters implement this protocol.

The event store is append-only. It keeps one stream of immutable events per
parking location, versioned sequentially from 1.
"""

from __future__ import annotations

from typing import Protocol, Sequence
from uuid import UUID

from parking_core.domain.events import Event, StoredEvent


class EventStore(Protocol):
    """Port for event persistence.

    Implementations must satisfy:
    - Append-only: stored events are never modified or deleted.
    - Sequential per stream: version is contiguous (1, 2, 3, ...) per location_id.
    - Atomic append: either every event of one append is stored or none is.
    - No domain logic: the store does not interpret events.
    """

    def append(
        self,
        location_id: str,
        events: Sequence[Event],
        expected_version: int,
    ) -> list[StoredEvent]:
        """Append events to a location's stream.

        Behavior:
        - expected_version is the stream version the caller hydrated from.
        - The first appended event receives version expected_version + 1.
        - Sets event_id and recorded_at on every stored event.
        - Returns the stored events in order.

        Raises:
            ConcurrencyError: if expected_version is not the current stream version.
        """
        ...

    def read_stream(self, location_id: str) -> list[StoredEvent]:
        """Read all events for a location, ordered by version.

        Returns an empty list if the location has no events.
        """
        ...

    def stream_version(self, location_id: str) -> int:
        """Return the highest version of a stream, 0 if it has no events."""
        ...

    def event_exists(self, event_id: UUID) -> bool:
        """Check if an event with the given ID has been persisted."""
        ...
