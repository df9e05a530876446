"""In-memory Event Store adapter.

Implements the EventStore protocol defined in domain/event_store.py, for
development and testing. A persistent implementation would implement the
same protocol.

Rules enforced:
- Append-only: events are stored in insertion order, never removed.
- Sequential versioning: versions are contiguous per location stream.
- Atomic append: a version conflict stores nothing.
- No business logic, no interpretation of the stored events.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID, uuid4

from parking_core.domain.events import ConcurrencyError, Event, StoredEvent


class InMemoryEventStore:
    """In-memory implementation of the EventStore protocol.

    - _streams: location_id → list of stored events (ordered by version).
    - _events_by_id: event_id → stored event (for existence checks).
    """

    def __init__(self) -> None:
        self._streams: dict[str, list[StoredEvent]] = {}
        self._events_by_id: dict[UUID, StoredEvent] = {}

    def append(
        self,
        location_id: str,
        events: Sequence[Event],
        expected_version: int,
    ) -> list[StoredEvent]:
        current_version = self.stream_version(location_id)
        if expected_version != current_version:
            raise ConcurrencyError(
                location_id=location_id,
                expected_version=expected_version,
                stream_version=current_version,
            )

        recorded_at = datetime.now(timezone.utc)
        persisted = [
            StoredEvent(
                location_id=location_id,
                version=current_version + i + 1,
                event=event,
                event_id=uuid4(),
                recorded_at=recorded_at,
            )
            for i, event in enumerate(events)
        ]

        self._streams.setdefault(location_id, []).extend(persisted)
        for stored in persisted:
            self._events_by_id[stored.event_id] = stored

        return persisted

    def read_stream(self, location_id: str) -> list[StoredEvent]:
        return list(self._streams.get(location_id, []))

    def stream_version(self, location_id: str) -> int:
        stream = self._streams.get(location_id, [])
        if not stream:
            return 0
        return stream[-1].version

    def event_exists(self, event_id: UUID) -> bool:
        return event_id in self._events_by_id
