"""Domain event value objects and the stored-event envelope.

Events are immutable records of facts about one parking session. They carry
no identity of their own: within a session's history an event is identified
only by its position.

This module defines:
- ParkingSessionStarted / ParkingSessionExtended: the two event variants.
- Event: the closed union over those variants.
- StoredEvent: the envelope an event store keeps (location, version, id, time).
- ConcurrencyError: raised when a stream's version does not match an append.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union
from uuid import UUID, uuid4


class ConcurrencyError(Exception):
    """Raised when an append's expected version is not the stream's version.

    expected_version is the version the caller hydrated from; stream_version
    is the version the stream actually had when the append was attempted.
    """

    def __init__(self, location_id: str, expected_version: int, stream_version: int) -> None:
        self.location_id = location_id
        self.expected_version = expected_version
        self.stream_version = stream_version
        super().__init__(
            f"Concurrency conflict on parking session {location_id}: "
            f"expected version {expected_version}, stream is at {stream_version}"
        )


@dataclass(frozen=True)
class ParkingSessionStarted:
    """A user started parking. At most one per session."""
    user_id: str
    start_time: datetime


@dataclass(frozen=True)
class ParkingSessionExtended:
    """The session's stay was extended by a positive number of minutes."""
    by_minutes: int


Event = Union[ParkingSessionStarted, ParkingSessionExtended]


@dataclass(frozen=True)
class StoredEvent:
    """A domain event as persisted in a location's stream.

    version is 1-based and contiguous per location_id. event_id and
    recorded_at are assigned by the event store at persist time; the domain
    event itself is stored opaquely.
    """

    location_id: str
    version: int
    event: Event
    event_id: UUID = field(default_factory=uuid4)
    recorded_at: datetime | None = None
