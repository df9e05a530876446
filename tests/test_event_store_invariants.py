"""Invariant tests for the Event Store.

Invariants tested:
- Sequential versioning: versions are contiguous per location stream.
- Concurrency control: an append against a stale version raises ConcurrencyError.
- Atomic append: a rejected append stores nothing.
- Immutability: stored events read back identical, and reads are copies.
- The store assigns event_id and recorded_at.
- Streams for different locations are independent.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from parking_core.domain.events import (
    ConcurrencyError,
    ParkingSessionExtended,
    ParkingSessionStarted,
)
from parking_core.infrastructure.in_memory_event_store import InMemoryEventStore


# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------

def _started() -> ParkingSessionStarted:
    return ParkingSessionStarted(user_id="123", start_time=datetime(2013, 1, 1, 16, 0, 0))


def _seeded_store(location_id: str = "452", *extensions: int) -> InMemoryEventStore:
    store = InMemoryEventStore()
    store.append(location_id, [_started()], expected_version=0)
    for i, minutes in enumerate(extensions):
        store.append(location_id, [ParkingSessionExtended(minutes)], expected_version=i + 1)
    return store


# ---------------------------------------------------------------------------
# Sequential versioning per stream
# ---------------------------------------------------------------------------

class TestSequentialVersioning:

    def test_empty_stream_has_version_0(self) -> None:
        store = InMemoryEventStore()
        assert store.stream_version("452") == 0
        assert store.read_stream("452") == []

    def test_first_event_gets_version_1(self) -> None:
        store = InMemoryEventStore()
        [stored] = store.append("452", [_started()], expected_version=0)
        assert stored.version == 1
        assert stored.location_id == "452"

    def test_multi_event_append_gets_contiguous_versions(self) -> None:
        store = InMemoryEventStore()
        stored = store.append(
            "452",
            [_started(), ParkingSessionExtended(30), ParkingSessionExtended(15)],
            expected_version=0,
        )
        assert [s.version for s in stored] == [1, 2, 3]
        assert store.stream_version("452") == 3

    def test_stale_expected_version_is_rejected(self) -> None:
        store = _seeded_store("452", 30)

        with pytest.raises(ConcurrencyError) as exc_info:
            store.append("452", [ParkingSessionExtended(10)], expected_version=1)

        assert exc_info.value.location_id == "452"
        assert exc_info.value.expected_version == 1
        assert exc_info.value.stream_version == 2
        assert "expected version 1, stream is at 2" in str(exc_info.value)

    def test_expected_version_ahead_of_stream_is_rejected(self) -> None:
        store = InMemoryEventStore()
        with pytest.raises(ConcurrencyError):
            store.append("452", [_started()], expected_version=3)

    def test_different_locations_have_independent_versions(self) -> None:
        store = InMemoryEventStore()
        store.append("452", [_started()], expected_version=0)
        store.append("453", [_started()], expected_version=0)
        store.append("452", [ParkingSessionExtended(5)], expected_version=1)

        assert store.stream_version("452") == 2
        assert store.stream_version("453") == 1


# ---------------------------------------------------------------------------
# Atomicity and immutability
# ---------------------------------------------------------------------------

class TestAppendOnly:

    def test_rejected_append_stores_nothing(self) -> None:
        store = _seeded_store("452")
        before = store.read_stream("452")

        with pytest.raises(ConcurrencyError):
            store.append(
                "452",
                [ParkingSessionExtended(10), ParkingSessionExtended(20)],
                expected_version=0,
            )

        assert store.read_stream("452") == before

    def test_events_read_back_in_order_and_unchanged(self) -> None:
        store = _seeded_store("452", 30, 15)
        events = [s.event for s in store.read_stream("452")]
        assert events == [_started(), ParkingSessionExtended(30), ParkingSessionExtended(15)]

    def test_read_stream_returns_a_copy(self) -> None:
        store = _seeded_store("452")
        store.read_stream("452").clear()
        assert len(store.read_stream("452")) == 1

    def test_store_assigns_event_id_and_recorded_at(self) -> None:
        store = InMemoryEventStore()
        before = datetime.now(timezone.utc)
        [stored] = store.append("452", [_started()], expected_version=0)

        assert stored.recorded_at is not None
        assert stored.recorded_at >= before
        assert store.event_exists(stored.event_id)

    def test_unknown_event_id_does_not_exist(self) -> None:
        from uuid import uuid4

        store = _seeded_store("452")
        assert not store.event_exists(uuid4())

    def test_stored_events_keep_their_domain_classes(self) -> None:
        store = _seeded_store("452", 30)
        assert [type(s.event) for s in store.read_stream("452")] == [
            ParkingSessionStarted,
            ParkingSessionExtended,
        ]
