"""Command Handler: application-layer orchestrator.

The command handler connects the outside world to the ParkingSession
aggregate:
1. Loads the location's event stream from the event store.
2. Hydrates a fresh ParkingSession by replaying the stream.
3. Passes the command to the session for a decision.
4. Persists the produced events, expecting the version it hydrated from.
5. Dispatches persisted events via the event dispatcher.

The handler contains NO domain logic. It loads, delegates, and persists.
A ParkingSession instance lives for one handle() call only; if the append
fails the instance is dropped and the next call re-hydrates from the store.
"""

from __future__ import annotations

import logging

from parking_core.application.event_dispatcher import EventDispatcher
from parking_core.domain.aggregate import ConsumeResult
from parking_core.domain.commands import Command
from parking_core.domain.event_store import EventStore
from parking_core.domain.events import StoredEvent
from parking_core.domain.parking_session import ParkingSession, validate_maximum_stay_minutes

logger = logging.getLogger(__name__)


class ParkingSessionCommandHandler:
    """Orchestrates: load stream → hydrate → consume → persist → dispatch."""

    def __init__(
        self,
        event_store: EventStore,
        dispatcher: EventDispatcher,
        maximum_stay_minutes: int | None = None,
    ) -> None:
        self._event_store = event_store
        self._dispatcher = dispatcher
        self._maximum_stay_minutes = validate_maximum_stay_minutes(maximum_stay_minutes)

    def load(self, location_id: str) -> ParkingSession:
        """Rebuild a session for location_id from its full stream."""
        return self._hydrated(location_id, self._event_store.read_stream(location_id))

    def _hydrated(self, location_id: str, stream: list[StoredEvent]) -> ParkingSession:
        session = ParkingSession(location_id, self._maximum_stay_minutes)
        session.hydrate(stored.event for stored in stream)
        return session

    def handle(self, location_id: str, command: Command) -> ConsumeResult:
        """Handle a command against the session at location_id.

        Returns the aggregate's result. On acceptance its events are the ones
        that were persisted; on rejection nothing is persisted or dispatched.
        Raises ConcurrencyError if the stream moved since it was read, and
        AggregateDefect if the stream or command cannot be interpreted.
        """
        # 1-2. Load and hydrate
        stream = self._event_store.read_stream(location_id)
        current_version = stream[-1].version if stream else 0
        session = self._hydrated(location_id, stream)

        # 3. Decide
        result = session.consume(command)
        if not result.accepted:
            logger.info(
                "Command %s rejected for location %s: %s",
                type(command).__name__,
                location_id,
                result.rejection.message,
            )
            return result

        # 4. Persist against the version we hydrated from
        persisted = self._event_store.append(
            location_id,
            list(result.events),
            expected_version=current_version,
        )
        logger.debug(
            "Persisted %d event(s) for location %s up to version %d",
            len(persisted),
            location_id,
            persisted[-1].version if persisted else current_version,
        )

        # 5. Dispatch
        for stored in persisted:
            self._dispatcher.dispatch(stored)

        return ConsumeResult.accept(*(stored.event for stored in persisted))
