"""ParkingSession aggregate.

A parking session at one location. Its state is never stored: it is derived
by folding the session's event history through apply_event, and commands
are decided against that derived state.

Lifecycle:
  construct (empty) → hydrate(history) → consume(command)*

The same apply_event fold is used when replaying history and when applying
the event a successful command just produced, so replaying the returned
events later reconstructs exactly the state consume() left behind.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable

from parking_core.domain.aggregate import (
    ConsumeResult,
    DuplicateSessionStart,
    InvalidExtensionDuration,
    MaximumStayExceeded,
    UnhandledCommandKind,
    UnhandledEventKind,
)
from parking_core.domain.commands import Command, ExtendParkingSession
from parking_core.domain.events import (
    Event,
    ParkingSessionExtended,
    ParkingSessionStarted,
)

DEFAULT_MAXIMUM_STAY_MINUTES = 24 * 60

_ONE_MINUTE = timedelta(minutes=1)


def _is_whole_minutes(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_maximum_stay_minutes(maximum_stay_minutes: int | None) -> int:
    """Return the ceiling in minutes, applying the default for None."""
    if maximum_stay_minutes is None:
        return DEFAULT_MAXIMUM_STAY_MINUTES
    if not _is_whole_minutes(maximum_stay_minutes):
        raise TypeError(
            f"Maximum stay must be a whole number of minutes, got {maximum_stay_minutes!r}"
        )
    if maximum_stay_minutes <= 0:
        raise ValueError("Maximum stay must be a positive number of minutes")
    return maximum_stay_minutes


@dataclass(frozen=True)
class ParkingSessionState:
    """Derived state of one parking session. Replaced, never mutated."""
    has_started: bool = False
    user_id: str | None = None
    start_time: datetime | None = None
    accumulated_extension: timedelta = timedelta(0)

    @property
    def accumulated_minutes(self) -> int:
        return self.accumulated_extension // _ONE_MINUTE


def apply_event(state: ParkingSessionState, event: Event) -> ParkingSessionState:
    """Pure fold: apply one event to produce the next state.

    This is the only way an event affects a session's state.
    """
    if isinstance(event, ParkingSessionStarted):
        if state.has_started:
            raise DuplicateSessionStart(event)
        return replace(
            state,
            has_started=True,
            user_id=event.user_id,
            start_time=event.start_time,
        )
    elif isinstance(event, ParkingSessionExtended):
        return replace(
            state,
            accumulated_extension=state.accumulated_extension + timedelta(minutes=event.by_minutes),
        )
    raise UnhandledEventKind(event)


def decide(
    state: ParkingSessionState,
    command: Command,
    maximum_stay: timedelta,
) -> ConsumeResult:
    """Pure decision: accept or reject a command against a given state.

    Reads only its arguments and changes nothing.
    """
    if isinstance(command, ExtendParkingSession):
        if not _is_whole_minutes(command.by_minutes) or command.by_minutes <= 0:
            return ConsumeResult.reject(InvalidExtensionDuration(command.by_minutes))
        requested = timedelta(minutes=command.by_minutes)
        if state.accumulated_extension + requested > maximum_stay:
            return ConsumeResult.reject(MaximumStayExceeded(
                by_minutes=command.by_minutes,
                accumulated_minutes=state.accumulated_minutes,
                maximum_stay_minutes=maximum_stay // _ONE_MINUTE,
            ))
        return ConsumeResult.accept(ParkingSessionExtended(by_minutes=command.by_minutes))
    raise UnhandledCommandKind(command)


class ParkingSession:
    """Event-sourced aggregate for a single parking session.

    Not thread-safe: one writer per instance, hydrate() before consume(),
    consume() calls strictly sequential. Instances for different locations
    share nothing.
    """

    def __init__(self, location_id: str, maximum_stay_minutes: int | None = None) -> None:
        if not location_id:
            raise ValueError("location_id must be a non-empty identifier")
        self._location_id = location_id
        self._maximum_stay = timedelta(minutes=validate_maximum_stay_minutes(maximum_stay_minutes))
        self._state = ParkingSessionState()

    @property
    def location_id(self) -> str:
        return self._location_id

    @property
    def maximum_stay(self) -> timedelta:
        return self._maximum_stay

    @property
    def maximum_stay_minutes(self) -> int:
        return self._maximum_stay // _ONE_MINUTE

    @property
    def state(self) -> ParkingSessionState:
        return self._state

    @property
    def has_started(self) -> bool:
        return self._state.has_started

    @property
    def user_id(self) -> str | None:
        return self._state.user_id

    @property
    def start_time(self) -> datetime | None:
        return self._state.start_time

    @property
    def accumulated_extension(self) -> timedelta:
        return self._state.accumulated_extension

    @property
    def accumulated_minutes(self) -> int:
        return self._state.accumulated_minutes

    @property
    def remaining_minutes(self) -> int:
        return self.maximum_stay_minutes - self.accumulated_minutes

    def hydrate(self, events: Iterable[Event]) -> None:
        """Replay history, oldest first, through apply_event.

        Callers supply each event exactly once over the instance's lifetime;
        replaying events that were already hydrated or consumed applies them
        twice. If any event faults, the instance keeps its previous state.
        """
        state = self._state
        for event in events:
            state = apply_event(state, event)
        self._state = state

    def consume(self, command: Command) -> ConsumeResult:
        """Validate a command and, if accepted, apply the events it produced.

        State changes only when the result is accepted; a rejected result
        carries no events and leaves the session exactly as it was.
        """
        result = decide(self._state, command, self._maximum_stay)
        if result.accepted:
            self.hydrate(result.events)
        return result

    def __repr__(self) -> str:
        return (
            f"ParkingSession(location_id={self._location_id!r}, "
            f"accumulated_minutes={self.accumulated_minutes}, "
            f"maximum_stay_minutes={self.maximum_stay_minutes})"
        )
