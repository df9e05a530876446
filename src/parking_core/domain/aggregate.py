"""Aggregate outcomes and failure types.

An aggregate answers a command in one of two ways:
- It accepts the command and returns the events it produced.
- It rejects the command with a Rejection value (a business-rule outcome,
  not a defect). Rejections are returned inside a ConsumeResult so that
  callers must look at them; nothing is raised.

Defects are different: an aggregate asked to fold an event or decide a
command it does not recognise cannot continue safely, so it raises an
AggregateDefect and the caller fails fast.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from parking_core.domain.events import Event


class DomainError(Exception):
    """Raised when a caller unwraps a rejected ConsumeResult."""


class CommandRejected(DomainError):
    """A command was rejected by a business rule."""

    def __init__(self, rejection: Rejection) -> None:
        self.rejection = rejection
        super().__init__(rejection.message)


class AggregateDefect(Exception):
    """The aggregate was asked to do something its schema does not cover."""


class UnhandledEventKind(AggregateDefect):
    """The fold received an event variant it cannot interpret."""

    def __init__(self, event: object, reason: str = "") -> None:
        self.event = event
        super().__init__(reason or f"Unhandled event kind: {type(event).__name__}")


class DuplicateSessionStart(UnhandledEventKind):
    """A second ParkingSessionStarted was found in one session's history."""

    def __init__(self, event: object) -> None:
        super().__init__(event, "Parking session already started; history is malformed")


class UnhandledCommandKind(AggregateDefect):
    """The aggregate received a command variant it cannot decide."""

    def __init__(self, command: object) -> None:
        self.command = command
        super().__init__(f"Unhandled command kind: {type(command).__name__}")


# ---------------------------------------------------------------------------
# Rejections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvalidExtensionDuration:
    """Rejection: the requested extension was not a positive whole number."""
    by_minutes: int

    @property
    def message(self) -> str:
        return f"Extension must be a positive whole number of minutes, got {self.by_minutes!r}"


@dataclass(frozen=True)
class MaximumStayExceeded:
    """Rejection: the extension would push the session past its maximum stay."""
    by_minutes: int
    accumulated_minutes: int
    maximum_stay_minutes: int

    @property
    def message(self) -> str:
        return (
            f"Cannot extend by {self.by_minutes} minutes: "
            f"{self.accumulated_minutes} of {self.maximum_stay_minutes} minutes already used"
        )


Rejection = Union[InvalidExtensionDuration, MaximumStayExceeded]


@dataclass(frozen=True)
class ConsumeResult:
    """Outcome of handing one command to an aggregate.

    Exactly one of the two holds: events is non-empty and rejection is None,
    or events is empty and rejection is set.
    """
    events: tuple[Event, ...] = ()
    rejection: Rejection | None = None

    def __post_init__(self) -> None:
        if bool(self.events) == (self.rejection is not None):
            raise ValueError(
                "ConsumeResult needs either produced events or a rejection, not both or neither"
            )

    @classmethod
    def accept(cls, *events: Event) -> ConsumeResult:
        return cls(events=tuple(events))

    @classmethod
    def reject(cls, rejection: Rejection) -> ConsumeResult:
        return cls(rejection=rejection)

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    def unwrap(self) -> list[Event]:
        """Return the produced events, raising CommandRejected on rejection."""
        if self.rejection is not None:
            raise CommandRejected(self.rejection)
        return list(self.events)
