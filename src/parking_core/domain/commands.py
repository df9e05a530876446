"""Commands accepted by the parking session aggregate.

A command is an intent that has not happened yet. The aggregate either
accepts it (producing events) or rejects it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ExtendParkingSession:
    """Command: extend the session by a signed number of minutes.

    Non-positive values are representable so that the aggregate, not the
    constructor, is the one to reject them.
    """
    by_minutes: int


Command = Union[ExtendParkingSession]
