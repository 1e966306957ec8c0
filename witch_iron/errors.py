"""
Errors raised by the resolution engine.

Every error here is local: it stops the one operation that raised it
before any state is mutated, and the event-driven entry point
(Engine.handle_check) turns it into a user-visible warning. None of them
is fatal to the process, and nothing is retried.
"""

from __future__ import annotations


class WitchIronError(Exception):
    """Base class for every rules-engine error."""


class MissingActor(WitchIronError, LookupError):
    """A referenced actor id is not in the world."""

    def __init__(self, actor_id: str) -> None:
        super().__init__(f"Actor {actor_id!r} not found")
        self.actor_id = actor_id


class MissingPendingData(WitchIronError, LookupError):
    """A quarrel (or the check or result it needs) is not being held.

    Raised for the second of two resolutions of the same quarrel, which
    is what keeps resolution from applying damage twice.
    """

    def __init__(self, quarrel_id: str, kind: str = "Quarrel") -> None:
        super().__init__(f"{kind} {quarrel_id!r} not found")
        self.quarrel_id = quarrel_id


class InvalidLocation(WitchIronError, ValueError):
    """A location string outside the recognized body locations."""

    def __init__(self, location: str) -> None:
        super().__init__(f"Invalid body location: {location!r}")
        self.location = location


class InsufficientResource(WitchIronError, ValueError):
    """A hits spend that cannot be clamped (e.g. relocating with fewer
    than 2 net hits, or relocating a second time)."""


class CheckAlreadyResolved(WitchIronError, ValueError):
    """Reverse/reroll/luck was attempted on a check that a resolved
    quarrel has already consumed."""

    def __init__(self, check_id: str) -> None:
        super().__init__(f"Check {check_id!r} has already been resolved")
        self.check_id = check_id


class InvalidInjuryIndex(WitchIronError, IndexError):
    """Treat/make-permanent/delete was given an index with no injury."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Injury {index} not found")
        self.index = index
