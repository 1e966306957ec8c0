"""Opposed checks: an active roll against a passive one."""

from __future__ import annotations

from witch_iron.records import CheckResult, OpposedOutcome
from witch_iron.types import Outcome


def resolve(active: CheckResult, passive: CheckResult) -> OpposedOutcome:
    """Compare two classified checks.

    A failed active roll loses outright. A successful active roll against
    a failed passive one wins with all of its hits. When both succeed the
    difference in hits decides it, and an exact tie goes to the active
    side.
    """
    if not active.is_success:
        margin = passive.hits if passive.is_success else 0
        return OpposedOutcome(success=False, net_hits=0, margin=margin)

    if not passive.is_success:
        return OpposedOutcome(success=True, net_hits=active.hits, margin=active.hits)

    margin = active.hits - passive.hits
    return OpposedOutcome(success=margin >= 0, net_hits=abs(margin), margin=margin)


def outcomes(net_hits: int) -> tuple[Outcome, Outcome]:
    """(initiator, responder) outcome labels for a signed net hits value.

    Zero is a victory at a cost for both sides.
    """
    if net_hits > 0:
        return "Victory", "Defeat"
    if net_hits < 0:
        return "Defeat", "Victory"
    return "VictoryAtACost", "VictoryAtACost"
