"""
Quarrel bookkeeping: pending checks, matching, and condition outcomes.

A quarrel is two checks rolled at different times. When the first actor
rolls with a target selected, the check is registered as pending under
the target's token id (when there is one) and actor id, and both actors
are marked active. When the target next rolls, its check is matched to
the pending one, which becomes a Quarrel ready to resolve.

An actor marked active who has nothing pending against them is the one
waiting on an opponent; their further rolls are left alone until the
quarrel resolves or they are cleared.

The registry is an explicitly owned object: an Engine holds one, and tests
build a fresh one per case.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from witch_iron.actor import Actor
from witch_iron.errors import MissingPendingData
from witch_iron.records import CheckResult, ConditionEffect, Participant, PendingCheck, Quarrel
from witch_iron.settings import Settings
from witch_iron.types import AFFLICTIONS, MENTAL_CONDITIONS

logger = logging.getLogger(__name__)

DEFEAT_MARKERS: dict[str, str] = {
    "stress": "madness",
    "corruption": "mutation",
}


def quarrel_id(initiator_check_id: str, responder_check_id: str) -> str:
    return f"{initiator_check_id}-{responder_check_id}"


class QuarrelRegistry:
    """In-memory matching state for quarrels in progress."""

    def __init__(self) -> None:
        self.pending_by_actor: dict[str, PendingCheck] = {}
        self.pending_by_token: dict[str, PendingCheck] = {}
        self.active: set[str] = set()
        """Actors currently in a quarrel, on either side."""

        self.selected_check: PendingCheck | None = None
        """A check chosen by hand; the next check by anyone answers it."""

        self.quarrels: dict[str, Quarrel] = {}
        """Matched quarrels waiting to be resolved, by quarrel id."""

    def is_active(self, actor_id: str) -> bool:
        return actor_id in self.active

    def _involved(self) -> set[str]:
        """Actors on either side of a check that is still pending."""
        return {
            party
            for pending in self.pending_checks()
            for party in (pending.initiator.actor_id, pending.target_actor_id)
        }

    def register(self, pending: PendingCheck) -> None:
        """Hold a check until its target rolls. Replaces any check already
        pending against the same target."""
        if pending.target_token_id:
            self.pending_by_token[pending.target_token_id] = pending
        if pending.target_actor_id in self.pending_by_actor:
            logger.debug("Replacing pending check against %s", pending.target_actor_id)
        self.pending_by_actor[pending.target_actor_id] = pending
        self.active.update((pending.initiator.actor_id, pending.target_actor_id))
        logger.debug(
            "Registered pending %s from %s against %s",
            pending.condition or "check", pending.initiator.actor_id, pending.target_actor_id,
        )

    def select_check(self, pending: PendingCheck) -> None:
        """Quarrel against a chosen check: whoever rolls next responds."""
        self.selected_check = pending
        logger.debug("Selected check %s for a manual quarrel", pending.initiator.check_id)

    def find_pending(self, actor_id: str, token_id: str | None = None) -> PendingCheck | None:
        """The check waiting on this actor, matched by token first."""
        if token_id and token_id in self.pending_by_token:
            return self.pending_by_token[token_id]
        return self.pending_by_actor.get(actor_id)

    def match(self, pending: PendingCheck, check: CheckResult, *, is_combat_check: bool = False) -> Quarrel:
        """Pair a pending check with the responder's check."""
        responder = Participant(
            actor_id=check.actor_id,
            check_id=check.check_id,
            hits=check.hits,
            token_id=check.token_id,
        )
        quarrel = Quarrel(
            id=quarrel_id(pending.initiator.check_id, check.check_id),
            initiator=replace(pending.initiator),
            responder=responder,
            is_combat_check=is_combat_check,
            condition=pending.condition,
            custom_name=pending.custom_name,
            custom_icon=pending.custom_icon,
            skill=pending.skill,
            result_messages=pending.result_messages,
        )
        self.discard(pending)
        if self.selected_check is pending:
            self.selected_check = None
        self.quarrels[quarrel.id] = quarrel
        logger.debug("Matched %s against %s as %s", pending.initiator.actor_id, check.actor_id, quarrel.id)
        return quarrel

    def get(self, quarrel_id: str) -> Quarrel:
        try:
            return self.quarrels[quarrel_id]
        except KeyError:
            raise MissingPendingData(quarrel_id) from None

    def take(self, quarrel_id: str) -> Quarrel:
        """Remove a quarrel for resolution. A second take raises."""
        quarrel = self.get(quarrel_id)
        del self.quarrels[quarrel_id]
        return quarrel

    def discard(self, pending: PendingCheck) -> None:
        if pending.target_token_id and self.pending_by_token.get(pending.target_token_id) is pending:
            del self.pending_by_token[pending.target_token_id]
        if self.pending_by_actor.get(pending.target_actor_id) is pending:
            del self.pending_by_actor[pending.target_actor_id]

    def clear_all_for_actor(self, actor_id: str) -> None:
        """Drop every pending check the actor is on either side of.

        The other party of each dropped check is freed too, unless it is
        still involved in a check that remains pending.
        """
        others: set[str] = set()
        for table in (self.pending_by_actor, self.pending_by_token):
            for key, pending in list(table.items()):
                parties = (pending.initiator.actor_id, pending.target_actor_id)
                if actor_id in parties:
                    del table[key]
                    others.update(party for party in parties if party != actor_id)
        if self.selected_check and self.selected_check.initiator.actor_id == actor_id:
            self.selected_check = None
        self.active.discard(actor_id)
        for other in others - self._involved():
            self.active.discard(other)
        logger.debug("Cleared quarrel state for %s", actor_id)

    def pending_checks(self) -> list[PendingCheck]:
        seen: list[PendingCheck] = []
        for pending in [*self.pending_by_token.values(), *self.pending_by_actor.values()]:
            if not any(p is pending for p in seen):
                seen.append(pending)
        return seen

    def replace_check(self, check: CheckResult) -> None:
        """Carry a revised check's hits into anything waiting on it."""
        for pending in self.pending_checks():
            if pending.initiator.check_id == check.check_id:
                pending.check = check
                pending.initiator.hits = check.hits
        for quarrel in self.quarrels.values():
            for side in (quarrel.initiator, quarrel.responder):
                if side.check_id == check.check_id:
                    side.hits = check.hits


def infer_combat_check(
    initiator: Actor,
    responder: Actor,
    *,
    condition: str | None = None,
    explicit: tuple[bool | None, ...] = (),
    labels: tuple[str, ...] = (),
) -> bool:
    """Decide whether a quarrel deals damage.

    In order: a condition quarrel never does; an explicit flag from the
    caller decides if given; then either actor's own combat flag, a
    monster in a melee exchange, or either actor carrying a weapon.
    """
    if condition:
        return False
    flags = [flag for flag in explicit if flag is not None]
    if flags:
        return any(flags)
    if initiator.combat_flag or responder.combat_flag:
        return True
    if (initiator.is_monster or responder.is_monster) and any("melee" in label.lower() for label in labels):
        return True
    return initiator.has_weapon or responder.has_weapon


def _npc_defeat_marker(creature: Actor) -> str:
    return "dead" if creature.is_npc else "unconscious"


def apply_condition_effects(
    quarrel: Quarrel,
    creature: Actor,
    net_hits: int,
    settings: Settings,
) -> ConditionEffect:
    """Apply the outcome of a condition quarrel to the afflicted creature.

    The condition is the initiator, so it wins ties. Winning against any
    of aflame, bleed or poison clears all three; losing to one leaves the
    creature unconscious (or dead, for NPCs). Losing to stress or
    corruption costs willpower, leaves a madness or mutation marker and
    resets the track.
    """
    condition = quarrel.condition
    condition_won = net_hits >= 0
    effect = ConditionEffect(condition=condition, condition_won=condition_won)

    if condition_won:
        if condition in MENTAL_CONDITIONS:
            effect.markers.append(DEFEAT_MARKERS[condition])
            effect.willpower_penalty = settings.condition_willpower_penalty
            creature.reduce_ability("willpower", effect.willpower_penalty)
            effect.cleared = creature.clear_conditions([condition])
        else:
            effect.markers.append(_npc_defeat_marker(creature))
        for marker in effect.markers:
            creature.set_marker(marker)
    elif condition in AFFLICTIONS:
        effect.cleared = creature.clear_conditions(AFFLICTIONS)
    else:
        effect.cleared = creature.clear_conditions([condition])

    messages = quarrel.result_messages
    if messages:
        if net_hits == 0 and messages.cost:
            effect.message = messages.cost
        else:
            effect.message = messages.success if condition_won else messages.failure
    elif condition_won:
        effect.message = f"{creature.name} succumbs to {condition}."
    else:
        effect.message = f"{creature.name} overcomes {condition}."

    logger.info("%s quarrel for %s: %s", condition, creature.name, effect.message)
    return effect
