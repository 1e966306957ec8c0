"""
Quarrel engine: turns a stream of completed checks into resolved quarrels.

The host calls handle_check() once for every check an actor completes,
in order, one at a time. For each check the engine decides which of
these applies:

1. A check was picked by hand ("quarrel against"), so this check answers it.
2. The roller is in a quarrel and something is pending against them, so
   the two checks are paired and resolved immediately.
3. The roller has targets selected, so the check is held as pending
   against each target.

Resolution compares hits, then applies combat damage (for combat checks)
or condition side effects (for condition quarrels), and publishes the
result to the presentation sink. Rule errors raised along the way become
warnings on the sink; they never escape handle_check.

The engine also hosts the operations a player or GM triggers on results:
revising a fresh roll (reverse, reroll, luck), applying a combat injury,
relocating a hit, condition thresholds and side initiative.
"""

from __future__ import annotations

import logging

from witch_iron import checks, combat, opposed
from witch_iron.actor import Actor
from witch_iron.data import CONDITION_MESSAGES, CONDITION_SKILL
from witch_iron.errors import CheckAlreadyResolved, MissingPendingData, WitchIronError
from witch_iron.initiative import roll_side_initiative
from witch_iron.injuries import determine_injury, net_damage
from witch_iron.locations import relocate, roll_detailed_location
from witch_iron.quarrel import QuarrelRegistry, apply_condition_effects, infer_combat_check
from witch_iron.records import (
    ActorRef, CheckResult, CombatQuarrelRecord, DamageResult, InitiativeRecord,
    Injury, Participant, PendingCheck, QuarrelResult, ResultMessages,
)
from witch_iron.renderers import PresentationSink, TextRenderer
from witch_iron.settings import Settings
from witch_iron.types import MENTAL_CONDITIONS, QUARREL_CONDITIONS
from witch_iron.world import World

logger = logging.getLogger(__name__)


class Engine:
    """Owns the quarrel registry and every check it has seen.

    ``checks`` holds the latest version of each check by id, so revisions
    replace what is displayed. ``resolved_checks`` are ids consumed by a
    resolved quarrel; they can no longer be revised.
    """

    def __init__(
        self,
        world: World,
        settings: Settings | None = None,
        sink: PresentationSink | None = None,
        registry: QuarrelRegistry | None = None,
    ) -> None:
        self.world = world
        self.settings = settings or Settings()
        self.sink = sink or TextRenderer()
        self.registry = registry or QuarrelRegistry()
        self.checks: dict[str, CheckResult] = {}
        self.resolved_checks: set[str] = set()
        self.results: dict[str, QuarrelResult] = {}
        self.combat_records: list[CombatQuarrelRecord] = []

    # --- the event entry point ---

    def handle_check(
        self,
        check: CheckResult,
        *,
        targets: list[ActorRef] | None = None,
        condition: str | None = None,
    ) -> QuarrelResult | None:
        """Process one completed check. Returns the quarrel it resolved, if any.

        ``targets`` overrides the roller's target selection in the world.
        """
        self.checks[check.check_id] = check
        actor = self.world.find(check.actor_id)
        self.sink.publish_check_result(check, actor.name if actor else "")
        try:
            return self._route(check, targets, condition)
        except WitchIronError as e:
            self.sink.warn(str(e))
            logger.warning("Check %s: %s", check.check_id, e)
            return None

    def _route(
        self, check: CheckResult, targets: list[ActorRef] | None, condition: str | None
    ) -> QuarrelResult | None:
        registry = self.registry
        selected = registry.selected_check
        if selected is not None and selected.initiator.actor_id != check.actor_id:
            return self._pair(selected, check)

        if registry.is_active(check.actor_id):
            pending = registry.find_pending(check.actor_id, check.token_id)
            if pending is None:
                logger.debug("%s is waiting on an opponent; ignoring check", check.actor_id)
                return None
            return self._pair(pending, check)

        if targets is None:
            if not self.settings.auto_quarrel:
                return None
            targets = self.world.get_selected_targets(check.actor_id)
        for target in targets:
            self.register_check(check, target, condition=condition)
        return None

    def _pair(self, pending: PendingCheck, check: CheckResult) -> QuarrelResult:
        initiator = self.world.get(pending.initiator.actor_id)
        responder = self.world.get(check.actor_id)
        labels = tuple(c.label for c in (pending.check, check) if c is not None)
        is_combat = infer_combat_check(
            initiator,
            responder,
            condition=pending.condition,
            explicit=(pending.is_combat_check, check.is_combat_check),
            labels=labels,
        )
        quarrel = self.registry.match(pending, check, is_combat_check=is_combat)
        return self.resolve_quarrel(quarrel.id)

    # --- registration ---

    def register_check(
        self,
        check: CheckResult,
        target: ActorRef | str,
        *,
        condition: str | None = None,
        custom_name: str = "",
        custom_icon: str = "",
        skill: str = "",
        result_messages: ResultMessages | None = None,
    ) -> PendingCheck | None:
        """Hold ``check`` until ``target`` rolls.

        Skipped when the target is already in a quarrel, or when the roller
        is the one something is pending against.
        """
        if isinstance(target, str):
            target = ActorRef(target)
        self.world.get(check.actor_id)
        self.world.get(target.actor_id)
        if self.registry.is_active(target.actor_id) or self.registry.find_pending(check.actor_id, check.token_id):
            logger.debug("Not registering %s against %s: already quarreling", check.actor_id, target.actor_id)
            return None

        pending = PendingCheck(
            initiator=Participant(
                actor_id=check.actor_id,
                check_id=check.check_id,
                hits=check.hits,
                token_id=check.token_id,
            ),
            target_actor_id=target.actor_id,
            target_token_id=target.token_id,
            check=check,
            is_combat_check=check.is_combat_check,
            condition=condition,
            custom_name=custom_name,
            custom_icon=custom_icon,
            skill=skill,
            result_messages=result_messages,
        )
        self.registry.register(pending)
        return pending

    def select_check(self, check_id: str) -> PendingCheck:
        """Quarrel against an existing check: the next check anyone makes
        answers it."""
        check = self._revisable(check_id)
        pending = PendingCheck(
            initiator=Participant(
                actor_id=check.actor_id,
                check_id=check.check_id,
                hits=check.hits,
                token_id=check.token_id,
            ),
            target_actor_id="",
            check=check,
            is_combat_check=check.is_combat_check,
        )
        self.registry.select_check(pending)
        return pending

    def clear_actor(self, actor_id: str) -> None:
        self.registry.clear_all_for_actor(actor_id)

    # --- resolution ---

    def resolve_quarrel(self, quarrel_id: str) -> QuarrelResult:
        """Resolve a matched quarrel exactly once.

        Looks everything up before touching any state; the quarrel is
        removed before side effects are applied, so a repeat call raises
        MissingPendingData instead of applying them twice.
        """
        quarrel = self.registry.get(quarrel_id)
        initiator = self.world.get(quarrel.initiator.actor_id)
        responder = self.world.get(quarrel.responder.actor_id)
        self.registry.take(quarrel_id)

        net_hits = quarrel.initiator.hits - quarrel.responder.hits
        initiator_outcome, responder_outcome = opposed.outcomes(net_hits)
        result = QuarrelResult(
            quarrel=quarrel,
            initiator_name=quarrel.custom_name or initiator.name,
            responder_name=responder.name,
            initiator_hits=quarrel.initiator.hits,
            responder_hits=quarrel.responder.hits,
            net_hits=net_hits,
            outcome=initiator_outcome,
            initiator_outcome=initiator_outcome,
            responder_outcome=responder_outcome,
        )

        if quarrel.is_combat_check:
            result.damage = self._combat_damage(initiator, responder, net_hits)
        if quarrel.condition:
            result.condition_effect = apply_condition_effects(quarrel, responder, net_hits, self.settings)

        self.resolved_checks.update((quarrel.initiator.check_id, quarrel.responder.check_id))
        self.registry.clear_all_for_actor(initiator.id)
        self.registry.clear_all_for_actor(responder.id)
        self.results[quarrel.id] = result
        logger.info(
            "Quarrel %s: %s %d vs %s %d, %s",
            quarrel.id, result.initiator_name, result.initiator_hits,
            result.responder_name, result.responder_hits, initiator_outcome,
        )
        self.sink.publish_quarrel_result(result)
        return result

    def _combat_damage(self, initiator: Actor, responder: Actor, net_hits: int) -> DamageResult:
        if net_hits >= 0:
            attacker, defender = initiator, responder
        else:
            attacker, defender = responder, initiator
        weapon_damage = attacker.derived.damage_value or self.settings.default_weapon_damage
        soak = defender.derived.soak_value or self.settings.default_soak
        damage = net_damage(weapon_damage, net_hits, soak)
        location_roll, location = roll_detailed_location()

        result = DamageResult(
            attacker_id=attacker.id,
            defender_id=defender.id,
            weapon_damage=weapon_damage,
            net_hits=abs(net_hits),
            soak=soak,
            net_damage=damage,
            location_roll=location_roll,
            injury=determine_injury(location, damage),
        )
        if result.injury and self.settings.auto_apply_injuries:
            self._apply_damage(result)
        return result

    def _apply_damage(self, damage: DamageResult) -> Injury:
        injury = damage.injury
        defender = self.world.get(damage.defender_id)
        applied = defender.add_injury(Injury(
            location=injury.location,
            severity=injury.severity,
            description=injury.description,
            effect=injury.effect,
        ))
        damage.injury_applied = True
        return applied

    def apply_injury(self, quarrel_id: str) -> Injury | None:
        """Apply a resolved combat quarrel's injury to the defender, once.

        Returns None when there is nothing (left) to apply.
        """
        result = self.results.get(quarrel_id)
        if result is None:
            raise MissingPendingData(quarrel_id, kind="Quarrel result")
        damage = result.damage
        if damage is None or damage.injury is None or damage.injury_applied:
            return None
        return self._apply_damage(damage)

    # --- revising a fresh roll ---

    def _revisable(self, check_id: str) -> CheckResult:
        if check_id in self.resolved_checks:
            raise CheckAlreadyResolved(check_id)
        try:
            return self.checks[check_id]
        except KeyError:
            raise MissingPendingData(check_id, kind="Check") from None

    def _replace(self, revised: CheckResult) -> CheckResult:
        self.checks[revised.check_id] = revised
        self.registry.replace_check(revised)
        actor = self.world.find(revised.actor_id)
        self.sink.publish_check_result(revised, actor.name if actor else "")
        return revised

    def reverse_check(self, check_id: str) -> CheckResult:
        return self._replace(checks.reverse(self._revisable(check_id)))

    def reroll_check(self, check_id: str) -> CheckResult:
        return self._replace(checks.reroll(self._revisable(check_id)))

    def spend_luck_on_check(self, check_id: str, delta: int) -> CheckResult:
        """Move the raw roll by up to ``delta`` (negative lowers it), paid
        for with the roller's luck. Spends are clamped to the luck pool and
        to the 1-100 roll range; only the distance moved is paid for."""
        check = self._revisable(check_id)
        actor = self.world.get(check.actor_id)
        move = checks.clamp_roll(check.raw_roll + delta) - check.raw_roll
        affordable = min(abs(move), actor.luck)
        revised = checks.adjust(check, affordable if move >= 0 else -affordable)
        spend = actor.spend_luck(abs(move))
        if spend.clamped:
            self.sink.warn(f"{actor.name} only had {spend.spent} luck to spend")
        return self._replace(revised)

    # --- direct combat ---

    def combat_quarrel(
        self,
        attacker_id: str,
        defender_id: str,
        attack_skill: str = "melee",
        defense_skill: str | None = None,
        **modifiers,
    ) -> CombatQuarrelRecord:
        attacker = self.world.get(attacker_id)
        defender = self.world.get(defender_id)
        record = combat.combat_quarrel(attacker, defender, attack_skill, defense_skill, **modifiers)
        self.combat_records.append(record)
        self.sink.publish_combat_quarrel(record, attacker.name, defender.name)
        return record

    def relocate_hit(self, record: CombatQuarrelRecord, location: str) -> CombatQuarrelRecord:
        return relocate(record, location)

    def apply_combat_injury(
        self, record: CombatQuarrelRecord, severity: int | None = None, description: str = ""
    ) -> Injury | None:
        """Give the injured side of a combat quarrel its injury, once."""
        if record.injured_id is None or record.injury_applied:
            return None
        actor = self.world.get(record.injured_id)
        injury = actor.apply_injury(record.location, severity or record.suggested_severity, description)
        record.injury_applied = True
        return injury

    # --- conditions ---

    def start_condition_quarrel(self, actor_id: str, condition: str, rating: int | None = None) -> PendingCheck:
        """Pit a condition against the creature suffering it.

        The condition's rating (by default its current value) stands in for
        its hits, and the creature's next check answers it.
        """
        if condition not in QUARREL_CONDITIONS:
            raise ValueError(f"{condition!r} cannot start a quarrel")
        actor = self.world.get(actor_id)
        if rating is None:
            rating = actor.condition(condition)
        messages = CONDITION_MESSAGES.get(condition)
        pending = PendingCheck(
            initiator=Participant(actor_id=actor.id, check_id=f"{condition}-{checks.new_check_id()}", hits=rating),
            target_actor_id=actor.id,
            is_combat_check=False,
            condition=condition,
            custom_name=condition.title(),
            skill=CONDITION_SKILL[condition],
            result_messages=ResultMessages(**messages) if messages else None,
        )
        self.registry.register(pending)
        return pending

    def raise_condition(self, actor_id: str, condition: str, amount: int = 1) -> PendingCheck | None:
        """Raise a condition track. Stress or corruption crossing a multiple
        of the threshold starts a condition quarrel at the new value."""
        actor = self.world.get(actor_id)
        old = actor.condition(condition)
        new = old + amount
        actor.set_condition(condition, new)
        threshold = self.settings.condition_threshold
        if condition in MENTAL_CONDITIONS and threshold > 0 and new // threshold > old // threshold:
            logger.debug("%s %s crossed %d", actor.name, condition, new // threshold * threshold)
            return self.start_condition_quarrel(actor_id, condition, rating=new)
        return None

    # --- initiative ---

    def roll_side_initiative(self, actor_ids: list[str]) -> InitiativeRecord | None:
        if not self.settings.use_side_initiative:
            logger.debug("Side initiative is disabled")
            return None
        record = roll_side_initiative([self.world.get(a) for a in actor_ids], self.settings)
        self.sink.publish_initiative(record)
        return record


