"""Tests for the quarrel registry, combat inference and condition effects."""

import pytest

from witch_iron.actor import Actor
from witch_iron.checks import classify
from witch_iron.errors import MissingPendingData
from witch_iron.quarrel import QuarrelRegistry, apply_condition_effects, infer_combat_check, quarrel_id
from witch_iron.records import Participant, PendingCheck, Quarrel, ResultMessages
from witch_iron.settings import Settings


def pending(initiator: str = "a", target: str = "b", check_id: str = "c1", hits: int = 2,
            token: str | None = None) -> PendingCheck:
    return PendingCheck(
        initiator=Participant(actor_id=initiator, check_id=check_id, hits=hits),
        target_actor_id=target,
        target_token_id=token,
    )


def actor(actor_id: str = "x", actor_type: str = "character", **system: object) -> Actor:
    return Actor({"id": actor_id, "name": actor_id.title(), "type": actor_type, "system": dict(system)})


def condition_quarrel(condition: str, messages: ResultMessages | None = None) -> Quarrel:
    return Quarrel(
        id="q",
        initiator=Participant(actor_id="x", check_id=f"{condition}-1", hits=3),
        responder=Participant(actor_id="x", check_id="c2", hits=3),
        condition=condition,
        result_messages=messages,
    )


class TestRegistry:
    def test_register_marks_both_active(self) -> None:
        registry = QuarrelRegistry()
        registry.register(pending())
        assert registry.is_active("a")
        assert registry.is_active("b")
        assert not registry.is_active("c")

    def test_find_by_actor(self) -> None:
        registry = QuarrelRegistry()
        p = pending()
        registry.register(p)
        assert registry.find_pending("b") is p
        assert registry.find_pending("a") is None

    def test_token_takes_precedence(self) -> None:
        registry = QuarrelRegistry()
        by_token = pending(initiator="a", target="b", token="t1")
        registry.register(by_token)
        registry.pending_by_actor["b"] = by_actor = pending(initiator="c", target="b", check_id="c9")
        assert registry.find_pending("b", "t1") is by_token
        assert registry.find_pending("b") is by_actor

    def test_match(self) -> None:
        registry = QuarrelRegistry()
        p = pending(hits=2)
        registry.register(p)
        check = classify(40, 60, check_id="c2", actor_id="b")
        quarrel = registry.match(p, check, is_combat_check=True)
        assert quarrel.id == quarrel_id("c1", "c2") == "c1-c2"
        assert quarrel.initiator.hits == 2
        assert quarrel.responder.hits == check.hits == 2
        assert quarrel.is_combat_check
        assert registry.find_pending("b") is None
        assert registry.get(quarrel.id) is quarrel

    def test_match_clears_selected_check(self) -> None:
        registry = QuarrelRegistry()
        p = pending(target="")
        registry.select_check(p)
        registry.match(p, classify(40, 60, check_id="c2", actor_id="b"))
        assert registry.selected_check is None

    def test_take_only_once(self) -> None:
        registry = QuarrelRegistry()
        p = pending()
        registry.register(p)
        quarrel = registry.match(p, classify(40, 60, check_id="c2", actor_id="b"))
        assert registry.take(quarrel.id) is quarrel
        with pytest.raises(MissingPendingData):
            registry.take(quarrel.id)

    def test_clear_all_for_actor(self) -> None:
        registry = QuarrelRegistry()
        registry.register(pending(initiator="a", target="b", token="t1"))
        registry.register(pending(initiator="c", target="d", check_id="c5"))
        registry.clear_all_for_actor("a")
        assert registry.find_pending("b", "t1") is None
        assert not registry.is_active("a")
        assert registry.find_pending("d") is not None

    def test_clear_frees_every_target(self) -> None:
        registry = QuarrelRegistry()
        registry.register(pending(initiator="a", target="b", check_id="c1"))
        registry.register(pending(initiator="a", target="c", check_id="c1"))
        registry.clear_all_for_actor("a")
        assert registry.pending_checks() == []
        assert registry.active == set()

    def test_clear_keeps_targets_still_pending(self) -> None:
        """c stays active while its own check against f is pending."""
        registry = QuarrelRegistry()
        registry.register(pending(initiator="a", target="b", check_id="c1"))
        registry.register(pending(initiator="a", target="c", check_id="c1"))
        registry.register(pending(initiator="d", target="e", check_id="c7"))
        registry.register(pending(initiator="c", target="f", check_id="c9"))
        registry.clear_all_for_actor("a")
        assert not registry.is_active("b")
        assert registry.is_active("c")
        assert registry.is_active("f")
        assert registry.is_active("d")

    def test_pending_checks_are_unique(self) -> None:
        registry = QuarrelRegistry()
        registry.register(pending(token="t1"))
        assert len(registry.pending_checks()) == 1

    def test_replace_check(self) -> None:
        registry = QuarrelRegistry()
        p = pending(check_id="c1", hits=2)
        registry.register(p)
        revised = classify(4, 60, check_id="c1", actor_id="a")
        registry.replace_check(revised)
        assert p.initiator.hits == revised.hits
        assert p.check is revised


class TestInferCombatCheck:
    def test_condition_never_combat(self) -> None:
        sword = {"type": "weapon"}
        a = Actor({"id": "a", "items": [sword]})
        assert not infer_combat_check(a, a, condition="bleed", explicit=(True,))

    def test_explicit_flag_wins(self) -> None:
        a = Actor({"id": "a", "items": [{"type": "weapon"}]})
        assert not infer_combat_check(a, actor(), explicit=(False, None))
        assert infer_combat_check(actor(), actor(), explicit=(None, True))

    def test_actor_flag(self) -> None:
        flagged = actor(flags={"is_combat_check": True})
        assert infer_combat_check(flagged, actor())

    def test_monster_melee(self) -> None:
        monster = actor("m", "monster")
        assert infer_combat_check(actor(), monster, labels=("Melee",))
        assert not infer_combat_check(actor(), monster, labels=("Athletics",))

    def test_weapon(self) -> None:
        armed = Actor({"id": "a", "items": [{"type": "weapon"}]})
        assert infer_combat_check(actor(), armed)

    def test_default(self) -> None:
        assert not infer_combat_check(actor(), actor())


class TestConditionEffects:
    def test_affliction_wins(self) -> None:
        creature = actor(conditions={"bleed": {"value": 3}})
        effect = apply_condition_effects(condition_quarrel("bleed"), creature, 1, Settings())
        assert effect.condition_won
        assert effect.markers == ["unconscious"]
        assert creature.has_marker("unconscious")
        assert creature.condition("bleed") == 3

    def test_affliction_kills_npcs(self) -> None:
        creature = actor("e", "enemy")
        apply_condition_effects(condition_quarrel("poison"), creature, 0, Settings())
        assert creature.has_marker("dead")

    def test_creature_beats_affliction(self) -> None:
        creature = actor(conditions={"bleed": {"value": 3}, "aflame": {"value": 1}, "poison": {"value": 2}})
        effect = apply_condition_effects(condition_quarrel("bleed"), creature, -1, Settings())
        assert not effect.condition_won
        assert effect.cleared == ["aflame", "bleed", "poison"]
        for name in ("aflame", "bleed", "poison"):
            assert creature.condition(name) == 0
        assert effect.markers == []

    def test_mental_condition_wins(self) -> None:
        creature = actor(abilities={"willpower": {"value": 40}}, conditions={"stress": {"value": 3}})
        effect = apply_condition_effects(condition_quarrel("stress"), creature, 2, Settings())
        assert effect.markers == ["madness"]
        assert effect.willpower_penalty == 5
        assert creature.system["abilities"]["willpower"]["value"] == 35
        assert creature.condition("stress") == 0
        assert creature.has_marker("madness")

    def test_willpower_penalty_setting(self) -> None:
        creature = actor(abilities={"willpower": {"value": 40}})
        apply_condition_effects(condition_quarrel("corruption"), creature, 0, Settings(condition_willpower_penalty=10))
        assert creature.system["abilities"]["willpower"]["value"] == 30
        assert creature.has_marker("mutation")

    def test_creature_beats_mental_condition(self) -> None:
        creature = actor(conditions={"stress": {"value": 3}, "corruption": {"value": 2}})
        effect = apply_condition_effects(condition_quarrel("stress"), creature, -2, Settings())
        assert effect.cleared == ["stress"]
        assert creature.condition("corruption") == 2

    def test_custom_messages(self) -> None:
        messages = ResultMessages(success="won", failure="lost", cost="tied")
        quarrel = condition_quarrel("stress", messages)
        assert apply_condition_effects(quarrel, actor(), 1, Settings()).message == "won"
        assert apply_condition_effects(quarrel, actor(), -1, Settings()).message == "lost"
        assert apply_condition_effects(quarrel, actor(), 0, Settings()).message == "tied"

    def test_tie_without_cost_message(self) -> None:
        quarrel = condition_quarrel("stress", ResultMessages(success="won", failure="lost"))
        assert apply_condition_effects(quarrel, actor(), 0, Settings()).message == "won"

    def test_default_messages(self) -> None:
        assert apply_condition_effects(condition_quarrel("bleed"), actor(), 1, Settings()).message == "X succumbs to bleed."
        assert apply_condition_effects(condition_quarrel("bleed"), actor(), -1, Settings()).message == "X overcomes bleed."
