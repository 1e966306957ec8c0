"""Tests for direct attack-vs-defense combat quarrels."""

from unittest.mock import patch

from witch_iron.actor import Actor
from witch_iron.combat import choose_defense, combat_quarrel


def make(actor_id: str, actor_type: str = "character", light_foot: int = 0) -> Actor:
    """A fighter with 60 to hit in Melee and Ranged and 30 to dodge."""
    return Actor({
        "id": actor_id,
        "name": actor_id.title(),
        "type": actor_type,
        "system": {
            "abilities": {"muscle": {"value": 40}, "quickness": {"value": 40}, "agility": {"value": 30}},
            "skills": {"melee": {"value": 20}, "ranged": {"value": 20}, "light_foot": {"value": light_foot}},
        },
    })


class TestChooseDefense:
    def test_ranged_forces_dodge(self) -> None:
        assert choose_defense(make("d"), "ranged", "melee") == "light_foot"

    def test_requested(self) -> None:
        assert choose_defense(make("d"), "melee", "light_foot") == "light_foot"

    def test_characters_parry(self) -> None:
        assert choose_defense(make("d", light_foot=30), "melee") == "melee"

    def test_nimble_npcs_dodge(self) -> None:
        assert choose_defense(make("d", "enemy", light_foot=10), "melee") == "light_foot"
        assert choose_defense(make("d", "enemy", light_foot=9), "melee") == "melee"


class TestCombatQuarrel:
    def test_attack_hits(self) -> None:
        """24 vs 60 is 4 hits, 51 vs 60 is 1: 3 net hits to the right arm."""
        with patch("witch_iron.dice.randrange", side_effect=[24, 51]):
            record = combat_quarrel(make("a"), make("d"))
        assert record.attack_wins
        assert record.outcome.net_hits == 3
        assert record.injured_id == "d"
        assert record.location == "right_arm"
        assert record.suggested_severity == 3
        assert record.can_relocate
        assert record.attack.is_combat_check
        assert record.defense.is_combat_check

    def test_parry_turns_the_attack(self) -> None:
        """57 is 1 hit against a 5-hit parry: the attacker takes it in the left arm."""
        with patch("witch_iron.dice.randrange", side_effect=[57, 12]):
            record = combat_quarrel(make("a"), make("d"))
        assert not record.attack_wins
        assert record.outcome.net_hits == 4
        assert record.injured_id == "a"
        assert record.location == "left_arm"
        assert record.suggested_severity == 4
        assert not record.can_relocate

    def test_defended_ranged_attack(self) -> None:
        with patch("witch_iron.dice.randrange", side_effect=[57, 12]):
            record = combat_quarrel(make("a"), make("d"), "ranged")
        assert record.defense_skill == "light_foot"
        assert not record.attack_wins
        assert record.injured_id is None
        assert record.location is None

    def test_dodge_hurts_nobody(self) -> None:
        with patch("witch_iron.dice.randrange", side_effect=[57, 12]):
            record = combat_quarrel(make("a"), make("d"), "melee", "light_foot")
        assert not record.attack_wins
        assert record.injured_id is None

    def test_minimum_severity(self) -> None:
        """Equal hits: the attack wins with 0 net hits, still a severity 1 hit."""
        with patch("witch_iron.dice.randrange", side_effect=[23, 21]):
            record = combat_quarrel(make("a"), make("d"))
        assert record.attack_wins
        assert record.outcome.net_hits == 0
        assert record.suggested_severity == 1
        assert record.location == "torso"

    def test_modifiers(self) -> None:
        with patch("witch_iron.dice.randrange", side_effect=[24, 51]):
            record = combat_quarrel(make("a"), make("d"), attack_modifier=-20, defense_modifier=10)
        assert record.attack.effective_target == 40
        assert record.defense.effective_target == 70
