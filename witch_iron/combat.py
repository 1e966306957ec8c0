"""
Direct combat quarrels: one attack roll against one defense roll, both
made at once.

Unlike the two-step quarrels in witch_iron.quarrel, the attacker and
defender are known up front, so both checks are rolled here and compared
with witch_iron.opposed. The ones digit of the attack roll picks the hit
location on the digit table.

Ranged attacks can only be dodged (Light-Foot). A Melee defense that wins
a melee exchange turns the attack around: the attacker is the one hurt.
"""

from __future__ import annotations

import logging

from witch_iron import opposed
from witch_iron.actor import Actor
from witch_iron.locations import location_from_digit
from witch_iron.records import CombatQuarrelRecord
from witch_iron.types import AttackSkill, DefenseSkill

logger = logging.getLogger(__name__)

NPC_DODGE_THRESHOLD = 10
"""NPC defenders dodge when their Light-Foot is at least this."""


def choose_defense(defender: Actor, attack_skill: AttackSkill, requested: DefenseSkill | None = None) -> DefenseSkill:
    """The skill the defender rolls.

    Ranged attacks force Light-Foot. Otherwise a requested skill is used;
    with none requested, NPCs dodge if they are any good at it and
    everyone else parries with Melee.
    """
    if attack_skill == "ranged":
        return "light_foot"
    if requested:
        return requested
    if defender.is_npc and defender.skill("light_foot").value >= NPC_DODGE_THRESHOLD:
        return "light_foot"
    return "melee"


def combat_quarrel(
    attacker: Actor,
    defender: Actor,
    attack_skill: AttackSkill = "melee",
    defense_skill: DefenseSkill | None = None,
    *,
    attack_modifier: int = 0,
    defense_modifier: int = 0,
) -> CombatQuarrelRecord:
    """Roll an attack and a defense and work out who gets hurt where."""
    defense_skill = choose_defense(defender, attack_skill, defense_skill)
    attack = attacker.roll_skill(attack_skill, modifier=attack_modifier, is_combat_check=True)
    defense = defender.roll_skill(defense_skill, modifier=defense_modifier, is_combat_check=True)
    outcome = opposed.resolve(attack, defense)

    record = CombatQuarrelRecord(
        attacker_id=attacker.id,
        defender_id=defender.id,
        attack_skill=attack_skill,
        defense_skill=defense_skill,
        attack=attack,
        defense=defense,
        outcome=outcome,
    )
    if outcome.success:
        record.injured_id = defender.id
    elif attack_skill != "ranged" and defense_skill == "melee":
        record.injured_id = attacker.id

    if record.injured_id:
        record.location = location_from_digit(attack.raw_roll)
        record.suggested_severity = max(1, outcome.net_hits)

    logger.info(
        "%s %s vs %s %s: %s, %d net hits",
        attacker.name, attack_skill, defender.name, defense_skill,
        "hit" if outcome.success else "defended", outcome.net_hits,
    )
    return record
