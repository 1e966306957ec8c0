"""
Actors: characters, enemies and monsters, wrapped around their documents.

An Actor owns a plain nested-dict document (the host's persisted state)
and recomputes everything derived from it on every read: ability bonuses,
encumbrance, injury penalties, monster damage and soak. Nothing derived is
ever written back. State changes go through ``update()`` with dotted paths,
e.g. ``actor.update({"system.abilities.luck.current": 2})``.

Document shape, for the keys the engine reads or writes::

    {
        "id": "a1", "name": "Brand", "type": "character",
        "items": [{"type": "weapon", "name": "Sword", "damage": 6}],
        "system": {
            "abilities": {"muscle": {"value": 42}, ..., "luck": {"value": 30, "current": 3}},
            "skills": {"melee": {"value": 20, "specializations": [{"name": "Swords", "rating": 1}]}},
            "injuries": [{"location": "head", "severity": 3, ...}],
            "conditions": {"bleed": {"value": 0}, ...},
            "secondary": {"speed": 30, "attacks": 1, "current_encumbrance": 0},
            "resources": {"xp": {"value": 0}},
            "flags": {"is_combat_check": False},
            "left_handed": False,
            "markers": {"unconscious": False, ...},
        },
    }

Monsters replace abilities and skills with ``system.stats`` (hit_dice,
size, weapon_type, armor_type, specialties), ``system.battle_wear`` and
``system.mob``.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

from witch_iron import checks
from witch_iron.data import (
    ABILITY_SCORE_BY_HD, ARMOR_VALUE, BASE_SPEED, MOB_SCALES, PLUS_HITS_BY_HD,
    SIZE_MODIFIERS, SKILL_ABILITY, TIER_THRESHOLDS, WEAPON_DAMAGE,
)
from witch_iron.errors import InvalidInjuryIndex
from witch_iron.injuries import accumulate_penalties, new_injury
from witch_iron.locations import validate_location
from witch_iron.records import CheckResult, Injury, LuckSpend
from witch_iron.types import ABILITIES, CONDITIONS, LOCATIONS, ActorType, Skill
from witch_iron.utils import get_path, set_path

logger = logging.getLogger(__name__)

NPC_TYPES: tuple[ActorType, ...] = ("enemy", "monster")


@dataclass
class Rating:
    """An ability or skill as seen by the rules: value plus derived parts."""

    value: int
    bonus: int
    injury_modifier: int = 0
    specializations: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class DerivedData:
    """Everything recomputed from an actor's document on each read."""

    abilities: dict[str, Rating] = field(default_factory=dict)
    skills: dict[str, Rating] = field(default_factory=dict)
    speed: int = 0
    attacks: int = 1
    max_encumbrance: int = 0
    current_encumbrance: int = 0
    encumbrance_modifier: int = 0
    """-20 past max encumbrance, -40 past double."""

    max_contacts: int = 0
    max_instant_access: int = 0
    tier: int = 0
    damage_value: int | None = None
    """Damage dealt on a combat win. None when nothing provides one."""

    soak_value: int | None = None
    location_soak: dict[str, int] = field(default_factory=dict)

    # monsters only
    ability_score: int = 0
    ability_bonus: int = 0
    plus_hits: int = 0
    mob_scale: str = "none"
    mob_attacks: int = 0


def xp_tier(xp: int) -> int:
    """Tier 0-10 for a total XP value."""
    return sum(1 for threshold in TIER_THRESHOLDS if xp >= threshold)


def mob_scale(bodies: int) -> tuple[str, int]:
    """(scale, extra attacks) for a mob of ``bodies`` creatures."""
    for minimum, scale, attacks in MOB_SCALES:
        if bodies >= minimum:
            return scale, attacks
    return "none", 0


class Actor:
    """A creature taking part in checks and quarrels."""

    def __init__(self, document: dict[str, Any]) -> None:
        self.document = document
        self.document.setdefault("system", {})
        self.document.setdefault("items", [])

    def __repr__(self) -> str:
        return f"Actor({self.id!r}, {self.name!r}, {self.type!r})"

    @property
    def id(self) -> str:
        return self.document["id"]

    @property
    def name(self) -> str:
        return self.document.get("name", self.id)

    @property
    def type(self) -> ActorType:
        return self.document.get("type", "character")

    @property
    def system(self) -> dict[str, Any]:
        return self.document["system"]

    @property
    def items(self) -> list[dict[str, Any]]:
        return self.document["items"]

    @property
    def is_npc(self) -> bool:
        return self.type in NPC_TYPES

    @property
    def is_monster(self) -> bool:
        return self.type == "monster"

    @property
    def left_handed(self) -> bool:
        return bool(self.system.get("left_handed", False))

    @property
    def combat_flag(self) -> bool:
        """Explicit "my checks are attacks" flag set on the actor."""
        return bool(get_path(self.system, "flags.is_combat_check", False))

    @property
    def has_weapon(self) -> bool:
        return any(item.get("type") == "weapon" for item in self.items)

    def get(self, path: str, default: Any = None) -> Any:
        """Read a dotted path from the document root."""
        return get_path(self.document, path, default)

    def update(self, changes: dict[str, Any]) -> None:
        """Write each dotted path in ``changes``; one call per operation."""
        for path, value in changes.items():
            set_path(self.document, path, value)
        logger.debug("Updated %s: %s", self.name, changes)

    # --- derived data ---

    def prepare_data(self) -> DerivedData:
        """Rebuild every derived value from the document."""
        if self.is_monster:
            return self._prepare_monster_data()
        derived = DerivedData()
        self._prepare_abilities(derived)
        if self.type != "enemy":
            self._prepare_character_data(derived)
        self._prepare_injuries(derived)
        return derived

    @property
    def derived(self) -> DerivedData:
        return self.prepare_data()

    def _prepare_abilities(self, derived: DerivedData) -> None:
        abilities = self.system.get("abilities", {})
        for name in ABILITIES:
            value = int(get_path(abilities, f"{name}.value", 0))
            derived.abilities[name] = Rating(value=value, bonus=value // 10)
        for name, skill in self.system.get("skills", {}).items():
            value = int(skill.get("value", 0))
            derived.skills[name] = Rating(
                value=value,
                bonus=value // 10,
                specializations=list(skill.get("specializations", [])),
            )
        derived.attacks = int(get_path(self.system, "secondary.attacks", 1))

    def _prepare_character_data(self, derived: DerivedData) -> None:
        abilities = derived.abilities
        derived.max_encumbrance = (abilities["muscle"].bonus + abilities["robustness"].bonus) * 2
        derived.current_encumbrance = int(get_path(self.system, "secondary.current_encumbrance", 0))

        speed = get_path(self.system, "secondary.speed")
        if speed is None:
            speed = BASE_SPEED + abilities["agility"].value // 40 * 5
        derived.speed = int(speed)

        if derived.max_encumbrance > 0:
            ratio = derived.current_encumbrance / derived.max_encumbrance
        else:
            ratio = 0 if derived.current_encumbrance <= 0 else float("inf")
        if ratio > 2:
            derived.speed = 0
            derived.encumbrance_modifier = -40
        elif ratio > 1:
            derived.speed //= 2
            derived.encumbrance_modifier = -20

        derived.max_contacts = abilities["personality"].bonus * 2
        derived.max_instant_access = abilities["finesse"].bonus
        derived.tier = xp_tier(int(get_path(self.system, "resources.xp.value", 0)))

        weapons = [i for i in self.items if i.get("type") == "weapon"]
        armor = [i for i in self.items if i.get("type") == "armor"]
        if weapons:
            derived.damage_value = max(int(w.get("damage", 0)) for w in weapons)
        if armor:
            derived.soak_value = sum(int(a.get("soak", 0)) for a in armor)

    def _prepare_injuries(self, derived: DerivedData) -> None:
        penalties = accumulate_penalties(
            self.injuries,
            attacks=derived.attacks,
            speed=derived.speed,
            left_handed=self.left_handed,
        )
        for name, modifier in penalties.abilities.items():
            if name in derived.abilities:
                derived.abilities[name].injury_modifier = modifier
        for name, modifier in penalties.skills.items():
            if name in derived.skills:
                derived.skills[name].injury_modifier = modifier
        derived.attacks = penalties.attacks
        derived.speed = penalties.speed

    def _prepare_monster_data(self) -> DerivedData:
        stats = self.system.get("stats", {})
        hit_dice = int(stats.get("hit_dice", 1) or 1)
        score = ABILITY_SCORE_BY_HD.get(hit_dice, ABILITY_SCORE_BY_HD[1])
        bonus = score // 10
        size = SIZE_MODIFIERS.get(stats.get("size", "medium"), 0)
        weapon = WEAPON_DAMAGE.get(stats.get("weapon_type", "unarmed"), 0)
        armor = ARMOR_VALUE.get(stats.get("armor_type", "none"), 0)

        weapon_wear = int(get_path(self.system, "battle_wear.weapon", 0))
        base = max(1, bonus + size)
        location_soak = {}
        for loc in LOCATIONS:
            wear = int(get_path(self.system, f"battle_wear.armor.{loc}", 0))
            location_soak[loc] = base + max(0, armor - wear)

        derived = DerivedData(
            ability_score=score,
            ability_bonus=bonus,
            plus_hits=PLUS_HITS_BY_HD.get(hit_dice, 1),
            damage_value=base + max(0, weapon - weapon_wear),
            soak_value=location_soak["torso"],
            location_soak=location_soak,
            speed=int(get_path(self.system, "secondary.speed", BASE_SPEED)),
            attacks=int(get_path(self.system, "secondary.attacks", 1)),
        )
        if get_path(self.system, "mob.is_mob", False):
            derived.mob_scale, derived.mob_attacks = mob_scale(int(get_path(self.system, "mob.bodies", 0)))
        return derived

    def ability(self, name: str) -> Rating:
        if self.is_monster:
            derived = self.derived
            return Rating(value=derived.ability_score, bonus=derived.ability_bonus)
        return self.derived.abilities[name]

    def skill(self, name: str) -> Rating:
        return self.derived.skills.get(name) or Rating(value=0, bonus=0)

    # --- rolls ---

    def _context(self, label: str, context: dict[str, Any]) -> dict[str, Any]:
        context.setdefault("actor_id", self.id)
        context.setdefault("label", label)
        return context

    def _after_roll(self, result: CheckResult, prone_on_fumble: bool) -> CheckResult:
        if prone_on_fumble and result.is_fumble:
            self.knock_prone()
        return result

    def roll_ability(
        self, name: str, modifier: int = 0, *, prone_on_fumble: bool = False, **context
    ) -> CheckResult:
        """Roll under an ability, with injury and encumbrance modifiers."""
        if self.is_monster:
            return self.roll_monster_check(
                name.title(), modifier=modifier, prone_on_fumble=prone_on_fumble, **context
            )
        derived = self.derived
        ability = derived.abilities[name]
        total = ability.injury_modifier + derived.encumbrance_modifier + modifier
        result = checks.ability_roller.roll(
            ability.value, total, **self._context(name.title(), context)
        )
        return self._after_roll(result, prone_on_fumble)

    def roll_skill(
        self,
        name: Skill,
        specialization: str | None = None,
        modifier: int = 0,
        *,
        prone_on_fumble: bool = False,
        **context,
    ) -> CheckResult:
        """Roll a skill: the governing ability is the target and the skill
        value is a bonus. A matching specialization adds its rating in hits
        on a success.
        """
        label = name.replace("_", " ").title()
        if self.is_monster:
            specialties = self.system.get("stats", {}).get("specialties", [])
            return self.roll_monster_check(
                label, specialized=name in specialties, modifier=modifier,
                prone_on_fumble=prone_on_fumble, **context,
            )

        derived = self.derived
        ability = derived.abilities[SKILL_ABILITY[name]]
        skill = derived.skills.get(name) or Rating(value=0, bonus=0)
        extra_hits = 0
        if specialization:
            label = f"{label} ({specialization})"
            for spec in skill.specializations:
                if spec.get("name") == specialization:
                    extra_hits = int(spec.get("rating", 0))
        total = (
            skill.value + ability.injury_modifier + skill.injury_modifier
            + derived.encumbrance_modifier + modifier
        )
        result = checks.ability_roller.roll(
            ability.value, total, additional_hits=extra_hits, **self._context(label, context)
        )
        return self._after_roll(result, prone_on_fumble)

    def roll_monster_check(
        self,
        label: str = "Check",
        *,
        specialized: bool = False,
        modifier: int = 0,
        prone_on_fumble: bool = False,
        **context,
    ) -> CheckResult:
        """Roll under the monster's ability score; specialized checks add +Hits."""
        derived = self.derived
        extra_hits = derived.plus_hits if specialized else 0
        result = checks.ability_roller.roll(
            derived.ability_score, modifier, additional_hits=extra_hits,
            **self._context(label, context),
        )
        return self._after_roll(result, prone_on_fumble)

    # --- luck ---

    @property
    def luck(self) -> int:
        return int(get_path(self.system, "abilities.luck.current", 0))

    def spend_luck(self, amount: int) -> LuckSpend:
        """Debit up to ``amount`` luck; clamps to what is available."""
        amount = max(0, amount)
        spent = min(amount, self.luck)
        remaining = self.luck - spent
        self.update({"system.abilities.luck.current": remaining})
        spend = LuckSpend(requested=amount, spent=spent, remaining=remaining)
        if spend.clamped:
            logger.warning("%s asked to spend %d luck but only had %d", self.name, amount, spent)
        return spend

    def gain_luck(self, amount: int) -> int:
        remaining = self.luck + max(0, amount)
        self.update({"system.abilities.luck.current": remaining})
        return remaining

    # --- injuries ---

    @property
    def injuries(self) -> list[Injury]:
        return [Injury.from_dict(i) for i in self.system.get("injuries", [])]

    def _save_injuries(self, injuries: list[Injury]) -> None:
        self.update({"system.injuries": [i.to_dict() for i in injuries]})

    def add_injury(self, injury: Injury) -> Injury:
        """Attach an already-built injury (any location set)."""
        self._save_injuries(self.injuries + [injury])
        logger.info("%s suffers %s (%s, severity %d)", self.name, injury.description, injury.location, injury.severity)
        return injury

    def apply_injury(self, location: str, severity: int, description: str = "", effect: str = "") -> Injury:
        """Record a GM-applied injury at one of the six coarse locations."""
        validate_location(location)
        return self.add_injury(new_injury(location, severity, description, effect))

    def _injury_at(self, injuries: list[Injury], index: int) -> Injury:
        if not 0 <= index < len(injuries):
            raise InvalidInjuryIndex(index)
        return injuries[index]

    def treat_injury(self, index: int) -> Injury:
        injuries = self.injuries
        injury = self._injury_at(injuries, index)
        injury.treated = True
        self._save_injuries(injuries)
        return injury

    def make_injury_permanent(self, index: int) -> Injury:
        """Permanent injuries are treated too, but always penalize."""
        injuries = self.injuries
        injury = self._injury_at(injuries, index)
        injury.permanent = True
        injury.treated = True
        self._save_injuries(injuries)
        return injury

    def delete_injury(self, index: int) -> Injury:
        injuries = self.injuries
        injury = self._injury_at(injuries, index)
        del injuries[index]
        self._save_injuries(injuries)
        return injury

    # --- conditions ---

    def condition(self, name: str) -> int:
        return int(get_path(self.system, f"conditions.{name}.value", 0))

    def set_condition(self, name: str, value: int) -> None:
        self.update({f"system.conditions.{name}.value": max(0, value)})

    def clear_conditions(self, names: tuple[str, ...] | list[str] = CONDITIONS) -> list[str]:
        """Reset conditions (all of them by default) to 0. Returns the names cleared."""
        self.update({f"system.conditions.{name}.value": 0 for name in names})
        return list(names)

    def knock_prone(self) -> None:
        self.update({"system.conditions.prone.value": 1})

    def set_marker(self, marker: str) -> None:
        """Raise a defeat marker such as 'unconscious' or 'madness'."""
        self.update({f"system.markers.{marker}": True})

    def has_marker(self, marker: str) -> bool:
        return bool(get_path(self.system, f"markers.{marker}", False))

    def reduce_ability(self, name: str, amount: int) -> int:
        value = max(0, int(get_path(self.system, f"abilities.{name}.value", 0)) - amount)
        self.update({f"system.abilities.{name}.value": value})
        return value

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of the document, for comparing state before and after."""
        return deepcopy(self.document)

