"""
Injuries: generating them from combat damage, and turning an actor's
injury list into stat penalties.

Penalties are never stored. They are recomputed from the injury list on
every data preparation pass, so treating an injury (or making a treated
injury permanent) takes effect on the next read.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field

from witch_iron.records import Injury, InjuryRecord

logger = logging.getLogger(__name__)

MIN_SEVERITY = 1
MAX_SEVERITY = 10


def net_damage(weapon_damage: int, net_hits: int, soak: int) -> int:
    """Weapon damage plus net hits, less soak, never below zero."""
    return max(0, weapon_damage + abs(net_hits) - soak)


def damage_severity(damage: int) -> int:
    """Half the net damage rounded half up, clamped to 0-5."""
    return max(0, min(5, (damage + 1) // 2))


# (tier, conditions, head, jaw, anywhere else) for each damage band.
# Each location entry is (description, effect); "{loc}" is filled in.
_TIERS = (
    (
        2, "Minor", "Light Wound 1",
        ("Minor Concussion", "Dazed for 1 round"),
        ("Dislocated Jaw", "Difficult to speak clearly"),
        ("Minor {loc} Injury", "Painful but not debilitating"),
    ),
    (
        4, "Moderate", "Medium Wound 1",
        ("Concussion", "Disoriented, -1 to all mental actions"),
        ("Broken Jaw", "Cannot speak properly, difficult to eat"),
        ("Moderate {loc} Injury", "Significantly impairs function"),
    ),
    (
        None, "Severe", "Heavy Wound 2",
        ("Severe Head Trauma", "Unconscious for 1d6 hours, possible long-term effects"),
        ("Shattered Jaw", "Cannot speak or eat solid food"),
        ("Severe {loc} Injury", "Critical damage, may be permanent"),
    ),
)


def determine_injury(location: str, damage: int) -> InjuryRecord | None:
    """The injury dealt by ``damage`` net damage at a d10-table location.

    1-2 damage is minor, 3-4 moderate, 5 or more severe (and needs
    surgery). No damage, no injury.
    """
    if damage <= 0:
        return None

    for ceiling, tier, conditions, head, jaw, other in _TIERS:
        if ceiling is None or damage <= ceiling:
            break

    if location == "Head":
        description, effect = head
    elif location == "Jaw":
        description, effect = jaw
    else:
        description, effect = other[0].format(loc=location), other[1]

    return InjuryRecord(
        location=location,
        net_damage=damage,
        tier=tier,
        description=description,
        effect=effect,
        severity=damage_severity(damage),
        conditions=conditions,
        requires_medical_aid=True,
        requires_surgery=tier == "Severe",
    )


def new_injury(location: str, severity: int, description: str = "", effect: str = "") -> Injury:
    """A fresh, untreated injury with severity clamped to 1-10."""
    severity = max(MIN_SEVERITY, min(MAX_SEVERITY, int(severity)))
    return Injury(
        location=location,
        severity=severity,
        description=description or f"Severity {severity} injury",
        effect=effect,
        treated=False,
        permanent=False,
        timestamp=time.time(),
    )


@dataclass
class InjuryPenalties:
    """Stat changes from an actor's current injuries."""

    abilities: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    """Ability name -> (negative) injury modifier."""

    skills: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    """Skill name -> (negative) injury modifier."""

    attacks: int = 1
    """Attacks per round after injuries."""

    speed: int = 0
    """Speed after injuries."""


def _is_dominant_arm(location: str, left_handed: bool) -> bool:
    return location == ("left_arm" if left_handed else "right_arm")


def accumulate_penalties(
    injuries: list[Injury],
    *,
    attacks: int = 1,
    speed: int = 0,
    left_handed: bool = False,
) -> InjuryPenalties:
    """Fold every penalizing injury into one set of stat modifiers.

    Injuries are applied in list order, which matters only for speed:
    a severe leg wound's flat -5 is floored at zero against the speed
    left after the wounds before it.
    """
    result = InjuryPenalties(attacks=attacks, speed=speed)
    abilities, skills = result.abilities, result.skills

    for injury in injuries:
        if not injury.penalizes:
            continue
        severity = injury.severity

        if injury.location == "head":
            if severity >= 3:
                abilities["intelligence"] -= severity * 5
                abilities["willpower"] -= severity * 5

        elif injury.location == "torso":
            if severity >= 2:
                abilities["robustness"] -= severity * 5
                if severity >= 5 and result.attacks > 1:
                    result.attacks -= 1

        elif injury.location in ("right_arm", "left_arm"):
            skills["melee"] -= severity * 5
            if severity >= 3:
                abilities["muscle"] -= severity * 3
                abilities["finesse"] -= severity * 5
                if _is_dominant_arm(injury.location, left_handed):
                    skills["ranged"] -= severity * 10

        elif injury.location in ("right_leg", "left_leg"):
            abilities["agility"] -= severity * 5
            skills["light_foot"] -= severity * 5
            result.speed -= severity * 2
            if severity >= 4:
                result.speed = max(0, result.speed - 5)

    return result
