"""
Hit locations.

Two tables are in use. The combat-quarrel flow reads the ones digit of the
winning attack roll against DIGIT_TABLE, which covers the six coarse
locations. The combat-damage injury generator rolls a separate d10 on the
finer D10_TABLE. After a hit, the attacker may spend 2 net hits, once, to
move the hit to a coarse location of their choice.
"""

from __future__ import annotations

import logging

from witch_iron import dice
from witch_iron.errors import InsufficientResource, InvalidLocation
from witch_iron.records import CombatQuarrelRecord
from witch_iron.types import DETAILED_LOCATIONS, LOCATIONS, DetailedLocation, Location

logger = logging.getLogger(__name__)

RELOCATION_COST = 2

# Indexed by the ones digit of the roll.
DIGIT_TABLE: tuple[Location, ...] = (
    "head",
    "torso", "torso", "torso",
    "right_arm", "left_arm",
    "right_arm", "left_arm",
    "right_leg", "left_leg",
)

# Indexed by d10 result - 1.
D10_TABLE: tuple[DetailedLocation, ...] = DETAILED_LOCATIONS

LOCATION_NAMES: dict[str, str] = {
    "head": "Head",
    "torso": "Torso",
    "right_arm": "Right Arm",
    "left_arm": "Left Arm",
    "right_leg": "Right Leg",
    "left_leg": "Left Leg",
}


def location_from_digit(raw_roll: int) -> Location:
    """Coarse location from the ones digit of a d100 result (84 -> right_arm)."""
    return DIGIT_TABLE[raw_roll % 10]


def location_from_d10(roll: int) -> DetailedLocation | str:
    """Detailed location for a 1-10 roll; anything else lands on the torso."""
    if 1 <= roll <= 10:
        return D10_TABLE[roll - 1]
    return "Torso"


def roll_detailed_location() -> tuple[int, DetailedLocation | str]:
    """Roll a d10 and look it up. Returns (roll, location)."""
    roll = dice.d10()
    return roll, location_from_d10(roll)


def validate_location(location: str) -> Location:
    if location not in LOCATIONS:
        raise InvalidLocation(location)
    return location


def relocate(record: CombatQuarrelRecord, location: str) -> CombatQuarrelRecord:
    """Spend 2 of the attack's net hits to move the hit to ``location``.

    Allowed once per exchange, only when the defender is the one injured
    and the attack won by at least 2 net hits.
    """
    new_location = validate_location(location)
    if record.relocated:
        raise InsufficientResource("Hit location has already been changed")
    if not record.can_relocate:
        raise InsufficientResource(
            f"Changing location costs {RELOCATION_COST} net hits; "
            f"the attack has {record.outcome.net_hits}"
        )

    logger.debug("Relocating hit on %s: %s -> %s", record.defender_id, record.location, new_location)
    record.location = new_location
    record.relocated = True
    record.hits_spent += RELOCATION_COST
    record.suggested_severity = max(1, record.outcome.net_hits - record.hits_spent)
    return record
