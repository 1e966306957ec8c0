"""
Static rules tables.

Monsters don't have individual abilities. A monster's Hit Dice (1-20) set a
single ability score that every one of its checks rolls against, and a
number of "+Hits" added to the checks it is good at:

    HD   1   2   3   4   5   6   7   8   9  10
    AS  30  33  40  44  50  55  60  66  70  77
    +H   1   1   1   2   2   2   3   3   3   4

    HD  11  12  13  14  15  16  17  18  19  20
    AS  80  88  90  99 100 105 110 115 120 125
    +H   4   4   5   5   5   6   6   6   7   7

Its damage and soak both start from max(1, ability bonus + size modifier)
and add the weapon or armor value, less any battle wear. So a 5 HD large
monster with a heavy weapon and 2 points of weapon wear deals

    max(1, 5 + 5) + max(0, 8 - 2) = 16

Characters advance through tiers by total XP; TIER_THRESHOLDS[n] is the XP
needed to reach tier n + 1.
"""

from witch_iron.types import Ability, Skill


ABILITY_SCORE_BY_HD: dict[int, int] = {
    1: 30, 2: 33, 3: 40, 4: 44, 5: 50,
    6: 55, 7: 60, 8: 66, 9: 70, 10: 77,
    11: 80, 12: 88, 13: 90, 14: 99, 15: 100,
    16: 105, 17: 110, 18: 115, 19: 120, 20: 125,
}

PLUS_HITS_BY_HD: dict[int, int] = {
    1: 1, 2: 1, 3: 1, 4: 2, 5: 2,
    6: 2, 7: 3, 8: 3, 9: 3, 10: 4,
    11: 4, 12: 4, 13: 5, 14: 5, 15: 5,
    16: 6, 17: 6, 18: 6, 19: 7, 20: 7,
}

SIZE_MODIFIERS: dict[str, int] = {
    "tiny": -5,
    "small": -2,
    "medium": 0,
    "large": 5,
    "huge": 10,
    "gigantic": 20,
    "gargantuan": 20,
}

WEAPON_DAMAGE: dict[str, int] = {
    "unarmed": 2,
    "light": 4,
    "medium": 6,
    "heavy": 8,
    "superheavy": 10,
}

ARMOR_VALUE: dict[str, int] = {
    "none": 0,
    "light": 2,
    "medium": 4,
    "heavy": 6,
    "superheavy": 8,
}

# (minimum bodies, scale, attacks), largest first.
MOB_SCALES: tuple[tuple[int, str, int], ...] = (
    (100, "huge", 5),
    (50, "large", 4),
    (20, "medium", 3),
    (5, "small", 2),
)

TIER_THRESHOLDS: tuple[int, ...] = (
    400, 1200, 2800, 6000, 12400, 25200, 50800, 102000, 204400, 409200,
)

SKILL_ABILITY: dict[Skill, Ability] = {
    "athletics": "muscle",
    "intimidate": "muscle",
    "melee": "muscle",
    "hardship": "robustness",
    "labor": "robustness",
    "imbibe": "robustness",
    "light_foot": "agility",
    "ride": "agility",
    "skulk": "agility",
    "cunning": "quickness",
    "perception": "quickness",
    "ranged": "quickness",
    "art": "finesse",
    "operate": "finesse",
    "trade": "finesse",
    "heal": "intelligence",
    "research": "intelligence",
    "navigation": "intelligence",
    "steel": "willpower",
    "survival": "willpower",
    "husbandry": "willpower",
    "leadership": "personality",
    "carouse": "personality",
    "coerce": "personality",
}

# Skill used to answer a condition quarrel.
CONDITION_SKILL: dict[str, str] = {
    "aflame": "hardship",
    "bleed": "hardship",
    "poison": "hardship",
    "stress": "steel",
    "corruption": "steel",
}

# Custom outcome text for the threshold quarrels, from the condition's
# point of view: "success" is the condition winning.
CONDITION_MESSAGES: dict[str, dict[str, str]] = {
    "stress": {
        "success": "Your mind breaks! You gain a Madness.",
        "failure": "You steel your mind, avoiding Madness.",
        "cost": "You hold on, but something snaps.",
    },
    "corruption": {
        "success": "Corruption takes hold! You gain a Mutation.",
        "failure": "You purge the corruption, avoiding Mutation.",
        "cost": "You push back the corruption, but at a price.",
    },
}

BASE_SPEED = 30
"""Character speed before agility: +5 for every full 40 agility."""
