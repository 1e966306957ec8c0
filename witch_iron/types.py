"""
Domain-specific type aliases for the Witch Iron resolution engine.

The Literal aliases document signatures; a parameter typed as Location is
one of the six coarse body locations, not an arbitrary string. The tuples
next to them hold the same values for runtime validation.
"""

from typing import Literal, TypeAlias

# The six coarse body locations used by character and enemy injuries and
# by the digit hit-location table.
Location: TypeAlias = Literal[
    "head",
    "torso",
    "right_arm",
    "left_arm",
    "right_leg",
    "left_leg",
]
LOCATIONS: tuple[Location, ...] = (
    "head", "torso", "right_arm", "left_arm", "right_leg", "left_leg",
)

# The richer location set produced by the d10 combat-damage table.
DetailedLocation: TypeAlias = Literal[
    "Head", "Face", "Neck", "Chest", "Back",
    "Arm", "Hand", "Leg", "Foot", "Jaw",
]
DETAILED_LOCATIONS: tuple[DetailedLocation, ...] = (
    "Head", "Face", "Neck", "Chest", "Back",
    "Arm", "Hand", "Leg", "Foot", "Jaw",
)

Ability: TypeAlias = Literal[
    "muscle",
    "robustness",
    "agility",
    "quickness",
    "finesse",
    "intelligence",
    "willpower",
    "personality",
    "luck",
]
ABILITIES: tuple[Ability, ...] = (
    "muscle", "robustness", "agility", "quickness", "finesse",
    "intelligence", "willpower", "personality", "luck",
)

# Every skill is governed by one ability; see SKILL_ABILITY in witch_iron.data.
Skill: TypeAlias = Literal[
    "athletics", "intimidate", "melee",
    "hardship", "labor", "imbibe",
    "light_foot", "ride", "skulk",
    "cunning", "perception", "ranged",
    "art", "operate", "trade",
    "heal", "research", "navigation",
    "steel", "survival", "husbandry",
    "leadership", "carouse", "coerce",
]

# Conditions that can be the passive side of a condition quarrel.
Condition: TypeAlias = Literal["aflame", "bleed", "poison", "stress", "corruption"]
QUARREL_CONDITIONS: tuple[Condition, ...] = (
    "aflame", "bleed", "poison", "stress", "corruption",
)

# Conditions that are overcome together: beating any one clears all three.
AFFLICTIONS: tuple[Condition, ...] = ("aflame", "bleed", "poison")

# Conditions whose win costs willpower and resets the track to zero.
MENTAL_CONDITIONS: tuple[Condition, ...] = ("stress", "corruption")

# Every condition track an actor carries.
CONDITIONS: tuple[str, ...] = (
    "aflame", "bleed", "poison", "corruption", "stress",
    "blind", "deaf", "pain", "fatigue", "entangle",
    "helpless", "stun", "prone",
)

Outcome: TypeAlias = Literal["Victory", "Defeat", "VictoryAtACost"]

# Actor document types. Monsters and enemies are NPCs.
ActorType: TypeAlias = Literal["character", "descendant", "enemy", "monster"]

AttackSkill: TypeAlias = Literal["melee", "ranged"]
DefenseSkill: TypeAlias = Literal["melee", "light_foot"]

InjuryTier: TypeAlias = Literal["Minor", "Moderate", "Severe"]
