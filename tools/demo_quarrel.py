#!/usr/bin/env python3
"""Run a quick demo: a sellsword trades blows with an ogre, then gets stressed."""

import logging

from witch_iron.engine import Engine
from witch_iron.records import ActorRef
from witch_iron.world import World

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

sellsword = {
    "id": "sellsword", "name": "Sellsword", "type": "character",
    "system": {
        "abilities": {
            "muscle": {"value": 45}, "robustness": {"value": 40}, "agility": {"value": 35},
            "quickness": {"value": 38}, "willpower": {"value": 33},
            "luck": {"value": 30, "current": 3},
        },
        "skills": {"melee": {"value": 20}, "light_foot": {"value": 10}, "steel": {"value": 10}},
    },
    "items": [
        {"type": "weapon", "name": "Arming sword", "damage": 6},
        {"type": "armor", "name": "Gambeson", "soak": 2},
    ],
}
ogre = {
    "id": "ogre", "name": "Ogre", "type": "monster",
    "system": {"stats": {"hit_dice": 5, "size": "large", "weapon_type": "heavy", "armor_type": "light"}},
}

engine = Engine(World([sellsword, ogre]))
engine.roll_side_initiative(["sellsword", "ogre"])

record = engine.combat_quarrel("sellsword", "ogre", "melee")
if record.can_relocate:
    engine.relocate_hit(record, "head")
engine.apply_combat_injury(record)

swing = engine.world.get("ogre").roll_skill("melee")
engine.handle_check(swing, targets=[ActorRef("sellsword")])
engine.handle_check(engine.world.get("sellsword").roll_skill("melee"))

engine.raise_condition("sellsword", "stress", 3)
engine.handle_check(engine.world.get("sellsword").roll_skill("steel"))

print("\n".join(engine.sink.lines))
