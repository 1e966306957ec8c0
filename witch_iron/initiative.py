"""Side initiative: one d6 decides whether the players or the NPCs go first."""

from __future__ import annotations

import logging
from typing import Iterable

from witch_iron import dice
from witch_iron.actor import Actor
from witch_iron.records import InitiativeRecord
from witch_iron.settings import Settings

logger = logging.getLogger(__name__)


def roll_side_initiative(combatants: Iterable[Actor], settings: Settings) -> InitiativeRecord:
    """On 4-6 the players act first, on 1-3 the NPCs do.

    The winning side gets the player initiative value and the other side
    the NPC value, so with the defaults the first side acts on 20 and the
    second on 10.
    """
    roll = dice.d6()
    players_first = roll >= 4
    first, second = settings.side_initiative_player_value, settings.side_initiative_npc_value
    player_value, npc_value = (first, second) if players_first else (second, first)

    record = InitiativeRecord(roll=roll, players_first=players_first)
    for actor in combatants:
        record.values[actor.id] = npc_value if actor.is_npc else player_value
    logger.info("Side initiative d6=%d: %s first", roll, "players" if players_first else "NPCs")
    return record
