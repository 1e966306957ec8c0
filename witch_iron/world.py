"""The actors in play, their tokens, and who is targeting whom.

World stands in for the host's document store and canvas: it resolves
actor ids (raising MissingActor for unknown ones), maps tokens to actors,
and holds each actor's current target selection.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from witch_iron.actor import Actor, Rating
from witch_iron.errors import MissingActor
from witch_iron.records import ActorRef, Injury

logger = logging.getLogger(__name__)


class World:
    def __init__(self, actors: Iterable[Actor | dict[str, Any]] = ()) -> None:
        self.actors: dict[str, Actor] = {}
        self.tokens: dict[str, str] = {}
        """Token id -> actor id."""
        self.targets: dict[str, list[ActorRef]] = {}
        for actor in actors:
            self.add(actor)

    def add(self, actor: Actor | dict[str, Any]) -> Actor:
        if not isinstance(actor, Actor):
            actor = Actor(actor)
        self.actors[actor.id] = actor
        return actor

    def remove(self, actor_id: str) -> None:
        self.actors.pop(actor_id, None)
        self.targets.pop(actor_id, None)
        self.tokens = {t: a for t, a in self.tokens.items() if a != actor_id}

    def find(self, actor_id: str | None) -> Actor | None:
        return self.actors.get(actor_id) if actor_id else None

    def get(self, actor_id: str) -> Actor:
        actor = self.find(actor_id)
        if actor is None:
            raise MissingActor(actor_id)
        return actor

    def __contains__(self, actor_id: str) -> bool:
        return actor_id in self.actors

    # --- accessor surface ---

    def get_ability(self, actor_id: str, name: str) -> Rating:
        return self.get(actor_id).ability(name)

    def get_skill(self, actor_id: str, name: str) -> Rating:
        return self.get(actor_id).skill(name)

    def get_injuries(self, actor_id: str) -> list[Injury]:
        return self.get(actor_id).injuries

    def update_actor(self, actor_id: str, changes: dict[str, Any]) -> None:
        self.get(actor_id).update(changes)

    # --- tokens and targeting ---

    def place_token(self, token_id: str, actor_id: str) -> None:
        self.get(actor_id)
        self.tokens[token_id] = actor_id

    def actor_for_token(self, token_id: str) -> Actor:
        actor_id = self.tokens.get(token_id)
        if actor_id is None:
            raise MissingActor(token_id)
        return self.get(actor_id)

    def set_targets(self, actor_id: str, targets: Iterable[ActorRef | str]) -> None:
        """Replace an actor's target selection."""
        refs = [t if isinstance(t, ActorRef) else ActorRef(t) for t in targets]
        self.targets[actor_id] = refs
        logger.debug("%s targets %s", actor_id, [r.actor_id for r in refs])

    def clear_targets(self, actor_id: str) -> None:
        self.targets.pop(actor_id, None)

    def get_selected_targets(self, actor_id: str) -> list[ActorRef]:
        return list(self.targets.get(actor_id, []))
