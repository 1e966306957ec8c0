"""Tests for UI helper functions (actor building, engine setup)."""

from __future__ import annotations

from unittest.mock import patch

from ui.app import build_actor, default_config, make_engine, opposed_quarrel
from witch_iron.settings import Settings


class TestBuildActor:
    def test_character(self) -> None:
        actor = build_actor(default_config("a", "Anna"))
        assert actor.id == "a"
        assert actor.name == "Anna"
        assert actor.luck == 3
        assert actor.skill("melee").value == 20
        assert actor.derived.damage_value == 6
        assert actor.derived.soak_value == 2

    def test_no_gear(self) -> None:
        config = default_config("a", "Anna")
        config["weapon_damage"] = 0
        config["armor_soak"] = 0
        actor = build_actor(config)
        assert actor.items == []
        assert not actor.has_weapon

    def test_monster(self) -> None:
        config = default_config("m", "Ogre", "monster")
        config["hit_dice"] = 5
        config["size"] = "large"
        config["weapon_type"] = "heavy"
        actor = build_actor(config)
        assert actor.is_monster
        assert actor.derived.ability_score == 50
        assert actor.derived.damage_value == 18
        assert actor.system["stats"]["specialties"] == ["melee"]


class TestMakeEngine:
    def test_world(self) -> None:
        engine = make_engine(default_config("a", "Anna"), default_config("b", "Ogre", "monster"), Settings())
        assert "a" in engine.world
        assert engine.world.get("b").is_monster
        assert engine.sink.lines == []

    def test_opposed_quarrel(self) -> None:
        """Athletics at 40 for both: 23 is 2 hits, 35 is 1."""
        engine = make_engine(default_config("a", "Anna"), default_config("b", "Bors"), Settings())
        with patch("witch_iron.dice.randrange", side_effect=[23, 35, 1]):
            opposed_quarrel(engine, "a", "b", "athletics", "athletics")
        [result] = engine.results.values()
        assert result.net_hits == 1
        assert result.winner_id == "a"
