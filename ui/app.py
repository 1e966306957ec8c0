"""Streamlit quarrel table.

Run with: PYTHONPATH=. streamlit run ui/app.py
"""

from __future__ import annotations

import streamlit as st

from witch_iron.actor import Actor
from witch_iron.engine import Engine
from witch_iron.locations import LOCATION_NAMES
from witch_iron.records import ActorRef
from witch_iron.renderers import TextRenderer
from witch_iron.settings import Settings
from witch_iron.types import LOCATIONS
from witch_iron.world import World

ACTOR_TYPES = ("character", "enemy", "monster")
SHOWN_ABILITIES = ("muscle", "robustness", "agility", "quickness", "willpower")
SIZES = ("tiny", "small", "medium", "large", "huge", "gigantic")
WEAPON_TYPES = ("unarmed", "light", "medium", "heavy", "superheavy")
ARMOR_TYPES = ("none", "light", "medium", "heavy", "superheavy")


def default_config(actor_id: str, name: str, actor_type: str = "character") -> dict:
    return {
        "id": actor_id,
        "name": name,
        "type": actor_type,
        "abilities": {a: 40 for a in SHOWN_ABILITIES},
        "melee": 20,
        "ranged": 10,
        "light_foot": 10,
        "weapon_damage": 6,
        "armor_soak": 2,
        "luck": 3,
        "hit_dice": 3,
        "size": "medium",
        "weapon_type": "medium",
        "armor_type": "light",
    }


def build_actor(config: dict) -> Actor:
    """Build an Actor document from an actor config dict.

    Characters and enemies get abilities, skills and gear; monsters get
    Hit Dice stats and derive everything else from them.
    """
    system: dict = {
        "conditions": {},
        "injuries": [],
    }
    items: list[dict] = []
    if config["type"] == "monster":
        system["stats"] = {
            "hit_dice": config["hit_dice"],
            "size": config["size"],
            "weapon_type": config["weapon_type"],
            "armor_type": config["armor_type"],
            "specialties": ["melee"],
        }
    else:
        system["abilities"] = {a: {"value": v} for a, v in config["abilities"].items()}
        system["abilities"]["luck"] = {"value": 30, "current": config["luck"]}
        system["skills"] = {s: {"value": config[s]} for s in ("melee", "ranged", "light_foot")}
        if config["weapon_damage"]:
            items.append({"type": "weapon", "name": "Weapon", "damage": config["weapon_damage"]})
        if config["armor_soak"]:
            items.append({"type": "armor", "name": "Armor", "soak": config["armor_soak"]})
    return Actor({
        "id": config["id"],
        "name": config["name"],
        "type": config["type"],
        "system": system,
        "items": items,
    })


def make_engine(config_a: dict, config_b: dict, settings: Settings | None = None) -> Engine:
    world = World([build_actor(config_a), build_actor(config_b)])
    return Engine(world, settings or Settings.from_env(), TextRenderer())


def opposed_quarrel(engine: Engine, initiator_id: str, responder_id: str, skill: str, response: str) -> None:
    """Initiator rolls against the responder, who answers with ``response``."""
    initiator = engine.world.get(initiator_id)
    responder = engine.world.get(responder_id)
    first = initiator.roll_skill(skill)
    engine.handle_check(first, targets=[ActorRef(responder_id)])
    engine.handle_check(responder.roll_skill(response))


def actor_config(label: str, actor_id: str, default_type: str) -> dict:
    """Render sidebar controls for one actor and return its config dict."""
    st.sidebar.subheader(label)
    config = default_config(actor_id, label, default_type)
    config["name"] = st.sidebar.text_input("Name", label, key=f"{actor_id}_name")
    config["type"] = st.sidebar.selectbox(
        "Type", ACTOR_TYPES, index=ACTOR_TYPES.index(default_type), key=f"{actor_id}_type"
    )
    if config["type"] == "monster":
        config["hit_dice"] = st.sidebar.slider("Hit Dice", 1, 20, 3, key=f"{actor_id}_hd")
        config["size"] = st.sidebar.selectbox("Size", SIZES, index=2, key=f"{actor_id}_size")
        config["weapon_type"] = st.sidebar.selectbox("Weapon", WEAPON_TYPES, index=2, key=f"{actor_id}_wt")
        config["armor_type"] = st.sidebar.selectbox("Armor", ARMOR_TYPES, index=1, key=f"{actor_id}_at")
        return config

    with st.sidebar.expander("Abilities"):
        for ability in SHOWN_ABILITIES:
            config["abilities"][ability] = st.number_input(
                ability.capitalize(), 0, 100, 40, key=f"{actor_id}_{ability}"
            )
    with st.sidebar.expander("Skills and gear"):
        for skill in ("melee", "ranged", "light_foot"):
            config[skill] = st.number_input(
                skill.replace("_", " ").title(), 0, 60, config[skill], key=f"{actor_id}_{skill}"
            )
        config["weapon_damage"] = st.number_input("Weapon damage", 0, 12, 6, key=f"{actor_id}_dmg")
        config["armor_soak"] = st.number_input("Armor soak", 0, 8, 2, key=f"{actor_id}_soak")
        config["luck"] = st.number_input("Luck", 0, 10, 3, key=f"{actor_id}_luck")
    return config


def show_actor(actor: Actor) -> None:
    st.markdown(f"**{actor.name}** ({actor.type})")
    derived = actor.derived
    cols = st.columns(3)
    cols[0].metric("Damage", derived.damage_value or 0)
    cols[1].metric("Soak", derived.soak_value or 0)
    cols[2].metric("Speed", derived.speed)
    for i, injury in enumerate(actor.injuries):
        state = "permanent" if injury.permanent else "treated" if injury.treated else "untreated"
        st.caption(f"{i}: {injury.description} ({injury.location}, severity {injury.severity}, {state})")


def main() -> None:
    st.set_page_config(page_title="Witch Iron Quarrels", layout="wide")
    st.title("Witch Iron Quarrels")

    st.sidebar.header("Actors")
    config_a = actor_config("Attacker", "a", "character")
    st.sidebar.divider()
    config_b = actor_config("Defender", "b", "monster")

    if st.sidebar.button("Reset", type="primary") or "engine" not in st.session_state:
        st.session_state.engine = make_engine(config_a, config_b)
        st.session_state.record = None
    engine: Engine = st.session_state.engine

    col_a, col_b = st.columns(2)
    with col_a:
        show_actor(engine.world.get("a"))
    with col_b:
        show_actor(engine.world.get("b"))
    st.divider()

    buttons = st.columns(3)
    if buttons[0].button("Melee attack"):
        st.session_state.record = engine.combat_quarrel("a", "b", "melee")
    if buttons[1].button("Ranged attack"):
        st.session_state.record = engine.combat_quarrel("a", "b", "ranged")
    if buttons[2].button("Opposed Athletics"):
        opposed_quarrel(engine, "a", "b", "athletics", "athletics")

    record = st.session_state.get("record")
    if record is not None and record.injured_id and not record.injury_applied:
        if record.can_relocate:
            names = [LOCATION_NAMES[loc] for loc in LOCATIONS]
            choice = st.selectbox("Move hit to", names)
            if st.button("Spend 2 hits to change location"):
                engine.relocate_hit(record, LOCATIONS[names.index(choice)])
        if st.button(f"Apply injury to {engine.world.get(record.injured_id).name}"):
            engine.apply_combat_injury(record)

    st.subheader("Log")
    st.code("\n".join(engine.sink.lines) or "(nothing yet)")
    for warning in engine.sink.warnings:
        st.warning(warning)


if __name__ == "__main__":
    main()
