"""World-level settings for the resolution engine, with env overrides.

Every setting can be overridden by a ``WITCH_IRON_<NAME>`` environment
variable (e.g. ``WITCH_IRON_AUTO_QUARREL=0``) when the settings are built
with ``Settings.from_env()``. Plain ``Settings()`` ignores the environment,
which is what tests use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

ENV_PREFIX = "WITCH_IRON_"


def _env_flag(name: str, default: bool = False) -> bool:
    """Read boolean env flag."""
    val = os.environ.get(name, "").strip().lower()
    if not val:
        return default
    return val in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    val = os.environ.get(name, "").strip()
    return int(val) if val else default


@dataclass
class Settings:
    auto_quarrel: bool = True
    """When a check completes and its actor has targets selected, register
    it as a pending quarrel against each target. With this off, quarrels
    only start from an explicit ``select_check`` or condition quarrel."""

    auto_apply_injuries: bool = False
    """Apply the injury produced by a combat quarrel to the defender during
    resolution. Off by default: the injury is reported and a GM applies it
    with Engine.apply_injury."""

    use_side_initiative: bool = True
    """Whether combats use side-based initiative at all."""

    side_initiative_player_value: int = 20
    """Initiative given to player combatants when the players win the d6."""

    side_initiative_npc_value: int = 10
    """Initiative given to NPCs when the players win the d6. The two
    values swap when the NPCs win."""

    condition_willpower_penalty: int = 5
    """Willpower lost when a stress or corruption quarrel is lost."""

    condition_threshold: int = 3
    """Stress or corruption rising across a multiple of this value starts
    a condition quarrel."""

    default_weapon_damage: int = 1
    """Weapon damage for attackers with no derived damage value."""

    default_soak: int = 0
    """Soak for defenders with no derived soak value."""

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from defaults overridden by WITCH_IRON_* env vars."""
        kwargs: dict[str, bool | int] = {}
        for f in fields(cls):
            name = ENV_PREFIX + f.name.upper()
            if f.type in ("bool", bool):
                kwargs[f.name] = _env_flag(name, f.default)
            else:
                kwargs[f.name] = _env_int(name, f.default)
        return cls(**kwargs)
