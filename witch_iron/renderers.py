"""Presentation: turning structured results into something people read.

The engine publishes records to a PresentationSink and never waits on it.
TextRenderer is the default sink: it formats each record as plain text
lines and keeps them in ``lines`` as a running log. A streamlit front-end
(ui/app.py) reads the same log.
"""

from __future__ import annotations

from typing import Protocol

from witch_iron.locations import LOCATION_NAMES
from witch_iron.records import CheckResult, CombatQuarrelRecord, InitiativeRecord, QuarrelResult


class PresentationSink(Protocol):
    def publish_check_result(self, check: CheckResult, actor_name: str = "") -> None: ...

    def publish_quarrel_result(self, result: QuarrelResult) -> None: ...

    def publish_combat_quarrel(self, record: CombatQuarrelRecord, attacker_name: str, defender_name: str) -> None: ...

    def publish_initiative(self, record: InitiativeRecord) -> None: ...

    def warn(self, message: str) -> None: ...


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if abs(n) == 1 else f"{n} {word}s"


class TextRenderer:
    """Renders records to terminal text lines.

    Each render_* method returns a list of strings (one per log line); the
    publish_* methods render and append to ``lines``.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.warnings: list[str] = []

    def render_check(self, check: CheckResult, actor_name: str = "") -> list[str]:
        who = f"{actor_name}: " if actor_name else ""
        label = check.label or "Check"
        verdict = "success" if check.is_success else "failure"
        if check.is_critical_success:
            verdict = "critical success"
        elif check.is_fumble:
            verdict = "fumble"
        revised = []
        if check.reversed:
            revised.append("reversed")
        if check.rerolled:
            revised.append("rerolled")
        if check.luck_spent:
            revised.append(f"{check.luck_spent:+d} luck")
        suffix = f" [{', '.join(revised)}]" if revised else ""
        return [
            f"{who}{label} {check.raw_roll:02d} vs {check.effective_target}: "
            f"{verdict}, {_plural(check.hits, 'hit')}{suffix}"
        ]

    def render_quarrel(self, result: QuarrelResult) -> list[str]:
        quarrel = result.quarrel
        name = quarrel.custom_name or result.initiator_name
        lines = [
            f"Quarrel: {name} ({result.initiator_hits}) vs "
            f"{result.responder_name} ({result.responder_hits})"
        ]
        if result.outcome == "VictoryAtACost":
            lines.append("    Victory at a cost for both sides")
        else:
            winner, loser = name, result.responder_name
            if result.outcome == "Defeat":
                winner, loser = loser, winner
            lines.append(f"    {winner} beats {loser} by {_plural(abs(result.net_hits), 'net hit')}")

        damage = result.damage
        if damage:
            lines.append(
                f"    Damage: {damage.weapon_damage} weapon + {damage.net_hits} hits "
                f"- {damage.soak} soak = {damage.net_damage}"
            )
            if damage.injury:
                injury = damage.injury
                lines.append(
                    f"    {injury.tier} injury to the {injury.location}: {injury.description} "
                    f"({injury.effect})"
                )
                if injury.requires_surgery:
                    lines.append("    Requires surgery")
            else:
                lines.append("    No injury")

        effect = result.condition_effect
        if effect:
            lines.append(f"    {effect.message}")
            if effect.willpower_penalty:
                lines.append(f"    Willpower -{effect.willpower_penalty}")
            if effect.cleared:
                lines.append(f"    Cleared: {', '.join(effect.cleared)}")
        return lines

    def render_combat_quarrel(self, record: CombatQuarrelRecord, attacker_name: str, defender_name: str) -> list[str]:
        lines = self.render_check(record.attack, attacker_name) + self.render_check(record.defense, defender_name)
        net = _plural(record.outcome.net_hits, "net hit")
        if record.attack_wins:
            lines.append(f"{attacker_name} hits {defender_name} with {net}")
        else:
            lines.append(f"{defender_name} defends against {attacker_name}")
        if record.injured_id:
            injured = defender_name if record.injured_id == record.defender_id else attacker_name
            where = LOCATION_NAMES.get(record.location, record.location)
            lines.append(
                f"    {injured} is injured in the {where} "
                f"(suggested severity {record.suggested_severity})"
            )
        if record.relocated:
            lines.append(f"    2 hits spent to move the hit to the {LOCATION_NAMES.get(record.location, record.location)}")
        return lines

    def render_initiative(self, record: InitiativeRecord) -> list[str]:
        side = "Players" if record.players_first else "NPCs"
        return [f"Side initiative: d6 {record.roll}, {side} act first"]

    def publish_check_result(self, check: CheckResult, actor_name: str = "") -> None:
        self.lines.extend(self.render_check(check, actor_name))

    def publish_quarrel_result(self, result: QuarrelResult) -> None:
        self.lines.extend(self.render_quarrel(result))

    def publish_combat_quarrel(self, record: CombatQuarrelRecord, attacker_name: str, defender_name: str) -> None:
        self.lines.extend(self.render_combat_quarrel(record, attacker_name, defender_name))

    def publish_initiative(self, record: InitiativeRecord) -> None:
        self.lines.extend(self.render_initiative(record))

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        self.lines.append(f"Warning: {message}")
