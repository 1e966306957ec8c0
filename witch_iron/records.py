"""Structured records for the Witch Iron resolution engine.

Every value that crosses a component boundary is one of these dataclasses:
rolls come out of the roller as CheckResults, the quarrel registry pairs
them into Quarrels, and resolution produces QuarrelResults. Presentation
formats these records and never parses anything back out of its own
output.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from witch_iron.types import DetailedLocation, InjuryTier, Location, Outcome


@dataclass(frozen=True)
class CheckResult:
    """One percentile roll classified against a target.

    Frozen: reverse, reroll and luck build a replacement with the same
    check_id rather than changing this one.
    """

    check_id: str
    raw_roll: int
    """The d100 result, 1-100."""

    target: int
    modifier: int
    is_success: bool
    is_doubles: bool
    is_critical_success: bool
    is_fumble: bool
    hits: int
    """Signed margin of success; see witch_iron.hits."""

    policy: str = "generic"
    """Name of the HitsPolicy that produced ``hits``."""

    additional_hits: int = 0
    """Bonus hits on success (specializations, monster +Hits)."""

    actor_id: str | None = None
    token_id: str | None = None
    label: str = ""
    """What was rolled: 'Melee', 'Muscle', 'Steel', ..."""

    is_combat_check: bool | None = None
    """Explicit intent from the caller. None means "infer it"."""

    reversed: bool = False
    rerolled: bool = False
    luck_spent: int = 0
    """Total luck applied to this roll so far (signed)."""

    @property
    def effective_target(self) -> int:
        return self.target + self.modifier


@dataclass
class LuckSpend:
    """Outcome of debiting an actor's luck pool."""

    requested: int
    spent: int
    remaining: int

    @property
    def clamped(self) -> bool:
        """True when the pool could not cover the full request."""
        return self.spent < self.requested


@dataclass
class OpposedOutcome:
    """Active-vs-passive contest result."""

    success: bool
    """True when the active side wins. Exact ties go to the active side."""

    net_hits: int
    margin: int


@dataclass
class InjuryRecord:
    """An injury generated from combat damage on the d10 table."""

    location: DetailedLocation | str
    net_damage: int
    tier: InjuryTier
    description: str
    effect: str
    severity: int
    """clamp(round(net_damage / 2), 0, 5)."""

    conditions: str
    requires_medical_aid: bool = True
    requires_surgery: bool = False


@dataclass
class Injury:
    """A wound owned by one actor, as stored in ``system.injuries``."""

    location: Location | DetailedLocation | str
    severity: int
    description: str = ""
    effect: str = ""
    treated: bool = False
    permanent: bool = False
    """A permanent injury is always treated too, and always penalizes."""

    timestamp: float = 0.0

    @property
    def penalizes(self) -> bool:
        """Whether this injury contributes stat penalties right now."""
        return self.permanent or not self.treated

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Injury:
        return cls(
            location=data["location"],
            severity=int(data.get("severity", 1)),
            description=data.get("description", ""),
            effect=data.get("effect", ""),
            treated=bool(data.get("treated", False)),
            permanent=bool(data.get("permanent", False)),
            timestamp=float(data.get("timestamp", 0.0)),
        )


@dataclass(frozen=True)
class ActorRef:
    """A targeted actor, optionally through one specific token."""

    actor_id: str
    token_id: str | None = None


@dataclass
class Participant:
    """One side of a quarrel."""

    actor_id: str
    check_id: str
    hits: int
    token_id: str | None = None


@dataclass
class ResultMessages:
    """Custom outcome text shown instead of Victory/Defeat wording."""

    success: str = ""
    failure: str = ""
    cost: str = ""


@dataclass
class PendingCheck:
    """A completed check waiting for an opponent's roll.

    Registered under the opponent's actor id (and token id, when there is
    one) so that the opponent's next roll finds it. Condition quarrels have
    no initiating check: the condition's rating stands in for its hits.
    """

    initiator: Participant
    target_actor_id: str
    target_token_id: str | None = None
    check: CheckResult | None = None
    is_combat_check: bool | None = None
    condition: str | None = None
    custom_name: str = ""
    custom_icon: str = ""
    skill: str = ""
    result_messages: ResultMessages | None = None


@dataclass
class Quarrel:
    """Two paired checks resolved as a single contest."""

    id: str
    initiator: Participant
    responder: Participant
    is_combat_check: bool = False
    condition: str | None = None
    custom_name: str = ""
    custom_icon: str = ""
    skill: str = ""
    result_messages: ResultMessages | None = None


@dataclass
class DamageResult:
    """Combat consequences of a resolved combat quarrel."""

    attacker_id: str
    defender_id: str
    weapon_damage: int
    net_hits: int
    """Absolute net hits added to weapon damage."""

    soak: int
    net_damage: int
    location_roll: int
    injury: InjuryRecord | None = None
    injury_applied: bool = False
    """Set once the injury has been written to the defender."""


@dataclass
class ConditionEffect:
    """Side effects of a condition quarrel."""

    condition: str
    condition_won: bool
    """True when the creature failed to overcome the condition."""

    cleared: list[str] = field(default_factory=list)
    """Condition tracks reset to zero."""

    markers: list[str] = field(default_factory=list)
    """Defeat states raised: 'unconscious', 'dead', 'madness', 'mutation'."""

    willpower_penalty: int = 0
    message: str = ""


@dataclass
class QuarrelResult:
    """Full outcome of one resolved quarrel."""

    quarrel: Quarrel
    initiator_name: str
    responder_name: str
    initiator_hits: int
    responder_hits: int
    net_hits: int
    """initiator hits minus responder hits (signed)."""

    outcome: Outcome
    initiator_outcome: Outcome
    responder_outcome: Outcome
    damage: DamageResult | None = None
    condition_effect: ConditionEffect | None = None

    @property
    def winner_id(self) -> str | None:
        """Actor id of the winning side, or None for a victory at a cost."""
        if self.net_hits > 0:
            return self.quarrel.initiator.actor_id
        if self.net_hits < 0:
            return self.quarrel.responder.actor_id
        return None


@dataclass
class CombatQuarrelRecord:
    """Record of a direct attack-vs-defense exchange."""

    attacker_id: str
    defender_id: str
    attack_skill: str
    defense_skill: str
    attack: CheckResult
    defense: CheckResult
    outcome: OpposedOutcome
    injured_id: str | None = None
    """Who takes the injury, if anyone."""

    location: Location | None = None
    relocated: bool = False
    hits_spent: int = 0
    """Net hits spent on relocation; they no longer count toward severity."""

    suggested_severity: int = 0
    injury_applied: bool = False

    @property
    def attack_wins(self) -> bool:
        return self.outcome.success

    @property
    def can_relocate(self) -> bool:
        """Relocation is offered once, to an injured defender, at 2+ net hits."""
        return (
            not self.relocated
            and self.injured_id == self.defender_id
            and self.outcome.net_hits >= 2
        )


@dataclass
class InitiativeRecord:
    """Side-based initiative for one combat."""

    roll: int
    players_first: bool
    values: dict[str, int] = field(default_factory=dict)
    """Initiative value assigned to each combatant, by actor id."""
