"""
Hits: the margin-of-success currency of the percentile system.

A success earns one hit per tens digit the roll came in under the target;
a failure loses one per tens digit it went over. Hits are what opposed
checks compare and what scales combat damage.

Criticals and fumbles are boosted by one of two named policies:

ABILITY_POLICY  (ability, skill and monster rolls)
    critical: at least 6, and at least one more than the normal hits
    fumble:   exactly -6

GENERIC_POLICY  (reversed, rerolled and luck-adjusted rolls)
    critical: at least 1, and at least one more than the normal hits
    fumble:   at most -1, and at least one fewer than the normal hits

A check records the name of the policy it was classified under.
"""

from __future__ import annotations

from dataclasses import dataclass

from witch_iron.dice import tens


@dataclass(frozen=True)
class HitsPolicy:
    """How criticals and fumbles adjust hits."""

    name: str
    critical_floor: int
    """Minimum hits on a critical success."""

    fumble_hits: int | None = None
    """Fixed hits on a fumble, or None for "one worse, at most -1"."""

    def critical(self, hits: int) -> int:
        return max(self.critical_floor, hits + 1)

    def fumble(self, hits: int) -> int:
        if self.fumble_hits is not None:
            return self.fumble_hits
        return min(hits - 1, -1)


ABILITY_POLICY = HitsPolicy("ability", critical_floor=6, fumble_hits=-6)
GENERIC_POLICY = HitsPolicy("generic", critical_floor=1)

POLICIES: dict[str, HitsPolicy] = {
    ABILITY_POLICY.name: ABILITY_POLICY,
    GENERIC_POLICY.name: GENERIC_POLICY,
}


def base_hits(raw_roll: int, effective_target: int) -> int:
    """Tens of the target minus tens of the roll.

    Never negative for a success, since a roll at or under the target
    can't have a larger tens digit. Never positive for a failure.
    """
    return tens(effective_target) - tens(raw_roll)


def calculate_hits(
    raw_roll: int,
    effective_target: int,
    is_success: bool,
    is_critical_success: bool,
    is_fumble: bool,
    additional_hits: int = 0,
    policy: HitsPolicy = GENERIC_POLICY,
) -> int:
    """Signed hits for a classified roll.

    Additional hits (specializations, monster +Hits) only count on a
    success, and are added before the critical boost.
    """
    margin = base_hits(raw_roll, effective_target)
    if is_success:
        hits = max(0, margin) + additional_hits
        if is_critical_success:
            hits = policy.critical(hits)
        return hits

    hits = min(0, margin)
    if is_fumble:
        hits = policy.fumble(hits)
    return hits
