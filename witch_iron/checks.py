"""
Percentile checks: roll a d100 under a target and classify the result.

classify() is the pure part and is what every other roll path goes
through, including the revisions (reverse, reroll, luck) a player may
make to a freshly displayed roll before it is resolved.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from itertools import count

from witch_iron import dice
from witch_iron.hits import ABILITY_POLICY, GENERIC_POLICY, HitsPolicy, calculate_hits
from witch_iron.records import CheckResult

logger = logging.getLogger(__name__)

_check_ids = count(1)


def new_check_id() -> str:
    return f"check-{next(_check_ids)}"


def is_doubles(raw_roll: int) -> bool:
    """11, 22, ... 99. A 100 is never doubles."""
    return raw_roll != 100 and dice.tens(raw_roll) == dice.ones(raw_roll)


def classify(
    raw_roll: int,
    target: int,
    modifier: int = 0,
    *,
    additional_hits: int = 0,
    policy: HitsPolicy = GENERIC_POLICY,
    check_id: str | None = None,
    actor_id: str | None = None,
    token_id: str | None = None,
    label: str = "",
    is_combat_check: bool | None = None,
) -> CheckResult:
    """Build a CheckResult for a known raw roll.

    Targets are not bounded: a target of 0 or less can only be met by
    nothing, and one of 100 or more always succeeds.
    """
    effective_target = target + modifier
    success = raw_roll <= effective_target
    doubles = is_doubles(raw_roll)
    critical = success and (raw_roll <= 5 or doubles)
    fumble = not success and (raw_roll >= 96 or doubles)
    hits = calculate_hits(
        raw_roll, effective_target, success, critical, fumble,
        additional_hits=additional_hits, policy=policy,
    )
    return CheckResult(
        check_id=check_id or new_check_id(),
        raw_roll=raw_roll,
        target=target,
        modifier=modifier,
        is_success=success,
        is_doubles=doubles,
        is_critical_success=critical,
        is_fumble=fumble,
        hits=hits,
        policy=policy.name,
        additional_hits=additional_hits,
        actor_id=actor_id,
        token_id=token_id,
        label=label,
        is_combat_check=is_combat_check,
    )


class PercentileRoller:
    """Rolls d100 checks under a fixed hits policy.

    The ability-roll path uses ``PercentileRoller(ABILITY_POLICY)``; the
    default is the generic policy.
    """

    def __init__(self, policy: HitsPolicy = GENERIC_POLICY) -> None:
        self.policy = policy

    def roll(self, target: int, modifier: int = 0, **context) -> CheckResult:
        """Roll once. Extra keyword arguments are passed to classify()."""
        context.setdefault("policy", self.policy)
        result = classify(dice.d100(), target, modifier, **context)
        logger.debug(
            "%s rolled %d vs %d: %s, %d hits",
            result.label or "check", result.raw_roll, result.effective_target,
            "success" if result.is_success else "failure", result.hits,
        )
        return result


ability_roller = PercentileRoller(ABILITY_POLICY)


def _revise(check: CheckResult, raw_roll: int, **changes) -> CheckResult:
    """Reclassify a check around a new raw roll under the generic policy."""
    revised = classify(
        raw_roll,
        check.target,
        check.modifier,
        additional_hits=check.additional_hits,
        policy=GENERIC_POLICY,
        check_id=check.check_id,
        actor_id=check.actor_id,
        token_id=check.token_id,
        label=check.label,
        is_combat_check=check.is_combat_check,
    )
    carried = {
        "reversed": check.reversed,
        "rerolled": check.rerolled,
        "luck_spent": check.luck_spent,
    }
    carried.update(changes)
    return replace(revised, **carried)


def reverse(check: CheckResult) -> CheckResult:
    """Swap the tens and ones digits of the roll (37 -> 73)."""
    return _revise(check, dice.reverse_digits(check.raw_roll), reversed=True)


def reroll(check: CheckResult) -> CheckResult:
    """Replace the roll with a fresh d100."""
    return _revise(check, dice.d100(), rerolled=True)


def adjust(check: CheckResult, delta: int) -> CheckResult:
    """Shift the raw roll by ``delta`` (negative lowers it), kept to 1-100.

    Only the distance actually moved is added to ``luck_spent``. The caller
    is responsible for debiting luck; see Actor.spend_luck.
    """
    raw_roll = clamp_roll(check.raw_roll + delta)
    return _revise(check, raw_roll, luck_spent=check.luck_spent + raw_roll - check.raw_roll)


def clamp_roll(raw_roll: int) -> int:
    return max(1, min(100, raw_roll))
