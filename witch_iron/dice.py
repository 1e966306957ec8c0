"""
Random source for the percentile system.

Every check in this game is a d100 rolled under a target number. A d10
picks hit locations for the combat-damage table, and a d6 decides which
side acts first under side initiative. All three draw from randrange so
tests can force results with ``patch("witch_iron.dice.randrange", ...)``.
"""

from random import randrange


def d100() -> int:
    """Roll percentile dice: a uniform integer from 1 to 100."""
    return randrange(1, 101)


def d10() -> int:
    """Roll a single d10 (1-10). Never explodes."""
    return randrange(1, 11)


def d6() -> int:
    """Roll a single d6 (1-6)."""
    return randrange(1, 7)


def tens(value: int) -> int:
    """Tens digit of a roll or target, by floor division (100 -> 10)."""
    return value // 10


def ones(value: int) -> int:
    """Ones digit of a roll (100 -> 0)."""
    return value % 10


def reverse_digits(roll: int) -> int:
    """Swap the tens and ones digits of a d100 result.

    01 becomes 10, 37 becomes 73, 40 becomes 04. A 100 is its own reverse,
    since it reads as "00" on the dice.
    """
    if roll == 100:
        return 100
    reversed_roll = ones(roll) * 10 + tens(roll)
    # "00" read back as a result is a 100
    return reversed_roll or 100
