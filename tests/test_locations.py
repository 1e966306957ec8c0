"""Tests for hit-location tables and relocation."""

from unittest.mock import patch

import pytest

from witch_iron.checks import classify
from witch_iron.errors import InsufficientResource, InvalidLocation
from witch_iron.locations import (
    location_from_d10, location_from_digit, relocate, roll_detailed_location, validate_location,
)
from witch_iron.records import CombatQuarrelRecord, OpposedOutcome


def make_record(net_hits: int = 3, success: bool = True, injured: str | None = "b") -> CombatQuarrelRecord:
    return CombatQuarrelRecord(
        attacker_id="a",
        defender_id="b",
        attack_skill="melee",
        defense_skill="melee",
        attack=classify(24, 60),
        defense=classify(51, 60),
        outcome=OpposedOutcome(success=success, net_hits=net_hits, margin=net_hits),
        injured_id=injured,
        location="right_arm",
        suggested_severity=max(1, net_hits),
    )


class TestDigitTable:
    def test_every_digit(self) -> None:
        expected = {
            0: "head",
            1: "torso", 2: "torso", 3: "torso",
            4: "right_arm", 6: "right_arm",
            5: "left_arm", 7: "left_arm",
            8: "right_leg",
            9: "left_leg",
        }
        for digit, location in expected.items():
            assert location_from_digit(30 + digit) == location

    def test_84_is_right_arm(self) -> None:
        assert location_from_digit(84) == "right_arm"

    def test_100_is_head(self) -> None:
        assert location_from_digit(100) == "head"


class TestD10Table:
    def test_table(self) -> None:
        expected = ["Head", "Face", "Neck", "Chest", "Back", "Arm", "Hand", "Leg", "Foot", "Jaw"]
        assert [location_from_d10(n) for n in range(1, 11)] == expected

    def test_out_of_range_falls_back_to_torso(self) -> None:
        assert location_from_d10(0) == "Torso"
        assert location_from_d10(11) == "Torso"

    def test_roll(self) -> None:
        with patch("witch_iron.dice.randrange", return_value=10):
            assert roll_detailed_location() == (10, "Jaw")


class TestValidate:
    def test_coarse_locations_pass(self) -> None:
        assert validate_location("left_leg") == "left_leg"

    def test_detailed_location_rejected(self) -> None:
        with pytest.raises(InvalidLocation):
            validate_location("Chest")

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_location("tail")


class TestRelocate:
    def test_relocate(self) -> None:
        record = relocate(make_record(net_hits=3), "head")
        assert record.location == "head"
        assert record.relocated
        assert record.hits_spent == 2
        assert record.suggested_severity == 1
        assert not record.can_relocate

    def test_only_once(self) -> None:
        record = relocate(make_record(net_hits=5), "head")
        with pytest.raises(InsufficientResource):
            relocate(record, "torso")
        assert record.location == "head"

    def test_needs_two_hits(self) -> None:
        record = make_record(net_hits=1)
        with pytest.raises(InsufficientResource):
            relocate(record, "head")
        assert record.location == "right_arm"
        assert not record.relocated

    def test_only_for_injured_defender(self) -> None:
        record = make_record(net_hits=4, success=False, injured="a")
        with pytest.raises(InsufficientResource):
            relocate(record, "head")

    def test_invalid_location_checked_first(self) -> None:
        record = make_record(net_hits=3)
        with pytest.raises(InvalidLocation):
            relocate(record, "tail")
        assert record.can_relocate
