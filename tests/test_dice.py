"""Tests for the dice rolling primitives."""

from unittest.mock import patch

from witch_iron.dice import d6, d10, d100, ones, reverse_digits, tens


class TestD100:
    def test_range(self) -> None:
        """Results must be 1-100, and every face should show up."""
        results = set()
        for _ in range(20000):
            result = d100()
            assert 1 <= result <= 100
            results.add(result)
        assert results == set(range(1, 101))

    def test_uses_randrange(self) -> None:
        with patch("witch_iron.dice.randrange", return_value=37) as mock:
            assert d100() == 37
        mock.assert_called_once_with(1, 101)


class TestSmallDice:
    def test_d10_range(self) -> None:
        results = {d10() for _ in range(2000)}
        assert results == set(range(1, 11))

    def test_d10_never_explodes(self) -> None:
        """A 10 is just 10."""
        with patch("witch_iron.dice.randrange", side_effect=[10, 6]):
            assert d10() == 10

    def test_d6_range(self) -> None:
        results = {d6() for _ in range(2000)}
        assert results == set(range(1, 7))


class TestDigits:
    def test_tens_and_ones(self) -> None:
        assert tens(84) == 8
        assert ones(84) == 4
        assert tens(100) == 10
        assert ones(100) == 0
        assert tens(7) == 0


class TestReverseDigits:
    def test_swaps_digits(self) -> None:
        assert reverse_digits(37) == 73
        assert reverse_digits(73) == 37

    def test_trailing_zero(self) -> None:
        """40 reads back as 04."""
        assert reverse_digits(40) == 4
        assert reverse_digits(10) == 1

    def test_single_digit(self) -> None:
        """01 reads back as 10."""
        assert reverse_digits(1) == 10
        assert reverse_digits(5) == 50

    def test_doubles_unchanged(self) -> None:
        assert reverse_digits(11) == 11
        assert reverse_digits(99) == 99

    def test_100_is_its_own_reverse(self) -> None:
        assert reverse_digits(100) == 100
