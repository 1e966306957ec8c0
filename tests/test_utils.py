"""Tests for dotted-path document access."""

from witch_iron.utils import get_path, set_path


class TestGetPath:
    def test_nested(self) -> None:
        assert get_path({"a": {"b": {"c": 3}}}, "a.b.c") == 3

    def test_missing(self) -> None:
        assert get_path({"a": {}}, "a.b.c") is None
        assert get_path({"a": {}}, "a.b", 7) == 7

    def test_through_a_value(self) -> None:
        assert get_path({"a": 1}, "a.b", "x") == "x"

    def test_falsy_values_are_returned(self) -> None:
        assert get_path({"a": 0}, "a", 5) == 0


class TestSetPath:
    def test_creates_parents(self) -> None:
        data: dict = {}
        set_path(data, "system.conditions.bleed.value", 2)
        assert data == {"system": {"conditions": {"bleed": {"value": 2}}}}

    def test_keeps_siblings(self) -> None:
        data = {"system": {"luck": 3, "name": "x"}}
        set_path(data, "system.luck", 1)
        assert data == {"system": {"luck": 1, "name": "x"}}

    def test_replaces_non_dict(self) -> None:
        data = {"a": 5}
        set_path(data, "a.b", 1)
        assert data == {"a": {"b": 1}}
