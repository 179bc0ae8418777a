"""Tests for merge and diff algorithms."""

import pytest

from cascade.exceptions import ConfigurationError
from cascade.merge import (
    deep_merge,
    diff_paths,
    flatten,
    get_path,
    has_path,
    merge_all,
    set_path,
    split_path,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_flat_dicts(self) -> None:
        """Flat dictionaries are merged with override winning."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"db": {"host": "localhost", "port": 5432}}
        override = {"db": {"host": "db.internal"}}
        assert deep_merge(base, override) == {"db": {"host": "db.internal", "port": 5432}}

    def test_lists_are_replaced(self) -> None:
        """Lists are replaced wholesale, never concatenated."""
        assert deep_merge({"hosts": ["a", "b"]}, {"hosts": ["c"]}) == {"hosts": ["c"]}

    def test_scalar_replaces_dict(self) -> None:
        """A scalar override replaces a nested section."""
        assert deep_merge({"a": {"x": 1}}, {"a": "flat"}) == {"a": "flat"}

    def test_inputs_not_mutated(self) -> None:
        """Neither input is modified and the result shares no containers."""
        base = {"a": {"x": 1}}
        override = {"a": {"y": 2}, "list": [1]}
        result = deep_merge(base, override)
        result["a"]["x"] = 99
        result["list"].append(2)
        assert base == {"a": {"x": 1}}
        assert override == {"a": {"y": 2}, "list": [1]}


class TestMergeAll:
    """Tests for merge_all function."""

    def test_last_writer_wins(self) -> None:
        """Layers are applied strictly in order."""
        layers = [{"a": 1, "b": 1}, {"b": 2}, {"b": 3, "c": 3}]
        assert merge_all(layers) == {"a": 1, "b": 3, "c": 3}

    def test_empty_layers(self) -> None:
        """No layers merge to an empty mapping."""
        assert merge_all([]) == {}


class TestPaths:
    """Tests for dot-path helpers."""

    def test_split_path(self) -> None:
        """Dot-notation is split into segments."""
        assert split_path("db.primary.host") == ["db", "primary", "host"]

    def test_get_nested_value(self) -> None:
        """Nested values resolve through dicts."""
        assert get_path({"db": {"host": "x"}}, "db.host") == "x"

    def test_get_missing_returns_default(self) -> None:
        """Missing and malformed paths return the default."""
        data = {"db": {"host": "x"}}
        assert get_path(data, "db.port", 5432) == 5432
        assert get_path(data, "db.host.deeper", "d") == "d"
        assert get_path(data, "", "d") == "d"
        assert get_path(data, "db..host", "d") == "d"

    def test_get_returns_falsy_values(self) -> None:
        """Present falsy values are returned, not the default."""
        assert get_path({"flag": False}, "flag", True) is False
        assert get_path({"count": 0}, "count", 5) == 0

    def test_has_path(self) -> None:
        """has_path reports presence including None values."""
        data = {"a": {"b": None}}
        assert has_path(data, "a.b")
        assert not has_path(data, "a.c")

    def test_set_path_returns_new_dict(self) -> None:
        """set_path writes into a copy and creates intermediate sections."""
        data = {"a": {"b": 1}}
        result = set_path(data, "a.c.d", 2)
        assert result == {"a": {"b": 1, "c": {"d": 2}}}
        assert data == {"a": {"b": 1}}

    def test_set_path_replaces_scalar_parent(self) -> None:
        """A scalar in the way is replaced by a section."""
        assert set_path({"a": 1}, "a.b", 2) == {"a": {"b": 2}}

    @pytest.mark.parametrize("path", ["", "a..b", ".a", "a."])
    def test_set_path_rejects_malformed(self, path: str) -> None:
        """Empty or malformed paths raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            set_path({}, path, 1)


class TestFlatten:
    """Tests for flatten function."""

    def test_flatten_nested(self) -> None:
        """Nested mappings become dot-path keys."""
        assert flatten({"a": {"b": 1, "c": {"d": [1, 2]}}, "e": 2}) == {
            "a.b": 1,
            "a.c.d": [1, 2],
            "e": 2,
        }


class TestDiffPaths:
    """Tests for diff_paths function."""

    def test_changed_leaf(self) -> None:
        """Only the changed leaf is reported."""
        assert diff_paths({"a": 1, "b": 2}, {"a": 1, "b": 3}) == ["b"]

    def test_identical(self) -> None:
        """Identical mappings have no differences."""
        assert diff_paths({"a": {"b": [1]}}, {"a": {"b": [1]}}) == []

    def test_added_and_removed(self) -> None:
        """Added and removed keys are reported at their deepest path."""
        old = {"db": {"host": "x", "port": 1}}
        new = {"db": {"host": "x", "user": "u"}, "debug": True}
        assert diff_paths(old, new) == ["db.port", "db.user", "debug"]

    def test_list_compared_as_whole(self) -> None:
        """A changed list is one differing path."""
        assert diff_paths({"hosts": ["a"]}, {"hosts": ["a", "b"]}) == ["hosts"]

    def test_type_change(self) -> None:
        """A section replaced by a scalar is reported at the section path."""
        assert diff_paths({"a": {"b": 1}}, {"a": 1}) == ["a"]
