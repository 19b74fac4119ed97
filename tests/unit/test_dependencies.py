"""Unit tests for join dependency resolution."""

import pytest

from configurable_list.common.exceptions import ErrorCode, ListError
from configurable_list.definitions import Join
from configurable_list.dependencies import JoinDependencies


def build_joins(graph):
    return {name: Join(name, f"JOIN {name} ON 1 = 1", require_join=deps) for name, deps in graph.items()}


GRAPH = {
    "top": [],
    "one": ["top"],
    "two": ["one"],
    "a": ["top", "one"],
    "b": ["top", "two"],
    "bottom": ["a", "b"],
}


class TestJoinDependencies:
    """Test topological ordering of joins."""

    def test_sort_join_dependencies(self):
        sorted_names = [join.name for join in JoinDependencies(build_joins(GRAPH), ["bottom"]).tsort()]

        assert sorted_names[0] == "top"
        assert sorted_names[-1] == "bottom"
        assert sorted_names.index("one") < sorted_names.index("two")
        assert sorted_names.index("two") < sorted_names.index("b")
        assert sorted_names.index("one") < sorted_names.index("a")

    def test_every_dependency_precedes_its_dependant(self):
        all_joins = build_joins(GRAPH)
        sorted_names = [join.name for join in JoinDependencies(all_joins, ["b", "a", "bottom"]).tsort()]

        assert sorted(sorted_names) == sorted(GRAPH)
        for name, deps in GRAPH.items():
            for dep in deps:
                assert sorted_names.index(dep) < sorted_names.index(name)

    def test_only_required_closure_is_included(self):
        sorted_names = [join.name for join in JoinDependencies(build_joins(GRAPH), ["two"]).tsort()]
        assert sorted_names == ["top", "one", "two"]

    def test_order_is_deterministic(self):
        all_joins = build_joins({"x": [], "y": [], "z": ["y", "x"]})
        assert [j.name for j in JoinDependencies(all_joins, ["x", "y"]).tsort()] == ["x", "y"]
        assert [j.name for j in JoinDependencies(all_joins, ["y", "x"]).tsort()] == ["y", "x"]
        assert [j.name for j in JoinDependencies(all_joins, ["z"]).tsort()] == ["y", "x", "z"]

    def test_duplicate_seeds_are_resolved_once(self):
        sorted_names = [join.name for join in JoinDependencies(build_joins(GRAPH), ["one", "one", "top"]).tsort()]
        assert sorted_names == ["top", "one"]

    def test_empty_seed(self):
        assert JoinDependencies(build_joins(GRAPH), []).tsort() == []

    def test_cycle_raises(self):
        all_joins = build_joins({"a": ["b"], "b": ["c"], "c": ["a"]})
        with pytest.raises(ListError) as exc_info:
            JoinDependencies(all_joins, ["a"]).tsort()
        assert exc_info.value.error_code == ErrorCode.DEPENDENCY_CYCLE
        assert exc_info.value.details["cycle"] == ["a", "b", "c", "a"]
        assert "a -> b -> c -> a" in str(exc_info.value)

    def test_self_dependency_is_a_cycle(self):
        with pytest.raises(ListError) as exc_info:
            JoinDependencies(build_joins({"a": ["a"]}), ["a"]).tsort()
        assert exc_info.value.details["cycle"] == ["a", "a"]

    def test_unknown_join_raises(self):
        all_joins = build_joins({"a": ["missing"]})
        with pytest.raises(ListError) as exc_info:
            JoinDependencies(all_joins, ["a"]).tsort()
        assert exc_info.value.error_code == ErrorCode.UNKNOWN_JOIN
        assert exc_info.value.details == {"join": "missing", "required_by": "a"}
