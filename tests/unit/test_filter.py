"""Unit tests for row filtering."""

from __future__ import annotations

import re

import pytest

from flatframe import DataFrame, FilterOp, InvalidColumnName, SubView


@pytest.fixture
def people() -> DataFrame:
    return DataFrame(
        ["name", "age", "active"],
        [("x", 1, True), ("y", 2, True), ("z", 3, False)],
    )


class TestFilterColumn:
    def test_eq(self, people: DataFrame) -> None:
        result = people.filter("name", FilterOp.EQ, "x")
        assert result.size() == 1
        assert [v.to_python() for v in result[0]] == ["x", 1, True]

    @pytest.mark.parametrize(
        ("op", "expected"),
        [
            (FilterOp.NOT_EQ, ["x", "z"]),
            (FilterOp.GT, ["z"]),
            (FilterOp.GT_EQ, ["y", "z"]),
            (FilterOp.LT, ["x"]),
            (FilterOp.LT_EQ, ["x", "y"]),
        ],
    )
    def test_comparisons(self, people: DataFrame, op: FilterOp, expected: list[str]) -> None:
        result = people.filter("age", op, 2)
        assert [v.to_python() for v in result.column_values("name")] == expected

    def test_regexp(self, people: DataFrame) -> None:
        result = people.filter("name", FilterOp.REGEXP, "^[xy]$")
        assert result.size() == 2

    def test_compiled_regexp(self, people: DataFrame) -> None:
        result = people.filter("name", FilterOp.REGEXP, re.compile("Z", re.IGNORECASE))
        assert result.size() == 1

    def test_incomparable_never_matches(self, people: DataFrame) -> None:
        assert people.filter("name", FilterOp.GT, 0).size() == 0
        assert people.filter("age", FilterOp.REGEXP, ".*").size() == 0

    def test_unknown_column(self, people: DataFrame) -> None:
        with pytest.raises(InvalidColumnName):
            people.filter("missing", FilterOp.EQ, 1)

    def test_missing_op(self, people: DataFrame) -> None:
        with pytest.raises(TypeError):
            people.filter("age")

    def test_schema_preserved(self, people: DataFrame) -> None:
        result = people.filter("age", FilterOp.GT, 10)
        assert result.columns() == ["name", "age", "active"]
        assert result.shape() == (3, 0)


class TestFilterRows:
    def test_predicate(self, people: DataFrame) -> None:
        def active(record: SubView) -> bool:
            return record["active"].as_bool() is True

        result = people.filter(active)
        assert [v.to_python() for v in result.column_values("name")] == ["x", "y"]

    def test_source_is_released(self, people: DataFrame) -> None:
        people.filter(lambda record: True)
        people.push_row(("w", 4, False))
        assert people.size() == 4

    def test_predicate_writes_do_not_leak(self, people: DataFrame) -> None:
        def rename(record: SubView) -> bool:
            record["name"] = "changed"
            return True

        result = people.filter(rename)
        assert [v.to_python() for v in result.column_values("name")] == ["x", "y", "z"]
        assert [v.to_python() for v in people.column_values("name")] == ["x", "y", "z"]
