"""Tests for the filter builder."""

from __future__ import annotations

import pytest

from bardindex.typesense.filters import FilterBuilder, FilterClause, FilterOperator


class TestFilterBuilder:
    def test_equals(self) -> None:
        assert FilterBuilder().equals("play_id", "play-hamlet").build() == "play_id:=`play-hamlet`"

    def test_one_of(self) -> None:
        built = FilterBuilder().one_of("act_id", ["hamlet-1", "hamlet-2"]).build()
        assert built == "act_id:=[`hamlet-1`,`hamlet-2`]"

    def test_one_of_accepts_generators(self) -> None:
        built = FilterBuilder().one_of("id", (f"s{i}" for i in range(3))).build()
        assert built == "id:=[`s0`,`s1`,`s2`]"

    def test_clauses_are_anded(self) -> None:
        built = FilterBuilder().equals("play_id", "play-hamlet").one_of("act_id", ["a1"]).build()
        assert built == "play_id:=`play-hamlet` && act_id:=[`a1`]"

    def test_values_with_separators_stay_quoted(self) -> None:
        built = FilterBuilder().one_of("id", ["a,b", "c] && d:=[e"]).build()
        assert built == "id:=[`a,b`,`c] && d:=[e`]"

    def test_empty_builder(self) -> None:
        assert FilterBuilder().build() == ""
        assert str(FilterBuilder()) == ""

    def test_clauses_snapshot(self) -> None:
        builder = FilterBuilder().equals("play_id", "p")
        assert builder.clauses == [FilterClause(field="play_id", operator=FilterOperator.EQUALS, values=("p",))]
        builder.clauses.clear()
        assert builder.build() == "play_id:=`p`"


class TestFilterValidation:
    def test_empty_set_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one value"):
            FilterBuilder().one_of("scene_id", [])

    def test_backtick_rejected(self) -> None:
        with pytest.raises(ValueError, match="backtick"):
            FilterBuilder().equals("play_id", "evil`")

    def test_backtick_in_set_rejected_when_added(self) -> None:
        builder = FilterBuilder()
        with pytest.raises(ValueError, match="backtick"):
            builder.one_of("scene_id", ["s1", "s`2"])
        assert builder.clauses == []

    @pytest.mark.parametrize("field", ["", "play id", "id:=x", "1id"])
    def test_bad_field_name_rejected(self, field: str) -> None:
        with pytest.raises(ValueError, match="Invalid filter field name"):
            FilterBuilder().equals(field, "x")
