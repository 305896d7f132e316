import copy
import dataclasses

import pytest

from reportdsl.ast import (
    And,
    CompOp,
    Comparison,
    CrossFilter,
    CurrentUser,
    DateLiteral,
    FieldFilter,
    Grouped,
    In,
    IsNotNull,
    IsNull,
    Not,
    NumberLiteral,
    Or,
    Query,
    StringLiteral,
)


def test_comp_op_from_symbol():
    assert CompOp("=") is CompOp.EQ
    assert CompOp("!=") is CompOp.NOT_EQ
    assert CompOp(">=") is CompOp.GTE
    assert CompOp("<=") is CompOp.LTE


def test_unknown_comp_op_symbol_is_rejected():
    with pytest.raises(ValueError):
        CompOp("<>")


def test_nested_conditions_compare_structurally():
    def build(number):
        return Not(
            Grouped(
                Or(
                    Comparison(CompOp.EQ, StringLiteral("Open")),
                    And(IsNotNull(), Comparison(CompOp.GT, NumberLiteral(number))),
                )
            )
        )

    assert build(5) == build(5)
    assert hash(build(5)) == hash(build(5))
    assert (build(5) == build(6)) is False


def test_in_stores_values_as_tuple():
    values = [StringLiteral("a"), NumberLiteral(1)]
    cond = In(values)
    assert cond.values == tuple(values)
    assert cond == In(tuple(values))


def test_in_is_not_affected_by_later_list_changes():
    values = [StringLiteral("a")]
    cond = In(values)
    values.append(StringLiteral("b"))
    assert cond.values == (StringLiteral("a"),)


def test_null_checks_differ():
    assert IsNull() == IsNull()
    assert (IsNull() == IsNotNull()) is False


def test_literal_kinds_are_distinct():
    assert DateLiteral("today") == DateLiteral("today")
    assert (DateLiteral("today") == StringLiteral("today")) is False
    assert CurrentUser() == CurrentUser()


def test_conditions_are_immutable():
    cond = Comparison(CompOp.LT, NumberLiteral(3))
    with pytest.raises(dataclasses.FrozenInstanceError):
        cond.op = CompOp.GT  # type: ignore[misc]
    assert cond.op is CompOp.LT
    assert cond == Comparison(CompOp.LT, NumberLiteral(3))


def test_query_defaults_are_independent_lists():
    first = Query()
    second = Query()
    first.base_filters.append(FieldFilter("status", IsNull()))
    assert second.base_filters == []
    assert first.cross_filters == []


def test_query_copy_is_deep_and_equal():
    query = Query(
        base_filters=[FieldFilter("status", Comparison(CompOp.EQ, StringLiteral("Open")))],
        cross_filters=[
            CrossFilter("Test", "Run", [FieldFilter("run-id", Comparison(CompOp.EQ, NumberLiteral(1)))])
        ],
    )
    clone = copy.deepcopy(query)
    assert clone == query
    clone.cross_filters[0].filters.clear()
    assert len(query.cross_filters[0].filters) == 1