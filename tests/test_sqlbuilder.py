import pytest

from reportdsl.sqlbuilder import (
    BinaryExpr,
    Column,
    InExpr,
    NotExpr,
    NullCheck,
    SelectStatement,
    Value,
    column,
)


def test_select_all_from_table():
    assert SelectStatement("tests").to_sql() == 'SELECT * FROM "tests"'


def test_column_splits_at_first_dot():
    assert column("tests.status") == Column("status", "tests")
    assert column("a.b.c") == Column("b.c", "a")
    assert column("status").table is None


def test_qualified_column_renders_both_parts():
    sql = column("tests.status").to_sql()
    assert sql.startswith(Column("tests").to_sql())
    assert sql.endswith(Column("status").to_sql())


def test_identifier_quotes_are_doubled():
    assert Column('a"b').to_sql() == '"a""b"'


def test_equality_comparison():
    assert column("t.c").eq("Open").to_sql() == "\"t\".\"c\" = 'Open'"


def test_escaped_string_uses_e_prefix():
    sql = Value("CURRENT_DATE - INTERVAL '1 day'").to_sql()
    assert sql == "E'CURRENT_DATE - INTERVAL \\'1 day\\''"


def test_plain_number_value():
    assert Value(42).to_sql() == "42"


def test_raw_and_wrapped_values_agree():
    col = column("t.c")
    assert col.eq(7) == col.eq(Value(7))
    assert col.gt("x").to_sql() == col.gt(Value("x")).to_sql()


def test_all_comparisons_are_distinct():
    col = column("t.c")
    value = Value(3)
    exprs = [col.eq(value), col.ne(value), col.gt(value), col.lt(value), col.gte(value), col.lte(value)]
    rendered = [e.to_sql() for e in exprs]
    assert len(set(rendered)) == 6
    for text in rendered:
        assert text.startswith(col.to_sql() + " ")
        assert text.endswith(" " + value.to_sql())


def test_in_lists_every_value():
    col = column("t.c")
    values = ["a", "b", 5]
    expr = col.is_in(values)
    assert isinstance(expr, InExpr)
    sql = expr.to_sql()
    assert sql.startswith(col.to_sql())
    for v in values:
        assert Value(v).to_sql() in sql


def test_empty_in_differs_from_non_empty():
    col = column("t.c")
    assert col.is_in([]).to_sql() != col.is_in(["a"]).to_sql()
    assert col.is_in([]).values == ()


def test_null_checks():
    col = column("t.c")
    null = col.is_null()
    not_null = col.is_not_null()
    assert null == NullCheck(col, negated=False)
    assert not_null == NullCheck(col, negated=True)
    assert null.to_sql().startswith(col.to_sql())
    assert null.to_sql() != not_null.to_sql()


def test_mixed_logic_gets_parentheses():
    a = column("t.a").eq(1)
    b = column("t.b").eq(2)
    c = column("t.c").eq(3)
    disjunction = a | b
    sql = (disjunction & c).to_sql()
    assert sql.startswith(f"({disjunction.to_sql()})")


def test_same_logic_chain_has_no_parentheses():
    a = column("t.a").eq(1)
    b = column("t.b").eq(2)
    c = column("t.c").eq(3)
    assert "(" not in (a & b & c).to_sql()
    assert "(" not in (a | b | c).to_sql()


def test_not_wraps_logical_operand():
    a = column("t.a").eq(1)
    b = column("t.b").eq(2)
    negated = ~(a | b)
    assert isinstance(negated, NotExpr)
    assert negated.to_sql().endswith(f"({(a | b).to_sql()})")
    assert (~a).to_sql().endswith(a.to_sql())


def test_operators_build_binary_expressions():
    a = column("t.a").eq(1)
    b = column("t.b").eq(2)
    assert (a & b) == BinaryExpr(a, "AND", b)
    assert (a | b) == BinaryExpr(a, "OR", b)


def test_where_conditions_are_combined_with_and():
    c1 = column("t.a").eq("x")
    c2 = column("t.b").is_null()
    stmt = SelectStatement("t").and_where(c1).and_where(c2)
    assert stmt.to_sql().endswith(" WHERE " + (c1 & c2).to_sql())


def test_inner_join_renders_condition():
    on = Column("id", "tests").equals(Column("id", "joined_table_1"))
    stmt = SelectStatement("tests").inner_join("test_runs AS joined_table_1", on)
    sql = stmt.to_sql()
    assert "INNER JOIN " + Column("test_runs AS joined_table_1").to_sql() in sql
    assert sql.endswith("ON " + on.to_sql())
    assert str(stmt) == sql


@pytest.mark.parametrize("text", ["plain", "with space", "a\\b", "tab\there"])
def test_string_values_keep_content(text):
    sql = Value(text).to_sql()
    assert sql.endswith("'")
    assert text.split("\\")[0].split("\t")[0] in sql