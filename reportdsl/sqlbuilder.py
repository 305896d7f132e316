"""A small builder for PostgreSQL ``SELECT`` statements with inlined values."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field as dataclass_field
from functools import reduce
from typing import Union

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\0": "\\0",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_LOGICAL = frozenset({"AND", "OR"})


def _quote_identifier(name: str) -> str:
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def _quote_string(text: str) -> str:
    escaped = "".join(_STRING_ESCAPES.get(char, char) for char in text)
    if "\\" in escaped:
        return f"E'{escaped}'"
    return f"'{escaped}'"


class _Expr(ABC):
    """A boolean SQL expression that can be combined with ``&``, ``|`` and ``~``."""

    @abstractmethod
    def to_sql(self) -> str:
        """Render the expression as PostgreSQL text."""

    def __and__(self, other: "Expression") -> "BinaryExpr":
        return BinaryExpr(self, "AND", other)

    def __or__(self, other: "Expression") -> "BinaryExpr":
        return BinaryExpr(self, "OR", other)

    def __invert__(self) -> "NotExpr":
        return NotExpr(self)

    def __str__(self) -> str:
        return self.to_sql()


@dataclass(frozen=True)
class Value:
    """A literal value written inline into the SQL text."""

    value: Union[str, int, bool, None]

    def to_sql(self) -> str:
        if self.value is None:
            return "NULL"
        if isinstance(self.value, bool):
            return "TRUE" if self.value else "FALSE"
        if isinstance(self.value, int):
            return str(self.value)
        return _quote_string(self.value)

    def __str__(self) -> str:
        return self.to_sql()


def _as_value(value: object) -> Value:
    return value if isinstance(value, Value) else Value(value)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Column:
    """A column reference, optionally qualified by a table name."""

    name: str
    table: Union[str, None] = None

    def to_sql(self) -> str:
        if self.table is None:
            return _quote_identifier(self.name)
        return f"{_quote_identifier(self.table)}.{_quote_identifier(self.name)}"

    def __str__(self) -> str:
        return self.to_sql()

    def eq(self, value: object) -> "BinaryExpr":
        return BinaryExpr(self, "=", _as_value(value))

    def ne(self, value: object) -> "BinaryExpr":
        return BinaryExpr(self, "<>", _as_value(value))

    def gt(self, value: object) -> "BinaryExpr":
        return BinaryExpr(self, ">", _as_value(value))

    def lt(self, value: object) -> "BinaryExpr":
        return BinaryExpr(self, "<", _as_value(value))

    def gte(self, value: object) -> "BinaryExpr":
        return BinaryExpr(self, ">=", _as_value(value))

    def lte(self, value: object) -> "BinaryExpr":
        return BinaryExpr(self, "<=", _as_value(value))

    def equals(self, other: "Column") -> "BinaryExpr":
        """Compare this column with another column."""
        return BinaryExpr(self, "=", other)

    def is_in(self, values: Iterable[object]) -> "InExpr":
        return InExpr(self, tuple(_as_value(v) for v in values))

    def is_null(self) -> "NullCheck":
        return NullCheck(self, negated=False)

    def is_not_null(self) -> "NullCheck":
        return NullCheck(self, negated=True)


def column(field: str) -> Column:
    """Build a column from ``"column"`` or ``"table.column"`` (split at the first dot)."""
    table, dot, name = field.partition(".")
    if dot:
        return Column(name, table)
    return Column(field)


Operand = Union[Column, Value, _Expr]


@dataclass(frozen=True)
class BinaryExpr(_Expr):
    """A comparison or a logical ``AND`` / ``OR`` of two operands."""

    left: Operand
    op: str
    right: Operand

    def _render_child(self, child: Operand) -> str:
        text = child.to_sql()
        if (
            self.op in _LOGICAL
            and isinstance(child, BinaryExpr)
            and child.op in _LOGICAL
            and child.op != self.op
        ):
            return f"({text})"
        return text

    def to_sql(self) -> str:
        return f"{self._render_child(self.left)} {self.op} {self._render_child(self.right)}"


@dataclass(frozen=True)
class NotExpr(_Expr):
    """Logical negation."""

    inner: "Expression"

    def to_sql(self) -> str:
        text = self.inner.to_sql()
        if isinstance(self.inner, BinaryExpr) and self.inner.op in _LOGICAL:
            return f"NOT ({text})"
        return f"NOT {text}"


@dataclass(frozen=True)
class InExpr(_Expr):
    """Membership of a column in a list of values."""

    column: Column
    values: tuple[Value, ...] = dataclass_field(default_factory=tuple)

    def to_sql(self) -> str:
        if not self.values:
            # An empty list matches nothing.
            return "1 = 2"
        listed = ", ".join(v.to_sql() for v in self.values)
        return f"{self.column.to_sql()} IN ({listed})"


@dataclass(frozen=True)
class NullCheck(_Expr):
    """``IS NULL`` or, when negated, ``IS NOT NULL``."""

    column: Column
    negated: bool = False

    def to_sql(self) -> str:
        check = "IS NOT NULL" if self.negated else "IS NULL"
        return f"{self.column.to_sql()} {check}"


Expression = Union[BinaryExpr, NotExpr, InExpr, NullCheck, Value]


class SelectStatement:
    """``SELECT * FROM table`` with inner joins and ``AND``-combined conditions."""

    def __init__(self, table: str) -> None:
        self.table = table
        self.joins: list[tuple[str, Expression]] = []
        self.conditions: list[Expression] = []

    def inner_join(self, table: str, on: Expression) -> "SelectStatement":
        self.joins.append((table, on))
        return self

    def and_where(self, condition: Expression) -> "SelectStatement":
        self.conditions.append(condition)
        return self

    def to_sql(self) -> str:
        parts = [f"SELECT * FROM {_quote_identifier(self.table)}"]
        parts.extend(
            f"INNER JOIN {_quote_identifier(table)} ON {on.to_sql()}" for table, on in self.joins
        )
        if self.conditions:
            combined = reduce(lambda acc, cond: BinaryExpr(acc, "AND", cond), self.conditions)
            parts.append(f"WHERE {combined.to_sql()}")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_sql()