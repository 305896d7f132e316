"""Syntax tree of a filter query."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class CompOp(Enum):
    """Comparison operators."""

    EQ = "="
    NOT_EQ = "!="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class NumberLiteral:
    value: int


@dataclass(frozen=True)
class DateLiteral:
    """A date such as ``"2023-12-25"`` or a keyword such as ``"today"``."""

    value: str


@dataclass(frozen=True)
class CurrentUser:
    """The user running the query."""


LiteralValue = Union[StringLiteral, NumberLiteral, DateLiteral, CurrentUser]


@dataclass(frozen=True)
class And:
    left: "Condition"
    right: "Condition"


@dataclass(frozen=True)
class Or:
    left: "Condition"
    right: "Condition"


@dataclass(frozen=True)
class Not:
    inner: "Condition"


@dataclass(frozen=True)
class Grouped:
    """A parenthesised condition."""

    inner: "Condition"


@dataclass(frozen=True)
class Comparison:
    op: CompOp
    value: LiteralValue


@dataclass(frozen=True)
class In:
    """Membership in a list of values."""

    values: tuple[LiteralValue, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class IsNull:
    pass


@dataclass(frozen=True)
class IsNotNull:
    pass


Condition = Union[And, Or, Not, Grouped, Comparison, In, IsNull, IsNotNull]


@dataclass(frozen=True)
class FieldFilter:
    """One or more conditions on a single field, e.g. ``status[NOT "Open"]``."""

    field: str
    condition: Condition


@dataclass
class CrossFilter:
    """Filters applied to a related entity, e.g. ``CrossFilter: <Test-Run>...``."""

    source_entity: str
    target_entity: str
    filters: list[FieldFilter] = field(default_factory=list)


@dataclass
class Query:
    """A complete query: filters on the main entity and on related entities."""

    base_filters: list[FieldFilter] = field(default_factory=list)
    cross_filters: list[CrossFilter] = field(default_factory=list)