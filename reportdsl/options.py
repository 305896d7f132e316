"""Configuration, results and errors of the SQL compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class SqlDialect(Enum):
    """SQL dialects a compiler may target."""

    POSTGRESQL = "PostgreSQL"
    MYSQL = "MySQL"
    SQLITE = "SQLite"
    MSSQL = "MsSQL"
    ORACLE = "Oracle"

    def __str__(self) -> str:
        return self.value


@dataclass
class QueryComplexity:
    """A rough estimate of how expensive a query is."""

    estimated_rows: Optional[int]
    join_count: int
    condition_count: int
    complexity_score: float


@dataclass
class OptimizationConfig:
    """Thresholds for rewriting conditions."""

    max_or_conditions_for_in: int = 5
    max_in_values: int = 1000


@dataclass
class BatchConfig:
    """Settings for splitting large ``IN`` lists into several queries."""

    max_batch_size: int = 500
    enable_batch_processing: bool = True


@dataclass
class CompilerConfig:
    """Everything needed to build a compiler."""

    optimization_config: OptimizationConfig = field(default_factory=OptimizationConfig)
    batch_config: BatchConfig = field(default_factory=BatchConfig)
    table_mapping: dict[str, str] = field(default_factory=dict)
    dialect: SqlDialect = SqlDialect.POSTGRESQL


class CompileError(Exception):
    """Raised when a query cannot be compiled."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class OrToIn:
    """A chain of equality ``OR`` conditions was turned into ``IN``."""

    field: str
    value_count: int


@dataclass(frozen=True)
class InToUnion:
    """A large ``IN`` list was split into several smaller ones."""

    field: str
    total_values: int
    union_count: int


@dataclass(frozen=True)
class ConditionSimplification:
    original: str
    simplified: str


@dataclass(frozen=True)
class RedundantConditionRemoval:
    removed_condition: str


Optimization = Union[OrToIn, InToUnion, ConditionSimplification, RedundantConditionRemoval]


@dataclass
class CompileResult:
    """The SQL of a compiled query and the optimizations applied to it."""

    sql: str
    optimizations: list[Optimization] = field(default_factory=list)


@dataclass
class BatchQueryResult:
    """Several SQL queries that together answer one filter."""

    queries: list[str] = field(default_factory=list)
    optimizations: list[Optimization] = field(default_factory=list)
    total_estimated_rows: Optional[int] = None