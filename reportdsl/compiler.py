"""Compiling filter queries into PostgreSQL ``SELECT`` statements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import replace
from functools import reduce
from typing import Optional

from reportdsl.ast import (
    And,
    Comparison,
    CompOp,
    Condition,
    CrossFilter,
    CurrentUser,
    DateLiteral,
    FieldFilter,
    Grouped,
    In,
    IsNotNull,
    IsNull,
    LiteralValue,
    Not,
    NumberLiteral,
    Or,
    Query,
    StringLiteral,
)
from reportdsl.config import TableMappingConfig
from reportdsl.options import (
    BatchConfig,
    BatchQueryResult,
    CompileError,
    CompileResult,
    CompilerConfig,
    InToUnion,
    Optimization,
    OptimizationConfig,
    OrToIn,
    QueryComplexity,
    SqlDialect,
)
from reportdsl.sqlbuilder import Column, Expression, SelectStatement, Value, column

_DATE_KEYWORDS = {
    "today": "CURRENT_DATE",
    "yesterday": "CURRENT_DATE - INTERVAL '1 day'",
    "tomorrow": "CURRENT_DATE + INTERVAL '1 day'",
}

_COMPARISONS = {
    CompOp.EQ: Column.eq,
    CompOp.NOT_EQ: Column.ne,
    CompOp.GT: Column.gt,
    CompOp.LT: Column.lt,
    CompOp.GTE: Column.gte,
    CompOp.LTE: Column.lte,
}


class QueryCompiler(ABC):
    """Something that turns a query tree into SQL."""

    @abstractmethod
    def compile(self, query: Query, entity: str) -> CompileResult:
        """Compile ``query`` against the table of ``entity``."""

    @abstractmethod
    def name(self) -> str:
        """A name for logs and debugging."""

    @abstractmethod
    def supported_dialect(self) -> SqlDialect:
        """The SQL dialect the output is written in."""


class DefaultQueryOptimizer:
    """Holds the optimization thresholds; rewrites happen while compiling."""

    def __init__(self, config: Optional[OptimizationConfig] = None) -> None:
        self.config = config if config is not None else OptimizationConfig()

    def optimize(self, query: Query) -> list[Optimization]:
        """Pre-compilation rewrites of ``query``; none are applied at present."""
        return []


class DefaultBatchProcessor:
    """Splits queries with very large ``IN`` lists into several queries."""

    def __init__(self, config: Optional[BatchConfig] = None) -> None:
        self.config = config if config is not None else BatchConfig()

    def compile_batch(self, query: Query, entity: str, config: BatchConfig) -> BatchQueryResult:
        """Compile ``query`` into one query per batch of a large ``IN`` list."""
        if not config.enable_batch_processing:
            return self._single(query, entity)

        large = self._find_large_in_conditions(query, config.max_batch_size)
        if not large:
            return self._single(query, entity)

        queries: list[str] = []
        optimizations: list[Optimization] = []
        for field_name, values in large:
            for start in range(0, len(values), config.max_batch_size):
                batch = values[start : start + config.max_batch_size]
                batch_query = _replace_in_values(query, field_name, values, batch)
                result = SqlCompiler().compile(batch_query, entity)
                queries.append(result.sql)
                optimizations.extend(result.optimizations)

        optimizations.append(
            InToUnion(
                field="batch_processing",
                total_values=len(queries),
                union_count=len(queries),
            )
        )
        return BatchQueryResult(
            queries=queries,
            optimizations=optimizations,
            total_estimated_rows=len(queries) * config.max_batch_size,
        )

    def estimate_query_complexity(self, query: Query) -> QueryComplexity:
        """A simple score: two per join plus one per field condition."""
        join_count = len(query.cross_filters)
        condition_count = len(query.base_filters) + sum(
            len(cross.filters) for cross in query.cross_filters
        )
        return QueryComplexity(
            estimated_rows=None,
            join_count=join_count,
            condition_count=condition_count,
            complexity_score=join_count * 2.0 + condition_count * 1.0,
        )

    @staticmethod
    def _single(query: Query, entity: str) -> BatchQueryResult:
        result = SqlCompiler().compile(query, entity)
        return BatchQueryResult(
            queries=[result.sql],
            optimizations=list(result.optimizations),
            total_estimated_rows=None,
        )

    def _find_large_in_conditions(
        self, query: Query, max_batch_size: int
    ) -> list[tuple[str, tuple[LiteralValue, ...]]]:
        filters = list(query.base_filters)
        for cross in query.cross_filters:
            filters.extend(cross.filters)
        found = []
        for field_filter in filters:
            values = _find_large_in(field_filter.condition, max_batch_size)
            if values is not None:
                found.append((field_filter.field, values))
        return found


def _find_large_in(condition: Condition, limit: int) -> Optional[tuple[LiteralValue, ...]]:
    match condition:
        case In(values=values) if len(values) > limit:
            return values
        case And(left=left, right=right) | Or(left=left, right=right):
            found = _find_large_in(left, limit)
            return found if found is not None else _find_large_in(right, limit)
        case Not(inner=inner) | Grouped(inner=inner):
            return _find_large_in(inner, limit)
    return None


def _replace_in_condition(
    condition: Condition,
    target: tuple[LiteralValue, ...],
    batch: Sequence[LiteralValue],
) -> Condition:
    match condition:
        case In(values=values) if values == target:
            return In(tuple(batch))
        case And(left=left, right=right):
            return And(
                _replace_in_condition(left, target, batch),
                _replace_in_condition(right, target, batch),
            )
        case Or(left=left, right=right):
            return Or(
                _replace_in_condition(left, target, batch),
                _replace_in_condition(right, target, batch),
            )
        case Not(inner=inner):
            return Not(_replace_in_condition(inner, target, batch))
        case Grouped(inner=inner):
            return Grouped(_replace_in_condition(inner, target, batch))
    return condition


def _replace_in_values(
    query: Query,
    field_name: str,
    target: tuple[LiteralValue, ...],
    batch: Sequence[LiteralValue],
) -> Query:
    """A copy of ``query`` with the ``IN`` list ``target`` on ``field_name`` replaced."""

    def rewrite(filters: list[FieldFilter]) -> list[FieldFilter]:
        return [
            replace(f, condition=_replace_in_condition(f.condition, target, batch))
            if f.field == field_name
            else f
            for f in filters
        ]

    return Query(
        base_filters=rewrite(query.base_filters),
        cross_filters=[
            CrossFilter(cross.source_entity, cross.target_entity, rewrite(cross.filters))
            for cross in query.cross_filters
        ],
    )


class DefaultTableMapper:
    """Maps entity names to table names, falling back to the lower-cased entity."""

    def __init__(self, mappings: Optional[dict[str, str]] = None) -> None:
        self.mappings: dict[str, str] = dict(mappings) if mappings else {}

    def get_table_name(self, entity: str) -> str:
        return self.mappings.get(entity, entity.lower())

    def set_table_mapping(self, mapping: dict[str, str]) -> None:
        self.mappings = dict(mapping)

    def load_mapping_from_config(self, config: TableMappingConfig) -> None:
        self.mappings = dict(config.mappings)


class SqlCompiler(QueryCompiler):
    """Compiles query trees into PostgreSQL with ``OR``/``IN`` rewrites."""

    def __init__(self) -> None:
        self.optimizer = DefaultQueryOptimizer()
        self.batch_processor = DefaultBatchProcessor()
        self.table_mapper = DefaultTableMapper()

    @classmethod
    def from_config(cls, config: CompilerConfig) -> "SqlCompiler":
        compiler = cls()
        compiler.optimizer = DefaultQueryOptimizer(config.optimization_config)
        compiler.batch_processor = DefaultBatchProcessor(config.batch_config)
        compiler.table_mapper = DefaultTableMapper(config.table_mapping)
        return compiler

    def name(self) -> str:
        return "SeaQuerySqlCompiler"

    def supported_dialect(self) -> SqlDialect:
        return SqlDialect.POSTGRESQL

    def compile(self, query: Query, entity: str) -> CompileResult:
        optimizations: list[Optimization] = []
        table = self.table_mapper.get_table_name(entity)
        select = SelectStatement(table)

        if query.base_filters:
            condition, opts = self._compile_filters(query.base_filters, table)
            optimizations.extend(opts)
            select.and_where(condition)

        for join_index, cross in enumerate(query.cross_filters, start=1):
            alias = f"joined_table_{join_index}"
            condition, opts = self._compile_filters(cross.filters, alias)
            optimizations.extend(opts)
            join_table = self.table_mapper.get_table_name(cross.target_entity)
            select.inner_join(
                f"{join_table} AS {alias}",
                Column("id", table).equals(Column("id", alias)),
            )
            select.and_where(condition)

        return CompileResult(sql=select.to_sql(), optimizations=optimizations)

    def compile_optimized(self, query: Query, entity: str) -> CompileResult:
        """Run the optimizer on ``query`` and then compile it."""
        pre_optimizations = self.optimizer.optimize(query)
        result = self.compile(query, entity)
        result.optimizations.extend(pre_optimizations)
        return result

    def compile_batch_query(self, query: Query, entity: str) -> BatchQueryResult:
        """Compile with the batch processor's own settings."""
        return self.batch_processor.compile_batch(query, entity, self.batch_processor.config)

    def _compile_filters(
        self, filters: Sequence[FieldFilter], prefix: str
    ) -> tuple[Expression, list[Optimization]]:
        optimizations: list[Optimization] = []
        conditions: list[Expression] = []
        for field_filter in filters:
            expr, opts = self._compile_condition(f"{prefix}.{field_filter.field}", field_filter.condition)
            optimizations.extend(opts)
            conditions.append(expr)
        if not conditions:
            return Value(True), optimizations
        return reduce(lambda acc, expr: acc & expr, conditions), optimizations

    def _compile_condition(
        self, field_name: str, condition: Condition
    ) -> tuple[Expression, list[Optimization]]:
        config = self.optimizer.config
        optimizations: list[Optimization] = []

        match condition:
            case Comparison(op=op, value=value):
                expr = _COMPARISONS[op](column(field_name), self._literal_to_value(value))
            case And(left=left, right=right):
                left_expr, left_opts = self._compile_condition(field_name, left)
                right_expr, right_opts = self._compile_condition(field_name, right)
                optimizations.extend(left_opts)
                optimizations.extend(right_opts)
                expr = left_expr & right_expr
            case Or(left=left, right=right):
                rewritten = self._try_or_to_in(field_name, condition, config)
                if rewritten is not None:
                    expr, opt = rewritten
                    optimizations.append(opt)
                else:
                    left_expr, left_opts = self._compile_condition(field_name, left)
                    right_expr, right_opts = self._compile_condition(field_name, right)
                    optimizations.extend(left_opts)
                    optimizations.extend(right_opts)
                    expr = left_expr | right_expr
            case Not(inner=inner):
                inner_expr, inner_opts = self._compile_condition(field_name, inner)
                optimizations.extend(inner_opts)
                expr = ~inner_expr
            case Grouped(inner=inner):
                expr, _ = self._compile_condition(field_name, inner)
            case In(values=values):
                sql_values = [self._literal_to_value(v) for v in values]
                if len(sql_values) > config.max_in_values:
                    expr, opt = self._split_large_in(field_name, sql_values, config)
                    optimizations.append(opt)
                else:
                    expr = column(field_name).is_in(sql_values)
            case IsNull():
                expr = column(field_name).is_null()
            case IsNotNull():
                expr = column(field_name).is_not_null()
            case _:
                raise CompileError(f"unsupported condition: {condition!r}")

        return expr, optimizations

    @staticmethod
    def _split_large_in(
        field_name: str, values: list[Value], config: OptimizationConfig
    ) -> tuple[Expression, Optimization]:
        size = config.max_in_values
        chunks = [values[i : i + size] for i in range(0, len(values), size)]
        expr = reduce(
            lambda acc, e: acc | e,
            (column(field_name).is_in(chunk) for chunk in chunks),
        )
        return expr, InToUnion(field=field_name, total_values=len(values), union_count=len(chunks))

    def _try_or_to_in(
        self, field_name: str, condition: Condition, config: OptimizationConfig
    ) -> Optional[tuple[Expression, Optimization]]:
        equalities = list(_equality_values(condition))
        if len(equalities) < config.max_or_conditions_for_in:
            return None
        expr = column(field_name).is_in(self._literal_to_value(v) for v in equalities)
        return expr, OrToIn(field=field_name, value_count=len(equalities))

    @staticmethod
    def _literal_to_value(literal: LiteralValue) -> Value:
        match literal:
            case StringLiteral(value=text):
                return Value(text)
            case NumberLiteral(value=number):
                return Value(number)
            case DateLiteral(value=date):
                return Value(_DATE_KEYWORDS.get(date, date))
            case CurrentUser():
                return Value("CURRENT_USER")
        raise CompileError(f"unsupported literal: {literal!r}")


def _equality_values(condition: Condition):
    """Yield the values of ``=`` comparisons reachable through ``OR`` and groups."""
    match condition:
        case Comparison(op=CompOp.EQ, value=value):
            yield value
        case Or(left=left, right=right):
            yield from _equality_values(left)
            yield from _equality_values(right)
        case Grouped(inner=inner):
            yield from _equality_values(inner)


class SqlCompilerFactory:
    """Builds ``SqlCompiler`` instances."""

    @staticmethod
    def create_default() -> SqlCompiler:
        return SqlCompiler()

    @staticmethod
    def create_with_config(config: CompilerConfig) -> SqlCompiler:
        return SqlCompiler.from_config(config)


class CompilerRegistry:
    """Named factories of compilers; ``sql`` and ``default`` are built in."""

    def __init__(self) -> None:
        self._factories: dict[str, Callable[[], QueryCompiler]] = {}
        self.register("sql", SqlCompiler)
        self.register("default", SqlCompiler)

    def register(self, name: str, factory: Callable[[], QueryCompiler]) -> None:
        self._factories[name] = factory

    def create(self, name: str) -> Optional[QueryCompiler]:
        """A new compiler from the factory named ``name``, or ``None``."""
        factory = self._factories.get(name)
        return factory() if factory is not None else None

    def available_compilers(self) -> list[str]:
        return list(self._factories)