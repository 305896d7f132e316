# reportdsl

`reportdsl` works with a compact filter language for reports. It splits
filter text into tokens, models filters as a syntax tree, and compiles that
tree into PostgreSQL `SELECT` statements with values written inline.

Filter text looks like this:

```
Filter: status["Open" OR "Pending"]; priority[>2]; assignee[!=current_user]
CrossFilter: <Test-Run> dueDate[>today]
```

## Installation

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `reportdsl.token` – `TokenKind`, `Span` (a half-open range of character
  offsets) and `Token`. Identifier, string and number tokens carry their
  text or integer in `Token.value`; a string's value excludes the quotes.
- `reportdsl.lexer` – `Lexer(text)` is iterable and yields `Token` objects;
  `tokenize(text)` returns them as a list. `AND`, `OR`, `NOT`, `IN`, `IS`,
  `NULL`, `today`, `yesterday`, `tomorrow` and `current_user` are matched
  without regard to ASCII case, and `Filter:` / `CrossFilter:` become section
  tokens. An unterminated string runs to the end of the text, a lone `!` or an
  unknown character gives an `ILLEGAL` token, and a number too large for a
  signed 64-bit integer is read as `0`.
- `reportdsl.ast` – the syntax tree: `Query`, `FieldFilter`, `CrossFilter`;
  the condition nodes `And`, `Or`, `Not`, `Grouped`, `Comparison`, `In`,
  `IsNull`, `IsNotNull`; the operators `CompOp`; and the literals
  `StringLiteral`, `NumberLiteral`, `DateLiteral` and `CurrentUser`.
- `reportdsl.config` – `TableMappingConfig.from_json_file(path)` loads a JSON
  object mapping entity names to table names; a missing, unreadable or
  malformed file raises `ConfigError`. `get_table_name(entity)` falls back to
  the lower-cased entity name, and `TableMappingConfig.default()` gives a
  built-in mapping (`Test`, `Run`, `Project`, `Task`, `User`, `Issue`).
- `reportdsl.sqlbuilder` – a small builder for the SQL text: `Column`,
  `column("table.column")`, `Value`, the expressions `BinaryExpr`, `NotExpr`,
  `InExpr` and `NullCheck` (combinable with `&`, `|` and `~`), and
  `SelectStatement` with `inner_join`, `and_where` and `to_sql`. Identifiers
  are double-quoted; an empty `IN` list renders as `1 = 2`.
- `reportdsl.options` – `SqlDialect`, `CompilerConfig`, `OptimizationConfig`
  (defaults: `max_or_conditions_for_in=5`, `max_in_values=1000`),
  `BatchConfig` (defaults: `max_batch_size=500`,
  `enable_batch_processing=True`), `QueryComplexity`, `CompileResult`,
  `BatchQueryResult`, the optimization records `OrToIn`, `InToUnion`,
  `ConditionSimplification`, `RedundantConditionRemoval`, and `CompileError`.
- `reportdsl.compiler` – `SqlCompiler` compiles a `Query` for an entity:
  - base filters are qualified with the entity's table and joined by `AND`;
  - each cross filter becomes `INNER JOIN <table> AS joined_table_N` on
    matching `id` columns, with its fields qualified by that alias;
  - an `OR` chain holding at least `max_or_conditions_for_in` `=` values
    becomes one `IN` list (recorded as `OrToIn`);
  - an `IN` list longer than `max_in_values` is split into several `IN`
    groups joined by `OR` (recorded as `InToUnion`);
  - `today`, `yesterday` and `tomorrow` date literals and `CurrentUser` are
    written as the quoted texts `CURRENT_DATE`, `CURRENT_DATE - INTERVAL '1 day'`,
    `CURRENT_DATE + INTERVAL '1 day'` and `CURRENT_USER`.

  `compile_optimized` runs the (currently rewrite-free) `DefaultQueryOptimizer`
  before compiling. `compile_batch_query` and
  `DefaultBatchProcessor.compile_batch` produce one statement per batch of
  any `IN` list longer than `max_batch_size`; batch statements are compiled
  with a default `SqlCompiler`, so entity names go through the lower-case
  fallback rather than the compiler's table mapping.
  `DefaultBatchProcessor.estimate_query_complexity` scores two per join and
  one per field filter. `DefaultTableMapper` holds the entity-to-table
  mapping. `SqlCompilerFactory` builds compilers from a `CompilerConfig`, and
  `CompilerRegistry` creates compilers by name (`sql` and `default` are
  registered from the start). `QueryCompiler` is the abstract base for
  compilers.

## Example

```python
from reportdsl.ast import Comparison, CompOp, FieldFilter, Query, StringLiteral
from reportdsl.compiler import SqlCompiler
from reportdsl.config import TableMappingConfig
from reportdsl.lexer import tokenize
from reportdsl.options import CompilerConfig

for token in tokenize('Filter: status["Open"]'):
    print(token.kind, token.span, token.value)

mapping = TableMappingConfig.default()
compiler = SqlCompiler.from_config(CompilerConfig(table_mapping=dict(mapping.mappings)))

query = Query(
    base_filters=[
        FieldFilter("status", Comparison(CompOp.EQ, StringLiteral("Open"))),
    ],
)

result = compiler.compile(query, "Issue")
print(result.sql)
# SELECT * FROM "issues" WHERE "issues"."status" = 'Open'
```

## What it does not do

- There is no parser from tokens to a `Query`: the lexer produces tokens,
  and queries are built from the `reportdsl.ast` classes directly.
- There is no command-line program or interactive prompt; the package is
  used as a library.
- Only PostgreSQL text is produced. `SqlDialect` lists other dialects, but
  `SqlCompiler` does not write them.
- Nothing connects to a database or runs the generated SQL.