"""Executes parsed shell statements through the query builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from collabdb.client import Client
from collabdb.parsing.column_parser import ColumnItem
from collabdb.parsing.query_lexer import escape_if_keyword
from collabdb.parsing.query_parser import (
    Condition,
    CountStatement,
    DeleteStatement,
    DescribeStatement,
    InsertStatement,
    SelectStatement,
    ShowTablesStatement,
    Statement,
    UpdateStatement,
    UpsertStatement,
)
from collabdb.query import QueryBuilder, QueryResult
from collabdb.relations import BelongsTo, Computed, HasMany


@dataclass
class StatementResult:
    """Result of a statement execution."""

    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)
    message: str | None = None
    error: str | None = None


def _plural(n: int, noun: str = "row") -> str:
    return f"{n} {noun}{'s' if n != 1 else ''}"


def _apply_conditions(builder: QueryBuilder, conditions: list[Condition]) -> QueryBuilder:
    for condition in conditions:
        if condition.operator == "eq":
            builder = builder.eq(condition.column, condition.value)
        elif condition.operator == "gte":
            builder = builder.gte(condition.column, condition.value)
        elif condition.operator == "in":
            builder = builder.in_(condition.column, condition.value)
        elif condition.operator == "ilike":
            builder = builder.ilike(condition.column, condition.value)
        else:
            raise ValueError(f"Unknown operator: {condition.operator}")
    return builder


def _row_columns(rows: list[dict[str, Any]]) -> list[str]:
    """Union of keys across rows, in first-seen order."""
    columns: dict[str, None] = {}
    for row in rows:
        for key in row:
            columns.setdefault(key)
    return list(columns)


def _selected_columns(columns: tuple[ColumnItem, ...] | None, rows: list[dict[str, Any]]) -> list[str]:
    if columns is None or any(item.is_star for item in columns):
        return _row_columns(rows)
    return [item.output_name for item in columns]


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "text"
    if isinstance(value, list):
        return "array"
    return "object"


class StatementExecutor:
    """Runs shell statements against a client and tabulates the outcome."""

    def __init__(self, client: Client) -> None:
        self.client = client

    async def execute(self, statement: Statement) -> StatementResult:
        """Execute a statement and return results."""
        if isinstance(statement, SelectStatement):
            return await self._execute_select(statement)
        elif isinstance(statement, CountStatement):
            return await self._execute_count(statement)
        elif isinstance(statement, InsertStatement):
            return await self._execute_insert(statement)
        elif isinstance(statement, UpsertStatement):
            return await self._execute_upsert(statement)
        elif isinstance(statement, UpdateStatement):
            return await self._execute_update(statement)
        elif isinstance(statement, DeleteStatement):
            return await self._execute_delete(statement)
        elif isinstance(statement, ShowTablesStatement):
            return self._execute_show_tables()
        elif isinstance(statement, DescribeStatement):
            return self._execute_describe(statement)
        else:
            raise ValueError(f"Unknown statement type: {type(statement)}")

    @staticmethod
    def _failed(result: QueryResult) -> StatementResult | None:
        if result.error is not None:
            return StatementResult(error=result.error.message)
        return None

    async def _execute_select(self, statement: SelectStatement) -> StatementResult:
        builder = self.client.from_(statement.table).select(statement.columns)
        builder = _apply_conditions(builder, statement.where)
        if statement.order is not None:
            builder = builder.order(statement.order.column, ascending=statement.order.ascending)
        if statement.limit is not None:
            builder = builder.limit(statement.limit)

        result = await builder.execute()
        failed = self._failed(result)
        if failed:
            return failed
        rows = result.data
        return StatementResult(columns=_selected_columns(statement.columns, rows), rows=rows)

    async def _execute_count(self, statement: CountStatement) -> StatementResult:
        builder = self.client.from_(statement.table).select("id", count="exact").limit(0)
        result = await _apply_conditions(builder, statement.where).execute()
        failed = self._failed(result)
        if failed:
            return failed
        return StatementResult(columns=["count"], rows=[{"count": result.count}])

    async def _execute_insert(self, statement: InsertStatement) -> StatementResult:
        result = await self.client.from_(statement.table).insert(statement.values).execute()
        failed = self._failed(result)
        if failed:
            return failed
        rows = result.data
        return StatementResult(
            columns=_row_columns(rows),
            rows=rows,
            message=f"Inserted {_plural(len(rows))} into {statement.table}",
        )

    async def _execute_upsert(self, statement: UpsertStatement) -> StatementResult:
        builder = self.client.from_(statement.table).upsert(statement.values, on_conflict=statement.on_conflict)
        result = await builder.execute()
        failed = self._failed(result)
        if failed:
            return failed
        rows = result.data
        return StatementResult(
            columns=_row_columns(rows),
            rows=rows,
            message=f"Upserted {_plural(len(rows))} into {statement.table}",
        )

    async def _execute_update(self, statement: UpdateStatement) -> StatementResult:
        builder = _apply_conditions(self.client.from_(statement.table).update(statement.values), statement.where)
        result = await builder.execute()
        failed = self._failed(result)
        if failed:
            return failed
        return StatementResult(message=f"Updated {_plural(len(result.data))} in {statement.table}")

    async def _execute_delete(self, statement: DeleteStatement) -> StatementResult:
        store = self.client.store
        before = store.count(statement.table) if store.has_table(statement.table) else 0
        result = await _apply_conditions(self.client.from_(statement.table).delete(), statement.where).execute()
        failed = self._failed(result)
        if failed:
            return failed
        deleted = before - store.count(statement.table)
        return StatementResult(message=f"Deleted {_plural(deleted)} from {statement.table}")

    def _execute_show_tables(self) -> StatementResult:
        store = self.client.store
        rows = [{"table": name, "rows": store.count(name)} for name in store.table_names()]
        return StatementResult(columns=["table", "rows"], rows=rows)

    def _execute_describe(self, statement: DescribeStatement) -> StatementResult:
        store = self.client.store
        if not store.has_table(statement.table):
            return StatementResult(error=f"Unknown table: {statement.table}")

        types: dict[str, str] = {}
        for row in store.get_table(statement.table):
            for key, value in row.items():
                if types.get(key, "null") == "null":
                    types[key] = _type_name(value)
        # Keyword-named columns are shown backtick-quoted
        rows = [{"column": escape_if_keyword(key), "kind": "column", "type": kind} for key, kind in types.items()]

        for relation in self.client.attacher.relations.get(statement.table, ()):
            if isinstance(relation, BelongsTo):
                target = f"{relation.table} via {relation.foreign_key}"
                rows.append({"column": relation.key, "kind": "belongs_to", "type": target})
            elif isinstance(relation, HasMany):
                target = f"{relation.table} via {relation.foreign_key}"
                rows.append({"column": relation.key, "kind": "has_many", "type": target})
            elif isinstance(relation, Computed):
                rows.append({"column": relation.key, "kind": "computed", "type": "object"})

        return StatementResult(columns=["column", "kind", "type"], rows=rows)
