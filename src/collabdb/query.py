"""Chainable, deferred query builder over the in-memory table store."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import cmp_to_key
from typing import Any, Callable, Generator, Iterable, Mapping, Sequence

from collabdb.errors import BackendError, CardinalityError
from collabdb.parsing.column_parser import ColumnItem, parse_columns
from collabdb.projection import project_rows
from collabdb.relations import RelationAttacher
from collabdb.scoring import to_number
from collabdb.tables import LIFECYCLE_TABLES, Row, TableStore, is_number, now_iso, strict_equals, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryError:
    """Error half of a result envelope."""

    message: str


@dataclass
class QueryResult:
    """Uniform {data, error} envelope returned by every execution.

    count is only populated for reads configured with count="exact".
    """

    data: Any = None
    error: QueryError | None = None
    count: int | None = None

    @classmethod
    def success(cls, data: Any, count: int | None = None) -> QueryResult:
        return cls(data=data, error=None, count=count)

    @classmethod
    def failure(cls, message: str) -> QueryResult:
        return cls(data=None, error=QueryError(message))

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> QueryResult:
        """Raise BackendError for an error envelope, else return self."""
        if self.error is not None:
            raise BackendError(self.error.message)
        return self


def _ilike(value: Any, pattern: Any) -> bool:
    text = "" if value is None else _as_text(value)
    needle = str(pattern).lower().replace("%", "")
    return needle in text.lower()


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _in(value: Any, candidates: Iterable[Any]) -> bool:
    return any(strict_equals(value, candidate) for candidate in candidates)


_PREDICATES: dict[str, Callable[[Any, Any], bool]] = {
    "eq": strict_equals,
    "in": _in,
    "ilike": _ilike,
    "gte": lambda value, bound: to_number(value) >= to_number(bound),
}


@dataclass(frozen=True)
class Filter:
    """A single column predicate; a builder ANDs all of its filters."""

    op: str  # eq, in, ilike, gte
    column: str
    value: Any

    def matches(self, row: Row) -> bool:
        return _PREDICATES[self.op](row.get(self.column), self.value)


@dataclass(frozen=True)
class OrderSpec:
    column: str
    ascending: bool = True


@dataclass
class Insert:
    rows: list[Row]


@dataclass
class Update:
    patch: Row


@dataclass
class Upsert:
    rows: list[Row]
    on_conflict: list[str] = field(default_factory=list)


@dataclass
class Delete:
    pass


Mutation = Insert | Update | Upsert | Delete


def _conflict_keys(on_conflict: str | Sequence[str] | None) -> list[str]:
    if on_conflict is None:
        return []
    if isinstance(on_conflict, str):
        on_conflict = on_conflict.split(",")
    return [key.strip() for key in on_conflict if key.strip()]


def _as_rows(rows: Row | Iterable[Row]) -> list[Row]:
    if isinstance(rows, Mapping):
        return [dict(rows)]
    return [dict(row) for row in rows]


def _compare(column: str, ascending: bool) -> Callable[[Row, Row], int]:
    """Comparator placing None last ascending and first descending."""

    def compare(left: Row, right: Row) -> int:
        a, b = left.get(column), right.get(column)
        if a is None and b is None:
            return 0
        if a is None:
            return 1 if ascending else -1
        if b is None:
            return -1 if ascending else 1
        if is_number(a) and is_number(b):
            result = (a > b) - (a < b)
        else:
            sa, sb = _collation_key(_as_text(a)), _collation_key(_as_text(b))
            result = (sa > sb) - (sa < sb)
        return result if ascending else -result

    return compare


def _collation_key(text: str) -> tuple[str, str]:
    # Case-insensitive first; on a tie lowercase sorts before uppercase
    return text.casefold(), text.swapcase()


class QueryBuilder:
    """Accumulates a query against one table and executes it on demand.

    Chain filters, ordering and at most one mutation, then call execute()
    (or await the builder itself). Execution always resolves to a
    QueryResult; failures come back as an error envelope instead of raising.
    """

    def __init__(
        self,
        table: str,
        store: TableStore,
        attacher: RelationAttacher,
        *,
        latency: float,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.table = table
        self._store = store
        self._attacher = attacher
        self._latency = latency
        self._clock = clock
        self._filters: list[Filter] = []
        self._order: OrderSpec | None = None
        self._limit: int | None = None
        self._cardinality = "many"  # many, single, maybe_single
        self._mutation: Mutation | None = None
        self._columns: str | Sequence[ColumnItem] | None = None
        self._count: str | None = None

    def __repr__(self) -> str:
        kind = type(self._mutation).__name__.lower() if self._mutation else "select"
        return f"QueryBuilder({self.table!r}, {kind}, filters={len(self._filters)})"

    # --- Configuration ---

    def select(
        self,
        columns: str | Sequence[ColumnItem] | None = "*",
        *,
        count: str | None = None,
    ) -> QueryBuilder:
        """Choose the returned columns; with count="exact" also count matches."""
        self._columns = columns
        self._count = count
        return self

    def insert(self, rows: Row | Iterable[Row]) -> QueryBuilder:
        self._mutation = Insert(_as_rows(rows))
        return self

    def update(self, patch: Mapping[str, Any]) -> QueryBuilder:
        self._mutation = Update(dict(patch))
        return self

    def upsert(
        self,
        rows: Row | Iterable[Row],
        *,
        on_conflict: str | Sequence[str] | None = None,
    ) -> QueryBuilder:
        """Insert rows, or merge into existing rows matching on_conflict (else id)."""
        self._mutation = Upsert(_as_rows(rows), _conflict_keys(on_conflict))
        return self

    def delete(self) -> QueryBuilder:
        self._mutation = Delete()
        return self

    def eq(self, column: str, value: Any) -> QueryBuilder:
        self._filters.append(Filter("eq", column, value))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> QueryBuilder:
        self._filters.append(Filter("in", column, list(values)))
        return self

    def ilike(self, column: str, pattern: str) -> QueryBuilder:
        self._filters.append(Filter("ilike", column, pattern))
        return self

    def gte(self, column: str, value: Any) -> QueryBuilder:
        self._filters.append(Filter("gte", column, value))
        return self

    def order(self, column: str, *, ascending: bool = True) -> QueryBuilder:
        self._order = OrderSpec(column, ascending)
        return self

    def limit(self, n: int) -> QueryBuilder:
        self._limit = n
        return self

    def single(self) -> QueryBuilder:
        self._cardinality = "single"
        return self

    def maybe_single(self) -> QueryBuilder:
        self._cardinality = "maybe_single"
        return self

    # --- Execution ---

    def __await__(self) -> Generator[Any, None, QueryResult]:
        return self.execute().__await__()

    async def execute(self) -> QueryResult:
        """Run the configured query after the simulated round trip."""
        await asyncio.sleep(self._latency)
        # Everything below is synchronous: no other task can interleave between
        # reading a table and committing its replacement.
        try:
            result = self._run()
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("Query on %r failed: %s", self.table, message)
            return QueryResult.failure(message)
        logger.debug("Executed %r", self)
        return result

    def _run(self) -> QueryResult:
        mutation = self._mutation
        if mutation is None:
            return self._execute_select()
        elif isinstance(mutation, Insert):
            return self._execute_insert(mutation)
        elif isinstance(mutation, Update):
            return self._execute_update(mutation)
        elif isinstance(mutation, Upsert):
            return self._execute_upsert(mutation)
        elif isinstance(mutation, Delete):
            return self._execute_delete()
        else:
            raise ValueError(f"Unsupported operation: {mutation!r}")

    # --- Row pipeline ---

    def _columns_spec(self) -> Sequence[ColumnItem] | None:
        columns = self._columns
        if columns is None:
            return None
        if isinstance(columns, str):
            if not columns.strip():
                return None
            return parse_columns(columns)
        return columns

    def _apply_filters(self, rows: Iterable[Row]) -> list[Row]:
        return [row for row in rows if all(f.matches(row) for f in self._filters)]

    def _apply_order(self, rows: list[Row]) -> list[Row]:
        if self._order is None:
            return rows
        # sorted() is stable, so ties keep their original relative order
        return sorted(rows, key=cmp_to_key(_compare(self._order.column, self._order.ascending)))

    def _apply_limit(self, rows: list[Row]) -> list[Row]:
        if self._limit is None:
            return rows
        return rows[: self._limit]

    def _decorate(self, rows: Sequence[Row]) -> list[Row]:
        columns = self._columns_spec()
        return project_rows(self._attacher.attach_all(self.table, rows), columns)

    def _resolve(self, rows: list[Row], count: int | None = None) -> QueryResult:
        if self._cardinality == "single":
            if len(rows) != 1:
                raise CardinalityError("Expected single row")
            return QueryResult.success(rows[0], count)
        if self._cardinality == "maybe_single":
            if not rows:
                return QueryResult.success(None, count)
            if len(rows) != 1:
                raise CardinalityError("Expected at most one row")
            return QueryResult.success(rows[0], count)
        return QueryResult.success(rows, count)

    def _stamp_updated_at(self, before: Row, after: Row, patch: Mapping[str, Any]) -> None:
        if "updated_at" in patch and patch["updated_at"] is not None:
            return
        if self.table in LIFECYCLE_TABLES or "updated_at" in before:
            after["updated_at"] = now_iso(self._clock)

    def _prepare_new_row(self, row: Row, pending: Sequence[Row]) -> Row:
        new_row = dict(row)
        if new_row.get("id") is None:
            new_row["id"] = self._store.new_id(self.table, pending)
        if new_row.get("created_at") is None:
            new_row["created_at"] = now_iso(self._clock)
        if self.table in LIFECYCLE_TABLES and new_row.get("updated_at") is None:
            new_row["updated_at"] = new_row["created_at"]
        return new_row

    # --- Paths ---

    def _execute_select(self) -> QueryResult:
        base = self._store.get_table(self.table)
        filtered = self._apply_filters(base)
        rows = self._decorate(self._apply_limit(self._apply_order(filtered)))
        count = len(filtered) if self._count == "exact" else None
        return self._resolve(rows, count)

    def _execute_insert(self, mutation: Insert) -> QueryResult:
        base = self._store.get_table(self.table)
        created: list[Row] = []
        for row in mutation.rows:
            created.append(self._prepare_new_row(row, created))
        self._store.set_table(self.table, (*base, *created))

        out = self._decorate(created)
        if self._cardinality == "single":
            if not out:
                raise CardinalityError("Insert failed")
            return QueryResult.success(out[0])
        return self._resolve(out)

    def _execute_update(self, mutation: Update) -> QueryResult:
        base = self._store.get_table(self.table)
        updated_rows: list[Row] = []
        matched: list[Row] = []
        for row in base:
            if all(f.matches(row) for f in self._filters):
                next_row = {**row, **mutation.patch}
                self._stamp_updated_at(row, next_row, mutation.patch)
                matched.append(next_row)
                updated_rows.append(next_row)
            else:
                updated_rows.append(row)
        self._store.set_table(self.table, updated_rows)

        out = self._decorate(matched)
        if self._cardinality == "single":
            if not out:
                raise CardinalityError("No row updated")
            return QueryResult.success(out[0])
        return self._resolve(out)

    def _find_conflict(self, rows: Sequence[Row], row: Row, keys: Sequence[str]) -> int:
        if keys:
            for index, existing in enumerate(rows):
                if all(strict_equals(existing.get(key), row.get(key)) for key in keys):
                    return index
        elif row.get("id") is not None:
            for index, existing in enumerate(rows):
                if strict_equals(existing.get("id"), row["id"]):
                    return index
        return -1

    def _execute_upsert(self, mutation: Upsert) -> QueryResult:
        rows = list(self._store.get_table(self.table))
        results: list[Row] = []
        for row in mutation.rows:
            index = self._find_conflict(rows, row, mutation.on_conflict)
            if index >= 0:
                merged = {**rows[index], **row, "updated_at": now_iso(self._clock)}
                rows[index] = merged
                results.append(merged)
            else:
                created = self._prepare_new_row(row, rows)
                rows.append(created)
                results.append(created)
        self._store.set_table(self.table, rows)

        out = self._decorate(results)
        if self._cardinality == "single":
            if not out:
                raise CardinalityError("Upsert failed")
            return QueryResult.success(out[0])
        return self._resolve(out)

    def _execute_delete(self) -> QueryResult:
        base = self._store.get_table(self.table)
        remaining = [row for row in base if not all(f.matches(row) for f in self._filters)]
        self._store.set_table(self.table, remaining)
        return QueryResult.success([])
