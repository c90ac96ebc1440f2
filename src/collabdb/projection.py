"""Column projection over decorated rows."""

from __future__ import annotations

from typing import Any, Sequence

from collabdb.parsing.column_parser import ColumnItem
from collabdb.tables import Row


def is_wildcard(columns: Sequence[ColumnItem] | None) -> bool:
    """True when a column list selects whole rows unchanged."""
    return not columns or all(item.is_star and item.alias is None for item in columns)


def project_row(row: Row, columns: Sequence[ColumnItem]) -> Row:
    """Keep only the selected keys of a row, narrowing nested embeds.

    "*" copies every key of the row, relations and computed fields included.
    A named key that the row lacks comes back as None.
    """
    result: Row = {}
    for item in columns:
        if item.is_star:
            result.update(row)
            continue
        value = row.get(item.name)
        if item.children is not None:
            value = _project_value(value, item.children)
        result[item.output_name] = value
    return result


def _project_value(value: Any, columns: Sequence[ColumnItem]) -> Any:
    if isinstance(value, dict):
        return project_row(value, columns)
    if isinstance(value, list):
        return [project_row(v, columns) if isinstance(v, dict) else v for v in value]
    return value


def project_rows(rows: Sequence[Row], columns: Sequence[ColumnItem] | None) -> list[Row]:
    if is_wildcard(columns):
        return list(rows)
    return [project_row(row, columns) for row in rows]  # type: ignore[arg-type]
