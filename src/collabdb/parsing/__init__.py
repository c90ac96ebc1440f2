"""Parsing module for select-column lists and shell statements."""

from collabdb.parsing.column_parser import ColumnItem, ColumnParser, parse_columns
from collabdb.parsing.query_parser import (
    Condition,
    QueryParser,
    SelectStatement,
    Statement,
)

__all__ = [
    "ColumnItem",
    "ColumnParser",
    "Condition",
    "QueryParser",
    "SelectStatement",
    "Statement",
    "parse_columns",
]
