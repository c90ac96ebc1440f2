"""Parser for select-column lists such as ``id, title, colleges(name)``."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import ply.yacc as yacc

from collabdb.parsing.query_lexer import QueryLexer


@dataclass(frozen=True)
class ColumnItem:
    """One entry of a select-column list.

    name is a column or relation key, or "*". children is the nested column
    list for an embedded relation, or None for a plain column.
    """

    name: str
    alias: str | None = None
    children: tuple[ColumnItem, ...] | None = None

    @property
    def output_name(self) -> str:
        return self.alias or self.name

    @property
    def is_star(self) -> bool:
        return self.name == "*"


class ColumnParser:
    """Parser for select-column lists."""

    tokens = QueryLexer.tokens

    start_symbol = "column_spec"

    def __init__(self) -> None:
        self.lexer = QueryLexer(keywords=False)
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_column_spec(self, p: yacc.YaccProduction) -> None:
        """column_spec : column_list"""
        p[0] = tuple(p[1])

    def p_column_list_single(self, p: yacc.YaccProduction) -> None:
        """column_list : column_item"""
        p[0] = [p[1]]

    def p_column_list_multiple(self, p: yacc.YaccProduction) -> None:
        """column_list : column_list COMMA column_item"""
        p[0] = p[1] + [p[3]]

    def p_column_item_star(self, p: yacc.YaccProduction) -> None:
        """column_item : STAR"""
        p[0] = ColumnItem(name="*")

    def p_column_item_name(self, p: yacc.YaccProduction) -> None:
        """column_item : IDENTIFIER"""
        p[0] = ColumnItem(name=p[1])

    def p_column_item_alias(self, p: yacc.YaccProduction) -> None:
        """column_item : IDENTIFIER COLON IDENTIFIER"""
        p[0] = ColumnItem(name=p[3], alias=p[1])

    def p_column_item_embed(self, p: yacc.YaccProduction) -> None:
        """column_item : IDENTIFIER LPAREN column_list RPAREN"""
        p[0] = ColumnItem(name=p[1], children=tuple(p[3]))

    def p_column_item_alias_embed(self, p: yacc.YaccProduction) -> None:
        """column_item : IDENTIFIER COLON IDENTIFIER LPAREN column_list RPAREN"""
        p[0] = ColumnItem(name=p[3], alias=p[1], children=tuple(p[5]))

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start=self.start_symbol, **kwargs)

    def parse(self, data: str) -> Any:
        """Parse a column list."""
        if self.parser is None:
            # Statement tokens are unused by this grammar; keep the build quiet
            self.build(debug=False, write_tables=False, errorlog=yacc.NullLogger())

        return self.parser.parse(data, lexer=self.lexer.lexer)


_PARSER: ColumnParser | None = None


@lru_cache(maxsize=256)
def parse_columns(text: str) -> tuple[ColumnItem, ...]:
    """Parse a column list, caching the result per distinct string."""
    global _PARSER
    if _PARSER is None:
        _PARSER = ColumnParser()
    return _PARSER.parse(text)
