"""Parser for collabdb statements used by the interactive shell."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from collabdb.parsing.column_parser import ColumnItem, ColumnParser
from collabdb.parsing.query_lexer import QueryLexer


@dataclass
class Condition:
    """A WHERE condition."""

    column: str
    operator: str  # eq, gte, in, ilike
    value: Any


@dataclass
class OrderClause:
    """An ORDER BY clause."""

    column: str
    ascending: bool = True


@dataclass
class SelectStatement:
    """from <table> [select ...] [where ...] [order by ...] [limit n]"""

    table: str
    columns: tuple[ColumnItem, ...] | None = None
    where: list[Condition] = field(default_factory=list)
    order: OrderClause | None = None
    limit: int | None = None


@dataclass
class CountStatement:
    """count <table> [where ...]"""

    table: str
    where: list[Condition] = field(default_factory=list)


@dataclass
class InsertStatement:
    """insert into <table> (col=value, ...)"""

    table: str
    values: dict[str, Any] = field(default_factory=dict)


@dataclass
class UpsertStatement:
    """upsert into <table> (col=value, ...) [on conflict col, ...]"""

    table: str
    values: dict[str, Any] = field(default_factory=dict)
    on_conflict: list[str] = field(default_factory=list)


@dataclass
class UpdateStatement:
    """update <table> set col=value, ... [where ...]"""

    table: str
    values: dict[str, Any] = field(default_factory=dict)
    where: list[Condition] = field(default_factory=list)


@dataclass
class DeleteStatement:
    """delete from <table> [where ...]"""

    table: str
    where: list[Condition] = field(default_factory=list)


@dataclass
class ShowTablesStatement:
    """show tables"""

    pass


@dataclass
class DescribeStatement:
    """describe <table>"""

    table: str


Statement = (
    SelectStatement
    | CountStatement
    | InsertStatement
    | UpsertStatement
    | UpdateStatement
    | DeleteStatement
    | ShowTablesStatement
    | DescribeStatement
)


class QueryParser(ColumnParser):
    """Parser for collabdb statements.

    Column lists after SELECT reuse the column grammar inherited from
    ColumnParser.
    """

    tokens = QueryLexer.tokens

    start_symbol = "statement"

    def __init__(self) -> None:
        self.lexer = QueryLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : query SEMICOLON
                     | query"""
        p[0] = p[1]

    def p_query_select(self, p: yacc.YaccProduction) -> None:
        """query : FROM IDENTIFIER select_clause where_clause order_clause limit_clause"""
        p[0] = SelectStatement(table=p[2], columns=p[3], where=p[4], order=p[5], limit=p[6])

    def p_query_count(self, p: yacc.YaccProduction) -> None:
        """query : COUNT IDENTIFIER where_clause"""
        p[0] = CountStatement(table=p[2], where=p[3])

    def p_query_insert(self, p: yacc.YaccProduction) -> None:
        """query : INSERT INTO IDENTIFIER LPAREN assignment_list RPAREN"""
        p[0] = InsertStatement(table=p[3], values=dict(p[5]))

    def p_query_upsert(self, p: yacc.YaccProduction) -> None:
        """query : UPSERT INTO IDENTIFIER LPAREN assignment_list RPAREN conflict_clause"""
        p[0] = UpsertStatement(table=p[3], values=dict(p[5]), on_conflict=p[7])

    def p_query_update(self, p: yacc.YaccProduction) -> None:
        """query : UPDATE IDENTIFIER SET assignment_list where_clause"""
        p[0] = UpdateStatement(table=p[2], values=dict(p[4]), where=p[5])

    def p_query_delete(self, p: yacc.YaccProduction) -> None:
        """query : DELETE FROM IDENTIFIER where_clause"""
        p[0] = DeleteStatement(table=p[3], where=p[4])

    def p_query_show_tables(self, p: yacc.YaccProduction) -> None:
        """query : SHOW TABLES"""
        p[0] = ShowTablesStatement()

    def p_query_describe(self, p: yacc.YaccProduction) -> None:
        """query : DESCRIBE IDENTIFIER"""
        p[0] = DescribeStatement(table=p[2])

    def p_select_clause_empty(self, p: yacc.YaccProduction) -> None:
        """select_clause : """
        p[0] = None

    def p_select_clause(self, p: yacc.YaccProduction) -> None:
        """select_clause : SELECT column_list"""
        p[0] = tuple(p[2])

    def p_where_clause_empty(self, p: yacc.YaccProduction) -> None:
        """where_clause : """
        p[0] = []

    def p_where_clause(self, p: yacc.YaccProduction) -> None:
        """where_clause : WHERE condition_list"""
        p[0] = p[2]

    def p_condition_list_single(self, p: yacc.YaccProduction) -> None:
        """condition_list : condition"""
        p[0] = [p[1]]

    def p_condition_list_multiple(self, p: yacc.YaccProduction) -> None:
        """condition_list : condition_list AND condition"""
        p[0] = p[1] + [p[3]]

    def p_condition_eq(self, p: yacc.YaccProduction) -> None:
        """condition : IDENTIFIER EQ literal"""
        p[0] = Condition(column=p[1], operator="eq", value=p[3])

    def p_condition_gte(self, p: yacc.YaccProduction) -> None:
        """condition : IDENTIFIER GTE literal"""
        p[0] = Condition(column=p[1], operator="gte", value=p[3])

    def p_condition_in(self, p: yacc.YaccProduction) -> None:
        """condition : IDENTIFIER IN LPAREN literal_list RPAREN"""
        p[0] = Condition(column=p[1], operator="in", value=p[4])

    def p_condition_ilike(self, p: yacc.YaccProduction) -> None:
        """condition : IDENTIFIER ILIKE STRING"""
        p[0] = Condition(column=p[1], operator="ilike", value=p[3])

    def p_order_clause_empty(self, p: yacc.YaccProduction) -> None:
        """order_clause : """
        p[0] = None

    def p_order_clause(self, p: yacc.YaccProduction) -> None:
        """order_clause : ORDER BY IDENTIFIER
                        | ORDER BY IDENTIFIER ASC
                        | ORDER BY IDENTIFIER DESC"""
        ascending = len(p) == 4 or p[4].lower() == "asc"
        p[0] = OrderClause(column=p[3], ascending=ascending)

    def p_limit_clause_empty(self, p: yacc.YaccProduction) -> None:
        """limit_clause : """
        p[0] = None

    def p_limit_clause(self, p: yacc.YaccProduction) -> None:
        """limit_clause : LIMIT INTEGER"""
        p[0] = p[2]

    def p_conflict_clause_empty(self, p: yacc.YaccProduction) -> None:
        """conflict_clause : """
        p[0] = []

    def p_conflict_clause(self, p: yacc.YaccProduction) -> None:
        """conflict_clause : ON CONFLICT identifier_list"""
        p[0] = p[3]

    def p_identifier_list_single(self, p: yacc.YaccProduction) -> None:
        """identifier_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_identifier_list_multiple(self, p: yacc.YaccProduction) -> None:
        """identifier_list : identifier_list COMMA IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_assignment_list_single(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment"""
        p[0] = [p[1]]

    def p_assignment_list_multiple(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment_list COMMA assignment"""
        p[0] = p[1] + [p[3]]

    def p_assignment(self, p: yacc.YaccProduction) -> None:
        """assignment : IDENTIFIER EQ literal"""
        p[0] = (p[1], p[3])

    def p_literal_list_single(self, p: yacc.YaccProduction) -> None:
        """literal_list : literal"""
        p[0] = [p[1]]

    def p_literal_list_multiple(self, p: yacc.YaccProduction) -> None:
        """literal_list : literal_list COMMA literal"""
        p[0] = p[1] + [p[3]]

    def p_literal(self, p: yacc.YaccProduction) -> None:
        """literal : STRING
                   | INTEGER
                   | FLOAT"""
        p[0] = p[1]

    def p_literal_negative(self, p: yacc.YaccProduction) -> None:
        """literal : MINUS INTEGER
                   | MINUS FLOAT"""
        p[0] = -p[2]

    def p_literal_true(self, p: yacc.YaccProduction) -> None:
        """literal : TRUE"""
        p[0] = True

    def p_literal_false(self, p: yacc.YaccProduction) -> None:
        """literal : FALSE"""
        p[0] = False

    def p_literal_null(self, p: yacc.YaccProduction) -> None:
        """literal : NULL"""
        p[0] = None

    def parse(self, data: str) -> Statement:
        """Parse a single statement."""
        if self.parser is None:
            # column_spec is only reachable from the column grammar's own start
            self.build(debug=False, write_tables=False, errorlog=yacc.NullLogger())

        return self.parser.parse(data, lexer=self.lexer.lexer)

    def parse_program(self, data: str) -> list[Statement]:
        """Parse semicolon-separated statements, skipping blank ones."""
        return [self.parse(text) for text in split_statements(data)]


def split_statements(content: str) -> list[str]:
    """Split content into statements on semicolons outside string literals."""
    statements = []
    current = []
    in_string = False
    escape_next = False

    for ch in content:
        if escape_next:
            current.append(ch)
            escape_next = False
            continue
        if ch == "\\" and in_string:
            current.append(ch)
            escape_next = True
            continue
        if ch == '"':
            in_string = not in_string
            current.append(ch)
            continue
        if ch == ";" and not in_string:
            stmt = "".join(current).strip()
            if stmt and not _is_comment_only(stmt):
                statements.append(stmt)
            current = []
            continue
        current.append(ch)

    stmt = "".join(current).strip()
    if stmt and not _is_comment_only(stmt):
        statements.append(stmt)
    return statements


def _is_comment_only(text: str) -> bool:
    return all(not line.strip() or line.strip().startswith("--") for line in text.splitlines())
