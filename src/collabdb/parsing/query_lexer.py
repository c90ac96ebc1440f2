"""Lexer for select-column lists and collabdb statements."""

import re

import ply.lex as lex


class QueryLexer:
    """Lexer for tokenizing column lists and statements.

    With keywords disabled every word lexes as an IDENTIFIER, which is what
    select-column lists need: a column may be called "order" or "limit".
    """

    # Reserved keywords
    reserved = {
        "from": "FROM",
        "select": "SELECT",
        "where": "WHERE",
        "and": "AND",
        "order": "ORDER",
        "by": "BY",
        "asc": "ASC",
        "desc": "DESC",
        "limit": "LIMIT",
        "show": "SHOW",
        "tables": "TABLES",
        "describe": "DESCRIBE",
        "count": "COUNT",
        "insert": "INSERT",
        "into": "INTO",
        "update": "UPDATE",
        "set": "SET",
        "upsert": "UPSERT",
        "on": "ON",
        "conflict": "CONFLICT",
        "delete": "DELETE",
        "in": "IN",
        "ilike": "ILIKE",
        "true": "TRUE",
        "false": "FALSE",
        "null": "NULL",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "FLOAT",
        "STRING",
        "STAR",
        "COMMA",
        "COLON",
        "LPAREN",
        "RPAREN",
        "EQ",
        "GTE",
        "MINUS",
        "SEMICOLON",
    ] + list(reserved.values())

    # Simple tokens
    t_STAR = r"\*"
    t_COMMA = r","
    t_COLON = r":"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_EQ = r"="
    t_GTE = r">="
    t_MINUS = r"-"
    t_SEMICOLON = r";"

    t_ignore = " \t\r"

    def __init__(self, keywords: bool = True) -> None:
        self.keywords = keywords
        self.lexer: lex.Lexer = None  # type: ignore

    def t_COMMENT(self, t: lex.LexToken) -> None:
        r"--[^\n]*"
        pass

    def t_FLOAT(self, t: lex.LexToken) -> lex.LexToken:
        r"\d+\.\d+"
        t.value = float(t.value)
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"\d+"
        t.value = int(t.value)
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\]|\\.)*"'
        t.value = re.sub(r"\\(.)", r"\1", t.value[1:-1])
        return t

    def t_BACKTICK_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"`[^`]+`"
        # Always an IDENTIFIER, bypassing keyword lookup
        t.value = t.value[1:-1]
        t.type = "IDENTIFIER"
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        if self.keywords:
            t.type = self.reserved.get(t.value.lower(), "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens


RESERVED_KEYWORDS: frozenset[str] = frozenset(QueryLexer.reserved.keys())


def escape_if_keyword(name: str) -> str:
    """Wrap a name in backticks if it clashes with a reserved keyword."""
    if name.lower() in RESERVED_KEYWORDS:
        return f"`{name}`"
    return name
