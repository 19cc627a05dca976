"""
Token types for the Monkey lexer.

Each TokenType value is the text shown for that kind of token in parser
diagnostics, so "expected next token to be )" reads naturally.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Special ---
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # --- Identifiers and literals ---
    IDENT = "IDENT"             # add, foobar, x, y
    INT = "INT"                 # 1343456
    STRING = "STRING"           # "foo bar"

    # --- Operators ---
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # --- Delimiters ---
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # --- Keywords ---
    FUNCTION = "FUNCTION"       # fn
    LET = "LET"                 # let
    TRUE = "TRUE"               # true
    FALSE = "FALSE"             # false
    IF = "IF"                   # if
    ELSE = "ELSE"               # else
    RETURN = "RETURN"           # return


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    `literal` is always the source text of the token; integer tokens carry
    their digits and the parser converts them.
    """
    type: TokenType
    literal: str
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.type in (TokenType.INT, TokenType.STRING,
                         TokenType.IDENT, TokenType.ILLEGAL):
            return f"{self.type.name}({self.literal!r})"
        return self.type.name


# Keyword mapping - maps identifier text to token type
KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}


def lookup_ident(ident: str) -> TokenType:
    """Return the keyword token type for `ident`, or IDENT."""
    return KEYWORDS.get(ident, TokenType.IDENT)
