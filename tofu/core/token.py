"""Tokens produced by the lexer. A token is a kind plus the literal text it was read from."""

import enum
from dataclasses import dataclass, field


class TokenKind(enum.Enum):
    """Every kind of token in Tofu. The value of each member is its display form in error messages."""
    ILLEGAL = "illegal"
    EOF = "EOF"

    IDENT = "identifier"
    INT = "int"

    ASSIGN = "="
    EQ = "=="
    NOT_EQ = "!="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"

    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    FUNCTION = "fn"
    LET = "let"
    TRUE = "true"
    FALSE = "false"
    IF = "if"
    ELSE = "else"
    RETURN = "return"

    def __str__(self):
        return self.value


KEYWORDS = {
    "fn": TokenKind.FUNCTION,
    "let": TokenKind.LET,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
}


def lookup_identifier(identifier):
    """Returns the keyword kind of identifier, or IDENT if it is not a keyword."""
    return KEYWORDS.get(identifier, TokenKind.IDENT)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    literal: str
    line: int = field(default=1, compare=False)    # 1-based
    column: int = field(default=0, compare=False)  # 0-based, within line

    def __repr__(self):
        return f"Token({self.kind.name}, '{self.literal}')"

    def __str__(self):
        return self.literal if self.kind is not TokenKind.EOF else str(self.kind)
