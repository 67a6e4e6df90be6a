"""Lexical analysis for Tofu. Turns source text into a lazy stream of Tokens.

Lexical grammar, loosely:

```
<ident>    ::= (<letter> | "_") (<letter> | "_" | <digit>)*   ; keywords are looked up in token.KEYWORDS
<int>      ::= <digit>+
<operator> ::= "=" | "==" | "!" | "!=" | "+" | "-" | "*" | "/" | "<" | ">"
<delim>    ::= "(" | ")" | "{" | "}" | "," | ";"
<comment>  ::= "//" <char>* <newline>                          ; skipped, like whitespace
```

Lexing never fails: a character outside this grammar becomes an ILLEGAL token, and the parser reports it.
"""

from tofu.core.token import Token, TokenKind, lookup_identifier


class Lexer:
    """Lazy token stream over source. Iterating a Lexer always starts again from the first character and stops
    after yielding exactly one EOF token.
    """
    SINGLE = {
        "=": TokenKind.ASSIGN,
        "!": TokenKind.BANG,
        "+": TokenKind.PLUS,
        "-": TokenKind.MINUS,
        "*": TokenKind.ASTERISK,
        "/": TokenKind.SLASH,
        "<": TokenKind.LT,
        ">": TokenKind.GT,
        ",": TokenKind.COMMA,
        ";": TokenKind.SEMICOLON,
        "(": TokenKind.LPAREN,
        ")": TokenKind.RPAREN,
        "{": TokenKind.LBRACE,
        "}": TokenKind.RBRACE,
    }
    DOUBLE = {
        "==": TokenKind.EQ,
        "!=": TokenKind.NOT_EQ,
    }

    def __init__(self, source):
        self.source = source
        self.reset()

    def reset(self):
        """Rewinds to the first character of source."""
        self.pos = 0
        self.line = 1
        self.line_start = 0

    @property
    def ch(self):
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def peek_char(self):
        return self.source[self.pos + 1] if self.pos + 1 < len(self.source) else ""

    def next_token(self):
        """Reads and returns the next token. Once source is exhausted, always returns an EOF token."""
        self._skip_whitespace()

        line, column = self.line, self.pos - self.line_start
        ch = self.ch

        if not ch:
            return Token(TokenKind.EOF, "", line, column)

        if ch + self.peek_char() in Lexer.DOUBLE:
            literal = ch + self.peek_char()
            self.pos += 2
            return Token(Lexer.DOUBLE[literal], literal, line, column)

        if ch in Lexer.SINGLE:
            self.pos += 1
            return Token(Lexer.SINGLE[ch], ch, line, column)

        if Lexer.is_letter(ch):
            literal = self._read_while(lambda char: Lexer.is_letter(char) or Lexer.is_digit(char))
            return Token(lookup_identifier(literal), literal, line, column)

        if Lexer.is_digit(ch):
            return Token(TokenKind.INT, self._read_while(Lexer.is_digit), line, column)

        self.pos += 1
        return Token(TokenKind.ILLEGAL, ch, line, column)

    def _read_while(self, predicate):
        start = self.pos
        while self.ch and predicate(self.ch):
            self.pos += 1
        return self.source[start:self.pos]

    def _skip_whitespace(self):
        """Skips whitespace and comments, keeping track of line numbers."""
        while self.ch:
            if self.ch == "\n":
                self.pos += 1
                self.line += 1
                self.line_start = self.pos
            elif self.ch.isspace():
                self.pos += 1
            elif self.ch == "/" and self.peek_char() == "/":
                while self.ch and self.ch != "\n":
                    self.pos += 1
            else:
                break

    @staticmethod
    def is_letter(char):
        return char.isascii() and char.isalpha() or char == "_"

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    def __iter__(self):
        lexer = Lexer(self.source)
        while True:
            token = lexer.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return


def lex(source):
    """Returns a lazy, restartable token stream over source."""
    return Lexer(source)
