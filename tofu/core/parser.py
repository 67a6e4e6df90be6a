"""Recursive-descent parser for Tofu, with Pratt (operator-precedence) parsing for expressions.

The parser looks at two tokens at a time: the current token and the one after it (the peek token). Every token kind
maps to at most one prefix parse function (for tokens that can start an expression) and at most one infix parse
function (for tokens that can continue one). parse_expression keeps consuming infix operators for as long as the
peek token binds tighter than the precedence it was called with, so operators of equal precedence associate left:
a - b - c = ((a - b) - c).

Parse errors do not stop the parser. A malformed statement is dropped whole, the error is recorded, and parsing picks
up again after the next ';'. If any error was recorded, parse_program raises a ParseError with all of them.
"""

import enum
from dataclasses import dataclass

from tofu.core.ast import (BlockStatement, BooleanLiteral, CallExpression, ExpressionStatement, FunctionLiteral,
                           Identifier, IfExpression, InfixExpression, IntegerLiteral, LetStatement, PrefixExpression,
                           Program, ReturnStatement)
from tofu.core.token import Token, TokenKind
from tofu.lang.error import InterpreterException

INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1


class Precedence(enum.IntEnum):
    LOWEST = enum.auto()
    EQUALS = enum.auto()       # == !=
    LESSGREATER = enum.auto()  # < >
    SUM = enum.auto()          # + -
    PRODUCT = enum.auto()      # * /
    PREFIX = enum.auto()       # -x !x
    CALL = enum.auto()         # f(x)


PRECEDENCES = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
}


@dataclass
class Diagnostic:
    """A single parse error: message, and the token the parser was looking at when it gave up."""
    message: str
    token: Token

    def __str__(self):
        return self.message


class ParseError(InterpreterException):
    """Raised when a program has one or more parse errors. messages lists every one of them, in source order."""

    def __init__(self, diagnostics, source=None, first_line_num=1):
        self.diagnostics = list(diagnostics)
        self.messages = [diagnostic.message for diagnostic in self.diagnostics]

        super().__init__(InterpreterException.escape(self.messages[0]), diagnosis=False)
        self.errors = []
        if source is not None:
            self.locate(source, first_line_num)

    def locate(self, source, first_line_num=1):
        """Attaches source lines to every diagnostic so that they can be displayed with a diagnosis. first_line_num
        is the line number of source's first line in its file.
        """
        lines = source.splitlines()
        self.errors = []
        for diagnostic in self.diagnostics:
            token = diagnostic.token
            line = lines[token.line - 1] if 0 < token.line <= len(lines) else ""
            end = token.column + max(len(token.literal), 1)
            self.errors.append(InterpreterException(InterpreterException.escape(diagnostic.message), line,
                                                    start=token.column, end=end, diagnosis=bool(line),
                                                    line_num=first_line_num + token.line - 1))
        return self

    def __str__(self):
        return "\n".join(self.messages)


class _AbandonStatement(Exception):
    """Signals that the statement being parsed is malformed and must be dropped."""


class Parser:
    """Parses any iterable of Tokens into a Program. A token stream that ends without EOF is treated as if it ended
    with one.
    """

    def __init__(self, tokens):
        self.tokens = iter(tokens)
        self.errors = []

        self.current = None
        self.peek = None
        self._eof = None

        self.prefix_parse_fns = {
            TokenKind.IDENT: self.parse_identifier,
            TokenKind.INT: self.parse_integer_literal,
            TokenKind.TRUE: self.parse_boolean_literal,
            TokenKind.FALSE: self.parse_boolean_literal,
            TokenKind.BANG: self.parse_prefix_expression,
            TokenKind.MINUS: self.parse_prefix_expression,
            TokenKind.LPAREN: self.parse_grouped_expression,
            TokenKind.IF: self.parse_if_expression,
            TokenKind.FUNCTION: self.parse_function_literal,
        }
        self.infix_parse_fns = {
            TokenKind.PLUS: self.parse_infix_expression,
            TokenKind.MINUS: self.parse_infix_expression,
            TokenKind.ASTERISK: self.parse_infix_expression,
            TokenKind.SLASH: self.parse_infix_expression,
            TokenKind.EQ: self.parse_infix_expression,
            TokenKind.NOT_EQ: self.parse_infix_expression,
            TokenKind.LT: self.parse_infix_expression,
            TokenKind.GT: self.parse_infix_expression,
            TokenKind.LPAREN: self.parse_call_expression,
        }

        # read two tokens, so current and peek are both set
        self.next_token()
        self.next_token()

    def next_token(self):
        self.current = self.peek
        if self._eof is not None:
            self.peek = self._eof
            return

        last = self.current
        self.peek = next(self.tokens, None)
        if self.peek is None:
            line, column = (last.line, last.column + len(last.literal)) if last is not None else (1, 0)
            self.peek = Token(TokenKind.EOF, "", line, column)
        if self.peek.kind is TokenKind.EOF:
            self._eof = self.peek

    def current_is(self, kind):
        return self.current.kind is kind

    def peek_is(self, kind):
        return self.peek.kind is kind

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek.kind, Precedence.LOWEST)

    def current_precedence(self):
        return PRECEDENCES.get(self.current.kind, Precedence.LOWEST)

    def error(self, message, token=None):
        """Records a parse error and abandons the statement being parsed."""
        self.errors.append(Diagnostic(message, token if token is not None else self.current))
        raise _AbandonStatement()

    def expect_peek(self, kind):
        """Advances if the peek token is of kind, otherwise records an error."""
        if not self.peek_is(kind):
            self.error(f"expected next token to be {kind}, got {self.peek.kind} instead", self.peek)
        self.next_token()

    def expect_end_of_statement(self):
        """let and return statements end with ';', which may be left out just before '}' or end of input."""
        if self.peek_is(TokenKind.SEMICOLON):
            self.next_token()
        elif not (self.peek_is(TokenKind.RBRACE) or self.peek_is(TokenKind.EOF)):
            self.expect_peek(TokenKind.SEMICOLON)

    def synchronize(self):
        """Skips ahead to the end of the malformed statement, i.e. the next ';' or EOF."""
        while not (self.current_is(TokenKind.SEMICOLON) or self.current_is(TokenKind.EOF)):
            self.next_token()

    def parse_program(self):
        """Parses the whole token stream. Raises ParseError if any statement was malformed."""
        program = Program(token=self.current)

        while not self.current_is(TokenKind.EOF):
            try:
                if not self.current_is(TokenKind.SEMICOLON):  # empty statement
                    program.statements.append(self.parse_statement())
            except _AbandonStatement:
                self.synchronize()
                if self.current_is(TokenKind.EOF):
                    break
            self.next_token()

        if self.errors:
            raise ParseError(self.errors)
        return program

    def parse_statement(self):
        if self.current_is(TokenKind.LET):
            return self.parse_let_statement()
        elif self.current_is(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        token = self.current

        self.expect_peek(TokenKind.IDENT)
        name = Identifier(self.current.literal, token=self.current)

        self.expect_peek(TokenKind.ASSIGN)
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        self.expect_end_of_statement()
        return LetStatement(name, value, token=token)

    def parse_return_statement(self):
        token = self.current

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        self.expect_end_of_statement()
        return ReturnStatement(value, token=token)

    def parse_expression_statement(self):
        token = self.current
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TokenKind.SEMICOLON):
            self.next_token()
        return ExpressionStatement(value, token=token)

    def parse_block_statement(self):
        """Parses statements up to the matching '}'. Expects current to be '{'."""
        block = BlockStatement(token=self.current)
        self.next_token()

        while not self.current_is(TokenKind.RBRACE):
            if self.current_is(TokenKind.EOF):
                self.error(f"expected next token to be {TokenKind.RBRACE}, got {TokenKind.EOF} instead")
            if not self.current_is(TokenKind.SEMICOLON):
                block.statements.append(self.parse_statement())
            self.next_token()

        return block

    def parse_expression(self, precedence):
        prefix = self.prefix_parse_fns.get(self.current.kind)
        if prefix is None:
            self.no_prefix_parse_fn_error()
        left = prefix()

        while not self.peek_is(TokenKind.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek.kind)
            if infix is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def no_prefix_parse_fn_error(self):
        if self.current_is(TokenKind.ILLEGAL):
            self.error(f"illegal token '{self.current.literal}'")
        self.error(f"no prefix parse function for {self.current.kind} found")

    def parse_identifier(self):
        return Identifier(self.current.literal, token=self.current)

    def parse_integer_literal(self):
        value = int(self.current.literal)
        if not INT_MIN <= value <= INT_MAX:
            self.error(f"could not parse {self.current.literal} as integer")
        return IntegerLiteral(value, token=self.current)

    def parse_boolean_literal(self):
        return BooleanLiteral(self.current_is(TokenKind.TRUE), token=self.current)

    def parse_prefix_expression(self):
        token = self.current

        self.next_token()
        operand = self.parse_expression(Precedence.PREFIX)

        return PrefixExpression(token.literal, operand, token=token)

    def parse_infix_expression(self, left):
        token = self.current
        precedence = self.current_precedence()

        self.next_token()
        right = self.parse_expression(precedence)

        return InfixExpression(token.literal, left, right, token=token)

    def parse_grouped_expression(self):
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)

        self.expect_peek(TokenKind.RPAREN)
        return expression

    def parse_if_expression(self):
        token = self.current

        self.expect_peek(TokenKind.LPAREN)
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RPAREN)

        self.expect_peek(TokenKind.LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_is(TokenKind.ELSE):
            self.next_token()
            self.expect_peek(TokenKind.LBRACE)
            alternative = self.parse_block_statement()

        return IfExpression(condition, consequence, alternative, token=token)

    def parse_function_literal(self):
        token = self.current

        self.expect_peek(TokenKind.LPAREN)
        parameters = self.parse_function_parameters()

        self.expect_peek(TokenKind.LBRACE)
        body = self.parse_block_statement()

        return FunctionLiteral(parameters, body, token=token)

    def parse_function_parameters(self):
        """Parses a comma-separated list of bare identifiers. Expects current to be '(' and leaves it on ')'."""
        parameters = []

        if self.peek_is(TokenKind.RPAREN):
            self.next_token()
            return parameters

        self.expect_peek(TokenKind.IDENT)
        parameters.append(Identifier(self.current.literal, token=self.current))

        while self.peek_is(TokenKind.COMMA):
            self.next_token()
            self.expect_peek(TokenKind.IDENT)
            parameters.append(Identifier(self.current.literal, token=self.current))

        self.expect_peek(TokenKind.RPAREN)
        return parameters

    def parse_call_expression(self, function):
        token = self.current
        return CallExpression(function, self.parse_call_arguments(), token=token)

    def parse_call_arguments(self):
        """Parses a comma-separated list of expressions. Expects current to be '(' and leaves it on ')'."""
        arguments = []

        if self.peek_is(TokenKind.RPAREN):
            self.next_token()
            return arguments

        self.next_token()
        arguments.append(self.parse_expression(Precedence.LOWEST))

        while self.peek_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            arguments.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(TokenKind.RPAREN)
        return arguments


def parse(tokens):
    """Parses tokens into a Program. Raises ParseError listing every parse error if there are any."""
    return Parser(tokens).parse_program()
