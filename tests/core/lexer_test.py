import unittest

from tofu.core.lexer import Lexer, lex
from tofu.core.token import Token, TokenKind, lookup_identifier


def kinds(source):
    return [token.kind for token in lex(source)]


class TokenTestCase(unittest.TestCase):

    def test_lookup_identifier(self):
        cases = {
            "fn": TokenKind.FUNCTION,
            "let": TokenKind.LET,
            "if": TokenKind.IF,
            "else": TokenKind.ELSE,
            "return": TokenKind.RETURN,
            "true": TokenKind.TRUE,
            "false": TokenKind.FALSE,
            "fnx": TokenKind.IDENT,
            "lets": TokenKind.IDENT,
            "x": TokenKind.IDENT,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, lookup_identifier(case), case)

    def test_display(self):
        self.assertEqual("identifier", str(TokenKind.IDENT))
        self.assertEqual("==", str(TokenKind.EQ))
        self.assertEqual("EOF", str(Token(TokenKind.EOF, "")))


class LexerTestCase(unittest.TestCase):

    def test_next_token(self):
        source = """let five = 5;
let ten = 10;

let add = fn(x, y) {
  x + y;
};

let result = add(five, ten);
!-/*5;
5 < 10 > 5;

if (5 < 10) {
    return true;
} else {
    return false;
}

10 == 10;
10 != 9;
"""
        expected = [
            (TokenKind.LET, "let"), (TokenKind.IDENT, "five"), (TokenKind.ASSIGN, "="), (TokenKind.INT, "5"),
            (TokenKind.SEMICOLON, ";"),
            (TokenKind.LET, "let"), (TokenKind.IDENT, "ten"), (TokenKind.ASSIGN, "="), (TokenKind.INT, "10"),
            (TokenKind.SEMICOLON, ";"),
            (TokenKind.LET, "let"), (TokenKind.IDENT, "add"), (TokenKind.ASSIGN, "="), (TokenKind.FUNCTION, "fn"),
            (TokenKind.LPAREN, "("), (TokenKind.IDENT, "x"), (TokenKind.COMMA, ","), (TokenKind.IDENT, "y"),
            (TokenKind.RPAREN, ")"), (TokenKind.LBRACE, "{"),
            (TokenKind.IDENT, "x"), (TokenKind.PLUS, "+"), (TokenKind.IDENT, "y"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.RBRACE, "}"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.LET, "let"), (TokenKind.IDENT, "result"), (TokenKind.ASSIGN, "="), (TokenKind.IDENT, "add"),
            (TokenKind.LPAREN, "("), (TokenKind.IDENT, "five"), (TokenKind.COMMA, ","), (TokenKind.IDENT, "ten"),
            (TokenKind.RPAREN, ")"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.BANG, "!"), (TokenKind.MINUS, "-"), (TokenKind.SLASH, "/"), (TokenKind.ASTERISK, "*"),
            (TokenKind.INT, "5"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.INT, "5"), (TokenKind.LT, "<"), (TokenKind.INT, "10"), (TokenKind.GT, ">"),
            (TokenKind.INT, "5"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.IF, "if"), (TokenKind.LPAREN, "("), (TokenKind.INT, "5"), (TokenKind.LT, "<"),
            (TokenKind.INT, "10"), (TokenKind.RPAREN, ")"), (TokenKind.LBRACE, "{"),
            (TokenKind.RETURN, "return"), (TokenKind.TRUE, "true"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.RBRACE, "}"), (TokenKind.ELSE, "else"), (TokenKind.LBRACE, "{"),
            (TokenKind.RETURN, "return"), (TokenKind.FALSE, "false"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.RBRACE, "}"),
            (TokenKind.INT, "10"), (TokenKind.EQ, "=="), (TokenKind.INT, "10"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.INT, "10"), (TokenKind.NOT_EQ, "!="), (TokenKind.INT, "9"), (TokenKind.SEMICOLON, ";"),
            (TokenKind.EOF, ""),
        ]

        lexer = Lexer(source)
        for idx, (kind, literal) in enumerate(expected):
            token = lexer.next_token()
            self.assertEqual(kind, token.kind, f"index {idx}")
            self.assertEqual(literal, token.literal, f"index {idx}")

    def test_eof(self):
        should_pass = ["", "   ", "\n\t\n", "// only a comment"]
        for case in should_pass:
            self.assertEqual([TokenKind.EOF], kinds(case), case)

        lexer = Lexer("x")
        lexer.next_token()
        for __ in range(3):
            self.assertEqual(TokenKind.EOF, lexer.next_token().kind)

    def test_comments(self):
        cases = {
            "1 // one\n2": [TokenKind.INT, TokenKind.INT, TokenKind.EOF],
            "1 / 2 // half": [TokenKind.INT, TokenKind.SLASH, TokenKind.INT, TokenKind.EOF],
            "// let x = 5;\nx": [TokenKind.IDENT, TokenKind.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, kinds(case), case)

    def test_illegal(self):
        cases = {
            "@": [Token(TokenKind.ILLEGAL, "@"), Token(TokenKind.EOF, "")],
            "5 $ 3": [Token(TokenKind.INT, "5"), Token(TokenKind.ILLEGAL, "$"), Token(TokenKind.INT, "3"),
                      Token(TokenKind.EOF, "")],
            "\"a\"": [Token(TokenKind.ILLEGAL, "\""), Token(TokenKind.IDENT, "a"), Token(TokenKind.ILLEGAL, "\""),
                      Token(TokenKind.EOF, "")],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, list(lex(case)), case)

    def test_identifiers(self):
        cases = {
            "foo_bar": [Token(TokenKind.IDENT, "foo_bar")],
            "_x1": [Token(TokenKind.IDENT, "_x1")],
            "x1y": [Token(TokenKind.IDENT, "x1y")],
            "1x": [Token(TokenKind.INT, "1"), Token(TokenKind.IDENT, "x")],
            "letx": [Token(TokenKind.IDENT, "letx")],
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [Token(TokenKind.EOF, "")], list(lex(case)), case)

    def test_positions(self):
        tokens = list(lex("let x = 5;\n  x + 1"))
        self.assertEqual((1, 0), (tokens[0].line, tokens[0].column))
        self.assertEqual((1, 4), (tokens[1].line, tokens[1].column))
        self.assertEqual((2, 2), (tokens[5].line, tokens[5].column))
        self.assertEqual((2, 6), (tokens[7].line, tokens[7].column))

    def test_restartable(self):
        tokens = lex("let x = 5;")
        first = list(tokens)
        second = list(tokens)

        self.assertEqual(first, second)
        self.assertEqual(6, len(first))
        self.assertEqual(TokenKind.EOF, first[-1].kind)

    def test_lazy(self):
        stream = iter(lex("1 2 3"))
        self.assertEqual(Token(TokenKind.INT, "1"), next(stream))
        self.assertEqual(Token(TokenKind.INT, "2"), next(stream))


if __name__ == '__main__':
    unittest.main()
