"""
Unit tests for the Venti lexer.

Author: xwest
"""

import unittest
import sys
import os
import tempfile

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from venti.errors import VentiSyntaxError
from venti.lexer import Lexer, LexError, TokenType, tokenize_string, tokenize_file


def token_types(source: str):
    return [token.type for token in tokenize_string(source)]


class TestLexerBasics(unittest.TestCase):
    """Token recognition."""

    def test_empty_source(self):
        self.assertEqual(tokenize_string(""), [])
        self.assertEqual(tokenize_string("  \t\n\r\f  "), [])

    def test_declaration(self):
        tokens = tokenize_string("declare x = 5;")
        self.assertEqual([t.type for t in tokens], [
            TokenType.DECLARE, TokenType.IDENTIFIER, TokenType.ASSIGN,
            TokenType.INTEGER, TokenType.SEMICOLON,
        ])
        self.assertEqual(tokens[1].value, "x")
        self.assertEqual(tokens[3].value, "5")

    def test_keywords_and_aliases(self):
        self.assertEqual(token_types("declare venti"), [TokenType.DECLARE, TokenType.DECLARE])
        self.assertEqual(token_types("print printventi"), [TokenType.PRINT, TokenType.PRINT])
        self.assertEqual(token_types("async await"), [TokenType.ASYNC, TokenType.AWAIT])

    def test_reserved_keywords(self):
        tokens = tokenize_string("if else for while int float bool if_venti while_venti")
        self.assertEqual([t.type for t in tokens], [
            TokenType.IF, TokenType.ELSE, TokenType.FOR, TokenType.WHILE,
            TokenType.INT_TYPE, TokenType.FLOAT_TYPE, TokenType.BOOL_TYPE,
            TokenType.IF, TokenType.WHILE,
        ])
        self.assertTrue(all(t.is_reserved for t in tokens))

    def test_keyword_prefix_is_identifier(self):
        tokens = tokenize_string("declared printer iffy _print")
        self.assertTrue(all(t.type == TokenType.IDENTIFIER for t in tokens))
        self.assertEqual([t.value for t in tokens], ["declared", "printer", "iffy", "_print"])

    def test_booleans(self):
        tokens = tokenize_string("true false")
        self.assertEqual([t.type for t in tokens], [TokenType.BOOLEAN, TokenType.BOOLEAN])
        self.assertEqual([t.value for t in tokens], ["true", "false"])

    def test_numbers(self):
        tokens = tokenize_string("42 3.14 007")
        self.assertEqual([t.type for t in tokens],
                         [TokenType.INTEGER, TokenType.FLOAT, TokenType.INTEGER])
        # Raw text is kept; conversion happens in the parser
        self.assertEqual([t.value for t in tokens], ["42", "3.14", "007"])

    def test_string_literal(self):
        tokens = tokenize_string('print "hello world";')
        self.assertEqual(tokens[1].type, TokenType.STRING)
        self.assertEqual(tokens[1].lexeme, '"hello world"')
        self.assertEqual(tokens[1].value, "hello world")

    def test_string_has_no_escapes(self):
        tokens = tokenize_string(r'"a\n"')
        self.assertEqual(tokens[0].value, "a\\n")

    def test_operators_and_delimiters(self):
        self.assertEqual(token_types("+-*/=(){}[],;"), [
            TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY, TokenType.DIVIDE,
            TokenType.ASSIGN, TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
            TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE, TokenType.LEFT_BRACKET,
            TokenType.RIGHT_BRACKET, TokenType.COMMA, TokenType.SEMICOLON,
        ])

    def test_lexemes_reconstruct_source(self):
        source = 'declare xs = [1, 2.5, "a b"];\nasync go { print xs; }\ngo();'
        lexemes = "".join(t.lexeme for t in tokenize_string(source))
        self.assertEqual(lexemes, "".join(source.split()).replace('"ab"', '"a b"'))

    def test_source_locations(self):
        tokens = tokenize_string("declare x\n  = 5;", "prog.vt")
        self.assertEqual((tokens[0].location.line, tokens[0].location.column), (1, 1))
        self.assertEqual((tokens[1].location.line, tokens[1].location.column), (1, 9))
        self.assertEqual((tokens[2].location.line, tokens[2].location.column), (2, 3))
        self.assertEqual(tokens[2].location.offset, 12)
        self.assertEqual(str(tokens[3].location), "prog.vt:2:5")


class TestLexerLaziness(unittest.TestCase):
    """The token stream is pulled one token at a time."""

    def test_next_token_until_exhausted(self):
        lexer = Lexer("a b")
        self.assertEqual(lexer.next_token().lexeme, "a")
        self.assertEqual(lexer.next_token().lexeme, "b")
        self.assertIsNone(lexer.next_token())
        self.assertIsNone(lexer.next_token())

    def test_tokens_before_error_are_produced(self):
        lexer = Lexer("declare x = 5 @ 6;")
        produced = [lexer.next_token() for _ in range(4)]
        self.assertEqual(produced[-1].value, "5")
        with self.assertRaises(LexError):
            lexer.next_token()

    def test_not_restartable_after_error(self):
        lexer = Lexer("x $ y")
        self.assertEqual(lexer.next_token().lexeme, "x")
        with self.assertRaises(LexError) as first:
            lexer.next_token()
        with self.assertRaises(LexError) as second:
            lexer.next_token()
        self.assertIs(first.exception, second.exception)


class TestLexerErrors(unittest.TestCase):
    """Lexical failures."""

    def test_invalid_character(self):
        with self.assertRaises(LexError) as ctx:
            tokenize_string("declare x = 5 % 2;")
        error = ctx.exception
        self.assertEqual(error.slice, "%")
        self.assertEqual(error.code, "L001")
        self.assertEqual(error.location.column, 15)
        self.assertIsInstance(error, VentiSyntaxError)
        self.assertTrue(str(error).startswith("Syntax Error: "))

    def test_unterminated_string(self):
        with self.assertRaises(LexError) as ctx:
            tokenize_string('print "oops;')
        self.assertEqual(ctx.exception.code, "L002")
        self.assertEqual(ctx.exception.slice, '"oops;')

    def test_trailing_dot_is_not_a_float(self):
        with self.assertRaises(LexError) as ctx:
            tokenize_string("1.")
        self.assertEqual(ctx.exception.slice, ".")

    def test_non_ascii_letter(self):
        with self.assertRaises(LexError):
            tokenize_string("declare é = 1;")

    def test_non_ascii_digit(self):
        with self.assertRaises(LexError):
            tokenize_string("٣")


class TestTokenizeFile(unittest.TestCase):
    """File convenience helper."""

    def test_tokenize_file_uses_path_as_filename(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "prog.vt")
            with open(path, "w", encoding="utf-8") as f:
                f.write("print 1;")
            tokens = tokenize_file(path)
        self.assertEqual(len(tokens), 3)
        self.assertEqual(tokens[0].location.filename, path)


if __name__ == '__main__':
    unittest.main()
