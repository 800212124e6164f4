"""
Unit tests for the Venti parser.

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from venti.lexer import Lexer, LexError, TokenType, tokenize_string
from venti.parser import (
    Parser, ParseError, parse_source, format_ast, BinOp,
    NumberLiteral, FloatLiteral, BooleanLiteral, StringLiteral, Identifier,
    BinaryOp, ArrayLiteral, AsyncWrap, AwaitUnwrap,
    VariableDeclaration, VariableAssignment, Print, FunctionCall,
    AsyncFunctionDeclaration,
)


class TestParserStatements(unittest.TestCase):
    """Statement forms."""

    def test_empty_program(self):
        program = parse_source("")
        self.assertEqual(len(program), 0)

    def test_variable_declaration_precedence(self):
        program = parse_source("declare x = 1 + 2 * 3;")
        expected = VariableDeclaration("x", BinaryOp(
            NumberLiteral(1), BinOp.ADD,
            BinaryOp(NumberLiteral(2), BinOp.MULTIPLY, NumberLiteral(3))
        ))
        self.assertEqual(program.statements, [expected])

    def test_declaration_alias(self):
        program = parse_source("venti x = 1;")
        self.assertEqual(program.statements, [VariableDeclaration("x", NumberLiteral(1))])

    def test_print_string(self):
        program = parse_source('print "hi";')
        self.assertEqual(program.statements, [Print(StringLiteral("hi"))])

    def test_print_alias(self):
        program = parse_source("printventi true;")
        self.assertEqual(program.statements, [Print(BooleanLiteral(True))])

    def test_bare_identifier_statement(self):
        program = parse_source("declare x = 5; x;")
        self.assertEqual(program.statements[1], VariableAssignment("x", Identifier("x")))

    def test_assignment(self):
        program = parse_source("x x + 1;")
        self.assertEqual(program.statements, [
            VariableAssignment("x", BinaryOp(Identifier("x"), BinOp.ADD, NumberLiteral(1)))
        ])

    def test_function_call(self):
        program = parse_source("run(); go(1, 2.5);")
        self.assertEqual(program.statements, [
            FunctionCall("run", []),
            FunctionCall("go", [NumberLiteral(1), FloatLiteral(2.5)]),
        ])

    def test_function_call_semicolon_is_optional(self):
        program = parse_source("run() print 1;")
        self.assertEqual(program.statements, [FunctionCall("run", []), Print(NumberLiteral(1))])

    def test_async_function(self):
        program = parse_source("async job { print 1; helper(); }")
        self.assertEqual(program.statements, [
            AsyncFunctionDeclaration("job", [Print(NumberLiteral(1)), FunctionCall("helper", [])])
        ])

    def test_nested_async_function(self):
        program = parse_source("async outer { async inner { } inner(); }")
        outer = program.statements[0]
        self.assertIsInstance(outer.body[0], AsyncFunctionDeclaration)
        self.assertEqual(outer.body[0].body, [])

    def test_statement_locations(self):
        program = parse_source("declare x = 1;\n  print x;", "prog.vt")
        self.assertEqual(str(program.statements[0].location), "prog.vt:1:1")
        self.assertEqual(str(program.statements[1].location), "prog.vt:2:3")


class TestParserExpressions(unittest.TestCase):
    """Expression grammar."""

    def parse_expr(self, source: str):
        return Parser(tokenize_string(source)).parse_expression()

    def test_left_associative(self):
        self.assertEqual(self.parse_expr("8 - 4 - 2"), BinaryOp(
            BinaryOp(NumberLiteral(8), BinOp.SUBTRACT, NumberLiteral(4)),
            BinOp.SUBTRACT, NumberLiteral(2)
        ))
        self.assertEqual(self.parse_expr("8 / 4 * 2"), BinaryOp(
            BinaryOp(NumberLiteral(8), BinOp.DIVIDE, NumberLiteral(4)),
            BinOp.MULTIPLY, NumberLiteral(2)
        ))

    def test_parentheses_are_transparent(self):
        self.assertEqual(self.parse_expr("(1 + 2) * 3"), BinaryOp(
            BinaryOp(NumberLiteral(1), BinOp.ADD, NumberLiteral(2)),
            BinOp.MULTIPLY, NumberLiteral(3)
        ))
        self.assertEqual(self.parse_expr("((7))"), NumberLiteral(7))

    def test_array_literal(self):
        self.assertEqual(self.parse_expr("[1, 2, 3]"),
                         ArrayLiteral([NumberLiteral(1), NumberLiteral(2), NumberLiteral(3)]))

    def test_array_trailing_comma_and_empty(self):
        self.assertEqual(self.parse_expr("[1, 2,]"),
                         ArrayLiteral([NumberLiteral(1), NumberLiteral(2)]))
        self.assertEqual(self.parse_expr("[]"), ArrayLiteral([]))

    def test_literals(self):
        self.assertEqual(self.parse_expr("2.5"), FloatLiteral(2.5))
        self.assertEqual(self.parse_expr("false"), BooleanLiteral(False))
        self.assertEqual(self.parse_expr('"s"'), StringLiteral("s"))
        self.assertEqual(self.parse_expr("9223372036854775807"), NumberLiteral(2 ** 63 - 1))

    def test_await_and_async(self):
        self.assertEqual(self.parse_expr("await x"), AwaitUnwrap(Identifier("x")))
        self.assertEqual(self.parse_expr("async 1 + 2"),
                         AsyncWrap(BinaryOp(NumberLiteral(1), BinOp.ADD, NumberLiteral(2))))

    def test_parse_expression_leaves_rest(self):
        parser = Parser(tokenize_string("1 + 2; print"))
        self.assertEqual(parser.parse_expression(),
                         BinaryOp(NumberLiteral(1), BinOp.ADD, NumberLiteral(2)))
        self.assertEqual(parser._peek().type, TokenType.SEMICOLON)


class TestParserErrors(unittest.TestCase):
    """Syntax errors."""

    def assertParseError(self, source: str, code: str = None) -> ParseError:
        with self.assertRaises(ParseError) as ctx:
            parse_source(source)
        if code is not None:
            self.assertEqual(ctx.exception.code, code)
        return ctx.exception

    def test_missing_semicolon(self):
        error = self.assertParseError("declare x = 1", "P002")
        self.assertIn("';'", str(error))
        self.assertIn("end of input", str(error))

    def test_missing_identifier(self):
        error = self.assertParseError("declare = 1;", "P001")
        self.assertEqual(error.token.type, TokenType.ASSIGN)

    def test_missing_closing_bracket_stops_at_offender(self):
        tokens = iter(tokenize_string("print [1, 2 print 3;"))
        parser = Parser(tokens)
        with self.assertRaises(ParseError) as ctx:
            parser.parse()
        self.assertEqual(ctx.exception.token.type, TokenType.PRINT)
        # Only the offending token was read past the array; the rest is untouched
        self.assertEqual([t.lexeme for t in tokens], ["3", ";"])

    def test_unclosed_function_body(self):
        error = self.assertParseError("async f { print 1;", "P002")
        self.assertIn("'}'", str(error))

    def test_reserved_keyword(self):
        error = self.assertParseError("if x;", "P004")
        self.assertIn("reserved", error.diagnostic.help_text)

    def test_reserved_type_name_as_variable(self):
        self.assertParseError("declare int = 1;", "P004")

    def test_integer_out_of_range(self):
        error = self.assertParseError("declare x = 9223372036854775808;", "P003")
        self.assertIn("64-bit", str(error))

    def test_expression_statement_rejected(self):
        self.assertParseError("5;", "P001")

    def test_identifier_followed_by_operator(self):
        self.assertParseError("x = 5;", "P001")

    def test_error_location(self):
        error = self.assertParseError("declare x = ;")
        self.assertEqual(error.location.column, 13)

    def test_lex_error_propagates(self):
        with self.assertRaises(LexError):
            Parser(Lexer("declare x = 1 # 2;")).parse()

    def test_parse_error_before_later_lex_error(self):
        # The parser pulls tokens lazily, so it fails before reaching '#'
        with self.assertRaises(ParseError):
            Parser(Lexer("declare = 1; #")).parse()


class TestFormatAst(unittest.TestCase):
    """AST dump."""

    def test_format_program(self):
        program = parse_source("declare x = 1 + 2; print [x];")
        self.assertEqual(format_ast(program), "\n".join([
            "Program",
            "  VariableDeclaration(x)",
            "    BinaryOp(+)",
            "      NumberLiteral(1)",
            "      NumberLiteral(2)",
            "  Print",
            "    ArrayLiteral[1]",
            "      Identifier(x)",
        ]))


if __name__ == '__main__':
    unittest.main()
