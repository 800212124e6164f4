"""
Venti Recursive Descent Parser

Consumes the token stream with exactly one token of lookahead and builds
the AST. Expressions use precedence climbing over two levels:

    expression := term
    term       := factor (('+' | '-') factor)*
    factor     := primary (('*' | '/') primary)*
    primary    := number | float | string | boolean | identifier
                | '(' expression ')' | '[' elements ']'
                | 'await' expression | 'async' expression

Both binary levels are left-associative. There is no error recovery: the
first unmet expectation raises ParseError.

Author: xwest
"""

import logging
from typing import Iterable, Iterator, List, Optional

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    BinOp, Expression, Statement, Program,
    NumberLiteral, FloatLiteral, BooleanLiteral, StringLiteral, Identifier,
    BinaryOp, ArrayLiteral, AsyncWrap, AwaitUnwrap,
    VariableDeclaration, VariableAssignment, Print, FunctionCall,
    AsyncFunctionDeclaration,
)
from .errors import ParseError, create_unexpected_token_error, create_invalid_number_error

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

TERM_OPERATORS = (TokenType.PLUS, TokenType.MINUS)
FACTOR_OPERATORS = (TokenType.MULTIPLY, TokenType.DIVIDE)


class Parser:
    """
    Venti parser.

    Accepts any iterable of tokens - a list, or a live Lexer - and pulls
    tokens from it only as far as the grammar requires.
    """

    def __init__(self, tokens: Iterable[Token]):
        """
        Initialize parser with a token stream.

        Args:
            tokens: Tokens from the lexer
        """
        self._tokens: Iterator[Token] = iter(tokens)
        self._lookahead: Optional[Token] = None
        self._has_lookahead = False
        self._previous: Optional[Token] = None

    def parse(self) -> Program:
        """
        Parse the whole token stream into a Program.

        Raises:
            ParseError: On the first syntax error
            LexError: If the underlying lexer fails while being pulled
        """
        start = self._peek()
        statements: List[Statement] = []

        while self._peek() is not None:
            statements.append(self._parse_statement("program"))

        logger.debug("Parsed %d top-level statements", len(statements))
        return Program(statements, location=start.location if start else None)

    def parse_expression(self) -> Expression:
        """Parse a single expression, leaving any following tokens unread."""
        return self._parse_term()

    # ========================================================================
    # Statements
    # ========================================================================

    def _parse_statement(self, context: str) -> Statement:
        token = self._peek()

        if self._check(TokenType.DECLARE):
            return self._parse_variable_declaration()
        if self._check(TokenType.PRINT):
            return self._parse_print()
        if self._check(TokenType.IDENTIFIER):
            return self._parse_identifier_statement()
        if self._check(TokenType.ASYNC):
            return self._parse_async_function()

        raise self._error("statement", token, context)

    def _parse_variable_declaration(self) -> VariableDeclaration:
        """declare NAME = expression ;"""
        start = self._advance()
        context = "variable declaration"

        name_token = self._consume(TokenType.IDENTIFIER, "identifier", context)
        self._consume(TokenType.ASSIGN, "'='", context)
        initializer = self.parse_expression()
        self._consume(TokenType.SEMICOLON, "';'", context)

        return VariableDeclaration(name_token.lexeme, initializer, location=start.location)

    def _parse_print(self) -> Print:
        """print expression ;"""
        start = self._advance()
        value = self.parse_expression()
        self._consume(TokenType.SEMICOLON, "';'", "print statement")
        return Print(value, location=start.location)

    def _parse_identifier_statement(self) -> Statement:
        """
        NAME ( args ) [;]   -> FunctionCall
        NAME ;              -> VariableAssignment re-using the current value
        NAME expression ;   -> VariableAssignment
        """
        name_token = self._advance()
        name = name_token.lexeme

        if self._match(TokenType.LEFT_PAREN):
            arguments = self._parse_expression_list(
                TokenType.RIGHT_PAREN, "')'", f"call to '{name}'"
            )
            self._match(TokenType.SEMICOLON)
            return FunctionCall(name, arguments, location=name_token.location)

        if self._match(TokenType.SEMICOLON):
            value = Identifier(name, location=name_token.location)
            return VariableAssignment(name, value, location=name_token.location)

        context = f"assignment to '{name}'"
        if not self._starts_expression():
            raise self._error("'(', ';' or expression", self._peek(), context)
        value = self.parse_expression()
        self._consume(TokenType.SEMICOLON, "';'", context)
        return VariableAssignment(name, value, location=name_token.location)

    def _parse_async_function(self) -> AsyncFunctionDeclaration:
        """async NAME { statement* }"""
        start = self._advance()
        context = "async function declaration"

        name_token = self._consume(TokenType.IDENTIFIER, "function name", context)
        self._consume(TokenType.LEFT_BRACE, "'{'", context)

        body: List[Statement] = []
        body_context = f"body of '{name_token.lexeme}'"
        while not self._check(TokenType.RIGHT_BRACE):
            if self._peek() is None:
                raise self._error("'}'", None, body_context, TokenType.RIGHT_BRACE)
            body.append(self._parse_statement(body_context))
        self._advance()

        return AsyncFunctionDeclaration(name_token.lexeme, body, location=start.location)

    # ========================================================================
    # Expressions
    # ========================================================================

    def _parse_term(self) -> Expression:
        left = self._parse_factor()
        while self._peek() is not None and self._peek().type in TERM_OPERATORS:
            op_token = self._advance()
            right = self._parse_factor()
            left = BinaryOp(left, BinOp.from_token_type(op_token.type), right,
                            location=op_token.location)
        return left

    def _parse_factor(self) -> Expression:
        left = self._parse_primary()
        while self._peek() is not None and self._peek().type in FACTOR_OPERATORS:
            op_token = self._advance()
            right = self._parse_primary()
            left = BinaryOp(left, BinOp.from_token_type(op_token.type), right,
                            location=op_token.location)
        return left

    def _parse_primary(self) -> Expression:
        token = self._peek()
        if token is None:
            raise self._error("expression", None, "expression")

        if token.type == TokenType.INTEGER:
            self._advance()
            return NumberLiteral(self._parse_integer_value(token), location=token.location)

        if token.type == TokenType.FLOAT:
            self._advance()
            return FloatLiteral(float(token.value), location=token.location)

        if token.type == TokenType.STRING:
            self._advance()
            return StringLiteral(token.value, location=token.location)

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return BooleanLiteral(token.value == "true", location=token.location)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(token.lexeme, location=token.location)

        if token.type == TokenType.LEFT_PAREN:
            self._advance()
            inner = self.parse_expression()
            self._consume(TokenType.RIGHT_PAREN, "')'", "parenthesized expression")
            return inner

        if token.type == TokenType.LEFT_BRACKET:
            self._advance()
            elements = self._parse_expression_list(
                TokenType.RIGHT_BRACKET, "']'", "array literal"
            )
            return ArrayLiteral(elements, location=token.location)

        if token.type == TokenType.AWAIT:
            self._advance()
            return AwaitUnwrap(self.parse_expression(), location=token.location)

        if token.type == TokenType.ASYNC:
            self._advance()
            return AsyncWrap(self.parse_expression(), location=token.location)

        raise self._error("expression", token, "expression")

    def _parse_integer_value(self, token: Token) -> int:
        value = int(token.value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise create_invalid_number_error(token, "does not fit in a signed 64-bit integer")
        return value

    def _parse_expression_list(self, closing: TokenType, closing_text: str, context: str) -> List[Expression]:
        """
        Parse comma-separated expressions up to and including ``closing``.

        A trailing comma is allowed. After each element only ',' or the
        closing token is accepted; anything else is left unconsumed and
        reported.
        """
        items: List[Expression] = []
        while not self._check(closing):
            items.append(self.parse_expression())
            if self._match(TokenType.COMMA):
                continue
            if not self._check(closing):
                raise self._error(f"',' or {closing_text}", self._peek(), context, closing)
        self._advance()
        return items

    def _starts_expression(self) -> bool:
        token = self._peek()
        return token is not None and token.type in EXPRESSION_STARTS

    # ========================================================================
    # Token stream helpers
    # ========================================================================

    def _peek(self) -> Optional[Token]:
        """Look at the next token without consuming it (None at end)."""
        if not self._has_lookahead:
            self._lookahead = next(self._tokens, None)
            self._has_lookahead = True
        return self._lookahead

    def _advance(self) -> Optional[Token]:
        """Consume and return the next token."""
        token = self._peek()
        self._has_lookahead = False
        self._lookahead = None
        if token is not None:
            self._previous = token
        return token

    def _check(self, token_type: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type == token_type

    def _match(self, token_type: TokenType) -> Optional[Token]:
        """Consume the next token if it has the given type."""
        if self._check(token_type):
            return self._advance()
        return None

    def _consume(self, token_type: TokenType, expected: str, context: str) -> Token:
        """Consume a token of the given type or raise ParseError."""
        if self._check(token_type):
            return self._advance()
        raise self._error(expected, self._peek(), context, token_type)

    def _error(
        self,
        expected: str,
        found: Optional[Token],
        context: str,
        expected_type: Optional[TokenType] = None
    ) -> ParseError:
        return create_unexpected_token_error(
            expected, found, context,
            end_location=self._end_location(),
            expected_type=expected_type
        )

    def _end_location(self) -> Optional[SourceLocation]:
        if self._previous is None:
            return None
        loc = self._previous.location
        return SourceLocation(loc.filename, loc.line, loc.column + len(self._previous.lexeme),
                              loc.offset + len(self._previous.lexeme))


EXPRESSION_STARTS = frozenset({
    TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING, TokenType.BOOLEAN,
    TokenType.IDENTIFIER, TokenType.LEFT_PAREN, TokenType.LEFT_BRACKET,
    TokenType.AWAIT, TokenType.ASYNC,
})


def parse_source(source: str, filename: str = "<string>") -> Program:
    """
    Convenience function to lex and parse a source string.

    Raises:
        LexError: If lexing fails
        ParseError: If parsing fails
    """
    return Parser(Lexer(source, filename)).parse()
