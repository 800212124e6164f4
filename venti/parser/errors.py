"""
Error handling for the Venti parser.

The parser does not recover: the first ParseError ends the parse and no
partial statement list is returned.

Author: xwest
"""

from typing import Optional

from ..errors import VentiSyntaxError
from ..lexer.tokens import Token, TokenType, SourceLocation


class ParseError(VentiSyntaxError):
    """
    Raised when the parser meets a token it cannot use.

    ``token`` is the offending token (None at end of input) and
    ``expected`` describes what the parser was looking for.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation],
        token: Optional[Token] = None,
        expected: Optional[str] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message, location, code=code, help_text=help_text)
        self.token = token
        self.expected = expected


# Common error codes for categorization
ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Unexpected end of input",
    "P003": "Invalid numeric literal",
    "P004": "Reserved keyword",
}

TOKEN_SUGGESTIONS = {
    TokenType.SEMICOLON: "Add a semicolon ';' to end the statement",
    TokenType.RIGHT_PAREN: "Add a closing parenthesis ')'",
    TokenType.RIGHT_BRACKET: "Add a closing bracket ']'",
    TokenType.RIGHT_BRACE: "Add a closing brace '}'",
    TokenType.LEFT_BRACE: "Add an opening brace '{' to start the function body",
    TokenType.ASSIGN: "Add an assignment operator '='",
}


def describe_token(token: Optional[Token]) -> str:
    """Human-readable name of a token for error messages."""
    if token is None:
        return "end of input"
    if token.type == TokenType.IDENTIFIER:
        return f"identifier '{token.lexeme}'"
    if token.is_literal:
        return f"literal {token.lexeme}"
    if token.is_keyword:
        return f"keyword '{token.lexeme}'"
    return f"'{token.lexeme}'"


def create_unexpected_token_error(
    expected: str,
    found: Optional[Token],
    context: str,
    end_location: Optional[SourceLocation] = None,
    expected_type: Optional[TokenType] = None
) -> ParseError:
    """
    Create an error for a token that does not fit the grammar.

    Args:
        expected: What the parser wanted, e.g. "';'" or "expression"
        found: The token actually seen, None at end of input
        context: The construct being parsed, e.g. "variable declaration"
        end_location: Where input ended, used when found is None
        expected_type: Token type of the expectation, for suggestions
    """
    if found is None:
        return ParseError(
            message=f"Expected {expected} in {context}, found end of input",
            location=end_location,
            token=None,
            expected=expected,
            code="P002",
            help_text=TOKEN_SUGGESTIONS.get(expected_type)
        )

    help_text = TOKEN_SUGGESTIONS.get(expected_type)
    code = "P001"
    if found.is_reserved:
        code = "P004"
        help_text = f"'{found.lexeme}' is reserved and cannot be used yet."

    return ParseError(
        message=f"Expected {expected} in {context}, found {describe_token(found)}",
        location=found.location,
        token=found,
        expected=expected,
        code=code,
        help_text=help_text
    )


def create_invalid_number_error(token: Token, reason: str) -> ParseError:
    """Create an error for a numeric literal that cannot be represented."""
    return ParseError(
        message=f"Invalid number {token.lexeme}: {reason}",
        location=token.location,
        token=token,
        code="P003"
    )
