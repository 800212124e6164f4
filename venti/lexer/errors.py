"""
Error handling for the Venti lexer.

Author: xwest
"""

from typing import Optional

from .tokens import SourceLocation
from ..errors import VentiSyntaxError


class LexError(VentiSyntaxError):
    """
    Raised when the lexer finds text that matches no token rule.

    ``slice`` holds the offending source text.
    """

    def __init__(
        self,
        message: str,
        slice: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message, location, code=code, help_text=help_text)
        self.slice = slice


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
}


def create_invalid_character_error(char: str, location: SourceLocation) -> LexError:
    """Create an error for an invalid character."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in Venti source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexError(
        message=f"Invalid character: {char!r}",
        slice=char,
        location=location,
        code="L001",
        help_text=help_text
    )


def create_unterminated_string_error(text: str, location: SourceLocation) -> LexError:
    """Create an error for an unterminated string literal."""
    return LexError(
        message="Unterminated string literal",
        slice=text,
        location=location,
        code="L002",
        help_text='String literals must be closed with a matching " quote.'
    )
