"""
Token definitions for the Venti lexer.

This module defines all token types supported by Venti:
- Keywords (active and reserved-for-later)
- Literals (integers, floats, strings, booleans)
- Identifiers
- Operators and delimiters

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """
    Enumeration of all token types in Venti.

    The set is closed: the lexer recognizes every member, while the parser
    only accepts the subset the grammar currently supports.
    """

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER = auto()                # 42
    FLOAT = auto()                  # 3.14
    STRING = auto()                 # "hello"
    BOOLEAN = auto()                # true, false

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # variable_name

    DECLARE = auto()                # declare (alias: venti)
    PRINT = auto()                  # print (alias: printventi)
    ASYNC = auto()                  # async
    AWAIT = auto()                  # await

    # Reserved control flow keywords (no grammar yet)
    IF = auto()                     # if (alias: if_venti)
    ELSE = auto()                   # else (alias: else_venti)
    FOR = auto()                    # for (alias: for_venti)
    WHILE = auto()                  # while (alias: while_venti)

    # Reserved type names
    INT_TYPE = auto()               # int
    FLOAT_TYPE = auto()             # float
    BOOL_TYPE = auto()              # bool

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    ASSIGN = auto()                 # =

    # ========================================================================
    # Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    COMMA = auto()                  # ,
    SEMICOLON = auto()              # ;


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Venti language.

    ``lexeme`` is the exact source slice. ``value`` is the raw textual
    payload (identifier name, digits, string contents without the quotes,
    ``"true"``/``"false"``); turning it into a number or a bool is left to
    the parser.
    """
    type: TokenType
    lexeme: str
    value: Optional[str]
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERALS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword (active or reserved)."""
        return self.type in KEYWORD_TYPES

    @property
    def is_reserved(self) -> bool:
        """Check if this token is a keyword the grammar does not use yet."""
        return self.type in RESERVED_KEYWORDS


# Lookup tables used by the lexer for keyword/operator recognition

KEYWORDS = {
    "declare": TokenType.DECLARE,
    "print": TokenType.PRINT,
    "async": TokenType.ASYNC,
    "await": TokenType.AWAIT,

    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "while": TokenType.WHILE,

    "int": TokenType.INT_TYPE,
    "float": TokenType.FLOAT_TYPE,
    "bool": TokenType.BOOL_TYPE,

    # Legacy spellings
    "venti": TokenType.DECLARE,
    "printventi": TokenType.PRINT,
    "if_venti": TokenType.IF,
    "else_venti": TokenType.ELSE,
    "for_venti": TokenType.FOR,
    "while_venti": TokenType.WHILE,
}

BOOLEANS = {"true", "false"}

OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "=": TokenType.ASSIGN,

    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
}

LITERALS = frozenset({
    TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING, TokenType.BOOLEAN,
})

KEYWORD_TYPES = frozenset(KEYWORDS.values())

RESERVED_KEYWORDS = frozenset({
    TokenType.IF, TokenType.ELSE, TokenType.FOR, TokenType.WHILE,
    TokenType.INT_TYPE, TokenType.FLOAT_TYPE, TokenType.BOOL_TYPE,
})

# Characters skipped between tokens
WHITESPACE = " \t\n\f\r"
