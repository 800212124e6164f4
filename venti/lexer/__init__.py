"""
Venti Lexer Package

Implements the lexical analyzer (tokenizer) for the Venti language.

Key Features:
- Lazy, one-token-at-a-time scanning
- Longest-match keyword/identifier disambiguation
- Source location tracking for diagnostics

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import LexError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexError",
    "tokenize_string",
    "tokenize_file",
]
