"""
Venti Lexer - turns source text into tokens

Tokens are produced lazily, one per call, so the parser can pull them as
it goes. The rules are small enough that plain character scanning plus a
couple of precompiled regexes for the literals covers everything.

xwest
"""

import re
import logging
from typing import Iterator, List, Optional

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, BOOLEANS, OPERATORS, WHITESPACE
from .errors import LexError, create_invalid_character_error, create_unterminated_string_error

logger = logging.getLogger(__name__)


class Lexer:
    """
    Venti lexical analyzer.

    Converts source text into a finite, non-restartable stream of tokens.
    Whitespace is skipped. The first unrecognized character stops the
    stream for good: the error is raised and raised again on every later
    call.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.error: Optional[LexError] = None

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""
        # Float before integer so "3.14" is not split into "3" "." "14"
        self.float_pattern = re.compile(r'[0-9]+\.[0-9]+')
        self.integer_pattern = re.compile(r'[0-9]+')
        self.identifier_pattern = re.compile(r'[a-zA-Z_][a-zA-Z0-9_]*')

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def next_token(self) -> Optional[Token]:
        """
        Produce the next token.

        Returns:
            The next token, or None once the input is exhausted

        Raises:
            LexError: If the input at the current position matches no rule
        """
        if self.error is not None:
            raise self.error

        self._skip_whitespace()
        if self.pos >= len(self.source):
            return None

        try:
            return self._scan_token()
        except LexError as e:
            self.error = e
            raise

    def tokenize(self) -> List[Token]:
        """
        Tokenize the rest of the source code.

        Returns:
            List of tokens (no end-of-file marker)
        """
        tokens = list(self)
        logger.debug("Lexed %d tokens from %s", len(tokens), self.filename)
        return tokens

    def _scan_token(self) -> Token:
        """Scan one token starting at the current position."""
        start = self._location()
        current_char = self.source[self.pos]

        if '0' <= current_char <= '9':
            return self._tokenize_number(start)

        if current_char.isalpha() or current_char == '_':
            return self._tokenize_identifier_or_keyword(start)

        if current_char == '"':
            return self._tokenize_string(start)

        if current_char in OPERATORS:
            self._advance()
            return Token(OPERATORS[current_char], current_char, None, start)

        raise create_invalid_character_error(current_char, start)

    def _tokenize_number(self, start: SourceLocation) -> Token:
        """Tokenize integer or float literals (longest match wins)."""
        match = self.float_pattern.match(self.source, self.pos)
        token_type = TokenType.FLOAT
        if match is None:
            match = self.integer_pattern.match(self.source, self.pos)
            token_type = TokenType.INTEGER

        lexeme = match.group(0)
        self._advance_by(len(lexeme))
        return Token(token_type, lexeme, lexeme, start)

    def _tokenize_identifier_or_keyword(self, start: SourceLocation) -> Token:
        """Tokenize an identifier, keyword or boolean literal."""
        match = self.identifier_pattern.match(self.source, self.pos)
        if match is None:
            # Letters outside ASCII pass isalpha() but are not identifier chars
            raise create_invalid_character_error(self.source[self.pos], start)

        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        if lexeme in BOOLEANS:
            return Token(TokenType.BOOLEAN, lexeme, lexeme, start)

        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None
        return Token(token_type, lexeme, value, start)

    def _tokenize_string(self, start: SourceLocation) -> Token:
        """Tokenize a string literal. There are no escape sequences."""
        start_pos = self.pos
        end = self.source.find('"', self.pos + 1)
        if end == -1:
            raise create_unterminated_string_error(self.source[start_pos:], start)

        self._advance_by(end + 1 - start_pos)
        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.STRING, lexeme, lexeme[1:-1], start)

    def _skip_whitespace(self):
        """Skip whitespace between tokens."""
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self._advance()

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexError: If lexing fails
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
