"""
Venti Parser Package

Implements a recursive descent parser with one token of lookahead for the
Venti language. Produces an AST whose nodes carry source locations.

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse_source
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser", "parse_source",

    # AST nodes
    "ASTNode", "Expression", "Statement", "Program", "BinOp",
    "NumberLiteral", "FloatLiteral", "BooleanLiteral", "StringLiteral",
    "Identifier", "BinaryOp", "ArrayLiteral", "AsyncWrap", "AwaitUnwrap",
    "VariableDeclaration", "VariableAssignment", "Print", "FunctionCall",
    "AsyncFunctionDeclaration", "format_ast",

    # Error handling
    "ParseError",
]
