"""
Abstract Syntax Tree node definitions for Venti.

The tree is strict: every node owns its children exclusively and there
are no parent links, so a Program can be dropped top-down. Every node
carries an optional source location that is ignored by equality, which
lets tests compare trees built by hand against parser output.

Author: xwest
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..lexer.tokens import SourceLocation, TokenType


class BinOp(Enum):
    """Binary arithmetic operators."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @classmethod
    def from_token_type(cls, token_type: TokenType) -> 'BinOp':
        return _TOKEN_TO_BINOP[token_type]


_TOKEN_TO_BINOP = {
    TokenType.PLUS: BinOp.ADD,
    TokenType.MINUS: BinOp.SUBTRACT,
    TokenType.MULTIPLY: BinOp.MULTIPLY,
    TokenType.DIVIDE: BinOp.DIVIDE,
}


class ASTNode:
    """Base class for all AST nodes."""
    location: Optional[SourceLocation]


class Expression(ASTNode):
    """Base class for expressions."""


class Statement(ASTNode):
    """Base class for statements."""


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class NumberLiteral(Expression):
    """Signed 64-bit integer literal."""
    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class FloatLiteral(Expression):
    """64-bit floating point literal."""
    value: float
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class BooleanLiteral(Expression):
    value: bool
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class StringLiteral(Expression):
    value: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class Identifier(Expression):
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class BinaryOp(Expression):
    """Binary arithmetic expression: ``left <op> right``."""
    left: Expression
    operator: BinOp
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class ArrayLiteral(Expression):
    """Fixed-length array literal: ``[a, b, c]``."""
    elements: List[Expression]
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class AsyncWrap(Expression):
    """``async expr`` - marks a value as asynchronous. Purely syntactic."""
    expression: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class AwaitUnwrap(Expression):
    """``await expr`` - evaluates to the inner value. No suspension happens."""
    expression: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


# ============================================================================
# Statements
# ============================================================================

@dataclass
class VariableDeclaration(Statement):
    """``declare name = initializer;``"""
    name: str
    initializer: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class VariableAssignment(Statement):
    """``name value;`` - rebinds an existing global."""
    name: str
    value: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class Print(Statement):
    """``print value;``"""
    value: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class FunctionCall(Statement):
    """``name(arg, ...)``"""
    name: str
    arguments: List[Expression]
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class AsyncFunctionDeclaration(Statement):
    """``async name { body }`` - an ordinary zero-argument procedure."""
    name: str
    body: List[Statement]
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class Program(ASTNode):
    """Root node: the ordered list of top-level statements."""
    statements: List[Statement]
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self):
        return iter(self.statements)


def format_ast(node: ASTNode, indent: int = 0) -> str:
    """Render an AST as an indented tree, one node per line."""
    pad = "  " * indent

    if isinstance(node, Program):
        lines = [f"{pad}Program"]
        lines.extend(format_ast(stmt, indent + 1) for stmt in node.statements)
        return "\n".join(lines)

    if isinstance(node, (NumberLiteral, FloatLiteral, BooleanLiteral, StringLiteral)):
        return f"{pad}{type(node).__name__}({node.value!r})"
    if isinstance(node, Identifier):
        return f"{pad}Identifier({node.name})"
    if isinstance(node, BinaryOp):
        return "\n".join([
            f"{pad}BinaryOp({node.operator.value})",
            format_ast(node.left, indent + 1),
            format_ast(node.right, indent + 1),
        ])
    if isinstance(node, ArrayLiteral):
        lines = [f"{pad}ArrayLiteral[{len(node.elements)}]"]
        lines.extend(format_ast(element, indent + 1) for element in node.elements)
        return "\n".join(lines)
    if isinstance(node, (AsyncWrap, AwaitUnwrap)):
        return f"{pad}{type(node).__name__}\n{format_ast(node.expression, indent + 1)}"

    if isinstance(node, VariableDeclaration):
        return f"{pad}VariableDeclaration({node.name})\n{format_ast(node.initializer, indent + 1)}"
    if isinstance(node, VariableAssignment):
        return f"{pad}VariableAssignment({node.name})\n{format_ast(node.value, indent + 1)}"
    if isinstance(node, Print):
        return f"{pad}Print\n{format_ast(node.value, indent + 1)}"
    if isinstance(node, FunctionCall):
        lines = [f"{pad}FunctionCall({node.name})"]
        lines.extend(format_ast(arg, indent + 1) for arg in node.arguments)
        return "\n".join(lines)
    if isinstance(node, AsyncFunctionDeclaration):
        lines = [f"{pad}AsyncFunctionDeclaration({node.name})"]
        lines.extend(format_ast(stmt, indent + 1) for stmt in node.body)
        return "\n".join(lines)

    raise TypeError(f"not an AST node: {node!r}")
