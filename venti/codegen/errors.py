"""
Error helpers for the lowering stage.

Author: xwest
"""

from typing import Optional

from ..errors import CodegenError
from ..lexer.tokens import SourceLocation
from .values import ValueType

# Common error codes for categorization
ERROR_CODES = {
    "C001": "Undefined variable",
    "C002": "Undefined function",
    "C003": "Type mismatch",
    "C004": "Wrong number of arguments",
    "C005": "Initializer is not constant-foldable",
    "C006": "Integer division by zero",
    "C007": "Name conflict",
    "C008": "Unsupported construct",
}


def create_undefined_variable_error(name: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        f"undefined variable '{name}'",
        location,
        code="C001",
        help_text=f"Declare it first with 'declare {name} = ...;'"
    )


def create_undefined_function_error(name: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        f"undefined function '{name}'",
        location,
        code="C002",
        help_text=f"Functions must be declared with 'async {name} {{ ... }}' before they are called"
    )


def create_type_mismatch_error(
    context: str,
    expected: ValueType,
    found: ValueType,
    location: Optional[SourceLocation]
) -> CodegenError:
    return CodegenError(
        f"type mismatch in {context}: expected {expected}, found {found}",
        location,
        code="C003"
    )


def create_operand_error(left: ValueType, right: ValueType, location: Optional[SourceLocation]) -> CodegenError:
    """Arithmetic needs two operands of the same numeric kind."""
    return CodegenError(
        f"type mismatch in arithmetic: cannot combine {left} and {right}",
        location,
        code="C003",
        help_text="Both operands must be int, or both must be float"
    )


def create_arity_error(name: str, expected: int, found: int, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        f"function '{name}' takes {expected} argument(s) but {found} were given",
        location,
        code="C004"
    )


def create_not_constant_error(name: str, reason: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        f"initializer of '{name}' is not constant-foldable: {reason}",
        location,
        code="C005",
        help_text="Global initializers may only use literals, arithmetic and previously declared variables"
    )


def create_division_by_zero_error(location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError("integer division by zero", location, code="C006")


def create_name_conflict_error(name: str, reason: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(f"cannot define '{name}': {reason}", location, code="C007")


def create_unsupported_error(what: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(f"unsupported {what}", location, code="C008")
