"""
Value kinds and compile-time constants for the lowering stage.

Every lowered expression has a ValueType: one of the scalar kinds, or a
fixed-length array of one scalar kind. Constant folding works on Constant
records so global initializers can be computed without emitting code.

Author: xwest
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import llvmlite.ir as ll

from ..parser.ast_nodes import BinOp

I1 = ll.IntType(1)
I8 = ll.IntType(8)
I32 = ll.IntType(32)
I64 = ll.IntType(64)
F64 = ll.DoubleType()
I8_PTR = I8.as_pointer()
VOID = ll.VoidType()

INT64_MIN = -(2 ** 63)


class ValueKind(Enum):
    """Kinds of values the language can produce."""
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    ARRAY = "array"


SCALAR_LLVM_TYPES = {
    ValueKind.INT: I64,
    ValueKind.FLOAT: F64,
    ValueKind.BOOL: I1,
    ValueKind.STRING: I8_PTR,
}

NUMERIC_KINDS = frozenset({ValueKind.INT, ValueKind.FLOAT})


@dataclass(frozen=True)
class ValueType:
    """A scalar kind, or an array of ``length`` elements of kind ``element``."""
    kind: ValueKind
    element: Optional[ValueKind] = None
    length: int = 0

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    @property
    def is_array(self) -> bool:
        return self.kind == ValueKind.ARRAY

    def llvm_type(self) -> ll.Type:
        if self.is_array:
            return ll.ArrayType(SCALAR_LLVM_TYPES[self.element], self.length)
        return SCALAR_LLVM_TYPES[self.kind]

    def __str__(self) -> str:
        if self.is_array:
            return f"[{self.element.value} x {self.length}]"
        return self.kind.value


INT = ValueType(ValueKind.INT)
FLOAT = ValueType(ValueKind.FLOAT)
BOOL = ValueType(ValueKind.BOOL)
STRING = ValueType(ValueKind.STRING)


def array_of(element: ValueKind, length: int) -> ValueType:
    return ValueType(ValueKind.ARRAY, element, length)


@dataclass(frozen=True)
class Constant:
    """
    A value fully known at lowering time.

    ``value`` is an int, float, bool or str for scalars and a tuple of
    element Constants for arrays.
    """
    type: ValueType
    value: Any


@dataclass(frozen=True)
class Value:
    """A lowered runtime value: its type plus the llvmlite value holding it.

    For arrays ``llvm_value`` is a pointer to the first element.
    """
    type: ValueType
    llvm_value: Any


def wrap_int64(value: int) -> int:
    """Two's complement wrap-around to signed 64 bits."""
    return ((value - INT64_MIN) % 2 ** 64) + INT64_MIN


def fold_binary(op: BinOp, left: Constant, right: Constant) -> Constant:
    """
    Fold an arithmetic operation on two constants of the same numeric kind.

    Callers check the operand kinds. Integer results wrap like the i64
    instructions they stand for and integer division truncates toward zero
    (``sdiv``). Integer division by zero raises ZeroDivisionError.
    """
    a, b = left.value, right.value

    if left.type.kind == ValueKind.INT:
        if op == BinOp.ADD:
            result = a + b
        elif op == BinOp.SUBTRACT:
            result = a - b
        elif op == BinOp.MULTIPLY:
            result = a * b
        else:
            if b == 0:
                raise ZeroDivisionError("integer division by zero")
            result = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                result = -result
        return Constant(INT, wrap_int64(result))

    if op == BinOp.ADD:
        result = a + b
    elif op == BinOp.SUBTRACT:
        result = a - b
    elif op == BinOp.MULTIPLY:
        result = a * b
    elif b == 0.0:
        # IEEE 754 semantics, matching fdiv
        if a == 0.0 or math.isnan(a):
            result = math.nan
        else:
            result = math.copysign(math.inf, a) * math.copysign(1.0, b)
    else:
        result = a / b
    return Constant(FLOAT, result)
