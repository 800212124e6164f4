"""
Venti Code Generation Package

Lowers the Venti AST to a textual LLVM IR module using llvmlite.

Author: xwest
"""

from .codegen import CodeGen, CodeGenContext, GlobalBinding, compile_program
from .values import ValueKind, ValueType, Constant, Value

__all__ = [
    "CodeGen",
    "CodeGenContext",
    "GlobalBinding",
    "compile_program",
    "ValueKind",
    "ValueType",
    "Constant",
    "Value",
]
