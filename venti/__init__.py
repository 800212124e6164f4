"""
Venti Compiler Package

A small ahead-of-time compiler for the Venti language. Source text is
lexed, parsed into an AST and lowered to a textual LLVM IR module.

Architecture:
    venti/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Syntax analysis and AST generation
    ├── codegen/         # Lowering to LLVM IR (llvmlite)
    ├── driver.py        # Stage orchestration and artifact output
    └── cli.py           # Command-line interface

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer
from .parser import Parser, parse_source
from .codegen import CodeGen
from .config import CompilerConfig
from .driver import compile_source, compile_file
from .errors import (
    VentiError, VentiSyntaxError, VentiTypeError, VentiRuntimeError,
    CodegenError, VentiIOError,
)

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "CodeGen",
    "CompilerConfig",

    # Pipeline
    "parse_source",
    "compile_source",
    "compile_file",

    # Errors
    "VentiError",
    "VentiSyntaxError",
    "VentiTypeError",
    "VentiRuntimeError",
    "CodegenError",
    "VentiIOError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
