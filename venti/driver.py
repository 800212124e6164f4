"""
Compilation driver.

Runs the stages in order (lex, parse, lower) and writes the resulting
LLVM IR to the output artifact. The first error from any stage aborts the
run; the artifact is replaced only after a complete, successful compile.

Author: xwest
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import List, Optional

from .config import CompilerConfig
from .errors import VentiIOError
from .lexer.lexer import Lexer
from .lexer.tokens import Token
from .parser.ast_nodes import Program, format_ast
from .parser.parser import Parser
from .codegen.codegen import CodeGen

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    """Everything one successful compile produced."""
    tokens: List[Token]
    program: Program
    ir: str


def run_pipeline(source: str, filename: str = "<string>",
                 config: Optional[CompilerConfig] = None) -> CompilationResult:
    """
    Lex, parse and lower a source string.

    Raises:
        LexError, ParseError, CodegenError: From the failing stage
    """
    config = config or CompilerConfig()

    tokens = Lexer(source, filename).tokenize()
    if logger.isEnabledFor(logging.DEBUG):
        for token in tokens:
            logger.debug("  %s", token)

    program = Parser(tokens).parse()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("AST:\n%s", format_ast(program))

    ir = CodeGen(config).compile(program)
    return CompilationResult(tokens=tokens, program=program, ir=ir)


def compile_source(source: str, filename: str = "<string>",
                   config: Optional[CompilerConfig] = None) -> str:
    """Compile source text and return the LLVM IR module as text."""
    return run_pipeline(source, filename, config).ir


def read_source(path: str) -> str:
    """Read a source file, raising VentiIOError on failure."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise VentiIOError(f"cannot read '{path}': {e}", code="IO001") from e


def write_artifact(path: str, text: str):
    """
    Atomically replace ``path`` with ``text``.

    The text goes to a temporary file in the same directory which is then
    renamed over the target, so readers never observe a partial artifact.
    """
    directory = os.path.dirname(os.path.abspath(path))
    temp_path = None
    try:
        fd, temp_path = tempfile.mkstemp(prefix=".venti-", suffix=".ll.tmp", dir=directory)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(text)
        os.replace(temp_path, path)
    except OSError as e:
        if temp_path is not None and os.path.exists(temp_path):
            os.unlink(temp_path)
        raise VentiIOError(f"cannot write '{path}': {e}", code="IO002") from e

    logger.info("Wrote %d bytes of LLVM IR to %s", len(text), path)


def compile_file(path: str, config: Optional[CompilerConfig] = None) -> str:
    """
    Compile a source file, write the IR to ``config.output_path`` and return it.

    Raises:
        VentiIOError: If the source cannot be read or the artifact written
        VentiSyntaxError, CodegenError: If compilation fails (nothing is written)
    """
    config = config or CompilerConfig()
    source = read_source(path)
    result = run_pipeline(source, path, config)
    write_artifact(config.output_path, result.ir)
    return result.ir
