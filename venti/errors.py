"""
Error taxonomy shared by every Venti compiler stage.

Five kinds of failure exist and all of them are terminal: the first error
raised by any stage aborts the remaining stages and no output is written.

    SyntaxError   - malformed source (lexer and parser)
    TypeError     - reserved for semantic type checking
    RuntimeError  - reserved for a future execution engine
    CodegenError  - lowering failures (undefined names, kind mismatches, ...)
    IOError       - reading the source or writing the artifact

Author: xwest
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .lexer.tokens import SourceLocation


@dataclass
class Diagnostic:
    """A rendered compiler message with its source location."""
    message: str
    location: Optional['SourceLocation']
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None

    def __str__(self) -> str:
        result = self.message
        if self.location is not None:
            result += f"\n  --> {self.location}"
        if self.help_text:
            result += f"\n  help: {self.help_text}"
        return result


class VentiError(Exception):
    """
    Base class for all compiler errors.

    ``str(error)`` is the user-visible rendering: the error kind followed by
    the message, e.g. ``Codegen Error: undefined variable 'x'``.
    """

    kind = "Error"

    def __init__(
        self,
        message: str,
        location: Optional['SourceLocation'] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text
        )

    @property
    def location(self) -> Optional['SourceLocation']:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return f"{self.kind}: {self.diagnostic}"


class VentiSyntaxError(VentiError):
    """Malformed token sequence or unrecognized source text."""
    kind = "Syntax Error"


class VentiTypeError(VentiError):
    """Semantic type error. No construct of the current grammar raises it."""
    kind = "Type Error"


class VentiRuntimeError(VentiError):
    """Execution error. Unused by the compile-time pipeline."""
    kind = "Runtime Error"


class CodegenError(VentiError):
    """Lowering-time failure."""
    kind = "Codegen Error"


class VentiIOError(VentiError):
    """Source read or artifact write failure."""
    kind = "IO Error"


ERROR_KINDS: List[type] = [
    VentiSyntaxError,
    VentiTypeError,
    VentiRuntimeError,
    CodegenError,
    VentiIOError,
]
