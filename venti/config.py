"""
Compiler configuration.

Defaults can be overridden through the environment (VENTI_OUTPUT,
VENTI_MODULE_NAME, VENTI_TARGET_TRIPLE) and then by command-line flags.

Author: xwest
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

import llvmlite.binding as llvm

DEFAULT_OUTPUT_PATH = "output.ll"
DEFAULT_MODULE_NAME = "venti"


@dataclass
class CompilerConfig:
    """Configuration parameters for one compiler run"""

    # Output
    output_path: str = DEFAULT_OUTPUT_PATH
    module_name: str = DEFAULT_MODULE_NAME
    target_triple: Optional[str] = None  # None = host triple

    # Debugging
    dump_tokens: bool = False
    dump_ast: bool = False
    verbose: bool = False

    def resolve_target_triple(self) -> str:
        """Target triple to stamp on the emitted module."""
        if self.target_triple:
            return self.target_triple
        return llvm.get_default_triple()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'CompilerConfig':
        """Build a configuration from VENTI_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            output_path=env.get("VENTI_OUTPUT", DEFAULT_OUTPUT_PATH),
            module_name=env.get("VENTI_MODULE_NAME", DEFAULT_MODULE_NAME),
            target_triple=env.get("VENTI_TARGET_TRIPLE") or None,
        )

    def with_overrides(self, **overrides) -> 'CompilerConfig':
        """Copy of this configuration with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
