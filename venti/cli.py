"""
Command-line interface for the Venti compiler.

Usage:
    venti SOURCE [-o OUTPUT] [--module-name NAME] [--target-triple TRIPLE]
                 [--tokens] [--ast] [-v]

Author: xwest
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import CompilerConfig
from .driver import read_source, run_pipeline, write_artifact
from .errors import VentiError
from .parser.ast_nodes import format_ast


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="venti",
        description="Compile a Venti source file to textual LLVM IR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    venti hello.vt                     # Writes output.ll
    venti hello.vt -o hello.ll         # Choose the artifact path
    venti hello.vt --tokens --ast      # Also print tokens and the AST
        """
    )

    parser.add_argument('source', metavar='SOURCE',
                        help='Venti source file to compile')

    # Output options
    parser.add_argument('-o', '--output', metavar='PATH',
                        help='Path of the LLVM IR artifact (default: output.ll)')
    parser.add_argument('--module-name', metavar='NAME',
                        help='Name of the emitted LLVM module')
    parser.add_argument('--target-triple', metavar='TRIPLE',
                        help='Target triple to stamp on the module (default: host)')

    # Debugging options
    parser.add_argument('--tokens', action='store_true',
                        help='Print the token stream')
    parser.add_argument('--ast', action='store_true',
                        help='Print the syntax tree')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--version', action='version',
                        version=f"%(prog)s {__version__}")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = CompilerConfig.from_env().with_overrides(
        output_path=args.output,
        module_name=args.module_name,
        target_triple=args.target_triple,
        dump_tokens=args.tokens,
        dump_ast=args.ast,
        verbose=args.verbose,
    )

    try:
        source = read_source(args.source)
        result = run_pipeline(source, args.source, config)

        if config.dump_tokens:
            for token in result.tokens:
                print(token)
        if config.dump_ast:
            print(format_ast(result.program))

        write_artifact(config.output_path, result.ir)
    except VentiError as e:
        print(e, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
