#!/usr/bin/env python3
"""
CHIP-8 Assembler - Command Line Interface

Usage:
    python3 -m chip8asm input.c8s output.ch8
    python3 -m chip8asm input.c8s output.ch8 -v
    python3 -m chip8asm input.c8s output.ch8 --listing
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .assembler import Assembler
from .errors import AssemblerError


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="chip8asm",
        description="CHIP-8 Mnemonic Assembler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s programs/draw.c8s build/draw.ch8
  %(prog)s programs/loop.c8s build/loop.ch8 -v
  %(prog)s programs/loop.c8s build/loop.ch8 --listing
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Input source file",
    )

    parser.add_argument(
        "output",
        type=str,
        help="Output binary file",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "-l",
        "--listing",
        action="store_true",
        help="Print assembly listing",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)

    # Validate input file
    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    try:
        asm = Assembler(verbose=args.verbose)
        asm.assemble_file(str(input_path), args.output)

        if args.listing:
            print("\n" + asm.get_listing())

        print(f"Successfully compiled {asm.instruction_count} instructions to {args.output}")

    except AssemblerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
