"""
CHIP-8 Assembler - translates a small mnemonic language into CHIP-8 opcodes.

This package provides the tokenizer, parser and single-pass code generator.
"""

from .assembler import Assembler, GeneratorContext, generate
from .errors import AssemblerError, EncodingError, LexError, ParseError, SymbolError
from .lexer import Lexer, tokenize
from .parser import Program, parse

__version__ = "1.0.0"
__all__ = [
    "Assembler",
    "GeneratorContext",
    "generate",
    "Lexer",
    "tokenize",
    "Program",
    "parse",
    "AssemblerError",
    "LexError",
    "ParseError",
    "SymbolError",
    "EncodingError",
]
