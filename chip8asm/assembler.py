"""
Main assembler implementation.

Single-pass code generator for the CHIP-8 mnemonic language. Labels are
bound as they are visited, so a jump can only target a label declared on
an earlier line.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .encoder import encode_statement
from .errors import EncodingError, SymbolError
from .lexer import Lexer
from .parser import DeclareLabel, GotoLabel, Program, Statement, parse

# Every statement reserves one two-byte slot
SLOT_SIZE = 2
PC_MASK = 0xFFFF


@dataclass
class GeneratorContext:
    """
    State owned by a single code generation run.

    Attributes:
        pc: Program counter, advanced before each statement is handled
        labels: Label name -> pc at the point of declaration
        output: Emitted instruction stream
        source_map: (stream offset, statement) for each emitted instruction
    """

    pc: int = 0
    labels: Dict[str, int] = field(default_factory=dict)
    output: bytearray = field(default_factory=bytearray)
    source_map: List[Tuple[int, Statement]] = field(default_factory=list)


def _generate_statement(ctx: GeneratorContext, statement: Statement) -> Optional[bytes]:
    if isinstance(statement, DeclareLabel):
        # Redeclaration overwrites the earlier binding
        ctx.labels[statement.name] = ctx.pc
        ctx.pc = (ctx.pc - SLOT_SIZE) & PC_MASK
        return None

    target = None
    if isinstance(statement, GotoLabel):
        if statement.name not in ctx.labels:
            raise SymbolError(statement.name, statement.line_num)
        target = ctx.labels[statement.name]

    try:
        encoded = encode_statement(statement, target)
    except EncodingError as e:
        raise EncodingError(str(e), statement.line_num) from e

    ctx.source_map.append((len(ctx.output), statement))
    ctx.output.extend(encoded)
    return encoded


def generate(
    program: Program,
    ctx: GeneratorContext = None,
    log: Callable[[str], None] = None,
) -> bytes:
    """
    Generate the instruction stream for a parsed program.

    Args:
        program: Parsed program
        ctx: Context to fill in; a fresh one is used when omitted
        log: Optional callback for trace lines

    Returns:
        Two bytes per non-label statement, in program order

    Raises:
        SymbolError: If a goto names a label not declared before it
        EncodingError: If an operand does not fit its field
    """
    if ctx is None:
        ctx = GeneratorContext()

    for statement in program:
        ctx.pc = (ctx.pc + SLOT_SIZE) & PC_MASK
        encoded = _generate_statement(ctx, statement)

        if log is None:
            continue
        if encoded is None:
            log(f"  Label '{statement.name}' at 0x{ctx.labels[statement.name]:04X}")
        else:
            log(f"  0x{ctx.source_map[-1][0]:04X}: {encoded.hex().upper()}  {type(statement).__name__}")

    return bytes(ctx.output)


class Assembler:
    """
    CHIP-8 assembler.

    Runs the tokenizer, parser and code generator in order and keeps the
    results of the last run for listings and output.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: If True, print detailed assembly information
        """
        self.verbose = verbose
        self.source: str = ""
        self.program: Optional[Program] = None
        self.binary: bytes = b""
        self.labels: Dict[str, int] = {}
        self.source_map: List[Tuple[int, Statement]] = []

    def log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    @property
    def instruction_count(self) -> int:
        return len(self.binary) // SLOT_SIZE

    def assemble_string(self, source: str) -> bytes:
        """
        Assemble from a string.

        Args:
            source: Program text with \\r\\n line breaks

        Returns:
            Instruction stream bytes
        """
        self.source = source

        self.log("\n=== Parsing ===")
        self.program = parse(Lexer(source))
        self.log(f"  Statements: {len(self.program)}")

        self.log("\n=== Generating code ===")
        ctx = GeneratorContext()
        self.binary = generate(self.program, ctx, self.log if self.verbose else None)
        self.labels = ctx.labels
        self.source_map = ctx.source_map

        self.log(f"\n  Total instructions: {self.instruction_count}")
        return self.binary

    def assemble_file(self, input_path: str, output_path: str = None) -> bytes:
        """
        Assemble a source file.

        Args:
            input_path: Path to input source file
            output_path: Path to output binary file (optional)

        Returns:
            Instruction stream bytes
        """
        self.log(f"Assembling: {input_path}")
        # newline="" keeps \r\n intact for the tokenizer
        with open(input_path, "r", encoding="utf-8", newline="") as f:
            source = f.read()

        self.assemble_string(source)

        if output_path:
            self.write_binary(output_path)
            self.log(f"Output written to: {output_path}")

        return self.binary

    def write_binary(self, output_path: str) -> None:
        """Write the instruction stream verbatim, with no header."""
        with open(output_path, "wb") as f:
            f.write(self.binary)

    def get_hex_string(self) -> str:
        """
        Get assembled instructions as a hex string.

        Returns:
            String with one four-digit opcode per line
        """
        return "\n".join(
            self.binary[i : i + SLOT_SIZE].hex()
            for i in range(0, len(self.binary), SLOT_SIZE)
        )

    def get_listing(self) -> str:
        """
        Get an assembly listing showing addresses, encodings, and source.

        Returns:
            Formatted listing string
        """
        lines = []
        lines.append("Address   Code   Source")
        lines.append("-" * 40)

        for addr, statement in self.source_map:
            code = self.binary[addr : addr + SLOT_SIZE].hex().upper()
            text = statement.span.text(self.source) if statement.span else ""
            lines.append(f"0x{addr:04X}:   {code}   {text}")

        return "\n".join(lines)
