"""
CHIP-8 instruction encoder.

Turns a single statement into its two-byte opcode. Byte arithmetic is kept
exactly as the existing tool produces it, including the i-register forms.
"""

from .errors import EncodingError
from .parser import (
    AssignIRegisterInteger,
    AssignIRegisterRegisterSprite,
    AssignRegisterInteger,
    AssignRegisterRegister,
    Clear,
    DeclareLabel,
    DrawIRegister,
    GotoLabel,
    IncrementRegisterInteger,
    Statement,
)

# Jump targets are offset by the interpreter's load address minus one slot
JUMP_OFFSET = 510


def check_range(value: int, bits: int, name: str = "value") -> None:
    """
    Check if an unsigned value fits in the specified bit width.

    Args:
        value: The value to check
        bits: Number of bits available
        name: Name for error messages
    """
    max_val = (1 << bits) - 1
    if not (0 <= value <= max_val):
        raise EncodingError(f"{name} {value} out of range [0, {max_val}] for {bits}-bit field")


def encode_clear() -> bytes:
    """00E0"""
    return bytes([0x00, 0xE0])


def encode_assign_register_register(r1: int, r2: int) -> bytes:
    """8XY0"""
    check_range(r1, 4, "register")
    check_range(r2, 4, "register")
    return bytes([0x80 + r1, r2 << 4])


def encode_assign_register_integer(register: int, value: int) -> bytes:
    """6XNN"""
    check_range(register, 4, "register")
    check_range(value, 8, "integer")
    return bytes([0x60 + register, value])


def encode_assign_i_register_integer(value: int) -> bytes:
    """
    Set i from a literal.

    Only the low 12 bits are kept; the high nibble lands on 0xD.
    """
    check_range(value, 16, "address")
    return bytes([0xD0 + ((value & 0xF00) >> 8), value & 0xFF])


def encode_assign_i_register_sprite(register: int) -> bytes:
    """FX29"""
    check_range(register, 4, "register")
    return bytes([0xF0 + register, 0x29])


def encode_draw(r1: int, r2: int, height: int) -> bytes:
    """DXYN"""
    check_range(r1, 4, "register")
    check_range(r2, 4, "register")
    check_range(height, 8, "sprite height")
    # Height is added, not masked, so it may spill into the Y nibble
    low = (r2 << 4) + height
    check_range(low, 8, "draw low byte")
    return bytes([0xD0 + r1, low])


def encode_increment_register_integer(register: int, value: int) -> bytes:
    """7XNN"""
    check_range(register, 4, "register")
    check_range(value, 8, "integer")
    return bytes([0x70 + register, value])


def encode_goto(address: int) -> bytes:
    """
    1NNN

    The high nibble comes from the raw address while the low byte is taken
    after adding JUMP_OFFSET.
    """
    check_range(address, 16, "jump target")
    return bytes([0x10 + ((address & 0xF00) >> 8), (address + JUMP_OFFSET) & 0xFF])


def encode_statement(statement: Statement, target: int = None) -> bytes:
    """
    Encode a statement based on its type.

    Args:
        statement: Any statement except a label declaration
        target: Resolved address, required for GotoLabel

    Returns:
        Two encoded bytes
    """
    if isinstance(statement, Clear):
        return encode_clear()
    elif isinstance(statement, AssignRegisterRegister):
        return encode_assign_register_register(statement.r1, statement.r2)
    elif isinstance(statement, AssignRegisterInteger):
        return encode_assign_register_integer(statement.register, statement.value)
    elif isinstance(statement, AssignIRegisterInteger):
        return encode_assign_i_register_integer(statement.value)
    elif isinstance(statement, AssignIRegisterRegisterSprite):
        return encode_assign_i_register_sprite(statement.register)
    elif isinstance(statement, DrawIRegister):
        return encode_draw(statement.r1, statement.r2, statement.height)
    elif isinstance(statement, IncrementRegisterInteger):
        return encode_increment_register_integer(statement.register, statement.value)
    elif isinstance(statement, GotoLabel):
        if target is None:
            raise EncodingError(f"goto {statement.name} has no resolved target")
        return encode_goto(target)
    elif isinstance(statement, DeclareLabel):
        raise EncodingError(f"Label {statement.name} does not encode to an instruction")
    else:
        raise EncodingError(f"Unknown statement type: {type(statement).__name__}")
