"""
Token definitions for the CHIP-8 mnemonic language.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union


class TokenKind(Enum):
    """Lexical token kinds."""

    NEWLINE = auto()  # \r\n, terminates a statement
    CLEAR = auto()
    DRAW = auto()
    GOTO = auto()
    ASSIGN = auto()  # =
    INCREMENT = auto()  # +=
    STAR = auto()  # * (sprite indirection)
    IDENT = auto()
    COLON = auto()
    REGISTER = auto()  # v0-vf
    INT8 = auto()
    INT16 = auto()
    IREGISTER = auto()  # i


# Human-readable names used in parse error messages
TOKEN_DESCRIPTIONS = {
    TokenKind.NEWLINE: "line break",
    TokenKind.CLEAR: "'clear'",
    TokenKind.DRAW: "'draw'",
    TokenKind.GOTO: "'goto'",
    TokenKind.ASSIGN: "'='",
    TokenKind.INCREMENT: "'+='",
    TokenKind.STAR: "'*'",
    TokenKind.IDENT: "identifier",
    TokenKind.COLON: "':'",
    TokenKind.REGISTER: "register",
    TokenKind.INT8: "8-bit integer",
    TokenKind.INT16: "16-bit integer",
    TokenKind.IREGISTER: "'i'",
}

# Largest value an 8-bit literal may hold; anything above is 16-bit
INT8_MAX = 0xFF
INT16_MAX = 0xFFFF


@dataclass(frozen=True)
class Span:
    """
    Half-open byte range [lo, hi) into the source text.
    """

    lo: int
    hi: int

    def join(self, other: "Span") -> "Span":
        """Span covering this span's start through ``other``'s end."""
        return Span(self.lo, other.hi)

    def line_number(self, source: str) -> int:
        """1-based line of the span start, counting \\r\\n breaks."""
        return source.count("\r\n", 0, self.lo) + 1

    def text(self, source: str) -> str:
        return source[self.lo : self.hi]


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    Attributes:
        kind: Token kind
        span: Source range the token was read from
        value: Register index, integer value or identifier name (None otherwise)
    """

    kind: TokenKind
    span: Span
    value: Optional[Union[int, str]] = None

    def describe(self) -> str:
        desc = TOKEN_DESCRIPTIONS[self.kind]
        if self.kind == TokenKind.REGISTER:
            return f"register v{self.value:x}"
        if self.kind in (TokenKind.INT8, TokenKind.INT16):
            return f"{desc} {self.value}"
        if self.kind == TokenKind.IDENT:
            return f"identifier {self.value!r}"
        return desc
