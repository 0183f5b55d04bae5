"""
Line-oriented parser for the CHIP-8 mnemonic language.

A program is zero or more lines. Each line is either empty or exactly one
statement, and every line ends with a line break token. The grammar needs a
single token of lookahead and no backtracking.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Union

from .errors import ParseError
from .tokens import Span, Token, TokenKind


# =============================================================================
# Statement nodes
# =============================================================================
#
# span and line_num are provenance only and do not take part in equality.


@dataclass(frozen=True)
class Clear:
    """clear"""

    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class AssignRegisterRegister:
    """vX = vY"""

    r1: int
    r2: int
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class AssignRegisterInteger:
    """vX = NN"""

    register: int
    value: int
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class AssignIRegisterInteger:
    """i = NNN"""

    value: int
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class AssignIRegisterRegisterSprite:
    """i = *vX"""

    register: int
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class DeclareLabel:
    """name:"""

    name: str
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class DrawIRegister:
    """draw vX vY N"""

    r1: int
    r2: int
    height: int
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class IncrementRegisterInteger:
    """vX += NN"""

    register: int
    value: int
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


@dataclass(frozen=True)
class GotoLabel:
    """goto name"""

    name: str
    span: Optional[Span] = field(default=None, compare=False)
    line_num: int = field(default=0, compare=False)


Statement = Union[
    Clear,
    AssignRegisterRegister,
    AssignRegisterInteger,
    AssignIRegisterInteger,
    AssignIRegisterRegisterSprite,
    DeclareLabel,
    DrawIRegister,
    IncrementRegisterInteger,
    GotoLabel,
]


@dataclass
class Program:
    """Statements in source order, one per non-blank line."""

    statements: List[Statement] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)


# =============================================================================
# Parser
# =============================================================================


class Parser:
    """
    Recursive descent parser over a token iterable.

    Tokens are pulled one at a time; ``current`` is the lookahead.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self.current: Optional[Token] = None
        self.line_num = 1
        self._advance()

    def _advance(self) -> Optional[Token]:
        previous = self.current
        self.current = next(self._tokens, None)
        return previous

    def _error(self, production: str, expected: str) -> ParseError:
        token = self.current
        got = token.describe() if token is not None else "end of input"
        return ParseError(
            f"Unexpected {got} in {production}, expected {expected}",
            token=token,
            expected=expected,
            line_num=self.line_num,
        )

    def _expect(self, kind: TokenKind, production: str, expected: str = None) -> Token:
        if self.current is None or self.current.kind != kind:
            raise self._error(production, expected or kind.name.lower())
        return self._advance()

    def parse_program(self) -> Program:
        """
        Parse every line until the tokens run out.

        Returns:
            Program holding one statement per non-blank line
        """
        program = Program()

        while self.current is not None:
            if self.current.kind == TokenKind.NEWLINE:
                self._advance()
                self.line_num += 1
                continue

            program.statements.append(self.parse_statement())
            self._expect(TokenKind.NEWLINE, "statement", "line break")
            self.line_num += 1

        return program

    def parse_statement(self) -> Statement:
        """Parse one statement, not including its line break."""
        token = self.current
        if token is None:
            raise self._error("statement", "statement")

        kind = token.kind
        if kind == TokenKind.CLEAR:
            self._advance()
            return Clear(span=token.span, line_num=self.line_num)
        elif kind == TokenKind.REGISTER:
            return self._parse_register_statement()
        elif kind == TokenKind.IREGISTER:
            return self._parse_i_register_statement()
        elif kind == TokenKind.IDENT:
            return self._parse_label()
        elif kind == TokenKind.DRAW:
            return self._parse_draw()
        elif kind == TokenKind.GOTO:
            return self._parse_goto()
        else:
            raise self._error("statement", "statement")

    def _parse_register_statement(self) -> Statement:
        # vX = vY | vX = NN | vX += NN
        first = self._advance()
        line_num = self.line_num

        if self.current is not None and self.current.kind == TokenKind.ASSIGN:
            self._advance()
            if self.current is not None and self.current.kind == TokenKind.REGISTER:
                last = self._advance()
                return AssignRegisterRegister(
                    first.value, last.value, span=first.span.join(last.span), line_num=line_num
                )
            last = self._expect(TokenKind.INT8, "register assignment", "register or 8-bit integer")
            return AssignRegisterInteger(
                first.value, last.value, span=first.span.join(last.span), line_num=line_num
            )

        if self.current is not None and self.current.kind == TokenKind.INCREMENT:
            self._advance()
            last = self._expect(TokenKind.INT8, "register increment", "8-bit integer")
            return IncrementRegisterInteger(
                first.value, last.value, span=first.span.join(last.span), line_num=line_num
            )

        raise self._error("register statement", "'=' or '+='")

    def _parse_i_register_statement(self) -> Statement:
        # i = NNN | i = *vX
        first = self._advance()
        line_num = self.line_num
        self._expect(TokenKind.ASSIGN, "i register assignment", "'='")

        if self.current is not None and self.current.kind in (TokenKind.INT8, TokenKind.INT16):
            last = self._advance()
            return AssignIRegisterInteger(
                last.value, span=first.span.join(last.span), line_num=line_num
            )

        self._expect(TokenKind.STAR, "i register assignment", "integer or '*'")
        last = self._expect(TokenKind.REGISTER, "sprite address", "register")
        return AssignIRegisterRegisterSprite(
            last.value, span=first.span.join(last.span), line_num=line_num
        )

    def _parse_label(self) -> DeclareLabel:
        first = self._advance()
        last = self._expect(TokenKind.COLON, "label declaration", "':'")
        return DeclareLabel(first.value, span=first.span.join(last.span), line_num=self.line_num)

    def _parse_draw(self) -> DrawIRegister:
        first = self._advance()
        r1 = self._expect(TokenKind.REGISTER, "draw", "register")
        r2 = self._expect(TokenKind.REGISTER, "draw", "register")
        # Height is a nibble but only the 8-bit literal form is checked here
        last = self._expect(TokenKind.INT8, "draw", "8-bit integer")
        return DrawIRegister(
            r1.value, r2.value, last.value, span=first.span.join(last.span), line_num=self.line_num
        )

    def _parse_goto(self) -> GotoLabel:
        first = self._advance()
        last = self._expect(TokenKind.IDENT, "goto", "label name")
        return GotoLabel(last.value, span=first.span.join(last.span), line_num=self.line_num)


def parse(tokens: Iterable[Token]) -> Program:
    """Parse a token sequence into a Program."""
    return Parser(tokens).parse_program()
