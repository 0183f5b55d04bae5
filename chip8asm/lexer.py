"""
Tokenizer for the CHIP-8 mnemonic language.

Maximal-munch lexing: at each position every rule is tried, the longest
match wins and ties go to the rule declared first. Whitespace is dropped;
line breaks (\\r\\n only) are kept since they terminate statements.
"""

import re
from typing import Callable, Iterator, List, Optional, Tuple

from .errors import LexError
from .tokens import INT8_MAX, INT16_MAX, Span, Token, TokenKind


def _integer(text: str, base: int) -> Tuple[TokenKind, int]:
    value = int(text, base)
    if value > INT16_MAX:
        raise ValueError(f"Integer literal out of range: {text}")
    kind = TokenKind.INT8 if value <= INT8_MAX else TokenKind.INT16
    return kind, value


# (pattern, kind, value builder). Order matters for equal-length matches,
# so keywords come before the identifier rule.
Rule = Tuple["re.Pattern[str]", Optional[TokenKind], Optional[Callable[[str], object]]]

RULES: List[Rule] = [
    (re.compile(r"[ \t]+"), None, None),
    (re.compile(r"\r\n"), TokenKind.NEWLINE, None),
    (re.compile(r"clear"), TokenKind.CLEAR, None),
    (re.compile(r"draw"), TokenKind.DRAW, None),
    (re.compile(r"goto"), TokenKind.GOTO, None),
    (re.compile(r"\+="), TokenKind.INCREMENT, None),
    (re.compile(r"="), TokenKind.ASSIGN, None),
    (re.compile(r"\*"), TokenKind.STAR, None),
    (re.compile(r":"), TokenKind.COLON, None),
    (re.compile(r"i"), TokenKind.IREGISTER, None),
    (re.compile(r"v[0-9a-f]"), TokenKind.REGISTER, lambda text: int(text[1:], 16)),
    (re.compile(r"[0-9]+"), TokenKind.INT8, lambda text: _integer(text, 10)),
    (re.compile(r"0x[0-9a-f]+"), TokenKind.INT8, lambda text: _integer(text[2:], 16)),
    (re.compile(r"[a-z]+"), TokenKind.IDENT, lambda text: text),
]


def _longest_match(source: str, pos: int) -> Tuple[Optional[Rule], int]:
    best = None
    best_end = pos
    for rule in RULES:
        match = rule[0].match(source, pos)
        # Strictly longer only, so the earlier rule keeps a tie
        if match and match.end() > best_end:
            best = rule
            best_end = match.end()
    return best, best_end


def tokenize(source: str) -> Iterator[Token]:
    """
    Lazily tokenize source text.

    Args:
        source: Complete program text

    Yields:
        Significant tokens in source order (whitespace is skipped)

    Raises:
        LexError: If some input matches no rule
    """
    pos = 0
    length = len(source)

    while pos < length:
        rule, end = _longest_match(source, pos)
        span = Span(pos, end)

        if rule is None:
            raise LexError(source[pos], pos, span.line_number(source))

        _, kind, build = rule
        text = source[pos:end]
        pos = end

        if kind is None:
            continue

        value = None
        if build is not None:
            try:
                value = build(text)
            except ValueError:
                raise LexError(text, span.lo, span.line_number(source))
            if isinstance(value, tuple):
                kind, value = value

        yield Token(kind, span, value)


class Lexer:
    """
    Restartable token sequence over a source buffer.

    Each iteration starts again from the beginning of the source.
    """

    def __init__(self, source: str):
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        return tokenize(self.source)

    def tokens(self) -> List[Token]:
        """Tokenize the whole source eagerly."""
        return list(self)
