"""
Custom exception types for the CHIP-8 assembler.

Every error is fatal: each pipeline stage raises one of these and the
compilation stops at the first failure.
"""


class AssemblerError(Exception):
    """Base exception for assembler errors."""

    def __init__(self, message: str, line_num: int = None, line_text: str = None):
        self.line_num = line_num
        self.line_text = line_text
        if line_num is not None:
            if line_text:
                message = f"Line {line_num}: {message}\n  {line_text}"
            else:
                message = f"Line {line_num}: {message}"
        super().__init__(message)


class LexError(AssemblerError):
    """Exception raised when source text matches no token rule."""

    def __init__(self, text: str, offset: int, line_num: int = None):
        self.text = text
        self.offset = offset
        super().__init__(f"Invalid token: {text!r} at offset {offset}", line_num)


class ParseError(AssemblerError):
    """Exception raised when the token sequence does not fit the grammar."""

    def __init__(self, message: str, token=None, expected: str = None, line_num: int = None):
        self.token = token
        self.expected = expected
        super().__init__(message, line_num)


class SymbolError(AssemblerError):
    """Exception raised for unresolved label references."""

    def __init__(self, label: str, line_num: int = None, line_text: str = None):
        self.label = label
        super().__init__(f"Could not find label {label!r}", line_num, line_text)


class EncodingError(AssemblerError):
    """Exception raised for operands that do not fit their encoding field."""

    pass
